"""Source parsing and candidate resolution."""

from .index import Candidate, SourceIndex
from .semantic import ClassDeclaration, ModuleModel, SemanticModel
from .tree_sitter import PythonParser

__all__ = [
    "Candidate",
    "ClassDeclaration",
    "ModuleModel",
    "PythonParser",
    "SemanticModel",
    "SourceIndex",
]
