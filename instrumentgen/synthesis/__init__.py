"""Wrapper synthesis: member collection, signature reconstruction and rendering."""

from .assembler import AssemblyResult, ClassAssembler, companion_name
from .eligibility import Eligibility, Reason, evaluate_eligibility
from .imports import deduplicate_imports, merge_fragment_imports
from .members import MemberCollector
from .renderer import ArtifactRenderer
from .signature import reconstruct_signature
from .tracing import TracingEmitter

__all__ = [
    "ArtifactRenderer",
    "AssemblyResult",
    "ClassAssembler",
    "Eligibility",
    "MemberCollector",
    "Reason",
    "TracingEmitter",
    "companion_name",
    "deduplicate_imports",
    "evaluate_eligibility",
    "merge_fragment_imports",
    "reconstruct_signature",
]
