"""Core data models shared across instrumentgen components."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple


@dataclass(frozen=True, order=True)
class DeclarationRef:
    """Location of a declaration; doubles as its structural identity."""

    path: str
    line: int
    column: int

    def __str__(self) -> str:
        return f"{self.path}:{self.line}:{self.column}"


@dataclass(frozen=True)
class ParameterDescriptor:
    """One forwarded parameter of a method."""

    name: str
    type: Optional[str]
    position: int


@dataclass(frozen=True)
class ParameterList:
    """Verbatim parameter list of a method plus its forwardable parameters.

    ``parameters`` excludes the receiver (``self``). ``defect`` is set when the
    text cannot be forwarded positionally; the signature reconstructor turns
    it into a generation failure.
    """

    text: str
    receiver: Optional[str]
    parameters: Tuple[ParameterDescriptor, ...] = ()
    defect: Optional[str] = None


class MemberKind(str, Enum):
    METHOD = "method"
    PROPERTY = "property"


@dataclass(frozen=True)
class Modifiers:
    """Modifiers relevant to eligibility."""

    public: bool
    overridable: bool
    static: bool


@dataclass(frozen=True)
class MemberDescriptor:
    """A method or property declared in a class body."""

    kind: MemberKind
    name: str
    type: Optional[str]
    modifiers: Modifiers
    origin: DeclarationRef
    parameters: Optional[ParameterList] = None
    is_async: bool = False
    has_setter: bool = False


@dataclass(frozen=True)
class ImportDirective:
    """A module-level import statement, identified by its exact trimmed text."""

    text: str

    @classmethod
    def parse(cls, raw: str) -> "ImportDirective":
        return cls(text=raw.strip())

    @property
    def is_future(self) -> bool:
        return self.text.startswith("from __future__ ")

    @property
    def is_relative(self) -> bool:
        return self.text.startswith("from .")


@dataclass(frozen=True)
class Fragment:
    """One physical declaration contributing to a logical type."""

    module: str
    path: str
    origin: DeclarationRef
    members: Tuple[MemberDescriptor, ...] = ()
    imports: Tuple[ImportDirective, ...] = ()


@dataclass(frozen=True)
class TypeIdentity:
    namespace: str
    name: str

    @property
    def qualified_name(self) -> str:
        return f"{self.namespace}.{self.name}" if self.namespace else self.name


@dataclass(frozen=True)
class TypeDescriptor:
    """A resolved candidate type with all of its fragments."""

    name: str
    namespace: str
    module: str
    origin: DeclarationRef
    fragments: Tuple[Fragment, ...]
    is_abstract: bool
    has_marker: bool

    @property
    def identity(self) -> TypeIdentity:
        return TypeIdentity(namespace=self.namespace, name=self.name)


@dataclass(frozen=True)
class CollectedMethod:
    """A collected method with its reconstructed signature."""

    descriptor: MemberDescriptor
    signature: str
    forwarding: str


@dataclass(frozen=True)
class CollectedMembers:
    """Merged view of every fragment of one type."""

    methods: Tuple[CollectedMethod, ...]
    properties: Tuple[MemberDescriptor, ...]
    imports: Tuple[ImportDirective, ...]


@dataclass(frozen=True)
class GeneratedArtifact:
    """One generated wrapper module."""

    type_name: str
    name: str
    text: str
    source: TypeIdentity
    directory: Optional[str] = None
    origin: Optional[DeclarationRef] = None
    relative_imports: bool = False


class Severity(str, Enum):
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True)
class Diagnostic:
    """Structured record explaining why a candidate produced no artifact."""

    code: str
    severity: Severity
    message: str
    origin: Optional[DeclarationRef] = None

    def __str__(self) -> str:
        location = f"{self.origin}: " if self.origin else ""
        return f"{location}{self.severity.value} [{self.code}] {self.message}"


@dataclass(frozen=True)
class SourceFile:
    """A Python module found by the scanner.

    ``module`` is the importable dotted name, or ``None`` when the file name
    or one of its packages is not a valid identifier.
    """

    path: str
    module: Optional[str]
    namespace: str
    import_root: str = ""


@dataclass(frozen=True)
class SourceManifest:
    """Normalized view of the scanned source tree."""

    root: str
    files: Tuple[SourceFile, ...]
