"""Exceptions raised while generating wrapper modules."""

from __future__ import annotations

from typing import Optional

from .models import DeclarationRef


class GenerationError(RuntimeError):
    """Raised when one candidate cannot be turned into an artifact."""

    code = "generation-failed"

    def __init__(self, message: str, origin: Optional[DeclarationRef] = None) -> None:
        super().__init__(message)
        self.origin = origin


class MalformedSignatureError(GenerationError):
    """Raised when a parameter list cannot be forwarded positionally."""

    code = "malformed-signature"


class UnsupportedMemberError(GenerationError):
    """Raised for member shapes the generator does not forward."""

    code = "unsupported-member"


class GenerationCancelled(GenerationError):
    """Raised when a generation pass is aborted; no artifact survives it."""

    code = "cancelled"


__all__ = [
    "GenerationCancelled",
    "GenerationError",
    "MalformedSignatureError",
    "UnsupportedMemberError",
]
