"""Reconstruct override signatures and forwarding argument lists."""

from __future__ import annotations

from typing import Optional, Tuple

from ..errors import MalformedSignatureError
from ..models import ParameterList


def reconstruct_signature(parameters: Optional[ParameterList]) -> Tuple[str, str]:
    """Return ``(signature_text, forwarding_arguments)`` for a parameter list.

    The signature text is reused verbatim in the emitted override. The
    forwarding list holds the parameter names in declared order, joined by
    ``", "`` with no trailing separator; the receiver is never forwarded.
    Types and defaults are not inspected.
    """
    if parameters is None:
        return "()", ""
    if parameters.defect:
        raise MalformedSignatureError(
            f"Cannot forward parameter list {parameters.text}: {parameters.defect}"
        )
    names = [parameter.name.strip() for parameter in parameters.parameters]
    forwarding = ", ".join(name for name in names if name)
    return parameters.text, forwarding


def split_forwarding(forwarding: str) -> list[str]:
    """Split a forwarding list back into argument names, dropping blanks."""
    return [part.strip() for part in forwarding.split(",") if part.strip()]


__all__ = ["reconstruct_signature", "split_forwarding"]
