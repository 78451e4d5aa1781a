"""Collect overridable members across every fragment of a type."""

from __future__ import annotations

from typing import Dict, List, Set

from ..errors import MalformedSignatureError, UnsupportedMemberError
from ..logging import get_logger
from ..models import (
    CollectedMembers,
    CollectedMethod,
    DeclarationRef,
    MemberDescriptor,
    MemberKind,
    TypeDescriptor,
)
from .imports import merge_fragment_imports
from .signature import reconstruct_signature

_LOGGER = get_logger("synthesis.members")


def is_forwarded_method(member: MemberDescriptor) -> bool:
    """Public, overridable, non-static methods are forwarded."""
    modifiers = member.modifiers
    return (
        member.kind is MemberKind.METHOD
        and modifiers.public
        and modifiers.overridable
        and not modifiers.static
    )


def is_forwarded_property(member: MemberDescriptor) -> bool:
    """Overridable properties are forwarded whether or not they have a setter."""
    return member.kind is MemberKind.PROPERTY and member.modifiers.overridable


class MemberCollector:
    """Merges the fragments of one logical type into a single member list."""

    def collect(self, descriptor: TypeDescriptor) -> CollectedMembers:
        seen: Set[DeclarationRef] = set()
        methods: List[CollectedMethod] = []
        properties: List[MemberDescriptor] = []
        names: Dict[str, DeclarationRef] = {}

        for fragment in descriptor.fragments:
            for member in fragment.members:
                if member.origin in seen:
                    continue
                if is_forwarded_method(member):
                    seen.add(member.origin)
                    if member.is_async:
                        raise UnsupportedMemberError(
                            f"async method '{member.name}' of {descriptor.name} cannot be forwarded",
                            member.origin,
                        )
                    try:
                        signature, forwarding = reconstruct_signature(member.parameters)
                    except MalformedSignatureError as exc:
                        raise MalformedSignatureError(
                            f"method '{member.name}' of {descriptor.name}: {exc}", member.origin
                        ) from exc
                    methods.append(
                        CollectedMethod(
                            descriptor=member,
                            signature=signature,
                            forwarding=forwarding,
                        )
                    )
                elif is_forwarded_property(member):
                    seen.add(member.origin)
                    properties.append(member)
                else:
                    continue

                previous = names.get(member.name)
                if previous is not None:
                    _LOGGER.warning(
                        "%s declares '%s' at %s and %s; the later declaration wins",
                        descriptor.name,
                        member.name,
                        previous,
                        member.origin,
                    )
                names[member.name] = member.origin

        imports = merge_fragment_imports(descriptor.fragments)
        _LOGGER.debug(
            "Collected %d methods, %d properties and %d imports for %s across %d fragments",
            len(methods),
            len(properties),
            len(imports),
            descriptor.name,
            len(descriptor.fragments),
        )
        return CollectedMembers(
            methods=tuple(methods),
            properties=tuple(properties),
            imports=tuple(imports),
        )


__all__ = ["MemberCollector", "is_forwarded_method", "is_forwarded_property"]
