"""Member lookup and mutability classification."""
from __future__ import annotations

from typing import Iterable, Optional

from macrofy.syntax import Binding, Member

WRAPPED_VALUE = "wrapped_value"
PROJECTED_VALUE = "projected_value"


def find_member(members: Iterable[Member], name: str) -> Optional[Member]:
    """Return the first member bound to the identifier ``name``."""

    for member in members:
        if name in member.identifiers():
            return member
    return None


def is_settable(member: Member) -> bool:
    """Whether ``member`` can be assigned through its binding and accessors."""

    if member.binding is Binding.IMMUTABLE:
        return False
    block = member.accessor_block
    if block is None:
        return True
    return block.has_setter
