from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Member


class MemberRepository(Protocol):
    """Member directory interface (read-only for the attendance core)."""

    def get_by_id(self, *, tenant_id: str, member_id: str) -> Optional[Member]:
        raise NotImplementedError

    def select_members(self, *, tenant_id: str, active_only: bool = False) -> Sequence[Member]:
        raise NotImplementedError
