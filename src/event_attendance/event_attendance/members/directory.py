from __future__ import annotations

from typing import Sequence

from ..core.exceptions import AmbiguousMemberError, UnknownMemberError
from .model import Member
from .repository import MemberRepository


class MemberDirectory:
    """Resolves a raw identifier (scanned code or typed text) to one member.

    Scanned codes must match a member id exactly. Manual entry falls back to a
    case-insensitive substring match on the display name; more than one hit is
    refused rather than guessed.
    """

    def __init__(self, members: MemberRepository):
        self._members = members

    def resolve(self, raw: str, *, tenant_id: str, manual: bool = False) -> Member:
        code = (raw or "").strip()
        if not code:
            raise UnknownMemberError("Empty member identifier")

        member = self._members.get_by_id(tenant_id=tenant_id, member_id=code)
        if member:
            return member

        if not manual:
            raise UnknownMemberError(f"Unknown member: {code}")

        matches = self.search(code, tenant_id=tenant_id)
        if not matches:
            raise UnknownMemberError(f"Unknown member: {code}")
        if len(matches) > 1:
            names = ", ".join(m.full_name for m in matches)
            raise AmbiguousMemberError(f"'{code}' matches several members: {names}")
        return matches[0]

    def search(self, text: str, *, tenant_id: str) -> Sequence[Member]:
        needle = (text or "").strip().casefold()
        if not needle:
            return []
        return [
            m
            for m in self._members.select_members(tenant_id=tenant_id)
            if needle in m.full_name.casefold()
        ]
