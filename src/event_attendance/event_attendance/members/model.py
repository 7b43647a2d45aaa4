from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Member:
    """Domain entity: Member.

    Note: plain data object (no DB access). Read-mostly for the attendance core.
    """

    member_id: str
    tenant_id: str
    full_name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    division_id: Optional[str] = None
    division_name: Optional[str] = None
    organization_id: Optional[str] = None
    role_id: Optional[str] = None

    @property
    def is_active(self) -> bool:
        """Only members assigned to a division count as active."""
        return bool(self.division_id)
