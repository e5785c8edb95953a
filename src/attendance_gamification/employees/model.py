from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import AccountStatus


@dataclass(frozen=True)
class Employee:
    """Identity fields the engine needs from the employees table."""

    employee_id: int
    name: str
    branch_id: Optional[int]
    account_status: AccountStatus
    role: str = "staff"
    is_system_account: bool = False
    deleted_at: Optional[datetime] = None
    line_user_id: Optional[str] = None

    @property
    def is_rankable(self) -> bool:
        """Approved, not soft-deleted, human account."""
        return (
            self.account_status == AccountStatus.APPROVED
            and self.deleted_at is None
            and not self.is_system_account
        )
