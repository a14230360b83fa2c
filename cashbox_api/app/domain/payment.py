"""Payment aggregate: money received from a team member."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Optional

from .enums import PaymentTypeEnum
from .ids import new_id, utc_now
from .validation import Violations
from .value_objects import Money

if TYPE_CHECKING:
    from .team import TeamUser


class Payment:
    def __init__(
        self,
        id: str,
        team_user_id: str,
        user_id: str,
        team_id: str,
        money: Money,
        type: PaymentTypeEnum = PaymentTypeEnum.CASH,
        description: Optional[str] = None,
        reference: Optional[str] = None,
        created_at: Optional[datetime] = None,
        updated_at: Optional[datetime] = None,
    ):
        self.id = id
        self.team_user_id = team_user_id
        self.user_id = user_id
        self.team_id = team_id
        self.money = money
        self.type = PaymentTypeEnum(type)
        self.description = description
        self.reference = reference
        self.created_at = created_at or utc_now()
        self.updated_at = updated_at or self.created_at

    @classmethod
    def create(
        cls,
        team_user: "TeamUser",
        money: Money,
        type: PaymentTypeEnum = PaymentTypeEnum.CASH,
        description: Optional[str] = None,
        reference: Optional[str] = None,
    ) -> "Payment":
        type = PaymentTypeEnum(type)
        violations = Violations()
        violations.check(money.amount > 0, "amount", "payment amount must be positive")
        if type.requires_reference:
            violations.require_text("reference", reference, f"{type.label} payments require a reference")
        violations.raise_if_any()
        return cls(
            new_id(),
            team_user.id,
            team_user.user_id,
            team_user.team_id,
            money,
            type,
            description,
            reference.strip() if reference else None,
        )

    @property
    def requires_reference(self) -> bool:
        return self.type.requires_reference

    @property
    def formatted_amount(self) -> str:
        return self.money.format()
