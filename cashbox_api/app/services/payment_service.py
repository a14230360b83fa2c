"""Business logic for payments received from team members."""

import logging
from datetime import datetime
from typing import List, Optional

from ..core.config import settings
from ..domain.enums import CurrencyEnum, PaymentTypeEnum
from ..domain.exceptions import InvalidStateError
from ..domain.payment import Payment
from ..domain.value_objects import Money
from ..repositories import PaymentRepository, TeamUserRepository
from ..schemas.common import MoneyRead
from ..schemas.payment import PaymentCreate, PaymentRead

logger = logging.getLogger(__name__)


def payment_to_read(payment: Payment) -> PaymentRead:
    return PaymentRead(
        id=payment.id,
        team_user_id=payment.team_user_id,
        user_id=payment.user_id,
        team_id=payment.team_id,
        money=MoneyRead.from_money(payment.money),
        type=payment.type,
        type_label=payment.type.label,
        description=payment.description,
        reference=payment.reference,
        created_at=payment.created_at,
    )


class PaymentService:
    @classmethod
    async def create_payment(cls, data: PaymentCreate) -> PaymentRead:
        """Record a payment for a team membership.

        Raises
        ------
        NotFoundError
            If the membership does not exist.
        InvalidStateError
            If the membership is inactive.
        ValidationError
            If the payment type needs a reference and none was given.
        """
        member = TeamUserRepository().get(data.team_user_id)
        if not member.active:
            raise InvalidStateError(f"team membership {member.id} is inactive")
        currency = data.currency or CurrencyEnum(settings.default_currency)
        payment = Payment.create(member, Money(data.amount, currency), data.type, data.description, data.reference)
        PaymentRepository().save(payment)
        logger.info("Payment %s of %s recorded for user %s", payment.id, payment.formatted_amount, payment.user_id)
        return payment_to_read(payment)

    @classmethod
    async def get_payment(cls, payment_id: str) -> PaymentRead:
        return payment_to_read(PaymentRepository().get(payment_id))

    @classmethod
    async def list_payments(
        cls,
        team_id: Optional[str] = None,
        user_id: Optional[str] = None,
        type: Optional[PaymentTypeEnum] = None,
        created_from: Optional[datetime] = None,
        created_to: Optional[datetime] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> List[PaymentRead]:
        payments = PaymentRepository().search(
            team_id=team_id,
            user_id=user_id,
            type=type,
            created_from=created_from,
            created_to=created_to,
            limit=limit,
            offset=offset,
        )
        return [payment_to_read(p) for p in payments]

    @classmethod
    async def delete_payment(cls, payment_id: str) -> None:
        repository = PaymentRepository()
        if not repository.delete(payment_id):
            repository.get(payment_id)
