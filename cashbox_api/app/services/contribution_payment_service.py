"""Business logic for payments recorded against contributions."""

import logging
from typing import Dict, List, Optional

from ..domain.contribution import Contribution, ContributionPayment
from ..domain.value_objects import Money
from ..repositories import ContributionPaymentRepository, ContributionRepository
from ..schemas.common import MoneyRead
from ..schemas.contribution import (
    ContributionPaymentCreate,
    ContributionPaymentRead,
    ContributionPaymentUpdate,
)

logger = logging.getLogger(__name__)


def contribution_payment_to_read(payment: ContributionPayment, contribution: Contribution) -> ContributionPaymentRead:
    return ContributionPaymentRead(
        id=payment.id,
        contribution_id=payment.contribution_id,
        user_id=payment.user_id,
        money=MoneyRead.from_money(payment.money),
        payment_method=payment.payment_method,
        reference=payment.reference,
        notes=payment.notes,
        partial=payment.is_partial_for(contribution),
        created_at=payment.created_at,
    )


class ContributionPaymentService:
    @classmethod
    async def record(cls, data: ContributionPaymentCreate) -> ContributionPaymentRead:
        """Record a payment and mark the contribution paid once it is covered.

        The currency defaults to the contribution's.  A contribution
        counts as covered when its recorded payments add up to at least
        its amount.

        Raises
        ------
        NotFoundError
            If the contribution does not exist.
        InvalidStateError
            If the contribution is inactive or already paid.
        ValidationError
            If the amount, currency, reference or notes are invalid.
        """
        contributions = ContributionRepository()
        contribution = contributions.get(data.contribution_id)
        currency = data.currency or contribution.money.currency
        payment = ContributionPayment.create(
            contribution,
            Money(data.amount, currency),
            data.payment_method,
            data.reference,
            data.notes,
        )
        payments = ContributionPaymentRepository()
        payments.save(payment)
        logger.info("Payment %s of %s recorded for contribution %s",
                    payment.id, payment.money.format(), contribution.id)

        paid = payments.total_paid(contribution.id, contribution.money.currency)
        if paid.amount >= contribution.money.amount:
            contribution.pay()
            contributions.save(contribution)
        return contribution_payment_to_read(payment, contribution)

    @classmethod
    async def get(cls, payment_id: str) -> ContributionPaymentRead:
        payment = ContributionPaymentRepository().get(payment_id)
        contribution = ContributionRepository().get(payment.contribution_id)
        return contribution_payment_to_read(payment, contribution)

    @classmethod
    async def list(cls, contribution_id: Optional[str] = None) -> List[ContributionPaymentRead]:
        contributions = ContributionRepository()
        payments = ContributionPaymentRepository()
        if contribution_id:
            contribution = contributions.get(contribution_id)
            return [contribution_payment_to_read(p, contribution) for p in payments.find_by_contribution(contribution_id)]
        loaded: Dict[str, Contribution] = {}
        result = []
        for payment in payments.all():
            if payment.contribution_id not in loaded:
                loaded[payment.contribution_id] = contributions.get(payment.contribution_id)
            result.append(contribution_payment_to_read(payment, loaded[payment.contribution_id]))
        return result

    @classmethod
    async def update(cls, payment_id: str, data: ContributionPaymentUpdate) -> ContributionPaymentRead:
        """Change method, reference and notes; amount and currency are fixed."""
        payments = ContributionPaymentRepository()
        payment = payments.get(payment_id)
        payment.update(data.payment_method, data.reference, data.notes)
        payments.save(payment)
        return contribution_payment_to_read(payment, ContributionRepository().get(payment.contribution_id))

    @classmethod
    async def total_paid(cls, contribution_id: str) -> MoneyRead:
        contribution = ContributionRepository().get(contribution_id)
        total = ContributionPaymentRepository().total_paid(contribution.id, contribution.money.currency)
        return MoneyRead.from_money(total)
