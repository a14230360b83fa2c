"""
Business logic for penalties and the penalty type catalogue.

Charging, paying and archiving penalties are commands on
``command_bus``; the resulting ``PenaltyCreated``/``PenaltyPaid``
events reach the notification handlers through the event dispatcher.
"""

import logging
from typing import List, Optional

from ..application.commands import ArchivePenaltyCommand, CreatePenaltyCommand, PayPenaltyCommand
from ..application.queries import GetPenaltyByIdQuery, ListPenaltiesQuery, penalty_type_to_read
from ..domain.penalty import PenaltyType
from ..messaging.bus import command_bus, query_bus
from ..repositories import PenaltyTypeRepository
from ..schemas.penalty import (
    PenaltyCreate,
    PenaltyPay,
    PenaltyRead,
    PenaltyTypeCreate,
    PenaltyTypeRead,
    PenaltyTypeUpdate,
)

logger = logging.getLogger(__name__)


class PenaltyTypeService:
    @classmethod
    async def create_type(cls, data: PenaltyTypeCreate) -> PenaltyTypeRead:
        penalty_type = PenaltyType.create(data.name, data.type, data.description, data.default_amount)
        PenaltyTypeRepository().save(penalty_type)
        logger.info("Penalty type %s created: %s", penalty_type.id, penalty_type.name)
        return penalty_type_to_read(penalty_type)

    @classmethod
    async def get_type(cls, type_id: str) -> PenaltyTypeRead:
        return penalty_type_to_read(PenaltyTypeRepository().get(type_id))

    @classmethod
    async def list_types(cls, active_only: bool = False) -> List[PenaltyTypeRead]:
        repository = PenaltyTypeRepository()
        types = repository.find_active() if active_only else repository.all()
        return [penalty_type_to_read(t) for t in types]

    @classmethod
    async def update_type(cls, type_id: str, data: PenaltyTypeUpdate) -> PenaltyTypeRead:
        """Apply a partial update.

        ``active`` toggles are only applied when they change the state,
        so resending the current value is not an error.
        """
        repository = PenaltyTypeRepository()
        penalty_type = repository.get(type_id)
        penalty_type.update(data.name, data.description, data.default_amount)
        if data.active is not None and data.active != penalty_type.active:
            if data.active:
                penalty_type.activate()
            else:
                penalty_type.deactivate()
        repository.save(penalty_type)
        return penalty_type_to_read(penalty_type)

    @classmethod
    async def delete_type(cls, type_id: str) -> None:
        repository = PenaltyTypeRepository()
        penalty_type = repository.get(type_id)
        if penalty_type.active:
            penalty_type.deactivate()
            repository.save(penalty_type)


class PenaltyService:
    @classmethod
    async def create_penalty(cls, data: PenaltyCreate) -> PenaltyRead:
        penalty_id = command_bus.dispatch(CreatePenaltyCommand(
            team_user_id=data.team_user_id,
            penalty_type_id=data.penalty_type_id,
            reason=data.reason,
            amount=data.amount,
            currency=data.currency,
        ))
        return query_bus.dispatch(GetPenaltyByIdQuery(penalty_id))

    @classmethod
    async def get_penalty(cls, penalty_id: str) -> PenaltyRead:
        return query_bus.dispatch(GetPenaltyByIdQuery(penalty_id))

    @classmethod
    async def list_penalties(
        cls,
        team_id: Optional[str] = None,
        user_id: Optional[str] = None,
        paid: Optional[bool] = None,
        archived: Optional[bool] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> List[PenaltyRead]:
        return query_bus.dispatch(ListPenaltiesQuery(team_id, user_id, paid, archived, limit, offset))

    @classmethod
    async def pay_penalty(cls, penalty_id: str, data: Optional[PenaltyPay] = None) -> PenaltyRead:
        paid_at = data.paid_at if data else None
        command_bus.dispatch(PayPenaltyCommand(penalty_id, paid_at))
        logger.info("Penalty %s marked as paid", penalty_id)
        return query_bus.dispatch(GetPenaltyByIdQuery(penalty_id))

    @classmethod
    async def archive_penalty(cls, penalty_id: str) -> PenaltyRead:
        command_bus.dispatch(ArchivePenaltyCommand(penalty_id))
        return query_bus.dispatch(GetPenaltyByIdQuery(penalty_id))
