"""Shared fixtures for the cashbox test suite."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from cashbox_api.app.core.config import settings
from cashbox_api.app.core.db import init_db
from cashbox_api.app.domain.enums import CurrencyEnum, PenaltyTypeEnum, UserRoleEnum
from cashbox_api.app.domain.penalty import PenaltyType
from cashbox_api.app.domain.team import Team, TeamUser
from cashbox_api.app.domain.user import User
from cashbox_api.app.domain.value_objects import Email, Money, PersonName
from cashbox_api.app.main import configure_messaging, create_app
from cashbox_api.app.messaging.bus import event_dispatcher
from cashbox_api.app.repositories import (
    PenaltyTypeRepository,
    TeamRepository,
    TeamUserRepository,
    UserRepository,
)


# ---------------------------------------------------------------------------
# Plain domain objects
# ---------------------------------------------------------------------------

@pytest.fixture
def team() -> Team:
    return Team.create("FC Kneipe", "fck-1")


@pytest.fixture
def member(team: Team) -> TeamUser:
    return TeamUser.create(team, "user-1")


@pytest.fixture
def drink_type() -> PenaltyType:
    return PenaltyType.create("Round of drinks", PenaltyTypeEnum.DRINK)


@pytest.fixture
def eur_5() -> Money:
    return Money(500, CurrencyEnum.EUR)


@pytest.fixture
def fixed_now() -> datetime:
    """Monday, 1 July 2024, 09:00 UTC."""
    return datetime(2024, 7, 1, 9, 0, tzinfo=timezone.utc)


# ---------------------------------------------------------------------------
# Database
# ---------------------------------------------------------------------------

@pytest.fixture
def db(tmp_path, monkeypatch):
    """Fresh SQLite file with all migrations and freshly wired buses."""
    monkeypatch.setattr(settings, "database_url", str(tmp_path / "cashbox-test.db"))
    monkeypatch.setattr(settings, "mail_relay_url", None)
    init_db()
    configure_messaging()
    yield
    event_dispatcher.reset()


@pytest.fixture
def stored_user(db) -> User:
    user = User.create(PersonName("Max", "Mustermann"), Email("max@example.com"))
    UserRepository().save(user)
    return user


@pytest.fixture
def stored_team(db) -> Team:
    team = Team.create("FC Kneipe", "fck-1")
    TeamRepository().save(team)
    return team


@pytest.fixture
def stored_member(stored_team: Team, stored_user: User) -> TeamUser:
    member = TeamUser.create(stored_team, stored_user.id, [UserRoleEnum.MEMBER])
    TeamUserRepository().save(member)
    return member


@pytest.fixture
def stored_drink_type(db) -> PenaltyType:
    penalty_type = PenaltyType.create("Round of drinks", PenaltyTypeEnum.DRINK)
    PenaltyTypeRepository().save(penalty_type)
    return penalty_type


# ---------------------------------------------------------------------------
# HTTP
# ---------------------------------------------------------------------------

@pytest.fixture
def client(db):
    from fastapi.testclient import TestClient

    with TestClient(create_app()) as test_client:
        yield test_client
