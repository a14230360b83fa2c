"""User aggregate."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional

from .exceptions import InvalidStateError
from .ids import new_id, utc_now
from .value_objects import Email, PersonName, PhoneNumber


class User:
    def __init__(
        self,
        id: str,
        name: PersonName,
        email: Optional[Email] = None,
        phone: Optional[PhoneNumber] = None,
        active: bool = True,
        preferences: Optional[Dict[str, Any]] = None,
        created_at: Optional[datetime] = None,
        updated_at: Optional[datetime] = None,
    ):
        self.id = id
        self.name = name
        self.email = email
        self.phone = phone
        self.active = active
        self.preferences: Dict[str, Any] = dict(preferences or {})
        self.created_at = created_at or utc_now()
        self.updated_at = updated_at or self.created_at

    @classmethod
    def create(
        cls,
        name: PersonName,
        email: Optional[Email] = None,
        phone: Optional[PhoneNumber] = None,
    ) -> "User":
        return cls(new_id(), name, email, phone)

    @property
    def full_name(self) -> str:
        return self.name.full_name

    def update_profile(
        self,
        name: Optional[PersonName] = None,
        email: Optional[Email] = None,
        phone: Optional[PhoneNumber] = None,
    ) -> None:
        if name is not None:
            self.name = name
        if email is not None:
            self.email = email
        if phone is not None:
            self.phone = phone
        self.updated_at = utc_now()

    def set_preference(self, key: str, value: Any) -> None:
        self.preferences[key] = value
        self.updated_at = utc_now()

    def activate(self) -> None:
        if self.active:
            raise InvalidStateError(f"user {self.id} is already active")
        self.active = True
        self.updated_at = utc_now()

    def deactivate(self) -> None:
        if not self.active:
            raise InvalidStateError(f"user {self.id} is already inactive")
        self.active = False
        self.updated_at = utc_now()
