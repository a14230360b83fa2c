"""
Business logic for users.

Users are the people behind team memberships.  Contact details are
wrapped in value objects on the way in, so malformed e-mail addresses
or phone numbers surface as ``ValidationError``.
"""

import logging
from typing import List, Optional

from ..application.queries import member_to_read
from ..domain.exceptions import ValidationError
from ..domain.user import User
from ..domain.value_objects import PersonName, optional_email, optional_phone
from ..repositories import TeamUserRepository, UserRepository
from ..schemas.team import TeamMemberRead
from ..schemas.user import UserCreate, UserRead, UserUpdate

logger = logging.getLogger(__name__)


def user_to_read(user: User) -> UserRead:
    return UserRead(
        id=user.id,
        first_name=user.name.first_name,
        last_name=user.name.last_name,
        email=str(user.email) if user.email else None,
        phone=str(user.phone) if user.phone else None,
        full_name=user.full_name,
        initials=user.name.initials,
        formatted_phone=user.phone.formatted if user.phone else None,
        active=user.active,
        preferences=user.preferences,
        created_at=user.created_at,
        updated_at=user.updated_at,
    )


class UserService:
    @classmethod
    async def create_user(cls, data: UserCreate) -> UserRead:
        """Register a user.

        Raises
        ------
        ValidationError
            If the name is blank, the contact details are malformed or
            the e-mail address is already registered.
        """
        user = User.create(
            PersonName(data.first_name, data.last_name),
            optional_email(data.email),
            optional_phone(data.phone),
        )
        repository = UserRepository()
        if user.email and repository.find_by_email(str(user.email)) is not None:
            raise ValidationError.single("email", f"{user.email} is already registered")
        repository.save(user)
        logger.info("User %s registered", user.id)
        return user_to_read(user)

    @classmethod
    async def get_user(cls, user_id: str) -> UserRead:
        return user_to_read(UserRepository().get(user_id))

    @classmethod
    async def list_users(cls, active: Optional[bool] = None, limit: Optional[int] = None,
                         offset: Optional[int] = None) -> List[UserRead]:
        users = UserRepository().all(limit, offset)
        if active is not None:
            users = [u for u in users if u.active == active]
        return [user_to_read(u) for u in users]

    @classmethod
    async def update_user(cls, user_id: str, data: UserUpdate) -> UserRead:
        repository = UserRepository()
        user = repository.get(user_id)
        name = None
        if data.first_name is not None or data.last_name is not None:
            name = PersonName(
                data.first_name if data.first_name is not None else user.name.first_name,
                data.last_name if data.last_name is not None else user.name.last_name,
            )
        email = optional_email(data.email)
        if email and email != user.email:
            other = repository.find_by_email(str(email))
            if other is not None and other.id != user.id:
                raise ValidationError.single("email", f"{email} is already registered")
        user.update_profile(name, email, optional_phone(data.phone))
        for key, value in (data.preferences or {}).items():
            user.set_preference(key, value)
        repository.save(user)
        return user_to_read(user)

    @classmethod
    async def set_active(cls, user_id: str, active: bool) -> UserRead:
        repository = UserRepository()
        user = repository.get(user_id)
        if active:
            user.activate()
        else:
            user.deactivate()
        repository.save(user)
        logger.info("User %s %s", user.id, "activated" if active else "deactivated")
        return user_to_read(user)

    @classmethod
    async def list_memberships(cls, user_id: str) -> List[TeamMemberRead]:
        UserRepository().get(user_id)
        return [member_to_read(m) for m in TeamUserRepository().find_by_user(user_id)]
