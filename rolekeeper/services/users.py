"""User directory: CRUD over the users collection."""

import logging
from collections.abc import Mapping
from typing import Any

from rolekeeper.core.config import Settings, settings as default_settings
from rolekeeper.core.errors import Conflict, NotFound
from rolekeeper.core.security import hash_password
from rolekeeper.core.store import Record, RecordStore
from rolekeeper.schemas.base import check_records
from rolekeeper.schemas.users import RegisteredUser, StoredUser, UserRegistration, UserUpdate

logger = logging.getLogger(__name__)


def _index_of(records: list[Record], user_id: int) -> int:
    for i, record in enumerate(records):
        if record.get("id") == user_id:
            return i
    raise NotFound(f"User with id {user_id} not found")


class UserDirectory:
    """
    Users stored as ``{id, name, email, password, role}``.

    Every mutation re-reads the whole collection, changes it in memory and
    rewrites it under the collection lock.
    """

    def __init__(self, store: RecordStore, settings: Settings | None = None) -> None:
        self.store = store
        self.settings = settings or default_settings
        self.collection = self.settings.USERS_COLLECTION

    def _load(self) -> list[Record]:
        return check_records(StoredUser, self.store.load(self.collection), self.collection)

    def list_users(self) -> list[Record]:
        return self._load()

    def get_by_id(self, user_id: int) -> Record:
        users = self._load()
        return users[_index_of(users, user_id)]

    def get_by_email(self, email: str) -> Record | None:
        """Exact, case-sensitive email match."""
        return next(
            (u for u in self._load() if u.get("email") == email),
            None,
        )

    def count_with_role(self, role: str) -> int:
        return sum(1 for u in self._load() if u.get("role") == role)

    def register(self, candidate: Mapping[str, Any] | UserRegistration) -> RegisteredUser:
        """
        Create a user from exactly {name, email, password}.

        The id is one past the highest stored id and the role is always the default role;
        clients cannot supply either.
        """
        body = UserRegistration.parse(candidate)
        with self.store.locked(self.collection):
            users = self._load()
            if any(u.get("email") == body.email for u in users):
                raise Conflict("User already exists")
            user = {
                "id": max((u["id"] for u in users), default=0) + 1,
                "name": body.name,
                "email": body.email,
                "password": hash_password(body.password, self.settings.BCRYPT_ROUNDS),
                "role": self.settings.DEFAULT_ROLE,
            }
            users.append(user)
            self.store.save(self.collection, users)
        logger.info("Registered user id=%s", user["id"])
        return RegisteredUser(email=user["email"], name=user["name"])

    def update(self, user_id: int, patch: Mapping[str, Any] | UserUpdate) -> Record:
        """Merge exactly {name, email, password} into an existing user; patch wins."""
        body = UserUpdate.parse(patch)
        with self.store.locked(self.collection):
            users = self._load()
            idx = _index_of(users, user_id)
            if any(
                u.get("email") == body.email and u.get("id") != user_id for u in users
            ):
                raise Conflict("Email already in use")
            changes = body.model_dump()
            changes["password"] = hash_password(body.password, self.settings.BCRYPT_ROUNDS)
            users[idx] = {**users[idx], **changes}
            self.store.save(self.collection, users)
        logger.info("Updated user id=%s", user_id)
        return users[idx]

    def set_role(self, user_id: int, role: str) -> Record:
        with self.store.locked(self.collection):
            users = self._load()
            idx = _index_of(users, user_id)
            users[idx] = {**users[idx], "role": role}
            self.store.save(self.collection, users)
        return users[idx]

    def delete(self, user_id: int) -> None:
        with self.store.locked(self.collection):
            users = self._load()
            del users[_index_of(users, user_id)]
            self.store.save(self.collection, users)
        logger.info("Deleted user id=%s", user_id)
