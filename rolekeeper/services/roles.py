"""Role directory: CRUD over the roles collection."""

import logging
from collections.abc import Callable, Mapping
from typing import Any

from rolekeeper.core.config import Settings, settings as default_settings
from rolekeeper.core.errors import Conflict, NotFound
from rolekeeper.core.store import Record, RecordStore
from rolekeeper.schemas.base import check_records
from rolekeeper.schemas.roles import RolePayload, StoredRole

logger = logging.getLogger(__name__)


def _index_of(records: list[Record], role_id: int) -> int:
    for i, record in enumerate(records):
        if record.get("id") == role_id:
            return i
    raise NotFound(f"Role with id {role_id} not found")


class RoleDirectory:
    """Roles stored as ``{id, role}`` with unique names."""

    def __init__(self, store: RecordStore, settings: Settings | None = None) -> None:
        self.store = store
        self.settings = settings or default_settings
        self.collection = self.settings.ROLES_COLLECTION

    def _load(self) -> list[Record]:
        return check_records(StoredRole, self.store.load(self.collection), self.collection)

    def list_roles(self) -> list[Record]:
        return self._load()

    def get_by_id(self, role_id: int) -> Record:
        roles = self._load()
        return roles[_index_of(roles, role_id)]

    def get_by_name(self, name: str) -> Record | None:
        return next(
            (r for r in self._load() if r.get("role") == name),
            None,
        )

    def create(self, candidate: Mapping[str, Any] | RolePayload) -> Record:
        body = RolePayload.parse(candidate)
        with self.store.locked(self.collection):
            roles = self._load()
            if any(r.get("role") == body.role for r in roles):
                raise Conflict(f"Role '{body.role}' already exists")
            new_id = max((r["id"] for r in roles), default=0) + 1
            role = {"id": new_id, "role": body.role}
            roles.append(role)
            self.store.save(self.collection, roles)
        logger.info("Created role id=%s name=%s", role["id"], role["role"])
        return role

    def update(
        self,
        role_id: int,
        patch: Mapping[str, Any] | RolePayload,
        holders: Callable[[str], int] | None = None,
    ) -> Record:
        """
        Merge {role} into an existing role; other stored fields are left untouched.

        Users reference roles by name, so with ``holders`` given a rename of a
        role that users still hold is rejected like a delete would be.
        """
        body = RolePayload.parse(patch)
        with self.store.locked(self.collection):
            roles = self._load()
            idx = _index_of(roles, role_id)
            if any(r.get("role") == body.role and r.get("id") != role_id for r in roles):
                raise Conflict(f"Role '{body.role}' already exists")
            current = roles[idx]["role"]
            if holders is not None and current != body.role:
                in_use = holders(current)
                if in_use:
                    raise Conflict(f"Role '{current}' is still assigned to {in_use} user(s)")
            roles[idx] = {**roles[idx], **body.model_dump()}
            self.store.save(self.collection, roles)
        logger.info("Updated role id=%s name=%s", role_id, body.role)
        return roles[idx]

    def delete(self, role_id: int, holders: Callable[[str], int] | None = None) -> None:
        """
        Remove a role. When ``holders`` is given it returns how many users hold
        a role name, and deletion of a role still in use is rejected.
        """
        with self.store.locked(self.collection):
            roles = self._load()
            idx = _index_of(roles, role_id)
            name = roles[idx].get("role")
            if holders is not None and name is not None:
                in_use = holders(name)
                if in_use:
                    raise Conflict(f"Role '{name}' is still assigned to {in_use} user(s)")
            del roles[idx]
            self.store.save(self.collection, roles)
        logger.info("Deleted role id=%s name=%s", role_id, name)
