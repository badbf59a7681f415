"""Unit tests for rolekeeper.services.assignment: check order and outcomes of role reassignment."""

import tempfile
import unittest
from unittest.mock import MagicMock, patch

from rolekeeper.core.config import Settings
from rolekeeper.core.errors import Forbidden, NotFound, ValidationError
from rolekeeper.core.store import RecordStore
from rolekeeper.schemas.auth import Actor
from rolekeeper.services.assignment import assign_role
from rolekeeper.services.roles import RoleDirectory
from rolekeeper.services.users import UserDirectory

SUPERADMIN = Actor(id=1, email="root@example.com", role="superadmin")
ADMIN = Actor(id=2, email="admin@example.com", role="admin")
USER = Actor(id=4, email="user4@example.com", role="user")


class AssignRoleTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        settings = Settings(_env_file=None, DATA_DIR=self._tmp.name, BCRYPT_ROUNDS=4)
        store = RecordStore(self._tmp.name)
        self.users = UserDirectory(store, settings)
        self.roles = RoleDirectory(store, settings)
        for name in ("superadmin", "admin", "doctor", "user"):
            self.roles.create({"role": name})
        for n in range(1, 5):
            self.users.register(
                {"name": f"User {n}", "email": f"user{n}@example.com", "password": "pw"}
            )

    def tearDown(self) -> None:
        self._tmp.cleanup()


class TestAssignRoleSuccess(AssignRoleTestCase):
    def test_superadmin_assigns_existing_role(self) -> None:
        updated = assign_role(SUPERADMIN, 3, {"role": "doctor"}, self.users, self.roles)
        self.assertEqual(updated["role"], "doctor")
        self.assertEqual(self.users.get_by_id(3)["role"], "doctor")

    def test_other_users_untouched(self) -> None:
        assign_role(SUPERADMIN, 3, {"role": "doctor"}, self.users, self.roles)
        others = [u["role"] for u in self.users.list_users() if u["id"] != 3]
        self.assertEqual(others, ["user", "user", "user"])

    def test_superadmin_may_grant_top_tier(self) -> None:
        assign_role(SUPERADMIN, 2, {"role": "superadmin"}, self.users, self.roles)
        self.assertEqual(self.users.get_by_id(2)["role"], "superadmin")


class TestAssignRoleFailures(AssignRoleTestCase):
    def test_user_actor_forbidden(self) -> None:
        with self.assertRaises(Forbidden):
            assign_role(USER, 3, {"role": "doctor"}, self.users, self.roles)
        self.assertEqual(self.users.get_by_id(3)["role"], "user")

    def test_admin_actor_forbidden(self) -> None:
        with self.assertRaises(Forbidden):
            assign_role(ADMIN, 3, {"role": "doctor"}, self.users, self.roles)

    def test_forbidden_before_validation_and_lookup(self) -> None:
        with self.assertRaises(Forbidden):
            assign_role(USER, 999, {"id": 4, "role": "nope"}, self.users, self.roles)

    def test_extra_fields_rejected(self) -> None:
        with self.assertRaises(ValidationError) as ctx:
            assign_role(SUPERADMIN, 4, {"id": 4, "role": "doctor"}, self.users, self.roles)
        self.assertEqual(ctx.exception.status_code, 400)
        self.assertEqual(self.users.get_by_id(4)["role"], "user")

    def test_validation_before_lookup(self) -> None:
        with self.assertRaises(ValidationError):
            assign_role(SUPERADMIN, 999, {}, self.users, self.roles)

    def test_missing_user_not_found(self) -> None:
        with self.assertRaises(NotFound) as ctx:
            assign_role(SUPERADMIN, 999, {"role": "doctor"}, self.users, self.roles)
        self.assertEqual(ctx.exception.status_code, 404)

    def test_missing_role_not_found(self) -> None:
        with self.assertRaises(NotFound):
            assign_role(SUPERADMIN, 3, {"role": "pilot"}, self.users, self.roles)
        self.assertEqual(self.users.get_by_id(3)["role"], "user")

    def test_escalation_guard_blocks_grant(self) -> None:
        with patch("rolekeeper.services.assignment.can_grant", return_value=False):
            with self.assertRaises(Forbidden):
                assign_role(SUPERADMIN, 3, {"role": "doctor"}, self.users, self.roles)
        self.assertEqual(self.users.get_by_id(3)["role"], "user")


class TestAssignRoleNoWritesOnFailure(unittest.TestCase):
    """Denied calls never touch the directories."""

    def test_forbidden_does_not_read_or_write(self) -> None:
        users = MagicMock(spec=UserDirectory)
        roles = MagicMock(spec=RoleDirectory)
        with self.assertRaises(Forbidden):
            assign_role(USER, 3, {"role": "doctor"}, users, roles)
        users.get_by_id.assert_not_called()
        roles.get_by_name.assert_not_called()
        users.set_role.assert_not_called()


if __name__ == "__main__":
    unittest.main()
