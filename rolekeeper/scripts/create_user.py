"""
Create a user with an explicit role (e.g. the first superadmin). Run from project root:
  python -m rolekeeper.scripts.create_user NAME EMAIL PASSWORD [role]
Example:
  python -m rolekeeper.scripts.create_user "Root" root@example.com your-secure-password superadmin

The role is created in the roles collection if it does not exist yet.
"""
import argparse
import logging
import sys

from rolekeeper.core.config import get_settings
from rolekeeper.core.errors import ServiceError
from rolekeeper.core.store import get_record_store
from rolekeeper.services.roles import RoleDirectory
from rolekeeper.services.users import UserDirectory

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    settings = get_settings()
    parser = argparse.ArgumentParser(description="Create a Rolekeeper user with a given role.")
    parser.add_argument("name", help="Display name")
    parser.add_argument("email", help="Email (unique, case-sensitive)")
    parser.add_argument("password", help="Password")
    parser.add_argument("role", nargs="?", default=settings.DEFAULT_ROLE)
    args = parser.parse_args(argv)

    store = get_record_store(settings.DATA_DIR)
    users = UserDirectory(store, settings)
    roles = RoleDirectory(store, settings)
    role = args.role.strip()
    try:
        if roles.get_by_name(role) is None:
            roles.create({"role": role})
        users.register(
            {"name": args.name.strip(), "email": args.email.strip(), "password": args.password}
        )
        user = users.get_by_email(args.email.strip())
        users.set_role(user["id"], role)
    except ServiceError as e:
        print(e.message, file=sys.stderr)
        return 1
    print(f"Created user '{user['email']}' (id {user['id']}) with role '{role}'.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
