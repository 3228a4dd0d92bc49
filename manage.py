from __future__ import annotations

import argparse
from pathlib import Path

from alembic import command
from alembic.config import Config


def get_alembic_config() -> Config:
    here = Path(__file__).resolve().parent
    cfg = Config(str(here / "alembic.ini"))
    return cfg


def cmd_upgrade() -> None:
    cfg = get_alembic_config()
    command.upgrade(cfg, "head")


def cmd_downgrade(revision: str) -> None:
    cfg = get_alembic_config()
    command.downgrade(cfg, revision)


def cmd_seed_achievements() -> None:
    from app.core.gamification.catalog import CATALOG_VERSION
    from app.core.gamification.services import sync_achievement_catalog
    from app.database.session import SessionLocal

    db = SessionLocal()
    try:
        created = sync_achievement_catalog(db)
    finally:
        db.close()
    print(f"Achievement catalog v{CATALOG_VERSION} synced ({created} new)")


def cmd_create_user(username: str, email: str) -> None:
    from app.core.security import create_access_token
    from app.core.users.services import create_user
    from app.database.session import SessionLocal
    from app.response.response import APIError

    db = SessionLocal()
    try:
        user = create_user(db, username=username, email=email)
    except APIError as exc:
        raise SystemExit(f"{exc.code}: {exc.message}")
    finally:
        db.close()
    print(f"Created user {user.id}")
    print(f"Access token: {create_access_token(user_id=user.id)}")


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Migrations and maintenance commands"
    )
    subparsers = parser.add_subparsers(dest="command")

    subparsers.add_parser("upgrade", help="Apply all migrations (upgrade head)")

    downgrade_parser = subparsers.add_parser(
        "downgrade", help="Downgrade to a specific revision"
    )
    downgrade_parser.add_argument("revision", help="Revision id or -1, -2, ...")

    revision_parser = subparsers.add_parser(
        "revision", help="Create new alembic revision"
    )
    revision_parser.add_argument(
        "-m",
        "--message",
        required=True,
        help="Revision message",
    )
    revision_parser.add_argument(
        "--autogenerate",
        action="store_true",
        help="Populate revision with schema diff from models",
    )

    subparsers.add_parser(
        "seed-achievements",
        help="Sync the achievement catalog into the database",
    )

    user_parser = subparsers.add_parser(
        "create-user", help="Create a user and print a dev access token"
    )
    user_parser.add_argument("--username", required=True)
    user_parser.add_argument("--email", required=True)

    args = parser.parse_args()

    if args.command == "upgrade" or args.command is None:
        cmd_upgrade()
    elif args.command == "downgrade":
        cmd_downgrade(args.revision)
    elif args.command == "revision":
        cfg = get_alembic_config()
        command.revision(
            cfg,
            message=args.message,
            autogenerate=args.autogenerate,
        )
    elif args.command == "seed-achievements":
        cmd_seed_achievements()
    elif args.command == "create-user":
        cmd_create_user(args.username, args.email)
    else:
        parser.print_help()


if __name__ == "__main__":
    main()
