"""Operator commands for the URL shortener.

CLI usage:
    $ python -m shortlink.manage init-db
    $ python -m shortlink.manage create-user alice --admin
    $ python -m shortlink.manage delete-user 3
    $ python -m shortlink.manage serve --port 8000

The password for ``create-user`` is read with getpass and only its argon2 hash
is stored.
"""
import argparse
import getpass
import sys

import uvicorn

from shortlink.core.exceptions import ShortLinkError
from shortlink.core.logging_config import configure_logging
from shortlink.db import repository
from shortlink.db.Connection import database
from shortlink.db.Models import models
from shortlink.services import auth

logger = configure_logging()


def init_db(args) -> int:
    models.Base.metadata.create_all(bind=database.engine)
    logger.info("Database tables created/checked.")
    return 0


def create_user(args) -> int:
    password = args.password or getpass.getpass(f"Password for {args.username}: ")
    if not password:
        logger.error("Refusing to create a user with an empty password")
        return 1
    with database.session_scope() as db:
        user = auth.create_user(db, args.username, password, is_admin=args.admin)
    print(f"created user id={user.id} username={user.username} admin={user.is_admin}")
    return 0


def delete_user(args) -> int:
    with database.session_scope() as db:
        repository.delete_user(db, args.user_id)
    print(f"deleted user id={args.user_id}")
    return 0


def serve(args) -> int:
    uvicorn.run("shortlink.main:app", host=args.host, port=args.port, log_config=None)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="shortlink.manage")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("init-db", help="create the shares and users tables")
    p.set_defaults(func=init_db)

    p = sub.add_parser("create-user", help="add a user (prompts for the password)")
    p.add_argument("username")
    p.add_argument("--admin", action="store_true", help="grant admin rights")
    p.add_argument("--password", help=argparse.SUPPRESS)
    p.set_defaults(func=create_user)

    p = sub.add_parser("delete-user", help="remove a user by id")
    p.add_argument("user_id", type=int)
    p.set_defaults(func=delete_user)

    p = sub.add_parser("serve", help="run the HTTP service")
    p.add_argument("--host", default="127.0.0.1")
    p.add_argument("--port", type=int, default=8000)
    p.set_defaults(func=serve)
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    try:
        return args.func(args)
    except ShortLinkError as e:
        logger.error(f"{args.command} failed: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
