"""bloghub identity command line.

Run with:
  python -m bloghub register "Ann" ann@example.com
  python -m bloghub login ann@example.com
  python -m bloghub whoami
  python -m bloghub logout
  python -m bloghub create-user bob@example.com --name Bob --role user

State is kept in ``BLOGHUB_STATE_DIR`` (or ``--state-dir``).
"""

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import replace
from getpass import getpass
from pathlib import Path
from typing import List, Optional

from bloghub.auth.manager import Notification, SessionManager
from bloghub.auth.records import Role
from bloghub.config import load_settings
from bloghub.errors import BloghubError, InvalidInputError


def _password(args: argparse.Namespace, *, confirm: bool = False) -> str:
    if args.password is not None:
        return args.password
    pw1 = getpass("Password: ")
    if confirm:
        pw2 = getpass("Repeat password: ")
        if pw1 != pw2:
            raise InvalidInputError("Passwords do not match")
    return pw1


def _print_notification(notification: Notification) -> None:
    print(f"{notification.title}: {notification.description}")


def _build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="bloghub", description="bloghub accounts and sessions")
    ap.add_argument("--state-dir", help="directory holding persisted state (default: $BLOGHUB_STATE_DIR)")
    sub = ap.add_subparsers(dest="command", required=True)

    p = sub.add_parser("register", help="create an account and log in as it")
    p.add_argument("name")
    p.add_argument("email")
    p.add_argument("--password")

    p = sub.add_parser("login", help="log in with email and password")
    p.add_argument("email")
    p.add_argument("--password")

    sub.add_parser("logout", help="end the current session")
    sub.add_parser("whoami", help="show the current session")

    p = sub.add_parser("create-user", help="create an account with an explicit role")
    p.add_argument("email")
    p.add_argument("--name", required=True)
    p.add_argument("--role", choices=[r.value for r in Role], default=Role.USER.value)
    p.add_argument("--password")
    return ap


def main(argv: Optional[List[str]] = None) -> int:
    args = _build_parser().parse_args(argv)
    settings = load_settings()
    logging.basicConfig(level=settings.log_level, format="%(levelname)s %(name)s: %(message)s")
    if args.state_dir:
        settings = replace(settings, state_dir=Path(args.state_dir).resolve())

    try:
        manager = SessionManager.from_settings(settings, notifier=_print_notification)
        manager.start()

        if args.command == "register":
            manager.register(args.name, args.email, _password(args, confirm=True))
            s = manager.current_session()
            print(f"Registered and logged in as {s.email} ({s.role.value})")
            return 0

        if args.command == "login":
            if not manager.login(args.email, _password(args)):
                print("Invalid email or password", file=sys.stderr)
                return 1
            s = manager.current_session()
            print(f"Logged in as {s.email} ({s.role.value})")
            return 0

        if args.command == "logout":
            manager.logout()
            return 0

        if args.command == "whoami":
            s = manager.current_session()
            if s is None:
                print("anonymous")
                return 1
            print(f"{s.name} <{s.email}> id={s.id} role={s.role.value}")
            return 0

        if args.command == "create-user":
            rec = manager.registry.create_account(
                args.name, args.email, _password(args, confirm=True), role=Role(args.role)
            )
            print(f"OK -> {rec.email} id={rec.id} role={rec.role.value}")
            return 0
    except BloghubError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2

    return 2


if __name__ == "__main__":
    raise SystemExit(main())
