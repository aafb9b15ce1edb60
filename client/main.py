"""
BillPoint - terminal front-end for the BillPoint auth flow.

Signs in, signs up, signs out and shows the persisted user. The signed-in
user is kept in the local JSON store (STORAGE_PATH), so `whoami` works
across invocations until `logout`.
"""

import argparse
import asyncio
import logging
import sys
from typing import Optional

from rich.logging import RichHandler
from rich.prompt import Prompt

from display import console, create_user_panel, render_state
from modules.auth import AuthService, SessionNotifier
from shared.config import Settings, get_settings
from shared.storage import get_storage


def configure_logging(settings: Settings, verbose: bool = False) -> None:
    """Route all logging through rich, at DEBUG when verbose."""
    level = logging.DEBUG if verbose or settings.debug else settings.log_level.upper()
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True, show_path=False)],
    )
    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)


async def _open_session(service: AuthService) -> SessionNotifier:
    session = await SessionNotifier.create(service, get_storage())
    session.add_listener(render_state)
    return session


async def run_login(email: str, password: str) -> bool:
    async with AuthService() as service:
        session = await _open_session(service)
        try:
            ok = await session.login(email, password)
            if ok:
                console.print(create_user_panel(session.current_user))
            return ok
        finally:
            session.dispose()


async def run_signup(
    username: str,
    email: str,
    password: str,
    phone_number: Optional[str],
    address: Optional[str],
) -> bool:
    async with AuthService() as service:
        session = await _open_session(service)
        try:
            ok = await session.signup(username, email, password, phone_number, address)
            if ok:
                console.print("[green]Account created.[/green] Sign in with `login`.")
            return ok
        finally:
            session.dispose()


async def run_logout() -> bool:
    async with AuthService() as service:
        session = await _open_session(service)
        try:
            ok = await session.logout()
            if ok:
                console.print("[green]Signed out.[/green]")
            return ok
        finally:
            session.dispose()


async def run_whoami() -> bool:
    async with AuthService() as service:
        session = await SessionNotifier.create(service, get_storage())
        console.print(create_user_panel(session.current_user))
        authenticated = session.state.is_authenticated
        session.dispose()
        return authenticated


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="BillPoint account tool")
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    login = subparsers.add_parser("login", help="Sign in")
    login.add_argument("--email", "-e", required=True, help="Account email")
    login.add_argument("--password", "-p", help="Password (prompted if omitted)")

    signup = subparsers.add_parser("signup", help="Create an account")
    signup.add_argument("--username", "-u", required=True, help="Display name")
    signup.add_argument("--email", "-e", required=True, help="Account email")
    signup.add_argument("--password", "-p", help="Password (prompted if omitted)")
    signup.add_argument("--phone", help="Phone number")
    signup.add_argument("--address", help="Postal address")

    subparsers.add_parser("logout", help="Sign out and forget the stored user")
    subparsers.add_parser("whoami", help="Show the stored user")

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point. Returns the process exit code."""
    args = build_parser().parse_args(argv)
    configure_logging(get_settings(), args.verbose)

    if args.command == "login":
        password = args.password or Prompt.ask("Password", password=True)
        ok = asyncio.run(run_login(args.email, password))
    elif args.command == "signup":
        password = args.password or Prompt.ask("Password", password=True)
        ok = asyncio.run(
            run_signup(args.username, args.email, password, args.phone, args.address)
        )
    elif args.command == "logout":
        ok = asyncio.run(run_logout())
    else:
        ok = asyncio.run(run_whoami())

    return 0 if ok else 1


if __name__ == "__main__":
    sys.exit(main())
