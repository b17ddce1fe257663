"""
Billfinity Session Entry Point

Allows driving a stored session via `python -m billfinity_session`.
Logging goes to stderr so stdout only carries command output.

Commands:
  login --user-id ID [--claim KEY=VALUE ...] [--user-json JSON]
  status     print current payload (exit 1 when no session)
  token      print current access token (exit 1 when no session)
  refresh    refresh the access token if needed (exit 1 on failure)
  logout     clear the profile
"""

import argparse
import json
import logging
import os
import sys
from typing import List, Optional

from .core.config import SessionConfig
from .core.constants import DEFAULT_DATA_DIR, DEFAULT_PROFILE, ENV_DATA_DIR
from .persistence.storage import JSONFileStorage, StorageError
from .session.session_manager import SessionManager, SessionError


def setup_logging(verbose: bool = False):
    """Configure logging to stderr"""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        stream=sys.stderr,
    )


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="billfinity_session",
        description="Manage the locally stored Billfinity session.",
    )
    ap.add_argument(
        "--data-dir",
        default=os.environ.get(ENV_DATA_DIR, DEFAULT_DATA_DIR),
        help="Directory holding profile files",
    )
    ap.add_argument("--profile", default=DEFAULT_PROFILE, help="Storage profile name")
    ap.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    sub = ap.add_subparsers(dest="command", required=True)

    login = sub.add_parser("login", help="Start a session")
    login.add_argument("--user-id", required=True, help="User identifier")
    login.add_argument(
        "--claim",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Extra access-token claim (repeatable)",
    )
    login.add_argument("--user-json", default="", help="User profile snapshot to cache (JSON object)")

    sub.add_parser("status", help="Print current session payload")
    sub.add_parser("token", help="Print current access token")
    sub.add_parser("refresh", help="Refresh the access token if needed")
    sub.add_parser("logout", help="Clear the session")
    return ap


def _parse_claims(pairs: List[str]) -> dict:
    claims = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise ValueError(f"Claim must look like KEY=VALUE, got {pair!r}")
        claims[key] = value
    return claims


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point"""
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose)
    logger = logging.getLogger("main")

    try:
        config = SessionConfig.from_env()
        storage = JSONFileStorage(args.data_dir, args.profile)
    except (ValueError, StorageError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 2

    manager = SessionManager.from_config(config, storage)

    if args.command == "login":
        try:
            payload = _parse_claims(args.claim)
            user = json.loads(args.user_json) if args.user_json else None
            if user is not None and not isinstance(user, dict):
                raise ValueError("--user-json must be a JSON object")
        except ValueError as e:
            print(f"error: {e}", file=sys.stderr)
            return 2
        payload["userId"] = args.user_id
        try:
            manager.login(payload, user=user)
        except ValueError as e:
            print(f"error: {e}", file=sys.stderr)
            return 2
        except SessionError as e:
            logger.error(f"Login failed: {e}")
            return 1
        print(json.dumps(manager.current_payload(), indent=2))
        return 0

    if args.command == "status":
        payload = manager.current_payload()
        if payload is None:
            print("no active session")
            return 1
        print(json.dumps(payload, indent=2))
        return 0

    if args.command == "token":
        token = manager.access_token()
        if token is None:
            return 1
        print(token)
        return 0

    if args.command == "refresh":
        token = manager.refresh_if_needed()
        if token is None:
            print("session expired, login required")
            return 1
        print(token)
        return 0

    manager.logout()
    return 0


if __name__ == "__main__":
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        sys.exit(0)
