#!/usr/bin/env python3
"""
Anon Relay CLI

Commands:

1) serve
   - Run the relay HTTP server (FastAPI app in runtime.api.server) with
     uvicorn. Equivalent to:

         uvicorn runtime.api.server:app --port 3000

2) issue-token
   - Sign a token for (session_id, group_jid) with the configured secret.
     Useful to reproduce what the bot receives from /api/session/create.

3) inspect-token
   - Decode a token, check its signature against the configured secret
     and report its age. Exits with status 1 when the token is unusable.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Optional

# Ensure project root is on sys.path when running as a script
ROOT_DIR = Path(__file__).resolve().parent.parent
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from configs.settings import settings
from core.security.signature import SessionSigner
from core.security.token_codec import TokenCodec
from runtime.store.session_store import SESSION_TTL_MS, now_millis


def _codec() -> TokenCodec:
    if settings.uses_default_secret:
        print(
            "[Anon Relay] ANON_RELAY_SESSION_SECRET is not set; using the development secret",
            file=sys.stderr,
        )
    return TokenCodec(SessionSigner(settings.session_secret))


# ---------------------------------------------------------------------------
# serve
# ---------------------------------------------------------------------------


def cmd_serve(host: str, port: int, reload: bool) -> None:
    """Run the relay server with uvicorn."""
    # Lazy import so token commands work without the server stack loaded.
    import uvicorn

    print(f"[Anon Relay] Anonymous message server running on port {port}")
    uvicorn.run(
        "runtime.api.server:app",
        host=host,
        port=port,
        reload=reload,
        log_level=settings.log_level,
    )


# ---------------------------------------------------------------------------
# issue-token / inspect-token
# ---------------------------------------------------------------------------


def cmd_issue_token(session_id: str, group_jid: str, created_at: Optional[int]) -> str:
    """Print and return a signed token for the given session facts."""
    if created_at is None:
        created_at = now_millis()
    token = _codec().issue(session_id, group_jid, created_at)
    print(token)
    return token


def cmd_inspect_token(token: str) -> int:
    """
    Print what a token carries as JSON. Returns the process exit status:
    0 if the signature verifies and the token has not expired, 1 otherwise.
    """
    data = _codec().decode(token)
    if data is None:
        print(json.dumps({"valid": False, "reason": "malformed token or bad signature"}, indent=2))
        return 1

    age = now_millis() - data.created_at
    expired = age > SESSION_TTL_MS
    report = {
        "valid": not expired,
        "sessionId": data.session_id,
        "groupJid": data.group_jid,
        "createdAt": data.created_at,
        "ageMs": age,
        "expired": expired,
    }
    print(json.dumps(report, indent=2, ensure_ascii=False))
    return 1 if expired else 0


# ---------------------------------------------------------------------------
# Argument parsing
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Anon Relay CLI")
    subparsers = parser.add_subparsers(dest="command", required=True)

    # serve
    p_serve = subparsers.add_parser("serve", help="Run the relay HTTP server")
    p_serve.add_argument(
        "--host",
        default=settings.host,
        help="Bind address (default: HOST or 0.0.0.0)",
    )
    p_serve.add_argument(
        "--port",
        type=int,
        default=settings.port,
        help="Port (default: PORT or 3000)",
    )
    p_serve.add_argument(
        "--reload",
        action="store_true",
        help="Reload on code changes (development only)",
    )

    # issue-token
    p_issue = subparsers.add_parser(
        "issue-token", help="Sign a session token with the configured secret"
    )
    p_issue.add_argument("session_id", help="Session ID")
    p_issue.add_argument("group_jid", help="Group JID the session is bound to")
    p_issue.add_argument(
        "--created-at",
        type=int,
        default=None,
        help="Creation time in epoch milliseconds (default: now)",
    )

    # inspect-token
    p_inspect = subparsers.add_parser(
        "inspect-token", help="Decode and verify a session token"
    )
    p_inspect.add_argument("token", help="Token string")

    return parser


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    command: str = args.command

    if command == "serve":
        cmd_serve(host=args.host, port=args.port, reload=args.reload)
    elif command == "issue-token":
        try:
            cmd_issue_token(
                session_id=args.session_id,
                group_jid=args.group_jid,
                created_at=args.created_at,
            )
        except ValueError as e:
            parser.error(str(e))
    elif command == "inspect-token":
        return cmd_inspect_token(args.token)
    else:
        parser.error(f"Unknown command: {command}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
