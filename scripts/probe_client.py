#!/usr/bin/env python3
"""Live check of a mini-program AppID/secret pair.

Credentials come from ``MINAPP_APP_ID`` / ``MINAPP_SECRET`` (see
``MinappConfig.from_env``).

Default behavior:
1) obtain an access token of the configured kind,
2) read it again to confirm it is served from cache,
3) optionally exchange a login code (``--code``) and decrypt a payload
   (``--encrypted-data`` + ``--iv``).
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any

_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from pyminapp import MinappClient, MinappConfig, MinappError, TokenKind  # noqa: E402


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__, formatter_class=argparse.RawDescriptionHelpFormatter)
    parser.add_argument("--kind", choices=[k.value for k in TokenKind], help="token kind (default: from config)")
    parser.add_argument("--force-refresh", action="store_true", help="rotate the token server-side")
    parser.add_argument("--code", help="wx.login code to exchange")
    parser.add_argument("--encrypted-data", help="encryptedData to decrypt with the exchanged session")
    parser.add_argument("--iv", help="iv matching --encrypted-data")
    parser.add_argument("--show-token", action="store_true", help="print the token value instead of masking it")
    parser.add_argument("-v", "--verbose", action="store_true", help="enable DEBUG logging")
    return parser.parse_args(argv)


async def _run(args: argparse.Namespace) -> dict[str, Any]:
    config = MinappConfig.from_env()
    kind = TokenKind(args.kind) if args.kind else None
    report: dict[str, Any] = {"app_id": config.app_id}

    async with MinappClient(config) as client:
        token = await client.get_access_token(kind, force_refresh=args.force_refresh)
        again = await client.get_access_token(kind)
        report["token"] = {
            "kind": token.kind.value,
            "value": token.value if args.show_token else f"{token.value[:6]}…",
            "expires_at": token.expires_at.isoformat(),
            "served_from_cache": again is token,
        }

        if args.code:
            session = await client.login(args.code)
            report["session"] = {"openid": session.openid, "unionid": session.unionid}
            if args.encrypted_data and args.iv:
                payload = client.decrypt(session, args.encrypted_data, args.iv)
                report["decrypted"] = payload.data

    return report


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    try:
        report = asyncio.run(_run(args))
    except MinappError as exc:
        print(f"error: {type(exc).__name__}: {exc}", file=sys.stderr)
        return 1
    print(json.dumps(report, indent=2, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
