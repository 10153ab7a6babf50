# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""restext CLI: resolve a URL through inferred redirects."""

from __future__ import annotations

import argparse
import json
import sys
from typing import Any

from ..config import HttpSettings, load_http_settings
from ..errors import ErrorCategory, error_category_to_reason
from ..http import HttpResponse, create_default_http_client
from ..log import setup_logging
from ..runtime import RedirectResolver


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Follow header and query-string redirects to a final URL")
    parser.add_argument("url", help="Starting URL")
    parser.add_argument(
        "--json",
        action="store_true",
        help="Output JSON instead of human-friendly summary",
    )
    parser.add_argument(
        "--insecure",
        action="store_true",
        help="Accept any TLS certificate (self-signed or misconfigured targets)",
    )
    parser.add_argument(
        "--no-follow",
        action="store_true",
        help="Execute once with browser headers and report the response as-is",
    )
    parser.add_argument("--log-level", default=None, help="Logging level (default: RESTEXT_LOG_LEVEL or WARNING)")
    return parser


def _print_json(data: dict[str, Any]) -> None:
    json.dump(data, sys.stdout, indent=2, sort_keys=True)
    sys.stdout.write("\n")


def _pretty_print(response: HttpResponse) -> None:
    chain = response.meta.get("redirect_chain") or []
    print(f"[restext] Final URL: {response.url or '-'}")
    print(f"Status: {response.status_code or 'none'}")
    if chain:
        print(f"Redirects ({len(chain)}):")
        for hop in chain:
            print(f"- {hop}")
    if response.error_message:
        category = ErrorCategory(response.error_category) if response.error_category else None
        reason = error_category_to_reason(category)
        print(f"Error: {response.error_message}" + (f" ({reason})" if reason else ""))


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.log_level)

    settings: HttpSettings = load_http_settings()
    http_client = create_default_http_client(settings, insecure_skip_verify=args.insecure or None)

    with RedirectResolver(http_client=http_client, settings=settings) as resolver:
        if args.no_follow:
            response = resolver.fetch(args.url)
        else:
            response = resolver.resolve(args.url)

    if args.json:
        _print_json(response.to_dict())
    else:
        _pretty_print(response)

    return 0 if response.has_status else 1


if __name__ == "__main__":
    raise SystemExit(main())
