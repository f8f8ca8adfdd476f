from __future__ import annotations

"""
idpack, a Python client for the IDpack in the Cloud producer API.
Copyright (C) 2025  Theori Inc.

This program is free software: you can redistribute it and/or modify
it under the terms of the GNU Affero General Public License as published
by the Free Software Foundation, either version 3 of the License, or
(at your option) any later version.

This program is distributed in the hope that it will be useful,
but WITHOUT ANY WARRANTY; without even the implied warranty of
MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
GNU Affero General Public License for more details.

You should have received a copy of the GNU Affero General Public License
along with this program.  If not, see <https://www.gnu.org/licenses/>.
"""

"""idpack CLI."""

import argparse
import json
import sys
from typing import Any

from ..config import ClientSettings, load_client_settings
from ..envelope import Exchange
from ..log import setup_logging
from ..runtime import IDpack

# Subcommand -> (operation, arguments taken from the parsed namespace)
_COMMANDS: dict[str, tuple[str, tuple[str, ...]]] = {
    "get-record": ("get_record", ("primary_key", "photo_id", "photo_id_format", "badge_preview", "badge_preview_format", "side")),
    "get-all-records": ("get_all_records", ()),
    "get-photo-id": ("get_photo_id", ("primary_key", "photo_id_format")),
    "get-badge-preview": ("get_badge_preview", ("primary_key", "badge_preview_format", "side")),
    "insert-record": ("insert_record", ("data",)),
    "update-record": ("update_record", ("primary_key", "data")),
    "delete-record": ("delete_record", ("primary_key",)),
    "set-active": ("set_record_active", ("primary_key",)),
    "set-not-active": ("set_record_not_active", ("primary_key",)),
    "set-trash": ("set_record_trash", ("primary_key",)),
    "set-not-trash": ("set_record_not_trash", ("primary_key",)),
}


def _field_pair(raw: str) -> tuple[str, str]:
    field, sep, value = raw.partition("=")
    if not sep or not field.strip():
        raise argparse.ArgumentTypeError(f"expected FIELD=VALUE, got {raw!r}")
    return field.strip(), value


def _add_primary_key(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--primary-key",
        "-k",
        type=_field_pair,
        action="append",
        default=[],
        metavar="FIELD=VALUE",
        help="Record primary key (exactly one)",
    )


def _add_data(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--data",
        "-d",
        type=_field_pair,
        action="append",
        default=[],
        metavar="FIELD=VALUE",
        help="Record field to write (repeatable)",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="IDpack in the Cloud producer API client. Credentials are read from IDPACK_USERNAME, "
        "IDPACK_PASSWORD, IDPACK_USER_SECRET_KEY and IDPACK_PROJECT_SECRET_KEY.",
    )
    parser.add_argument("--output-format", help="json, xml or base64 (photo ID / badge preview only)")
    parser.add_argument("--no-auth", action="store_true", help="Do not send HTTP Basic credentials")
    parser.add_argument("--base-url", help="Override the API base URL")
    parser.add_argument(
        "--ignore-ssl-errors",
        action="store_true",
        help="Skip TLS verification (only for lab/self-signed endpoints)",
    )
    parser.add_argument("--pretty", action="store_true", help="Indent JSON responses")
    parser.add_argument("--log-level", help="Logging level (default from IDPACK_LOG_LEVEL or WARNING)")

    sub = parser.add_subparsers(dest="command", required=True)
    for name, (_, fields) in _COMMANDS.items():
        cmd = sub.add_parser(name)
        if "primary_key" in fields:
            _add_primary_key(cmd)
        if "data" in fields:
            _add_data(cmd)
        if name == "get-record":
            cmd.add_argument("--photo-id", action="store_true", help="Embed the photo ID")
            cmd.add_argument("--badge-preview", action="store_true", help="Embed the badge preview")
        if "photo_id_format" in fields:
            cmd.add_argument("--photo-id-format", help="jpeg, png or webp")
        if "badge_preview_format" in fields:
            cmd.add_argument("--badge-preview-format", help="jpeg, png, webp or pdf")
        if "side" in fields:
            cmd.add_argument("--side", type=int, default=0, choices=(0, 1, 2), help="0 duplex, 1 front, 2 back")
    return parser


def _operation_args(args: argparse.Namespace) -> tuple[str, list[Any]]:
    operation, fields = _COMMANDS[args.command]
    values: list[Any] = []
    for name in fields:
        value = getattr(args, name)
        if name in {"primary_key", "data"}:
            value = dict(value)
        values.append(value)
    return operation, values


def _print_envelope(exchange: Exchange, *, pretty: bool) -> None:
    text = exchange.envelope
    if pretty:
        try:
            text = json.dumps(json.loads(text), indent=2, sort_keys=True)
        except ValueError:
            pass
    sys.stdout.write(text)
    sys.stdout.write("\n")


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.log_level)

    settings: ClientSettings = load_client_settings()
    if args.ignore_ssl_errors:
        settings.verify_ssl = False
    if args.base_url:
        settings.base_url = args.base_url.rstrip("/")

    with IDpack.from_env(settings=settings) as client:
        if args.no_auth:
            client.set_api_authorization("")
        if args.output_format and not client.set_api_output_format(args.output_format):
            parser.error(f"unsupported output format: {args.output_format}")
        operation, values = _operation_args(args)
        exchange = client.call(operation, *values)

    _print_envelope(exchange, pretty=args.pretty)
    return 0 if exchange.ok else 1


if __name__ == "__main__":
    raise SystemExit(main())
