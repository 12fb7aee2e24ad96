"""Command-line utilities for inspecting gateway authentication."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

from .auth import NonceSource, sign_request
from .canonical import build_canonical_string
from .logging_pipeline import configure_structured_logging
from .nonce import create_signed_nonce
from .webhook import verify_webhook_signature


def _read_stdin() -> str | None:
    """Read a payload from stdin if one is piped in."""
    try:
        if sys.stdin and not sys.stdin.isatty():
            return sys.stdin.read()
    except IOError as e:
        print(f"Error reading stdin: {e}", file=sys.stderr)
    return None


def _load_text(path: str | None) -> str:
    """Load raw text from a file or stdin."""
    if path:
        return Path(path).read_text(encoding="utf-8")
    payload = _read_stdin()
    if payload:
        return payload
    raise ValueError("No input provided. Use --input or pipe data via stdin.")


def _load_raw(path: str | None) -> bytes:
    """Load raw bytes from a file, falling back to stdin text."""
    if path:
        return Path(path).read_bytes()
    return _load_text(None).encode("utf-8")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="iyzipay-auth",
        description="Sign requests and verify signatures for the iyzipay gateway.",
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Emit JSON debug logs to stderr."
    )
    commands = parser.add_subparsers(dest="command", required=True)

    canonical = commands.add_parser(
        "canonical", help="Render a JSON payload as a V1 canonical string."
    )
    canonical.add_argument("--input", "-i", help="Path to a JSON file (default: stdin).")

    sign = commands.add_parser("sign", help="Print an IYZWSv2 authorization header.")
    sign.add_argument("--api-key", required=True)
    sign.add_argument("--secret-key", required=True)
    sign.add_argument("--path", required=True, help="Request path, e.g. /payment/auth.")
    sign.add_argument("--nonce", help="Random key; generated from the clock if omitted.")
    sign.add_argument("--body", default="", help="Exact JSON body string.")

    webhook = commands.add_parser(
        "verify-webhook", help="Verify an x-iyz-signature header against a raw body."
    )
    webhook.add_argument("--secret-key", required=True)
    webhook.add_argument("--signature", required=True)
    webhook.add_argument("--input", "-i", help="Path to the raw body (default: stdin).")

    nonce = commands.add_parser("nonce", help="Create a signed nonce.")
    nonce.add_argument("--secret", required=True)
    nonce.add_argument(
        "--expiry-ms",
        type=int,
        help="Validity window in ms (default: IYZIPAY_NONCE_EXPIRY_MS or 300000).",
    )

    return parser


def _run(args: argparse.Namespace) -> int:
    if args.command == "canonical":
        print(build_canonical_string(json.loads(_load_text(args.input))))
        return 0

    if args.command == "sign":
        nonce = args.nonce or NonceSource()()
        header = asyncio.run(
            sign_request(args.api_key, args.secret_key, args.path, nonce, args.body)
        )
        print(json.dumps({"randomKey": nonce, "authorization": header}))
        return 0

    if args.command == "verify-webhook":
        body = _load_raw(args.input)
        valid = asyncio.run(
            verify_webhook_signature(args.secret_key, body, args.signature)
        )
        print(json.dumps({"valid": valid}))
        return 0 if valid else 1

    signed = asyncio.run(create_signed_nonce(args.secret, args.expiry_ms))
    print(json.dumps(signed.to_dict(), separators=(",", ":")))
    return 0


def main(argv: list[str] | None = None) -> int:
    """Run the ``iyzipay-auth`` command line."""
    parser = _build_parser()
    try:
        args = parser.parse_args(argv)
    except SystemExit as exc:  # pragma: no cover - controlled via tests
        exit_code = int(exc.code) if isinstance(exc.code, int) else 1
        return 0 if exit_code == 0 else 1

    if args.verbose:
        configure_structured_logging(level=logging.DEBUG, stream=sys.stderr)

    try:
        return _run(args)
    except Exception as exc:
        print(str(exc), file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
