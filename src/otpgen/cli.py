"""Command-line interface for otpgen.

Prints the current token for a key URI. With ``--watch`` a TOTP token is
printed again every time it expires.
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
import time
from typing import Callable, Optional, TextIO

from . import new_engine
from .hotp import HOTP
from .keyuri import KeyURI
from .totp import TOTP

logger = logging.getLogger(__name__)

URI_ENV = "OTPGEN_URI"
CURSOR_UP = "\033[1A"


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="otpgen", description="Display one-time passwords for an otpauth:// key URI.")
    parser.add_argument(
        "--uri",
        default=os.environ.get(URI_ENV),
        help="Key URI (required; defaults to ${}).".format(URI_ENV),
    )
    parser.add_argument(
        "--watch",
        action="store_true",
        help="If specified, display the token each time it expires.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging on stderr.")
    return parser


def _write_token(token: str, out: TextIO) -> None:
    # On a terminal, move the cursor back up so the next token overwrites this one
    if out.isatty():
        out.write("Token: {}\n{}".format(token, CURSOR_UP))
    else:
        out.write("Token: {}\n".format(token))
    out.flush()


def display_token(
    totp: TOTP,
    watch: bool,
    out: Optional[TextIO] = None,
    clock: Optional[Callable[[], float]] = None,
    sleep: Optional[Callable[[float], None]] = None,
) -> None:
    out = out or sys.stdout
    clock = clock or time.time
    sleep = sleep or time.sleep
    while True:
        now = clock()
        _write_token(totp.generate(now), out)
        if not watch:
            return
        delay = totp.expires(now).timestamp() - now + 1
        logger.debug("next token in %.1f seconds", delay)
        sleep(delay)


def main(argv: Optional[list[str]] = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    if not args.uri:
        print("uri flag is required", file=sys.stderr)
        return 1

    try:
        engine = new_engine(KeyURI.parse(args.uri))
        if isinstance(engine, HOTP):
            if args.watch:
                raise ValueError("--watch is only supported for totp key uris")
            _write_token(engine.generate(engine.counter), sys.stdout)
            return 0
        display_token(engine, args.watch, out=sys.stdout)
    except ValueError as exc:
        print("Error: {}".format(exc), file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        return 0
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
