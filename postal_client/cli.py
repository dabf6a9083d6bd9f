"""Entry point that sends an e-mail through Postal and reports on it."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Sequence

from pydantic import ValidationError

from .config import Settings
from .errors import PostalError
from .models import DetailsInterest, Message

logger = logging.getLogger(__name__)

HELP = """\
Sends an email via Postal, then prints the details and deliveries Postal
recorded for every recipient.

POSTAL_ADDRESS and POSTAL_TOKEN must be set (in the environment or a .env
file) to use this application.
"""


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="postal-send",
        description=HELP,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("subject", help="Subject of the e-mail")
    parser.add_argument("body", help="Plain text body of the e-mail")
    parser.add_argument("sender", metavar="from", help="Address for the From header")
    parser.add_argument("to", nargs="+", help="One or more recipient addresses")
    parser.add_argument("--html", help="Optional HTML body")
    parser.add_argument("--tag", help="Tag recorded by Postal for the message")
    parser.add_argument("--reply-to", dest="reply_to", help="Reply-To address")
    return parser


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )


def build_message(args: argparse.Namespace) -> Message:
    message = (
        Message()
        .with_to(args.to)
        .with_from(args.sender)
        .with_subject(args.subject)
        .with_text(args.body)
    )
    if args.html:
        message = message.with_html(args.html)
    if args.tag:
        message = message.with_tag(args.tag)
    if args.reply_to:
        message = message.with_reply_to(args.reply_to)
    return message


def main(argv: Sequence[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = Settings()
    except ValidationError as exc:
        logger.debug("Invalid configuration: %s", exc)
        parser.print_help(sys.stderr)
        raise SystemExit(1) from exc
    configure_logging(settings.log_level)

    try:
        client = settings.client()
        results = client.send(build_message(args))

        for result in results:
            print(f"Message to {result.to}")

            interest = DetailsInterest(result.id).with_details().with_status()
            details = client.get_message_details(interest)
            print("Details")
            print(json.dumps(details, indent=2))

            deliveries = client.get_message_deliveries(result.id)
            print("Deliveries")
            print(json.dumps(deliveries, indent=2))
    except PostalError as exc:
        logger.error("Postal request failed: %s", exc)
        raise SystemExit(f"An error occurred while talking to Postal: {exc}") from exc


if __name__ == "__main__":
    main()
