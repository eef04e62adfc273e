"""Command-line front end.

Usage::

    python -m inbox_pdf list [--from S] [--to R] [--after MMDDYYYY] [--before MMDDYYYY] [--id ID]
    python -m inbox_pdf ids  [same filters]
    python -m inbox_pdf pdf  (--id ID | --from S | --after D --before D) [--out DIR]

The OAuth bearer token is read from ``--token`` or ``INBOX_PDF_TOKEN``.
"""

from __future__ import annotations

import argparse
import asyncio
import contextlib
import sys
from collections.abc import Awaitable
from typing import assert_never

import structlog

from .config import InboxPdfConfig
from .engine import get_engine, install_shutdown_hook
from .errors import ErrorKind, InboxPdfError, ValidationError
from .export import (
    ExportedDocument,
    export_email,
    export_emails_from,
    export_emails_in_range,
)
from .logging import setup_logging_from_config
from .models import FilterSet
from .renderer import DocumentRenderer
from .service import MailQueryService

logger = structlog.get_logger()

EXIT_EMPTY = 1
EXIT_INTERRUPTED = 130


def exit_code_for(error: InboxPdfError) -> int:
    """Map an error to the process exit code."""
    match error.kind:
        case ErrorKind.VALIDATION:
            return 2
        case ErrorKind.NOT_FOUND:
            return 3
        case ErrorKind.UPSTREAM:
            return 4
        case ErrorKind.RENDER:
            return 5
        case _:
            assert_never(error.kind)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="inbox_pdf", description=__doc__.splitlines()[0])
    parser.add_argument("--token", help="OAuth bearer token (default: $INBOX_PDF_TOKEN)")
    commands = parser.add_subparsers(dest="command", required=True)

    for name, help_text in (
        ("list", "print matching emails as JSON lines"),
        ("ids", "print matching email ids"),
        ("pdf", "render matching emails to a PDF file"),
    ):
        sub = commands.add_parser(name, help=help_text)
        sub.add_argument("--from", dest="sender", help="sender address")
        sub.add_argument("--after", help="start date, MMDDYYYY")
        sub.add_argument("--before", help="end date, MMDDYYYY")
        sub.add_argument("--id", dest="email_id", help="a single email id")
        if name == "pdf":
            sub.add_argument("--out", default=".", help="output directory (default: .)")
        else:
            sub.add_argument("--to", dest="recipient", help="recipient address")

    return parser


def _filters(args: argparse.Namespace) -> FilterSet:
    return FilterSet.from_params(
        sender=args.sender,
        recipient=getattr(args, "recipient", None),
        after=args.after,
        before=args.before,
        id=args.email_id,
    )


async def _export(
    args: argparse.Namespace,
    service: MailQueryService,
    renderer: DocumentRenderer,
    token: str,
) -> ExportedDocument:
    if args.email_id:
        return await export_email(renderer, token, args.email_id)
    if args.sender:
        return await export_emails_from(service, renderer, token, args.sender)
    if args.after or args.before:
        return await export_emails_in_range(service, renderer, token, args.after, args.before)
    raise ValidationError("pdf needs --id, --from, or --after/--before")


async def _until_stopped(
    work: Awaitable[ExportedDocument],
    stop: asyncio.Event,
) -> ExportedDocument | None:
    """Await *work* unless *stop* is set first, in which case cancel it."""
    task = asyncio.ensure_future(work)
    waiter = asyncio.ensure_future(stop.wait())
    try:
        await asyncio.wait({task, waiter}, return_when=asyncio.FIRST_COMPLETED)
    except asyncio.CancelledError:
        task.cancel()
        raise
    finally:
        waiter.cancel()
    if task.done():
        return task.result()
    task.cancel()
    with contextlib.suppress(asyncio.CancelledError):
        await task
    return None


async def run(args: argparse.Namespace, token: str, config: InboxPdfConfig) -> int:
    async with MailQueryService(config.gmail) as service:
        if args.command == "list":
            for email in await service.list_emails(token, _filters(args)):
                print(email.model_dump_json(by_alias=True))
            return 0

        if args.command == "ids":
            for email_id in await service.list_email_ids(token, _filters(args)):
                print(email_id)
            return 0

        engine = get_engine(config.renderer)
        stop = asyncio.Event()
        install_shutdown_hook(engine, stop)
        try:
            document = await _until_stopped(
                _export(args, service, DocumentRenderer(service, engine), token), stop
            )
        finally:
            await engine.shutdown()

        if document is None:
            print("Interrupted", file=sys.stderr)
            return EXIT_INTERRUPTED

        if document.is_empty:
            print("No emails to render", file=sys.stderr)
            return EXIT_EMPTY
        print(document.write_to(args.out))
        return 0


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    config = InboxPdfConfig()
    setup_logging_from_config(config.logging)

    token = args.token or (config.token.get_secret_value() if config.token else None)
    if not token:
        print("A token is required (--token or INBOX_PDF_TOKEN)", file=sys.stderr)
        return exit_code_for(ValidationError("missing token"))

    try:
        return asyncio.run(run(args, token, config))
    except InboxPdfError as exc:
        logger.error("command_failed", command=args.command, kind=exc.kind.value, error=exc.message)
        print(f"error: {exc.message}", file=sys.stderr)
        return exit_code_for(exc)
