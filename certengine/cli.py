#!/usr/bin/env python3
"""CLI for certificate engine management tasks.

Usage:
    certengine <command>
    python -m certengine.cli <command>

Commands:
    init-db                 Create missing database tables
    generate STUDENT_ID     Generate and store a student's certificate
    download STUDENT_ID     Write a stored certificate to disk
    status STUDENT_ID       Show whether a certificate has been generated
    render-sample           Render a demo certificate (no database)
"""

import argparse
import asyncio
import sys
from collections.abc import Awaitable, Callable
from datetime import date
from pathlib import Path

from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError

from certengine.core.config import get_settings
from certengine.core.database import (
    check_db_connection,
    create_engine,
    create_session_maker,
    dispose_engine,
    init_db,
)
from certengine.core.logger import (
    bind_contextvars,
    clear_contextvars,
    configure_logging,
    get_logger,
)
from certengine.errors import CertificateError
from certengine.schemas import StudentRecord
from certengine.services.certificates_service import (
    CertificateGenerator,
    build_certificate_generator,
    build_certificate_renderer,
)

logger = get_logger(__name__)


async def _with_generator[T](
    action: Callable[[CertificateGenerator], Awaitable[T]],
) -> T:
    settings = get_settings()
    engine = create_engine(settings)
    try:
        generator = build_certificate_generator(settings, create_session_maker(engine))
        return await action(generator)
    finally:
        await dispose_engine(engine)


def safe_filename(name: str) -> str:
    """Flatten a suggested download name so it stays in the working directory."""
    return name.replace("/", "_").replace("\\", "_")


def cmd_init_db() -> int:
    """Create missing database tables."""

    async def _run() -> None:
        engine = create_engine()
        try:
            await check_db_connection(engine)
            await init_db(engine)
        finally:
            await dispose_engine(engine)

    asyncio.run(_run())
    return 0


def cmd_generate(student_id: int) -> int:
    """Generate and store a student's certificate."""
    result = asyncio.run(_with_generator(lambda g: g.generate(student_id)))
    print(
        f"Generated certificate {result.certificate_id} for "
        f"{result.student_name} ({result.byte_size} bytes)"
    )
    return 0


def cmd_download(student_id: int, output: Path | None) -> int:
    """Write a stored certificate to disk."""
    download = asyncio.run(_with_generator(lambda g: g.download(student_id)))
    path = output or Path(safe_filename(download.filename))
    path.write_bytes(download.content)
    print(f"Saved {download.media_type} to {path}")
    return 0


def cmd_status(student_id: int) -> int:
    """Show whether a certificate has been generated."""
    status = asyncio.run(_with_generator(lambda g: g.status(student_id)))
    print(
        f"Student {status.student_id} ({status.student_name or '-'}): "
        f"{status.state.value}, eligible={status.eligible}"
    )
    return 0


def cmd_render_sample(output: Path) -> int:
    """Render a demo certificate locally (no database)."""
    renderer = build_certificate_renderer(get_settings())
    record = StudentRecord(
        student_id=0,
        name="Asha Rao",
        certificate_id="CERT-042",
        course_name="Full Stack Development",
        company_name="Addwise Tech Innovations",
        start_date=date(2025, 5, 20),
        end_date=date(2025, 7, 20),
    )
    output.write_bytes(renderer.render(record))
    print(f"PDF saved to {output}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="certengine",
        description="Certificate generation engine CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    subparsers.add_parser("init-db", help="Create missing database tables")

    generate = subparsers.add_parser(
        "generate", help="Generate and store a student's certificate"
    )
    generate.add_argument("student_id", type=int)

    download = subparsers.add_parser(
        "download", help="Write a stored certificate to disk"
    )
    download.add_argument("student_id", type=int)
    download.add_argument(
        "-o",
        "--output",
        type=Path,
        default=None,
        help="Output path (default: {name}_Certificate_{id}.pdf)",
    )

    status = subparsers.add_parser(
        "status", help="Show whether a certificate has been generated"
    )
    status.add_argument("student_id", type=int)

    sample = subparsers.add_parser(
        "render-sample", help="Render a demo certificate (no database)"
    )
    sample.add_argument(
        "-o", "--output", type=Path, default=Path("sample_certificate.pdf")
    )

    return parser


def main(argv: list[str] | None = None) -> int:
    configure_logging()
    parser = build_parser()
    args = parser.parse_args(argv)
    clear_contextvars()
    bind_contextvars(command=args.command)

    try:
        if args.command == "init-db":
            return cmd_init_db()
        elif args.command == "generate":
            return cmd_generate(args.student_id)
        elif args.command == "download":
            return cmd_download(args.student_id, args.output)
        elif args.command == "status":
            return cmd_status(args.student_id)
        elif args.command == "render-sample":
            return cmd_render_sample(args.output)
        else:
            parser.print_help()
            return 1
    except CertificateError as e:
        logger.error("cli.command.failed", error=str(e))
        return 1
    except (ValidationError, SQLAlchemyError, TimeoutError, OSError) as e:
        logger.error("cli.command.failed", error=str(e), error_type=type(e).__name__)
        return 1


if __name__ == "__main__":
    sys.exit(main())
