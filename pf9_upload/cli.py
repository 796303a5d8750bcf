import argparse
import logging
import sys
from collections.abc import Sequence

from pf9_upload import __version__
from pf9_upload.core.config import Settings, get_settings
from pf9_upload.core.exceptions import ExitCode, UploadError
from pf9_upload.core.logging import YELLOW, RESET, configure_logging, use_color
from pf9_upload.schemas import UploadResult
from pf9_upload.services.uploader import UploadService

logger = logging.getLogger("pf9_upload.cli")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pf9-upload",
        description=(
            "Upload one file under the storage prefix your upload token is "
            "authorized for, using a short-lived signed URL."
        ),
    )
    parser.add_argument("token", metavar="TOKEN", help="upload token issued to the customer")
    parser.add_argument("ticket", metavar="TICKET", help="ticket or case identifier")
    parser.add_argument("file", metavar="FILE", help="path of the file to upload")
    parser.add_argument("-v", "--verbose", action="store_true", help="log request details")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


OPTION_STRINGS = frozenset({"-h", "--help", "-v", "--verbose", "--version"})


def split_args(argv: Sequence[str]) -> list[str]:
    """Put known flags first and everything else after a ``--`` separator.

    Tokens are opaque and may start with a dash, so only exact flag strings
    are read as options; the rest are always positionals.
    """
    options: list[str] = []
    positionals: list[str] = []
    rest = iter(argv)
    for arg in rest:
        if arg == "--":
            positionals.extend(rest)
            break
        (options if arg in OPTION_STRINGS else positionals).append(arg)
    return [*options, "--", *positionals]


def report(result: UploadResult, stream=None) -> None:
    stream = stream or sys.stdout
    color = use_color(stream)

    def highlight(value: str) -> str:
        return f"{YELLOW}{value}{RESET}" if color else value

    print(f"File Path: {highlight(result.object_key)}", file=stream)
    if result.customer_id:
        print(f"Customer: {highlight(result.customer_id)}", file=stream)


def report_error(error: UploadError) -> None:
    logger.error(error.message)
    if error.detail:
        print(f"{error.detail_label}:", file=sys.stderr)
        print(error.detail.rstrip("\n"), file=sys.stderr)


def main(
    argv: Sequence[str] | None = None,
    settings: Settings | None = None,
    service: UploadService | None = None,
) -> int:
    if argv is None:
        argv = sys.argv[1:]
    args = build_parser().parse_args(split_args(argv))
    configure_logging(verbose=args.verbose)

    try:
        if service is None:
            with UploadService(settings or get_settings()) as owned:
                result = owned.run(args.token, args.ticket, args.file)
        else:
            result = service.run(args.token, args.ticket, args.file)
    except UploadError as exc:
        report_error(exc)
        return int(exc.exit_code)
    except KeyboardInterrupt:
        logger.error("interrupted")
        return int(ExitCode.INTERRUPTED)

    report(result)
    return int(ExitCode.OK)
