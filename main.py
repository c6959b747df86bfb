import argparse
import logging
import os
import sys

from tqdm import tqdm

from textexporter.config import LOG_LEVELS, SEND_MODE_POLICIES, ConverterSettings
from textexporter.errors import TextExporterError
from textexporter.exception_handler import ErrorHandler
from textexporter.orchestration import ConversionPipeline
from textexporter.readers import available_readers
from textexporter.writers import available_writers


logger = logging.getLogger("textexporter")


def main(argv=None) -> None:
    settings = ConverterSettings.from_env()

    parser = argparse.ArgumentParser(
        description="Convert a text-expansion snippet library from one format to another"
    )
    parser.add_argument(
        "source",
        help="Source settings folder or index descriptor file",
    )
    parser.add_argument(
        "target",
        help="Target folder to write the converted library into",
    )
    parser.add_argument(
        "--from",
        dest="source_format",
        choices=available_readers(),
        default=settings.source_format,
        help=f"Source library format (default: {settings.source_format})",
    )
    parser.add_argument(
        "--to",
        dest="target_format",
        choices=available_writers(),
        default=settings.target_format,
        help=f"Target library format (default: {settings.target_format})",
    )
    parser.add_argument(
        "--lenient",
        action="store_true",
        help="Skip groups that fail to load instead of aborting (default: strict)",
    )
    parser.add_argument(
        "--send-mode",
        choices=SEND_MODE_POLICIES,
        default=settings.send_mode,
        help="compat pastes every snippet; distinct types keyboard snippets "
        f"(default: {settings.send_mode})",
    )
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=LOG_LEVELS,
        default=settings.log_level,
        help=f"Logging verbosity (default: {settings.log_level})",
    )
    parser.add_argument(
        "--no-progress",
        action="store_true",
        help="Disable the progress bar",
    )

    args = parser.parse_args(argv)

    settings.source_format = args.source_format
    settings.target_format = args.target_format
    settings.strict = settings.strict and not args.lenient
    settings.send_mode = args.send_mode
    settings.log_level = args.log_level

    ErrorHandler.setup_logging(settings.log_level)

    if not os.path.exists(args.source):
        print(f"Error: Path does not exist: {args.source}", file=sys.stderr)
        sys.exit(1)

    try:
        pipeline = ConversionPipeline.from_settings(settings, show_progress=not args.no_progress)
    except KeyError as exc:
        print(f"Error: {exc.args[0]}", file=sys.stderr)
        sys.exit(1)

    try:
        stats = pipeline.run(args.source, args.target)
    except KeyboardInterrupt:
        print("\n⚠️ Conversion interrupted", file=sys.stderr)
        sys.exit(1)
    except TextExporterError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)
    except Exception:
        logger.exception("Fatal error during conversion")
        print("\n❌ Fatal error occurred. See log for details.", file=sys.stderr)
        sys.exit(1)

    tqdm.write(
        f"✅ Converted {stats.written} snippets in {stats.groups} groups to: {args.target}"
    )
    if stats.skipped:
        tqdm.write(f"ℹ️  Skipped {stats.skipped} snippets with no {settings.target_format} equivalent")

    report = pipeline.error_handler.format_error_report()
    if report:
        tqdm.write(report)
        sys.exit(1)


if __name__ == "__main__":
    main()
