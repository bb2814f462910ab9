"""dirindex entry point.

Changes:
  - 2026-10-17: Added --mount and --follow-symlink.
  - 2026-10-16: Added --template for single-file templates.
  - 2026-10-15: Rich logging for console output.
"""

import argparse
import logging
from importlib.metadata import version as get_version

from pydantic import ValidationError

from dirindex.config import Settings
from dirindex.logging_setup import setup_logging

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="dirindex",
        description="Serve a directory over HTTP with templated index pages",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  dirindex                           Serve the current directory on :8888
  dirindex ~/public -p 9000          Serve ~/public on port 9000
  dirindex --templates ./tpl         Use ./tpl/index.html as the index page
  dirindex --hide-hidden             Leave dotfiles out of listings
  dirindex --mount /files            Serve under the /files/ prefix
""",
    )

    parser.add_argument(
        "root",
        nargs="?",
        default=None,
        help="Document root directory (default: current directory)",
    )
    parser.add_argument(
        "--host",
        type=str,
        default=None,
        help="Host to bind (default: 127.0.0.1)",
    )
    parser.add_argument(
        "--port",
        "-p",
        type=int,
        default=None,
        help="Port to bind (default: 8888)",
    )
    template_group = parser.add_mutually_exclusive_group()
    template_group.add_argument(
        "--templates",
        default=None,
        help="Template directory containing index.html",
    )
    template_group.add_argument(
        "--template",
        default=None,
        help="Single template file used as the index page",
    )
    parser.add_argument(
        "--mount",
        default=None,
        help="URL prefix to serve the root under (default: /)",
    )
    parser.add_argument(
        "--hide-hidden",
        action="store_true",
        default=None,
        help="Hide dotfiles from directory listings",
    )
    parser.add_argument(
        "--follow-symlink",
        action="store_true",
        default=None,
        help="Serve files behind symlinks that point outside the root",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Log level (default: INFO)",
    )
    parser.add_argument(
        "--version",
        "-v",
        action="version",
        version=f"%(prog)s {get_version('dirindex')}",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    """Main entry point."""
    args = build_parser().parse_args(argv)

    try:
        settings = Settings.load(
            root=args.root,
            host=args.host,
            port=args.port,
            templates_dir=args.templates,
            template_file=args.template,
            mount_path=args.mount,
            hide_hidden=args.hide_hidden,
            follow_symlink=args.follow_symlink,
            log_level=args.log_level,
        )
    except ValidationError as exc:
        raise SystemExit(f"Invalid configuration:\n{exc}") from exc

    setup_logging(level=settings.log_level)

    if not settings.root.is_dir():
        raise SystemExit(f"Not a directory: {settings.root}")

    from dirindex.serve import run_server

    try:
        run_server(settings)
    except KeyboardInterrupt:
        logger.info("dirindex stopped.")


if __name__ == "__main__":
    main()
