# main.py

"""Command-line entry point for storescrape."""

import argparse
import asyncio
import logging
import sys

from storescrape.config.logging_config import setup_logging
from storescrape.scraping.selectors import FieldKind

logger = logging.getLogger("storescrape.main")


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the CLI."""
    kinds = ", ".join(k.value for k in FieldKind)

    parser = argparse.ArgumentParser(
        prog="storescrape",
        description="Selector-driven product search across configured stores.",
        epilog=f"Field kinds for --suggest: {kinds}",
    )
    parser.add_argument(
        "query",
        nargs="?",
        default=None,
        help="Search query to run against the enabled stores.",
    )
    parser.add_argument(
        "-s",
        "--stores",
        default=None,
        help="Comma-separated store names (default: all enabled).",
    )
    parser.add_argument(
        "-f",
        "--format",
        choices=["json", "table"],
        default="json",
        dest="output_format",
        help="Output format (default: json).",
    )
    parser.add_argument(
        "--export",
        default=None,
        dest="export_path",
        help="Also write the results to this CSV file.",
    )
    parser.add_argument(
        "--product-url",
        default=None,
        dest="product_url",
        help="Scrape a single product page (requires --store).",
    )
    parser.add_argument(
        "--store",
        default=None,
        dest="store_name",
        help="Store profile used with --product-url.",
    )
    parser.add_argument(
        "--list-stores",
        action="store_true",
        default=False,
        dest="list_stores",
        help="List the configured stores.",
    )
    parser.add_argument(
        "--suggest",
        default=None,
        metavar="KIND",
        help="Print common selectors for a field kind.",
    )
    parser.add_argument(
        "--validate",
        action="store_true",
        default=False,
        help="Check every stored profile and its selectors.",
    )
    parser.add_argument(
        "--backup",
        action="store_true",
        default=False,
        help="Back up the stores file.",
    )
    parser.add_argument(
        "--add-store",
        default=None,
        dest="add_store",
        metavar="JSON",
        help="Add a store from inline JSON or @path/to/profile.json.",
    )
    parser.add_argument(
        "--remove-store",
        default=None,
        dest="remove_store",
        metavar="NAME",
        help="Delete a stored profile.",
    )
    parser.add_argument(
        "--enable",
        default=None,
        metavar="NAME",
        help="Enable a stored profile.",
    )
    parser.add_argument(
        "--disable",
        default=None,
        metavar="NAME",
        help="Disable a stored profile.",
    )
    parser.add_argument(
        "--set-selector",
        nargs=3,
        default=None,
        dest="set_selector",
        metavar=("NAME", "KIND", "SELECTOR"),
        help="Replace one selector of a stored profile.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=False,
        help="Echo INFO logs to stderr.",
    )
    return parser


def _dispatch(
    args: argparse.Namespace, parser: argparse.ArgumentParser,
) -> int:
    """Run the command selected by *args* and return its exit code."""
    from storescrape.cli import runner

    if args.list_stores:
        return runner.run_list_stores()
    if args.suggest is not None:
        return runner.run_suggest(args.suggest)
    if args.validate:
        return runner.run_validate()
    if args.backup:
        return runner.run_backup()
    if args.add_store is not None:
        return runner.run_add_store(args.add_store)
    if args.remove_store is not None:
        return runner.run_remove_store(args.remove_store)
    if args.enable is not None:
        return runner.run_set_enabled(args.enable, True)
    if args.disable is not None:
        return runner.run_set_enabled(args.disable, False)
    if args.set_selector is not None:
        name, kind, selector = args.set_selector
        return runner.run_set_selector(name, kind, selector)
    if args.product_url is not None:
        if args.store_name is None:
            parser.error("--product-url requires --store")
        return runner.run_product_scrape(
            args.product_url, args.store_name, args.output_format
        )
    if args.query is None:
        parser.print_help()
        return 2
    return asyncio.run(
        runner.cli_search(
            query=args.query,
            names_csv=args.stores,
            output_format=args.output_format,
            export_path=args.export_path,
        )
    )


def main() -> None:
    """Parse arguments, set up logging and run the chosen command."""
    parser = _build_parser()
    args = parser.parse_args()

    console_level = logging.INFO if args.verbose else logging.WARNING
    log_file = setup_logging(console_level=console_level)
    logger.info("storescrape starting, log file: %s", log_file)

    try:
        exit_code = _dispatch(args, parser)
    except Exception:
        logger.critical("Fatal error", exc_info=True)
        raise
    finally:
        logger.info("storescrape shutting down")
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
