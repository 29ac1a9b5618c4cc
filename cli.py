# Bundlediff v1.0.0
#!/usr/bin/env python3
"""
Bundlediff CLI

Command-line interface for comparing the manifest headers of two bundles.
"""
import argparse
import logging
import sys
from typing import Optional

from config import settings

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_LOAD_FAILED = 1
EXIT_MALFORMED_HEADER = 2


def parse_header_list(value: Optional[str]) -> set[str]:
    """Split a comma-separated header list, dropping blanks."""
    if not value:
        return set()
    return {name.strip() for name in value.split(",") if name.strip()}


def compare_bundles(local: str, baseline: str, ignored_headers: set[str]) -> int:
    """Compare the manifests of two bundles and print differences."""
    from core import compare_manifests, DescriptorNotFoundError, DescriptorLoadError, MalformedHeaderError
    from services import DescriptorLoader, render_report, summarize

    loader = DescriptorLoader()
    try:
        local_headers = loader.load_main_section(local)
        baseline_headers = loader.load_main_section(baseline)
    except DescriptorNotFoundError as e:
        print(f"No artifact found: {e}", file=sys.stderr)
        return EXIT_LOAD_FAILED
    except DescriptorLoadError as e:
        print(str(e), file=sys.stderr)
        return EXIT_LOAD_FAILED

    try:
        report = compare_manifests(local_headers, baseline_headers, ignored_headers)
    except MalformedHeaderError as e:
        side = "local" if e.side == "A" else "baseline"
        print(f"Cannot compare {side} manifest: {e}", file=sys.stderr)
        return EXIT_MALFORMED_HEADER

    print(render_report(report))
    logger.info(summarize(report))
    return EXIT_OK


def show_bundle(locator: str, header: Optional[str] = None) -> int:
    """Print the canonical clauses of every header in a bundle's manifest."""
    from core import parse_header, DescriptorNotFoundError, DescriptorLoadError, MalformedHeaderError
    from services import load_main_section

    try:
        headers = load_main_section(locator)
    except DescriptorNotFoundError as e:
        print(f"No artifact found: {e}", file=sys.stderr)
        return EXIT_LOAD_FAILED
    except DescriptorLoadError as e:
        print(str(e), file=sys.stderr)
        return EXIT_LOAD_FAILED

    names = [header] if header else sorted(headers)
    for name in names:
        if name not in headers:
            print(f"Header not present: {name}", file=sys.stderr)
            return EXIT_LOAD_FAILED
        try:
            parsed = parse_header(name, headers[name])
        except MalformedHeaderError as e:
            print(str(e), file=sys.stderr)
            return EXIT_MALFORMED_HEADER

        print(name)
        for clause in parsed:
            print(f"  {clause.canonical_key()}")
    return EXIT_OK


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        description=f"{settings.APP_NAME} - compare bundle manifest headers",
        formatter_class=argparse.RawDescriptionHelpFormatter
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable info logging")

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # compare
    compare_parser = subparsers.add_parser("compare", help="Compare the manifests of two bundles")
    compare_parser.add_argument("local", help="Local bundle: manifest file, directory, jar or URL")
    compare_parser.add_argument("baseline", help="Baseline bundle: manifest file, directory, jar or URL")
    compare_parser.add_argument(
        "--ignored-headers",
        default="",
        help="Comma-separated header names to leave out of the comparison"
    )

    # show
    show_parser = subparsers.add_parser("show", help="Print the normalized headers of a bundle")
    show_parser.add_argument("locator", help="Manifest file, directory, jar or URL")
    show_parser.add_argument("--header", help="Only print this header")

    args = parser.parse_args(argv)

    level = "INFO" if args.verbose and not settings.DEBUG else settings.log_level
    logging.basicConfig(
        level=getattr(logging, level, logging.WARNING),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    if not args.command:
        parser.print_help()
        return EXIT_OK

    if args.command == "compare":
        ignored = settings.ignored_headers | parse_header_list(args.ignored_headers)
        return compare_bundles(args.local, args.baseline, ignored)
    elif args.command == "show":
        return show_bundle(args.locator, args.header)

    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
