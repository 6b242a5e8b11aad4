"""Command line front end: check a markup file (or stdin) for select accessibility."""
import argparse
import logging
import sys
from pathlib import Path
from .config import UnknownProfileError, get_options, default_profile_name, profile_names
from .checker.analyzer import check_markup
from .checker.markup import EmptyMarkupError, MarkupParseError
from .models import CATEGORY_ORDER
from .reports.html_report import render_report

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_PROBLEMS = 1
EXIT_INPUT_ERROR = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="selectcheck",
        description="Check <select> markup for accessible naming and structure.",
    )
    parser.add_argument("file", nargs="?", help="markup file to check (default: stdin)")
    parser.add_argument("--profile", choices=sorted(profile_names()), default=None,
                        help="analyzer profile (default: SELECTCHECK_PROFILE or strict)")
    parser.add_argument("--html", action="store_true", help="print the rendered HTML report")
    parser.add_argument("--log-level", default="WARNING", help="logging level (default: WARNING)")
    return parser


def format_text(result) -> str:
    lines = []
    for category in CATEGORY_ORDER:
        items = result.findings.get(category) or []
        if not items:
            continue
        lines.append("[{}] {}".format(category.value.upper(), len(items)))
        for f in items:
            lines.append("  - {}".format(f.message))
    for record in result.element_records:
        label = record.resolved_label
        lines.append("Select #{}: label={} text={!r}".format(
            record.index, label.mechanism.value, label.text))
    return "\n".join(lines)


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level.upper(), logging.WARNING))

    try:
        options = get_options(args.profile or default_profile_name())
    except UnknownProfileError as e:
        print("Unknown profile: {}".format(e), file=sys.stderr)
        return EXIT_INPUT_ERROR

    if args.file:
        try:
            raw = Path(args.file).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            print("Cannot read {}: {}".format(args.file, e), file=sys.stderr)
            return EXIT_INPUT_ERROR
    else:
        raw = sys.stdin.read()

    try:
        code, result = check_markup(raw, options)
    except (EmptyMarkupError, MarkupParseError) as e:
        print(str(e), file=sys.stderr)
        return EXIT_INPUT_ERROR

    print(render_report(result, code) if args.html else format_text(result))
    return EXIT_PROBLEMS if result.has_problems else EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
