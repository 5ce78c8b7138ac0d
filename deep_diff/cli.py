#!/usr/bin/env python3
"""
Deep Diff Command Line
======================
Render the edit history of a set of revision files as nested HTML.

Usage:
    deep-diff draft1.txt draft2.txt draft3.txt --page --output history.html
    deep-diff v1.md v2.md --json
    deep-diff --css
"""

import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional

from config_logging import get_logger, handle_errors, DeepDiffError, VERSION
from .renderer import render_with_markers, get_default_styles, render_page
from .tracker import compute_deep_diff

logger = get_logger('deep_diff.cli')


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='deep-diff',
        description='Cumulative change visualisation across text revisions'
    )
    parser.add_argument('files', nargs='*', help='Revision files, oldest first')
    parser.add_argument('--keep-empty', action='store_true',
                        help='Keep revisions that are empty after trimming')
    parser.add_argument('--timeout', type=float, default=None,
                        help='Seconds allowed per pairwise diff')
    parser.add_argument('--tag', default=None, help='HTML tag for markers (default: ins)')
    parser.add_argument('--class-name', default=None,
                        help='CSS class for marker tags (empty string omits it)')
    parser.add_argument('--strict', action='store_true',
                        help='Split crossing markers so tags always nest')
    parser.add_argument('--page', action='store_true',
                        help='Emit a standalone HTML page with default styles')
    parser.add_argument('--css', action='store_true', help='Print the default CSS and exit')
    parser.add_argument('--max-depth', type=int, default=None,
                        help='Nesting depth covered by the generated CSS')
    parser.add_argument('--json', action='store_true',
                        help='Print text and markers as JSON instead of HTML')
    parser.add_argument('--encoding', default='utf-8', help='Encoding of revision files')
    parser.add_argument('--output', '-o', help='Write output to this file')
    parser.add_argument('--version', action='version', version=f'%(prog)s {VERSION}')
    return parser


@handle_errors(logger)
def read_revisions(paths: List[str], encoding: str = 'utf-8') -> List[str]:
    """Read revision files in the given order."""
    return [Path(p).read_text(encoding=encoding) for p in paths]


@handle_errors(logger)
def write_output(path: str, output: str) -> None:
    """Write rendered output to a file."""
    Path(path).write_text(output, encoding='utf-8')
    logger.info(f"Wrote {len(output)} characters to {path}")


@handle_errors(logger)
def run(args: argparse.Namespace) -> str:
    """Produce the requested output for parsed arguments."""
    strict = True if args.strict else None
    skip_empty = False if args.keep_empty else None

    if args.css:
        return get_default_styles(max_depth=args.max_depth, class_name=args.class_name)

    revisions = read_revisions(args.files, args.encoding)

    if args.json:
        result = compute_deep_diff(revisions, skip_empty=skip_empty, timeout=args.timeout)
        return json.dumps(result.to_dict(), indent=2, ensure_ascii=False) + '\n'

    if args.page:
        title = Path(args.files[-1]).name if args.files else 'Deep diff'
        return render_page(revisions, title=title, skip_empty=skip_empty,
                           timeout=args.timeout, tag_name=args.tag,
                           class_name=args.class_name, strict=strict,
                           max_depth=args.max_depth)

    result = compute_deep_diff(revisions, skip_empty=skip_empty, timeout=args.timeout)
    return render_with_markers(result.text, result.markers, tag_name=args.tag,
                               class_name=args.class_name, strict=strict) + '\n'


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.files and not args.css:
        parser.print_usage(sys.stderr)
        print("deep-diff: error: at least one revision file is required", file=sys.stderr)
        return 2

    try:
        output = run(args)
        if args.output:
            write_output(args.output, output)
        else:
            sys.stdout.write(output)
    except DeepDiffError as e:
        print(f"deep-diff: {e.message}", file=sys.stderr)
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())
