"""CLI helpers for reordering and deleting pages."""

from __future__ import annotations

from argparse import ArgumentParser, _SubParsersAction

from ...tools.common.interfaces import ToolContext


def configure_parser(subparsers: _SubParsersAction[ArgumentParser]) -> None:
    parser = subparsers.add_parser("organize", help="Reorder or delete pages of a PDF")
    parser.add_argument("input", help="Input PDF file")
    parser.add_argument("output", help="Output directory for organized.pdf")
    parser.add_argument(
        "--order",
        nargs="+",
        type=int,
        default=None,
        help="1-based page numbers to keep, in their new order",
    )
    parser.add_argument(
        "--move",
        nargs=2,
        type=int,
        action="append",
        metavar=("FROM", "TO"),
        help="Move the page at 1-based position FROM to position TO",
    )
    parser.add_argument(
        "--delete",
        type=int,
        action="append",
        metavar="POSITION",
        help="Delete the page at 1-based POSITION (applied after moves)",
    )
    parser.set_defaults(tool_name="organize", build_context=_build_context)


def _build_context(args) -> ToolContext:
    operations = [("move", source - 1, target - 1) for source, target in args.move or ()]
    operations.extend(("delete", position - 1) for position in args.delete or ())
    order = [page - 1 for page in args.order] if args.order else None
    return ToolContext.from_paths(
        [args.input],
        output_dir=args.output,
        config={"order": order, "operations": operations},
    )
