"""CLI helpers for the split command."""

from __future__ import annotations

from argparse import ArgumentParser, _SubParsersAction

from ...tools.common.interfaces import ToolContext


def configure_parser(subparsers: _SubParsersAction[ArgumentParser]) -> None:
    parser = subparsers.add_parser("split", help="Split a PDF into one file per page")
    parser.add_argument("input", help="Input PDF file")
    parser.add_argument("output", help="Output directory for page-<n>.pdf files")
    parser.add_argument(
        "--pause",
        type=float,
        default=None,
        help="Seconds to wait between two written files",
    )
    parser.set_defaults(tool_name="split", build_context=_build_context)


def _build_context(args) -> ToolContext:
    config = {} if args.pause is None else {"delivery_pause": args.pause}
    return ToolContext.from_paths([args.input], output_dir=args.output, config=config)
