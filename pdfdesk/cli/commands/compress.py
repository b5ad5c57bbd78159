"""CLI helpers for compressing PDF files."""

from __future__ import annotations

from argparse import ArgumentParser, _SubParsersAction

from ...tools.common.interfaces import ToolContext


def configure_parser(subparsers: _SubParsersAction[ArgumentParser]) -> None:
    parser = subparsers.add_parser("compress", help="Compress a PDF file")
    parser.add_argument("input", help="Input PDF file")
    parser.add_argument("output", help="Output directory for compressed.pdf")
    parser.add_argument(
        "--level",
        choices=["low", "medium", "high"],
        default="medium",
        help="Compression level",
    )
    parser.set_defaults(tool_name="compress", build_context=_build_context)


def _build_context(args) -> ToolContext:
    return ToolContext.from_paths([args.input], output_dir=args.output, config={"level": args.level})
