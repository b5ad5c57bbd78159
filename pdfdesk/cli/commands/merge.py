"""CLI helpers for merging PDFs."""

from __future__ import annotations

from argparse import ArgumentParser, _SubParsersAction

from ...tools.common.interfaces import ToolContext


def configure_parser(subparsers: _SubParsersAction[ArgumentParser]) -> None:
    parser = subparsers.add_parser("merge", help="Merge multiple PDFs into one")
    parser.add_argument("inputs", nargs="+", help="Input PDF files, in output order")
    parser.add_argument("output", help="Output directory for merged.pdf")
    parser.set_defaults(tool_name="merge", build_context=_build_context)


def _build_context(args) -> ToolContext:
    return ToolContext.from_paths(args.inputs, output_dir=args.output)
