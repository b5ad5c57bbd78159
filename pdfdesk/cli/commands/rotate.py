"""CLI helpers for rotating pages."""

from __future__ import annotations

from argparse import ArgumentParser, _SubParsersAction

from ...edit.rotate import ALLOWED_ROTATIONS
from ...tools.common.interfaces import ToolContext


def configure_parser(subparsers: _SubParsersAction[ArgumentParser]) -> None:
    parser = subparsers.add_parser("rotate", help="Set the rotation of every page")
    parser.add_argument("input", help="Input PDF file")
    parser.add_argument("output", help="Output directory")
    parser.add_argument("--degrees", type=int, choices=ALLOWED_ROTATIONS, default=90)
    parser.set_defaults(tool_name="rotate", build_context=_build_context)


def _build_context(args) -> ToolContext:
    return ToolContext.from_paths([args.input], output_dir=args.output, config={"degrees": args.degrees})
