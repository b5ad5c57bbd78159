"""CLI helpers for text watermarks."""

from __future__ import annotations

from argparse import ArgumentParser, _SubParsersAction

from ...core.utils import update_dict
from ...edit.watermark import POSITIONS
from ...tools.common.interfaces import ToolContext


def configure_parser(subparsers: _SubParsersAction[ArgumentParser]) -> None:
    parser = subparsers.add_parser("watermark", help="Draw a text watermark on every page")
    parser.add_argument("input", help="Input PDF file")
    parser.add_argument("output", help="Output directory for watermarked.pdf")
    parser.add_argument("--text", required=True, help="Watermark text")
    parser.add_argument("--opacity", type=float, default=None, help="Opacity between 0 and 1")
    parser.add_argument("--font-size", type=int, default=None, help="Font size between 12 and 120")
    parser.add_argument("--rotation", type=int, default=None, help="Rotation between 0 and 360")
    parser.add_argument("--position", choices=POSITIONS, default=None)
    parser.set_defaults(tool_name="watermark", build_context=_build_context)


def _build_context(args) -> ToolContext:
    config = update_dict(
        {"text": args.text},
        opacity=args.opacity,
        font_size=args.font_size,
        rotation=args.rotation,
        position=args.position,
    )
    return ToolContext.from_paths([args.input], output_dir=args.output, config=config)
