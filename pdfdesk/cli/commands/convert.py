"""CLI helpers for format conversion commands."""

from __future__ import annotations

from argparse import ArgumentParser, _SubParsersAction

from ...core.utils import update_dict
from ...tools.common.interfaces import ToolContext

SUPPORTED_MODES = {
    "images-to-pdf": "images-to-pdf",
    "pdf-to-images": "pdf-to-images",
    "excel-to-pdf": "excel-to-pdf",
}


def configure_parser(subparsers: _SubParsersAction[ArgumentParser]) -> None:
    parser = subparsers.add_parser("convert", help="Convert between images, PDF and Excel")
    parser.add_argument("inputs", nargs="+", help="Input files")
    parser.add_argument("output", help="Output directory")
    parser.add_argument(
        "--mode",
        choices=sorted(SUPPORTED_MODES.keys()),
        required=True,
        help="Conversion to perform",
    )
    parser.add_argument(
        "--image-format",
        choices=["png", "jpeg"],
        default=None,
        help="Image format for pdf-to-images",
    )
    parser.add_argument("--quality", type=float, default=None, help="JPEG quality between 0.5 and 1")
    parser.add_argument(
        "--endpoint",
        default=None,
        help="Excel conversion endpoint of a running PdfDesk service",
    )
    parser.set_defaults(build_context=_build_context, tool_name_resolver=_select_tool)


def _select_tool(mode: str) -> str:
    return SUPPORTED_MODES[mode]


def _build_context(args) -> ToolContext:
    config = update_dict(
        {},
        format=args.image_format,
        quality=args.quality,
        endpoint=args.endpoint,
    )
    context = ToolContext.from_paths(args.inputs, output_dir=args.output, config=config)
    context.resources["tool_name"] = _select_tool(args.mode)
    return context
