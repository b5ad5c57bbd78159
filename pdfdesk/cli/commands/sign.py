"""CLI helpers for placing a signature image."""

from __future__ import annotations

from argparse import ArgumentParser, _SubParsersAction

from ...edit.sign import DEFAULT_SIGNATURE_WIDTH
from ...tools.common.interfaces import ToolContext, ToolInput


def configure_parser(subparsers: _SubParsersAction[ArgumentParser]) -> None:
    parser = subparsers.add_parser("sign", help="Place a PNG or JPEG signature on a page")
    parser.add_argument("input", help="Input PDF file")
    parser.add_argument("signature", help="Signature image (PNG or JPEG)")
    parser.add_argument("output", help="Output directory for signed.pdf")
    parser.add_argument("--page", type=int, default=1, help="1-based page number")
    parser.add_argument("--width", type=float, default=DEFAULT_SIGNATURE_WIDTH, help="Width in points")
    parser.set_defaults(tool_name="sign", build_context=_build_context)


def _build_context(args) -> ToolContext:
    signature = ToolInput.from_path(args.signature)
    return ToolContext.from_paths(
        [args.input],
        output_dir=args.output,
        config={"signature": signature.data, "page_number": args.page, "width": args.width},
    )
