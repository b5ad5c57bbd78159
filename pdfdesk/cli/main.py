"""Command line interface for the PdfDesk toolkit."""

from __future__ import annotations

import argparse
from typing import Sequence

from ..core.exceptions import PdfDeskError
from ..delivery.sinks import Delivery
from ..tools import load_builtin_plugins
from ..tools.common.interfaces import ToolContext
from ..tools.common.pipeline import registry
from .commands import compress, convert, merge, organize, rotate, sign, split, watermark

COMMAND_MODULES = [merge, split, organize, rotate, watermark, sign, compress, convert]


def _create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="pdfdesk", description="PdfDesk CLI")
    subparsers = parser.add_subparsers(dest="command")
    subparsers.required = True
    for module in COMMAND_MODULES:
        module.configure_parser(subparsers)
    return parser


def _resolve_tool_name(args, context: ToolContext) -> str:
    tool_name = getattr(args, "tool_name", None)
    if tool_name:
        return tool_name
    if "tool_name" in context.resources:
        return context.resources["tool_name"]
    resolver = getattr(args, "tool_name_resolver", None)
    mode = getattr(args, "mode", None)
    if resolver is not None and mode is not None:
        return resolver(mode)
    raise SystemExit("Unable to determine tool name from arguments")


def main(argv: Sequence[str] | None = None) -> list[Delivery]:
    load_builtin_plugins()
    parser = _create_parser()
    args = parser.parse_args(argv)
    try:
        context: ToolContext = args.build_context(args)
        tool_name = _resolve_tool_name(args, context)
        tool = registry.create(tool_name, context)
        result = tool.run()
    except PdfDeskError as exc:
        raise SystemExit(f"pdfdesk {args.command}: {exc}") from exc

    sink = context.ensure_sink()
    for path in getattr(sink, "delivered", ()):
        print(path)
    return result


if __name__ == "__main__":  # pragma: no cover
    main()
