"""Core interfaces and context objects shared by PdfDesk tools."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Iterable, Sequence

from ...core.document import DocumentHandle
from ...core.exceptions import MissingInputError
from ...core.render import PageRenderer
from ...core.utils import resolve_path
from ...core.validator import ensure_pdf
from ...delivery.sinks import Delivery, DirectorySink, MemorySink, TransferSink, deliver_all


@dataclass(frozen=True)
class ToolInput:
    """A file chosen by the user: its name, declared MIME type and bytes."""

    filename: str
    data: bytes
    content_type: str | None = None

    @classmethod
    def from_path(cls, path: str | Path, content_type: str | None = None) -> "ToolInput":
        resolved = resolve_path(path)
        if not resolved.is_file():
            raise MissingInputError(f"File not found: {resolved}")
        return cls(filename=resolved.name, data=resolved.read_bytes(), content_type=content_type)


@dataclass
class ToolContext:
    """Holds shared execution state for a tool invocation."""

    inputs: list[ToolInput] = field(default_factory=list)
    output_dir: Path | None = None
    sink: TransferSink | None = None
    renderer: PageRenderer | None = None
    resources: dict[str, Any] = field(default_factory=dict)
    config: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if isinstance(self.output_dir, (str, Path)) and self.output_dir is not None:
            self.output_dir = resolve_path(self.output_dir)

    @classmethod
    def from_paths(
        cls,
        paths: Iterable[str | Path],
        *,
        output_dir: str | Path | None = None,
        config: dict[str, Any] | None = None,
    ) -> "ToolContext":
        return cls(
            inputs=[ToolInput.from_path(path) for path in paths],
            output_dir=output_dir,
            config=dict(config or {}),
        )

    def ensure_sink(self) -> TransferSink:
        if self.sink is None:
            self.sink = DirectorySink(self.output_dir) if self.output_dir is not None else MemorySink()
        return self.sink

    def ensure_renderer(self) -> PageRenderer:
        if self.renderer is None:
            self.renderer = PageRenderer()
        return self.renderer

    def require_inputs(self, minimum: int = 1, message: str = "Please choose a file") -> list[ToolInput]:
        if len(self.inputs) < minimum:
            raise MissingInputError(message)
        return list(self.inputs)

    def with_updates(self, *, config: dict[str, Any] | None = None) -> "ToolContext":
        data = ToolContext(
            inputs=list(self.inputs),
            output_dir=self.output_dir,
            sink=self.sink,
            renderer=self.renderer,
            resources=dict(self.resources),
            config=dict(self.config),
        )
        if config:
            data.config.update(config)
        return data


class BaseTool:
    """Base class for all pluggable PdfDesk tools.

    Subclasses validate their inputs before reading any file, do their work
    and hand every output to the context's sink.
    """

    name: str
    delivery_pause: float = 0.0

    def __init__(self, context: ToolContext) -> None:
        self.context = context

    def open_pdf(self, item: ToolInput) -> DocumentHandle:
        ensure_pdf(item.filename, item.content_type)
        return DocumentHandle.open(item.data, name=item.filename)

    def single_pdf(self) -> tuple[ToolInput, DocumentHandle]:
        """Validate and open the first input, which must be a PDF."""

        item = self.context.require_inputs(message="Please choose a PDF file")[0]
        return item, self.open_pdf(item)

    def deliver(self, outputs: Sequence[Delivery]) -> list[Delivery]:
        pause = self.context.config.get("delivery_pause", self.delivery_pause)
        deliver_all(self.context.ensure_sink(), outputs, pause=pause)
        delivered = list(outputs)
        self.context.resources["deliveries"] = delivered
        return delivered

    def run(self) -> list[Delivery]:  # pragma: no cover - to be implemented by subclasses
        raise NotImplementedError


ToolFactory = Callable[[ToolContext], BaseTool]
