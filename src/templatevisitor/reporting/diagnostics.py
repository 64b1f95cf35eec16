"""
Diagnostics for template and program source: one data model shared by
exceptions (errors.py) and warnings (warnings_bridge.py), a rich renderer that
draws a code frame with carets under the offending span, and an Emitter.

Templates are short, usually one line, so frames default to a single line of
context around the span.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from enum import StrEnum

from rich.console import Console, Group, RenderableType
from rich.panel import Panel
from rich.rule import Rule
from rich.text import Text

from templatevisitor.source import Source, SourceSpan

__all__ = [
    "Severity",
    "Related",
    "Diagnostic",
    "FrameConfig",
    "Theme",
    "Emitter",
    "render_diagnostic",
    "format_plain",
]


class Severity(StrEnum):
    INFO = "info"
    WARN = "warn"
    ERROR = "error"


@dataclass(frozen=True, slots=True)
class Related:
    label: str
    span: SourceSpan
    source: Source


@dataclass(frozen=True, slots=True)
class Diagnostic:
    message: str
    severity: Severity
    span: SourceSpan
    source: Source
    code: str | None = None
    notes: list[str] = field(default_factory=list)
    hint: str | None = None
    related: list[Related] = field(default_factory=list)

    @classmethod
    def error(cls, message: str, source: Source, span: SourceSpan, **kw: object) -> Diagnostic:
        return cls(message=message, severity=Severity.ERROR, source=source, span=span, **kw)  # type: ignore[arg-type]

    @classmethod
    def warning(cls, message: str, source: Source, span: SourceSpan, **kw: object) -> Diagnostic:
        return cls(message=message, severity=Severity.WARN, source=source, span=span, **kw)  # type: ignore[arg-type]

    @property
    def location(self) -> tuple[int, int]:
        """1-indexed (line, column) of the span start."""
        return self.source.pos_to_line_col(self.span.start)

    @property
    def headline(self) -> str:
        code = f" [{self.code}]" if self.code else ""
        return f"{self.severity.upper()}{code}: {self.message}"


def format_plain(d: Diagnostic) -> str:
    """One-line rendering, used by ``str()`` of exceptions and warnings."""
    line, col = d.location
    return f"{d.headline} at {d.source.label}:{line}:{col}"


# ─────────────────────────── Rendering config ───────────────────────────


@dataclass(frozen=True, slots=True)
class FrameConfig:
    context_lines: int = 1
    tab_width: int = 4
    show_line_numbers: bool = True
    max_related: int = 6


def _default_severity_styles() -> dict[Severity, str]:
    return {
        Severity.INFO: "bold cyan",
        Severity.WARN: "bold yellow",
        Severity.ERROR: "bold red",
    }


@dataclass(frozen=True, slots=True)
class Theme:
    severity_styles: Mapping[Severity, str] = field(default_factory=_default_severity_styles)
    location: str = "italic"
    gutter: str = "dim"
    code: str = ""
    caret: str = "bold red"
    note_bullet: str = "dim"
    hint_label: str = "italic dim"

    def for_severity(self, sev: Severity) -> str:
        return self.severity_styles[sev]


# ─────────────────────────── Code frames ───────────────────────────


def _line_count(source: Source) -> int:
    starts = source.line_starts
    # a trailing terminator leaves a start at EOF that opens no line
    if len(starts) > 1 and source.contents.endswith(("\n", "\r")):
        return len(starts) - 1
    return len(starts)


def _line_text(source: Source, line_no: int) -> str:
    starts = source.line_starts
    begin = int(starts[line_no - 1])
    end = int(starts[line_no]) if line_no < len(starts) else len(source.contents)
    return source.contents[begin:end].rstrip("\r\n")


def _columns(raw: str, col: int, tab_width: int) -> int:
    """Display width of ``raw`` up to 1-indexed column ``col``, after tab expansion."""
    return len(raw[: col - 1].expandtabs(tab_width))


def _frame_rows(
    source: Source,
    span: SourceSpan,
    theme: Theme,
    cfg: FrameConfig,
) -> Iterator[Text]:
    first_line, first_col = source.pos_to_line_col(span.start)
    last_line, last_col = source.pos_to_line_col(span.end)

    top = max(1, first_line - cfg.context_lines)
    bottom = min(max(_line_count(source), last_line), last_line + cfg.context_lines)
    width = len(str(bottom))

    for line_no in range(top, bottom + 1):
        raw = _line_text(source, line_no)
        shown = raw.expandtabs(cfg.tab_width)
        gutter = f"{line_no:>{width}} | " if cfg.show_line_numbers else ""
        yield Text.assemble((gutter, theme.gutter), (shown, theme.code))

        if not first_line <= line_no <= last_line:
            continue
        lo = _columns(raw, first_col, cfg.tab_width) if line_no == first_line else 0
        hi = _columns(raw, last_col, cfg.tab_width) if line_no == last_line else len(shown)
        yield Text.assemble(" " * (len(gutter) + lo), ("^" * max(1, hi - lo), theme.caret))


def _code_frame(
    source: Source,
    span: SourceSpan,
    border: str,
    theme: Theme,
    cfg: FrameConfig,
) -> Panel:
    line, col = source.pos_to_line_col(span.start)
    title = Text.assemble((source.label, theme.location), f":{line}:{col}")
    body = Text("\n").join(_frame_rows(source, span, theme, cfg))
    return Panel.fit(body, title=title, border_style=border, padding=(0, 1))


def _trailer(d: Diagnostic, theme: Theme) -> Text | None:
    out = Text()
    for note in d.notes:
        out.append("\n• ", style=theme.note_bullet)
        out.append(note)
    if d.hint:
        out.append("\nHint: ", style=theme.hint_label)
        out.append(d.hint)
    return out if out.plain else None


def render_diagnostic(
    d: Diagnostic,
    *,
    theme: Theme | None = None,
    cfg: FrameConfig | None = None,
) -> RenderableType:
    """Headline, rule, the main frame, related frames (capped), then notes and hint."""
    theme = theme or Theme()
    cfg = cfg or FrameConfig()
    style = theme.for_severity(d.severity)

    parts: list[RenderableType] = [
        Text(d.headline, style=style),
        Rule(style=style),
        _code_frame(d.source, d.span, style, theme, cfg),
    ]

    shown = d.related[: cfg.max_related]
    for r in shown:
        parts.append(Text(r.label, style=theme.gutter))
        parts.append(_code_frame(r.source, r.span, style, theme, cfg))
    if len(d.related) > len(shown):
        parts.append(
            Text(f"... and {len(d.related) - len(shown)} more related locations", style=theme.gutter)
        )

    trailer = _trailer(d, theme)
    if trailer is not None:
        parts.append(trailer)
    return Group(*parts)


class Emitter:
    """Prints diagnostics to a rich Console (stderr by default)."""

    def __init__(
        self,
        console: Console | None = None,
        theme: Theme | None = None,
        cfg: FrameConfig | None = None,
    ):
        self.console = console or Console(stderr=True)
        self.theme = theme or Theme()
        self.cfg = cfg or FrameConfig()

    def emit(self, d: Diagnostic) -> None:
        self.console.print(render_diagnostic(d, theme=self.theme, cfg=self.cfg))

    def emit_all(self, ds: Iterable[Diagnostic]) -> None:
        for d in ds:
            self.emit(d)
