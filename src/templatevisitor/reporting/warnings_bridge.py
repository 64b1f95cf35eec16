"""
Warnings raised while compiling templates, and an opt-in bridge that draws
them as rich code frames.

Warnings go through Python's ``warnings`` machinery, so filters such as
``-W error::templatevisitor.reporting.warnings_bridge.TemplateWarning`` or
``pytest.warns`` keep working. The bridge only replaces how they are shown;
install it from a script or rule harness, never at import time.
"""

from __future__ import annotations

import warnings
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, TextIO

from rich.console import Console

from templatevisitor.reporting.diagnostics import Diagnostic, Emitter, format_plain

__all__ = [
    "TVWarning",
    "DiagnosticWarning",
    "TemplateWarning",
    "warn_diagnostic",
    "install_warnings_bridge",
]


class TVWarning(Warning):
    """Base templatevisitor warning category."""


@dataclass(slots=True, eq=False)
class DiagnosticWarning(TVWarning):
    """A warning carrying a Diagnostic; plain text via ``str()`` without the bridge."""

    diagnostic: Diagnostic

    def __str__(self) -> str:
        return format_plain(self.diagnostic)


class TemplateWarning(DiagnosticWarning):
    """Suspicious but compilable template source."""


def warn_diagnostic(
    d: Diagnostic,
    category: type[DiagnosticWarning] = TemplateWarning,
    stacklevel: int = 3,
) -> None:
    warnings.warn(category(d), stacklevel=stacklevel)


class _Bridge:
    def __init__(self, emitter: Emitter, only_templatevisitor: bool):
        self.emitter = emitter
        self.only_templatevisitor = only_templatevisitor
        self.previous: Callable[..., Any] = warnings.showwarning

    def __call__(
        self,
        message: Warning | str,
        category: type[Warning],
        filename: str,
        lineno: int,
        file: TextIO | None = None,
        line: str | None = None,
    ) -> None:
        if isinstance(message, DiagnosticWarning):
            self.emitter.emit(message.diagnostic)
        elif self.only_templatevisitor:
            self.previous(message, category, filename, lineno, file=file, line=line)
        else:
            self.emitter.console.print(f"{category.__name__}: {message} ({filename}:{lineno})")

    def uninstall(self) -> None:
        if warnings.showwarning is self:
            warnings.showwarning = self.previous


def install_warnings_bridge(
    *,
    emitter: Emitter | None = None,
    only_templatevisitor: bool = True,
) -> Callable[[], None]:
    """
    Show templatevisitor warnings as rich code frames; returns ``uninstall()``.

    With ``only_templatevisitor=False`` every other warning is printed on the
    same Console as one line instead of going to the previous handler.
    """
    bridge = _Bridge(emitter or Emitter(Console(stderr=True)), only_templatevisitor)
    warnings.showwarning = bridge
    return bridge.uninstall
