"""
Helpers for rule scripts that build templates at import or startup time.

``use_diagnostics()`` opts into rich rendering for the enclosed block:
template warnings are drawn as code frames and ``print_exception()`` uses the
same Console. ``run_with_diagnostics()`` wraps a function in that block and
turns an escaping TVException (typically a TemplateSyntaxError) into a
rendered report and exit status 2.

Both read their defaults from the environment:
  TEMPLATEVISITOR_COLOR            auto | always | never
  TEMPLATEVISITOR_PRETTY_WARNINGS  auto | true | false
"""

from __future__ import annotations

import contextvars
import functools
import os
import sys
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import Any, TypeVar

from rich.console import Console

from templatevisitor.errors import TVException
from templatevisitor.reporting.diagnostics import Emitter
from templatevisitor.reporting.warnings_bridge import install_warnings_bridge

__all__ = ["use_diagnostics", "print_exception", "run_with_diagnostics"]

F = TypeVar("F", bound=Callable[..., Any])

_console: contextvars.ContextVar[Console | None] = contextvars.ContextVar(
    "templatevisitor_console", default=None
)

_TRUTHY = frozenset({"1", "true", "yes", "on"})


def _color_mode(color: str | None) -> str:
    mode = (color or os.getenv("TEMPLATEVISITOR_COLOR") or "auto").lower()
    if mode not in {"auto", "always", "never"}:
        raise ValueError(f"color must be 'auto', 'always' or 'never', got {mode!r}")
    return mode


def _pretty_enabled(pretty: bool | str | None) -> bool:
    if isinstance(pretty, bool):
        return pretty
    value = (pretty or os.getenv("TEMPLATEVISITOR_PRETTY_WARNINGS") or "auto").lower()
    if value == "auto":
        return sys.stderr.isatty()
    return value in _TRUTHY


@contextmanager
def use_diagnostics(
    *,
    color: str | None = None,
    pretty: bool | str | None = None,
    only_templatevisitor: bool = True,
) -> Iterator[Console]:
    """Yield the stderr Console used for diagnostics inside the block.

    With pretty warnings enabled the warnings bridge is installed for the
    duration of the block; ``only_templatevisitor`` leaves other warnings to
    Python's default display.
    """
    mode = _color_mode(color)
    console = Console(
        stderr=True,
        force_terminal=True if mode == "always" else None,
        no_color=mode == "never",
    )
    token = _console.set(console)
    uninstall = (
        install_warnings_bridge(emitter=Emitter(console), only_templatevisitor=only_templatevisitor)
        if _pretty_enabled(pretty)
        else None
    )
    try:
        yield console
    finally:
        if uninstall is not None:
            uninstall()
        _console.reset(token)


def print_exception(e: TVException) -> None:
    """Render a TVException on the active diagnostics Console (stderr otherwise)."""
    (_console.get() or Console(stderr=True)).print(e)


def run_with_diagnostics(
    *,
    color: str | None = None,
    pretty: bool | str | None = None,
    only_templatevisitor: bool = True,
    exit_on_exception: bool = True,
) -> Callable[[F], F]:
    def deco(fn: F) -> F:
        @functools.wraps(fn)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            with use_diagnostics(color=color, pretty=pretty, only_templatevisitor=only_templatevisitor):
                try:
                    return fn(*args, **kwargs)
                except TVException as e:
                    print_exception(e)
                    if not exit_on_exception:
                        raise
                    raise SystemExit(2) from e
        return wrapper  # type: ignore[return-value]
    return deco
