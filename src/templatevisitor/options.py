"""
Parser configuration shared by every template and program parsed within one
TemplateManager session.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, fields, replace
from enum import StrEnum
from typing import Any, Final

FIRST_EDITION: Final = 2015
LATEST_EDITION: Final = 2025
DEFAULT_EDITION: Final = 2018

# espree/acorn style aliases: ecmaVersion 6 is ES2015, 7 is ES2016, ...
_LEGACY_OFFSET: Final = 2009


class SourceType(StrEnum):
    SCRIPT = "script"
    MODULE = "module"


def normalize_edition(value: int | str) -> int:
    """Accept 2015..2025, the legacy numbering 6..16, or "latest"."""
    if isinstance(value, str):
        if value.lower() == "latest":
            return LATEST_EDITION
        try:
            value = int(value)
        except ValueError:
            raise ValueError(f"Invalid ecma_version {value!r}") from None
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"ecma_version must be an int or 'latest', got {type(value).__name__}")

    year = value + _LEGACY_OFFSET if value < 100 else value
    if not FIRST_EDITION <= year <= LATEST_EDITION:
        raise ValueError(
            f"Unsupported ecma_version {value}: expected {FIRST_EDITION}..{LATEST_EDITION}, "
            f"{FIRST_EDITION - _LEGACY_OFFSET}..{LATEST_EDITION - _LEGACY_OFFSET} or 'latest'"
        )
    return year


@dataclass(frozen=True, slots=True)
class ParserOptions:
    ecma_version: int = DEFAULT_EDITION
    source_type: SourceType = SourceType.SCRIPT

    def __post_init__(self) -> None:
        object.__setattr__(self, "ecma_version", normalize_edition(self.ecma_version))
        object.__setattr__(self, "source_type", SourceType(self.source_type))

    @property
    def is_module(self) -> bool:
        return self.source_type is SourceType.MODULE

    def evolve(self, **overrides: Any) -> ParserOptions:
        _validate_override_keys(overrides)
        return replace(self, **overrides)

    @classmethod
    def from_mapping(cls, d: Mapping[str, Any] | None) -> ParserOptions:
        """Build options from a mapping using either field names or espree-style keys."""
        if not d:
            return cls()
        renamed = {_ALIASES.get(k, k): v for k, v in d.items()}
        _validate_override_keys(renamed)
        return cls(**renamed)


_ALIASES: Final[Mapping[str, str]] = {
    "ecmaVersion": "ecma_version",
    "sourceType": "source_type",
}


def _validate_override_keys(overrides: Mapping[str, Any] | None) -> None:
    if not overrides:
        return
    allowed = {f.name for f in fields(ParserOptions)}
    unknown = [k for k in overrides.keys() if k not in allowed]
    if unknown:
        raise KeyError("Unknown ParserOptions keys: " + ", ".join(sorted(unknown)))
