from __future__ import annotations

import bisect
from dataclasses import dataclass, field
from os import PathLike
from pathlib import Path


@dataclass(frozen=True, order=True, slots=True)
class SourceIndex:
    pos: int

    def __int__(self) -> int:
        return self.pos

    def __index__(self) -> int:
        return self.pos

    def __repr__(self) -> str:
        return f"SourceIndex({self.pos})"


@dataclass(frozen=True, slots=True)
class SourceSpan:
    '''0-indexed, [start, end) half-open interval of characters.

    Zero-width spans are allowed: the parser reports tokens it had to invent
    (e.g. a missing closing paren) at a single position.
    '''
    start: SourceIndex  # inclusive
    end: SourceIndex    # exclusive

    def __post_init__(self) -> None:
        if self.start < SourceIndex(0):
            raise ValueError(f"SourceSpan.start cannot be negative (got {self.start})")
        if self.end < self.start:
            raise ValueError(f"SourceSpan.end ({self.end}) < start ({self.start})")

    @classmethod
    def from_ints(cls, start: int, end: int) -> SourceSpan:
        return cls(SourceIndex(start), SourceIndex(end))

    def __len__(self) -> int:
        return self.end.pos - self.start.pos


def _compute_line_starts(s: str) -> tuple[SourceIndex, ...]:
    # Start of each line (1st line starts at 0). Handles \n, \r\n, \r via splitlines.
    # A final line without a terminator gets no sentinel after it.
    starts = [SourceIndex(0)]
    pos = 0
    for part in s.splitlines(keepends=True):
        pos += len(part)
        if part.endswith(("\n", "\r")):
            starts.append(SourceIndex(pos))
    return tuple(starts)


def _compute_byte_table(s: str) -> tuple[int, ...] | None:
    # None means every character is one UTF-8 byte, so offsets coincide.
    if s.isascii():
        return None
    table: list[int] = []
    for i, ch in enumerate(s):
        table.extend([i] * len(ch.encode("utf-8")))
    table.append(len(s))
    return tuple(table)


@dataclass(frozen=True, slots=True)
class Source:
    file: Path | None
    contents: str

    _line_starts: tuple[SourceIndex, ...] | None = field(
        default=None, init=False, repr=False, compare=False
    )
    _byte_table: tuple[int, ...] | None = field(
        default=None, init=False, repr=False, compare=False
    )
    _byte_table_ready: bool = field(default=False, init=False, repr=False, compare=False)
    _encoded: bytes | None = field(default=None, init=False, repr=False, compare=False)

    @classmethod
    def from_string(cls, text: str) -> Source:
        return cls(None, text)

    @classmethod
    def from_file(cls, path_rep: str | Path | PathLike[str]) -> Source:
        """Read a JavaScript file; the parser works on UTF-8 so no other encoding is offered."""
        path = Path(path_rep)
        if path.is_dir():
            raise IsADirectoryError(f"Expected a JavaScript file but found a directory: {path}")
        if not path.is_file():
            raise FileNotFoundError(f"No such file: {path}")
        return cls(path, path.read_text(encoding="utf-8"))

    @property
    def label(self) -> str:
        return str(self.file) if self.file is not None else "<template>"

    @property
    def encoded(self) -> bytes:
        data = self._encoded
        if data is None:
            data = self.contents.encode("utf-8")
            object.__setattr__(self, "_encoded", data)
        return data

    def full_span(self) -> SourceSpan:
        return SourceSpan.from_ints(0, len(self.contents))

    def slice(self, span: SourceSpan) -> str:
        if not (0 <= int(span.start) <= int(span.end) <= len(self.contents)):
            raise ValueError("SourceSpan out of bounds for this Source")
        return self.contents[int(span.start):int(span.end)]

    def byte_to_char(self, offset: int) -> int:
        '''Map a UTF-8 byte offset (as reported by tree-sitter) to a character offset.'''
        if not self._byte_table_ready:
            object.__setattr__(self, "_byte_table", _compute_byte_table(self.contents))
            object.__setattr__(self, "_byte_table_ready", True)
        table = self._byte_table
        if table is None:
            return offset
        return table[offset]

    def span_of_bytes(self, start_byte: int, end_byte: int) -> SourceSpan:
        return SourceSpan.from_ints(self.byte_to_char(start_byte), self.byte_to_char(end_byte))

    @property
    def line_starts(self) -> tuple[SourceIndex, ...]:
        ls = self._line_starts
        if ls is None:
            ls = _compute_line_starts(self.contents)
            object.__setattr__(self, "_line_starts", ls)
        return ls

    def pos_to_line_col(self, pos: SourceIndex | int) -> tuple[int, int]:
        '''returns 1-indexed (line, col), editor-style; accepts pos==len(contents).'''
        pos = SourceIndex(int(pos))
        if not (0 <= int(pos) <= len(self.contents)):
            raise ValueError(f"pos {pos} out of range [0, {len(self.contents)}]")
        ls = self.line_starts
        line_idx = bisect.bisect_right(ls, pos) - 1
        return (line_idx + 1, pos.pos - ls[line_idx].pos + 1)  # 1-indexed
