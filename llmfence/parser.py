"""Line-oriented decoder for model responses.

A response interleaves prose with blocks of the form::

    #### [label](path/or/@command)
    ```lang
    content
    ```

Both :func:`parse_response` (whole text) and :func:`parse_lines` (any line
iterable, e.g. a streamed HTTP body) drive the same per-line transition in
:class:`_LineState`, so buffered and streamed responses decode identically.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from .fences import (
    fence_tag,
    is_bare_fence,
    is_nested_fence,
    is_tagged_fence,
    parse_file_header,
)
from .formats import FENCE, INCORRECT_HEADER_ERROR
from .model import FileEntry, FileError, ParsedResult
from .validate import validate_entries


@dataclass
class _Draft:
    label: str
    filename: str
    type: str = ""
    content: str = ""

    def freeze(self) -> FileEntry:
        return FileEntry(
            label=self.label,
            filename=self.filename,
            type=self.type,
            content=self.content,
        )


class _LineState:
    def __init__(self) -> None:
        self.current: _Draft | None = None
        self.inner_type: str | None = None
        self.started = 0
        self.lineno = 0

    def _outside(self, line: str) -> FileError | None:
        try:
            header = parse_file_header(line)
        except ValueError:
            return FileError(
                error=INCORRECT_HEADER_ERROR,
                content=line,
                line=self.lineno,
            )
        if header is not None:
            label, filename = header
            self.current = _Draft(label=label, filename=filename)
            self.started = self.lineno
        # Prose between blocks is expected.
        return None

    def _close(self) -> FileEntry:
        assert self.current is not None
        entry = self.current.freeze()
        self.current = None
        self.inner_type = None
        self.started = 0
        return entry

    def _inside(self, line: str, raw: str) -> FileEntry | None:
        cur = self.current
        assert cur is not None
        cr = raw[len(line) :]
        if is_nested_fence(line):
            if self.inner_type is None:
                self.inner_type = fence_tag(line)
                cur.content += FENCE + self.inner_type + cr + "\n"
            else:
                self.inner_type = None
                cur.content += FENCE + cr + "\n"
            return None
        if self.inner_type is None:
            if is_bare_fence(line):
                if self.started + 1 == self.lineno:
                    cur.type = ""
                    return None
                return self._close()
            if is_tagged_fence(line):
                cur.type = fence_tag(line)
                return None
        cur.content += raw + "\n"
        return None

    def feed(self, raw: str) -> FileEntry | FileError | None:
        """Consume one line without its ``\\n``; return an entry, an error or None.

        Headers and fences are recognised with a trailing ``\\r`` removed, while
        content lines keep it so CRLF files decode byte for byte.
        """
        self.lineno += 1
        line = raw[:-1] if raw.endswith("\r") else raw
        if self.current is None:
            return self._outside(line)
        return self._inside(line, raw)

    def finish(self) -> FileEntry | None:
        if self.current is None:
            return None
        return self._close()


def _strip_eol(line: str) -> str:
    if line.endswith("\n"):
        line = line[:-1]
    return line


def parse_lines(lines: Iterable[str]) -> ParsedResult:
    correct: list[FileEntry] = []
    failed: list[FileError] = []
    state = _LineState()

    for raw in lines:
        outcome = state.feed(_strip_eol(raw))
        if isinstance(outcome, FileEntry):
            correct.append(outcome)
        elif isinstance(outcome, FileError):
            failed.append(outcome)

    # A truncated response still yields the block that was being written.
    last = state.finish()
    if last is not None:
        correct.append(last)

    v = validate_entries(correct)
    return ParsedResult(
        correct=tuple(correct),
        failed=tuple(failed),
        validate=v.validate,
        files=v.files,
        requested=v.requested,
        is_valid=v.is_valid,
    )


def split_response_lines(text: str) -> list[str]:
    lines = text.split("\n")
    if len(lines) > 1 and lines[-1] == "":
        lines.pop()
    return lines


def parse_response(text: str) -> ParsedResult:
    return parse_lines(split_response_lines(text))
