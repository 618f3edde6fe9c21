from __future__ import annotations

from collections.abc import Iterable, Iterator
from pathlib import Path

from .commands import resolve_command
from .config import Config
from .fs import FileSystem, LocalFileSystem
from .model import FileEntry, FileError, ParsedResult
from .parser import parse_response


def _label_suffix(entry: FileEntry, parsed: ParsedResult) -> str:
    label = entry.label
    if not label:
        return ""
    if label in entry.filename and parsed.files.get(entry.filename) == label:
        return ""
    return f" — {label}"


def _write_entry(
    entry: FileEntry,
    parsed: ParsedResult,
    fs: FileSystem,
    dry: bool,
) -> Iterator[str]:
    if not entry.content.strip():
        yield f"- {entry.filename} - empty content - to remove file use command @rm"
        return

    size = len(entry.content.encode(entry.encoding, errors="replace"))
    if not dry:
        try:
            size = fs.write_text(entry.filename, entry.content, entry.encoding)
        except (OSError, ValueError, LookupError) as e:
            yield f"! Failed to write {entry.filename}: {e}"
            return
    indicator = "•" if dry else "+"
    yield f"{indicator} {entry.filename} ({size:,} bytes){_label_suffix(entry, parsed)}"


def format_errors(failed: Iterable[FileError]) -> Iterator[str]:
    grouped: dict[str, list[FileError]] = {}
    for err in failed:
        grouped.setdefault(err.message, []).append(err)

    for msg, errors in grouped.items():
        yield f"! Error: {msg}"
        width = max(len(str(e.line)) for e in errors)
        for e in errors:
            yield f"  # {e.line:>{width}} > {e.content}"


def unpack_answer(
    parsed: ParsedResult,
    fs: FileSystem,
    *,
    dry: bool = False,
    config: Config | None = None,
) -> Iterator[str]:
    """Apply a parsed response in document order, yielding report lines.

    Command entries are dispatched and drained before the next entry starts;
    file entries are written through ``fs``. With ``dry`` nothing is written or
    removed and commands only report what they would do.
    Per-entry failures become report lines; parse errors are listed last,
    grouped by message.
    """
    yield "Extracting files" + (" (dry mode, no real saving)" if dry else "")

    for entry in parsed.correct:
        if entry.is_command:
            yield f"▶ {entry.filename}"
            try:
                yield from resolve_command(entry, parsed, fs, config, dry=dry).run()
            except (OSError, ValueError) as e:
                yield f"! Command {entry.filename} failed: {e}"
            continue
        yield from _write_entry(entry, parsed, fs, dry)

    yield from format_errors(parsed.failed)


def unpack_to_dir(
    markdown_text: str,
    out_dir: Path,
    *,
    dry: bool = False,
    config: Config | None = None,
) -> list[str]:
    parsed = parse_response(markdown_text)
    fs = LocalFileSystem(out_dir)
    return list(unpack_answer(parsed, fs, dry=dry, config=config))
