from __future__ import annotations

import posixpath
import warnings
from collections.abc import Sequence

from .checklist import (
    ChecklistItem,
    LabelOptions,
    parse_checklist_line,
    split_label_options,
)
from .discover import browse, has_glob, join_base, match_paths, split_glob_base
from .fences import render_file_block
from .formats import DEFAULT_LANGUAGE
from .fs import FileSystem
from .model import PackResult


def language_for(path: str) -> str:
    ext = posixpath.splitext(path)[1]
    return ext[1:] if len(ext) > 1 else DEFAULT_LANGUAGE


class _Packer:
    def __init__(
        self,
        fs: FileSystem,
        ignore: Sequence[str] | None,
        encoding_errors: str,
    ) -> None:
        self.fs = fs
        self.ignore = ignore
        self.encoding_errors = encoding_errors
        self.output: list[str] = []
        self.injected: list[str] = []
        self.errors: list[str] = []
        self.seen: set[str] = set()

    def _read(self, rel: str) -> tuple[str, int]:
        data = self.fs.read_bytes(rel)
        return data.decode("utf-8", errors=self.encoding_errors), len(data)

    def _unreadable(self, rel: str, error: str, exc: Exception) -> None:
        self.errors.append(error)
        self.output.append(f"ERROR: Could not read file {rel}")
        warnings.warn(
            f"Could not read {rel}: {exc}",
            RuntimeWarning,
            stacklevel=3,
        )

    def _emit(self, rel: str, label: str, opts: LabelOptions, error: str) -> None:
        if rel in self.seen:
            return
        if opts.list_only:
            if not self.fs.is_file(rel):
                self._unreadable(rel, error, FileNotFoundError(rel))
                return
            self.seen.add(rel)
            self.output.append(rel)
            return
        try:
            content, size = self._read(rel)
        except (OSError, ValueError) as e:
            self._unreadable(rel, error, e)
            return
        self.seen.add(rel)
        self.injected.append(f"  - {rel} {size:,} bytes")
        self.output.append(render_file_block(label, rel, language_for(rel), content))

    def _pack_glob(self, line: str, item: ChecklistItem, opts: LabelOptions) -> None:
        base, pattern = split_glob_base(item.path)
        try:
            entries = browse(self.fs, base, self.ignore)
        except (OSError, ValueError):
            self.errors.append(line)
            self.output.append(f"ERROR: Could not process pattern {item.path}")
            return
        for rel in match_paths(entries, [pattern], opts.excludes):
            if rel.endswith("/"):
                continue
            path = join_base(base, rel)
            self._emit(path, posixpath.basename(path), opts, f"{line} -> {path}")

    def _pack_file(self, line: str, item: ChecklistItem, opts: LabelOptions) -> None:
        path = posixpath.normpath(item.path)
        label = opts.label or posixpath.basename(path)
        self._emit(path, label, opts, line)

    def pack(self, markdown_input: str) -> PackResult:
        for line in markdown_input.split("\n"):
            item = parse_checklist_line(line)
            if item is None:
                self.output.append(line)
                continue
            opts = split_label_options(item.label)
            if has_glob(item.path):
                self._pack_glob(line, item, opts)
            else:
                self._pack_file(line, item, opts)
        return PackResult(
            text="\n".join(self.output),
            injected=self.injected,
            errors=self.errors,
        )


def pack_markdown(
    markdown_input: str,
    fs: FileSystem,
    ignore: Sequence[str] | None = None,
    *,
    encoding_errors: str = "replace",
) -> PackResult:
    """Expand checklist lines in ``markdown_input`` into inlined file blocks.

    Every other line is passed through untouched. A checklist target that
    cannot be read is replaced by an ``ERROR:`` line and reported in
    ``PackResult.errors``; packing always continues with the next line.
    """
    return _Packer(fs, ignore, encoding_errors).pack(markdown_input)
