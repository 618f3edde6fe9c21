from __future__ import annotations

import posixpath
from collections.abc import Iterable, Sequence

import pathspec

from .fs import FileSystem

DEFAULT_IGNORE = [
    ".git",
    ".hg",
    ".svn",
    "node_modules",
    ".venv",
    "venv",
    "__pycache__",
]

GLOB_CHARS = ("*", "?", "{")
MATCH_ALL = {"", ".", "./"}


def has_glob(path: str) -> bool:
    return any(ch in path for ch in GLOB_CHARS)


def split_glob_base(path: str) -> tuple[str, str]:
    """Split ``src/**/*.js`` into the nearest literal directory and the pattern.

    Returns ``(path, "")`` when the path holds no glob characters.
    """
    parts = path.split("/")
    for i, part in enumerate(parts):
        if has_glob(part):
            base = "/".join(parts[:i]) or "."
            return base, "/".join(parts[i:])
    return path, ""


def _find_closing_brace(pattern: str, start: int) -> int:
    depth = 0
    for i in range(start, len(pattern)):
        ch = pattern[i]
        if ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return i
    return -1


def _split_top_level(body: str) -> list[str]:
    out: list[str] = []
    depth = 0
    buf: list[str] = []
    for ch in body:
        if ch == "," and depth == 0:
            out.append("".join(buf))
            buf = []
            continue
        if ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
        buf.append(ch)
    out.append("".join(buf))
    return out


def expand_braces(pattern: str) -> list[str]:
    """Expand ``{a,b}`` alternatives; gitwildmatch has no brace syntax."""
    start = pattern.find("{")
    if start < 0:
        return [pattern]
    end = _find_closing_brace(pattern, start)
    if end < 0:
        return [pattern]
    options = _split_top_level(pattern[start + 1 : end])
    if len(options) < 2:
        head = pattern[: end + 1]
        return [head + rest for rest in expand_braces(pattern[end + 1 :])]
    out: list[str] = []
    for opt in options:
        out.extend(expand_braces(pattern[:start] + opt + pattern[end + 1 :]))
    return out


def _anchor(pattern: str) -> str:
    p = pattern.strip()
    if p.startswith("./"):
        p = p[2:]
    if p.startswith("/"):
        return p
    return "/" + p


def compile_patterns(patterns: Iterable[str]) -> pathspec.PathSpec:
    """Compile patterns anchored at the walk root (``*`` stays in one segment)."""
    lines: list[str] = []
    for raw in patterns:
        negate = raw.startswith("!")
        body = raw[1:] if negate else raw
        for p in expand_braces(body):
            anchored = _anchor(p)
            lines.append("!" + anchored if negate else anchored)
    return pathspec.PathSpec.from_lines("gitwildmatch", lines)


def match_paths(
    paths: Sequence[str],
    patterns: Sequence[str],
    excludes: Sequence[str] = (),
) -> list[str]:
    """Keep ``paths`` matching any of ``patterns`` and none of ``excludes``."""
    positive = [p.strip() for p in patterns if p.strip()]
    if not positive or any(p in MATCH_ALL for p in positive):
        selected = list(paths)
    else:
        inc = compile_patterns(positive)
        selected = [p for p in paths if inc.match_file(p)]
    if excludes:
        exc = compile_patterns(excludes)
        selected = [p for p in selected if not exc.match_file(p)]
    selected.sort()
    return selected


def browse(
    fs: FileSystem,
    base: str = ".",
    ignore: Sequence[str] | None = None,
) -> list[str]:
    """Recursively list ``base`` relative to itself.

    Directories are reported with a trailing ``/``. Ignored entries are pruned
    and never descended into.
    """
    spec = pathspec.PathSpec.from_lines(
        "gitwildmatch", DEFAULT_IGNORE if ignore is None else ignore
    )
    out: list[str] = []
    stack: list[tuple[str, str]] = [(base, "")]
    while stack:
        rel_dir, prefix = stack.pop()
        for name, is_dir in fs.list_dir(rel_dir):
            rel = prefix + name
            key = rel + "/" if is_dir else rel
            if spec.match_file(key):
                continue
            out.append(key)
            if is_dir:
                stack.append((posixpath.join(rel_dir, name), key))
    out.sort()
    return out


def join_base(base: str, rel: str) -> str:
    if base in MATCH_ALL:
        return rel
    return posixpath.join(base.rstrip("/"), rel)
