"""Checklist line grammar shared by the packer and the ``@validate`` manifest.

A checklist line is a markdown list item ``- [label](path)``. The label may be
empty, the path may not. Anything else is not a checklist line and is ignored
by callers (never an error).
"""

from __future__ import annotations

from dataclasses import dataclass, field

from .formats import CHECKLIST_PREFIX, LINK_SEPARATOR, LIST_ONLY_OPTION


@dataclass(frozen=True)
class ChecklistItem:
    label: str
    path: str


@dataclass(frozen=True)
class LabelOptions:
    label: str = ""
    list_only: bool = False
    excludes: list[str] = field(default_factory=list)


def parse_checklist_line(line: str) -> ChecklistItem | None:
    s = line.strip()
    if not (s.startswith(CHECKLIST_PREFIX) and s.endswith(")")):
        return None
    parts = s.split(LINK_SEPARATOR)
    if len(parts) != 2:
        return None
    label = parts[0][len(CHECKLIST_PREFIX) :]
    path = parts[1][:-1].strip()
    if not path:
        return None
    return ChecklistItem(label=label, path=path)


def parse_checklist(text: str) -> dict[str, str]:
    """Decode a checklist body into an ordered ``path -> label`` mapping."""
    out: dict[str, str] = {}
    for line in text.split("\n"):
        item = parse_checklist_line(line)
        if item is not None:
            out[item.path] = item.label
    return out


def format_checklist_line(path: str, label: str = "") -> str:
    return f"{CHECKLIST_PREFIX}{label}{LINK_SEPARATOR}{path})"


def split_label_options(label: str) -> LabelOptions:
    """Split ``@ls;-**/*.test.js;Docs`` style labels into options.

    ``@ls`` requests a path-only listing, ``-pattern`` adds an exclusion and
    whatever remains is kept as the display label.
    """
    clean = label.strip()
    if clean.startswith("[") and clean.endswith("]"):
        clean = clean[1:-1]
    list_only = False
    excludes: list[str] = []
    rest: list[str] = []
    for raw in clean.split(";"):
        part = raw.strip()
        if not part:
            continue
        if part == LIST_ONLY_OPTION:
            list_only = True
        elif part.startswith("-") and len(part) > 1:
            excludes.append(part[1:])
        else:
            rest.append(part)
    return LabelOptions(label=";".join(rest), list_only=list_only, excludes=excludes)
