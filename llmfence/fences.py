from __future__ import annotations

import re

from .formats import FENCE, HEADER_PREFIX, LINK_SEPARATOR, NESTED_FENCE

_LEADING_BACKTICKS_RE = re.compile(r"^`+")


def parse_file_header(line: str) -> tuple[str, str] | None:
    """Return ``(label, filename)`` for a ``#### [label](filename)`` line.

    Returns None for lines that are not headers at all and raises ValueError for
    lines shaped like a header that cannot be split unambiguously.
    """
    if not (
        line.startswith(HEADER_PREFIX)
        and line.endswith(")")
        and LINK_SEPARATOR in line
    ):
        return None
    parts = line.split(LINK_SEPARATOR)
    if len(parts) != 2:
        raise ValueError("ambiguous header separator")
    label = parts[0][len(HEADER_PREFIX) :]
    filename = parts[1][:-1]
    if not filename:
        raise ValueError("empty filename")
    return label, filename


def format_file_header(label: str, filename: str) -> str:
    return f"{HEADER_PREFIX}{label}{LINK_SEPARATOR}{filename})"


def is_bare_fence(line: str) -> bool:
    return line == FENCE


def is_nested_fence(line: str) -> bool:
    return line.startswith(NESTED_FENCE)


def is_tagged_fence(line: str) -> bool:
    return line.startswith(FENCE) and not line.startswith(NESTED_FENCE)


def fence_tag(line: str) -> str:
    return _LEADING_BACKTICKS_RE.sub("", line.strip(), count=1).strip()


def escape_content_fences(content: str) -> str:
    """Lengthen backtick fences inside file content by one backtick.

    The parser reads four-or-more backtick lines as literal nested fences and
    renders them back as three backticks.
    """
    lines = content.split("\n")
    return "\n".join("`" + ln if ln.startswith(FENCE) else ln for ln in lines)


def render_file_block(label: str, filename: str, lang: str, content: str) -> str:
    header = format_file_header(label, filename)
    if not content:
        # Open fence directly followed by the close fence decodes to "".
        return "\n".join([header, FENCE + lang, FENCE])
    body = escape_content_fences(content)
    if body.endswith("\n"):
        body = body[:-1]
    return "\n".join([header, FENCE + lang, body, FENCE])
