from __future__ import annotations

from .commands import COMMANDS
from .fences import format_file_header

TOOLS_LIST_MARKER = "<!--TOOLS_LIST-->"
TOOLS_MD_MARKER = "<!--TOOLS_MD-->"

DEFAULT_TEMPLATE = f"""\
# Response format

Deliver every file as a block of its own:

#### [label](path/to/file.ext)
```ext
full file content
```

Use four backticks (````) for code fences inside file content.

Run commands with the same block shape and an `@name` instead of a path.
Available commands: {TOOLS_LIST_MARKER}

{TOOLS_MD_MARKER}

Finish every response with an `@validate` block listing each delivered file and
command as `- [label](path)`, labelled `N file(s), M command(s)`.
"""


def render_commands_markdown() -> str:
    sections = []
    for name, cls in COMMANDS.items():
        sections.append(
            f"### {name}\n{cls.help}\n\n"
            f"Example:\n{format_file_header(cls.label, '@' + name)}\n{cls.example}"
        )
    return "\n\n".join(sections)


def render_system_prompt(template: str = DEFAULT_TEMPLATE) -> str:
    """Fill the command catalogue markers of a system prompt template."""
    return template.replace(TOOLS_LIST_MARKER, ", ".join(COMMANDS)).replace(
        TOOLS_MD_MARKER, render_commands_markdown()
    )
