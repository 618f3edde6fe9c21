from __future__ import annotations

from llmfence.commands import COMMANDS
from llmfence.parser import parse_response
from llmfence.system import (
    TOOLS_LIST_MARKER,
    TOOLS_MD_MARKER,
    render_commands_markdown,
    render_system_prompt,
)


def test_catalogue_lists_every_command() -> None:
    md = render_commands_markdown()
    for name, cls in COMMANDS.items():
        assert f"### {name}\n{cls.help}\n" in md
        assert f"](@{name})" in md


def test_catalogue_examples_parse_as_commands() -> None:
    parsed = parse_response(render_commands_markdown())
    assert parsed.failed == ()
    assert [e.filename for e in parsed.correct] == [f"@{n}" for n in COMMANDS]
    validate = next(e for e in parsed.correct if e.filename == "@validate")
    assert validate.label == "2 file(s), 1 command(s)"


def test_system_prompt_fills_markers() -> None:
    prompt = render_system_prompt()
    assert TOOLS_LIST_MARKER not in prompt
    assert TOOLS_MD_MARKER not in prompt
    assert ", ".join(COMMANDS) in prompt


def test_custom_template() -> None:
    out = render_system_prompt(f"Tools: {TOOLS_LIST_MARKER}")
    assert out == "Tools: " + ", ".join(COMMANDS)
