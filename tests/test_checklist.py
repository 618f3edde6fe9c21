from __future__ import annotations

from llmfence.checklist import (
    format_checklist_line,
    parse_checklist,
    parse_checklist_line,
    split_label_options,
)


def test_parse_checklist_line() -> None:
    item = parse_checklist_line("- [Types](types/index.d.ts)")
    assert item is not None
    assert item.label == "Types"
    assert item.path == "types/index.d.ts"


def test_parse_checklist_line_allows_empty_label() -> None:
    item = parse_checklist_line("  - [](src/**)  ")
    assert item is not None
    assert item.label == ""
    assert item.path == "src/**"


def test_non_checklist_lines_are_ignored() -> None:
    assert parse_checklist_line("Some prose (with parens)") is None
    assert parse_checklist_line("- [a](b](c)") is None
    assert parse_checklist_line("- [a]()") is None
    assert parse_checklist_line("- [a](b) tail") is None


def test_parse_checklist_body() -> None:
    body = "- [A](a.js)\nnoise\n- [](b.js)\n"
    assert parse_checklist(body) == {"a.js": "A", "b.js": ""}


def test_format_checklist_line_round_trips() -> None:
    line = format_checklist_line("src/app.js", "App")
    assert line == "- [App](src/app.js)"
    item = parse_checklist_line(line)
    assert item is not None
    assert (item.label, item.path) == ("App", "src/app.js")


def test_split_label_options() -> None:
    opts = split_label_options("@ls;-**/*.test.js; -dist/**;Sources")
    assert opts.list_only is True
    assert opts.excludes == ["**/*.test.js", "dist/**"]
    assert opts.label == "Sources"


def test_split_label_options_plain_label() -> None:
    opts = split_label_options("Setup script")
    assert opts.list_only is False
    assert opts.excludes == []
    assert opts.label == "Setup script"
