from __future__ import annotations

import dataclasses

import pytest

from llmfence.model import FileEntry, FileError, ParsedResult


def test_file_entry_defaults() -> None:
    entry = FileEntry()
    assert entry.label == ""
    assert entry.filename == ""
    assert entry.type == ""
    assert entry.content == ""
    assert entry.encoding == "utf-8"


def test_file_entry_is_immutable() -> None:
    entry = FileEntry(filename="a.txt")
    with pytest.raises(dataclasses.FrozenInstanceError):
        entry.content = "changed"  # type: ignore[misc]


def test_command_detection() -> None:
    assert FileEntry(filename="@rm").is_command
    assert FileEntry(filename="@rm").command_name == "rm"
    assert not FileEntry(filename="src/@types/x.d.ts").is_command
    assert FileEntry(filename="a.txt").command_name == ""


def test_file_error_message() -> None:
    assert FileError(error="bad", content="x", line=2).message == "bad"
    assert FileError(error=ValueError("boom")).message == "boom"


def test_parsed_result_defaults() -> None:
    parsed = ParsedResult()
    assert parsed.correct == ()
    assert parsed.failed == ()
    assert parsed.validate is None
    assert parsed.files == {}
    assert parsed.requested == {}
    assert parsed.is_valid is False
    assert parsed.commands == []
