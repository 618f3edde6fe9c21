from __future__ import annotations

from dataclasses import dataclass, field

from .formats import COMMAND_PREFIX, DEFAULT_ENCODING


@dataclass(frozen=True)
class FileEntry:
    """A decoded file or command block."""

    label: str = ""
    filename: str = ""  # target path, or "@name" for a command
    type: str = ""  # fence language tag
    content: str = ""
    encoding: str = DEFAULT_ENCODING

    @property
    def is_command(self) -> bool:
        return self.filename.startswith(COMMAND_PREFIX)

    @property
    def command_name(self) -> str:
        return self.filename[len(COMMAND_PREFIX) :] if self.is_command else ""


@dataclass(frozen=True)
class FileError:
    """A recoverable parse failure at one source line."""

    error: str | Exception
    content: str = ""  # offending raw line
    line: int = 0  # 1-based

    @property
    def message(self) -> str:
        return str(self.error)


@dataclass(frozen=True)
class ParsedResult:
    correct: tuple[FileEntry, ...] = ()
    failed: tuple[FileError, ...] = ()
    validate: FileEntry | None = None
    files: dict[str, str] = field(default_factory=dict)  # filename -> label
    requested: dict[str, str] = field(default_factory=dict)  # filename -> label
    is_valid: bool = False

    @property
    def commands(self) -> list[FileEntry]:
        return [e for e in self.correct if e.is_command]


@dataclass(frozen=True)
class PackResult:
    text: str
    injected: list[str]  # "  - <rel> <n> bytes", in resolution order
    errors: list[str]  # one per unreadable checklist target
