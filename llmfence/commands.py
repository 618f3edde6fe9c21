"""Commands a response can invoke with ``#### [label](@name)`` blocks.

Each command is constructed from the triggering entry, the whole parsed
response and a :class:`~llmfence.fs.FileSystem`. :meth:`Command.run` returns a
generator of report lines; side effects happen while it is consumed, one unit
of work per pulled line, so a caller that stops iterating stops the work.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterator
from typing import ClassVar

from .checklist import format_checklist_line, split_label_options
from .config import Config
from .discover import browse, match_paths
from .formats import COMMAND_PREFIX
from .fs import FileSystem
from .model import FileEntry, ParsedResult


def _content_lines(entry: FileEntry) -> list[str]:
    return [ln.strip() for ln in entry.content.strip().split("\n") if ln.strip()]


class Command(ABC):
    name: ClassVar[str] = ""
    help: ClassVar[str] = ""
    example: ClassVar[str] = ""
    label: ClassVar[str] = ""

    def __init__(
        self,
        entry: FileEntry,
        parsed: ParsedResult,
        fs: FileSystem,
        config: Config | None = None,
        *,
        dry: bool = False,
    ) -> None:
        self.entry = entry
        self.parsed = parsed
        self.fs = fs
        self.config = config or Config()
        self.dry = dry

    @abstractmethod
    def run(self) -> Iterator[str]:
        """Yield report lines, doing the work as they are consumed."""

    def __iter__(self) -> Iterator[str]:
        return self.run()


COMMANDS: dict[str, type[Command]] = {}


def register_command(cls: type[Command]) -> type[Command]:
    if not cls.name or cls.name.startswith(COMMAND_PREFIX):
        raise ValueError(f"Invalid command name for {cls.__name__}: {cls.name!r}")
    if cls.name in COMMANDS:
        raise ValueError(f"Command already registered: {cls.name}")
    COMMANDS[cls.name] = cls
    return cls


class UnknownCommand(Command):
    """Fallback for ``@name`` tokens nothing is registered under."""

    def run(self) -> Iterator[str]:
        yield f"! Unknown command: {self.entry.filename}, available commands:"
        for name, cls in COMMANDS.items():
            yield f" - {name} - {cls.help}"


def resolve_command(
    entry: FileEntry,
    parsed: ParsedResult,
    fs: FileSystem,
    config: Config | None = None,
    *,
    dry: bool = False,
) -> Command:
    """Build the command for ``entry``; ``dry`` commands only report."""
    cls = COMMANDS.get(entry.command_name, UnknownCommand)
    return cls(entry, parsed, fs, config, dry=dry)


@register_command
class ValidateCommand(Command):
    name = "validate"
    label = "2 file(s), 1 command(s)"
    help = (
        "Validate the response by comparing the provided (parsed) files and "
        "commands to the expected list. The label holds the number of files and "
        "the number of commands besides @validate in the response."
    )
    example = (
        "```markdown\n"
        "- [](system.md)\n"
        "- [Updated](play/main.js)\n"
        "- [Setting up the project](@bash)\n"
        "```"
    )

    def _declared_counts(self) -> tuple[int, int] | None:
        files = commands = 0
        for part in self.entry.label.split(","):
            part = part.strip()
            if not part:
                continue
            no, _, kind = part.partition(" ")
            try:
                n = int(no)
            except ValueError:
                return None
            if kind.strip() == "command(s)":
                commands = n
            else:
                files = n
        return files, commands

    def _actual_counts(self) -> tuple[int, int]:
        commands = sum(1 for f in self.parsed.files if f.startswith(COMMAND_PREFIX))
        return len(self.parsed.files) - commands, commands

    def run(self) -> Iterator[str]:
        n_files, n_commands = self._actual_counts()
        if self._declared_counts() != (n_files, n_commands):
            yield "! Format errors in the response ------------------------------"
            yield f'  Unexpected label "{self.entry.label}"'
            yield (
                f"  but provided (parsed response): {n_files} file(s), "
                f"{n_commands} command(s)"
            )
            yield "  ------------------------------------------------------------"
            yield (
                "  i label format for @validate is "
                '"#### [N file(s), M command(s)](@validate)"'
            )
            yield "    where:"
            yield "      N - amount of files, commands excluded"
            yield "      M - amount of commands, @validate excluded"
            yield "    a part may be skipped when its amount is zero"
            yield "  ------------------------------------------------------------"

        if self.parsed.is_valid:
            yield "+ Expected validation of files 100% valid"
            return

        yield "! Validation of response files failed"
        files = list(self.parsed.files)
        requested = list(self.parsed.requested)
        if requested:
            yield "   Files to validate (declared):"
            for filename in requested:
                mark = "+" if filename in self.parsed.files else "-"
                yield f"    {mark} {filename}"
        if files:
            yield "   Files parsed from the answer:"
            for filename in files:
                mark = "+" if filename in self.parsed.requested else "-"
                yield f"    {mark} {filename}"


@register_command
class ListFilesCommand(Command):
    name = "ls"
    help = (
        "List the files inside project one directory or pattern per line "
        "(glob patterns supported)"
    )
    example = "```\ntypes\nsrc/**/*.test.js\n```"

    def run(self) -> Iterator[str]:
        patterns = _content_lines(self.entry) or ["."]
        excludes = split_label_options(self.entry.label).excludes
        entries = browse(self.fs, ".", self.config.ignore)
        files = [p for p in entries if not p.endswith("/")]
        yield from match_paths(files, patterns, excludes)


@register_command
class GetFilesCommand(Command):
    name = "get"
    help = (
        "Get the files from the project one file or pattern per line "
        "(glob patterns supported)"
    )
    example = "```\nsrc/index.js\ntypes/**\npackage.json\n```"

    def run(self) -> Iterator[str]:
        patterns = _content_lines(self.entry)
        if not patterns:
            return
        excludes = split_label_options(self.entry.label).excludes
        entries = browse(self.fs, ".", self.config.ignore)
        files = [p for p in entries if not p.endswith("/")]
        for rel in match_paths(files, patterns, excludes):
            yield format_checklist_line(rel)


@register_command
class BashCommand(Command):
    name = "bash"
    help = "Run bash commands and save output of stdout & stderr in chat"
    example = "```bash\npytest -q\n```"

    def run(self) -> Iterator[str]:
        transcript = self.config.transcript
        yield " • Execute command:"
        yield " •"
        yield f' • echo "```bash" > {transcript}'
        for row in self.entry.content.split("\n"):
            if row.strip():
                yield f" • {row} >> {transcript} 2>&1"
        yield f' • echo "```" >> {transcript}'


@register_command
class RemoveCommand(Command):
    name = "rm"
    help = "Remove files from the project (cwd)"
    example = "```txt\ndist/build.js\ntemp/cache.tmp\n```"

    def run(self) -> Iterator[str]:
        paths = _content_lines(self.entry)
        if not paths:
            yield " • No files specified for removal"
            return
        yield " • Removing files:"
        for path in paths:
            if self.dry:
                yield f" • Would remove: {path}"
                continue
            try:
                self.fs.remove(path)
            except FileNotFoundError:
                yield f" ! Not found: {path}"
            except (OSError, ValueError) as e:
                yield f" ! Failed to remove {path}: {e}"
            else:
                yield f" + Removed: {path}"


@register_command
class SummaryCommand(Command):
    name = "summary"
    help = "Show short message in the output to keep important context"
    example = (
        "```txt\nKey changes made to the project:\n"
        "- Refactored utils\n- Added tests\n```"
    )

    def run(self) -> Iterator[str]:
        message = self.entry.content.strip()
        if not message:
            yield " i Empty summary"
            return
        yield " i Summary:"
        for line in message.split("\n"):
            yield f"   {line}"
