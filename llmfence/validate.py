from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

from .checklist import parse_checklist
from .formats import VALIDATE_COMMAND
from .model import FileEntry


@dataclass(frozen=True)
class ValidationResult:
    validate: FileEntry | None = None
    files: dict[str, str] = field(default_factory=dict)
    requested: dict[str, str] = field(default_factory=dict)
    is_valid: bool = False


def validate_entries(correct: Sequence[FileEntry]) -> ValidationResult:
    """Reconcile the ``@validate`` manifest against the decoded entries.

    Only filenames take part in the comparison; labels and order do not.
    Without a manifest the result is never valid.
    """
    manifest: FileEntry | None = None
    files: dict[str, str] = {}
    for entry in correct:
        if entry.filename == VALIDATE_COMMAND:
            if manifest is None:
                manifest = entry
            continue
        files[entry.filename] = entry.label

    if manifest is None:
        return ValidationResult(files=files)

    requested = parse_checklist(manifest.content)
    return ValidationResult(
        validate=manifest,
        files=files,
        requested=requested,
        is_valid=sorted(files) == sorted(requested),
    )
