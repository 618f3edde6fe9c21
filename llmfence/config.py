from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Literal

from .discover import DEFAULT_IGNORE

try:
    import tomllib  # py311+
except ModuleNotFoundError:  # pragma: no cover
    import tomli as tomllib  # pyright: ignore[reportMissingImports]

CONFIG_FILENAMES: tuple[str, ...] = (".llmfence.toml", "llmfence.toml")
PYPROJECT_FILENAME = "pyproject.toml"


@dataclass
class Config:
    # Gitwildmatch patterns pruned from every directory walk (packer, @get, @ls).
    ignore: list[str] = field(default_factory=lambda: DEFAULT_IGNORE.copy())
    # Decoding of packed files:
    # - "replace": substitute invalid bytes (default)
    # - "strict": treat undecodable files as unreadable
    encoding_errors: Literal["replace", "strict"] = "replace"
    # Report writes without touching the working directory.
    dry_run: bool = False
    # File the @bash transcript lines redirect into.
    transcript: str = "me.md"


def _find_config_path(root: Path) -> Path | None:
    root = root.resolve()
    for name in CONFIG_FILENAMES:
        p = root / name
        if p.exists():
            return p
    pyproject = root / PYPROJECT_FILENAME
    if pyproject.exists():
        return pyproject
    return None


def _extract_section(data: Any, *, from_pyproject: bool) -> dict[str, Any]:
    section: dict[str, Any] = {}
    if not isinstance(data, dict):
        return section

    if not from_pyproject:
        lf = data.get("llmfence")
        if isinstance(lf, dict):
            return lf

    tool = data.get("tool")
    if isinstance(tool, dict):
        lf2 = tool.get("llmfence")
        if isinstance(lf2, dict):
            return lf2

    return section


def load_config(root: Path) -> Config:
    cfg_path = _find_config_path(root)
    if cfg_path is None:
        return Config()

    data = tomllib.loads(cfg_path.read_text(encoding="utf-8"))
    section = _extract_section(data, from_pyproject=cfg_path.name == PYPROJECT_FILENAME)
    cfg = Config()

    ignore = section.get("ignore", cfg.ignore)
    if isinstance(ignore, list):
        cfg.ignore = [str(x) for x in ignore]

    encoding_errors = section.get("encoding_errors", cfg.encoding_errors)
    if isinstance(encoding_errors, str):
        encoding_errors = encoding_errors.strip().lower()
        if encoding_errors in {"replace", "strict"}:
            cfg.encoding_errors = encoding_errors  # type: ignore[assignment]

    cfg.dry_run = bool(section.get("dry_run", cfg.dry_run))

    transcript = section.get("transcript", cfg.transcript)
    if isinstance(transcript, str) and transcript.strip():
        cfg.transcript = transcript.strip()

    return cfg
