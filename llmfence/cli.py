from __future__ import annotations

import argparse
import importlib.metadata as importlib_metadata
import sys
from pathlib import Path

from .config import load_config
from .fs import LocalFileSystem
from .packer import pack_markdown
from .parser import parse_response
from .system import render_system_prompt
from .unpacker import unpack_answer


def _llmfence_version() -> str:
    try:
        return importlib_metadata.version("llmfence")
    except importlib_metadata.PackageNotFoundError:
        return "0+unknown"


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="llmfence",
        description="Pack project files into prompts and apply model responses.",
    )
    p.add_argument(
        "--version",
        action="version",
        version=f"llmfence {_llmfence_version()}",
    )
    sub = p.add_subparsers(dest="cmd", required=True)

    # pack
    pack = sub.add_parser(
        "pack", help="Expand `- [name](path)` checklist lines into file blocks."
    )
    pack.add_argument("input", type=Path, help="Prompt markdown with a checklist")
    pack.add_argument(
        "-o",
        "--output",
        type=Path,
        default=None,
        help="Output path (default: print packed prompt to stdout)",
    )
    pack.add_argument(
        "-C",
        "--cwd",
        type=Path,
        default=Path("."),
        help="Directory checklist paths are resolved against (default: .)",
    )

    # unpack
    unpack = sub.add_parser(
        "unpack", help="Write files and run commands from a model response."
    )
    unpack.add_argument("response", type=Path, help="Model response markdown")
    unpack.add_argument(
        "-C",
        "--cwd",
        type=Path,
        default=Path("."),
        help="Directory files are written into (default: .)",
    )
    unpack.add_argument(
        "--dry",
        action="store_true",
        help="Report what would be written without touching files.",
    )
    unpack.add_argument(
        "--confirm",
        action="store_true",
        help="Show a dry run first and ask before applying it.",
    )

    # commands
    sub.add_parser(
        "commands", help="Print the command catalogue for the system prompt."
    )
    return p


def _print_top_level_help(parser: argparse.ArgumentParser) -> None:
    parser.print_help()
    print()
    print("Quick start examples:")
    print("  llmfence pack prompt.md -o packed.md")
    print("  llmfence unpack answer.md --dry")
    print("  llmfence unpack answer.md --confirm")
    print("  llmfence commands")


def _run_pack(args: argparse.Namespace) -> None:
    root = args.cwd.resolve()
    cfg = load_config(root)
    text = args.input.read_text(encoding="utf-8")
    result = pack_markdown(
        text,
        LocalFileSystem(root),
        cfg.ignore,
        encoding_errors=cfg.encoding_errors,
    )
    if args.output is None:
        print(result.text)
        return

    args.output.write_text(result.text, encoding="utf-8")
    print(f"+ {args.output.as_posix()}", file=sys.stderr)
    if result.injected:
        print(f"• injected {len(result.injected)} file(s):", file=sys.stderr)
        for line in result.injected:
            print(line, file=sys.stderr)
    if result.errors:
        print("", file=sys.stderr)
        print("Unable to read files:", file=sys.stderr)
        for line in result.errors:
            print(line, file=sys.stderr)
    size = len(result.text.encode("utf-8"))
    print(
        f"Prompt size: {size:,} bytes — {len(result.injected):,} file(s).",
        file=sys.stderr,
    )


def _confirmed(prompt: str) -> bool:
    try:
        answer = input(prompt)
    except EOFError:
        return False
    return answer.strip().lower() in {"y", "yes"}


def _run_unpack(args: argparse.Namespace) -> None:
    root = args.cwd.resolve()
    cfg = load_config(root)
    parsed = parse_response(args.response.read_text(encoding="utf-8"))
    fs = LocalFileSystem(root)
    dry = bool(args.dry or cfg.dry_run)

    if args.confirm and not dry:
        for line in unpack_answer(parsed, fs, dry=True, config=cfg):
            print(line)
        if not _confirmed("Apply these changes? [y/N] "):
            print("Aborted, nothing written.", file=sys.stderr)
            return

    for line in unpack_answer(parsed, fs, dry=dry, config=cfg):
        print(line)
    if parsed.validate is not None and not parsed.is_valid:
        print("Warning: response manifest does not match its files.", file=sys.stderr)


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    raw_argv = list(sys.argv[1:] if argv is None else argv)
    if not raw_argv:
        _print_top_level_help(parser)
        return

    args = parser.parse_args(raw_argv)

    if args.cmd == "pack":
        _run_pack(args)
    elif args.cmd == "unpack":
        _run_unpack(args)
    elif args.cmd == "commands":
        print(render_system_prompt())
