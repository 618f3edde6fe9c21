from __future__ import annotations

from pathlib import Path

from llmfence.discover import (
    browse,
    expand_braces,
    has_glob,
    join_base,
    match_paths,
    split_glob_base,
)
from llmfence.fs import LocalFileSystem


def _tree(root: Path) -> None:
    (root / "src" / "lib").mkdir(parents=True)
    (root / "src" / "app.js").write_text("app\n", encoding="utf-8")
    (root / "src" / "app.test.js").write_text("test\n", encoding="utf-8")
    (root / "src" / "lib" / "util.ts").write_text("util\n", encoding="utf-8")
    (root / "README.md").write_text("# Hi\n", encoding="utf-8")
    (root / ".git").mkdir()
    (root / ".git" / "HEAD").write_text("ref\n", encoding="utf-8")
    (root / "node_modules" / "x").mkdir(parents=True)
    (root / "node_modules" / "x" / "index.js").write_text("x\n", encoding="utf-8")


def test_browse_lists_files_and_directories(tmp_path: Path) -> None:
    _tree(tmp_path)
    entries = browse(LocalFileSystem(tmp_path))
    assert entries == [
        "README.md",
        "src/",
        "src/app.js",
        "src/app.test.js",
        "src/lib/",
        "src/lib/util.ts",
    ]


def test_browse_respects_custom_ignore(tmp_path: Path) -> None:
    _tree(tmp_path)
    entries = browse(LocalFileSystem(tmp_path), ignore=["lib", "*.md"])
    assert "src/lib/" not in entries
    assert "src/lib/util.ts" not in entries
    assert "README.md" not in entries
    # Overriding the ignore list drops the defaults too.
    assert ".git/HEAD" in entries


def test_browse_subdirectory_is_relative_to_base(tmp_path: Path) -> None:
    _tree(tmp_path)
    assert browse(LocalFileSystem(tmp_path), "src/lib") == ["util.ts"]


def test_match_paths_is_anchored() -> None:
    paths = ["a.js", "src/b.js", "src/c/d.js", "src/e.ts"]
    assert match_paths(paths, ["*.js"]) == ["a.js"]
    assert match_paths(paths, ["src/*.js"]) == ["src/b.js"]
    assert match_paths(paths, ["src/**/*.js"]) == ["src/b.js", "src/c/d.js"]


def test_match_paths_directory_name_matches_contents() -> None:
    paths = ["a.js", "src/b.js", "src/c/d.js", "types/x.d.ts"]
    assert match_paths(paths, ["types"]) == ["types/x.d.ts"]


def test_match_paths_dot_matches_everything() -> None:
    paths = ["b.js", "a.js"]
    assert match_paths(paths, ["."]) == ["a.js", "b.js"]
    assert match_paths(paths, []) == ["a.js", "b.js"]


def test_match_paths_excludes_and_negation() -> None:
    paths = ["src/app.js", "src/app.test.js", "src/readme.txt"]
    assert match_paths(paths, ["src/**"], ["**/*.test.js"]) == [
        "src/app.js",
        "src/readme.txt",
    ]
    assert match_paths(paths, ["src/**", "!src/*.txt"]) == [
        "src/app.js",
        "src/app.test.js",
    ]


def test_match_paths_braces() -> None:
    paths = ["a.js", "a.ts", "a.md"]
    assert match_paths(paths, ["*.{js,ts}"]) == ["a.js", "a.ts"]


def test_expand_braces() -> None:
    assert expand_braces("src/*.{js,jsx}") == ["src/*.js", "src/*.jsx"]
    assert expand_braces("{a,b}/{c,d}") == ["a/c", "a/d", "b/c", "b/d"]
    assert expand_braces("{a,{b,c}}.js") == ["a.js", "b.js", "c.js"]
    assert expand_braces("plain") == ["plain"]
    assert expand_braces("open{brace") == ["open{brace"]


def test_split_glob_base() -> None:
    assert split_glob_base("src/**/*.js") == ("src", "**/*.js")
    assert split_glob_base("*.md") == (".", "*.md")
    assert split_glob_base("a/b/c.js") == ("a/b/c.js", "")
    assert has_glob("src/*.js")
    assert not has_glob("src/app.js")


def test_join_base() -> None:
    assert join_base(".", "a.js") == "a.js"
    assert join_base("src/", "a.js") == "src/a.js"
