"""Tests for untrusted path normalization and containment."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from builder_ide.core.errors import InvalidPathError, PathEscapeError
from builder_ide.core.paths import is_within, normalize_relative, resolve_path


class TestNormalizeRelative:
    def test_plain_path_is_kept(self) -> None:
        assert normalize_relative("app/page.tsx") == "app/page.tsx"

    def test_backslashes_are_separators(self) -> None:
        assert normalize_relative("app\\page.tsx") == "app/page.tsx"

    def test_leading_slash_is_dropped(self) -> None:
        assert normalize_relative("/etc/passwd") == "etc/passwd"

    def test_empty_is_current_directory(self) -> None:
        assert normalize_relative("") == "."
        assert normalize_relative("./") == "."

    @pytest.mark.parametrize("target", ["..", "../secret", "a/../../b", "..\\..\\windows"])
    def test_parent_segments_are_rejected(self, target: str) -> None:
        with pytest.raises(InvalidPathError):
            normalize_relative(target)

    def test_nul_byte_is_rejected(self) -> None:
        with pytest.raises(InvalidPathError):
            normalize_relative("a\x00b")


class TestIsWithin:
    def test_same_directory(self) -> None:
        assert is_within(Path("/srv/project"), Path("/srv/project")) is True

    def test_child(self) -> None:
        assert is_within(Path("/srv/project"), Path("/srv/project/src/a.ts")) is True

    def test_sibling_with_shared_prefix(self) -> None:
        assert is_within(Path("/srv/project"), Path("/srv/project-evil/a.ts")) is False


class TestResolvePath:
    def test_resolves_inside_base(self, tmp_path: Path) -> None:
        resolved = resolve_path(tmp_path, "src/app/page.tsx")
        assert resolved == Path(os.path.realpath(tmp_path)) / "src" / "app" / "page.tsx"

    def test_traversal_never_escapes(self, tmp_path: Path) -> None:
        with pytest.raises(InvalidPathError):
            resolve_path(tmp_path / "src", "../package.json")

    def test_escape_error_is_an_invalid_path(self) -> None:
        assert issubclass(PathEscapeError, InvalidPathError)
        assert PathEscapeError("x").status_code == 400

    def test_symlink_out_of_base_is_rejected(self, tmp_path: Path) -> None:
        base = tmp_path / "base"
        outside = tmp_path / "outside"
        base.mkdir()
        outside.mkdir()
        (outside / "secret.txt").write_text("secret")
        (base / "link").symlink_to(outside, target_is_directory=True)

        with pytest.raises(PathEscapeError):
            resolve_path(base, "link/secret.txt")

    def test_symlink_inside_base_is_allowed(self, tmp_path: Path) -> None:
        (tmp_path / "real").mkdir()
        (tmp_path / "alias").symlink_to(tmp_path / "real", target_is_directory=True)

        resolved = resolve_path(tmp_path, "alias/file.ts")
        assert resolved == Path(os.path.realpath(tmp_path)) / "real" / "file.ts"
