"""Tests for path sanitization."""

import pytest

from session_share.paths import sanitize_path, sanitize_paths_in_text

BASE = "/Users/testuser/dev/myapp"


class TestSanitizePath:
    def test_path_under_base(self):
        assert sanitize_path(f"{BASE}/src/auth.ts", BASE) == "src/auth.ts"

    def test_path_equal_to_base(self):
        assert sanitize_path(BASE, BASE) == "."
        assert sanitize_path(BASE + "/", BASE) == "."

    def test_external_path_unchanged(self):
        assert sanitize_path("/etc/hosts", BASE) == "/etc/hosts"

    def test_sibling_with_shared_prefix_unchanged(self):
        assert sanitize_path("/Users/testuser/dev/myapp2/x.ts", BASE) == "/Users/testuser/dev/myapp2/x.ts"

    def test_relative_path_unchanged(self):
        assert sanitize_path("src/auth.ts", BASE) == "src/auth.ts"

    def test_empty_inputs(self):
        assert sanitize_path("", BASE) == ""
        assert sanitize_path(f"{BASE}/a", "") == f"{BASE}/a"

    def test_base_with_trailing_slash(self):
        assert sanitize_path(f"{BASE}/src/a.ts", BASE + "/") == "src/a.ts"

    def test_unnormalized_path(self):
        assert sanitize_path(f"{BASE}/src/../lib/./a.ts", BASE) == "lib/a.ts"
        assert sanitize_path(f"{BASE}/../other/a.ts", BASE) == f"{BASE}/../other/a.ts"

    def test_windows_paths(self):
        base = "C:\\Users\\testuser\\myapp"
        assert sanitize_path("C:\\Users\\testuser\\myapp\\src\\a.ts", base) == "src\\a.ts"
        assert sanitize_path("D:\\other\\a.ts", base) == "D:\\other\\a.ts"
        assert sanitize_path("c:\\users\\testuser\\myapp", base) == "."

    @pytest.mark.parametrize("path", [
        f"{BASE}/src/auth.ts",
        BASE,
        "/etc/hosts",
        "relative/file.py",
        "",
        "C:\\Users\\testuser\\myapp\\a.ts",
    ])
    def test_idempotent(self, path):
        once = sanitize_path(path, BASE)
        assert sanitize_path(once, BASE) == once


class TestSanitizePathsInText:
    def test_rewrites_embedded_paths(self):
        text = f"Reading {BASE}/src/auth.ts and {BASE}/README.md"
        assert sanitize_paths_in_text(text, BASE) == "Reading src/auth.ts and README.md"

    def test_paths_in_json_content(self):
        text = f'{{"file_path": "{BASE}/src/auth.ts", "ok": true}}'
        assert sanitize_paths_in_text(text, BASE) == '{"file_path": "src/auth.ts", "ok": true}'

    def test_leaves_external_paths(self):
        text = "See /etc/hosts and /Users/testuser/dev/myapp2/x.ts"
        assert sanitize_paths_in_text(text, BASE) == text

    def test_base_inside_longer_path_unchanged(self):
        text = f"/mnt/backup{BASE}/src/a.ts"
        assert sanitize_paths_in_text(text, BASE) == text

    def test_base_without_separator_unchanged(self):
        text = f"cd {BASE} && ls"
        assert sanitize_paths_in_text(text, BASE) == text

    def test_backslash_separators(self):
        base = "C:\\Users\\testuser\\myapp"
        text = "Error in C:\\Users\\testuser\\myapp\\src\\a.ts line 3"
        assert sanitize_paths_in_text(text, base) == "Error in src\\a.ts line 3"

    def test_mixed_separators(self):
        text = "path \\Users\\testuser\\dev\\myapp\\lib\\b.ts"
        assert sanitize_paths_in_text(text, BASE) == "path lib\\b.ts"

    def test_empty_inputs(self):
        assert sanitize_paths_in_text("", BASE) == ""
        assert sanitize_paths_in_text(f"{BASE}/a", "") == f"{BASE}/a"

    def test_idempotent(self):
        text = f"Reading {BASE}/src/auth.ts"
        once = sanitize_paths_in_text(text, BASE)
        assert sanitize_paths_in_text(once, BASE) == once
