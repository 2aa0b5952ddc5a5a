"""Tests for which changed paths get documented."""

import pytest

from pr_doc_agent.classifier import classify, fence_language, is_code_file
from fixtures import make_file


class TestIsCodeFile:

    @pytest.mark.parametrize("path", [
        "src/UserService.cs",
        "app/main.py",
        "web/index.ts",
        "lib/util.js",
        "cmd/server.go",
        "native/vec.cpp",
        "native/vec.h",
        "core/lib.rs",
        "Main.java",
        "site/index.php",
        "scripts/task.rb",
        "SRC/Upper.PY",
    ])
    def test_source_extensions_are_in_scope(self, path):
        assert is_code_file(path)

    @pytest.mark.parametrize("path", [
        "README.md",
        "config.yml",
        "package.json",
        "Makefile",
        "image.png",
    ])
    def test_other_extensions_are_skipped(self, path):
        assert not is_code_file(path)

    @pytest.mark.parametrize("path", [
        "src/bin/Debug/App.cs",
        "src/obj/Temp.cs",
        "web/node_modules/lodash/index.js",
        "repo/.git/hooks/pre-commit.py",
        "bin/tool.py",
    ])
    def test_build_and_dependency_dirs_are_skipped(self, path):
        assert not is_code_file(path)

    def test_excluded_names_match_whole_segments_only(self):
        assert is_code_file("src/binary_utils.py")
        assert is_code_file("robjects/model.py")


class TestClassify:

    def test_empty_input(self):
        assert classify([]) == []

    def test_keeps_order_and_drops_non_code(self):
        files = [
            make_file("b.py"),
            make_file("README.md"),
            make_file("a.cs"),
            make_file("bin/x.cs"),
            make_file("c.go"),
        ]

        assert [f.path for f in classify(files)] == ["b.py", "a.cs", "c.go"]

    def test_idempotent(self):
        files = [make_file("a.py"), make_file("notes.txt"), make_file("b.ts")]

        once = classify(files)

        assert classify(once) == once

    def test_no_non_code_files_yields_empty(self):
        assert classify([make_file("README.md"), make_file("docs/guide.md")]) == []


class TestFenceLanguage:

    def test_known_extensions(self):
        assert fence_language("a/B.cs") == "csharp"
        assert fence_language("x.py") == "python"
        assert fence_language("x.ts") == "typescript"

    def test_unknown_extension_falls_back_to_text(self):
        assert fence_language("Dockerfile") == "text"
