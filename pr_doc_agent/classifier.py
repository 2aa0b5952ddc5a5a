"""Decides which changed paths are worth documenting."""

from pathlib import PurePosixPath
from typing import Iterable

from pr_doc_agent.models import ChangedFile

CODE_EXTENSIONS = frozenset({
    ".cs", ".js", ".ts", ".py", ".java", ".cpp", ".h",
    ".go", ".rs", ".php", ".rb",
})

# Build output, dependencies and VCS internals.
EXCLUDED_SEGMENTS = ("bin", "obj", "node_modules", ".git")

FENCE_LANGUAGES = {
    ".cs": "csharp",
    ".js": "javascript",
    ".ts": "typescript",
    ".py": "python",
    ".java": "java",
    ".cpp": "cpp",
    ".cc": "cpp",
    ".h": "c",
    ".json": "json",
    ".yml": "yaml",
    ".yaml": "yaml",
    ".go": "go",
    ".rs": "rust",
    ".php": "php",
    ".rb": "ruby",
}


def _extension(path: str) -> str:
    return PurePosixPath(path).suffix.lower()


def is_code_file(path: str) -> bool:
    """True when ``path`` has a source extension and sits outside excluded dirs.

    Directory segments are matched whole, so ``src/binary_utils.py`` is kept
    while ``app/bin/tool.py`` and ``bin/tool.py`` are not.
    """
    if _extension(path) not in CODE_EXTENSIONS:
        return False
    directories = PurePosixPath(path.replace("\\", "/")).parts[:-1]
    return not any(segment in EXCLUDED_SEGMENTS for segment in directories)


def classify(files: Iterable[ChangedFile]) -> list[ChangedFile]:
    """Return the in-scope subsequence of ``files``, order preserved."""
    return [f for f in files if is_code_file(f.path)]


def fence_language(path: str) -> str:
    """Markdown fence tag for a file, ``text`` when unknown."""
    return FENCE_LANGUAGES.get(_extension(path), "text")
