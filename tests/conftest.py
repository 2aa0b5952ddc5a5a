"""Shared fixtures for the pr-doc-agent test suite.

All tests run with zero API calls, zero network access, zero LLM credits.
The Content Generator and the Version Control Gateway are replaced by the
in-memory fakes from ``fixtures``.
"""

import sys
from datetime import datetime, timezone
from pathlib import Path

import pytest

# Ensure pr_doc_agent/ is importable
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from fixtures import FakeContentGenerator, FakeGateway, make_pr  # noqa: E402


FIXED_TIME = datetime(2024, 5, 17, 9, 30, 0, tzinfo=timezone.utc)


@pytest.fixture
def fixed_clock():
    return lambda: FIXED_TIME


@pytest.fixture
def content_generator():
    """Generator that answers every prompt with a short narrative."""
    return FakeContentGenerator()


@pytest.fixture
def gateway():
    """Gateway serving a two-file PR (one code file, one markdown file)."""
    return FakeGateway(make_pr(["src/UserService.cs", "docs/notes.md"]))


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch):
    """Keep a developer's real credentials out of the tests."""
    for name in (
        "GITHUB_TOKEN", "GITHUB_API_URL", "GEMINI_API_KEY", "LLM_API_KEY",
        "LLM_MODEL", "LLM_BASE_URL", "LLM_TEMPERATURE", "LLM_TOP_P",
        "LLM_MAX_TOKENS", "LLM_TIMEOUT", "DOC_MAX_CONCURRENCY", "DOCS_DIR",
        "DOC_TARGET_BRANCH", "REPO_NAME", "PR_NUMBER",
    ):
        monkeypatch.delenv(name, raising=False)
