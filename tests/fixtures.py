"""Shared test data and in-memory collaborators for the test suite."""

import asyncio
from typing import Callable, Dict, Iterable, List, Optional

from pr_doc_agent.models import ChangeKind, ChangedFile, PullRequestInfo, Result

SAMPLE_CODE = """public class UserService
{
    public User GetUser(int id) => _repo.Find(id);
}
"""

SAMPLE_DIFF = """@@ -1,3 +1,4 @@
 public class UserService
 {
+    public User GetUser(int id) => _repo.Find(id);
 }
"""

SAMPLE_NARRATIVE = """## File Overview
Handles user lookups for the account API.

### Key Components
- `GetUser`: loads a user by id
"""

SAMPLE_README = "# Demo\n\nA demo project.\n"


def make_file(
    path: str,
    kind: ChangeKind = ChangeKind.MODIFIED,
    lines_added: int = 3,
    lines_removed: int = 1,
    content: str = SAMPLE_CODE,
    diff: str = SAMPLE_DIFF,
) -> ChangedFile:
    return ChangedFile(
        path=path,
        content=content,
        diff=diff,
        kind=kind,
        lines_added=lines_added,
        lines_removed=lines_removed,
    )


def make_pr(paths: Iterable[str], repo: str = "octo/demo", number: int = 42) -> PullRequestInfo:
    return PullRequestInfo(
        repo=repo,
        number=number,
        title="Add user lookups",
        body="",
        base_branch="main",
        head_branch="feature/users",
        author="octocat",
        changed_files=tuple(make_file(p) for p in paths),
    )


class FakeContentGenerator:
    """Async Content Generator driven by a ``responder(prompt) -> Result``.

    Records every prompt it receives and the peak number of calls in flight.
    """

    def __init__(
        self,
        responder: Optional[Callable[[str], Result]] = None,
        delay: Callable[[str], float] = lambda prompt: 0,
    ):
        self.responder = responder or (lambda prompt: Result.success(SAMPLE_NARRATIVE))
        self.delay = delay
        self.prompts: List[str] = []
        self.in_flight = 0
        self.peak_in_flight = 0

    async def generate(self, prompt, history=None):
        self.prompts.append(prompt)
        self.in_flight += 1
        self.peak_in_flight = max(self.peak_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self.delay(prompt))
            return self.responder(prompt)
        finally:
            self.in_flight -= 1


def fail_when(fragment: str, error: str = "quota exceeded") -> Callable[[str], Result]:
    """Responder failing every prompt that mentions ``fragment``."""
    def responder(prompt):
        if fragment in prompt:
            return Result.failure(error)
        return Result.success(SAMPLE_NARRATIVE)
    return responder


class FakeGateway:
    """In-memory Version Control Gateway recording every write."""

    def __init__(
        self,
        pr: Optional[PullRequestInfo] = None,
        fetch_error: Optional[str] = None,
        files: Optional[Dict[str, str]] = None,
        failing_writes: Iterable[str] = (),
        comment_error: Optional[str] = None,
    ):
        self.pr = pr
        self.fetch_error = fetch_error
        self.files = dict(files or {})
        self.failing_writes = set(failing_writes)
        self.comment_error = comment_error
        self.comments: List[tuple] = []
        self.writes: List[tuple] = []
        self.reads: List[tuple] = []

    def fetch_pull_request(self, repo, number):
        if self.fetch_error:
            return Result.failure(self.fetch_error)
        return Result.success(self.pr)

    def post_comment(self, repo, number, body):
        if self.comment_error:
            return Result.failure(self.comment_error)
        self.comments.append((repo, number, body))
        return Result.success(None)

    def read_file(self, repo, path, ref="HEAD"):
        self.reads.append((repo, path, ref))
        if path not in self.files:
            return Result.failure(f"{path} not found at {ref}")
        return Result.success(self.files[path])

    def write_file(self, repo, path, content, message, branch="main"):
        if path in self.failing_writes:
            return Result.failure("Update failed with status 409")
        self.writes.append((repo, path, content, message, branch))
        self.files[path] = content
        return Result.success(None)

    @property
    def written_paths(self) -> List[str]:
        return [w[1] for w in self.writes]
