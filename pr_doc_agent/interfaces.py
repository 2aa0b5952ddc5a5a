"""Capability interfaces the pipeline consumes.

Real implementations live in ``content_client`` and ``github_client``; tests
substitute small fakes. Both are passed in explicitly, never looked up.
"""

from typing import Optional, Protocol, Sequence

from pr_doc_agent.models import PullRequestInfo, Result


class ContentGenerator(Protocol):
    """Produces text from a prompt. Failures come back as ``Result.failure``."""

    async def generate(
        self,
        prompt: str,
        history: Optional[Sequence[dict]] = None,
    ) -> Result[str]:
        ...


class VersionControlGateway(Protocol):
    """Reads pull request state and writes comments/files back."""

    def fetch_pull_request(self, repo: str, number: int) -> Result[PullRequestInfo]:
        ...

    def post_comment(self, repo: str, number: int, body: str) -> Result[None]:
        ...

    def read_file(self, repo: str, path: str, ref: str = "HEAD") -> Result[str]:
        ...

    def write_file(
        self,
        repo: str,
        path: str,
        content: str,
        message: str,
        branch: str = "main",
    ) -> Result[None]:
        ...
