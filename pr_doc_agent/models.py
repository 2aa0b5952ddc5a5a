"""
Data model for a single documentation pipeline run.

Everything here is created and consumed within one run: nothing is cached
or persisted between pull requests. Instances are frozen so that concurrent
per-file work can never mutate shared state.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


class ChangeKind(Enum):
    """How a file was changed in the pull request."""

    ADDED = "added"
    MODIFIED = "modified"
    DELETED = "deleted"
    RENAMED = "renamed"
    COPIED = "copied"

    @classmethod
    def from_status(cls, status: str) -> "ChangeKind":
        """Map a vendor file status onto a ChangeKind.

        Unknown statuses (``changed``, ``unchanged``, …) are treated as
        modifications.
        """
        mapping = {
            "added": cls.ADDED,
            "modified": cls.MODIFIED,
            "removed": cls.DELETED,
            "deleted": cls.DELETED,
            "renamed": cls.RENAMED,
            "copied": cls.COPIED,
        }
        return mapping.get((status or "").lower(), cls.MODIFIED)

    @property
    def label(self) -> str:
        return self.name.capitalize()


@dataclass(frozen=True)
class ChangedFile:
    """One changed path in a pull request, as fetched from the gateway."""

    path: str
    content: str = ""
    diff: str = ""
    kind: ChangeKind = ChangeKind.MODIFIED
    lines_added: int = 0
    lines_removed: int = 0

    def __post_init__(self) -> None:
        if self.lines_added < 0 or self.lines_removed < 0:
            raise ValueError(
                f"Line counts must be non-negative for {self.path}: "
                f"+{self.lines_added}/-{self.lines_removed}"
            )


@dataclass(frozen=True)
class PullRequestInfo:
    """Pull request metadata plus its changed files."""

    repo: str
    number: int
    title: str = ""
    body: str = ""
    base_branch: str = ""
    head_branch: str = ""
    author: str = ""
    changed_files: tuple[ChangedFile, ...] = ()


@dataclass(frozen=True)
class FileDocumentation:
    """Generated documentation for one in-scope file."""

    path: str
    narrative_text: str = ""
    short_summary: str = ""
    succeeded: bool = False
    error_detail: Optional[str] = None


@dataclass(frozen=True)
class DocumentationResult:
    """Aggregate outcome of documenting a pull request.

    ``file_docs`` keeps the order of the classified input files. ``succeeded``
    is the conjunction of the summary call and every per-file call.
    """

    pr_summary_text: str
    file_docs: tuple[FileDocumentation, ...]
    succeeded: bool
    error_detail: Optional[str] = None
    generated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def successful_docs(self) -> tuple[FileDocumentation, ...]:
        return tuple(doc for doc in self.file_docs if doc.succeeded)

    @property
    def failed_docs(self) -> tuple[FileDocumentation, ...]:
        return tuple(doc for doc in self.file_docs if not doc.succeeded)


@dataclass(frozen=True)
class DocumentationOutput:
    """Rendered artifacts derived from a DocumentationResult."""

    full_report: str
    pr_comment: str
    per_file_documents: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class Result(Generic[T]):
    """Success value or failure message returned by every collaborator call.

    Collaborators never raise to the core; they hand back one of these.
    """

    value: Optional[T] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: T) -> "Result[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: str) -> "Result[T]":
        return cls(error=error or "Unknown error")
