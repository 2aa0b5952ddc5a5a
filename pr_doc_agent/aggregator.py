"""
Concurrent fan-out of per-file documentation, then one PR summary.

Every in-scope file is documented concurrently under a bounded semaphore;
the aggregator waits for all of them (join, not race) before summarizing.
Output order always matches input order, whatever order the calls finish in.
"""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Callable, Optional, Sequence

from pr_doc_agent.generator import FileDocumenter, PullRequestSummarizer
from pr_doc_agent.models import ChangedFile, DocumentationResult, FileDocumentation, PullRequestInfo

logger = logging.getLogger(__name__)

DEFAULT_MAX_CONCURRENCY = 4


class DocumentationAggregator:
    """Runs the per-file step across all files and composes the result.

    Args:
        documenter: Produces one FileDocumentation per file.
        summarizer: Produces the PR-level narrative.
        max_concurrency: Upper bound on simultaneous Content Generator calls.
        clock: Returns the ``generated_at`` timestamp (injectable for tests).
    """

    def __init__(
        self,
        documenter: FileDocumenter,
        summarizer: PullRequestSummarizer,
        max_concurrency: int = DEFAULT_MAX_CONCURRENCY,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        if max_concurrency < 1:
            raise ValueError(f"max_concurrency must be >= 1, got {max_concurrency}")
        self.documenter = documenter
        self.summarizer = summarizer
        self.max_concurrency = max_concurrency
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    async def _document_all(self, files: Sequence[ChangedFile]) -> list[FileDocumentation]:
        semaphore = asyncio.Semaphore(self.max_concurrency)
        total = len(files)

        async def _run_one(idx: int, file: ChangedFile) -> FileDocumentation:
            async with semaphore:
                logger.info("[%d/%d] Documenting %s", idx, total, file.path)
                try:
                    return await self.documenter.generate_file_doc(file)
                except Exception as exc:
                    logger.error("Documentation task failed for %s: %s", file.path, exc)
                    return FileDocumentation(path=file.path, succeeded=False, error_detail=str(exc))

        # gather() returns results in submission order, so each file keeps its slot.
        return list(await asyncio.gather(
            *(_run_one(idx, f) for idx, f in enumerate(files, 1))
        ))

    async def aggregate(
        self,
        pr: PullRequestInfo,
        files: Sequence[ChangedFile],
    ) -> DocumentationResult:
        """
        Document every file, then summarize the pull request.

        A failed file never aborts its siblings or the summary step; it only
        turns ``succeeded`` false and is visible on its own entry.

        Args:
            pr: Pull request metadata.
            files: Classified (in-scope) files, in the order to report them.

        Returns:
            DocumentationResult whose ``file_docs`` align with ``files``.
        """
        logger.info(
            "Generating documentation for %d changed files (max %d parallel)",
            len(files), self.max_concurrency,
        )
        file_docs = await self._document_all(files)

        summary, summary_ok, summary_error = await self.summarizer.summarize(pr, files, file_docs)

        failed = [doc for doc in file_docs if not doc.succeeded]
        succeeded = summary_ok and not failed

        error_detail = None
        if not succeeded:
            problems = []
            if not summary_ok:
                problems.append(f"PR summary: {summary_error}")
            problems.extend(f"{doc.path}: {doc.error_detail}" for doc in failed)
            error_detail = "; ".join(problems)

        logger.info(
            "Documentation complete: %d/%d files succeeded, summary %s",
            len(file_docs) - len(failed), len(file_docs), "ok" if summary_ok else "failed",
        )

        return DocumentationResult(
            pr_summary_text=summary,
            file_docs=tuple(file_docs),
            succeeded=succeeded,
            error_detail=error_detail,
            generated_at=self._clock(),
        )
