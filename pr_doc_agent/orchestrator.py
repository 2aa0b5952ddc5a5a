"""
End-to-end documentation pipeline for one pull request.

Linear, single pass, no retries:

    fetch -> classify -> aggregate -> render -> comment -> (README) -> file docs

Only a fetch failure or an aggregation failure fails the run. Publication is
best effort: failures are logged and recorded on the report but never change
the returned success value.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Iterable, Optional, Sequence

from pr_doc_agent.aggregator import DEFAULT_MAX_CONCURRENCY, DocumentationAggregator
from pr_doc_agent.classifier import classify
from pr_doc_agent.generator import FileDocumenter, PullRequestSummarizer, ReadmeUpdater
from pr_doc_agent.interfaces import ContentGenerator, VersionControlGateway
from pr_doc_agent.models import (
    ChangedFile,
    DocumentationOutput,
    DocumentationResult,
    PullRequestInfo,
    Result,
)
from pr_doc_agent.renderer import DEFAULT_DOCS_DIR, DEFAULT_GENERATOR_LABEL, render

logger = logging.getLogger(__name__)

README_PATH = "README.md"
README_COMMIT_MESSAGE = "Update README with latest code documentation"
DOC_COMMIT_MESSAGE = "Generate documentation for {path}"

# ---------------------------------------------------------------------------
# README refresh gate
# ---------------------------------------------------------------------------
# Heuristic only: refresh the README when at least two documented files look
# architecturally significant, to avoid README churn on trivial PRs.

ARCHITECTURE_KEYWORDS = ("Service", "Controller", "Model")
README_GATE_THRESHOLD = 2

ReadmeGate = Callable[[DocumentationResult], bool]


def make_keyword_gate(
    keywords: Iterable[str] = ARCHITECTURE_KEYWORDS,
    threshold: int = README_GATE_THRESHOLD,
) -> ReadmeGate:
    """Gate that passes when >= ``threshold`` successful paths contain a keyword."""
    keywords = tuple(keywords)

    def gate(result: DocumentationResult) -> bool:
        matches = sum(
            1 for doc in result.successful_docs
            if any(keyword in doc.path for keyword in keywords)
        )
        return matches >= threshold

    return gate


significant_change_gate = make_keyword_gate()


class Stage(str, Enum):
    """Last pipeline stage reached."""

    FETCH = "fetch"
    CLASSIFY = "classify"
    AGGREGATE = "aggregate"
    RENDER = "render"
    PUBLISH = "publish"
    DONE = "done"


@dataclass
class PipelineReport:
    """What happened during one run. ``succeeded`` is what ``run`` returns."""

    succeeded: bool
    stage: Stage
    pull_request: Optional[PullRequestInfo] = None
    files: list[ChangedFile] = field(default_factory=list)
    result: Optional[DocumentationResult] = None
    output: Optional[DocumentationOutput] = None
    comment_posted: bool = False
    readme_updated: bool = False
    docs_written: list[str] = field(default_factory=list)
    docs_failed: list[str] = field(default_factory=list)
    error: Optional[str] = None


class DocumentationOrchestrator:
    """Sequences the pipeline against the two external collaborators.

    Args:
        gateway: Version Control Gateway (synchronous; called off the event loop).
        generator: Content Generator shared by every generation step.
        max_concurrency: Fan-out cap for per-file documentation.
        docs_dir: Repository directory receiving per-file documents.
        target_branch: Branch for README/doc writes. Defaults to the PR head branch.
        readme_gate: Predicate deciding whether to refresh the README.
        dry_run: Generate and render, but publish nothing.
        classifier / aggregator / renderer: Replaceable pipeline stages.
    """

    def __init__(
        self,
        gateway: VersionControlGateway,
        generator: ContentGenerator,
        *,
        max_concurrency: int = DEFAULT_MAX_CONCURRENCY,
        docs_dir: str = DEFAULT_DOCS_DIR,
        target_branch: Optional[str] = None,
        readme_path: str = README_PATH,
        readme_gate: ReadmeGate = significant_change_gate,
        generator_label: str = DEFAULT_GENERATOR_LABEL,
        dry_run: bool = False,
        classifier: Callable[[Sequence[ChangedFile]], list[ChangedFile]] = classify,
        aggregator: Optional[DocumentationAggregator] = None,
        renderer: Callable[..., DocumentationOutput] = render,
    ):
        self.gateway = gateway
        self.generator = generator
        self.docs_dir = docs_dir
        self.target_branch = target_branch
        self.readme_path = readme_path
        self.readme_gate = readme_gate
        self.generator_label = generator_label
        self.dry_run = dry_run
        self.classifier = classifier
        self.aggregator = aggregator or DocumentationAggregator(
            FileDocumenter(generator),
            PullRequestSummarizer(generator),
            max_concurrency=max_concurrency,
        )
        self.renderer = renderer
        self.readme_updater = ReadmeUpdater(generator)

    # ------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------

    async def run(self, repo: str, pr_number: int) -> bool:
        """Run the pipeline and return overall success."""
        report = await self.run_pipeline(repo, pr_number)
        return report.succeeded

    async def run_pipeline(self, repo: str, pr_number: int) -> PipelineReport:
        """Run the pipeline and return the full report. Never raises."""
        try:
            return await self._run(repo, pr_number)
        except Exception as exc:
            logger.exception("Error processing pull request documentation for %s#%s", repo, pr_number)
            return PipelineReport(succeeded=False, stage=Stage.FETCH, error=str(exc))

    async def _run(self, repo: str, pr_number: int) -> PipelineReport:
        logger.info("Starting documentation generation for %s PR #%d", repo, pr_number)

        # 1. Fetch
        fetched = await self._call_gateway("fetch pull request", self.gateway.fetch_pull_request, repo, pr_number)
        if not fetched.ok or fetched.value is None:
            logger.error("Failed to fetch pull request information: %s", fetched.error)
            return PipelineReport(succeeded=False, stage=Stage.FETCH, error=fetched.error)
        pr = fetched.value

        # 2. Classify
        files = self.classifier(pr.changed_files)
        if not files:
            logger.info("No code files found in PR, skipping documentation generation")
            return PipelineReport(succeeded=True, stage=Stage.CLASSIFY, pull_request=pr)
        logger.info("Processing %d code files", len(files))

        # 3. Aggregate
        result = await self.aggregator.aggregate(pr, files)
        if not result.succeeded:
            logger.error("Documentation generation failed: %s", result.error_detail)
            return PipelineReport(
                succeeded=False,
                stage=Stage.AGGREGATE,
                pull_request=pr,
                files=files,
                result=result,
                error=result.error_detail,
            )

        # 4. Render
        output = self.renderer(result, docs_dir=self.docs_dir, generator_label=self.generator_label)
        report = PipelineReport(
            succeeded=True,
            stage=Stage.RENDER,
            pull_request=pr,
            files=files,
            result=result,
            output=output,
        )

        if self.dry_run:
            logger.info("Dry run: skipping publication for PR #%d", pr_number)
            report.stage = Stage.DONE
            return report

        # 5-7. Publish (best effort)
        report.stage = Stage.PUBLISH
        await self._publish(pr, result, output, report)

        report.stage = Stage.DONE
        logger.info("Documentation generation completed successfully for PR #%d", pr_number)
        return report

    # ------------------------------------------------------------------
    # Publication
    # ------------------------------------------------------------------

    def _branch_for(self, pr: PullRequestInfo) -> str:
        return self.target_branch or pr.head_branch or "main"

    async def _publish(
        self,
        pr: PullRequestInfo,
        result: DocumentationResult,
        output: DocumentationOutput,
        report: PipelineReport,
    ) -> None:
        posted = await self._call_gateway(
            "post comment", self.gateway.post_comment, pr.repo, pr.number, output.pr_comment,
        )
        report.comment_posted = posted.ok
        if not posted.ok:
            logger.warning(
                "Failed to post PR comment, but documentation was generated successfully: %s",
                posted.error,
            )

        branch = self._branch_for(pr)

        if self._should_refresh_readme(result):
            report.readme_updated = await self._refresh_readme(pr, result, branch)

        for doc_path, content in output.per_file_documents.items():
            written = await self._call_gateway(
                f"write {doc_path}",
                self.gateway.write_file,
                pr.repo,
                doc_path,
                content,
                DOC_COMMIT_MESSAGE.format(path=doc_path),
                branch,
            )
            if written.ok:
                report.docs_written.append(doc_path)
            else:
                logger.error("Failed to write %s: %s", doc_path, written.error)
                report.docs_failed.append(doc_path)

        logger.info(
            "Published %d documentation files (%d failed) to %s@%s",
            len(report.docs_written), len(report.docs_failed), pr.repo, branch,
        )

    def _should_refresh_readme(self, result: DocumentationResult) -> bool:
        try:
            return bool(self.readme_gate(result))
        except Exception as exc:
            logger.warning("README gate raised, skipping README refresh: %s", exc)
            return False

    async def _refresh_readme(self, pr: PullRequestInfo, result: DocumentationResult, branch: str) -> bool:
        current = await self._call_gateway(
            f"read {self.readme_path}", self.gateway.read_file, pr.repo, self.readme_path, branch,
        )
        if not current.ok or not (current.value or "").strip():
            logger.info("No README to refresh (%s)", current.error or "empty")
            return False

        updated = await self.readme_updater.generate_update(
            current.value,
            result.pr_summary_text,
            [doc.path for doc in result.successful_docs],
        )
        if not updated.ok:
            logger.warning("README update generation failed: %s", updated.error)
            return False

        written = await self._call_gateway(
            f"write {self.readme_path}",
            self.gateway.write_file,
            pr.repo,
            self.readme_path,
            updated.value,
            README_COMMIT_MESSAGE,
            branch,
        )
        if not written.ok:
            logger.error("Failed to update %s: %s", self.readme_path, written.error)
        return written.ok

    async def _call_gateway(self, what: str, fn, *args) -> Result:
        """Run a blocking gateway call in a worker thread; exceptions become failures."""
        try:
            outcome = await asyncio.to_thread(fn, *args)
        except Exception as exc:
            logger.error("Gateway call '%s' raised: %s", what, exc)
            return Result.failure(f"{type(exc).__name__}: {exc}")
        if outcome is None:
            return Result.failure(f"Gateway call '{what}' returned no result")
        return outcome
