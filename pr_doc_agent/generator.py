"""
Per-file documentation, PR-level summaries and README refreshes.

Each public coroutine makes exactly one Content Generator call and never
raises: every failure path resolves to an ordinary value carrying a
success flag and a message, so callers need no exception handling.
"""

import logging
from typing import Optional, Sequence

from pr_doc_agent.interfaces import ContentGenerator
from pr_doc_agent.models import ChangedFile, FileDocumentation, PullRequestInfo, Result
from pr_doc_agent.prompts import build_file_prompt, build_readme_prompt, build_summary_prompt
from pr_doc_agent.security import PromptInjectionDetector

logger = logging.getLogger(__name__)

SUMMARY_PLACEHOLDER = "Documentation generated for this file."

# Only the opening lines are considered when picking a short summary.
SUMMARY_SCAN_LINES = 3


def extract_summary(narrative: str, placeholder: str = SUMMARY_PLACEHOLDER) -> str:
    """Pick a one-line summary from generated documentation.

    Returns the first non-blank, non-heading line among the first three lines,
    stripped, or ``placeholder`` when there is none.
    """
    for line in narrative.split("\n")[:SUMMARY_SCAN_LINES]:
        if line.strip() and not line.startswith("#"):
            return line.strip()
    return placeholder


async def _call_generator(generator: ContentGenerator, prompt: str, what: str) -> Result[str]:
    """Single guarded call; anything raised by the generator becomes a failure."""
    logger.debug("Generating %s (prompt: %.50s...)", what, prompt)
    try:
        result = await generator.generate(prompt)
    except Exception as exc:
        logger.error("Content generator raised for %s: %s", what, exc)
        return Result.failure(f"{type(exc).__name__}: {exc}")
    if result is None:
        return Result.failure("Content generator returned no result")
    return result


class FileDocumenter:
    """Builds one analysis prompt per changed file and documents it.

    Args:
        generator: Content Generator used for the analysis call.
        summary_extractor: Picks ``short_summary`` from the narrative text.
            Swappable because the default heuristic depends on output format.
    """

    def __init__(
        self,
        generator: ContentGenerator,
        summary_extractor=extract_summary,
    ):
        self.generator = generator
        self.summary_extractor = summary_extractor
        self._detector = PromptInjectionDetector()

    async def generate_file_doc(self, file: ChangedFile) -> FileDocumentation:
        """Document one file. Never raises."""
        try:
            suspicious = self._detector.find_injections(file.content) + self._detector.find_injections(file.diff)
            if suspicious:
                logger.warning("Possible prompt injection text in %s: %s", file.path, suspicious)
            prompt = build_file_prompt(file)
        except Exception as exc:
            logger.error("Could not build prompt for %s: %s", file.path, exc)
            return FileDocumentation(path=file.path, succeeded=False, error_detail=str(exc))

        result = await _call_generator(self.generator, prompt, file.path)
        if not result.ok:
            logger.warning("Documentation failed for %s: %s", file.path, result.error)
            return FileDocumentation(
                path=file.path,
                narrative_text="",
                short_summary="",
                succeeded=False,
                error_detail=result.error,
            )

        narrative = result.value or ""
        try:
            summary = self.summary_extractor(narrative)
        except Exception as exc:
            logger.warning("Summary extraction failed for %s: %s", file.path, exc)
            summary = SUMMARY_PLACEHOLDER

        logger.info("Documented %s (%d chars)", file.path, len(narrative))
        return FileDocumentation(
            path=file.path,
            narrative_text=narrative,
            short_summary=summary,
            succeeded=True,
        )


class PullRequestSummarizer:
    """Produces the PR-level narrative from all per-file results."""

    def __init__(self, generator: ContentGenerator):
        self.generator = generator

    async def summarize(
        self,
        pr: PullRequestInfo,
        files: Sequence[ChangedFile],
        file_docs: Sequence[FileDocumentation],
    ) -> tuple[str, bool, Optional[str]]:
        """
        Summarize the pull request.

        Args:
            pr: Pull request metadata (repository and number are used).
            files: The classified files, for change statistics.
            file_docs: Per-file results, in the same order as ``files``.

        Returns:
            Tuple of (text, succeeded, error_detail). Never raises.
        """
        try:
            prompt = build_summary_prompt(pr, files, file_docs)
        except Exception as exc:
            logger.error("Could not build summary prompt for %s#%s: %s", pr.repo, pr.number, exc)
            return "", False, str(exc)

        result = await _call_generator(self.generator, prompt, f"summary for {pr.repo}#{pr.number}")
        if not result.ok:
            logger.warning("PR summary failed for %s#%s: %s", pr.repo, pr.number, result.error)
            return "", False, result.error
        return result.value or "", True, None


class ReadmeUpdater:
    """Asks for a refreshed README given the current one and the PR summary."""

    def __init__(self, generator: ContentGenerator):
        self.generator = generator

    async def generate_update(
        self,
        existing_readme: str,
        summary: str,
        paths: Sequence[str],
    ) -> Result[str]:
        """Return the updated README text, or a failure. Never raises."""
        try:
            prompt = build_readme_prompt(existing_readme, summary, paths)
        except Exception as exc:
            return Result.failure(str(exc))

        result = await _call_generator(self.generator, prompt, "README update")
        if result.ok and not (result.value or "").strip():
            return Result.failure("Content generator returned an empty README")
        return result
