"""Tests for the concurrent per-file fan-out and the PR summary join."""

import asyncio
import random

import pytest

from pr_doc_agent.aggregator import DocumentationAggregator
from pr_doc_agent.generator import FileDocumenter, PullRequestSummarizer
from pr_doc_agent.models import Result
from fixtures import FakeContentGenerator, SAMPLE_NARRATIVE, make_file, make_pr

SUMMARY_MARKER = "comprehensive pull request documentation summary"


def build(generator, max_concurrency=4, clock=None):
    return DocumentationAggregator(
        FileDocumenter(generator),
        PullRequestSummarizer(generator),
        max_concurrency=max_concurrency,
        clock=clock,
    )


def responder(failing_paths=(), summary_ok=True):
    def respond(prompt):
        if SUMMARY_MARKER in prompt:
            return Result.success("PR summary text") if summary_ok else Result.failure("summary quota")
        if any(f"**File:** {path}" in prompt for path in failing_paths):
            return Result.failure("quota exceeded")
        return Result.success(SAMPLE_NARRATIVE)
    return respond


# ---------------------------------------------------------------------------
# Ordering and concurrency
# ---------------------------------------------------------------------------

class TestOrdering:

    def test_output_order_matches_input_when_completion_order_differs(self):
        paths = [f"src/mod{i}.py" for i in range(8)]
        rng = random.Random(7)
        delays = {path: rng.uniform(0, 0.03) for path in paths}

        def delay(prompt):
            for path, seconds in delays.items():
                if f"**File:** {path}" in prompt:
                    return seconds
            return 0

        generator = FakeContentGenerator(responder(), delay=delay)
        files = [make_file(p) for p in paths]

        result = asyncio.run(build(generator).aggregate(make_pr(paths), files))

        assert [doc.path for doc in result.file_docs] == paths

    def test_reverse_completion_order(self):
        paths = [f"src/mod{i}.py" for i in range(5)]

        def delay(prompt):
            for i, path in enumerate(paths):
                if f"**File:** {path}" in prompt:
                    return (len(paths) - i) * 0.01
            return 0

        generator = FakeContentGenerator(responder(), delay=delay)

        result = asyncio.run(build(generator, max_concurrency=5).aggregate(make_pr(paths), [make_file(p) for p in paths]))

        assert [doc.path for doc in result.file_docs] == paths


class TestConcurrency:

    def test_never_exceeds_max_concurrency(self):
        paths = [f"src/mod{i}.py" for i in range(10)]
        generator = FakeContentGenerator(responder(), delay=lambda prompt: 0.01)

        asyncio.run(build(generator, max_concurrency=3).aggregate(make_pr(paths), [make_file(p) for p in paths]))

        assert generator.peak_in_flight == 3

    def test_files_run_in_parallel(self):
        paths = [f"src/mod{i}.py" for i in range(4)]
        generator = FakeContentGenerator(responder(), delay=lambda prompt: 0.01)

        asyncio.run(build(generator, max_concurrency=4).aggregate(make_pr(paths), [make_file(p) for p in paths]))

        assert generator.peak_in_flight == 4

    def test_summary_runs_after_all_files(self):
        paths = ["a.py", "b.py", "c.py"]
        generator = FakeContentGenerator(responder())

        asyncio.run(build(generator).aggregate(make_pr(paths), [make_file(p) for p in paths]))

        assert len(generator.prompts) == 4
        assert SUMMARY_MARKER in generator.prompts[-1]
        assert all(SUMMARY_MARKER not in p for p in generator.prompts[:-1])

    @pytest.mark.parametrize("value", [0, -1])
    def test_invalid_max_concurrency(self, value):
        with pytest.raises(ValueError):
            build(FakeContentGenerator(), max_concurrency=value)


# ---------------------------------------------------------------------------
# Success rules
# ---------------------------------------------------------------------------

class TestSuccess:

    @pytest.mark.parametrize("count", [0, 1, 5])
    @pytest.mark.parametrize("summary_ok", [True, False])
    def test_all_files_succeed(self, count, summary_ok):
        paths = [f"f{i}.py" for i in range(count)]
        generator = FakeContentGenerator(responder(summary_ok=summary_ok))

        result = asyncio.run(build(generator).aggregate(make_pr(paths), [make_file(p) for p in paths]))

        assert len(result.file_docs) == count
        assert result.succeeded is summary_ok
        assert (result.error_detail is None) is summary_ok

    @pytest.mark.parametrize("summary_ok", [True, False])
    def test_single_failed_file_fails_the_result(self, summary_ok):
        paths = ["f0.py", "f1.py", "f2.py"]
        generator = FakeContentGenerator(responder(failing_paths=["f1.py"], summary_ok=summary_ok))

        result = asyncio.run(build(generator).aggregate(make_pr(paths), [make_file(p) for p in paths]))

        assert not result.succeeded
        assert [doc.succeeded for doc in result.file_docs] == [True, False, True]
        assert "f1.py: quota exceeded" in result.error_detail

    def test_every_file_failing(self):
        paths = ["f0.py", "f1.py"]
        generator = FakeContentGenerator(responder(failing_paths=paths))

        result = asyncio.run(build(generator).aggregate(make_pr(paths), [make_file(p) for p in paths]))

        assert not result.succeeded
        assert result.successful_docs == ()
        # The summary is still requested once every file has been attempted.
        assert SUMMARY_MARKER in generator.prompts[-1]

    def test_summary_failure_reported(self):
        generator = FakeContentGenerator(responder(summary_ok=False))

        result = asyncio.run(build(generator).aggregate(make_pr(["a.py"]), [make_file("a.py")]))

        assert result.pr_summary_text == ""
        assert result.error_detail == "PR summary: summary quota"

    def test_documenter_exception_is_contained(self):
        class ExplodingDocumenter:
            async def generate_file_doc(self, file):
                if file.path == "bad.py":
                    raise RuntimeError("boom")
                return await FileDocumenter(FakeContentGenerator()).generate_file_doc(file)

        aggregator = DocumentationAggregator(
            ExplodingDocumenter(), PullRequestSummarizer(FakeContentGenerator()),
        )
        files = [make_file("good.py"), make_file("bad.py")]

        result = asyncio.run(aggregator.aggregate(make_pr([]), files))

        assert [doc.succeeded for doc in result.file_docs] == [True, False]
        assert result.file_docs[1].error_detail == "boom"

    def test_generated_at_comes_from_clock(self, fixed_clock):
        result = asyncio.run(build(FakeContentGenerator(), clock=fixed_clock).aggregate(make_pr([]), []))

        assert result.generated_at == fixed_clock()
