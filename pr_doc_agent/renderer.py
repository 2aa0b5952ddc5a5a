"""
Markdown artifacts derived from a DocumentationResult.

Pure functions, no I/O. Timestamps come from ``result.generated_at`` so that
rendering the same result twice yields byte-identical output. Files whose
documentation failed are left out of the report and per-file documents.
"""

from pathlib import PurePosixPath

from pr_doc_agent.models import DocumentationOutput, DocumentationResult, FileDocumentation

DEFAULT_DOCS_DIR = "docs"
DEFAULT_GENERATOR_LABEL = "Google Gemini AI"

QUICK_ACTIONS = (
    "Review the generated documentation for accuracy",
    "Update any missing technical details",
    "Verify code examples and usage instructions",
)


def _timestamp(result: DocumentationResult) -> str:
    return result.generated_at.strftime("%Y-%m-%d %H:%M:%S UTC")


def render_full_report(result: DocumentationResult) -> str:
    """Full markdown report: PR summary plus every successful file narrative."""
    lines = [
        "# Automated Code Documentation Report",
        "",
        f"**Generated:** {_timestamp(result)}",
        "",
        "## Pull Request Summary",
        "",
        result.pr_summary_text,
        "",
        "## File Documentation",
        "",
    ]
    for doc in result.successful_docs:
        lines += [
            f"### {doc.path}",
            "",
            doc.narrative_text,
            "",
            "---",
            "",
        ]
    return "\n".join(lines)


def render_pr_comment(
    result: DocumentationResult,
    generator_label: str = DEFAULT_GENERATOR_LABEL,
) -> str:
    """Compact PR comment: summary, documented files and a review checklist."""
    lines = [
        "## AI-Generated Documentation",
        "",
        "I've analyzed the code changes in this PR and generated comprehensive documentation.",
        "",
        "### Summary",
        result.pr_summary_text,
        "",
        "### Files Documented",
    ]
    lines += [f"- **{doc.path}**: {doc.short_summary}" for doc in result.successful_docs]
    lines += ["", "### Quick Actions"]
    lines += [f"- [ ] {action}" for action in QUICK_ACTIONS]
    lines += [
        "",
        f"*Documentation generated by {generator_label} at {_timestamp(result)}*",
    ]
    return "\n".join(lines)


def render_file_markdown(doc: FileDocumentation, result: DocumentationResult) -> str:
    """Standalone markdown page for one documented file."""
    return "\n".join([
        f"# Documentation: {PurePosixPath(doc.path).name}",
        "",
        f"**File Path:** `{doc.path}`",
        f"**Generated:** {_timestamp(result)}",
        "",
        "---",
        "",
        doc.narrative_text,
    ])


def doc_path_for(path: str, docs_dir: str = DEFAULT_DOCS_DIR) -> str:
    """``docs/<base name without extension>.md`` for a source path."""
    stem = PurePosixPath(path.replace("\\", "/")).stem
    return f"{docs_dir.rstrip('/')}/{stem}.md"


def render_file_documents(
    result: DocumentationResult,
    docs_dir: str = DEFAULT_DOCS_DIR,
) -> dict[str, str]:
    """One document per successful file, keyed by repository-relative path.

    Two files sharing a base name (``a/Foo.cs`` and ``b/Foo.py``) would map to
    the same page; later ones get ``-2``, ``-3``… suffixes in input order.
    """
    documents: dict[str, str] = {}
    for doc in result.successful_docs:
        target = doc_path_for(doc.path, docs_dir)
        if target in documents:
            base = target[: -len(".md")]
            n = 2
            while f"{base}-{n}.md" in documents:
                n += 1
            target = f"{base}-{n}.md"
        documents[target] = render_file_markdown(doc, result)
    return documents


def render(
    result: DocumentationResult,
    docs_dir: str = DEFAULT_DOCS_DIR,
    generator_label: str = DEFAULT_GENERATOR_LABEL,
) -> DocumentationOutput:
    """Build all three artifacts."""
    return DocumentationOutput(
        full_report=render_full_report(result),
        pr_comment=render_pr_comment(result, generator_label),
        per_file_documents=render_file_documents(result, docs_dir),
    )
