"""Prompt templates for file analysis, PR summaries and README refreshes.

Builders are pure: the same inputs always produce the same prompt text.
"""

from typing import Sequence

from pr_doc_agent.classifier import fence_language
from pr_doc_agent.models import ChangeKind, ChangedFile, FileDocumentation, PullRequestInfo
from pr_doc_agent.security import PromptInjectionDetector

# A modified file growing by more than this many lines is flagged as a
# probable refactor rather than a new file.
REFACTOR_LINE_THRESHOLD = 20

REFACTOR_NOTE = (
    "**Note:** This appears to be a significant refactoring or enhancement "
    "of an existing file, not a new file creation."
)

_CHANGE_DESCRIPTIONS = {
    ChangeKind.ADDED: "This is a newly added file",
    ChangeKind.MODIFIED: "This is an existing file that has been modified/refactored",
    ChangeKind.DELETED: "This file has been deleted",
    ChangeKind.RENAMED: "This file has been renamed/moved",
    ChangeKind.COPIED: "This file has been copied from another location",
}

_detector = PromptInjectionDetector()

# ---------------------------------------------------------------------------
# Shared Prompt Components
# ---------------------------------------------------------------------------

FILE_SECTIONS = """Please provide:

1. **File Overview**: What this file does and its purpose in the project
2. **Key Components**: Classes, methods, functions with their responsibilities
3. **Dependencies**: External libraries, frameworks, or modules used
4. **Architecture Notes**: Design patterns, architectural decisions
5. **Usage Examples**: How other parts of the system would use this code
6. **Change Impact**: (if changes were made) What changed and why it matters
7. **Technical Considerations**: Performance, security, maintainability notes

Format as clear, professional documentation that would help a new developer understand the code quickly."""

SUMMARY_GUIDELINES = """**Analysis Guidelines:**
- If a file shows "modified" with significant line changes, this is likely a refactoring or enhancement of existing code
- If a file shows "newly added", this is a completely new file
- Pay attention to the +/- line counts to understand the scope of changes"""

SUMMARY_SECTIONS = """Please provide:

1. **Pull Request Summary**: High-level overview of what this PR accomplishes
2. **Technical Changes**: Key technical modifications and their purpose
3. **Architecture Impact**: How these changes affect the overall system architecture
4. **Code Quality**: Assessment of code quality, patterns used, best practices
5. **Performance Considerations**: Any performance implications
6. **Security Considerations**: Security aspects of the changes
7. **Testing Recommendations**: Suggested testing strategies for these changes
8. **Documentation Updates**: What documentation should be updated
9. **Deployment Notes**: Any special deployment or configuration considerations

Format as a professional technical document suitable for code review and project documentation."""


def describe_change(kind: ChangeKind) -> str:
    """Human-readable sentence for a change kind."""
    return _CHANGE_DESCRIPTIONS.get(kind, "This file has been changed")


def describe_magnitude(file: ChangedFile) -> str:
    """Short magnitude label used in the PR summary prompt."""
    if file.kind is ChangeKind.ADDED:
        return "newly added"
    if file.kind is ChangeKind.MODIFIED:
        return f"modified (+{file.lines_added}/-{file.lines_removed} lines)"
    if file.kind is ChangeKind.DELETED:
        return "deleted"
    if file.kind is ChangeKind.RENAMED:
        return "renamed/moved"
    return "changed"


def is_probable_refactor(file: ChangedFile) -> bool:
    return file.kind is ChangeKind.MODIFIED and file.lines_added > REFACTOR_LINE_THRESHOLD


def build_file_prompt(file: ChangedFile) -> str:
    """Analysis request for one changed file."""
    path = _detector.sanitize_filename(file.path)
    language = fence_language(file.path)
    code_fence = _detector.fence_for(file.content)

    parts = [
        "As a senior software engineer and technical writer, analyze this code file "
        "and generate comprehensive documentation.",
        "",
        "**IMPORTANT CONTEXT:**",
        f"- **File:** {path}",
        f"- **Change Type:** {file.kind.label} - {describe_change(file.kind)}",
        f"- **Lines Added:** +{file.lines_added}",
        f"- **Lines Removed:** -{file.lines_removed}",
    ]
    if is_probable_refactor(file):
        parts += ["", REFACTOR_NOTE]

    parts += [
        "",
        "**Current Code:**",
        f"{code_fence}{language}",
        file.content,
        code_fence,
    ]
    if file.diff:
        diff_fence = _detector.fence_for(file.diff)
        parts += [
            "",
            "**Specific Changes Made:**",
            f"{diff_fence}diff",
            file.diff,
            diff_fence,
        ]

    parts += ["", FILE_SECTIONS]
    return "\n".join(parts)


def build_summary_prompt(
    pr: PullRequestInfo,
    files: Sequence[ChangedFile],
    file_docs: Sequence[FileDocumentation],
) -> str:
    """Aggregate prompt over every per-file result plus change statistics."""
    files_summary = "\n".join(
        f"- **{_detector.sanitize_filename(doc.path)}**: {doc.short_summary}"
        for doc in file_docs
    )
    changes_summary = "\n".join(
        f"- {_detector.sanitize_filename(f.path)} ({describe_magnitude(f)})"
        for f in files
    )

    return f"""As a technical lead, create a comprehensive pull request documentation summary.

**IMPORTANT:** Analyze the change types carefully to determine if this is introducing new files or modifying existing ones.

**Pull Request Context:**
- Repository: {pr.repo}
- PR Number: #{pr.number}
- Files Changed: {len(files)}

**Files Modified:**
{files_summary}

**Detailed Changes:**
{changes_summary}

{SUMMARY_GUIDELINES}

{SUMMARY_SECTIONS}"""


def build_readme_prompt(existing_readme: str, summary: str, paths: Sequence[str]) -> str:
    """Request for a refreshed README reflecting the documented changes."""
    updated = "\n".join(f"- {_detector.sanitize_filename(p)}" for p in paths)
    return f"""As a technical writer, update this README.md file to reflect the recent code changes.

**Current README:**
```markdown
{existing_readme}
```

**Recent Changes Summary:**
{summary}

**Updated Files:**
{updated}

Please:
1. Update relevant sections to reflect new functionality
2. Add new sections if new major features were added
3. Update installation/setup instructions if needed
4. Update usage examples if APIs changed
5. Maintain the existing style and structure
6. Keep it concise but comprehensive

Return only the updated README.md content in markdown format."""
