"""Local filesystem store for rendered documentation artifacts.

Writes the full report, the PR comment and the per-file documents of one
run under an output directory, with a small JSON manifest describing what
was written. Used for dry runs and for keeping a copy of what was published.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict

from pr_doc_agent.models import DocumentationOutput, DocumentationResult

logger = logging.getLogger(__name__)

REPORT_FILENAME = "documentation-report.md"
COMMENT_FILENAME = "pr-comment.md"
MANIFEST_FILENAME = "manifest.json"


class LocalArtifactStore:
    """Store rendered artifacts as local markdown files.

    Args:
        output_dir: Root directory for this run's artifacts.
    """

    def __init__(self, output_dir: Path):
        self.output_dir = Path(output_dir)

    def _safe_target(self, relative: str) -> Path:
        """Resolve ``relative`` under the output dir, refusing escapes."""
        root = self.output_dir.resolve()
        target = (root / relative).resolve()
        if root != target and root not in target.parents:
            raise ValueError(f"Refusing to write outside {root}: {relative}")
        return target

    def write_output(
        self,
        repo: str,
        pr_number: int,
        result: DocumentationResult,
        output: DocumentationOutput,
    ) -> Dict[str, Any]:
        """Write every artifact and return the manifest that was saved."""
        self.output_dir.mkdir(parents=True, exist_ok=True)

        written = []
        for name, content in (
            (REPORT_FILENAME, output.full_report),
            (COMMENT_FILENAME, output.pr_comment),
        ):
            path = self._safe_target(name)
            path.write_text(content, encoding="utf-8")
            written.append(name)

        for doc_path, content in output.per_file_documents.items():
            path = self._safe_target(doc_path)
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")
            written.append(doc_path)

        manifest = {
            "repo": repo,
            "pr_number": pr_number,
            "generated_at": result.generated_at.isoformat(),
            "succeeded": result.succeeded,
            "files": [
                {
                    "path": doc.path,
                    "succeeded": doc.succeeded,
                    "summary": doc.short_summary,
                    "error": doc.error_detail,
                }
                for doc in result.file_docs
            ],
            "artifacts": written,
        }
        self._safe_target(MANIFEST_FILENAME).write_text(json.dumps(manifest, indent=2), encoding="utf-8")
        logger.info("Wrote %d artifacts to %s", len(written), self.output_dir)
        return manifest
