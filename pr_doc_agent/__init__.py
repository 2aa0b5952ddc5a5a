"""Automated pull request documentation: per-file docs, PR summary, README refresh."""

from pr_doc_agent.aggregator import DocumentationAggregator
from pr_doc_agent.classifier import classify
from pr_doc_agent.generator import FileDocumenter, PullRequestSummarizer, extract_summary
from pr_doc_agent.models import (
    ChangeKind,
    ChangedFile,
    DocumentationOutput,
    DocumentationResult,
    FileDocumentation,
    PullRequestInfo,
    Result,
)
from pr_doc_agent.orchestrator import DocumentationOrchestrator, PipelineReport
from pr_doc_agent.renderer import render

__version__ = "0.1.0"

__all__ = [
    "ChangeKind",
    "ChangedFile",
    "DocumentationAggregator",
    "DocumentationOrchestrator",
    "DocumentationOutput",
    "DocumentationResult",
    "FileDocumentation",
    "FileDocumenter",
    "PipelineReport",
    "PullRequestInfo",
    "PullRequestSummarizer",
    "Result",
    "classify",
    "extract_summary",
    "render",
]
