#!/usr/bin/env python3
"""
Command-line entry point: document one pull request.

Usage:
    pr-doc-agent --repo owner/repo --pr-number 123
    pr-doc-agent --repo owner/repo --pr-number 123 --dry-run --output-dir ./out
    REPO_NAME=owner/repo PR_NUMBER=123 pr-doc-agent
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from pr_doc_agent.config import ConfigError, Settings
from pr_doc_agent.content_client import LiteLLMContentGenerator
from pr_doc_agent.github_client import GitHubGateway
from pr_doc_agent.local_store import LocalArtifactStore
from pr_doc_agent.model_config import completion_budget
from pr_doc_agent.orchestrator import DocumentationOrchestrator
from pr_doc_agent.renderer import DEFAULT_GENERATOR_LABEL
from pr_doc_agent.security import PathValidator, RepositoryValidator

logger = logging.getLogger("pr_doc_agent")

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_USAGE = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pr-doc-agent",
        description="Generate review-ready documentation for a pull request",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s --repo octo/hello --pr-number 42
  %(prog)s --repo https://github.com/octo/hello --pr-number 42 --dry-run --output-dir out
        """,
    )
    parser.add_argument("--repo", default=None, help="Repository as owner/repo (env: REPO_NAME)")
    parser.add_argument("--pr-number", type=int, default=None, help="Pull request number (env: PR_NUMBER)")
    parser.add_argument("--model", default=None, help="Override the litellm model id (env: LLM_MODEL)")
    parser.add_argument(
        "--max-concurrency",
        type=int,
        default=None,
        help="Maximum parallel file analyses (env: DOC_MAX_CONCURRENCY)",
    )
    parser.add_argument("--docs-dir", default=None, help="Directory for per-file docs (env: DOCS_DIR)")
    parser.add_argument(
        "--branch",
        default=None,
        help="Branch receiving README/doc commits (default: the PR head branch)",
    )
    parser.add_argument("--dry-run", action="store_true", help="Generate and render only, publish nothing")
    parser.add_argument("--output-dir", type=Path, default=None, help="Also write all artifacts to this directory")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser


def configure_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    # litellm and urllib3 are chatty at DEBUG
    for noisy in ("LiteLLM", "litellm", "urllib3"):
        logging.getLogger(noisy).setLevel(logging.WARNING)


def build_orchestrator(settings: Settings, dry_run: bool = False) -> DocumentationOrchestrator:
    """Wire the real collaborators from settings."""
    generator = LiteLLMContentGenerator(
        model=settings.llm_model,
        api_key=settings.llm_api_key,
        base_url=settings.llm_base_url,
        temperature=settings.llm_temperature,
        top_p=settings.llm_top_p,
        max_tokens=completion_budget(settings.llm_model, settings.llm_max_tokens),
        timeout=settings.llm_timeout,
    )
    gateway = GitHubGateway(token=settings.github_token, api_url=settings.github_api_url)
    label = DEFAULT_GENERATOR_LABEL if "gemini" in settings.llm_model.lower() else settings.llm_model
    return DocumentationOrchestrator(
        gateway,
        generator,
        max_concurrency=settings.max_concurrency,
        docs_dir=settings.docs_dir,
        target_branch=settings.target_branch,
        generator_label=label,
        dry_run=dry_run,
    )


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point. Returns the process exit status."""
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose)

    try:
        settings = Settings.from_env().with_overrides(
            llm_model=args.model,
            max_concurrency=args.max_concurrency,
            docs_dir=args.docs_dir,
            target_branch=args.branch,
            repo_name=args.repo,
            pr_number=args.pr_number,
        )
    except ConfigError as exc:
        print(f"[Config] {exc}", file=sys.stderr)
        return EXIT_USAGE

    if not settings.repo_name or settings.pr_number is None:
        print("[Error] Missing required arguments: --repo and --pr-number", file=sys.stderr)
        print("Usage: pr-doc-agent --repo owner/repo --pr-number 123", file=sys.stderr)
        return EXIT_USAGE

    # SECURITY: Validate repository identifier
    is_valid, error, repo = RepositoryValidator().validate_repo_name(settings.repo_name)
    if not is_valid:
        print(f"[Security] Repository validation failed: {error}", file=sys.stderr)
        return EXIT_USAGE

    # SECURITY: Validate documentation directory
    is_valid, error, docs_dir = PathValidator.validate_docs_dir(settings.docs_dir)
    if not is_valid:
        print(f"[Security] Docs directory validation failed: {error}", file=sys.stderr)
        return EXIT_USAGE
    settings = settings.with_overrides(repo_name=repo, docs_dir=docs_dir)

    if not settings.github_token:
        logger.warning("GITHUB_TOKEN is not set; only public repositories can be read and nothing can be published")

    logger.info("Generating documentation for %s PR #%d", repo, settings.pr_number)
    orchestrator = build_orchestrator(settings, dry_run=args.dry_run)
    report = asyncio.run(orchestrator.run_pipeline(repo, settings.pr_number))

    if args.output_dir and report.result is not None and report.output is not None:
        try:
            LocalArtifactStore(args.output_dir).write_output(repo, settings.pr_number, report.result, report.output)
        except (OSError, ValueError) as exc:
            logger.error("Failed to write local artifacts: %s", exc)

    if report.succeeded:
        print("Documentation generated successfully!")
        return EXIT_OK

    if report.result is not None:
        for doc in report.result.failed_docs:
            print(f"   {doc.path}: {doc.error_detail}", file=sys.stderr)
    print(f"Documentation generation failed at stage '{report.stage.value}'. Check logs for details.", file=sys.stderr)
    return EXIT_FAILED


if __name__ == "__main__":
    sys.exit(main())
