"""Runtime settings read from the environment (and an optional ``.env`` file)."""

import os
from dataclasses import dataclass, replace
from typing import Optional

from dotenv import load_dotenv

from pr_doc_agent.content_client import DEFAULT_MODEL
from pr_doc_agent.github_client import DEFAULT_API_URL
from pr_doc_agent.aggregator import DEFAULT_MAX_CONCURRENCY
from pr_doc_agent.renderer import DEFAULT_DOCS_DIR


class ConfigError(ValueError):
    """Raised when an environment value cannot be used."""


def _env_float(name: str, default: Optional[float]) -> Optional[float]:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        raise ConfigError(f"{name} must be a number, got {raw!r}") from None


def _env_int(name: str, default: Optional[int]) -> Optional[int]:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigError(f"{name} must be an integer, got {raw!r}") from None


@dataclass(frozen=True)
class Settings:
    """Everything the entry point needs to wire the pipeline."""

    llm_model: str = DEFAULT_MODEL
    llm_api_key: Optional[str] = None
    llm_base_url: Optional[str] = None
    llm_temperature: Optional[float] = 0.7
    llm_top_p: Optional[float] = 0.9
    llm_max_tokens: Optional[int] = None
    llm_timeout: float = 120.0

    github_token: str = ""
    github_api_url: str = DEFAULT_API_URL

    max_concurrency: int = DEFAULT_MAX_CONCURRENCY
    docs_dir: str = DEFAULT_DOCS_DIR
    target_branch: Optional[str] = None

    repo_name: Optional[str] = None
    pr_number: Optional[int] = None

    @classmethod
    def from_env(cls, dotenv: bool = True) -> "Settings":
        """Build settings from environment variables.

        Raises:
            ConfigError: if a numeric variable is malformed or out of range.
        """
        if dotenv:
            load_dotenv()

        settings = cls(
            llm_model=os.getenv("LLM_MODEL") or DEFAULT_MODEL,
            llm_api_key=os.getenv("GEMINI_API_KEY") or os.getenv("LLM_API_KEY") or None,
            llm_base_url=os.getenv("LLM_BASE_URL") or None,
            llm_temperature=_env_float("LLM_TEMPERATURE", 0.7),
            llm_top_p=_env_float("LLM_TOP_P", 0.9),
            llm_max_tokens=_env_int("LLM_MAX_TOKENS", None),
            llm_timeout=_env_float("LLM_TIMEOUT", 120.0),
            github_token=os.getenv("GITHUB_TOKEN", ""),
            github_api_url=os.getenv("GITHUB_API_URL") or DEFAULT_API_URL,
            max_concurrency=_env_int("DOC_MAX_CONCURRENCY", DEFAULT_MAX_CONCURRENCY),
            docs_dir=os.getenv("DOCS_DIR") or DEFAULT_DOCS_DIR,
            target_branch=os.getenv("DOC_TARGET_BRANCH") or None,
            repo_name=os.getenv("REPO_NAME") or None,
            pr_number=_env_int("PR_NUMBER", None),
        )
        settings.validate()
        return settings

    def validate(self) -> None:
        if self.max_concurrency < 1:
            raise ConfigError(f"DOC_MAX_CONCURRENCY must be >= 1, got {self.max_concurrency}")
        if self.llm_max_tokens is not None and self.llm_max_tokens < 1:
            raise ConfigError(f"LLM_MAX_TOKENS must be >= 1, got {self.llm_max_tokens}")
        if self.llm_timeout <= 0:
            raise ConfigError(f"LLM_TIMEOUT must be positive, got {self.llm_timeout}")

    def with_overrides(self, **changes) -> "Settings":
        """Copy with CLI overrides applied; ``None`` values are ignored."""
        updated = replace(self, **{k: v for k, v in changes.items() if v is not None})
        updated.validate()
        return updated
