"""Security module for pr-doc-agent."""

from .validators import RepositoryValidator, PathValidator
from .prompt_safety import PromptInjectionDetector

__all__ = ["RepositoryValidator", "PathValidator", "PromptInjectionDetector"]
