"""Content Generator backed by litellm (Gemini by default).

Deep module: callers pass a prompt in and get a ``Result`` back. Provider
errors, timeouts and malformed responses are all converted to failures;
nothing raises to the caller. No retries are attempted here.
"""

import logging
from typing import Any, Dict, Optional, Sequence

import litellm

from pr_doc_agent.models import Result

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gemini/gemini-1.5-flash"
MAX_HISTORY_MESSAGES = 10


class LiteLLMContentGenerator:
    """Generates text through ``litellm.acompletion``.

    Args:
        model: litellm model id, e.g. ``gemini/gemini-1.5-flash``.
        api_key: Provider key. When empty, litellm falls back to its own
                 environment lookup (``GEMINI_API_KEY`` for Gemini).
        base_url: Optional alternative endpoint.
        temperature / top_p: Sampling parameters.
        max_tokens: Completion cap; ``None`` leaves it to the provider.
        timeout: Per-request timeout in seconds.
    """

    def __init__(
        self,
        model: str = DEFAULT_MODEL,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        temperature: Optional[float] = 0.7,
        top_p: Optional[float] = 0.9,
        max_tokens: Optional[int] = None,
        timeout: float = 120.0,
    ):
        self.model = model
        self.api_key = api_key
        self.base_url = base_url
        self.temperature = temperature
        self.top_p = top_p
        self.max_tokens = max_tokens
        self.timeout = timeout

    def _completion_kwargs(self) -> Dict[str, Any]:
        kwargs: Dict[str, Any] = {"model": self.model, "timeout": self.timeout}
        # None values are omitted so provider defaults apply
        if self.temperature is not None:
            kwargs["temperature"] = self.temperature
        if self.top_p is not None:
            kwargs["top_p"] = self.top_p
        if self.max_tokens is not None:
            kwargs["max_tokens"] = self.max_tokens
        if self.api_key:
            kwargs["api_key"] = self.api_key
        if self.base_url:
            kwargs["api_base"] = self.base_url
        return kwargs

    @staticmethod
    def _build_messages(prompt: str, history: Optional[Sequence[dict]]) -> list[dict[str, str]]:
        """Prior turns (last 10) followed by the prompt as the user turn."""
        messages: list[dict[str, str]] = []
        for message in list(history or [])[-MAX_HISTORY_MESSAGES:]:
            role = "user" if message.get("role") == "user" else "assistant"
            messages.append({"role": role, "content": str(message.get("content", ""))})
        messages.append({"role": "user", "content": prompt})
        return messages

    @staticmethod
    def _extract_content(response: Any) -> str:
        try:
            choice = response.choices[0]
        except (AttributeError, IndexError, TypeError, KeyError):
            return ""
        message = getattr(choice, "message", None)
        content = getattr(message, "content", None)
        return content if isinstance(content, str) else ""

    async def generate(
        self,
        prompt: str,
        history: Optional[Sequence[dict]] = None,
    ) -> Result[str]:
        """Send one completion request and return its text."""
        logger.debug("Generating content for prompt: %.50s", prompt)
        try:
            response = await litellm.acompletion(
                messages=self._build_messages(prompt, history),
                **self._completion_kwargs(),
            )
        except Exception as exc:
            logger.error("Content generation failed (%s): %s", type(exc).__name__, exc)
            return Result.failure(f"{type(exc).__name__}: {exc}")

        content = self._extract_content(response)
        if not content:
            logger.error("Content generator returned no text for model %s", self.model)
            return Result.failure("No response generated")
        return Result.success(content)
