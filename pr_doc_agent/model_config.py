"""
Completion limits for the configured model.

Gemini routes are pinned in a local table because litellm's registry entry
differs between the ``gemini/`` and ``vertex_ai/`` routes. Everything else
is looked up in litellm, with a small default when the model is unknown.
"""

import logging
from dataclasses import dataclass
from typing import Optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ModelLimits:
    """Token limits of one model."""

    input_tokens: int
    output_tokens: int

    def __str__(self) -> str:
        return f"in={self.input_tokens:,} out={self.output_tokens:,}"


# Bare model names; routing prefixes are removed before lookup.
KNOWN_LIMITS: dict[str, ModelLimits] = {
    "gemini-1.5-flash": ModelLimits(input_tokens=1_048_576, output_tokens=8_192),
    "gemini-1.5-pro": ModelLimits(input_tokens=2_097_152, output_tokens=8_192),
    "gemini-2.0-flash": ModelLimits(input_tokens=1_048_576, output_tokens=8_192),
    "gemini-pro": ModelLimits(input_tokens=32_760, output_tokens=8_192),
}

FALLBACK_LIMITS = ModelLimits(input_tokens=32_768, output_tokens=4_096)

ROUTE_PREFIXES = ("gemini/", "vertex_ai/", "openrouter/", "litellm_proxy/", "models/")


def bare_model_name(model: str) -> str:
    """``gemini/gemini-1.5-flash`` -> ``gemini-1.5-flash``; one prefix is removed."""
    for prefix in ROUTE_PREFIXES:
        if model.startswith(prefix):
            return model[len(prefix):]
    return model


def _from_registry(model: str) -> Optional[ModelLimits]:
    import litellm

    try:
        info = litellm.get_model_info(model)
    except Exception as exc:
        logger.debug("No litellm registry entry for %s: %s", model, exc)
        return None
    if not info:
        return None

    input_tokens = info.get("max_input_tokens") or info.get("max_tokens") or FALLBACK_LIMITS.input_tokens
    output_tokens = info.get("max_output_tokens") or FALLBACK_LIMITS.output_tokens
    if output_tokens > input_tokens:
        output_tokens = input_tokens // 2
    return ModelLimits(input_tokens=input_tokens, output_tokens=output_tokens)


def resolve_limits(model: str) -> ModelLimits:
    """Limits for ``model``: local table, then litellm, then the fallback."""
    limits = KNOWN_LIMITS.get(bare_model_name(model)) or _from_registry(model) or FALLBACK_LIMITS
    logger.debug("Model %s limits: %s", model, limits)
    return limits


def completion_budget(model: str, requested: Optional[int] = None) -> int:
    """Completion cap to send with each request.

    ``requested`` (from ``LLM_MAX_TOKENS``) wins when it fits the model;
    larger values are clamped to the model's output limit.
    """
    limit = resolve_limits(model).output_tokens
    if requested is None:
        return limit
    if requested > limit:
        logger.warning("LLM_MAX_TOKENS=%d exceeds the %s output limit, using %d", requested, model, limit)
        return limit
    return requested
