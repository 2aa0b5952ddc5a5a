"""Tests for completion-limit resolution."""

from unittest.mock import patch

from pr_doc_agent.model_config import (
    FALLBACK_LIMITS,
    KNOWN_LIMITS,
    bare_model_name,
    completion_budget,
    resolve_limits,
)


class TestResolveLimits:

    def test_known_gemini_route(self):
        assert resolve_limits("gemini/gemini-1.5-flash") is KNOWN_LIMITS["gemini-1.5-flash"]

    def test_vertex_route_uses_same_entry(self):
        assert resolve_limits("vertex_ai/gemini-1.5-pro") is KNOWN_LIMITS["gemini-1.5-pro"]

    def test_only_one_prefix_is_removed(self):
        assert bare_model_name("openrouter/google/gemini-pro") == "google/gemini-pro"

    def test_falls_back_to_litellm_registry(self):
        with patch("litellm.get_model_info", return_value={"max_input_tokens": 128_000, "max_output_tokens": 16_384}):
            limits = resolve_limits("openai/gpt-4o-mini")

        assert (limits.input_tokens, limits.output_tokens) == (128_000, 16_384)

    def test_output_never_exceeds_input(self):
        with patch("litellm.get_model_info", return_value={"max_input_tokens": 8_000, "max_output_tokens": 32_000}):
            limits = resolve_limits("custom/model")

        assert limits.output_tokens == 4_000

    def test_unknown_model_uses_fallback(self):
        with patch("litellm.get_model_info", side_effect=Exception("This model isn't mapped yet")):
            assert resolve_limits("mystery-model") is FALLBACK_LIMITS


class TestCompletionBudget:

    def test_defaults_to_model_limit(self):
        assert completion_budget("gemini/gemini-1.5-flash") == 8_192

    def test_requested_value_within_limit(self):
        assert completion_budget("gemini/gemini-1.5-flash", 2_000) == 2_000

    def test_requested_value_is_clamped(self):
        assert completion_budget("gemini/gemini-1.5-flash", 100_000) == 8_192
