"""Prompt-safety helpers for pull request content embedded in prompts.

Changed files are attacker-controlled text: anyone opening a PR chooses the
paths, code and diff that end up inside the analysis prompt.
"""

import re
from typing import List

_CONTROL_CHARS = re.compile(r'[\n\r\t\x00-\x1f\x7f-\x9f]')
_BACKTICK_RUN = re.compile(r'`{3,}')

MAX_PATH_LENGTH = 255


class PromptInjectionDetector:
    """Detects and neutralizes prompt injection attempts in PR content."""

    INJECTION_PATTERNS = [
        r'ignore\s+(previous|above|all)\s+instructions',
        r'disregard\s+(previous|above|all|the)\s+',
        r'forget\s+everything',
        r'new\s+instructions?:',
        r'you\s+are\s+now',
        r'roleplay\s+as',
        r'pretend\s+you',
        r'approve\s+this\s+(pr|pull\s+request)',
        r'<\|im_(start|end)\|>',
    ]

    def __init__(self):
        self._compiled = [re.compile(p, re.IGNORECASE) for p in self.INJECTION_PATTERNS]

    def sanitize_filename(self, filename: str) -> str:
        """
        Sanitize a changed-file path before embedding it in a prompt.

        Control characters are dropped and the path is capped at 255
        characters. A path that reads like an instruction has everything
        outside ``[A-Za-z0-9_./-]`` replaced with underscores.

        Args:
            filename: Raw path from the pull request

        Returns:
            Path safe for use in prompts
        """
        sanitized = _CONTROL_CHARS.sub('', filename)[:MAX_PATH_LENGTH]
        if self.find_injections(sanitized):
            sanitized = re.sub(r'[^\w\.\-/]', '_', sanitized)
        return sanitized

    def find_injections(self, text: str) -> List[str]:
        """Return the suspicious phrases found in ``text``, in pattern order."""
        found = []
        for pattern in self._compiled:
            match = pattern.search(text or '')
            if match:
                found.append(match.group(0))
        return found

    def detect_injection(self, text: str) -> bool:
        """True if any injection pattern occurs in ``text``."""
        return bool(self.find_injections(text))

    @staticmethod
    def fence_for(text: str) -> str:
        """Backtick fence long enough that ``text`` cannot close it early."""
        longest = max((len(m.group(0)) for m in _BACKTICK_RUN.finditer(text or '')), default=2)
        return '`' * (longest + 1)
