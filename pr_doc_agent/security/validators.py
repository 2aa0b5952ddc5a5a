"""Security validators for CLI and configuration input."""

import re
from urllib.parse import urlparse
from typing import Tuple, Optional

_NAME_PART = re.compile(r'^[\w\-\.]+$')


class RepositoryValidator:
    """Validates and sanitizes repository identifiers."""

    ALLOWED_HOSTS = ['github.com', 'www.github.com']

    def validate_repo_name(self, repo: str) -> Tuple[bool, str, Optional[str]]:
        """
        Validate a repository identifier for use in API paths.

        Accepts ``owner/repo`` or ``https://github.com/owner/repo`` and
        reduces both to ``owner/repo``.

        Prevents:
        - Path traversal in owner or repository segments
        - Non-HTTPS protocols and untrusted hosts when a URL is given
        - Extra path segments smuggled into API URLs

        Args:
            repo: Repository identifier to validate

        Returns:
            Tuple of (is_valid, error_message, sanitized_name)
        """
        if not repo or len(repo) > 200:
            return False, "Invalid repository length", None

        candidate = repo.strip()
        if "://" in candidate:
            parsed = urlparse(candidate)
            if parsed.scheme != 'https':
                return False, "Only HTTPS URLs allowed", None
            if parsed.netloc not in self.ALLOWED_HOSTS:
                return False, f"Host not whitelisted. Allowed: {self.ALLOWED_HOSTS}", None
            candidate = parsed.path
            if candidate.endswith(".git"):
                candidate = candidate[:-4]

        parts = candidate.strip('/').split('/')
        if len(parts) != 2:
            return False, "Invalid repository (expected owner/repo)", None

        for part in parts:
            if part in ['..', '.', ''] or not _NAME_PART.match(part):
                return False, "Invalid path component", None

        return True, "", f"{parts[0]}/{parts[1]}"


class PathValidator:
    """Validates repository-relative paths to prevent traversal attacks."""

    @staticmethod
    def validate_docs_dir(docs_dir: str) -> Tuple[bool, str, Optional[str]]:
        """
        Validate the documentation directory prefix.

        Prevents:
        - Path traversal (../)
        - Absolute paths (/)
        - Special characters
        - Excessive length

        Args:
            docs_dir: Directory (relative to the repository root)

        Returns:
            Tuple of (is_valid, error_message, sanitized_path)
        """
        if not docs_dir:
            return False, "Documentation directory must not be empty", None

        if len(docs_dir) > 200:
            return False, "Documentation directory too long", None

        if not re.match(r'^[\w\-/\.]+$', docs_dir):
            return False, "Invalid characters in documentation directory", None

        if docs_dir.startswith('/') or '..' in docs_dir.split('/'):
            return False, "Path traversal detected", None

        parts = [p for p in docs_dir.split('/') if p and p != '.']
        if not parts:
            return False, "Documentation directory must not be empty", None

        return True, "", '/'.join(parts)
