"""GitHub REST client implementing the Version Control Gateway.

Deep module: callers pass repository coordinates in and get a ``Result``
back. Auth headers, pagination, base64 handling and transient-error retries
are handled internally; no exception escapes to the caller.
"""

import base64
import logging
import os
import time
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import requests

from pr_doc_agent.models import ChangeKind, ChangedFile, PullRequestInfo, Result

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.github.com"
USER_AGENT = "pr-doc-agent/1.0"
FILES_PER_PAGE = 100
# GitHub stops listing PR files after 3000 entries.
MAX_FILE_PAGES = 30


class GitHubGateway:
    """Client for the GitHub pull request, issues and contents APIs.

    Args:
        token: Bearer token. Defaults to the ``GITHUB_TOKEN`` env var. When
               empty, requests are sent without auth (public repos only).
        api_url: Base URL of the API. Defaults to ``GITHUB_API_URL`` env var
                 or ``https://api.github.com``.
    """

    def __init__(
        self,
        token: Optional[str] = None,
        api_url: Optional[str] = None,
        timeout: float = 30,
        max_retries: int = 3,
    ):
        self.token = token if token is not None else os.getenv("GITHUB_TOKEN", "")
        self.api_url = (api_url or os.getenv("GITHUB_API_URL") or DEFAULT_API_URL).rstrip("/")
        self.timeout = timeout
        self.max_retries = max(1, max_retries)
        self.session = requests.Session()
        self.session.headers.update(self._headers())

    def _headers(self) -> Dict[str, str]:
        """Build request headers, including auth if a token is configured."""
        headers = {
            "Accept": "application/vnd.github.v3+json",
            "User-Agent": USER_AGENT,
        }
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def _contents_url(self, repo: str, path: str) -> str:
        return f"{self.api_url}/repos/{repo}/contents/{quote(path.lstrip('/'), safe='/')}"

    def _request(self, method: str, url: str, **kwargs) -> requests.Response:
        """Send a request, retrying connection-level failures with backoff.

        HTTP error statuses are returned to the caller, not retried.
        """
        for attempt in range(self.max_retries):
            try:
                logger.debug("%s %s (attempt %d/%d)", method, url, attempt + 1, self.max_retries)
                return self.session.request(method, url, timeout=self.timeout, **kwargs)
            except requests.exceptions.RequestException as exc:
                logger.warning("Request failed: %s: %s", type(exc).__name__, exc)
                if attempt < self.max_retries - 1:
                    wait = 2 ** attempt
                    logger.info("Retrying in %ds", wait)
                    time.sleep(wait)
                else:
                    logger.error("All %d attempts failed for %s %s", self.max_retries, method, url)
                    raise

    @staticmethod
    def _status_error(response: requests.Response, what: str) -> str:
        try:
            payload = response.json()
        except ValueError:
            payload = None
        detail = payload.get("message", "") if isinstance(payload, dict) else response.text[:200]
        message = f"{what} failed with status {response.status_code}"
        return f"{message}: {detail}" if detail else message

    # ----- read operations -------------------------------------------------

    def fetch_pull_request(self, repo: str, number: int) -> Result[PullRequestInfo]:
        """Fetch PR metadata and every changed file with its head content."""
        logger.info("Fetching PR #%d from %s", number, repo)
        try:
            response = self._request("GET", f"{self.api_url}/repos/{repo}/pulls/{number}")
            if not response.ok:
                error = self._status_error(response, "Fetch pull request")
                logger.error(error)
                return Result.failure(error)
            data = response.json()

            files = self._list_changed_files(repo, number)
            if not files.ok:
                return Result.failure(files.error)

            head_sha = (data.get("head") or {}).get("sha") or "HEAD"
            changed = [self._to_changed_file(repo, item, head_sha) for item in files.value]

            return Result.success(PullRequestInfo(
                repo=repo,
                number=int(data.get("number", number)),
                title=data.get("title") or "",
                body=data.get("body") or "",
                base_branch=(data.get("base") or {}).get("ref") or "",
                head_branch=(data.get("head") or {}).get("ref") or "",
                author=(data.get("user") or {}).get("login") or "",
                changed_files=tuple(changed),
            ))
        except (requests.exceptions.RequestException, ValueError, TypeError, AttributeError) as exc:
            logger.error("Error fetching pull request %s#%d: %s", repo, number, exc)
            return Result.failure(f"{type(exc).__name__}: {exc}")

    def _list_changed_files(self, repo: str, number: int) -> Result[List[Dict[str, Any]]]:
        items: List[Dict[str, Any]] = []
        for page in range(1, MAX_FILE_PAGES + 1):
            response = self._request(
                "GET",
                f"{self.api_url}/repos/{repo}/pulls/{number}/files",
                params={"per_page": FILES_PER_PAGE, "page": page},
            )
            if not response.ok:
                error = self._status_error(response, "Fetch changed files")
                logger.error(error)
                return Result.failure(error)
            batch = response.json()
            if not isinstance(batch, list):
                return Result.failure("Fetch changed files returned an unexpected payload")
            items.extend(batch)
            if len(batch) < FILES_PER_PAGE:
                break
        return Result.success(items)

    def _to_changed_file(self, repo: str, item: Dict[str, Any], ref: str) -> ChangedFile:
        path = item.get("filename", "")
        kind = ChangeKind.from_status(item.get("status", ""))

        content = ""
        if kind is not ChangeKind.DELETED:
            fetched = self.read_file(repo, path, ref)
            if fetched.ok:
                content = fetched.value
            else:
                logger.warning("Failed to fetch file content for %s: %s", path, fetched.error)

        return ChangedFile(
            path=path,
            content=content,
            diff=item.get("patch") or "",
            kind=kind,
            lines_added=int(item.get("additions") or 0),
            lines_removed=int(item.get("deletions") or 0),
        )

    def read_file(self, repo: str, path: str, ref: str = "HEAD") -> Result[str]:
        """Read a file's decoded text at ``ref``."""
        try:
            response = self._request("GET", self._contents_url(repo, path), params={"ref": ref})
            if response.status_code == 404:
                return Result.failure(f"{path} not found at {ref}")
            if not response.ok:
                return Result.failure(self._status_error(response, f"Read {path}"))

            data = response.json()
            if not isinstance(data, dict) or "content" not in data:
                return Result.failure(f"{path} is not a file")
            raw = base64.b64decode(data["content"].replace("\n", ""))
            return Result.success(raw.decode("utf-8", errors="replace"))
        except (requests.exceptions.RequestException, ValueError) as exc:
            logger.error("Error fetching file content for %s: %s", path, exc)
            return Result.failure(f"{type(exc).__name__}: {exc}")

    # ----- write operations ------------------------------------------------

    def post_comment(self, repo: str, number: int, body: str) -> Result[None]:
        """Post an issue comment on the pull request."""
        try:
            response = self._request(
                "POST",
                f"{self.api_url}/repos/{repo}/issues/{number}/comments",
                json={"body": body},
            )
            if not response.ok:
                error = self._status_error(response, "Post comment")
                logger.error("Failed to post PR comment: %s", error)
                return Result.failure(error)
            logger.info("Posted documentation comment to PR #%d", number)
            return Result.success(None)
        except requests.exceptions.RequestException as exc:
            logger.error("Error posting pull request comment: %s", exc)
            return Result.failure(f"{type(exc).__name__}: {exc}")

    def write_file(
        self,
        repo: str,
        path: str,
        content: str,
        message: str,
        branch: str = "main",
    ) -> Result[None]:
        """Create or update a file on ``branch`` with a single commit."""
        url = self._contents_url(repo, path)
        try:
            payload: Dict[str, Any] = {
                "message": message,
                "content": base64.b64encode(content.encode("utf-8")).decode("ascii"),
                "branch": branch,
            }

            # Updating an existing file requires its current blob SHA
            current = self._request("GET", url, params={"ref": branch})
            if current.ok:
                sha = (current.json() or {}).get("sha")
                if sha:
                    payload["sha"] = sha

            response = self._request("PUT", url, json=payload)
            if not response.ok:
                error = self._status_error(response, f"Update {path}")
                logger.error("Failed to update file %s: %s", path, error)
                return Result.failure(error)
            logger.info("Updated file %s on %s", path, branch)
            return Result.success(None)
        except (requests.exceptions.RequestException, ValueError, AttributeError) as exc:
            logger.error("Error updating file %s: %s", path, exc)
            return Result.failure(f"{type(exc).__name__}: {exc}")
