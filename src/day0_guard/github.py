"""GitHub REST client: revision content for discovery, check runs and comments.

Only the handful of endpoints the guard needs are wrapped. Every failure
(connection error, timeout, non-2xx status) surfaces as GitHubError; a 404 on
the contents endpoint is reported as ``None`` because a missing lockfile is a
normal result.
"""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import quote

import requests
from requests import Response
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_fixed

from .config import DEFAULT_GITHUB_API_URL, DEFAULT_HTTP_TIMEOUT

logger = logging.getLogger(__name__)

USER_AGENT = "day0-guard"
_RETRYABLE = (requests.ConnectionError, requests.Timeout)


class GitHubError(RuntimeError):
    """Raised when a GitHub API call fails."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


@retry(
    reraise=True,
    stop=stop_after_attempt(3),
    wait=wait_fixed(2),
    retry=retry_if_exception_type(_RETRYABLE),
)
def _http_get(
    session: requests.Session,
    url: str,
    *,
    params: dict[str, Any] | None = None,
    timeout: float,
) -> Response:
    return session.get(url, params=params, timeout=timeout)


class GitHubClient:
    """Thin wrapper around the GitHub REST API for one repository."""

    def __init__(
        self,
        token: str,
        repository: str,
        *,
        api_url: str = DEFAULT_GITHUB_API_URL,
        timeout: float = DEFAULT_HTTP_TIMEOUT,
        session: requests.Session | None = None,
    ) -> None:
        if "/" not in repository:
            raise ValueError(f"repository must look like owner/name, got {repository!r}")
        self.repository = repository
        self.timeout = timeout
        self.base_url = f"{api_url.rstrip('/')}/repos/{repository}"
        self.session = session or requests.Session()
        self.session.headers.update(
            {
                "Authorization": f"token {token}",
                "Accept": "application/vnd.github+json",
                "User-Agent": USER_AGENT,
            }
        )

    # ---- transport ---------------------------------------------------------------------

    def _get(self, url: str, params: dict[str, Any] | None = None) -> Response:
        try:
            response = _http_get(self.session, url, params=params, timeout=self.timeout)
        except requests.RequestException as exc:
            raise GitHubError(f"GET {url} failed: {exc}") from exc
        return response

    def _get_json(self, path: str, params: dict[str, Any] | None = None) -> Any:
        url = f"{self.base_url}/{path}"
        response = self._get(url, params=params)
        _raise_for_status(response, "GET", url)
        return response.json()

    def _send(self, method: str, path: str, payload: dict[str, Any]) -> Any:
        url = f"{self.base_url}/{path}"
        try:
            response = self.session.request(method, url, json=payload, timeout=self.timeout)
        except requests.RequestException as exc:
            raise GitHubError(f"{method} {url} failed: {exc}") from exc
        _raise_for_status(response, method, url)
        return response.json()

    # ---- revision content --------------------------------------------------------------

    def get_content(self, path: str, ref: str) -> Any | None:
        """Return the contents-API document for ``path`` at ``ref``, or None if absent.

        The document is a dict for files and a list for directories.
        """
        url = f"{self.base_url}/contents/{quote(path.lstrip('/'), safe='/')}"
        response = self._get(url, params={"ref": ref})
        if response.status_code == 404:
            return None
        _raise_for_status(response, "GET", url)
        return response.json()

    def get_blob(self, sha: str) -> dict[str, Any]:
        """Return a git blob document (base64 content) by its SHA."""
        data = self._get_json(f"git/blobs/{sha}")
        if not isinstance(data, dict):
            raise GitHubError(f"Unexpected blob payload for {sha}")
        return data

    def download(self, url: str) -> bytes:
        """Fetch raw bytes from a ``download_url`` handed out by the contents API."""
        response = self._get(url)
        _raise_for_status(response, "GET", url)
        return response.content

    def get_commit_tree_sha(self, ref: str) -> str:
        """Resolve a commit-ish to the SHA of its root tree."""
        data = self._get_json(f"commits/{ref}")
        try:
            return str(data["commit"]["tree"]["sha"])
        except (KeyError, TypeError) as exc:
            raise GitHubError(f"Commit {ref} has no tree SHA") from exc

    def list_tree(self, tree_sha: str) -> list[dict[str, Any]]:
        """Return every entry of ``tree_sha``, recursively."""
        data = self._get_json(f"git/trees/{tree_sha}", params={"recursive": "1"})
        if not isinstance(data, dict):
            raise GitHubError(f"Unexpected tree payload for {tree_sha}")
        if data.get("truncated"):
            logger.warning("Tree %s was truncated by the API; some lockfiles may be missed", tree_sha)
        entries = data.get("tree") or []
        return [entry for entry in entries if isinstance(entry, dict)]

    # ---- checks and comments -----------------------------------------------------------

    def create_check_run(self, name: str, head_sha: str) -> int:
        """Create an ``in_progress`` check run and return its id."""
        data = self._send(
            "POST",
            "check-runs",
            {"name": name, "head_sha": head_sha, "status": "in_progress"},
        )
        return int(data["id"])

    def complete_check_run(
        self,
        check_run_id: int,
        *,
        conclusion: str,
        title: str,
        summary: str,
        text: str = "",
    ) -> None:
        output = {"title": title, "summary": summary}
        if text:
            output["text"] = text
        self._send(
            "PATCH",
            f"check-runs/{check_run_id}",
            {"status": "completed", "conclusion": conclusion, "output": output},
        )

    def create_comment(self, issue_number: int, body: str) -> str:
        """Post a pull request comment; return its HTML URL."""
        data = self._send("POST", f"issues/{issue_number}/comments", {"body": body})
        return str(data.get("html_url", ""))


def _raise_for_status(response: Response, method: str, url: str) -> None:
    if response.status_code >= 400:
        raise GitHubError(
            f"{method} {url} returned {response.status_code}",
            status_code=response.status_code,
        )
