"""GitHub Gist session store.

Publishes sanitized sessions as secret (unlisted) gists and fetches them
back by gist URL or bare id. The token is passed in by the caller.
"""

import logging
import re
import urllib.parse
from typing import Optional

import httpx

from ..config import DEFAULT_GIST_API_URL
from ..core import SessionShareError
from ..store import PublishedSession, SessionStore

logger = logging.getLogger(__name__)

_GIST_ID_RE = re.compile(r"^[0-9A-Za-z]+$")

TOKEN_HELP = (
    "Create a personal access token at https://github.com/settings/tokens "
    'with the "gist" scope.'
)


class GistAuthError(SessionShareError):
    """The GitHub token is missing or was rejected."""


class GistApiError(SessionShareError):
    """A GitHub Gist API call failed."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


def parse_gist_id(reference: str) -> str:
    """Extract the gist id from a gist URL or bare id.

    https://gist.github.com/user/abc123 -> abc123
    """
    ref = reference.strip()
    if "://" in ref or ref.startswith("gist.github.com"):
        url = ref if "://" in ref else f"https://{ref}"
        parts = [p for p in urllib.parse.urlparse(url).path.split("/") if p]
        ref = parts[-1] if parts else ""

    if not _GIST_ID_RE.match(ref):
        raise GistApiError(f"Invalid gist URL or id: {reference!r}")
    return ref


class GistStore(SessionStore):
    """Session store backed by GitHub Gists."""

    name = "gist"

    def __init__(
        self,
        token: Optional[str],
        api_url: str = DEFAULT_GIST_API_URL,
        client: Optional[httpx.Client] = None,
        timeout: float = 30.0,
    ):
        if not token:
            raise GistAuthError(f"GITHUB_TOKEN is required. {TOKEN_HELP}")
        self._token = token
        self.api_url = api_url.rstrip("/")
        self._client = client or httpx.Client(timeout=timeout)

    def close(self) -> None:
        self._client.close()

    def publish(self, description: str, files: dict[str, str]) -> PublishedSession:
        payload = {
            "description": description,
            "public": False,
            "files": {name: {"content": content} for name, content in files.items()},
        }
        data = self._request("POST", f"{self.api_url}/gists", "create gist", json=payload).json()
        logger.info("Created gist %s", data.get("id"))
        return PublishedSession(id=data["id"], url=data["html_url"])

    def fetch(self, reference: str) -> dict[str, str]:
        gist_id = parse_gist_id(reference)
        data = self._request("GET", f"{self.api_url}/gists/{gist_id}", "fetch gist").json()

        files = {}
        for name, info in (data.get("files") or {}).items():
            content = info.get("content")
            if info.get("truncated") or content is None:
                # Large files are truncated in the API response.
                raw_url = info.get("raw_url")
                if not raw_url:
                    continue
                logger.debug("Fetching truncated gist file %s from %s", name, raw_url)
                content = self._request("GET", raw_url, f"fetch {name}").text
            files[name] = content
        return files

    # ── Private helpers ──────────────────────────────────────────────

    def _request(self, method: str, url: str, action: str, **kwargs) -> httpx.Response:
        headers = {
            "Authorization": f"Bearer {self._token}",
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
        }
        try:
            resp = self._client.request(method, url, headers=headers, **kwargs)
        except httpx.HTTPError as e:
            raise GistApiError(f"Failed to {action}: {e}") from e

        if resp.is_success:
            return resp
        raise _status_error(resp, action)


def _status_error(resp: httpx.Response, action: str) -> SessionShareError:
    """Map a failed GitHub API response to an error."""
    try:
        body = resp.json()
    except ValueError:
        body = None
    message = body.get("message", "") if isinstance(body, dict) else resp.text
    status = resp.status_code

    if status == 401:
        return GistAuthError(f"Invalid GITHUB_TOKEN. {TOKEN_HELP}")
    if status == 403:
        if "rate limit" in message.lower():
            return GistApiError("GitHub API rate limit exceeded. Please wait and try again later.", 403)
        return GistApiError('Permission denied. Ensure your GITHUB_TOKEN has the "gist" scope.', 403)
    if status == 404:
        return GistApiError(f"Failed to {action}: gist not found", 404)
    if status == 422:
        return GistApiError(f"Invalid gist data: {message or 'Validation failed'}", 422)
    return GistApiError(f"Failed to {action}: HTTP {status} {message}".rstrip(), status)
