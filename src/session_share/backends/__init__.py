"""Session store backends and a configured default."""

from ..config import get_gist_api_url, get_github_token
from ..store import SessionStore
from .gist import GistStore


def get_store() -> SessionStore:
    """Return the store configured from the environment."""
    return GistStore(token=get_github_token(), api_url=get_gist_api_url())
