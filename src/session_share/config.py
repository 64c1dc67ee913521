"""Configuration and path resolution for Claude Code session storage.

This is the only module that reads the process environment.
"""

import os
from pathlib import Path
from typing import Optional

DEFAULT_GIST_API_URL = "https://api.github.com"


def get_claude_projects_path() -> Path:
    """Return the path to Claude Code's projects directory."""
    env = os.environ.get("SESSION_SHARE_CLAUDE_PATH")
    if env:
        return Path(env)

    return Path.home() / ".claude" / "projects"


def get_github_token() -> Optional[str]:
    """Return the GitHub token used for gist access, if one is set."""
    return os.environ.get("GITHUB_TOKEN") or None


def get_gist_api_url() -> str:
    """Return the base URL of the GitHub API."""
    return os.environ.get("SESSION_SHARE_GIST_API") or DEFAULT_GIST_API_URL


def encode_project_path(project_path: str) -> str:
    """Encode a project directory into Claude Code's storage key.

    /Users/name/my_project -> -Users-name-my-project

    Both "/" and "_" become "-", so the key cannot be decoded reliably.
    """
    return project_path.replace("/", "-").replace("_", "-")


def resolve_storage_dir(storage_key: str, projects_root: Optional[Path] = None) -> Path:
    """Return the directory holding sessions for a storage key."""
    root = projects_root if projects_root is not None else get_claude_projects_path()
    return Path(root) / storage_key
