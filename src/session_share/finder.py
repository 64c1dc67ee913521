"""Discovery of session files in Claude Code's projects directory."""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .config import encode_project_path, get_claude_projects_path, resolve_storage_dir

logger = logging.getLogger(__name__)


@dataclass
class SessionFile:
    path: Path
    session_id: str
    is_agent: bool  # agent-{id}.jsonl


def find_session_files(project_path: str, projects_root: Optional[Path] = None) -> list[SessionFile]:
    """Return the main and agent session files for a project.

    A project without a session directory has no sessions; other
    filesystem errors propagate.
    """
    session_dir = resolve_storage_dir(encode_project_path(project_path), projects_root)
    if not session_dir.is_dir():
        return []

    files = []
    for jsonl_file in sorted(session_dir.glob("*.jsonl")):
        stem = jsonl_file.stem
        is_agent = stem.startswith("agent-")
        files.append(SessionFile(
            path=jsonl_file,
            session_id=stem[len("agent-"):] if is_agent else stem,
            is_agent=is_agent,
        ))
    return files


def find_most_recent_session(projects_root: Optional[Path] = None) -> Optional[Path]:
    """Return the most recently modified session file across all projects."""
    base = Path(projects_root) if projects_root is not None else get_claude_projects_path()
    if not base.is_dir():
        return None

    newest: Optional[Path] = None
    newest_mtime = 0.0

    for project_dir in base.iterdir():
        if not project_dir.is_dir():
            continue
        try:
            for jsonl_file in project_dir.glob("*.jsonl"):
                mtime = jsonl_file.stat().st_mtime
                if newest is None or mtime > newest_mtime:
                    newest, newest_mtime = jsonl_file, mtime
        except OSError as e:
            logger.debug("Skipping unreadable project dir %s: %s", project_dir, e)
            continue

    return newest
