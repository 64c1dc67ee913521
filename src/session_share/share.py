"""Share and import workflows.

Export: read -> sanitize -> encode -> publish (session.jsonl + metadata.json)
Import: fetch -> decode -> remap UUIDs -> write to local storage
"""

import json
import logging
from dataclasses import dataclass
from pathlib import Path, PurePath
from typing import Optional

from .core import Record, SessionShareError
from .metadata import SessionMetadata, extract_metadata
from .reader import DecodeStats, parse_session_file, parse_session_text, require_records
from .remapper import remap_session
from .sanitizer import infer_base_path, sanitize_session
from .store import PublishedSession, SessionStore
from .writer import encode_session, write_session_to_local

logger = logging.getLogger(__name__)

SESSION_FILENAME = "session.jsonl"
METADATA_FILENAME = "metadata.json"


class ShareError(SessionShareError):
    """A share or import workflow could not complete."""


@dataclass
class ImportResult:
    session_path: Path
    session_id: str
    message_count: int
    skipped_count: int
    project_path: str


def load_sanitized_session(session_path: Path) -> list[Record]:
    """Read a local session file and sanitize it for sharing."""
    stats = DecodeStats()
    records = require_records(parse_session_file(session_path, stats), stats)
    return sanitize_session(records, infer_base_path(records))


def preview_session(session_path: Path) -> str:
    """Return the sanitized JSONL that sharing would publish."""
    return encode_session(load_sanitized_session(session_path))


def describe_session(metadata: SessionMetadata) -> str:
    """Build the gist description for a session."""
    if metadata.project_path and metadata.project_path != "unknown":
        name = PurePath(metadata.project_path.replace("\\", "/")).name
        return f"Claude Code Session - {name or metadata.project_path}"
    return f"Claude Code Session - {metadata.first_timestamp}"


def share_session(session_path: Path, store: SessionStore) -> PublishedSession:
    """Sanitize a local session and publish it to store."""
    stats = DecodeStats()
    original = require_records(parse_session_file(session_path, stats), stats)
    sanitized = sanitize_session(original, infer_base_path(original))

    # Describe with the original project path; only its last segment is used.
    metadata = extract_metadata(sanitized)
    description = describe_session(extract_metadata(original))

    published = store.publish(description, {
        SESSION_FILENAME: encode_session(sanitized),
        METADATA_FILENAME: json.dumps(metadata.to_dict(), indent=2, ensure_ascii=False),
    })
    logger.info("Shared %d records from %s as %s", len(sanitized), session_path, published.url)
    return published


def _select_session_file(files: dict[str, str]) -> tuple[str, str]:
    name = next((n for n in files if n.endswith(".jsonl")), None)
    if name is None:
        raise ShareError(
            "No JSONL file found in shared session. Expected a .jsonl file containing session messages."
        )
    content = files[name]
    if not content:
        raise ShareError(f'JSONL file "{name}" has no content. The shared session may be malformed.')
    return name, content


def import_session(
    reference: str,
    project_path: str,
    store: SessionStore,
    projects_root: Optional[Path] = None,
) -> ImportResult:
    """Fetch a shared session and write it locally under fresh UUIDs."""
    name, content = _select_session_file(store.fetch(reference))

    stats = DecodeStats()
    records = require_records(parse_session_text(content, stats), stats)
    remapped = remap_session(records)

    result = write_session_to_local(remapped, project_path, projects_root)
    logger.info("Imported %d records from %s into %s", len(remapped), name, result.file_path)

    return ImportResult(
        session_path=result.file_path,
        session_id=result.session_id,
        message_count=len(remapped),
        skipped_count=stats.skipped,
        project_path=project_path,
    )
