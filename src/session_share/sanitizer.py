"""Session sanitization for privacy before sharing.

- Strips thinking from assistant records
- Converts absolute paths under the project directory to relative ones
- Redacts secrets in assistant text

Every function returns new records; inputs are never modified.
"""

import dataclasses
import logging
from typing import Iterable, Optional

from .core import (
    TEXT_BLOCK,
    THINKING_BLOCK,
    AssistantRecord,
    Record,
    RecordType,
    Representation,
    RepresentationError,
    SnapshotRecord,
    UserRecord,
)
from .paths import sanitize_path, sanitize_paths_in_text
from .redactor import redact_secrets

logger = logging.getLogger(__name__)


def sanitize_text(text: str, base_path: str) -> str:
    """Relativize embedded paths, then redact secrets."""
    return redact_secrets(sanitize_paths_in_text(text, base_path))


def sanitize_user_record(record: UserRecord, base_path: str) -> UserRecord:
    """Convert the working directory to a relative path."""
    return dataclasses.replace(record, cwd=sanitize_path(record.cwd, base_path))


def sanitize_assistant_record(record: AssistantRecord, base_path: str) -> AssistantRecord:
    """Strip thinking and sanitize text in either content layout."""
    if record.representation is Representation.LEGACY:
        snapshot = dataclasses.replace(
            record.snapshot,
            thinking=None,
            messages=tuple(
                {**m, "content": sanitize_text(m["content"], base_path)}
                if isinstance(m, dict) and isinstance(m.get("content"), str) else m
                for m in record.snapshot.messages
            ),
        )
        return dataclasses.replace(record, snapshot=snapshot)

    if record.representation is Representation.BLOCKS:
        if isinstance(record.response.content, str):
            response = dataclasses.replace(
                record.response, content=sanitize_text(record.response.content, base_path)
            )
            return dataclasses.replace(record, response=response)

        blocks = []
        for block in record.response.content:
            if not isinstance(block, dict):
                blocks.append(block)
                continue
            block_type = block.get("type")
            if block_type == THINKING_BLOCK:
                continue
            if block_type == TEXT_BLOCK and block.get("text"):
                block = {**block, "text": sanitize_text(block["text"], base_path)}
            blocks.append(block)
        response = dataclasses.replace(record.response, content=tuple(blocks))
        return dataclasses.replace(record, response=response)

    raise RepresentationError(
        f"Assistant record {record.uuid} has unknown content layout {record.representation!r}"
    )


def sanitize_snapshot_record(record: SnapshotRecord, base_path: str) -> SnapshotRecord:
    """Convert tracked file paths to relative paths."""
    files = tuple(
        {**f, "path": sanitize_path(f["path"], base_path)}
        if isinstance(f, dict) and isinstance(f.get("path"), str) else f
        for f in record.files
    )
    return dataclasses.replace(record, files=files)


def sanitize_record(record: Record, base_path: str) -> Record:
    """Apply the sanitizer matching the record's kind."""
    if record.type is RecordType.USER:
        return sanitize_user_record(record, base_path)
    if record.type is RecordType.ASSISTANT:
        return sanitize_assistant_record(record, base_path)
    if record.type is RecordType.SNAPSHOT:
        return sanitize_snapshot_record(record, base_path)
    raise TypeError(f"Unknown record type: {record.type!r}")


def infer_base_path(records: Iterable[Record]) -> str:
    """Return the cwd of the first user record that has one, else ""."""
    for record in records:
        if record.type is RecordType.USER and record.cwd:
            return record.cwd
    return ""


def sanitize_session(records: list[Record], base_path: Optional[str] = None) -> list[Record]:
    """Sanitize every record of a session, preserving order.

    When base_path is None it is inferred from the first user record.
    """
    if base_path is None:
        base_path = infer_base_path(records)
        logger.debug("Inferred base path: %r", base_path)

    return [sanitize_record(record, base_path) for record in records]
