"""JSONL encoder and local session writer.

Sessions land in Claude Code's storage layout:
~/.claude/projects/{encoded project path}/{session id}.jsonl
"""

import errno
import json
import logging
import os
import re
import tempfile
import uuid
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Iterable, Optional

from .config import encode_project_path, resolve_storage_dir
from .core import Record, SessionShareError

logger = logging.getLogger(__name__)


class WriteFailure(Enum):
    PERMISSION_DENIED = "permission_denied"
    NO_SPACE = "no_space"
    OTHER = "other"


class SessionWriteError(SessionShareError):
    """Writing a session file failed."""

    def __init__(self, message: str, kind: WriteFailure, hint: str = ""):
        super().__init__(message)
        self.kind = kind
        self.hint = hint


@dataclass
class WriteResult:
    file_path: Path
    session_id: str


_SURROGATE_RE = re.compile(r"[\ud800-\udfff]")


def encode_record(record: Record) -> str:
    """Serialize one record as a single JSON line (no newline).

    Lone surrogates (e.g. a truncated emoji) are written as \\u escapes so
    the line stays valid UTF-8.
    """
    line = json.dumps(record.to_dict(), ensure_ascii=False, separators=(",", ":"))
    return _SURROGATE_RE.sub(lambda m: "\\u%04x" % ord(m.group()), line)


def encode_session(records: Iterable[Record]) -> str:
    """Serialize records as JSONL with a trailing newline."""
    return "\n".join(encode_record(r) for r in records) + "\n"


def _write_error(destination: Path, e: OSError) -> SessionWriteError:
    if isinstance(e, PermissionError) or e.errno in (errno.EACCES, errno.EPERM):
        return SessionWriteError(
            f"Permission denied: cannot write session to {destination}",
            WriteFailure.PERMISSION_DENIED,
            hint=f"Check write permissions for {destination.parent}",
        )
    if e.errno == errno.ENOSPC:
        return SessionWriteError(
            f"Disk full: not enough space to write {destination}",
            WriteFailure.NO_SPACE,
            hint="Free up disk space and try again",
        )
    return SessionWriteError(
        f"Failed to write session to {destination}: {e}",
        WriteFailure.OTHER,
    )


def _current_umask() -> int:
    mask = os.umask(0)
    os.umask(mask)
    return mask


def write_session(records: Iterable[Record], destination: Path) -> Path:
    """Write records to destination as JSONL, all or nothing.

    Missing parent directories are created. The content goes to a
    temporary file in the same directory which is then renamed into place.
    """
    destination = Path(destination)
    content = encode_session(records)
    tmp_name = None

    try:
        destination.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            dir=destination.parent, prefix=f".{destination.name}.", suffix=".tmp"
        )
        with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as f:
            f.write(content)
        # mkstemp creates 0600; give the file the mode a plain open() would.
        os.chmod(tmp_name, 0o666 & ~_current_umask())
        os.replace(tmp_name, destination)
        tmp_name = None
    except OSError as e:
        logger.error("Failed to write %s: %s", destination, e)
        raise _write_error(destination, e) from e
    except UnicodeError as e:
        logger.error("Failed to encode %s: %s", destination, e)
        raise SessionWriteError(
            f"Failed to write session to {destination}: {e}", WriteFailure.OTHER
        ) from e
    finally:
        if tmp_name is not None and os.path.exists(tmp_name):
            os.unlink(tmp_name)

    logger.debug("Wrote %d bytes to %s", len(content), destination)
    return destination


def write_session_to_local(
    records: list[Record],
    project_path: str,
    projects_root: Optional[Path] = None,
) -> WriteResult:
    """Write a session into local Claude Code storage under a fresh id."""
    storage_dir = resolve_storage_dir(encode_project_path(project_path), projects_root)

    # Records already carry remapped session ids; the file gets its own.
    session_id = str(uuid.uuid4())
    file_path = write_session(records, storage_dir / f"{session_id}.jsonl")

    return WriteResult(file_path=file_path, session_id=session_id)
