"""Streaming JSONL decoder for Claude Code session files.

Lines are parsed one at a time. A bad line is logged and skipped so that a
single corrupt record never costs the rest of the session.
"""

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Iterator, Optional

from .core import MalformedRecordError, Record, SessionShareError, record_from_dict

logger = logging.getLogger(__name__)


class SessionReadError(SessionShareError):
    """The session source could not be opened or read."""


class EmptySessionError(SessionShareError):
    """The session source contained no records at all."""


class NoValidMessagesError(SessionShareError):
    """Every line of the session source was rejected."""


@dataclass
class DecodeStats:
    """Counts collected while decoding a stream."""

    lines: int = 0  # non-blank lines seen
    skipped: int = 0

    @property
    def decoded(self) -> int:
        return self.lines - self.skipped


def decode_lines(lines: Iterable[str], stats: Optional[DecodeStats] = None) -> Iterator[Record]:
    """Yield records from JSONL lines, in order, skipping bad lines."""
    if stats is None:
        stats = DecodeStats()

    for line_num, line in enumerate(lines, 1):
        line = line.strip()
        if not line:
            continue
        stats.lines += 1

        try:
            entry = json.loads(line)
        except json.JSONDecodeError as e:
            stats.skipped += 1
            logger.warning("Line %d: Failed to parse JSON - %s", line_num, e)
            continue

        try:
            record = record_from_dict(entry)
        except MalformedRecordError as e:
            stats.skipped += 1
            logger.warning("Line %d: Skipping record - %s", line_num, e)
            continue

        yield record


def parse_session_file(path: Path, stats: Optional[DecodeStats] = None) -> list[Record]:
    """Parse a session JSONL file with per-line error recovery.

    Raises SessionReadError if the file itself cannot be read. Bytes that
    are not valid UTF-8 become U+FFFD and only affect their own line.
    """
    path = Path(path)
    try:
        with path.open(encoding="utf-8", errors="replace") as f:
            return list(decode_lines(f, stats))
    except OSError as e:
        logger.error("Error reading file %s: %s", path, e)
        raise SessionReadError(f"Cannot read session file {path}: {e}") from e


def parse_session_text(text: str, stats: Optional[DecodeStats] = None) -> list[Record]:
    """Parse JSONL content already held in memory."""
    # str.splitlines() would also break on U+2028 inside JSON strings.
    return list(decode_lines(text.split("\n"), stats))


def require_records(records: list[Record], stats: DecodeStats) -> list[Record]:
    """Reject a decode that produced nothing usable.

    An empty source and a source whose every line was malformed are
    reported as different errors.
    """
    if records:
        if stats.skipped:
            logger.warning(
                "Decoded %d records, skipped %d malformed lines", len(records), stats.skipped
            )
        return records

    if stats.lines == 0:
        raise EmptySessionError("Session is empty: no records found")
    raise NoValidMessagesError(
        f"No valid messages found: all {stats.lines} lines were malformed"
    )
