"""Session metadata extracted from parsed records."""

from dataclasses import dataclass
from typing import Optional

from .core import Record, RecordType


@dataclass
class SessionMetadata:
    """Summary of a session, published alongside it as metadata.json."""

    session_id: str
    project_path: str
    message_count: int
    first_timestamp: str
    last_timestamp: str
    has_agent_conversations: bool  # any isSidechain record
    version: str

    def to_dict(self) -> dict:
        return {
            "sessionId": self.session_id,
            "projectPath": self.project_path,
            "messageCount": self.message_count,
            "firstTimestamp": self.first_timestamp,
            "lastTimestamp": self.last_timestamp,
            "hasAgentConversations": self.has_agent_conversations,
            "version": self.version,
        }


def extract_metadata(records: list[Record]) -> Optional[SessionMetadata]:
    """Extract metadata from a session, or None if it has no records."""
    if not records:
        return None

    first, last = records[0], records[-1]
    first_user = next((r for r in records if r.type is RecordType.USER), None)

    return SessionMetadata(
        session_id=first.session_id,
        project_path=(first_user.cwd if first_user else "") or "unknown",
        message_count=len(records),
        first_timestamp=first.timestamp,
        last_timestamp=last.timestamp,
        has_agent_conversations=any(r.is_sidechain is True for r in records),
        version=(first_user.version if first_user else "") or "unknown",
    )
