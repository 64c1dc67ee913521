"""Core data models for session-share.

A Claude Code session is a JSONL file. Every line is one record of one of
three kinds, told apart by its ``type`` field:

- "user": User input. Carries the working directory (``cwd``) and client
  version.
- "assistant": Assistant output, in one of two layouts:
    * legacy (v1.x): ``snapshot`` with a ``thinking`` string and a flat
      ``messages`` list of ``{role, content}``.
    * blocks (v2.0.76+): ``message`` holding the API response, whose
      ``content`` is a list of typed blocks (text, thinking, tool_use, ...).
- "file-history-snapshot": Tracked files at a point in time.

Records are immutable. Keys this module does not model are kept in ``raw``
and written back unchanged by ``to_dict()``.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional


class SessionShareError(Exception):
    """Base class for session-share errors."""


class MalformedRecordError(SessionShareError):
    """A parsed line is not a usable session record."""


class RepresentationError(MalformedRecordError):
    """An assistant record has neither or both content layouts."""


class RecordType(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"
    SNAPSHOT = "file-history-snapshot"


class Representation(Enum):
    """Content layout of an assistant record."""

    LEGACY = "legacy"  # snapshot.thinking + snapshot.messages
    BLOCKS = "blocks"  # message.content blocks


THINKING_BLOCK = "thinking"
TEXT_BLOCK = "text"


def _copy_items(items) -> list:
    """Copy a list field, keeping non-object items as they are."""
    return [dict(item) if isinstance(item, dict) else item for item in items]


@dataclass(frozen=True)
class Record:
    """Fields shared by every record kind."""

    uuid: str
    session_id: str
    timestamp: str = ""
    parent_uuid: Optional[str] = None
    is_sidechain: Optional[bool] = None
    raw: dict = field(default_factory=dict, repr=False, compare=False)

    type: Optional[RecordType] = field(init=False, default=None)

    def to_dict(self) -> dict:
        """Return the wire form of this record."""
        data = dict(self.raw)
        data["type"] = self.type.value
        data["uuid"] = self.uuid
        data["sessionId"] = self.session_id
        data["timestamp"] = self.timestamp
        data["parentUuid"] = self.parent_uuid
        if self.is_sidechain is not None:
            data["isSidechain"] = self.is_sidechain
        return data


@dataclass(frozen=True)
class UserRecord(Record):
    content: Any = ""  # str, or a list of content blocks
    cwd: str = ""
    version: str = ""

    type: RecordType = field(init=False, default=RecordType.USER)

    def to_dict(self) -> dict:
        data = super().to_dict()
        message = dict(self.raw.get("message") or {})
        message.setdefault("role", "user")
        message["content"] = self.content
        data["message"] = message
        data["cwd"] = self.cwd
        data["version"] = self.version
        return data


@dataclass(frozen=True)
class LegacySnapshot:
    """Legacy assistant content: a thinking blob and flat messages."""

    thinking: Optional[str]
    messages: tuple = ()  # of {"role": str, "content": str}
    raw: dict = field(default_factory=dict, repr=False, compare=False)

    def to_dict(self) -> dict:
        data = dict(self.raw)
        data["thinking"] = self.thinking
        if self.messages or self.raw.get("messages") is not None:
            data["messages"] = _copy_items(self.messages)
        return data


@dataclass(frozen=True)
class AssistantResponse:
    """Block-based assistant content: the API response message."""

    content: Any = ()  # tuple of {"type": str, "text"?: str, ...}, or a plain string
    raw: dict = field(default_factory=dict, repr=False, compare=False)

    @property
    def model(self) -> Optional[str]:
        return self.raw.get("model")

    @property
    def id(self) -> Optional[str]:
        return self.raw.get("id")

    @property
    def stop_reason(self) -> Optional[str]:
        return self.raw.get("stop_reason")

    @property
    def usage(self) -> dict:
        return self.raw.get("usage") or {}

    def to_dict(self) -> dict:
        data = dict(self.raw)
        if isinstance(self.content, str):
            data["content"] = self.content
        elif self.content or self.raw.get("content") is not None:
            data["content"] = _copy_items(self.content)
        return data


@dataclass(frozen=True)
class AssistantRecord(Record):
    representation: Optional[Representation] = None
    snapshot: Optional[LegacySnapshot] = None
    response: Optional[AssistantResponse] = None

    type: RecordType = field(init=False, default=RecordType.ASSISTANT)

    def __post_init__(self):
        if self.representation is None:
            # Infer from whichever layout the caller supplied.
            if (self.snapshot is None) == (self.response is None):
                raise RepresentationError(
                    f"Assistant record {self.uuid} must have exactly one of "
                    "'snapshot' or 'message'"
                )
            inferred = Representation.LEGACY if self.snapshot is not None else Representation.BLOCKS
            object.__setattr__(self, "representation", inferred)
        elif self.representation is Representation.LEGACY:
            if self.snapshot is None or self.response is not None:
                raise RepresentationError(
                    f"Legacy assistant record {self.uuid} needs 'snapshot' only"
                )
        elif self.representation is Representation.BLOCKS:
            if self.response is None or self.snapshot is not None:
                raise RepresentationError(
                    f"Block assistant record {self.uuid} needs 'message' only"
                )

    def to_dict(self) -> dict:
        data = super().to_dict()
        if self.representation is Representation.LEGACY:
            data["snapshot"] = self.snapshot.to_dict()
        else:
            data["message"] = self.response.to_dict()
        return data


@dataclass(frozen=True)
class SnapshotRecord(Record):
    files: tuple = ()  # of {"path": str, ...}
    is_snapshot_update: bool = False

    type: RecordType = field(init=False, default=RecordType.SNAPSHOT)

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["isSnapshotUpdate"] = self.is_snapshot_update
        if self.files or self.raw.get("snapshot") is not None:
            snapshot = dict(self.raw.get("snapshot") or {})
            if self.files or snapshot.get("files") is not None:
                snapshot["files"] = _copy_items(self.files)
            data["snapshot"] = snapshot
        return data


def detect_representation(raw: dict) -> Representation:
    """Determine an assistant record's content layout from field presence."""
    has_snapshot = isinstance(raw.get("snapshot"), dict)
    has_message = isinstance(raw.get("message"), dict)

    if has_snapshot and has_message:
        raise RepresentationError("Assistant record has both 'snapshot' and 'message'")
    if has_snapshot:
        return Representation.LEGACY
    if has_message:
        return Representation.BLOCKS
    raise RepresentationError("Assistant record must have either 'snapshot' or 'message'")


def _list_field(container: dict, key: str, where: str) -> tuple:
    """Return container[key] as a tuple, rejecting anything but a list."""
    value = container.get(key)
    if value is None:
        return ()
    if not isinstance(value, list):
        raise MalformedRecordError(f"Expected '{where}' to be a list, got {type(value).__name__}")
    return tuple(value)


def _dict_field(raw: dict, key: str) -> dict:
    value = raw.get(key)
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise MalformedRecordError(f"Expected '{key}' to be an object, got {type(value).__name__}")
    return value


def record_from_dict(raw: Any) -> Record:
    """Build a typed record from one parsed JSONL line.

    Raises MalformedRecordError when required fields are missing, a nested
    field has the wrong shape, or the record kind is not recognized.
    """
    if not isinstance(raw, dict):
        raise MalformedRecordError(f"Expected a JSON object, got {type(raw).__name__}")

    uuid = raw.get("uuid")
    session_id = raw.get("sessionId")
    if not isinstance(uuid, str) or not isinstance(session_id, str):
        raise MalformedRecordError("Missing required fields (uuid, sessionId)")

    try:
        record_type = RecordType(raw.get("type"))
    except ValueError:
        raise MalformedRecordError(f"Unrecognized record type: {raw.get('type')!r}") from None

    common = {
        "uuid": uuid,
        "session_id": session_id,
        "timestamp": raw.get("timestamp") or "",
        "parent_uuid": raw.get("parentUuid"),
        "is_sidechain": raw.get("isSidechain"),
        "raw": raw,
    }

    if record_type is RecordType.USER:
        message = _dict_field(raw, "message")
        return UserRecord(
            **common,
            content=message.get("content", ""),
            cwd=raw.get("cwd") or "",
            version=raw.get("version") or "",
        )

    if record_type is RecordType.ASSISTANT:
        representation = detect_representation(raw)
        if representation is Representation.LEGACY:
            snap = raw["snapshot"]
            return AssistantRecord(
                **common,
                representation=representation,
                snapshot=LegacySnapshot(
                    thinking=snap.get("thinking"),
                    messages=_list_field(snap, "messages", "snapshot.messages"),
                    raw=snap,
                ),
            )
        message = raw["message"]
        content = message.get("content")
        if not isinstance(content, str):
            content = _list_field(message, "content", "message.content")
        return AssistantRecord(
            **common,
            representation=representation,
            response=AssistantResponse(content=content, raw=message),
        )

    snap = _dict_field(raw, "snapshot")
    return SnapshotRecord(
        **common,
        files=_list_field(snap, "files", "snapshot.files"),
        is_snapshot_update=bool(raw.get("isSnapshotUpdate", False)),
    )
