"""Shared test fixtures for session-share."""

import json

import pytest

from session_share.store import PublishedSession, SessionStore

BASE_PATH = "/Users/testuser/dev/myapp"


def user_entry(uuid, parent=None, cwd=BASE_PATH, content="Help me refactor the auth module", **extra):
    return {
        "type": "user",
        "uuid": uuid,
        "sessionId": "session-001",
        "timestamp": "2025-01-20T10:00:00Z",
        "parentUuid": parent,
        "message": {"role": "user", "content": content},
        "cwd": cwd,
        "version": "1.0.42",
        **extra,
    }


def legacy_assistant_entry(uuid, parent, thinking="I should read auth.ts first", text="Reading the file"):
    return {
        "type": "assistant",
        "uuid": uuid,
        "sessionId": "session-001",
        "timestamp": "2025-01-20T10:00:30Z",
        "parentUuid": parent,
        "messageId": "msg-legacy",
        "snapshot": {
            "thinking": thinking,
            "messages": [{"role": "assistant", "content": text}],
        },
    }


def blocks_assistant_entry(uuid, parent, blocks):
    return {
        "type": "assistant",
        "uuid": uuid,
        "sessionId": "session-001",
        "timestamp": "2025-01-20T10:01:00Z",
        "parentUuid": parent,
        "requestId": "req_001",
        "message": {
            "model": "claude-sonnet-4-5",
            "id": "msg_001",
            "type": "message",
            "role": "assistant",
            "content": blocks,
            "stop_reason": "end_turn",
            "usage": {"input_tokens": 120, "output_tokens": 48},
        },
    }


def snapshot_entry(uuid, parent, paths):
    return {
        "type": "file-history-snapshot",
        "uuid": uuid,
        "sessionId": "session-001",
        "timestamp": "2025-01-20T10:02:00Z",
        "parentUuid": parent,
        "isSnapshotUpdate": False,
        "snapshot": {"files": [{"path": p} for p in paths]},
    }


@pytest.fixture
def session_entries():
    """A realistic session covering every record kind and both assistant layouts."""
    return [
        user_entry("uuid-001", gitBranch="main"),
        legacy_assistant_entry(
            "uuid-002", "uuid-001",
            text=f'{BASE_PATH}/src/auth.ts contains api_key: "abcdef12345678"',
        ),
        blocks_assistant_entry("uuid-003", "uuid-002", [
            {"type": "thinking", "thinking": "Split validation from refresh", "signature": "sig"},
            {"type": "text", "text": f"Editing {BASE_PATH}/src/auth.ts now."},
            {"type": "tool_use", "id": "toolu_001", "name": "Edit",
             "input": {"file_path": f"{BASE_PATH}/src/auth.ts"}},
        ]),
        snapshot_entry("uuid-004", "uuid-003", [f"{BASE_PATH}/src/auth.ts", "/etc/hosts"]),
        user_entry("uuid-005", "uuid-004", cwd="/somewhere/else", content="Looks good", isSidechain=True),
    ]


@pytest.fixture
def tmp_session_file(tmp_path, session_entries):
    """Write the session entries to a JSONL file."""
    path = tmp_path / "session-001.jsonl"
    path.write_text("\n".join(json.dumps(e) for e in session_entries) + "\n", encoding="utf-8")
    return path


@pytest.fixture
def tmp_projects_dir(tmp_path):
    """Create a synthetic ~/.claude/projects directory."""
    projects = tmp_path / "projects"
    project_dir = projects / "-Users-testuser-dev-myapp"
    project_dir.mkdir(parents=True)

    (project_dir / "session-001.jsonl").write_text(
        json.dumps(user_entry("uuid-001")) + "\n", encoding="utf-8"
    )
    (project_dir / "agent-session-002.jsonl").write_text(
        json.dumps(user_entry("uuid-101")) + "\n", encoding="utf-8"
    )
    (project_dir / "notes.txt").write_text("not a session", encoding="utf-8")
    return projects


class FakeStore(SessionStore):
    """In-memory session store."""

    name = "fake"

    def __init__(self, files=None):
        self.published = []
        self.files = files or {}

    def publish(self, description, files):
        self.published.append((description, files))
        return PublishedSession(id="abc123", url="https://gist.github.com/testuser/abc123")

    def fetch(self, reference):
        return self.files


@pytest.fixture
def fake_store():
    return FakeStore()
