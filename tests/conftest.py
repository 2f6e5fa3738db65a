"""
Core pytest configuration and fixtures for FabricUI testing.

This module provides shared test fixtures, configuration, and utilities
that support the pillar-based testing architecture.
"""

import os
import stat
import sys
import textwrap
from pathlib import Path
from typing import List
from unittest.mock import MagicMock

import pytest
from fabricui.models import ASSISTANT_ROLE, USER_ROLE, ChatMessage, ChatSession
from fabricui.store import serialize_sessions

# ===== TEST DATA FIXTURES =====


@pytest.fixture
def sample_messages() -> List[ChatMessage]:
    """A transcript of two complete exchanges."""
    return [
        ChatMessage(role=USER_ROLE, content="Summarize this article please."),
        ChatMessage(role=ASSISTANT_ROLE, content="# SUMMARY\n\nA short summary."),
        ChatMessage(role=USER_ROLE, content="https://youtu.be/abc123"),
        ChatMessage(role=ASSISTANT_ROLE, content="# IDEAS\n\n- One idea"),
    ]


@pytest.fixture
def sample_session(sample_messages) -> ChatSession:
    return ChatSession(id="a1b2c3", title="Chat 1", messages=sample_messages)


@pytest.fixture
def sample_record(sample_session) -> str:
    """A persisted record holding two sessions."""
    second = ChatSession(
        id="d4e5f6",
        title="Chat 2",
        messages=[
            ChatMessage(role=USER_ROLE, content="hello"),
            ChatMessage(role=ASSISTANT_ROLE, content="hi"),
        ],
    )
    return serialize_sessions([sample_session, second])


# ===== DIRECTORY FIXTURES =====


@pytest.fixture
def patterns_dir(tmp_path) -> Path:
    """A patterns root with three patterns and a stray file."""
    root = tmp_path / "patterns"
    for name in ("summarize", "extract_wisdom", "analyze_claims"):
        (root / name).mkdir(parents=True)
        (root / name / "system.md").write_text("# IDENTITY\n")
    (root / "README.md").write_text("not a pattern")
    return root


def _write_script(path: Path, body: str) -> Path:
    path.write_text(f"#!{sys.executable}\n" + textwrap.dedent(body))
    path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return path


@pytest.fixture
def fake_fabric(tmp_path) -> Path:
    """An executable standing in for fabric.

    It prints its ``-m``/``-p`` values followed by whatever arrived on stdin,
    and fails when the pattern is ``broken``.
    """
    return _write_script(
        tmp_path / "fabric",
        """
        import sys

        args = sys.argv[1:]
        model = args[args.index("-m") + 1]
        pattern = args[args.index("-p") + 1]
        data = sys.stdin.read()
        if pattern == "broken":
            sys.stderr.write("unknown pattern: broken\\n")
            sys.exit(3)
        sys.stderr.write("using " + model + "\\n")
        sys.stdout.write("[" + model + "/" + pattern + "] " + data)
        """,
    )


@pytest.fixture
def fake_yt(tmp_path) -> Path:
    """An executable standing in for the transcript fetcher."""
    return _write_script(
        tmp_path / "yt",
        """
        import sys

        sys.stdout.write("transcript of " + sys.argv[1])
        """,
    )


@pytest.fixture
def latin1_fabric(tmp_path) -> Path:
    """A fabric stand-in that succeeds but prints Latin-1 bytes."""
    return _write_script(
        tmp_path / "fabric-latin1",
        """
        import sys

        sys.stdin.read()
        sys.stdout.buffer.write(b"caf\\xe9 ok")
        """,
    )


# ===== MOCK FIXTURES =====


@pytest.fixture
def mock_runner():
    mock = MagicMock()
    mock.run.return_value = "Mock fabric output"
    return mock


# ===== APP FIXTURES =====


@pytest.fixture
def test_app(patterns_dir):
    """
    Provides a FabricUI app with predictable pillars.

    The Echo runner keeps tests away from real subprocesses; the catalog
    reads the temporary patterns directory.
    """
    from fabricui import FabricUI
    from fabricui.config import Settings
    from fabricui.runner import Echo

    settings = Settings(patterns_dir=patterns_dir, models=["gpt-4o", "llama3.1"])
    return FabricUI(runner=Echo(), settings=settings)


# ===== CONFIGURATION =====


def pytest_configure(config):
    """Pytest configuration."""
    config.addinivalue_line("markers", "integration: marks tests as integration tests")
    config.addinivalue_line("markers", "posix: needs executable scripts with a shebang")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on location."""
    for item in items:
        if "integration" in str(item.fspath):
            item.add_marker(pytest.mark.integration)
        if os.name != "posix" and "posix" in item.keywords:
            item.add_marker(pytest.mark.skip(reason="requires a POSIX shebang"))
