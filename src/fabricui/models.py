"""
Defines the core Pydantic data models for the application.

These models are the data contract between the pillars: chat sessions that
live in the browser, and the transient command descriptions handed from the
command builder to the runner.
"""

import enum
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

# --- Constants ---
USER_ROLE = "user"
ASSISTANT_ROLE = "assistant"
Role = Literal["user", "assistant"]
FAILED_STATUS = "failed"


class ContentType(str, enum.Enum):
    """How the raw input should be handed to the text-processing tool."""

    PLAIN_TEXT = "plainText"
    VIDEO_URL = "videoUrl"


# --- Chat models ---
class ChatMessage(BaseModel):
    """Represents a single message within a chat session."""

    model_config = ConfigDict(frozen=True)

    role: Role
    content: str
    status: Optional[Literal["failed"]] = None

    @property
    def failed(self) -> bool:
        return self.status == FAILED_STATUS


class ChatSession(BaseModel):
    """Represents a complete chat session: an ordered transcript."""

    id: str
    title: str
    messages: List[ChatMessage] = Field(default_factory=list)


# --- Command models ---
class CommandSpec(BaseModel):
    """A single user submission, ready to be turned into an invocation."""

    raw_input: str
    content_type: ContentType = ContentType.PLAIN_TEXT
    pattern: str = ""
    model: str = ""


class Stage(BaseModel):
    """One process of an invocation: a program and its opaque arguments."""

    program: str
    args: List[str] = Field(default_factory=list)

    @property
    def argv(self) -> List[str]:
        return [self.program, *self.args]


class Invocation(BaseModel):
    """An ordered pipeline of stages.

    ``stdin`` is written to the first stage; each stage's standard output
    becomes the next stage's standard input.
    """

    stages: List[Stage]
    stdin: Optional[str] = None

    def describe(self) -> str:
        """Human-readable rendering for logs. Never executed."""
        return " | ".join(" ".join(stage.argv) for stage in self.stages)


class ExecutionResult(BaseModel):
    """Captured outcome of a finished stage."""

    stdout: str = ""
    stderr: str = ""
    returncode: int = 0
    duration: float = 0.0
