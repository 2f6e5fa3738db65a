"""Concrete implementations for command builders.

A command builder turns a user submission into an :class:`Invocation`: a
list of argument vectors. Values supplied by the user are always single,
opaque argv elements and are never parsed by a shell.
"""

import re
from abc import ABC, abstractmethod
from typing import Optional

from .exceptions import InvalidSelection
from .models import CommandSpec, ContentType, Invocation, Stage

VIDEO_URL_PATTERN = re.compile(
    r"^(https?://)?(www\.)?(youtube\.com|youtu\.?be)/.+$", re.IGNORECASE
)


def classify(raw_input: str) -> ContentType:
    """Returns VIDEO_URL when the whole input is a YouTube link."""
    if raw_input and VIDEO_URL_PATTERN.match(raw_input.strip()):
        return ContentType.VIDEO_URL
    return ContentType.PLAIN_TEXT


def _reject_option_like(name: str, value: str) -> str:
    # A leading dash would be read as a flag by the receiving tool.
    if value.startswith("-"):
        raise InvalidSelection(f"Invalid {name}: {value!r}")
    return value


class CommandBuilder(ABC):
    """Interface for turning a submission into an external invocation."""

    @abstractmethod
    def build(self, spec: CommandSpec) -> Invocation:
        """Constructs the invocation for a single submission."""
        pass

    def build_from(
        self,
        raw_input: str,
        pattern: str,
        model: str,
        is_video_url: Optional[bool] = None,
    ) -> Invocation:
        """Builds from loose values, classifying the input when no flag is given."""
        if is_video_url is None:
            content_type = classify(raw_input)
        else:
            content_type = (
                ContentType.VIDEO_URL if is_video_url else ContentType.PLAIN_TEXT
            )
        spec = CommandSpec(
            raw_input=raw_input,
            content_type=content_type,
            pattern=pattern or "",
            model=model or "",
        )
        return self.build(spec)


class Fabric(CommandBuilder):
    """Builds ``fabric`` invocations, fetching a transcript first for videos.

    Parameters
    ----------
    fabric_path : str, default="fabric"
        Path to the text-processing tool.
    transcript_path : str, default="yt"
        Path to the helper that prints a video's transcript.
    """

    def __init__(self, fabric_path: str = "fabric", transcript_path: str = "yt"):
        self.fabric_path = fabric_path
        self.transcript_path = transcript_path

    def fabric_stage(self, pattern: str, model: str) -> Stage:
        return Stage(
            program=self.fabric_path,
            args=[
                "-m",
                _reject_option_like("model", model),
                "-p",
                _reject_option_like("pattern", pattern),
            ],
        )

    def build(self, spec: CommandSpec) -> Invocation:
        fabric = self.fabric_stage(spec.pattern, spec.model)

        if spec.content_type == ContentType.VIDEO_URL:
            url = _reject_option_like("video URL", spec.raw_input.strip())
            transcript = Stage(program=self.transcript_path, args=[url])
            return Invocation(stages=[transcript, fabric])

        return Invocation(stages=[fabric], stdin=spec.raw_input)
