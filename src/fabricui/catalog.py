"""Concrete implementations for the pattern and model catalog."""

import logging
import os
from abc import ABC, abstractmethod
from typing import Iterable, List, Optional

from .exceptions import CatalogUnavailable

logger = logging.getLogger(__name__)


class Catalog(ABC):
    """Interface for listing the patterns and models a user can pick."""

    @abstractmethod
    def list_patterns(self) -> List[str]:
        """Returns the pattern names currently available."""
        pass

    @abstractmethod
    def list_models(self) -> List[str]:
        """Returns the model identifiers currently available."""
        pass


class Filesystem(Catalog):
    """Patterns are the sub-directories of a patterns root; models are static.

    Parameters
    ----------
    patterns_dir : str or os.PathLike
        Directory whose sub-directories are the pattern names. Plain files
        inside it are ignored.
    models : Iterable[str], optional
        Static list of model identifiers.
    """

    def __init__(self, patterns_dir: os.PathLike, models: Optional[Iterable[str]] = None):
        self.patterns_dir = os.fspath(patterns_dir)
        self._models = list(models or [])

    def list_patterns(self) -> List[str]:
        try:
            return self._scan_patterns()
        except CatalogUnavailable as exc:
            logger.error("Error fetching patterns: %s", exc)
            return []

    def _scan_patterns(self) -> List[str]:
        try:
            with os.scandir(self.patterns_dir) as entries:
                return sorted(entry.name for entry in entries if entry.is_dir())
        except OSError as exc:
            raise CatalogUnavailable(
                f"Cannot list patterns in {self.patterns_dir}: {exc}"
            ) from exc

    def list_models(self) -> List[str]:
        return list(self._models)


class Static(Catalog):
    """A catalog with fixed lists of patterns and models."""

    def __init__(self, patterns: Iterable[str] = (), models: Iterable[str] = ()):
        self._patterns = list(patterns)
        self._models = list(models)

    def list_patterns(self) -> List[str]:
        return list(self._patterns)

    def list_models(self) -> List[str]:
        return list(self._models)
