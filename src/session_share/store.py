"""Abstract base class for remote session stores."""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass
class PublishedSession:
    """A session published to a remote store."""

    id: str
    url: str


class SessionStore(ABC):
    """Base class for places a sanitized session can be published to.

    A store transports files verbatim; it never interprets their content.
    """

    name: str  # "gist"

    @abstractmethod
    def publish(self, description: str, files: dict[str, str]) -> PublishedSession:
        """Publish the given {filename: content} files and return where they went."""
        ...

    @abstractmethod
    def fetch(self, reference: str) -> dict[str, str]:
        """Return {filename: content} for a previously published session."""
        ...
