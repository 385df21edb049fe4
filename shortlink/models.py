"""Data models for shortlink."""

from dataclasses import dataclass


@dataclass
class ShortenResult:
    """A shortened URL as reported back to the writer."""

    key: str
    url: str

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "key": self.key,
            "url": self.url,
        }
