"""Data models for the preprocess submodule."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class PagePayload:
    """A single content representation of a rendered page.

    ``content`` is ``bytes`` only for the ``image`` format.
    """

    format: str
    content: str | bytes
    url: str

    @property
    def is_image(self) -> bool:
        return self.format == "image"
