"""Base class for lights that contribute in the lighting subpass."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class Light(ABC):
    """A light belonging to a scene.

    Closing the light removes it from its scene.
    """

    def __init__(self, scene) -> None:
        self.scene = scene
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    @abstractmethod
    def lighting_pipeline(self) -> Any:
        """The pipeline this light draws with."""

    @abstractmethod
    def lighting(self, frame_index: int) -> Any:
        """Produce this light's contribution for one frame in flight."""

    def close(self) -> None:
        """Leave the scene; safe to call more than once."""
        if not self._closed:
            self._closed = True
            self.scene.destroy_light(self)

    def __enter__(self) -> Light:
        return self

    def __exit__(self, *args) -> None:
        self.close()