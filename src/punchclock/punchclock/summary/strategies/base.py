from __future__ import annotations

from abc import ABC, abstractmethod

from ...timeline.builder import Timeline


class SurplusStrategy(ABC):
    """Strategy Pattern: how worked minutes are counted before subtracting expected."""

    name: str = ""

    @abstractmethod
    def worked_minutes(self, timeline: Timeline) -> int:
        raise NotImplementedError
