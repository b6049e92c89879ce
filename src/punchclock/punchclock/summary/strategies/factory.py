from __future__ import annotations

import logging
from dataclasses import dataclass

from .base import SurplusStrategy
from .pair_sum_strategy import PairSumStrategy
from .span_strategy import SpanStrategy

logger = logging.getLogger(__name__)


@dataclass
class SurplusStrategyFactory:
    """Factory Pattern: pick the surplus rule configured by name."""

    def for_name(self, name: str) -> SurplusStrategy:
        key = (name or "").strip().lower()
        if key == SpanStrategy.name:
            return SpanStrategy()
        if key and key != PairSumStrategy.name:
            logger.warning("unknown surplus strategy %r, using %r", name, PairSumStrategy.name)
        return PairSumStrategy()
