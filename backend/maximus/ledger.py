from __future__ import annotations

import logging
import threading

from pydantic import BaseModel

from .errors import InvalidAmount

logger = logging.getLogger(__name__)

CURRENCY_NAME = "V-Bucks"
LEVEL_NAME = "Tier"


class ScoreSnapshot(BaseModel):
    total: int
    tier: int
    progress_in_tier: int
    tier_size: int
    currency: str = CURRENCY_NAME


class CurrencyLedger:
    """Accumulated currency for one learner session.

    Only ``total`` is stored; tier and in-tier progress are always derived
    from it. There is no way to spend or subtract.
    """

    def __init__(self, tier_size: int = 100) -> None:
        if tier_size <= 0:
            raise ValueError("tier_size must be positive")
        self._tier_size = tier_size
        self._total = 0
        self._lock = threading.Lock()

    @property
    def total(self) -> int:
        return self._total

    @property
    def tier_size(self) -> int:
        return self._tier_size

    @property
    def tier(self) -> int:
        return self._total // self._tier_size + 1

    @property
    def progress_in_tier(self) -> int:
        return self._total % self._tier_size

    def add(self, amount: int) -> int:
        # bool is an int subclass; reject it along with floats
        if isinstance(amount, bool) or not isinstance(amount, int):
            raise InvalidAmount(f"amount must be an integer, got {amount!r}")
        if amount < 0:
            raise InvalidAmount(f"amount must be >= 0, got {amount}")
        with self._lock:
            previous_tier = self.tier
            self._total += amount
            total = self._total
            if self.tier > previous_tier:
                logger.info("Tier up: %s %d reached (total %d)", LEVEL_NAME, self.tier, total)
        return total

    def snapshot(self) -> ScoreSnapshot:
        with self._lock:
            total = self._total
        return ScoreSnapshot(
            total=total,
            tier=total // self._tier_size + 1,
            progress_in_tier=total % self._tier_size,
            tier_size=self._tier_size,
        )
