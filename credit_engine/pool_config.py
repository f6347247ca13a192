"""
Pool Configuration Module

Read-only fee structure, pool settings and front-loading fees consumed by the
due engine. The engine reads the current values on every call; nothing is
snapshotted per credit.
"""

from dataclasses import dataclass, asdict
from typing import Any, Dict, Optional
import threading

from .config import EngineConfig, get_config


HUNDRED_PERCENT_IN_BPS = 10000


def _validate_bps(name: str, value: int) -> None:
    if value < 0:
        raise ValueError(f"{name} must be non-negative")


@dataclass(frozen=True)
class FeeStructure:
    """Pool-wide yield, principal and late fee rates in basis points"""
    yield_in_bps: int = 0
    min_principal_rate_in_bps: int = 0
    late_fee_bps: int = 0

    def __post_init__(self):
        _validate_bps("yield_in_bps", self.yield_in_bps)
        _validate_bps("late_fee_bps", self.late_fee_bps)
        if not 0 <= self.min_principal_rate_in_bps <= HUNDRED_PERCENT_IN_BPS:
            raise ValueError("min_principal_rate_in_bps must be between 0 and 10000")


@dataclass(frozen=True)
class PoolSettings:
    """Pool settings relevant to billing"""
    late_payment_grace_period_in_days: int = 0

    def __post_init__(self):
        if self.late_payment_grace_period_in_days < 0:
            raise ValueError("late_payment_grace_period_in_days must be non-negative")


@dataclass(frozen=True)
class FrontLoadingFeesStructure:
    """Flat and proportional fee charged on each draw"""
    front_loading_fee_flat: int = 0
    front_loading_fee_bps: int = 0

    def __post_init__(self):
        if self.front_loading_fee_flat < 0:
            raise ValueError("front_loading_fee_flat must be non-negative")
        _validate_bps("front_loading_fee_bps", self.front_loading_fee_bps)


class PoolConfig:
    """
    Holder of the pool's current billing parameters.

    Pool operators replace whole structures through the setters; readers always
    get an immutable snapshot.
    """

    def __init__(
        self,
        fee_structure: Optional[FeeStructure] = None,
        pool_settings: Optional[PoolSettings] = None,
        front_loading_fees: Optional[FrontLoadingFeesStructure] = None
    ):
        self._lock = threading.Lock()
        self._fee_structure = fee_structure or FeeStructure()
        self._pool_settings = pool_settings or PoolSettings()
        self._front_loading_fees = front_loading_fees or FrontLoadingFeesStructure()

    @classmethod
    def from_config(cls, engine_config: Optional[EngineConfig] = None) -> 'PoolConfig':
        """Build pool configuration from environment settings"""
        engine_config = engine_config or get_config()
        return cls(
            fee_structure=FeeStructure(
                yield_in_bps=engine_config.yield_in_bps,
                min_principal_rate_in_bps=engine_config.min_principal_rate_in_bps,
                late_fee_bps=engine_config.late_fee_bps,
            ),
            pool_settings=PoolSettings(
                late_payment_grace_period_in_days=engine_config.late_payment_grace_period_days,
            ),
            front_loading_fees=FrontLoadingFeesStructure(
                front_loading_fee_flat=engine_config.front_loading_fee_flat,
                front_loading_fee_bps=engine_config.front_loading_fee_bps,
            ),
        )

    def get_fee_structure(self) -> FeeStructure:
        with self._lock:
            return self._fee_structure

    def get_pool_settings(self) -> PoolSettings:
        with self._lock:
            return self._pool_settings

    def get_front_loading_fees(self) -> FrontLoadingFeesStructure:
        with self._lock:
            return self._front_loading_fees

    def set_fee_structure(self, fee_structure: FeeStructure) -> None:
        with self._lock:
            self._fee_structure = fee_structure

    def set_pool_settings(self, pool_settings: PoolSettings) -> None:
        with self._lock:
            self._pool_settings = pool_settings

    def set_front_loading_fees(self, front_loading_fees: FrontLoadingFeesStructure) -> None:
        with self._lock:
            self._front_loading_fees = front_loading_fees

    def to_dict(self) -> Dict[str, Any]:
        """Snapshot of every structure, for reporting"""
        with self._lock:
            return {
                "fee_structure": asdict(self._fee_structure),
                "pool_settings": asdict(self._pool_settings),
                "front_loading_fees": asdict(self._front_loading_fees),
            }
