"""
Tests for credit models, pool configuration and engine settings
"""

import pytest

from credit_engine.config import EngineConfig, get_config, reload_config, sqlite_path_from_url
from credit_engine.models import (
    CreditConfig, CreditRecord, CreditState, DueDetail, PayPeriodDuration, get_principal
)
from credit_engine.pool_config import (
    FeeStructure, FrontLoadingFeesStructure, PoolConfig, PoolSettings
)


class TestCreditRecord:
    """Test CreditRecord validation and helpers"""

    def test_defaults(self):
        record = CreditRecord()

        assert record.state == CreditState.APPROVED
        assert record.next_due_date == 0
        assert record.principal_due == 0

    def test_principal_due(self):
        record = CreditRecord(next_due=1500, yield_due=500)
        assert record.principal_due == 1000

    def test_negative_amount_rejected(self):
        with pytest.raises(ValueError, match="non-negative"):
            CreditRecord(unbilled_principal=-1)

    def test_non_integer_rejected(self):
        with pytest.raises(ValueError, match="integer"):
            CreditRecord(next_due=10.5)

        with pytest.raises(ValueError, match="integer"):
            CreditRecord(missed_periods=True)

    def test_yield_due_cannot_exceed_next_due(self):
        with pytest.raises(ValueError):
            CreditRecord(next_due=10, yield_due=11)

    def test_state_from_string(self):
        record = CreditRecord(state="delayed")
        assert record.state == CreditState.DELAYED

    def test_dict_conversion(self):
        record = CreditRecord(
            unbilled_principal=1000, next_due_date=1680307200, next_due=50,
            yield_due=50, remaining_periods=3, state=CreditState.GOOD_STANDING
        )

        data = record.to_dict()

        assert data["state"] == "good_standing"
        assert CreditRecord.from_dict(data) == record

    def test_absorbing_states(self):
        assert CreditState.DELETED.is_absorbing
        assert CreditState.DEFAULTED.is_absorbing
        assert not CreditState.DELAYED.is_absorbing
        assert not CreditState.APPROVED.is_absorbing


class TestCreditConfig:

    def test_period_duration_from_string(self):
        config = CreditConfig(
            credit_limit=1000, committed_amount=0, period_duration="quarterly",
            num_of_periods=4, yield_in_bps=1200
        )

        assert config.period_duration == PayPeriodDuration.QUARTERLY
        assert config.period_duration.months == 3
        assert config.to_dict()["period_duration"] == "quarterly"

    def test_negative_rate_rejected(self):
        with pytest.raises(ValueError):
            CreditConfig(
                credit_limit=1000, committed_amount=0, period_duration=PayPeriodDuration.MONTHLY,
                num_of_periods=4, yield_in_bps=-1
            )


class TestDueDetail:

    def test_principal_includes_past_due(self):
        record = CreditRecord(unbilled_principal=1000, next_due=300, yield_due=100)
        due_detail = DueDetail(principal_past_due=50)

        assert get_principal(record, due_detail) == 1000 + 200 + 50

    def test_negative_rejected(self):
        with pytest.raises(ValueError):
            DueDetail(late_fee=-5)


class TestPoolConfig:
    """Test pool configuration structures"""

    def test_min_principal_rate_bounds(self):
        with pytest.raises(ValueError):
            FeeStructure(min_principal_rate_in_bps=10001)

    def test_negative_grace_period_rejected(self):
        with pytest.raises(ValueError):
            PoolSettings(late_payment_grace_period_in_days=-1)

    def test_negative_flat_fee_rejected(self):
        with pytest.raises(ValueError):
            FrontLoadingFeesStructure(front_loading_fee_flat=-1)

    def test_from_config(self):
        engine_config = EngineConfig(
            yield_in_bps=1200,
            min_principal_rate_in_bps=500,
            late_fee_bps=250,
            front_loading_fee_flat=10,
            front_loading_fee_bps=100,
            late_payment_grace_period_days=3,
        )

        pool_config = PoolConfig.from_config(engine_config)

        assert pool_config.get_fee_structure() == FeeStructure(1200, 500, 250)
        assert pool_config.get_pool_settings().late_payment_grace_period_in_days == 3
        assert pool_config.get_front_loading_fees() == FrontLoadingFeesStructure(10, 100)

    def test_setters_and_snapshot(self):
        pool_config = PoolConfig()
        pool_config.set_fee_structure(FeeStructure(late_fee_bps=300))
        pool_config.set_pool_settings(PoolSettings(late_payment_grace_period_in_days=7))

        snapshot = pool_config.to_dict()

        assert snapshot["fee_structure"]["late_fee_bps"] == 300
        assert snapshot["pool_settings"]["late_payment_grace_period_in_days"] == 7
        assert snapshot["front_loading_fees"]["front_loading_fee_flat"] == 0


class TestEngineConfig:
    """Test environment-driven settings"""

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("CREDIT_ENGINE_LATE_FEE_BPS", "250")
        monkeypatch.setenv("CREDIT_ENGINE_USE_IN_MEMORY_STORAGE", "true")

        try:
            reloaded = reload_config()

            assert reloaded.late_fee_bps == 250
            assert reloaded.use_in_memory_storage is True
            assert get_config() is reloaded
        finally:
            monkeypatch.undo()
            reload_config()

    def test_sqlite_path_from_url(self):
        assert sqlite_path_from_url("sqlite:///credit_engine.db") == "credit_engine.db"
        assert sqlite_path_from_url("sqlite:///") == ":memory:"

    def test_unsupported_database_url(self):
        with pytest.raises(ValueError):
            sqlite_path_from_url("postgresql://localhost/credits")
