"""
Tests for core.config: fee schedule and runtime settings.
"""

from pathlib import Path

import pytest

from core.config.fees import (
    DEFAULT_FEE_SCHEDULE,
    FeeKind,
    FeeRule,
    FeeSchedule,
    PaymentMethod,
)
from core.config.settings import PdvSettings
from core.errors import ValidationError


class TestPaymentMethod:
    def test_parse_accepts_enum_and_value(self):
        assert PaymentMethod.parse("pix") is PaymentMethod.PIX
        assert PaymentMethod.parse(PaymentMethod.CASH) is PaymentMethod.CASH

    def test_parse_rejects_unknown(self):
        with pytest.raises(ValidationError, match="payment_method"):
            PaymentMethod.parse("cheque")


class TestFeeRule:
    def test_rejects_negative_value(self):
        with pytest.raises(ValidationError):
            FeeRule.percentage(-1)

    def test_rejects_unknown_type(self):
        with pytest.raises(ValidationError):
            FeeRule.from_dict({"type": "tiered", "value": 1})

    def test_dict_shape(self):
        assert FeeRule.percentage(3.5).to_dict() == {"type": "percentage", "value": 3.5}


class TestFeeSchedule:
    def test_defaults(self):
        assert DEFAULT_FEE_SCHEDULE.rule_for("cash") == FeeRule.fixed(0)
        assert DEFAULT_FEE_SCHEDULE.rule_for("credit") == FeeRule.percentage(3.5)
        assert DEFAULT_FEE_SCHEDULE.rule_for("debit") == FeeRule.percentage(2)
        assert DEFAULT_FEE_SCHEDULE.rule_for("pix") == FeeRule.fixed(0)

    def test_with_rule_returns_new_schedule(self):
        updated = DEFAULT_FEE_SCHEDULE.with_rule("debit", FeeRule.percentage(1.5))
        assert updated.debit.value == 1.5
        assert DEFAULT_FEE_SCHEDULE.debit.value == 2

    def test_dict_round_trip(self):
        schedule = DEFAULT_FEE_SCHEDULE.with_rule("pix", FeeRule.percentage(1))
        assert FeeSchedule.from_dict(schedule.to_dict()) == schedule

    def test_from_dict_fills_missing_methods_with_defaults(self):
        schedule = FeeSchedule.from_dict({"credit": {"type": "percentage", "value": 4}})
        assert schedule.credit == FeeRule.percentage(4)
        assert schedule.debit == DEFAULT_FEE_SCHEDULE.debit

    def test_from_dict_rejects_unknown_method(self):
        with pytest.raises(ValidationError, match="Unknown payment methods"):
            FeeSchedule.from_dict({"boleto": {"type": "fixed", "value": 0}})

    def test_requires_fee_rules(self):
        with pytest.raises(ValidationError):
            FeeSchedule(cash=FeeRule.fixed(0), credit=None, debit=None, pix=None)

    def test_rule_kinds(self):
        assert DEFAULT_FEE_SCHEDULE.credit.kind is FeeKind.PERCENTAGE


class TestPdvSettings:
    def test_defaults(self):
        settings = PdvSettings()
        assert settings.low_stock_threshold == 10
        assert settings.currency == "BRL"
        assert settings.state_path == Path(".") / "pdv-state.json"

    def test_from_env(self, tmp_path):
        settings = PdvSettings.from_env({
            "PDV_LOW_STOCK_THRESHOLD": "3",
            "PDV_DATA_DIR": str(tmp_path),
            "PDV_STATE_FILE": "till.json",
            "PDV_CURRENCY": "usd",
        })
        assert settings.low_stock_threshold == 3
        assert settings.state_path == tmp_path / "till.json"
        assert settings.currency == "USD"

    def test_from_env_empty_uses_defaults(self):
        assert PdvSettings.from_env({}) == PdvSettings()

    def test_from_env_rejects_bad_threshold(self):
        with pytest.raises(ValidationError, match="PDV_LOW_STOCK_THRESHOLD"):
            PdvSettings.from_env({"PDV_LOW_STOCK_THRESHOLD": "lots"})

    def test_rejects_negative_threshold(self):
        with pytest.raises(ValidationError):
            PdvSettings(low_stock_threshold=-1)
