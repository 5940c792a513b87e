"""Tests for application settings."""

from decimal import Decimal

import pytest
from pydantic import ValidationError

from laundra.core.config import Settings, get_settings


class TestSettingsDefaults:
    def test_pricing_defaults(self):
        settings = Settings(_env_file=None)

        assert settings.currency == "GBP"
        assert settings.default_vat_rate_percent == Decimal("20")
        assert settings.express_fee == Decimal("15.00")
        assert settings.allow_status_rollback is True

    def test_environment_helpers(self):
        assert Settings(_env_file=None).is_development
        assert Settings(_env_file=None, environment="production").is_production

    def test_get_settings_is_cached(self):
        assert get_settings() is get_settings()


class TestSettingsFromEnvironment:
    def test_reads_prefixed_variables(self, monkeypatch):
        monkeypatch.setenv("APP_EXPRESS_FEE", "12.50")
        monkeypatch.setenv("APP_ALLOW_STATUS_ROLLBACK", "false")
        monkeypatch.setenv("APP_DEFAULT_VAT_RATE_PERCENT", "5")

        settings = Settings(_env_file=None)

        assert settings.express_fee == Decimal("12.50")
        assert settings.allow_status_rollback is False
        assert settings.default_vat_rate_percent == Decimal("5")

    def test_cors_origins_from_comma_separated_variable(self, monkeypatch):
        monkeypatch.setenv("APP_CORS_ORIGINS", "http://till.local,http://back-office.local")

        settings = Settings(_env_file=None)

        assert settings.cors_origins == ["http://till.local", "http://back-office.local"]

    def test_cors_origins_single_variable(self, monkeypatch):
        monkeypatch.setenv("APP_CORS_ORIGINS", "https://laundra.example")

        assert Settings(_env_file=None).cors_origins == ["https://laundra.example"]


class TestSettingsValidation:
    def test_currency_upper_cased(self):
        assert Settings(_env_file=None, currency=" eur ").currency == "EUR"

    @pytest.mark.parametrize("code", ["EU", "EURO", "12A"])
    def test_currency_rejects_bad_codes(self, code):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, currency=code)

    @pytest.mark.parametrize("rate", ["-1", "100.01"])
    def test_vat_rate_bounds(self, rate):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, default_vat_rate_percent=Decimal(rate))

    def test_negative_express_fee_rejected(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, express_fee=Decimal("-0.01"))

    def test_vat_number_required_in_production(self):
        with pytest.raises(ValidationError) as exc_info:
            Settings(_env_file=None, environment="production", store_vat_number="  ")

        assert "APP_STORE_VAT_NUMBER" in str(exc_info.value)

    def test_blank_vat_number_allowed_in_development(self):
        assert Settings(_env_file=None, store_vat_number="").store_vat_number == ""

    def test_cors_origins_from_comma_string(self):
        settings = Settings(
            _env_file=None,
            cors_origins="http://till.local, http://back-office.local,",
        )

        assert settings.cors_origins == ["http://till.local", "http://back-office.local"]
