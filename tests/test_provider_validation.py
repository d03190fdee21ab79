"""Tests for storefront_sync.providers.catalog and validation."""

from __future__ import annotations

import pytest

from storefront_sync.providers.catalog import (
    PROVIDER_CATALOG,
    PROVIDER_TYPES,
    check_provider_type,
    definitions_for,
    get_provider_definition,
)
from storefront_sync.providers.validation import (
    missing_fields_message,
    validate_provider_config,
)

# ======================================================================
# Catalog
# ======================================================================


class TestCatalog:
    def test_every_type_has_a_mock(self) -> None:
        for provider_type in PROVIDER_TYPES:
            names = [d.name for d in definitions_for(provider_type)]
            assert "mock" in names

    def test_mock_excluded_on_request(self) -> None:
        names = [d.name for d in definitions_for("marketplace", include_mock=False)]
        assert names == ["takealot", "google-shopping", "facebook"]

    def test_lookup(self) -> None:
        definition = get_provider_definition("payment", "payfast")
        assert definition is not None
        assert definition.required_fields == ("merchantId", "merchantKey", "passphrase")

    def test_lookup_unknown(self) -> None:
        assert get_provider_definition("payment", "nope") is None

    def test_keys_unique(self) -> None:
        assert ("shipping", "mock") in PROVIDER_CATALOG
        assert ("marketplace", "mock") in PROVIDER_CATALOG

    def test_check_provider_type(self) -> None:
        check_provider_type("email")
        with pytest.raises(ValueError, match="Unknown provider type: fax"):
            check_provider_type("fax")


# ======================================================================
# validate_provider_config
# ======================================================================


class TestValidateProviderConfig:
    @pytest.mark.parametrize(
        ("provider_type", "name", "expected"),
        [
            ("shipping", "courier-guy", ["apiKey"]),
            ("shipping", "pargo", ["apiKey", "clientId"]),
            ("shipping", "fastway", ["apiKey", "accountNumber"]),
            ("payment", "payfast", ["merchantId", "merchantKey", "passphrase"]),
            ("payment", "paystack", ["publicKey", "secretKey"]),
            ("payment", "yoco", ["publicKey", "secretKey"]),
            ("email", "brevo", ["apiKey"]),
            ("email", "sendgrid", ["apiKey"]),
            ("email", "ses", ["accessKeyId", "secretAccessKey", "region"]),
            ("accounting", "xero", ["clientId", "clientSecret", "tenantId"]),
            ("accounting", "quickbooks", ["clientId", "clientSecret"]),
            ("marketplace", "takealot", ["apiKey", "sellerId"]),
            ("marketplace", "google-shopping", ["merchantId"]),
            ("marketplace", "facebook", ["catalogId", "accessToken"]),
        ],
    )
    def test_all_missing(self, provider_type: str, name: str, expected: list[str]) -> None:
        assert validate_provider_config(provider_type, name, {}, {}) == expected

    def test_split_across_config_and_credentials(self) -> None:
        missing = validate_provider_config(
            "payment",
            "payfast",
            {"merchantId": "10000100"},
            {"merchantKey": "abc", "passphrase": "pp"},
        )
        assert missing == []

    def test_falsy_values_count_as_missing(self) -> None:
        missing = validate_provider_config("payment", "paystack", {"publicKey": ""}, {"secretKey": None})
        assert missing == ["publicKey", "secretKey"]

    def test_mock_requires_nothing(self) -> None:
        assert validate_provider_config("payment", "mock", None, None) == []

    def test_unknown_provider_requires_nothing(self) -> None:
        assert validate_provider_config("shipping", "pigeon", {}) == []

    def test_optional_fields_not_required(self) -> None:
        assert validate_provider_config("marketplace", "takealot", {"sellerId": "1"}, {"apiKey": "k"}) == []


class TestMissingFieldsMessage:
    def test_lists_fields(self) -> None:
        msg = missing_fields_message(["apiKey", "sellerId"])
        assert msg == "Please configure the following fields before enabling: apiKey, sellerId"
