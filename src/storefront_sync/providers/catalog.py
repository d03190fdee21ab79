"""Static catalog of the external providers the storefront can talk to.

Each entry names the fields an admin must supply (in ``configData`` or
``credentials``) before the provider may be enabled.
"""

from __future__ import annotations

from dataclasses import dataclass

PROVIDER_TYPES: tuple[str, ...] = ("shipping", "payment", "email", "accounting", "marketplace")

MOCK_PROVIDER = "mock"


@dataclass(frozen=True)
class ProviderDefinition:
    """Public metadata for one provider."""

    provider_type: str
    name: str
    display_name: str
    required_fields: tuple[str, ...] = ()
    optional_fields: tuple[str, ...] = ()


def _defs(provider_type: str, *entries: tuple[str, str, tuple[str, ...]]) -> list[ProviderDefinition]:
    return [
        ProviderDefinition(provider_type, name, display, required)
        for name, display, required in entries
    ]


_DEFINITIONS: list[ProviderDefinition] = [
    *_defs(
        "shipping",
        ("courier-guy", "The Courier Guy", ("apiKey",)),
        ("pargo", "Pargo Collection Points", ("apiKey", "clientId")),
        ("fastway", "FastWay", ("apiKey", "accountNumber")),
        (MOCK_PROVIDER, "Mock Shipping Provider", ()),
    ),
    *_defs(
        "payment",
        ("payfast", "PayFast", ("merchantId", "merchantKey", "passphrase")),
        ("paystack", "PayStack", ("publicKey", "secretKey")),
        ("yoco", "Yoco", ("publicKey", "secretKey")),
        (MOCK_PROVIDER, "Mock Payment Provider", ()),
    ),
    *_defs(
        "email",
        ("brevo", "Brevo", ("apiKey",)),
        ("sendgrid", "SendGrid", ("apiKey",)),
        ("ses", "Amazon SES", ("accessKeyId", "secretAccessKey", "region")),
        (MOCK_PROVIDER, "Mock Email Provider", ()),
    ),
    *_defs(
        "accounting",
        ("xero", "Xero", ("clientId", "clientSecret", "tenantId")),
        ("quickbooks", "QuickBooks", ("clientId", "clientSecret")),
        (MOCK_PROVIDER, "Mock Accounting Provider", ()),
    ),
    ProviderDefinition("marketplace", "takealot", "Takealot", ("apiKey", "sellerId"), ("apiUrl",)),
    ProviderDefinition("marketplace", "google-shopping", "Google Shopping", ("merchantId",), ("apiKey",)),
    ProviderDefinition("marketplace", "facebook", "Facebook/Instagram Shops", ("catalogId", "accessToken")),
    ProviderDefinition("marketplace", MOCK_PROVIDER, "Mock Marketplace"),
]

PROVIDER_CATALOG: dict[tuple[str, str], ProviderDefinition] = {
    (d.provider_type, d.name): d for d in _DEFINITIONS
}


def get_provider_definition(provider_type: str, name: str) -> ProviderDefinition | None:
    return PROVIDER_CATALOG.get((provider_type, name))


def definitions_for(provider_type: str, *, include_mock: bool = True) -> list[ProviderDefinition]:
    """Catalog entries of one type, in declaration order."""
    return [
        d
        for d in _DEFINITIONS
        if d.provider_type == provider_type and (include_mock or d.name != MOCK_PROVIDER)
    ]


def check_provider_type(provider_type: str) -> None:
    if provider_type not in PROVIDER_TYPES:
        msg = f"Unknown provider type: {provider_type}"
        raise ValueError(msg)
