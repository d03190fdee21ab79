"""Tests for the /providers admin endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING

from storefront_sync.providers.service import deep_merge

if TYPE_CHECKING:
    from httpx import AsyncClient


TAKEALOT_COMPLETE = {
    "configData": {"sellerId": "S-100"},
    "credentials": {"apiKey": "tk-secret"},
}


# ======================================================================
# GET /providers
# ======================================================================


class TestListProviders:
    async def test_catalog_without_stored_configs(self, client: AsyncClient) -> None:
        resp = await client.get("/providers")
        assert resp.status_code == 200
        providers = resp.json()["providers"]
        assert set(providers) == {"shipping", "payment", "email", "accounting", "marketplace"}
        courier = providers["shipping"][0]
        assert courier["name"] == "courier-guy"
        assert courier["isConfigured"] is False
        assert courier["isEnabled"] is False
        assert courier["config"] is None

    async def test_marketplaces_numbered(self, client: AsyncClient) -> None:
        resp = await client.get("/providers")
        marketplaces = resp.json()["providers"]["marketplace"]
        assert [(m["id"], m["name"]) for m in marketplaces] == [
            (1, "takealot"),
            (2, "google-shopping"),
            (3, "facebook"),
            (4, "mock"),
        ]
        assert "id" not in resp.json()["providers"]["email"][0]

    async def test_mock_is_always_configured(self, client: AsyncClient) -> None:
        resp = await client.get("/providers")
        mocks = [p for p in resp.json()["providers"]["payment"] if p["name"] == "mock"]
        assert mocks[0]["isConfigured"] is True

    async def test_stored_state_merged(self, client: AsyncClient) -> None:
        await client.put("/providers/marketplace/takealot", json={**TAKEALOT_COMPLETE, "isEnabled": True})
        resp = await client.get("/providers")
        takealot = resp.json()["providers"]["marketplace"][0]
        assert takealot["isConfigured"] is True
        assert takealot["isEnabled"] is True
        assert takealot["isActive"] is True
        assert takealot["config"]["id"] >= 1
        assert "credentials" not in takealot["config"]


# ======================================================================
# GET /providers/{type}/{name}
# ======================================================================


class TestGetProvider:
    async def test_not_found(self, client: AsyncClient) -> None:
        resp = await client.get("/providers/payment/payfast")
        assert resp.status_code == 404
        body = resp.json()
        assert body["success"] is False
        assert body["error"]["code"] == "NOT_FOUND"
        assert body["error"]["message"] == "Provider configuration not found"

    async def test_unknown_type(self, client: AsyncClient) -> None:
        resp = await client.get("/providers/fax/whatever")
        assert resp.status_code == 400
        assert "Unknown provider type" in resp.json()["error"]["message"]

    async def test_found(self, client: AsyncClient) -> None:
        await client.put("/providers/email/brevo", json={"credentials": {"apiKey": "xkeysib"}})
        resp = await client.get("/providers/email/brevo")
        assert resp.status_code == 200
        body = resp.json()
        assert body["success"] is True
        assert body["hasCredentials"] is True
        assert "credentials" not in body["config"]
        assert "xkeysib" not in resp.text


# ======================================================================
# PUT /providers/{type}/{name}
# ======================================================================


class TestUpdateProvider:
    async def test_enable_with_missing_fields(self, client: AsyncClient) -> None:
        resp = await client.put("/providers/marketplace/takealot", json={"isEnabled": True})
        assert resp.status_code == 400
        error = resp.json()["error"]
        assert error["code"] == "CONFIG_VALIDATION"
        assert error["details"]["missingFields"] == ["apiKey", "sellerId"]
        assert "apiKey, sellerId" in error["message"]

        missing = await client.get("/providers/marketplace/takealot")
        assert missing.status_code == 404

    async def test_enable_complete(self, client: AsyncClient) -> None:
        resp = await client.put("/providers/marketplace/takealot", json={**TAKEALOT_COMPLETE, "isEnabled": True})
        assert resp.status_code == 200
        body = resp.json()
        assert body["config"]["isEnabled"] is True
        assert body["config"]["isActive"] is True
        assert body["config"]["configData"] == {"sellerId": "S-100"}
        assert body["hasCredentials"] is True
        assert "tk-secret" not in resp.text

    async def test_partial_update_merges(self, client: AsyncClient) -> None:
        await client.put("/providers/marketplace/takealot", json=TAKEALOT_COMPLETE)
        resp = await client.put(
            "/providers/marketplace/takealot",
            json={"configData": {"apiUrl": "https://sandbox.takealot.test"}, "isEnabled": True},
        )
        assert resp.status_code == 200
        assert resp.json()["config"]["configData"] == {
            "sellerId": "S-100",
            "apiUrl": "https://sandbox.takealot.test",
        }

    async def test_nested_config_merged(self, client: AsyncClient) -> None:
        await client.put(
            "/providers/email/brevo",
            json={"configData": {"sender": {"name": "Shop", "email": "a@b.c"}}},
        )
        resp = await client.put(
            "/providers/email/brevo",
            json={"configData": {"sender": {"name": "Store"}}},
        )
        assert resp.status_code == 200
        assert resp.json()["config"]["configData"] == {"sender": {"name": "Store", "email": "a@b.c"}}

    async def test_update_without_enable_flag_deactivates(self, client: AsyncClient) -> None:
        await client.put("/providers/marketplace/takealot", json={**TAKEALOT_COMPLETE, "isEnabled": True})
        resp = await client.put("/providers/marketplace/takealot", json={"configData": {"region": "ZA"}})
        config = resp.json()["config"]
        assert config["isEnabled"] is True
        assert config["isActive"] is False

    async def test_disable_skips_validation(self, client: AsyncClient) -> None:
        resp = await client.put("/providers/payment/payfast", json={"isEnabled": False})
        assert resp.status_code == 200
        assert resp.json()["config"]["isActive"] is False

    async def test_mock_enabled_but_not_active(self, client: AsyncClient) -> None:
        resp = await client.put("/providers/marketplace/mock", json={"isEnabled": True})
        assert resp.status_code == 200
        config = resp.json()["config"]
        assert config["isEnabled"] is True
        assert config["isActive"] is False

    async def test_feature_flags(self, client: AsyncClient) -> None:
        resp = await client.put("/providers/shipping/pargo", json={"featureFlags": {"tracking": True}})
        assert resp.json()["config"]["featureFlags"] == {"tracking": True}

    async def test_unknown_body_field(self, client: AsyncClient) -> None:
        resp = await client.put("/providers/shipping/pargo", json={"bogus": 1})
        assert resp.status_code == 400
        assert resp.json()["error"]["code"] == "VALIDATION_ERROR"

    async def test_unknown_type(self, client: AsyncClient) -> None:
        resp = await client.put("/providers/fax/x", json={})
        assert resp.status_code == 400


# ======================================================================
# POST /providers and DELETE
# ======================================================================


class TestCreateAndDelete:
    async def test_create(self, client: AsyncClient) -> None:
        resp = await client.post(
            "/providers",
            json={
                "providerType": "payment",
                "providerName": "paystack",
                "credentials": {"publicKey": "pk", "secretKey": "sk"},
                "isEnabled": True,
            },
        )
        assert resp.status_code == 200
        assert resp.json()["config"]["isActive"] is True

    async def test_create_invalid(self, client: AsyncClient) -> None:
        resp = await client.post(
            "/providers",
            json={"providerType": "payment", "providerName": "paystack", "isEnabled": True},
        )
        assert resp.status_code == 400
        assert resp.json()["error"]["details"]["missingFields"] == ["publicKey", "secretKey"]

    async def test_create_bad_type(self, client: AsyncClient) -> None:
        resp = await client.post("/providers", json={"providerType": "fax", "providerName": "x"})
        assert resp.status_code == 400

    async def test_delete(self, client: AsyncClient) -> None:
        await client.put("/providers/email/brevo", json={})
        resp = await client.delete("/providers/email/brevo")
        assert resp.status_code == 200
        assert resp.json() == {"success": True, "message": "Provider configuration deleted"}
        assert (await client.get("/providers/email/brevo")).status_code == 404

    async def test_delete_missing(self, client: AsyncClient) -> None:
        resp = await client.delete("/providers/email/brevo")
        assert resp.status_code == 404


# ======================================================================
# deep_merge
# ======================================================================


class TestDeepMerge:
    def test_nested_maps_merged(self) -> None:
        base = {"oauth": {"clientId": "c", "clientSecret": "s"}, "apiKey": "k"}
        merged = deep_merge(base, {"oauth": {"clientSecret": "s2"}})
        assert merged == {"oauth": {"clientId": "c", "clientSecret": "s2"}, "apiKey": "k"}
        assert base["oauth"] == {"clientId": "c", "clientSecret": "s"}

    def test_non_map_replaces(self) -> None:
        assert deep_merge({"sender": {"name": "Shop"}}, {"sender": "shop@b.c"}) == {"sender": "shop@b.c"}
        assert deep_merge({"region": "ZA"}, {"region": {"code": "ZA"}}) == {"region": {"code": "ZA"}}
