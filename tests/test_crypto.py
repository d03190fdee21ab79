"""Tests for storefront_sync.config.crypto."""

from __future__ import annotations

from storefront_sync.config.crypto import SecretManager


class TestSecretManager:
    def test_encrypt_decrypt(self) -> None:
        mgr = SecretManager("passphrase")
        token = mgr.encrypt("hello")
        assert token != "hello"
        assert mgr.decrypt(token) == "hello"

    def test_same_passphrase_shares_key(self) -> None:
        token = SecretManager("passphrase").encrypt("hello")
        assert SecretManager("passphrase").decrypt(token) == "hello"

    def test_wrong_key_returns_none(self) -> None:
        token = SecretManager("one").encrypt("hello")
        assert SecretManager("two").decrypt(token) is None

    def test_garbage_returns_none(self) -> None:
        assert SecretManager("one").decrypt("not-a-token") is None

    def test_empty_passphrase_generates_key(self) -> None:
        mgr = SecretManager("")
        assert mgr.decrypt(mgr.encrypt("x")) == "x"


class TestSealOpen:
    def test_map_survives(self) -> None:
        mgr = SecretManager("passphrase")
        sealed = mgr.seal({"apiKey": "secret-123", "sellerId": "S1"})
        assert "secret-123" not in sealed
        assert mgr.open(sealed) == {"apiKey": "secret-123", "sellerId": "S1"}

    def test_empty_map_is_empty_string(self) -> None:
        mgr = SecretManager("passphrase")
        assert mgr.seal({}) == ""
        assert mgr.open("") == {}
        assert mgr.open(None) == {}

    def test_unreadable_opens_to_empty(self) -> None:
        sealed = SecretManager("one").seal({"apiKey": "x"})
        assert SecretManager("two").open(sealed) == {}

    def test_non_dict_payload_opens_to_empty(self) -> None:
        mgr = SecretManager("passphrase")
        assert mgr.open(mgr.encrypt("[1, 2]")) == {}
