import pytest
from solders.keypair import Keypair
from spl.token.async_client import AsyncToken

from packages.solana.client import (
    SolanaSettings,
    lamports_to_sol,
    load_wallet,
    sol_to_lamports,
)
from packages.solana.exceptions import WalletConfigurationError


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for key in (
        "DOPPLER_SECRETS",
        "WALLET_PRIVATE_KEY",
        "SOLANA_NETWORK",
        "SOLANA_COMMITMENT",
        "SOLANA_RPC_ENDPOINT",
    ):
        monkeypatch.delenv(key, raising=False)


class TestLoadWallet:
    def test_loads_base58_secret_key(self):
        keypair = Keypair()
        assert load_wallet(str(keypair)).pubkey() == keypair.pubkey()

    def test_reads_secret_when_no_key_given(self, monkeypatch):
        keypair = Keypair()
        monkeypatch.setenv("WALLET_PRIVATE_KEY", str(keypair))
        assert load_wallet().pubkey() == keypair.pubkey()

    def test_generates_wallet_without_key(self):
        assert isinstance(load_wallet(), Keypair)

    @pytest.mark.parametrize("key", ["not-a-key", "0" * 88, "abc"])
    def test_invalid_key_raises(self, key):
        with pytest.raises(WalletConfigurationError):
            load_wallet(key)


class TestSolanaSettings:
    def test_defaults(self):
        settings = SolanaSettings.from_secrets()
        assert settings.network == "devnet"
        assert settings.commitment == "confirmed"
        assert settings.rpc_endpoint == "https://api.devnet.solana.com"

    def test_unknown_values_fall_back(self, monkeypatch):
        monkeypatch.setenv("SOLANA_NETWORK", "moonnet")
        monkeypatch.setenv("SOLANA_COMMITMENT", "eventually")

        settings = SolanaSettings.from_secrets()

        assert settings.network == "devnet"
        assert settings.commitment == "confirmed"

    def test_explorer_url(self):
        settings = SolanaSettings(rpc_endpoint="x", network="devnet", commitment="confirmed")
        assert "sig123" in settings.explorer_url("sig123")
        assert "devnet" in settings.explorer_url("sig123")


def test_lamport_conversion():
    assert sol_to_lamports(1.5) == 1_500_000_000
    assert lamports_to_sol(250_000_000) == 0.25


def test_spl_async_token_api_available():
    assert callable(getattr(AsyncToken, "create_mint", None))
    assert callable(getattr(AsyncToken, "set_authority", None))
