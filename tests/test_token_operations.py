from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest
from solders.hash import Hash
from solders.keypair import Keypair
from solders.pubkey import Pubkey
from solders.signature import Signature
from solders.transaction import Transaction
from spl.token.instructions import decode_transfer_checked

from packages.solana.constants import USDC_MINT
from packages.solana.exceptions import InsufficientFundsError, TransactionFailedError
from packages.solana.token import TokenOperations, to_base_units


def make_rpc(balance_lamports: int = 0):
    client = MagicMock()
    client.get_balance = AsyncMock(return_value=SimpleNamespace(value=balance_lamports))
    client.get_latest_blockhash = AsyncMock(
        return_value=SimpleNamespace(value=SimpleNamespace(blockhash=Hash.default()))
    )
    client.send_transaction = AsyncMock(return_value=SimpleNamespace(value=Signature.default()))
    client.get_account_info = AsyncMock(return_value=SimpleNamespace(value=None))
    return client


@pytest.fixture
def async_token(monkeypatch):
    token = MagicMock()
    token.pubkey = Keypair().pubkey()
    token.create_associated_token_account = AsyncMock(return_value=Keypair().pubkey())
    token.mint_to = AsyncMock(return_value=SimpleNamespace(value=Signature.default()))
    token.get_mint_info = AsyncMock(return_value=SimpleNamespace(decimals=6))

    token_cls = MagicMock(return_value=token)
    token_cls.create_mint = AsyncMock(return_value=token)
    monkeypatch.setattr("packages.solana.token.AsyncToken", token_cls)
    return token_cls


class TestToBaseUnits:
    @pytest.mark.parametrize(
        "amount,decimals,expected",
        [
            (0.5, 9, 500_000_000),
            (1_000_000, 9, 1_000_000_000_000_000),
            (1_000_000_000, 9, 1_000_000_000_000_000_000),
            (0.1, 6, 100_000),
            (0.4, 0, 0),
        ],
    )
    def test_scales_without_float_drift(self, amount, decimals, expected):
        assert to_base_units(amount, decimals) == expected


class TestLaunch:
    @pytest.mark.asyncio
    async def test_creates_mint_and_mints_supply(self, async_token):
        wallet = Keypair()
        ops = TokenOperations(client=make_rpc(), wallet=wallet)

        result = await ops.launch(name="GrokCoin", symbol="GROK", initial_supply=1_000_000)

        token = async_token.create_mint.return_value
        assert result.mint == str(token.pubkey)
        assert result.signature == str(Signature.default())
        create_args = async_token.create_mint.await_args.args
        assert create_args[2] == wallet.pubkey()
        assert create_args[3] == 9
        token.create_associated_token_account.assert_awaited_once_with(wallet.pubkey())
        assert token.mint_to.await_args.args[2] == 1_000_000 * 10**9

    @pytest.mark.asyncio
    async def test_fractional_supply_is_scaled_not_truncated(self, async_token):
        ops = TokenOperations(client=make_rpc(), wallet=Keypair())

        await ops.launch(name="Half", symbol="HALF", initial_supply=0.5, decimals=9)

        token = async_token.create_mint.return_value
        assert token.mint_to.await_args.args[2] == 500_000_000

    @pytest.mark.asyncio
    async def test_supply_rounding_to_zero_is_rejected(self, async_token):
        ops = TokenOperations(client=make_rpc(), wallet=Keypair())

        with pytest.raises(TransactionFailedError, match="Token launch failed"):
            await ops.launch(name="Dust", symbol="DUST", initial_supply=0.4, decimals=0)

        async_token.create_mint.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_mint_failure_is_wrapped(self, async_token):
        async_token.create_mint.side_effect = RuntimeError("insufficient lamports for rent")
        ops = TokenOperations(client=make_rpc(), wallet=Keypair())

        with pytest.raises(TransactionFailedError, match="Token launch failed: insufficient"):
            await ops.launch(name="A", symbol="A", initial_supply=1)


class TestSolTransfer:
    @pytest.mark.asyncio
    async def test_get_balance_in_sol(self):
        ops = TokenOperations(client=make_rpc(2_500_000_000), wallet=Keypair())
        assert await ops.get_balance() == 2.5

    @pytest.mark.asyncio
    async def test_sends_signed_transaction(self, recipient):
        client = make_rpc(2_000_000_000)
        ops = TokenOperations(client=client, wallet=Keypair())

        signature = await ops.transfer(recipient=recipient, amount=0.5)

        assert signature == str(Signature.default())
        sent = client.send_transaction.await_args.args[0]
        assert isinstance(sent, Transaction)

    @pytest.mark.asyncio
    async def test_insufficient_funds(self, recipient):
        client = make_rpc(100_000_000)
        ops = TokenOperations(client=client, wallet=Keypair())

        with pytest.raises(TransactionFailedError) as exc_info:
            await ops.transfer(recipient=recipient, amount=1)

        assert isinstance(exc_info.value.__cause__, InsufficientFundsError)
        assert str(exc_info.value).startswith("Transfer failed:")
        client.send_transaction.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_rpc_error_is_wrapped(self, recipient):
        client = make_rpc(2_000_000_000)
        client.send_transaction.side_effect = RuntimeError("node is behind")
        ops = TokenOperations(client=client, wallet=Keypair())

        with pytest.raises(TransactionFailedError, match="node is behind"):
            await ops.transfer(recipient=recipient, amount=0.1)


class TestSplTransfer:
    @pytest.mark.asyncio
    async def test_creates_recipient_account_and_uses_mint_decimals(
        self, monkeypatch, async_token, recipient
    ):
        send = AsyncMock(return_value="spl-sig")
        monkeypatch.setattr("packages.solana.token.send_instructions", send)
        ops = TokenOperations(client=make_rpc(), wallet=Keypair())

        signature = await ops.transfer(recipient=recipient, amount=2.5, token_mint=USDC_MINT)

        assert signature == "spl-sig"
        instructions = send.await_args.args[2]
        assert len(instructions) == 2
        params = decode_transfer_checked(instructions[-1])
        assert params.amount == 2_500_000
        assert params.decimals == 6
        assert params.mint == Pubkey.from_string(USDC_MINT)

    @pytest.mark.asyncio
    async def test_existing_recipient_account_is_reused(self, monkeypatch, async_token, recipient):
        send = AsyncMock(return_value="spl-sig")
        monkeypatch.setattr("packages.solana.token.send_instructions", send)
        client = make_rpc()
        client.get_account_info.return_value = SimpleNamespace(value=object())
        ops = TokenOperations(client=client, wallet=Keypair())

        await ops.transfer(recipient=recipient, amount=1, token_mint=USDC_MINT)

        assert len(send.await_args.args[2]) == 1
