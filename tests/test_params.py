import pytest

from app.routes.agent.application.core.params import is_valid_address, prepare_params
from app.routes.agent.domain.action import ActionKind
from app.routes.agent.domain.exceptions import InvalidParamsError
from packages.solana.constants import SOL_MINT, USDC_MINT


class TestAddressValidation:
    def test_valid_addresses(self, recipient):
        assert is_valid_address(recipient)
        assert is_valid_address(SOL_MINT)

    @pytest.mark.parametrize("value", ["", "address", "0OIl" * 10, None, 42])
    def test_invalid_addresses(self, value):
        assert not is_valid_address(value)


class TestPrepareParams:
    def test_swap_accepts_numeric_strings(self):
        kwargs = prepare_params(
            ActionKind.SWAP,
            {"inputMint": SOL_MINT, "outputMint": USDC_MINT, "amount": "2"},
        )
        assert kwargs == {
            "input_mint": SOL_MINT,
            "output_mint": USDC_MINT,
            "amount": 2.0,
            "slippage_bps": 50,
        }

    @pytest.mark.parametrize("amount", [0, -1, "abc", None, True])
    def test_swap_rejects_bad_amount(self, amount):
        with pytest.raises(InvalidParamsError):
            prepare_params(
                ActionKind.SWAP,
                {"inputMint": SOL_MINT, "outputMint": USDC_MINT, "amount": amount},
            )

    def test_launch_requires_name_and_symbol(self):
        with pytest.raises(InvalidParamsError):
            prepare_params(ActionKind.LAUNCH, {"name": "", "symbol": "X", "initialSupply": 1})

    def test_launch_rejects_out_of_range_decimals(self):
        with pytest.raises(InvalidParamsError):
            prepare_params(
                ActionKind.LAUNCH,
                {"name": "A", "symbol": "A", "initialSupply": 1, "decimals": 12},
            )

    def test_transfer_with_token_mint(self, recipient):
        kwargs = prepare_params(
            ActionKind.TRANSFER,
            {"recipient": recipient, "amount": 3, "tokenMint": USDC_MINT},
        )
        assert kwargs == {"recipient": recipient, "amount": 3.0, "token_mint": USDC_MINT}

    def test_transfer_rejects_bad_token_mint(self, recipient):
        with pytest.raises(InvalidParamsError):
            prepare_params(
                ActionKind.TRANSFER,
                {"recipient": recipient, "amount": 3, "tokenMint": "nope"},
            )

    def test_nft_mint_requires_image(self):
        with pytest.raises(InvalidParamsError) as exc_info:
            prepare_params(ActionKind.NFT_MINT, {"name": "Art", "symbol": "AI"})
        assert "imageUri" in str(exc_info.value)

    def test_nft_transfer_requires_addresses(self, recipient):
        with pytest.raises(InvalidParamsError):
            prepare_params(ActionKind.NFT_TRANSFER, {"mintAddress": "", "recipient": recipient})
