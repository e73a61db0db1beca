from typing import Any, Dict

from fastapi import HTTPException, status
from loguru import logger
from solders.keypair import Keypair

from packages.solana.token import TokenOperations


class WalletService:
    def __init__(self, wallet: Keypair, token_ops: TokenOperations):
        self.wallet = wallet
        self.token_ops = token_ops

    def get_public_key(self) -> str:
        return str(self.wallet.pubkey())

    async def get_balance(self) -> float:
        """SOL 잔액 (lamports / 1e9)"""
        return await self.token_ops.get_balance()

    async def fetch_wallet_info(self) -> Dict[str, Any]:
        public_key = self.get_public_key()
        try:
            balance = await self.get_balance()
        except Exception as e:
            logger.error(f"Failed to fetch balance for {public_key}: {str(e)}")
            raise HTTPException(
                status_code=status.HTTP_502_BAD_GATEWAY,
                detail=f"Failed to fetch wallet balance: {str(e)}",
            )
        return {"public_key": public_key, "balance": balance}
