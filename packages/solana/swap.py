"""
토큰 스왑 협력자(collaborator)

스왑 라우팅은 이 시스템이 구현하지 않고 ISwapProvider 계약 뒤의 외부 구현에 맡깁니다.
- PlaceholderSwapProvider: 0 lamport 자기 전송으로 스왑을 흉내냅니다 (데모 기본값)
- JupiterSwapProvider: Jupiter v6 quote/swap API로 실제 스왑 트랜잭션을 받아 서명/전송합니다
"""
import base64
from abc import ABCMeta, abstractmethod
from typing import Optional

import aiohttp
from loguru import logger
from solana.rpc.async_api import AsyncClient
from solders.keypair import Keypair
from solders.system_program import TransferParams as SystemTransferParams
from solders.system_program import transfer as system_transfer
from solders.transaction import VersionedTransaction

from packages.solana.client import CONFIRMED_TX_OPTS, send_instructions
from packages.solana.constants import (
    DEFAULT_DECIMALS,
    DEFAULT_SLIPPAGE_BPS,
    JUPITER_QUOTE_API,
    JUPITER_SWAP_API,
    TOKEN_DECIMALS,
)
from packages.solana.exceptions import TransactionFailedError


class ISwapProvider(metaclass=ABCMeta):
    """스왑 실행 계약: 서명된 트랜잭션의 signature를 반환하거나 TransactionFailedError를 발생시킵니다."""

    @abstractmethod
    async def swap(
        self,
        input_mint: str,
        output_mint: str,
        amount: float,
        slippage_bps: Optional[int] = None,
    ) -> str:
        raise NotImplementedError


class PlaceholderSwapProvider(ISwapProvider):
    def __init__(self, client: AsyncClient, wallet: Keypair):
        self.client = client
        self.wallet = wallet

    async def swap(
        self,
        input_mint: str,
        output_mint: str,
        amount: float,
        slippage_bps: Optional[int] = None,
    ) -> str:
        logger.info(f"Swapping {amount} tokens from {input_mint} to {output_mint} (placeholder)")
        try:
            instruction = system_transfer(
                SystemTransferParams(
                    from_pubkey=self.wallet.pubkey(),
                    to_pubkey=self.wallet.pubkey(),
                    lamports=0,
                )
            )
            return await send_instructions(self.client, self.wallet, [instruction])
        except Exception as e:
            logger.error(f"Swap error: {str(e)}")
            raise TransactionFailedError("Swap", str(e)) from e


class JupiterSwapProvider(ISwapProvider):
    def __init__(
        self,
        client: AsyncClient,
        wallet: Keypair,
        quote_url: str = JUPITER_QUOTE_API,
        swap_url: str = JUPITER_SWAP_API,
    ):
        self.client = client
        self.wallet = wallet
        self.quote_url = quote_url
        self.swap_url = swap_url

    async def swap(
        self,
        input_mint: str,
        output_mint: str,
        amount: float,
        slippage_bps: Optional[int] = None,
    ) -> str:
        """
        Jupiter 스왑

        1. quote API로 견적 조회 (amount는 input mint의 최소 단위로 변환)
        2. swap API로 직렬화된 VersionedTransaction 수신
        3. 지갑으로 서명 후 전송
        """
        decimals = TOKEN_DECIMALS.get(input_mint, DEFAULT_DECIMALS)
        params = {
            "inputMint": input_mint,
            "outputMint": output_mint,
            "amount": str(int(round(amount * 10**decimals))),
            "slippageBps": str(slippage_bps or DEFAULT_SLIPPAGE_BPS),
        }

        try:
            async with aiohttp.ClientSession() as session:
                quote = await self._request_json(
                    session.get(
                        self.quote_url,
                        params=params,
                        timeout=aiohttp.ClientTimeout(total=30),
                    ),
                    "quote",
                )
                logger.info(
                    f"Jupiter quote: {quote.get('inAmount')} -> {quote.get('outAmount')}"
                )

                payload = await self._request_json(
                    session.post(
                        self.swap_url,
                        json={
                            "quoteResponse": quote,
                            "userPublicKey": str(self.wallet.pubkey()),
                            "wrapAndUnwrapSol": True,
                        },
                        timeout=aiohttp.ClientTimeout(total=30),
                    ),
                    "swap",
                )

            raw = VersionedTransaction.from_bytes(
                base64.b64decode(payload["swapTransaction"])
            )
            signed = VersionedTransaction(raw.message, [self.wallet])
            response = await self.client.send_raw_transaction(
                bytes(signed), opts=CONFIRMED_TX_OPTS
            )
            return str(response.value)

        except Exception as e:
            logger.error(f"Swap error: {str(e)}")
            raise TransactionFailedError("Swap", str(e)) from e

    async def _request_json(self, request, label: str) -> dict:
        async with request as response:
            if response.status != 200:
                error_text = await response.text()
                logger.error(f"Jupiter {label} API error: {error_text}")
                raise TransactionFailedError(f"Jupiter {label}", error_text)
            return await response.json()
