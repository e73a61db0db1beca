"""
토큰 작업: launch(SPL 토큰 발행), transfer(SOL / SPL 전송)
"""
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import List, Optional

from loguru import logger
from solana.rpc.async_api import AsyncClient
from solders.instruction import Instruction
from solders.keypair import Keypair
from solders.pubkey import Pubkey
from solders.system_program import TransferParams as SystemTransferParams
from solders.system_program import transfer as system_transfer
from spl.token.async_client import AsyncToken
from spl.token.constants import TOKEN_PROGRAM_ID
from spl.token.instructions import (
    TransferCheckedParams,
    create_associated_token_account,
    get_associated_token_address,
    transfer_checked,
)

from packages.solana.client import (
    CONFIRMED_TX_OPTS,
    lamports_to_sol,
    send_instructions,
    sol_to_lamports,
)
from packages.solana.constants import DEFAULT_DECIMALS
from packages.solana.exceptions import InsufficientFundsError, TransactionFailedError


@dataclass
class MintResult:
    mint: str
    signature: str


def to_base_units(amount: float, decimals: int) -> int:
    """UI 단위 수량을 최소 단위 정수로 변환 (float 정밀도 손실 없이 반올림)"""
    scaled = Decimal(str(amount)).scaleb(decimals)
    return int(scaled.quantize(Decimal(1), rounding=ROUND_HALF_UP))


async def ensure_token_account_instructions(
    client: AsyncClient, payer: Pubkey, owner: Pubkey, mint: Pubkey
) -> tuple[Pubkey, List[Instruction]]:
    """Return the owner's associated token account and the instruction creating it if missing."""
    token_account = get_associated_token_address(owner, mint)
    account_info = await client.get_account_info(token_account)
    if account_info.value is not None:
        return token_account, []
    return token_account, [create_associated_token_account(payer, owner, mint)]


class TokenOperations:
    def __init__(self, client: AsyncClient, wallet: Keypair):
        self.client = client
        self.wallet = wallet

    async def launch(
        self,
        name: str,
        symbol: str,
        initial_supply: float,
        decimals: Optional[int] = None,
    ) -> MintResult:
        """
        새 SPL 토큰 발행

        1. mint 생성 (mint authority = 에이전트 지갑)
        2. 지갑의 associated token account 생성
        3. 초기 공급량 민팅

        NOTE: mint 생성 후 민팅이 실패해도 보상 트랜잭션은 없습니다.
        """
        decimals = DEFAULT_DECIMALS if decimals is None else decimals
        amount = to_base_units(initial_supply, decimals)
        if amount <= 0:
            raise TransactionFailedError(
                "Token launch", f"initial supply {initial_supply} is 0 at {decimals} decimals"
            )

        try:
            token = await AsyncToken.create_mint(
                self.client,
                self.wallet,
                self.wallet.pubkey(),
                decimals,
                TOKEN_PROGRAM_ID,
            )
            logger.info(f"Created mint {token.pubkey} for {name} ({symbol})")

            token_account = await token.create_associated_token_account(self.wallet.pubkey())
            response = await token.mint_to(
                token_account, self.wallet, amount, opts=CONFIRMED_TX_OPTS
            )
        except Exception as e:
            logger.error(f"Token launch error: {str(e)}")
            raise TransactionFailedError("Token launch", str(e)) from e

        return MintResult(mint=str(token.pubkey), signature=str(response.value))

    async def transfer(
        self,
        recipient: str,
        amount: float,
        token_mint: Optional[str] = None,
    ) -> str:
        """tokenMint가 없으면 SOL을, 있으면 해당 SPL 토큰을 전송합니다."""
        try:
            if not token_mint:
                return await self._transfer_sol(Pubkey.from_string(recipient), amount)
            return await self._transfer_spl(
                Pubkey.from_string(recipient), Pubkey.from_string(token_mint), amount
            )
        except Exception as e:
            logger.error(f"Transfer error: {str(e)}")
            raise TransactionFailedError("Transfer", str(e)) from e

    async def _transfer_sol(self, recipient: Pubkey, amount: float) -> str:
        lamports = sol_to_lamports(amount)
        balance = (await self.client.get_balance(self.wallet.pubkey())).value
        if lamports > balance:
            raise InsufficientFundsError(amount, lamports_to_sol(balance))

        instruction = system_transfer(
            SystemTransferParams(
                from_pubkey=self.wallet.pubkey(),
                to_pubkey=recipient,
                lamports=lamports,
            )
        )
        return await send_instructions(self.client, self.wallet, [instruction])

    async def _transfer_spl(self, recipient: Pubkey, mint: Pubkey, amount: float) -> str:
        token = AsyncToken(self.client, mint, TOKEN_PROGRAM_ID, self.wallet)
        decimals = (await token.get_mint_info()).decimals

        source = get_associated_token_address(self.wallet.pubkey(), mint)
        destination, instructions = await ensure_token_account_instructions(
            self.client, self.wallet.pubkey(), recipient, mint
        )
        instructions.append(
            transfer_checked(
                TransferCheckedParams(
                    program_id=TOKEN_PROGRAM_ID,
                    source=source,
                    mint=mint,
                    dest=destination,
                    owner=self.wallet.pubkey(),
                    amount=to_base_units(amount, decimals),
                    decimals=decimals,
                )
            )
        )
        return await send_instructions(self.client, self.wallet, instructions)

    async def get_balance(self) -> float:
        response = await self.client.get_balance(self.wallet.pubkey())
        return lamports_to_sol(response.value)
