"""
NFT 작업: mint, transfer

NFT는 decimals 0, 공급량 1인 SPL 토큰으로 발행하고 민팅 후 mint authority를 해제합니다.
"""
from solana.rpc.async_api import AsyncClient
from solders.keypair import Keypair
from solders.pubkey import Pubkey
from loguru import logger
from spl.token.async_client import AsyncToken
from spl.token.constants import TOKEN_PROGRAM_ID
from spl.token.instructions import (
    AuthorityType,
    TransferCheckedParams,
    get_associated_token_address,
    transfer_checked,
)

from packages.solana.client import CONFIRMED_TX_OPTS, send_instructions
from packages.solana.constants import NFT_DECIMALS
from packages.solana.exceptions import NFTNotFoundError, TransactionFailedError
from packages.solana.token import MintResult, ensure_token_account_instructions


class NFTOperations:
    def __init__(self, client: AsyncClient, wallet: Keypair):
        self.client = client
        self.wallet = wallet

    async def mint(
        self,
        name: str,
        symbol: str,
        image_uri: str,
        description: str | None = None,
    ) -> MintResult:
        try:
            token = await AsyncToken.create_mint(
                self.client,
                self.wallet,
                self.wallet.pubkey(),
                NFT_DECIMALS,
                TOKEN_PROGRAM_ID,
            )
            token_account = await token.create_associated_token_account(self.wallet.pubkey())
            response = await token.mint_to(
                token_account, self.wallet, 1, opts=CONFIRMED_TX_OPTS
            )
            # 추가 발행을 막기 위해 mint authority 제거
            await token.set_authority(
                token.pubkey,
                self.wallet,
                AuthorityType.MINT_TOKENS,
                new_authority=None,
                opts=CONFIRMED_TX_OPTS,
            )
        except Exception as e:
            logger.error(f"NFT mint error: {str(e)}")
            raise TransactionFailedError("NFT mint", str(e)) from e

        logger.info(
            f"Minted NFT {token.pubkey} name={name} symbol={symbol} image={image_uri} "
            f"description={description or f'AI-generated NFT: {name}'}"
        )
        return MintResult(mint=str(token.pubkey), signature=str(response.value))

    async def transfer(self, mint_address: str, recipient: str) -> str:
        try:
            mint = Pubkey.from_string(mint_address)
            owner = Pubkey.from_string(recipient)

            source = get_associated_token_address(self.wallet.pubkey(), mint)
            await self._ensure_holding(source)

            destination, instructions = await ensure_token_account_instructions(
                self.client, self.wallet.pubkey(), owner, mint
            )
            instructions.append(
                transfer_checked(
                    TransferCheckedParams(
                        program_id=TOKEN_PROGRAM_ID,
                        source=source,
                        mint=mint,
                        dest=destination,
                        owner=self.wallet.pubkey(),
                        amount=1,
                        decimals=NFT_DECIMALS,
                    )
                )
            )
            return await send_instructions(self.client, self.wallet, instructions)
        except Exception as e:
            logger.error(f"NFT transfer error: {str(e)}")
            raise TransactionFailedError("NFT transfer", str(e)) from e

    async def _ensure_holding(self, token_account: Pubkey) -> None:
        account_info = await self.client.get_account_info(token_account)
        if account_info.value is None:
            raise NFTNotFoundError("NFT not found in wallet")

        balance = await self.client.get_token_account_balance(token_account)
        if int(balance.value.amount) < 1:
            raise NFTNotFoundError("NFT not found in wallet")
