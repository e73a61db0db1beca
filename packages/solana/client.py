import re
from dataclasses import dataclass
from typing import Optional, Sequence

from loguru import logger
from solana.rpc.async_api import AsyncClient
from solana.rpc.commitment import Commitment
from solana.rpc.types import TxOpts
from solders.instruction import Instruction
from solders.keypair import Keypair
from solders.message import Message
from solders.transaction import Transaction

from packages.doppler.client import get_secret
from packages.solana.constants import (
    DEFAULT_COMMITMENT,
    DEFAULT_NETWORK,
    DEFAULT_RPC_ENDPOINT,
    EXPLORER_TX_URL,
    LAMPORTS_PER_SOL,
    SUPPORTED_COMMITMENTS,
    SUPPORTED_NETWORKS,
)
from packages.solana.exceptions import WalletConfigurationError

CONFIRMED_TX_OPTS = TxOpts(skip_confirmation=False)

# 64-byte secret key in base58
SECRET_KEY_PATTERN = re.compile(r"[1-9A-HJ-NP-Za-km-z]{86,88}")
INVALID_KEY_MESSAGE = "Invalid private key format. Use base58 encoded secret key."


@dataclass
class SolanaSettings:
    rpc_endpoint: str
    network: str
    commitment: str

    @classmethod
    def from_secrets(cls) -> "SolanaSettings":
        network = get_secret("SOLANA_NETWORK", DEFAULT_NETWORK)
        commitment = get_secret("SOLANA_COMMITMENT", DEFAULT_COMMITMENT)

        if network not in SUPPORTED_NETWORKS:
            logger.warning(f"Unknown SOLANA_NETWORK '{network}', using {DEFAULT_NETWORK}")
            network = DEFAULT_NETWORK
        if commitment not in SUPPORTED_COMMITMENTS:
            logger.warning(
                f"Unknown SOLANA_COMMITMENT '{commitment}', using {DEFAULT_COMMITMENT}"
            )
            commitment = DEFAULT_COMMITMENT

        return cls(
            rpc_endpoint=get_secret("SOLANA_RPC_ENDPOINT", DEFAULT_RPC_ENDPOINT),
            network=network,
            commitment=commitment,
        )

    def explorer_url(self, signature: str) -> str:
        return EXPLORER_TX_URL.format(signature=signature, network=self.network)


def create_solana_client(settings: SolanaSettings) -> AsyncClient:
    """
    RPC 엔드포인트에 대한 AsyncClient를 생성합니다.
    실제 연결은 첫 요청 시점에 열리며, 종료는 lifespan에서 처리합니다.
    """
    logger.info(
        f"Solana RPC client: {settings.rpc_endpoint} "
        f"(network={settings.network}, commitment={settings.commitment})"
    )
    return AsyncClient(settings.rpc_endpoint, commitment=Commitment(settings.commitment))


def load_wallet(private_key: Optional[str] = None) -> Keypair:
    """Load the agent wallet from a base58 encoded secret key.

    When no key is configured an ephemeral wallet is generated so the demo can
    still start; its public key is logged so it can be funded from a faucet.

    Raises:
        WalletConfigurationError: If the configured key is not a valid base58 secret key.
    """
    if private_key is None:
        private_key = get_secret("WALLET_PRIVATE_KEY", None)

    if not private_key:
        wallet = Keypair()
        logger.warning("No WALLET_PRIVATE_KEY found, generating new wallet for demo")
        logger.warning(f"New wallet public key: {wallet.pubkey()}")
        return wallet

    # NOTE: solders는 잘못된 base58 입력에 panic을 일으키므로 형식을 먼저 확인합니다.
    if not SECRET_KEY_PATTERN.fullmatch(private_key):
        raise WalletConfigurationError(INVALID_KEY_MESSAGE)

    try:
        return Keypair.from_base58_string(private_key)
    except ValueError as e:
        raise WalletConfigurationError(INVALID_KEY_MESSAGE) from e


def lamports_to_sol(lamports: int) -> float:
    return lamports / LAMPORTS_PER_SOL


def sol_to_lamports(amount: float) -> int:
    return int(round(amount * LAMPORTS_PER_SOL))


async def send_instructions(
    client: AsyncClient,
    payer: Keypair,
    instructions: Sequence[Instruction],
) -> str:
    """Sign the instructions as one legacy transaction, send it and wait for confirmation."""
    blockhash = (await client.get_latest_blockhash()).value.blockhash
    message = Message.new_with_blockhash(list(instructions), payer.pubkey(), blockhash)
    transaction = Transaction([payer], message, blockhash)

    response = await client.send_transaction(transaction, opts=CONFIRMED_TX_OPTS)
    return str(response.value)
