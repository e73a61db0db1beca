from contextlib import asynccontextmanager

from fastapi import FastAPI
from loguru import logger


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan context manager for FastAPI.

    Loads the agent wallet at startup so a misconfigured secret key fails fast,
    and closes the shared Solana RPC client on shutdown.
    """

    container = app.container
    settings = container.solana_settings()
    wallet = container.wallet()
    logger.info(f"🚀 Solana prompt agent ready on {settings.network}")
    logger.info(f"📝 Wallet: {wallet.pubkey()}")

    yield

    try:
        await container.solana_client().close()
    except Exception as e:
        logger.error(f"Error closing Solana RPC client: {e}")
