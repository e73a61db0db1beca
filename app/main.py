from fastapi import FastAPI
from fastapi.middleware.gzip import GZipMiddleware
from starlette.middleware.cors import CORSMiddleware

from app.libs.containers import Container
from app.libs.exceptions import add_exception_handlers
from app.libs.lifespan import lifespan
from app.libs.logging_config import setup_logging
from app.libs.middleware import RateLimitMiddleware, RequestLoggingMiddleware
from app.routes.agent.interface.controller import agent_router
from app.routes.system.interface.controller import system_router
from app.routes.wallet.interface.controller import wallet_router
from packages.constants import ALLOW_ORIGINS_MAP, API_PREFIX
from packages.doppler.client import get_secret

setup_logging()

app = FastAPI(title="Solana Prompt Agent", lifespan=lifespan)

app.container = Container()
app.container.wire()  # 🔧 의존성 주입 활성화!

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOW_ORIGINS_MAP.get(get_secret("ENVIRONMENT", "local"), ["*"]),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(GZipMiddleware, minimum_size=1000, compresslevel=5)
app.add_middleware(RateLimitMiddleware)
app.add_middleware(RequestLoggingMiddleware)

add_exception_handlers(app)

# ================================================================
app.include_router(agent_router, prefix=API_PREFIX, tags=["Agent"])
app.include_router(wallet_router, prefix=API_PREFIX, tags=["Wallet"])

app.include_router(system_router, tags=["System"])
