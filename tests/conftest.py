from unittest.mock import AsyncMock, MagicMock

import aiohttp
import pytest

from app.routes.agent.application.core import IntentClassifier
from app.routes.agent.application.service import AgentService
from app.routes.agent.infra.repository import ActionRepository
from packages.solana.token import MintResult


# NOTE: 고정 주소 사용 (무작위 주소에 "nft", "send" 같은 키워드가 섞이면 분류 결과가 달라짐)
RECIPIENT = "9WzDXwBbmkg8ZTbNMqUxvQRAyrZzDsGYdLVL9zYtAWWM"
NFT_MINT = "7xKXtg2CW87d97TXJSDpbD5jBkheTqA83TZRuJosgAsU"


@pytest.fixture
def recipient() -> str:
    return RECIPIENT


@pytest.fixture
def mint_address() -> str:
    return NFT_MINT


@pytest.fixture
def offline_llm():
    """LLM client with no configured backend: classification always uses keyword rules."""
    llm = MagicMock()
    llm.is_configured = False
    llm.complete = AsyncMock(side_effect=AssertionError("LLM must not be called"))
    return llm


@pytest.fixture
def action_repo() -> ActionRepository:
    return ActionRepository()


@pytest.fixture
def token_ops():
    ops = MagicMock()
    ops.launch = AsyncMock(return_value=MintResult(mint="LaunchMint111", signature="launch-sig"))
    ops.transfer = AsyncMock(return_value="transfer-sig")
    ops.get_balance = AsyncMock(return_value=1.5)
    return ops


@pytest.fixture
def nft_ops():
    ops = MagicMock()
    ops.mint = AsyncMock(return_value=MintResult(mint="NftMint111", signature="nft-mint-sig"))
    ops.transfer = AsyncMock(return_value="nft-transfer-sig")
    return ops


@pytest.fixture
def swap_provider():
    provider = MagicMock()
    provider.swap = AsyncMock(return_value="swap-sig")
    return provider


@pytest.fixture
def agent_service(action_repo, offline_llm, token_ops, nft_ops, swap_provider) -> AgentService:
    return AgentService(
        action_repo=action_repo,
        intent_classifier=IntentClassifier(llm_client=offline_llm),
        token_ops=token_ops,
        nft_ops=nft_ops,
        swap_provider=swap_provider,
    )


class FakeResponse:
    """aiohttp 응답 대역: `async with session.get(...) as response` 형태로 사용"""

    def __init__(self, status: int = 200, payload=None, text: str = ""):
        self.status = status
        self.payload = payload
        self._text = text

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        return False

    async def json(self):
        return self.payload

    async def text(self):
        return self._text


class FakeSession:
    """aiohttp.ClientSession 대역. 응답(또는 발생시킬 예외)을 순서대로 돌려줍니다."""

    def __init__(self, responses):
        self.responses = list(responses)
        self.calls = []

    def __call__(self, *args, **kwargs):
        return self

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        return False

    def _next(self, method, url, kwargs):
        self.calls.append((method, url, kwargs))
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response

    def get(self, url, **kwargs):
        return self._next("GET", url, kwargs)

    def post(self, url, **kwargs):
        return self._next("POST", url, kwargs)


@pytest.fixture
def fake_http(monkeypatch):
    def install(*responses) -> FakeSession:
        """responses: (status, dict | str) 튜플 또는 발생시킬 예외"""
        session = FakeSession(
            response
            if isinstance(response, Exception)
            else FakeResponse(
                status=response[0],
                payload=response[1] if isinstance(response[1], dict) else None,
                text=response[1] if isinstance(response[1], str) else "",
            )
            for response in responses
        )
        monkeypatch.setattr(aiohttp, "ClientSession", session)
        return session

    return install
