from dependency_injector.wiring import Provide, inject
from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from app.libs.containers import Container
from app.routes.wallet.application.service import WalletService

wallet_router = APIRouter(prefix="/wallet")


class WalletResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    public_key: str = Field(..., description="지갑 공개키 (base58)")
    balance: float = Field(..., description="SOL 잔액")


@wallet_router.get(
    "",
    status_code=status.HTTP_200_OK,
    response_model=WalletResponse,
    summary="지갑 정보 조회",
    description="에이전트 지갑의 공개키와 SOL 잔액을 조회합니다.",
)
@inject
async def fetch_wallet_info(
    wallet_service: WalletService = Depends(Provide[Container.wallet_service]),
):
    result = await wallet_service.fetch_wallet_info()
    return WalletResponse(**result)
