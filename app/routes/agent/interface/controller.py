from typing import List

from dependency_injector.wiring import Provide, inject
from fastapi import APIRouter, Depends, status

from app.libs.containers import Container
from app.libs.exceptions import BadRequestException, NotFoundException
from app.routes.agent.application.service import AgentService
from app.routes.agent.interface.schema import ActionResponse, PromptRequest

"""
status 코드 정리
200: 요청이 성공적으로 처리되었고, 응답 본문에 액션 기록을 포함할 경우
400: 프롬프트가 없거나 문자열이 아닐 경우
404: 액션 기록이 없을 경우
500: 액션 실행이 실패한 경우 (액션은 failed로 기록됨)
"""

agent_router = APIRouter()


@agent_router.post(
    "/execute-prompt",
    status_code=status.HTTP_200_OK,
    response_model=ActionResponse,
    response_model_exclude_none=True,
    summary="프롬프트 실행",
    description="자연어 프롬프트를 액션(swap, launch, transfer, nft_mint, nft_transfer)으로 분류하고 실행합니다.",
)
@inject
async def execute_prompt(
    request: PromptRequest,
    agent_service: AgentService = Depends(Provide[Container.agent_service]),
):
    if not request.prompt.strip():
        raise BadRequestException("Prompt is required and must be a string")

    action = await agent_service.execute_prompt(request.prompt)
    return ActionResponse.from_record(action)


@agent_router.get(
    "/action/{action_id}",
    status_code=status.HTTP_200_OK,
    response_model=ActionResponse,
    response_model_exclude_none=True,
    summary="액션 조회",
    description="ID로 단일 액션 기록을 조회합니다.",
)
@inject
async def fetch_action(
    action_id: str,
    agent_service: AgentService = Depends(Provide[Container.agent_service]),
):
    action = await agent_service.fetch_action(action_id)
    if action is None:
        raise NotFoundException("Action not found")
    return ActionResponse.from_record(action)


@agent_router.get(
    "/actions",
    status_code=status.HTTP_200_OK,
    response_model=List[ActionResponse],
    response_model_exclude_none=True,
    summary="액션 히스토리 조회",
    description="전체 액션 기록을 최신순으로 조회합니다.",
)
@inject
async def fetch_actions(
    agent_service: AgentService = Depends(Provide[Container.agent_service]),
):
    actions = await agent_service.fetch_actions()
    return [ActionResponse.from_record(action) for action in actions]
