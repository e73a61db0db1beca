"""
에이전트 서비스 - 프롬프트 실행(Action Dispatcher)

1. 액션 기록 생성 (pending) 및 저장
2. executing 전환 후 의도 분류
3. 파라미터 검증 및 액션 종류별 SDK 호출 (종류당 정확히 하나)
4. success(signature) 또는 failed(error)로 전환 후 저장
5. 실패 시 ActionExecutionError로 감싸 호출자에게 다시 발생
"""
from typing import Any, Awaitable, Callable, Dict, List, Optional

from loguru import logger

from app.routes.agent.application.core import IntentClassifier, prepare_params
from app.routes.agent.domain.action import ActionKind, ActionRecord
from app.routes.agent.domain.exceptions import ActionExecutionError
from app.routes.agent.domain.repository import IActionRepository
from packages.solana.nft import NFTOperations
from packages.solana.swap import ISwapProvider
from packages.solana.token import TokenOperations

ActionHandler = Callable[[ActionRecord, Dict[str, Any]], Awaitable[str]]


class AgentService:
    def __init__(
        self,
        action_repo: IActionRepository,
        intent_classifier: IntentClassifier,
        token_ops: TokenOperations,
        nft_ops: NFTOperations,
        swap_provider: ISwapProvider,
    ):
        self.action_repo = action_repo
        self.intent_classifier = intent_classifier
        self.token_ops = token_ops
        self.nft_ops = nft_ops
        self.swap_provider = swap_provider

        self._handlers: Dict[ActionKind, ActionHandler] = {
            ActionKind.SWAP: self._swap,
            ActionKind.LAUNCH: self._launch,
            ActionKind.TRANSFER: self._transfer,
            ActionKind.NFT_MINT: self._nft_mint,
            ActionKind.NFT_TRANSFER: self._nft_transfer,
        }

    # =====================================
    # 1. 프롬프트 실행
    # =====================================

    async def execute_prompt(self, prompt: str) -> ActionRecord:
        action = ActionRecord(prompt=prompt)
        await self.action_repo.save_action(action)

        try:
            action.mark_executing()
            decision = await self.intent_classifier.classify(prompt)
            action.apply_decision(decision)
            logger.info(
                f"Action {action.id}: {decision.action.value} "
                f"(confidence={decision.confidence:.2f}) - {decision.reasoning}"
            )

            kwargs = prepare_params(decision.action, action.params)
            signature = await self._handlers[decision.action](action, kwargs)

            action.mark_success(signature)
            logger.info(f"✅ Action {action.id} succeeded: {signature}")
            return action

        except Exception as e:
            action.mark_failed(str(e))
            logger.error(f"Action {action.id} failed: {str(e)}")
            raise ActionExecutionError(
                action_id=action.id,
                action=action.type.value if action.type else None,
                cause=action.error,
            ) from e

        finally:
            await self.action_repo.save_action(action)

    # =====================================
    # 2. 액션 기록 조회
    # =====================================

    async def fetch_action(self, action_id: str) -> Optional[ActionRecord]:
        return await self.action_repo.fetch_action(action_id)

    async def fetch_actions(self) -> List[ActionRecord]:
        return await self.action_repo.fetch_actions()

    # =====================================
    # 3. 액션 종류별 실행
    # =====================================

    async def _swap(self, action: ActionRecord, kwargs: Dict[str, Any]) -> str:
        return await self.swap_provider.swap(**kwargs)

    async def _launch(self, action: ActionRecord, kwargs: Dict[str, Any]) -> str:
        result = await self.token_ops.launch(**kwargs)
        action.params = {**action.params, "mint": result.mint}
        return result.signature

    async def _transfer(self, action: ActionRecord, kwargs: Dict[str, Any]) -> str:
        return await self.token_ops.transfer(**kwargs)

    async def _nft_mint(self, action: ActionRecord, kwargs: Dict[str, Any]) -> str:
        result = await self.nft_ops.mint(**kwargs)
        action.params = {**action.params, "mint": result.mint}
        return result.signature

    async def _nft_transfer(self, action: ActionRecord, kwargs: Dict[str, Any]) -> str:
        return await self.nft_ops.transfer(**kwargs)
