from abc import ABCMeta, abstractmethod
from typing import List, Optional

from app.routes.agent.domain.action import ActionRecord


class IActionRepository(metaclass=ABCMeta):
    """에이전트 액션 기록 저장소 인터페이스"""

    @abstractmethod
    async def save_action(self, action: ActionRecord) -> None:
        """액션 기록을 저장 (같은 id면 덮어쓰기)"""
        raise NotImplementedError

    @abstractmethod
    async def fetch_action(self, action_id: str) -> Optional[ActionRecord]:
        raise NotImplementedError

    @abstractmethod
    async def fetch_actions(self) -> List[ActionRecord]:
        """전체 액션 기록 조회 (최신순)"""
        raise NotImplementedError
