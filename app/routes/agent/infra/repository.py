from typing import List, MutableMapping, Optional

from loguru import logger

from app.routes.agent.domain.action import ActionRecord, ActionStatus
from app.routes.agent.domain.repository import IActionRepository

TERMINAL_STATUSES = (ActionStatus.SUCCESS, ActionStatus.FAILED)


class ActionRepository(IActionRepository):
    """
    프로세스 메모리 기반 액션 저장소

    - store: 주입 가능한 backing mapping (기본값은 새 dict)
    - max_records: 0이면 무제한, 그 외에는 가장 오래된 완료(success/failed) 기록부터 제거
    """

    def __init__(
        self,
        store: Optional[MutableMapping[str, ActionRecord]] = None,
        max_records: int = 0,
    ):
        self.store = store if store is not None else {}
        self.max_records = max_records

    async def save_action(self, action: ActionRecord) -> None:
        self.store[action.id] = action
        self._evict_overflow()

    async def fetch_action(self, action_id: str) -> Optional[ActionRecord]:
        return self.store.get(action_id)

    async def fetch_actions(self) -> List[ActionRecord]:
        # 같은 밀리초에 생성된 기록은 나중에 저장된 것이 먼저 오도록 역순에서 안정 정렬
        return sorted(
            reversed(list(self.store.values())), key=lambda a: a.timestamp, reverse=True
        )

    def _evict_overflow(self) -> None:
        if self.max_records <= 0:
            return

        overflow = len(self.store) - self.max_records
        if overflow <= 0:
            return

        # 진행 중인 액션은 제거하지 않음
        candidates = sorted(
            (a for a in self.store.values() if a.status in TERMINAL_STATUSES),
            key=lambda a: a.timestamp,
        )
        for action in candidates[:overflow]:
            del self.store[action.id]
            logger.debug(f"Evicted action {action.id} (max_records={self.max_records})")
