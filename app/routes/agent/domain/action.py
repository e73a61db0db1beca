from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional

import pendulum
from ulid import ULID

from app.routes.agent.domain.exceptions import InvalidStatusTransitionError


class ActionKind(str, Enum):
    SWAP = "swap"
    LAUNCH = "launch"
    TRANSFER = "transfer"
    NFT_MINT = "nft_mint"
    NFT_TRANSFER = "nft_transfer"


class ActionStatus(str, Enum):
    PENDING = "pending"
    EXECUTING = "executing"
    SUCCESS = "success"
    FAILED = "failed"


# pending -> executing -> success | failed
ALLOWED_TRANSITIONS = {
    ActionStatus.PENDING: {ActionStatus.EXECUTING},
    ActionStatus.EXECUTING: {ActionStatus.SUCCESS, ActionStatus.FAILED},
    ActionStatus.SUCCESS: set(),
    ActionStatus.FAILED: set(),
}


def _now_ms() -> int:
    return int(pendulum.now("UTC").timestamp() * 1000)


@dataclass
class Decision:
    action: ActionKind
    confidence: float
    reasoning: str
    params: Dict[str, Any] = field(default_factory=dict)


@dataclass
class ActionRecord:
    prompt: str
    id: str = field(default_factory=lambda: str(ULID()))
    type: Optional[ActionKind] = None
    decision: str = ""
    status: ActionStatus = ActionStatus.PENDING
    transaction_signature: Optional[str] = None
    error: Optional[str] = None
    timestamp: int = field(default_factory=_now_ms)
    params: Dict[str, Any] = field(default_factory=dict)

    def _transition(self, status: ActionStatus) -> None:
        if status not in ALLOWED_TRANSITIONS[self.status]:
            raise InvalidStatusTransitionError(self.status.value, status.value)
        self.status = status

    def mark_executing(self) -> None:
        self._transition(ActionStatus.EXECUTING)

    def apply_decision(self, decision: Decision) -> None:
        self.type = decision.action
        self.decision = decision.reasoning
        self.params = dict(decision.params)

    def mark_success(self, signature: str) -> None:
        self._transition(ActionStatus.SUCCESS)
        self.transaction_signature = signature
        self.error = None

    def mark_failed(self, error: str) -> None:
        self._transition(ActionStatus.FAILED)
        self.error = error or "Unknown error"
        self.transaction_signature = None
