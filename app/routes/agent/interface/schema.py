from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from app.routes.agent.domain.action import ActionKind, ActionRecord, ActionStatus


class PromptRequest(BaseModel):
    """프롬프트 실행 요청"""

    prompt: str = Field(
        ...,
        description="자연어 명령 (예: 'Swap 1 SOL for USDC')",
        examples=["Launch a token called GrokCoin with 1M supply"],
    )


class ActionResponse(BaseModel):
    """액션 기록 응답 - 대시보드 호환을 위해 camelCase로 직렬화"""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str = Field(..., description="액션 ID (ULID)")
    type: Optional[ActionKind] = Field(None, description="분류된 액션 종류")
    prompt: str = Field(..., description="원본 프롬프트")
    decision: str = Field("", description="분류 근거")
    status: ActionStatus = Field(..., description="pending / executing / success / failed")
    transaction_signature: Optional[str] = Field(None, description="트랜잭션 서명 (성공 시)")
    error: Optional[str] = Field(None, description="에러 메시지 (실패 시)")
    timestamp: int = Field(..., description="생성 시각 (epoch ms)")
    params: Dict[str, Any] = Field(default_factory=dict, description="액션 파라미터")

    @classmethod
    def from_record(cls, record: ActionRecord) -> "ActionResponse":
        return cls(
            id=record.id,
            type=record.type,
            prompt=record.prompt,
            decision=record.decision,
            status=record.status,
            transaction_signature=record.transaction_signature,
            error=record.error,
            timestamp=record.timestamp,
            params=record.params,
        )
