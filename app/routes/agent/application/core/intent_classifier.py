"""
의도 분류 서비스 - 자연어 프롬프트를 Decision(action + params)으로 변환

AI 백엔드가 설정되어 있으면 chat completions 응답의 JSON을 사용하고,
설정되지 않았거나 호출/파싱/검증이 실패하면 키워드 규칙으로 대체합니다.
"""
import json
import re
from typing import Any, Dict

from loguru import logger

from app.routes.agent.application.core.keyword_rules import match_keyword_rules
from app.routes.agent.domain.action import ActionKind, Decision
from app.routes.agent.domain.exceptions import AIDecisionError, InvalidActionError
from packages.llm.client import ChatCompletionClient

JSON_OBJECT_PATTERN = re.compile(r"\{[\s\S]*\}")

SYSTEM_PROMPT = """You are an autonomous Solana AI agent. Analyze user prompts and decide on blockchain actions.

Available actions:
1. swap - Swap tokens (e.g., "swap 1 SOL for USDC", "swap SOL to USDC if price > 0.5")
2. launch - Launch a new token (e.g., "launch token called GrokCoin with 1M supply")
3. transfer - Transfer tokens or SOL (e.g., "send 0.5 SOL to address...")
4. nft_mint - Mint an NFT (e.g., "mint NFT with name X and image Y")
5. nft_transfer - Transfer an NFT (e.g., "send NFT to address...")

Respond with a JSON object containing:
- action: one of the action types above
- confidence: 0-1 score
- reasoning: brief explanation
- params: object with action-specific parameters
  - swap: inputMint, outputMint, amount
  - launch: name, symbol, initialSupply
  - transfer: recipient, amount, tokenMint (omit for SOL)
  - nft_mint: name, symbol, imageUri
  - nft_transfer: mintAddress, recipient

Example for "swap 1 SOL for USDC":
{
  "action": "swap",
  "confidence": 0.95,
  "reasoning": "Clear swap request with specified amounts",
  "params": {
    "inputMint": "So11111111111111111111111111111111111111112",
    "outputMint": "EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v",
    "amount": 1.0
  }
}"""


def parse_decision(content: str) -> Decision:
    """
    LLM 응답에서 첫 '{'부터 마지막 '}'까지를 JSON으로 파싱하여 Decision으로 변환합니다.

    Raises:
        AIDecisionError: JSON 객체가 없거나 파싱할 수 없는 경우
        InvalidActionError: action이 다섯 가지 종류가 아닌 경우
    """
    match = JSON_OBJECT_PATTERN.search(content)
    if not match:
        raise AIDecisionError("No JSON object in AI response")

    try:
        raw: Dict[str, Any] = json.loads(match.group(0))
    except json.JSONDecodeError as e:
        raise AIDecisionError(f"Malformed JSON in AI response: {e}") from e

    if not isinstance(raw, dict):
        raise AIDecisionError("AI response is not a JSON object")

    try:
        action = ActionKind(raw.get("action"))
    except ValueError:
        raise InvalidActionError(raw.get("action"))

    confidence = raw.get("confidence")
    try:
        confidence = min(max(float(confidence), 0.0), 1.0)
    except (TypeError, ValueError):
        confidence = 0.5

    params = raw.get("params")
    return Decision(
        action=action,
        confidence=confidence,
        reasoning=raw.get("reasoning") or "AI decision",
        params=params if isinstance(params, dict) else {},
    )


class IntentClassifier:
    def __init__(self, llm_client: ChatCompletionClient, temperature: float = 0.7):
        self.llm_client = llm_client
        self.temperature = temperature

    async def classify(self, prompt: str) -> Decision:
        """프롬프트를 Decision으로 분류합니다. 실패하지 않으며, 최악의 경우 낮은 신뢰도의 swap을 반환합니다."""
        if not self.llm_client.is_configured:
            return match_keyword_rules(prompt)

        try:
            content = await self.llm_client.complete(
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": prompt},
                ],
                temperature=self.temperature,
            )
            decision = parse_decision(content)
        except Exception as e:
            logger.warning(f"AI decision error, falling back to keyword rules: {str(e)}")
            return match_keyword_rules(prompt)

        logger.info(
            f"AI decision: {decision.action.value} (confidence={decision.confidence:.2f})"
        )
        return decision
