"""
키워드 규칙 기반 의도 분류 (AI 백엔드가 없거나 실패했을 때 사용)

규칙은 (predicate, action, confidence, reasoning, extractor) 테이블이며 위에서부터 순서대로 평가합니다.
predicate는 소문자로 변환된 프롬프트를, extractor는 원본 프롬프트를 받습니다.
"""
import re
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Sequence

from app.routes.agent.domain.action import ActionKind, Decision
from packages.solana.constants import SOL_MINT, TOKEN_MINTS, USDC_MINT

KEYWORD_CONFIDENCE = 0.7
DEFAULT_CONFIDENCE = 0.3

DEFAULT_SWAP_AMOUNT = 1.0
DEFAULT_TRANSFER_AMOUNT = 0.1
DEFAULT_INITIAL_SUPPLY = 1_000_000
DEFAULT_TOKEN_NAME = "NewToken"
DEFAULT_TOKEN_SYMBOL = "NEW"
DEFAULT_NFT_NAME = "AI Generated NFT"
DEFAULT_NFT_SYMBOL = "AI"
DEFAULT_NFT_IMAGE_URI = "https://via.placeholder.com/500"

SUPPLY_MULTIPLIERS = {"K": 1_000, "M": 1_000_000, "B": 1_000_000_000}

_ADDRESS = r"[1-9A-HJ-NP-Za-km-z]{32,44}"

ADDRESS_PATTERN = re.compile(rf"\b{_ADDRESS}\b")
SWAP_AMOUNT_PATTERN = re.compile(r"(\d+\.?\d*)\s*(SOL|USDC|USDT)\b", re.IGNORECASE)
SWAP_OUTPUT_PATTERN = re.compile(r"\b(?:for|to|into)\s+(SOL|USDC|USDT)\b", re.IGNORECASE)
TOKEN_NAME_PATTERN = re.compile(r"\b(?:called|named|name)\s+(\w+)", re.IGNORECASE)
TOKEN_SYMBOL_PATTERN = re.compile(r"\b(?:symbol|ticker)\s+\$?(\w+)", re.IGNORECASE)
SUPPLY_PATTERN = re.compile(r"(\d+(?:\.\d+)?)\s*([KMB])?\s*(?:supply|tokens?)\b", re.IGNORECASE)
TRANSFER_AMOUNT_PATTERN = re.compile(r"(\d+\.?\d*)\s*(SOL|USDC|USDT)?\b", re.IGNORECASE)
NFT_NAME_PATTERN = re.compile(
    r"\b(?:called|named|name)\s+(.+?)(?=\s*,|\s+(?:and\s+|with\s+)?(?:image|uri)\b|\s*$)",
    re.IGNORECASE,
)
NFT_IMAGE_PATTERN = re.compile(r"\b(?:image|uri)\s+(\S+)", re.IGNORECASE)
NFT_MINT_ADDRESS_PATTERN = re.compile(rf"\b(?:mint|nft)\s+({_ADDRESS})\b", re.IGNORECASE)
RECIPIENT_PATTERN = re.compile(rf"\bto\s+({_ADDRESS})\b", re.IGNORECASE)


# ==================================================
# NOTE: 파라미터 추출


def extract_swap_params(prompt: str) -> Dict[str, Any]:
    amount_match = SWAP_AMOUNT_PATTERN.search(prompt)
    output_match = SWAP_OUTPUT_PATTERN.search(prompt)

    input_symbol = amount_match.group(2).upper() if amount_match else "SOL"
    if output_match and output_match.group(1).upper() != input_symbol:
        output_mint = TOKEN_MINTS[output_match.group(1).upper()]
    else:
        output_mint = USDC_MINT if input_symbol != "USDC" else SOL_MINT

    return {
        "inputMint": TOKEN_MINTS[input_symbol],
        "outputMint": output_mint,
        "amount": float(amount_match.group(1)) if amount_match else DEFAULT_SWAP_AMOUNT,
    }


def parse_supply(value: str, suffix: Optional[str]) -> int:
    supply = float(value)
    if suffix:
        supply *= SUPPLY_MULTIPLIERS[suffix.upper()]
    return int(supply)


def extract_launch_params(prompt: str) -> Dict[str, Any]:
    name_match = TOKEN_NAME_PATTERN.search(prompt)
    symbol_match = TOKEN_SYMBOL_PATTERN.search(prompt)
    supply_match = SUPPLY_PATTERN.search(prompt)

    name = name_match.group(1) if name_match else DEFAULT_TOKEN_NAME
    if symbol_match:
        symbol = symbol_match.group(1).upper()
    elif name_match:
        symbol = name[:4].upper()
    else:
        symbol = DEFAULT_TOKEN_SYMBOL

    return {
        "name": name,
        "symbol": symbol,
        "initialSupply": (
            parse_supply(supply_match.group(1), supply_match.group(2))
            if supply_match
            else DEFAULT_INITIAL_SUPPLY
        ),
    }


def extract_transfer_params(prompt: str) -> Dict[str, Any]:
    recipient = _find_recipient(prompt)
    # 주소 안의 숫자를 금액으로 오인하지 않도록 주소를 제거한 뒤 금액을 찾습니다.
    amount_match = TRANSFER_AMOUNT_PATTERN.search(ADDRESS_PATTERN.sub(" ", prompt))

    params: Dict[str, Any] = {
        "amount": float(amount_match.group(1)) if amount_match else DEFAULT_TRANSFER_AMOUNT,
        "recipient": recipient,
    }
    if amount_match and amount_match.group(2) and amount_match.group(2).upper() != "SOL":
        params["tokenMint"] = TOKEN_MINTS[amount_match.group(2).upper()]
    return params


def extract_nft_mint_params(prompt: str) -> Dict[str, Any]:
    name_match = NFT_NAME_PATTERN.search(prompt)
    image_match = NFT_IMAGE_PATTERN.search(prompt)

    return {
        "name": name_match.group(1).strip() if name_match else DEFAULT_NFT_NAME,
        "symbol": DEFAULT_NFT_SYMBOL,
        "imageUri": image_match.group(1) if image_match else DEFAULT_NFT_IMAGE_URI,
    }


def extract_nft_transfer_params(prompt: str) -> Dict[str, Any]:
    mint_match = NFT_MINT_ADDRESS_PATTERN.search(prompt)
    mint_address = mint_match.group(1) if mint_match else ""

    return {
        "mintAddress": mint_address,
        "recipient": _find_recipient(prompt, exclude=mint_address),
    }


def _find_recipient(prompt: str, exclude: str = "") -> str:
    to_match = RECIPIENT_PATTERN.search(prompt)
    if to_match and to_match.group(1) != exclude:
        return to_match.group(1)

    for address in ADDRESS_PATTERN.findall(prompt):
        if address != exclude:
            return address
    return ""


def extract_nothing(prompt: str) -> Dict[str, Any]:
    return {}


# ==================================================
# NOTE: 규칙 테이블


def contains_any(*keywords: str) -> Callable[[str], bool]:
    return lambda text: any(keyword in text for keyword in keywords)


def contains_all(*keywords: str) -> Callable[[str], bool]:
    return lambda text: all(keyword in text for keyword in keywords)


@dataclass(frozen=True)
class KeywordRule:
    name: str
    predicate: Callable[[str], bool]
    action: ActionKind
    reasoning: str
    extractor: Callable[[str], Dict[str, Any]]
    confidence: float = KEYWORD_CONFIDENCE

    def matches(self, lowered_prompt: str) -> bool:
        return self.predicate(lowered_prompt)

    def decide(self, prompt: str) -> Decision:
        return Decision(
            action=self.action,
            confidence=self.confidence,
            reasoning=self.reasoning,
            params=self.extractor(prompt),
        )


_is_transfer = contains_any("transfer", "send")

KEYWORD_RULES: Sequence[KeywordRule] = (
    KeywordRule(
        name="swap",
        predicate=contains_any("swap", "exchange"),
        action=ActionKind.SWAP,
        reasoning="Detected swap keyword in prompt",
        extractor=extract_swap_params,
    ),
    KeywordRule(
        name="launch",
        predicate=contains_any("launch", "create token"),
        action=ActionKind.LAUNCH,
        reasoning="Detected token launch keyword",
        extractor=extract_launch_params,
    ),
    KeywordRule(
        name="nft_transfer",
        predicate=lambda text: _is_transfer(text) and "nft" in text,
        action=ActionKind.NFT_TRANSFER,
        reasoning="Detected NFT transfer",
        extractor=extract_nft_transfer_params,
    ),
    KeywordRule(
        name="transfer",
        predicate=_is_transfer,
        action=ActionKind.TRANSFER,
        reasoning="Detected transfer keyword",
        extractor=extract_transfer_params,
    ),
    KeywordRule(
        name="nft_mint",
        predicate=contains_all("mint", "nft"),
        action=ActionKind.NFT_MINT,
        reasoning="Detected NFT mint keyword",
        extractor=extract_nft_mint_params,
    ),
)

DEFAULT_RULE = KeywordRule(
    name="default",
    predicate=lambda text: True,
    action=ActionKind.SWAP,
    reasoning="Unclear prompt, defaulting to swap",
    extractor=extract_nothing,
    confidence=DEFAULT_CONFIDENCE,
)


def match_keyword_rules(
    prompt: str, rules: Sequence[KeywordRule] = KEYWORD_RULES
) -> Decision:
    lowered = prompt.lower()
    for rule in rules:
        if rule.matches(lowered):
            return rule.decide(prompt)
    return DEFAULT_RULE.decide(prompt)
