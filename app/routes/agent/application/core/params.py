"""
액션 종류별 파라미터 검증 및 SDK 호출 인자 변환

Decision.params는 LLM 응답 또는 키워드 추출 결과이므로 타입이 느슨합니다.
여기서 검증한 뒤 TokenOperations / NFTOperations / ISwapProvider 인자(snake_case)로 변환합니다.
"""
from typing import Any, Callable, Dict, Mapping

from solders.pubkey import Pubkey

from app.routes.agent.domain.action import ActionKind
from app.routes.agent.domain.exceptions import InvalidParamsError
from packages.solana.constants import DEFAULT_DECIMALS, DEFAULT_SLIPPAGE_BPS


def is_valid_address(address: Any) -> bool:
    if not isinstance(address, str) or not address:
        return False
    try:
        Pubkey.from_string(address)
    except ValueError:
        return False
    return True


def _require_address(action: ActionKind, params: Mapping[str, Any], key: str) -> str:
    value = params.get(key)
    if not is_valid_address(value):
        raise InvalidParamsError(action.value, f"'{key}' must be a valid Solana address")
    return value


def _require_positive_number(action: ActionKind, params: Mapping[str, Any], key: str) -> float:
    value = params.get(key)
    if isinstance(value, bool):
        value = None
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise InvalidParamsError(action.value, f"'{key}' must be a number")
    if number <= 0:
        raise InvalidParamsError(action.value, f"'{key}' must be greater than 0")
    return number


def _require_text(action: ActionKind, params: Mapping[str, Any], key: str) -> str:
    value = params.get(key)
    if not isinstance(value, str) or not value.strip():
        raise InvalidParamsError(action.value, f"'{key}' is required")
    return value.strip()


def _optional_int(action: ActionKind, params: Mapping[str, Any], key: str, default: int) -> int:
    value = params.get(key)
    if value is None:
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        raise InvalidParamsError(action.value, f"'{key}' must be an integer")


def prepare_swap(params: Mapping[str, Any]) -> Dict[str, Any]:
    action = ActionKind.SWAP
    return {
        "input_mint": _require_address(action, params, "inputMint"),
        "output_mint": _require_address(action, params, "outputMint"),
        "amount": _require_positive_number(action, params, "amount"),
        "slippage_bps": _optional_int(action, params, "slippageBps", DEFAULT_SLIPPAGE_BPS),
    }


def prepare_launch(params: Mapping[str, Any]) -> Dict[str, Any]:
    action = ActionKind.LAUNCH
    decimals = _optional_int(action, params, "decimals", DEFAULT_DECIMALS)
    if not 0 <= decimals <= 9:
        raise InvalidParamsError(action.value, "'decimals' must be between 0 and 9")

    return {
        "name": _require_text(action, params, "name"),
        "symbol": _require_text(action, params, "symbol"),
        "initial_supply": _require_positive_number(action, params, "initialSupply"),
        "decimals": decimals,
    }


def prepare_transfer(params: Mapping[str, Any]) -> Dict[str, Any]:
    action = ActionKind.TRANSFER
    kwargs = {
        "recipient": _require_address(action, params, "recipient"),
        "amount": _require_positive_number(action, params, "amount"),
        "token_mint": None,
    }
    if params.get("tokenMint"):
        kwargs["token_mint"] = _require_address(action, params, "tokenMint")
    return kwargs


def prepare_nft_mint(params: Mapping[str, Any]) -> Dict[str, Any]:
    action = ActionKind.NFT_MINT
    return {
        "name": _require_text(action, params, "name"),
        "symbol": _require_text(action, params, "symbol"),
        "image_uri": _require_text(action, params, "imageUri"),
        "description": params.get("description"),
    }


def prepare_nft_transfer(params: Mapping[str, Any]) -> Dict[str, Any]:
    action = ActionKind.NFT_TRANSFER
    return {
        "mint_address": _require_address(action, params, "mintAddress"),
        "recipient": _require_address(action, params, "recipient"),
    }


PARAM_PREPARERS: Dict[ActionKind, Callable[[Mapping[str, Any]], Dict[str, Any]]] = {
    ActionKind.SWAP: prepare_swap,
    ActionKind.LAUNCH: prepare_launch,
    ActionKind.TRANSFER: prepare_transfer,
    ActionKind.NFT_MINT: prepare_nft_mint,
    ActionKind.NFT_TRANSFER: prepare_nft_transfer,
}


def prepare_params(action: ActionKind, params: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Raises:
        InvalidParamsError: 필수 파라미터가 없거나 형식이 잘못된 경우
    """
    return PARAM_PREPARERS[action](params)
