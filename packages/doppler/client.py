import json
import os

_MISSING = object()


def _load_doppler_secrets() -> dict | None:
    raw = os.environ.get("DOPPLER_SECRETS")
    if raw is None:
        return None
    return json.loads(raw)


def get_secret(key, default=_MISSING):
    """Doppler secrets에서 환경변수를 가져옵니다.

    DOPPLER_SECRETS(JSON)가 설정되어 있으면 우선 사용하고, 없으면 일반 환경변수를 읽습니다.

    Args:
        key: 환경변수 키
        default: 키가 없을 때 반환할 기본값 (None도 허용)

    Returns:
        환경변수 값 또는 기본값

    Raises:
        KeyError: 키가 없고 기본값도 주어지지 않은 경우
    """
    try:
        secrets = _load_doppler_secrets()
    except json.JSONDecodeError:
        if default is _MISSING:
            raise
        return default

    source = secrets if secrets is not None else os.environ
    if key in source and source[key] != "":
        return source[key]

    if default is _MISSING:
        raise KeyError(key)
    return default


def get_int_secret(key, default: int = 0) -> int:
    value = get_secret(key, None)
    if value is None:
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        return default
