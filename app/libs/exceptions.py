from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from loguru import logger
from starlette.responses import JSONResponse

from app.routes.agent.domain.exceptions import ActionExecutionError

DEFAULT_ERROR_MESSAGE = "Response Error!"


def _build_error_content(status_code: int, detail: str | None = None) -> dict:
    content = {
        "status_code": status_code,
        "message": DEFAULT_ERROR_MESSAGE,
    }
    if detail is not None:
        content["data"] = detail
    return content


# ==================================================
# NOTE: 400 Bad Request 예외
class BadRequestException(HTTPException):
    def __init__(
        self,
        detail: str = "Invalid request data",
        status_code: int = status.HTTP_400_BAD_REQUEST,
        headers: dict = None,
    ):
        super().__init__(status_code=status_code, detail=detail, headers=headers)


# ==================================================
# NOTE: 404 Not Found 예외
class NotFoundException(HTTPException):
    def __init__(self, detail: str = "Resource not found", headers: dict = None):
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND, detail=detail, headers=headers
        )


async def http_exception_handler(request: Request, exc: HTTPException):
    response_content = _build_error_content(exc.status_code, detail=str(exc.detail))

    return JSONResponse(
        status_code=exc.status_code,
        content=response_content,
        headers=exc.headers,
    )


# ==================================================
# NOTE: 요청 본문 검증 실패 (prompt 누락, 문자열이 아님 등)는 400으로 응답
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = "; ".join(
        f"{'.'.join(str(loc) for loc in error.get('loc', []))}: {error.get('msg')}"
        for error in exc.errors()
    )
    response_content = _build_error_content(status.HTTP_400_BAD_REQUEST, detail=errors)

    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=response_content,
    )


# ==================================================
# NOTE: 액션 실행 실패 (액션은 이미 failed로 기록됨)
async def action_execution_exception_handler(request: Request, exc: ActionExecutionError):
    response_content = _build_error_content(
        status.HTTP_500_INTERNAL_SERVER_ERROR, detail=exc.message
    )
    response_content["action_id"] = exc.action_id

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=response_content,
    )


# ==================================================
# NOTE: 500 Internal Server Error 전역 핸들러
async def internal_server_error_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    response_content = _build_error_content(
        status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc)
    )

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=response_content
    )


# ==================================================
def add_exception_handlers(app: FastAPI):
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(ActionExecutionError, action_execution_exception_handler)
    app.add_exception_handler(Exception, internal_server_error_handler)
