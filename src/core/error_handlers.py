"""전역 예외 핸들러.

AppException 계열 예외를 잡아 일관된 JSON 응답으로 변환한다.
저장소(DB) 오류는 로그를 남기고 503 STORE_ERROR로 응답한다.
main.py에서 app.add_exception_handler()로 등록한다.
"""

from fastapi import Request
from fastapi.responses import JSONResponse
from loguru import logger
from sqlalchemy.exc import SQLAlchemyError

from core.exceptions import AppException


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error_code": exc.error_code,
            "message": exc.message,
            **exc.extra,
        },
    )


async def store_exception_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.error(f"{request.method} {request.url.path} | store error: {exc}")
    return JSONResponse(
        status_code=503,
        content={
            "error_code": "STORE_ERROR",
            "message": "데이터 저장소 요청에 실패했습니다. 잠시 후 다시 시도해 주세요",
        },
    )
