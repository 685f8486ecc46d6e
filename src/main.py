import uvicorn
from fastapi import FastAPI
from sqlalchemy.exc import SQLAlchemyError

from core.config import settings
from core.error_handlers import app_exception_handler, store_exception_handler
from core.exceptions import AppException
from core.lifespan import lifespan
from core.middleware import RequestLoggingMiddleware
from router.admin_router import router as admin_router
from router.auth_router import router as auth_router
from router.job_router import router as job_router
from router.summary_router import router as summary_router
from router.time_record_router import router as time_record_router
import model.user  # noqa: F401  (테이블 등록)
import model.job  # noqa: F401  (테이블 등록)
import model.time_record  # noqa: F401  (테이블 등록)
import model.costcenter  # noqa: F401  (테이블 등록)

app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="기계 작업 시작/종료 관리 + 근무 시간 기록 + 인건비 요약",
    lifespan=lifespan,
)

app.add_middleware(RequestLoggingMiddleware)
app.add_exception_handler(AppException, app_exception_handler)
app.add_exception_handler(SQLAlchemyError, store_exception_handler)

app.include_router(auth_router)
app.include_router(job_router)
app.include_router(time_record_router)
app.include_router(summary_router)
app.include_router(admin_router)


@app.get("/health")
async def health():
    return {
        "status": "ok",
        "app": settings.APP_NAME,
        "version": settings.APP_VERSION,
    }


if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
        access_log=False,
    )
