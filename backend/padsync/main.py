import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from .shared.config import settings
from .shared.db import init_db
from .auth.router import router as auth_router
from .heartbeat.hub import hub
from .heartbeat.router import router as heartbeat_router
from .locks.router import router as locks_router
from .pads.heartbeat import receive_pads
from .pads.router import router as pads_router

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("padsync")


@asynccontextmanager
async def lifespan(app: FastAPI):
    # dev 에서는 alembic 없이 바로 테이블 생성
    if settings.APP_ENV == "dev":
        init_db()
    yield


app = FastAPI(
    title="Pad:Sync API",
    version="0.1.0",
    openapi_url=f"{settings.API_PREFIX}/openapi.json",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# 저장소 장애: 클라이언트는 "Request failed" 로 보고 기존 상태 유지
@app.exception_handler(SQLAlchemyError)
async def storage_unavailable(request: Request, exc: SQLAlchemyError):
    logger.error("storage error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(status_code=503, content={"success": False, "message": "Request failed"})


@app.get(f"{settings.API_PREFIX}/healthz")
def healthz():
    return {"status": "ok", "app": "Pad:Sync"}


hub.register(receive_pads)

app.include_router(auth_router)
app.include_router(pads_router)
app.include_router(locks_router)
app.include_router(heartbeat_router)
