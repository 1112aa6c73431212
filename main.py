from contextlib import asynccontextmanager

import structlog
import uvicorn
from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.exception_handlers import http_exception_handler
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session
from starlette.exceptions import HTTPException as StarletteHTTPException

from config import CORS_ORIGINS, PORT
from database import check_connection, get_session, get_session_context, init_db
from errors import AppError, ConnectivityError, NotFoundError
from logging_config import RequestIdMiddleware, setup_logging
from routers import auth, duty_checks, faults, reports, sites, stats, users
from services import UserService

setup_logging()
logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    with get_session_context() as db:
        UserService.ensure_admin_user(db)
    logger.info("startup_complete")
    yield


# App instance
app = FastAPI(title="Arıza Takip API", lifespan=lifespan)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(RequestIdMiddleware)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    logger.warning("request_failed", path=request.url.path, code=exc.code, status=exc.status_code)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.get("/api/health")
def health(db: Session = Depends(get_session)):
    """Pre-flight reachability probe for clients."""
    if not check_connection(db.get_bind()):
        raise ConnectivityError("unavailable")
    return {"status": "ok"}


app.include_router(auth.router)
app.include_router(faults.router)
app.include_router(sites.router)
app.include_router(users.router)
app.include_router(stats.router)
app.include_router(reports.router)
app.include_router(duty_checks.router)


# 404 Fallback
@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code == 404:
        return JSONResponse(status_code=404, content=NotFoundError().to_dict())
    return await http_exception_handler(request, exc)


if __name__ == "__main__":
    uvicorn.run("main:app", host="0.0.0.0", port=PORT, reload=True)
