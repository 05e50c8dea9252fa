from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from prometheus_fastapi_instrumentator import Instrumentator
from sqlalchemy.exc import IntegrityError
from starlette.requests import Request

from attendguard.api.v1.router import api_router
from attendguard.core.logging import setup_logging
from attendguard.db.init_db import init_db
from attendguard.db.session import engine
from attendguard.services.errors import build_app_error

setup_logging()

api = FastAPI(
    title="Attendance Integrity API",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    swagger_ui_parameters={"displayRequestDuration": True, "persistAuthorization": True},
)

api.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # ajuste para domínios específicos em produção
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# métricas /metrics (Prometheus)
Instrumentator().instrument(api).expose(api, include_in_schema=False, should_gzip=True)

api.include_router(api_router, prefix="/api/v1")

@api.get("/healthz", tags=["health"])
def healthz():
    return {"status": "ok"}

@api.on_event("startup")
def startup():
    init_db(engine)

@api.exception_handler(IntegrityError)
def handle_integrity_error(request: Request, exc: IntegrityError):
    return JSONResponse(
        status_code=409,
        content={"code":"UNIQUE_VIOLATION","message":"Duplicate record.","details":str(getattr(exc, "orig", exc))}
    )

@api.exception_handler(Exception)
def handle_unexpected(request: Request, exc: Exception):
    # mesmo formato de AppError usado pelo pipeline
    error = build_app_error(exc, context={"path": request.url.path})
    return JSONResponse(status_code=500, content=error.model_dump(mode="json"))
