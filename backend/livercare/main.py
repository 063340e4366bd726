# backend/livercare/main.py
import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .config import Settings, load_settings
from .engine import AssessmentEngine
from .errors import NotFoundError, ValidationError
from .risk import router as risk_router

log = logging.getLogger("uvicorn.error")


def create_app(settings: Optional[Settings] = None, engine: Optional[AssessmentEngine] = None) -> FastAPI:
    settings = settings or load_settings()
    logging.getLogger("livercare").setLevel(settings.log_level)

    app = FastAPI(title=settings.app_name)
    app.state.settings = settings
    app.state.engine = engine or AssessmentEngine()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(ValidationError)
    async def _validation_error(_: Request, exc: ValidationError):
        log.warning(f"[RISK] validation error: {exc}")
        return JSONResponse(status_code=422, content={"detail": exc.errors or [{"field": "record", "message": str(exc)}]})

    @app.exception_handler(NotFoundError)
    async def _not_found(_: Request, exc: NotFoundError):
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.get("/status")
    def status():
        return {"ok": True}

    app.include_router(risk_router)
    return app


app = create_app()
