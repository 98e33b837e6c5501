"""
FastAPI Backend

API server for the portfolio assistant chatbot.
"""

# Load .env first, before any imports that read settings.
from pathlib import Path
from dotenv import load_dotenv

_project_root = Path(__file__).resolve().parent.parent
_env_file = _project_root / ".env"
if _env_file.exists():
    load_dotenv(dotenv_path=_env_file)
else:
    load_dotenv()

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from backend.app.api.admin import router as admin_router
from backend.app.api.chatbot import router as chatbot_router
from backend.app.api.platform import router as platform_router
from backend.app.brain.service import ChatbotRouter
from backend.app.core.config import get_settings
from backend.app.observability.logging import log_event, setup_logging


def create_app(chatbot: Optional[ChatbotRouter] = None) -> FastAPI:
    settings = get_settings()
    setup_logging(settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        current = app.state.chatbot
        if current is not None:
            current.close()

    app = FastAPI(title=settings.app_name, debug=settings.debug, lifespan=lifespan)
    app.state.chatbot = chatbot
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(chatbot_router)
    app.include_router(admin_router)
    app.include_router(platform_router)

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        classification = type(exc).__name__
        log_event(
            "unhandled_exception",
            level="error",
            path=request.url.path,
            error_class=classification,
            error=str(exc),
        )
        return JSONResponse(status_code=500, content={"error": f"Internal error: {classification}"})

    @app.get("/health")
    async def health():
        current = app.state.chatbot
        return {
            "status": "ok",
            "app_env": settings.app_env,
            "content_store": settings.content_store,
            "learning_enabled": settings.enable_learning,
            "router_ready": current is not None,
        }

    log_event("app_created", app_env=settings.app_env, content_store=settings.content_store)
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
