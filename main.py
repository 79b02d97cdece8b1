from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse

from db_mongo import MongoContext
from settings import Settings, get_settings
from server.src.modules.errors import GameError
from server.src.modules.game_api import router as game_router
from server.src.modules.logging_helpers import logger


# ---------- Lifespan (startup/shutdown) ----------
@asynccontextmanager
async def lifespan(app: FastAPI):
    ctx = MongoContext.from_settings(app.state.settings).open()
    ctx.ensure_indexes()
    app.state.mongo = ctx
    logger.info("Connected to MongoDB (%s)", ctx.db_name)
    try:
        yield
    finally:
        ctx.close()
        logger.info("MongoDB connection closed")


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    app = FastAPI(lifespan=lifespan)
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origin_list(),
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(GameError)
    async def game_error_handler(request: Request, exc: GameError):
        if exc.status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        return JSONResponse({"error": exc.message}, status_code=exc.status_code)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        parts = []
        for err in exc.errors():
            loc = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
            parts.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
        return JSONResponse({"error": "Invalid request: " + "; ".join(parts)}, status_code=400)

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception):
        logger.exception("%s %s crashed", request.method, request.url.path)
        return JSONResponse(
            {"error": f"Server error while handling {request.method} {request.url.path}: {type(exc).__name__}"},
            status_code=500,
        )

    @app.get("/", include_in_schema=False)
    def root():
        return PlainTextResponse("Game backend server")

    app.include_router(game_router)
    return app


app = create_app()


if __name__ == "__main__":
    settings = get_settings()
    uvicorn.run("main:app", host="0.0.0.0", port=settings.port)
