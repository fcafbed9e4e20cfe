"""
Main FastAPI application
"""
import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse
from fastapi.staticfiles import StaticFiles

from backend.config import get_settings
from backend.database import engine, create_tables
from backend.api import auth, model, stats, servings, food, cart, events, feedback, partnerships, chat
from backend.services.archive_pipeline import run_daily_job
from backend.services.document_store import get_document_store
from backend.services.scheduler import DailyJobScheduler

settings = get_settings()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    store = get_document_store()
    store.ensure_dirs()
    logger.info(f"Documents in {store.data_dir}, mirrored to {store.public_dir}")

    await create_tables()
    logger.info("Database tables created")

    scheduler = None
    if settings.ARCHIVE_SCHEDULER_ENABLED:
        scheduler = DailyJobScheduler(
            lambda: run_daily_job(get_document_store()),
            hour=settings.ARCHIVE_HOUR,
            minute=settings.ARCHIVE_MINUTE,
            name="archive-and-retrain",
        )
        scheduler.start()
    app.state.scheduler = scheduler

    yield

    if scheduler is not None:
        await scheduler.stop()
    await engine.dispose()

app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    debug=settings.DEBUG,
    lifespan=lifespan,
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.FRONTEND_URL],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["Content-Type", "Authorization"],
)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


# Include routers
app.include_router(auth.router, prefix="/api/v1/auth", tags=["Authentication"])
app.include_router(model.router, prefix="/api", tags=["Model"])
app.include_router(stats.router, prefix="/api", tags=["Stats"])
app.include_router(servings.router, prefix="/api", tags=["Servings"])
app.include_router(food.router, prefix="/api", tags=["Food"])
app.include_router(cart.router, prefix="/api", tags=["Cart & Requests"])
app.include_router(events.router, prefix="/api", tags=["Events"])
app.include_router(feedback.router, prefix="/api", tags=["Feedback"])
app.include_router(partnerships.router, prefix="/api", tags=["Partnerships"])
app.include_router(chat.router, prefix="/api", tags=["Chat"])


@app.get("/health")
async def health_check():
    return {"status": "healthy"}


# Public mirror of the JSON documents, read directly by the frontend
app.mount("/data", StaticFiles(directory=settings.PUBLIC_DATA_DIR, check_dir=False), name="data")


@app.get("/{full_path:path}", include_in_schema=False)
async def serve_frontend(full_path: str):
    """Built frontend assets, with index.html as the SPA fallback"""
    if full_path == "api" or full_path.startswith("api/"):
        raise HTTPException(status_code=404, detail="Not Found")

    build_dir = Path(settings.FRONTEND_BUILD_DIR).resolve()
    if full_path:
        candidate = (build_dir / full_path).resolve()
        if candidate.is_file() and build_dir in candidate.parents:
            return FileResponse(candidate)

    index = build_dir / "index.html"
    if index.is_file():
        return FileResponse(index)
    return {
        "app": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "status": "running"
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "backend.main:app",
        host="0.0.0.0",
        port=4000,
        reload=settings.DEBUG
    )
