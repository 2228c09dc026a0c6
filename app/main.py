import asyncio
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from app.config import get_settings
from app.core.ai import sweep_ai_caches
from app.routers import ai

settings = get_settings()
logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


async def ai_cache_sweeper(interval_seconds: int) -> None:
    """Periodically drop expired AI cache entries (optional; stale entries are ignored anyway)."""
    while True:
        await asyncio.sleep(interval_seconds)
        try:
            sweep_ai_caches()
        except Exception as e:
            logger.warning("AI cache sweep failed: %s", e)


@asynccontextmanager
async def lifespan(app: FastAPI):
    task = None
    if settings.ai_cache_sweep_interval_seconds > 0:
        task = asyncio.create_task(ai_cache_sweeper(settings.ai_cache_sweep_interval_seconds))
    try:
        yield
    finally:
        if task is not None:
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass


app = FastAPI(title="Ponnect AI API", version="1.0.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.frontend_url],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(ai.router)


@app.get("/")
def root():
    return {"message": "Ponnect AI API", "docs": "/docs"}
