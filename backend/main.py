from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.alerts import router as alerts_router, internal_router
from core import get_settings, setup_logger
from db import get_config_store
from services import get_scanner

SERVICE_NAME = "Tier Alert Service"
VERSION = "1.0.0"

settings = get_settings()
logger = setup_logger(settings.log_level)


@asynccontextmanager
async def lifespan(app: FastAPI):
    scanner = get_scanner()
    if settings.scanner_enabled:
        scanner.start()
    if not settings.notifier_configured:
        logger.warning("OneSignal credentials missing; pushes will be skipped")
    yield
    if scanner.is_running:
        await scanner.stop()

app = FastAPI(
    title=SERVICE_NAME,
    version=VERSION,
    lifespan=lifespan,
    docs_url="/docs",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(alerts_router, prefix="/api")
app.include_router(internal_router)

@app.get("/")
async def root():
    return {
        "name": SERVICE_NAME,
        "version": VERSION,
        "docs": "/docs",
    }

@app.get("/health")
async def health():
    scanner = get_scanner()
    return {
        "status": "healthy",
        "users": get_config_store().count(),
        "scanner_running": scanner.is_running,
        "notifier_configured": settings.notifier_configured,
    }

if __name__ == "__main__":
    import uvicorn
    logger.info("Tier Alert Service listening on %s", settings.port)
    uvicorn.run("main:app", host="0.0.0.0", port=settings.port)
