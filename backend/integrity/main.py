from __future__ import annotations
import logging
import time
from contextlib import asynccontextmanager
from threading import Lock
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from integrity.config import Settings, settings as default_settings

# ============================================================
# 🪵 Logging Setup
# ============================================================
logging.basicConfig(
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(filename)s:%(lineno)d | %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
    level=getattr(logging, default_settings.log_level.upper(), logging.INFO),
)
logging.getLogger("httpx").setLevel(logging.WARNING)
logger = logging.getLogger("integrity.app")

# ============================================================
# 📦 Core Imports (Dependency Injection)
# ============================================================
from integrity.container import AppContainer, build_container
from integrity.core.exceptions import ServiceUnavailable
from integrity.core.services.health import probe_detection

# ============================================================
# 🌐 Routers
# ============================================================
from integrity.router.health import router as health_router
from integrity.router.sessions import router as sessions_router
from integrity.router.submissions import router as submissions_router
from integrity.router.reports import router as reports_router
from integrity.router.analytics import router as analytics_router
from integrity.router.admin import router as admin_router


# ============================================================
# ⚙️ Application Status
# ============================================================
class AppState:
    def __init__(self):
        self.startup_time = time.time()
        self.detection_status = "checking"  # checking, online, offline
        self.detection_info: dict | None = None
        self.detection_error: str | None = None
        self.lock = Lock()

    def set_detection_online(self, info: dict):
        with self.lock:
            self.detection_status = "online"
            self.detection_info = info
            self.detection_error = None

    def set_detection_offline(self, error: str):
        with self.lock:
            self.detection_status = "offline"
            self.detection_error = error

    def get_status(self):
        with self.lock:
            return {
                "startup_time": self.startup_time,
                "detection_status": self.detection_status,
                "detection_info": self.detection_info,
                "detection_error": self.detection_error,
                "uptime_seconds": time.time() - self.startup_time,
            }


# ============================================================
# 🚀 App factory with Startup / Shutdown Lifecycle
# ============================================================
def create_app(settings: Settings | None = None, container: AppContainer | None = None) -> FastAPI:
    settings = settings or default_settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("🚀 Initializing Integrity Dashboard API...")
        if app.state.container is None:
            app.state.container = build_container(settings)

        # Detection service probe: an offline service is reported, not fatal
        try:
            info = await probe_detection(app.state.container.detection)
            app.state.status.set_detection_online(info)
            logger.info(f"✅ Detection service online: {info}")
        except ServiceUnavailable as e:
            app.state.status.set_detection_offline(str(e))
            logger.warning(f"⚠️ {e}")

        logger.info("🎯 API is ready and accepting requests")
        try:
            yield
        finally:
            try:
                await app.state.container.detection.aclose()
                logger.info("🧹 Application shutdown complete")
            except Exception as e:
                logger.warning(f"⚠️ Cleanup warning: {e}")

    app = FastAPI(
        title="Integrity Dashboard API",
        description="Similarity / AI-origin reporting over an external detection service",
        version="1.0.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.status = AppState()
    app.state.container = container

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origin_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(health_router)
    app.include_router(sessions_router)
    app.include_router(submissions_router)
    app.include_router(reports_router)
    app.include_router(analytics_router)
    app.include_router(admin_router)

    @app.get("/status")
    async def get_app_status():
        """Application status including the last known detection service state"""
        status = app.state.status.get_status()
        system_status = "healthy" if status["detection_status"] == "online" else "degraded"
        sessions = len(app.state.container.sessions) if app.state.container else 0
        return {"system_status": system_status, "active_sessions": sessions, "timestamp": time.time(), **status}

    @app.get("/")
    def root():
        return {
            "app": "Integrity Dashboard API",
            "version": "1.0.0",
            "detection_api_url": settings.detection_api_url,
            "endpoints": {
                "docs": "/docs",
                "health": "/health",
                "detection_health": "/health/detection",
                "status": "/status",
                "sessions": "/sessions",
            },
        }

    return app


app = create_app()

# ============================================================
# 🏁 Entrypoint
# ============================================================
if __name__ == "__main__":
    import uvicorn

    logger.info("Starting Integrity Dashboard API on port 8080...")
    uvicorn.run(
        "integrity.main:app",
        host="0.0.0.0",
        port=8080,
        reload=False,
        log_config=None,
    )
