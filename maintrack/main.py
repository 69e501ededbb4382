import logging
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from maintrack.config import settings
from maintrack.database import SessionLocal, check_db_connection, create_tables
from maintrack.seeds import seed_catalog
from maintrack.middleware.error_handler import register_exception_handlers

from maintrack.api.v1 import vehicles
from maintrack.api.v1 import components
from maintrack.api.v1 import maintenance_types
from maintrack.api.v1 import maintenance_events

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    app = FastAPI(
        title=settings.APP_NAME,
        version="1.0.0",
        description="Vehicle maintenance catalog & interval tracking API",
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
    )

    # ─── CORS ─────────────────────────────────────────────────────────────────
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.get_cors_origins(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ─── Exception Handlers ───────────────────────────────────────────────────
    register_exception_handlers(app)

    # ─── Routers ──────────────────────────────────────────────────────────────
    PREFIX = "/api/v1"
    app.include_router(vehicles.router,           prefix=PREFIX, tags=["Vehicles"])
    app.include_router(components.router,         prefix=PREFIX, tags=["Components"])
    app.include_router(maintenance_types.router,  prefix=PREFIX, tags=["Maintenance Types"])
    app.include_router(maintenance_events.router, prefix=PREFIX, tags=["Maintenance Events"])

    # ─── Startup ──────────────────────────────────────────────────────────────
    @app.on_event("startup")
    def on_startup():
        ok = check_db_connection()
        logger.info("DB connected" if ok else "DB connection FAILED")
        if not ok:
            return
        if settings.is_sqlite:
            create_tables()
        if settings.SEED_ON_STARTUP:
            db = SessionLocal()
            try:
                seed_catalog(db)
            finally:
                db.close()

    # ─── Health ───────────────────────────────────────────────────────────────
    @app.get("/health", tags=["Health"])
    def health():
        return {"status": "ok", "app": settings.APP_NAME, "version": "1.0.0"}

    return app


app = create_app()

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("maintrack.main:app", host=settings.APP_HOST, port=settings.APP_PORT,
                reload=settings.is_development)
