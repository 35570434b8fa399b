from contextlib import asynccontextmanager
import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from pharmacare.config.settings import Settings, get_settings
from pharmacare.core.auth import TokenService
from pharmacare.core.errors import register_exception_handlers
from pharmacare.core.logging import setup_logging
from pharmacare.core.middleware import log_requests
from pharmacare.db.base import create_all, get_engine, get_session_factory
from pharmacare.routes.appointment.router import router as appointment_router
from pharmacare.routes.auth.router import router as user_router
from pharmacare.routes.cart.router import router as cart_router
from pharmacare.routes.doctor.router import router as doctor_router
from pharmacare.routes.medicine.router import router as medicine_router
from pharmacare.routes.wishlist.router import router as wishlist_router
from pharmacare.services.sms import SmsGateway

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application start-up & shutdown hooks."""
    # ------------------------------------------------------------------ start-up -----
    settings: Settings = app.state.settings
    logger.info(f"Application startup ({settings.app_env}) …")

    # token secrets are mandatory, refuse to serve without them
    token_service = TokenService.from_settings(settings)
    token_service.ensure_configured()
    app.state.token_service = token_service

    engine = None
    try:
        logger.info("Initializing Database Engine...")
        engine = await get_engine(settings.database_url)
        app.state.engine = engine
        app.state.session_factory = await get_session_factory(engine)
        if settings.db_create_all:
            await create_all(engine)
            logger.info("Database tables created.")
        logger.info("DB engine and session factory ready.")
    except Exception as e:
        logger.critical(f"CRITICAL ERROR DURING STARTUP INITIALIZATIONS: {e}", exc_info=True)
        if engine:
            await engine.dispose()
        raise

    app.state.sms_gateway = SmsGateway.from_settings(settings)

    # ------------------------------------------------ give control back
    yield

    # ------------------------------------------------ shutdown --------
    logger.info("Application shutdown …")
    if engine:
        try:
            await engine.dispose()
            logger.info("DB engine disposed")
        except Exception:
            logger.exception("Error disposing DB engine")
    logger.info("Shutdown complete")


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()
    setup_logging(settings)

    app = FastAPI(title="PharmaCare API", lifespan=lifespan)
    app.state.settings = settings

    # CORS -------------------------------------------------------------------------------
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[str(o) for o in settings.cors_origins],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.middleware("http")(log_requests)
    register_exception_handlers(app)

    # ----------------------------------------------------------------- health-check -----
    @app.get("/health")
    async def health_check(request: Request):
        return {
            "status": "ok",
            "env": request.app.state.settings.app_env,
            "database": "ready" if getattr(request.app.state, "session_factory", None) else "not ready",
        }

    # ------------------------------------------------------------------- routes ---------
    app.include_router(user_router)
    app.include_router(doctor_router)
    app.include_router(appointment_router)
    app.include_router(medicine_router)
    app.include_router(cart_router)
    app.include_router(wishlist_router)

    return app


app = create_app()
