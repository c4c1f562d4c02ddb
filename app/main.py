from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.config import settings
from app.core.ids import IdGenerator
from app.core.logging import logger
from app.core.time_utils import Clock, utc_now
from app.data.demo_seed import seed_demo_data
from app.database import build_record_store
from app.features.assistant.router import router as assistant_router
from app.features.auth.router import router as auth_router
from app.features.doctors.router import doctor_view_router, router as doctors_router
from app.features.documents.router import router as documents_router
from app.features.documents.service import DocumentIngestionPipeline
from app.features.family.router import router as family_router
from app.features.insurance.router import router as insurance_router
from app.routers.health import router as health_router
from app.services.ai_client import AIHealthClient
from app.services.openai_service import OpenAIHealthClient
from app.store.base import RecordStore


def create_app(
    store: Optional[RecordStore] = None,
    ai_client: Optional[AIHealthClient] = None,
    id_generator: Optional[IdGenerator] = None,
    clock: Clock = utc_now,
    seed_demo: Optional[bool] = None,
) -> FastAPI:
    """
    Build the API application.

    Collaborators not passed in are built from settings at startup.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Lifespan events for FastAPI application."""
        # Startup
        logger.info(f"Starting {settings.APP_NAME}...")

        record_store = store or build_record_store(settings, id_generator=id_generator)
        await record_store.connect()

        should_seed = settings.SEED_DEMO_DATA if seed_demo is None else seed_demo
        if should_seed and settings.DEMO_OWNER_ID:
            await seed_demo_data(record_store, settings.DEMO_OWNER_ID, settings.PUBLIC_BASE_URL)

        client = ai_client or OpenAIHealthClient(settings.OPENAI_API_KEY, model=settings.OPENAI_MODEL)

        app.state.store = record_store
        app.state.ai_client = client
        app.state.clock = clock
        app.state.ingestion_pipeline = DocumentIngestionPipeline(
            record_store,
            client,
            id_generator=id_generator,
            clock=clock,
            max_upload_bytes=settings.MAX_UPLOAD_BYTES,
        )

        logger.info(f"Application started with {type(record_store).__name__}")

        yield

        # Shutdown
        logger.info("Shutting down...")
        await record_store.close()
        logger.info("Application shutdown complete")

    app = FastAPI(
        title=settings.APP_NAME,
        description="Family health records, AI document extraction and doctor sharing",
        version="1.0.0",
        lifespan=lifespan,
    )

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Register routers
    app.include_router(health_router)
    app.include_router(auth_router, prefix=settings.API_V1_PREFIX)
    app.include_router(family_router, prefix=settings.API_V1_PREFIX)
    app.include_router(documents_router, prefix=settings.API_V1_PREFIX)
    app.include_router(doctors_router, prefix=settings.API_V1_PREFIX)
    app.include_router(doctor_view_router, prefix=settings.API_V1_PREFIX)
    app.include_router(insurance_router, prefix=settings.API_V1_PREFIX)
    app.include_router(assistant_router, prefix=settings.API_V1_PREFIX)

    @app.get("/")
    async def root():
        """Root endpoint."""
        return {
            "service": settings.APP_NAME,
            "version": "1.0.0",
            "docs": "/docs",
            "health": "/health",
        }

    return app


app = create_app()
