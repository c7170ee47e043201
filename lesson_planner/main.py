import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from lesson_planner.api.pipeline import router as pipeline_router
from lesson_planner.api.routes import router
from lesson_planner.api.sessions import router as sessions_router
from lesson_planner.config import settings
from lesson_planner.core.startup import shutdown_services, startup_services

# Configure logging from settings
logging.basicConfig(level=settings.log_level)


@asynccontextmanager
async def lifespan(_app: FastAPI):
    # Startup: Code that runs when the app starts
    logging.info("=" * 60)
    logging.info(f"🚀 {settings.app_name} starting up...")
    logging.info("=" * 60)

    # App Settings
    logging.info("📋 App Configuration:")
    logging.info(f"  Environment: {settings.environment}")
    logging.info(f"  Debug mode: {settings.debug}")
    logging.info(f"  Log level: {settings.log_level}")

    # Server Settings
    logging.info("🌐 Server Configuration:")
    logging.info(f"  Host: {settings.host}")
    logging.info(f"  Port: {settings.port}")
    logging.info(f"  CORS Origins: {settings.cors_origins}")

    # Session Store Settings
    logging.info("💾 Session Store Configuration:")
    logging.info(f"  Backend: {settings.session_store_backend}")
    if settings.session_store_backend == "supabase":
        logging.info(f"  Supabase URL: {'✓ Configured' if settings.supabase_url else '✗ Not set'}")
        logging.info(f"  Table: {settings.sessions_table}")

    # LLM Settings
    logging.info("🤖 LLM Configuration:")
    logging.info(f"  API Key: {'✓ Configured' if settings.llm_api_key else '✗ Not set'}")
    logging.info(f"  Base URL: {settings.llm_base_url}")
    logging.info(f"  Model: {settings.llm_model}")
    logging.info(f"  Timeout: {settings.llm_timeout_seconds}s")

    # Retrieval Settings
    logging.info("📚 Curriculum Retrieval Configuration:")
    logging.info(f"  Data dir: {settings.curriculum_data_dir}")
    logging.info(f"  Embedding model: {settings.embedding_model_name}")
    logging.info(f"  Top-k: {settings.retrieval_top_k}")

    # Search Settings
    logging.info("🔍 Web Search Configuration:")
    logging.info(f"  Serper API: {'✓ Configured' if settings.serper_api_key else '✗ Not set (built-in strategies only)'}")

    # Auth Settings
    logging.info("🔐 Authentication Configuration:")
    logging.info(f"  JWT Secret: {'✓ Configured' if settings.jwt_secret else '✗ Not set'}")
    logging.info(f"  JWT Algorithm: {settings.jwt_algorithm}")

    # Initialize services (orchestrator, curriculum index warm-up)
    try:
        await startup_services()
    except Exception as e:
        logging.warning(f"⚠️  Service initialization warning: {e}")

    logging.info("=" * 60)
    logging.info("✅ Startup complete - Ready to accept requests")
    logging.info("=" * 60)

    yield  # App runs here

    # Shutdown: Code that runs when the app shuts down
    try:
        logging.info("=" * 60)
        logging.info("🛑 App is shutting down...")
        logging.info("=" * 60)

        await shutdown_services()
    except Exception as e:
        # Ignore cancellation errors during shutdown (normal when stopping with Ctrl+C)
        if "CancelledError" not in str(type(e).__name__) and "KeyboardInterrupt" not in str(
            type(e).__name__
        ):
            logging.error(f"Error during shutdown: {e}", exc_info=True)


app = FastAPI(title=settings.app_name, debug=settings.debug, lifespan=lifespan)

# Add CORS middleware - configured from settings
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(router, prefix="/api")
app.include_router(pipeline_router, prefix="/api/chat/step", tags=["pipeline"])
app.include_router(sessions_router, prefix="/api/sessions", tags=["sessions"])
