"""
Application startup initialization.
Call this on app startup to initialize services.
"""

import logging

from lesson_planner.agents.orchestrator import get_orchestrator

logger = logging.getLogger(__name__)


async def warm_curriculum_index():
    """
    Build the reference curriculum index ahead of the first request.
    A failure here only delays indexing to first use.
    """
    orchestrator = get_orchestrator()
    report = await orchestrator.health_check()
    if report["status"] == "healthy":
        curriculum = report["curriculum"]
        logger.info(f"✅ Curriculum index warmed: {curriculum['corpusId']} ({curriculum['passages']} passages)")
    else:
        logger.warning(f"⚠️  Curriculum index warm-up failed: {report.get('error')}")
        logger.info("   Indexes will be built on first request")


async def startup_services(warm_index: bool = True):
    """
    Initialize all services on application startup.
    Call this from FastAPI startup event.
    """
    logger.info("🚀 Initializing application services...")

    orchestrator = get_orchestrator()
    if not orchestrator.deps.gateway.is_configured:
        logger.warning("⚠️  LLM_API_KEY not set - generation stages will fail until it is configured")

    if warm_index:
        try:
            await warm_curriculum_index()
        except Exception as e:
            logger.warning(f"⚠️  Curriculum warm-up failed: {e}")

    logger.info("✅ Startup services initialized")


async def shutdown_services():
    """
    Cleanup services on application shutdown.
    Call this from FastAPI shutdown event.
    """
    try:
        logger.info("🛑 Shutting down application services...")
        await get_orchestrator().aclose()
        logger.info("✅ Services shut down")
    except Exception as e:
        # Ignore cancellation errors during shutdown (normal when stopping with Ctrl+C)
        if "CancelledError" not in str(type(e).__name__):
            logger.warning(f"⚠️  Error during shutdown: {e}")
