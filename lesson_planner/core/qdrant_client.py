import logging

from qdrant_client import QdrantClient

logger = logging.getLogger(__name__)

_qdrant_client: QdrantClient | None = None


def get_qdrant_client() -> QdrantClient:
    """
    Get or create the process-local Qdrant instance that holds curriculum indexes.

    Curriculum corpora are small and rebuilt from CSV on first use, so an
    in-memory store is enough.
    """
    global _qdrant_client

    if _qdrant_client is None:
        try:
            _qdrant_client = QdrantClient(location=":memory:")
            logger.info("Qdrant in-memory client initialized successfully")
        except Exception as e:
            logger.error(f"Failed to initialize Qdrant client: {e}")
            raise

    return _qdrant_client
