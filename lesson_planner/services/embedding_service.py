import logging
import time
from typing import List, TYPE_CHECKING

from lesson_planner.config import settings

if TYPE_CHECKING:
    from sentence_transformers import SentenceTransformer

logger = logging.getLogger(__name__)

# Lazy singleton instance
_embedding_service_instance = None


def get_embedding_service() -> 'EmbeddingService':
    """
    Get or create singleton EmbeddingService instance (lazy initialization).

    The model is loaded only on first use, then reused for all subsequent requests.
    """
    global _embedding_service_instance

    if _embedding_service_instance is None:
        # Lazy import - torch initialisation is slow
        from sentence_transformers import SentenceTransformer

        logger.info("🤖 Loading embedding model (first use - this may take a few seconds)...")
        logger.info(f"   Model: {settings.embedding_model_name}")
        model = SentenceTransformer(settings.embedding_model_name)
        _embedding_service_instance = EmbeddingService(model)
        logger.info("✅ EmbeddingService ready (will reuse for future requests)")

    return _embedding_service_instance


class EmbeddingService:
    def __init__(self, model: 'SentenceTransformer'):
        self.model = model

    def embed_texts(self, texts: List[str]) -> List[List[float]]:
        """
        Generate normalized embeddings for a list of texts.
        """
        if not texts:
            logger.warning("⚠️  No texts provided for embedding generation")
            return []

        logger.info(f"🧮 Generating embeddings for {len(texts)} texts")
        start_time = time.time()

        embeddings = self.model.encode(
            texts,
            batch_size=32,
            show_progress_bar=False,
            normalize_embeddings=True,
        )

        duration = time.time() - start_time
        embedding_dim = len(embeddings[0]) if len(embeddings) > 0 else 0
        logger.info(f"✅ Generated {len(embeddings)} embeddings (dim={embedding_dim}) in {duration:.2f}s")

        return embeddings.tolist()
