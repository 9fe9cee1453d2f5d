"""embedvec entry point.

Loads the settings, reports the configured embedding and vector store
providers and checks that both can be constructed.
"""

from __future__ import annotations

import sys
from pathlib import Path


PROJECT_ROOT = Path(__file__).resolve().parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from embedvec.core.settings import load_settings
from embedvec.libs.embedding import EmbeddingFactory
from embedvec.libs.vector_store import VectorStoreFactory
from embedvec.observability.logger import configure_logging, get_logger


LOGGER = get_logger(__name__)


def main() -> None:
    try:
        settings = load_settings(PROJECT_ROOT / "config" / "settings.yaml")
        configure_logging(settings.observability)
    except (FileNotFoundError, ValueError) as exc:
        LOGGER.error("Failed to load settings: %s", exc)
        raise SystemExit(1) from exc

    LOGGER.info(
        "Settings loaded successfully (embedding=%s, vector_store=%s)",
        settings.embedding.get("provider", "unknown"),
        settings.vector_store.get("provider", "unknown"),
    )

    try:
        embedding = EmbeddingFactory.create(settings)
        store = VectorStoreFactory.create(settings)
    except (ValueError, RuntimeError) as exc:
        LOGGER.error("Failed to initialise providers: %s", exc)
        raise SystemExit(1) from exc

    LOGGER.info(
        "Collection '%s' holds %d records (embedding dimensions=%s)",
        store.collection_name,
        store.count(),
        embedding.get_dimension(),
    )
    print("embedvec - ready.", file=sys.stderr)


if __name__ == "__main__":
    main()
