import logging

from app.core.config import settings
from app.db.store import PostStore

logger = logging.getLogger(__name__)


def init_db(store: PostStore) -> None:
    """
    Make sure the posts file exists and report what it holds.
    """
    try:
        created = store.initialize()
    except Exception as e:
        logger.error(f"Error initializing posts file {store.path}: {e}")
        raise
    if created:
        logger.info(f"Created empty posts file at {store.path}")
    else:
        logger.info(f"Posts file {store.path} already present")


def normalize_db(store: PostStore) -> int:
    """
    Rewrite the posts file in its normalized form (defaults filled, legacy
    ids assigned, duplicates dropped). Returns the number of posts kept.
    """
    posts = store.load_sync()
    store.persist_sync(posts)
    logger.info(f"Normalized {len(posts)} posts in {store.path}")
    return len(posts)


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    logger.info("Initializing posts file")
    init_db(PostStore.from_settings(settings))
    logger.info("Posts file ready")
