"""
Posts file initialization script.
Creates the posts file if it is missing, optionally rewriting an existing
one in normalized form.
Run this as: python init_db.py [--normalize]
"""

import argparse
import logging
import sys
from pathlib import Path

# Configure logging
logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")
logger = logging.getLogger("db-init")

# Add current directory to path to ensure imports work
sys.path.append(str(Path(__file__).parent))

from app.core.config import settings
from app.core.errors import StorageError
from app.db.init_db import init_db, normalize_db
from app.db.store import PostStore

def main():
    parser = argparse.ArgumentParser(description="Initialize the posts file")
    parser.add_argument(
        "--normalize",
        action="store_true",
        help="Rewrite the posts file with defaults filled in and duplicates dropped"
    )
    args = parser.parse_args()

    store = PostStore.from_settings(settings)
    try:
        init_db(store)
        if args.normalize:
            normalize_db(store)
        return True
    except StorageError as e:
        logger.error(f"Error preparing posts file: {e}")
        return False

if __name__ == "__main__":
    logger.info("Starting posts file initialization")
    if main():
        logger.info("Posts file initialization completed successfully")
    else:
        logger.error("Posts file initialization failed")
        sys.exit(1)
