"""
Purge expired verification and reset tokens. Intended for cron:

  0 * * * * cd /path/to/workhub && .venv/bin/python -m workhub.token_cleanup
"""

import logging
import sys

from sqlalchemy.exc import SQLAlchemyError

from workhub.core.config import get_settings
from workhub.core.database import SessionLocal
from workhub.services.token_cleanup import run_token_cleanup

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)


def main() -> int:
    settings = get_settings()
    db = SessionLocal()
    try:
        tokens_deleted = run_token_cleanup(db, settings)
    except SQLAlchemyError:
        logger.exception("Token cleanup failed")
        return 1
    finally:
        db.close()
    logger.info("Token cleanup completed: tokens_deleted=%s", tokens_deleted)
    return 0


if __name__ == "__main__":
    sys.exit(main())
