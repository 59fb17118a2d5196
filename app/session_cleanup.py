"""
Purge stale session records. Schedule it, e.g. hourly from cron:

  0 * * * * cd /path/to/pizza-service && .venv/bin/python -m app.session_cleanup

  python -m app.session_cleanup --dry-run
  python -m app.session_cleanup --older-than-minutes 2880
"""

import argparse
import logging
import sys

from app.core.config import get_settings
from app.core.database import SessionLocal
from app.services.session_cleanup import run_session_cleanup

logger = logging.getLogger("app.session_cleanup")


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Delete session records for expired tokens.")
    parser.add_argument(
        "--older-than-minutes",
        type=int,
        default=None,
        help="Age threshold; defaults to JWT_EXPIRE_MINUTES and may not be lower",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Only report how many records would be deleted",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    settings = get_settings()
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%SZ",
    )

    db = SessionLocal()
    try:
        count = run_session_cleanup(
            db, settings, max_age_minutes=args.older_than_minutes, dry_run=args.dry_run
        )
    except ValueError as e:
        logger.error("%s", e)
        return 2
    except Exception:
        logger.exception("Session cleanup failed")
        return 1
    finally:
        db.close()

    verb = "would delete" if args.dry_run else "deleted"
    logger.info("Session cleanup finished: %s %s record(s)", verb, count)
    return 0


if __name__ == "__main__":
    sys.exit(main())
