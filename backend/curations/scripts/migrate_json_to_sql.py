# FILE: curations/scripts/migrate_json_to_sql.py
"""
Copy subscribers.json / affiliates.json into the SQL stores.

Idempotent: subscribers already present are skipped, affiliates keep their
ids and are overwritten in place if they already exist.
"""
from pathlib import Path
from typing import Dict

from sqlalchemy.orm import sessionmaker

from curations import models, settings
from curations.database import make_engine, make_session_factory
from curations.errors import DuplicateSubscriber, InvalidInput
from curations.logger import get_logger
from curations.stores import JsonFile, SqlSubscriberStore

logger = get_logger(__name__)


def _copy_affiliate(sessions: sessionmaker, raw: Dict) -> bool:
    try:
        affiliate_id = int(raw["id"])
    except (KeyError, TypeError, ValueError):
        return False
    if not raw.get("name") or not raw.get("link"):
        return False

    fields = {
        "name": raw["name"],
        "link": raw["link"],
        "banner": raw.get("banner") or None,
        "description": raw.get("description") or None,
        "categories": list(raw.get("categories") or []),
    }
    with sessions() as db:
        row = db.get(models.Affiliate, affiliate_id)
        if row is None:
            position = db.query(models.Affiliate).count() + 1
            db.add(models.Affiliate(id=affiliate_id, position=position, **fields))
        else:
            for k, v in fields.items():
                setattr(row, k, v)
        db.commit()
    return True


def run(
    subscribers_file: Path = settings.SUBSCRIBERS_FILE,
    affiliates_file: Path = settings.AFFILIATES_FILE,
    database_url: str = settings.DATABASE_URL,
) -> Dict[str, int]:
    sessions = make_session_factory(make_engine(database_url))
    subscribers = SqlSubscriberStore(sessions)

    counts = {"subscribers": 0, "affiliates": 0, "skipped": 0}

    for email in JsonFile(subscribers_file).load():
        try:
            subscribers.subscribe(email)
            counts["subscribers"] += 1
        except (DuplicateSubscriber, InvalidInput):
            counts["skipped"] += 1

    for raw in JsonFile(affiliates_file).load():
        if isinstance(raw, dict) and _copy_affiliate(sessions, raw):
            counts["affiliates"] += 1
        else:
            counts["skipped"] += 1

    logger.info(
        "[migrate] %d subscribers, %d affiliates copied, %d skipped",
        counts["subscribers"], counts["affiliates"], counts["skipped"],
    )
    return counts


if __name__ == "__main__":
    run()
