# FILE: curations/stores.py
"""
Subscriber and affiliate persistence.

Both stores come in two flavours with the same behaviour:
- Json*: in-memory list, whole file rewritten after every mutation
- Sql*:  rows in the embedded database (STORE_BACKEND=sql)

Read-check-write sequences run under a per-store lock.
"""
from __future__ import annotations

import json
import os
import threading
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from pydantic import EmailStr, TypeAdapter, ValidationError
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import sessionmaker

from . import models, settings
from .errors import DuplicateSubscriber, InvalidInput, NotFound, PersistenceWarning
from .logger import get_logger

logger = get_logger(__name__)

_EMAIL = TypeAdapter(EmailStr)


# -------------------- file helper --------------------
class JsonFile:
    """A JSON array on disk, overwritten atomically (temp file + rename)."""

    def __init__(self, path: Path):
        self.path = Path(path)

    def load(self) -> list:
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            return []
        except (OSError, ValueError) as e:
            logger.warning("Could not read %s, starting empty: %s", self.path, e)
            return []
        if not isinstance(data, list):
            logger.warning("%s does not hold a JSON array, starting empty", self.path)
            return []
        return data

    def save(self, data: list) -> None:
        tmp_path = self.path.with_name(self.path.name + ".tmp")
        try:
            if self.path.parent and not self.path.parent.exists():
                self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump(data, f, ensure_ascii=False, indent=2)
            os.replace(tmp_path, self.path)
        except (OSError, TypeError, ValueError) as e:
            raise PersistenceWarning(f"failed to save {self.path}: {e}") from e


# -------------------- validation helpers --------------------
def _clean_email(email: Any) -> str:
    if not email or not isinstance(email, str) or not email.strip():
        raise InvalidInput("A valid email address is required.")
    email = email.strip()
    try:
        _EMAIL.validate_python(email)
    except ValidationError:
        raise InvalidInput("A valid email address is required.") from None
    return email


def _clean_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    if not isinstance(value, str):
        raise InvalidInput("Affiliate fields must be strings.")
    return value.strip()


def _clean_affiliate(record: Dict[str, Any]) -> Tuple[Optional[int], Dict[str, Any]]:
    """Split an incoming record into (id or None, normalized fields)."""
    name = _clean_text(record.get("name"))
    link = _clean_text(record.get("link"))
    if not name or not link:
        raise InvalidInput("Name and link are required.")

    categories = record.get("categories") or []
    if isinstance(categories, str):
        categories = [c for c in (p.strip() for p in categories.split(",")) if c]
    if not isinstance(categories, (list, tuple)) or not all(isinstance(c, str) for c in categories):
        raise InvalidInput("Categories must be a list of strings.")

    raw_id = record.get("id")
    if raw_id is not None:
        try:
            raw_id = int(raw_id)
        except (TypeError, ValueError):
            raise InvalidInput("Affiliate id must be an integer.")

    fields = {
        "name": name,
        "link": link,
        "banner": _clean_text(record.get("banner")) or None,
        "description": _clean_text(record.get("description")) or None,
        "categories": list(categories),
    }
    return raw_id, fields


# -------------------- subscribers --------------------
class SubscriberStore(ABC):
    def __init__(self) -> None:
        self._lock = threading.Lock()

    @abstractmethod
    def list(self) -> List[str]:
        ...

    @abstractmethod
    def _contains(self, email_key: str) -> bool:
        ...

    @abstractmethod
    def _append(self, email: str) -> None:
        ...

    def count(self) -> int:
        return len(self.list())

    def subscribe(self, email: Any) -> str:
        email = _clean_email(email)
        with self._lock:
            if self._contains(email.lower()):
                raise DuplicateSubscriber()
            self._append(email)
        logger.info("New subscriber: %s", email)
        return email


class JsonSubscriberStore(SubscriberStore):
    def __init__(self, path: Path):
        super().__init__()
        self._file = JsonFile(path)
        self._emails: List[str] = [e for e in self._file.load() if isinstance(e, str)]
        logger.info("Loaded %d subscribers from %s", len(self._emails), self._file.path)

    def list(self) -> List[str]:
        return self._emails[:]

    def _contains(self, email_key: str) -> bool:
        return any(e.lower() == email_key for e in self._emails)

    def _append(self, email: str) -> None:
        self._emails.append(email)
        try:
            self._file.save(self._emails)
        except PersistenceWarning as e:
            # the in-memory list stays authoritative
            logger.warning("%s", e)


class SqlSubscriberStore(SubscriberStore):
    def __init__(self, session_factory: sessionmaker):
        super().__init__()
        self._sessions = session_factory

    def list(self) -> List[str]:
        with self._sessions() as db:
            rows = db.execute(select(models.Subscriber.email).order_by(models.Subscriber.seq)).all()
        return [r.email for r in rows]

    def count(self) -> int:
        with self._sessions() as db:
            return int(db.execute(select(func.count(models.Subscriber.seq))).scalar_one())

    def _contains(self, email_key: str) -> bool:
        with self._sessions() as db:
            stmt = select(models.Subscriber.seq).where(models.Subscriber.email_key == email_key)
            return db.execute(stmt).first() is not None

    def _append(self, email: str) -> None:
        with self._sessions() as db:
            db.add(models.Subscriber(email=email, email_key=email.lower()))
            try:
                db.commit()
            except IntegrityError:
                # another process won the race on the unique key
                db.rollback()
                raise DuplicateSubscriber()


# -------------------- affiliates --------------------
class AffiliateStore(ABC):
    def __init__(self) -> None:
        self._lock = threading.Lock()

    @abstractmethod
    def list(self) -> List[Dict[str, Any]]:
        ...

    @abstractmethod
    def get(self, affiliate_id: int) -> Optional[Dict[str, Any]]:
        ...

    @abstractmethod
    def _max_id(self) -> int:
        ...

    @abstractmethod
    def _replace(self, affiliate_id: int, fields: Dict[str, Any]) -> Dict[str, Any]:
        ...

    @abstractmethod
    def _append(self, record: Dict[str, Any]) -> Dict[str, Any]:
        ...

    @abstractmethod
    def _delete(self, affiliate_id: int) -> None:
        ...

    def count(self) -> int:
        return len(self.list())

    def upsert(self, record: Dict[str, Any]) -> Dict[str, Any]:
        affiliate_id, fields = _clean_affiliate(record)
        with self._lock:
            if affiliate_id is not None:
                if self.get(affiliate_id) is None:
                    raise NotFound("Affiliate not found.")
                saved = self._replace(affiliate_id, fields)
                logger.info("Updated affiliate %d (%s)", affiliate_id, fields["name"])
            else:
                new_id = self._max_id() + 1
                saved = self._append({"id": new_id, **fields})
                logger.info("Created affiliate %d (%s)", new_id, fields["name"])
        return saved

    def remove(self, affiliate_id: int) -> None:
        with self._lock:
            if self.get(affiliate_id) is None:
                raise NotFound("Affiliate not found.")
            self._delete(affiliate_id)
        logger.info("Removed affiliate %d", affiliate_id)


def _record_id(record: Dict[str, Any]) -> Optional[int]:
    try:
        return int(record.get("id"))
    except (TypeError, ValueError):
        return None


def _loaded_affiliates(raw_records: list, source: Path) -> List[Dict[str, Any]]:
    """Normalize records read from disk; drop the ones that cannot be served."""
    records: List[Dict[str, Any]] = []
    seen = set()
    for position, raw in enumerate(raw_records):
        affiliate_id = _record_id(raw) if isinstance(raw, dict) else None
        if affiliate_id is None or affiliate_id in seen:
            logger.warning("%s: skipping affiliate #%d (missing or duplicate id)", source, position)
            continue
        try:
            _, fields = _clean_affiliate(raw)
        except InvalidInput as e:
            logger.warning("%s: skipping affiliate %d: %s", source, affiliate_id, e)
            continue
        seen.add(affiliate_id)
        records.append({"id": affiliate_id, **fields})
    return records


class JsonAffiliateStore(AffiliateStore):
    def __init__(self, path: Path):
        super().__init__()
        self._file = JsonFile(path)
        self._records = _loaded_affiliates(self._file.load(), self._file.path)
        logger.info("Loaded %d affiliates from %s", len(self._records), self._file.path)

    def _flush(self) -> None:
        try:
            self._file.save(self._records)
        except PersistenceWarning as e:
            logger.warning("%s", e)

    def _index(self, affiliate_id: int) -> int:
        for i, r in enumerate(self._records):
            if _record_id(r) == affiliate_id:
                return i
        return -1

    def list(self) -> List[Dict[str, Any]]:
        return [dict(r) for r in self._records]

    def get(self, affiliate_id: int) -> Optional[Dict[str, Any]]:
        i = self._index(affiliate_id)
        return dict(self._records[i]) if i >= 0 else None

    def _max_id(self) -> int:
        ids = [i for i in (_record_id(r) for r in self._records) if i is not None]
        return max(ids, default=0)

    def _replace(self, affiliate_id: int, fields: Dict[str, Any]) -> Dict[str, Any]:
        i = self._index(affiliate_id)
        self._records[i] = {"id": affiliate_id, **fields}
        self._flush()
        return dict(self._records[i])

    def _append(self, record: Dict[str, Any]) -> Dict[str, Any]:
        self._records.append(record)
        self._flush()
        return dict(record)

    def _delete(self, affiliate_id: int) -> None:
        del self._records[self._index(affiliate_id)]
        self._flush()


class SqlAffiliateStore(AffiliateStore):
    def __init__(self, session_factory: sessionmaker):
        super().__init__()
        self._sessions = session_factory

    def list(self) -> List[Dict[str, Any]]:
        with self._sessions() as db:
            rows = db.execute(select(models.Affiliate).order_by(models.Affiliate.position)).scalars().all()
            return [r.to_dict() for r in rows]

    def get(self, affiliate_id: int) -> Optional[Dict[str, Any]]:
        with self._sessions() as db:
            row = db.get(models.Affiliate, affiliate_id)
            return row.to_dict() if row else None

    def _max_id(self) -> int:
        with self._sessions() as db:
            return int(db.execute(select(func.max(models.Affiliate.id))).scalar() or 0)

    def _replace(self, affiliate_id: int, fields: Dict[str, Any]) -> Dict[str, Any]:
        with self._sessions() as db:
            row = db.get(models.Affiliate, affiliate_id)
            for k, v in fields.items():
                setattr(row, k, v)
            db.commit()
            return row.to_dict()

    def _append(self, record: Dict[str, Any]) -> Dict[str, Any]:
        with self._sessions() as db:
            last = db.execute(select(func.max(models.Affiliate.position))).scalar()
            row = models.Affiliate(position=(last or 0) + 1, **record)
            db.add(row)
            db.commit()
            return row.to_dict()

    def _delete(self, affiliate_id: int) -> None:
        with self._sessions() as db:
            row = db.get(models.Affiliate, affiliate_id)
            db.delete(row)
            db.commit()


# -------------------- wiring --------------------
def build_stores(
    backend: str = settings.STORE_BACKEND,
) -> Tuple[SubscriberStore, AffiliateStore]:
    if backend == "sql":
        from .database import make_engine, make_session_factory

        sessions = make_session_factory(make_engine(settings.DATABASE_URL))
        logger.info("Using SQL stores at %s", settings.DATABASE_URL)
        return SqlSubscriberStore(sessions), SqlAffiliateStore(sessions)
    if backend != "json":
        raise ValueError(f"unknown STORE_BACKEND {backend!r} (expected 'json' or 'sql')")
    return (
        JsonSubscriberStore(settings.SUBSCRIBERS_FILE),
        JsonAffiliateStore(settings.AFFILIATES_FILE),
    )


__all__ = [
    "JsonFile",
    "SubscriberStore",
    "JsonSubscriberStore",
    "SqlSubscriberStore",
    "AffiliateStore",
    "JsonAffiliateStore",
    "SqlAffiliateStore",
    "build_stores",
]
