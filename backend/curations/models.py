# FILE: curations/models.py
from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from sqlalchemy import JSON, DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .database import Base


class Subscriber(Base):
    __tablename__ = "subscribers"

    # insertion order is the list order
    seq: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    email: Mapped[str] = mapped_column(String(320), nullable=False)
    # lowercase copy; uniqueness is case-insensitive
    email_key: Mapped[str] = mapped_column(String(320), unique=True, index=True, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, nullable=False
    )


class Affiliate(Base):
    __tablename__ = "affiliates"

    # ids are assigned by the store (max + 1), never by the database
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    # position in the list; an update keeps it
    position: Mapped[int] = mapped_column(Integer, nullable=False, index=True)

    name: Mapped[str] = mapped_column(String(200), nullable=False)
    link: Mapped[str] = mapped_column(String(1000), nullable=False)
    banner: Mapped[Optional[str]] = mapped_column(String(1000), nullable=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    categories: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)

    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False
    )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "link": self.link,
            "banner": self.banner,
            "description": self.description,
            "categories": list(self.categories or []),
        }


__all__ = ["Subscriber", "Affiliate"]
