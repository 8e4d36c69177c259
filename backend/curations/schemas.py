# FILE: curations/schemas.py
from __future__ import annotations

from typing import Any, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


# ---------------------------------
# Common base (Pydantic v2)
# ---------------------------------
class ORMSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)


class MessageOut(ORMSchema):
    message: str


class HealthOut(ORMSchema):
    status: str
    service: str
    version: str


# ---------------------------------
# Catalog
# ---------------------------------
class ItemOut(ORMSchema):
    category: str
    name: str
    image: str
    description: str
    link: str
    search: str


class CategoryOut(ORMSchema):
    key: str
    label: str
    count: int = 0


# ---------------------------------
# Affiliate
# ---------------------------------
# name/link stay optional here so a missing value reaches the store
# and comes back as InvalidInput (400) like every other bad field.
class AffiliateIn(ORMSchema):
    id: Optional[int] = None
    name: Optional[str] = None
    link: Optional[str] = None
    banner: Optional[str] = None
    description: Optional[str] = None
    # a list, or one comma-separated string
    categories: Optional[Union[List[str], str]] = None


class AffiliateOut(ORMSchema):
    id: int
    name: str
    link: str
    banner: Optional[str] = None
    description: Optional[str] = None
    categories: List[str] = Field(default_factory=list)


class AffiliateSaved(MessageOut):
    affiliate: AffiliateOut


# ---------------------------------
# Subscriber / notify
# ---------------------------------
class SubscribeIn(ORMSchema):
    # Any JSON value is accepted; the store decides what counts as an email.
    email: Any = None


class SubscriberList(ORMSchema):
    count: int
    subscribers: List[str]


class NotifyIn(ORMSchema):
    subject: Optional[str] = None
    content: Optional[str] = None
