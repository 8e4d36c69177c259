# FILE: curations/deps.py
from functools import lru_cache
from typing import Optional, Tuple

from fastapi import Depends, Header

from . import settings
from .catalog import Catalog
from .notifier import Dispatcher
from .routers._guards import AdminGuard, build_guard
from .stores import AffiliateStore, SubscriberStore, build_stores

# One instance of each per process. Tests swap them with app.dependency_overrides.


@lru_cache(maxsize=None)
def get_catalog() -> Catalog:
    return Catalog.from_file(settings.ITEMS_FILE)


@lru_cache(maxsize=None)
def _stores() -> Tuple[SubscriberStore, AffiliateStore]:
    return build_stores(settings.STORE_BACKEND)


def get_subscriber_store() -> SubscriberStore:
    return _stores()[0]


def get_affiliate_store() -> AffiliateStore:
    return _stores()[1]


@lru_cache(maxsize=None)
def get_guard() -> AdminGuard:
    return build_guard(settings.ADMIN_TOKEN)


@lru_cache(maxsize=None)
def get_dispatcher() -> Dispatcher:
    return Dispatcher()


def require_admin(
    token: Optional[str] = Header(None, alias=settings.ADMIN_HEADER),
    guard: AdminGuard = Depends(get_guard),
) -> None:
    guard.check(token)
