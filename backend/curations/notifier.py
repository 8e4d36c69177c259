# FILE: curations/notifier.py
"""
Bulk notification to subscribers.

Every recipient gets its own send, all issued at once on the event loop.
A failed recipient is counted, never raised; only a transport that cannot
be built at all turns into TransportError.
"""
from __future__ import annotations

import asyncio
from dataclasses import dataclass
from email.message import EmailMessage
from typing import Callable, Iterable, List, Optional

import aiosmtplib

from . import settings
from .errors import InvalidInput, TransportError
from .logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class DispatchResult:
    succeeded: int
    failed: int

    @property
    def message(self) -> str:
        return f"{self.succeeded} succeeded, {self.failed} failed"


class MailTransport:
    async def send(self, recipient: str, subject: str, body: str) -> None:
        raise NotImplementedError


class SmtpTransport(MailTransport):
    def __init__(
        self,
        host: str,
        port: int,
        sender: str,
        username: str = "",
        password: str = "",
        use_tls: bool = False,
        timeout: float = 30,
    ):
        if not (host and sender):
            raise TransportError("Mail transport is not configured (SMTP_HOST/SMTP_FROM).")
        self.host = host
        self.port = port
        self.sender = sender
        self.username = username
        self.password = password
        self.use_tls = use_tls
        self.timeout = timeout

    @classmethod
    def from_settings(cls) -> "SmtpTransport":
        return cls(
            host=settings.SMTP_HOST,
            port=settings.SMTP_PORT,
            sender=settings.SMTP_FROM,
            username=settings.SMTP_USER,
            password=settings.SMTP_PASS,
            use_tls=settings.SMTP_USE_TLS,
            timeout=settings.SMTP_TIMEOUT,
        )

    def build_message(self, recipient: str, subject: str, body: str) -> EmailMessage:
        msg = EmailMessage()
        msg["From"] = self.sender
        msg["To"] = recipient
        msg["Subject"] = subject
        msg.set_content(body)
        return msg

    async def send(self, recipient: str, subject: str, body: str) -> None:
        await aiosmtplib.send(
            self.build_message(recipient, subject, body),
            hostname=self.host,
            port=self.port,
            username=self.username or None,
            password=self.password or None,
            use_tls=self.use_tls,
            # implicit TLS and STARTTLS are exclusive; None = upgrade if offered
            start_tls=False if self.use_tls else None,
            timeout=self.timeout,
        )


TransportFactory = Callable[[], MailTransport]


class Dispatcher:
    def __init__(self, transport_factory: TransportFactory = SmtpTransport.from_settings):
        self._transport_factory = transport_factory

    def _transport(self) -> MailTransport:
        try:
            return self._transport_factory()
        except TransportError:
            raise
        except Exception as e:
            raise TransportError(f"Mail transport could not be created: {e}") from e

    async def dispatch(
        self,
        subject: Optional[str],
        body: Optional[str],
        recipients: Iterable[str],
    ) -> DispatchResult:
        if not subject or not body or not str(subject).strip() or not str(body).strip():
            raise InvalidInput("Subject and content are required.")

        transport = self._transport()
        targets: List[str] = list(recipients)
        logger.info("Dispatching %r to %d subscribers", subject, len(targets))

        results = await asyncio.gather(
            *(transport.send(r, subject, body) for r in targets),
            return_exceptions=True,
        )

        failed = 0
        for recipient, outcome in zip(targets, results):
            if isinstance(outcome, BaseException):
                failed += 1
                logger.warning("Send to %s failed: %s", recipient, outcome)

        result = DispatchResult(succeeded=len(targets) - failed, failed=failed)
        logger.info("Dispatch %r finished: %s", subject, result.message)
        return result
