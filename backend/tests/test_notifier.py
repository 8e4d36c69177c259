import asyncio

import pytest

from curations.errors import InvalidInput, TransportError
from curations.notifier import DispatchResult, Dispatcher, SmtpTransport

from conftest import FakeTransport

RECIPIENTS = ["a@mailbox.org", "b@mailbox.org", "c@mailbox.org"]


def _dispatch(dispatcher, subject, body, recipients):
    return asyncio.run(dispatcher.dispatch(subject, body, recipients))


def test_one_failure_out_of_three():
    transport = FakeTransport(fail={"b@mailbox.org"})
    result = _dispatch(Dispatcher(lambda: transport), "New arrivals", "Velvet season.", RECIPIENTS)

    assert result == DispatchResult(succeeded=2, failed=1)
    assert result.message == "2 succeeded, 1 failed"
    assert sorted(r for r, _, _ in transport.sent) == ["a@mailbox.org", "c@mailbox.org"]


def test_sends_run_concurrently():
    started = []

    async def main():
        release = asyncio.Event()

        class SlowTransport(FakeTransport):
            async def send(self, recipient, subject, body):
                started.append(recipient)
                if len(started) == len(RECIPIENTS):
                    release.set()
                # every send must be in flight before any of them can finish
                await asyncio.wait_for(release.wait(), timeout=2)

        return await Dispatcher(SlowTransport).dispatch("s", "b", RECIPIENTS)

    assert asyncio.run(main()).message == "3 succeeded, 0 failed"


def test_no_subscribers():
    assert _dispatch(Dispatcher(FakeTransport), "s", "b", []).message == "0 succeeded, 0 failed"


@pytest.mark.parametrize("subject,body", [(None, "b"), ("s", None), ("", "b"), ("s", "  ")])
def test_missing_subject_or_body(subject, body):
    transport = FakeTransport()
    with pytest.raises(InvalidInput):
        _dispatch(Dispatcher(lambda: transport), subject, body, RECIPIENTS)
    assert transport.sent == []


def test_transport_that_cannot_be_built():
    def broken():
        raise RuntimeError("no route to relay")

    with pytest.raises(TransportError):
        _dispatch(Dispatcher(broken), "s", "b", RECIPIENTS)


def test_smtp_transport_requires_host_and_sender():
    with pytest.raises(TransportError):
        SmtpTransport(host="", port=587, sender="shop@mailbox.org")
    with pytest.raises(TransportError):
        SmtpTransport(host="smtp.mailbox.org", port=587, sender="")


def test_smtp_message_headers():
    transport = SmtpTransport(host="smtp.mailbox.org", port=587, sender="shop@mailbox.org")
    msg = transport.build_message("reader@mailbox.org", "New arrivals", "Velvet season.")
    assert msg["From"] == "shop@mailbox.org"
    assert msg["To"] == "reader@mailbox.org"
    assert msg["Subject"] == "New arrivals"
    assert msg.get_content().strip() == "Velvet season."
