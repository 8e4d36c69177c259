import json

from curations.database import make_engine, make_session_factory
from curations.scripts.migrate_json_to_sql import run
from curations.stores import SqlAffiliateStore, SqlSubscriberStore


def test_migrate_copies_and_is_idempotent(tmp_path):
    subs = tmp_path / "subscribers.json"
    affs = tmp_path / "affiliates.json"
    subs.write_text(json.dumps(["a@mailbox.org", "A@MAILBOX.ORG", "b@mailbox.org", 7]))
    affs.write_text(json.dumps([
        {"id": 4, "name": "Spiral", "link": "https://spiraldirect.com", "categories": ["home"]},
        {"id": 9, "name": "Gothic Plus", "link": "https://gothicplus.com"},
        {"name": "no id", "link": "https://x.example"},
    ]))
    url = f"sqlite:///{tmp_path / 'migrated.db'}"

    counts = run(subs, affs, url)
    assert counts == {"subscribers": 2, "affiliates": 2, "skipped": 3}

    again = run(subs, affs, url)
    assert again["subscribers"] == 0

    sessions = make_session_factory(make_engine(url))
    assert SqlSubscriberStore(sessions).list() == ["a@mailbox.org", "b@mailbox.org"]
    affiliates = SqlAffiliateStore(sessions)
    assert [a["id"] for a in affiliates.list()] == [4, 9]
    assert affiliates.upsert({"name": "New", "link": "https://new.example"})["id"] == 10
