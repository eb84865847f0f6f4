import pytest
from sqlalchemy import select

from nft_oracle.api.v1 import feed
from nft_oracle.models.audit_log import AuditLogRecord
from nft_oracle.models.index_entries import OwnerIndexEntry
from nft_oracle.models.token_history import TokenHistory
from nft_oracle.models.token_record import TokenRecord

PREFIX = "/api/v1"


def _ingest(client, headers, issuer_id, tokens):
    return client.post(
        f"{PREFIX}/feed/ingest",
        json={"issuer_id": issuer_id, "tokens": tokens},
        headers=headers,
    )


def test_health(client):
    r = client.get(f"{PREFIX}/health", headers={"X-Request-Id": "rid-1"})
    assert r.status_code == 200
    assert r.json() == {"status": "ok", "request_id": "rid-1"}
    assert r.headers["X-Request-Id"] == "rid-1"


def test_ingest_requires_bearer(client):
    r = _ingest(client, {}, "issuerX", [{"token_id": "1", "owner_id": "alice"}])
    assert r.status_code in (401, 403)


def test_ingest_rejects_non_feed_role(client, auditor_headers):
    r = _ingest(client, auditor_headers, "issuerX", [{"token_id": "1", "owner_id": "alice"}])
    assert r.status_code == 403


def test_ingest_rejects_bad_token(client):
    r = _ingest(client, {"Authorization": "Bearer not-a-jwt"}, "issuerX", [])
    assert r.status_code == 401


def test_scenario_over_http(client, feed_headers):
    r = _ingest(client, feed_headers, "issuerX", [{"token_id": "1", "owner_id": "alice"}])
    assert r.status_code == 200, r.text
    assert r.json()["inserted"] == 1

    r = client.get(f"{PREFIX}/tokens/previous-owner", params={"issuer_id": "issuerX", "token_id": "1"})
    assert r.json()["previous_owner_id"] is None

    r = _ingest(client, feed_headers, "issuerX", [{"token_id": "1", "owner_id": "bob"}])
    assert r.json()["transferred"] == 1

    r = client.get(f"{PREFIX}/tokens/previous-owner", params={"issuer_id": "issuerX", "token_id": "1"})
    assert r.json()["previous_owner_id"] == "alice"

    assert client.get(f"{PREFIX}/owners/alice/tokens").json() == []
    bob = client.get(f"{PREFIX}/owners/bob/tokens").json()
    assert [t["token_id"] for t in bob] == ["1"]

    issuer = client.get(f"{PREFIX}/issuers/issuerX/tokens").json()
    assert issuer == [
        {
            "issuer_id": "issuerX",
            "token_id": "1",
            "owner_id": "bob",
            "metadata": None,
            "approved_account_ids": None,
        }
    ]


def test_pagination_params(client, feed_headers):
    tokens = [{"token_id": str(n), "owner_id": "alice"} for n in range(6)]
    assert _ingest(client, feed_headers, "nft.near", tokens).status_code == 200

    r = client.get(f"{PREFIX}/tokens", params={"from_index": 2, "limit": 3})
    assert [t["token_id"] for t in r.json()] == ["2", "3", "4"]

    r = client.get(f"{PREFIX}/owners/alice/tokens", params={"from_index": 5})
    assert [t["token_id"] for t in r.json()] == ["5"]

    assert client.get(f"{PREFIX}/tokens", params={"from_index": -1}).status_code == 422
    assert client.get(f"{PREFIX}/tokens", params={"limit": -1}).status_code == 422

    assert client.get(f"{PREFIX}/tokens/supply").json()["total"] == 6
    assert client.get(f"{PREFIX}/owners/alice/supply").json()["total"] == 6
    assert client.get(f"{PREFIX}/issuers/nft.near/supply").json()["total"] == 6


def test_unknown_issuer_is_empty_not_error(client):
    r = client.get(f"{PREFIX}/issuers/never.near/tokens")
    assert r.status_code == 200
    assert r.json() == []


def test_lookup_and_set_owner(client, feed_headers):
    _ingest(
        client,
        feed_headers,
        "issuerX",
        [{"token_id": "1", "owner_id": "alice", "metadata": {"title": "t"}, "approved_account_ids": {"m.near": 4}}],
    )

    r = client.post(
        f"{PREFIX}/feed/owner",
        json={"issuer_id": "issuerX", "token_id": "1", "owner_id": "carol"},
        headers=feed_headers,
    )
    assert r.status_code == 200
    assert r.json()["changed"] is True

    r = client.get(f"{PREFIX}/tokens/lookup", params={"issuer_id": "issuerX", "token_id": "1"})
    body = r.json()
    assert body["owner_id"] == "carol"
    assert body["metadata"] == {"title": "t"}
    assert body["approved_account_ids"] == {"m.near": 4}

    r = client.post(
        f"{PREFIX}/feed/owner",
        json={"issuer_id": "issuerX", "token_id": "404", "owner_id": "carol"},
        headers=feed_headers,
    )
    assert r.json() == {
        "issuer_id": "issuerX",
        "token_id": "404",
        "owner_id": "carol",
        "found": False,
        "changed": False,
    }

    r = client.get(f"{PREFIX}/tokens/lookup", params={"issuer_id": "issuerX", "token_id": "404"})
    assert r.status_code == 404


def test_invalid_payload_is_422(client, feed_headers):
    r = _ingest(client, feed_headers, "issuerX", [{"token_id": "", "owner_id": "alice"}])
    assert r.status_code == 422


def test_writes_are_audited(client, feed_headers, db):
    _ingest(client, feed_headers, "issuerX", [{"token_id": "1", "owner_id": "alice"}])
    _ingest(client, feed_headers, "issuerX", [])

    rows = db.execute(select(AuditLogRecord)).scalars().all()
    assert len(rows) == 1
    assert rows[0].actor_participant_id == "feed-mintbase"
    assert rows[0].payload_summary_json["inserted"] == 1


def test_verify_endpoint(client, feed_headers, auditor_headers):
    _ingest(client, feed_headers, "issuerX", [{"token_id": "1", "owner_id": "alice"}])

    r = client.get(f"{PREFIX}/oracle/verify", headers=auditor_headers)
    assert r.status_code == 200
    assert r.json()["ok"] is True
    assert r.json()["token_count"] == 1

    assert client.get(f"{PREFIX}/oracle/verify").status_code in (401, 403)


def _boom(*args, **kwargs):
    raise RuntimeError("audit store unavailable")


def test_failed_audit_write_rolls_back_ingest(client, feed_headers, db, monkeypatch):
    monkeypatch.setattr(feed, "audit_event", _boom)

    with pytest.raises(RuntimeError):
        _ingest(client, feed_headers, "issuerX", [{"token_id": "1", "owner_id": "alice"}])

    assert db.execute(select(TokenRecord)).scalars().all() == []
    assert db.execute(select(OwnerIndexEntry)).scalars().all() == []
    assert db.execute(select(AuditLogRecord)).scalars().all() == []


def test_failed_audit_write_rolls_back_set_owner(client, feed_headers, db, monkeypatch):
    _ingest(client, feed_headers, "issuerX", [{"token_id": "1", "owner_id": "alice"}])
    monkeypatch.setattr(feed, "audit_event", _boom)

    with pytest.raises(RuntimeError):
        client.post(
            f"{PREFIX}/feed/owner",
            json={"issuer_id": "issuerX", "token_id": "1", "owner_id": "carol"},
            headers=feed_headers,
        )

    rec = db.execute(select(TokenRecord)).scalar_one()
    assert rec.owner_id == "alice"
    assert db.execute(select(TokenHistory)).scalars().all() == []
    owners = db.execute(select(OwnerIndexEntry.owner_id)).scalars().all()
    assert owners == ["alice"]
