from sqlalchemy import select

from nft_oracle.core.keys import encode_token_key
from nft_oracle.models.index_entries import IssuerIndexEntry, OwnerIndexEntry
from nft_oracle.models.token_history import TokenHistory
from nft_oracle.models.token_record import TokenRecord
from nft_oracle.schemas.tokens import TokenInput
from nft_oracle.services.index_audit_service import IndexAuditService
from nft_oracle.services.ingestion_service import IngestionService


def test_clean_store_verifies(db):
    IngestionService().ingest(
        db,
        issuer_id="i1",
        records=[TokenInput(token_id="1", owner_id="alice"), TokenInput(token_id="1", owner_id="bob")],
    )
    report = IndexAuditService().verify(db)
    assert report.ok
    assert report.token_count == 1


def test_detects_drift(db):
    IngestionService().ingest(db, issuer_id="i1", records=[TokenInput(token_id="1", owner_id="alice")])
    key = encode_token_key("i1", "1")

    db.add(OwnerIndexEntry(owner_id="mallory", token_key=key))
    db.add(IssuerIndexEntry(issuer_id="i1", token_key=encode_token_key("i1", "ghost")))
    db.add(TokenHistory(token_key=encode_token_key("i9", "x"), previous_owner_id="eve"))
    db.commit()

    report = IndexAuditService().verify(db)
    assert not report.ok
    assert report.foreign_owner_entries == [key]
    assert report.dangling_index_keys == [encode_token_key("i1", "ghost")]
    assert report.orphan_history_keys == [encode_token_key("i9", "x")]
    assert report.missing_owner_entries == []


def test_detects_key_not_matching_columns(db):
    IngestionService().ingest(db, issuer_id="i1", records=[TokenInput(token_id="1", owner_id="alice")])
    rec = db.execute(select(TokenRecord)).scalar_one()
    rec.token_id = "2"
    db.commit()

    report = IndexAuditService().verify(db)
    assert not report.ok
    assert report.mismatched_keys == [encode_token_key("i1", "1")]
