"""Audit trail search."""

from datetime import datetime, timedelta, timezone

import pytest

from conftest import make_user
from sigecob.data.models import AuditLogModel
from sigecob.domain.enums import UserRole
from sigecob.domain.errors import Forbidden
from sigecob.services.audit_service import AuditService

NOW = datetime(2026, 3, 10, 12, 0, tzinfo=timezone.utc)


@pytest.fixture()
def auditor(db):
    return make_user(db, name="Raúl Auditor", role=UserRole.AUDITOR)


@pytest.fixture()
def entries(db, auditor):
    rows = [
        AuditLogModel(action="ORDER_CREATION_FAILED", user_id=1, entity=None, ip_address="10.0.0.7",
                      created_at=NOW - timedelta(days=3)),
        AuditLogModel(action="ORDER_CREATED_AND_PAYMENT_PROCESSED", user_id=1, entity="Order", entity_id=5,
                      ip_address="10.0.0.7", created_at=NOW - timedelta(days=1)),
        AuditLogModel(action="PRODUCT_UPDATED", user_id=2, entity="Product", entity_id=9,
                      ip_address="192.168.1.20", created_at=NOW),
    ]
    db.add_all(rows)
    db.commit()
    return rows


def _actions(result):
    return [e.action for e in result]


class TestSearch:
    def test_newest_first(self, db, auditor, entries):
        assert _actions(AuditService(db).list_entries(auditor.id)) == [
            "PRODUCT_UPDATED",
            "ORDER_CREATED_AND_PAYMENT_PROCESSED",
            "ORDER_CREATION_FAILED",
        ]

    def test_action_matches_partially(self, db, auditor, entries):
        result = AuditService(db).list_entries(auditor.id, action="ORDER_CREAT")
        assert _actions(result) == ["ORDER_CREATED_AND_PAYMENT_PROCESSED", "ORDER_CREATION_FAILED"]

    def test_by_user_and_entity(self, db, auditor, entries):
        svc = AuditService(db)
        assert _actions(svc.list_entries(auditor.id, user_id=2)) == ["PRODUCT_UPDATED"]
        assert _actions(svc.list_entries(auditor.id, user_id=1, entity="Order")) == [
            "ORDER_CREATED_AND_PAYMENT_PROCESSED"
        ]

    def test_ip_matches_partially(self, db, auditor, entries):
        svc = AuditService(db)
        assert len(svc.list_entries(auditor.id, ip_address="10.0.0")) == 2
        assert _actions(svc.list_entries(auditor.id, ip_address="192.168")) == ["PRODUCT_UPDATED"]

    def test_date_range(self, db, auditor, entries):
        result = AuditService(db).list_entries(
            auditor.id,
            start_date=NOW - timedelta(days=2),
            end_date=NOW - timedelta(hours=1),
        )
        assert _actions(result) == ["ORDER_CREATED_AND_PAYMENT_PROCESSED"]

    def test_limit(self, db, auditor, entries):
        assert _actions(AuditService(db).list_entries(auditor.id, limit=1)) == ["PRODUCT_UPDATED"]

    def test_customer_cannot_search(self, db, entries):
        customer = make_user(db)
        with pytest.raises(Forbidden):
            AuditService(db).list_entries(customer.id)
