"""Flow tests for LedgerService against in-memory storage."""

from datetime import datetime
from decimal import Decimal

import pytest

from conftest import ALICE, BOB, CHARLIE, make_expense
from splitledger.audit import AuditLogger
from splitledger.config.settings import LedgerSettings
from splitledger.models import AuditEventType, Group
from splitledger.orchestrator import (
    InvalidExpenseError,
    LedgerService,
    SettlementError,
    create_ledger_components,
)
from splitledger.services.storage import (
    DuplicateError,
    InMemoryAuditStorage,
    InMemoryLedgerStorage,
    NotFoundError,
)


@pytest.fixture
def audit_storage():
    return InMemoryAuditStorage()


@pytest.fixture
def service(users, group, audit_storage):
    storage = InMemoryLedgerStorage(users=users, groups=[group])
    return LedgerService(
        storage=storage,
        audit_logger=AuditLogger(audit_storage),
        settings=LedgerSettings(default_currency="eur"),
    )


@pytest.fixture
def loaded_service(service, expenses):
    for expense in expenses:
        service.record_expense(expense)
    return service


class TestRecordExpense:
    """Tests for writing expenses through the service."""

    def test_valid_expense_is_stored_and_audited(self, service, audit_storage):
        expense = make_expense(id="e9")
        stored, result = service.record_expense(expense)
        assert stored is expense
        assert result.is_valid is True
        assert service.storage.get_expense("e9") == expense

        events = audit_storage.get_events_by_entity("expense", "e9")
        assert [e.event_type for e in events] == [AuditEventType.EXPENSE_ADDED]

    def test_invalid_expense_is_rejected(self, service, audit_storage):
        """Test schema failures raise and nothing is stored."""
        expense = make_expense(id="bad", amount=Decimal("0"))
        with pytest.raises(InvalidExpenseError) as excinfo:
            service.record_expense(expense)

        assert excinfo.value.result.is_valid is False
        assert "amount" in str(excinfo.value)
        assert service.storage.get_expense("bad") is None
        events = audit_storage.get_events_by_entity("expense", "bad")
        assert events[0].event_type == AuditEventType.EXPENSE_REJECTED

    def test_group_membership_warnings_are_returned(self, service):
        expense = make_expense(id="w", paid_by=ALICE, split_between=[ALICE, "outsider"], group_id="g1")
        _, result = service.record_expense(expense)
        assert result.is_valid is True
        assert result.warnings

    def test_duplicate_id(self, service, audit_storage):
        """Test storage errors are audited and re-raised."""
        service.record_expense(make_expense(id="dup"))
        with pytest.raises(DuplicateError):
            service.record_expense(make_expense(id="dup"))
        latest = audit_storage.get_recent_events(1)[0]
        assert latest.event_type == AuditEventType.SYSTEM_ERROR
        assert latest.details == {"expense_id": "dup"}


class TestDraftsAndUpdates:
    """Tests for draft publication and updates."""

    def test_draft_counts_only_after_publish(self, service):
        service.record_expense(make_expense(id="d", amount=Decimal("80"), is_draft=True))
        assert service.balance_with(ALICE, BOB) == 0

        published = service.publish_draft("d")
        assert published.is_draft is False
        assert service.balance_with(ALICE, BOB) == Decimal("40")

    def test_incomplete_draft_is_kept(self, service, audit_storage):
        """Test drafts are stored without passing schema validation."""
        stored, result = service.record_expense(make_expense(id="d", amount=Decimal("0"), is_draft=True))
        assert result.is_valid is False
        assert service.storage.get_expense("d") is stored
        events = audit_storage.get_events_by_entity("expense", "d")
        assert [e.event_type for e in events] == [AuditEventType.EXPENSE_ADDED]

    def test_publish_revalidates(self, service):
        """Test an incomplete draft cannot be published."""
        service.record_expense(make_expense(id="d", title="", is_draft=True))
        with pytest.raises(InvalidExpenseError):
            service.publish_draft("d")
        assert service.storage.get_expense("d").is_draft is True

    def test_completed_draft_can_be_published(self, service):
        service.record_expense(make_expense(id="d", amount=Decimal("0"), is_draft=True))
        service.update_expense("d", {"amount": Decimal("20")})
        assert service.publish_draft("d").is_draft is False
        assert service.balance_with(ALICE, BOB) == Decimal("10")

    def test_publish_unknown_expense(self, service):
        with pytest.raises(NotFoundError):
            service.publish_draft("nope")

    def test_update_expense(self, service, audit_storage):
        service.record_expense(make_expense(id="u", amount=Decimal("10")))
        updated = service.update_expense("u", {"amount": Decimal("30")})
        assert updated.amount == Decimal("30")
        assert service.balance_with(ALICE, BOB) == Decimal("15")
        events = audit_storage.get_events_by_entity("expense", "u")
        assert events[-1].details["fields"] == ["amount"]

    def test_update_values_are_coerced(self, service):
        """Test updates given as plain values are stored with model types."""
        service.record_expense(make_expense(id="u", amount=Decimal("10")))
        service.update_expense("u", {"amount": 30.5})
        service.update_expense("u", {"date": "2024-07-01T00:00:00"})

        stored = service.storage.get_expense("u")
        assert isinstance(stored.amount, Decimal)
        assert stored.date == datetime(2024, 7, 1)

        balances = service.friend_balances(ALICE)
        assert balances[0].balance == Decimal("15.25")
        assert balances[0].last_transaction == datetime(2024, 7, 1)

    def test_update_cannot_break_published_expense(self, service):
        service.record_expense(make_expense(id="u"))
        with pytest.raises(InvalidExpenseError):
            service.update_expense("u", {"split_between": []})
        assert service.storage.get_expense("u").split_between == [ALICE, BOB]

    def test_delete_expense(self, service):
        service.record_expense(make_expense(id="x"))
        assert service.delete_expense("x") is True
        assert service.delete_expense("x") is False


class TestGroups:
    """Tests for group management through the service."""

    def test_delete_group_removes_its_expenses(self, loaded_service):
        removed = loaded_service.delete_group("g1")
        assert removed == 2
        assert loaded_service.storage.get_group_expenses("g1") == []
        assert loaded_service.storage.get_expense("e3") is not None

    def test_group_balance_unknown_group(self, service):
        with pytest.raises(NotFoundError):
            service.group_balance("missing", ALICE)

    def test_add_group(self, service):
        group = Group(id="g2", name="Trip", members=[ALICE, BOB], created_by=ALICE)
        service.add_group(group)
        assert service.storage.list_groups(member_id=BOB)[-1].id == "g2"


class TestBalanceReads:
    """Tests for the read side of the service."""

    def test_group_balance(self, loaded_service):
        balance = loaded_service.group_balance("g1", ALICE)
        assert balance.net_balance == Decimal("170")

    def test_friend_balances_exclude_current_user(self, loaded_service):
        balances = loaded_service.friend_balances(ALICE)
        assert [(b.friend_id, b.balance) for b in balances] == [(CHARLIE, Decimal("50"))]

    def test_summarize(self, loaded_service, audit_storage):
        summary = loaded_service.summarize(ALICE)
        assert summary.user_id == ALICE
        assert [g.group_id for g in summary.group_balances] == ["g1"]
        assert summary.total.total_owed == Decimal("250")
        assert summary.total.total_owing == Decimal("30")
        assert summary.total.net_balance == Decimal("220")
        assert audit_storage.get_recent_events(1)[0].event_type == AuditEventType.BALANCES_COMPUTED

    def test_summarize_from_bob(self, loaded_service):
        """Bob owes his dinner share and is owed half the movie."""
        summary = loaded_service.summarize(BOB)
        assert summary.total.total_owing == Decimal("100")
        assert summary.total.total_owed == Decimal("30")
        # the gift between Alice and Charlie leaves Bob's balances at zero
        assert [(b.friend_id, b.balance) for b in summary.friend_balances] == [(ALICE, 0), (CHARLIE, 0)]

    def test_summarize_skips_groups_user_is_not_in(self, loaded_service):
        loaded_service.add_group(Group(id="g9", name="Other", members=[BOB], created_by=BOB))
        summary = loaded_service.summarize(ALICE)
        assert [g.group_id for g in summary.group_balances] == ["g1"]


class TestSettlements:
    """Tests for recording settlements."""

    def test_settlement_is_recorded(self, loaded_service, audit_storage):
        transaction = loaded_service.settle_balance(BOB, ALICE, Decimal("70"))
        assert transaction.currency == "EUR"
        assert transaction.amount == Decimal("70")
        assert loaded_service.list_transactions(ALICE) == [transaction]
        assert loaded_service.list_transactions(CHARLIE) == []
        events = audit_storage.get_events_by_entity("transaction", transaction.id)
        assert events[0].actor_id == BOB

    def test_settlement_leaves_balances_alone(self, loaded_service):
        before = loaded_service.group_balance("g1", ALICE)
        loaded_service.settle_balance(BOB, ALICE, 70, currency="USD")
        assert loaded_service.group_balance("g1", ALICE) == before

    @pytest.mark.parametrize("amount", [0, -5])
    def test_non_positive_settlement(self, service, amount):
        with pytest.raises(SettlementError):
            service.settle_balance(BOB, ALICE, amount)

    def test_self_settlement(self, service):
        with pytest.raises(SettlementError):
            service.settle_balance(ALICE, ALICE, 10)


class TestFactory:
    """Tests for create_ledger_components."""

    def test_creates_wired_service(self, users):
        service, audit_logger = create_ledger_components(
            storage=InMemoryLedgerStorage(users=users),
            settings=LedgerSettings(),
        )
        assert isinstance(service, LedgerService)
        assert isinstance(audit_logger, AuditLogger)
        service.record_expense(make_expense(id="f", date=datetime(2024, 1, 1)))
        assert service.balance_with(ALICE, BOB) == Decimal("50")

    def test_default_storage_is_fresh(self):
        first, _ = create_ledger_components(settings=LedgerSettings())
        second, _ = create_ledger_components(settings=LedgerSettings())
        first.record_expense(make_expense(id="only-first"))
        assert second.storage.get_expense("only-first") is None


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
