"""
Unit tests for TicketLedger

Test Coverage:
1. Purchase: all-or-nothing issuance, price capture, ticket numbers
2. Check-in / cancel state machine through the service
3. Sold-out scenario with cancellation returning the seat
4. verify_credential happy path and every failure kind
5. Listing, stats and bulk check-in
6. Caller cancellation never leaves seat counts and tickets apart
"""

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import anyio
import attrs
import pytest
import uuid_utils

from src.service.ticketing.app.service.ticket_ledger_service import TicketLedger
from src.service.ticketing.domain.enum.ticket_status import TicketStatus
from src.service.ticketing.domain.ticketing_errors import (
    AlreadyUsedError,
    CannotCancelUsedTicketError,
    CredentialEventMismatchError,
    InsufficientInventoryError,
    InvalidQuantityError,
    MalformedCredentialError,
    TicketCanceledError,
    TicketNotFoundError,
)
from src.service.ticketing.domain.value_object.credential_payload import CredentialPayload
from src.service.ticketing.driven_adapter.repo.ticket_repo_in_memory_impl import (
    TicketRepoInMemoryImpl,
)


pytestmark = pytest.mark.unit


class FlakyTicketRepo(TicketRepoInMemoryImpl):
    """Fails the n-th ticket write"""

    def __init__(self, *, fail_on_write: int) -> None:
        super().__init__()
        self.fail_on_write = fail_on_write
        self.writes = 0

    async def upsert(self, value):
        self.writes += 1
        if self.writes == self.fail_on_write:
            raise RuntimeError('storage unavailable')
        return await super().upsert(value)


class TestPurchase:
    @pytest.mark.asyncio
    async def test_purchase_issues_confirmed_tickets(self, ledger, clock):
        result = await ledger.purchase(event_id='E1', owner_id='U1', quantity=2)

        assert result.quantity == 2
        assert result.total_charged == Decimal('50.00')
        assert result.ticket_type.sold == 2
        for index, ticket in enumerate(result.tickets):
            assert ticket.status is TicketStatus.CONFIRMED
            assert ticket.owner_id == 'U1'
            assert ticket.unit_price == Decimal('25.00')
            assert ticket.purchased_at == clock.now()
            assert ticket.sequence_index == index
            assert ticket.ticket_number.startswith('TKT-20260301-')
        assert len({t.ticket_number for t in result.tickets}) == 2

    @pytest.mark.asyncio
    async def test_sequence_continues_across_purchases(self, ledger):
        first = await ledger.purchase(event_id='E2', owner_id='U1', quantity=2)
        second = await ledger.purchase(event_id='E2', owner_id='U1', quantity=1)
        other_owner = await ledger.purchase(event_id='E2', owner_id='U2', quantity=1)

        assert [t.sequence_index for t in first.tickets] == [0, 1]
        assert [t.sequence_index for t in second.tickets] == [2]
        assert [t.sequence_index for t in other_owner.tickets] == [0]

    @pytest.mark.asyncio
    async def test_over_capacity_creates_nothing(self, ledger, ticket_repo, inventory):
        with pytest.raises(InsufficientInventoryError):
            await ledger.purchase(event_id='E1', owner_id='U1', quantity=3)

        assert len(ticket_repo) == 0
        (ticket_type,) = await inventory.get_or_default_ticket_types(event_id='E1')
        assert ticket_type.sold == 0

    @pytest.mark.asyncio
    @pytest.mark.parametrize('quantity', [0, -1])
    async def test_quantity_must_be_positive(self, ledger, quantity):
        with pytest.raises(InvalidQuantityError):
            await ledger.purchase(event_id='E1', owner_id='U1', quantity=quantity)

    @pytest.mark.asyncio
    async def test_price_is_captured_at_purchase(self, ledger, inventory, ticket_type_repo):
        result = await ledger.purchase(event_id='E1', owner_id='U1', quantity=1)
        ticket_type = await inventory.get_ticket_type(ticket_type_id=result.ticket_type.id)
        await ticket_type_repo.upsert(attrs.evolve(ticket_type, unit_price=Decimal('99')))

        ticket = await ledger.get_ticket(ticket_id=result.tickets[0].id)

        assert ticket.unit_price == Decimal('25.00')

    @pytest.mark.asyncio
    async def test_storage_failure_rolls_back_tickets_and_inventory(
        self, inventory, event_catalog, credential_issuer, clock
    ):
        flaky_repo = FlakyTicketRepo(fail_on_write=2)
        ledger = TicketLedger(
            ticket_repo=flaky_repo,
            inventory=inventory,
            event_catalog=event_catalog,
            credential_issuer=credential_issuer,
            clock=clock,
        )

        with pytest.raises(RuntimeError):
            await ledger.purchase(event_id='E2', owner_id='U1', quantity=3)

        assert len(flaky_repo) == 0
        (ticket_type,) = await inventory.get_or_default_ticket_types(event_id='E2')
        assert ticket_type.sold == 0

    @pytest.mark.asyncio
    async def test_concurrent_purchases_never_oversell(self, ledger, ticket_repo):
        outcomes: list[str] = []

        async def buy(owner_id: str) -> None:
            try:
                await ledger.purchase(event_id='E1', owner_id=owner_id, quantity=1)
                outcomes.append('ok')
            except InsufficientInventoryError:
                outcomes.append('sold_out')

        async with anyio.create_task_group() as tg:
            for i in range(6):
                tg.start_soon(buy, f'U{i}')

        assert outcomes.count('ok') == 2
        assert len(ticket_repo) == 2


class TestSoldOutScenario:
    @pytest.mark.asyncio
    async def test_cancel_returns_seat_to_next_buyer(self, ledger, inventory):
        # E1 has a single ticket type with available=2, sold=0
        first = await ledger.purchase(event_id='E1', owner_id='U1', quantity=2)
        assert first.ticket_type.sold == 2

        with pytest.raises(InsufficientInventoryError):
            await ledger.purchase(event_id='E1', owner_id='U2', quantity=1)

        await ledger.cancel(ticket_id=first.tickets[0].id)
        (ticket_type,) = await inventory.get_or_default_ticket_types(event_id='E1')
        assert ticket_type.sold == 1

        second = await ledger.purchase(event_id='E1', owner_id='U2', quantity=1)
        assert second.ticket_type.sold == 2

    @pytest.mark.asyncio
    async def test_cancel_restores_exactly_the_canceled_quantity(self, ledger, inventory):
        (before,) = await inventory.get_or_default_ticket_types(event_id='E2')
        result = await ledger.purchase(event_id='E2', owner_id='U1', quantity=4)

        for ticket in result.tickets:
            await ledger.cancel(ticket_id=ticket.id)

        (after,) = await inventory.get_or_default_ticket_types(event_id='E2')
        assert after.remaining == before.remaining


async def run_then_cancel(steps: int, operation, **kwargs) -> None:
    """Start ``operation`` and cancel it after ``steps`` scheduler turns"""
    async with anyio.create_task_group() as tg:

        async def call() -> None:
            await operation(**kwargs)

        tg.start_soon(call)
        for _ in range(steps):
            await anyio.sleep(0)
        tg.cancel_scope.cancel()


class TestCallerCancellation:
    @pytest.mark.asyncio
    @pytest.mark.parametrize('steps', range(16))
    async def test_cancelled_purchase_keeps_sold_and_tickets_in_step(
        self, ledger, inventory, ticket_repo, steps
    ):
        await run_then_cancel(steps, ledger.purchase, event_id='E2', owner_id='U1', quantity=3)

        (ticket_type,) = await inventory.get_or_default_ticket_types(event_id='E2')
        tickets = await ticket_repo.list_by_event(event_id='E2')
        assert ticket_type.sold == len(tickets)
        assert len(tickets) in (0, 3)

    @pytest.mark.asyncio
    @pytest.mark.parametrize('steps', range(12))
    async def test_cancelled_cancel_keeps_sold_and_tickets_in_step(
        self, ledger, inventory, ticket_repo, steps
    ):
        result = await ledger.purchase(event_id='E2', owner_id='U1', quantity=1)

        await run_then_cancel(steps, ledger.cancel, ticket_id=result.tickets[0].id)

        (ticket_type,) = await inventory.get_or_default_ticket_types(event_id='E2')
        confirmed = [
            t
            for t in await ticket_repo.list_by_event(event_id='E2')
            if t.status is TicketStatus.CONFIRMED
        ]
        assert ticket_type.sold == len(confirmed)


class TestLifecycle:
    @pytest.mark.asyncio
    async def test_check_in_then_again_fails(self, ledger, clock):
        (ticket,) = (await ledger.purchase(event_id='E2', owner_id='U1', quantity=1)).tickets
        clock.advance(hours=1)

        used = await ledger.check_in(ticket_id=ticket.id, checker_id='staff-1')

        assert used.status is TicketStatus.USED
        assert used.checked_in_at == clock.now()
        with pytest.raises(AlreadyUsedError):
            await ledger.check_in(ticket_id=ticket.id, checker_id='staff-2')

    @pytest.mark.asyncio
    async def test_cancel_records_reason_and_blocks_check_in(self, ledger):
        (ticket,) = (await ledger.purchase(event_id='E2', owner_id='U1', quantity=1)).tickets

        canceled = await ledger.cancel(ticket_id=ticket.id, reason='duplicate order')

        assert canceled.status is TicketStatus.CANCELED
        assert canceled.cancel_reason == 'duplicate order'
        with pytest.raises(TicketCanceledError):
            await ledger.check_in(ticket_id=ticket.id, checker_id='staff-1')
        with pytest.raises(TicketCanceledError):
            await ledger.cancel(ticket_id=ticket.id)

    @pytest.mark.asyncio
    async def test_used_ticket_cannot_be_canceled_and_keeps_its_seat(self, ledger, inventory):
        result = await ledger.purchase(event_id='E2', owner_id='U1', quantity=1)
        await ledger.check_in(ticket_id=result.tickets[0].id, checker_id='staff-1')

        with pytest.raises(CannotCancelUsedTicketError):
            await ledger.cancel(ticket_id=result.tickets[0].id)

        ticket_type = await inventory.get_ticket_type(ticket_type_id=result.ticket_type.id)
        assert ticket_type.sold == 1

    @pytest.mark.asyncio
    async def test_unknown_ticket(self, ledger):
        with pytest.raises(TicketNotFoundError):
            await ledger.check_in(ticket_id=uuid_utils.uuid7(), checker_id='staff-1')
        with pytest.raises(TicketNotFoundError):
            await ledger.cancel(ticket_id=uuid_utils.uuid7())


class TestVerifyCredential:
    @pytest.mark.asyncio
    async def test_valid_credential_checks_ticket_in(self, ledger, credential_issuer):
        (ticket,) = (await ledger.purchase(event_id='E1', owner_id='U1', quantity=1)).tickets

        verified = await ledger.verify_credential(
            code=credential_issuer.issue(ticket), checker_id='gate-3'
        )

        assert verified.id == ticket.id
        assert verified.status is TicketStatus.USED
        assert verified.checked_in_by == 'gate-3'

    @pytest.mark.asyncio
    async def test_credential_of_used_ticket_fails_without_changing_state(
        self, ledger, credential_issuer, clock
    ):
        (ticket,) = (await ledger.purchase(event_id='E1', owner_id='U1', quantity=1)).tickets
        code = credential_issuer.issue(ticket)
        first = await ledger.verify_credential(code=code, checker_id='gate-1')
        clock.advance(minutes=5)

        with pytest.raises(AlreadyUsedError):
            await ledger.verify_credential(code=code, checker_id='gate-2')

        stored = await ledger.get_ticket(ticket_id=ticket.id)
        assert stored == first

    @pytest.mark.asyncio
    async def test_credential_of_canceled_ticket(self, ledger, credential_issuer):
        (ticket,) = (await ledger.purchase(event_id='E1', owner_id='U1', quantity=1)).tickets
        await ledger.cancel(ticket_id=ticket.id)

        with pytest.raises(TicketCanceledError):
            await ledger.verify_credential(
                code=credential_issuer.issue(ticket), checker_id='gate-1'
            )

    @pytest.mark.asyncio
    async def test_each_ticket_of_a_purchase_verifies_separately(
        self, ledger, credential_issuer
    ):
        result = await ledger.purchase(event_id='E2', owner_id='U1', quantity=3)

        verified = [
            await ledger.verify_credential(code=credential_issuer.issue(t), checker_id='gate-1')
            for t in result.tickets
        ]

        assert [v.id for v in verified] == [t.id for t in result.tickets]

    @pytest.mark.asyncio
    async def test_malformed_credential(self, ledger):
        with pytest.raises(MalformedCredentialError):
            await ledger.verify_credential(code='definitely not a ticket', checker_id='gate-1')

    @pytest.mark.asyncio
    async def test_well_formed_credential_without_ticket(self, ledger, credential_issuer):
        (ticket,) = (await ledger.purchase(event_id='E1', owner_id='U1', quantity=1)).tickets
        forged = credential_issuer.issue(attrs.evolve(ticket, owner_id='U9'))

        with pytest.raises(TicketNotFoundError):
            await ledger.verify_credential(code=forged, checker_id='gate-1')

    @pytest.mark.asyncio
    async def test_credential_with_wrong_purchase_time(self, ledger, credential_issuer, clock):
        (ticket,) = (await ledger.purchase(event_id='E1', owner_id='U1', quantity=1)).tickets
        stale = credential_issuer.issue(
            attrs.evolve(ticket, purchased_at=clock.advance(seconds=1))
        )

        with pytest.raises(TicketNotFoundError):
            await ledger.verify_credential(code=stale, checker_id='gate-1')

    @pytest.mark.asyncio
    async def test_event_scoped_verification(self, ledger, credential_issuer):
        (ticket,) = (await ledger.purchase(event_id='E1', owner_id='U1', quantity=1)).tickets
        code = credential_issuer.issue(ticket)

        with pytest.raises(CredentialEventMismatchError):
            await ledger.verify_credential(code=code, checker_id='gate-1', event_id='E2')

        assert (await ledger.get_ticket(ticket_id=ticket.id)).status is TicketStatus.CONFIRMED
        verified = await ledger.verify_credential(code=code, checker_id='gate-1', event_id='E1')
        assert verified.status is TicketStatus.USED


class TestQueries:
    @pytest.mark.asyncio
    async def test_owner_tickets_newest_first(self, ledger, clock):
        early = await ledger.purchase(event_id='E2', owner_id='U1', quantity=1)
        clock.advance(days=1)
        late = await ledger.purchase(event_id='E1', owner_id='U1', quantity=1)
        await ledger.purchase(event_id='E2', owner_id='U2', quantity=1)

        tickets = await ledger.list_tickets_for_owner(owner_id='U1')

        assert [t.id for t in tickets] == [late.tickets[0].id, early.tickets[0].id]

    @pytest.mark.asyncio
    async def test_event_tickets(self, ledger):
        await ledger.purchase(event_id='E2', owner_id='U1', quantity=2)
        await ledger.purchase(event_id='E2', owner_id='U2', quantity=1)
        await ledger.purchase(event_id='E1', owner_id='U1', quantity=1)

        tickets = await ledger.list_tickets_for_event(event_id='E2')

        assert len(tickets) == 3
        assert {t.event_id for t in tickets} == {'E2'}

    @pytest.mark.asyncio
    async def test_event_ticket_stats(self, ledger, inventory):
        vip = await inventory.create_ticket_type(
            event_id='E1', name='VIP', unit_price=Decimal('80'), available=3
        )
        standard = await inventory.create_ticket_type(
            event_id='E1', name='Standard', unit_price=Decimal('20'), available=10
        )
        vip_purchase = await ledger.purchase(
            event_id='E1', owner_id='U1', quantity=2, ticket_type_id=vip.id
        )
        std_purchase = await ledger.purchase(
            event_id='E1', owner_id='U2', quantity=3, ticket_type_id=standard.id
        )
        await ledger.check_in(ticket_id=vip_purchase.tickets[0].id, checker_id='staff-1')
        await ledger.cancel(ticket_id=std_purchase.tickets[0].id)

        stats = await ledger.get_event_ticket_stats(event_id='E1')

        assert stats.total_tickets == 5
        assert stats.confirmed_tickets == 3
        assert stats.used_tickets == 1
        assert stats.canceled_tickets == 1
        assert stats.total_revenue == Decimal('200')
        by_name = {s.name: s for s in stats.by_ticket_type}
        assert by_name['VIP'].revenue == Decimal('160')
        assert by_name['VIP'].remaining == 1
        assert by_name['Standard'].tickets == 3
        assert by_name['Standard'].sold == 2
        assert by_name['Standard'].remaining == 8

    @pytest.mark.asyncio
    async def test_bulk_check_in_skips_what_cannot_be_checked_in(self, ledger):
        result = await ledger.purchase(event_id='E2', owner_id='U1', quantity=4)
        confirmed, used, canceled, also_confirmed = result.tickets
        await ledger.check_in(ticket_id=used.id, checker_id='staff-1')
        await ledger.cancel(ticket_id=canceled.id)

        checked_in = await ledger.bulk_check_in(
            ticket_ids=[confirmed.id, used.id, canceled.id, uuid_utils.uuid7(), also_confirmed.id],
            checker_id='staff-2',
        )

        assert [t.id for t in checked_in] == [confirmed.id, also_confirmed.id]
        assert all(t.checked_in_by == 'staff-2' for t in checked_in)
        assert (await ledger.get_ticket(ticket_id=used.id)).checked_in_by == 'staff-1'

    @pytest.mark.asyncio
    async def test_attach_credential_keeps_first_value(self, ledger):
        (ticket,) = (await ledger.purchase(event_id='E2', owner_id='U1', quantity=1)).tickets

        first = await ledger.attach_credential(ticket_id=ticket.id, credential='TKT1.first')
        second = await ledger.attach_credential(ticket_id=ticket.id, credential='TKT1.second')

        assert first.credential == 'TKT1.first'
        assert second.credential == 'TKT1.first'


def test_epoch_ms_ignores_offset_representation():
    utc = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)
    shifted = utc.astimezone(timezone(timedelta(hours=9)))

    assert CredentialPayload.to_epoch_ms(utc) == CredentialPayload.to_epoch_ms(shifted)
