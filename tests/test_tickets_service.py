from datetime import timezone

import pytest

from supportops.core import ValidationException
from supportops.tickets.application import TicketService, ITicketNotifier
from supportops.tickets.domain import Ticket, TicketIdSequence
from supportops.tickets.infrastructure import InMemoryTicketRepository, sample_ticket
from supportops.triage.application import ITriageService
from supportops.triage.domain import TriageResult


class FixedTriage(ITriageService):
    def __init__(self, result):
        self.result = result
        self.texts = []

    async def triage(self, text):
        self.texts.append(text)
        return self.result


class RecordingNotifier(ITicketNotifier):
    def __init__(self):
        self.tickets = []

    async def ticket_created(self, ticket):
        self.tickets.append(ticket)


def make_service(result=None, notifier=None, initial=None, clock_ms=lambda: 1_000):
    repository = InMemoryTicketRepository(initial)
    triage = FixedTriage(result or TriageResult(priority="high", suggested_reply="On it."))
    service = TicketService(
        repository=repository,
        triage=triage,
        notifier=notifier or RecordingNotifier(),
        id_sequence=TicketIdSequence(clock_ms=clock_ms)
    )
    return service, repository, triage


@pytest.mark.asyncio
async def test_create_ticket_applies_triage_and_prepends():
    notifier = RecordingNotifier()
    service, repository, triage = make_service(notifier=notifier, initial=[sample_ticket()])

    ticket = await service.create_ticket("printer jam")

    assert ticket.title == "printer jam"
    assert ticket.status == "new"
    assert ticket.priority == "high"
    assert ticket.suggested_reply == "On it."
    assert ticket.created_at.tzinfo == timezone.utc
    assert triage.texts == ["printer jam"]
    assert notifier.tickets == [ticket]

    tickets = await service.list_tickets()
    assert tickets[0] == ticket
    assert tickets[1].id == 1


@pytest.mark.asyncio
@pytest.mark.parametrize("title", [None, "", 12, ["printer"]])
async def test_invalid_title_is_rejected_without_side_effects(title):
    notifier = RecordingNotifier()
    service, repository, triage = make_service(notifier=notifier)

    with pytest.raises(ValidationException) as exc:
        await service.create_ticket(title)

    assert exc.value.message == "title required"
    assert await repository.count() == 0
    assert triage.texts == []
    assert notifier.tickets == []


@pytest.mark.asyncio
async def test_whitespace_title_is_stored_unchanged():
    service, repository, triage = make_service()

    ticket = await service.create_ticket("  \t")

    assert ticket.title == "  \t"
    assert triage.texts == ["  \t"]
    assert await repository.count() == 1


@pytest.mark.asyncio
async def test_fallback_triage_still_creates_ticket():
    service, repository, _ = make_service(result=TriageResult.fallback())

    ticket = await service.create_ticket("printer jam")

    assert ticket.priority == "medium"
    assert ticket.suggested_reply == ""
    assert await repository.count() == 1


@pytest.mark.asyncio
async def test_ids_stay_unique_when_clock_stalls():
    service, _, _ = make_service(clock_ms=lambda: 1_700_000_000_000)

    ids = [(await service.create_ticket(f"t{i}")).id for i in range(3)]

    assert ids == [1_700_000_000_000, 1_700_000_000_001, 1_700_000_000_002]


def test_id_sequence_follows_clock_when_it_moves_ahead():
    now = [100]
    sequence = TicketIdSequence(start_after=1, clock_ms=lambda: now[0])

    assert sequence.next_id() == 100
    now[0] = 500
    assert sequence.next_id() == 500
    now[0] = 50
    assert sequence.next_id() == 501


def test_id_sequence_never_reuses_seed_ids():
    sequence = TicketIdSequence(start_after=1, clock_ms=lambda: 0)
    assert sequence.next_id() == 2


def test_ticket_is_immutable():
    ticket = Ticket(id=1, title="x")
    with pytest.raises(AttributeError):
        ticket.priority = "high"


def test_ticket_validates_fields():
    with pytest.raises(ValueError):
        Ticket(id=1, title="")
    with pytest.raises(ValueError):
        Ticket(id=1, title="x", priority="critical")


@pytest.mark.asyncio
async def test_repository_list_is_a_copy():
    repository = InMemoryTicketRepository([sample_ticket()])
    listed = await repository.list_all()
    listed.clear()
    assert await repository.count() == 1
