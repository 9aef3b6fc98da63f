"""
Tests for MessageQueueStore: text validation, sequential numbering,
FIFO drain on poll and atomicity under concurrent submits.
"""

from concurrent.futures import ThreadPoolExecutor

import pytest

from exceptions.exceptions import MessageValidationException
from runtime.models.session_models import Session
from runtime.store.message_queue import (
    MAX_MESSAGE_LENGTH,
    message_length,
    validate_message_text,
)


@pytest.fixture
def session(clock) -> Session:
    return Session(session_id="s1", group_jid="g1", created_at=clock.now, last_activity=clock.now)


def test_validate_message_text_trims():
    assert validate_message_text("  hello \n") == "hello"


@pytest.mark.parametrize("text", ["", "   ", "\n\t"])
def test_validate_message_text_rejects_empty(text):
    with pytest.raises(MessageValidationException, match="empty"):
        validate_message_text(text)


def test_validate_message_text_length_limit_uses_raw_length():
    assert validate_message_text("x" * MAX_MESSAGE_LENGTH) == "x" * MAX_MESSAGE_LENGTH

    with pytest.raises(MessageValidationException, match="too long"):
        validate_message_text("x" * (MAX_MESSAGE_LENGTH + 1))

    # Padding counts against the limit even though it is trimmed away.
    with pytest.raises(MessageValidationException, match="too long"):
        validate_message_text("hi" + " " * MAX_MESSAGE_LENGTH)


def test_submit_numbers_messages_sequentially(queue_store, session, clock):
    numbers = [queue_store.submit(session, f"m{i}", now=clock.now + i) for i in range(3)]

    assert numbers == [1, 2, 3]
    assert session.message_count == 3
    assert session.last_activity == clock.now + 2


def test_rejected_message_does_not_consume_a_number(queue_store, session, clock):
    with pytest.raises(MessageValidationException):
        queue_store.submit(session, "   ", now=clock.now)

    assert session.message_count == 0
    assert queue_store.pending("s1") == 0
    assert queue_store.submit(session, "ok", now=clock.now) == 1


def test_poll_drains_in_fifo_order(queue_store, session, clock):
    for text in ("first", " second ", "third"):
        queue_store.submit(session, text, now=clock.now)

    messages = queue_store.poll("s1")

    assert [(m.number, m.message) for m in messages] == [
        (1, "first"),
        (2, "second"),
        (3, "third"),
    ]
    assert all(m.timestamp == clock.now for m in messages)
    assert queue_store.poll("s1") == []
    assert queue_store.pending("s1") == 0


def test_poll_unknown_session_is_empty(queue_store):
    assert queue_store.poll("nope") == []


def test_numbering_continues_after_poll(queue_store, session, clock):
    queue_store.submit(session, "a", now=clock.now)
    queue_store.poll("s1")

    assert queue_store.submit(session, "b", now=clock.now) == 2
    assert [m.number for m in queue_store.poll("s1")] == [2]


def test_reset_discards_queued_messages(queue_store, session, clock):
    queue_store.submit(session, "a", now=clock.now)

    queue_store.reset("s1")

    assert queue_store.poll("s1") == []


def test_concurrent_submits_get_unique_ordered_numbers(queue_store, session, clock):
    total = 200

    with ThreadPoolExecutor(max_workers=16) as pool:
        numbers = list(
            pool.map(lambda i: queue_store.submit(session, f"m{i}", now=clock.now), range(total))
        )

    assert sorted(numbers) == list(range(1, total + 1))
    drained = queue_store.poll("s1")
    assert [m.number for m in drained] == list(range(1, total + 1))


def test_concurrent_submit_and_poll_never_lose_or_repeat(queue_store, session, clock):
    total = 200
    seen = []

    def submit(i):
        queue_store.submit(session, f"m{i}", now=clock.now)
        if i % 10 == 0:
            seen.extend(queue_store.poll("s1"))

    with ThreadPoolExecutor(max_workers=16) as pool:
        list(pool.map(submit, range(total)))
    seen.extend(queue_store.poll("s1"))

    assert sorted(m.number for m in seen) == list(range(1, total + 1))


def test_polling_unknown_ids_does_not_register_locks(queue_store):
    for i in range(1000):
        assert queue_store.poll(f"unknown-{i}") == []

    assert len(queue_store._locks._locks) == 0


def test_message_length_counts_utf16_code_units():
    assert message_length("abc") == 3
    assert message_length("😀") == 2
    assert message_length("\ud83d") == 1


def test_validate_message_text_limits_astral_characters_by_utf16_length():
    # Each emoji is two UTF-16 code units.
    half = MAX_MESSAGE_LENGTH // 2
    assert validate_message_text("😀" * half) == "😀" * half

    with pytest.raises(MessageValidationException, match="too long"):
        validate_message_text("😀" * (half + 1))
