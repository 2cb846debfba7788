"""
Tests for repeating the most recent appointment at a new day/time.
"""

from __future__ import annotations

from app.domain.entities.provider import Service

from conftest import say


def _book_haircut(harness) -> None:
    harness.assistant.focus("cust_1")
    say(harness, "cust_1", "1", "1", "1", "Thursday 9:00 AM", "yes")


def test_no_prior_appointment_clears_mode(harness):
    harness.assistant.focus("cust_1")
    replies = harness.assistant.handle("cust_1", "2")
    assert replies[0].text == 'No previous appointment found. Use "New" instead.'
    assert replies[0].error == "NoPriorAppointment"

    session = harness.assistant.get_session("cust_1")
    assert session.mode is None
    assert session.step == "menu"


def test_repeat_books_without_confirmation(harness):
    _book_haircut(harness)
    harness.assistant.focus("cust_1")

    replies = say(harness, "cust_1", "repeat")
    assert replies == [
        "Repeating last service: Haircut with Marco's Cuts.\nProvide new day & time (e.g. Friday 9:00 AM)."
    ]
    assert harness.assistant.get_session("cust_1").step == "chooseDateTime"

    assert say(harness, "cust_1", "Friday 3:30 PM") == ["Rebooked Haircut at 3:30 PM on 2026-10-16."]
    assert harness.repository.create_calls == 2
    assert harness.assistant.get_session("cust_1").step == "menu"


def test_repeat_keeps_stored_price(harness):
    """The provider raising prices does not change a repeated booking."""
    _book_haircut(harness)
    harness.directory.set_services("barber_marco", [Service(id="svc_haircut", name="Haircut", price=45.0)])

    harness.assistant.focus("cust_1")
    say(harness, "cust_1", "2", "Friday 9:00 AM")

    newest = harness.repository.fetch_most_recent("cust_1")
    assert newest.date == "2026-10-16"
    assert newest.service_price == 30.0


def test_repeat_reprompts_on_bad_input(harness):
    _book_haircut(harness)
    harness.assistant.focus("cust_1")
    say(harness, "cust_1", "2")

    replies = harness.assistant.handle("cust_1", "soon")
    assert replies[0].error == "UnparseableDateTime"

    replies = harness.assistant.handle("cust_1", "Saturday 9:00 AM")
    assert replies[0].text == "Not available. Available on 2026-10-17: None"
    assert harness.assistant.get_session("cust_1").mode.value == "repeat"
    assert harness.repository.create_calls == 1
