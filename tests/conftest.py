"""
Pytest configuration and shared fixtures for notebrotr tests.

Provides:
- ``make_event`` factory for well-formed events with deterministic ids
- Sample note, reply, profile and contact events
- An in-memory vault and a collecting reporter
"""

import json
import logging
from collections.abc import Callable
from typing import Any

import pytest

from notebrotr.core.reporting import CollectingReporter
from notebrotr.models import Event

from factories import ALICE, BOB, MemoryVault, make_event


# ============================================================================
# Logging Configuration
# ============================================================================


@pytest.fixture(scope="session", autouse=True)
def setup_logging() -> None:
    """Configure logging for tests."""
    logging.basicConfig(level=logging.DEBUG)


# ============================================================================
# Event Fixtures
# ============================================================================


@pytest.fixture
def event_factory() -> Callable[..., Event]:
    return make_event


@pytest.fixture
def note_event() -> Event:
    return make_event(1, "Hello nostr. This is my first note #Intro", [["t", "nostr"]], n=1)


@pytest.fixture
def reply_event(note_event: Event) -> Event:
    return make_event(
        1,
        "Welcome aboard!",
        [["e", note_event.id, "", "root"], ["e", note_event.id, "", "reply"], ["p", ALICE]],
        created_at=note_event.created_at + 60,
        pubkey=BOB,
        n=2,
    )


@pytest.fixture
def profile_event() -> Event:
    metadata = {"name": "alice", "display_name": "Alice", "about": "Builder", "nip05": "a@x.io"}
    return make_event(0, json.dumps(metadata), n=10)


@pytest.fixture
def contact_event() -> Event:
    return make_event(3, "", [["p", BOB], ["p", ALICE]], n=20)


@pytest.fixture
def event_dict() -> dict[str, Any]:
    return make_event(1, "raw", [["t", "x"]], n=5).to_dict()


# ============================================================================
# Collaborator Fixtures
# ============================================================================


@pytest.fixture
def reporter() -> CollectingReporter:
    return CollectingReporter()


@pytest.fixture
def vault() -> MemoryVault:
    return MemoryVault()
