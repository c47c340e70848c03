from __future__ import annotations

import threading
from contextlib import contextmanager

from storybeat.models import Character


class CharacterBusy(ValueError):
    pass


_held: set[int] = set()
_held_guard = threading.Lock()


@contextmanager
def character_lock(character: Character):
    """Exclusive, non-blocking claim on a character while a rule mutates it.

    At most one transform may hold a given character; a second claim raises
    CharacterBusy instead of waiting.
    """

    key = id(character)
    with _held_guard:
        if key in _held:
            raise CharacterBusy(f"Character {character.dialog_name!r} is busy")
        _held.add(key)
    try:
        yield
    finally:
        with _held_guard:
            _held.discard(key)
