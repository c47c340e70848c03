from __future__ import annotations

from enum import StrEnum


class Tag(StrEnum):
    """Every instruction tag the engine recognizes.

    Adding a member here also requires a rule in `storybeat.opcodes.transforms`;
    the completeness check refuses to start otherwise.
    """

    monologue = "monologue"
    say = "say"
    set_character_image = "set-character-image"
    draw_character = "draw-character"
    change_scene = "change-scene"
    no_op = "no-op"
    set_scene_image = "set-scene-image"


class InvalidTag(ValueError):
    pass


def coerce_tag(tag: Tag | str) -> Tag:
    if isinstance(tag, Tag):
        return tag
    try:
        return Tag(tag)
    except ValueError as e:
        raise InvalidTag(f"Unknown opcode {tag!r}") from e

