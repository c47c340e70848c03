"""Translation between API bodies and in-memory instructions."""

from __future__ import annotations

from collections.abc import Mapping
from enum import Enum
from typing import Any

from storybeat.api.models import BeatView, CharacterSpec, DirectiveRequest, InstructionView
from storybeat.color import TRANSPARENT, Color
from storybeat.images import ImageAsset, Placement
from storybeat.models import Character
from storybeat.opcodes.instruction import Instruction
from storybeat.opcodes.tags import Tag, coerce_tag
from storybeat.opcodes.transforms import Border
from storybeat.scene import Beat
from storybeat.targets import BoundScene, PendingScene


def build_character(spec: CharacterSpec) -> Character:
    if spec.current_image is not None and spec.current_image not in spec.images:
        raise ValueError(f"Character '{spec.name}' has no image '{spec.current_image}'")
    return Character(
        dialog_name=spec.dialog_name or spec.name,
        text_color=spec.text_color,
        images=spec.images,
        current_image=spec.current_image,
        position=spec.position,
        border_color=spec.border_color if spec.border_color is not None else TRANSPARENT,
        border_width=spec.border_width,
    )


def build_instruction(directive: DirectiveRequest, *, characters: Mapping[str, Character]) -> Instruction:
    """Build an instruction from a directive body.

    Checks here cover what the transform rules assume is already true of their
    arguments, so a bad request becomes a ValueError instead of a crash inside
    a rule.
    """

    tag = coerce_tag(directive.tag)
    args: dict[str, Any] = {}

    character: Character | None = None
    if directive.character is not None:
        character = characters.get(directive.character)
        if character is None:
            raise ValueError(f"Unknown character: {directive.character}")
        args["character"] = character

    if tag in (Tag.monologue, Tag.draw_character, Tag.set_character_image) and character is None:
        raise ValueError(f"Opcode '{tag.value}' requires a character")

    if tag == Tag.monologue:
        content = directive.content or []
        args["content"] = [content] if isinstance(content, str) else list(content)
    elif directive.content is not None:
        args["content"] = directive.content if isinstance(directive.content, str) else " ".join(directive.content)

    if tag == Tag.draw_character and character is not None and character.image is None:
        raise ValueError(f"Character '{character.dialog_name}' has no current image to draw")
    if directive.position is not None:
        args["position"] = directive.position

    if tag == Tag.set_character_image:
        if directive.image is None or directive.image not in character.images:
            raise ValueError(f"Character '{character.dialog_name}' has no image '{directive.image}'")
        args["image"] = directive.image
    elif tag == Tag.set_scene_image:
        if directive.scene_image is None:
            raise ValueError("Opcode 'set-scene-image' requires scene_image")
        args["image"] = directive.scene_image
    elif tag == Tag.change_scene:
        if not directive.name:
            raise ValueError("Opcode 'change-scene' requires name")
        args["name"] = directive.name

    return Instruction(tag, args or None)


def describe_value(value: Any) -> Any:
    """JSON-friendly rendering of an instruction argument."""

    if isinstance(value, Character):
        return value.dialog_name
    if isinstance(value, Placement):
        return {"path": value.asset.path, "location": list(value.location)}
    if isinstance(value, Border):
        return {"color": str(value.color), "width": value.width}
    if isinstance(value, BoundScene):
        return {"scene": value.scene.name}
    if isinstance(value, PendingScene):
        return {"scene": None}
    if isinstance(value, ImageAsset):
        return value.path
    if isinstance(value, Color):
        return str(value)
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (list, tuple)):
        return [describe_value(v) for v in value]
    return value


def beat_view(beat: Beat) -> BeatView:
    return BeatView(
        combined=beat.combined,
        instructions=[
            InstructionView(
                tag=i.tag.value,
                arguments={k: describe_value(v) for k, v in (i.arguments or {}).items()},
            )
            for i in beat.instructions
        ],
    )
