"""Script-facing shortcuts for directives that don't hang off a character."""

from __future__ import annotations

from storybeat.images import ImageAsset
from storybeat.opcodes.instruction import Instruction
from storybeat.opcodes.tags import Tag


def scene_image(image: ImageAsset) -> Instruction:
    return Instruction(Tag.set_scene_image, {"image": image})


def change_scene(name: str) -> Instruction:
    return Instruction(Tag.change_scene, {"name": name})


def no_op() -> Instruction:
    return Instruction(Tag.no_op)
