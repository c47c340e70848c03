from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from storybeat.color import TRANSPARENT, BLACK, Color
from storybeat.images import ImageAsset
from storybeat.opcodes.instruction import Instruction
from storybeat.opcodes.tags import Tag


class Position(StrEnum):
    left = "left"
    center = "center"
    right = "right"


class Character(BaseModel):
    """A speaking character as scripts see it.

    Calling a character builds dialogue directives:

        eric("Right?")                 -> say
        eric(["Right?", "..."])        -> monologue
        eric("Right?", "...")          -> monologue

    Instances are shared by every instruction that mentions them. The
    draw-character rule may overwrite `position` when given an explicit one.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True, validate_assignment=True)

    dialog_name: str
    text_color: Color = BLACK

    images: dict[str, ImageAsset] = Field(default_factory=dict)
    current_image: str | None = None
    position: Position = Position.center

    border_color: Color = TRANSPARENT
    border_width: int = Field(default=2, ge=0)

    @field_validator("text_color", "border_color", mode="before")
    @classmethod
    def _coerce_color(cls, value: Any) -> Color:
        return Color.coerce(value)

    def __call__(self, *lines: str | list[str]) -> Instruction:
        if len(lines) == 1 and isinstance(lines[0], str):
            return Instruction(Tag.say, {"character": self, "content": lines[0]})

        content: list[str] = []
        for line in lines:
            if isinstance(line, str):
                content.append(line)
            else:
                content.extend(line)
        return Instruction(Tag.monologue, {"character": self, "content": content})

    @property
    def image(self) -> ImageAsset | None:
        """The image for `current_image`, if the key resolves."""

        if self.current_image is None:
            return None
        return self.images.get(self.current_image)

    def become(self, image_key: str) -> Instruction:
        return Instruction(Tag.set_character_image, {"character": self, "image": image_key})

    def move_to(self, position: Position | str) -> Instruction:
        return Instruction(Tag.draw_character, {"character": self, "position": Position(position)})

    def __str__(self) -> str:
        return self.dialog_name
