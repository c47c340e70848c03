from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from storybeat.images import ImageAsset
from storybeat.models import Position


class CharacterSpec(BaseModel):
    # Key used by directives to refer to this character.
    name: str = Field(..., min_length=1)
    dialog_name: str | None = None
    text_color: str = "#000"

    images: dict[str, ImageAsset] = Field(default_factory=dict)
    current_image: str | None = None
    position: Position = Position.center

    # None means no border.
    border_color: str | None = None
    border_width: int = Field(default=2, ge=0)


class DirectiveRequest(BaseModel):
    tag: str

    character: str | None = None
    content: str | list[str] | None = None
    position: Position | None = None

    # Image key for set-character-image.
    image: str | None = None
    # Image asset for set-scene-image.
    scene_image: ImageAsset | None = None
    # Target scene for change-scene.
    name: str | None = None


class CompileRequest(BaseModel):
    scene: str = Field(..., min_length=1)
    background_color: str = "#fff"
    foreground_color: str = "#000"
    characters: list[CharacterSpec] = Field(default_factory=list)
    directives: list[DirectiveRequest | str] = Field(default_factory=list)


class InstructionView(BaseModel):
    tag: str
    arguments: dict[str, Any] = Field(default_factory=dict)


class BeatView(BaseModel):
    combined: bool
    instructions: list[InstructionView]


class CompileResponse(BaseModel):
    scene: str
    beats: list[BeatView]


class TagsResponse(BaseModel):
    tags: list[str]
