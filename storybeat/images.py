from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from pydantic import BaseModel, Field


class ImageAsset(BaseModel):
    """A character or scene image known to the asset layer.

    Only the dimensions matter to the rewrite rules; `path` is carried through
    for the renderer.
    """

    path: str
    width: int = Field(..., ge=0)
    height: int = Field(..., ge=0)


class ImageMetadata(Protocol):
    def dimensions(self, image: ImageAsset) -> tuple[int, int]: ...


@dataclass(frozen=True, slots=True)
class AssetDimensions:
    """Default metadata provider: trust the sizes recorded on the asset."""

    def dimensions(self, image: ImageAsset) -> tuple[int, int]:
        return image.width, image.height


@dataclass(slots=True)
class Placement:
    """Where an image lands on screen for one draw."""

    asset: ImageAsset
    location: tuple[int, int]
