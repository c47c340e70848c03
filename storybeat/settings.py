from __future__ import annotations

import os
from dataclasses import dataclass, field


_TRUTHY = {"1", "true", "yes"}

DEFAULT_MAX_NESTING = 8


@dataclass(frozen=True, slots=True)
class LayoutConfig:
    """Fixed screen layout the draw rules anchor against.

    The dialog box sits at (dialog_x, dialog_y) with the given size. Character
    portraits stand on top of it: `scene_height` is the height of the stage area
    above the dialog box, and portraits keep `margin` units clear of its bottom.
    """

    dialog_x: int = 100
    dialog_y: int = 300
    dialog_width: int = 600
    dialog_height: int = 240
    scene_height: int = 300
    screen_center_x: int = 400
    margin: int = 10


@dataclass(frozen=True, slots=True)
class Settings:
    # Debug mode runs the transform completeness check at engine startup.
    debug_mode: bool = False
    # Deepest allowed chain of nested `process` calls below a top-level call.
    max_nesting: int = DEFAULT_MAX_NESTING
    layout: LayoutConfig = field(default_factory=LayoutConfig)


def _env_flag(name: str) -> bool:
    return os.getenv(name, "").strip().lower() in _TRUTHY


def load_settings() -> Settings:
    max_nesting = os.getenv("STORYBEAT_MAX_NESTING", "").strip()
    return Settings(
        debug_mode=_env_flag("STORYBEAT_DEBUG"),
        max_nesting=int(max_nesting) if max_nesting else DEFAULT_MAX_NESTING,
    )
