from __future__ import annotations

from collections.abc import Mapping

from storybeat.opcodes.completeness import check_transform_table
from storybeat.opcodes.engine import RewriteEngine
from storybeat.opcodes.instruction import Instruction
from storybeat.opcodes.results import TransformResult
from storybeat.opcodes.tags import Tag
from storybeat.opcodes.transforms import DEFAULT_TRANSFORMS, TransformRule
from storybeat.settings import Settings, load_settings


_ENGINE: RewriteEngine | None = None


def init_engine(
    *,
    settings: Settings | None = None,
    transforms: Mapping[Tag, TransformRule] = DEFAULT_TRANSFORMS,
) -> RewriteEngine:
    """Create the process-wide engine once and cache it.

    With debug mode on, the transform table is checked for completeness before
    the engine is created, so nothing is processed against an incomplete table.
    Safe to call multiple times; later calls return the cached engine.
    """

    global _ENGINE
    if _ENGINE is None:
        settings = settings or load_settings()
        if settings.debug_mode:
            check_transform_table(transforms)
        _ENGINE = RewriteEngine(
            transforms=transforms,
            layout=settings.layout,
            max_nesting=settings.max_nesting,
        )
    return _ENGINE


def reset_engine_for_tests() -> None:
    global _ENGINE
    _ENGINE = None


def get_engine() -> RewriteEngine:
    if _ENGINE is None:
        return init_engine()
    return _ENGINE


def process(instruction: Instruction) -> TransformResult:
    return get_engine().process(instruction)
