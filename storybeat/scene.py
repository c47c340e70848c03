from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field

from storybeat.color import BLACK, WHITE, Color
from storybeat.images import ImageAsset
from storybeat.opcodes.engine import RewriteEngine
from storybeat.opcodes.instruction import Instruction
from storybeat.opcodes.results import Group, Single, TransformResult
from storybeat.opcodes.tags import Tag
from storybeat.runtime import get_engine
from storybeat.targets import bind_pending_targets

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Beat:
    """One playback step.

    A combined beat carries every instruction of a non-flattened group; they are
    presented together.
    """

    instructions: tuple[Instruction, ...]
    combined: bool = False

    @property
    def tags(self) -> tuple[Tag, ...]:
        return tuple(i.tag for i in self.instructions)


def splice(result: TransformResult) -> list[Beat]:
    """Turn a processed result into beats, honoring the grouping contract."""

    if isinstance(result, Single):
        return [Beat((result.instruction,))]
    if not result.flatten:
        return [Beat(tuple(result.instructions()), combined=True)]

    beats: list[Beat] = []
    for member in result.members:
        if isinstance(member, Group):
            beats.extend(splice(member))
        else:
            beats.append(Beat((member,)))
    return beats


@dataclass(slots=True, eq=False, repr=False)
class Scene:
    name: str
    beats: list[Beat] = field(default_factory=list)

    background_color: Color = WHITE
    foreground_color: Color = BLACK
    image: ImageAsset | None = None

    @classmethod
    def build(
        cls,
        name: str,
        contents: Iterable[Instruction | str],
        *,
        engine: RewriteEngine | None = None,
        background_color: Color | str = WHITE,
        foreground_color: Color | str = BLACK,
        image: ImageAsset | None = None,
    ) -> "Scene":
        """Lower `contents` into beats, then bind scene targets to the new scene.

        Bare strings are narration: a `say` with no speaker.
        """

        engine = engine or get_engine()
        beats: list[Beat] = []
        for item in contents:
            if isinstance(item, str):
                item = Instruction(Tag.say, {"content": item})
            beats.extend(splice(engine.process(item)))

        scene = cls(
            name=name,
            beats=beats,
            background_color=Color.coerce(background_color),
            foreground_color=Color.coerce(foreground_color),
            image=image,
        )
        bound = bind_pending_targets(scene.instructions(), scene=scene)
        logger.debug("built scene %s: %d beats, %d scene targets bound", name, len(beats), bound)
        return scene

    def instructions(self) -> Iterator[Instruction]:
        for beat in self.beats:
            yield from beat.instructions

    def __len__(self) -> int:
        return len(self.beats)

    def __repr__(self) -> str:
        return f"Scene(name={self.name!r}, beats={len(self.beats)})"
