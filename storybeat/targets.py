"""Scene targets for instructions built before their scene exists.

Scene contents are evaluated, and their instructions lowered, while the owning
scene is still under construction. Rules that need to point at "this scene"
attach a `PendingScene`; once the scene is built, `bind_pending_targets` swaps
each one for a `BoundScene` holding the real scene.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Union

from storybeat.opcodes.instruction import Instruction

if TYPE_CHECKING:
    from storybeat.scene import Scene


@dataclass(frozen=True, slots=True)
class PendingScene:
    """Stands in for the scene an instruction will belong to."""


@dataclass(frozen=True, slots=True)
class BoundScene:
    scene: "Scene"


SceneTarget = Union[PendingScene, BoundScene]


def bind_pending_targets(instructions: Iterable[Instruction], *, scene: "Scene") -> int:
    """Replace every `PendingScene` target with `BoundScene(scene)`.

    Returns how many targets were bound.
    """

    bound = 0
    for instr in instructions:
        if instr.arguments is None:
            continue
        if isinstance(instr.arguments.get("target"), PendingScene):
            instr.arguments["target"] = BoundScene(scene)
            bound += 1
    return bound


def resolve_target(target: Any) -> Any:
    """Return the effective target object for an instruction.

    Scene targets must be bound; any other target (e.g. a character) is returned
    as is.
    """

    match target:
        case BoundScene(scene=scene):
            return scene
        case PendingScene():
            raise ValueError("Scene target was never bound to a scene")
        case _:
            return target
