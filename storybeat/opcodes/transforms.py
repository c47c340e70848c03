"""Per-tag transform rules.

Each rule receives the instruction and a `TransformContext` and returns a
`Single` or a `Group`. Rules that synthesize instructions of another tag lower
them through `ctx.process` before returning; the engine never recurses on its
own.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from types import MappingProxyType

from storybeat.color import Color
from storybeat.images import ImageMetadata, Placement
from storybeat.lock import character_lock
from storybeat.models import Character, Position
from storybeat.opcodes.instruction import Instruction
from storybeat.opcodes.results import Group, Single, TransformResult, as_member
from storybeat.opcodes.tags import Tag
from storybeat.settings import LayoutConfig
from storybeat.targets import PendingScene


@dataclass(frozen=True, slots=True)
class TransformContext:
    """What a rule may use besides its own instruction."""

    process: Callable[[Instruction], TransformResult]
    layout: LayoutConfig
    images: ImageMetadata


TransformRule = Callable[[Instruction, TransformContext], TransformResult]


@dataclass(frozen=True, slots=True)
class Border:
    color: Color
    width: int

    def __iter__(self):
        return iter((self.color, self.width))


def monologue(instr: Instruction, ctx: TransformContext) -> TransformResult:
    character = instr.arguments["character"]
    members = []
    for line in instr.arguments["content"]:
        say = Instruction(Tag.say, {"content": line, "character": character})
        members.append(as_member(ctx.process(say)))
    return Group(tuple(members), flatten=True)


def say(instr: Instruction, ctx: TransformContext) -> TransformResult:
    character: Character | None = instr.get("character")
    if character is None or character.image is None:
        return Single(instr)

    draw = ctx.process(Instruction(Tag.draw_character, {"character": character}))
    return Group((as_member(draw), instr), flatten=False)


def draw_character(instr: Instruction, ctx: TransformContext) -> TransformResult:
    """Place the character's current image on screen.

    An explicit `position` argument moves the character for good; without one the
    character's own position is used and left as is.
    """

    args = instr.arguments
    character: Character = args["character"]
    image = character.images[character.current_image]
    width, height = ctx.images.dimensions(image)
    layout = ctx.layout

    y = layout.scene_height - height - layout.margin

    explicit = args.get("position")
    if explicit is not None:
        position = Position(explicit)
        with character_lock(character):
            character.position = position
    else:
        position = character.position

    if position == Position.center:
        x = layout.screen_center_x - width // 2
    elif position == Position.right:
        x = layout.dialog_x + layout.dialog_width - width
    else:
        x = layout.dialog_x

    args["image"] = Placement(asset=image, location=(x, y))

    if not character.border_color.is_transparent:
        args["border"] = Border(color=character.border_color, width=character.border_width)

    return Single(instr)


def set_character_image(instr: Instruction, ctx: TransformContext) -> TransformResult:
    instr.arguments["target"] = instr.arguments["character"]
    return Single(instr)


def set_scene_image(instr: Instruction, ctx: TransformContext) -> TransformResult:
    # Bound to the real scene after the scene finishes building.
    instr.arguments["target"] = PendingScene()
    return Single(instr)


def identity(instr: Instruction, ctx: TransformContext) -> TransformResult:
    return Single(instr)


DEFAULT_TRANSFORMS: Mapping[Tag, TransformRule] = MappingProxyType(
    {
        Tag.monologue: monologue,
        Tag.say: say,
        Tag.set_character_image: set_character_image,
        Tag.draw_character: draw_character,
        Tag.change_scene: identity,
        Tag.no_op: identity,
        Tag.set_scene_image: set_scene_image,
    }
)
