from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass

from statemachine import State, StateMachine

from storybeat.images import Placement
from storybeat.opcodes.instruction import Instruction
from storybeat.opcodes.tags import Tag
from storybeat.scene import Beat, Scene
from storybeat.targets import resolve_target

logger = logging.getLogger(__name__)


class PlaybackFSM(StateMachine):
    """ready -> playing -> finished. An empty scene goes straight to finished."""

    ready = State("ready", value="ready", initial=True)
    playing = State("playing", value="playing")
    finished = State("finished", value="finished", final=True)

    start = ready.to(playing)
    finish = playing.to(finished) | ready.to(finished)

    def __init__(self, player: "ScenePlayer", start_value: str | None = None):
        self.player = player
        super().__init__(start_value=start_value)


@dataclass(frozen=True, slots=True)
class Line:
    speaker: str | None
    text: str


class ScenePlayer:
    """Steps through a built scene one beat at a time and applies its effects.

    Nothing is drawn here; the player keeps the state a renderer would read
    (what's on stage, what's been said, the scene image).

    Image switches only land here, at playback. Whether a `say` draws its
    speaker, and with which image, was settled when the scene was built, so a
    character given its first image inside a scene is not drawn by that scene.
    """

    def __init__(self, scene: Scene, *, on_change_scene: Callable[[str], None] | None = None) -> None:
        self.scene = scene
        self.on_change_scene = on_change_scene
        self.index = 0
        self.transcript: list[Line] = []
        self.stage: dict[str, Placement] = {}
        self.current_beat: Beat | None = None
        self.fsm = PlaybackFSM(self)

    @property
    def finished(self) -> bool:
        return self.fsm.finished.is_active

    def step(self) -> Beat | None:
        if self.finished:
            return None
        if not self.scene.beats:
            self.fsm.finish()
            return None
        if self.fsm.ready.is_active:
            self.fsm.start()

        beat = self.scene.beats[self.index]
        self.index += 1
        for instr in beat.instructions:
            EFFECTS[instr.tag](self, instr)
        self.current_beat = beat

        if self.index >= len(self.scene.beats):
            self.fsm.finish()
        return beat

    def play_all(self) -> list[Beat]:
        played: list[Beat] = []
        while (beat := self.step()) is not None:
            played.append(beat)
        return played


def _say(player: ScenePlayer, instr: Instruction) -> None:
    speaker = instr.get("character")
    player.transcript.append(Line(speaker=speaker.dialog_name if speaker else None, text=str(instr.get("content", ""))))


def _draw_character(player: ScenePlayer, instr: Instruction) -> None:
    player.stage[instr.arguments["character"].dialog_name] = instr.arguments["image"]


def _set_character_image(player: ScenePlayer, instr: Instruction) -> None:
    character = resolve_target(instr.arguments["target"])
    character.current_image = instr.arguments["image"]


def _set_scene_image(player: ScenePlayer, instr: Instruction) -> None:
    scene = resolve_target(instr.arguments["target"])
    scene.image = instr.arguments["image"]


def _change_scene(player: ScenePlayer, instr: Instruction) -> None:
    name = instr.arguments["name"]
    logger.debug("scene %s requests change to %s", player.scene.name, name)
    if player.on_change_scene is not None:
        player.on_change_scene(name)


def _no_op(player: ScenePlayer, instr: Instruction) -> None:
    return None


def _unlowered(player: ScenePlayer, instr: Instruction) -> None:
    raise ValueError(f"Opcode {instr.tag.value!r} reached playback without being lowered")


EFFECTS: Mapping[Tag, Callable[[ScenePlayer, Instruction], None]] = {
    Tag.monologue: _unlowered,
    Tag.say: _say,
    Tag.set_character_image: _set_character_image,
    Tag.draw_character: _draw_character,
    Tag.change_scene: _change_scene,
    Tag.no_op: _no_op,
    Tag.set_scene_image: _set_scene_image,
}
