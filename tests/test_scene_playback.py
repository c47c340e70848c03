from __future__ import annotations

import pytest

from storybeat.directives import change_scene, no_op, scene_image
from storybeat.images import ImageAsset
from storybeat.models import Character
from storybeat.opcodes.engine import RewriteEngine
from storybeat.opcodes.instruction import Instruction
from storybeat.opcodes.results import Group, Single
from storybeat.opcodes.tags import Tag
from storybeat.playback import Line, ScenePlayer
from storybeat.scene import Beat, Scene, splice
from storybeat.story import Story
from storybeat.targets import BoundScene, PendingScene, bind_pending_targets, resolve_target


@pytest.fixture()
def backdrop() -> ImageAsset:
    return ImageAsset(path="bg/prison.png", width=800, height=600)


@pytest.fixture()
def start(engine: RewriteEngine, eric: Character, backdrop: ImageAsset) -> Scene:
    return Scene.build(
        "START",
        [
            eric(["Now that we're out of jail, no hard feelings.", "Right?"]),
            "A long silence.",
            scene_image(backdrop),
            eric.become("sad"),
            change_scene("NEXT"),
        ],
        engine=engine,
    )


@pytest.fixture()
def next_scene(engine: RewriteEngine, jeff: Character) -> Scene:
    return Scene.build("NEXT", [jeff("They're not going to find your body."), no_op()], engine=engine)


def test_splice_honors_grouping_contract() -> None:
    a, b, c, d = (Instruction(Tag.no_op, {"n": n}) for n in range(4))
    nested = Group((a, Group((b, c), flatten=False), Group((d,), flatten=True)), flatten=True)

    beats = splice(nested)

    assert beats == [
        Beat((a,)),
        Beat((b, c), combined=True),
        Beat((d,)),
    ]
    assert splice(Single(a)) == [Beat((a,))]
    assert splice(Group((a, b), flatten=False)) == [Beat((a, b), combined=True)]


def test_build_splits_monologue_into_combined_beats(start: Scene) -> None:
    assert [b.tags for b in start.beats] == [
        (Tag.draw_character, Tag.say),
        (Tag.draw_character, Tag.say),
        (Tag.say,),
        (Tag.set_scene_image,),
        (Tag.set_character_image,),
        (Tag.change_scene,),
    ]
    assert start.beats[0].combined and start.beats[1].combined
    assert not start.beats[2].combined
    assert start.beats[2].instructions[0].arguments == {"content": "A long silence."}


def test_build_binds_scene_targets(start: Scene) -> None:
    target = start.beats[3].instructions[0].arguments["target"]
    assert target == BoundScene(start)
    assert resolve_target(target) is start
    assert not any(isinstance(i.get("target"), PendingScene) for i in start.instructions())


def test_unbound_scene_target_cannot_be_resolved() -> None:
    with pytest.raises(ValueError) as e:
        resolve_target(PendingScene())
    assert "never bound" in str(e.value)


def test_bind_pending_targets_counts_and_skips_other_targets(eric: Character) -> None:
    scene = Scene(name="S")
    pending = Instruction(Tag.set_scene_image, {"target": PendingScene()})
    other = Instruction(Tag.set_character_image, {"target": eric})

    assert bind_pending_targets([pending, other, Instruction(Tag.no_op)], scene=scene) == 1
    assert pending.arguments["target"] == BoundScene(scene)
    assert other.arguments["target"] is eric


def test_player_applies_effects_and_walks_fsm(start: Scene, eric: Character, backdrop: ImageAsset) -> None:
    requested: list[str] = []
    player = ScenePlayer(start, on_change_scene=requested.append)
    assert player.fsm.ready.is_active

    first = player.step()
    assert first is start.beats[0]
    assert player.fsm.playing.is_active
    assert player.stage["Eric"].location == (340, 90)
    assert player.transcript == [Line("Eric", "Now that we're out of jail, no hard feelings.")]

    player.step()
    player.step()
    assert player.transcript[-1] == Line(None, "A long silence.")

    assert start.image is None
    player.step()
    assert start.image == backdrop

    player.step()
    assert eric.current_image == "sad"

    assert requested == []
    player.step()
    assert requested == ["NEXT"]
    assert player.finished
    assert player.step() is None


def test_empty_scene_finishes_immediately() -> None:
    player = ScenePlayer(Scene(name="EMPTY"))
    assert player.step() is None
    assert player.finished


def test_image_set_inside_a_scene_only_applies_at_playback(engine: RewriteEngine, happy: ImageAsset) -> None:
    ann = Character(dialog_name="Ann", images={"happy": happy})
    scene = Scene.build("S", [ann.become("happy"), ann("hi")], engine=engine)

    # The say was lowered while Ann had no image, so it isn't paired with a draw.
    assert [b.tags for b in scene.beats] == [(Tag.set_character_image,), (Tag.say,)]

    player = ScenePlayer(scene)
    player.play_all()
    assert ann.current_image == "happy"
    assert player.stage == {}
    assert player.transcript == [Line("Ann", "hi")]


def test_unlowered_monologue_is_rejected_at_playback(jeff: Character) -> None:
    scene = Scene(name="RAW", beats=[Beat((jeff(["a", "b"]),))])
    with pytest.raises(ValueError) as e:
        ScenePlayer(scene).step()
    assert "monologue" in str(e.value)


def test_story_starts_at_start_and_follows_scene_changes(start: Scene, next_scene: Scene) -> None:
    story = Story([next_scene, start])
    assert story.current is start
    assert story.has_visited("START")
    assert not story.has_visited("NEXT")

    played = [story.advance() for _ in range(len(start))]
    assert played == start.beats
    assert story.current is next_scene
    assert [s.name for s in story.history] == ["START", "NEXT"]

    assert story.advance().tags == (Tag.say,)
    assert story.player.transcript == [Line("Jeff", "They're not going to find your body.")]
    assert story.advance().tags == (Tag.no_op,)
    assert story.advance() is None
    assert story.player.finished


def test_story_history_keeps_repeat_visits(start: Scene, next_scene: Scene) -> None:
    story = Story([start, next_scene])
    story.change_to_scene("NEXT")
    story.change_to_scene("START")

    assert [s.name for s in story.history] == ["START", "NEXT", "START"]
    assert story.visited == {"START", "NEXT"}


def test_story_errors(next_scene: Scene) -> None:
    story = Story([next_scene])
    assert story.current is None
    with pytest.raises(ValueError):
        story.advance()
    with pytest.raises(ValueError) as e:
        story.change_to_scene("NOPE")
    assert "Unknown scene" in str(e.value)
    with pytest.raises(ValueError):
        Story([next_scene, Scene(name="NEXT")])


def test_build_uses_runtime_engine_by_default(jeff: Character) -> None:
    scene = Scene.build("S", [jeff("hi"), "narration"], background_color="#000")
    assert len(scene) == 2
    assert str(scene.background_color) == "#000000"
