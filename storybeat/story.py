from __future__ import annotations

import logging
from collections.abc import Iterable

from storybeat.playback import ScenePlayer
from storybeat.scene import Beat, Scene

logger = logging.getLogger(__name__)

START = "START"


class Story:
    """Named scenes plus the player's path through them.

    - `visited`: names of every scene shown so far (unordered).
    - `history`: scenes in the order they were entered, repeats included.

    Playback starts at the scene named START when one exists.
    """

    def __init__(self, scenes: Iterable[Scene], *, start: str = START) -> None:
        self.scenes: dict[str, Scene] = {}
        for scene in scenes:
            if scene.name in self.scenes:
                raise ValueError(f"Duplicate scene name: {scene.name}")
            self.scenes[scene.name] = scene

        self.current: Scene | None = None
        self.player: ScenePlayer | None = None
        self.visited: set[str] = set()
        self.history: list[Scene] = []
        self._requested: str | None = None

        if start in self.scenes:
            self.change_to_scene(start)

    def change_to_scene(self, name: str) -> Scene:
        scene = self.scenes.get(name)
        if scene is None:
            raise ValueError(f"Unknown scene: {name}")

        logger.debug("change scene -> %s", name)
        self.current = scene
        self.player = ScenePlayer(scene, on_change_scene=self._request_change)
        self.visited.add(name)
        self.history.append(scene)
        return scene

    def has_visited(self, name: str) -> bool:
        return name in self.visited

    def _request_change(self, name: str) -> None:
        # Applied once the current beat has finished.
        self._requested = name

    def advance(self) -> Beat | None:
        if self.player is None:
            raise ValueError("No current scene")

        beat = self.player.step()
        if self._requested is not None:
            name, self._requested = self._requested, None
            self.change_to_scene(name)
        return beat
