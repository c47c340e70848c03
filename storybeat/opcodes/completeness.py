from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping

from storybeat.opcodes.engine import MissingTransform
from storybeat.opcodes.tags import Tag
from storybeat.opcodes.transforms import TransformRule

logger = logging.getLogger(__name__)


def missing_tags(transforms: Mapping[Tag, TransformRule], *, tags: Iterable[Tag] = Tag) -> list[Tag]:
    return [t for t in tags if transforms.get(t) is None]


def check_transform_table(transforms: Mapping[Tag, TransformRule], *, tags: Iterable[Tag] = Tag) -> None:
    """Fail unless every registered tag has a transform rule."""

    missing = missing_tags(transforms, tags=tags)
    if missing:
        names = ",".join(t.value for t in missing)
        raise MissingTransform(f"No transform registered for opcode(s): {names}")
    logger.debug("transform table complete (%d tags)", len(transforms))
