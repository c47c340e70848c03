from __future__ import annotations

import logging
from collections.abc import Mapping

from storybeat.images import AssetDimensions, ImageMetadata
from storybeat.opcodes.instruction import Instruction
from storybeat.opcodes.results import Group, Single, TransformResult
from storybeat.opcodes.tags import Tag
from storybeat.opcodes.transforms import DEFAULT_TRANSFORMS, TransformContext, TransformRule
from storybeat.settings import DEFAULT_MAX_NESTING, LayoutConfig

logger = logging.getLogger(__name__)


class MissingTransform(RuntimeError):
    pass


class ContractViolation(RuntimeError):
    pass


class RewriteEngine:
    """Dispatches instructions to their transform rule.

    `process` performs exactly one lookup and one rule call. Rules that build
    new instructions call back into `process` through their context, and the
    engine tracks how deep those calls go.
    """

    def __init__(
        self,
        *,
        transforms: Mapping[Tag, TransformRule] = DEFAULT_TRANSFORMS,
        layout: LayoutConfig | None = None,
        images: ImageMetadata | None = None,
        max_nesting: int = DEFAULT_MAX_NESTING,
    ) -> None:
        self.transforms = transforms
        self.max_nesting = max_nesting
        self.context = TransformContext(
            process=self.process,
            layout=layout or LayoutConfig(),
            images=images or AssetDimensions(),
        )
        # Current call depth; 0 while idle.
        self._depth = 0
        # Deepest nesting seen below any top-level call.
        self.deepest_nesting = 0

    def transform_for_tag(self, tag: Tag) -> TransformRule:
        rule = self.transforms.get(tag)
        if rule is None:
            raise MissingTransform(f"No transform registered for opcode {tag.value!r}")
        return rule

    def process(self, instruction: Instruction) -> TransformResult:
        rule = self.transform_for_tag(instruction.tag)

        nesting = self._depth
        if nesting > self.max_nesting:
            raise ContractViolation(
                f"Transform nesting exceeded {self.max_nesting} while processing {instruction.tag.value!r}"
            )
        self.deepest_nesting = max(self.deepest_nesting, nesting)

        logger.debug("process %s (nesting=%d)", instruction.tag.value, nesting)
        self._depth += 1
        try:
            result = rule(instruction, self.context)
        finally:
            self._depth -= 1

        if not isinstance(result, (Single, Group)):
            raise ContractViolation(
                f"Transform for {instruction.tag.value!r} returned {type(result).__name__}, expected Single or Group"
            )
        return result
