from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from storybeat.opcodes.tags import Tag, coerce_tag


@dataclass(frozen=True, slots=True, eq=True)
class Instruction:
    """A tagged unit of work produced by scripts or by transform rules.

    The tag is fixed at construction. `arguments` is a plain dict that rules are
    allowed to mutate in place when they attach derived data (targets, image
    placement, borders).
    """

    tag: Tag
    arguments: dict[str, Any] | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "tag", coerce_tag(self.tag))

    @classmethod
    def create(cls, tag: Tag | str, arguments: dict[str, Any] | None = None) -> "Instruction":
        return cls(tag=coerce_tag(tag), arguments=arguments)

    def get(self, key: str, default: Any = None) -> Any:
        if self.arguments is None:
            return default
        return self.arguments.get(key, default)

    def __str__(self) -> str:
        lines = [f"Opcode {self.tag.value!r} = {{"]
        for key, value in (self.arguments or {}).items():
            lines.append(f"\t{key}: {value}")
        lines.append("}")
        return "\n".join(lines)
