from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from typing import Union

from storybeat.opcodes.instruction import Instruction


@dataclass(frozen=True, slots=True)
class Single:
    """An atomic result: consumed as exactly one step."""

    instruction: Instruction


@dataclass(frozen=True, slots=True)
class Group:
    """An ordered sequence of results.

    - `flatten=True`: the consumer splices every member in as if each had been
      produced on its own at the top level.
    - `flatten=False`: a combined unit; all members are consumed together as a
      single step (e.g. draw the speaker, then show their line).
    """

    members: tuple["Member", ...]
    flatten: bool

    def __iter__(self) -> Iterator["Member"]:
        return iter(self.members)

    def __len__(self) -> int:
        return len(self.members)

    def instructions(self) -> list[Instruction]:
        """All instructions in this group, depth first, in order."""

        out: list[Instruction] = []
        for m in self.members:
            if isinstance(m, Group):
                out.extend(m.instructions())
            else:
                out.append(m)
        return out


Member = Union[Instruction, Group]
TransformResult = Union[Single, Group]


def as_member(result: TransformResult) -> Member:
    """Unwrap a result for placement inside a group."""

    if isinstance(result, Single):
        return result.instruction
    return result
