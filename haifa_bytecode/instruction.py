from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterator, List, Optional, Union

Param = Union[int, str]


class LabelKind(Enum):
    PROGRAM = "Program"
    DEF = "Def"              # method definition
    DEF_CLASS = "DefClass"   # class body
    BLOCK = "Block"


# Section headers that mark the program root; "ProgramStart" is the legacy spelling.
PROGRAM_MARKERS = frozenset({"Program", "ProgramStart"})


@dataclass(frozen=True)
class Label:
    kind: LabelKind
    name: Optional[str] = None

    @property
    def marker(self) -> str:
        """The label token as written in a section header."""
        if self.kind is LabelKind.PROGRAM:
            return LabelKind.PROGRAM.value
        return f"{self.kind.value}:{self.name}"

    def __str__(self) -> str:
        return self.marker


@dataclass
class Instruction:
    line: int
    operation: str
    action: Any  # opaque handle from the action table
    params: List[Param] = field(default_factory=list)

    def __str__(self):
        if not self.params:
            return f"{self.line} {self.operation}"
        return f"{self.line} {self.operation} {' '.join(map(str, self.params))}"


@dataclass(eq=False)
class InstructionSequence:
    """Instructions of one program unit: the program, a method, a class body or a block.

    Identity matters here: label tables hold references to sequences, so two
    sequences with equal contents are still distinct entries.
    """

    filename: str
    label: Optional[Label] = None
    instructions: List[Instruction] = field(default_factory=list)

    def define(self, line: int, operation: str, action: Any, *params: Param) -> Instruction:
        instruction = Instruction(line, operation, action, list(params))
        self.instructions.append(instruction)
        return instruction

    def __iter__(self) -> Iterator[Instruction]:
        return iter(self.instructions)

    def __len__(self) -> int:
        return len(self.instructions)

    def __repr__(self) -> str:
        return f"InstructionSequence({self.filename!r}, {self.label}, {len(self.instructions)} instructions)"


__all__ = ["Param", "LabelKind", "PROGRAM_MARKERS", "Label", "Instruction", "InstructionSequence"]
