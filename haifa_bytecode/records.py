"""Structured instruction records handed over by the bytecode generator.

These mirror what the generator already knows about each instruction: the
source line, the operation name, its raw operand strings and, for jumps, the
anchor the jump points at.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from .errors import UnresolvableJumpTargetError


@dataclass
class Anchor:
    line: int


@dataclass
class InstructionRecord:
    line: int
    action: str
    params: List[str] = field(default_factory=list)
    anchor: Optional[Anchor] = None

    def anchor_line(self) -> int:
        if self.anchor is None:
            raise UnresolvableJumpTargetError(self.action, self.line)
        return self.anchor.line


@dataclass
class InstructionSetRecord:
    label_name: str
    instructions: List[InstructionRecord] = field(default_factory=list)


__all__ = ["Anchor", "InstructionRecord", "InstructionSetRecord"]
