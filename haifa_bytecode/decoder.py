from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Optional

from .actions import BUILTIN_ACTIONS, JUMP_OPERATIONS, PUT_STRING, lookup_action
from .errors import (
    DecodeError,
    MalformedInstructionError,
    MalformedLabelError,
    UnknownOperationError,
    UnresolvableJumpTargetError,
)
from .instruction import PROGRAM_MARKERS, Label, LabelKind, Param, InstructionSequence
from .operands import _SENTINEL, extract_string_literal, resolve_param, try_parse_integer
from .records import InstructionRecord, InstructionSetRecord

logger = logging.getLogger(__name__)

LabelTable = Dict[LabelKind, Dict[str, List[InstructionSequence]]]
BlockTable = Dict[str, InstructionSequence]

SECTION_MARKER = "<"


@dataclass
class DecodedProgram:
    """Everything the execution engine needs from one decode run."""

    sequences: List[InstructionSequence]
    label_table: LabelTable
    block_table: BlockTable
    program: Optional[InstructionSequence] = None

    def definitions(self, kind: LabelKind, name: str) -> List[InstructionSequence]:
        return list(self.label_table.get(kind, {}).get(name, []))

    def block(self, name: str) -> Optional[InstructionSequence]:
        return self.block_table.get(name)


@dataclass
class DecodeResult:
    """Outcome of a textual decode: either a program or the error that voided the run."""

    program: Optional[DecodedProgram] = None
    error: Optional[DecodeError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def sequences(self) -> List[InstructionSequence]:
        if self.program is None:
            return []
        return self.program.sequences

    def unwrap(self) -> DecodedProgram:
        if self.error is not None:
            raise self.error
        assert self.program is not None
        return self.program


@dataclass
class _LineCursor:
    lines: List[str]
    index: int = 0

    def exhausted(self) -> bool:
        return self.index >= len(self.lines)

    def peek(self) -> str:
        return self.lines[self.index].strip()

    def advance(self) -> str:
        line = self.peek()
        self.index += 1
        return line


class BytecodeDecoder:
    """Decodes the bytecode of one file into instruction sequences.

    A decoder owns the label and block tables of a single decode run; build a
    new one for every file.
    """

    def __init__(self, filename: str = "<bytecode>", actions: Optional[Mapping[str, Any]] = None):
        self.filename = filename
        self.actions: Mapping[str, Any] = BUILTIN_ACTIONS if actions is None else actions
        self.label_table: LabelTable = {
            LabelKind.DEF: {},
            LabelKind.DEF_CLASS: {},
        }
        self.block_table: BlockTable = {}
        self.program: Optional[InstructionSequence] = None

    # -------------------------- labels -------------------------- #
    def parse_label(self, raw_label: str) -> Label:
        if raw_label in PROGRAM_MARKERS:
            return Label(LabelKind.PROGRAM)

        kind_name, sep, name = raw_label.partition(":")
        if not sep:
            raise MalformedLabelError(raw_label, "missing ':' between kind and name", filename=self.filename)
        if not name:
            raise MalformedLabelError(raw_label, "empty name", filename=self.filename)
        try:
            kind = LabelKind(kind_name)
        except ValueError:
            raise MalformedLabelError(raw_label, f"unknown label kind {kind_name!r}", filename=self.filename) from None
        if kind is LabelKind.PROGRAM:
            raise MalformedLabelError(raw_label, "program label takes no name", filename=self.filename)
        return Label(kind, name)

    def register_label(self, sequence: InstructionSequence, raw_label: str) -> Label:
        label = self.parse_label(raw_label)
        sequence.label = label

        if label.kind is LabelKind.PROGRAM:
            if self.program is not None:
                logger.debug("%s: program section redefined", self.filename)
            self.program = sequence
        elif label.kind is LabelKind.BLOCK:
            self.block_table[label.name] = sequence
        else:
            self.label_table.setdefault(label.kind, {}).setdefault(label.name, []).append(sequence)

        logger.debug("%s: registered label %s", self.filename, label)
        return label

    def result(self, sequences: List[InstructionSequence]) -> DecodedProgram:
        return DecodedProgram(sequences, self.label_table, self.block_table, self.program)

    def _require_action(self, operation: str, line: int) -> Any:
        action = lookup_action(operation, self.actions)
        if action is None:
            raise UnknownOperationError(operation, line, filename=self.filename)
        return action

    # ---------------------- structured input ---------------------- #
    def decode_instruction_sets(self, records: Iterable[InstructionSetRecord]) -> List[InstructionSequence]:
        """Decode generator-produced instruction sets.

        The generator is trusted, so nothing is caught here: any
        :class:`DecodeError` ends the run.
        """
        sequences = [self._decode_instruction_set(record) for record in records]
        logger.debug("%s: decoded %d instruction sets", self.filename, len(sequences))
        return sequences

    def _decode_instruction_set(self, record: InstructionSetRecord) -> InstructionSequence:
        sequence = InstructionSequence(self.filename)
        self.register_label(sequence, record.label_name)
        for instruction in record.instructions:
            self.convert_instruction(sequence, instruction)
        return sequence

    def convert_instruction(self, sequence: InstructionSequence, record: InstructionRecord) -> None:
        action = self._require_action(record.action, record.line)
        params: List[Param]

        if record.action == PUT_STRING:
            literal = extract_string_literal(record.params[0]) if record.params else None
            if literal is None:
                raise MalformedInstructionError(
                    " ".join(record.params), "putstring needs a quoted operand", line=record.line, filename=self.filename
                )
            params = [literal]
        elif record.action in JUMP_OPERATIONS:
            params = [record.anchor_line()]
        else:
            params = [resolve_param(param) for param in record.params]

        sequence.define(record.line, record.action, action, *params)

    # ------------------------ textual input ------------------------ #
    def decode_text(self, text: str) -> DecodeResult:
        """Decode the textual bytecode listing of a whole file.

        Sections are emitted in the order they appear: a section nested in a
        method or class shows up after its parent's leading instructions, and
        its place in the tree is only kept by its label. Any
        :class:`DecodeError` voids the whole run and is returned on the result.
        """
        cursor = _LineCursor(text.strip().split("\n"))
        sequences: List[InstructionSequence] = []
        try:
            while not cursor.exhausted():
                self._decode_section(cursor, sequences)
        except DecodeError as exc:
            if exc.filename is None:
                exc.filename = self.filename
            logger.info("%s: bytecode decode failed: %s", self.filename, exc)
            return DecodeResult(error=exc)

        logger.debug("%s: decoded %d sections", self.filename, len(sequences))
        return DecodeResult(program=self.result(sequences))

    def _decode_section(self, cursor: _LineCursor, sequences: List[InstructionSequence]) -> InstructionSequence:
        sequence = InstructionSequence(self.filename)
        self.parse_label_line(sequence, cursor.advance())
        sequences.append(sequence)

        # The section ends at the next header, which starts the next section.
        while not cursor.exhausted() and not cursor.peek().startswith(SECTION_MARKER):
            text = cursor.advance()
            if text:
                self.parse_instruction(sequence, text)
        return sequence

    def parse_label_line(self, sequence: InstructionSequence, line: str) -> Label:
        if not (line.startswith(SECTION_MARKER) and line.endswith(">")):
            raise MalformedLabelError(line, "section header must look like <kind:name>", filename=self.filename)
        return self.register_label(sequence, line[1:-1].strip())

    def parse_instruction(self, sequence: InstructionSequence, text: str) -> None:
        tokens = [token for token in text.split(" ") if token]
        if len(tokens) < 2:
            raise MalformedInstructionError(text, "expected '<line> <operation> [operand...]'", filename=self.filename)

        line = try_parse_integer(tokens[0])
        if line is _SENTINEL:
            raise MalformedInstructionError(text, f"invalid line number {tokens[0]!r}", filename=self.filename)
        operation = tokens[1]
        action = self._require_action(operation, line)
        params: List[Param]

        if operation == PUT_STRING:
            literal = extract_string_literal(text)
            if literal is None:
                raise MalformedInstructionError(text, "putstring needs a quoted operand", line=line, filename=self.filename)
            params = [literal]
        elif operation in JUMP_OPERATIONS:
            params = [self._resolve_target(operation, line, tokens[2:])]
        else:
            params = [resolve_param(token) for token in tokens[2:]]

        sequence.define(line, operation, action, *params)

    def _resolve_target(self, operation: str, line: int, operands: List[str]) -> int:
        if len(operands) != 1:
            operand = " ".join(operands) if operands else None
            raise UnresolvableJumpTargetError(operation, line, operand, filename=self.filename)
        target = try_parse_integer(operands[0])
        if target is _SENTINEL or target < 0:
            raise UnresolvableJumpTargetError(operation, line, operands[0], filename=self.filename)
        return target


__all__ = ["BytecodeDecoder", "DecodedProgram", "DecodeResult", "LabelTable", "BlockTable"]
