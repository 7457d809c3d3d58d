from __future__ import annotations

from typing import Iterable, List, Optional

from .actions import PUT_STRING
from .decoder import BytecodeDecoder, DecodeResult
from .instruction import Instruction, InstructionSequence, LabelKind


class BytecodeWriter:
    @staticmethod
    def format_instruction(instr: Instruction) -> str:
        if instr.operation == PUT_STRING:
            return f'{instr.line} {instr.operation} "{instr.params[0]}"'
        return str(instr)

    @staticmethod
    def format_sequences(sequences: Iterable[InstructionSequence]) -> str:
        lines: List[str] = []
        for seq in sequences:
            marker = seq.label.marker if seq.label is not None else LabelKind.PROGRAM.value
            lines.append(f"<{marker}>")
            lines.extend(BytecodeWriter.format_instruction(instr) for instr in seq)
        return "\n".join(lines)

    @staticmethod
    def write_to_file(sequences, path):
        with open(path, 'w', encoding="utf-8") as f:
            f.write(BytecodeWriter.format_sequences(sequences))
            f.write("\n")


class BytecodeReader:
    @staticmethod
    def load_from_file(path) -> str:
        with open(path, 'r', encoding="utf-8") as f:
            return f.read()

    @staticmethod
    def decode_file(path, filename: Optional[str] = None) -> DecodeResult:
        decoder = BytecodeDecoder(filename or str(path))
        return decoder.decode_text(BytecodeReader.load_from_file(path))


__all__ = ["BytecodeReader", "BytecodeWriter"]
