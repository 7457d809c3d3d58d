"""haifa_bytecode decodes VM bytecode listings into executable instruction sequences."""
from .actions import BUILTIN_ACTIONS, Opcode, lookup_action
from .bytecode_io import BytecodeReader, BytecodeWriter
from .decoder import BytecodeDecoder, DecodedProgram, DecodeResult
from .errors import (
    DecodeError,
    MalformedInstructionError,
    MalformedLabelError,
    UnknownOperationError,
    UnresolvableJumpTargetError,
)
from .instruction import Instruction, InstructionSequence, Label, LabelKind
from .records import Anchor, InstructionRecord, InstructionSetRecord

__all__ = [
    "BytecodeDecoder",
    "DecodedProgram",
    "DecodeResult",
    "BytecodeReader",
    "BytecodeWriter",
    "Opcode",
    "BUILTIN_ACTIONS",
    "lookup_action",
    "Instruction",
    "InstructionSequence",
    "Label",
    "LabelKind",
    "Anchor",
    "InstructionRecord",
    "InstructionSetRecord",
    "DecodeError",
    "MalformedLabelError",
    "UnknownOperationError",
    "UnresolvableJumpTargetError",
    "MalformedInstructionError",
]
