from __future__ import annotations

from typing import Optional


class DecodeError(ValueError):
    """Fatal error raised while decoding a bytecode listing.

    Carries the source line (when known) and the filename of the decode run
    so callers can report the failure without inspecting the message.
    """

    def __init__(self, message: str, *, line: Optional[int] = None, filename: Optional[str] = None):
        super().__init__(message)
        self.line = line
        self.filename = filename


class MalformedLabelError(DecodeError):
    def __init__(self, label: str, reason: str, *, filename: Optional[str] = None):
        super().__init__(f"Malformed label {label!r}: {reason}", filename=filename)
        self.label = label


class UnknownOperationError(DecodeError):
    def __init__(self, operation: str, line: int, *, filename: Optional[str] = None):
        super().__init__(f"Unknown command: {operation}. line: {line}", line=line, filename=filename)
        self.operation = operation


class UnresolvableJumpTargetError(DecodeError):
    def __init__(
        self,
        operation: str,
        line: int,
        operand: Optional[str] = None,
        *,
        filename: Optional[str] = None,
    ):
        detail = "no anchor attached" if operand is None else f"invalid target {operand!r}"
        super().__init__(f"Can't find anchor line for {operation} ({detail}). line: {line}", line=line, filename=filename)
        self.operation = operation
        self.operand = operand


class MalformedInstructionError(DecodeError):
    """An instruction line that cannot be split into line number, operation and operands."""

    def __init__(self, text: str, reason: str, *, line: Optional[int] = None, filename: Optional[str] = None):
        super().__init__(f"Malformed instruction {text!r}: {reason}", line=line, filename=filename)
        self.text = text


__all__ = [
    "DecodeError",
    "MalformedLabelError",
    "UnknownOperationError",
    "UnresolvableJumpTargetError",
    "MalformedInstructionError",
]
