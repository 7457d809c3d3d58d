from __future__ import annotations

from enum import Enum
from typing import Mapping, Optional


class Opcode(Enum):
    """Fixed action table of the VM, keyed by the operation's wire name."""

    GET_LOCAL = "getlocal"                          # getlocal depth, index
    GET_CONSTANT = "getconstant"                    # getconstant name, is_namespace
    GET_INSTANCE_VARIABLE = "getinstancevariable"   # getinstancevariable name
    SET_LOCAL = "setlocal"                          # setlocal depth, index
    SET_CONSTANT = "setconstant"                    # setconstant name
    SET_INSTANCE_VARIABLE = "setinstancevariable"   # setinstancevariable name

    PUT_STRING = "putstring"                        # putstring "text"
    PUT_SELF = "putself"
    PUT_OBJECT = "putobject"                        # putobject value
    PUT_NULL = "putnil"

    NEW_ARRAY = "newarray"                          # newarray count
    EXPAND_ARRAY = "expand_array"                   # expand_array count
    SPLAT_ARRAY = "splat_array"
    SPLIT_ARRAY = "split_array"
    NEW_HASH = "newhash"                            # newhash count
    NEW_RANGE = "newrange"

    BRANCH_UNLESS = "branchunless"                  # branchunless target_line
    BRANCH_IF = "branchif"                          # branchif target_line
    JUMP = "jump"                                   # jump target_line

    DEF_METHOD = "def_method"                       # def_method argc
    DEF_SINGLETON_METHOD = "def_singleton_method"   # def_singleton_method argc
    DEF_CLASS = "def_class"                         # def_class kind:name [superclass]
    SEND = "send"                                   # send method argc [block] [arg_set]
    INVOKE_BLOCK = "invokeblock"                    # invokeblock argc
    GET_BLOCK = "getblock"

    POP = "pop"
    DUP = "dup"
    LEAVE = "leave"


PUT_STRING = Opcode.PUT_STRING.value

# Operations whose single operand is a control-transfer target line.
JUMP_OPERATIONS = frozenset({Opcode.BRANCH_UNLESS.value, Opcode.BRANCH_IF.value, Opcode.JUMP.value})

BUILTIN_ACTIONS: Mapping[str, Opcode] = {op.value: op for op in Opcode}


def lookup_action(name: str, actions: Optional[Mapping[str, object]] = None):
    """Return the action registered under ``name`` or ``None`` when absent."""
    table = BUILTIN_ACTIONS if actions is None else actions
    return table.get(name)


__all__ = ["Opcode", "PUT_STRING", "JUMP_OPERATIONS", "BUILTIN_ACTIONS", "lookup_action"]
