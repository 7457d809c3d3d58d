from __future__ import annotations

import pytest

from haifa_bytecode import (
    BytecodeDecoder,
    DecodeError,
    LabelKind,
    MalformedInstructionError,
    MalformedLabelError,
    Opcode,
    UnknownOperationError,
    UnresolvableJumpTargetError,
)


CLASS_WITH_METHOD = """
<ProgramStart>
0 putself
1 def_class class:Foo
2 pop
3 leave
<DefClass:Foo>
0 putself
1 putstring "bar"
2 def_method 0
<Def:bar>
0 putobject 10
1 leave
<Block:0>
0 getlocal 0 1
1 leave
"""


def _decode(text: str, filename: str = "sample.gb"):
    decoder = BytecodeDecoder(filename)
    return decoder, decoder.decode_text(text)


def _shape(program):
    return [
        (str(seq.label), [(i.line, i.operation, i.params) for i in seq])
        for seq in program.sequences
    ]


def test_program_with_string_and_leave() -> None:
    decoder, result = _decode('<Program>\n1 putstring "hi"\n2 leave')
    assert result.ok
    assert len(result.sequences) == 1
    seq = result.sequences[0]
    first, second = seq.instructions
    assert first.line == 1
    assert first.action is Opcode.PUT_STRING
    assert first.params == ["hi"]
    assert second.line == 2
    assert second.action is Opcode.LEAVE
    assert second.params == []
    assert decoder.program is seq
    assert result.program.program is seq


def test_sections_are_flattened_in_encounter_order() -> None:
    decoder, result = _decode(CLASS_WITH_METHOD)
    assert result.ok
    labels = [str(seq.label) for seq in result.sequences]
    assert labels == ["Program", "DefClass:Foo", "Def:bar", "Block:0"]
    assert [len(seq) for seq in result.sequences] == [4, 3, 2, 2]
    assert all(seq.filename == "sample.gb" for seq in result.sequences)


def test_labels_are_indexed_into_tables() -> None:
    decoder, result = _decode(CLASS_WITH_METHOD)
    program = result.unwrap()
    foo = program.definitions(LabelKind.DEF_CLASS, "Foo")
    bar = program.definitions(LabelKind.DEF, "bar")
    assert foo == [program.sequences[1]]
    assert bar == [program.sequences[2]]
    assert program.block("0") is program.sequences[3]
    assert program.program is program.sequences[0]
    assert program.label_table is decoder.label_table
    assert program.block_table is decoder.block_table


def test_method_defined_twice_keeps_both_sequences() -> None:
    _, result = _decode("<Def:foo>\n0 putobject 1\n1 leave\n<Def:foo>\n0 putobject 2\n1 leave")
    defs = result.unwrap().definitions(LabelKind.DEF, "foo")
    assert len(defs) == 2
    assert defs[0] is result.sequences[0]
    assert defs[1] is result.sequences[1]
    assert defs[0].instructions[0].params == [1]
    assert defs[1].instructions[0].params == [2]


def test_block_redefinition_keeps_latest() -> None:
    _, result = _decode("<Block:0>\n0 leave\n<Block:0>\n0 pop\n1 leave")
    assert result.unwrap().block("0") is result.sequences[1]


def test_program_pointer_unset_without_program_section() -> None:
    decoder, result = _decode("<Def:foo>\n0 leave")
    assert result.ok
    assert decoder.program is None
    assert result.program.program is None


def test_later_program_section_replaces_pointer() -> None:
    decoder, result = _decode("<Program>\n0 leave\n<Program>\n0 pop")
    assert decoder.program is result.sequences[1]


def test_decoding_is_deterministic() -> None:
    _, first = _decode(CLASS_WITH_METHOD)
    _, second = _decode(CLASS_WITH_METHOD)
    assert _shape(first.program) == _shape(second.program)


def test_jump_operand_is_integer_line() -> None:
    _, result = _decode("<Program>\n0 putobject true\n1 branchif 7\n2 jump 0x0A")
    instrs = result.sequences[0].instructions
    assert instrs[1].params == [7]
    assert isinstance(instrs[1].params[0], int)
    assert instrs[2].params == [10]


def test_operands_split_between_ints_and_tokens() -> None:
    _, result = _decode("<Program>\n0 send + 1\n1 getconstant Foo false\n2 putobject 0x1F\n3 setlocal 0 017")
    instrs = result.sequences[0].instructions
    assert instrs[0].params == ["+", 1]
    assert instrs[1].params == ["Foo", "false"]
    assert instrs[2].params == [31]
    assert instrs[3].params == [0, 15]


def test_putstring_takes_text_between_first_quotes() -> None:
    _, result = _decode('<Program>\n0 putstring "hello world" ignored "x"')
    assert result.sequences[0].instructions[0].params == ["hello world"]


def test_blank_lines_and_crlf_are_ignored() -> None:
    _, result = _decode("<Program>\r\n0 putself\r\n\r\n1 leave\r\n")
    assert [i.operation for i in result.sequences[0]] == ["putself", "leave"]


def test_unknown_operation_fails_whole_decode() -> None:
    decoder, result = _decode("<Program>\n0 putself\n<Def:foo>\n1 frobnicate 1")
    assert not result.ok
    assert result.sequences == []
    assert result.program is None
    assert isinstance(result.error, UnknownOperationError)
    assert result.error.operation == "frobnicate"
    assert result.error.line == 1
    assert result.error.filename == "sample.gb"
    with pytest.raises(UnknownOperationError):
        result.unwrap()


def test_unknown_operation_without_operands_fails() -> None:
    _, result = _decode("<Program>\n0 frobnicate")
    assert isinstance(result.error, UnknownOperationError)


@pytest.mark.parametrize(
    "header",
    ["<Deffoo>", "<Method:foo>", "<Def:>", "Def:foo", "<Program:main>"],
)
def test_malformed_header_is_reported(header: str) -> None:
    _, result = _decode(f"{header}\n0 leave")
    assert not result.ok
    assert isinstance(result.error, MalformedLabelError)


def test_empty_input_is_reported() -> None:
    _, result = _decode("   \n  ")
    assert isinstance(result.error, MalformedLabelError)


@pytest.mark.parametrize("line", ["0 jump", "0 jump foo", "0 branchunless 1 2", "0 branchif -3"])
def test_unresolvable_jump_target_is_reported(line: str) -> None:
    _, result = _decode(f"<Program>\n{line}")
    assert isinstance(result.error, UnresolvableJumpTargetError)
    assert result.error.line == 0


@pytest.mark.parametrize("line", ["leave", "x leave", '0 putstring hi'])
def test_malformed_instruction_is_reported(line: str) -> None:
    _, result = _decode(f"<Program>\n{line}")
    assert isinstance(result.error, MalformedInstructionError)
    assert isinstance(result.error, DecodeError)


def test_non_decode_errors_propagate() -> None:
    class BrokenActions(dict):
        def get(self, key, default=None):
            raise RuntimeError("action table unavailable")

    decoder = BytecodeDecoder("sample.gb", actions=BrokenActions())
    with pytest.raises(RuntimeError):
        decoder.decode_text("<Program>\n0 leave")


def test_custom_action_table() -> None:
    handle = object()
    decoder = BytecodeDecoder("sample.gb", actions={"noop": handle})
    result = decoder.decode_text("<Program>\n0 noop 1 two")
    instr = result.sequences[0].instructions[0]
    assert instr.action is handle
    assert instr.params == [1, "two"]
    failed = BytecodeDecoder("sample.gb", actions={"noop": handle}).decode_text("<Program>\n0 leave")
    assert isinstance(failed.error, UnknownOperationError)
