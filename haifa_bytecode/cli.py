from __future__ import annotations

import argparse
import logging
import pathlib
import sys
from typing import Optional

from .bytecode_io import BytecodeWriter
from .decoder import BytecodeDecoder, DecodedProgram
from .instruction import LabelKind


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(prog="haifa-bytecode", description="Decode and validate VM bytecode listings")
    parser.add_argument("path", nargs="?", help="Path to a bytecode listing (reads stdin when omitted)")
    parser.add_argument("--list", action="store_true", help="Print the decoded instructions of every section")
    parser.add_argument("--filename", help="Source filename recorded on decoded sequences")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log decoder activity to stderr")
    parser.add_argument("--debug", action="store_true", help="Print a stack trace when decoding fails")
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    try:
        if args.path:
            source = pathlib.Path(args.path).read_text(encoding="utf-8")
            filename = args.filename or args.path
        else:
            source = sys.stdin.read()
            filename = args.filename or "<stdin>"
    except OSError as exc:
        print(f"Cannot read bytecode: {exc}", file=sys.stderr)
        return 1

    result = BytecodeDecoder(filename).decode_text(source)
    if not result.ok:
        if args.debug:
            raise result.error
        print(f"Bytecode decode failed: {result.error}", file=sys.stderr)
        return 1

    program = result.unwrap()
    if args.list:
        print(BytecodeWriter.format_sequences(program.sequences))
    else:
        _print_summary(program)
    return 0


def _print_summary(program: DecodedProgram) -> None:
    for seq in program.sequences:
        marker = seq.label.marker if seq.label is not None else LabelKind.PROGRAM.value
        root = " (program)" if seq is program.program else ""
        print(f"<{marker}>{root}: {len(seq)} instructions")
    defs = sum(len(entries) for entries in program.label_table.get(LabelKind.DEF, {}).values())
    classes = sum(len(entries) for entries in program.label_table.get(LabelKind.DEF_CLASS, {}).values())
    print(f"{len(program.sequences)} sections, {defs} methods, {classes} classes, {len(program.block_table)} blocks")


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
