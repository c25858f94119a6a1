#!/usr/bin/env python3
import sys
import argparse
from enum import IntEnum

TAPE_SIZE = 64000
PROMPT = ":: "

# What ',' does once the reader has nothing left
EOF_KEEP = 'keep'
EOF_ZERO = 'zero'
EOF_ERROR = 'error'
EOF_POLICIES = (EOF_KEEP, EOF_ZERO, EOF_ERROR)


class BFError(Exception):
    pass

class UnbalancedLoopError(BFError):
    def __init__(self, message, position):
        super().__init__(message)
        self.position = position

class TapeError(BFError):
    pass

class InputExhaustedError(BFError):
    pass


class Op(IntEnum):
    COMMENT = 0
    RIGHT = 1
    LEFT = 2
    INC = 3
    DEC = 4
    PRINT = 5
    READ = 6
    LOOP_OPEN = 7
    LOOP_CLOSE = 8

    @property
    def symbol(self):
        return _SYMBOLS.get(self, '')


_OPS = {
    '>': Op.RIGHT,
    '<': Op.LEFT,
    '+': Op.INC,
    '-': Op.DEC,
    '.': Op.PRINT,
    ',': Op.READ,
    '[': Op.LOOP_OPEN,
    ']': Op.LOOP_CLOSE,
}
_SYMBOLS = {op: char for char, op in _OPS.items()}


def tokenize(code):
    # One op per character, comments included, so indices line up with the source
    return tuple(_OPS.get(c, Op.COMMENT) for c in code)

def debug_tokens(instructions):
    return [op.name for op in instructions if op != Op.COMMENT]

def check_loops(instructions):
    opened = []
    for i, op in enumerate(instructions):
        if op == Op.LOOP_OPEN:
            opened.append(i)
        elif op == Op.LOOP_CLOSE:
            if not opened:
                raise UnbalancedLoopError(f"Unmatched ']' at {i}", i)
            opened.pop()
    if opened:
        pos = opened[-1]
        raise UnbalancedLoopError(f"Unmatched '[' at {pos}", pos)


def stdin_reader():
    return sys.stdin.read(1)

def stdout_writer(char):
    sys.stdout.write(char)
    sys.stdout.flush()

def string_reader(text):
    chars = iter(text)
    return lambda: next(chars, '')


class Program:
    """
    A tokenized program plus the tape and cursors it runs against.

    Build one per source unit and drive it with step() until finished.
    Loops are resolved by scanning for the matching bracket on every jump;
    brackets are checked for balance up front so those scans stay in range.
    """

    def __init__(self, code, tape_size=TAPE_SIZE, reader=None, writer=None, eof=EOF_KEEP):
        if eof not in EOF_POLICIES:
            raise ValueError(f"unknown eof policy: {eof!r}")
        self.instructions = tokenize(code)
        check_loops(self.instructions)
        self.tape = bytearray(tape_size)
        self.data_cursor = 0
        self.instruction_cursor = 0
        self.finished = len(self.instructions) == 0
        self.reader = reader or stdin_reader
        self.writer = writer or stdout_writer
        self.eof = eof

    def _check_cell(self):
        if self.data_cursor < 0:
            raise TapeError(f"tape underflow (data cursor {self.data_cursor})")
        if self.data_cursor >= len(self.tape):
            raise TapeError(f"tape overflow (data cursor {self.data_cursor}, tape size {len(self.tape)})")

    @property
    def cell(self):
        self._check_cell()
        return self.tape[self.data_cursor]

    @cell.setter
    def cell(self, value):
        self._check_cell()
        self.tape[self.data_cursor] = value & 0xFF

    def step(self):
        if self.finished:
            raise BFError("program already finished")

        op = self.instructions[self.instruction_cursor]
        if op == Op.RIGHT:
            self.data_cursor += 1
        elif op == Op.LEFT:
            self.data_cursor -= 1
        elif op == Op.INC:
            self.cell += 1
        elif op == Op.DEC:
            self.cell -= 1
        elif op == Op.PRINT:
            self.writer(chr(self.cell))
        elif op == Op.READ:
            self._read()
        elif op == Op.LOOP_OPEN:
            self._open_loop()
        elif op == Op.LOOP_CLOSE:
            self._close_loop()
        self.instruction_cursor += 1

        if self.instruction_cursor >= len(self.instructions):
            self.finished = True

    def run(self):
        steps = 0
        while not self.finished:
            self.step()
            steps += 1
        return steps

    def _read(self):
        char = self.reader()
        if char:
            self.cell = ord(char)
        elif self.eof == EOF_ZERO:
            self.cell = 0
        elif self.eof == EOF_ERROR:
            raise InputExhaustedError(f"end of input at instruction {self.instruction_cursor}")
        else:
            # EOF_KEEP still has to touch a valid cell
            self._check_cell()

    def _open_loop(self):
        # Zero cell: park on the matching ']' so the step increment moves past it
        if self.cell != 0:
            return
        balance = 1
        while balance != 0:
            self.instruction_cursor += 1
            op = self.instructions[self.instruction_cursor]
            if op == Op.LOOP_OPEN:
                balance += 1
            elif op == Op.LOOP_CLOSE:
                balance -= 1

    def _close_loop(self):
        # Back up to just before the matching '[' so it re-tests the cell next step
        balance = 0
        while True:
            op = self.instructions[self.instruction_cursor]
            if op == Op.LOOP_CLOSE:
                balance += 1
            elif op == Op.LOOP_OPEN:
                balance -= 1
            self.instruction_cursor -= 1
            if balance == 0:
                break


def create(code, **options):
    return Program(code, **options)

def run_source(code, input_text="", **options):
    output = []
    program = Program(code, reader=string_reader(input_text), writer=output.append, **options)
    program.run()
    return "".join(output)


def read_source(path):
    # Undecodable bytes become U+FFFD, which tokenizes as a comment
    with open(path, 'r', encoding='utf-8', errors='replace') as f:
        return f.read()


def run_file(path, **options):
    try:
        code = read_source(path)
    except OSError as e:
        print(f"Error reading file:\n    {e}", file=sys.stderr)
        return 1

    try:
        Program(code, **options).run()
    except BFError as e:
        print(f"\nError: {e}", file=sys.stderr)
        return 1
    return 0

def repl(**options):
    while True:
        sys.stdout.write(f"\n{PROMPT}")
        sys.stdout.flush()
        try:
            line = sys.stdin.readline()
        except KeyboardInterrupt:
            break
        if not line:
            break
        try:
            Program(line, **options).run()
        except BFError as e:
            print(f"Error: {e}", file=sys.stderr)
        except KeyboardInterrupt:
            print("\nInterrupted")
    print()
    return 0


def main(argv=None):
    parser = argparse.ArgumentParser(description="Run a brainfuck file, or read programs line by line when no file is given.")
    parser.add_argument('file', nargs='?', help="source file to run")
    parser.add_argument('--tape-size', type=int, default=TAPE_SIZE, help=f"number of tape cells (default {TAPE_SIZE})")
    parser.add_argument('--eof', choices=EOF_POLICIES, default=EOF_KEEP, help="what ',' stores at end of input")
    parser.add_argument('--tokens', action='store_true', help="print instruction names instead of running")
    args = parser.parse_args(argv)

    if args.tape_size <= 0:
        parser.error("--tape-size must be positive")

    if args.tokens:
        if args.file is None:
            parser.error("--tokens needs a file")
        try:
            code = read_source(args.file)
        except OSError as e:
            print(f"Error reading file:\n    {e}", file=sys.stderr)
            return 1
        print(" ".join(debug_tokens(tokenize(code))))
        return 0

    options = {'tape_size': args.tape_size, 'eof': args.eof}
    if args.file is not None:
        return run_file(args.file, **options)
    return repl(**options)


if __name__ == "__main__":
    sys.exit(main())
