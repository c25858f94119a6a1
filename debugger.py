#!/usr/bin/env python3
import sys
import argparse

from bf_runner import Program, Op, BFError, TAPE_SIZE, EOF_KEEP, EOF_POLICIES, debug_tokens, read_source

class Colors:
    BLUE = '\033[94m'
    GREEN = '\033[92m'
    WARNING = '\033[93m'
    FAIL = '\033[91m'
    ENDC = '\033[0m'
    BOLD = '\033[1m'
    REVERSE = '\033[7m'


def format_op(op):
    if op == Op.COMMENT:
        return "COMMENT"
    return f"{op.symbol} {op.name}"


class Debugger:
    def __init__(self, code, tape_size=TAPE_SIZE, reader=None, writer=None, eof=EOF_KEEP):
        self.program = Program(code, tape_size=tape_size, reader=reader, writer=writer, eof=eof)
        self.breakpoints = set()
        self.step_count = 0

    @property
    def pc(self):
        return self.program.instruction_cursor

    @property
    def ptr(self):
        return self.program.data_cursor

    @property
    def ops(self):
        return self.program.instructions

    @property
    def tape(self):
        return self.program.tape

    @property
    def finished(self):
        return self.program.finished

    def run_step(self):
        if self.program.finished:
            return False
        self.program.step()
        self.step_count += 1
        return True

    def continue_(self):
        """
        Step until a breakpoint or the end of the program.
        Returns the breakpoint hit, or None if the program finished.
        """
        while self.run_step():
            if self.pc in self.breakpoints:
                return self.pc
        return None

    def toggle_breakpoint(self, pc):
        if pc in self.breakpoints:
            self.breakpoints.remove(pc)
            return False
        self.breakpoints.add(pc)
        return True

    def memory(self, addr, count):
        end = min(len(self.tape), addr + count)
        return [(i, self.tape[i]) for i in range(max(0, addr), end)]

    def print_state(self):
        print(f"\n{Colors.BOLD}--- Step {self.step_count} ---{Colors.ENDC}")
        print(f"PC: {self.pc} / {len(self.ops)}")
        print(f"Ptr: {self.ptr}")

        # Tape window around ptr
        window = 8
        start = max(0, self.ptr - window)
        end = min(len(self.tape), self.ptr + window + 1)

        tape_str = ""
        for i in range(start, end):
            val = f"{self.tape[i]:03}"
            if i == self.ptr:
                tape_str += f"{Colors.REVERSE}[{val}]{Colors.ENDC} "
            else:
                tape_str += f" {val}  "
        if not 0 <= self.ptr < len(self.tape):
            tape_str = f"{Colors.WARNING}ptr off tape{Colors.ENDC}"
        print(f"Loc: {tape_str}")

        context_window = 2
        start_op = max(0, self.pc - context_window)
        end_op = min(len(self.ops), self.pc + context_window + 1)

        for i in range(start_op, end_op):
            op_str = format_op(self.ops[i])
            if i in self.breakpoints:
                op_str += f" {Colors.FAIL}*{Colors.ENDC}"
            if i == self.pc:
                print(f"{Colors.GREEN}-> {i:04}: {op_str}{Colors.ENDC}")
            else:
                print(f"   {i:04}: {op_str}")

    def run(self):
        print("BF Debugger started. Commands: (s)tep, (c)ontinue, (b)reak <pc>, (m)em dump, (t)okens, (q)uit, enter to repeat last")
        last_cmd = 's'
        while not self.finished:
            self.print_state()
            try:
                cmd = input(f"{Colors.BLUE}(bf-dbg){Colors.ENDC} ").strip()
            except EOFError:
                break

            if cmd == '':
                cmd = last_cmd

            last_cmd = cmd

            try:
                if cmd.startswith('s'):
                    self.run_step()
                elif cmd.startswith('c'):
                    hit = self.continue_()
                    if hit is not None:
                        print(f"Breakpoint hit at {hit}")
                elif cmd.startswith('q'):
                    break
                elif cmd.startswith('m'):
                    self.dump_command(cmd)
                elif cmd.startswith('b'):
                    self.breakpoint_command(cmd)
                elif cmd.startswith('t'):
                    print(" ".join(debug_tokens(self.ops)))
                else:
                    print(f"Unknown command: {cmd}")
            except BFError as e:
                print(f"{Colors.FAIL}Error: {e}{Colors.ENDC}")
                break

        print("Execution finished.")

    def dump_command(self, cmd):
        try:
            parts = cmd.split()
            addr = int(parts[1]) if len(parts) > 1 else self.ptr
            count = int(parts[2]) if len(parts) > 2 else 20
        except ValueError:
            print("Usage: m [addr] [count]")
            return
        print("Memory Dump:")
        for i, val in self.memory(addr, count):
            print(f"[{i:04}]: {val}")

    def breakpoint_command(self, cmd):
        try:
            bp = int(cmd.split()[1])
        except (IndexError, ValueError):
            print("Usage: b <pc>")
            return
        if self.toggle_breakpoint(bp):
            print(f"Breakpoint set at {bp}")
        else:
            print(f"Breakpoint removed at {bp}")


def main(argv=None):
    parser = argparse.ArgumentParser(description="Step through a brainfuck file.")
    parser.add_argument('file')
    parser.add_argument('--tape-size', type=int, default=TAPE_SIZE)
    parser.add_argument('--eof', choices=EOF_POLICIES, default=EOF_KEEP)
    args = parser.parse_args(argv)

    try:
        code = read_source(args.file)
    except OSError as e:
        print(f"Error reading file:\n    {e}", file=sys.stderr)
        return 1

    try:
        dbg = Debugger(code, tape_size=args.tape_size, eof=args.eof)
    except BFError as e:
        print(f"{Colors.FAIL}Error: {e}{Colors.ENDC}", file=sys.stderr)
        return 1
    dbg.run()
    return 0

if __name__ == '__main__':
    sys.exit(main())
