#!/usr/bin/env python3
import sys

from bf_runner import BFError, read_source, string_reader
from debugger import Debugger

def trace(filename, steps=2000000, input_text=""):
    code = read_source(filename)

    output = []
    dbg = Debugger(code, reader=string_reader(input_text), writer=output.append)
    print(f"Loaded {len(dbg.ops)} ops")

    for i in range(steps):
        if dbg.finished:
            print(f"Finished at step {i}")
            break

        try:
            dbg.run_step()
        except BFError as e:
            print(f"Error/Halt at step {i}: {e}")
            break
    else:
        if dbg.finished:
            print(f"Finished at step {steps}")
        else:
            print("Step limit reached")

    print(f"Final PC: {dbg.pc}")
    print(f"Output: {len(output)} chars")
    return dbg.step_count

if __name__ == "__main__":
    if len(sys.argv) < 2:
        print("Usage: python3 trace_execution.py <bf_file> [steps]")
        sys.exit(1)
    limit = int(sys.argv[2]) if len(sys.argv) > 2 else 2000000
    try:
        trace(sys.argv[1], limit)
    except (OSError, BFError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
