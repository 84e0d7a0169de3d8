import argparse
import sys

from memory_manager import InvalidInput
from responses import format_response, format_state, to_json
from simulator import VirtualMemorySimulator


def parse_lookahead(tokens):
    future = []
    for token in tokens:
        process_id, sep, page_number = token.partition(':')
        if not sep:
            raise InvalidInput(f"Lookahead entries look like <pid>:<page>, got {token!r}")
        future.append((int(process_id), int(page_number)))
    return future


def execute(simulator, line):
    """Run one command line and return the text to print, or None to stop."""
    parts = line.split()
    if not parts:
        return ''
    command, args = parts[0].upper(), parts[1:]

    if command == 'ADD':
        if len(args) != 2:
            raise InvalidInput("Usage: ADD <filename> <filesize>")
        process_id = simulator.register_process(args[0], int(args[1]))
        return f"Process added with ID: {process_id}"

    if command in ('FIFO', 'LRU', 'OPT'):
        if len(args) < 2 or (command != 'OPT' and len(args) > 2):
            raise InvalidInput(f"Usage: {command} <pid> <page>")
        process_id, page_number = int(args[0]), int(args[1])
        future = parse_lookahead(args[2:]) if command == 'OPT' and args[2:] else None
        decision = simulator.reference(command, process_id, page_number, future)
        return to_json(format_response(decision, simulator.stats))

    if command == 'STATE':
        return to_json(format_state(simulator.query_state()))

    if command == 'RESET':
        simulator.reset()
        return "Memory reset complete"

    if command == 'EXIT':
        return None

    raise InvalidInput(f"Unknown command: {parts[0]}")


def serve(simulator, lines, out=None):
    out = out or sys.stdout
    for line in lines:
        try:
            result = execute(simulator, line)
        except ValueError as e:
            # int() failures and InvalidInput both land here; the session carries on
            result = to_json({'error': str(e)})
        if result is None:
            break
        if result:
            print(result, file=out)


def main(argv=None):
    parser = argparse.ArgumentParser(description="SwapStore paging simulator command shell")
    parser.add_argument("-r", "--ram-kb", type=int, required=True, help="RAM size in KB")
    parser.add_argument("--keep-policy-state", action="store_true",
                        help="keep FIFO queue and LRU timestamps across RESET")
    args = parser.parse_args(argv)

    try:
        simulator = VirtualMemorySimulator(args.ram_kb, keep_policy_state=args.keep_policy_state)
    except InvalidInput as e:
        parser.error(str(e))

    print("SwapStore Engine Ready")
    print(f"Memory Manager initialized with {simulator.num_frames} frames")
    print("Commands: ADD <filename> <filesize> | FIFO <pid> <page> | LRU <pid> <page> | "
          "OPT <pid> <page> [<pid>:<page> ...] | STATE | RESET | EXIT")
    serve(simulator, sys.stdin)


if __name__ == '__main__':
    main()
