"""CLI entry point for the Stacc interpreter.

Usage:
    python -m stacc [-v|-vv|-vvv] <program_file>
    python -m stacc [-v...] --emit-ast <program_file>
    python -m stacc [-v...] --ast <ast_json_file>
    python -m stacc [-v...]

Options:
  -v            Increase debug verbosity (can be repeated)
  --emit-ast    Parse the given .stacc file and emit an AST JSON file
  --ast         Execute a previously emitted AST JSON file

Without a program file an interactive session is started. Each input line
is run as one statement and the global variables and stack are shown
after it; an error is reported and the session carries on with its state
intact.

Debug information is written to `debug.txt` in the current directory when
verbosity is greater than zero.
"""

import argparse
import builtins
import json
import sys
from pathlib import Path
from typing import Dict, List

from .ast_json import ast_to_obj, ast_from_obj
from .errors import ParseError, StaccError
from .interpreter import Interpreter
from .parser import parse_program, parse_statement
from .values import Value, to_string


def format_state(variables: Dict[str, Value], stack: List[Value]) -> str:
    """Render variables and stack side by side as a table."""
    rows = sorted((name, to_string(value)) for name, value in variables.items())
    items = [to_string(value) for value in stack]
    ident_w = max([5] + [len(name) for name, _ in rows])
    value_w = max([5] + [len(value) for _, value in rows])
    stack_w = max([5] + [len(item) for item in items])

    lines = [
        f"| {'Ident'.ljust(ident_w)} | {'Value'.ljust(value_w)} |  | {'Stack'.ljust(stack_w)} |",
        f"|{'-' * (ident_w + 2)}|{'-' * (value_w + 2)}|  |{'-' * (stack_w + 2)}|",
    ]
    for i in range(max(len(rows), len(items))):
        if i < len(rows):
            name, value = rows[i]
            left = f"| {name.ljust(ident_w)} | {value.ljust(value_w)} |"
        else:
            left = ' ' * (ident_w + value_w + 7)
        if i < len(items):
            lines.append(f"{left}  | {items[i].ljust(stack_w)} |")
        else:
            lines.append(left)
    return '\n'.join(lines)


def read_source(path: Path) -> str:
    if not path.exists():
        print(f"Error: file {path} not found", file=sys.stderr)
        sys.exit(1)
    with open(path, 'r', encoding='utf-8') as f:
        return f.read()


def run_statements(statements, debug_level: int):
    interpreter = Interpreter(debug_level=debug_level)
    try:
        interpreter.run(statements)
    except StaccError as e:
        print(e, file=sys.stderr)
        sys.exit(1)
    finally:
        interpreter.close()


def parse_source(source: str):
    try:
        return parse_program(source)
    except ParseError as e:
        print(e.describe(source), file=sys.stderr)
        sys.exit(1)


def repl(debug_level: int):
    interpreter = Interpreter(debug_level=debug_level)
    try:
        while True:
            try:
                line = builtins.input('> ')
            except (EOFError, KeyboardInterrupt):
                print()
                break
            if not line.strip():
                continue
            source = line + '\n'
            try:
                statement = parse_statement(source)
            except ParseError as e:
                print(e.describe(source), file=sys.stderr)
                continue
            try:
                interpreter.run_one(statement)
            except StaccError as e:
                print(e, file=sys.stderr)
                continue
            print(format_state(*interpreter.snapshot()))
    finally:
        interpreter.close()


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Stacc language interpreter")
    parser.add_argument('-v', action='count', default=0, help='increase debug verbosity (can be repeated)')
    group = parser.add_mutually_exclusive_group()
    group.add_argument('--emit-ast', metavar='STACC_FILE', help='emit AST JSON for the given .stacc file')
    group.add_argument('--ast', metavar='AST_JSON_FILE', help='execute AST from a JSON file')
    parser.add_argument('program', nargs='?', help='Stacc program file (.stacc) to execute; omit for a REPL')
    args = parser.parse_args(argv)

    # Emit AST mode
    if args.emit_ast:
        program_file = Path(args.emit_ast)
        statements = parse_source(read_source(program_file))
        out_path = program_file.with_name(program_file.name + '.ast.json')
        with open(out_path, 'w', encoding='utf-8') as out:
            json.dump(ast_to_obj(statements), out, ensure_ascii=False, indent=2)
        print(str(out_path))
        return

    # Execute from AST JSON
    if args.ast:
        data = json.loads(read_source(Path(args.ast)))
        run_statements(ast_from_obj(data), args.v)
        return

    if not args.program:
        repl(args.v)
        return

    statements = parse_source(read_source(Path(args.program)))
    run_statements(statements, args.v)


if __name__ == '__main__':
    main()
