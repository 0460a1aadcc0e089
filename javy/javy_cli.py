import sys
from pathlib import Path

from javy.javy_runtime import ScriptRunner
from javy.javy_printer import Printer
from javy.javy_serialize import serialize

FORMAT_FLAGS = {"--json": "json", "--yaml": "yaml"}


# A basic input prompt; tests replace it.
def read_line(prompt: str) -> str:
    sys.stdout.write(prompt)
    sys.stdout.flush()
    return sys.stdin.readline()


def run_script_file(file_path: str, fmt: str = None):
    """Run a Javy script file non-interactively and exit with appropriate status."""
    runner = ScriptRunner()
    p = Path(file_path)
    try:
        source = p.read_text(encoding="utf-8")
    except FileNotFoundError:
        print(f"Error: file not found: {file_path}", file=sys.stderr)
        raise SystemExit(1)
    result = runner.handle_script(source)
    if result.status == 'error':
        print(result.format_error(), file=sys.stderr)
        raise SystemExit(1)
    if fmt:
        print(serialize(result.bindings, fmt=fmt).rstrip("\n"))
    elif result.bindings:
        print(Printer().pformat(result.bindings))


def _changed(before: dict, after: dict) -> dict:
    return {
        name: value for name, value in after.items()
        if name not in before or (type(before[name]), before[name]) != (type(value), value)
    }


def repl():
    print("Javy REPL v0.1")
    print("Type 'exit' or press Ctrl+D to quit.")

    runner = ScriptRunner()
    printer = Printer()

    while True:
        try:
            raw = read_line(">> ")
            if raw == "":
                raise EOFError
            line = raw.strip()

            if not line:
                continue
            if line == "exit":
                break

            before = runner.bindings()
            result = runner.handle_script(line)

            if result.status == 'error':
                print(result.format_error(), file=sys.stderr)
                continue

            changed = _changed(before, result.bindings)
            if changed:
                print(printer.pformat(changed))

        except EOFError:
            print("\nExiting.")
            break


def main(argv=None):
    """Run a script file when provided, otherwise start the interactive REPL."""
    args = list(sys.argv[1:] if argv is None else argv)
    fmt = None
    for flag, name in FORMAT_FLAGS.items():
        if flag in args:
            args.remove(flag)
            fmt = name
    if args:
        arg = args[0]
        if not arg.startswith("-"):
            run_script_file(arg, fmt)
            return
        print(f"Error: unknown option: {arg}", file=sys.stderr)
        raise SystemExit(2)
    repl()


if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:
        print("\nExiting.")
