"""
Interactive read-parse-display loop for MFL.

Each chunk of input is collected until a line ends with `;`, parsed as a program,
and its syntax tree printed. Parse errors are reported and the loop continues.

Commands:
    exit, quit      Leave the REPL.
    json-mode       Toggle JSON output of trees.
    verbose-mode    Toggle tracebacks on errors.
"""

import io
import json
import logging
import traceback

from mfl.mfl_errors import ParseError
from mfl.mfl_parser import parse_source

MODE_COMMANDS = ("json-mode", "verbose-mode")


def print_traceback() -> None:
    buf = io.StringIO()
    traceback.print_exc(file=buf)
    print("[error] >>>")
    print(buf.getvalue())


def is_complete(src_lines: list[str]) -> bool:
    """A chunk is complete once its last non-comment text ends with `;`."""
    last = src_lines[-1].split("#", 1)[0].rstrip()
    return last.endswith(";")


def handle_chunk(src: str, as_json: bool = False, verbose: bool = False) -> bool:
    """Parse one chunk and print its tree. Returns False when the chunk failed."""
    try:
        tree = parse_source(src)
    except ParseError as e:
        if verbose:
            print_traceback()
        else:
            print(f"[error] >>> {e}")
        return False

    if as_json:
        print(json.dumps(tree.to_dict(), indent=2))
    else:
        tree.display()
    return True


def start_repl(as_json: bool = False, verbose: bool = False) -> None:
    print("MFL REPL. Type 'exit' or 'quit' to leave.")

    while True:
        src_lines: list[str] = []
        try:
            while True:
                prompt = ">>> " if not src_lines else "... "
                line = input(prompt)
                command = line.strip().lower()
                if command in ("exit", "quit") and not src_lines:
                    print("Exiting MFL REPL.")
                    return
                src_lines.append(line)
                if len(src_lines) == 1 and (
                    command in MODE_COMMANDS or command.startswith("#")
                ):
                    break
                if is_complete(src_lines) or not command:
                    break
        except (EOFError, KeyboardInterrupt):
            print("\nExiting MFL REPL.")
            return

        src = "\n".join(src_lines).strip()
        if not src or src.startswith("#"):
            continue
        if src.lower() == "json-mode":
            as_json = not as_json
            print(f"[mode] >>> JSON output {'ON' if as_json else 'OFF'}")
            continue
        if src.lower() == "verbose-mode":
            verbose = not verbose
            print(f"[mode] >>> Verbose mode {'ON' if verbose else 'OFF'}")
            continue

        handle_chunk(src, as_json=as_json, verbose=verbose)


def main() -> None:
    # Errors are printed by the loop itself.
    logging.getLogger("mfl").setLevel(logging.CRITICAL)
    start_repl()


if __name__ == "__main__":  # pragma: no cover
    main()
