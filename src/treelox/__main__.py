import argparse
import sys

from treelox.ast_printer import AstPrinter
from treelox.lox import Lox

EX_USAGE = 64
EX_DATAERR = 65
EX_SOFTWARE = 70

RECURSION_LIMIT = 10_000


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="treelox", description="Run Lox scripts")
    parser.add_argument("script", nargs="?", help="script to run, omit for a prompt")
    parser.add_argument("--ast", action="store_true",
                        help="print the parsed program instead of running it")
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    try:
        args = parser.parse_args(argv)
        if args.ast and args.script is None:
            parser.error("--ast needs a script")
    except SystemExit as err:
        return EX_USAGE if err.code else 0

    sys.setrecursionlimit(max(sys.getrecursionlimit(), RECURSION_LIMIT))
    lox = Lox()

    if args.script is None:
        lox.run_prompt()
        return 0

    if args.ast:
        with open(args.script, "r", encoding="utf-8") as file:
            statements = lox.parse(file.read())
        if lox.had_error:
            return EX_DATAERR
        print(AstPrinter().print(statements), file=lox.stdout)
        return 0

    lox.run_file(args.script)
    if lox.had_error:
        return EX_DATAERR
    if lox.had_runtime_error:
        return EX_SOFTWARE
    return 0


if __name__ == "__main__":
    sys.exit(main())
