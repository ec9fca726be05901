#!/usr/bin/env python3
"""
Lox Python CLI

A command-line interface for running Lox scripts or an interactive prompt.

Usage:
    python -m pylox [script] [options]
    pylox [script] [options]

Examples:
    pylox examples/fib.lox
    pylox examples/classes.lox --verbose
    pylox                              # interactive prompt
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional, TextIO

from pylox.evaluator import EvalOptions
from pylox.lox import ExitStatus, Lox, RunResult


DEFAULT_RECURSION_LIMIT = 10000


#==============================================================================
# CLI Output Formatting
#==============================================================================

class Colors:
    """ANSI color codes for terminal output"""
    RESET = "\x1b[0m"
    BOLD = "\x1b[1m"
    DIM = "\x1b[2m"
    RED = "\x1b[31m"
    GREEN = "\x1b[32m"
    YELLOW = "\x1b[33m"


def print_msg(msg: str, color: str = Colors.RESET, stream: Optional[TextIO] = None) -> None:
    """Print a message with optional color"""
    stream = stream if stream is not None else sys.stderr
    if stream.isatty():
        print(f"{color}{msg}{Colors.RESET}", file=stream)
    else:
        print(msg, file=stream)


def report(result: RunResult) -> None:
    """Print the diagnostics or runtime error of a run to stderr"""
    for diagnostic in result.diagnostics:
        print_msg(str(diagnostic), Colors.RED)
    if result.runtime_error is not None:
        print_msg(str(result.runtime_error), Colors.RED)


#==============================================================================
# Run Modes
#==============================================================================

def run_file(path: str, options: EvalOptions) -> int:
    """
    Run a Lox script.

    Args:
        path: Path to the script
        options: Evaluation options

    Returns:
        Exit code (see ExitStatus)
    """
    try:
        source = Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        print_msg(f"Error: Could not read script: {path} ({e})", Colors.RED)
        return ExitStatus.USAGE

    result = Lox(options).run(source)
    report(result)
    return result.status


def run_prompt(options: EvalOptions, stdin: Optional[TextIO] = None) -> int:
    """
    Read-execute loop: one line at a time, stop on an empty line or EOF.

    Errors are reported and the session continues; definitions from
    earlier lines stay visible.

    Args:
        options: Evaluation options
        stdin: Input stream (defaults to sys.stdin)

    Returns:
        Exit code (always OK)
    """
    stdin = stdin if stdin is not None else sys.stdin
    lox = Lox(options)

    while True:
        print("> ", end="", flush=True)
        line = stdin.readline()
        if not line or line.strip() == "":
            break
        report(lox.run(line))

    return ExitStatus.OK


#==============================================================================
# Main CLI
#==============================================================================

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pylox",
        description="Lox Python CLI - Run Lox scripts or an interactive prompt",
    )

    parser.add_argument(
        "script",
        nargs="?",
        help="Path to a Lox script; omit for an interactive prompt",
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Show debug logging",
    )

    parser.add_argument(
        "--trace",
        action="store_true",
        help="Log every executed statement (implies --verbose)",
    )

    parser.add_argument(
        "--recursion-limit",
        type=int,
        default=DEFAULT_RECURSION_LIMIT,
        dest="recursion_limit",
        help=f"Host recursion limit bounding Lox call depth (default: {DEFAULT_RECURSION_LIMIT})",
    )

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    """Main CLI entry point"""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if (args.verbose or args.trace) else logging.ERROR,
        format="%(levelname)s %(name)s: %(message)s",
    )

    # Lox calls recurse in the host; the limit bounds Lox call depth
    sys.setrecursionlimit(args.recursion_limit)

    options = EvalOptions(trace=args.trace)

    if args.script:
        return run_file(args.script, options)
    return run_prompt(options)


if __name__ == "__main__":
    sys.exit(main())
