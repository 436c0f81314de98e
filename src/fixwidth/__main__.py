"""
Fixed-width integer calculator CLI entry point.

Evaluate a single operation on values of one fixed-width type and print the
result in decimal together with its hex encoding.

Usage::

    python -m fixwidth Uint5 add 31 1 --policy wrapping
    python -m fixwidth Uint256 pow 2 255
    python -m fixwidth Uint5 mul 16 2 --policy saturating
    python -m fixwidth Uint24 to-hex 65535
    python -m fixwidth Uint24 shr 16777215 8

Options:
    --policy        Overflow policy for add/sub/mul/pow (default: checked)
    --input-format  How A and B are written: dec or hex (default: dec)
    -v, --verbose   Enable debug logging
    --no-color      Disable colored logging output
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Callable, Sequence

from fixwidth.types import (
    FixedUint,
    FixedWidthError,
    OverflowPolicy,
    Uint1,
    Uint2,
    Uint3,
    Uint4,
    Uint5,
    Uint6,
    Uint7,
    Uint24,
    Uint256,
    Uint512,
    Uint1024,
)

logger = logging.getLogger(__name__)

TYPES: dict[str, type[FixedUint]] = {
    cls.__name__: cls
    for cls in (Uint1, Uint2, Uint3, Uint4, Uint5, Uint6, Uint7, Uint24, Uint256, Uint512, Uint1024)
}
"""Every type the CLI can operate on, keyed by class name."""

_POLICY_OPS: dict[str, Callable[[FixedUint, FixedUint, OverflowPolicy], FixedUint]] = {
    "add": lambda a, b, policy: a.add(b, policy),
    "sub": lambda a, b, policy: a.sub(b, policy),
    "mul": lambda a, b, policy: a.mul(b, policy),
}

_BINARY_OPS: dict[str, Callable[[FixedUint, FixedUint], FixedUint]] = {
    "div": lambda a, b: a.div(b),
    "rem": lambda a, b: a.rem(b),
    "and": lambda a, b: a.bitand(b),
    "or": lambda a, b: a.bitor(b),
    "xor": lambda a, b: a.bitxor(b),
}

_COUNT_OPS = ("pow", "shl", "shr")
_UNARY_OPS = ("not", "to-hex", "from-hex")

OPERATIONS = (*_POLICY_OPS, *_BINARY_OPS, *_COUNT_OPS, "cmp", *_UNARY_OPS)
"""Every operation name accepted on the command line."""


class ColoredFormatter(logging.Formatter):
    """Logging formatter with ANSI colors for better readability."""

    # ANSI color codes
    GREY = "\x1b[38;5;244m"
    BLUE = "\x1b[38;5;39m"
    GREEN = "\x1b[38;5;40m"
    YELLOW = "\x1b[38;5;220m"
    RED = "\x1b[38;5;196m"
    BOLD_RED = "\x1b[38;5;196;1m"
    CYAN = "\x1b[38;5;51m"
    RESET = "\x1b[0m"

    LEVEL_COLORS = {
        logging.DEBUG: GREY,
        logging.INFO: GREEN,
        logging.WARNING: YELLOW,
        logging.ERROR: RED,
        logging.CRITICAL: BOLD_RED,
    }

    def format(self, record: logging.LogRecord) -> str:
        """Format log record with colors."""
        color = self.LEVEL_COLORS.get(record.levelno, self.RESET)
        timestamp = f"{self.CYAN}{self.formatTime(record, self.datefmt)}{self.RESET}"
        levelname = f"{color}{record.levelname:8}{self.RESET}"
        name = f"{self.BLUE}{record.name}{self.RESET}"
        return f"{timestamp} {levelname} {name}: {record.getMessage()}"


def setup_logging(verbose: bool = False, no_color: bool = False) -> None:
    """Configure logging for the CLI with optional colors."""
    level = logging.DEBUG if verbose else logging.WARNING

    handler = logging.StreamHandler()
    handler.setLevel(level)

    if no_color:
        formatter = logging.Formatter(
            "%(asctime)s %(levelname)-8s %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    else:
        formatter = ColoredFormatter(datefmt="%Y-%m-%d %H:%M:%S")

    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.setLevel(level)
    root.addHandler(handler)


def parse_operand(uint_type: type[FixedUint], text: str, input_format: str) -> FixedUint:
    """Parse a command-line operand as decimal or hex."""
    if input_format == "hex":
        return uint_type.from_hex(text)
    return uint_type.from_str(text)


def parse_count(text: str) -> int:
    """Parse a shift count or exponent, which is not bounded by the type's width."""
    if not text.isascii() or not text.isdigit():
        raise ValueError(f"invalid count {text!r}: expected decimal digits")
    return int(text)


def evaluate(
    uint_type: type[FixedUint],
    op: str,
    a: str,
    b: str | None,
    *,
    policy: OverflowPolicy = OverflowPolicy.CHECKED,
    input_format: str = "dec",
) -> str:
    """
    Evaluate one operation and format its result.

    Args:
        uint_type: The fixed-width type both operands are parsed as.
        op: One of `OPERATIONS`.
        a: First operand text.
        b: Second operand text (binary operations only).
        policy: Overflow policy for add/sub/mul/pow.
        input_format: "dec" or "hex" for the operands.

    Returns:
        The text to print.

    Raises:
        FixedWidthError: On any arithmetic or decoding failure.
        ValueError: On a missing or malformed operand.
    """
    if op == "from-hex":
        return str(uint_type.from_hex(a))

    left = parse_operand(uint_type, a, input_format)
    logger.debug("Evaluating %s %s on %r", uint_type.__name__, op, left)

    if op == "to-hex":
        return left.to_hex()
    if op == "not":
        return _format_value(left.invert())

    if b is None:
        raise ValueError(f"operation {op!r} needs a second operand")

    if op in _COUNT_OPS:
        count = parse_count(b)
        if op == "pow":
            return _format_value(left.pow(count, policy))
        return _format_value(left.shl(count) if op == "shl" else left.shr(count))

    right = parse_operand(uint_type, b, input_format)
    if op == "cmp":
        return str(left.compare(right))
    if op in _POLICY_OPS:
        return _format_value(_POLICY_OPS[op](left, right, policy))
    return _format_value(_BINARY_OPS[op](left, right))


def _format_value(value: FixedUint) -> str:
    return f"{value} (0x{value.to_hex()})"


def main(argv: Sequence[str] | None = None) -> int:
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="python -m fixwidth",
        description="Fixed-width unsigned integer calculator",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("type", choices=sorted(TYPES), help="Integer type to operate on")
    parser.add_argument("op", choices=OPERATIONS, help="Operation to evaluate")
    parser.add_argument("a", help="First operand")
    parser.add_argument("b", nargs="?", default=None, help="Second operand, count or exponent")
    parser.add_argument(
        "--policy",
        choices=[policy.value for policy in OverflowPolicy],
        default=OverflowPolicy.CHECKED.value,
        help="Overflow policy for add/sub/mul/pow (default: checked)",
    )
    parser.add_argument(
        "--input-format",
        choices=["dec", "hex"],
        default="dec",
        help="Notation of the operands (default: dec)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument(
        "--no-color",
        action="store_true",
        help="Disable colored logging output",
    )

    args = parser.parse_args(argv)

    setup_logging(args.verbose, args.no_color)

    try:
        output = evaluate(
            TYPES[args.type],
            args.op,
            args.a,
            args.b,
            policy=OverflowPolicy.coerce(args.policy),
            input_format=args.input_format,
        )
    except (FixedWidthError, ValueError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    print(output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
