"""Digit sources: anything that can be turned into a stream of digits 0-9.

    parse_digits("3.14159")     -> [3 1 4 1 5 9]
    constant_digits("pi", 20)   -> first 20 digits of pi, "3" included
    lucky_digits()              -> digits of sqrt(N) for a random N < 10000
    load_digits_file("my.txt")  -> digits of a text file, everything else dropped
"""

import re
from pathlib import Path

import numpy as np
from mpmath import mp

from walka_errors import InvalidConfiguration

DEFAULT_DIGITS = 10_000
LUCKY_RANGE = (1, 10_000)

CONSTANTS = {
    "pi": lambda: mp.pi,
    "e": lambda: mp.e,
    "phi": lambda: mp.phi,
    "sqrt2": lambda: mp.sqrt(2),
}

NON_DIGITS = re.compile(r"[^0-9]")


def parse_digits(text):
    """Drop every non-digit character and return the rest as uint8 digits."""
    clean = NON_DIGITS.sub("", text)
    return np.frombuffer(clean.encode("ascii"), dtype=np.uint8) - ord("0")


def as_digit_stream(values):
    """Return values as a read-only uint8 array, rejecting anything outside 0-9."""
    try:
        digits = np.fromiter(values, dtype=np.int64)
    except (TypeError, ValueError) as err:
        raise InvalidConfiguration(f"digit stream must hold integers: {err}") from err
    if digits.size and (digits.min() < 0 or digits.max() > 9):
        raise InvalidConfiguration("digit stream values must be within 0-9")
    stream = digits.astype(np.uint8)
    stream.flags.writeable = False
    return stream


def load_digits_file(path):
    text = Path(path).read_text(encoding="utf-8", errors="ignore")
    return parse_digits(text)


def _decimal_digits(value, count):
    return parse_digits(mp.nstr(value, count, strip_zeros=False))


def constant_digits(name, count=DEFAULT_DIGITS):
    """First count significant digits of a named constant."""
    if name not in CONSTANTS:
        raise KeyError(f"Unknown constant '{name}'. Choose from: {', '.join(CONSTANTS)}")
    with mp.workdps(count + 10):
        return _decimal_digits(CONSTANTS[name](), count)


def lucky_digits(number=None, count=DEFAULT_DIGITS):
    """Digits of sqrt(number); number is drawn at random when not given."""
    if number is None:
        number = int(np.random.randint(*LUCKY_RANGE))
    with mp.workdps(count + 10):
        return number, _decimal_digits(mp.sqrt(number), count)


def resolve_source(name, count=DEFAULT_DIGITS):
    """Turn a source name into (label, digits).

    name is a constant name, "lucky", or a path to a text file.
    """
    if name in CONSTANTS:
        return name, constant_digits(name, count)
    if name == "lucky":
        number, digits = lucky_digits(count=count)
        return f"sqrt({number})", digits
    return Path(name).name, load_digits_file(name)
