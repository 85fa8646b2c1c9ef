"""A minimal greeting routine."""

import sys

GREETING = "Hello cruel world!"


def say_hi() -> str:
    """Write the greeting line to standard output and return its text."""
    sys.stdout.write(f"{GREETING}\n")
    return GREETING