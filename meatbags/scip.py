"""Helpers for the SCIP 2.0 text protocol spoken by laser range finders."""

from __future__ import annotations

_CHAR_OFFSET = 0x30
_SIX_BITS = 0x3F


def check_sum(line: str, from_end: int) -> str:
    """Return ``line`` without its last ``from_end`` characters if its sum is valid.

    The last character of ``line`` is the checksum: the low six bits of the
    sum of the message characters, offset by 0x30. An empty string is
    returned when the line is empty or the checksum does not match.
    """
    if not line:
        return ""
    message = line[: len(line) - from_end] if len(line) >= from_end else line
    expected = ord(line[-1])
    total = sum(ord(char) for char in message)
    if (total & _SIX_BITS) + _CHAR_OFFSET == expected:
        return message
    return ""


def decode_6bit(text: str) -> int:
    """Decode a SCIP character-encoded integer, six bits per character."""
    value = 0
    for char in text:
        value = (value << 6) + (ord(char) - _CHAR_OFFSET)
    return value


def split_lines(text: str) -> list[str]:
    """Split on newlines; a trailing newline does not yield an empty line."""
    lines = text.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    return lines


def format_distance_command(
    command: str, start_step: int, end_step: int, cluster_count: int
) -> str:
    """Build a measurement request such as ``GE0000107900``."""
    return (
        command
        + f"{start_step:04d}"[:4]
        + f"{end_step:04d}"[:4]
        + f"{cluster_count:02d}"[:2]
    )


def format_motor_speed_command(motor_speed: int) -> str:
    """Build a motor speed command; the speed is clamped to 0..99."""
    speed = min(max(int(motor_speed), 0), 99)
    return f"CR{speed:02d}"