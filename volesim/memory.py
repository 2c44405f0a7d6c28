"""Main memory of the machine and shared text-table helpers."""

from __future__ import annotations

import string

SIZE = 256
LINE_WIDTH = 89
_HEX_DIGITS = frozenset(string.hexdigits)


def pad_hex(hex_str: str, width: int = 4) -> str:
    """Zero-pad a hex string to two digits, then left-justify it in ``width`` columns."""
    result = hex_str or "0"
    return result.rjust(2, "0").ljust(width)


def format_line(width: int = LINE_WIDTH) -> str:
    """Return a horizontal rule of ``width`` dashes."""
    return "-" * width


def format_header(title: str) -> str:
    """Return a boxed section title, three lines long."""
    rule = format_line()
    return "\n".join([rule, f"| {title:<85} |", rule])


def validate_hex_input(text: str) -> bool:
    """Tell whether ``text`` is exactly four hexadecimal digits."""
    return len(text) == 4 and all(c in _HEX_DIGITS for c in text)


class Memory:
    """256 cells, each holding a two-digit hex string."""

    size = SIZE

    def __init__(self) -> None:
        self._cells: list[str] = [""] * SIZE

    def get_cell(self, index: int) -> str:
        """Return the cell's contents, or ``"00"`` when empty or out of range."""
        if 0 <= index < SIZE:
            return self._cells[index] or "00"
        return "00"

    def set_cell(self, index: int, hex_str: str) -> None:
        """Store the first two characters of ``hex_str``; out-of-range writes are ignored."""
        if 0 <= index < SIZE:
            self._cells[index] = hex_str[:2]

    def get_instruction(self, index: int) -> str:
        """Return the four-digit instruction starting at ``index``.

        An empty first half, or a position with no room for two cells, reads as ``"0000"``.
        """
        if 0 <= index < SIZE - 1:
            first = self.get_cell(index)
            if first == "00":
                return "0000"
            return first + self.get_cell(index + 1)
        return "0000"

    def set_instruction(self, index: int, instruction: str) -> bool:
        """Write a four-digit instruction into two cells.

        Raises ValueError if the instruction is not four characters long;
        returns False if there is no room at ``index``.
        """
        if len(instruction) != 4:
            raise ValueError(
                "Invalid instruction format. Instruction must be exactly 4 hex digits."
            )
        if 0 <= index < SIZE - 1:
            self.set_cell(index, instruction[:2])
            self.set_cell(index + 1, instruction[2:4])
            return True
        return False

    def render(self) -> str:
        """Return the memory as a 16x16 table."""
        lines = [format_header("Memory Contents (16x16 Matrix)")]
        columns = "".join(f"|  {i:X}  " for i in range(16))
        lines.append(f"|     {columns}|")
        lines.append(format_line(LINE_WIDTH))
        for row in range(16):
            cells = "".join(
                f"| {(self._cells[row * 16 + col] or '00'):<4}" for col in range(16)
            )
            lines.append(f"| {row:<3X} {cells} |")
        lines.append(format_line(LINE_WIDTH))
        return "\n".join(lines)