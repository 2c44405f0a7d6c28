"""The machine's loader and its interactive text menu."""

from __future__ import annotations

import argparse
import sys
from collections import deque
from typing import TextIO

from .cpu import Cpu, MachineHalted
from .memory import Memory, validate_hex_input

DEFAULT_START = 16


class _TokenReader:
    """Reads whitespace-separated words from a text stream, one at a time."""

    def __init__(self, stream: TextIO) -> None:
        self._stream = stream
        self._pending: deque[str] = deque()

    def next(self) -> str:
        """Return the next word; raise EOFError when the stream is exhausted."""
        while not self._pending:
            line = self._stream.readline()
            if not line:
                raise EOFError("no more input")
            self._pending.extend(line.split())
        return self._pending.popleft()

    def next_int(self) -> int:
        """Return the next word as an integer; raise ValueError if it is not one."""
        return int(self.next())


def _as_reader(stdin: TextIO | _TokenReader | None) -> _TokenReader:
    if isinstance(stdin, _TokenReader):
        return stdin
    return _TokenReader(stdin if stdin is not None else sys.stdin)


class Machine:
    """Memory plus CPU, with ways to fill memory and run what it holds."""

    def __init__(self, stdin: TextIO | None = None, out: TextIO | None = None) -> None:
        self._tokens = _as_reader(stdin)
        self.out = out if out is not None else sys.stdout
        self.memory = Memory()
        self.cpu = Cpu(self.out)
        self.counter = DEFAULT_START

    def _say(self, text: str = "", end: str = "\n") -> None:
        print(text, end=end, file=self.out)

    def _ask_start_cell(self, default_note: str) -> None:
        self._say("if you want to start storing from a certain cell. enter 1")
        self._say(f"else enter any other key (default start from cell {default_note})")
        if self._tokens.next() == "1":
            self._say("from which cell you want to start (default)")
            self.counter = self._tokens.next_int()

    def load_file(self, filename: str) -> None:
        """Load whitespace-separated instructions from a file into memory."""
        try:
            with open(filename, encoding="utf-8") as handle:
                words = handle.read().split()
        except OSError:
            self._say(f"This file doesn't exist: {filename}")
            return
        self._ask_start_cell("0x10")
        for word in words:
            if self.counter >= self.memory.size:
                break
            try:
                self.memory.set_instruction(self.counter, word)
            except ValueError as error:
                self._say(f"Error: {error}")
            self.counter += 2

    def input_instructions(self) -> None:
        """Read instructions from the input stream into memory."""
        self._ask_start_cell("10")
        self._say("Enter the number of instructions: ", end="")
        count = self._tokens.next_int()
        if self.counter + count * 2 >= Memory.size:
            self._say("Error: Too many instructions for available memory.")
            return
        if count <= 0:
            self._say("Invalid number of instructions.")
            return
        number = 1
        while number <= count:
            self._say(f"Enter instruction {number} (4 hex digits): ", end="")
            instruction = self._tokens.next()
            if not validate_hex_input(instruction):
                self._say("Error: Invalid instruction format. Try again.")
                continue
            self.memory.set_instruction(self.counter, instruction)
            self.counter += 2
            number += 1

    def output_cells(self) -> None:
        """Print every cell below the load counter."""
        for index in range(self.counter):
            self._say(f"Cell {index} : {self.memory.get_cell(index)}")

    def run(self) -> None:
        """Execute the program in memory; raises MachineHalted on a halt instruction."""
        self.cpu.run(self.memory)


class MainUI:
    """Text menu driving a Machine."""

    def __init__(self, stdin: TextIO | None = None, out: TextIO | None = None) -> None:
        self._tokens = _as_reader(stdin)
        self.out = out if out is not None else sys.stdout
        self.machine = Machine(self._tokens, self.out)

    def _say(self, text: str = "", end: str = "\n") -> None:
        print(text, end=end, file=self.out)

    def menu(self) -> None:
        """Print the menu."""
        self._say("=========== Menu ===========")
        self._say("1. Load Instruction File")
        self._say("2. Insert Instructions")
        self._say("3. Output Active Cells")
        self._say("4. implement instructions")
        self._say("5. Exit")

    def _read_choice(self) -> int:
        try:
            return self._tokens.next_int()
        except ValueError:
            return 0

    def input_choice(self) -> None:
        """Serve menu choices until the program has been run or input runs out."""
        while True:
            self.menu()
            try:
                choice = self._read_choice()
            except EOFError:
                return
            if choice == 1:
                self.load_file()
            elif choice == 2:
                self.machine.input_instructions()
            elif choice == 3:
                self.machine.output_cells()
            elif choice == 4:
                self.machine.run()
                return
            elif choice == 5:
                self._say("Program Ended")
            else:
                self._say("Invalid Input")

    def load_file(self) -> None:
        """Ask for a file name and load it."""
        self._say("Enter the file name: ", end="")
        self.machine.load_file(self._tokens.next())


def main(argv: list[str] | None = None) -> int:
    """Start the interactive machine."""
    parser = argparse.ArgumentParser(prog="volesim", description="Vole machine simulator.")
    parser.parse_args(argv)
    print("=-=-=-= welcome to vole machine program =-=-=-=")
    print("Note: instructions must be 4-bits in hexa format of size 4")
    try:
        MainUI(sys.stdin, sys.stdout).input_choice()
    except (MachineHalted, EOFError):
        pass
    return 0


if __name__ == "__main__":
    sys.exit(main())