"""Registers, arithmetic unit, control unit and the fetch-decode-execute loop."""

from __future__ import annotations

import sys
from typing import TextIO

from .memory import SIZE, Memory, format_header, format_line, pad_hex

REGISTER_COUNT = 16
_SEPARATOR = "-" * 73
_LETTER_WEIGHTS = {"A": 10, "B": 11, "C": 12, "D": 13, "E": 14, "F": 15}
_DIGITS = "0123456789ABCDEF"


class MachineHalted(Exception):
    """Raised when the machine executes a halt instruction."""


def _emit(out: TextIO | None, *lines: str) -> None:
    stream = out if out is not None else sys.stdout
    for line in lines:
        print(line, file=stream)


def hex_to_dec(text: str) -> int:
    """Convert upper-case hex text to an integer; unknown characters count as 0."""
    value = 0
    for char in text:
        digit = ord(char) - ord("0") if "0" <= char <= "9" else _LETTER_WEIGHTS.get(char, 0)
        value = value * 16 + digit
    return value


def dec_to_hex(num: int) -> str:
    """Convert a non-negative integer to upper-case hex, at least two digits."""
    digits = []
    while num > 0:
        digits.append(_DIGITS[num % 16])
        num //= 16
    return "".join(reversed(digits)).rjust(2, "0")


def is_valid_address(address: int, out: TextIO | None = None) -> bool:
    """Tell whether ``address`` lies in 0..255, reporting when it does not."""
    if not 0 <= address < SIZE:
        _emit(out, "Out of range error")
        return False
    return True


def encode_float(num: float) -> int:
    """Encode a number in the 8-bit format: sign, 3-bit exponent (bias 4), 4-bit mantissa."""
    result = 0
    if num < 0:
        result |= 0x80
        num = -num
    exponent = 0
    normalized = num
    if num != 0:
        while normalized >= 2.0:
            normalized /= 2.0
            exponent += 1
        while normalized < 1.0:
            normalized *= 2.0
            exponent -= 1
    exponent = min(max(exponent + 4, 0), 7)
    result |= (exponent & 0x7) << 4
    mantissa = int((normalized - 1.0) * 16)
    result |= mantissa & 0xF
    return result


def decode_float(bits: int) -> float:
    """Decode a value in the 8-bit floating-point format."""
    negative = (bits & 0x80) != 0
    exponent = (bits >> 4) & 0x7
    mantissa = bits & 0xF
    value = (1.0 + mantissa / 16.0) * 2.0 ** (exponent - 4)
    return -value if negative else value


class Registers:
    """Sixteen general-purpose registers; out-of-range access reads 0 and writes nothing."""

    def __init__(self) -> None:
        self._values = [0] * REGISTER_COUNT

    def __getitem__(self, index: int) -> int:
        if 0 <= index < REGISTER_COUNT:
            return self._values[index]
        return 0

    def __setitem__(self, index: int, value: int) -> None:
        if 0 <= index < REGISTER_COUNT:
            self._values[index] = value

    def render(self) -> str:
        """Return the registers as a 4x4 table of hex values."""
        lines = [format_header("Register Contents")]
        heads = "".join(f"| R{i:<2}  " for i in range(4))
        lines.append(f"|    {heads}|")
        lines.append(format_line())
        for row in range(4):
            cells = "".join(
                f"| {pad_hex(dec_to_hex(self._values[row * 4 + col]), 4):<4} "
                for col in range(4)
            )
            lines.append(f"| {row * 4:<2} {cells}|")
        lines.append(format_line())
        return "\n".join(lines)


class Alu:
    """Arithmetic and logic operations on registers."""

    def __init__(self, out: TextIO | None = None) -> None:
        self.out = out

    def add(self, idx_r: int, idx_s: int, idx_t: int, regs: Registers) -> None:
        """Integer addition: R = S + T."""
        _emit(
            self.out,
            f"register {idx_s} :{regs[idx_s]}",
            f"register {idx_t} :{regs[idx_t]}",
        )
        regs[idx_r] = regs[idx_s] + regs[idx_t]
        _emit(
            self.out,
            f"register {idx_s} + register {idx_t} => {idx_r}",
            f"register {idx_r} :{regs[idx_r]}",
        )

    def add_float(self, idx_r: int, idx_s: int, idx_t: int, regs: Registers) -> None:
        """Floating-point addition in the 8-bit format: R = S + T."""
        first = decode_float(regs[idx_s])
        second = decode_float(regs[idx_t])
        total = first + second
        regs[idx_r] = encode_float(total)
        _emit(
            self.out,
            "Floating Point Addition:",
            f"Register {idx_s} (float): {first:g}",
            f"Register {idx_t} (float): {second:g}",
            f"Result in Register {idx_r} (float): {total:g}",
        )

    def _bitwise(self, name: str, result: int, idx_r: int, idx_s: int, idx_t: int,
                 regs: Registers) -> None:
        regs[idx_r] = result
        _emit(
            self.out,
            f"Bitwise {name} Operation:",
            f"Register {idx_s} : {regs[idx_s]}",
            f"Register {idx_t} : {regs[idx_t]}",
            f"Result in Register {idx_r} : {result}",
        )

    def bitwise_or(self, idx_r: int, idx_s: int, idx_t: int, regs: Registers) -> None:
        """R = S | T."""
        self._bitwise("OR", regs[idx_s] | regs[idx_t], idx_r, idx_s, idx_t, regs)

    def bitwise_and(self, idx_r: int, idx_s: int, idx_t: int, regs: Registers) -> None:
        """R = S & T."""
        self._bitwise("AND", regs[idx_s] & regs[idx_t], idx_r, idx_s, idx_t, regs)

    def bitwise_xor(self, idx_r: int, idx_s: int, idx_t: int, regs: Registers) -> None:
        """R = S ^ T."""
        self._bitwise("XOR", regs[idx_s] ^ regs[idx_t], idx_r, idx_s, idx_t, regs)

    def rotate_right(self, reg_idx: int, steps: int, regs: Registers) -> None:
        """Rotate an 8-bit register right by ``steps`` (taken modulo 8)."""
        value = regs[reg_idx]
        steps &= 0x7
        result = ((value >> steps) | (value << (8 - steps))) & 0xFF
        regs[reg_idx] = result
        _emit(
            self.out,
            "Rotate Right Operation:",
            f"Register {reg_idx} rotated right by {steps} steps",
            f"Original value: {value}",
            f"Result: {result}",
        )


class ControlUnit:
    """Data movement, jumps and halting."""

    def __init__(self, out: TextIO | None = None) -> None:
        self.out = out
        self.halted = False

    def load_from_memory(self, reg_idx: int, address: int, regs: Registers,
                         memory: Memory) -> None:
        """Load a register from a memory cell."""
        regs[reg_idx] = hex_to_dec(memory.get_cell(address))
        _emit(
            self.out,
            f" cell {address}has been loaded to register {reg_idx} successfully :)",
            f"register {reg_idx} :{regs[reg_idx]}",
            f"memory cell {address} :{memory.get_cell(address)}",
            _SEPARATOR,
        )

    def load_value(self, reg_idx: int, value: int, regs: Registers) -> None:
        """Load an immediate value into a register."""
        regs[reg_idx] = value
        _emit(
            self.out,
            f"{value} has been loaded to {reg_idx} register successfully :)",
            f"register {reg_idx} :{regs[reg_idx]}",
            f"value :{value}",
            _SEPARATOR,
        )

    def store(self, reg_idx: int, address: int, regs: Registers, memory: Memory) -> None:
        """Store a register into a memory cell."""
        memory.set_cell(address, dec_to_hex(regs[reg_idx]))
        _emit(
            self.out,
            f"register {reg_idx} has been stored to cell {address} successfully :)",
            f"register {reg_idx} : {regs[reg_idx]}",
            f"memory {address} : {memory.get_cell(address)}",
            _SEPARATOR,
        )

    def move(self, src: int, dst: int, regs: Registers) -> None:
        """Copy one register into another."""
        _emit(
            self.out,
            f"register {src} : {regs[src]}",
            f"register {dst} : {regs[dst]}",
        )
        regs[dst] = regs[src]
        _emit(
            self.out,
            f"{src} register has been copied to {dst} register successfully :)",
            f"register {dst} : {regs[dst]}",
            _SEPARATOR,
        )

    def jump(self, reg_idx: int, address: int, regs: Registers, pc: int) -> int:
        """Return ``address`` if the register equals R0, else ``pc``."""
        if regs[reg_idx] == regs[0]:
            _emit(
                self.out,
                f"Jump to cell {address} has been done successfully :)",
                f"now program counter = {address}",
                _SEPARATOR,
            )
            return address
        return pc

    def jump_greater(self, reg_idx: int, address: int, regs: Registers, pc: int) -> int:
        """Return ``address`` if the register exceeds R0, else ``pc``."""
        if regs[reg_idx] > regs[0]:
            pc = address
            _emit(self.out, f"Jump to address {address} executed (R{reg_idx} > R0)")
        else:
            _emit(self.out, f"Jump condition not met (R{reg_idx} <= R0)")
        _emit(self.out, f"Program Counter: {pc}", _SEPARATOR)
        return pc

    def halt(self) -> None:
        """Mark the machine as stopped and raise MachineHalted."""
        self.halted = True
        raise MachineHalted("halt instruction executed")


class Cpu:
    """Runs instructions from memory until a halt or the end of memory."""

    def __init__(self, out: TextIO | None = None) -> None:
        self.out = out
        self.program_counter = 0
        self.instruction_register = ""
        self.registers = Registers()
        self.alu = Alu(out)
        self.cu = ControlUnit(out)

    def run(self, memory: Memory) -> None:
        """Execute instructions, skipping empty ones; raises MachineHalted on halt."""
        while self.program_counter < memory.size - 1:
            if memory.get_instruction(self.program_counter) == "0000":
                self.program_counter += 1
                continue
            _emit(self.out, f"Memory Cell 0: {memory.get_cell(0)}")
            self.fetch(memory)
            self.decode(memory)
            self.show_state(memory)

    def fetch(self, memory: Memory) -> None:
        """Load the instruction at the program counter and advance it."""
        self.instruction_register = memory.get_instruction(self.program_counter)
        self.program_counter += 2

    def decode(self, memory: Memory) -> None:
        """Dispatch on the opcode of the current instruction."""
        self.execute(self.instruction_register[0], memory)

    def _three_registers(self) -> tuple[int, int, int]:
        ir = self.instruction_register
        return hex_to_dec(ir[1]), hex_to_dec(ir[2]), hex_to_dec(ir[3])

    def execute(self, opcode: str, memory: Memory) -> None:
        """Carry out the current instruction."""
        ir = self.instruction_register
        regs = self.registers
        out = self.out
        if opcode == "1":
            address = hex_to_dec(ir[2:])
            if is_valid_address(address, out):
                self.cu.load_from_memory(hex_to_dec(ir[1]), address, regs, memory)
        elif opcode == "2":
            value = hex_to_dec(ir[2:])
            if is_valid_address(value, out):
                self.cu.load_value(hex_to_dec(ir[1]), value, regs)
        elif opcode == "3":
            address = hex_to_dec(ir[2:])
            if is_valid_address(address, out):
                self.cu.store(hex_to_dec(ir[1]), address, regs, memory)
        elif opcode == "4":
            src, dst = hex_to_dec(ir[2]), hex_to_dec(ir[3])
            if is_valid_address(dst, out):
                self.cu.move(src, dst, regs)
        elif opcode in "56789" and len(opcode) == 1:
            r, s, t = self._three_registers()
            operation = {
                "5": self.alu.add,
                "6": self.alu.add_float,
                "7": self.alu.bitwise_or,
                "8": self.alu.bitwise_and,
                "9": self.alu.bitwise_xor,
            }[opcode]
            if is_valid_address(t, out):
                operation(r, s, t, regs)
        elif opcode == "A":
            steps = hex_to_dec(ir[3])
            if is_valid_address(steps, out):
                self.alu.rotate_right(hex_to_dec(ir[1]), steps, regs)
        elif opcode == "B":
            reg_idx = hex_to_dec(ir[1:3])
            address = hex_to_dec(ir[2:])
            if is_valid_address(address, out):
                self.program_counter = self.cu.jump(reg_idx, address, regs,
                                                    self.program_counter)
        elif opcode == "D":
            address = hex_to_dec(ir[2:])
            if is_valid_address(address, out):
                self.program_counter = self.cu.jump_greater(
                    hex_to_dec(ir[1]), address, regs, self.program_counter
                )
        elif opcode == "C":
            _emit(out, "exit program")
            self.cu.halt()
        else:
            _emit(out, "", "Invalid Opcode")

    def show_state(self, memory: Memory) -> None:
        """Print the program counter, instruction, registers and memory."""
        _emit(
            self.out,
            format_header("CPU State"),
            f"Program Counter: {self.program_counter}",
            f"Instruction Register: {self.instruction_register}",
            format_line(),
            self.registers.render(),
            memory.render(),
        )