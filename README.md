# volesim

An interactive simulator for the Vole machine. Vole is a small teaching machine with 256 one-byte memory cells, sixteen registers, and two-byte instructions written as four hexadecimal digits.

## Installation

```
pip install .
```

## Running

```
volesim
```

The command takes no options beyond `--help`. It reads its answers from standard input as whitespace-separated words and shows a menu:

1. **Load Instruction File**: asks for a file name and reads whitespace-separated four-character instructions from it into memory, two cells per instruction. A missing file is reported and nothing is loaded.
2. **Insert Instructions**: asks how many instructions to enter, then reads them one at a time. An entry that is not exactly four hex digits is rejected and asked for again.
3. **Output Active Cells**: prints every cell from 0 up to (not including) the next free loading position, showing `00` for empty cells.
4. **implement instructions**: runs the program in memory, then leaves the menu.
5. **Exit**: prints `Program Ended` and shows the menu again.

Both loading options first ask whether to start at a particular cell (answer `1`, then the cell number); otherwise loading starts at cell 16 (`0x10`), or carries on after whatever was loaded last. Write instructions with upper-case hex letters: lower-case letters are accepted when typed in, but execute as the digit 0.

Running starts at cell 0, skips positions whose first byte is empty, and continues until a halt instruction or the end of memory. After each instruction the simulator prints cell 0, the program counter, the instruction register, the registers as a 4×4 table and memory as a 16×16 table.

## Instruction set

| Opcode | Form   | Meaning                                                           |
|--------|--------|-------------------------------------------------------------------|
| 1      | `1RXY` | Load register R from memory cell XY                               |
| 2      | `2RXY` | Load register R with the value XY                                 |
| 3      | `3RXY` | Store register R into memory cell XY                              |
| 4      | `4xRS` | Copy register R into register S                                   |
| 5      | `5RST` | R = S + T (integer)                                               |
| 6      | `6RST` | R = S + T (8-bit floating point)                                  |
| 7      | `7RST` | R = S OR T                                                        |
| 8      | `8RST` | R = S AND T                                                       |
| 9      | `9RST` | R = S XOR T                                                       |
| A      | `ARxX` | Rotate register R right by X bits (taken modulo 8)                |
| B      | `BRXY` | Jump to XY if the register numbered by the two digits RX equals register 0 |
| C      | `Cxxx` | Halt                                                              |
| D      | `DRXY` | Jump to XY if register R is greater than register 0               |

Any other opcode prints `Invalid Opcode` and execution continues. Register numbers outside 0–15 read as 0 and writes to them are ignored.

The floating-point format is one byte: a sign bit, a 3-bit exponent with bias 4, and a 4-bit mantissa with an implied leading 1. `volesim.cpu.encode_float` and `volesim.cpu.decode_float` convert to and from it.

## Using it from Python

```python
from volesim.memory import Memory
from volesim.cpu import Cpu, MachineHalted

memory = Memory()
memory.set_instruction(16, "2105")   # R1 = 5
memory.set_instruction(18, "2203")   # R2 = 3
memory.set_instruction(20, "5312")   # R3 = R1 + R2
memory.set_instruction(22, "C000")   # halt

cpu = Cpu()
try:
    cpu.run(memory)
except MachineHalted:
    pass
print(cpu.registers[3])  # 8
```

`Cpu`, `Alu`, `ControlUnit` and `Machine` take an optional `out` stream for their trace output (standard output by default). `Cpu.run` raises `MachineHalted` when it executes a halt. `volesim.machine.Machine` and `volesim.machine.MainUI` take an input stream and an output stream, so the menu can be driven from a `io.StringIO`.

## What it does not do

- There is no way to save memory or registers to a file, to single-step, or to reset the machine; the menu ends after one run.
- The **Exit** menu entry does not end the program; the menu ends only after a run or when input runs out.