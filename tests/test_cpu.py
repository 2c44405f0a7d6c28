import io

import pytest

from volesim.cpu import (
    Alu,
    ControlUnit,
    Cpu,
    MachineHalted,
    Registers,
    decode_float,
    dec_to_hex,
    encode_float,
    hex_to_dec,
    is_valid_address,
)
from volesim.memory import Memory


def test_hex_round_trip():
    for n in range(256):
        text = dec_to_hex(n)
        assert len(text) == 2
        assert hex_to_dec(text) == n


def test_hex_edges():
    assert hex_to_dec("FF") == 255
    assert dec_to_hex(0) == "00"
    assert hex_to_dec("a") == 0


def test_is_valid_address():
    out = io.StringIO()
    assert is_valid_address(255, out) is True
    assert out.getvalue() == ""
    assert is_valid_address(256, out) is False
    assert "Out of range error" in out.getvalue()


def test_float_round_trip_all_bytes():
    for bits in range(256):
        assert encode_float(decode_float(bits)) == bits


def test_float_sign_bit():
    for bits in range(128):
        assert decode_float(bits | 0x80) == -decode_float(bits)


def test_encode_zero():
    assert encode_float(0.0) == 0x40


def test_registers_bounds():
    regs = Registers()
    regs[3] = 42
    regs[16] = 9
    assert regs[3] == 42
    assert regs[16] == 0
    assert regs[-1] == 0


def test_registers_render_contains_values():
    regs = Registers()
    regs[5] = 255
    text = regs.render()
    assert "Register Contents" in text
    assert "| FF   " in text


def _regs(**values):
    regs = Registers()
    for name, value in values.items():
        regs[int(name[1:])] = value
    return regs


def test_alu_add():
    regs = _regs(r1=3, r2=4)
    Alu(io.StringIO()).add(0, 1, 2, regs)
    assert regs[0] == regs[1] + regs[2]


def test_alu_bitwise():
    alu = Alu(io.StringIO())
    regs = _regs(r1=0b1100, r2=0b1010)
    alu.bitwise_or(3, 1, 2, regs)
    alu.bitwise_and(4, 1, 2, regs)
    alu.bitwise_xor(5, 1, 2, regs)
    assert regs[3] == regs[1] | regs[2]
    assert regs[4] == regs[1] & regs[2]
    assert regs[5] == regs[1] ^ regs[2]


def test_alu_rotate():
    alu = Alu(io.StringIO())
    regs = _regs(r1=0x01, r2=0x5A)
    alu.rotate_right(1, 1, regs)
    assert regs[1] == 0x80
    alu.rotate_right(2, 4, regs)
    alu.rotate_right(2, 4, regs)
    assert regs[2] == 0x5A
    alu.rotate_right(2, 8, regs)
    assert regs[2] == 0x5A


def test_alu_add_float():
    regs = _regs(r1=encode_float(1.0), r2=encode_float(1.0))
    Alu(io.StringIO()).add_float(0, 1, 2, regs)
    assert decode_float(regs[0]) == 2.0


def test_control_unit_jumps():
    cu = ControlUnit(io.StringIO())
    regs = _regs(r0=5, r1=5, r2=9)
    assert cu.jump(1, 40, regs, 12) == 40
    assert cu.jump(2, 40, regs, 12) == 12
    assert cu.jump_greater(2, 40, regs, 12) == 40
    assert cu.jump_greater(1, 40, regs, 12) == 12


def test_control_unit_halt():
    with pytest.raises(MachineHalted):
        ControlUnit(io.StringIO()).halt()


def test_control_unit_store_and_load():
    cu = ControlUnit(io.StringIO())
    mem = Memory()
    regs = _regs(r1=255)
    cu.store(1, 0x20, regs, mem)
    assert mem.get_cell(0x20) == "FF"
    cu.load_from_memory(2, 0x20, regs, mem)
    assert regs[2] == regs[1]


def _program(*instructions, start=0):
    mem = Memory()
    for offset, instruction in enumerate(instructions):
        mem.set_instruction(start + 2 * offset, instruction)
    return mem


def test_cpu_runs_until_halt():
    out = io.StringIO()
    mem = _program("2105", "3120", "C000")
    cpu = Cpu(out)
    with pytest.raises(MachineHalted):
        cpu.run(mem)
    assert cpu.registers[1] == 5
    assert mem.get_cell(0x20) == "05"
    assert "exit program" in out.getvalue()


def test_cpu_runs_to_end_of_memory():
    mem = _program("2107", start=16)
    cpu = Cpu(io.StringIO())
    cpu.run(mem)
    assert cpu.registers[1] == 7
    assert cpu.program_counter >= mem.size - 1


def test_cpu_move_and_load_from_memory():
    mem = _program("1130", "4012")
    mem.set_cell(0x30, "2A")
    cpu = Cpu(io.StringIO())
    cpu.run(mem)
    assert cpu.registers[1] == hex_to_dec("2A")
    assert cpu.registers[2] == cpu.registers[1]


def test_cpu_invalid_opcode():
    out = io.StringIO()
    cpu = Cpu(out)
    cpu.run(_program("E000"))
    assert "Invalid Opcode" in out.getvalue()


def test_cpu_fetch_advances_counter():
    mem = _program("2105")
    cpu = Cpu(io.StringIO())
    cpu.fetch(mem)
    assert cpu.instruction_register == "2105"
    assert cpu.program_counter == 2


def test_cpu_show_state():
    out = io.StringIO()
    cpu = Cpu(out)
    cpu.show_state(Memory())
    text = out.getvalue()
    assert "CPU State" in text
    assert "Register Contents" in text
    assert "Memory Contents (16x16 Matrix)" in text