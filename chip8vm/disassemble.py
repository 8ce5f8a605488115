"""Human-readable mnemonics for CHIP-8 instruction words."""

from chip8vm.decode import DecodedInstruction, decode

_ALU_MNEMONICS = {
    0x0: "LD", 0x1: "OR", 0x2: "AND", 0x3: "XOR", 0x4: "ADD",
    0x5: "SUB", 0x6: "SHR", 0x7: "SUBN", 0xE: "SHL",
}

_MISC_FORMATS = {
    0x07: "LD V{x:X}, DT",
    0x0A: "LD V{x:X}, K",
    0x15: "LD DT, V{x:X}",
    0x18: "LD ST, V{x:X}",
    0x1E: "ADD I, V{x:X}",
    0x29: "LD F, V{x:X}",
    0x33: "LD B, V{x:X}",
    0x55: "LD [I], V{x:X}",
    0x65: "LD V{x:X}, [I]",
}


def _unknown(inst: DecodedInstruction) -> str:
    return f"??? 0x{inst.raw:04X}"


def _system(inst: DecodedInstruction) -> str:
    if inst.n == 0x0:
        return "CLS"
    if inst.n == 0xE:
        return "RET"
    return f"SYS 0x{inst.nnn:03X}"


def _register_pair(mnemonic: str, inst: DecodedInstruction) -> str:
    if inst.n != 0:
        return _unknown(inst)
    return f"{mnemonic} V{inst.x:X}, V{inst.y:X}"


def _alu(inst: DecodedInstruction) -> str:
    mnemonic = _ALU_MNEMONICS.get(inst.n)
    if mnemonic is None:
        return _unknown(inst)
    return f"{mnemonic} V{inst.x:X}, V{inst.y:X}"


def _keys(inst: DecodedInstruction) -> str:
    if inst.nn == 0x9E:
        return f"SKP V{inst.x:X}"
    if inst.nn == 0xA1:
        return f"SKNP V{inst.x:X}"
    return _unknown(inst)


def _misc(inst: DecodedInstruction) -> str:
    template = _MISC_FORMATS.get(inst.nn)
    if template is None:
        return _unknown(inst)
    return template.format(x=inst.x)


_FORMATTERS = (
    _system,
    lambda inst: f"JP 0x{inst.nnn:03X}",
    lambda inst: f"CALL 0x{inst.nnn:03X}",
    lambda inst: f"SE V{inst.x:X}, 0x{inst.nn:02X}",
    lambda inst: f"SNE V{inst.x:X}, 0x{inst.nn:02X}",
    lambda inst: _register_pair("SE", inst),
    lambda inst: f"LD V{inst.x:X}, 0x{inst.nn:02X}",
    lambda inst: f"ADD V{inst.x:X}, 0x{inst.nn:02X}",
    _alu,
    lambda inst: _register_pair("SNE", inst),
    lambda inst: f"LD I, 0x{inst.nnn:03X}",
    lambda inst: f"JP V0, 0x{inst.nnn:03X}",
    lambda inst: f"RND V{inst.x:X}, 0x{inst.nn:02X}",
    lambda inst: f"DRW V{inst.x:X}, V{inst.y:X}, {inst.n}",
    _keys,
    _misc,
)


def disassemble(instruction: int) -> str:
    """Mnemonic for one instruction word, e.g. ``disassemble(0x612A) == "LD V1, 0x2A"``."""
    decoded = decode(instruction)
    return _FORMATTERS[decoded.opcode](decoded)
