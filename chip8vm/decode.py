"""CHIP-8 instruction decoding."""

from chex import dataclass

NIBBLE_SIZE = 4
NIBBLE_COUNT = 4


@dataclass(frozen=True)
class DecodedInstruction:
    """Decoded CHIP-8 instruction with extracted operands.

    ``nibbles`` is ordered least-significant first, so ``nibbles[3]`` is the
    opcode class and ``nibbles[0]`` the bottom nibble.
    """
    raw: int
    nibbles: tuple
    opcode: int  # First nibble
    x: int       # Second nibble (VX register)
    y: int       # Third nibble (VY register)
    n: int       # Fourth nibble (4-bit immediate)
    nn: int      # Last byte (8-bit immediate)
    nnn: int     # Last 12 bits (12-bit address)

    def to_uint16(self, count: int) -> int:
        """Rebuild an integer from the ``count`` low-order nibbles."""
        if not 0 <= count <= NIBBLE_COUNT:
            raise ValueError(f"count must be between 0 and {NIBBLE_COUNT}, got {count}")
        result = 0
        for index, nibble in enumerate(self.nibbles[:count]):
            result |= nibble << (index * NIBBLE_SIZE)
        return result

    def value(self) -> int:
        """8-bit immediate (NN)."""
        return self.to_uint16(2)

    def address(self) -> int:
        """12-bit address (NNN)."""
        return self.to_uint16(3)

    def reg_indices(self) -> tuple[int, int]:
        """Register selectors (X, Y)."""
        return self.nibbles[2], self.nibbles[1]


def decode(instruction: int) -> DecodedInstruction:
    """Decode 16-bit instruction into components."""
    instruction = int(instruction) & 0xFFFF
    nibbles = tuple((instruction >> (index * NIBBLE_SIZE)) & 0xF for index in range(NIBBLE_COUNT))
    return DecodedInstruction(
        raw=instruction,
        nibbles=nibbles,
        opcode=(instruction & 0xF000) >> 12,
        x=(instruction & 0x0F00) >> 8,
        y=(instruction & 0x00F0) >> 4,
        n=instruction & 0x000F,
        nn=instruction & 0x00FF,
        nnn=instruction & 0x0FFF
    )
