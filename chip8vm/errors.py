"""CHIP-8 machine faults."""


class Chip8Error(Exception):
    """Base class for every fault raised while running a program."""


class UnimplementedOpcodeError(Chip8Error):
    """Instruction word has no handler."""

    def __init__(self, instruction: int):
        self.instruction = instruction
        super().__init__(f"Encountered unimplemented opcode: 0x{instruction:04X}")


class OutOfBoundsError(Chip8Error):
    """Memory address, key index or stack depth outside its valid range."""


class StackOverflowError(OutOfBoundsError):
    """Subroutine call with a full call stack."""


class StackUnderflowError(OutOfBoundsError):
    """Return with an empty call stack."""


class ProgramTooLargeError(OutOfBoundsError):
    """Program does not fit between the load address and the end of memory."""

    def __init__(self, size: int, capacity: int):
        self.size = size
        self.capacity = capacity
        super().__init__(f"Program of {size} bytes exceeds the {capacity} bytes available")
