"""Console logging utilities for the CHIP-8 machine.

Provides a small console logger with levels, colours and relative
timestamps, plus a machine-specific logger that reports lifecycle events,
faults and an optional per-instruction trace.
"""

import time
import sys
from typing import Any, Dict, Optional, TextIO

from chip8vm.disassemble import disassemble

LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

COLORS = {
    "DEBUG": "\033[36m",
    "INFO": "\033[32m",
    "WARNING": "\033[33m",
    "ERROR": "\033[31m",
    "CRITICAL": "\033[35m",
}
RESET = "\033[0m"


class ConsoleLogger:
    """Prints ``[level][name] message`` lines at or above ``log_level``."""

    def __init__(
        self,
        name: str = "Chip8",
        log_level: str = "INFO",
        use_colors: bool = True,
        show_timestamps: bool = True,
        stream: Optional[TextIO] = None,
    ):
        self.name = name
        self.stream = stream
        self.threshold = LEVELS.index(log_level.upper())
        target = stream or sys.stdout
        self.use_colors = use_colors and hasattr(target, "isatty") and target.isatty()
        self.show_timestamps = show_timestamps
        self.start_time = time.time()

    def enabled(self, level: str) -> bool:
        return LEVELS.index(level) >= self.threshold

    def log(self, level: str, message: str):
        if not self.enabled(level):
            return
        tag = f"[{level:>8s}]"
        if self.use_colors:
            tag = f"{COLORS[level]}{tag}{RESET}"
        if self.show_timestamps:
            tag = f"[{time.time() - self.start_time:8.2f}s]{tag}"
        print(f"{tag}[{self.name}] {message}", file=self.stream, flush=True)

    def debug(self, message: str):
        self.log("DEBUG", message)

    def info(self, message: str):
        self.log("INFO", message)

    def warning(self, message: str):
        self.log("WARNING", message)

    def error(self, message: str):
        self.log("ERROR", message)


class MachineLogger(ConsoleLogger):
    """Logger for machine lifecycle, faults and instruction traces."""

    def __init__(self, name: str = "Machine", **kwargs):
        super().__init__(name, **kwargs)
        self.last_start_time = time.time()

    def log_machine_start(self, config: Dict[str, Any], program_size: int):
        """Log configuration and start message."""
        self.last_start_time = time.time()
        self.info(f"Starting machine with a {program_size}-byte program:")
        for key, value in config.items():
            if isinstance(value, float):
                self.info(f"  {key}: {value:.4f}")
            else:
                self.info(f"  {key}: {value}")

    def log_instruction(self, pc: int, instruction: int):
        """Trace one executed instruction."""
        if self.enabled("DEBUG"):
            self.debug(f"0x{pc:03X}: {instruction:04X}  {disassemble(instruction)}")

    def log_halt(self, error: Exception, pc: int, instruction: Optional[int] = None):
        """Log the fault that froze the machine."""
        if instruction is None:
            self.error(f"Halted at 0x{pc:03X}: {error}")
        else:
            self.error(f"Halted at 0x{pc:03X} ({disassemble(instruction)}): {error}")

    def log_machine_stop(self, cycles: int):
        """Log shutdown with cycle statistics."""
        elapsed = time.time() - self.last_start_time
        rate = cycles / elapsed if elapsed > 0 else 0.0
        self.info(f"Stopped after {cycles} cycles in {elapsed:.1f}s ({rate:.0f} instructions/s)")
