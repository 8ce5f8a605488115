"""Construction-time machine configuration."""

from typing import Optional

from chex import dataclass

from chip8vm.constants import DEFAULT_INSTRUCTION_FREQUENCY, DEFAULT_TIMER_FREQUENCY


@dataclass(frozen=True)
class MachineConfig:
    """Machine settings fixed for the lifetime of a machine.

    Attributes:
        instruction_frequency: Instructions executed per second.
        timer_frequency: Delay and sound timer decrements per second.
        seed: Seed for the random byte source. ``None`` draws one from OS entropy.
        shift_uses_vy: 8XY6/8XYE shift VY into VX instead of shifting VX in place.
        jump_uses_vx: BXNN jumps to XNN + VX instead of NNN + V0.
        load_store_increments_i: FX55/FX65 leave I pointing past the last register.
        log_level: Minimum level printed by the machine logger.
        trace: Log every executed instruction at DEBUG level.
    """
    instruction_frequency: float = DEFAULT_INSTRUCTION_FREQUENCY
    timer_frequency: float = DEFAULT_TIMER_FREQUENCY
    seed: Optional[int] = None
    shift_uses_vy: bool = False
    jump_uses_vx: bool = False
    load_store_increments_i: bool = False
    log_level: str = "INFO"
    trace: bool = False

    def __post_init__(self):
        if self.instruction_frequency <= 0:
            raise ValueError(f"instruction_frequency must be positive, got {self.instruction_frequency}")
        if self.timer_frequency <= 0:
            raise ValueError(f"timer_frequency must be positive, got {self.timer_frequency}")

    @property
    def clock_period(self) -> float:
        """Seconds between two instruction cycles."""
        return 1.0 / self.instruction_frequency

    @property
    def timer_period(self) -> float:
        """Seconds between two timer decrements."""
        return 1.0 / self.timer_frequency
