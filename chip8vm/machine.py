"""Threaded CHIP-8 machine: instruction clock, timers and frontend boundary."""

import asyncio
import enum
import threading
from typing import Optional

from chip8vm.config import MachineConfig
from chip8vm.devices import Devices
from chip8vm.emulator import fetch, execute, advance_pc
from chip8vm.framebuffer import FrameBuffer
from chip8vm.keyboard import Keyboard, KeyboardCapability, check_key
from chip8vm.logging import MachineLogger
from chip8vm.state import EmulatorState, NOT_WAITING, create_state, load_program
from chip8vm.timer import Timer

KEY_WAIT_POLL = 0.05


class MachineStatus(enum.Enum):
    IDLE = "idle"
    RUNNING = "running"
    AWAITING_KEY = "awaiting_key"
    HALTED = "halted"
    STOPPED = "stopped"


class Machine:
    """A CHIP-8 machine running on its own execution thread.

    The execution thread owns an asyncio event loop hosting three
    self-rescheduling chains: the instruction clock and the delay and sound
    timers. Everything that touches the emulator state runs on that loop.
    Other threads use ``frame_buffer``, ``keyboard``, the read-only
    properties, ``stop`` and ``join``.

    Any exception raised while executing an instruction or delivering a key
    freezes the machine. The clock is not re-armed and the timers are
    cancelled. ``status`` becomes ``HALTED`` and ``error`` holds the exception.

    ``keyboard`` only needs ``is_pressed``. A frontend with its own keypad
    passes presses in through ``deliver_key``.
    """

    def __init__(
        self,
        program: bytes = b"",
        config: Optional[MachineConfig] = None,
        keyboard: Optional[KeyboardCapability] = None,
        logger: Optional[MachineLogger] = None,
    ):
        self.config = MachineConfig() if config is None else config
        self.keyboard = Keyboard() if keyboard is None else keyboard
        self.logger = MachineLogger(log_level=self.config.log_level) if logger is None else logger
        self.frame_buffer = FrameBuffer()

        self._state = load_program(create_state(self.config), program)
        self._program_size = len(program)
        self._status = MachineStatus.IDLE
        self._error: Optional[Exception] = None
        self._halt_pc = 0
        self._halt_instruction: Optional[int] = None
        self._cycles = 0

        self._lifecycle_lock = threading.Lock()
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._thread: Optional[threading.Thread] = None
        self._finished: Optional[asyncio.Future] = None
        self._clock_handle: Optional[asyncio.TimerHandle] = None
        self._devices: Optional[Devices] = None
        self._listening = False
        self._stopping = threading.Event()

    @property
    def state(self) -> EmulatorState:
        """Latest committed emulator state."""
        return self._state

    @property
    def status(self) -> MachineStatus:
        with self._lifecycle_lock:
            return self._status

    @property
    def error(self) -> Optional[Exception]:
        """Fault that halted the machine, if any."""
        return self._error

    @property
    def cycles(self) -> int:
        return self._cycles

    @property
    def delay_timer(self) -> Optional[Timer]:
        return None if self._devices is None else self._devices.delay_timer

    @property
    def sound_timer(self) -> Optional[Timer]:
        return None if self._devices is None else self._devices.sound_timer

    @property
    def sound_active(self) -> bool:
        """Whether the buzzer should sound."""
        return self._devices is not None and self._devices.sound_timer.value > 0

    def start(self):
        """Spawn the execution thread and begin clocking instructions."""
        with self._lifecycle_lock:
            if self._thread is not None:
                raise RuntimeError("Machine already started")
            self._loop = asyncio.new_event_loop()
            self._finished = self._loop.create_future()
            self._devices = Devices(
                keyboard=self.keyboard,
                delay_timer=Timer(self._loop, self.config.timer_period),
                sound_timer=Timer(self._loop, self.config.timer_period),
            )
            self._loop.call_soon(self._boot)
            self._thread = threading.Thread(target=self._run, name="chip8-execution", daemon=True)
        self._listening = hasattr(self.keyboard, "add_press_listener")
        if self._listening:
            self.keyboard.add_press_listener(self.deliver_key)
        self._thread.start()

    def stop(self):
        """Cancel the clock and both timers; safe to call from any thread."""
        with self._lifecycle_lock:
            if self._loop is None or self._loop.is_closed():
                return
            self._loop.call_soon_threadsafe(self._shutdown)

    def join(self, timeout: Optional[float] = None) -> bool:
        """Wait for the execution thread to exit. Returns False on timeout."""
        if self._thread is None:
            return True
        self._thread.join(timeout)
        return not self._thread.is_alive()

    def __enter__(self):
        self.start()
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.stop()
        self.join()
        return False

    def _run(self):
        asyncio.set_event_loop(self._loop)
        self.logger.log_machine_start(dict(self.config.items()), self._program_size)
        try:
            self._loop.run_until_complete(self._finished)
        except Exception as error:
            self.logger.log_halt(error, self._halt_pc, self._halt_instruction)
        finally:
            self._stopping.set()
            self._cancel_timers()
            if self._listening:
                self.keyboard.remove_press_listener(self.deliver_key)
            with self._lifecycle_lock:
                self._loop.close()
            self.logger.log_machine_stop(self._cycles)

    def _set_status(self, status: MachineStatus):
        with self._lifecycle_lock:
            self._status = status

    def _boot(self):
        if self._finished.done():
            return
        self._set_status(MachineStatus.RUNNING)
        self._arm_clock()

    def _arm_clock(self):
        self._clock_handle = self._loop.call_later(self.config.clock_period, self._on_clock)

    def _on_clock(self):
        self._clock_handle = None
        state = self._state
        pc = int(state.pc)
        instruction = None
        try:
            instruction = fetch(state)
            if self.config.trace:
                self.logger.log_instruction(pc, instruction)
            new_state = advance_pc(execute(state, instruction, self._devices))
        except Exception as error:
            self._halt(error, pc, instruction)
            return

        self._cycles += 1
        self._commit(new_state)
        if new_state.awaiting_key != NOT_WAITING:
            self._set_status(MachineStatus.AWAITING_KEY)
            if not self._listening:
                self._start_key_wait()
            return
        self._arm_clock()

    def _commit(self, new_state: EmulatorState):
        previous = self._state
        self._state = new_state
        if new_state.display is not previous.display:
            self.frame_buffer.publish(new_state.display)

    def deliver_key(self, key: int):
        """Hand a key press to the machine; safe to call from any thread.

        Resumes a pending FX0A wait with ``key``. Ignored when the machine is
        not waiting. Keyboards with ``add_press_listener`` are subscribed to
        this automatically on ``start``.
        """
        check_key(key)
        with self._lifecycle_lock:
            if self._loop is None or self._loop.is_closed():
                return
            self._loop.call_soon_threadsafe(self._deliver_key, key)

    def _start_key_wait(self):
        threading.Thread(target=self._wait_for_key, name="chip8-key-wait", daemon=True).start()

    def _wait_for_key(self):
        # Blocks off the execution thread so the timers keep ticking.
        try:
            while not self._stopping.is_set():
                key = self.keyboard.wait_for_press(KEY_WAIT_POLL)
                if key is not None:
                    self.deliver_key(key)
                    return
        except Exception as error:
            with self._lifecycle_lock:
                if self._loop is None or self._loop.is_closed():
                    return
                self._loop.call_soon_threadsafe(self._halt, error, int(self._state.pc), None)

    def _deliver_key(self, key: int):
        state = self._state
        if state.awaiting_key == NOT_WAITING or self._finished.done():
            return
        try:
            self._state = state.replace(
                V=state.V.at[state.awaiting_key].set(key),
                awaiting_key=NOT_WAITING,
            )
        except Exception as error:
            self._halt(error, int(state.pc), None)
            return
        self._set_status(MachineStatus.RUNNING)
        self._arm_clock()

    def _cancel_clock(self):
        if self._clock_handle is not None:
            self._clock_handle.cancel()
            self._clock_handle = None

    def _cancel_timers(self):
        self._devices.delay_timer.cancel()
        self._devices.sound_timer.cancel()

    def _halt(self, error: Exception, pc: int, instruction: Optional[int]):
        if self._finished.done():
            return
        self._stopping.set()
        self._error = error
        self._halt_pc = pc
        self._halt_instruction = instruction
        self._cancel_clock()
        self._cancel_timers()
        self._set_status(MachineStatus.HALTED)
        self._finished.set_exception(error)

    def _shutdown(self):
        self._stopping.set()
        self._cancel_clock()
        self._cancel_timers()
        if self._finished.done():
            return
        self._set_status(MachineStatus.STOPPED)
        self._finished.set_result(None)
