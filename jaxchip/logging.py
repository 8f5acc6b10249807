"""Console logging utilities for jaxchip hosts.

This module provides a small level-filtered console logger and an emulator
flavoured subclass used by the hosts to report ROM loading, faults and
machine state, plus a tqdm progress bar for headless runs.
"""

import time
import sys
from typing import Any, Dict, Optional

from tqdm import tqdm

from jaxchip.decode import disassemble
from jaxchip.errors import Chip8Error, DecodeFault, MemoryFault


class ConsoleLogger:
    """Flexible console logger with level filtering and colors."""

    def __init__(
        self,
        name: str = "jaxchip",
        log_level: str = "INFO",
        use_colors: bool = True,
        show_timestamps: bool = True,
    ):
        self.name = name
        self.log_level = log_level.upper()
        self.use_colors = (
            use_colors and hasattr(sys.stdout, "isatty") and sys.stdout.isatty()
        )
        self.show_timestamps = show_timestamps
        self.start_time = time.time()

        self.colors = (
            {
                "DEBUG": "\033[36m",
                "INFO": "\033[32m",
                "WARNING": "\033[33m",
                "ERROR": "\033[31m",
                "CRITICAL": "\033[35m",
                "RESET": "\033[0m"
            }
            if self.use_colors
            else {
                k: ""
                for k in ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL", "RESET"]
            }
        )

        self.level_order = {
            "DEBUG": 0,
            "INFO": 1,
            "WARNING": 2,
            "ERROR": 3,
            "CRITICAL": 4,
        }

    def _should_log(self, level: str) -> bool:
        """Check if message should be logged based on current log level."""
        return self.level_order.get(level.upper(), 1) >= self.level_order.get(
            self.log_level, 1
        )

    def _format_message(self, level: str, message: str) -> str:
        """Format log message with timestamp, level, and colors."""
        timestamp = (
            f"[{time.time() - self.start_time:8.2f}s]" if self.show_timestamps else ""
        )
        level_str = f"[{level:>8s}]"
        name_str = f"[{self.name}]"

        if self.use_colors:
            color = self.colors.get(level.upper(), "")
            reset = self.colors["RESET"]
            level_str = f"{color}{level_str}{reset}"

        return f"{timestamp}{level_str}{name_str} {message}"

    def log(self, level: str, message: str):
        """Log a message at the specified level."""
        if self._should_log(level):
            formatted = self._format_message(level, message)
            print(formatted, flush=True)

    def debug(self, message: str):
        """Log debug message."""
        self.log("DEBUG", message)

    def info(self, message: str):
        """Log info message."""
        self.log("INFO", message)

    def warning(self, message: str):
        """Log warning message."""
        self.log("WARNING", message)

    def error(self, message: str):
        """Log error message."""
        self.log("ERROR", message)

    def critical(self, message: str):
        """Log critical message."""
        self.log("CRITICAL", message)


class EmulatorLogger(ConsoleLogger):
    """Logger with helpers for emulator lifecycle events."""

    def __init__(self, name: str = "jaxchip", **kwargs):
        super().__init__(name, **kwargs)

    def log_config(self, config: Dict[str, Any]):
        """Log host configuration."""
        self.info("=" * 60)
        self.info("Emulator configuration:")
        for key, value in config.items():
            self.info(f"  {key}: {value}")
        self.info("=" * 60)

    def log_rom_loaded(self, path: str, size: int):
        self.info(f"Loaded {path} ({size} bytes)")

    def log_fault(self, error: Chip8Error, state: Any = None):
        """Report a load or execution fault, with machine context when available."""
        if isinstance(error, DecodeFault):
            self.error(f"{error} [{disassemble(error.opcode)}]")
        else:
            self.error(str(error))
        if state is not None and isinstance(error, (DecodeFault, MemoryFault)):
            self.log_registers(state, level="ERROR")

    def log_registers(self, state: Any, level: str = "DEBUG"):
        """Dump PC, I, timers, stack depth and V0-VF."""
        if not self._should_log(level):
            return
        self.log(
            level,
            f"PC=0x{int(state.pc):03X} I=0x{int(state.I):03X} "
            f"DT={int(state.delay_timer)} ST={int(state.sound_timer)} "
            f"SP={int(state.stack.pointer)}",
        )
        for i in range(0, 16, 4):
            self.log(level, " ".join(f"V{j:X}={int(state.V[j]):02X}" for j in range(i, i + 4)))

    def log_run_end(self, frames: int, instructions: int):
        """Log completion of a run with throughput."""
        elapsed = time.time() - self.start_time
        rate = instructions / elapsed if elapsed > 0 else 0.0
        self.info(f"Ran {frames} frames ({instructions} instructions) in {elapsed:.1f}s, {rate:.0f} Hz")


def frame_progress_bar(frames: int, desc: Optional[str] = None, disable: bool = False, **kwargs) -> tqdm:
    """Progress bar over host frames."""
    return tqdm(total=frames, desc=desc or "Emulating", unit="frame", disable=disable, **kwargs)
