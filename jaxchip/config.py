"""Host configuration."""

from typing import Any, Dict

from flax.struct import dataclass

from jaxchip.rendering import COLOR_SCHEMES


@dataclass
class EmulatorConfig:
    """Settings for a host driving the emulator.

    Attributes:
        instruction_frequency: CHIP-8 CPU frequency in Hz
        fps: Host refresh rate; timers tick once per frame
        render_scale: Upscaling factor for rendered frames
        color_scheme: Name of the color scheme used for rendering
        increment_index: Whether FX55/FX65 advance I past the copied block
        log_level: Console logger level
    """
    instruction_frequency: int = 540
    fps: int = 60
    render_scale: int = 8
    color_scheme: str = "classic"
    increment_index: bool = False
    log_level: str = "INFO"

    def __post_init__(self):
        if self.instruction_frequency <= 0 or self.fps <= 0:
            raise ValueError("instruction_frequency and fps must be positive")
        if self.render_scale < 1:
            raise ValueError(f"render_scale must be at least 1, got {self.render_scale}")
        if self.color_scheme not in COLOR_SCHEMES:
            raise ValueError(
                f"Unknown color scheme '{self.color_scheme}'. Available: {list(COLOR_SCHEMES.keys())}"
            )

    @property
    def instructions_per_frame(self) -> int:
        """Number of CHIP-8 instructions to execute per host frame."""
        return max(1, self.instruction_frequency // self.fps)

    def as_dict(self) -> Dict[str, Any]:
        return {
            "instruction_frequency": self.instruction_frequency,
            "fps": self.fps,
            "instructions_per_frame": self.instructions_per_frame,
            "render_scale": self.render_scale,
            "color_scheme": self.color_scheme,
            "increment_index": self.increment_index,
            "log_level": self.log_level,
        }
