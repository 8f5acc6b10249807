"""
pygame host for the jaxchip emulator
"""

import argparse
import sys

import pygame

from jaxchip import (
    EmulatorConfig, Chip8Error, create_machine, run_frame, set_key, sound_active,
    view_dimensions, framebuffer_to_rgb, create_color_scheme,
)
from jaxchip.logging import EmulatorLogger
from jaxchip.runner import reset

# QWERTY layout onto the hex keypad:
#   1 2 3 4      1 2 3 C
#   Q W E R  ->  4 5 6 D
#   A S D F      7 8 9 E
#   Z X C V      A 0 B F
KEY_MAP = {
    pygame.K_1: 0x1, pygame.K_2: 0x2, pygame.K_3: 0x3, pygame.K_4: 0xC,
    pygame.K_q: 0x4, pygame.K_w: 0x5, pygame.K_e: 0x6, pygame.K_r: 0xD,
    pygame.K_a: 0x7, pygame.K_s: 0x8, pygame.K_d: 0x9, pygame.K_f: 0xE,
    pygame.K_z: 0xA, pygame.K_x: 0x0, pygame.K_c: 0xB, pygame.K_v: 0xF,
}


def draw_sound_indicator(surface, font):
    """Mark frames where the sound timer is running."""
    text_surface = font.render("BEEP", True, (255, 255, 0))
    surface.blit(text_surface, (surface.get_width() - text_surface.get_width() - 8, 4))


def run_emulator(rom_filename, config=EmulatorConfig()):
    """Main emulator loop: input, N instructions, render, timer tick."""
    logger = EmulatorLogger(log_level=config.log_level)
    logger.log_config(config.as_dict())

    try:
        state = create_machine(rom_filename, increment_index=config.increment_index)
    except Chip8Error as e:
        logger.log_fault(e)
        return 1
    logger.info(f"Loaded: {rom_filename}")

    width, height = view_dimensions()
    scale = config.render_scale
    on_color, off_color = create_color_scheme(config.color_scheme)

    pygame.init()
    screen = pygame.display.set_mode((width * scale, height * scale))
    pygame.display.set_caption("CHIP-8")
    clock = pygame.time.Clock()
    font = pygame.font.Font(None, 24)

    logger.info("Controls: ESC=Quit, P=Pause, F5=Reset")
    running = True
    paused = False
    exit_code = 0

    while running:
        clock.tick(config.fps)

        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False
            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    running = False
                elif event.key == pygame.K_p:
                    paused = not paused
                elif event.key == pygame.K_F5:
                    state = reset(state, rom_filename, config, logger)
                elif event.key in KEY_MAP:
                    state = set_key(state, KEY_MAP[event.key], True)
            elif event.type == pygame.KEYUP:
                if event.key in KEY_MAP:
                    state = set_key(state, KEY_MAP[event.key], False)

        if not paused:
            try:
                state = run_frame(state, config.instructions_per_frame)
            except Chip8Error as e:
                logger.log_fault(e, state)
                running = False
                exit_code = 1

        rgb = framebuffer_to_rgb(state.framebuffer, scale, on_color, off_color)
        pygame.surfarray.blit_array(screen, rgb.transpose(1, 0, 2))
        if sound_active(state):
            draw_sound_indicator(screen, font)
        pygame.display.flip()

    pygame.quit()
    return exit_code


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Play a CHIP-8 ROM in a window")
    parser.add_argument("rom", type=str, help="Path to the CHIP-8 ROM")
    parser.add_argument("--instruction_frequency", type=int, default=540)
    parser.add_argument("--scale", type=int, default=8)
    parser.add_argument("--color_scheme", type=str, default="classic")
    parser.add_argument("--increment_index", action="store_true")
    args = parser.parse_args()

    sys.exit(run_emulator(args.rom, EmulatorConfig(
        instruction_frequency=args.instruction_frequency,
        render_scale=args.scale,
        color_scheme=args.color_scheme,
        increment_index=args.increment_index,
    )))
