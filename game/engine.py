"""
Main game engine - handles the window loop and input, and forwards intents to the session.
"""
import logging

import pygame
from config import (
    WINDOW_WIDTH, WINDOW_HEIGHT, FPS, GAME_TITLE, COLOR_WHITE, COLOR_TIMBER,
    DETERMINISTIC_SIM, AUDIO_ENABLED, SAVE_DIR, SAVE_SLOT, BUILDING_COSTS,
)
from game.audio.audio_system import AudioSystem
from game.graphics.island_view import IslandView
from game.persistence import JsonFileStore
from game.session import GameSession
from game.sim.timebase import set_sim_now_ms
from game.ui.hud import HUD

logger = logging.getLogger(__name__)

SCREEN_OVERLAY = "overlay"  # waiting for the first tap (unlocks audio)
SCREEN_TITLE = "title"
SCREEN_PLAY = "play"


class GameEngine:
    """Main game engine class."""

    def __init__(self, save_dir: str = SAVE_DIR, slot: str = SAVE_SLOT, audio: bool = AUDIO_ENABLED):
        pygame.init()
        pygame.font.init()

        self._sim_now_ms = 0
        if DETERMINISTIC_SIM:
            set_sim_now_ms(self._sim_now_ms)

        self.screen = pygame.display.set_mode((WINDOW_WIDTH, WINDOW_HEIGHT))
        pygame.display.set_caption(GAME_TITLE)
        self.clock = pygame.time.Clock()
        self.running = True
        self.screen_state = SCREEN_OVERLAY

        # Collaborators
        self.hud = HUD(WINDOW_WIDTH, WINDOW_HEIGHT)
        self.view = IslandView(WINDOW_WIDTH, WINDOW_HEIGHT, top_margin=self.hud.top_bar_height)
        self.audio_system = AudioSystem(enabled=audio)

        self.session = GameSession(
            render=self.view,
            display=self.hud,
            picker=self.view,
            audio=self.audio_system,
            store=JsonFileStore(save_dir),
            slot=slot,
        )

        self.font_title = pygame.font.Font(None, 64)
        self.font_body = pygame.font.Font(None, 28)

    def handle_events(self):
        """Process input events."""
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.running = False

            elif event.type == pygame.KEYDOWN:
                self.handle_keydown(event)

            elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                self.handle_mousedown(event)

    def handle_keydown(self, event):
        """Handle keyboard input."""
        if event.key == pygame.K_ESCAPE:
            self.running = False
            return

        if self.screen_state == SCREEN_OVERLAY:
            self.unlock()
            return

        if self.screen_state == SCREEN_TITLE:
            if event.key == pygame.K_RETURN:
                self.open_game()
            elif event.key == pygame.K_l:
                self.session.request_load()
                self.open_game()
            return

        if event.key == pygame.K_1:
            self.session.select_build_type("hut")
        elif event.key == pygame.K_2:
            self.session.select_build_type("mill")
        elif event.key == pygame.K_r:
            self.session.request_remove_last()
        elif event.key == pygame.K_a:
            self.session.request_raid_start()
        elif event.key == pygame.K_s:
            self.session.request_save()
        elif event.key == pygame.K_l:
            self.session.request_load()

    def handle_mousedown(self, event):
        """Handle mouse clicks."""
        if self.screen_state == SCREEN_OVERLAY:
            self.unlock()
            return
        if self.screen_state != SCREEN_PLAY:
            return
        self.session.request_pointer(event.pos)

    def unlock(self):
        self.session.unlock()
        self.screen_state = SCREEN_TITLE

    def open_game(self):
        self.session.open_game()
        logger.info("play screen opened")
        self.screen_state = SCREEN_PLAY

    def update(self, dt: float):
        """Update game state."""
        if DETERMINISTIC_SIM:
            # Drive gameplay timing off simulation time (not wall-clock).
            self._sim_now_ms += int(round(float(dt) * 1000.0))
            set_sim_now_ms(self._sim_now_ms)
        else:
            set_sim_now_ms(None)

        self.session.update()
        state = self.session.get_game_state()
        self.hud.update(state)
        self.view.update(state["tide"])

    def render(self):
        self.view.render(self.screen)
        if self.screen_state == SCREEN_PLAY:
            self.hud.render(self.screen)
        else:
            self._render_title()
        pygame.display.flip()

    def _render_title(self):
        shade = pygame.Surface((WINDOW_WIDTH, WINDOW_HEIGHT), pygame.SRCALPHA)
        shade.fill((0, 0, 0, 150))
        self.screen.blit(shade, (0, 0))

        if self.screen_state == SCREEN_OVERLAY:
            lines = ["Tap to begin"]
        else:
            lines = [
                "Enter - Start",
                "L     - Load saved island",
                "",
                f"1 Hut ({BUILDING_COSTS['hut']})   2 Mill ({BUILDING_COSTS['mill']})   Click - place / upgrade",
                "A Raid   R Remove last   S Save   L Load   Esc Quit",
            ]
        title = self.font_title.render("Clash of Isles", True, COLOR_TIMBER)
        y = WINDOW_HEIGHT // 3
        self.screen.blit(title, title.get_rect(center=(WINDOW_WIDTH // 2, y)))
        y += 60
        for line in lines:
            img = self.font_body.render(line, True, COLOR_WHITE)
            self.screen.blit(img, img.get_rect(center=(WINDOW_WIDTH // 2, y)))
            y += 32

    def run(self):
        """Main game loop."""
        try:
            while self.running:
                dt = self.clock.tick(FPS) / 1000.0
                self.handle_events()
                self.update(dt)
                self.render()
        finally:
            self.session.close()
            pygame.quit()
