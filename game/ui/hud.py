"""
Heads-up display for island information.
"""
import math

import pygame
from config import (
    COLOR_UI_BG, COLOR_UI_BORDER, COLOR_TIMBER, COLOR_WHITE, COLOR_RED, COLOR_GREEN
)
from game.sim.contracts import DisplayListener
from game.sim.timebase import now_ms as sim_now_ms
from game.systems.rates import format_rate


class HUD(DisplayListener):
    """Displays resource, rate and tide to the player; receives display notifications."""

    def __init__(self, screen_width: int, screen_height: int):
        self.screen_width = screen_width
        self.screen_height = screen_height

        self.top_bar_height = 40

        # Fonts
        self.font_large = pygame.font.Font(None, 32)
        self.font_medium = pygame.font.Font(None, 24)
        self.font_small = pygame.font.Font(None, 18)

        # Last values pushed by the simulation
        self.timber = 0.0
        self.rate = 0.0
        self.tide_label = ""
        self.raid_end_ms = None
        self.building_count = 0
        self.selected_type = "hut"

        # Messages
        self.messages = []
        self.message_duration = 3000  # ms

    # DisplayListener
    def on_resource_changed(self, amount: float):
        self.timber = amount

    def on_rate_changed(self, rate: float):
        self.rate = rate

    def on_tide_changed(self, label: str):
        self.tide_label = label

    def on_raid_started(self, end_time_ms: int):
        self.raid_end_ms = end_time_ms
        self.add_message("Raid started! Click to deploy squads.", COLOR_TIMBER)

    def on_raid_ended(self, score: int, reward: int):
        self.raid_end_ms = None
        self.add_message(f"Raid finished! Score: {score} Reward Timber: {reward}", COLOR_GREEN)

    def on_notice(self, text: str):
        color = COLOR_RED if text.startswith(("Not enough", "Load failed", "No save")) else COLOR_WHITE
        self.add_message(text, color)

    def add_message(self, text: str, color: tuple = COLOR_WHITE):
        """Add a message to display."""
        self.messages.append({
            "text": text,
            "color": color,
            "time": pygame.time.get_ticks()
        })
        # Keep only last 5 messages
        if len(self.messages) > 5:
            self.messages.pop(0)

    def update(self, game_state: dict):
        """Update HUD state."""
        self.building_count = int(game_state.get("buildings", 0))
        self.selected_type = str(game_state.get("selected_build_type", self.selected_type))
        current_time = pygame.time.get_ticks()
        # Remove old messages
        self.messages = [
            m for m in self.messages
            if current_time - m["time"] < self.message_duration
        ]

    def render(self, surface: pygame.Surface):
        bar = pygame.Rect(0, 0, self.screen_width, self.top_bar_height)
        pygame.draw.rect(surface, COLOR_UI_BG, bar)
        pygame.draw.line(surface, COLOR_UI_BORDER, (0, bar.bottom), (self.screen_width, bar.bottom), 2)

        fields = [
            (f"Timber: {math.floor(self.timber)}", COLOR_TIMBER),
            (f"Rate: {format_rate(self.rate)}/s", COLOR_WHITE),
            (f"Tide: {self.tide_label}", COLOR_WHITE),
            (f"Buildings: {self.building_count}", COLOR_WHITE),
            (f"Build: {self.selected_type.title()}", COLOR_WHITE),
        ]
        x = 12
        for text, color in fields:
            img = self.font_medium.render(text, True, color)
            surface.blit(img, (x, (self.top_bar_height - img.get_height()) // 2))
            x += img.get_width() + 28

        if self.raid_end_ms is not None:
            remaining = max(0, self.raid_end_ms - sim_now_ms()) / 1000.0
            img = self.font_large.render(f"Raid Active... {remaining:0.1f}s", True, COLOR_RED)
            surface.blit(img, (self.screen_width - img.get_width() - 12, self.top_bar_height + 8))

        y = self.screen_height - 24
        for m in reversed(self.messages):
            img = self.font_small.render(m["text"], True, m["color"])
            surface.blit(img, (12, y))
            y -= 20
