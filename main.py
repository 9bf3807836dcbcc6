"""Neuron Graph - Timed node-toggling puzzle game."""

import logging
import random
import sys
from pathlib import Path

import pygame

from difficulty import ConfigurationError
from graph_layout import GraphLayout
from input_handler import InputHandler, BUTTON_A, BUTTON_B, BUTTON_START
from logger_config import configure_logging
from palettes import PALETTE_NAMES, get_palette
from selection import NodeSelection
from session import SessionController, SessionListener, SessionPhase
from settings import GameSettings, build_session, load_settings
from toggle_engine import InvalidNodeError, PuzzleInstance

logger = logging.getLogger(__name__)


class FeedbackListener(SessionListener):
    """Keeps short-lived visual feedback for the renderer."""

    FLASH_TIME = 0.35  # Seconds an activated node stays highlighted
    SOLVE_FLASH_TIME = 0.6

    def __init__(self) -> None:
        self.node_flash: dict[int, float] = {}
        self.solve_flash = 0.0
        self.last_earned = 0
        self.new_puzzle = False

    def on_node_activated(self, node_id: int, solved: bool) -> None:
        self.node_flash[node_id] = self.FLASH_TIME

    def on_puzzle_ready(self, puzzle: PuzzleInstance) -> None:
        self.node_flash.clear()
        self.new_puzzle = True

    def on_puzzle_solved(self, earned_score: int, combo_streak: int) -> None:
        self.solve_flash = self.SOLVE_FLASH_TIME
        self.last_earned = earned_score

    def update(self, dt: float) -> None:
        self.solve_flash = max(0.0, self.solve_flash - dt)
        for node_id in list(self.node_flash):
            self.node_flash[node_id] -= dt
            if self.node_flash[node_id] <= 0:
                del self.node_flash[node_id]


class GraphRenderer:
    """Handles rendering of the node graph and HUD."""

    # Colors
    BACKGROUND = (30, 32, 40)
    EDGE_COLOR = (90, 95, 110)
    EDGE_FLASH_COLOR = (240, 240, 255)
    OUTLINE_COLOR = (15, 15, 20)
    HIGHLIGHT_COLOR = (255, 255, 255)
    TEXT_COLOR = (220, 220, 220)
    HINT_COLOR = (130, 130, 140)

    HUD_HEIGHT = 90
    NODE_RADIUS = 0.06  # In layout unit space

    def __init__(self, screen: pygame.Surface, palette_name: str) -> None:
        """Initialize renderer.

        Args:
            screen: The pygame display surface.
            palette_name: Palette used for node colours.
        """
        self.screen = screen
        self.palette_name = palette_name
        self.screen_w, self.screen_h = screen.get_size()

        # Square play area below the HUD
        self.area_size = min(self.screen_w, self.screen_h - self.HUD_HEIGHT) - 40
        self.area_x = (self.screen_w - self.area_size) // 2
        self.area_y = self.HUD_HEIGHT + (self.screen_h - self.HUD_HEIGHT - self.area_size) // 2

        self.font = pygame.font.Font(None, 36)
        self.big_font = pygame.font.Font(None, 96)
        self.small_font = pygame.font.Font(None, 26)

    def to_screen(self, pos: tuple[float, float]) -> tuple[int, int]:
        return (
            int(self.area_x + pos[0] * self.area_size),
            int(self.area_y + pos[1] * self.area_size),
        )

    def to_unit(self, pixel: tuple[int, int]) -> tuple[float, float]:
        return (
            (pixel[0] - self.area_x) / self.area_size,
            (pixel[1] - self.area_y) / self.area_size,
        )

    @property
    def node_radius_px(self) -> int:
        return max(8, int(self.NODE_RADIUS * self.area_size))

    def render(
        self,
        controller: SessionController,
        selection: NodeSelection | None,
        feedback: FeedbackListener,
    ) -> None:
        """Render a frame.

        Args:
            controller: Session being played.
            selection: Gamepad/keyboard cursor, if a puzzle is shown.
            feedback: Flash timers from session events.
        """
        self.screen.fill(self.BACKGROUND)

        puzzle = controller.puzzle
        if puzzle is not None and puzzle.layout is not None:
            palette = get_palette(self.palette_name, puzzle.color_count)
            self._draw_graph(puzzle, puzzle.layout.layout, palette, selection, feedback)
            self._draw_target(palette[puzzle.target_color])
        elif controller.phase == SessionPhase.PUZZLE_ACTIVE:
            self._draw_center_text("No puzzle available", self.font, self.HINT_COLOR)

        self._draw_hud(controller)

        if controller.phase == SessionPhase.COUNTDOWN:
            self._draw_center_text(str(int(controller.countdown_remaining) + 1), self.big_font, self.TEXT_COLOR)

        if feedback.solve_flash > 0:
            text = f"+{feedback.last_earned}"
            surf = self.font.render(text, True, self.HIGHLIGHT_COLOR)
            self.screen.blit(surf, surf.get_rect(centerx=self.screen_w // 2, top=self.HUD_HEIGHT))

    def _draw_graph(
        self,
        puzzle: PuzzleInstance,
        layout: GraphLayout,
        palette: list[tuple[int, int, int]],
        selection: NodeSelection | None,
        feedback: FeedbackListener,
    ) -> None:
        edge_color = self.EDGE_FLASH_COLOR if feedback.solve_flash > 0 else self.EDGE_COLOR
        for a, b in sorted(layout.edges()):
            pygame.draw.line(
                self.screen,
                edge_color,
                self.to_screen(layout.position(a)),
                self.to_screen(layout.position(b)),
                4,
            )

        radius = self.node_radius_px
        for node_id, node in puzzle.nodes.items():
            center = self.to_screen(layout.position(node_id))
            r = radius + 4 if node_id in feedback.node_flash else radius
            pygame.draw.circle(self.screen, palette[node.color], center, r)
            pygame.draw.circle(self.screen, self.OUTLINE_COLOR, center, r, 3)

            if selection is not None and selection.selected_node == node_id:
                pygame.draw.circle(self.screen, self.HIGHLIGHT_COLOR, center, r + 6, 3)

    def _draw_target(self, color: tuple[int, int, int]) -> None:
        """Draw the target colour swatch in the HUD."""
        label = self.small_font.render("TARGET", True, self.HINT_COLOR)
        label_rect = label.get_rect(centerx=self.screen_w // 2, top=10)
        self.screen.blit(label, label_rect)
        pygame.draw.circle(self.screen, color, (self.screen_w // 2, label_rect.bottom + 28), 24)
        pygame.draw.circle(self.screen, self.HIGHLIGHT_COLOR, (self.screen_w // 2, label_rect.bottom + 28), 24, 2)

    def _draw_hud(self, controller: SessionController) -> None:
        level = controller.progress.current_level
        tier = controller.config.tier_name if controller.config else ""

        left = [f"Score: {controller.score}", f"Combo: x{controller.combo_streak}"]
        right = [f"Time: {controller.remaining_time:0.1f}", f"Level {level} {tier}"]

        for i, text in enumerate(left):
            surf = self.font.render(text, True, self.TEXT_COLOR)
            self.screen.blit(surf, (20, 12 + i * 36))
        for i, text in enumerate(right):
            surf = self.font.render(text, True, self.TEXT_COLOR)
            self.screen.blit(surf, surf.get_rect(right=self.screen_w - 20, top=12 + i * 36))

    def _draw_center_text(self, text: str, font: pygame.font.Font, color: tuple[int, int, int]) -> None:
        surf = font.render(text, True, color)
        center = (self.screen_w // 2, self.area_y + self.area_size // 2)
        self.screen.blit(surf, surf.get_rect(center=center))


def activate_selected(controller: SessionController, node_id: int) -> None:
    """Send a node activation to the session."""
    try:
        controller.on_node_activated(node_id)
    except InvalidNodeError as e:
        logger.warning("Ignored activation: %s", e)


def run_session(
    screen: pygame.Surface,
    input_handler: InputHandler,
    controller: SessionController,
    feedback: FeedbackListener,
    settings: GameSettings,
    palette_name: str,
) -> int | None:
    """Run one timed session.

    Args:
        screen: Pygame display surface.
        input_handler: Input handler instance.
        controller: Session controller wired with feedback as listener.
        feedback: Flash timers for the renderer.
        settings: Game settings.
        palette_name: Resolved palette name.

    Returns:
        Final score, or None if the player quit.
    """
    renderer = GraphRenderer(screen, palette_name)
    clock = pygame.time.Clock()
    selection: NodeSelection | None = None
    solved_wait = 0.0

    controller.start_session(settings.start_level)

    while controller.is_running():
        dt = clock.tick(60) / 1000.0

        input_handler.update(pygame.event.get())
        if input_handler.state.quit_requested:
            controller.teardown()
            return None

        if input_handler.is_button_pressed(BUTTON_B):
            return controller.end_session()

        if controller.phase == SessionPhase.COUNTDOWN and input_handler.is_button_pressed(BUTTON_START):
            controller.finish_countdown()

        if feedback.new_puzzle and controller.puzzle is not None:
            feedback.new_puzzle = False
            selection = NodeSelection(controller.puzzle.layout.layout)

        if controller.puzzle is None:
            selection = None

        if selection is not None:
            if input_handler.state.dpad_pressed:
                selection.handle_dpad(*input_handler.state.dpad_pressed)
            if input_handler.state.edge_step:
                selection.step_along_edge(*input_handler.state.edge_step)
            selection.update_stick_selection(*input_handler.state.left_stick, dt * 1000.0)

            if input_handler.is_button_pressed(BUTTON_A):
                activate_selected(controller, selection.selected_node)

            radius = renderer.NODE_RADIUS * 1.3
            for click in input_handler.state.clicks:
                node_id = selection.node_at(*renderer.to_unit(click), radius)
                if node_id is not None:
                    selection.select_node(node_id)
                    activate_selected(controller, node_id)

        # Hold the solved puzzle on screen before moving on
        if controller.phase == SessionPhase.PUZZLE_SOLVED:
            solved_wait += dt
            if solved_wait >= settings.solve_delay:
                solved_wait = 0.0
                controller.request_next_puzzle()
        else:
            solved_wait = 0.0

        controller.update(dt)
        feedback.update(dt)

        renderer.render(controller, selection, feedback)
        pygame.display.flip()

    return controller.score


def show_results_screen(screen: pygame.Surface, input_handler: InputHandler, score: int, best: int) -> bool:
    """Show the final score.

    Returns:
        True to play again, False to quit.
    """
    clock = pygame.time.Clock()
    screen_w, screen_h = screen.get_size()
    title_font = pygame.font.Font(None, 72)
    hint_font = pygame.font.Font(None, 32)

    while True:
        clock.tick(60)
        input_handler.update(pygame.event.get())

        if input_handler.state.quit_requested or input_handler.is_button_pressed(BUTTON_B):
            return False
        if input_handler.is_button_pressed(BUTTON_A):
            return True

        screen.fill((20, 25, 30))

        title = title_font.render(f"Score: {score}", True, (100, 220, 150))
        screen.blit(title, title.get_rect(center=(screen_w // 2, screen_h // 2 - 40)))

        best_surf = hint_font.render(f"Best: {best}", True, (200, 200, 200))
        screen.blit(best_surf, best_surf.get_rect(center=(screen_w // 2, screen_h // 2 + 20)))

        hint = hint_font.render("A: Play again | B: Quit", True, (120, 120, 120))
        screen.blit(hint, hint.get_rect(centerx=screen_w // 2, bottom=screen_h - 40))

        pygame.display.flip()


def main() -> None:
    """Main entry point."""
    base_path = Path(__file__).parent
    settings = load_settings(base_path / "settings.json")
    configure_logging(settings.log_level)

    feedback = FeedbackListener()
    try:
        controller = build_session(settings, listener=feedback, save_dir=base_path)
    except ConfigurationError as e:
        logger.error("Invalid tier table: %s", e)
        sys.exit(1)

    palette_name = settings.palette_name
    if palette_name == "Random":
        palette_name = random.choice(PALETTE_NAMES)

    pygame.init()

    if settings.fullscreen:
        screen = pygame.display.set_mode((0, 0), pygame.FULLSCREEN)
    else:
        screen = pygame.display.set_mode(settings.get_window_size())
    pygame.display.set_caption("Neuron Graph")

    input_handler = InputHandler()

    running = True
    while running:
        score = run_session(screen, input_handler, controller, feedback, settings, palette_name)
        if score is None:
            break
        running = show_results_screen(screen, input_handler, score, controller.progress.best_score)
        # Later sessions continue from the saved level
        settings.start_level = None

    pygame.quit()
    logger.info("Done.")


if __name__ == "__main__":
    main()
