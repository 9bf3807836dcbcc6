"""Input handling for Neuron Graph.

Collects mouse clicks, keyboard presses and gamepad buttons into one
per-frame state. Events are fed in by the main loop; the gamepad is polled.
"""

import logging

import pygame

logger = logging.getLogger(__name__)

# Button mappings (Xbox-style)
BUTTON_A = 0
BUTTON_B = 1
BUTTON_START = 7

# Axis mappings
AXIS_LEFT_X = 0
AXIS_LEFT_Y = 1

# Hat (D-pad) mappings
HAT_INDEX = 0

# Keyboard keys that act like gamepad buttons
KEY_TO_BUTTON = {
    pygame.K_RETURN: BUTTON_A,
    pygame.K_SPACE: BUTTON_A,
    pygame.K_ESCAPE: BUTTON_B,
    pygame.K_p: BUTTON_START,
}

# Arrow keys act like the D-pad (pygame hat convention: +Y is up)
KEY_TO_DPAD = {
    pygame.K_LEFT: (-1, 0),
    pygame.K_RIGHT: (1, 0),
    pygame.K_UP: (0, 1),
    pygame.K_DOWN: (0, -1),
}

# WASD steps along edges (unit space: +Y is down)
KEY_TO_EDGE_STEP = {
    pygame.K_a: (-1.0, 0.0),
    pygame.K_d: (1.0, 0.0),
    pygame.K_w: (0.0, -1.0),
    pygame.K_s: (0.0, 1.0),
}


class InputState:
    """Current frame's input."""

    def __init__(self) -> None:
        # Buttons (current frame)
        self.buttons: dict[int, bool] = {}

        # Button events (just pressed this frame)
        self.buttons_pressed: set[int] = set()

        # Left stick, deadzone applied
        self.left_stick: tuple[float, float] = (0.0, 0.0)

        # D-pad events (just pressed this frame)
        self.dpad_pressed: tuple[int, int] | None = None

        # Edge step requested from the keyboard this frame
        self.edge_step: tuple[float, float] | None = None

        # Left mouse clicks this frame, in screen pixels
        self.clicks: list[tuple[int, int]] = []

        self.quit_requested = False


class InputHandler:
    """Merges pygame events and gamepad polling into InputState."""

    def __init__(self, stick_deadzone: float = 0.2) -> None:
        """Initialize input handler.

        Args:
            stick_deadzone: Deadzone for the left stick.
        """
        self.stick_deadzone = stick_deadzone
        self.joystick: pygame.joystick.JoystickType | None = None
        self.state = InputState()
        self._prev_buttons: dict[int, bool] = {}
        self._prev_dpad: tuple[int, int] = (0, 0)

        self._init_joystick()

    def _init_joystick(self) -> None:
        """Initialize the first available joystick."""
        pygame.joystick.init()
        if pygame.joystick.get_count() > 0:
            self.joystick = pygame.joystick.Joystick(0)
            self.joystick.init()
            logger.info("Gamepad connected: %s", self.joystick.get_name())
        else:
            logger.debug("No gamepad detected")

    def update(self, events: list[pygame.event.Event]) -> None:
        """Update input state. Call once per frame with that frame's events."""
        self.state.buttons_pressed.clear()
        self.state.dpad_pressed = None
        self.state.edge_step = None
        self.state.clicks.clear()

        for event in events:
            if event.type == pygame.QUIT:
                self.state.quit_requested = True
            elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                self.state.clicks.append(event.pos)
            elif event.type == pygame.KEYDOWN:
                if event.key in KEY_TO_BUTTON:
                    self.state.buttons_pressed.add(KEY_TO_BUTTON[event.key])
                elif event.key in KEY_TO_DPAD:
                    self.state.dpad_pressed = KEY_TO_DPAD[event.key]
                elif event.key in KEY_TO_EDGE_STEP:
                    self.state.edge_step = KEY_TO_EDGE_STEP[event.key]

        self._poll_joystick()

    def _poll_joystick(self) -> None:
        if self.joystick is None:
            return

        try:
            if self.joystick.get_numaxes() > AXIS_LEFT_Y:
                self.state.left_stick = self._apply_stick_deadzone(
                    self.joystick.get_axis(AXIS_LEFT_X),
                    self.joystick.get_axis(AXIS_LEFT_Y),
                )

            if self.joystick.get_numhats() > 0:
                dpad = self.joystick.get_hat(HAT_INDEX)
                if dpad != (0, 0) and self._prev_dpad == (0, 0):
                    self.state.dpad_pressed = dpad
                self._prev_dpad = dpad

            for btn in range(self.joystick.get_numbuttons()):
                pressed = bool(self.joystick.get_button(btn))
                self.state.buttons[btn] = pressed
                if pressed and not self._prev_buttons.get(btn, False):
                    self.state.buttons_pressed.add(btn)
                self._prev_buttons[btn] = pressed

        except pygame.error:
            # Controller disconnected
            self.joystick = None
            self.state.left_stick = (0.0, 0.0)
            logger.info("Gamepad disconnected")

    def is_button_pressed(self, button: int) -> bool:
        """Check if button (or its keyboard key) was just pressed this frame."""
        return button in self.state.buttons_pressed

    def _apply_stick_deadzone(self, x: float, y: float) -> tuple[float, float]:
        """Apply circular deadzone to stick input.

        Args:
            x: Raw X axis value.
            y: Raw Y axis value.

        Returns:
            Processed (x, y), remapped to full range outside the deadzone.
        """
        magnitude = (x * x + y * y) ** 0.5
        if magnitude < self.stick_deadzone:
            return (0.0, 0.0)

        scale = min((magnitude - self.stick_deadzone) / (1.0 - self.stick_deadzone), 1.0)
        return (x / magnitude * scale, y / magnitude * scale)
