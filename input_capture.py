import cv2

import game_logic
import input_state

KEY_HOLD_MS = 120       # waitKey has no key-up, a key counts as held this long after its last repeat
KEY_SOURCES = {
    ord('a'): "a", ord('A'): "A",
    ord('d'): "d", ord('D'): "D",
    ord('w'): "w", ord('W'): "W",
    ord('s'): "s", ord('S'): "S",
    65361: "ArrowLeft", 65363: "ArrowRight",         # GTK
    65362: "ArrowUp", 65364: "ArrowDown",
    2424832: "ArrowLeft", 2555904: "ArrowRight",     # Win32
    2490368: "ArrowUp", 2621440: "ArrowDown",
}


class KeyHolder:
    """Turns repeated key presses into held/released digital inputs."""

    def __init__(self, game):
        self.game = game
        self.last_seen = {}

    def press(self, source, now_ms):
        # Re-asserted on every repeat, a new run clears held keys
        self.game.set_input(source, True)
        self.last_seen[source] = now_ms

    def release_stale(self, now_ms):
        for source, seen in list(self.last_seen.items()):
            if now_ms - seen > KEY_HOLD_MS:
                self.game.set_input(source, False)
                del self.last_seen[source]


def touch_side(x):
    return input_state.TOUCH_LEFT if x < game_logic.LANE_WIDTH / 2 else input_state.TOUCH_RIGHT


def make_touch_handler(game):
    def on_mouse(event, x, y, flags, param):
        if event == cv2.EVENT_LBUTTONDOWN:
            game.set_input(touch_side(x), True)
        elif event == cv2.EVENT_LBUTTONUP:
            game.set_input(input_state.TOUCH_LEFT, False)
            game.set_input(input_state.TOUCH_RIGHT, False)
    return on_mouse
