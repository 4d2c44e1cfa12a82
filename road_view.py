import cv2
import numpy as np

from game_logic import (
    CAR_HEIGHT, CAR_WIDTH, DIFFICULTIES, FRAME_REFERENCE_MS, LANE_LENGTH, LANE_WIDTH, PLAYER_Y,
)

# --- Colours (BGR) ---
ROAD_GRAY = (80, 80, 80)
DASH_COL = (255, 255, 255)
PLAYER_COL = (0, 200, 255)
OBS_COL = (0, 0, 255)
TEXT_COL = (255, 255, 255)

# --- Road Markings ---
DASH_LEN = 60
DASH_GAP = 90
DASH_W = 4
BOUNDARY_TH = 6
ROAD_ALPHA = 0.7


def blank_canvas():
    return np.zeros((LANE_LENGTH, LANE_WIDTH, 3), dtype=np.uint8)


def fit_background(frame):
    """Scale a camera frame to cover the lane canvas, or a blank canvas if there is none."""
    if frame is None:
        return blank_canvas()
    return cv2.resize(frame, (LANE_WIDTH, LANE_LENGTH), interpolation=cv2.INTER_AREA)


def darken(frame, alpha=0.7):
    h, w = frame.shape[:2]
    overlay = frame.copy()
    cv2.rectangle(overlay, (0, 0), (w, h), (0, 0, 0), -1)
    cv2.addWeighted(overlay, alpha, frame, 1 - alpha, 0, frame)


def draw_lines(frame, lines, y0, scale=0.7, color=TEXT_COL, step=34):
    for i, txt in enumerate(lines):
        cv2.putText(frame, txt, (20, y0 + i * step),
                    cv2.FONT_HERSHEY_SIMPLEX, scale, color, 2, cv2.LINE_AA)


def draw_car(frame, x, y, color):
    x1, y1 = int(x), int(y)
    cv2.rectangle(frame, (x1, y1), (x1 + CAR_WIDTH, y1 + CAR_HEIGHT), color, -1)
    # windscreen
    cv2.rectangle(frame, (x1 + 8, y1 + 14), (x1 + CAR_WIDTH - 8, y1 + 32), (40, 40, 40), -1)


class RoadView:
    def __init__(self):
        self.road_offset = 0.0

    def advance(self, speed, delta_ms):
        self.road_offset = (self.road_offset + speed * delta_ms / FRAME_REFERENCE_MS) % (DASH_LEN + DASH_GAP)

    def draw(self, frame, result, tilt_active=False):
        h, w = frame.shape[:2]
        overlay = frame.copy()
        cv2.rectangle(overlay, (0, 0), (w, h), ROAD_GRAY, -1)

        y0 = -DASH_LEN + self.road_offset
        while y0 < h:
            cv2.rectangle(overlay, (int(w / 2 - DASH_W / 2), int(y0)),
                          (int(w / 2 + DASH_W / 2), int(y0 + DASH_LEN)), DASH_COL, -1)
            y0 += DASH_LEN + DASH_GAP
        for x in (0, w - 1):
            cv2.line(overlay, (x, 0), (x, h), DASH_COL, BOUNDARY_TH)

        cv2.addWeighted(overlay, ROAD_ALPHA, frame, 1 - ROAD_ALPHA, 0, frame)

        for obs in result.obstacles:
            draw_car(frame, obs.lateral_offset, obs.vertical_position, OBS_COL)
        draw_car(frame, result.player_position, PLAYER_Y, PLAYER_COL)

        cv2.putText(frame, f"SCORE: {result.display_score}", (10, 30),
                    cv2.FONT_HERSHEY_SIMPLEX, 0.8, TEXT_COL, 2, cv2.LINE_AA)
        if tilt_active:
            cv2.putText(frame, "TILT", (w - 70, 30),
                        cv2.FONT_HERSHEY_SIMPLEX, 0.7, (0, 255, 0), 2, cv2.LINE_AA)


def draw_start(frame, selected, tilt_available):
    darken(frame)
    cv2.putText(frame, "TILT 'N DODGE", (20, 120),
                cv2.FONT_HERSHEY_SIMPLEX, 1.2, (0, 255, 255), 3, cv2.LINE_AA)
    lines = []
    for i, name in enumerate(DIFFICULTIES, start=1):
        marker = ">" if name == selected else " "
        lines.append(f"{marker} {i}: {name.upper()}")
    draw_lines(frame, lines, 200)
    help_lines = [
        "SPACE to start",
        "A/D or arrows to steer",
        "Click left/right half to steer",
    ]
    if tilt_available:
        help_lines.append("T toggles hand tilt")
    draw_lines(frame, help_lines, 340, scale=0.6)


def draw_game_over(frame, final_score):
    darken(frame)
    cv2.putText(frame, "GAME OVER", (70, LANE_LENGTH // 2 - 40),
                cv2.FONT_HERSHEY_SIMPLEX, 1.4, (0, 0, 255), 4, cv2.LINE_AA)
    cv2.putText(frame, f"SCORE: {final_score}", (110, LANE_LENGTH // 2 + 20),
                cv2.FONT_HERSHEY_SIMPLEX, 1, TEXT_COL, 2, cv2.LINE_AA)
    cv2.putText(frame, "R to restart", (120, LANE_LENGTH // 2 + 80),
                cv2.FONT_HERSHEY_SIMPLEX, 0.8, TEXT_COL, 2, cv2.LINE_AA)
