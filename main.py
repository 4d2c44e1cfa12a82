import os
os.environ["TF_CPP_MIN_LOG_LEVEL"] = "3"
import argparse
import time

from absl import logging
import cv2

import game_logic
from game_logic import DIFFICULTIES, Game
import input_state
from input_capture import KEY_SOURCES, KeyHolder, make_touch_handler
from road_view import RoadView, draw_game_over, draw_start, fit_background
from tilt_tracker import HandTiltTracker, setup_camera

# ── Config ────────────────────────────────────────────────────────
WINDOW = "Tilt 'n Dodge"
PRESET_KEYS = {ord(str(i)): name for i, name in enumerate(DIFFICULTIES, start=1)}
START_KEYS = (ord(' '), 13)
QUIT_KEYS = (ord('q'), 27)


def handle_idle_state(frame, game, key, selected, tilt_available):
    if key in PRESET_KEYS:
        selected = PRESET_KEYS[key]
    draw_start(frame, selected, tilt_available)
    if key in START_KEYS:
        game.start(selected)
    return selected


def handle_running_state(frame, game, view, key, now_ms, dt_ms):
    if key == ord('x'):
        game.stop()
        return
    game.scheduler.run_frame(now_ms)
    view.advance(game.difficulty.speed, dt_ms)
    view.draw(frame, game.snapshot(), tilt_active=game.inputs.tilt_enabled)


def handle_ended_state(frame, game, key):
    draw_game_over(frame, game.final_score)
    if key == ord('r'):
        game.restart()


def run_game_loop(game, cap, tracker, default_preset):
    view = RoadView()
    keys = KeyHolder(game)
    selected = default_preset
    tilt_available = tracker is not None
    cv2.setMouseCallback(WINDOW, make_touch_handler(game))

    t0 = time.time()
    last_ms = 0.0
    while True:
        frame = None
        if cap is not None:
            ret, frame = cap.read()
            if not ret:
                print("Error: Failed to grab frame.")
                break
            frame = cv2.flip(frame, 1)
            angle = tracker.read(frame)
            if angle is None:
                game.set_input(input_state.TILT, 0.0)
            else:
                game.set_input(input_state.TILT, angle)
                print(f"Tilt: {angle:6.1f} | {'ON' if game.inputs.tilt_enabled else 'off'}", end='\r')
        canvas = fit_background(frame)

        key = cv2.waitKeyEx(1)
        now_ms = (time.time() - t0) * 1000.0
        dt_ms, last_ms = now_ms - last_ms, now_ms
        if key in QUIT_KEYS or cv2.getWindowProperty(WINDOW, cv2.WND_PROP_VISIBLE) < 1:
            break
        if key in KEY_SOURCES:
            keys.press(KEY_SOURCES[key], now_ms)
        keys.release_stale(now_ms)
        if key == ord('t') and tilt_available:
            game.set_input(input_state.TILT_ENABLED, not game.inputs.tilt_enabled)

        # --- Game State Machine ---
        if game.state == game_logic.IDLE:
            selected = handle_idle_state(canvas, game, key, selected, tilt_available)
        elif game.state == game_logic.RUNNING:
            handle_running_state(canvas, game, view, key, now_ms, dt_ms)
        elif game.state == game_logic.ENDED:
            handle_ended_state(canvas, game, key)

        cv2.imshow(WINDOW, canvas)

    if game.state == game_logic.RUNNING:
        game.stop()


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Endless lane dodging game.")
    parser.add_argument("--difficulty", choices=list(DIFFICULTIES), default="medium")
    parser.add_argument("--no-camera", action="store_true",
                        help="skip the webcam, keyboard and mouse steering only")
    parser.add_argument("--time-scaled", action="store_true",
                        help="scale score and difficulty growth by frame time")
    parser.add_argument("--verbose", action="store_true")
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    logging.set_verbosity(logging.DEBUG if args.verbose else logging.INFO)

    cap = None if args.no_camera else setup_camera()
    tracker = HandTiltTracker() if cap is not None else None

    cv2.namedWindow(WINDOW, cv2.WINDOW_NORMAL | cv2.WINDOW_KEEPRATIO)
    cv2.resizeWindow(WINDOW, game_logic.LANE_WIDTH, game_logic.LANE_LENGTH)

    game = Game(frame_coupled=not args.time_scaled)
    try:
        run_game_loop(game, cap, tracker, args.difficulty)
    finally:
        if tracker is not None:
            tracker.close()
        if cap is not None:
            cap.release()
        cv2.destroyAllWindows()


if __name__ == "__main__":
    main()
