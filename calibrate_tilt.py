import statistics
import time

import cv2

from tilt_tracker import HandTiltTracker, setup_camera


def sample_tilt(tracker, duration=5):
    cap = setup_camera()
    if cap is None:
        return []
    start = time.time()
    angles = []
    print(f"Sampling hand tilt for {duration} seconds. Hold your hand UPRIGHT.")
    while time.time() - start < duration:
        ret, frame = cap.read()
        if not ret: continue
        angle = tracker.read(cv2.flip(frame, 1))
        if angle is not None:
            angles.append(angle)
        cv2.waitKey(1)
    cap.release()
    return angles


if __name__ == "__main__":
    tracker = HandTiltTracker(offset=0.0)
    try:
        neutral = sample_tilt(tracker, 5)
    finally:
        tracker.close()
    if not neutral:
        print("No hand detected, nothing to suggest.")
    else:
        print("Neutral tilt: min {:.1f}, max {:.1f}, mean {:.1f}".format(
            min(neutral), max(neutral), statistics.mean(neutral)
        ))
        print(f"\nSuggested TILT_OFFSET ≈ {statistics.mean(neutral):.1f}")
