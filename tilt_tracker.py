import cv2
import mediapipe as mp

from input_state import tilt_from_landmarks

WRIST = 0
MIDDLE_MCP = 9
TILT_OFFSET = 0.0   # neutral hand roll, see calibrate_tilt.py


def setup_camera(index=0):
    cap = cv2.VideoCapture(index)
    if not cap.isOpened():
        print("WARNING: Could not open camera, tilt input unavailable.")
        return None
    cap.set(cv2.CAP_PROP_FRAME_WIDTH, 640)
    cap.set(cv2.CAP_PROP_FRAME_HEIGHT, 480)
    return cap


class HandTiltTracker:
    """Reads the roll of one hand from camera frames."""

    def __init__(self, offset=TILT_OFFSET):
        self.offset = offset
        self.hands = mp.solutions.hands.Hands(
            max_num_hands=1,
            min_detection_confidence=0.7,
            min_tracking_confidence=0.7
        )

    def read(self, frame):
        """Hand tilt in degrees for an already mirrored BGR frame, or None."""
        rgb = cv2.cvtColor(frame, cv2.COLOR_BGR2RGB)
        res = self.hands.process(rgb)
        if not res.multi_hand_landmarks:
            return None
        lm = res.multi_hand_landmarks[0].landmark
        return tilt_from_landmarks(lm[WRIST], lm[MIDDLE_MCP], self.offset)

    def close(self):
        self.hands.close()
