# app.py
import logging
import sys
import time
import cv2
import mediapipe as mp

from core.punch.config import PunchConfig, load_config
from core.punch.landmarks import LandmarkFrame
from core.punch.punch_detector import PunchDetector
from core.punch.session_logger import SessionLogger


WINDOW_NAME = "Punch Counter"
FLASH_FRAMES = 5  # red border after a punch


def _ui_scale(frame_w: int) -> float:
    # Scales UI with resolution (tuned for 720p–4K)
    return max(0.8, min(1.8, frame_w / 1200.0))


def put_text_rel(img, text: str, x_frac: float, y_frac: float, scale_mult: float = 1.0):
    """Draw text at a relative position in the frame."""
    h, w = img.shape[:2]
    ui = _ui_scale(w) * scale_mult
    font_scale = 0.55 * ui
    thickness = int(max(1, round(2 * ui)))
    x = int(x_frac * w)
    y = int(y_frac * h)

    cv2.putText(
        img,
        text,
        (x, y),
        cv2.FONT_HERSHEY_SIMPLEX,
        font_scale,
        (255, 255, 255),
        thickness,
        cv2.LINE_AA,
    )


def draw_panel(img, x0_frac: float, y0_frac: float, x1_frac: float, y1_frac: float, alpha: float = 0.35):
    """Semi-transparent panel to improve text readability."""
    h, w = img.shape[:2]
    x0, y0 = int(x0_frac * w), int(y0_frac * h)
    x1, y1 = int(x1_frac * w), int(y1_frac * h)

    overlay = img.copy()
    cv2.rectangle(overlay, (x0, y0), (x1, y1), (0, 0, 0), thickness=-1)
    cv2.addWeighted(overlay, alpha, img, 1 - alpha, 0, img)


def draw_flash(img, thickness: int = 10):
    h, w = img.shape[:2]
    cv2.rectangle(img, (0, 0), (w - 1, h - 1), (60, 76, 231), thickness)


def main():
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    cfg = load_config(sys.argv[1]) if len(sys.argv) > 1 else PunchConfig()
    session = SessionLogger(cfg=cfg)
    detector = PunchDetector(cfg=cfg, sink=session.add_punch)
    flash_left = 0

    # Webcam
    cap = cv2.VideoCapture(0, cv2.CAP_DSHOW)
    if not cap.isOpened():
        cap = cv2.VideoCapture(0)
    if not cap.isOpened():
        raise RuntimeError("Could not open webcam. Try a different camera index (0,1,2...).")

    cap.set(cv2.CAP_PROP_FRAME_WIDTH, 640)
    cap.set(cv2.CAP_PROP_FRAME_HEIGHT, 480)

    # MediaPipe Pose
    pose = mp.solutions.pose.Pose(
        model_complexity=1,
        min_detection_confidence=0.5,
        min_tracking_confidence=0.5,
    )
    drawing = mp.solutions.drawing_utils

    last_time = time.time()

    cv2.namedWindow(WINDOW_NAME, cv2.WINDOW_NORMAL)
    cv2.resizeWindow(WINDOW_NAME, 1280, 960)

    print(
        "Hotkeys:\n"
        "  r=reset counter\n"
        "  e=export session\n"
        "  q=quit"
    )

    while True:
        ok, frame = cap.read()
        if not ok:
            break

        h, w = frame.shape[:2]

        now = time.time()
        fps = 1.0 / max(now - last_time, 1e-6)
        last_time = now

        # Pose runs on the unmirrored image so "left" stays the subject's left arm
        rgb = cv2.cvtColor(frame, cv2.COLOR_BGR2RGB)
        rgb.flags.writeable = False
        res = pose.process(rgb)
        rgb.flags.writeable = True

        if res.pose_landmarks:
            drawing.draw_landmarks(frame, res.pose_landmarks, mp.solutions.pose.POSE_CONNECTIONS)
            lmf = LandmarkFrame.from_mediapipe(res.pose_landmarks.landmark, w, h, timestamp=now)
            events = detector.update(lmf)
        else:
            events = detector.update(None)

        # Mirror for display only, before any text is drawn
        frame = cv2.flip(frame, 1)

        if events:
            flash_left = FLASH_FRAMES
        if flash_left > 0:
            draw_flash(frame)
            flash_left -= 1

        counts = session.counts()
        left = detector.limbs["left"]
        right = detector.limbs["right"]

        draw_panel(frame, 0.01, 0.01, 0.60, 0.30, alpha=0.35)
        put_text_rel(frame, f"Punches: {session.total()}   FPS: {fps:.1f}", 0.02, 0.07, 1.3)
        put_text_rel(frame, f"Left: {counts['left']}   Right: {counts['right']}", 0.02, 0.13)
        put_text_rel(frame, f"L: {left.phase.lower()} / {left.last_verdict or '-'}", 0.02, 0.19)
        put_text_rel(frame, f"R: {right.phase.lower()} / {right.last_verdict or '-'}", 0.02, 0.25)
        if not res.pose_landmarks:
            put_text_rel(frame, "No pose detected", 0.65, 0.07)

        cv2.imshow(WINDOW_NAME, frame)
        key = cv2.waitKey(1) & 0xFF

        if key == ord("q"):
            break

        elif key == ord("r"):
            detector.reset()
            session.reset()
            flash_left = 0
            print("Counter reset to 0")

        elif key == ord("e"):
            j = session.export_json()
            c = session.export_csv()
            print(f"Exported JSON: {j.resolve()}")
            print(f"Exported CSV : {c.resolve()}")

    pose.close()
    cap.release()
    cv2.destroyAllWindows()


if __name__ == "__main__":
    main()
