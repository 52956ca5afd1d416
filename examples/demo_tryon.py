#!/usr/bin/env python3
"""Live webcam makeup try-on demo with a skin report on demand.

Usage:
    python examples/demo_tryon.py [--camera 0]

Keys: 'q' quits, 's' prints a skin report for the current frame.
"""

import argparse
import sys

import cv2

sys.path.insert(0, "src")
from beauty_engine import SkinAnalysisPipeline, TryOnPipeline
from beauty_engine.detector import LandmarkSource


def draw_status(frame, status: str, stats):
    """Draw the status line and timing on the frame."""
    cv2.putText(
        frame, status, (10, 30),
        cv2.FONT_HERSHEY_SIMPLEX, 0.6, (255, 255, 255), 2,
    )
    cv2.putText(
        frame,
        f"FPS: {stats.fps:.1f} | Latency: {stats.avg_latency_ms:.1f}ms",
        (10, frame.shape[0] - 15),
        cv2.FONT_HERSHEY_SIMPLEX, 0.5, (0, 255, 0), 1,
    )
    return frame


def main():
    parser = argparse.ArgumentParser(description="beauty-engine try-on demo")
    parser.add_argument("--camera", type=int, default=0, help="Camera index")
    args = parser.parse_args()

    cap = cv2.VideoCapture(args.camera)
    if not cap.isOpened():
        print(f"Error: Cannot open camera {args.camera}")
        sys.exit(1)
    cap.set(cv2.CAP_PROP_FRAME_WIDTH, 640)
    cap.set(cv2.CAP_PROP_FRAME_HEIGHT, 480)

    print("Point at lips / cheek / eye to apply, open palm to reset, fist to change color")
    print("Press 's' for a skin report, 'q' to quit\n")

    tryon = TryOnPipeline()
    skin = SkinAnalysisPipeline()

    with LandmarkSource() as source:
        while True:
            ret, frame = cap.read()
            if not ret:
                break

            frame_rgb = cv2.cvtColor(cv2.flip(frame, 1), cv2.COLOR_BGR2RGB)
            tracked = source.detect(frame_rgb)
            result = tryon.tick(frame_rgb, tracked.face, tracked.hand)

            view = cv2.cvtColor(result.frame, cv2.COLOR_RGB2BGR)
            cv2.imshow("beauty-engine", draw_status(view, result.status, tryon.stats))

            key = cv2.waitKey(1) & 0xFF
            if key == ord("q"):
                break
            if key == ord("s"):
                scan = skin.tick(frame_rgb, tracked.face)
                print(scan.report.format_text() if scan.report else scan.status)
                print()

    cap.release()
    cv2.destroyAllWindows()

    stats = tryon.stats
    print(f"\nProcessed {stats.total_frames} frames, {stats.total_events} gestures")


if __name__ == "__main__":
    main()
