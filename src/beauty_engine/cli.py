"""beauty-engine CLI — camera demos, one-shot analysis and session replay.

Usage:
    beauty-engine tryon        — Live makeup try-on controlled by pointing gestures
    beauty-engine scan         — Live skin scan with periodic reports
    beauty-engine analyze      — Skin report for a single image
    beauty-engine replay       — Replay a recorded try-on session
    beauty-engine benchmark    — Time both pipelines on synthetic input
    beauty-engine init-config  — Write the default YAML configuration
"""

from __future__ import annotations

import json
import logging
import time
from pathlib import Path
from typing import Optional

try:
    import typer
except ImportError:
    raise ImportError("typer is required for CLI. Install with: pip install typer")

from beauty_engine.config import ConfigError, EngineConfig, load_config

app = typer.Typer(
    name="beauty-engine",
    help="💄 Gesture-driven makeup try-on and skin analysis from face landmarks.",
    add_completion=False,
)


@app.callback()
def main_options(
    log_level: str = typer.Option("warning", help="Log level"),
):
    logging.basicConfig(
        level=getattr(logging, log_level.upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _load(config: Optional[str]) -> EngineConfig:
    try:
        return load_config(config)
    except (OSError, ConfigError) as e:
        typer.echo(f"❌ Invalid config {config}: {e}", err=True)
        raise typer.Exit(1)


def _open_camera(index: int, size: tuple[int, int]):
    import cv2

    cap = cv2.VideoCapture(index)
    if not cap.isOpened():
        typer.echo(f"❌ Could not open camera {index}", err=True)
        raise typer.Exit(1)
    cap.set(cv2.CAP_PROP_FRAME_WIDTH, size[0])
    cap.set(cv2.CAP_PROP_FRAME_HEIGHT, size[1])
    return cap


def _landmark_source(**kwargs):
    from beauty_engine.detector import LandmarkSource

    try:
        return LandmarkSource(**kwargs)
    except ImportError as e:
        typer.echo(f"❌ {e}", err=True)
        raise typer.Exit(1)


@app.command()
def tryon(
    camera: int = typer.Option(0, help="Camera device index"),
    config: Optional[str] = typer.Option(None, help="Path to YAML config"),
    record: Optional[str] = typer.Option(None, help="Save landmarks to this JSON file"),
):
    """Live try-on: point at lips, cheeks or eyes; open palm resets; fist cycles color."""
    import cv2
    from beauty_engine.pipeline import TryOnPipeline
    from beauty_engine.recorder import SessionRecorder

    cfg = _load(config)
    pipeline = TryOnPipeline(cfg)
    cap = _open_camera(camera, cfg.gesture.reference_size)
    source = _landmark_source()
    recorder = SessionRecorder()
    if record:
        recorder.start()

    typer.echo("🎥 Try-on running. Press 'q' to quit")
    try:
        while True:
            ok, frame_bgr = cap.read()
            if not ok:
                continue
            frame_rgb = cv2.cvtColor(cv2.flip(frame_bgr, 1), cv2.COLOR_BGR2RGB)
            tracked = source.detect(frame_rgb)
            recorder.add_frame(tracked.face, tracked.hand)

            result = pipeline.tick(frame_rgb, tracked.face, tracked.hand)
            if result.feedback:
                typer.echo(f"   {result.feedback.text}")

            view = cv2.cvtColor(result.frame, cv2.COLOR_RGB2BGR)
            cv2.putText(view, result.status, (10, 30),
                        cv2.FONT_HERSHEY_SIMPLEX, 0.6, (255, 255, 255), 2)
            cv2.imshow("beauty-engine try-on", view)
            if cv2.waitKey(1) & 0xFF == ord("q"):
                break
    except KeyboardInterrupt:
        pass
    finally:
        cap.release()
        source.close()
        cv2.destroyAllWindows()

    if record:
        recorder.stop()
        path = recorder.save(record)
        typer.echo(f"💾 Saved {recorder.frame_count} frames to {path}")


@app.command()
def scan(
    camera: int = typer.Option(0, help="Camera device index"),
    config: Optional[str] = typer.Option(None, help="Path to YAML config"),
    interval: float = typer.Option(3.0, help="Seconds between printed reports"),
    once: bool = typer.Option(False, help="Exit after the first report"),
    display: bool = typer.Option(True, help="Show a preview window"),
):
    """Live skin scan; prints a report every INTERVAL seconds while a face is visible."""
    import cv2
    from beauty_engine.pipeline import SkinAnalysisPipeline

    cfg = _load(config)
    pipeline = SkinAnalysisPipeline(cfg)
    cap = _open_camera(camera, cfg.sampling.reference_size)
    source = _landmark_source(track_hand=False)

    typer.echo("🔍 Scanning. Face the camera in good light. Press 'q' to quit")
    last_printed = 0.0
    last_status = None
    try:
        while True:
            ok, frame_bgr = cap.read()
            if not ok:
                continue
            frame_rgb = cv2.cvtColor(frame_bgr, cv2.COLOR_BGR2RGB)
            result = pipeline.tick(frame_rgb, source.detect(frame_rgb).face)

            now = time.monotonic()
            if result.report is None and result.status != last_status:
                typer.echo(f"   {result.status}")
            last_status = result.status
            if result.report is not None and now - last_printed >= interval:
                typer.echo("\n" + result.report.format_text() + "\n")
                last_printed = now
                if once:
                    break

            if display:
                cv2.imshow("beauty-engine scan", frame_bgr)
                if cv2.waitKey(1) & 0xFF == ord("q"):
                    break
    except KeyboardInterrupt:
        pass
    finally:
        cap.release()
        source.close()
        cv2.destroyAllWindows()


@app.command()
def analyze(
    image: str = typer.Argument(..., help="Path to a face photo"),
    config: Optional[str] = typer.Option(None, help="Path to YAML config"),
    recommendations: Optional[str] = typer.Option(None, help="Path to recommendation YAML"),
    as_json: bool = typer.Option(False, "--json", help="Print the report as JSON"),
):
    """Analyse the skin in a single image."""
    import cv2
    from beauty_engine.pipeline import SkinAnalysisPipeline
    from beauty_engine.recommendations import RecommendationEngine

    frame_bgr = cv2.imread(image)
    if frame_bgr is None:
        typer.echo(f"❌ Could not read image: {image}", err=True)
        raise typer.Exit(1)

    cfg = _load(config)
    recommender = None
    if recommendations:
        try:
            recommender = RecommendationEngine.from_yaml(recommendations)
        except (OSError, ConfigError) as e:
            typer.echo(f"❌ Invalid recommendation table {recommendations}: {e}", err=True)
            raise typer.Exit(1)

    frame_rgb = cv2.cvtColor(frame_bgr, cv2.COLOR_BGR2RGB)
    with _landmark_source(track_hand=False, static_image_mode=True) as source:
        face = source.detect(frame_rgb).face

    result = SkinAnalysisPipeline(cfg, recommender=recommender).tick(frame_rgb, face)
    if result.report is None:
        typer.echo(f"❌ {result.status}", err=True)
        raise typer.Exit(1)

    if as_json:
        typer.echo(json.dumps(result.report.to_dict(), indent=2, ensure_ascii=False))
    else:
        typer.echo(result.report.format_text())


@app.command()
def replay(
    recording: str = typer.Argument(..., help="Path to recording file"),
    config: Optional[str] = typer.Option(None, help="Path to YAML config"),
):
    """Replay a recorded try-on session through the gesture pipeline."""
    import numpy as np
    from beauty_engine.pipeline import TryOnPipeline
    from beauty_engine.recorder import SessionPlayer

    path = Path(recording)
    if not path.exists():
        typer.echo(f"❌ Recording not found: {recording}", err=True)
        raise typer.Exit(1)

    cfg = _load(config)
    player = SessionPlayer.load(path)
    typer.echo(f"▶️  Replaying {path.name} ({player.frame_count} frames, {player.duration:.1f}s)")

    width, height = cfg.gesture.reference_size
    canvas = np.zeros((height, width, 3), dtype=np.uint8)
    pipeline = TryOnPipeline(cfg, enable_profiling=False)

    for frame in player.play():
        result = pipeline.tick(canvas, frame.face, frame.hand, now=frame.timestamp)
        if result.feedback:
            typer.echo(f"   [{frame.timestamp:7.3f}s] {result.feedback.text}")

    overlay = pipeline.session.overlay
    active = ", ".join(overlay.active_regions()) or "none"
    typer.echo(f"\n✅ Replay complete. {pipeline.stats.total_events} gestures fired.")
    typer.echo(f"   Active overlays: {active} | lipstick color #{overlay.color_index}")


@app.command()
def benchmark(
    iterations: int = typer.Option(200, help="Number of iterations"),
):
    """Time both pipelines on synthetic frames and landmarks."""
    import numpy as np
    from beauty_engine.gestures import OverlayState, SessionState
    from beauty_engine.pipeline import SkinAnalysisPipeline, TryOnPipeline

    typer.echo(f"⚡ Running benchmark: {iterations} iterations")

    rng = np.random.default_rng(42)
    face = rng.uniform(0.3, 0.7, size=(468, 2))
    hand = rng.uniform(0.3, 0.7, size=(21, 2))
    tryon_frame = rng.integers(0, 256, size=(480, 640, 3), dtype=np.uint8)
    skin_frame = rng.integers(0, 256, size=(540, 720, 3), dtype=np.uint8)

    all_on = SessionState(overlay=OverlayState(lipstick=True, blush=True, eyeshadow=True))
    tryon = TryOnPipeline(session=all_on)
    skin = SkinAnalysisPipeline()

    for _ in range(iterations):
        # Keep the cooldown armed so the overlay stays fully enabled
        tryon.session = all_on
        tryon.tick(tryon_frame, face, hand, now=-1.0)
        skin.tick(skin_frame, face)

    for name, pipeline in (("try-on", tryon), ("skin", skin)):
        stats = pipeline.stats
        typer.echo(f"\n📊 {name}: avg {stats.avg_latency_ms:.2f} ms ({stats.fps:.0f} FPS)")
        for stage, s in stats.profiler_summary.items():
            typer.echo(f"   {stage:16s} avg={s['avg_ms']:.3f}ms  p95={s['p95_ms']:.3f}ms")


@app.command("init-config")
def init_config(
    path: str = typer.Argument("beauty-engine.yml", help="Output config path"),
    recommendations: Optional[str] = typer.Option(
        None, help="Also write the recommendation table to this path"
    ),
):
    """Write the default configuration (and optionally the recommendation table)."""
    from beauty_engine.recommendations import RecommendationEngine

    EngineConfig().to_yaml(path)
    typer.echo(f"💾 Config written to {path}")
    if recommendations:
        RecommendationEngine().to_yaml(recommendations)
        typer.echo(f"💾 Recommendation table written to {recommendations}")


def main():
    app()


if __name__ == "__main__":
    main()
