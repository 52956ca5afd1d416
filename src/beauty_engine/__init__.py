"""beauty-engine - Gesture-driven makeup try-on and landmark-based skin analysis."""

__version__ = "0.1.0"

from beauty_engine.config import EngineConfig, ConfigError, load_config
from beauty_engine.gestures import GestureRecognizer, OverlayState, SessionState, FeedbackEvent
from beauty_engine.overlay import OverlayCompositor
from beauty_engine.sampler import RegionSampler, RegionStats, FaceRegions
from beauty_engine.skin import SkinClassifier, SkinProfile, SkinType
from beauty_engine.recommendations import RecommendationEngine, RecommendationRules
from beauty_engine.report import SkinReport, build_report
from beauty_engine.pipeline import TryOnPipeline, SkinAnalysisPipeline
from beauty_engine.profiler import PipelineProfiler
from beauty_engine.recorder import SessionRecorder, SessionPlayer
