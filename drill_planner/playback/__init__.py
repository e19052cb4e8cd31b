from .scheduler import ManualScheduler, ThreadScheduler, TickHandle, monotonic_ms
from .clock import ClockState, PlaybackClock, format_progress
from .renderer import FrameRenderer, render_frame
from .preview import AnimationPreview

__all__ = [
    "ManualScheduler", "ThreadScheduler", "TickHandle", "monotonic_ms",
    "ClockState", "PlaybackClock", "format_progress",
    "FrameRenderer", "render_frame",
    "AnimationPreview",
]
