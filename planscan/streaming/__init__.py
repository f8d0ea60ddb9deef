from planscan.streaming.cancellation import CancellationToken
from planscan.streaming.frame_parser import FrameParser, StreamEvent, parse_events

__all__ = ["CancellationToken", "FrameParser", "StreamEvent", "parse_events"]
