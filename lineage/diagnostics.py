"""
Diagnostics - observability and event tracking for the factory.
"""

import time
from typing import Any, Dict, List, Optional, Protocol
from enum import Enum
import dataclasses
import logging

logger = logging.getLogger("lineage.diagnostics")


class CompositionEventType(Enum):
    """Types of composition events."""
    BUILD = "build"
    HOOK_REGISTERED = "hook_registered"
    HOOK_DISPATCH = "hook_dispatch"
    CREATE_COMPLETE = "create_complete"


@dataclasses.dataclass
class CompositionEvent:
    """A diagnostic event emitted while composing an instance."""
    type: CompositionEventType
    timestamp: float = dataclasses.field(default_factory=time.time)
    blueprint: Optional[str] = None
    hook: Optional[str] = None
    duration: Optional[float] = None
    metadata: Dict[str, Any] = dataclasses.field(default_factory=dict)


class DiagnosticListener(Protocol):
    """Interface for diagnostic listeners."""
    def on_event(self, event: CompositionEvent) -> None:
        """Called when a composition event occurs."""
        ...


class LoggingDiagnosticListener:
    """Diagnostic listener that writes events to the lineage.diagnostics logger."""
    def __init__(self, log_level: int = logging.DEBUG):
        self.log_level = log_level

    def on_event(self, event: CompositionEvent) -> None:
        if event.type == CompositionEventType.BUILD:
            logger.log(self.log_level, f"Built level '{event.blueprint}' (trace={event.metadata.get('trace')})")
        elif event.type == CompositionEventType.HOOK_REGISTERED:
            logger.log(self.log_level, f"Registered hook '{event.hook}' at position {event.metadata.get('position')}")
        elif event.type == CompositionEventType.HOOK_DISPATCH:
            logger.log(self.log_level, f"Dispatched hook '{event.hook}' on '{event.blueprint}'")
        elif event.type == CompositionEventType.CREATE_COMPLETE:
            logger.log(self.log_level, f"Created '{event.blueprint}' in {event.duration:.6f}s")


class RecordingDiagnosticListener:
    """Keeps every event in memory; handy in tests and the CLI."""
    def __init__(self):
        self.events: List[CompositionEvent] = []

    def on_event(self, event: CompositionEvent) -> None:
        self.events.append(event)

    def of_type(self, event_type: CompositionEventType) -> List[CompositionEvent]:
        return [e for e in self.events if e.type == event_type]


class Diagnostics:
    """Coordinator for diagnostic listeners."""
    def __init__(self):
        self._listeners: List[DiagnosticListener] = []

    def add_listener(self, listener: DiagnosticListener) -> None:
        """Add a diagnostic listener."""
        self._listeners.append(listener)

    @property
    def enabled(self) -> bool:
        return bool(self._listeners)

    def emit(self, event_type: CompositionEventType, **kwargs) -> None:
        """Emit a diagnostic event to all listeners."""
        if not self._listeners:
            return
        event = CompositionEvent(type=event_type, **kwargs)
        for listener in self._listeners:
            try:
                listener.on_event(event)
            except Exception as e:
                # Diagnostics must never break construction
                logger.error(f"Diagnostic listener error: {e}")
