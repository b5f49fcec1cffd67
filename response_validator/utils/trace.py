"""
Tracing utility for the validation pipeline.

The tracer is the pipeline's observability hook: every stage emits
structured TraceEvents, which are logged, kept in a bounded per-trace
history and forwarded to any registered listeners. Inject your own
PipelineTracer into ResponseValidator to capture events, or register a
listener on the shared instance returned by get_tracer().
"""

import logging
import threading
import time
from collections import OrderedDict
from contextlib import contextmanager
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional
from uuid import uuid4

logger = logging.getLogger(__name__)

TraceListener = Callable[["TraceEvent"], None]


@dataclass
class TraceEvent:
    """Single trace event in the pipeline."""
    trace_id: str
    event_id: str
    timestamp: str
    module: str
    function: str
    event_type: str  # START, END, INFO, ERROR
    duration_ms: Optional[float] = None
    details: Optional[Dict[str, Any]] = None
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class PipelineTracer:
    """
    Records trace events for validation calls.

    History is bounded to max_traces traces; the oldest trace is evicted
    first. Listener exceptions are logged and never reach the pipeline.
    """

    def __init__(self, max_traces: int = 1000):
        self.max_traces = max_traces
        self.traces: "OrderedDict[str, List[TraceEvent]]" = OrderedDict()
        self._listeners: List[TraceListener] = []
        self._lock = threading.Lock()

    def add_listener(self, listener: TraceListener) -> None:
        """Register a callable that receives every TraceEvent."""
        self._listeners.append(listener)

    def remove_listener(self, listener: TraceListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def start_trace(self, trace_id: Optional[str] = None) -> str:
        """Start a new trace for a validation call."""
        if not trace_id:
            trace_id = str(uuid4())[:8]

        with self._lock:
            self.traces[trace_id] = []
            while len(self.traces) > self.max_traces:
                self.traces.popitem(last=False)

        self._add_event(
            trace_id=trace_id,
            module="tracer",
            function="start_trace",
            event_type="START",
            details={"trace_started": trace_id}
        )
        return trace_id

    def _add_event(
        self,
        trace_id: str,
        module: str,
        function: str,
        event_type: str,
        details: Optional[Dict[str, Any]] = None,
        error: Optional[str] = None,
        duration_ms: Optional[float] = None
    ) -> TraceEvent:
        """Add an event to the trace."""
        event = TraceEvent(
            trace_id=trace_id,
            event_id=str(uuid4())[:8],
            timestamp=datetime.now(timezone.utc).isoformat(),
            module=module,
            function=function,
            event_type=event_type,
            duration_ms=duration_ms,
            details=details,
            error=error
        )

        with self._lock:
            if trace_id not in self.traces:
                self.traces[trace_id] = []
            self.traces[trace_id].append(event)

        if event_type == "START":
            logger.debug(f"[{trace_id}] {module}.{function} STARTED")
        elif event_type == "END":
            duration_str = f" ({duration_ms:.1f}ms)" if duration_ms else ""
            logger.debug(f"[{trace_id}] {module}.{function} COMPLETED{duration_str}")
        elif event_type == "INFO":
            logger.debug(f"[{trace_id}] {module}.{function}: {details}")
        elif event_type == "ERROR":
            logger.error(f"[{trace_id}] {module}.{function} ERROR: {error}")

        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception as e:
                logger.warning(f"Trace listener {listener!r} failed: {e}")

        return event

    @contextmanager
    def trace_function(self, trace_id: str, module: str, function: str, **details):
        """Context manager to trace a block of work."""
        start_time = time.perf_counter()

        self._add_event(
            trace_id=trace_id,
            module=module,
            function=function,
            event_type="START",
            details=details or None
        )

        try:
            yield
        except Exception as e:
            self.trace_error(trace_id, module, function, e)
            raise
        finally:
            duration_ms = (time.perf_counter() - start_time) * 1000
            self._add_event(
                trace_id=trace_id,
                module=module,
                function=function,
                event_type="END",
                duration_ms=duration_ms
            )

    def trace_info(self, trace_id: str, module: str, function: str, **details) -> None:
        """Record an info event in the trace."""
        self._add_event(
            trace_id=trace_id,
            module=module,
            function=function,
            event_type="INFO",
            details=details
        )

    def trace_error(self, trace_id: str, module: str, function: str, error: Any) -> None:
        """Record an error event in the trace."""
        self._add_event(
            trace_id=trace_id,
            module=module,
            function=function,
            event_type="ERROR",
            error=str(error)
        )

    def get_events(self, trace_id: str) -> List[TraceEvent]:
        with self._lock:
            return list(self.traces.get(trace_id, []))

    def clear_trace(self, trace_id: str) -> None:
        with self._lock:
            self.traces.pop(trace_id, None)

    def get_trace_summary(self, trace_id: str) -> Dict[str, Any]:
        """Get a summary of the trace."""
        events = self.get_events(trace_id)
        if not events:
            return {"error": f"Trace {trace_id} not found"}

        start_time = datetime.fromisoformat(events[0].timestamp)
        end_time = datetime.fromisoformat(events[-1].timestamp)
        total_duration = (end_time - start_time).total_seconds() * 1000

        modules_called: List[str] = []
        for event in events:
            if event.module not in modules_called:
                modules_called.append(event.module)

        step_durations = {
            f"{event.module}.{event.function}": event.duration_ms
            for event in events
            if event.event_type == "END" and event.duration_ms
        }

        return {
            "trace_id": trace_id,
            "total_duration_ms": total_duration,
            "total_events": len(events),
            "modules_called": modules_called,
            "step_durations": step_durations,
            "errors": [event.error for event in events if event.event_type == "ERROR"],
            "timeline": [
                {
                    "timestamp": event.timestamp,
                    "module": event.module,
                    "function": event.function,
                    "event_type": event.event_type,
                    "duration_ms": event.duration_ms
                }
                for event in events
            ]
        }


# Global tracer instance
_tracer = PipelineTracer()


def get_tracer() -> PipelineTracer:
    """Get the global tracer instance."""
    return _tracer
