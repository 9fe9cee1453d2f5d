"""
Trace Module.

This package contains tracing components:
- Trace context
- Trace collector
"""

from embedvec.core.trace.trace_context import TraceContext
from embedvec.core.trace.trace_collector import TraceCollector

__all__ = ['TraceContext', 'TraceCollector']
