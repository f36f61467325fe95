"""
Scheduler Extender - HTTP client for external scheduling extenders.

A scheduler delegates part of its placement decision to extender services:
``filter`` removes infeasible nodes and ``prioritize`` returns weighted
per-node scores. Both are single synchronous JSON exchanges over HTTP(S).
"""

from .algorithm import SchedulerExtender
from .config import DEFAULT_EXTENDER_TIMEOUT, ExtenderConfig, LoggingConfig, TLSClientConfig
from .errors import ConfigError, ExtenderError, ExtenderLogicError, TransportError
from .extender import HTTPExtender
from .transport import build_tls_context, make_transport
from .types import (
    Candidate,
    CandidateList,
    ExtenderArgs,
    FilterResult,
    HostPriority,
    HostPriorityList,
    PlacementRequest,
)

__all__ = [
    "SchedulerExtender",
    "HTTPExtender",
    "ExtenderConfig",
    "TLSClientConfig",
    "LoggingConfig",
    "DEFAULT_EXTENDER_TIMEOUT",
    "build_tls_context",
    "make_transport",
    "PlacementRequest",
    "Candidate",
    "CandidateList",
    "ExtenderArgs",
    "FilterResult",
    "HostPriority",
    "HostPriorityList",
    "ExtenderError",
    "ConfigError",
    "TransportError",
    "ExtenderLogicError",
]
