"""
Data Models (DTOs - Data Transfer Objects)

This module contains all dataclass definitions used throughout the application.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional

from models.modules import Module


@dataclass
class LogEntry:
    """Represents a single normalized access log hit"""
    timestamp: datetime
    host: str
    path: str
    method: Optional[str] = None
    protocol: Optional[str] = None
    status_code: Optional[int] = None
    bytes_sent: int = 0
    serve_time_us: int = 0
    referrer: Optional[str] = None
    user_agent: Optional[str] = None
    country: Optional[str] = None
    continent: Optional[str] = None


@dataclass
class HealthStatus:
    """Health check response"""
    status: str
    log_file_exists: bool
    path: str
    size_bytes: int
    total_lines: int


@dataclass
class Metrics:
    """
    Raw counters of one ranked entry.
    Percentages, averages and display strings are derived at render time.
    """
    data: Optional[str]
    hits: int = 0
    visitors: int = 0
    bw: int = 0
    cumts: int = 0
    protocol: Optional[str] = None
    method: Optional[str] = None


@dataclass
class HolderItem:
    """One ranked entry, optionally owning a detail list of child entries"""
    metrics: Metrics
    sub_items: List[Metrics] = field(default_factory=list)


@dataclass
class Holder:
    """Ranked entries of one module"""
    module: Module
    items: List[HolderItem] = field(default_factory=list)

    def max_hits(self) -> int:
        return max((it.metrics.hits for it in self.items), default=0)

    def max_visitors(self) -> int:
        return max((it.metrics.visitors for it in self.items), default=0)


@dataclass
class ResultSet:
    """Per-module holders; modules without data answer an empty holder"""
    holders: Dict[Module, Holder] = field(default_factory=dict)

    def holder(self, module: Module) -> Holder:
        return self.holders.get(module) or Holder(module=module)


@dataclass
class LoggerTotals:
    """Tallies kept while reading the log"""
    processed: int = 0
    invalid: int = 0
    excluded: int = 0
    elapsed_seconds: int = 0
    bandwidth: int = 0


@dataclass
class InputDescriptor:
    """Where the log came from (a file path, or streamed input)"""
    path: Optional[str] = None
    streamed: bool = False


@dataclass
class Summary:
    """Top-of-report dashboard counters"""
    processed: int
    invalid: int
    excluded: int
    unique_visitors: int
    unique_files: int
    referrers: int
    unique_not_found: int
    static_files: int
    elapsed_seconds: int
    log_size: str
    bandwidth: int
    log_path: str


@dataclass(frozen=True)
class RenderOptions:
    """Formatting switches honored by the renderer"""
    serve_usecs: bool = True
    append_protocol: bool = True
    append_method: bool = True
    output_n: int = 10
