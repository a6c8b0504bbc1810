"""
SummaryAggregator Class - General statistics block

Collects scalar totals from the metric store and the logger tallies and
writes the dashboard shown at the top of the report.
"""

import os
from typing import List, TextIO, Tuple

from loguru import logger

from models.data_models import InputDescriptor, LoggerTotals, Summary
from models.modules import MetricKind, Module
from utils.formatters import DEFAULT_CONTEXT, FormatContext, escape_markup, format_bytes, format_number

NOT_AVAILABLE = "N/A"
STDIN_LABEL = "STDIN"
GENERAL_ID = "general"


class SummaryAggregator:
    """
    Builds and renders the Summary.
    Responsibilities:
    - Query per-module cardinalities from the store
    - Size the input log (unless it was streamed)
    - Write the two counter grids
    """

    def __init__(self, store, totals: LoggerTotals, source: InputDescriptor):
        self.store = store
        self.totals = totals
        self.source = source

    def collect(self) -> Summary:
        metric = self.store.get_scalar_metric
        return Summary(
            processed=self.totals.processed,
            invalid=self.totals.invalid,
            excluded=self.totals.excluded,
            unique_visitors=metric(Module.VISITORS, MetricKind.UNIQUE_VISITORS),
            unique_files=metric(Module.REQUESTS, MetricKind.DISTINCT_DATA),
            referrers=metric(Module.REFERRERS, MetricKind.DISTINCT_DATA),
            unique_not_found=metric(Module.NOT_FOUND, MetricKind.DISTINCT_DATA),
            static_files=metric(Module.REQUESTS_STATIC, MetricKind.DISTINCT_DATA),
            elapsed_seconds=self.totals.elapsed_seconds,
            log_size=self.log_size(),
            bandwidth=self.totals.bandwidth,
            log_path=self.source.path or STDIN_LABEL,
        )

    def log_size(self) -> str:
        """Formatted input size, or N/A for streamed/unresolvable input"""
        if self.source.streamed or not self.source.path:
            return NOT_AVAILABLE
        try:
            return format_bytes(os.path.getsize(self.source.path))
        except OSError as e:
            logger.warning(f"Cannot stat log file {self.source.path}: {e}")
            return NOT_AVAILABLE

    @staticmethod
    def render(sink: TextIO, summary: Summary, ctx: FormatContext = DEFAULT_CONTEXT) -> None:
        first: List[Tuple[str, str, str]] = [
            ("Total Requests", format_number(summary.processed, ctx), "label green"),
            ("Failed Requests", format_number(summary.invalid, ctx), "label red"),
            ("Generation Time", f"{summary.elapsed_seconds} secs", "label"),
            ("Unique Visitors", format_number(summary.unique_visitors, ctx), "label"),
            ("Unique Files", format_number(summary.unique_files, ctx), "label"),
            ("Excl. IP Hits", format_number(summary.excluded, ctx), "label"),
        ]
        second: List[Tuple[str, str, str]] = [
            ("Referrers", format_number(summary.referrers, ctx), "label"),
            ("Unique 404", format_number(summary.unique_not_found, ctx), "label"),
            ("Static Files", format_number(summary.static_files, ctx), "label"),
            ("Log Size", escape_markup(summary.log_size), "label"),
            ("Bandwidth", escape_markup(format_bytes(summary.bandwidth)), "label"),
            ("Log File", escape_markup(summary.log_path), "trunc path"),
        ]

        sink.write(f"<h2 id=\"{GENERAL_ID}\">General Statistics</h2>")
        for grid in (first, second):
            sink.write("<div class='grid grid-pad'>")
            for title, value, css in grid:
                sink.write("<div class='col-1-6'><div class='grid-module'>")
                sink.write(f"<div class='col-title trunc'>{title}</div>")
                sink.write(f"<h3 class='{css}'>{value}</h3>")
                sink.write("</div></div>")
            sink.write("</div>")
