"""
RowEmitter Class - Writes the table body of one panel

Walks a module's ranked entries in the order the store ranked them and
writes a root row per entry followed by its detail rows.
"""

from typing import List, TextIO

from models.data_models import Holder, Metrics, RenderOptions
from services.panels import PanelSchema
from utils.formatters import (
    DEFAULT_CONTEXT,
    FormatContext,
    escape_markup,
    format_bytes,
    format_decimal,
    format_duration,
    format_number,
)
from utils.helpers import get_percentage, scale_to_max

EMPTY_CELL = "<td></td>"


class RowEmitter:
    """
    Writes <tr> rows for a panel.
    Responsibilities:
    - Hide root rows past the display cap
    - Emit detail rows (always hidden) right below their parent
    - Keep every row at the header's column count
    """

    def __init__(
        self,
        schema: PanelSchema,
        options: RenderOptions,
        processed: int,
        max_hit: int,
        max_vis: int,
        graph_column: bool,
        ctx: FormatContext = DEFAULT_CONTEXT,
    ):
        self.schema = schema
        self.options = options
        self.processed = processed
        self.max_hit = max_hit
        self.max_vis = max_vis
        self.graph_column = graph_column
        self.ctx = ctx

    def emit(self, sink: TextIO, holder: Holder) -> int:
        """Write all rows of holder; returns the number of rows written"""
        written = 0
        for idx, item in enumerate(holder.items):
            hide = idx >= self.options.output_n
            sink.write(self.render_row(item.metrics, hide=hide, sub=False))
            written += 1

            for child in item.sub_items:
                sink.write(self.render_row(child, hide=True, sub=True))
                written += 1
        return written

    def render_row(self, metrics: Metrics, hide: bool, sub: bool) -> str:
        kind = "sub" if sub else "root"
        css = f"hide {kind}" if hide else kind
        return f"<tr class='{css}'>{''.join(self.cells(metrics, sub))}</tr>\n"

    def cells(self, metrics: Metrics, sub: bool) -> List[str]:
        schema, opts = self.schema, self.options
        out: List[str] = []

        if schema.visitors:
            out.append(f"<td class='num'>{format_number(metrics.visitors, self.ctx)}</td>")
        if schema.hits:
            out.append(f"<td class='num'>{format_number(metrics.hits, self.ctx)}</td>")
        if schema.percent:
            out.append(self._percent_cell(metrics))
        if schema.bandwidth:
            out.append(f"<td class='num'>{escape_markup(format_bytes(metrics.bw))}</td>")
        if schema.avgts and opts.serve_usecs:
            avgts = metrics.cumts // metrics.hits if metrics.hits else 0
            out.append(f"<td class='num'>{escape_markup(format_duration(avgts))}</td>")
        if schema.protocol and opts.append_protocol:
            out.append(f"<td>{escape_markup(metrics.protocol)}</td>")
        if schema.method and opts.append_method:
            out.append(f"<td>{escape_markup(metrics.method)}</td>")
        if schema.data:
            css = " class='num'" if schema.numeric else ""
            out.append(f"<td{css}>{escape_markup(metrics.data)}</td>")

        if self.graph_column:
            if self.max_hit <= 0 or (sub and not schema.sub_graph):
                out.append(EMPTY_CELL)
            else:
                out.append(self._graph_cell(metrics))
        return out

    def _percent_cell(self, metrics: Metrics) -> str:
        percent = get_percentage(self.processed, metrics.hits)
        is_max = self.max_hit > 0 and metrics.hits == self.max_hit
        css = "max" if is_max else ""
        return f"<td class='num'><span class='{css}'>{format_decimal(percent, self.ctx)}%</span></td>"

    def _graph_cell(self, metrics: Metrics) -> str:
        dual = self.schema.visitors_graph and self.max_vis > 0
        height = 8 if dual else 16

        hits_width = scale_to_max(metrics.hits, self.max_hit)
        bars = [
            f"<div title='Hits: {int(hits_width)}%' class='bar' "
            f"style='width:{hits_width:.2f}%;height:{height}px'></div>"
        ]
        if dual:
            vis_width = scale_to_max(metrics.visitors, self.max_vis)
            bars.append(
                f"<div title='Visitors: {int(vis_width)}%' class='bar light' "
                f"style='width:{vis_width:.2f}%;height:{height}px'></div>"
            )
        return f"<td class='graph'>{''.join(bars)}</td>"
