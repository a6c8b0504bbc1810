"""
PanelRenderer Class - Renders one module as a report section

Heading, column headers, body, close. The column layout follows the
panel's schema flags and its render strategy.
"""

from typing import Callable, Dict, List, Optional, TextIO, Tuple

from loguru import logger

from models.data_models import Holder, RenderOptions
from models.modules import MODULE_INFO, ModuleInfo
from services.panels import PanelSchema, RenderStrategy
from services.rows import RowEmitter
from utils.formatters import DEFAULT_CONTEXT, FormatContext

TOGGLE = "<span class='r icon-expand' onclick='t(this)'>&#8199;</span>"


def _visitors_tail(schema: PanelSchema, info: ModuleInfo, graph_column: bool) -> List[str]:
    cells = []
    if schema.data:
        cells.append(f"<th>{info.label}</th>")
    if graph_column:
        cells.append(f"<th class='fr'>&nbsp;{TOGGLE}</th>")
    return cells


def _requests_tail(schema: PanelSchema, info: ModuleInfo, graph_column: bool) -> List[str]:
    if not schema.data:
        return []
    return [f"<th>{info.label} {TOGGLE}</th>"]


def _generic_tail(schema: PanelSchema, info: ModuleInfo, graph_column: bool) -> List[str]:
    # The label moves out of the toggle header once a graph column exists
    if graph_column:
        cells = [f"<th>{info.label}</th>"] if schema.data else []
        cells.append(f"<th class='fr'>{TOGGLE}</th>")
        return cells
    if not schema.data:
        return []
    return [f"<th>{info.label}{TOGGLE}</th>"]


_TAILS: Dict[RenderStrategy, Callable[[PanelSchema, ModuleInfo, bool], List[str]]] = {
    RenderStrategy.VISITORS: _visitors_tail,
    RenderStrategy.REQUESTS: _requests_tail,
    RenderStrategy.GENERIC: _generic_tail,
}


def has_graph_column(schema: PanelSchema, max_hit: int) -> bool:
    """Whether the panel gets a bar-chart column"""
    if schema.strategy is RenderStrategy.VISITORS:
        return schema.graph
    if schema.strategy is RenderStrategy.GENERIC:
        return schema.graph and max_hit > 0
    return False


class PanelRenderer:
    """
    Renders a module's holder as an HTML section.
    Responsibilities:
    - Write the heading and description
    - Build column headers from schema flags and options
    - Compute the module maxima once, then hand rows to RowEmitter
    """

    def __init__(self, options: RenderOptions, ctx: FormatContext = DEFAULT_CONTEXT):
        self.options = options
        self.ctx = ctx

    def column_headers(self, schema: PanelSchema, graph_column: bool) -> List[str]:
        opts = self.options
        cells: List[str] = []
        if schema.visitors:
            cells.append("<th>Visitors</th>")
        if schema.hits:
            cells.append("<th>Hits</th>")
        if schema.percent:
            cells.append("<th>%</th>")
        if schema.bandwidth:
            cells.append("<th>Bandwidth</th>")
        if schema.avgts and opts.serve_usecs:
            cells.append("<th>Time&nbsp;served</th>")
        if schema.protocol and opts.append_protocol:
            cells.append("<th>Protocol</th>")
        if schema.method and opts.append_method:
            cells.append("<th>Method</th>")

        info = MODULE_INFO[schema.module]
        cells.extend(_TAILS[schema.strategy](schema, info, graph_column))
        return cells

    def render(
        self,
        sink: TextIO,
        schema: PanelSchema,
        holder: Holder,
        processed: int,
        maxima: Optional[Tuple[int, int]] = None,
    ) -> None:
        """maxima is (max_hits, max_visitors) from the store; derived from holder when omitted"""
        info = MODULE_INFO[schema.module]
        if maxima is None:
            maxima = holder.max_hits(), holder.max_visitors()
        max_hit, max_vis = maxima
        graph_column = has_graph_column(schema, max_hit)

        logger.debug(
            f"Rendering panel {schema.module.name}: {len(holder.items)} entries, "
            f"max_hit={max_hit}, max_vis={max_vis}"
        )

        # Header
        sink.write(f"<h2 id=\"{info.id}\">{info.head}</h2>")
        sink.write(f"<p>{info.desc}</p>")

        # Column headers
        sink.write("<table class=\"pure-table\">\n")
        sink.write("<thead>\n")
        sink.write(f"<tr>{''.join(self.column_headers(schema, graph_column))}</tr>")
        sink.write("</thead>\n")

        # Body
        sink.write("<tbody>\n")
        emitter = RowEmitter(
            schema,
            self.options,
            processed=processed,
            max_hit=max_hit,
            max_vis=max_vis,
            graph_column=graph_column,
            ctx=self.ctx,
        )
        emitter.emit(sink, holder)

        # Close
        sink.write("</tbody>\n")
        sink.write("</table>\n")
