"""
Panel Registry - Which columns each module shows

Static configuration: one PanelSchema per module, looked up by module.
Adding a panel means appending a row to PANELS.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, Iterator, Optional, Tuple

from models.modules import Module


class RenderStrategy(Enum):
    """Column layout families"""
    VISITORS = "visitors"
    REQUESTS = "requests"
    GENERIC = "generic"


@dataclass(frozen=True)
class PanelSchema:
    module: Module
    strategy: RenderStrategy
    visitors: bool = True
    hits: bool = True
    percent: bool = True
    bandwidth: bool = True
    avgts: bool = True
    protocol: bool = False
    method: bool = False
    data: bool = True
    graph: bool = False
    sub_graph: bool = False
    visitors_graph: bool = False
    numeric: bool = False


PANELS: Tuple[PanelSchema, ...] = (
    PanelSchema(Module.VISITORS, RenderStrategy.VISITORS, graph=True, visitors_graph=True, numeric=True),
    PanelSchema(Module.REQUESTS, RenderStrategy.REQUESTS, protocol=True, method=True),
    PanelSchema(Module.REQUESTS_STATIC, RenderStrategy.REQUESTS, protocol=True, method=True),
    PanelSchema(Module.NOT_FOUND, RenderStrategy.REQUESTS, protocol=True, method=True),
    PanelSchema(Module.HOSTS, RenderStrategy.GENERIC, graph=True, visitors_graph=True),
    PanelSchema(Module.OS, RenderStrategy.GENERIC, graph=True, sub_graph=True, visitors_graph=True),
    PanelSchema(Module.BROWSERS, RenderStrategy.GENERIC, graph=True, sub_graph=True, visitors_graph=True),
    PanelSchema(Module.REFERRERS, RenderStrategy.GENERIC),
    PanelSchema(Module.REFERRING_SITES, RenderStrategy.GENERIC),
    PanelSchema(Module.KEYPHRASES, RenderStrategy.GENERIC),
    PanelSchema(Module.STATUS_CODES, RenderStrategy.GENERIC, numeric=True),
)

GEO_PANEL = PanelSchema(Module.GEO_LOCATION, RenderStrategy.GENERIC)


class PanelRegistry:
    """
    Read-only module -> PanelSchema lookup.
    Responsibilities:
    - Reject a second schema for the same module
    - Answer None for modules without a panel
    - List registered modules in report order
    """

    def __init__(self, panels: Iterable[PanelSchema]):
        self._panels: Dict[Module, PanelSchema] = {}
        for schema in panels:
            if schema.module in self._panels:
                raise ValueError(f"Duplicate panel schema for module {schema.module.name}")
            self._panels[schema.module] = schema

    def lookup(self, module: Module) -> Optional[PanelSchema]:
        return self._panels.get(module)

    def modules(self) -> Iterator[Module]:
        """Registered modules, in enumeration order"""
        return (m for m in Module if m in self._panels)

    def __len__(self) -> int:
        return len(self._panels)


def build_registry(geolocation: bool = False) -> PanelRegistry:
    """Default registry; the geo location panel exists only when enabled"""
    panels = PANELS + (GEO_PANEL,) if geolocation else PANELS
    return PanelRegistry(panels)
