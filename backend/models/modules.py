"""
Report Modules

The fixed set of statistical categories a report is made of, with the
display metadata each panel uses (anchor id, heading, description,
column label, menu title).
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict


class Module(Enum):
    """Statistical categories, in report order"""
    VISITORS = "visitors"
    REQUESTS = "requests"
    REQUESTS_STATIC = "requests_static"
    NOT_FOUND = "not_found"
    HOSTS = "hosts"
    OS = "os"
    BROWSERS = "browsers"
    REFERRERS = "referrers"
    REFERRING_SITES = "referring_sites"
    KEYPHRASES = "keyphrases"
    GEO_LOCATION = "geo_location"
    STATUS_CODES = "status_codes"


class MetricKind(Enum):
    """Scalar cardinalities the storage layer can answer per module"""
    UNIQUE_VISITORS = "unique_visitors"
    DISTINCT_DATA = "distinct_data"


@dataclass(frozen=True)
class ModuleInfo:
    id: str
    head: str
    desc: str
    label: str
    menu: str


MODULE_INFO: Dict[Module, ModuleInfo] = {
    Module.VISITORS: ModuleInfo(
        id="visitors",
        head="Unique visitors per day - Including spiders",
        desc="Hits having the same IP, date and agent are a unique visit.",
        label="Date",
        menu="Unique visitors",
    ),
    Module.REQUESTS: ModuleInfo(
        id="requests",
        head="Requested files (Pages-URL)",
        desc="Top requests sorted by hits - percent - bandwidth",
        label="Request",
        menu="Requested files",
    ),
    Module.REQUESTS_STATIC: ModuleInfo(
        id="static_requests",
        head="Requested static files - (Static content: png,js,etc)",
        desc="Top static requests sorted by hits - percent - bandwidth",
        label="Request",
        menu="Requested static files",
    ),
    Module.NOT_FOUND: ModuleInfo(
        id="not_found",
        head="HTTP 404 Not Found URLs",
        desc="Top 404 not found URLs sorted by hits - percent - bandwidth",
        label="Request",
        menu="Not found URLs",
    ),
    Module.HOSTS: ModuleInfo(
        id="hosts",
        head="Hosts",
        desc="Top visitor hosts sorted by hits - percent - bandwidth",
        label="Hosts",
        menu="Hosts",
    ),
    Module.OS: ModuleInfo(
        id="os",
        head="Operating Systems",
        desc="Top operating systems sorted by hits - percent - bandwidth",
        label="OS",
        menu="Operating Systems",
    ),
    Module.BROWSERS: ModuleInfo(
        id="browsers",
        head="Browsers",
        desc="Top browsers sorted by hits - percent - bandwidth",
        label="Browsers",
        menu="Browsers",
    ),
    Module.REFERRERS: ModuleInfo(
        id="referrers",
        head="Referrers URLs",
        desc="Top requested referrers sorted by hits - percent - bandwidth",
        label="Referrers",
        menu="Referrers URLs",
    ),
    Module.REFERRING_SITES: ModuleInfo(
        id="referring_sites",
        head="Referring Sites",
        desc="Top referring sites sorted by hits - percent - bandwidth",
        label="Referring Sites",
        menu="Referring sites",
    ),
    Module.KEYPHRASES: ModuleInfo(
        id="keyphrases",
        head="Keyphrases from Google's search engine",
        desc="Top keyphrases sorted by hits - percent - bandwidth",
        label="Keyphrases",
        menu="Keyphrases",
    ),
    Module.GEO_LOCATION: ModuleInfo(
        id="geolocation",
        head="Geo Location",
        desc="Continent > Country sorted by unique hits - percent - bandwidth",
        label="Location",
        menu="Geo Location",
    ),
    Module.STATUS_CODES: ModuleInfo(
        id="status_codes",
        head="HTTP Status Codes",
        desc="Top HTTP status codes sorted by hits - percent - bandwidth",
        label="Status Codes",
        menu="Status codes",
    ),
}
