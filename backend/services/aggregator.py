"""
Aggregator Class - Computes per-module statistics

This module reads the stored access log once and aggregates it into the
ranked per-module holders and scalar counts the report is rendered from.
"""

import time
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Set, Tuple

from loguru import logger

from models.data_models import Holder, HolderItem, LogEntry, LoggerTotals, Metrics, ResultSet
from models.modules import MetricKind, Module
from services.parser import UNKNOWN, LogParser
from services.storage import LogStore


@dataclass
class _Bucket:
    """Running counters for one data key"""
    data: str
    hits: int = 0
    bw: int = 0
    cumts: int = 0
    method: Optional[str] = None
    protocol: Optional[str] = None
    visitor_keys: Set[str] = field(default_factory=set)
    children: Dict[str, "_Bucket"] = field(default_factory=dict)

    def add(self, entry: LogEntry, visitor_key: str) -> None:
        self.hits += 1
        self.bw += entry.bytes_sent
        self.cumts += entry.serve_time_us
        self.visitor_keys.add(visitor_key)
        if self.method is None:
            self.method = entry.method
        if self.protocol is None:
            self.protocol = entry.protocol

    def child(self, key: str) -> "_Bucket":
        if key not in self.children:
            self.children[key] = _Bucket(data=key)
        return self.children[key]

    def to_metrics(self) -> Metrics:
        return Metrics(
            data=self.data,
            hits=self.hits,
            visitors=len(self.visitor_keys),
            bw=self.bw,
            cumts=self.cumts,
            protocol=self.protocol,
            method=self.method,
        )


def _by_hits(buckets: Iterable[Tuple[str, _Bucket]]) -> List[_Bucket]:
    return [b for _, b in sorted(buckets, key=lambda kv: (-kv[1].hits, kv[0]))]


class MetricStore:
    """
    Read-only query surface over aggregated results.
    Responsibilities:
    - Hand out per-module holders
    - Answer module maxima and scalar cardinalities
    """

    def __init__(
        self,
        results: ResultSet,
        unique_visitors: Optional[Dict[Module, int]] = None,
        distinct_data: Optional[Dict[Module, int]] = None,
    ):
        self.results = results
        self._unique_visitors = unique_visitors or {}
        self._distinct_data = distinct_data or {}

    def holder(self, module: Module) -> Holder:
        return self.results.holder(module)

    def get_module_maxima(self, module: Module) -> Tuple[int, int]:
        holder = self.holder(module)
        return holder.max_hits(), holder.max_visitors()

    def get_scalar_metric(self, module: Module, kind: MetricKind) -> int:
        if kind is MetricKind.UNIQUE_VISITORS:
            return self._unique_visitors.get(module, 0)
        return self._distinct_data.get(module, len(self.holder(module).items))


class Aggregator:
    """
    Aggregates access log entries into report modules.
    Responsibilities:
    - Count processed, invalid and excluded lines
    - Accumulate hits, visitors, bandwidth and time served per data key
    - Build detail lists (versions, status codes, countries)
    - Rank entries for display
    """

    def __init__(
        self,
        log_store: LogStore,
        log_parser: LogParser,
        exclude_hosts: Iterable[str] = (),
        geolocation: bool = False,
    ):
        self.store = log_store
        self.parser = log_parser
        self.exclude_hosts = set(exclude_hosts)
        self.geolocation = geolocation

    def build(self) -> Tuple[MetricStore, LoggerTotals]:
        """Read the whole log once; returns the store and the tallies"""
        started = time.time()
        totals = LoggerTotals()
        buckets: Dict[Module, Dict[str, _Bucket]] = {m: {} for m in Module}
        uniques: Dict[Module, Set[str]] = {m: set() for m in Module}

        for line in self.store.read_lines():
            totals.processed += 1
            raw = self.parser.parse_json(line)
            entry = self.parser.normalize(raw) if raw else None
            if entry is None:
                totals.invalid += 1
                continue
            if entry.host in self.exclude_hosts:
                totals.excluded += 1
                continue

            totals.bandwidth += entry.bytes_sent
            self._accumulate(buckets, uniques, entry)

        totals.elapsed_seconds = int(time.time() - started)
        logger.info(
            f"Aggregated {totals.processed} lines "
            f"({totals.invalid} invalid, {totals.excluded} excluded)"
        )

        results = ResultSet({m: self._rank(m, b) for m, b in buckets.items()})
        store = MetricStore(
            results,
            unique_visitors={m: len(keys) for m, keys in uniques.items()},
            distinct_data={m: len(b) for m, b in buckets.items()},
        )
        return store, totals

    def _accumulate(
        self,
        buckets: Dict[Module, Dict[str, _Bucket]],
        uniques: Dict[Module, Set[str]],
        entry: LogEntry,
    ) -> None:
        visitor_key = f"{entry.host}|{entry.timestamp:%Y%m%d}|{entry.user_agent or ''}"

        def add(module: Module, key: str, data: Optional[str] = None) -> _Bucket:
            table = buckets[module]
            if key not in table:
                table[key] = _Bucket(data=data or key)
            bucket = table[key]
            bucket.add(entry, visitor_key)
            uniques[module].add(visitor_key)
            return bucket

        add(Module.VISITORS, f"{entry.timestamp:%Y%m%d}", f"{entry.timestamp:%d/%b/%Y}")

        if self.parser.is_not_found(entry):
            add(Module.NOT_FOUND, entry.path)
        elif self.parser.is_static(entry):
            add(Module.REQUESTS_STATIC, entry.path)
        else:
            add(Module.REQUESTS, entry.path)

        add(Module.HOSTS, entry.host)

        os_family, os_version = self.parser.detect_os(entry.user_agent)
        add(Module.OS, os_family).child(os_version).add(entry, visitor_key)

        browser_family, browser_version = self.parser.detect_browser(entry.user_agent)
        add(Module.BROWSERS, browser_family).child(browser_version).add(entry, visitor_key)

        if entry.referrer:
            add(Module.REFERRERS, entry.referrer)
            site = self.parser.referring_site(entry.referrer)
            if site:
                add(Module.REFERRING_SITES, site)
            phrase = self.parser.keyphrase(entry.referrer)
            if phrase:
                add(Module.KEYPHRASES, phrase)

        if self.geolocation and (entry.country or entry.continent):
            continent = add(Module.GEO_LOCATION, entry.continent or UNKNOWN)
            continent.child(entry.country or UNKNOWN).add(entry, visitor_key)

        if entry.status_code is not None:
            code_class = add(Module.STATUS_CODES, self.parser.status_class(entry.status_code))
            code_class.child(self.parser.status_label(entry.status_code)).add(entry, visitor_key)

    @staticmethod
    def _rank(module: Module, table: Dict[str, _Bucket]) -> Holder:
        """Order entries for display: by hits, or newest date first for visitors"""
        if module is Module.VISITORS:
            ordered = [b for _, b in sorted(table.items(), key=lambda kv: kv[0], reverse=True)]
        else:
            ordered = _by_hits(table.items())

        items = [
            HolderItem(
                metrics=b.to_metrics(),
                sub_items=[c.to_metrics() for c in _by_hits(b.children.items())],
            )
            for b in ordered
        ]
        return Holder(module=module, items=items)
