"""
LogParser Class - Handles parsing and normalization

This module parses raw access log records (JSON lines) into structured
LogEntry objects and classifies them for the report modules.
"""

import json
import re
from http import HTTPStatus
from typing import Any, Dict, Optional, Tuple
from urllib.parse import parse_qs, urlsplit

from models.data_models import LogEntry
from utils.helpers import get_nested, parse_ts, safe_float, safe_int

STATIC_EXTENSIONS = (
    ".css", ".js", ".png", ".jpg", ".jpeg", ".gif", ".ico", ".svg", ".webp",
    ".woff", ".woff2", ".ttf", ".eot", ".map", ".txt", ".pdf", ".zip", ".mp4",
    ".mp3", ".swf", ".flv", ".bmp", ".xml",
)

# (marker in agent, family, version regex)
OS_SIGNATURES = (
    ("Windows NT 10.0", "Windows", None),
    ("Windows NT 6.3", "Windows", None),
    ("Windows NT 6.1", "Windows", None),
    ("Windows", "Windows", None),
    ("Android", "Android", r"Android ([\d.]+)"),
    ("iPhone", "iOS", r"OS ([\d_]+)"),
    ("iPad", "iOS", r"OS ([\d_]+)"),
    ("Mac OS X", "macOS", r"Mac OS X ([\d_.]+)"),
    ("CrOS", "Chrome OS", None),
    ("Ubuntu", "Linux", None),
    ("Linux", "Linux", None),
)

WINDOWS_VERSIONS = {
    "Windows NT 10.0": "Windows 10",
    "Windows NT 6.3": "Windows 8.1",
    "Windows NT 6.1": "Windows 7",
}

# Order matters: Edge and Opera agents also claim Chrome/Safari
BROWSER_SIGNATURES = (
    ("Edg/", "Edge", r"Edg/([\d.]+)"),
    ("OPR/", "Opera", r"OPR/([\d.]+)"),
    ("Firefox/", "Firefox", r"Firefox/([\d.]+)"),
    ("Chrome/", "Chrome", r"Chrome/([\d.]+)"),
    ("Safari/", "Safari", r"Version/([\d.]+)"),
    ("MSIE", "MSIE", r"MSIE ([\d.]+)"),
    ("Trident/", "MSIE", r"rv:([\d.]+)"),
    ("curl/", "curl", r"curl/([\d.]+)"),
)

CRAWLER_MARKERS = ("bot", "crawler", "spider", "slurp")
CRAWLER_NAME = re.compile(r"([\w\-]*(?:bot|crawler|spider|slurp)[\w\-]*)", re.IGNORECASE)

UNKNOWN = "Unknown"


class LogParser:
    """
    Parses raw log lines into structured LogEntry objects.
    Responsibilities:
    - Parse JSON lines
    - Normalize various access log record shapes
    - Classify entries (static, not found, agent family, referrer parts)
    """

    @staticmethod
    def parse_json(line: str) -> Optional[Dict[str, Any]]:
        """Parse JSON line, return None if invalid"""
        try:
            obj = json.loads(line)
        except Exception:
            return None
        return obj if isinstance(obj, dict) else None

    @staticmethod
    def normalize(raw: Dict[str, Any]) -> Optional[LogEntry]:
        """
        Normalize a raw record into a LogEntry.
        Timestamp, host and path are required; anything else may be missing.
        """
        ts = parse_ts(
            raw.get("timestamp")
            or raw.get("time")
            or get_nested(raw, ("meta", "timestamp"))
        )
        if ts is None:
            return None

        host = (
            raw.get("host")
            or raw.get("ip")
            or raw.get("remote_addr")
            or get_nested(raw, ("client", "ip"))
        )

        method = raw.get("method") or get_nested(raw, ("request", "method"))
        path = raw.get("path") or raw.get("url") or get_nested(raw, ("request", "path"))
        protocol = raw.get("protocol") or get_nested(raw, ("request", "protocol"))

        # Combined request line: "GET /index.html HTTP/1.1"
        request_line = raw.get("request")
        if isinstance(request_line, str):
            parts = request_line.split()
            if len(parts) == 3:
                method, path, protocol = method or parts[0], path or parts[1], protocol or parts[2]
            elif len(parts) == 1:
                path = path or parts[0]

        if not host or not path:
            return None

        status_raw = (
            raw.get("status_code")
            or raw.get("status")
            or get_nested(raw, ("response", "status_code"))
        )

        bytes_raw = (
            raw.get("bytes")
            or raw.get("size")
            or raw.get("body_bytes_sent")
            or get_nested(raw, ("response", "bytes"))
        )

        return LogEntry(
            timestamp=ts,
            host=str(host),
            path=str(path),
            method=str(method).upper() if method is not None else None,
            protocol=str(protocol) if protocol is not None else None,
            status_code=safe_int(status_raw),
            bytes_sent=max(0, safe_int(bytes_raw) or 0),
            serve_time_us=LogParser._serve_time_us(raw),
            referrer=LogParser._clean(raw.get("referrer") or raw.get("referer")),
            user_agent=LogParser._clean(raw.get("user_agent") or raw.get("agent")),
            country=LogParser._clean(raw.get("country") or get_nested(raw, ("geo", "country"))),
            continent=LogParser._clean(raw.get("continent") or get_nested(raw, ("geo", "continent"))),
        )

    @staticmethod
    def _serve_time_us(raw: Dict[str, Any]) -> int:
        """Time served in microseconds, from whichever unit the record uses"""
        for key, factor in (
            ("serve_time_us", 1),
            ("duration_us", 1),
            ("duration_ms", 1000),
            ("latency_ms", 1000),
            ("request_time", 1000 * 1000),
        ):
            value = safe_float(raw.get(key))
            if value is not None:
                return max(0, int(value * factor))
        return 0

    @staticmethod
    def _clean(value: Any) -> Optional[str]:
        if value is None:
            return None
        text = str(value).strip()
        return text if text and text != "-" else None

    @staticmethod
    def is_static(entry: LogEntry) -> bool:
        """Check if entry requests static content, by file extension"""
        path = urlsplit(entry.path).path.lower()
        return path.endswith(STATIC_EXTENSIONS)

    @staticmethod
    def is_not_found(entry: LogEntry) -> bool:
        return entry.status_code == 404

    @staticmethod
    def is_crawler(agent: Optional[str]) -> bool:
        lowered = (agent or "").lower()
        return any(marker in lowered for marker in CRAWLER_MARKERS)

    @staticmethod
    def detect_os(agent: Optional[str]) -> Tuple[str, str]:
        """Return (family, version label) for a user agent"""
        if not agent:
            return UNKNOWN, UNKNOWN
        for marker, family, pattern in OS_SIGNATURES:
            if marker not in agent:
                continue
            if family == "Windows":
                return family, WINDOWS_VERSIONS.get(marker, "Windows")
            if pattern:
                m = re.search(pattern, agent)
                if m:
                    return family, f"{family} {m.group(1).replace('_', '.')}"
            return family, family
        if LogParser.is_crawler(agent):
            return "Crawlers", "Crawlers"
        return UNKNOWN, UNKNOWN

    @staticmethod
    def detect_browser(agent: Optional[str]) -> Tuple[str, str]:
        """Return (family, version label) for a user agent"""
        if not agent:
            return UNKNOWN, UNKNOWN
        if LogParser.is_crawler(agent):
            m = CRAWLER_NAME.search(agent)
            return "Crawlers", m.group(1) if m else "Crawler"
        for marker, family, pattern in BROWSER_SIGNATURES:
            if marker not in agent:
                continue
            m = re.search(pattern, agent)
            if m:
                major = m.group(1).split(".")[0]
                return family, f"{family} {major}"
            return family, family
        return UNKNOWN, UNKNOWN

    @staticmethod
    def referring_site(referrer: Optional[str]) -> Optional[str]:
        if not referrer:
            return None
        site = urlsplit(referrer).netloc
        return site or None

    @staticmethod
    def keyphrase(referrer: Optional[str]) -> Optional[str]:
        """Search terms of a Google referrer (the q= parameter)"""
        if not referrer:
            return None
        parts = urlsplit(referrer)
        if "google." not in parts.netloc:
            return None
        terms = parse_qs(parts.query).get("q")
        if not terms or not terms[0].strip():
            return None
        return terms[0].strip()

    @staticmethod
    def status_class(code: int) -> str:
        """'2xx Success' style group for a status code"""
        classes = {
            1: "1xx Informational",
            2: "2xx Success",
            3: "3xx Redirection",
            4: "4xx Client Errors",
            5: "5xx Server Errors",
        }
        return classes.get(code // 100, UNKNOWN)

    @staticmethod
    def status_label(code: int) -> str:
        try:
            return f"{code} - {HTTPStatus(code).phrase}"
        except ValueError:
            return str(code)
