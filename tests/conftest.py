"""Pytest configuration and shared fixtures for report tests."""

from __future__ import annotations

import io
import json
from pathlib import Path
from typing import Any, Callable, Dict, List

import pytest

from models.data_models import HolderItem, Metrics

CHROME_WIN = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)
FIREFOX_LINUX = "Mozilla/5.0 (X11; Ubuntu; Linux x86_64; rv:121.0) Gecko/20100101 Firefox/121.0"
GOOGLEBOT = "Mozilla/5.0 (compatible; Googlebot/2.1; +http://www.google.com/bot.html)"


class RecordingSink(io.StringIO):
    """StringIO that keeps its content after being closed"""

    output = ""

    def close(self) -> None:
        if not self.closed:
            self.output = self.getvalue()
        super().close()


def make_item(data, hits, visitors=0, bw=0, cumts=0, children=(), protocol=None, method=None) -> HolderItem:
    return HolderItem(
        metrics=Metrics(
            data=data,
            hits=hits,
            visitors=visitors,
            bw=bw,
            cumts=cumts,
            protocol=protocol,
            method=method,
        ),
        sub_items=list(children),
    )


@pytest.fixture
def item_factory() -> Callable[..., HolderItem]:
    return make_item


@pytest.fixture
def recording_sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def access_records() -> List[Dict[str, Any]]:
    """A small day of traffic across two dates"""
    return [
        {
            "timestamp": "2024-03-01T10:00:00Z", "host": "10.0.0.1", "request": "GET /index.html HTTP/1.1",
            "status": 200, "bytes": 1000, "duration_ms": 2, "user_agent": CHROME_WIN,
            "referrer": "https://www.google.com/search?q=access+logs",
        },
        {
            "timestamp": "2024-03-01T10:05:00Z", "host": "10.0.0.1", "request": "GET /index.html HTTP/1.1",
            "status": 200, "bytes": 1000, "duration_ms": 4, "user_agent": CHROME_WIN,
        },
        {
            "timestamp": "2024-03-01T11:00:00Z", "host": "10.0.0.2", "method": "GET", "path": "/app.css",
            "protocol": "HTTP/1.1", "status": 200, "bytes": 500, "user_agent": FIREFOX_LINUX,
            "referrer": "https://example.org/blog",
        },
        {
            "timestamp": "2024-03-02T09:00:00Z", "host": "10.0.0.3", "method": "GET", "path": "/missing",
            "status": 404, "bytes": 100, "user_agent": GOOGLEBOT, "geo": {"continent": "Europe", "country": "FR"},
        },
        {
            "timestamp": "2024-03-02T09:30:00Z", "host": "10.0.0.2", "method": "POST", "path": "/api/login",
            "status": 302, "bytes": 0, "user_agent": FIREFOX_LINUX,
        },
    ]


@pytest.fixture
def write_jsonl(tmp_path: Path) -> Callable[..., Path]:
    def _write(records: List[Any], name: str = "access.jsonl") -> Path:
        path = tmp_path / name
        with open(path, "w", encoding="utf-8") as f:
            for rec in records:
                f.write((rec if isinstance(rec, str) else json.dumps(rec)) + "\n")
        return path

    return _write
