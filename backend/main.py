from __future__ import annotations

import os
import tempfile
from dataclasses import asdict
from typing import Any, Dict, List

from fastapi import FastAPI, File, HTTPException, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse
from loguru import logger

from models.data_models import RenderOptions
from services.aggregator import Aggregator
from services.document import ReportWriteError, write_report
from services.panels import build_registry
from services.parser import LogParser
from services.storage import LogStore
from services.summary import SummaryAggregator
from utils.formatters import FormatContext
from utils.logging_config import configure_logging

# ──────────────────────────────────────────────────────────────────────────────
# Config
# ──────────────────────────────────────────────────────────────────────────────


def env_flag(name: str, default: str = "0") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


def env_list(name: str) -> List[str]:
    return [x.strip() for x in os.getenv(name, "").split(",") if x.strip()]


API_PREFIX = "/api"
LOG_FILE_PATH = os.getenv("LOG_FILE", "./data/access.jsonl")  # stored as JSONL
REPORT_FILE_PATH = os.getenv("REPORT_FILE", "./data/report.html")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

RENDER_OPTIONS = RenderOptions(
    serve_usecs=env_flag("SERVE_USECS", "1"),
    append_protocol=env_flag("APPEND_PROTOCOL", "1"),
    append_method=env_flag("APPEND_METHOD", "1"),
    output_n=int(os.getenv("OUTPUT_N", "10")),
)
GEOLOCATION_ENABLED = env_flag("GEOLOCATION", "0")
EXCLUDE_HOSTS = env_list("EXCLUDE_HOSTS")
FORMAT_CONTEXT = FormatContext(thousands_sep=os.getenv("THOUSANDS_SEP", ","))

configure_logging(LOG_LEVEL)

# ──────────────────────────────────────────────────────────────────────────────
# Services
# ──────────────────────────────────────────────────────────────────────────────

log_store = LogStore(LOG_FILE_PATH)
log_parser = LogParser()
aggregator = Aggregator(log_store, log_parser, exclude_hosts=EXCLUDE_HOSTS, geolocation=GEOLOCATION_ENABLED)
registry = build_registry(geolocation=GEOLOCATION_ENABLED)

# ──────────────────────────────────────────────────────────────────────────────
# App
# ──────────────────────────────────────────────────────────────────────────────

app = FastAPI(title="Weblog Report (Upload Access Logs → HTML Report)")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # dev OK; lock down in prod
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.post(f"{API_PREFIX}/upload-log")
async def upload_log_file(file: UploadFile = File(...)) -> Dict[str, Any]:
    """
    Accepts JSONL, a JSON array, a single JSON object, or a JSON object
    holding a list under logs/events/entries/data/items. Stored as JSONL.
    """
    content = await file.read()
    try:
        saved = log_store.save_upload(content)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return {"status": "ok", "saved_as": "jsonl", **saved, "path": os.path.abspath(LOG_FILE_PATH)}


@app.get(f"{API_PREFIX}/health")
def health() -> Dict[str, Any]:
    return asdict(log_store.stat())


@app.get(f"{API_PREFIX}/summary")
def summary() -> Dict[str, Any]:
    store, totals = aggregator.build()
    collected = SummaryAggregator(store, totals, log_store.source()).collect()
    return {"summary": asdict(collected)}


@app.get(f"{API_PREFIX}/report")
def report() -> FileResponse:
    store, totals = aggregator.build()
    collected = SummaryAggregator(store, totals, log_store.source()).collect()

    report_dir = os.path.dirname(os.path.abspath(REPORT_FILE_PATH))
    os.makedirs(report_dir, exist_ok=True)

    # Render beside the target; swapped in only once complete
    with tempfile.NamedTemporaryFile(dir=report_dir, suffix=".html.tmp", delete=False) as tmp:
        tmp_path = tmp.name
    try:
        write_report(
            store,
            collected,
            registry,
            RENDER_OPTIONS,
            path=tmp_path,
            ctx=FORMAT_CONTEXT,
        )
    except ReportWriteError as e:
        os.remove(tmp_path)
        logger.error(f"Report generation failed: {e}")
        raise HTTPException(status_code=500, detail=str(e))

    os.replace(tmp_path, REPORT_FILE_PATH)

    return FileResponse(REPORT_FILE_PATH, media_type="text/html")
