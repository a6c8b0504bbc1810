"""
LogStore Class - Holds the uploaded access log

The upload is kept on disk as JSONL so the aggregator can re-read it for
every report, and its path is what the report summary sizes and names.
"""

import json
import os
from typing import Any, Dict, Iterable, List, Optional, Tuple

from loguru import logger

from models.data_models import HealthStatus, InputDescriptor

# JSON object keys that may wrap a list of access records
LIST_KEYS = ("logs", "events", "entries", "data", "items")


def extract_records(text: str) -> Tuple[str, Optional[List[Any]]]:
    """
    Work out the shape of an upload.
    Returns (mode, records); records is None when the text is raw JSONL.
    """
    try:
        obj = json.loads(text)
    except ValueError:
        return "raw_jsonl", None

    if isinstance(obj, list):
        return "json_array", obj
    if isinstance(obj, dict):
        for key in LIST_KEYS:
            if isinstance(obj.get(key), list):
                return f"json_object.{key}", obj[key]
        return "single_json_object", [obj]
    return "raw_jsonl", None


class LogStore:
    """
    Keeps the access log the report is built from.
    Responsibilities:
    - Store uploads as JSONL, one access record per line
    - Yield stored lines to the aggregator
    - Describe the stored file (health, report input descriptor)
    """

    def __init__(self, file_path: str):
        self.file_path = file_path

    def save_upload(self, content: bytes) -> Dict[str, Any]:
        """
        Replace the stored log with an upload (JSONL, JSON array, or JSON object).
        Returns the detected mode and how many lines were written or skipped.
        """
        text = content.decode("utf-8", errors="ignore").strip() if content else ""
        if not text:
            raise ValueError("Empty log upload")

        mode, records = extract_records(text)
        if records is None:
            lines = [ln.strip() for ln in text.splitlines() if ln.strip()]
        else:
            lines = [json.dumps(r, ensure_ascii=False) for r in records if isinstance(r, dict)]
        skipped = 0 if records is None else len(records) - len(lines)

        self._write_lines(lines)
        logger.info(f"Stored {len(lines)} access records ({mode}, {skipped} skipped)")
        return {"mode": mode, "written": len(lines), "skipped": skipped}

    def read_lines(self) -> Iterable[str]:
        """Iterator over non-empty stored lines; nothing when no log was uploaded"""
        try:
            with open(self.file_path, "r", encoding="utf-8") as f:
                for line in f:
                    line = line.strip()
                    if line:
                        yield line
        except FileNotFoundError:
            logger.warning(f"Log file not found: {self.file_path}")

    def stat(self) -> HealthStatus:
        exists = os.path.exists(self.file_path)
        return HealthStatus(
            status="ok",
            log_file_exists=exists,
            path=os.path.abspath(self.file_path),
            size_bytes=os.path.getsize(self.file_path) if exists else 0,
            total_lines=sum(1 for _ in self.read_lines()) if exists else 0,
        )

    def source(self) -> InputDescriptor:
        """The stored log is always a file, never streamed input"""
        return InputDescriptor(path=self.file_path, streamed=False)

    def _write_lines(self, lines: List[str]) -> None:
        os.makedirs(os.path.dirname(os.path.abspath(self.file_path)), exist_ok=True)
        with open(self.file_path, "w", encoding="utf-8") as f:
            for line in lines:
                f.write(line + "\n")
