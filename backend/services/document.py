"""
ReportWriter Class - Assembles the HTML report

Streams the document to a sink in a fixed order:
header -> menu -> summary -> one panel per module -> footer.
"""

import sys
from datetime import datetime
from functools import lru_cache
from pathlib import Path
from typing import Optional, TextIO

from loguru import logger

from models.data_models import RenderOptions, Summary
from models.modules import MODULE_INFO, Module
from services.panels import PanelRegistry
from services.renderer import PanelRenderer
from services.summary import GENERAL_ID, SummaryAggregator
from utils.formatters import DEFAULT_CONTEXT, FormatContext

APP_NAME = "Weblog Report"
APP_VERSION = "0.1.0"

ASSETS_DIR = Path(__file__).resolve().parent / "assets"


class ReportWriteError(Exception):
    """The output sink could not be written"""


@lru_cache(maxsize=None)
def load_asset(name: str) -> str:
    """Read an inline asset (CSS/JS) shipped next to this module"""
    return (ASSETS_DIR / name).read_text(encoding="utf-8").strip()


class ReportWriter:
    """
    Writes a complete report in one pass.
    Responsibilities:
    - Emit header (inline assets), menu, summary and footer
    - Render every module with a registered panel, in enumeration order
    - Close the sink on every exit path
    """

    def __init__(
        self,
        registry: PanelRegistry,
        options: RenderOptions,
        ctx: FormatContext = DEFAULT_CONTEXT,
        now: Optional[datetime] = None,
    ):
        self.registry = registry
        self.options = options
        self.ctx = ctx
        self.now = now
        self.renderer = PanelRenderer(options, ctx)

    def write(self, sink: TextIO, store, summary: Summary) -> None:
        """store answers holder(module) and get_module_maxima(module)"""
        now = (self.now or datetime.now()).strftime("%Y-%m-%d %H:%M:%S")
        try:
            self._write_header(sink, now)
            self._write_menu(sink, now)
            SummaryAggregator.render(sink, summary, self.ctx)

            for module in Module:
                schema = self.registry.lookup(module)
                if schema is None:
                    logger.debug(f"No panel registered for {module.name}, skipping")
                    continue
                self.renderer.render(
                    sink,
                    schema,
                    store.holder(module),
                    summary.processed,
                    maxima=store.get_module_maxima(module),
                )

            self._write_footer(sink)
            sink.flush()
        except (OSError, ValueError) as e:
            logger.error(f"Report write failed: {e}")
            raise ReportWriteError(f"Cannot write report: {e}") from e
        finally:
            self._close(sink)

        logger.info(f"Report written ({len(self.registry)} panels)")

    @staticmethod
    def _close(sink: TextIO) -> None:
        if sink in (sys.stdout, sys.__stdout__):
            sink.flush()
            return
        try:
            sink.close()
        except OSError as e:
            logger.warning(f"Closing report sink failed: {e}")

    @staticmethod
    def _write_header(sink: TextIO, now: str) -> None:
        sink.write("<!DOCTYPE html>\n")
        sink.write("<html lang=\"en\"><head>\n")
        sink.write(f"<title>Server Statistics - {now}</title>\n")
        sink.write("<meta charset=\"UTF-8\" />")
        sink.write("<meta name=\"robots\" content=\"noindex, nofollow\" />\n")
        sink.write(f"<script type=\"text/javascript\">\n{load_asset('report.js')}\n</script>\n")
        sink.write(f"<style type=\"text/css\">\n{load_asset('report.css')}\n</style>\n")
        sink.write("</head>\n")
        sink.write("<body>\n")
        sink.write("<div id=\"layout\">")

    def _write_menu(self, sink: TextIO, now: str) -> None:
        sink.write("<div id=\"menu\">")
        sink.write(f"<a class=\"menu-heading\" href=\"#{GENERAL_ID}\">{APP_NAME}</a>")
        sink.write("<ul>")
        sink.write("<li><a href=\"#\">Overall</a></li>")
        for module in self.registry.modules():
            info = MODULE_INFO[module]
            sink.write(f"<li><a href=\"#{info.id}\">{info.menu}</a></li>")
        sink.write("<li class=\"menu-item-divided\"></li>")
        sink.write("</ul>")
        sink.write(f"<p>Generated by<br />{APP_NAME} {APP_VERSION}<br />&#8212;<br />{now}</p>")
        sink.write("</div> <!-- menu -->")
        sink.write("<div id=\"main\">")
        sink.write("<div class=\"l-box\">")

    @staticmethod
    def _write_footer(sink: TextIO) -> None:
        sink.write("</div> <!-- l-box -->\n")
        sink.write("</div> <!-- main -->\n")
        sink.write("</div> <!-- layout -->\n")
        sink.write("</body>\n")
        sink.write("</html>")


def write_report(
    store,
    summary: Summary,
    registry: PanelRegistry,
    options: RenderOptions,
    path: Optional[str] = None,
    ctx: FormatContext = DEFAULT_CONTEXT,
) -> None:
    """Render the report to path, or to stdout when no path is given"""
    writer = ReportWriter(registry, options, ctx)
    if path is None:
        writer.write(sys.stdout, store, summary)
        return

    try:
        sink = open(path, "w", encoding="utf-8")
    except OSError as e:
        raise ReportWriteError(f"Cannot open report file {path}: {e}") from e
    writer.write(sink, store, summary)
