"""Unit tests for access record parsing and classification."""

import pytest

from services.parser import UNKNOWN, LogParser

CHROME_WIN = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)
EDGE_WIN = CHROME_WIN + " Edg/120.0.2210.91"
FIREFOX_LINUX = "Mozilla/5.0 (X11; Ubuntu; Linux x86_64; rv:121.0) Gecko/20100101 Firefox/121.0"
ANDROID = "Mozilla/5.0 (Linux; Android 13; Pixel 7) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/119.0 Mobile Safari/537.36"
IPHONE = "Mozilla/5.0 (iPhone; CPU iPhone OS 17_1 like Mac OS X) AppleWebKit/605.1.15 Version/17.1 Mobile/15E148 Safari/604.1"
GOOGLEBOT = "Mozilla/5.0 (compatible; Googlebot/2.1; +http://www.google.com/bot.html)"


class TestParseJson:
    def test_valid_object(self):
        assert LogParser.parse_json('{"host": "a"}') == {"host": "a"}

    @pytest.mark.parametrize("line", ["not json", "[1, 2]", '"text"'])
    def test_rejects_non_objects(self, line):
        assert LogParser.parse_json(line) is None


class TestNormalize:
    def test_flat_record(self):
        entry = LogParser.normalize(
            {
                "timestamp": "2024-03-01T10:00:00Z",
                "host": "10.0.0.1",
                "method": "get",
                "path": "/index.html",
                "protocol": "HTTP/1.1",
                "status": "200",
                "bytes": "512",
                "duration_ms": 2.5,
                "referrer": "https://example.org/",
                "user_agent": CHROME_WIN,
            }
        )
        assert entry.host == "10.0.0.1"
        assert entry.method == "GET"
        assert entry.path == "/index.html"
        assert entry.status_code == 200
        assert entry.bytes_sent == 512
        assert entry.serve_time_us == 2500
        assert entry.referrer == "https://example.org/"

    def test_combined_request_line(self):
        entry = LogParser.normalize(
            {"time": "2024-03-01T10:00:00Z", "remote_addr": "h", "request": "POST /api HTTP/2.0"}
        )
        assert (entry.method, entry.path, entry.protocol) == ("POST", "/api", "HTTP/2.0")

    def test_nested_variants(self):
        entry = LogParser.normalize(
            {
                "meta": {"timestamp": "2024-03-01T10:00:00Z"},
                "client": {"ip": "10.1.1.1"},
                "request": {"method": "GET", "path": "/x"},
                "response": {"status_code": 500, "bytes": 10},
                "geo": {"country": "FR", "continent": "Europe"},
            }
        )
        assert entry.host == "10.1.1.1"
        assert entry.status_code == 500
        assert entry.bytes_sent == 10
        assert (entry.continent, entry.country) == ("Europe", "FR")

    def test_serve_time_in_seconds(self):
        entry = LogParser.normalize(
            {"timestamp": "2024-03-01T10:00:00Z", "host": "h", "path": "/", "request_time": 0.25}
        )
        assert entry.serve_time_us == 250000

    @pytest.mark.parametrize(
        "raw",
        [
            {"host": "h", "path": "/"},
            {"timestamp": "2024-03-01T10:00:00Z", "path": "/"},
            {"timestamp": "2024-03-01T10:00:00Z", "host": "h"},
        ],
    )
    def test_required_fields(self, raw):
        assert LogParser.normalize(raw) is None

    def test_dash_means_missing(self):
        entry = LogParser.normalize(
            {"timestamp": "2024-03-01T10:00:00Z", "host": "h", "path": "/", "referrer": "-", "user_agent": " "}
        )
        assert entry.referrer is None
        assert entry.user_agent is None


class TestClassification:
    def _entry(self, path, status=200):
        return LogParser.normalize(
            {"timestamp": "2024-03-01T10:00:00Z", "host": "h", "path": path, "status": status}
        )

    def test_static(self):
        assert LogParser.is_static(self._entry("/css/app.CSS?v=3"))
        assert not LogParser.is_static(self._entry("/index.html"))

    def test_not_found(self):
        assert LogParser.is_not_found(self._entry("/x", 404))
        assert not LogParser.is_not_found(self._entry("/x", 200))

    @pytest.mark.parametrize(
        "agent, expected",
        [
            (CHROME_WIN, ("Windows", "Windows 10")),
            (FIREFOX_LINUX, ("Linux", "Linux")),
            (ANDROID, ("Android", "Android 13")),
            (IPHONE, ("iOS", "iOS 17.1")),
            (GOOGLEBOT, ("Crawlers", "Crawlers")),
            (None, (UNKNOWN, UNKNOWN)),
        ],
    )
    def test_detect_os(self, agent, expected):
        assert LogParser.detect_os(agent) == expected

    @pytest.mark.parametrize(
        "agent, expected",
        [
            (CHROME_WIN, ("Chrome", "Chrome 120")),
            (EDGE_WIN, ("Edge", "Edge 120")),
            (FIREFOX_LINUX, ("Firefox", "Firefox 121")),
            (IPHONE, ("Safari", "Safari 17")),
            (GOOGLEBOT, ("Crawlers", "Googlebot")),
            ("something else", (UNKNOWN, UNKNOWN)),
        ],
    )
    def test_detect_browser(self, agent, expected):
        assert LogParser.detect_browser(agent) == expected

    def test_referrer_parts(self):
        ref = "https://www.google.com/search?q=access+logs&hl=en"
        assert LogParser.referring_site(ref) == "www.google.com"
        assert LogParser.keyphrase(ref) == "access logs"
        assert LogParser.keyphrase("https://example.org/?q=x") is None
        assert LogParser.referring_site(None) is None

    def test_status_groups(self):
        assert LogParser.status_class(503) == "5xx Server Errors"
        assert LogParser.status_label(404) == "404 - Not Found"
        assert LogParser.status_label(599) == "599"
