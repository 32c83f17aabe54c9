"""
Shared fixtures: an in-memory stand-in for the Playwright browser so the
pipeline can run without Chromium or network access.
"""
import copy
import json

import pytest
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError

FAKE_PDF_HEADER = b"%PDF-1.4\n"


class FakeElement:
    def __init__(self, page):
        self.page = page

    def screenshot(self, **kwargs):
        self.page.calls.append(("screenshot", kwargs))
        return b"\x89PNG-" + str(len(self.page.html)).encode()


class FakePage:
    def __init__(self, context):
        self.context = context
        self.browser = context.browser
        self.html = ""
        self.calls = []

    def set_content(self, html, wait_until=None, timeout=None):
        self.calls.append(("set_content", wait_until, timeout))
        self.html = html
        for marker in self.browser.fail_load_on:
            if wait_until == "networkidle" and marker in html:
                raise PlaywrightTimeoutError(f"Timeout {timeout}ms exceeded.")

    def wait_for_selector(self, selector, timeout=None):
        self.calls.append(("wait_for_selector", selector, timeout))
        if self.browser.no_iframe:
            raise PlaywrightTimeoutError(f"Timeout {timeout}ms exceeded.")
        return FakeElement(self)

    def wait_for_timeout(self, ms):
        self.calls.append(("wait_for_timeout", ms))
        self.browser.waits.append(ms)

    def pdf(self, **kwargs):
        self.calls.append(("pdf", kwargs))
        self.browser.pdf_calls.append(kwargs)
        return FAKE_PDF_HEADER + self.html.encode("utf-8")


class FakeContext:
    def __init__(self, browser, viewport=None, device_scale_factor=None):
        self.browser = browser
        self.viewport = viewport
        self.device_scale_factor = device_scale_factor
        self.pages = []
        self.closed = False

    def new_page(self):
        page = FakePage(self)
        self.pages.append(page)
        return page

    def close(self):
        self.closed = True


class FakeBrowser:
    def __init__(self, fail_load_on=(), no_iframe=False):
        self.fail_load_on = list(fail_load_on)
        self.no_iframe = no_iframe
        self.contexts = []
        self.waits = []
        self.pdf_calls = []
        self.closed = False

    def new_context(self, viewport=None, device_scale_factor=None):
        context = FakeContext(self, viewport, device_scale_factor)
        self.contexts.append(context)
        return context

    def close(self):
        self.closed = True


class FakeChromium:
    def __init__(self, browser):
        self.browser = browser
        self.launch_kwargs = None

    def launch(self, **kwargs):
        self.launch_kwargs = kwargs
        return self.browser


class FakePlaywright:
    def __init__(self, browser):
        self.chromium = FakeChromium(browser)

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False


BASE_CONFIG = {
    "symbols": [
        {"symbol": "EXCH:SYM1", "name": "SYM1"},
        {"symbol": "EXCH:SYM2", "name": "SYM2"},
    ],
    "timeframes": [
        {"interval": "D", "label": "1D"},
        {"interval": "60", "label": "1H"},
        {"interval": "15", "label": "15m"},
    ],
    "chart": {
        "timezone": "Etc/UTC",
        "theme": "light",
        "style": "1",
        "locale": "en",
        "studies": ["RSI@tv-basicstudies"],
    },
    "capture": {
        "viewportWidth": 1600,
        "viewportHeight": 900,
        "deviceScaleFactor": 2,
        "pageLoadTimeoutMs": 60000,
        "iframeTimeoutMs": 30000,
        "chartLoadWaitMs": 10,
    },
    "pdf": {
        "format": "A4",
        "landscape": True,
        "paddingMm": 5,
        "gapMm": 3,
        "topChartFlex": 3,
        "bottomChartFlex": 2,
    },
    "output": {"directory": "./output", "print": False},
}


@pytest.fixture
def raw_config(tmp_path):
    config = copy.deepcopy(BASE_CONFIG)
    config["output"]["directory"] = str(tmp_path / "out")
    return config


@pytest.fixture
def config(raw_config):
    from chart_printer.config import validate_config

    return validate_config(raw_config)


@pytest.fixture
def config_file(tmp_path, raw_config):
    path = tmp_path / "config.json"
    path.write_text(json.dumps(raw_config))
    return path


@pytest.fixture
def browser():
    return FakeBrowser()
