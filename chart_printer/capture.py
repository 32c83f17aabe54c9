"""
CHART CAPTURE: one TradingView widget screenshot per (symbol, timeframe)
========================================================================

Each capture gets its own browser context so cookies and widget state never
leak from one chart into the next. The widget has no "done rendering" event,
so after the iframe appears we simply wait `chartLoadWaitMs` and hope the
studies have finished drawing. Raise the delay if charts come out half drawn.
"""
import base64

from playwright.sync_api import TimeoutError as PlaywrightTimeoutError

from chart_printer.errors import LoadTimeout, WidgetNotReady
from chart_printer.templating import create_environment

TV_WIDGET_SRC = "https://s3.tradingview.com/tv.js"
WIDGET_SELECTOR = "iframe"

WIDGET_TEMPLATE = create_environment().get_template("chart_widget.html")


def build_chart_html(symbol, interval, chart):
    return WIDGET_TEMPLATE.render(
        widget_src=TV_WIDGET_SRC,
        symbol=symbol,
        interval=interval,
        chart=chart,
    )


def capture_chart(browser, symbol, interval, chart, capture):
    """
    Load the widget for one symbol/interval and screenshot its iframe.

    Returns:
        Base64-encoded PNG of the widget frame only.
    """
    context = browser.new_context(
        viewport={"width": capture["viewportWidth"], "height": capture["viewportHeight"]},
        device_scale_factor=capture["deviceScaleFactor"],
    )
    try:
        page = context.new_page()
        html = build_chart_html(symbol, interval, chart)

        try:
            page.set_content(html, wait_until="networkidle", timeout=capture["pageLoadTimeoutMs"])
        except PlaywrightTimeoutError as e:
            raise LoadTimeout(
                f"{symbol} {interval}: page did not settle within {capture['pageLoadTimeoutMs']}ms"
            ) from e

        try:
            frame = page.wait_for_selector(WIDGET_SELECTOR, timeout=capture["iframeTimeoutMs"])
        except PlaywrightTimeoutError as e:
            raise WidgetNotReady(
                f"{symbol} {interval}: chart widget did not appear within {capture['iframeTimeoutMs']}ms"
            ) from e
        if frame is None:
            raise WidgetNotReady(f"{symbol} {interval}: chart widget frame not found")

        page.wait_for_timeout(capture["chartLoadWaitMs"])

        png_bytes = frame.screenshot(type="png")
        return base64.standard_b64encode(png_bytes).decode("utf-8")
    finally:
        context.close()
