class ChartPrinterError(Exception):
    """Base class for every error raised by the chart printer."""


class ConfigNotFound(ChartPrinterError):
    pass


class ConfigInvalid(ChartPrinterError):
    pass


class LoadTimeout(ChartPrinterError):
    """Chart page did not reach network idle in time."""


class WidgetNotReady(ChartPrinterError):
    """The TradingView iframe never showed up."""


class ExportError(ChartPrinterError):
    pass


class PrintUnavailable(ChartPrinterError):
    """Printing could not happen. Never fatal for a run."""
