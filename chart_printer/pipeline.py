import sys

from chart_printer.capture import capture_chart
from chart_printer.compose import export_pdf, prepare_output_dir
from chart_printer.printing import NO_PRINTER, print_documents


class RunContext:
    """Everything a run shares: the browser, the config and the PDFs written so far."""

    def __init__(self, browser, config, output_dir):
        self.browser = browser
        self.config = config
        self.output_dir = output_dir
        self.labels = [tf["label"] for tf in config["timeframes"]]
        self.pdf_files = []


def process_symbol(ctx, symbol):
    config = ctx.config
    name = symbol["name"]
    print(f"Capturing {name}...")

    screenshots = {}
    for tf in config["timeframes"]:
        print(f"  {tf['label']}...")
        screenshots[tf["label"]] = capture_chart(
            ctx.browser, symbol["symbol"], tf["interval"], config["chart"], config["capture"]
        )

    pdf_path = export_pdf(
        ctx.browser,
        name,
        screenshots,
        ctx.labels,
        config["pdf"],
        config["capture"]["deviceScaleFactor"],
        ctx.output_dir,
        decode_wait_ms=config["capture"]["imageDecodeWaitMs"],
    )
    print(f"  -> Saved {pdf_path}")
    ctx.pdf_files.append(pdf_path)
    return pdf_path


def run_pipeline(browser, config):
    """
    Capture and export every symbol, one at a time.

    Any capture or export error propagates and stops the run. PDFs already
    written for earlier symbols stay where they are.
    """
    ctx = RunContext(browser, config, prepare_output_dir(config["output"]["directory"]))
    for symbol in config["symbols"]:
        process_symbol(ctx, symbol)
    return ctx.pdf_files


def finish(pdf_files, output):
    """Print the PDFs if asked to. Printing problems only ever produce a warning."""
    out_dir = output["directory"]
    if not output["print"]:
        print(f"\nPDFs saved in {out_dir}")
        return None

    result = print_documents(pdf_files)
    if result.ok:
        print("All charts sent to printer!")
    elif result.status == NO_PRINTER:
        print(f"\nNo default printer. PDFs saved in {out_dir}")
    else:
        print(f"Warning: {result.error}", file=sys.stderr)
        print(f"\nPDFs saved in {out_dir}")
    return result
