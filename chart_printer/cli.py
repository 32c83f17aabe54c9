import argparse
import sys

from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import sync_playwright

from chart_printer.config import apply_overrides, load_config, resolve_config_path
from chart_printer.errors import ChartPrinterError
from chart_printer.pipeline import finish, run_pipeline

BROWSER_ARGS = ["--no-sandbox", "--disable-setuid-sandbox", "--disable-gpu"]


def build_parser():
    parser = argparse.ArgumentParser(description="Capture TradingView charts and print them as PDFs")
    parser.add_argument("config", nargs="?", help="Path to config JSON (default: ./config.json)")
    parser.add_argument("--output-dir", type=str, help="Override output.directory")
    parser.add_argument("--print", dest="print_", action="store_true", default=None,
                        help="Send the PDFs to the default printer")
    parser.add_argument("--no-print", dest="print_", action="store_false", default=None,
                        help="Only save the PDFs")
    return parser


def capture_and_print(config):
    with sync_playwright() as p:
        browser = p.chromium.launch(headless=True, args=BROWSER_ARGS)
        try:
            pdf_files = run_pipeline(browser, config)
        finally:
            browser.close()
    finish(pdf_files, config["output"])
    return pdf_files


def main(argv=None):
    args = build_parser().parse_args(argv)
    try:
        config = load_config(resolve_config_path(args.config))
        config = apply_overrides(config, output_dir=args.output_dir, print_=args.print_)
        capture_and_print(config)
    except (ChartPrinterError, PlaywrightError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
