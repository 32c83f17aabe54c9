"""
Best-effort printing through CUPS (`lpstat` / `lp`).

Nothing in here raises. Every outcome comes back as a PrintResult so the
caller can tell "no printer configured" apart from "the spooler refused".
"""
import os
import subprocess

from chart_printer.errors import PrintUnavailable

PRINTED = "printed"
NO_PRINTER = "no_printer"
FAILED = "failed"

LP_OPTIONS = ["-o", "landscape", "-o", "fit-to-page"]


class PrintResult:
    def __init__(self, status, printer=None, submitted=None, error=None):
        self.status = status
        self.printer = printer
        self.submitted = list(submitted or [])
        self.error = error

    @property
    def ok(self):
        return self.status == PRINTED

    def __repr__(self):
        return f"PrintResult(status={self.status!r}, printer={self.printer!r}, submitted={len(self.submitted)})"


def find_default_printer(run=subprocess.run):
    """Name of the system default destination, or None."""
    try:
        proc = run(["lpstat", "-d"], capture_output=True, text=True)
    except OSError:
        return None
    out = (proc.stdout or "").strip()
    if proc.returncode != 0 or not out or "no system" in out:
        return None
    # "system default destination: Office_Laser"
    return out.split(":", 1)[-1].strip() or None


def print_documents(paths, run=subprocess.run):
    printer = find_default_printer(run)
    if printer is None:
        return PrintResult(NO_PRINTER, error=str(PrintUnavailable("No default printer")))

    submitted = []
    for path in paths:
        print(f"Printing {os.path.basename(path)}...")
        try:
            run(["lp", *LP_OPTIONS, path], check=True, capture_output=True, text=True)
        except (OSError, subprocess.CalledProcessError) as e:
            err = PrintUnavailable(f"Print submission failed for {path}: {e}")
            return PrintResult(FAILED, printer=printer, submitted=submitted, error=str(err))
        submitted.append(path)

    return PrintResult(PRINTED, printer=printer, submitted=submitted)
