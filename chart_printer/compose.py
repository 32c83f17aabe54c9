import os
import tempfile

from chart_printer.errors import ExportError
from chart_printer.layout import page_viewport, render_layout

PDF_MARGIN = {"top": "0", "bottom": "0", "left": "0", "right": "0"}


def prepare_output_dir(directory):
    """Create the output directory if needed and make sure we can write into it."""
    out_dir = os.path.abspath(directory)
    try:
        os.makedirs(out_dir, exist_ok=True)
    except OSError as e:
        raise ExportError(f"Cannot create output directory {out_dir}: {e}") from e
    if not os.access(out_dir, os.W_OK | os.X_OK):
        raise ExportError(f"Output directory is not writable: {out_dir}")
    return out_dir


def _current_umask():
    mask = os.umask(0)
    os.umask(mask)
    return mask


def write_atomic(path, data):
    """Write bytes next to `path` first, then rename over it."""
    directory = os.path.dirname(path)
    try:
        fd, tmp_path = tempfile.mkstemp(dir=directory, prefix=".", suffix=".part")
    except OSError as e:
        raise ExportError(f"Cannot write to {directory}: {e}") from e
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
        # mkstemp creates 0600; give the PDF the mode a plain open() would
        os.chmod(tmp_path, 0o666 & ~_current_umask())
        os.replace(tmp_path, path)
    except OSError as e:
        if os.path.exists(tmp_path):
            os.remove(tmp_path)
        raise ExportError(f"Failed to write {path}: {e}") from e


def export_pdf(browser, name, screenshots, labels, layout, device_scale_factor,
               output_dir, decode_wait_ms=1000):
    """
    Compose one symbol's screenshots onto a page and save it as `{name}.pdf`.

    Returns:
        Absolute path of the written PDF.
    """
    try:
        html = render_layout(labels, screenshots, layout)
    except KeyError as e:
        raise ExportError(f"{name}: incomplete snapshot set ({e.args[0]})") from e

    pdf_path = os.path.join(prepare_output_dir(output_dir), f"{name}.pdf")

    context = browser.new_context(
        viewport=page_viewport(layout["format"], layout["landscape"]),
        device_scale_factor=device_scale_factor,
    )
    try:
        page = context.new_page()
        page.set_content(html, wait_until="load")
        # Give the embedded data: images a moment to decode before printing
        page.wait_for_timeout(decode_wait_ms)
        pdf_bytes = page.pdf(
            format=layout["format"],
            landscape=layout["landscape"],
            print_background=True,
            margin=PDF_MARGIN,
        )
    finally:
        context.close()

    write_atomic(pdf_path, pdf_bytes)
    return pdf_path
