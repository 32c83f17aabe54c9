"""
Chart sheet layout.

Turns a set of base64 chart screenshots into the HTML page that gets printed
to PDF: the first timeframe fills the top region, the others share the bottom
row in equal columns.
"""
from chart_printer.templating import create_environment

# (width, height) in mm as Chromium lays the page out without `landscape`.
# Ledger is Tabloid turned sideways, so it is already wide.
PAPER_SIZES_MM = {
    "letter": (215.9, 279.4),
    "legal": (215.9, 355.6),
    "tabloid": (279.4, 431.8),
    "ledger": (431.8, 279.4),
    "a0": (841, 1189),
    "a1": (594, 841),
    "a2": (420, 594),
    "a3": (297, 420),
    "a4": (210, 297),
    "a5": (148, 210),
    "a6": (105, 148),
}

CSS_PX_PER_MM = 96 / 25.4

env = create_environment()

SHEET_TEMPLATE = env.get_template("chart_sheet.html")


def page_size_mm(paper_format, landscape):
    """(width, height) of the page in mm. Landscape swaps the two, as Chromium does."""
    try:
        width, height = PAPER_SIZES_MM[str(paper_format).lower()]
    except KeyError:
        raise ValueError(f"Unknown paper format: {paper_format}") from None
    return (height, width) if landscape else (width, height)


def page_viewport(paper_format, landscape):
    width, height = page_size_mm(paper_format, landscape)
    return {
        "width": round(width * CSS_PX_PER_MM),
        "height": round(height * CSS_PX_PER_MM),
    }


def render_layout(labels, images, layout):
    """
    Build the printable HTML for one symbol.

    Args:
        labels: timeframe labels in configured order; labels[0] is the top chart
        images: label -> base64 PNG
        layout: the `pdf` config section

    Returns:
        A self-contained HTML document string. Same input, same output.
    """
    if not labels:
        raise ValueError("At least one timeframe label is required")
    missing = [label for label in labels if label not in images]
    if missing:
        raise KeyError(f"No image for timeframe label(s): {', '.join(missing)}")

    width, height = page_size_mm(layout["format"], layout["landscape"])
    return SHEET_TEMPLATE.render(
        page_format=layout["format"],
        orientation="landscape" if layout["landscape"] else "portrait",
        page_width=width,
        page_height=height,
        padding=layout["paddingMm"],
        gap=layout["gapMm"],
        top_flex=layout["topChartFlex"],
        bottom_flex=layout["bottomChartFlex"],
        top={"label": labels[0], "image": images[labels[0]]},
        bottom=[{"label": label, "image": images[label]} for label in labels[1:]],
    )
