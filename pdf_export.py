# pdf_export.py - rollcut
#
# This file handles all PDF output:
# - Summary page with rooms, shelves and totals tables
# - Roll diagram page drawn from diagram.RollDiagram primitives
# - Lucida Sans Unicode fonts + monospace for numeric alignment
# - Currency formatting

from reportlab.pdfgen import canvas
from reportlab.lib.pagesizes import A4, portrait, landscape
from reportlab.lib.colors import Color, black
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFont, TTFError

from typing import Dict, List, Sequence

from models import LayoutResult, RoomSpec
from costing import QuoteSummary
from diagram import RollDiagram, build_roll_diagram, roll_windows
from io_utils import parse_bool
from orientation import room_dimensions, stair_count_of

import logging
import math
import os

logger = logging.getLogger(__name__)


# ------------------------------------------------------------
# mm → pt
# ------------------------------------------------------------
def mm_to_pt(mm: float) -> float:
    return mm * 72.0 / 25.4


# ------------------------------------------------------------
# Parse hex RGB like "F00", "FF0000"
# ------------------------------------------------------------
def parse_rgb(hex_str: str, alpha: float = 1.0) -> Color:
    s = hex_str.strip().lstrip("#")
    if len(s) == 3:
        s = "".join(ch * 2 for ch in s)
    if len(s) != 6:
        return black
    r = int(s[0:2], 16) / 255
    g = int(s[2:4], 16) / 255
    b = int(s[4:6], 16) / 255
    return Color(r, g, b, alpha=alpha)


# ------------------------------------------------------------
# FONT LOADING (Lucida Sans Unicode)
# ------------------------------------------------------------
# Lucida Sans Unicode is used when installed, Helvetica otherwise.
# Numeric columns use the builtin Courier.

LUCIDA_NAME = "LucidaSansUnicode_rollcut"
MONO_NAME = "Courier"

FONT_PATHS = [
    "/usr/share/fonts/truetype/lucida/LucidaSansUnicode.ttf",
    "/usr/share/fonts/truetype/LucidaSansUnicode.ttf",
    "/Library/Fonts/LucidaSansUnicode.ttf",
    "C:/Windows/Fonts/l_10646.ttf",
    "C:/Windows/Fonts/LSANS.TTF",
]


def register_fonts():
    global LUCIDA_NAME

    if LUCIDA_NAME in pdfmetrics.getRegisteredFontNames():
        return

    lucida_path = next((p for p in FONT_PATHS if os.path.isfile(p)), None)
    if lucida_path:
        try:
            pdfmetrics.registerFont(TTFont(LUCIDA_NAME, lucida_path))
            return
        except (TTFError, OSError) as e:
            logger.warning("Could not load %s (%s), using Helvetica", lucida_path, e)

    LUCIDA_NAME = "Helvetica"


# ------------------------------------------------------------
# ROLL DIAGRAM
# ------------------------------------------------------------

def draw_diagram(c: canvas.Canvas, diagram: RollDiagram, page_h_pt: float,
                 font_factor: float = 1.0):
    """
    Renders diagram primitives. The diagram is y-down, the PDF is y-up,
    so every Y is flipped against the page height.
    """

    def rect(r):
        c.saveState()
        if r.fill:
            c.setFillColor(parse_rgb(r.fill, r.opacity))
        if r.stroke:
            c.setStrokeColor(parse_rgb(r.stroke))
        c.rect(
            r.x, page_h_pt - r.y - r.height, r.width, r.height,
            stroke=1 if r.stroke else 0,
            fill=1 if r.fill else 0
        )
        c.restoreState()

    rect(diagram.roll)
    for r in diagram.rects:
        rect(r)

    for ln in diagram.lines:
        c.saveState()
        c.setStrokeColor(parse_rgb(ln.color, ln.opacity))
        if ln.dash:
            c.setDash(list(ln.dash))
        c.line(ln.x1, page_h_pt - ln.y1, ln.x2, page_h_pt - ln.y2)
        c.restoreState()

    for lb in diagram.labels:
        size = max(4.0, lb.font_size * font_factor)
        c.saveState()
        c.setFillColor(parse_rgb(lb.color))
        c.setFont(LUCIDA_NAME, size)
        c.translate(lb.x, page_h_pt - lb.y)
        if lb.rotation:
            c.rotate(lb.rotation)
        if lb.align == "left":
            c.drawString(0, -size * 0.35, lb.text)
        else:
            c.drawCentredString(0, -size * 0.35, lb.text)
        c.restoreState()


MIN_ROLL_SCALE = 40.0       # pt per meter; below this the roll continues on more pages
MIN_CONTENT_PT = 250.0      # smallest usable page area left inside the margins


def check_page_margin(page_w_pt: float, page_h_pt: float, margin_mm: float):
    """Rejects a margin that leaves too little of the page to draw on."""
    margin_pt = mm_to_pt(margin_mm)
    if margin_mm < 0 or min(page_w_pt, page_h_pt) - 2 * margin_pt < MIN_CONTENT_PT:
        raise ValueError(
            f"Page margin {margin_mm:g} mm leaves no room for the layout "
            f"(needs at least {MIN_CONTENT_PT:g} pt inside the margins)."
        )


def draw_roll_pages(c: canvas.Canvas,
                    page_w_pt: float, page_h_pt: float,
                    margin_mm: float,
                    result: LayoutResult,
                    show_labels: bool,
                    roll_color: str):
    """
    Draws the roll, one page per stretch of roll:
      - Header with the stretch shown
      - Pieces, margins and shelves, clipped to the stretch
    Short rolls fit one page; long ones keep MIN_ROLL_SCALE and continue
    on further pages, breaking between shelves.
    """
    margin_pt = mm_to_pt(margin_mm)
    header_h_pt = mm_to_pt(15)
    side_label_pt = 30.0                        # room for the length label
    row_labels_pt = 170.0 if show_labels else 20.0

    usable_w_pt = page_w_pt - 2 * margin_pt - side_label_pt - row_labels_pt
    usable_h_pt = page_h_pt - 2 * margin_pt - header_h_pt - 20

    roll_length = result.total_length if result.pieces else 5.0
    scale = min(usable_w_pt / result.roll_width,
                max(usable_h_pt / roll_length, MIN_ROLL_SCALE))

    if result.pieces:
        windows = roll_windows(result.shelves, result.total_length, usable_h_pt / scale)
    else:
        windows = [(0.0, roll_length)]

    area_top = margin_pt + header_h_pt + 20
    for n, (start, end) in enumerate(windows, start=1):
        if n > 1:
            c.showPage()

        # HEADER
        title = f"Carpet roll layout ({result.roll_width:g} m wide)"
        if len(windows) > 1:
            title += f", {start:.2f}-{end:.2f} m (page {n}/{len(windows)})"
        c.setFont(LUCIDA_NAME, 14)
        c.setFillColor(black)
        c.drawString(margin_pt, page_h_pt - margin_pt - 12, title)

        origin = (margin_pt + side_label_pt, area_top - start * scale)
        diagram = build_roll_diagram(result, scale=scale, show_labels=show_labels, origin=origin)
        diagram.roll.stroke = roll_color

        # only this stretch; the first page also keeps the width label above the roll
        clip_top = area_top - (20 if start == 0 else 0)
        clip_bottom = area_top + (end - start) * scale + 2
        c.saveState()
        clip = c.beginPath()
        clip.rect(0, page_h_pt - clip_bottom, page_w_pt, clip_bottom - clip_top)
        c.clipPath(clip, stroke=0, fill=0)
        draw_diagram(c, diagram, page_h_pt, font_factor=min(1.0, scale / MIN_ROLL_SCALE))
        c.restoreState()


# ------------------------------------------------------------
# TABLE DRAWING ENGINE (FULL-WIDTH, STACKED TABLES)
# ------------------------------------------------------------

def draw_table(
    c: canvas.Canvas,
    x0_pt: float, y0_pt: float,
    col_widths: List[float],
    row_height_pt: float,
    data: List[List[str]],
    font_size: float = 10,
    numeric_cols: List[int] = None
):
    """
    Draws a table with a black grid; numeric columns are right aligned in
    monospace. x0_pt, y0_pt = top-left corner of table.
    """

    if numeric_cols is None:
        numeric_cols = []

    for r, row in enumerate(data):
        y_top = y0_pt - r * row_height_pt

        for c_idx, w in enumerate(col_widths):
            x_left = x0_pt + sum(col_widths[:c_idx])

            c.setStrokeColor(black)
            c.setLineWidth(1)
            c.rect(x_left, y_top - row_height_pt, w, row_height_pt, stroke=1, fill=0)

            text = row[c_idx] or ""
            font_name = MONO_NAME if c_idx in numeric_cols and r > 0 else LUCIDA_NAME
            c.setFont(font_name, font_size)
            c.setFillColor(black)

            ty = y_top - row_height_pt + (row_height_pt * 0.33)
            if c_idx in numeric_cols:
                tw = pdfmetrics.stringWidth(text, font_name, font_size)
                c.drawString(x_left + w - tw - 3, ty, text)
            else:
                c.drawString(x_left + 3, ty, text)


def room_rows(rooms: Sequence[RoomSpec], result: LayoutResult) -> List[List[str]]:
    rows = [["Room", "Type", "Size (m)", "Pieces", "Rotated"]]
    for index, room in enumerate(rooms):
        dims = room_dimensions(room)
        pieces = result.pieces_for_room(index)
        if dims is None:
            rows.append([room.name, "-", "invalid, skipped", "0", "-"])
            continue
        length, width = dims
        if room.is_stairs:
            kind = "Stairs"
            size = f"{width:.2f} wide, {stair_count_of(room)} stairs"
        else:
            kind = "Room"
            size = f"{length:.2f} x {width:.2f}"
        rotated = "yes" if any(p.is_rotated for p in pieces) else "no"
        rows.append([room.name, kind, size, str(len(pieces)), rotated])
    return rows


# ------------------------------------------------------------
# SUMMARY PAGE WITH STACKED TABLES
# ------------------------------------------------------------

def draw_summary_page(
    c: canvas.Canvas,
    page_w_pt: float,
    page_h_pt: float,
    margin_mm: float,
    rooms: Sequence[RoomSpec],
    result: LayoutResult,
    quote: QuoteSummary,
    currency: str
):
    """
    Draws:
      Header
      Table 1: Rooms
      Table 2: Shelves
      Table 3: Totals
    Tables continue on a new page when they run past the bottom margin.
    """

    margin_pt = mm_to_pt(margin_mm)
    y = page_h_pt - margin_pt

    c.setFont(LUCIDA_NAME, 20)
    c.setFillColor(black)
    c.drawString(margin_pt, y - 20, "Carpet quote summary")
    y -= mm_to_pt(15)

    table_width = page_w_pt - 2 * margin_pt
    row_h = mm_to_pt(7)

    def stacked(data, col_widths, numeric_cols, font_size=9):
        nonlocal y
        header, body = data[0], data[1:]
        while True:
            fit = int((y - margin_pt) // row_h) - 1
            if fit < 1:
                if y >= page_h_pt - margin_pt:
                    raise ValueError(
                        f"Page margin {margin_mm:g} mm leaves no room for a table row."
                    )
                c.showPage()
                y = page_h_pt - margin_pt
                continue
            chunk, body = body[:fit], body[fit:]
            block = [header] + chunk
            draw_table(c, margin_pt, y, col_widths, row_h, block,
                       font_size=font_size, numeric_cols=numeric_cols)
            y -= row_h * len(block) + mm_to_pt(10)
            if not body:
                return
            c.showPage()
            y = page_h_pt - margin_pt

    # TABLE 1 - ROOMS
    stacked(
        room_rows(rooms, result),
        [table_width * f for f in (0.28, 0.12, 0.34, 0.12, 0.14)],
        numeric_cols=[3]
    )

    # TABLE 2 - SHELVES
    shelf_data = [["Row", "Height (m)", "Width used (m)", "Utilization", "Contents"]]
    for s in quote.shelves:
        shelf_data.append([
            str(s.index),
            f"{s.height:.2f}",
            f"{s.used_width:.2f}",
            f"{s.utilization_percent}%",
            s.description
        ])
    stacked(
        shelf_data,
        [table_width * f for f in (0.1, 0.18, 0.2, 0.17, 0.35)],
        numeric_cols=[0, 1, 2, 3]
    )

    # TABLE 3 - TOTALS
    totals = [
        ["Item", "Value"],
        ["Roll width", f"{quote.roll_width:.2f} m"],
        ["Broadloom meters", f"{quote.broadloom_meters:.2f} m"],
        ["Price per m²", f"{quote.price_per_m2:.2f} {currency}"],
        ["Price per broadloom meter", f"{quote.price_per_broadloom_meter:.2f} {currency}"],
        ["Layout efficiency", f"{quote.efficiency_percent:.0f}%"],
        ["TOTAL", f"{quote.carpet_cost:.2f} {currency}"],
    ]
    stacked(totals, [table_width * 0.4, table_width * 0.6], numeric_cols=[1], font_size=10)


# ------------------------------------------------------------
# FINAL PDF GENERATOR
# ------------------------------------------------------------

def generate_pdf(
    output_path: str,
    result: LayoutResult,
    quote: QuoteSummary,
    rooms: Sequence[RoomSpec],
    cfg: Dict[str, str],
    currency: str
):
    """
    Generates the complete PDF:
      - optional summary page(s)
      - roll diagram page(s)
    Raises ValueError for a margin that is not a number or leaves no room
    to draw.
    """

    register_fonts()

    gen_summary = parse_bool(cfg.get("generate-summary", "true"))
    show_labels = parse_bool(cfg.get("show-labels", "true"))
    roll_color = "#" + cfg.get("roll-color", "999").lstrip("#")
    try:
        margin_mm = float(cfg.get("margin", "10"))
    except ValueError:
        raise ValueError(f"Config value 'margin' must be a number, got {cfg.get('margin')!r}.")
    if not math.isfinite(margin_mm):
        raise ValueError(f"Config value 'margin' must be finite, got {cfg.get('margin')!r}.")

    orientation = (cfg.get("orientation", "v") or "v").lower()
    pagesize = landscape(A4) if orientation == "h" else portrait(A4)
    page_w_pt, page_h_pt = pagesize
    check_page_margin(page_w_pt, page_h_pt, margin_mm)

    c = canvas.Canvas(output_path, pagesize=pagesize)

    if gen_summary:
        draw_summary_page(
            c=c,
            page_w_pt=page_w_pt,
            page_h_pt=page_h_pt,
            margin_mm=margin_mm,
            rooms=rooms,
            result=result,
            quote=quote,
            currency=currency
        )
        c.showPage()

    draw_roll_pages(
        c=c,
        page_w_pt=page_w_pt,
        page_h_pt=page_h_pt,
        margin_mm=margin_mm,
        result=result,
        show_labels=show_labels,
        roll_color=roll_color
    )
    c.showPage()

    c.save()
    logger.info("PDF written to %s", output_path)
