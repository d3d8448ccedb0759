"""
PDF rendering for sales orders.

``render_order`` turns an order snapshot into a paginated A4 document. It does
no I/O: the same order and the same ``now`` always produce the same bytes.

Layout is computed top-down with an immutable ``Cursor`` (distance from the
top of the page, page index, alternating-shade flag). Every drawing step
takes a cursor and returns the next one; the painter converts top-down
coordinates into reportlab's bottom-up space.
"""
from datetime import datetime
from io import BytesIO
from typing import NamedTuple

from reportlab.lib.colors import HexColor
from reportlab.lib.pagesizes import A4
from reportlab.pdfbase.pdfmetrics import stringWidth
from reportlab.pdfgen import canvas

PAGE_WIDTH, PAGE_HEIGHT = A4

MARGIN_LEFT = 50
PAGE_TOP = 50
PAGE_BOTTOM = 40
TABLE_WIDTH = 500
COLUMN_WIDTHS = (230, 90, 70, 110)
CELL_PADDING = 5
PRODUCT_TEXT_WIDTH = COLUMN_WIDTHS[0] - 2 * CELL_PADDING

LINE_HEIGHT = 12
MIN_ROW_HEIGHT = 20
ROW_PADDING = 10
HEADER_ROW_HEIGHT = 20
HEADER_ROW_ADVANCE = 25
# Space that must remain below the cursor before another row is started
BOTTOM_RESERVE = 150
INFO_PANEL_HEIGHT = 150

FONT = "Helvetica"
FONT_BOLD = "Helvetica-Bold"
FONT_ITALIC = "Helvetica-Oblique"
ROW_FONT_SIZE = 9

PRIMARY = HexColor("#333333")
SECONDARY = HexColor("#666666")
BACKGROUND = HexColor("#f9f9f9")
BORDER = HexColor("#dddddd")
HEADER_FILL = HexColor("#e6e6e6")

CURRENCY_PREFIX = "$"

COLUMN_HEADERS = ("Producto ID", "Precio Unitario", "Cantidad", "Importe")
ADDRESS_LABELS = (
    ("street", "Domicilio"),
    ("neighborhood", "Colonia"),
    ("municipality", "Municipio"),
    ("state", "Estado"),
)
EMPTY_NOTICE = "No hay productos en esta nota de venta"
TIMESTAMP_FORMAT = "%d/%m/%Y %H:%M:%S"


def _column_edges():
    edges = [MARGIN_LEFT]
    for width in COLUMN_WIDTHS:
        edges.append(edges[-1] + width)
    return tuple(edges)


COLUMN_EDGES = _column_edges()


class Cursor(NamedTuple):
    y: float
    page: int = 0
    shaded: bool = False

    def down(self, dy):
        return self._replace(y=self.y + dy)

    def next_page(self):
        return Cursor(y=PAGE_TOP, page=self.page + 1, shaded=self.shaded)


class HeaderRow(NamedTuple):
    page: int
    y: float


class TableRow(NamedTuple):
    page: int
    y: float
    height: float
    shaded: bool
    lines: tuple
    item: dict


def format_money(value) -> str:
    """Prefix the stored value with the currency sign; no rounding applied."""
    return f"{CURRENCY_PREFIX}{value}"


def wrap_text(text, width=PRODUCT_TEXT_WIDTH, font=FONT, size=ROW_FONT_SIZE) -> list[str]:
    """Greedily pack words into lines no wider than ``width`` points."""
    lines = []
    line = ""
    for word in str(text).split():
        candidate = f"{line} {word}" if line else word
        if line and stringWidth(candidate, font, size) > width:
            lines.append(line)
            line = word
        else:
            line = candidate
    if line:
        lines.append(line)
    return lines


def row_height(lines) -> float:
    return max(len(lines) * LINE_HEIGHT, MIN_ROW_HEIGHT)


def needs_page_break(cursor: Cursor) -> bool:
    return cursor.y + BOTTOM_RESERVE > PAGE_HEIGHT


def layout_table(line_items, cursor: Cursor):
    """
    Place the header row and every line-item row.

    Returns the list of placed blocks and the cursor below the last row. A
    row that would start inside the bottom reserve moves to a new page, which
    begins with a repeated header row. The shade flag carries across pages.
    """
    blocks = [HeaderRow(cursor.page, cursor.y)]
    cursor = cursor.down(HEADER_ROW_ADVANCE)

    for item in line_items:
        if needs_page_break(cursor):
            cursor = cursor.next_page()
            blocks.append(HeaderRow(cursor.page, cursor.y))
            cursor = cursor.down(HEADER_ROW_ADVANCE)

        lines = tuple(wrap_text(item.get("product_id") or "N/A"))
        height = row_height(lines)
        blocks.append(TableRow(cursor.page, cursor.y, height, cursor.shaded, lines, item))
        cursor = Cursor(y=cursor.y + height + ROW_PADDING, page=cursor.page, shaded=not cursor.shaded)

    return blocks, cursor


class _Painter:
    """Thin wrapper over a reportlab canvas using top-down coordinates."""

    def __init__(self, pdf: canvas.Canvas):
        self.pdf = pdf
        self.page = 0

    def goto_page(self, page):
        while self.page < page:
            self.pdf.showPage()
            self.page += 1

    def rect(self, x, top, width, height, fill=None, stroke=None, line_width=0.5):
        self.pdf.saveState()
        if fill:
            self.pdf.setFillColor(fill)
        if stroke:
            self.pdf.setStrokeColor(stroke)
            self.pdf.setLineWidth(line_width)
        self.pdf.rect(
            x, PAGE_HEIGHT - top - height, width, height,
            fill=1 if fill else 0, stroke=1 if stroke else 0,
        )
        self.pdf.restoreState()

    def line(self, x1, top1, x2, top2, color=BORDER, line_width=0.5):
        self.pdf.saveState()
        self.pdf.setStrokeColor(color)
        self.pdf.setLineWidth(line_width)
        self.pdf.line(x1, PAGE_HEIGHT - top1, x2, PAGE_HEIGHT - top2)
        self.pdf.restoreState()

    def text(self, text, x, top, font=FONT, size=10, color=SECONDARY, align="left"):
        # top is the top of the text box; reportlab draws on the baseline
        baseline = PAGE_HEIGHT - top - size * 0.8
        self.pdf.saveState()
        self.pdf.setFont(font, size)
        self.pdf.setFillColor(color)
        if align == "center":
            self.pdf.drawCentredString(x, baseline, text)
        elif align == "right":
            self.pdf.drawRightString(x, baseline, text)
        else:
            self.pdf.drawString(x, baseline, text)
        self.pdf.restoreState()


def _draw_heading(painter, order, cursor):
    painter.goto_page(cursor.page)
    painter.text("NOTA DE VENTA", PAGE_WIDTH / 2, cursor.y, FONT_BOLD, 24, PRIMARY, align="center")
    cursor = cursor.down(30)
    painter.text(f"ID: {order.id}", PAGE_WIDTH / 2, cursor.y, FONT, 12, PRIMARY, align="center")
    return cursor.down(35)


def _draw_address(painter, title, address, x, top):
    painter.text(title, x, top, FONT_BOLD, 10, PRIMARY)
    y = top + 15
    for field, label in ADDRESS_LABELS:
        painter.text(f"{label}: {address.get(field) or ''}", x, y, FONT, 10, SECONDARY)
        y += LINE_HEIGHT


def _draw_info_panel(painter, order, cursor):
    top = cursor.y
    painter.goto_page(cursor.page)
    painter.rect(MARGIN_LEFT, top, TABLE_WIDTH, INFO_PANEL_HEIGHT, fill=BACKGROUND, stroke=BORDER)

    left = MARGIN_LEFT + 15
    right = MARGIN_LEFT + TABLE_WIDTH / 2 + 15

    painter.text("Información General", left, top + 10, FONT_BOLD, 14, PRIMARY)
    painter.text("Cliente ID:", left, top + 33, FONT_BOLD, 10, PRIMARY)
    painter.text(str(order.client_id), left + 70, top + 33, FONT, 10, SECONDARY)

    _draw_address(painter, "Dirección de Facturación:", order.billing_address, left, top + 55)
    _draw_address(painter, "Dirección de Envío:", order.shipping_address, right, top + 55)

    return cursor.down(INFO_PANEL_HEIGHT + 10)


def _draw_section_title(painter, cursor):
    cursor = cursor.down(12)
    painter.goto_page(cursor.page)
    painter.text("Detalle de Productos", PAGE_WIDTH / 2, cursor.y, FONT_BOLD, 16, PRIMARY, align="center")
    return cursor.down(30)


def _draw_header_row(painter, block):
    painter.goto_page(block.page)
    painter.rect(
        MARGIN_LEFT, block.y - 5, TABLE_WIDTH, HEADER_ROW_HEIGHT, fill=HEADER_FILL, stroke=BORDER
    )
    for edge, label in zip(COLUMN_EDGES, COLUMN_HEADERS):
        painter.text(label, edge + CELL_PADDING, block.y, FONT_BOLD, 10, PRIMARY)


def _draw_table_row(painter, block):
    painter.goto_page(block.page)
    top = block.y - 5
    height = block.height + ROW_PADDING

    if block.shaded:
        painter.rect(MARGIN_LEFT, top, TABLE_WIDTH, height, fill=BACKGROUND)
    painter.rect(MARGIN_LEFT, top, TABLE_WIDTH, height, stroke=BORDER)
    for edge in COLUMN_EDGES[1:-1]:
        painter.line(edge, top, edge, top + height)

    for index, line in enumerate(block.lines):
        painter.text(
            line, COLUMN_EDGES[0] + CELL_PADDING, block.y + index * LINE_HEIGHT, FONT, ROW_FONT_SIZE
        )

    item = block.item
    cells = (
        format_money(item.get("unit_price") or 0),
        str(item.get("quantity") or 0),
        format_money(item.get("amount") or 0),
    )
    for edge, value in zip(COLUMN_EDGES[1:], cells):
        painter.text(value, edge + CELL_PADDING, block.y, FONT, ROW_FONT_SIZE)


def _draw_table(painter, line_items, cursor):
    blocks, cursor = layout_table(line_items, cursor)
    for block in blocks:
        if isinstance(block, HeaderRow):
            _draw_header_row(painter, block)
        else:
            _draw_table_row(painter, block)
    return cursor


def _ensure_space(cursor, needed):
    if cursor.y + needed > PAGE_HEIGHT - PAGE_BOTTOM:
        return cursor.next_page()
    return cursor


def _draw_total(painter, total, cursor):
    cursor = _ensure_space(cursor.down(16), 12 + 45)
    painter.goto_page(cursor.page)
    painter.text(
        f"Total: {format_money(total)}", MARGIN_LEFT + TABLE_WIDTH, cursor.y, FONT_BOLD, 12, PRIMARY,
        align="right",
    )
    return cursor.down(12)


def _draw_empty_notice(painter, cursor):
    painter.goto_page(cursor.page)
    painter.text(EMPTY_NOTICE, PAGE_WIDTH / 2, cursor.y, FONT_ITALIC, 10, SECONDARY, align="center")
    return cursor.down(12)


def _draw_footer(painter, now, cursor):
    cursor = _ensure_space(cursor.down(36), 9)
    painter.goto_page(cursor.page)
    painter.text(
        f"Generado el: {now.strftime(TIMESTAMP_FORMAT)}", PAGE_WIDTH / 2, cursor.y, FONT, 9, SECONDARY,
        align="center",
    )
    return cursor.down(9)


def render_order(order, now: datetime) -> bytes:
    """
    Render ``order`` as a PDF document.

    Args:
        order: object exposing ``id``, ``client_id``, ``billing_address``,
            ``shipping_address`` (field dicts), ``line_items`` (snapshot
            dicts) and ``total``
        now: generation timestamp printed in the footer, already in the
            document's local time

    Returns:
        bytes: the PDF file
    """
    buffer = BytesIO()
    pdf = canvas.Canvas(buffer, pagesize=A4, invariant=1)
    pdf.setTitle(f"Nota de venta {order.id}")
    painter = _Painter(pdf)

    cursor = Cursor(y=PAGE_TOP)
    cursor = _draw_heading(painter, order, cursor)
    cursor = _draw_info_panel(painter, order, cursor)
    cursor = _draw_section_title(painter, cursor)

    if order.line_items:
        cursor = _draw_table(painter, order.line_items, cursor)
        cursor = _draw_total(painter, order.total, cursor)
    else:
        cursor = _draw_empty_notice(painter, cursor)

    _draw_footer(painter, now, cursor)
    pdf.save()
    return buffer.getvalue()
