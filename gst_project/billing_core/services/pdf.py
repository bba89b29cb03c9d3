from io import BytesIO

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm
from reportlab.pdfgen import canvas

from ..models.address import format_address
from .amounts import display_round_off
from .parsing import coerce_decimal
from .words import to_words

LEFT = 18 * mm
BOTTOM = 25 * mm

# name, hsn, qty, rate, amount
ITEM_COLUMNS_MM = (70, 25, 20, 30, 30)
ITEM_HEADERS = ("Item", "HSN", "Qty", "Rate", "Amount")


def _money(value):
    return f"{coerce_decimal(value):,.2f}"


def _fmt_date(d):
    if not d:
        return ""
    if hasattr(d, "strftime"):
        return d.strftime("%d-%m-%Y")
    return str(d)


def _new_canvas():
    buf = BytesIO()
    c = canvas.Canvas(buf, pagesize=A4)
    return c, buf


def _draw_header(c, profile, title, number_line):
    w, h = A4
    y = h - 20 * mm

    c.setFont("Helvetica-Bold", 14)
    c.drawString(LEFT, y, getattr(profile, "company_name", "") or "")
    c.setFont("Helvetica-Bold", 12)
    c.drawRightString(w - LEFT, y, title)

    c.setFont("Helvetica", 9)
    if profile is not None:
        y -= 5 * mm
        c.drawString(LEFT, y, profile.formatted_address()[:110])
        y -= 4 * mm
        c.drawString(LEFT, y, f"GSTIN: {profile.gst_no}   "
                              f"Mobile: {profile.mobile_no}")
    y -= 5 * mm
    c.drawString(LEFT, y, number_line)

    y -= 4 * mm
    c.setStrokeColor(colors.grey)
    c.setLineWidth(0.6)
    c.line(LEFT, y, w - LEFT, y)
    return y - 6 * mm


def _draw_party(c, y, party):
    party = party or {}
    c.setFont("Helvetica-Bold", 10)
    c.drawString(LEFT, y, "Billed to: " + (party.get("company_name") or ""))
    c.setFont("Helvetica", 9)
    y -= 4 * mm
    c.drawString(LEFT, y, format_address(party)[:110])
    if party.get("gst_no"):
        y -= 4 * mm
        c.drawString(LEFT, y, f"GSTIN: {party['gst_no']}")
    return y - 8 * mm


def _draw_item_header(c, y):
    c.setFont("Helvetica-Bold", 9)
    offset = 0
    for text, width in zip(ITEM_HEADERS, ITEM_COLUMNS_MM):
        c.drawString(LEFT + offset, y, text)
        offset += width * mm
    y -= 2 * mm
    c.setLineWidth(0.4)
    c.line(LEFT, y, LEFT + sum(ITEM_COLUMNS_MM) * mm, y)
    return y - 5 * mm


def _draw_items(c, y, items):
    y = _draw_item_header(c, y)
    c.setFont("Helvetica", 9)
    for item in items or []:
        if y < BOTTOM:
            c.showPage()
            y = _draw_item_header(c, A4[1] - 20 * mm)
            c.setFont("Helvetica", 9)
        quantity = coerce_decimal(item.get("quantity"))
        price = coerce_decimal(item.get("unit_price", item.get("price")))
        cells = (
            str(item.get("name") or "")[:40],
            str(item.get("hsn") or ""),
            f"{quantity.normalize():f}",
            _money(price),
            _money(quantity * price),
        )
        offset = 0
        for text, width in zip(cells, ITEM_COLUMNS_MM):
            c.drawString(LEFT + offset, y, text)
            offset += width * mm
        y -= 5 * mm
    return y - 3 * mm


def _draw_totals(c, y, rows):
    x_label = LEFT + 110 * mm
    x_value = LEFT + sum(ITEM_COLUMNS_MM) * mm
    for label, value, bold in rows:
        if y < BOTTOM:
            c.showPage()
            y = A4[1] - 20 * mm
        c.setFont("Helvetica-Bold" if bold else "Helvetica", 9)
        c.drawString(x_label, y, label)
        c.drawRightString(x_value, y, value)
        y -= 5 * mm
    return y


def _draw_footer(c, y, rounded_total, profile):
    c.setFont("Helvetica-Bold", 9)
    c.drawString(LEFT, y, to_words(coerce_decimal(rounded_total)))
    y -= 8 * mm
    if profile is not None and any(profile.bank_details().values()):
        c.setFont("Helvetica-Bold", 9)
        c.drawString(LEFT, y, "Bank details")
        c.setFont("Helvetica", 9)
        labels = (("bank_name", "Bank Name"), ("account_name", "Account Name"),
                  ("account_number", "Account Number"),
                  ("ifsc_code", "IFSC Code"))
        for key, label in labels:
            value = getattr(profile, key)
            if value:
                y -= 4 * mm
                c.drawString(LEFT, y, f"{label}: {value}")
    return y


def _round_off_row(round_off):
    return ("Round off", _money(display_round_off(round_off)), False)


def render_bill_pdf(bill, profile=None):
    """Printable tax invoice. Returns the PDF as bytes."""
    c, buf = _new_canvas()
    number_line = f"Invoice No: {bill.bill_no}   Date: {_fmt_date(bill.date)}"
    if bill.challan_no:
        number_line += f"   Challan No: {bill.challan_no}"
    y = _draw_header(c, profile, "TAX INVOICE", number_line)
    y = _draw_party(c, y, bill.party_details)
    y = _draw_items(c, y, bill.items)

    rate = coerce_decimal(bill.gst_rate)
    rows = [("Subtotal", _money(bill.subtotal), False)]
    if coerce_decimal(bill.discount_amount):
        rows.append((f"Discount ({bill.discount}%)",
                     "-" + _money(bill.discount_amount), False))
    rows.append(("Taxable amount", _money(bill.taxable_amount), False))
    if coerce_decimal(bill.igst):
        rows.append((f"IGST ({rate}%)", _money(bill.igst), False))
    if coerce_decimal(bill.cgst):
        rows.append((f"CGST ({rate / 2}%)", _money(bill.cgst), False))
        rows.append((f"SGST ({rate / 2}%)", _money(bill.sgst), False))
    rows.append(_round_off_row(bill.round_off))
    rows.append(("Total", _money(bill.rounded_total), True))
    y = _draw_totals(c, y, rows)

    _draw_footer(c, y - 4 * mm, bill.rounded_total, profile)
    c.showPage()
    c.save()
    return buf.getvalue()


def render_challan_pdf(challan, profile=None):
    """Printable delivery challan. Returns the PDF as bytes."""
    c, buf = _new_canvas()
    number_line = (f"Challan No: {challan.challan_no}   "
                   f"Date: {_fmt_date(challan.date)}")
    y = _draw_header(c, profile, "DELIVERY CHALLAN", number_line)
    y = _draw_party(c, y, challan.party_details)
    y = _draw_items(c, y, challan.items)

    rows = [("Subtotal", _money(challan.subtotal), False)]
    if coerce_decimal(challan.discount_amount):
        rows.append((f"Discount ({challan.discount}%)",
                     "-" + _money(challan.discount_amount), False))
    rows.append(_round_off_row(challan.round_off))
    rows.append(("Total", _money(challan.rounded_total), True))
    y = _draw_totals(c, y, rows)

    _draw_footer(c, y - 4 * mm, challan.rounded_total, profile)
    c.showPage()
    c.save()
    return buf.getvalue()
