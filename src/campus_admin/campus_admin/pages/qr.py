from __future__ import annotations

import io
import json

import qrcode

from ..common.validators import require_non_empty


def build_qr_payload(qr_id: str, roll_no: str) -> str:
    """JSON scanned by the mobile attendance page."""
    return json.dumps(
        {"qrId": require_non_empty(qr_id, "QR ID"), "rollNo": require_non_empty(roll_no, "Roll No")},
        separators=(",", ":"),
    )


def render_qr_png(data: str) -> io.BytesIO:
    qr = qrcode.QRCode(border=2, box_size=10)
    qr.add_data(data)
    qr.make(fit=True)
    img = qr.make_image(fill_color="black", back_color="white")
    buf = io.BytesIO()
    img.save(buf)
    buf.seek(0)
    return buf
