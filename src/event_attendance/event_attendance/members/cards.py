from __future__ import annotations

import io

import qrcode

from .model import Member


def member_qr_png(member: Member, *, box_size: int = 10, border: int = 2) -> io.BytesIO:
    """PNG QR code carrying the member id, the code the scanner resolves."""
    qr = qrcode.QRCode(
        version=1,
        error_correction=qrcode.constants.ERROR_CORRECT_L,
        box_size=box_size,
        border=border,
    )
    qr.add_data(member.member_id)
    qr.make(fit=True)

    img = qr.make_image(fill_color="black", back_color="white")
    buf = io.BytesIO()
    img.save(buf, format="PNG")
    buf.seek(0)
    return buf
