from __future__ import annotations

from typing import BinaryIO

from PIL import Image, UnidentifiedImageError

from ..core.exceptions import ValidationError


def decode_identifier(stream: BinaryIO) -> str:
    """Return the text of the first QR/barcode found in an uploaded image."""
    try:
        img = Image.open(stream).convert("RGB")
    except (UnidentifiedImageError, OSError) as e:
        raise ValidationError("Uploaded file is not a readable image") from e

    # pyzbar loads the native zbar library at import time.
    from pyzbar.pyzbar import decode as pyzbar_decode

    decoded = pyzbar_decode(img)
    if not decoded:
        raise ValidationError("No QR code found in the image")

    code = decoded[0].data.decode("utf-8").strip()
    if not code:
        raise ValidationError("QR code is empty")
    return code
