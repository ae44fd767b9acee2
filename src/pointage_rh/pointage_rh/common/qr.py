from __future__ import annotations

import io
from typing import BinaryIO, Optional

import qrcode
from PIL import Image

from ..core.constants import QR_PAYLOAD_PREFIX


def badge_payload(matricule: str) -> str:
    return f"{QR_PAYLOAD_PREFIX}{matricule}"


def parse_scan_payload(code: Optional[str]) -> str:
    """Extract the matricule from a scanned payload ("EMPLOYEE:<m>" or "<m>")."""
    value = (code or "").strip()
    if value.startswith(QR_PAYLOAD_PREFIX):
        value = value[len(QR_PAYLOAD_PREFIX):]
    return value.strip()


def make_qr_png(data: str, *, box_size: int = 10, border: int = 2) -> bytes:
    qr = qrcode.QRCode(
        version=1,
        error_correction=qrcode.constants.ERROR_CORRECT_L,
        box_size=box_size,
        border=border,
    )
    qr.add_data(data)
    qr.make(fit=True)

    img = qr.make_image(fill_color="black", back_color="white")

    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()


def decode_qr_image(stream: BinaryIO) -> Optional[str]:
    """Return the first QR payload found in an uploaded picture, if any."""

    # pyzbar loads the zbar shared library on import
    from pyzbar.pyzbar import decode as pyzbar_decode

    img = Image.open(stream).convert("RGB")
    decoded = pyzbar_decode(img)
    if not decoded:
        return None
    return decoded[0].data.decode("utf-8").strip()
