"""
QR code rendering for ticket payloads.
"""

import base64
import io
import logging

import qrcode
from qrcode.exceptions import DataOverflowError
from PIL import Image

from .errors import PayloadTooLarge
from .models import TicketPayload

logger = logging.getLogger(__name__)

QR_WIDTH = 200
QR_BORDER = 2
QR_FILL_COLOR = "black"
QR_BACK_COLOR = "white"


def render_qr_png(text: str, width: int = QR_WIDTH) -> bytes:
    """Render ``text`` as a width x width black-on-white PNG with high error correction"""
    qr = qrcode.QRCode(
        version=None,
        error_correction=qrcode.constants.ERROR_CORRECT_H,
        box_size=1,
        border=QR_BORDER,
    )
    qr.add_data(text)
    try:
        qr.make(fit=True)
    except DataOverflowError as e:
        size = len(text.encode("utf-8"))
        logger.error(f"QR payload too large: {size} bytes")
        raise PayloadTooLarge(size) from e

    # Largest whole-pixel module size that fits, then scale to the exact width
    modules = qr.modules_count + 2 * QR_BORDER
    qr.box_size = max(1, width // modules)
    rendered = qr.make_image(fill_color=QR_FILL_COLOR, back_color=QR_BACK_COLOR)

    buffer = io.BytesIO()
    rendered.save(buffer, format="PNG")
    buffer.seek(0)
    img = Image.open(buffer).convert("L")
    if img.size != (width, width):
        img = img.resize((width, width), Image.NEAREST)

    out = io.BytesIO()
    img.save(out, format="PNG")
    logger.debug(f"Rendered QR version {qr.version} ({qr.modules_count} modules) at {width}px")
    return out.getvalue()


def png_data_url(png_bytes: bytes) -> str:
    encoded = base64.b64encode(png_bytes).decode("utf-8")
    return f"data:image/png;base64,{encoded}"


def encode_qr(payload: TicketPayload, width: int = QR_WIDTH) -> str:
    """
    Encode a ticket payload (checksum included) as an embeddable PNG data URL.

    Raises:
        PayloadTooLarge: If the serialized payload exceeds QR capacity
    """
    return png_data_url(render_qr_png(payload.to_json(), width=width))
