"""
QR Code per i link condivisi (cardapio pubblico degli eventi).

Il QR viene mostrato nella pagina del cardapio dell'evento come data URI,
così può essere stampato o fotografato senza salvare file su storage.
"""

import base64

from qr_code.qrcode.maker import make_qr_code_image
from qr_code.qrcode.utils import QRCodeOptions

# Correzione errori "M": resta leggibile anche stampato su carta
SHARE_LINK_ERROR_CORRECTION = "M"


def share_link_qr_png(url: str, box_size: int = 8, border: int = 4) -> bytes:
    """PNG del QR per un link condiviso."""
    options = QRCodeOptions(
        size=box_size,
        border=border,
        image_format="png",
        error_correction=SHARE_LINK_ERROR_CORRECTION,
    )
    return make_qr_code_image(url, options)


def qr_code_data_uri(url: str, box_size: int = 8) -> str:
    """QR Code come data URI, da usare direttamente in un tag <img>."""
    encoded = base64.b64encode(share_link_qr_png(url, box_size=box_size))
    return f"data:image/png;base64,{encoded.decode('ascii')}"
