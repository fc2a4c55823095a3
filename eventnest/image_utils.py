import base64
import io

import qrcode


def make_qr_data_url(data, box_size=10, border=4):
    """
    Encodes ``data`` as a QR code and returns it as a PNG data URL.

    :param data: The text to encode (the ticket payload, usually JSON).
    :param box_size: Size in pixels of each QR module.
    :param border: Quiet zone width, in modules.
    :return: A ``data:image/png;base64,...`` string.
    """
    qr = qrcode.QRCode(
        version=None,
        error_correction=qrcode.constants.ERROR_CORRECT_M,
        box_size=box_size,
        border=border,
    )
    qr.add_data(data)
    qr.make(fit=True)

    img = qr.make_image(fill_color="black", back_color="white")

    img_byte_arr = io.BytesIO()
    img.save(img_byte_arr, format="PNG")

    encoded = base64.b64encode(img_byte_arr.getvalue()).decode("ascii")
    return f"data:image/png;base64,{encoded}"


def data_url_to_bytes(data_url):
    """Decodes a base64 data URL back into raw bytes (used for inline email images)."""
    header, _, payload = data_url.partition(",")
    if not header.startswith("data:") or ";base64" not in header:
        raise ValueError("not a base64 data URL")
    return base64.b64decode(payload)
