"""
加入房间二维码
"""

import base64
import io

import qrcode


def build_join_url(base_url: str, room_code: str) -> str:
    return f"{base_url.rstrip('/')}/join.html?code={room_code}"


def build_qr_data_url(data: str) -> str:
    """生成PNG格式的二维码 data URL"""
    qr = qrcode.QRCode(box_size=10, border=2)
    qr.add_data(data)
    qr.make(fit=True)
    img = qr.make_image(fill_color="#000000", back_color="#ffffff")
    buffer = io.BytesIO()
    img.save(buffer, format="PNG")
    encoded = base64.b64encode(buffer.getvalue()).decode("ascii")
    return f"data:image/png;base64,{encoded}"
