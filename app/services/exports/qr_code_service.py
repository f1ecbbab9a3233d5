import io

import qrcode

from app.buisness.core.exceptions import ValidationError
from app.logger import get_logger

logger = get_logger("inventory.services.exports.qr_code_service")

MAX_QR_CONTENT_LENGTH = 100


class QrCodeService:

    @staticmethod
    def generate_png(asset_code: str) -> io.BytesIO:
        """
        Render the asset code as a PNG QR code.

        Raises:
            ValidationError: empty code or longer than 100 characters
        """
        content = (asset_code or '').strip()
        if not content:
            raise ValidationError("Asset code is required")
        if len(content) > MAX_QR_CONTENT_LENGTH:
            raise ValidationError(f"Asset code cannot exceed {MAX_QR_CONTENT_LENGTH} characters")

        qr = qrcode.QRCode(version=2, box_size=8, border=2)
        qr.add_data(content)
        qr.make(fit=True)
        image = qr.make_image(fill_color="black", back_color="white")

        output = io.BytesIO()
        image.save(output, format="PNG")
        output.seek(0)
        logger.debug(f"Generated QR code for {content}")
        return output
