from flask import Blueprint, send_file
from flask_login import login_required

from app.services.exports.qr_code_service import QrCodeService

bp = Blueprint('qr_codes_api', __name__)


@bp.route('/generate/<path:asset_code>', methods=['GET'])
@login_required
def generate_qr_code(asset_code):
    """PNG QR code encoding the asset code"""
    image = QrCodeService.generate_png(asset_code)
    return send_file(image, mimetype='image/png')
