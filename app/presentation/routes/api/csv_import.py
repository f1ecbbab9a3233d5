"""
CSV import routes
"""

from datetime import date

from flask import Blueprint, Response, current_app, jsonify, request
from flask_login import login_required

from app import limiter
from app.auth import current_actor
from app.services.imports.csv_import_service import CsvImportService
from app.logger import get_logger

bp = Blueprint('csv_import_api', __name__)
logger = get_logger("inventory.routes.csv_import")


@bp.route('/import', methods=['POST'])
@login_required
@limiter.limit(lambda: current_app.config['RATELIMIT_BULK'])
def import_csv():
    """Import assets from the multipart field 'file'"""
    upload = request.files.get('file')
    content = upload.read() if upload else b''
    CsvImportService.validate_upload(upload.filename if upload else None, content,
                                     current_app.config['CSV_MAX_UPLOAD_BYTES'])

    performed_by, email = current_actor()
    logger.info(f"CSV import of {upload.filename} ({len(content)} bytes) started by {performed_by}")
    result = CsvImportService.import_assets(content, performed_by, email)
    return jsonify(result.to_dict())


@bp.route('/template', methods=['GET'])
@login_required
def download_template():
    filename = CsvImportService.template_filename(date.today())
    return Response(
        CsvImportService.build_template(),
        mimetype='text/csv',
        headers={'Content-Disposition': f'attachment; filename={filename}'},
    )
