"""
Asset export routes (CSV and Excel)
"""

from flask import Blueprint, Response, request, send_file
from flask_login import login_required

from app.services.exports.export_service import XLSX_MIMETYPE, ExportService

bp = Blueprint('exports_api', __name__)


@bp.route('/assets.csv', methods=['GET'])
@login_required
def export_assets_csv():
    content = ExportService.build_csv(status=request.args.get('status'))
    return Response(
        content,
        mimetype='text/csv',
        headers={'Content-Disposition': f'attachment; filename={ExportService.export_filename("csv")}'},
    )


@bp.route('/assets.xlsx', methods=['GET'])
@login_required
def export_assets_xlsx():
    output = ExportService.build_xlsx(status=request.args.get('status'))
    return send_file(
        output,
        as_attachment=True,
        download_name=ExportService.export_filename("xlsx"),
        mimetype=XLSX_MIMETYPE,
    )
