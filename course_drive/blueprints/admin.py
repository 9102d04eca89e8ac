from flask import Blueprint, current_app, request

from course_drive.extensions import get_app_ctx
from course_drive.services import drive_api_service

admin_bp = Blueprint('admin_api', __name__)


@admin_bp.route('/api/cache/clear', methods=['POST'])
def clear_cache():
    return drive_api_service.clear_cache(get_app_ctx(current_app), request)


@admin_bp.route('/api/test-drive', methods=['GET'])
def test_drive_connection():
    return drive_api_service.check_drive_connection(get_app_ctx(current_app), request)
