from flask import Blueprint, current_app, request

from course_drive.extensions import get_app_ctx
from course_drive.services import drive_api_service

drive_bp = Blueprint('drive_api', __name__)


@drive_bp.route('/api/courses', methods=['GET'])
def get_courses():
    return drive_api_service.get_courses(get_app_ctx(current_app), request)


@drive_bp.route('/api/folder/<folder_id>', methods=['GET'])
def get_folder_contents(folder_id):
    return drive_api_service.get_folder_contents(get_app_ctx(current_app), request, folder_id)


@drive_bp.route('/api/my-courses', methods=['GET'])
def get_my_courses():
    return drive_api_service.get_my_courses(get_app_ctx(current_app), request)


@drive_bp.route('/api/drive/course/<course_name>', methods=['GET'])
def get_course_subjects(course_name):
    return drive_api_service.get_course_subjects(get_app_ctx(current_app), request, course_name)
