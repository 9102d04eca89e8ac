"""Business logic handlers for the drive content APIs."""

from course_drive.errors import ConfigError, DriveSyncError
from course_drive.models import nodes_to_json
from course_drive.services import enrollment_service


def _root_folder_id(app_ctx):
    root_id = str(app_ctx.config.drive_root_folder_id or '').strip()
    if not root_id:
        raise ConfigError('Root folder ID not configured')
    return root_id


def _failure(app_ctx, exc, label, message):
    app_ctx.logger.error(f"{label}: {exc}")
    app_ctx.capture_exception(exc)
    return app_ctx.jsonify({'error': message}), 500


def get_courses(app_ctx, request):
    try:
        structure = app_ctx.tree_sync.get_complete_structure(_root_folder_id(app_ctx))
    except DriveSyncError as e:
        return _failure(app_ctx, e, 'Courses API error', 'Failed to fetch courses')
    return app_ctx.jsonify({'courses': nodes_to_json(structure)})


def get_folder_contents(app_ctx, request, folder_id):
    try:
        contents = app_ctx.tree_sync.get_folder_contents(folder_id)
    except DriveSyncError as e:
        return _failure(app_ctx, e, f'Folder API error ({folder_id})', 'Failed to fetch folder contents')
    return app_ctx.jsonify({'contents': nodes_to_json(contents)})


def clear_cache(app_ctx, request):
    app_ctx.tree_sync.invalidate_all()
    return app_ctx.jsonify({'message': 'Cache cleared successfully'})


def get_my_courses(app_ctx, request):
    enrolled = enrollment_service.resolve_enrolled_courses(app_ctx, request)
    if not enrolled:
        return app_ctx.jsonify({'courses': []})
    try:
        structure = app_ctx.tree_sync.get_complete_structure(_root_folder_id(app_ctx))
    except DriveSyncError as e:
        return _failure(app_ctx, e, 'My courses API error', 'Failed to fetch enrolled courses')
    return app_ctx.jsonify({'courses': nodes_to_json(enrollment_service.filter_enrolled(structure, enrolled))})


def get_course_subjects(app_ctx, request, course_name):
    enrolled = enrollment_service.resolve_enrolled_courses(app_ctx, request)
    if not enrollment_service.is_enrolled(course_name, enrolled):
        return app_ctx.jsonify({'error': 'Access denied - not enrolled in this course'}), 403
    try:
        structure = app_ctx.tree_sync.get_complete_structure(_root_folder_id(app_ctx))
    except DriveSyncError as e:
        return _failure(app_ctx, e, f'Course subjects API error ({course_name})', 'Failed to fetch course subjects')
    course = enrollment_service.find_course(structure, course_name)
    if course is None:
        return app_ctx.jsonify({'error': 'Course not found'}), 404
    return app_ctx.jsonify({'subjects': nodes_to_json(course.children or ())})


def check_drive_connection(app_ctx, request):
    try:
        root_id = _root_folder_id(app_ctx)
        structure = app_ctx.tree_sync.get_complete_structure(root_id)
    except DriveSyncError as e:
        return _failure(app_ctx, e, 'Drive test error', 'Drive test failed')
    return app_ctx.jsonify({
        'success': True,
        'rootFolderId': root_id,
        'courses': [
            {'name': node.name, 'childrenCount': len(node.children or ())}
            for node in structure
        ],
        'cache': app_ctx.tree_sync.stats(),
    })
