"""Enrollment helpers: which mirrored courses a student may browse."""

from course_drive.repositories import users_repo


def parse_enrolled_courses(raw_values):
    """Normalize ``enrolledCourses`` query values (repeated and/or comma-separated)."""
    if raw_values is None:
        return []
    if isinstance(raw_values, str):
        raw_values = [raw_values]
    courses = []
    for raw in raw_values:
        for part in str(raw or '').split(','):
            part = part.strip()
            if part and part not in courses:
                courses.append(part)
    return courses


def course_matches(course_name, enrolled_name):
    course = str(course_name or '').strip().lower()
    enrolled = str(enrolled_name or '').strip().lower()
    if not course or not enrolled:
        return False
    return enrolled in course or course in enrolled


def is_enrolled(course_name, enrolled_courses):
    return any(course_matches(course_name, enrolled) for enrolled in enrolled_courses or [])


def filter_enrolled(structure, enrolled_courses):
    return tuple(node for node in structure if is_enrolled(node.name, enrolled_courses))


def find_course(structure, course_name):
    wanted = str(course_name or '').strip().lower()
    if not wanted:
        return None
    for node in structure:
        if wanted in node.name.lower():
            return node
    return None


def resolve_enrolled_courses(app_ctx, request):
    """Prefer the signed-in user's Firestore profile, fall back to the query string."""
    decoded_token = app_ctx.verify_firebase_token(request)
    if decoded_token and app_ctx.db is not None:
        uid = decoded_token.get('uid', '')
        try:
            stored = users_repo.get_enrolled_courses(app_ctx.db, uid) if uid else None
        except Exception as exc:
            app_ctx.logger.warning(f"Could not load enrolled courses for {uid}: {exc}")
            stored = None
        if stored is not None:
            return stored
    return parse_enrolled_courses(request.args.getlist('enrolledCourses'))
