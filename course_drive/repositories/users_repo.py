"""Firestore accessors for the users collection."""

USERS_COLLECTION = 'users'


def doc_ref(db, uid):
    return db.collection(USERS_COLLECTION).document(uid)


def get_doc(db, uid):
    return doc_ref(db, uid).get()


def get_enrolled_courses(db, uid):
    """Return the ``enrolledCourses`` list stored on a user profile, or None when there is no profile."""
    snapshot = get_doc(db, uid)
    if not snapshot.exists:
        return None
    data = snapshot.to_dict() or {}
    courses = data.get('enrolledCourses') or []
    if not isinstance(courses, (list, tuple)):
        return []
    return [str(course) for course in courses if str(course or '').strip()]
