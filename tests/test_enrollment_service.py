import logging

from werkzeug.datastructures import Headers, MultiDict

from course_drive.models import KIND_FOLDER, Node
from course_drive.services import enrollment_service


class _Request:
    def __init__(self, args=None, headers=None):
        self.args = MultiDict(args or [])
        self.headers = Headers(headers or {})


class _Snapshot:
    def __init__(self, data):
        self.exists = data is not None
        self._data = data

    def to_dict(self):
        return self._data


class _DB:
    def __init__(self, users):
        self.users = users

    def collection(self, name):
        assert name == 'users'
        return self

    def document(self, uid):
        self._uid = uid
        return self

    def get(self):
        return _Snapshot(self.users.get(self._uid))


class _Ctx:
    def __init__(self, decoded=None, db=None):
        self.decoded = decoded
        self.db = db
        self.logger = logging.getLogger('test')

    def verify_firebase_token(self, _request):
        return self.decoded


def _course(name):
    return Node(id=name.lower().replace(' ', '_'), name=name, kind=KIND_FOLDER, children=())


def test_parse_enrolled_courses_accepts_repeated_and_comma_values():
    parsed = enrollment_service.parse_enrolled_courses(['Class 9th,Class 10th', ' Class 12th ', 'Class 9th', ''])

    assert parsed == ['Class 9th', 'Class 10th', 'Class 12th']
    assert enrollment_service.parse_enrolled_courses(None) == []
    assert enrollment_service.parse_enrolled_courses('Class 11th') == ['Class 11th']


def test_course_matching_is_bidirectional_and_case_insensitive():
    assert enrollment_service.course_matches('Class 12th Physics', 'class 12th')
    assert enrollment_service.course_matches('Physics', 'Class_12_Physics'.replace('_', ' '))
    assert not enrollment_service.course_matches('Class 9th', 'Class 10th')
    assert not enrollment_service.course_matches('Class 9th', '')


def test_filter_enrolled_keeps_structure_order():
    structure = (_course('Class 9th'), _course('Class 10th'), _course('Class 11th'))

    kept = enrollment_service.filter_enrolled(structure, ['class 11th', 'CLASS 9TH'])

    assert [node.name for node in kept] == ['Class 9th', 'Class 11th']


def test_find_course_matches_substring():
    structure = (_course('Class 9th'), _course('Class 10th Maths'))

    assert enrollment_service.find_course(structure, 'class 10th').name == 'Class 10th Maths'
    assert enrollment_service.find_course(structure, 'Class 12th') is None
    assert enrollment_service.find_course(structure, '') is None


def test_resolve_prefers_firestore_profile_for_verified_user():
    ctx = _Ctx(decoded={'uid': 'u1'}, db=_DB({'u1': {'enrolledCourses': ['Class 12th']}}))
    request = _Request(args=[('enrolledCourses', 'Class 9th')])

    assert enrollment_service.resolve_enrolled_courses(ctx, request) == ['Class 12th']


def test_resolve_falls_back_to_query_without_profile():
    ctx = _Ctx(decoded={'uid': 'ghost'}, db=_DB({}))
    request = _Request(args=[('enrolledCourses', 'Class 9th,Class 10th')])

    assert enrollment_service.resolve_enrolled_courses(ctx, request) == ['Class 9th', 'Class 10th']


def test_resolve_uses_query_when_unauthenticated():
    ctx = _Ctx(decoded=None, db=_DB({'u1': {'enrolledCourses': ['Class 12th']}}))
    request = _Request(args=[('enrolledCourses', 'Class 9th'), ('enrolledCourses', 'Class 11th')])

    assert enrollment_service.resolve_enrolled_courses(ctx, request) == ['Class 9th', 'Class 11th']
