import threading

import pytest

from course_drive.config import AppConfig
from course_drive.errors import UpstreamError
from course_drive.extensions import build_tree_sync
from course_drive.models import FOLDER_MIME_TYPE


def drive_folder(folder_id, name):
    return {
        'id': folder_id,
        'name': name,
        'mimeType': FOLDER_MIME_TYPE,
        'createdTime': '2024-01-10T10:00:00Z',
        'modifiedTime': '2024-01-15T10:00:00Z',
        'webViewLink': f'https://drive.google.com/drive/folders/{folder_id}',
    }


def drive_file(file_id, name, mime_type):
    return {
        'id': file_id,
        'name': name,
        'mimeType': mime_type,
        'createdTime': '2024-01-11T10:00:00Z',
        'modifiedTime': '2024-01-14T10:00:00Z',
        'webViewLink': f'https://drive.google.com/file/d/{file_id}/view',
    }


class FakeListingClient:
    """In-memory stand-in for the Drive listing client.

    ``tree`` maps a folder id to its (name-ordered) raw Drive entries; ids in
    ``failing`` raise ``UpstreamError``. Every call is recorded.
    """

    def __init__(self, tree, failing=()):
        self.tree = {key: list(value) for key, value in tree.items()}
        self.failing = set(failing)
        self.calls = []
        self._lock = threading.Lock()

    def list_children(self, folder_id):
        with self._lock:
            self.calls.append(folder_id)
        if folder_id in self.failing:
            raise UpstreamError(f'listing failed for {folder_id}', folder_id=folder_id, status=403)
        return [dict(entry) for entry in self.tree.get(folder_id, [])]

    def count(self, folder_id=None):
        with self._lock:
            if folder_id is None:
                return len(self.calls)
            return self.calls.count(folder_id)


class FakeClock:
    def __init__(self, start=1000.0):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


@pytest.fixture()
def course_tree():
    # R -> Physics (S) -> Lecture 1 (V, video), R -> Syllabus (D, pdf)
    return {
        'R': [
            drive_folder('S', 'Physics'),
            drive_file('D', 'Syllabus.pdf', 'application/pdf'),
        ],
        'S': [
            drive_file('V', 'Motion - L1 Introduction.mp4', 'video/mp4'),
        ],
    }


@pytest.fixture()
def clock():
    return FakeClock()


@pytest.fixture()
def drive_config():
    return AppConfig(
        drive_root_folder_id='R',
        drive_cache_ttl_seconds=300,
        drive_max_concurrent_listings=3,
    )


@pytest.fixture()
def listing(course_tree):
    return FakeListingClient(course_tree)


@pytest.fixture()
def tree_sync(drive_config, listing, clock):
    sync = build_tree_sync(drive_config, listing_client=listing, clock=clock)
    yield sync
    sync.close()
