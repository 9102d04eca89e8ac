"""Google Drive v3 accessors for folder listings."""

import threading

from google.oauth2 import service_account
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from course_drive.errors import ConfigError, UpstreamError
from course_drive.logging_config import get_logger

DRIVE_SCOPES = ['https://www.googleapis.com/auth/drive.readonly']
LIST_FIELDS = 'nextPageToken, files(id, name, mimeType, createdTime, modifiedTime, webViewLink)'

logger = get_logger('drive_repo')


def children_query(folder_id):
    safe_id = str(folder_id).replace('\\', '\\\\').replace("'", "\\'")
    return f"'{safe_id}' in parents and trashed=false"


def build_drive_service(key_file):
    if not key_file:
        raise ConfigError('GOOGLE_SERVICE_ACCOUNT_KEY_FILE is not configured.')
    credentials = service_account.Credentials.from_service_account_file(key_file, scopes=DRIVE_SCOPES)
    return build('drive', 'v3', credentials=credentials, cache_discovery=False)


def list_children(service, folder_id, *, page_size=100, num_retries=3):
    """Return every non-trashed child of ``folder_id`` as raw Drive dicts, ordered by name."""
    files = []
    page_token = None
    while True:
        try:
            response = service.files().list(
                q=children_query(folder_id),
                fields=LIST_FIELDS,
                orderBy='name',
                pageSize=page_size,
                pageToken=page_token,
                supportsAllDrives=True,
                includeItemsFromAllDrives=True,
            ).execute(num_retries=num_retries)
        except HttpError as exc:
            status = getattr(exc, 'status_code', None) or getattr(getattr(exc, 'resp', None), 'status', None)
            raise UpstreamError(
                f"Drive listing failed for folder {folder_id} (status {status})",
                folder_id=folder_id,
                status=status,
            ) from exc
        except (OSError, ValueError) as exc:
            raise UpstreamError(f"Drive listing failed for folder {folder_id}: {exc}", folder_id=folder_id) from exc

        if response.get('incompleteSearch'):
            logger.warning(f"Drive reported an incomplete search for folder {folder_id}")
        files.extend(response.get('files', []) or [])
        page_token = response.get('nextPageToken')
        if not page_token:
            return files


class DriveListingClient:
    """Lists folder children, keeping one Drive service object per thread.

    ``service_factory`` is called lazily the first time a thread issues a
    request; it defaults to a service-account build from ``key_file``.
    """

    def __init__(self, key_file='', *, page_size=100, num_retries=3, service_factory=None):
        self.key_file = key_file
        self.page_size = page_size
        self.num_retries = num_retries
        self._has_custom_factory = service_factory is not None
        self._service_factory = service_factory or (lambda: build_drive_service(self.key_file))
        self._local = threading.local()

    @property
    def is_configured(self):
        return self._has_custom_factory or bool(self.key_file)

    def _service(self):
        service = getattr(self._local, 'service', None)
        if service is None:
            try:
                service = self._service_factory()
            except ConfigError:
                raise
            except Exception as exc:
                raise UpstreamError(f"Could not build Drive client: {exc}") from exc
            self._local.service = service
        return service

    def list_children(self, folder_id):
        return list_children(
            self._service(),
            folder_id,
            page_size=self.page_size,
            num_retries=self.num_retries,
        )
