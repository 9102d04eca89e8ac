"""Value objects for the mirrored drive hierarchy."""

from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

FOLDER_MIME_TYPE = 'application/vnd.google-apps.folder'
EMBED_URL_TEMPLATE = 'https://drive.google.com/file/d/{file_id}/preview'

KIND_FOLDER = 'folder'
KIND_FILE = 'file'


def build_embed_url(file_id: str) -> str:
    return EMBED_URL_TEMPLATE.format(file_id=file_id)


def is_folder_mime(mime_type) -> bool:
    return str(mime_type or '') == FOLDER_MIME_TYPE


def is_video_mime(mime_type) -> bool:
    return str(mime_type or '').lower().startswith('video/')


@dataclass(frozen=True)
class Node:
    """One file or folder of the remote hierarchy.

    ``children`` is ``None`` for files and for folders that were never
    traversed; a traversed folder always carries a tuple, possibly empty.
    ``degraded`` marks a folder whose own listing failed mid-traversal.
    """

    id: str
    name: str
    kind: str
    created_time: Optional[str] = None
    modified_time: Optional[str] = None
    link: Optional[str] = None
    embed_url: Optional[str] = None
    children: Optional[Tuple['Node', ...]] = None
    degraded: bool = False

    @property
    def is_folder(self) -> bool:
        return self.kind == KIND_FOLDER

    @classmethod
    def from_drive_file(cls, raw: Dict[str, Any], children=None, degraded=False) -> 'Node':
        mime_type = raw.get('mimeType', '')
        kind = KIND_FOLDER if is_folder_mime(mime_type) else KIND_FILE
        file_id = str(raw.get('id', '') or '')
        embed_url = None
        if kind == KIND_FILE and is_video_mime(mime_type):
            embed_url = build_embed_url(file_id)
        if kind == KIND_FILE:
            children = None
            degraded = False
        return cls(
            id=file_id,
            name=str(raw.get('name', '') or ''),
            kind=kind,
            created_time=raw.get('createdTime') or None,
            modified_time=raw.get('modifiedTime') or None,
            link=raw.get('webViewLink') or None,
            embed_url=embed_url,
            children=tuple(children) if children is not None else None,
            degraded=bool(degraded),
        )

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            'id': self.id,
            'name': self.name,
            'type': self.kind,
        }
        if self.created_time:
            payload['createdTime'] = self.created_time
        if self.modified_time:
            payload['modifiedTime'] = self.modified_time
        if self.link:
            payload['link'] = self.link
        if self.embed_url:
            payload['embedUrl'] = self.embed_url
        if self.children is not None:
            payload['children'] = [child.to_dict() for child in self.children]
        if self.degraded:
            payload['degraded'] = True
        return payload


def nodes_to_json(nodes):
    return [node.to_dict() for node in nodes or ()]
