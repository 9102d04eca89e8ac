from course_drive.models import FOLDER_MIME_TYPE, KIND_FILE, KIND_FOLDER, Node, nodes_to_json


def test_from_drive_file_maps_folder_fields():
    node = Node.from_drive_file({
        'id': 'f1',
        'name': 'Physics',
        'mimeType': FOLDER_MIME_TYPE,
        'createdTime': '2024-01-10T10:00:00Z',
        'webViewLink': 'https://drive.google.com/drive/folders/f1',
    })

    assert node.kind == KIND_FOLDER
    assert node.children is None
    assert node.to_dict() == {
        'id': 'f1',
        'name': 'Physics',
        'type': 'folder',
        'createdTime': '2024-01-10T10:00:00Z',
        'link': 'https://drive.google.com/drive/folders/f1',
    }


def test_files_never_carry_children_or_degraded_flag():
    node = Node.from_drive_file({'id': 'x', 'name': 'notes.pdf', 'mimeType': 'application/pdf'}, children=[], degraded=True)

    assert node.kind == KIND_FILE
    assert node.children is None
    assert node.degraded is False
    assert node.embed_url is None


def test_video_detection_is_case_insensitive():
    node = Node.from_drive_file({'id': 'abc123', 'name': 'clip', 'mimeType': 'Video/MP4'})

    assert node.embed_url == 'https://drive.google.com/file/d/abc123/preview'


def test_nodes_to_json_handles_empty_input():
    assert nodes_to_json(()) == []
    assert nodes_to_json(None) == []
