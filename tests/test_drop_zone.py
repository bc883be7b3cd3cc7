import io
import os
import sys

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from brixxo import create_app
from brixxo.api import marketplace
from brixxo.uploads.validator import DropZone, UploadCandidate, validate_files

MB = 1024 * 1024


class FakeClock:
    def __init__(self):
        self.now = 100.0

    def __call__(self):
        return self.now


def image(name, size=1024, content_type='image/png'):
    return UploadCandidate(name, content_type, size)


def test_oversized_image_rejected_with_name():
    zone = DropZone(max_size_mb=10)
    zone.add_files([image('terrace.png', 15 * MB)])
    assert zone.selected_files == []
    assert 'terrace.png' in zone.error
    assert zone.error == 'terrace.png: File size exceeds 10MB limit.'


def test_eleven_files_against_limit_of_ten():
    zone = DropZone(max_files=10)
    accepted = zone.add_files([image(f'{i}.jpg', content_type='image/jpeg') for i in range(11)])
    assert len(accepted) == 10
    assert len(zone.selected_files) == 10
    assert zone.error == 'Maximum 10 files allowed.'
    assert zone.full


def test_wrong_type_reported_first():
    valid, errors = validate_files(
        [image('notes.pdf', content_type='application/pdf'), image('big.gif', 20 * MB, 'image/gif')],
        selected_count=0,
    )
    assert valid == []
    assert errors[0] == 'notes.pdf: Invalid file type. Only images are allowed.'
    assert len(errors) == 2


def test_existing_selection_counts_toward_limit():
    zone = DropZone(max_files=3)
    zone.add_files([image('a.png'), image('b.png')])
    zone.add_files([image('c.png'), image('d.png')])
    assert [f.filename for f in zone.selected_files] == ['a.png', 'b.png', 'c.png']


def test_error_clears_after_five_seconds():
    clock = FakeClock()
    zone = DropZone(clock=clock)
    zone.add_files([image('x.bmp', content_type='image/bmp')])
    assert zone.error
    clock.now += 4.9
    assert zone.error
    clock.now += 0.2
    assert zone.error == ''


def test_upload_route_forwards_only_valid_images(monkeypatch):
    app = create_app('testing')
    app.config.update(UPLOAD_MAX_SIZE_MB=1)
    monkeypatch.setattr(marketplace, 'get_profile', lambda client: {'_id': 'c1', 'role': 'company_admin'})
    sent = []

    def fake_upload(client, files, multiple=False):
        sent.extend(name for _, (name, _stream, _ct) in files)
        return ['https://img.example/ok.png']

    monkeypatch.setattr(marketplace, 'upload_images', fake_upload)
    client = app.test_client()
    with client.session_transaction() as sess:
        sess['token'] = 'tok'

    resp = client.post(
        '/uploads/images',
        data={'images': [
            (io.BytesIO(b'x' * 10), 'ok.png', 'image/png'),
            (io.BytesIO(b'x' * (2 * MB)), 'huge.png', 'image/png'),
        ]},
        content_type='multipart/form-data',
    )
    assert resp.status_code == 200
    body = resp.get_json()
    assert sent == ['ok.png']
    assert body['urls'] == ['https://img.example/ok.png']
    assert 'huge.png' in body['error']
