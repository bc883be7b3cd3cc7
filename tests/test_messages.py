import os
import sys

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from brixxo import create_app
from brixxo.api import marketplace
from brixxo.errors import BackendError, TransportError

USER = {'_id': 'h1', 'role': 'homeowner'}


def setup_app(monkeypatch, user=USER):
    app = create_app('testing')
    monkeypatch.setattr(marketplace, 'get_profile', lambda c: user)
    client = app.test_client()
    with client.session_transaction() as sess:
        sess['token'] = 'tok'
    return app, client


def test_conversations_with_unread_total(monkeypatch):
    app, client = setup_app(monkeypatch)
    monkeypatch.setattr(marketplace, 'list_conversations', lambda c: [{'unreadCount': 2}, {'unreadCount': None}])
    body = client.get('/messages/').get_json()
    assert body['unreadCount'] == 2
    assert len(body['conversations']) == 2


def test_opening_conversation_marks_it_read(monkeypatch):
    app, client = setup_app(monkeypatch)
    read = []
    monkeypatch.setattr(marketplace, 'list_messages', lambda c, cid: [{'content': 'hi'}])
    monkeypatch.setattr(marketplace, 'mark_conversation_read', lambda c, cid: read.append(cid) or {})
    monkeypatch.setattr(marketplace, 'list_conversations', lambda c: [{'unreadCount': 1}])
    body = client.get('/messages/conv_h1_c1_i1').get_json()
    assert body == {'messages': [{'content': 'hi'}], 'unreadCount': 1}
    assert read == ['conv_h1_c1_i1']


def test_mark_read_failure_still_shows_messages(monkeypatch):
    app, client = setup_app(monkeypatch)

    def fail(c, cid):
        raise BackendError('boom', status=500)

    monkeypatch.setattr(marketplace, 'list_messages', lambda c, cid: [])
    monkeypatch.setattr(marketplace, 'mark_conversation_read', fail)
    monkeypatch.setattr(marketplace, 'list_conversations', lambda c: [])
    resp = client.get('/messages/c1')
    assert resp.status_code == 200
    assert resp.get_json()['unreadCount'] == 0


def test_send_message(monkeypatch):
    app, client = setup_app(monkeypatch)
    sent = []
    monkeypatch.setattr(
        marketplace, 'send_message',
        lambda c, cid, content: sent.append((cid, content)) or {'_id': 'm1', 'content': content},
    )
    assert client.post('/messages/c1', json={'content': '   '}).status_code == 400
    resp = client.post('/messages/c1', json={'content': ' When can you visit? '})
    assert resp.status_code == 201
    assert sent == [('c1', 'When can you visit?')]


def test_send_failure_is_502(monkeypatch):
    app, client = setup_app(monkeypatch)

    def fail(c, cid, content):
        raise TransportError('offline')

    monkeypatch.setattr(marketplace, 'send_message', fail)
    resp = client.post('/messages/c1', json={'content': 'hello'})
    assert resp.status_code == 502
    assert resp.get_json()['message'] == 'Error sending message'


def test_chat_requires_sign_in():
    app = create_app('testing')
    assert app.test_client().get('/messages/').status_code == 403
