import os
import sys

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

import pytest

from brixxo import create_app
from brixxo.api import marketplace
from brixxo.auth.notifications import NotificationCenter
from brixxo.auth.session import AuthSession, MemoryTokenStore
from brixxo.errors import AccessDenied

USER = {'_id': 'u1', 'name': 'Asha', 'role': 'homeowner'}


def make_auth(token=None):
    return AuthSession(MemoryTokenStore(token), client_factory=lambda token: ('client', token))


def test_init_without_token_skips_profile(monkeypatch):
    called = []
    monkeypatch.setattr(marketplace, 'get_profile', lambda c: called.append(c))
    auth = make_auth()
    assert auth.init() is None
    assert auth.loading is False
    assert called == []


def test_invalid_token_dropped(monkeypatch):
    def fake_profile(client):
        raise AccessDenied('jwt expired', status=401)

    monkeypatch.setattr(marketplace, 'get_profile', fake_profile)
    auth = make_auth('stale')
    assert auth.init() is None
    assert auth.store.get() is None
    assert auth.loading is False


def test_valid_token_loads_user(monkeypatch):
    seen = []
    monkeypatch.setattr(marketplace, 'get_profile', lambda c: seen.append(c) or USER)
    auth = make_auth('good')
    assert auth.init() == USER
    assert seen == [('client', 'good')]
    assert auth.require_role('homeowner') == USER
    with pytest.raises(AccessDenied):
        auth.require_role('company_admin')


def test_login_then_logout_tears_down(monkeypatch):
    monkeypatch.setattr(marketplace, 'login', lambda c, email, pw: {'token': 't1', 'user': USER})
    monkeypatch.setattr(marketplace, 'list_conversations', lambda c: [{'unreadCount': 2}, {'unreadCount': 3}])
    monkeypatch.setattr(marketplace, 'unread_notification_count', lambda c: 4)
    auth = make_auth()
    auth.login('a@example.com', 'pw')
    assert auth.store.get() == 't1'

    notes = NotificationCenter(auth)
    notes.start()
    assert notes.unread_count == 5
    assert notes.notification_count == 4

    auth.logout()
    assert auth.user is None
    assert auth.store.get() is None
    assert notes.active is False
    assert notes.unread_count == 0


def test_me_route_signed_out_and_in(monkeypatch):
    app = create_app('testing')
    monkeypatch.setattr(marketplace, 'get_profile', lambda c: USER)
    monkeypatch.setattr(marketplace, 'list_conversations', lambda c: [{'unreadCount': 1}])
    monkeypatch.setattr(marketplace, 'unread_notification_count', lambda c: 0)
    client = app.test_client()
    assert client.get('/auth/me').get_json() == {'user': None}

    with client.session_transaction() as sess:
        sess['token'] = 'tok'
    body = client.get('/auth/me').get_json()
    assert body['user'] == USER
    assert body['unreadCount'] == 1

    client.post('/auth/logout')
    with client.session_transaction() as sess:
        assert 'token' not in sess
    # counters are not kept between requests
    assert client.get('/auth/me').get_json() == {'user': None}
