"""Signed-in user state, passed explicitly to whatever needs it.

``AuthSession.init`` reads the bearer token from client storage and validates
it against the backend; ``logout`` clears the token, forgets the user and
runs the teardown callbacks registered on the same ``AuthSession``.

In the web app an ``AuthSession`` lives for one request (``g.auth``), so
teardowns only reach objects started in that request. Nothing outlives a
request: after a logout the next ``/auth/me`` reports no user and no counters.
"""
from __future__ import annotations

import functools
import logging
from typing import Callable, Dict, List, Optional

from flask import g, session

from brixxo.api import marketplace
from brixxo.backend_client import client_from_config
from brixxo.errors import AccessDenied, BackendError

logger = logging.getLogger(__name__)

ROLES = ('homeowner', 'company_admin', 'professional', 'admin')


class SessionTokenStore:
    """Keeps the token in the signed Flask session cookie."""

    key = 'token'

    def get(self) -> Optional[str]:
        return session.get(self.key)

    def set(self, token: str) -> None:
        session[self.key] = token

    def clear(self) -> None:
        session.pop(self.key, None)


class MemoryTokenStore:
    def __init__(self, token: Optional[str] = None) -> None:
        self.token = token

    def get(self) -> Optional[str]:
        return self.token

    def set(self, token: str) -> None:
        self.token = token

    def clear(self) -> None:
        self.token = None


class AuthSession:
    def __init__(self, store, client_factory: Callable = client_from_config) -> None:
        self.store = store
        self.client_factory = client_factory
        self.user: Optional[Dict] = None
        self.loading = True
        self._teardowns: List[Callable[[], None]] = []

    def client(self):
        return self.client_factory(self.store.get())

    def init(self) -> Optional[Dict]:
        token = self.store.get()
        if not token:
            self.loading = False
            return None
        try:
            self.user = marketplace.get_profile(self.client())
        except BackendError as e:
            logger.warning('Profile fetch failed: %s', e)
            self.store.clear()
            self.user = None
        finally:
            self.loading = False
        return self.user

    def login(self, email: str, password: str) -> Dict:
        data = marketplace.login(self.client_factory(None), email, password)
        self.store.set(data['token'])
        self.user = data['user']
        return self.user

    def register(self, name: str, email: str, password: str, role: str) -> Dict:
        data = marketplace.register(self.client_factory(None), name, email, password, role)
        self.store.set(data['token'])
        self.user = data['user']
        return self.user

    def logout(self) -> None:
        self.store.clear()
        self.user = None
        teardowns, self._teardowns = self._teardowns, []
        for teardown in teardowns:
            teardown()

    def on_logout(self, callback: Callable[[], None]) -> None:
        self._teardowns.append(callback)

    @property
    def role(self) -> Optional[str]:
        return self.user.get('role') if self.user else None

    @property
    def user_id(self) -> Optional[str]:
        return self.user.get('_id') if self.user else None

    def require_role(self, *roles: str) -> Dict:
        if not self.user or (roles and self.role not in roles):
            raise AccessDenied()
        return self.user


def current_auth() -> AuthSession:
    """The request's ``AuthSession``, initialised on first use."""
    if 'auth' not in g:
        auth = AuthSession(SessionTokenStore())
        auth.init()
        g.auth = auth
    return g.auth


def reader_client():
    """Client for public reads; carries the token when someone is signed in."""
    auth = current_auth()
    return auth.client() if auth.user else client_from_config()


def role_required(*roles):
    """Route decorator; unauthorised callers get the inline Access Denied reply."""
    def decorator(view):
        @functools.wraps(view)
        def wrapped(*args, **kwargs):
            current_auth().require_role(*roles)
            return view(*args, **kwargs)
        return wrapped
    return decorator
