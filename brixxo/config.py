import os


def _optional_float(name):
    value = os.getenv(name)
    return float(value) if value else None


class BaseConfig:
    SECRET_KEY = os.getenv('SECRET_KEY', 'change-me')
    SQLALCHEMY_DATABASE_URI = os.getenv('DATABASE_URL', 'sqlite:///app.db')
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SESSION_COOKIE_SAMESITE = 'Lax'
    SESSION_COOKIE_SECURE = False

    # Marketplace REST backend; every endpoint is served under /api
    BACKEND_API_URL = os.getenv('BACKEND_API_URL', 'http://localhost:5000')
    # None leaves hang detection to the transport
    BACKEND_TIMEOUT = _optional_float('BACKEND_TIMEOUT')

    UPLOAD_MAX_FILES = int(os.getenv('UPLOAD_MAX_FILES', '10'))
    UPLOAD_MAX_SIZE_MB = float(os.getenv('UPLOAD_MAX_SIZE_MB', '10'))
    if os.getenv('DRAFT_UPLOAD_DIR'):
        DRAFT_UPLOAD_DIR = os.getenv('DRAFT_UPLOAD_DIR')
    DRAFT_MAX_AGE_DAYS = int(os.getenv('DRAFT_MAX_AGE_DAYS', '30'))

class DevConfig(BaseConfig):
    DEBUG = True
    ENV = 'development'

class ProdConfig(BaseConfig):
    DEBUG = False
    ENV = 'production'
    SESSION_COOKIE_SECURE = True

class TestConfig(BaseConfig):
    TESTING = True
    ENV = 'testing'
    SECRET_KEY = 'testing'
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
