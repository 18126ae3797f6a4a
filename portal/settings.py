"""
Django settings for the job portal front-end.
"""

from pathlib import Path
import os

# Build paths inside the project like this: BASE_DIR / 'subdir'.
BASE_DIR = Path(__file__).resolve().parent.parent


# -------------------------
# Basic / environment
# -------------------------
SECRET_KEY = os.environ.get('PORTAL_SECRET_KEY', 'django-insecure-dev-secret-for-local')

DEBUG = os.environ.get('PORTAL_DEBUG', 'True').lower() in ('1', 'true', 'yes')

ALLOWED_HOSTS = (
    os.environ.get('PORTAL_ALLOWED_HOSTS', '')
    .split(',') if os.environ.get('PORTAL_ALLOWED_HOSTS') else ['localhost', '127.0.0.1', 'testserver']
)


# -------------------------
# Backend API
# -------------------------
API_BASE_URL = os.environ.get('PORTAL_API_BASE_URL', 'http://localhost:8080').rstrip('/')
API_TIMEOUT = float(os.environ.get('PORTAL_API_TIMEOUT', 10))

# Jobs shown per page on /jobs
JOBS_PAGE_SIZE = 10


# -------------------------
# Installed apps / middleware
# -------------------------
INSTALLED_APPS = [
    'django.contrib.sessions',
    'django.contrib.staticfiles',

    # your apps
    'accounts',
    'jobs',
]

MIDDLEWARE = [
    'django.middleware.security.SecurityMiddleware',
    'django.contrib.sessions.middleware.SessionMiddleware',
    'django.middleware.common.CommonMiddleware',
    'django.middleware.csrf.CsrfViewMiddleware',
    'accounts.middleware.ViewerMiddleware',
    'django.middleware.clickjacking.XFrameOptionsMiddleware',
]

ROOT_URLCONF = 'portal.urls'

# Routes are declared without trailing slashes
APPEND_SLASH = False


# -------------------------
# Templates
# -------------------------
TEMPLATES = [
    {
        'BACKEND': 'django.template.backends.django.DjangoTemplates',
        'DIRS': [os.path.join(BASE_DIR, 'templates')],
        'APP_DIRS': True,
        'OPTIONS': {
            'context_processors': [
                'django.template.context_processors.request',
                'django.template.context_processors.static',
                'django.template.context_processors.csrf',
                'accounts.context_processors.header',
            ],
        },
    },
]


WSGI_APPLICATION = 'portal.wsgi.application'


# -------------------------
# Database
# -------------------------
# All domain data lives behind the backend API; nothing is persisted here.
DATABASES = {}


# -------------------------
# Sessions
# -------------------------
# Session data lives in the signed cookie itself; no server-side store
SESSION_ENGINE = os.environ.get('PORTAL_SESSION_ENGINE', 'django.contrib.sessions.backends.signed_cookies')
SESSION_COOKIE_AGE = 60 * 60 * 24  # 24 hours
SESSION_COOKIE_HTTPONLY = True
SESSION_COOKIE_SAMESITE = 'Lax'
SESSION_COOKIE_SECURE = not DEBUG


# -------------------------
# Internationalization
# -------------------------
LANGUAGE_CODE = 'en-gb'
TIME_ZONE = os.environ.get('PORTAL_TIME_ZONE', 'UTC')
USE_I18N = True
USE_TZ = True


# -------------------------
# Static
# -------------------------
STATIC_URL = '/static/'
STATICFILES_DIRS = [os.path.join(BASE_DIR, 'static')] if os.path.isdir(os.path.join(BASE_DIR, 'static')) else []
STATIC_ROOT = os.environ.get('PORTAL_STATIC_ROOT', os.path.join(BASE_DIR, 'staticfiles'))


# -------------------------
# Auth
# -------------------------
LOGIN_URL = '/login'

# CV uploads forwarded to the backend
CV_MAX_UPLOAD_SIZE = 5 * 1024 * 1024
CV_ALLOWED_EXTENSIONS = ('.pdf', '.doc', '.docx')


# -------------------------
# Logging (basic)
# -------------------------
LOG_LEVEL = os.environ.get('PORTAL_LOG_LEVEL', 'INFO').upper()

LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'simple': {'format': '%(asctime)s [%(levelname)s] %(name)s: %(message)s'},
    },
    'handlers': {
        'console': {'class': 'logging.StreamHandler', 'formatter': 'simple'},
    },
    'root': {
        'handlers': ['console'],
        'level': LOG_LEVEL,
    },
    'loggers': {
        'django': {
            'handlers': ['console'],
            'level': 'INFO' if DEBUG else 'WARNING',
            'propagate': False,
        },
    },
}


# -------------------------
# Security
# -------------------------
CSRF_COOKIE_SECURE = not DEBUG
if not DEBUG:
    SECURE_HSTS_SECONDS = int(os.environ.get('PORTAL_HSTS_SECONDS', 0))
    SECURE_CONTENT_TYPE_NOSNIFF = True
