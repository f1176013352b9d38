"""
Django settings for hireflow project.
"""

from pathlib import Path
import os

# Build paths inside the project like this: BASE_DIR / 'subdir'.
BASE_DIR = Path(__file__).resolve().parent.parent


def env_bool(name, default=False):
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


# -------------------------
# Basic / environment
# -------------------------
SECRET_KEY = os.environ.get('HIREFLOW_SECRET_KEY', 'django-insecure-dev-secret-for-local')

DEBUG = env_bool('HIREFLOW_DEBUG', True)

ALLOWED_HOSTS = [h.strip() for h in os.environ.get('HIREFLOW_ALLOWED_HOSTS', '').split(',') if h.strip()]


# -------------------------
# Installed apps / middleware
# -------------------------
INSTALLED_APPS = [
    'django.contrib.admin',
    'django.contrib.auth',
    'django.contrib.contenttypes',
    'django.contrib.sessions',
    'django.contrib.messages',
    'django.contrib.staticfiles',

    # project apps
    'accounts',
    'jobs',
    'interview',
]

MIDDLEWARE = [
    'django.middleware.security.SecurityMiddleware',
    'django.contrib.sessions.middleware.SessionMiddleware',
    'django.middleware.common.CommonMiddleware',
    'django.middleware.csrf.CsrfViewMiddleware',
    'django.contrib.auth.middleware.AuthenticationMiddleware',
    'django.contrib.messages.middleware.MessageMiddleware',
    'django.middleware.clickjacking.XFrameOptionsMiddleware',
]

ROOT_URLCONF = 'hireflow.urls'


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
                'django.template.context_processors.media',
                'django.template.context_processors.csrf',
                'django.contrib.auth.context_processors.auth',
                'django.contrib.messages.context_processors.messages',
            ],
        },
    },
]


WSGI_APPLICATION = 'hireflow.wsgi.application'


# -------------------------
# Database (sqlite for dev)
# -------------------------
DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': BASE_DIR / 'db.sqlite3',
    }
}


# -------------------------
# Password validation
# -------------------------
AUTH_PASSWORD_VALIDATORS = [
    {'NAME': 'django.contrib.auth.password_validation.UserAttributeSimilarityValidator'},
    {'NAME': 'django.contrib.auth.password_validation.MinimumLengthValidator'},
    {'NAME': 'django.contrib.auth.password_validation.CommonPasswordValidator'},
    {'NAME': 'django.contrib.auth.password_validation.NumericPasswordValidator'},
]


# -------------------------
# Internationalization
# -------------------------
LANGUAGE_CODE = 'en-us'
TIME_ZONE = os.environ.get('HIREFLOW_TIME_ZONE', 'UTC')
USE_I18N = True
USE_TZ = True


# -------------------------
# Static & media
# -------------------------
STATIC_URL = '/static/'
STATIC_ROOT = os.environ.get('HIREFLOW_STATIC_ROOT', os.path.join(BASE_DIR, 'staticfiles'))

MEDIA_URL = '/media/'
MEDIA_ROOT = os.environ.get('HIREFLOW_MEDIA_ROOT', os.path.join(BASE_DIR, 'media'))


# -------------------------
# Auth
# -------------------------
DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'
AUTH_USER_MODEL = 'accounts.User'

LOGIN_URL = '/accounts/login/'
LOGIN_REDIRECT_URL = '/'
LOGOUT_REDIRECT_URL = '/accounts/login/'


# -------------------------
# Email configuration
# -------------------------
# Default: console backend in development (prints emails to terminal)
EMAIL_BACKEND = os.environ.get('HIREFLOW_EMAIL_BACKEND', 'django.core.mail.backends.console.EmailBackend')
DEFAULT_FROM_EMAIL = os.environ.get('HIREFLOW_DEFAULT_FROM_EMAIL', 'HireFlow <no-reply@hireflow.local>')

# SMTP calls made while notifying candidates must not block a scheduling batch forever
EMAIL_TIMEOUT = int(os.environ.get('HIREFLOW_EMAIL_TIMEOUT', 10))

# Allow shorthand HIREFLOW_EMAIL_BACKEND='smtp' for convenience
if EMAIL_BACKEND.lower() in ('smtp', 'django.core.mail.backends.smtp.emailbackend'):
    EMAIL_BACKEND = 'django.core.mail.backends.smtp.EmailBackend'
    EMAIL_HOST = os.environ.get('HIREFLOW_EMAIL_HOST', 'smtp.gmail.com')
    EMAIL_PORT = int(os.environ.get('HIREFLOW_EMAIL_PORT', 587))
    EMAIL_USE_TLS = env_bool('HIREFLOW_EMAIL_USE_TLS', True)
    EMAIL_HOST_USER = os.environ.get('HIREFLOW_EMAIL_HOST_USER', '')
    EMAIL_HOST_PASSWORD = os.environ.get('HIREFLOW_EMAIL_HOST_PASSWORD', '')


# -------------------------
# Resume intake
# -------------------------
# the mock parser sleeps this long to imitate a real parsing service
RESUME_PARSER_DELAY_SECONDS = float(os.environ.get('HIREFLOW_RESUME_PARSER_DELAY_SECONDS', 2.0))
MAX_RESUME_BYTES = int(os.environ.get('HIREFLOW_MAX_RESUME_BYTES', 5 * 1024 * 1024))
RESUME_ALLOWED_EXTENSIONS = ('.pdf', '.doc', '.docx')
# an apply flow stuck in "submitting" longer than this is treated as failed
APPLICATION_SUBMIT_TIMEOUT_SECONDS = int(os.environ.get('HIREFLOW_APPLICATION_SUBMIT_TIMEOUT', 60))


# -------------------------
# Interview scheduling
# -------------------------
INTERVIEW_DEFAULT_DURATION = 60
INTERVIEW_MEETING_BASE_URL = os.environ.get('HIREFLOW_MEETING_BASE_URL', 'https://meet.google.com')
# When True, a failed invitation email undoes that item's interview + status change
INTERVIEW_ROLLBACK_ON_NOTIFY_FAILURE = env_bool('HIREFLOW_ROLLBACK_ON_NOTIFY_FAILURE', False)


# -------------------------
# Logging (basic)
# -------------------------
LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'standard': {'format': '[{levelname}] {asctime} {name}: {message}', 'style': '{'},
    },
    'handlers': {
        'console': {'class': 'logging.StreamHandler', 'formatter': 'standard'},
    },
    'root': {
        'handlers': ['console'],
        'level': os.environ.get('HIREFLOW_LOG_LEVEL', 'INFO'),
    },
    'loggers': {
        'django': {
            'handlers': ['console'],
            'level': 'INFO' if DEBUG else 'WARNING',
            'propagate': False,
        },
        'jobs': {'level': 'DEBUG' if DEBUG else 'INFO'},
        'interview': {'level': 'DEBUG' if DEBUG else 'INFO'},
    },
}


# -------------------------
# Security
# -------------------------
if not DEBUG:
    SESSION_COOKIE_SECURE = env_bool('HIREFLOW_SECURE_COOKIES', True)
    CSRF_COOKIE_SECURE = SESSION_COOKIE_SECURE
    SECURE_SSL_REDIRECT = env_bool('HIREFLOW_SSL_REDIRECT', False)
