"""
Django settings for the fantamoto project.

Everything environment-specific is read from environment variables so the
same settings module serves local runs, the Prefect worker and the test suite.
"""

import os
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent

SECRET_KEY = os.environ.get('DJANGO_SECRET_KEY', 'django-insecure-fantamoto-dev-key')

DEBUG = os.environ.get('DJANGO_DEBUG', 'true').lower() == 'true'

ALLOWED_HOSTS = [h for h in os.environ.get('DJANGO_ALLOWED_HOSTS', 'localhost,127.0.0.1').split(',') if h]


INSTALLED_APPS = [
    'django.contrib.admin',
    'django.contrib.auth',
    'django.contrib.contenttypes',
    'django.contrib.sessions',
    'django.contrib.messages',
    'django.contrib.staticfiles',
    'fantasy',
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

ROOT_URLCONF = 'config.urls'

TEMPLATES = [
    {
        'BACKEND': 'django.template.backends.django.DjangoTemplates',
        'DIRS': [],
        'APP_DIRS': True,
        'OPTIONS': {
            'context_processors': [
                'django.template.context_processors.request',
                'django.contrib.auth.context_processors.auth',
                'django.contrib.messages.context_processors.messages',
            ],
        },
    },
]

WSGI_APPLICATION = 'config.wsgi.application'


# Database
# SQLite unless POSTGRES_DB is set

if os.environ.get('POSTGRES_DB'):
    DATABASES = {
        'default': {
            'ENGINE': 'django.db.backends.postgresql',
            'NAME': os.environ['POSTGRES_DB'],
            'USER': os.environ.get('POSTGRES_USER', 'postgres'),
            'PASSWORD': os.environ.get('POSTGRES_PASSWORD', ''),
            'HOST': os.environ.get('POSTGRES_HOST', 'localhost'),
            'PORT': os.environ.get('POSTGRES_PORT', '5432'),
        }
    }
else:
    DATABASES = {
        'default': {
            'ENGINE': 'django.db.backends.sqlite3',
            'NAME': BASE_DIR / 'db.sqlite3',
        }
    }

DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'


AUTH_PASSWORD_VALIDATORS = [
    {'NAME': 'django.contrib.auth.password_validation.UserAttributeSimilarityValidator'},
    {'NAME': 'django.contrib.auth.password_validation.MinimumLengthValidator'},
    {'NAME': 'django.contrib.auth.password_validation.CommonPasswordValidator'},
    {'NAME': 'django.contrib.auth.password_validation.NumericPasswordValidator'},
]

LANGUAGE_CODE = 'en-us'
TIME_ZONE = os.environ.get('DJANGO_TIME_ZONE', 'Europe/Rome')
USE_I18N = True
USE_TZ = True

STATIC_URL = 'static/'


# Logging

LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'standard': {
            'format': '%(asctime)s %(levelname)s %(name)s: %(message)s',
        },
    },
    'handlers': {
        'console': {
            'class': 'logging.StreamHandler',
            'formatter': 'standard',
        },
    },
    'loggers': {
        'fantasy': {
            'handlers': ['console'],
            'level': os.environ.get('DJANGO_LOG_LEVEL', 'INFO'),
        },
        'config': {
            'handlers': ['console'],
            'level': os.environ.get('DJANGO_LOG_LEVEL', 'INFO'),
        },
    },
}


# MotoGP upstream API

MOTOGP_API_BASE_URL = os.environ.get('MOTOGP_API_BASE_URL', 'https://api.motogp.pulselive.com/motogp/v1')
MOTOGP_RESULTS_API_URL = os.environ.get('MOTOGP_RESULTS_API_URL', f'{MOTOGP_API_BASE_URL}/results')
MOTOGP_API_TIMEOUT = float(os.environ.get('MOTOGP_API_TIMEOUT', 10))
MOTOGP_API_USER_AGENT = os.environ.get('MOTOGP_API_USER_AGENT', 'FantaMotoGP/1.0')

# Prefect retry policy for upstream fetch tasks
MOTOGP_TASK_RETRIES = int(os.environ.get('MOTOGP_TASK_RETRIES', 2))
MOTOGP_TASK_RETRY_DELAY = int(os.environ.get('MOTOGP_TASK_RETRY_DELAY', 30))


# Sync schedules (cron syntax, evaluated by Prefect)

SYNC_RIDERS_CRON = os.environ.get('SYNC_RIDERS_CRON', '0 3 * * 1')
SYNC_CALENDAR_CRON = os.environ.get('SYNC_CALENDAR_CRON', '0 3 * * 2')
RESULTS_POLL_CRON = os.environ.get('RESULTS_POLL_CRON', '*/30 * * * *')
RESULTS_SWEEP_CRON = os.environ.get('RESULTS_SWEEP_CRON', '0 6 * * *')


# Operator alerts

SLACK_WEBHOOK_URL = os.environ.get('SLACK_WEBHOOK_URL', '')
