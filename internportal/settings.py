from pathlib import Path
import os


def env_flag(name, default=False):
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


# Build paths inside the project
BASE_DIR = Path(__file__).resolve().parent.parent

# Security
SECRET_KEY = os.environ.get(
    'PORTAL_SECRET_KEY',
    'django-insecure-3v#q8r!w1m^t7k@pz4x0e$2h9c&n6b5_yf+ud=sa8lj*oi0g1r',
)
DEBUG = env_flag('PORTAL_DEBUG', True)
ALLOWED_HOSTS = [h for h in os.environ.get('PORTAL_ALLOWED_HOSTS', 'localhost,127.0.0.1').split(',') if h]

# Installed Apps
INSTALLED_APPS = [
    'django.contrib.admin',
    'django.contrib.auth',
    'django.contrib.contenttypes',
    'django.contrib.sessions',
    'django.contrib.messages',
    'django.contrib.staticfiles',

    # Third-party apps
    'rest_framework',

    # Custom apps
    'users',
    'submissions',
    'notifications.apps.NotificationsConfig',
]

# Django REST Framework Settings
REST_FRAMEWORK = {
    'DEFAULT_AUTHENTICATION_CLASSES': [
        'internportal.authentication.PortalSessionAuthentication',
    ],
    'DEFAULT_PERMISSION_CLASSES': [
        # Default to allowing anyone, protect views individually
        'rest_framework.permissions.AllowAny',
    ],
    'DEFAULT_PARSER_CLASSES': [
        'rest_framework.parsers.JSONParser',
        'rest_framework.parsers.FormParser',
        'rest_framework.parsers.MultiPartParser',
    ],
    'EXCEPTION_HANDLER': 'internportal.exceptions.portal_exception_handler',
}

# Session settings
SESSION_ENGINE = 'django.contrib.sessions.backends.db'
SESSION_COOKIE_NAME = 'sessionid'
SESSION_COOKIE_AGE = 60 * 60 * 24  # one day
SESSION_SAVE_EVERY_REQUEST = False
SESSION_EXPIRE_AT_BROWSER_CLOSE = False

# Security settings for cookies
SESSION_COOKIE_SECURE = not DEBUG
SESSION_COOKIE_HTTPONLY = True # Prevent client-side JS access to session cookie
SESSION_COOKIE_SAMESITE = 'Lax'

CSRF_COOKIE_SECURE = not DEBUG
CSRF_COOKIE_HTTPONLY = False # CSRF token NEEDS to be readable by JS
CSRF_COOKIE_SAMESITE = 'Lax'

# Middleware
MIDDLEWARE = [
    'django.middleware.security.SecurityMiddleware',
    'django.contrib.sessions.middleware.SessionMiddleware',
    'django.middleware.common.CommonMiddleware',
    'django.middleware.csrf.CsrfViewMiddleware',
    'django.contrib.auth.middleware.AuthenticationMiddleware',
    'django.contrib.messages.middleware.MessageMiddleware',
    'django.middleware.clickjacking.XFrameOptionsMiddleware',
]

# URL Configuration
ROOT_URLCONF = 'internportal.urls'

# Templates (the admin site and the HTML email bodies under notifications/templates)
TEMPLATES = [
    {
        'BACKEND': 'django.template.backends.django.DjangoTemplates',
        'DIRS': [],
        'APP_DIRS': True,
        'OPTIONS': {
            'context_processors': [
                'django.template.context_processors.debug',
                'django.template.context_processors.request',
                'django.contrib.auth.context_processors.auth',
                'django.contrib.messages.context_processors.messages',
            ],
        },
    },
]

WSGI_APPLICATION = 'internportal.wsgi.application'
ASGI_APPLICATION = 'internportal.asgi.application'

# Database Configuration (PostgreSQL)
DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.postgresql',
        'NAME': os.environ.get('PORTAL_DB_NAME', 'internportal'),
        'USER': os.environ.get('PORTAL_DB_USER', 'postgres'),
        'PASSWORD': os.environ.get('PORTAL_DB_PASSWORD', ''),
        'HOST': os.environ.get('PORTAL_DB_HOST', 'localhost'),
        'PORT': os.environ.get('PORTAL_DB_PORT', '5432'),
        # Connections are kept per worker thread and closed at the end of
        # each request once they exceed this age.
        'CONN_MAX_AGE': int(os.environ.get('PORTAL_DB_CONN_MAX_AGE', '60')),
        'CONN_HEALTH_CHECKS': True,
    }
}

# Password hashing (one-way hash capability used by users.credentials)
PASSWORD_HASHERS = [
    'django.contrib.auth.hashers.PBKDF2PasswordHasher',
    'django.contrib.auth.hashers.PBKDF2SHA1PasswordHasher',
]

# Internationalization
LANGUAGE_CODE = 'en-us'
TIME_ZONE = 'UTC'
USE_I18N = True
USE_TZ = True

STATIC_URL = '/static/'

# Default Auto Field
DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'

# Uploads are held in memory and written to the database as blobs
FILE_UPLOAD_MAX_MEMORY_SIZE = 10 * 1024 * 1024

# Email (SMTP provider)
EMAIL_BACKEND = os.environ.get('PORTAL_EMAIL_BACKEND', 'django.core.mail.backends.smtp.EmailBackend')
EMAIL_HOST = os.environ.get('PORTAL_EMAIL_HOST', 'smtp.gmail.com')
EMAIL_PORT = int(os.environ.get('PORTAL_EMAIL_PORT', '465'))
EMAIL_USE_SSL = env_flag('PORTAL_EMAIL_USE_SSL', True)
EMAIL_HOST_USER = os.environ.get('PORTAL_EMAIL_USER', '')
EMAIL_HOST_PASSWORD = os.environ.get('PORTAL_EMAIL_PASSWORD', '')
EMAIL_TIMEOUT = 20
DEFAULT_FROM_EMAIL = os.environ.get('PORTAL_EMAIL_FROM', EMAIL_HOST_USER or 'noreply@localhost')

# Portal behaviour
PORTAL = {
    'FRONTEND_URL': os.environ.get('PORTAL_FRONTEND_URL', 'http://localhost:4000'),
    # Logbook cutoff and ISO week numbering are evaluated in this zone
    'LOGBOOK_TIME_ZONE': os.environ.get('PORTAL_LOGBOOK_TIME_ZONE', 'Africa/Lagos'),
    'LOGBOOK_CUTOFF_WEEKDAY': 0,  # Monday
    'LOGBOOK_CUTOFF_HOUR': 9,
    'LOGBOOK_GRADES': ['A+', 'A', 'A-', 'B+', 'B', 'B-', 'C+', 'C', 'C-', 'D', 'E', 'F'],
    'MAX_ATTACHMENT_SIZE': 10 * 1024 * 1024,
    'PASSWORD_MIN_LENGTH': 6,
    'RESET_PASSWORD_MIN_LENGTH': 8,
    'RESET_TOKEN_TTL_SECONDS': 60 * 60,
    'PAGE_SIZE': 10,
    'SMALL_PAGE_SIZE': 5,
    'MAX_PAGE_SIZE': 100,
}

LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'verbose': {
            'format': '[{asctime}] {levelname} {name}: {message}',
            'style': '{',
        },
    },
    'handlers': {
        'console': {
            'class': 'logging.StreamHandler',
            'formatter': 'verbose',
        },
    },
    'root': {
        'handlers': ['console'],
        'level': 'INFO',
    },
    'loggers': {
        'django': {
            'handlers': ['console'],
            'level': 'INFO',
            'propagate': False,
        },
        'users': {'handlers': ['console'], 'level': 'DEBUG', 'propagate': False},
        'submissions': {'handlers': ['console'], 'level': 'DEBUG', 'propagate': False},
        'notifications': {'handlers': ['console'], 'level': 'DEBUG', 'propagate': False},
        'internportal': {'handlers': ['console'], 'level': 'DEBUG', 'propagate': False},
    },
}
