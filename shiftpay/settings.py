"""
Django settings for shiftpay project.
"""

import sys
from pathlib import Path

from decouple import config, Csv  # pip install python-decouple

# Build paths inside the project like this: BASE_DIR / 'subdir'.
BASE_DIR = Path(__file__).resolve().parent.parent

# SECURITY SETTINGS
SECRET_KEY = config("SECRET_KEY")
if not SECRET_KEY:
    raise ValueError("SECRET_KEY environment variable must be set")

DEBUG = config("DEBUG", default=False, cast=bool)

ALLOWED_HOSTS = config("ALLOWED_HOSTS", default="localhost,127.0.0.1", cast=Csv())

# Check if we're running tests
TESTING = "test" in sys.argv or "pytest" in sys.modules

# Application definition
INSTALLED_APPS = [
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "django.contrib.sessions",
    # Third party
    "rest_framework",
    # Local apps
    "core",
    "payroll",
    "integrations",
]

MIDDLEWARE = []

# Add security middleware only if not testing
if not TESTING:
    MIDDLEWARE.append("django.middleware.security.SecurityMiddleware")

MIDDLEWARE += [
    "django.contrib.sessions.middleware.SessionMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "django.contrib.auth.middleware.AuthenticationMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
]

ROOT_URLCONF = "shiftpay.urls"

TEMPLATES = []

WSGI_APPLICATION = "shiftpay.wsgi.application"

# Engine state is not persisted; the database only backs auth and sessions
DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": config("SQLITE_PATH", default=str(BASE_DIR / "db.sqlite3")),
    }
}

# Production security settings
if not DEBUG:
    SECURE_CONTENT_TYPE_NOSNIFF = True
    SESSION_COOKIE_SECURE = config("SESSION_COOKIE_SECURE", default=True, cast=bool)
    CSRF_COOKIE_SECURE = config("CSRF_COOKIE_SECURE", default=True, cast=bool)
    X_FRAME_OPTIONS = "DENY"

# REST Framework settings
REST_FRAMEWORK = {
    "DEFAULT_AUTHENTICATION_CLASSES": [
        "rest_framework.authentication.SessionAuthentication",
        "rest_framework.authentication.BasicAuthentication",
    ],
    "DEFAULT_PERMISSION_CLASSES": [
        "rest_framework.permissions.IsAuthenticated",
    ],
    "DEFAULT_RENDERER_CLASSES": [
        "rest_framework.renderers.JSONRenderer",
    ],
    "DEFAULT_PARSER_CLASSES": [
        "rest_framework.parsers.JSONParser",
    ],
    "EXCEPTION_HANDLER": "core.exceptions.custom_exception_handler",
    "DEFAULT_THROTTLE_CLASSES": [
        "rest_framework.throttling.UserRateThrottle",
    ],
    "DEFAULT_THROTTLE_RATES": {
        "user": config("USER_THROTTLE_RATE", default="5000/hour"),
    },
}

# Pay breakdown engine
PAYROLL_ENGINE = {
    # Daily threshold of the 100% tier
    "STANDARD_HOURS": config("PAYROLL_STANDARD_HOURS", default="6.67"),
    # Hours paid at 125% before spilling to 150%
    "MID_TIER_THRESHOLD": config("PAYROLL_MID_TIER_THRESHOLD", default="2"),
    # "day": tier the day's total once, "shift": fold shift by shift
    "ALLOCATION_MODE": config("PAYROLL_ALLOCATION_MODE", default="day"),
    "PER_DIEM_TIMELINE": [
        {"year": 2000, "month": 1, "rates": "33.90"},
        {"year": 2024, "month": 9, "rates": "36.30"},
    ],
    "MEAL_ALLOWANCE_TIMELINE": [
        {"year": 2000, "month": 1, "rates": {"small": "13.50", "large": "19.70"}},
        {"year": 2024, "month": 9, "rates": {"small": "14.50", "large": "21.10"}},
    ],
    "PAID_HOLIDAYS": [
        "Rosh Hashana",
        "Rosh Hashana II",
        "Yom Kippur",
        "Sukkot I",
        "Shmini Atzeret",
        "Pesach I",
        "Yom HaAtzma'ut",
        "Shavuot I",
    ],
    "PARTIAL_START_EVENTS": [
        "Yom HaZikaron",
        "Sukkot VII (Hoshana Rabba)",
    ],
}

# Internationalization
LANGUAGE_CODE = "en-us"
TIME_ZONE = "Asia/Jerusalem"  # Israeli time zone
USE_I18N = True
USE_TZ = True

# Default primary key field type
DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

LOG_DIR = Path(config("LOG_DIR", default=str(BASE_DIR / "logs")))
LOG_DIR.mkdir(exist_ok=True)

# Logging configuration with rotation
LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,

    "filters": {
        "pii_redactor": {"()": "shiftpay.logging_filters.PIIRedactorFilter"},
    },

    "formatters": {
        "verbose": {"format": "{levelname} {asctime} {module} {process:d} {thread:d} {message}", "style": "{"},
        "simple":  {"format": "{levelname} {asctime} {message}", "style": "{"},
        "minimal": {"format": "{levelname} {message}", "style": "{"},
    },

    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "minimal",
            "level": "DEBUG" if DEBUG else "INFO",
            "filters": ["pii_redactor"],
        },
        "django_file": {
            "class": "logging.handlers.RotatingFileHandler",
            "filename": LOG_DIR / "django.log",
            "maxBytes": 5 * 1024 * 1024,
            "backupCount": 3,
            "formatter": "simple",
            "level": "INFO",
            "encoding": "utf-8",
            "filters": ["pii_redactor"],
        },
        "payroll_file": {
            "class": "logging.handlers.RotatingFileHandler",
            "filename": LOG_DIR / "payroll.log",
            "maxBytes": 2 * 1024 * 1024,
            "backupCount": 2,
            "formatter": "verbose",
            "level": "INFO",
            "encoding": "utf-8",
            "filters": ["pii_redactor"],
        },
    },

    "loggers": {
        "django":       {"handlers": ["django_file"] if not DEBUG else ["console"], "level": "INFO", "propagate": False},
        "core":         {"handlers": ["django_file"] if not DEBUG else ["console"], "level": "INFO", "propagate": False},
        "payroll":      {"handlers": ["payroll_file"] + (["console"] if DEBUG else []), "level": "DEBUG" if DEBUG else "INFO", "propagate": False},
        "integrations": {"handlers": ["django_file"] if not DEBUG else ["console"], "level": "INFO", "propagate": False},

        # root
        "": {"handlers": ["console"], "level": "WARNING"},
    },
}
