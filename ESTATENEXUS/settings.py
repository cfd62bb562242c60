"""
Django settings for the ESTATENEXUS project.

Every deployment-specific value comes from the environment (optionally
loaded from a ``.env`` file). The relational store is only wired up when
its host and password are present; otherwise ``STORE_CONFIGURED`` is False
and the data access layer disables its write and read paths instead of
letting the first query fail.
"""
import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

BASE_DIR = Path(__file__).resolve().parent.parent

SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret-key-change-in-prod")
DEBUG = os.environ.get("DEBUG", "false").lower() == "true"
ALLOWED_HOSTS = [h.strip() for h in os.environ.get("ALLOWED_HOSTS", "localhost,127.0.0.1").split(",") if h.strip()]

INSTALLED_APPS = [
    "django.contrib.admin",
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "django.contrib.sessions",
    "django.contrib.messages",
    "django.contrib.staticfiles",
    "PROJECTS",
    "SALES",
    "COMPANY",
    "INSIGHTS",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.contrib.sessions.middleware.SessionMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "django.contrib.auth.middleware.AuthenticationMiddleware",
    "django.contrib.messages.middleware.MessageMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
]

ROOT_URLCONF = "ESTATENEXUS.urls"

TEMPLATES = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",
        "DIRS": [BASE_DIR / "templates"],
        "APP_DIRS": True,
        "OPTIONS": {
            "context_processors": [
                "django.template.context_processors.debug",
                "django.template.context_processors.request",
                "django.contrib.auth.context_processors.auth",
                "django.contrib.messages.context_processors.messages",
            ],
        },
    },
]

WSGI_APPLICATION = "ESTATENEXUS.wsgi.application"

# --- Relational store ---
DB_ENGINE = os.environ.get("DB_ENGINE", "django.db.backends.postgresql")
DB_NAME = os.environ.get("DB_NAME", "estatenexus")
DB_USER = os.environ.get("DB_USER", "postgres")
DB_PASSWORD = os.environ.get("DB_PASSWORD", "")
DB_HOST = os.environ.get("DB_HOST", "")
DB_PORT = os.environ.get("DB_PORT", "5432")

STORE_CONFIGURED = bool(DB_HOST and DB_PASSWORD)

if STORE_CONFIGURED:
    DATABASES = {
        "default": {
            "ENGINE": DB_ENGINE,
            "NAME": DB_NAME,
            "USER": DB_USER,
            "PASSWORD": DB_PASSWORD,
            "HOST": DB_HOST,
            "PORT": DB_PORT,
        }
    }
else:
    # Dummy backend: any query raises ImproperlyConfigured, the services
    # check STORE_CONFIGURED before touching the ORM.
    DATABASES = {}

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

# Selection state lives in a server-side store so a request can re-read it
# after a slow call; without a database it falls back to the local cache.
if STORE_CONFIGURED:
    SESSION_ENGINE = "django.contrib.sessions.backends.cached_db"
else:
    SESSION_ENGINE = "django.contrib.sessions.backends.cache"

MESSAGE_STORAGE = "django.contrib.messages.storage.cookie.CookieStorage"

LANGUAGE_CODE = "en-us"
TIME_ZONE = os.environ.get("TIME_ZONE", "Asia/Kolkata")
USE_I18N = True
USE_TZ = True

STATIC_URL = "static/"
STATIC_ROOT = BASE_DIR / "staticfiles"

# --- Narrative summaries (Hugging Face Inference) ---
HUGGINGFACE_API_KEY = os.environ.get("HUGGINGFACE_API_KEY", "")
NARRATIVE_MODEL_ID = os.environ.get("NARRATIVE_MODEL_ID", "meta-llama/Llama-3.1-8B-Instruct")
NARRATIVE_FALLBACK_MODEL_ID = os.environ.get("NARRATIVE_FALLBACK_MODEL_ID", "microsoft/Phi-3-mini-4k-instruct")

DEFAULT_COMPANY_NAME = os.environ.get("DEFAULT_COMPANY_NAME", "ESTATENEXUS")

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "default": {
            "format": "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "default",
        },
    },
    "root": {
        "handlers": ["console"],
        "level": os.environ.get("LOG_LEVEL", "INFO"),
    },
}
