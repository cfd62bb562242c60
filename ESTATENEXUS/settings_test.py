from .settings import *  # noqa: F401,F403

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    }
}
STORE_CONFIGURED = True

HUGGINGFACE_API_KEY = ""
ALLOWED_HOSTS = ["testserver", "localhost"]

SESSION_ENGINE = "django.contrib.sessions.backends.cache"
