from decouple import config

from .base import REST_FRAMEWORK as BASE_REST_FRAMEWORK
from .base import *  # noqa

DEBUG = True
CORS_ALLOW_ALL_ORIGINS = True
EMAIL_BACKEND = "django.core.mail.backends.console.EmailBackend"

# Local webhook calls can use this secret; prod requires a real one
PAYMENT_WEBHOOK_SECRET = config("PAYMENT_WEBHOOK_SECRET", default="dev-webhook-secret")

if config("REDIS_URL", default=""):
    CACHES = {"default": {"BACKEND": "django.core.cache.backends.redis.RedisCache", "LOCATION": config("REDIS_URL")}}

LOGGING["loggers"]["storefront"]["level"] = "DEBUG"  # noqa: F405

REST_FRAMEWORK = {
    **BASE_REST_FRAMEWORK,
    "DEFAULT_THROTTLE_RATES": {
        scope: "1000/min" for scope in BASE_REST_FRAMEWORK["DEFAULT_THROTTLE_RATES"]
    },
}
