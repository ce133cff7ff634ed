# config/settings/local.py
import os

from .base import *  # noqa

DEBUG = os.getenv("DJANGO_DEBUG", "1") == "1"

# Console-friendly logs while developing (set LOG_JSON=1 to force JSON).
LOG_JSON = os.getenv("LOG_JSON", "0") == "1"
LOGGING["formatters"]["structured"]["json_logs"] = LOG_JSON  # noqa: F405
