"""Default configuration

Use env var to override
"""
import os

DATADOG_API_KEY = os.getenv("DATADOG_API_KEY")

# unset values stay None; the handler applies its own defaults
DATADOG_MIN_LEVEL = os.getenv("DATADOG_MIN_LEVEL")
DATADOG_BASE_URL = os.getenv("DATADOG_BASE_URL")
DATADOG_BASE_PATH = os.getenv("DATADOG_BASE_PATH")

DATADOG_SERVICE = os.getenv("DATADOG_SERVICE", "")
DATADOG_SOURCE = os.getenv("DATADOG_SOURCE", "")
DATADOG_HOST = os.getenv("DATADOG_HOST", "")

# seconds; requests waits indefinitely when unset
DATADOG_TIMEOUT = os.getenv("DATADOG_TIMEOUT")
