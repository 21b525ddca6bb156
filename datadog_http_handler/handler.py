import logging
import time

import requests
from pythonjsonlogger.jsonlogger import JsonFormatter

from datadog_http_handler.errors import (
    DeliveryRejected,
    FormatError,
    MalformedEndpoint,
    MissingCredential,
    TransportError,
)
from datadog_http_handler.levels import levels_from, resolve_level

logger = logging.getLogger(__name__)

API_KEY_HEADER = "DD-API-KEY"
CONTENT_TYPE = "application/json"
# DataDog rejects single logs above 256kb
MAX_ENTRY_BYTES = 256 * 1024
MAX_RETRY = 3
RETRY_DELAY = 1

DEFAULT_BASE_URL = "http://http-intake.logs.datadoghq.eu"
DEFAULT_BASE_PATH = "/v1/input"
DDSOURCE = "python"


def default_formatter():
    return JsonFormatter("%(asctime)s %(name)s %(levelname)s %(message)s")


def build_url(base_url, base_path, service, host):
    """Join base URL and path, adding the service, ddsource and host params"""
    params = {
        "service": service or "",
        "ddsource": DDSOURCE,
        "host": host or "",
    }
    url = f"{base_url}{base_path}"
    if not url.lower().startswith(("http://", "https://")):
        raise MalformedEndpoint(f"DataDog endpoint must be http(s): {url!r}")

    prepared = requests.PreparedRequest()
    try:
        prepared.prepare_url(url, params)
    except requests.RequestException as exc:
        raise MalformedEndpoint(str(exc)) from exc
    return prepared.url


def _not_own_record(record):
    # retry chatter from this package must not loop back into the intake
    return not (
        record.name == __package__
        or record.name.startswith(__package__ + "."))


class DataDogHandler(logging.Handler):
    """Logging handler posting each record as JSON to the DataDog HTTP intake

    Delivery is synchronous: ``fire`` returns once the intake accepted the
    record, or raises once delivery has definitively failed.  Only non-2xx
    responses are retried (three times, one second apart); transport
    failures such as refused connections raise at once.
    """

    def __init__(
            self, api_key, min_level=None, base_url=None, base_path=None,
            service="", source="", host="", formatter=None, session=None,
            timeout=None, sleep=time.sleep):
        if not api_key:
            raise MissingCredential("missing DataDog API key")

        self._min_level = resolve_level(min_level)
        super().__init__(self._min_level)

        self._api_key = api_key
        self._url = build_url(
            base_url=base_url or DEFAULT_BASE_URL,
            base_path=base_path or DEFAULT_BASE_PATH,
            service=service,
            host=host)
        self._service = service
        self._source = source
        self._host = host
        self._timeout = timeout
        self.sleep = sleep

        self._owns_session = session is None
        self.session = session or requests.Session()

        self.setFormatter(formatter or default_formatter())
        self.addFilter(_not_own_record)

    @classmethod
    def from_config(cls, config, **kwargs):
        """Build handler from a mapping using the keys of ``config.py``"""
        timeout = config.get("DATADOG_TIMEOUT")
        options = dict(
            api_key=config.get("DATADOG_API_KEY"),
            min_level=config.get("DATADOG_MIN_LEVEL"),
            base_url=config.get("DATADOG_BASE_URL"),
            base_path=config.get("DATADOG_BASE_PATH"),
            service=config.get("DATADOG_SERVICE", ""),
            source=config.get("DATADOG_SOURCE", ""),
            host=config.get("DATADOG_HOST", ""),
            timeout=float(timeout) if timeout else None,
        )
        options.update(kwargs)
        return cls(**options)

    @property
    def api_key(self):
        return self._api_key

    @property
    def url(self):
        return self._url

    @property
    def min_level(self):
        return self._min_level

    @property
    def service(self):
        return self._service

    @property
    def source(self):
        return self._source

    @property
    def host(self):
        return self._host

    @property
    def timeout(self):
        return self._timeout

    def levels(self):
        """Severities this handler accepts, most severe first"""
        return levels_from(self._min_level)

    def format_payload(self, record):
        try:
            log_entry = self.format(record)
        except Exception as exc:
            raise FormatError(f"unable to format log record: {exc}") from exc

        if isinstance(log_entry, str):
            log_entry = log_entry.encode("utf-8")
        return log_entry

    @staticmethod
    def truncate(payload):
        """Cut payload down to MAX_ENTRY_BYTES

        The cut is blind to the JSON structure; an oversized entry arrives
        as invalid JSON rather than not at all.
        """
        if len(payload) > MAX_ENTRY_BYTES:
            return payload[:MAX_ENTRY_BYTES]
        return payload

    def fire(self, record):
        """Format and deliver a single record, raising on failure"""
        payload = self.truncate(self.format_payload(record))
        self.send(payload)

    def send(self, payload):
        headers = {
            API_KEY_HEADER: self._api_key,
            "Content-Type": CONTENT_TYPE,
        }

        retries = 0
        while True:
            try:
                response = self.session.post(
                    url=self._url,
                    data=payload,
                    headers=headers,
                    timeout=self._timeout)
            except requests.RequestException as exc:
                raise TransportError(
                    f"unable to reach DataDog intake: {exc}") from exc

            with response:
                if 200 <= response.status_code < 300:
                    return
                if retries >= MAX_RETRY:
                    raise DeliveryRejected(response.status_code, response.text)
                status_code = response.status_code

            retries += 1
            logger.debug(
                "DataDog intake returned %s, retry %d of %d",
                status_code, retries, MAX_RETRY)
            self.sleep(RETRY_DELAY)

    def emit(self, record):
        try:
            self.fire(record)
        except Exception:
            self.handleError(record)

    def close(self):
        if self._owns_session:
            self.session.close()
        super().close()
