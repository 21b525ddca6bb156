"""Exceptions raised while building or delivering through a DataDogHandler"""


class DataDogHandlerError(Exception):
    """Base for all handler errors"""


class MissingCredential(DataDogHandlerError, ValueError):
    """No DataDog API key was given"""


class MalformedEndpoint(DataDogHandlerError, ValueError):
    """Base URL and path don't combine into a usable URL"""


class FormatError(DataDogHandlerError):
    """Formatter failed to serialize a log record"""


class TransportError(DataDogHandlerError):
    """The request never produced an HTTP response"""


class DeliveryRejected(DataDogHandlerError):
    """Intake kept answering with a non-2xx status"""

    def __init__(self, status_code, body):
        super().__init__(
            f"unexpected status code: {status_code}, body: {body}")
        self.status_code = status_code
        self.body = body
