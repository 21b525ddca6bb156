import logging
from logging import config as logging_config
import os

from datadog_http_handler import config as default_config
from datadog_http_handler.handler import DataDogHandler


def load_config(module=default_config):
    """Collect the upper case settings of a config module into a dict"""
    return {
        key: getattr(module, key) for key in dir(module) if key.isupper()}


def configure_logging(logger=None, config=None, config_file='logging.ini'):
    """Apply logging.ini if found, then attach a DataDogHandler

    The handler is only attached when an API key is configured; returns
    the attached handler or None.
    """
    if logger is None:
        logger = logging.getLogger()
    if config is None:
        config = load_config()

    if config_file:
        if not os.path.exists(config_file):
            # look above the testing dir when testing or debugging locally
            config_file = os.path.join('..', config_file)
        if os.path.exists(config_file):
            logging_config.fileConfig(
                config_file, disable_existing_loggers=False)

    if not config.get('DATADOG_API_KEY'):
        return None

    handler = DataDogHandler.from_config(config)
    logger.addHandler(handler)
    logger.debug(
        "DataDog logging initialized",
        extra={'service': handler.service, 'host': handler.host})
    return handler
