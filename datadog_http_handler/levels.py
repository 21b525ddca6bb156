import logging

# most severe first
SEVERITIES = (
    logging.CRITICAL,
    logging.ERROR,
    logging.WARNING,
    logging.INFO,
    logging.DEBUG,
)

DEFAULT_MIN_LEVEL = logging.INFO

ALIASES = {
    'WARN': logging.WARNING,
    'FATAL': logging.CRITICAL,
}


def resolve_level(level):
    """Return numeric level for given int or name

    None or a blank name (an empty env var) yields the default.
    """
    if level is None:
        return DEFAULT_MIN_LEVEL
    if isinstance(level, int):
        return level

    name = str(level).strip().upper()
    if not name:
        return DEFAULT_MIN_LEVEL
    if name in ALIASES:
        return ALIASES[name]
    if name.isdigit():
        return int(name)

    value = logging.getLevelName(name)
    if not isinstance(value, int):
        raise ValueError(f"unknown log level: {level}")
    return value


def levels_from(min_level):
    """Severities from the most severe down to and including min_level"""
    return tuple(level for level in SEVERITIES if level >= min_level)
