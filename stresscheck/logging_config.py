"""StressCheck logging configuration.

Log lines follow the format:
[YYYY-MM-DD HH:MM:SS][LEVEL][module.submodule] Message (key=value)

Examples:
    stresscheck.services.history_store -> services.history
    stresscheck.blueprints.api.diagnostic -> api.diagnostic
    stresscheck.core.analysis.engine -> analysis.engine
"""

import logging

LOG_FORMAT = '[%(asctime)s][%(levelname)s][%(shortname)s] %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

# Third-party loggers kept at WARNING
QUIET_LOGGERS = ('werkzeug', 'httpx', 'httpcore')


class StressCheckFormatter(logging.Formatter):
    """Formatter exposing %(shortname)s, a shortened logger name."""

    # Applied in order, each at most once
    PREFIXES_TO_STRIP = ('stresscheck.', 'blueprints.')
    SUFFIXES_TO_STRIP = ('_manager', '_store', '_handler', '_service')
    # Stripped after the suffix
    IMPLIED_PREFIX = 'core.'

    def __init__(self, fmt: str = LOG_FORMAT, datefmt: str = DATE_FORMAT):
        super().__init__(fmt=fmt, datefmt=datefmt)

    def format(self, record: logging.LogRecord) -> str:
        record.shortname = self._get_short_name(record.name)
        return super().format(record)

    def _get_short_name(self, name: str) -> str:
        """Shorten a logger name.

        Args:
            name: Full logger name (e.g., 'stresscheck.core.catalog.normalization')

        Returns:
            Short name (e.g., 'catalog.normalization')
        """
        for prefix in self.PREFIXES_TO_STRIP:
            if name.startswith(prefix):
                name = name[len(prefix):]

        for suffix in self.SUFFIXES_TO_STRIP:
            if name.endswith(suffix):
                name = name[:-len(suffix)]
                break

        if name.startswith(self.IMPLIED_PREFIX):
            name = name[len(self.IMPLIED_PREFIX):]
        return name


def _resolve_level(app) -> int:
    """STRESSCHECK_LOG_LEVEL wins, else DEBUG follows app.debug."""
    name = app.config.get('STRESSCHECK_LOG_LEVEL')
    if name:
        level = logging.getLevelName(str(name).upper())
        if isinstance(level, int):
            return level
    return logging.DEBUG if app.config.get('DEBUG') else logging.INFO


def configure_logging(app) -> None:
    """Install the StressCheck handler on the root logger.

    Calling it again replaces the handler instead of stacking a new one.

    Args:
        app: Flask application instance.
    """
    log_level = _resolve_level(app)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(log_level)
    console_handler.setFormatter(StressCheckFormatter())
    root_logger.addHandler(console_handler)

    for noisy in QUIET_LOGGERS:
        logging.getLogger(noisy).setLevel(logging.WARNING)
