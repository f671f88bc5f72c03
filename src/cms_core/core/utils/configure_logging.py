import logging
import sys
from tqdm import tqdm


class LogWithTqdm(logging.Handler):
    """
    Logging handler that writes through `tqdm.write()` so log lines do not
    break an active progress bar (e.g. during a batch audit).
    """
    def emit(self, record):
        try:
            msg = self.format(record)
            tqdm.write(msg, file=sys.stderr)
            self.flush()
        except Exception:
            self.handleError(record)


def _to_level(level, fallback):
    if isinstance(level, str):
        return getattr(logging, level.upper(), fallback)
    return level


def configure_logger(general_level='INFO', module_specific_levels=None, silenced_loggers=None):
    """
    Installs a single tqdm-aware handler on the root logger and applies
    per-module levels. Silenced loggers default to CRITICAL.
    """
    handler = LogWithTqdm()
    handler.setFormatter(logging.Formatter(
        "%(asctime)s - %(levelname)s - [%(name)s:%(lineno)d] - %(message)s"
    ))

    root_logger = logging.getLogger()
    root_logger.setLevel(_to_level(general_level, logging.INFO))
    root_logger.handlers.clear()
    root_logger.addHandler(handler)

    for name, level in (module_specific_levels or {}).items():
        logging.getLogger(name).setLevel(_to_level(level, logging.INFO))

    for name, level in (silenced_loggers or {}).items():
        logging.getLogger(name).setLevel(_to_level(level, logging.CRITICAL))
