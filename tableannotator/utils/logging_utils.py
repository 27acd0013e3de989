"""
Logging setup for annotation runs.

Pipeline components log through the root logger with a '[component]' prefix;
this module installs the single console handler, picks the level from the
configuration and keeps the HTTP and SPARQL libraries quiet.
"""

import logging
import urllib3

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Third-party loggers that only speak up at WARNING unless debug logging is on
_NOISY_LOGGERS = ("urllib3", "SPARQLWrapper", "backoff")


def log_level(config):
    if config.debug:
        return logging.DEBUG
    return logging.INFO if config.show_status else logging.ERROR


def configure_logging(config=None):
    """
    Install the console handler for an annotation run.

    Existing root handlers are replaced, so calling this once per run never
    duplicates output.

    Args:
        config: AnnotatorConfig; DEFAULT_CONFIG when None
    """
    from tableannotator.config.settings import DEFAULT_CONFIG

    config = config or DEFAULT_CONFIG
    level = log_level(config)

    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    root.addHandler(handler)
    root.setLevel(level)

    library_level = logging.DEBUG if config.debug else logging.WARNING
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(library_level)

    if config.suppress_tls_warnings:
        logging.captureWarnings(True)
        urllib3.disable_warnings()


def log_cache_statistics(caches):
    """
    Log the number of entries held by each knowledge base cache.

    Args:
        caches: Dictionary mapping KnowledgeBase to its ResultCache
    """
    sizes = ", ".join(f"{cache.name}={len(cache)}/{cache.max_size}" for cache in caches.values())
    logging.info(f"[cache] Entries: {sizes}")
