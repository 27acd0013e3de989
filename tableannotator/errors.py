"""
Exception types raised by the Table Annotator.
"""


class KnowledgeBaseError(Exception):
    """
    A transient failure while talking to a knowledge base (HTTP error status,
    rate limiting, malformed response). Retried with backoff by the resilient client.
    """

    def __init__(self, message, source=None, status_code=None):
        super().__init__(message)
        self.source = source
        self.status_code = status_code


class ConfigurationError(Exception):
    """Invalid pipeline input or settings. Aborts the run."""
