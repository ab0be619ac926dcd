from .logging import configure_logging, redact_secret

__all__ = ['configure_logging', 'redact_secret']
