"""
Structured logging for webfetch.

Import directly from sub-modules:
    from webfetch.logging.setup import setup_logging
    from webfetch.logging.context import set_log_context
    from webfetch.logging.utilities import log_with_context, log_exception
"""
