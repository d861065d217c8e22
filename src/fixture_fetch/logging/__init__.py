"""
Structured logging for fixture_fetch.

Import directly from sub-modules:
    from fixture_fetch.logging.setup import setup_logging
    from fixture_fetch.logging.utilities import get_logger, log_with_context
    from fixture_fetch.logging.context import asset_log_context
"""
