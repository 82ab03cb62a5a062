from .app.main import dispatch, add_token, list_tokens, list_projects

__all__ = [
    "dispatch",
    "add_token",
    "list_tokens",
    "list_projects",
]

# stdlib logging defaults: attach NullHandler to prevent 'No handler' warnings
import logging
_logger = logging.getLogger(__name__)
_logger.addHandler(logging.NullHandler())
