"""Utility functions for the add-on scripts."""

from .logging_utils import log_validation_errors
from .resource_utils import get_add_on_listing_data, get_base_url, get_resources

__all__ = [
    'log_validation_errors',
    'get_add_on_listing_data',
    'get_base_url',
    'get_resources',
]
