"""
Utilities package for the Userboard application.
"""

from userboard.utils.data_source import DataFetchError, fetch_users, normalize_user_records

__all__ = [
    'DataFetchError',
    'fetch_users',
    'normalize_user_records'
]
