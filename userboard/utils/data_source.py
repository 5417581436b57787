"""
Remote data source for the user table.

Fetches the member list once from a fixed JSON endpoint and normalizes it
into UserRecord objects. Every failure (network, HTTP status, invalid JSON,
malformed payload) surfaces as DataFetchError so the caller has a single
error class to handle at the load boundary.
"""

import logging
from typing import Any, List, Optional

import pandas as pd
import requests

from userboard.constants import DATA_SOURCE_URL, FETCH_TIMEOUT
from userboard.state.table_state import UserRecord

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ['id', 'name', 'email', 'role']


class DataFetchError(Exception):
    """Raised when the user list cannot be fetched or parsed."""
    pass


def normalize_user_records(payload: Any) -> List[UserRecord]:
    """
    Convert a decoded JSON payload into user records.

    Args:
        payload: Decoded response body, expected to be a list of objects

    Returns:
        List[UserRecord]: Records in source order, extra fields dropped

    Raises:
        DataFetchError: If the payload is not a list of user objects
    """
    if not isinstance(payload, list):
        raise DataFetchError(f"Expected a JSON array of users, got {type(payload).__name__}")
    if not payload:
        return []
    if not all(isinstance(item, dict) for item in payload):
        raise DataFetchError("Every user entry must be a JSON object")

    df = pd.DataFrame(payload)

    missing = [col for col in REQUIRED_COLUMNS if col not in df.columns]
    if missing:
        raise DataFetchError(f"User records are missing required fields: {', '.join(missing)}")

    df = df[REQUIRED_COLUMNS]
    if df.isnull().values.any():
        raise DataFetchError("User records contain empty required fields")

    ids = pd.to_numeric(df['id'], errors='coerce')
    if ids.isnull().any() or (ids % 1 != 0).any():
        raise DataFetchError("User ids must be integers")
    df = df.assign(id=ids.astype('int64'))

    for col in ['name', 'email', 'role']:
        df[col] = df[col].astype(str)

    return [
        UserRecord(id=int(row['id']), name=row['name'], email=row['email'], role=row['role'])
        for row in df.to_dict('records')
    ]


def fetch_users(url: str = DATA_SOURCE_URL, timeout: float = FETCH_TIMEOUT,
                session: Optional[requests.Session] = None) -> List[UserRecord]:
    """
    Fetch the full user collection with a single HTTP GET.

    Args:
        url: Endpoint returning a JSON array of user objects
        timeout: Request timeout in seconds
        session: Optional requests session, defaults to a plain ``requests.get``

    Returns:
        List[UserRecord]: Normalized user records

    Raises:
        DataFetchError: On any network, HTTP or payload error
    """
    getter = session.get if session is not None else requests.get

    logger.info(f"Fetching users from {url}")
    try:
        response = getter(url, timeout=timeout)
        response.raise_for_status()
        payload = response.json()
    except requests.exceptions.Timeout as e:
        raise DataFetchError(f"Request to {url} timed out") from e
    except requests.exceptions.RequestException as e:
        raise DataFetchError(f"Request to {url} failed: {e}") from e
    except ValueError as e:
        raise DataFetchError(f"Response from {url} is not valid JSON: {e}") from e

    records = normalize_user_records(payload)
    logger.info(f"Fetched {len(records)} users")
    return records
