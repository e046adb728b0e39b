"""REST API client for the expense server.

Provides url building against the configured base url, a cached ``requests`` session and
one function per endpoint. Failures are raised as status exceptions:

    - ServiceUnavailableException: the server could not be reached or timed out.
    - RequestFailedException: the server answered with a non-success status code.
    - ResponseInvalidException: the body could not be decoded or has the wrong shape.

"""
import logging
import threading
from typing import Any, Dict, List, Optional, Union

import requests

from ..status import status

# Cached session to reuse connections between requests
_cached_session: Optional[requests.Session] = None
_session_lock = threading.Lock()

EXPENSES_ENDPOINT: str = '/api/expenses'
MONTHLY_ENDPOINT: str = '/api/metrics/monthly'
CATEGORY_ENDPOINT: str = '/api/metrics/category'
TRENDS_ENDPOINT: str = '/api/metrics/trends'


def clear_session() -> None:
    """
    Closes and drops the cached HTTP session.
    """
    global _cached_session

    with _session_lock:
        if _cached_session is not None:
            try:
                _cached_session.close()
            except requests.RequestException as ex:
                logging.debug(f'Failed closing cached session: {ex}')
        _cached_session = None


def get_session() -> requests.Session:
    """
    Returns the cached HTTP session, creating it on first use.

    Returns:
        requests.Session: The shared session.
    """
    global _cached_session

    with _session_lock:
        if _cached_session is None:
            session = requests.Session()
            session.headers.update({
                'Accept': 'application/json',
            })
            logging.debug('HTTP session created.')
            _cached_session = session
        return _cached_session


def build_api_url(endpoint: str) -> str:
    """
    Builds an absolute url for an api endpoint.

    Args:
        endpoint (str): Path relative to the base url, e.g. '/api/expenses'.

    Returns:
        str: The absolute url.

    Raises:
        status.ApiUrlInvalidException: If the configured base url is invalid.
    """
    from ..settings import lib

    base_url = lib.settings.api_base_url()
    return f'{base_url}/{endpoint.lstrip("/")}'


def request(
        method: str,
        endpoint: str,
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Dict[str, Any]] = None,
        expect_body: bool = True,
) -> Any:
    """
    Performs an HTTP request against the api and decodes the JSON response.

    Args:
        method (str): HTTP method, e.g. 'GET'.
        endpoint (str): Endpoint path relative to the base url.
        params (dict, optional): Query parameters. Empty values are dropped.
        json (dict, optional): JSON body.
        expect_body (bool): When False, the response body is not decoded.

    Returns:
        The decoded JSON body, or None when `expect_body` is False.

    Raises:
        status.ServiceUnavailableException: On connection errors and timeouts.
        status.RequestFailedException: On a non-success status code.
        status.ResponseInvalidException: If the body is not valid JSON.
    """
    from ..settings import lib

    url = build_api_url(endpoint)
    if params:
        params = {k: v for k, v in params.items() if v not in (None, '')}

    logging.debug(f'{method} {url} params={params}')
    try:
        response = get_session().request(
            method,
            url,
            params=params or None,
            json=json,
            timeout=lib.settings.api_timeout(),
        )
    except (requests.ConnectionError, requests.Timeout) as ex:
        raise status.ServiceUnavailableException(f'{method} {url}: {ex}') from ex
    except requests.RequestException as ex:
        raise status.RequestFailedException(f'{method} {url}: {ex}') from ex

    if not response.ok:
        raise status.RequestFailedException(
            f'{method} {url} returned {response.status_code}.',
            status_code=response.status_code
        )

    if not expect_body:
        return None

    try:
        return response.json()
    except ValueError as ex:
        raise status.ResponseInvalidException(f'{method} {url}: {ex}') from ex


def _expect_type(data: Any, _type: type, name: str) -> Any:
    if not isinstance(data, _type):
        raise status.ResponseInvalidException(
            f'Expected {name} to be {_type.__name__}, got {type(data).__name__}.'
        )
    return data


def fetch_expenses() -> List[Dict[str, Any]]:
    """
    Fetches every expense.

    Returns:
        list[dict]: The raw expense records.
    """
    data = request('GET', EXPENSES_ENDPOINT)
    return _expect_type(data, list, 'expenses')


def create_expense(payload: Dict[str, Any]) -> Dict[str, Any]:
    """
    Creates a new expense.

    Args:
        payload (dict): The request body, see :meth:`ExpenseDraft.to_payload`.

    Returns:
        dict: The created expense record.
    """
    data = request('POST', EXPENSES_ENDPOINT, json=payload)
    return _expect_type(data, dict, 'expense')


def delete_expense(expense_id: Union[int, str]) -> None:
    """
    Deletes an expense by id. Only the status code is checked.

    Args:
        expense_id: The id of the expense.
    """
    request('DELETE', f'{EXPENSES_ENDPOINT}/{expense_id}', expect_body=False)


def fetch_monthly_summary() -> List[Dict[str, Any]]:
    """
    Fetches the per-month totals.

    Returns:
        list[dict]: The ``monthly_summary`` records.
    """
    data = _expect_type(request('GET', MONTHLY_ENDPOINT), dict, 'monthly summary')
    return _expect_type(data.get('monthly_summary', []), list, 'monthly_summary')


def fetch_category_summary(month: Optional[str] = None) -> List[Dict[str, Any]]:
    """
    Fetches the per-category totals.

    Args:
        month (str, optional): A ``YYYY-MM`` key to scope the summary to.

    Returns:
        list[dict]: The ``category_summary`` records.
    """
    data = _expect_type(
        request('GET', CATEGORY_ENDPOINT, params={'month': month}), dict, 'category summary'
    )
    return _expect_type(data.get('category_summary', []), list, 'category_summary')


def fetch_trends() -> Dict[str, List[Dict[str, Any]]]:
    """
    Fetches the daily trends and the payment method totals.

    Returns:
        dict: ``daily_trends`` and ``payment_methods`` record lists.
    """
    data = _expect_type(request('GET', TRENDS_ENDPOINT), dict, 'trends')
    return {
        'daily_trends': _expect_type(data.get('daily_trends', []), list, 'daily_trends'),
        'payment_methods': _expect_type(data.get('payment_methods', []), list, 'payment_methods'),
    }


def _connect_signals() -> None:
    from ..ui.actions import signals

    def section_changed(section: str) -> None:
        if section == 'api':
            clear_session()

    signals.configSectionChanged.connect(section_changed)


_connect_signals()
