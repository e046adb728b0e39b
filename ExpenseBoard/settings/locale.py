"""
Module for formatting currency values, dates and month labels using Babel.

"""
import datetime
import decimal
import logging
from typing import List, Union

from babel import Locale, UnknownLocaleError, dates, numbers

CURRENCY_MAP: dict[str, str] = {
    'US': 'USD',
    'GB': 'GBP',
    'DE': 'EUR',
    'FR': 'EUR',
    'BE': 'EUR',
    'IT': 'EUR',
    'ES': 'EUR',
    'JP': 'JPY',
    'CA': 'CAD',
    'AU': 'AUD',
    'IN': 'INR',
    'BR': 'BRL',
    'CN': 'CNY',
    'KR': 'KRW',
    'DK': 'DKK',
    'SE': 'SEK',
    'NO': 'NOK',
    'FI': 'EUR',
    'HU': 'HUF',
    'MX': 'MXN',
    'ZA': 'ZAR',
    'NL': 'EUR',
}

LOCALE_MAP: List[str] = [
    'en_US',
    'en_GB',
    'en_AU',
    'en_CA',
    'en_IN',
    'en_ZA',
    'de_DE',
    'es_ES',
    'es_MX',
    'fr_FR',
    'fr_BE',
    'it_IT',
    'nl_NL',
    'hu_HU',
    'da_DK',
    'fi_FI',
    'nb_NO',
    'sv_SE',
    'ja_JP',
    'ko_KR',
    'pt_BR',
    'zh_CN',
]

DEFAULT_LOCALE: str = 'en_US'

Number = Union[int, float, decimal.Decimal]


def _parse_locale(locale: str) -> Locale:
    try:
        return Locale.parse(locale)
    except (ValueError, TypeError, UnknownLocaleError) as ex:
        logging.warning(f'Invalid locale "{locale}", falling back to {DEFAULT_LOCALE}: {ex}')
        return Locale.parse(DEFAULT_LOCALE)


def get_currency_from_locale(locale: str) -> str:
    """
    Retrieve the default currency code based on the locale's territory.

    Args:
        locale (str): Locale string, e.g. 'fr_FR'.

    Returns:
        str: Currency code such as 'EUR'. Defaults to 'USD' if the territory is unknown.
    """
    parts = (locale or '').split('_')
    if len(parts) < 2:
        return 'USD'
    return CURRENCY_MAP.get(parts[1], 'USD')


def format_currency_value(value: Number, locale: str) -> str:
    """
    Format a number as a currency string based on the locale's default currency.

    Args:
        value: The numeric value to be formatted.
        locale (str): Locale string, e.g. 'en_US'.

    Returns:
        str: The formatted currency string, e.g. '$1,234.50'.
    """
    currency_code = get_currency_from_locale(locale)
    return numbers.format_currency(value, currency=currency_code, locale=_parse_locale(locale))


def format_percent_value(value: Number, locale: str) -> str:
    """
    Format a percentage given on the 0-100 scale, e.g. 12.5 -> '12.5%'.

    Args:
        value: The percentage value.
        locale (str): Locale string.

    Returns:
        str: The formatted percentage string.
    """
    return numbers.format_percent(
        decimal.Decimal(str(value)) / 100, format='#,##0.0%', locale=_parse_locale(locale)
    )


def format_date(value: datetime.date, locale: str, fmt: str = 'medium') -> str:
    """
    Format a date for display, e.g. 'May 1, 2024'.

    Args:
        value (datetime.date): The date to format.
        locale (str): Locale string.
        fmt (str): A babel format name or pattern.

    Returns:
        str: The formatted date.
    """
    return dates.format_date(value, format=fmt, locale=_parse_locale(locale))


def format_short_date(value: datetime.date, locale: str) -> str:
    """Format a date as an abbreviated month and day, e.g. 'May 1'."""
    return dates.format_skeleton('MMMd', value, locale=_parse_locale(locale))


def format_month_label(period: str, locale: str) -> str:
    """
    Format a ``YYYY-MM`` period key as a month label, e.g. '2024-05' -> 'May 2024'.

    Args:
        period (str): The period key.
        locale (str): Locale string.

    Returns:
        str: The month label, or the period itself when it is not a valid key.
    """
    try:
        d = datetime.datetime.strptime(period, '%Y-%m').date()
    except (ValueError, TypeError):
        logging.debug(f'Not a valid period: "{period}"')
        return str(period)
    return dates.format_date(d, format='MMMM yyyy', locale=_parse_locale(locale))
