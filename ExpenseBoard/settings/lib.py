"""Settings library for the api client and view configuration.

Provides:
    - Schema validation and enforcement for the settings.json structure.
    - Loading, saving, reverting, and managing application settings.
    - Resolution of the API base url, including the environment override.
    - Constants for column names and data schemas.
"""

import json
import logging
import os
import pathlib
import shutil
import urllib.parse
from typing import Dict, Any, Optional, List

from PySide6 import QtCore, QtWidgets

from ..status import status

app_name: str = 'ExpenseBoard'

API_BASE_URL_ENV_KEY: str = 'EXPENSEBOARD_API_BASE_URL'
DEFAULT_API_BASE_URL: str = 'http://localhost:5000'

EXPENSE_DATA_COLUMNS: List[str] = [
    'id', 'date', 'description', 'category', 'payment_method', 'amount', 'receipt_image_path'
]
CATEGORY_SUMMARY_COLUMNS: List[str] = [
    'category', 'total_amount', 'transaction_count', 'average_amount', 'percentage'
]
MONTHLY_SUMMARY_COLUMNS: List[str] = ['period', 'month_name', 'year', 'total_amount']
DAILY_TREND_COLUMNS: List[str] = ['date', 'amount']
PAYMENT_METHOD_COLUMNS: List[str] = ['payment_method', 'total_amount']

METADATA_KEYS: List[str] = [
    'name',
    'locale',
    'theme',
    'recent_count',
    'dashboard_months',
    'dashboard_categories',
    'receipt_max_bytes',
]

SETTINGS_SCHEMA: Dict[str, Any] = {
    'api': {
        'type': dict,
        'required': True,
        'item_schema': {
            'base_url': {'type': str, 'required': True},
            'timeout': {'type': (int, float), 'required': True},
        }
    },
    'metadata': {
        'type': dict,
        'required': True,
        'item_schema': {
            'name': {'type': str, 'required': True},
            'locale': {'type': str, 'required': True},
            'theme': {'type': str, 'required': True},
            'recent_count': {'type': int, 'required': True},
            'dashboard_months': {'type': int, 'required': True},
            'dashboard_categories': {'type': int, 'required': True},
            'receipt_max_bytes': {'type': int, 'required': True},
        }
    },
    'categories': {
        'type': list,
        'required': True,
        'value_type': str,
    },
    'payment_methods': {
        'type': list,
        'required': True,
        'value_type': str,
    },
}


def _validate_item_schema(section: str, section_dict: Dict[str, Any], item_schema: Dict[str, Any]) -> None:
    """Validate a dict section against its item schema.

    Args:
        section: Name of the section, used in error messages.
        section_dict: The section data.
        item_schema: Dict describing required fields and their types.

    Raises:
        ValueError: If a required field is missing.
        TypeError: If a field has the wrong type.
    """
    logging.debug(f'Validating "{section}" section.')
    for field, field_specs in item_schema.items():
        if field_specs['required'] and field not in section_dict:
            msg = f'Section "{section}" missing "{field}".'
            logging.error(msg)
            raise ValueError(msg)
        if field not in section_dict:
            continue

        value = section_dict[field]
        # bool is a subclass of int, but never a valid number here
        if isinstance(value, bool) or not isinstance(value, field_specs['type']):
            msg = (
                f'Section "{section}" field "{field}" must be {field_specs["type"]}, '
                f'got {type(value)}.'
            )
            logging.error(msg)
            raise TypeError(msg)


def _validate_choices(section: str, values: List[Any], value_type: type) -> None:
    """Validate a closed set of choices, e.g. the categories.

    The list must be non-empty, contain only values of `value_type`, and have no duplicates
    or blank entries.

    Args:
        section: Name of the section, used in error messages.
        values: The list of choices.
        value_type: The expected type of each choice.

    Raises:
        TypeError: If an entry has the wrong type.
        ValueError: If the list is empty, or contains blank or duplicate entries.
    """
    logging.debug(f'Validating "{section}" section.')
    if not values:
        msg = f'"{section}" must contain at least one item.'
        logging.error(msg)
        raise ValueError(msg)

    seen = set()
    for v in values:
        if not isinstance(v, value_type):
            msg = f'"{section}" item "{v}" must be {value_type}, got {type(v)}.'
            logging.error(msg)
            raise TypeError(msg)
        if not v.strip():
            msg = f'"{section}" contains a blank item.'
            logging.error(msg)
            raise ValueError(msg)
        if v in seen:
            msg = f'"{section}" contains a duplicate item: "{v}".'
            logging.error(msg)
            raise ValueError(msg)
        seen.add(v)


def normalize_base_url(url: str) -> str:
    """Strip whitespace and trailing slashes and verify the url is an absolute http(s) url.

    Args:
        url (str): The url to normalize.

    Returns:
        str: The normalized url.

    Raises:
        status.ApiUrlInvalidException: If the url is empty or not an absolute http(s) url.
    """
    url = (url or '').strip().rstrip('/')
    if not url:
        raise status.ApiUrlInvalidException('The url is empty.')

    parsed = urllib.parse.urlparse(url)
    if parsed.scheme not in ('http', 'https') or not parsed.netloc:
        raise status.ApiUrlInvalidException(f'"{url}" is not an absolute http(s) url.')
    return url


class ConfigPaths:
    """Manage application file paths and ensure the default template and directories exist.

    This class initializes paths for the configuration template and the user settings file.
    It verifies the presence of the template and prepares the default configuration file by
    copying it into the user data directory.
    """

    def __init__(self, config_dir: Optional[str] = None) -> None:
        """Set up application paths and ensure required directories and templates exist.

        Args:
            config_dir: Optional directory to keep the settings in. Defaults to the
                application's AppData location.
        """
        # Set the application name and organization
        QtWidgets.QApplication.setApplicationName(app_name)
        QtWidgets.QApplication.setOrganizationName('')
        logging.debug(f'Setting application name: {app_name}')

        self.template_dir: pathlib.Path = pathlib.Path(__file__).parent.parent / 'config'
        self.settings_template: pathlib.Path = self.template_dir / 'settings.json.template'

        if config_dir:
            self.config_dir: pathlib.Path = pathlib.Path(config_dir)
        else:
            # Get the app data directory
            p = QtCore.QStandardPaths.writableLocation(QtCore.QStandardPaths.AppDataLocation)
            app_data_dir = pathlib.Path(p)
            logging.debug(f'Using app data directory: {app_data_dir}')
            self.config_dir = app_data_dir / 'config'

        self.settings_path: pathlib.Path = self.config_dir / 'settings.json'

        self._verify_and_prepare()

    def _verify_and_prepare(self) -> None:
        """Verify the template exists and prepare the configuration directory and file.

        Raises:
            FileNotFoundError: If the template directory or file is missing.
        """
        logging.debug(f'Verifying required directories and templates in {self.template_dir}')
        if not self.template_dir.exists():
            msg: str = f'Missing template directory: {self.template_dir}'
            logging.error(msg)
            raise FileNotFoundError(msg)
        if not self.settings_template.exists():
            msg = f'Missing settings template: {self.settings_template}'
            logging.error(msg)
            raise FileNotFoundError(msg)

        if not self.config_dir.exists():
            logging.debug(f'Creating config directory: {self.config_dir}')
            self.config_dir.mkdir(parents=True, exist_ok=True)

        # Ensure a valid config exists even if we haven't yet set it up
        if not self.settings_path.exists():
            logging.debug(f'Copying default settings from template to {self.settings_path}')
            shutil.copy(self.settings_template, self.settings_path)

    def revert_settings_to_template(self) -> None:
        """Restore settings.json from the default template file.

        Raises:
            FileNotFoundError: If the settings template file is missing.
        """
        logging.debug(f'Reverting settings to template: {self.settings_template}')
        if not self.settings_template.exists():
            msg: str = f'Settings template not found: {self.settings_template}'
            logging.error(msg)
            raise FileNotFoundError(msg)
        shutil.copy(self.settings_template, self.settings_path)


class SettingsAPI(ConfigPaths):
    """
    Provides an interface to get/set/revert/save the sections of settings.json.
    """

    def __init__(self, config_dir: Optional[str] = None) -> None:
        """Initialize SettingsAPI and load the settings data.

        Args:
            config_dir: Optional directory to keep the settings in.
        """
        super().__init__(config_dir=config_dir)

        self._signals_blocked: bool = False

        self.data: Dict[str, Any] = {}
        for k, v in SETTINGS_SCHEMA.items():
            self.data[k] = v['type']()

        self.init_data()

    def __getitem__(self, key: str) -> Any:
        """Retrieve a metadata value using dictionary-style access.

        Args:
            key: Metadata key to retrieve.

        Returns:
            Value stored for the metadata key, or None if it has the wrong type.

        Raises:
            KeyError: If key is not in METADATA_KEYS.
            RuntimeError: If the metadata section is missing.
        """
        if key not in METADATA_KEYS:
            raise KeyError(f'Invalid metadata key: {key}, must be one of {METADATA_KEYS}')

        if 'metadata' not in self.data:
            raise RuntimeError('Malformed settings data, missing "metadata" section.')

        _type = SETTINGS_SCHEMA['metadata']['item_schema'][key]['type']
        v = self.data['metadata'].get(key)

        if not isinstance(v, _type):
            logging.error(f'Metadata key "{key}" is not of type {_type}, got {type(v)}.')
            return None

        return v

    def __setitem__(self, key: str, value: Any) -> None:
        """Assign a metadata value using dictionary-style access and persist it.

        Args:
            key: Metadata key to set.
            value: Value to assign to the metadata key.

        Raises:
            KeyError: If key is not in METADATA_KEYS.
            ValueError: If the value cannot be converted to the expected type.
        """
        if key not in METADATA_KEYS:
            raise KeyError(f'Invalid metadata key: {key}, must be one of {METADATA_KEYS}')

        _type = SETTINGS_SCHEMA['metadata']['item_schema'][key]['type']
        if not isinstance(value, _type):
            logging.warning(f'Metadata key "{key}" is not of type {_type}, got {type(value)}.')

            # Try to convert to the expected type
            if _type == str:
                value = str(value)
            elif _type == int:
                try:
                    value = int(value)
                except ValueError:
                    logging.error(f'Cannot convert "{value}" to int.')
                    raise

        self.data['metadata'][key] = value
        self.save_section('metadata')

        if self._signals_blocked:
            return

        from ..ui.actions import signals
        signals.metadataChanged.emit(key, value)

    def block_signals(self, v: bool) -> None:
        """Enable or disable emission of configuration change signals.

        Args:
            v: True to block signals, False to allow signals to emit.
        """
        self._signals_blocked = v

    @QtCore.Slot()
    def init_data(self) -> None:
        """Reload the settings data, emitting UI update signals."""
        self.load()

        if self._signals_blocked:
            return

        from ..ui.actions import signals
        for section in SETTINGS_SCHEMA.keys():
            if section == 'metadata':
                continue
            signals.configSectionChanged.emit(section)

        for k, v in self.data.get('metadata', {}).items():
            signals.metadataChanged.emit(k, v)

    def load(self) -> Dict[str, Any]:
        """Load settings.json from disk and validate against the schema.

        Returns:
            The loaded settings dictionary.

        Raises:
            status.SettingsNotFoundException: If settings.json is missing.
            status.SettingsInvalidException: If JSON parsing or validation fails.
        """
        logging.debug(f'Loading settings from "{self.settings_path}"')
        if not self.settings_path.exists():
            raise status.SettingsNotFoundException

        try:
            with self.settings_path.open('r', encoding='utf-8') as f:
                data: Dict[str, Any] = json.load(f)
            self.validate(data=data)
        except (ValueError, TypeError, RuntimeError) as ex:
            raise status.SettingsInvalidException(str(ex)) from ex

        self.data = data
        return self.data

    def validate(self, data: Dict[str, Any] = None) -> None:
        """Validate settings data against SETTINGS_SCHEMA.

        Args:
            data (dict, optional): Settings data to validate. Defaults to self.data.

        Raises:
            RuntimeError: If data is empty.
            ValueError, TypeError: If a section is missing or fails validation.
        """
        if data is None:
            data = self.data
        if not data:
            raise RuntimeError('Settings data is empty.')

        logging.debug('Validating settings data against schema.')
        for field, specs in SETTINGS_SCHEMA.items():
            if specs.get('required') and field not in data:
                msg: str = f'Missing required field: {field}'
                logging.error(msg)
                raise ValueError(msg)

            if field not in data:
                continue

            if not isinstance(data[field], specs['type']):
                msg = f'Field "{field}" must be {specs["type"]}, got {type(data[field])}.'
                logging.error(msg)
                raise TypeError(msg)

            if 'item_schema' in specs:
                _validate_item_schema(field, data[field], specs['item_schema'])
            elif 'value_type' in specs:
                _validate_choices(field, data[field], specs['value_type'])

        logging.debug('Settings data is valid.')

    def get_section(self, section_name: str) -> Any:
        """Retrieve a copy of a configuration section.

        Args:
            section_name: Section name, a key of SETTINGS_SCHEMA.

        Returns:
            A copy of the requested section data.

        Raises:
            KeyError: If section_name is not in the settings data.
        """
        return self.data[section_name].copy()

    def set_section(self, section_name: str, new_data: Any) -> None:
        """Replace, validate and persist a configuration section.

        Args:
            section_name: Section to update.
            new_data: New data for the section.

        Raises:
            ValueError: If section_name is unrecognized, or the new data fails validation.
            TypeError: If the new data has the wrong type.
        """
        if section_name not in SETTINGS_SCHEMA:
            msg: str = f'Unknown section_name for set: "{section_name}"'
            logging.error(msg)
            raise ValueError(msg)

        current_section_data = self.data[section_name]

        self.data[section_name] = new_data
        try:
            self.validate()
        except (ValueError, TypeError) as e:
            logging.error(f'Validation error on set_section("{section_name}"): {e}')
            self.data[section_name] = current_section_data
            raise

        self.save_section(section_name)

        if self._signals_blocked:
            return

        from ..ui.actions import signals
        signals.configSectionChanged.emit(section_name)

    def revert_section(self, section_name: str) -> None:
        """Revert a configuration section to its template default and save.

        Args:
            section_name: Section to revert.

        Raises:
            ValueError: If section_name is invalid or not present in the template.
        """
        if section_name not in SETTINGS_SCHEMA:
            msg: str = f'Unknown section_name for revert: "{section_name}"'
            logging.error(msg)
            raise ValueError(msg)

        with self.settings_template.open('r', encoding='utf-8') as f:
            template_data: Dict[str, Any] = json.load(f)

        if section_name not in template_data:
            msg = f'No template-based revert logic for section "{section_name}".'
            logging.error(msg)
            raise ValueError(msg)

        self.set_section(section_name, template_data[section_name])

    def save_section(self, section_name: str) -> None:
        """Persist a single configuration section to the settings file.

        Args:
            section_name: The section to save.

        Raises:
            ValueError: If section_name is not recognized.
        """
        if section_name not in SETTINGS_SCHEMA:
            msg: str = f'Unknown section_name for save: "{section_name}"'
            logging.error(msg)
            raise ValueError(msg)

        with self.settings_path.open('r', encoding='utf-8') as f:
            original_data: Dict[str, Any] = json.load(f)

        new_data: Dict[str, Any] = original_data.copy()
        new_data[section_name] = self.data[section_name]

        with self.settings_path.open('w', encoding='utf-8') as f:
            json.dump(new_data, f, indent=4, ensure_ascii=False)

    def api_base_url(self) -> str:
        """Resolve the API base url.

        The ``EXPENSEBOARD_API_BASE_URL`` environment variable takes precedence over the
        "api" section, which takes precedence over the built-in default.

        Returns:
            str: The base url without a trailing slash.

        Raises:
            status.ApiUrlInvalidException: If the resolved url is not an absolute http(s) url.
        """
        env_url = os.environ.get(API_BASE_URL_ENV_KEY, '').strip()
        if env_url:
            return normalize_base_url(env_url)

        url = self.data.get('api', {}).get('base_url', '')
        if url:
            return normalize_base_url(url)

        return DEFAULT_API_BASE_URL

    def api_timeout(self) -> float:
        """Returns the request timeout in seconds."""
        return float(self.data.get('api', {}).get('timeout', 10.0))


settings: SettingsAPI = SettingsAPI()
