import os
import re
from configparser import ConfigParser, NoOptionError, NoSectionError
from typing import Dict, Any, Optional


class ConfigManager:
    """
    Immutable configuration manager - reads config files once and provides
    session-specific configuration objects
    """

    def __init__(self, config_file: Optional[str] = None):
        self.base_config = self._load_configs(config_file)

    def _load_configs(self, config_file: Optional[str] = None) -> ConfigParser:
        """
        Load and merge configuration files
        :param config_file: optional path to a custom config file
        :return: ConfigParser object
        """
        default_config_file = os.path.join(os.path.dirname(os.path.abspath(__file__)), 'config.ini')
        if not os.path.exists(default_config_file):
            raise FileNotFoundError(f'Could not find the default config file at {default_config_file}')

        config = ConfigParser()
        config.read(default_config_file)

        # The user config location comes from the default config file
        if 'user_config' in config['DEFAULT']:
            user_config = self.resolve_file_path(config['DEFAULT']['user_config'])
            if user_config is not None:
                config.read(user_config)

        if config_file is not None:
            file = self.resolve_file_path(config_file)
            if file is None:
                raise FileNotFoundError(f'Could not find the custom config file at {config_file}')
            config.read(file)

        return config

    def create_session_config(self, overrides: Optional[Dict[str, Any]] = None) -> 'SessionConfig':
        """Create a session-specific config"""
        return SessionConfig(self.base_config, dict(overrides or {}))

    @staticmethod
    def fix_values(value: Any) -> Any:
        """Fix some values due to how they are stored and retrieved with ConfigParser"""
        if isinstance(value, str):
            value = value.strip()

            # Handle path expansion only for strings that clearly look like paths
            if (value.startswith(('~', './', '/', '\\')) and
                    not value.startswith(('{', '[', '"', "'"))):
                expanded = os.path.expanduser(value)
                if expanded != value:
                    value = expanded

            # Handle dict-like strings
            if value.startswith('{') and value.endswith('}'):
                pairs = re.findall(r'(\w+)\s*:\s*(\[.*?]|[^,]+)(?=\s*(?:,|$))', value[1:-1])
                return {k.strip(): ConfigManager.fix_values(v.strip()) for k, v in pairs}

            # Handle list-like strings
            if value.startswith('[') and value.endswith(']'):
                return [ConfigManager.fix_values(item.strip()) for item in re.findall(r'<[^>]+>|[^,\s]+', value[1:-1])]

            if value.isdigit():
                return int(value)

            lower_value = value.lower()
            if lower_value in ('true', 'yes'):
                return True
            if lower_value in ('false', 'no'):
                return False

            # Remove quotes if present; quoting keeps leading/trailing spaces
            if len(value) >= 2 and value[0] == value[-1] and value[0] in ('"', "'"):
                return value[1:-1]

        return value

    @staticmethod
    def resolve_file_path(file_name: Optional[str], base_dir: Optional[str] = None) -> Optional[str]:
        """
        Works out the path to a file based on the filename and optional base directory
        :param file_name: name of the file to resolve the path to
        :param base_dir: optional base directory to resolve relative names from (default: cwd)
        :return: absolute path to the file or None
        """
        if file_name is None:
            return None

        if base_dir is None:
            base_dir = os.getcwd()
        base_dir = os.path.expanduser(base_dir)
        if not os.path.isdir(base_dir):
            return None

        file_name = os.path.expanduser(file_name)
        path = file_name if os.path.isabs(file_name) else os.path.join(base_dir, file_name)
        if os.path.isfile(path):
            return os.path.abspath(path)
        return None


class SessionConfig:
    """
    Configuration for a specific session.
    Runtime overrides take precedence over values read from the INI files.
    """

    def __init__(self, base_config: ConfigParser, overrides: Optional[Dict[str, Any]] = None):
        self.base_config = base_config
        self.overrides = overrides or {}

    def get_option(self, section: str, option: str, fallback: Any = None) -> Any:
        """
        Get a setting from the configuration

        :param section: the section to get the setting from
        :param option: the option to get
        :param fallback: the value to return if the option is not found
        :return: the setting value
        """
        # Overrides are keyed by option name, ignoring the section
        if option in self.overrides:
            return self.overrides[option]

        try:
            return ConfigManager.fix_values(self.base_config.get(section, option))
        except (NoSectionError, NoOptionError):
            return fallback

    def get_all_options_from_section(self, section: str) -> Dict[str, Any]:
        if self.base_config.has_section(section):
            return {
                option: self.get_option(section, option)
                for option in self.base_config.options(section)
            }
        return {}
