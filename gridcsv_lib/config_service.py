# --- gridcsv_lib/config_service.py ---
import configparser
import copy
import logging

from .constants import CONFIG_DEFAULTS

log = logging.getLogger("gridcsv.config")


class ConfigService:
    """Manages reading from and writing to the gridcsv.cfg file."""

    def __init__(self, config_path: str):
        self.config_path = config_path
        self.defaults = copy.deepcopy(CONFIG_DEFAULTS)

    def get_settings(self) -> dict:
        """Reads settings from the config file, applying defaults if missing."""
        config = configparser.ConfigParser(interpolation=None)
        # Apply defaults first
        for section, values in self.defaults.items():
            config[section] = values

        # Read existing file to override defaults
        try:
            found = config.read(self.config_path, encoding="utf-8")
        except configparser.Error as e:
            log.error("Invalid config file %s: %s. Using defaults.", self.config_path, e)
            return copy.deepcopy(self.defaults)
        if not found:
            log.info("Config file not found at %s. Using defaults.", self.config_path)
        else:
            log.debug("Loaded settings from %s", self.config_path)

        return self._config_to_dict(config)

    def save_settings(self, settings: dict):
        """Saves a dictionary of settings to the config file."""
        config = configparser.ConfigParser(interpolation=None)
        for section, values in settings.items():
            config[section] = {k: str(v) for k, v in values.items()}

        try:
            with open(self.config_path, "w", encoding="utf-8") as configfile:
                config.write(configfile)
            log.info("Settings successfully saved to %s", self.config_path)
        except IOError as e:
            log.error("Failed to write settings to %s: %s", self.config_path, e)
            return False
        return True

    def _config_to_dict(self, config: configparser.ConfigParser) -> dict:
        """Converts a ConfigParser object to a nested dictionary."""
        return {s: dict(config.items(s)) for s in config.sections()}


def decode_escapes(value: str) -> str:
    """Turns the `\\n`, `\\r` and `\\t` escapes used in the config file into characters."""
    return value.replace("\\r", "\r").replace("\\n", "\n").replace("\\t", "\t")
