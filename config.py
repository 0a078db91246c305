# =====================================================================
# FILE: config.py
# =====================================================================
# This file defines the ConfigManager class, which loads and saves the
# settings used by the backup name helpers from a JSON file.

import json
import logging
import os

from backup_names import DEFAULT_BACKUP_COUNT, DEFAULT_FIRST_BACKUP_ID

logger = logging.getLogger(__name__)


class ConfigManager:
    """Handles loading and saving of settings from a JSON file."""
    def __init__(self, config_file="config.json"):
        """Initializes the ConfigManager with a path to the config file."""
        self.config_file = config_file
        self._default_settings = {
            "backup_count": DEFAULT_BACKUP_COUNT,
            "first_backup_id": DEFAULT_FIRST_BACKUP_ID,
        }

    def load_settings(self):
        """
        Loads settings from the JSON file.
        Returns a dictionary of settings, falling back to defaults if not found/error.
        """
        settings = self._default_settings.copy()
        if not os.path.exists(self.config_file):
            logger.info("No config file found at %s. Using default settings.", self.config_file)
            return settings

        try:
            with open(self.config_file, 'r', encoding='utf-8') as f:
                loaded_settings = json.load(f)
        except (json.JSONDecodeError, IOError) as e:
            logger.warning("Could not load settings file %s: %s. It may be corrupt.", self.config_file, e)
            return settings

        if not isinstance(loaded_settings, dict):
            logger.warning("Settings file %s does not hold a JSON object. Using default settings.", self.config_file)
            return settings

        # Merge loaded settings with defaults to ensure all keys exist
        settings.update(loaded_settings)
        logger.info("Settings loaded from %s.", self.config_file)
        return settings

    def save_settings(self, settings):
        """Saves the provided settings dictionary to the JSON file."""
        try:
            with open(self.config_file, 'w', encoding='utf-8') as f:
                json.dump(settings, f, indent=4)
        except IOError as e:
            logger.error("Could not save settings to %s: %s", self.config_file, e)
