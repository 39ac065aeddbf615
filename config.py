# -*- coding: utf-8 -*-

import json
import os
import sys # Needed for platform check in get_appdata_path

from pacing import RampConfig, MIN_WPM, MAX_WPM

# --- AppData Path Function ---
def get_appdata_path(filename="speed_reader_settings.json"):
    """Gets the path for the settings file in AppData (Win) or .config (Linux/Mac)."""
    app_name = "SpeedReader" # Subdirectory name
    if sys.platform == 'win32':
        base_path = os.getenv('APPDATA')
        if not base_path: base_path = os.path.expanduser('~'); dir_path = os.path.join(base_path, f".{app_name}")
        else: dir_path = os.path.join(base_path, app_name)
    else: # macOS, Linux
         base_path = os.path.expanduser('~')
         dir_path = os.path.join(base_path, ".config", app_name)
    return os.path.join(dir_path, filename)

# --- Standardeinstellungen ---
DEFAULT_SETTINGS = {
    "wpm": 300,
    "text_size": 24,                  # px
    "font_family": "Consolas",
    "font_color": "#D4D4D4",
    "highlight_color": "#EF4444",     # ORP letter
    "background_color": "#171717",
    "dark_mode": True,
    "auto_ramp_enabled": False,
    "ramp_target_wpm": 600,
    "ramp_seconds": 30,
    "hotkey": "<ctrl>+<alt>+r",
    "hide_main_window": False,
    "initial_text": ("The quick brown fox jumps over the lazy dog. Speed reading helps you "
                     "read faster while maintaining comprehension. Practice makes perfect."),
}

# --- Wertebereiche ---
MIN_TEXT_SIZE = 8; MAX_TEXT_SIZE = 72; TEXT_SIZE_STEP = 2
MIN_RAMP_SECONDS = 1; MAX_RAMP_SECONDS = 180

INT_RANGES = {
    "wpm": (MIN_WPM, MAX_WPM),
    "text_size": (MIN_TEXT_SIZE, MAX_TEXT_SIZE),
    "ramp_target_wpm": (MIN_WPM, MAX_WPM),
    "ramp_seconds": (MIN_RAMP_SECONDS, MAX_RAMP_SECONDS),
}
BOOL_KEYS = ['dark_mode', 'auto_ramp_enabled', 'hide_main_window']
STR_KEYS = ['font_family', 'font_color', 'highlight_color', 'background_color', 'hotkey', 'initial_text']

SETTINGS_FILE = get_appdata_path()

# --- Konfigurationsmanager ---
class ConfigManager:
    """
    Loads and saves application settings.

    Also serves as the key-value store handed to the windows: anything with
    `get(key)` and `set(key, value)` can take its place.
    """
    def __init__(self, filename=SETTINGS_FILE, defaults=DEFAULT_SETTINGS):
        self.filename = filename
        self.defaults = defaults
        self.settings = self.load_settings()

    def normalize(self, settings):
        """Coerces types and clamps ranges key by key. Bad values fall back to the default."""
        for key, (low, high) in INT_RANGES.items():
            try: value = int(float(settings.get(key, self.defaults[key])))
            except (TypeError, ValueError, OverflowError):
                print(f"Invalid value for '{key}': {settings.get(key)!r}. Using default.")
                value = self.defaults[key]
            settings[key] = max(low, min(high, value))
        for key in BOOL_KEYS:
            if not isinstance(settings.get(key), bool):
                if key in settings: print(f"Invalid value for '{key}': {settings[key]!r}. Using default.")
                settings[key] = self.defaults[key]
        for key in STR_KEYS:
            if not isinstance(settings.get(key), str): settings[key] = self.defaults[key]
        return settings

    def load_settings(self):
        """Loads settings from the JSON file or returns defaults."""
        settings = self.defaults.copy()
        try:
            if os.path.exists(self.filename):
                print(f"Loading settings from: {self.filename}")
                with open(self.filename, 'r', encoding='utf-8') as f:
                    loaded_settings = json.load(f)
                if not isinstance(loaded_settings, dict): raise ValueError("settings file is not a JSON object")
                settings.update(loaded_settings)
            else: print(f"Settings file not found: {self.filename}. Using defaults.")
        except (json.JSONDecodeError, IOError, ValueError) as e:
            print(f"Error loading settings from {self.filename}: {e}. Using default settings.")
            settings = self.defaults.copy()
        return self.normalize(settings)

    def save_settings(self):
        """Saves the current settings to the JSON file."""
        try:
            self.normalize(self.settings)
            dir_path = os.path.dirname(self.filename)
            if dir_path and not os.path.exists(dir_path):
                 try: os.makedirs(dir_path, exist_ok=True); print(f"Created directory for settings: {dir_path}")
                 except OSError as e: print(f"Warning: Could not create settings directory {dir_path} on save: {e}")

            print(f"Saving settings to: {self.filename}")
            with open(self.filename, 'w', encoding='utf-8') as f:
                json.dump(self.settings, f, indent=4)
        except (IOError, TypeError) as e: print(f"Error saving settings to {self.filename}: {e}")

    def get(self, key):
        """Gets a specific setting value."""
        # Return default value from defaults dict if key is missing in settings
        return self.settings.get(key, self.defaults.get(key))

    def set(self, key, value):
        """Sets a specific setting value."""
        self.settings[key] = value

    def get_ramp_config(self):
        """Current ramp settings as a RampConfig value."""
        return RampConfig(enabled=bool(self.get("auto_ramp_enabled")),
                          target_wpm=self.get("ramp_target_wpm"),
                          duration_seconds=self.get("ramp_seconds"))
