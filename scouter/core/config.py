import json
from dataclasses import dataclass
from scouter.common.logger import log
from scouter.common.setup import PATHS

#region === Helpers and Paths ===

SETTINGS_PATH = PATHS.settings

# Default values for every ticker setting, alongside the types we accept for each when loading.
_SETTINGS_DEFAULTS = {
    "delay_millis": 41,                 # About 24 FPS.
    "shutdown_threshold_seconds": 2,
    "label": "9001",
    "label_size": 110.0,
    "label_color": "red",
    "force_start": False,
}
_SETTINGS_TYPES = {
    "delay_millis": int,
    "shutdown_threshold_seconds": int,
    "label": str,
    "label_size": (int, float),
    "label_color": str,
    "force_start": bool,
}

# Helper to return a truly fresh, default settings dict.
def build_default_settings():
    return dict(_SETTINGS_DEFAULTS)

# bool is a subclass of int, so it has to be ruled out explicitly for the numeric settings.
def _valid_setting(key, value):
    expected = _SETTINGS_TYPES[key]
    if expected is not bool and isinstance(value, bool):
        return False
    if not isinstance(value, expected):
        return False
    if key in ("delay_millis", "label_size") and value <= 0:
        return False
    if key == "shutdown_threshold_seconds" and value < 0:
        return False
    return True

#endregion === Helpers and Paths ===

#region === Ticker Config ===

# Immutable view of the settings that the ticker controller actually consumes.
@dataclass(frozen=True)
class TickerConfig:
    delay_millis: int = _SETTINGS_DEFAULTS["delay_millis"]
    shutdown_threshold_seconds: int = _SETTINGS_DEFAULTS["shutdown_threshold_seconds"]
    label: str = _SETTINGS_DEFAULTS["label"]
    label_size: float = _SETTINGS_DEFAULTS["label_size"]
    label_color: str = _SETTINGS_DEFAULTS["label_color"]

    # Same bounds load_settings enforces. A cadence under 1 ms would re-arm the tick at the instant it fires.
    def __post_init__(self):
        for key in ("delay_millis", "shutdown_threshold_seconds", "label_size"):
            value = getattr(self, key)
            if not _valid_setting(key, value):
                raise ValueError(f"Invalid ticker setting {key}={value!r}")

    @staticmethod
    def from_settings(settings):
        return TickerConfig(
            delay_millis=settings["delay_millis"],
            shutdown_threshold_seconds=settings["shutdown_threshold_seconds"],
            label=settings["label"],
            label_size=float(settings["label_size"]),
            label_color=settings["label_color"],
        )

#endregion === Ticker Config ===

#region === Saving and Loading Settings ===

# Loads settings.json, filling in defaults for anything missing or malformed. A missing file means first run, so
# the defaults get written out for the user to edit. An unreadable one is warned about and also falls back to defaults.
def load_settings():
    try:
        if not SETTINGS_PATH.exists():
            log.info(f"No existing settings.json found at '{SETTINGS_PATH}', writing default settings.")
            settings = build_default_settings()
            save_settings(settings)
            return settings

        with open(SETTINGS_PATH, "r", encoding="utf-8") as f:
            settings = json.load(f)
        if not isinstance(settings, dict):
            log.warning(f"settings.json at '{SETTINGS_PATH}' is not an object, loading default settings.")
            return build_default_settings()

        defaulted_values = set()
        for key, default in _SETTINGS_DEFAULTS.items():
            if key not in settings or not _valid_setting(key, settings[key]):
                defaulted_values.add(key)
                settings[key] = default

        # Log results
        if defaulted_values:
            log.warning(f"Successfully loaded settings from '{SETTINGS_PATH}', but with missing or invalid values that were defaulted: {', '.join(sorted(defaulted_values))}")
        else:
            log.info(f"Successfully loaded settings from '{SETTINGS_PATH}'.")
        return settings
    # Fall back to fresh settings in case of error, but warn in log
    except (json.JSONDecodeError, OSError, TypeError):
        log.warning("Ran into an error while trying to load settings.json, falling back to default settings.",exc_info=True)
        return build_default_settings()

# Write the given settings to disk under PATHS.settings
def save_settings(settings):
    SETTINGS_PATH.parent.mkdir(parents=True, exist_ok=True)
    with open(SETTINGS_PATH, "w", encoding="utf-8") as f:
        json.dump(settings, f, indent=2)
    log.info(f"Successfully saved settings to '{SETTINGS_PATH}'")

#endregion === Saving and Loading Settings ===
