import copy
import json
import os
from numbers import Number

from dotenv import find_dotenv, load_dotenv

from chart_printer.errors import ConfigInvalid, ConfigNotFound
from chart_printer.layout import PAPER_SIZES_MM

CONFIG_FILE = "config.json"
CONFIG_ENV_VAR = "CHART_PRINTER_CONFIG"

DEFAULTS = {
    "chart": {
        "timezone": "Etc/UTC",
        "theme": "light",
        "style": "1",
        "locale": "en",
        "studies": [],
    },
    "capture": {
        "viewportWidth": 1600,
        "viewportHeight": 900,
        "deviceScaleFactor": 2,
        "pageLoadTimeoutMs": 60000,
        "iframeTimeoutMs": 30000,
        "chartLoadWaitMs": 5000,
        "imageDecodeWaitMs": 1000,
    },
    "pdf": {
        "format": "A4",
        "landscape": True,
        "paddingMm": 5,
        "gapMm": 3,
        "topChartFlex": 3,
        "bottomChartFlex": 2,
    },
    "output": {
        "directory": "./output",
        "print": False,
    },
}

# Keys that must be strictly positive numbers.
POSITIVE_FIELDS = {
    "capture": ["viewportWidth", "viewportHeight", "deviceScaleFactor",
                "pageLoadTimeoutMs", "iframeTimeoutMs"],
    "pdf": ["topChartFlex", "bottomChartFlex"],
}
# Keys that may be zero.
NON_NEGATIVE_FIELDS = {
    "capture": ["chartLoadWaitMs", "imageDecodeWaitMs"],
    "pdf": ["paddingMm", "gapMm"],
}


def resolve_config_path(arg=None):
    """CLI argument first, then $CHART_PRINTER_CONFIG (.env honored), then ./config.json."""
    if arg:
        return os.path.abspath(arg)
    load_dotenv(find_dotenv(usecwd=True))
    env_path = os.getenv(CONFIG_ENV_VAR)
    if env_path:
        return os.path.abspath(env_path)
    return os.path.abspath(CONFIG_FILE)


def load_config(path):
    if not os.path.isfile(path):
        raise ConfigNotFound(f"Config not found: {path}")
    try:
        with open(path, "r", encoding="utf-8") as f:
            raw = json.load(f)
    except (UnicodeDecodeError, ValueError) as e:
        raise ConfigInvalid(f"Config is not valid JSON: {path} ({e})") from e
    except OSError as e:
        raise ConfigInvalid(f"Cannot read config {path}: {e}") from e
    return validate_config(raw)


def _is_number(value):
    return isinstance(value, Number) and not isinstance(value, bool)


def _check_list(config, key, required):
    items = config.get(key)
    if not isinstance(items, list) or not items:
        raise ConfigInvalid(f"'{key}' must be a non-empty list")
    for i, item in enumerate(items):
        if not isinstance(item, dict):
            raise ConfigInvalid(f"{key}[{i}] must be an object")
        for field in required:
            value = item.get(field)
            if not isinstance(value, str) or not value.strip():
                raise ConfigInvalid(f"{key}[{i}].{field} must be a non-empty string")
    return [dict(item) for item in items]


def validate_config(raw):
    """Check the structure of a loaded config and fill in optional defaults.

    Returns a new dict; the input is left untouched.
    """
    if not isinstance(raw, dict):
        raise ConfigInvalid("Config root must be a JSON object")

    config = {
        "symbols": _check_list(raw, "symbols", ["symbol", "name"]),
        "timeframes": _check_list(raw, "timeframes", ["interval", "label"]),
    }

    seen = set()
    for tf in config["timeframes"]:
        if tf["label"] in seen:
            raise ConfigInvalid(f"Duplicate timeframe label: {tf['label']}")
        seen.add(tf["label"])

    names = set()
    for i, symbol in enumerate(config["symbols"]):
        name = symbol["name"]
        if "/" in name or "\\" in name or name in (".", ".."):
            raise ConfigInvalid(f"symbols[{i}].name must be a plain file name: {name}")
        if name in names:
            raise ConfigInvalid(f"Duplicate symbol name: {name}")
        names.add(name)

    for section, defaults in DEFAULTS.items():
        given = raw.get(section, {})
        if not isinstance(given, dict):
            raise ConfigInvalid(f"'{section}' must be an object")
        merged = copy.deepcopy(defaults)
        merged.update(given)
        config[section] = merged

    for section, fields in POSITIVE_FIELDS.items():
        for field in fields:
            value = config[section][field]
            if not _is_number(value) or value <= 0:
                raise ConfigInvalid(f"{section}.{field} must be a positive number")
    for section, fields in NON_NEGATIVE_FIELDS.items():
        for field in fields:
            value = config[section][field]
            if not _is_number(value) or value < 0:
                raise ConfigInvalid(f"{section}.{field} must be a number >= 0")

    if not isinstance(config["chart"]["studies"], list):
        raise ConfigInvalid("chart.studies must be a list")
    if str(config["pdf"]["format"]).lower() not in PAPER_SIZES_MM:
        raise ConfigInvalid(f"Unknown pdf.format: {config['pdf']['format']}")
    if not isinstance(config["pdf"]["landscape"], bool):
        raise ConfigInvalid("pdf.landscape must be true or false")
    if not isinstance(config["output"]["print"], bool):
        raise ConfigInvalid("output.print must be true or false")

    return config


def apply_overrides(config, output_dir=None, print_=None):
    """Return a copy of config with command line overrides applied."""
    config = copy.deepcopy(config)
    if output_dir:
        config["output"]["directory"] = output_dir
    if print_ is not None:
        config["output"]["print"] = print_
    return config
