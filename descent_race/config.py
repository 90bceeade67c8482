import json
import math
import os
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

REPO_ROOT = Path(__file__).resolve().parents[1]
DEFAULT_CONFIG_PATH = REPO_ROOT / 'configs' / 'race_config.json'


def _config_path():
    env_path = os.getenv('DESCENT_CONFIG_PATH')
    if not env_path:
        return DEFAULT_CONFIG_PATH
    path = Path(env_path)
    return path if path.is_absolute() else REPO_ROOT / path


def load_config(path=None):
    """
    Loads the race config file. Returns None when it is missing or broken,
    in which case every get_config() call falls back to its default.
    """
    config_path = Path(path) if path else _config_path()
    try:
        with open(config_path, 'r', encoding='utf-8') as f:
            config = json.load(f)
        return config
    except FileNotFoundError:
        print(f"ERROR: Could not find config file at {config_path}")
        return None
    except Exception as e:
        print(f"ERROR: Could not parse config file {config_path}: {e}")
        return None

# Load the config ONCE when the module is first imported
RACE_CONFIG = load_config()


def get_config(key_path, default=None, config=None):
    """
    Safely gets a value from the loaded config using a 'dot.path'.
    Example: get_config('simulation.speed_multiplier')
    """
    source = RACE_CONFIG if config is None else config
    if not source:
        return default

    try:
        value = source
        for key in key_path.split('.'):
            value = value[key]
        return value
    except (KeyError, TypeError):
        print(f"Warning: Could not find config key: {key_path}")
        return default


def env_float(name, fallback):
    """Float override from the environment; unparsable values are ignored."""
    raw = os.getenv(name)
    if raw is None or raw.strip() == '':
        return float(fallback)
    try:
        value = float(raw)
    except ValueError:
        print(f"Warning: Ignoring non-numeric {name}={raw!r}")
        return float(fallback)
    if not math.isfinite(value):
        print(f"Warning: Ignoring non-finite {name}={raw!r}")
        return float(fallback)
    return value
