"""User configuration for tailor-skills.

Settings live in an INI file (``~/.tailor_skills/skills.cfg``) under the
``[tailor_skills]`` section. Environment variables take precedence over the
file, and a missing file simply means "use the defaults".
"""

import configparser
import os
from pathlib import Path
from typing import Optional

CONFIG_DIR = os.path.join(os.path.expanduser("~"), ".tailor_skills")
CONFIG_FILE = os.path.join(CONFIG_DIR, "skills.cfg")
DEFAULT_SECTION = "tailor_skills"

DEFAULT_API_BASE_URL = "https://api.github.com"
DEFAULT_MAX_REDIRECTS = 10
DEFAULT_HTTP_TIMEOUT = 30.0

# Name of the provenance file kept at the root of every installed skill.
SOURCE_FILE_NAME = ".source.json"

# config key -> environment variable that overrides it
ENV_OVERRIDES = {
    "skills_dir": "TAILOR_SKILLS_DIR",
    "api_base_url": "TAILOR_SKILLS_API_URL",
    "max_redirects": "TAILOR_SKILLS_MAX_REDIRECTS",
    "http_timeout": "TAILOR_SKILLS_HTTP_TIMEOUT",
    "github_token": "GITHUB_TOKEN",
}


def _load_config() -> configparser.ConfigParser:
    config = configparser.ConfigParser()
    if os.path.exists(CONFIG_FILE):
        config.read(CONFIG_FILE)
    if DEFAULT_SECTION not in config:
        config[DEFAULT_SECTION] = {}
    return config


def get_value(key: str) -> Optional[str]:
    """Return a raw setting, consulting the environment before the config file."""
    env_var = ENV_OVERRIDES.get(key)
    if env_var:
        env_val = os.environ.get(env_var)
        if env_val:
            return env_val
    val = _load_config()[DEFAULT_SECTION].get(key)
    return val or None


def _safe_int(value: Optional[str], default: int) -> int:
    try:
        if value is None:
            return default
        return int(value)
    except (ValueError, TypeError):
        return default


def _safe_float(value: Optional[str], default: float) -> float:
    try:
        if value is None:
            return default
        return float(value)
    except (ValueError, TypeError):
        return default


def get_default_skills_dir() -> Path:
    return Path.home() / ".claude" / "skills"


def get_skills_dir() -> Path:
    """Root directory that holds one sub-directory per installed skill."""
    configured = get_value("skills_dir")
    if configured:
        return Path(configured).expanduser()
    return get_default_skills_dir()


def get_api_base_url() -> str:
    return (get_value("api_base_url") or DEFAULT_API_BASE_URL).rstrip("/")


def get_max_redirects() -> int:
    value = _safe_int(get_value("max_redirects"), DEFAULT_MAX_REDIRECTS)
    return value if value >= 0 else DEFAULT_MAX_REDIRECTS


def get_http_timeout() -> float:
    value = _safe_float(get_value("http_timeout"), DEFAULT_HTTP_TIMEOUT)
    return value if value > 0 else DEFAULT_HTTP_TIMEOUT


def get_github_token() -> Optional[str]:
    return get_value("github_token")
