"""config.json settings for the mantle command line.

Settings are nested JSON objects. Any setting can also come from an
environment variable named after its upper-cased key path.
"""

import json
import os
from pathlib import Path
from typing import Any, Dict, List, Optional

DEFAULT_CONFIG_PATH = "config.json"

# Output apiVersion per kind for `mantle convert` without --to-version.
DEFAULT_CONFIG: Dict[str, Any] = {
    "convert": {
        "versions": {
            "Deployment": "apps/v1",
            "ReplicaSet": "apps/v1",
            "Namespace": "v1",
            "Secret": "v1",
        }
    }
}


def load_config(config_path: str = DEFAULT_CONFIG_PATH) -> Dict[str, Any]:
    """Read config.json.

    A missing file, unreadable JSON, or a top-level value that is not an
    object all yield ``{}`` so the converter runs on its defaults.

    Args:
        config_path: Path to the config file (default: "config.json")
    """
    path = Path(config_path)
    if not path.is_file():
        return {}

    try:
        loaded = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return {}
    return loaded if isinstance(loaded, dict) else {}


def _lookup(config: Dict[str, Any], keys: List[str]) -> Any:
    node: Any = config
    for key in keys:
        if not isinstance(node, dict):
            return None
        node = node.get(key)
    return node


def get_config_value(
    keys: List[str], default: Any = None, config: Optional[Dict[str, Any]] = None
) -> Any:
    """Look up a nested setting, then its environment variable, then ``default``.

    ``["convert", "versions", "Deployment"]`` reads
    ``config["convert"]["versions"]["Deployment"]`` and otherwise the
    CONVERT_VERSIONS_DEPLOYMENT environment variable.

    Args:
        keys: Key path into the config
        default: Returned when neither source has the setting
        config: Parsed config (read from config.json when omitted)
    """
    value = _lookup(config if config is not None else load_config(), keys)
    if value is None:
        value = os.environ.get("_".join(key.upper() for key in keys))
    return default if value is None else value


def write_default_config(config_path: str = DEFAULT_CONFIG_PATH, force: bool = False) -> bool:
    """Write DEFAULT_CONFIG to config_path.

    Args:
        config_path: Destination path
        force: Overwrite an existing file

    Returns:
        True if the file was written, False if it already existed
    """
    path = Path(config_path)
    if path.exists() and not force:
        return False

    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(DEFAULT_CONFIG, indent=2) + "\n", encoding="utf-8")
    return True
