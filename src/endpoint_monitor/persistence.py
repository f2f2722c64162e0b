"""
JSON persistence for the endpoint registry.

The registry is stored as a human readable JSON list, next to the executable
for frozen builds and in the working directory otherwise. Loading is strict:
any I/O problem or schema mismatch raises, and the caller decides whether to fall
back to the built-in default endpoints.
"""

import json
import logging
import os
import sys
from pathlib import Path
from typing import Any, Dict, List, Sequence, Tuple

from .config.constants import DEFAULT_CONFIG_FILENAME, DEFAULT_HOST, DEFAULT_PORTS
from .domain import Endpoint, Status, StatusKind, new_endpoint_id
from .errors import ConfigParseError, PersistenceError
from .registry import MAX_PORT, MIN_PORT, ensure_unique_ids

# Module logger
logger = logging.getLogger(__name__)


def get_config_path(filename: str = DEFAULT_CONFIG_FILENAME) -> Path:
    """
    Resolves the location of the configuration file.

    Frozen builds keep the file next to the executable; otherwise it lives
    in the current working directory.
    """
    if getattr(sys, "frozen", False):
        base = Path(sys.executable).resolve().parent
    else:
        base = Path.cwd()
    return base / filename


def default_endpoints() -> List[Endpoint]:
    """Returns the built-in endpoint set used when no configuration can be loaded."""
    return [Endpoint.create(name=f"Server-{port}", host=DEFAULT_HOST, port=port) for port in DEFAULT_PORTS]


def _status_to_json(status: Status) -> Any:
    if status.kind is StatusKind.ERROR:
        return {StatusKind.ERROR.value: status.code}
    return status.kind.value


def _status_from_json(raw: Any) -> Status:
    if isinstance(raw, str):
        try:
            kind = StatusKind(raw)
        except ValueError as err:
            raise ConfigParseError(f"Unknown status tag: {raw!r}") from err
        if kind is StatusKind.ERROR:
            raise ConfigParseError("Error status requires a status code.")
        return Status(kind)
    if isinstance(raw, dict) and len(raw) == 1 and StatusKind.ERROR.value in raw:
        code = raw[StatusKind.ERROR.value]
        if isinstance(code, bool) or not isinstance(code, int):
            raise ConfigParseError(f"Error status code must be an integer, got {code!r}")
        return Status.error(code)
    raise ConfigParseError(f"Malformed status: {raw!r}")


def endpoint_to_record(endpoint: Endpoint) -> Dict[str, Any]:
    return {
        "id": endpoint.id,
        "name": endpoint.name,
        "host": endpoint.host,
        "port": endpoint.port,
        "status": _status_to_json(endpoint.status),
        "url": endpoint.url,
    }


def endpoint_from_record(record: Any) -> Endpoint:
    """
    Builds an Endpoint from one decoded JSON record.

    'ip' is accepted in place of 'host' and a missing 'id' is generated. The
    stored 'url' is informational only; the endpoint derives its own.

    Raises:
        ConfigParseError: If the record does not match the expected schema.
    """
    if not isinstance(record, dict):
        raise ConfigParseError(f"Endpoint record must be an object, got {type(record).__name__}")

    name = record.get("name")
    host = record.get("host", record.get("ip"))
    port = record.get("port")
    if not isinstance(name, str) or not isinstance(host, str):
        raise ConfigParseError(f"Endpoint record needs string 'name' and 'host': {record!r}")
    if isinstance(port, bool) or not isinstance(port, int) or not MIN_PORT <= port <= MAX_PORT:
        raise ConfigParseError(f"Endpoint record has an invalid port: {port!r}")

    endpoint_id = record.get("id") or new_endpoint_id()
    if not isinstance(endpoint_id, str):
        raise ConfigParseError(f"Endpoint id must be a string, got {endpoint_id!r}")

    status = _status_from_json(record.get("status", StatusKind.UNCHECKED.value))
    return Endpoint(id=endpoint_id, name=name, host=host, port=port, status=status)


def save_endpoints(endpoints: Sequence[Endpoint], path: Path) -> None:
    """
    Writes the endpoints to the configuration file, replacing its content.

    Raises:
        PersistenceError: If the file cannot be written.
    """
    data = [endpoint_to_record(e) for e in endpoints]
    # A failed write leaves the existing file untouched.
    tmp_path = path.with_name(f"{path.name}.tmp")
    try:
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, ensure_ascii=False)
        os.replace(tmp_path, path)
    except OSError as err:
        if tmp_path.exists():
            tmp_path.unlink()
        raise PersistenceError(f"Could not write configuration file {path}: {err}") from err
    logger.info(f"Saved {len(data)} endpoints to {path}")


def load_endpoints(path: Path) -> List[Endpoint]:
    """
    Reads endpoints from the configuration file.

    Raises:
        PersistenceError: If the file cannot be read.
        ConfigParseError: If the content is not a valid endpoint list.
    """
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as err:
        raise ConfigParseError(f"Invalid JSON in configuration file {path}: {err}") from err
    except (OSError, UnicodeDecodeError) as err:
        raise PersistenceError(f"Could not read configuration file {path}: {err}") from err

    if not isinstance(data, list):
        raise ConfigParseError(f"Configuration file {path} must contain a list of endpoints")

    endpoints = ensure_unique_ids(endpoint_from_record(record) for record in data)
    logger.info(f"Loaded {len(endpoints)} endpoints from {path}")
    return endpoints


def load_or_default(path: Path) -> Tuple[List[Endpoint], bool]:
    """
    Loads endpoints, falling back to the default set on any failure.

    Returns:
        Tuple[List[Endpoint], bool]: The endpoints, and whether they came from the file.
    """
    try:
        return load_endpoints(path), True
    except PersistenceError as err:
        logger.warning(f"{err}. Using default endpoints.")
        return default_endpoints(), False
