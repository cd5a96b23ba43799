from __future__ import annotations

import json
import logging
import os
from typing import Any

from result import Err, Ok, Result

from honeycrisp.config.defaults import default_config
from honeycrisp.config.schema import AppConfig, from_dict
from honeycrisp.probes import default_probes
from honeycrisp.services.fs import DEFAULT_FS, FileSystem

CONFIG_PATH = "~/.config/honeycrisp/config.json"
CONFIG_ENV = "HONEYCRISP_CONFIG"

log = logging.getLogger(__name__)


def config_path(fs: FileSystem = DEFAULT_FS) -> str:
    """``$HONEYCRISP_CONFIG`` when set, else the per-user default."""
    return fs.expanduser(os.environ.get(CONFIG_ENV) or CONFIG_PATH)


def _read_payload(resolved: str, fs: FileSystem) -> Result[dict[str, Any], str]:
    try:
        text = fs.read_text(resolved)
    except OSError as exc:
        return Err(f"Failed reading config at {resolved}: {exc}.")
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as exc:
        return Err(f"Failed reading config at {resolved}: invalid JSON at line {exc.lineno}, column {exc.colno}.")
    if not isinstance(payload, dict):
        return Err(f"Config at {resolved} must be a JSON object.")
    return Ok(payload)


def load_config(path: str | None = None, fs: FileSystem = DEFAULT_FS) -> Result[AppConfig, str]:
    """Load the audit settings, falling back to defaults when no file exists.

    Unrecognised keys are ignored with a warning so a typo never aborts a
    scan. Probe names in ``disabledProbes`` must exist in the catalog.
    """
    resolved = path or config_path(fs)
    if not fs.exists(resolved):
        return Ok(default_config())

    payload = _read_payload(resolved, fs)
    if isinstance(payload, Err):
        return Err(payload.unwrap_err())
    data = payload.unwrap()

    defaults = default_config()
    unknown_keys = sorted(set(data) - set(defaults.to_dict()))
    if unknown_keys:
        log.warning("ignoring unknown config keys in %s: %s", resolved, ", ".join(unknown_keys))

    try:
        config = from_dict(data, defaults)
    except (TypeError, ValueError) as exc:
        return Err(f"Invalid value in config at {resolved}: {exc}.")

    known = {probe.name for probe in default_probes()}
    unknown_probes = sorted(set(config.disabled_probes) - known)
    if unknown_probes:
        return Err(f"Config at {resolved} disables unknown probe(s): {', '.join(unknown_probes)}.")
    return Ok(config)


def sample_config_json() -> str:
    return json.dumps(default_config().to_dict(), indent=2)
