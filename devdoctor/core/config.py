# devdoctor/core/config.py

import copy
import json
import logging
from importlib import resources
from pathlib import Path
from typing import Any

import jsonschema
from jsonschema import Draft7Validator

from devdoctor.core.types import Persona

SCHEMA: dict[str, Any] = json.loads(
    (resources.files("devdoctor") / "schema" / "config.v1.schema.json").read_text()
)

log = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path.home() / ".config" / "devdoctor" / "config.json"

# grab the un-hooked "properties" validator
_default_properties = Draft7Validator.VALIDATORS["properties"]


def _set_defaults(validator, properties, instance, schema):
    """
    jsonschema hook: whenever a property has a 'default', insert it,
    then delegate to the original Draft7 `properties` validator.
    """
    if not isinstance(instance, dict):
        return
    for prop, subschema in properties.items():
        if "default" in subschema:
            instance.setdefault(prop, copy.deepcopy(subschema["default"]))

    yield from _default_properties(validator, properties, instance, schema)


_DefaultingValidator = jsonschema.validators.extend(Draft7Validator, {"properties": _set_defaults})


def _deep_update(base: dict, updates: dict) -> None:
    """
    Recursively update base with updates (mutates base).
    """
    for k, v in updates.items():
        if isinstance(v, dict) and isinstance(base.get(k), dict):
            _deep_update(base[k], v)
        else:
            base[k] = v


def schema_defaults() -> dict[str, Any]:
    """Return a fresh config dict holding only the schema defaults."""
    config: dict[str, Any] = {}
    for _ in _DefaultingValidator(SCHEMA).iter_errors(config):
        pass
    return config


def load_config(config_path: Path = DEFAULT_CONFIG_PATH) -> dict[str, Any]:
    """
    Loads and validates configuration against our JSON Schema.
    Fills in any missing properties with the schema's own default values.
    """
    log.debug("Attempting to load configuration from: %s", config_path)

    config = schema_defaults()
    final_validator = Draft7Validator(SCHEMA)

    if not config_path.is_file():
        log.debug("No config at %s; using schema defaults.", config_path)
        return config

    try:
        user_config = json.loads(config_path.read_text())
        final_validator.validate(user_config)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        log.error("Error parsing JSON in %s: %s", config_path, e)
        log.warning("Using schema defaults only.")
        return config
    except OSError as e:
        log.error("Could not read %s: %s", config_path, e)
        log.warning("Using schema defaults only.")
        return config
    except jsonschema.ValidationError as e:
        log.error("Configuration validation error: %s", e.message)
        log.warning("Falling back to schema defaults.")
        return config

    _deep_update(config, user_config)

    try:
        final_validator.validate(config)
    except jsonschema.ValidationError as e:
        log.error("Merged configuration failed schema validation: %s", e.message)
        raise

    log.debug("Configuration loaded and validated.")
    return config


def generate_default_config(config_path: Path = DEFAULT_CONFIG_PATH) -> bool:
    config_path.parent.mkdir(parents=True, exist_ok=True)
    try:
        config_path.write_text(json.dumps(schema_defaults(), indent=4))
    except OSError as e:
        log.error("Failed to write default config: %s", e)
        return False
    log.info("Default configuration file created at %s.", config_path)
    return True


def resolve_persona(config: dict[str, Any], override: str | None = None) -> Persona:
    """
    Pick the persona from an explicit override or from ``cli.persona``.

    Raises:
        ValueError: if the client name is not a known persona.
    """
    name = override or config.get("cli", {}).get("persona", Persona.PRIMARY.value)
    try:
        return Persona(name.strip().lower())
    except ValueError:
        allowed = ", ".join(p.value for p in Persona)
        raise ValueError(f"Unknown persona '{name}'. Allowed: {allowed}.") from None
