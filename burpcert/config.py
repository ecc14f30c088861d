import copy
import datetime
import enum
import logging
import os

import yaml

from burpcert.errors import ConfigError

DEFAULT_CONFIG_PATH = 'config/config.yaml'

# Fallback source for the host list when --host is not given
HOST_ENV = 'BURP_HOST'

DEFAULT_CONFIG = {
    'certificate': {
        'organization': 'BurpTeamServer',
        'validity_hours': 365 * 24,
        'host': '',
    },
    'key': {
        'algorithm': 'rsa',
        'size': 2048,
        'public_exponent': 65537,
    },
    'output': {
        'directory': '.',
        'legacy_key': None,
    },
    'logging': {
        'level': 'INFO',
        'format': '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        'file': None,
    },
}


class KeyAlgorithm(enum.Enum):
    """Key algorithms the issuer can generate"""

    RSA = 'rsa'
    # TODO: add ECDSA once burpcert.issuer has a P-256 generator and pkcs8 an EC OID


def _merge(base, override):
    """Recursively overlay override onto a copy of base"""
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_config(path=DEFAULT_CONFIG_PATH):
    """Load YAML configuration on top of the defaults"""
    if path is None or not os.path.exists(path):
        logging.debug(f"No config file at {path}, using defaults")
        return validate(copy.deepcopy(DEFAULT_CONFIG))

    try:
        with open(path, 'r') as f:
            loaded = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Failed to read config {path}: {e}") from e

    if loaded is None:
        loaded = {}
    if not isinstance(loaded, dict):
        raise ConfigError(f"Config {path} must be a mapping, got {type(loaded).__name__}")

    return validate(_merge(DEFAULT_CONFIG, loaded))


def validate(config):
    """Check the values the issuer depends on and return the config unchanged"""
    key_algorithm(config)

    size = config['key']['size']
    if not isinstance(size, int) or size <= 0:
        raise ConfigError(f"key.size must be a positive integer, got {size!r}")

    organization = config['certificate']['organization']
    if not isinstance(organization, str) or not organization:
        raise ConfigError(f"certificate.organization must be a non-empty string, got {organization!r}")

    hours = config['certificate']['validity_hours']
    if not isinstance(hours, int) or isinstance(hours, bool) or hours <= 0:
        raise ConfigError(f"certificate.validity_hours must be a positive integer, got {hours!r}")
    try:
        datetime.datetime.now(datetime.timezone.utc) + datetime.timedelta(hours=hours)
    except OverflowError:
        raise ConfigError(f"certificate.validity_hours {hours} runs past the last representable date") from None

    host = config['certificate']['host']
    if host is not None and not isinstance(host, str):
        raise ConfigError(f"certificate.host must be a string, got {host!r}")

    directory = config['output']['directory']
    if not isinstance(directory, str) or not directory:
        raise ConfigError(f"output.directory must be a non-empty string, got {directory!r}")

    for section, option in (('output', 'legacy_key'), ('logging', 'file')):
        value = config[section][option]
        if value is not None and not isinstance(value, str):
            raise ConfigError(f"{section}.{option} must be a string or null, got {value!r}")

    level = config['logging']['level']
    if not isinstance(getattr(logging, str(level).upper(), None), int):
        raise ConfigError(f"Unknown logging.level {level!r}")

    return config


def key_algorithm(config):
    value = config['key']['algorithm']
    try:
        return KeyAlgorithm(str(value).lower())
    except ValueError:
        supported = ', '.join(a.value for a in KeyAlgorithm)
        raise ConfigError(f"Unsupported key.algorithm {value!r} (supported: {supported})") from None


def resolve_host(config, cli_host=None):
    """Pick the host list: command line, then environment, then config file"""
    if cli_host is not None:
        return cli_host
    return os.getenv(HOST_ENV, config['certificate']['host'] or '')
