"""
Configuration objects for the mymongo helpers.
Settings classes are read from the environment; database credentials are
read from a JSON config file (or the environment) into a MongoConfig.
"""

import json
import os

from mymongo.helpers.error import ConfigError


def _optional_float(value):
    return float(value) if value else None


class BaseConfig:
    # pylint: disable=too-few-public-methods
    """Base configuration"""

    DEBUG = False

    MONGODB_CONFIG_PATH = os.environ.get('MONGODB_CONFIG_PATH', 'mymongo.config.json')
    MONGODB_CONNECT_TIMEOUT = int(os.environ.get('MONGODB_CONNECT_TIMEOUT', '10'))
    MONGODB_OPERATION_TIMEOUT = _optional_float(os.environ.get('MONGODB_OPERATION_TIMEOUT'))


class DevelopmentConfig(BaseConfig):
    # pylint: disable=too-few-public-methods
    """Development configuration"""

    DEBUG = True


class QAConfig(BaseConfig):
    # pylint: disable=too-few-public-methods
    """QA configuration"""

    DEBUG = False


class ProductionConfig(BaseConfig):
    # pylint: disable=too-few-public-methods
    """Production configuration"""

    DEBUG = False


SETTINGS = {
    'DevelopmentConfig': DevelopmentConfig,
    'QAConfig': QAConfig,
    'ProductionConfig': ProductionConfig,
}


def get_settings(name=None):
    """
    Resolve a settings class by name

    Args:
        name: Class name, e.g. 'DevelopmentConfig'. Defaults to the
            MYMONGO_SETTINGS environment variable, then 'ProductionConfig'.

    Returns:
        The settings class

    Raises:
        ConfigError: If the name is unknown
    """

    name = name or os.environ.get('MYMONGO_SETTINGS') or 'ProductionConfig'
    # Accept the dotted form used by APP_SETTINGS-style variables
    name = name.rsplit('.', 1)[-1]
    if name not in SETTINGS:
        raise ConfigError(f"Unknown settings '{name}'. Expected one of: {', '.join(SETTINGS)}")
    return SETTINGS[name]


class MongoConfig:
    """Credentials and address of a MongoDB server"""

    REQUIRED_FIELDS = ('username', 'password', 'host', 'port')

    def __init__(self, username: str, password: str, host: str, port: int):
        self.username = username
        self.password = password
        self.host = host
        self.port = port

    def __repr__(self):
        # never include the password
        return f"MongoConfig(username={self.username!r}, host={self.host!r}, port={self.port!r})"

    def __eq__(self, other):
        if not isinstance(other, MongoConfig):
            return NotImplemented
        return (self.username, self.password, self.host, self.port) == \
            (other.username, other.password, other.host, other.port)

    @classmethod
    def from_env(cls, environ=None):
        """Build a config from MONGODB_USERNAME, MONGODB_PASSWORD, MONGODB_HOST and MONGODB_PORT"""
        environ = os.environ if environ is None else environ
        raw = {}
        for field in cls.REQUIRED_FIELDS:
            env_key = f"MONGODB_{field.upper()}"
            if env_key in environ:
                raw[field] = environ[env_key]
        return validate_config(raw)


def _validate_port(value):
    if isinstance(value, bool):
        return None
    if isinstance(value, str):
        if not (value.isascii() and value.isdecimal()):
            return None
        value = int(value)
    if not isinstance(value, int) or not 0 < value < 65536:
        return None
    return value


def validate_config(raw) -> MongoConfig:
    """
    Validate raw configuration values

    Args:
        raw: Mapping decoded from the config source

    Returns:
        A MongoConfig with port normalized to int

    Raises:
        ConfigError: Naming the first missing or malformed field
    """

    if not isinstance(raw, dict):
        raise ConfigError("config must be a JSON object")

    for field in MongoConfig.REQUIRED_FIELDS:
        if field not in raw:
            raise ConfigError(f"missing key '{field}' in the config file")

    for field in ('username', 'password', 'host'):
        if not isinstance(raw[field], str):
            raise ConfigError(f"unsupported field type for '{field}'")

    port = _validate_port(raw['port'])
    if port is None:
        raise ConfigError("unsupported field type for 'port'")

    return MongoConfig(
        username=raw['username'],
        password=raw['password'],
        host=raw['host'],
        port=port
    )


def read_config(config_file_path) -> MongoConfig:
    """
    Read and validate a JSON config file

    Raises:
        ConfigError: If the file cannot be read or parsed, or is invalid
    """

    try:
        with open(config_file_path, encoding='utf-8') as f:
            raw = json.load(f)
    except OSError as e:
        raise ConfigError(f"Cannot read config file '{config_file_path}': {str(e)}") from e
    except json.JSONDecodeError as e:
        raise ConfigError(f"Config file '{config_file_path}' is not valid JSON: {str(e)}") from e

    return validate_config(raw)
