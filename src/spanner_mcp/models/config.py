"""Server configuration loader for Spanner MCP Server."""

import os
import yaml
from typing import Dict, Any, Optional
from pathlib import Path
from dotenv import load_dotenv


DEFAULTS = {
    'log_level': 'INFO',
    'log_json': False,
    'log_file': None,
    'ddl_timeout': 600,
    'query_timeout': 60,
    'emulator_host': None,
}

# Config key -> environment variable
ENV_VARS = {
    'log_level': 'LOG_LEVEL',
    'log_json': 'LOG_JSON',
    'log_file': 'LOG_FILE',
    'ddl_timeout': 'SPANNER_DDL_TIMEOUT',
    'query_timeout': 'SPANNER_QUERY_TIMEOUT',
    'emulator_host': 'SPANNER_EMULATOR_HOST',
}


class ServerConfig:
    """Server settings resolved from environment, YAML file and defaults."""

    def __init__(self, config_path: Optional[str] = None):
        load_dotenv()

        self.source: Dict[str, str] = {}
        self._values: Dict[str, Any] = dict(DEFAULTS)

        # Lowest priority first, later sources override
        self._load_from_yaml(config_path)
        self._load_from_env()

        self.validate()

    def _load_from_yaml(self, config_path: Optional[str] = None) -> bool:
        """Load the `server:` block of the YAML configuration file."""
        possible_paths = [
            config_path,
            os.getenv('SPANNER_MCP_CONFIG'),
            'config/spanner_mcp.yaml',
            Path(__file__).parent.parent.parent.parent / 'config' / 'spanner_mcp.yaml'
        ]

        for path in possible_paths:
            if not path:
                continue
            try:
                with open(path, 'r') as f:
                    config_data = yaml.safe_load(f) or {}
            except FileNotFoundError:
                continue
            except yaml.YAMLError as e:
                raise ValueError(f"Invalid YAML in configuration file {path}: {e}")

            server = config_data.get('server') or {}
            for key, value in server.items():
                if key in DEFAULTS:
                    self._values[key] = value
                    self.source[key] = str(path)
            return True

        return False

    def _load_from_env(self):
        """Override values with environment variables when set."""
        for key, env_var in ENV_VARS.items():
            value = os.getenv(env_var)
            if value is not None and value != '':
                self._values[key] = value
                self.source[key] = env_var

    @property
    def log_level(self) -> str:
        return str(self._values['log_level']).upper()

    @property
    def log_json(self) -> bool:
        value = self._values['log_json']
        if isinstance(value, bool):
            return value
        return str(value).lower() in ('1', 'true', 'yes', 'on')

    @property
    def log_file(self) -> Optional[str]:
        return self._values['log_file'] or None

    @property
    def ddl_timeout(self) -> int:
        return int(self._values['ddl_timeout'])

    @property
    def query_timeout(self) -> int:
        return int(self._values['query_timeout'])

    @property
    def emulator_host(self) -> Optional[str]:
        return self._values['emulator_host'] or None

    def validate(self):
        """Validate that numeric settings parse and are positive."""
        for key in ('ddl_timeout', 'query_timeout'):
            raw = self._values[key]
            try:
                value = int(raw)
            except (TypeError, ValueError):
                raise ValueError(f"Invalid {ENV_VARS[key]} value: {raw}")
            if value <= 0:
                raise ValueError(f"{ENV_VARS[key]} must be positive, got {value}")

        level = self.log_level
        if level not in ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'):
            raise ValueError(f"Invalid LOG_LEVEL value: {level}")

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to a dictionary for the service layer."""
        return {
            'ddl_timeout': self.ddl_timeout,
            'query_timeout': self.query_timeout,
            'emulator_host': self.emulator_host,
        }
