import copy
import json
import logging
import os
from typing import Any, Dict, Optional

import yaml


def _get_nested_value(config: Dict[str, Any], path: str) -> Any:
    """Get a nested value from a dictionary using dot notation."""
    keys = path.split(".")
    value = config
    for key in keys:
        if not isinstance(value, dict):
            return None
        value = value.get(key)
        if value is None:
            return None
    return value


def _set_nested_value(config: Dict[str, Any], path: str, value: Any) -> None:
    """Set a nested value in a dictionary using dot notation."""
    *path_parts, final_key = path.split(".")
    current = config
    for part in path_parts:
        if not isinstance(current.get(part), dict):
            current[part] = {}
        current = current[part]
    current[final_key] = value


def _merge(config: Dict[str, Any], loaded: Dict[str, Any]) -> None:
    # Update nested dictionaries instead of replacing them
    for key, value in loaded.items():
        if isinstance(value, dict) and isinstance(config.get(key), dict):
            config[key].update(value or {})
        else:
            config[key] = value


def _convert_env_value(env_var: str, value: str, env_type: Optional[str], logger: logging.Logger) -> Any:
    if env_type == "bool":
        return value.lower() in ("true", "1", "yes", "on")
    if env_type == "int":
        try:
            return int(value)
        except ValueError:
            logger.warning(f"Failed to convert {env_var} value to int: {value}")
            raise
    return value


def load_config(config_path: str) -> Dict[str, Any]:
    """Load configuration from file and environment"""
    logger = logging.getLogger("Config")

    config = copy.deepcopy(DEFAULT_CONFIG)

    if os.path.exists(config_path):
        with open(config_path, "r") as f:
            content = f.read()
        try:
            loaded = yaml.safe_load(content)
        except yaml.YAMLError:
            try:
                loaded = json.loads(content)
            except json.JSONDecodeError as e:
                raise ValueError(f"Failed to parse config file as YAML or JSON: {e}")
        if loaded is not None:
            if not isinstance(loaded, dict):
                raise ValueError(f"Config file {config_path} must contain a mapping")
            _merge(config, loaded)

    logger.info("Loading environment variables...")
    for key, env_info in ENV_MAPPINGS.items():
        env_var = env_info if isinstance(env_info, str) else env_info["env"]
        env_type = env_info.get("type") if isinstance(env_info, dict) else None

        value = os.environ.get(env_var)
        logger.debug(f"Checking {env_var}: {'present' if value is not None else 'missing'}")

        # An empty string is an explicit override (e.g. disabling all agents)
        if value is None:
            continue

        try:
            converted = _convert_env_value(env_var, value, env_type, logger)
        except ValueError:
            continue

        _set_nested_value(config, key, converted)

    return config


class Config:
    """Configuration singleton"""

    _instance = None
    _config = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super(Config, cls).__new__(cls)
            cls._instance.initialize()
        return cls._instance

    def initialize(self):
        """Initialize the configuration"""
        if Config._config is None:
            self.load_config()

    def load_config(self):
        """Load configuration from file and environment"""
        config_path = os.environ.get("COMMAND_ROUTER_CONFIG", "config.yml")
        Config._config = load_config(config_path)

    @classmethod
    def reset(cls):
        """Drop the cached instance so the next access reloads everything"""
        cls._instance = None
        cls._config = None

    def get(self, key: str, default: Any = None) -> Any:
        """Get a configuration value"""
        if not Config._config:
            return default
        value = _get_nested_value(Config._config, key)
        return value if value is not None else default

    @property
    def cli_path(self) -> str:
        return self.get("router.cli_path", DEFAULT_CLI_PATH)

    @property
    def agent_definitions(self) -> str:
        """Raw binding list, always as the comma-separated string form"""
        agents = self.get("router.agents", "")
        if isinstance(agents, (list, tuple)):
            return ",".join(str(entry) for entry in agents)
        return str(agents)

    @property
    def persona_script(self) -> str:
        return self.get("router.persona_script", "") or ""

    @property
    def telegram_token(self) -> Optional[str]:
        return self.get("telegram.bot_token")

    @property
    def telegram_chat_id(self) -> Optional[str]:
        chat_id = self.get("telegram.chat_id")
        return str(chat_id) if chat_id is not None else None

    @property
    def webhook_enabled(self) -> bool:
        return bool(self.get("webhook_server.enabled", True))

    @property
    def webhook_port(self) -> int:
        return int(self.get("webhook_server.port", 8080))

    @property
    def webhook_token(self) -> Optional[str]:
        return self.get("webhook_server.token")

    @property
    def log_level(self) -> str:
        return self.get("log_level", "INFO")


DEFAULT_CLI_PATH = "node /app/openclaw.mjs"

# "command:agent_id:description:timeout_sec"
DEFAULT_AGENTS = (
    "GE:ge:Send to GE agent (bypasses main):120,"
    "eng:engineer:Send to Engineer agent (bypasses main):300"
)

# Environment variable mappings
ENV_MAPPINGS = {
    "router.cli_path": "OPENCLAW_CLI_PATH",
    "router.agents": "COMMAND_ROUTER_AGENTS",
    "router.persona_script": "PERSONA_SCRIPT_PATH",
    "telegram.bot_token": "COMMAND_ROUTER_TELEGRAM_TOKEN",
    "telegram.chat_id": "COMMAND_ROUTER_TELEGRAM_CHAT_ID",
    "webhook_server.enabled": {"env": "COMMAND_ROUTER_WEBHOOK_ENABLED", "type": "bool"},
    "webhook_server.port": {"env": "COMMAND_ROUTER_WEBHOOK_PORT", "type": "int"},
    "webhook_server.token": "COMMAND_ROUTER_WEBHOOK_TOKEN",
    "log_level": "COMMAND_ROUTER_LOG_LEVEL",
}

# Default configuration
DEFAULT_CONFIG = {
    "router": {
        "cli_path": DEFAULT_CLI_PATH,
        "agents": DEFAULT_AGENTS,
        "persona_script": "",
    },
    "telegram": {"bot_token": None, "chat_id": None},
    "webhook_server": {"enabled": True, "port": 8080, "token": None},
    "log_level": "INFO",
}
