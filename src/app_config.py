"""Application configuration module for the locale synchronizer."""
import logging
import os
import sys
from dataclasses import dataclass, field
from typing import Dict, Optional, Any

import jsonschema
import yaml
from dotenv import load_dotenv

from src.logging_config import setup_logger
from src.tree_sync import DEFAULT_PLACEHOLDER_TEMPLATE

DEFAULT_REFERENCE_FILE_NAME = 'en.json'
DEFAULT_DOCUMENT_SUFFIX = '.json'
DEFAULT_LOG_FILE_PATH = 'logs/locale_sync.log'

DEFAULT_PALETTE: Dict[str, str] = {
    'reset': '\x1b[0m',
    'red': '\x1b[31m',
    'green': '\x1b[32m',
    'yellow': '\x1b[33m',
    'magenta': '\x1b[35m',
    'cyan': '\x1b[36m',
}

# Settings that are present but of the wrong type are rejected as a whole.
CONFIG_SCHEMA = {
    "type": "object",
    "properties": {
        "locales_directory": {"type": "string"},
        "reference_file_name": {"type": "string", "minLength": 1},
        "document_suffix": {"type": "string", "minLength": 1},
        "placeholder_template": {"type": "string"},
        "indent": {"type": "integer", "minimum": 0},
        "ensure_ascii": {"type": "boolean"},
        "use_color": {"type": "boolean"},
        "show_progress": {"type": "boolean"},
        "palette": {
            "type": "object",
            "additionalProperties": {"type": "string"}
        },
        "logging": {
            "type": "object",
            "properties": {
                "log_level": {"type": "string"},
                "log_file_path": {"type": ["string", "null"]},
                "log_to_console": {"type": "boolean"}
            }
        }
    }
}


@dataclass
class SyncConfig:
    """Application configuration dataclass."""
    # Storage layout
    locales_directory: str
    reference_file_name: str = DEFAULT_REFERENCE_FILE_NAME
    document_suffix: str = DEFAULT_DOCUMENT_SUFFIX

    # Placeholder and serialization
    placeholder_template: str = DEFAULT_PLACEHOLDER_TEMPLATE
    indent: int = 2
    ensure_ascii: bool = False

    # Presentation
    use_color: bool = True
    show_progress: bool = True
    palette: Dict[str, str] = field(default_factory=lambda: dict(DEFAULT_PALETTE))

    project_root: Optional[str] = None

    @property
    def reference_file_path(self) -> str:
        return os.path.join(self.locales_directory, self.reference_file_name)


def _compute_project_root() -> str:
    """Compute the project root directory."""
    script_real_path = os.path.realpath(__file__)
    script_dir = os.path.dirname(script_real_path)
    return os.path.abspath(os.path.join(script_dir, os.pardir))


def _load_dotenv_files(project_root: str) -> None:
    """Load .env files from project root or docker directory."""
    dotenv_path_project_root = os.path.join(project_root, '.env')
    dotenv_path_docker_dir = os.path.join(project_root, 'docker', '.env')

    if os.path.exists(dotenv_path_project_root):
        load_dotenv(dotenv_path_project_root)
    elif os.path.exists(dotenv_path_docker_dir):
        load_dotenv(dotenv_path_docker_dir)


def _load_yaml_config(project_root: str) -> Dict[str, Any]:
    """Load the YAML configuration file, falling back to defaults on any problem."""
    default_config_path = os.path.join(project_root, 'config.yaml')
    config_file = os.environ.get('LOCALE_SYNC_CONFIG_FILE', default_config_path)

    if not os.path.isabs(config_file):
        config_file = os.path.abspath(config_file)

    config = {}
    try:
        if not os.path.exists(config_file):
            # A missing config file is the normal case for a checkout without overrides.
            return config

        if not os.access(config_file, os.R_OK):
            print(f"Error: Configuration file '{config_file}' exists but is not readable. Check file permissions.",
                  file=sys.stderr)
            return config

        with open(config_file, 'r', encoding='utf-8') as config_file_stream:
            loaded_config = yaml.safe_load(config_file_stream)
            if loaded_config is None:
                print(f"Warning: Configuration file '{config_file}' is empty. Using default configuration.",
                      file=sys.stderr)
            elif isinstance(loaded_config, dict):
                jsonschema.validate(instance=loaded_config, schema=CONFIG_SCHEMA)
                config = loaded_config
            else:
                print(f"Error: Configuration file '{config_file}' must contain a YAML dictionary. Using defaults.",
                      file=sys.stderr)

    except yaml.YAMLError as e:
        print(f"Error: Invalid YAML in configuration file '{config_file}': {e}", file=sys.stderr)
        print("Please check your YAML syntax. Using default configuration.", file=sys.stderr)
    except jsonschema.ValidationError as e:
        print(f"Error: Invalid setting in configuration file '{config_file}': {e.message}", file=sys.stderr)
        print("Using default configuration.", file=sys.stderr)
    except (OSError, IOError) as e:
        print(f"Error: Could not read configuration file '{config_file}': {e}", file=sys.stderr)
        print("Using default configuration.", file=sys.stderr)

    return config


def _setup_logger_from_config(config: Dict[str, Any]) -> logging.Logger:
    """Set up logger based on configuration."""
    log_config = config.get('logging', {})
    log_level_str = log_config.get('log_level', 'INFO').upper()
    log_file_path = log_config.get('log_file_path', DEFAULT_LOG_FILE_PATH)
    log_to_console = log_config.get('log_to_console', True)
    return setup_logger(log_level_str, log_file_path, log_to_console)


def _env_flag(name: str) -> bool:
    return os.environ.get(name, '').strip().lower() in ('1', 'true', 'yes', 'on')


def load_app_config() -> SyncConfig:
    """
    Load application configuration from YAML file and environment variables.

    Environment variables ``LOCALES_DIRECTORY`` and ``REFERENCE_FILE_NAME``
    override the YAML values; ``LOCALE_SYNC_NO_COLOR`` disables colored output.

    Returns:
        SyncConfig: The loaded application configuration.
    """
    project_root = _compute_project_root()

    _load_dotenv_files(project_root)

    config = _load_yaml_config(project_root)

    logger = _setup_logger_from_config(config)

    default_locales_directory = os.path.join(project_root, 'i18n', 'locales')
    locales_directory = os.environ.get(
        'LOCALES_DIRECTORY',
        config.get('locales_directory', default_locales_directory)
    )
    if not os.path.isabs(locales_directory):
        locales_directory = os.path.abspath(os.path.join(project_root, locales_directory))

    reference_file_name = os.environ.get(
        'REFERENCE_FILE_NAME',
        config.get('reference_file_name', DEFAULT_REFERENCE_FILE_NAME)
    )

    use_color = config.get('use_color', True) and not _env_flag('LOCALE_SYNC_NO_COLOR')

    palette = dict(DEFAULT_PALETTE)
    palette.update(config.get('palette', {}))

    logger.debug("Locales directory: %s (reference: %s)", locales_directory, reference_file_name)

    return SyncConfig(
        locales_directory=locales_directory,
        reference_file_name=reference_file_name,
        document_suffix=config.get('document_suffix', DEFAULT_DOCUMENT_SUFFIX),
        placeholder_template=config.get('placeholder_template', DEFAULT_PLACEHOLDER_TEMPLATE),
        indent=config.get('indent', 2),
        ensure_ascii=config.get('ensure_ascii', False),
        use_color=use_color,
        show_progress=config.get('show_progress', True),
        palette=palette,
        project_root=project_root
    )
