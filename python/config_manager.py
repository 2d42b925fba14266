"""
Configuration Management Module
Loads and validates configuration from config.yaml
"""

import yaml
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Any, Optional, List

logger = logging.getLogger(__name__)

VALID_MODES = ('create', 'update')
VALID_PROFILE_TYPES = ('rel', 'pep')
VALID_REL_EVIDENCE_KEYS = ('articleId', 'evidenceId')
VALID_LOG_LEVELS = ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL')


@dataclass
class PolicyConfig:
    """Toggleable transformation rules"""
    generate_name_variation: bool = False
    rel_evidence_key: str = "articleId"
    address_requires_country_id: bool = True


@dataclass
class DefaultsConfig:
    """Initial session selectors"""
    mode: str = "create"
    profile_type: str = "rel"


@dataclass
class OutputConfig:
    """JSON output and export settings"""
    indent: int = 4
    output_directory: str = "exports"
    date_format: str = "%Y-%m-%d"


@dataclass
class ValidationConfig:
    """Advisory validation settings"""
    min_year: int = 1900
    duplicate_name_threshold: int = 92
    check_near_duplicates: bool = True


@dataclass
class SessionConfig:
    """Operator session settings"""
    history_limit: int = 100


@dataclass
class LoggingConfig:
    """Logging configuration"""
    level: str = "INFO"
    file: str = ""
    console: bool = True
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class ConfigurationError(Exception):
    """Raised when configuration is invalid"""
    pass


class ConfigManager:
    """Manages converter configuration"""

    _instance: Optional['ConfigManager'] = None

    def __init__(self, config_path: Optional[str] = None):
        """Initialize configuration manager

        Args:
            config_path: Path to config.yaml file
        """
        self.config_path = Path(config_path) if config_path else self._find_config()
        self._raw_config: Dict[str, Any] = {}
        self.policy: PolicyConfig = PolicyConfig()
        self.defaults: DefaultsConfig = DefaultsConfig()
        self.output: OutputConfig = OutputConfig()
        self.validation: ValidationConfig = ValidationConfig()
        self.session: SessionConfig = SessionConfig()
        self.logging: LoggingConfig = LoggingConfig()

        if self.config_path and self.config_path.exists():
            self.load()
        else:
            logger.warning(f"Config file not found at {self.config_path}, using defaults")

    def _find_config(self) -> Path:
        """Find config.yaml in common locations"""
        search_paths = [
            Path(__file__).parent / "config.yaml",
            Path.cwd() / "config.yaml",
            Path.cwd() / "python" / "config.yaml",
        ]

        for path in search_paths:
            if path.exists():
                return path

        return search_paths[0]

    def load(self) -> None:
        """Load configuration from YAML file"""
        try:
            with open(self.config_path, 'r', encoding='utf-8') as f:
                self._raw_config = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in config file: {e}")
        except FileNotFoundError:
            raise ConfigurationError(f"Config file not found: {self.config_path}")

        if not isinstance(self._raw_config, dict):
            raise ConfigurationError("Config file must contain a mapping at the top level")

        self._parse_policy()
        self._parse_defaults()
        self._parse_output()
        self._parse_validation()
        self._parse_session()
        self._parse_logging()
        self._validate()
        logger.debug(f"Configuration loaded from {self.config_path}")

    def _section(self, name: str) -> Dict[str, Any]:
        cfg = self._raw_config.get(name) or {}
        if not isinstance(cfg, dict):
            raise ConfigurationError(f"Section '{name}' must be a mapping")
        return cfg

    def _parse_policy(self) -> None:
        """Parse transformation policy flags"""
        cfg = self._section('policy')
        self.policy = PolicyConfig(
            generate_name_variation=cfg.get('generate_name_variation', False),
            rel_evidence_key=cfg.get('rel_evidence_key', 'articleId'),
            address_requires_country_id=cfg.get('address_requires_country_id', True)
        )

    def _parse_defaults(self) -> None:
        """Parse default selectors"""
        cfg = self._section('defaults')
        self.defaults = DefaultsConfig(
            mode=str(cfg.get('mode', 'create')).lower(),
            profile_type=str(cfg.get('profile_type', 'rel')).lower()
        )

    def _parse_output(self) -> None:
        """Parse output configuration"""
        cfg = self._section('output')
        self.output = OutputConfig(
            indent=cfg.get('indent', 4),
            output_directory=cfg.get('output_directory', 'exports'),
            date_format=cfg.get('date_format', self.output.date_format)
        )

    def _parse_validation(self) -> None:
        """Parse validation configuration"""
        cfg = self._section('validation')
        self.validation = ValidationConfig(
            min_year=cfg.get('min_year', 1900),
            duplicate_name_threshold=cfg.get('duplicate_name_threshold', 92),
            check_near_duplicates=cfg.get('check_near_duplicates', True)
        )

    def _parse_session(self) -> None:
        """Parse session configuration"""
        cfg = self._section('session')
        self.session = SessionConfig(
            history_limit=cfg.get('history_limit', 100)
        )

    def _parse_logging(self) -> None:
        """Parse logging configuration"""
        cfg = self._section('logging')
        self.logging = LoggingConfig(
            level=str(cfg.get('level', 'INFO')).upper(),
            file=cfg.get('file', '') or '',
            console=cfg.get('console', True),
            format=cfg.get('format', self.logging.format)
        )

    @classmethod
    def create(cls, config_path: Optional[str] = None) -> 'ConfigManager':
        """Build a fresh instance without touching the singleton"""
        return cls(config_path)

    @classmethod
    def get_instance(cls, config_path: Optional[str] = None) -> 'ConfigManager':
        """Get singleton instance of ConfigManager"""
        if cls._instance is None:
            cls._instance = ConfigManager(config_path)
        return cls._instance

    @classmethod
    def reset_instance(cls) -> None:
        """Reset singleton instance (useful for testing)"""
        cls._instance = None

    def to_dict(self) -> Dict[str, Any]:
        """Export configuration as dictionary"""
        return {
            'policy': {
                'generate_name_variation': self.policy.generate_name_variation,
                'rel_evidence_key': self.policy.rel_evidence_key,
                'address_requires_country_id': self.policy.address_requires_country_id
            },
            'defaults': {
                'mode': self.defaults.mode,
                'profile_type': self.defaults.profile_type
            },
            'output': {
                'indent': self.output.indent,
                'output_directory': self.output.output_directory,
                'date_format': self.output.date_format
            },
            'validation': {
                'min_year': self.validation.min_year,
                'duplicate_name_threshold': self.validation.duplicate_name_threshold,
                'check_near_duplicates': self.validation.check_near_duplicates
            },
            'session': {
                'history_limit': self.session.history_limit
            },
            'logging': {
                'level': self.logging.level,
                'file': self.logging.file,
                'console': self.logging.console,
                'format': self.logging.format
            }
        }

    def _validate(self) -> None:
        """Validate configuration values"""
        errors: List[str] = []

        if self.policy.rel_evidence_key not in VALID_REL_EVIDENCE_KEYS:
            errors.append(
                f"policy.rel_evidence_key must be one of {VALID_REL_EVIDENCE_KEYS}, "
                f"got '{self.policy.rel_evidence_key}'"
            )
        for name in ('generate_name_variation', 'address_requires_country_id'):
            if not isinstance(getattr(self.policy, name), bool):
                errors.append(f"policy.{name} must be true or false")

        if self.defaults.mode not in VALID_MODES:
            errors.append(f"defaults.mode must be one of {VALID_MODES}, got '{self.defaults.mode}'")
        if self.defaults.profile_type not in VALID_PROFILE_TYPES:
            errors.append(
                f"defaults.profile_type must be one of {VALID_PROFILE_TYPES}, "
                f"got '{self.defaults.profile_type}'"
            )

        if not isinstance(self.output.indent, int) or self.output.indent < 0:
            errors.append("output.indent must be a non-negative integer")

        threshold = self.validation.duplicate_name_threshold
        if not isinstance(threshold, (int, float)) or not 0 <= threshold <= 100:
            errors.append("validation.duplicate_name_threshold must be between 0 and 100")
        if not isinstance(self.validation.min_year, int):
            errors.append("validation.min_year must be an integer")

        if not isinstance(self.session.history_limit, int) or self.session.history_limit < 1:
            errors.append("session.history_limit must be a positive integer")

        if self.logging.level not in VALID_LOG_LEVELS:
            errors.append(f"logging.level must be one of {VALID_LOG_LEVELS}")

        if errors:
            raise ConfigurationError("; ".join(errors))


def get_config(config_path: Optional[str] = None) -> ConfigManager:
    """Convenience function to get configuration instance"""
    return ConfigManager.get_instance(config_path)
