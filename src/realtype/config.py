#!/usr/bin/env python3
"""
Configuration management module for realtype.

This module provides centralized configuration management using environment variables,
a .env file, and sensible defaults. Values are validated by pydantic.
"""

import logging
from pathlib import Path
from functools import lru_cache
from typing import Optional, Dict, Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Default configuration values
DEFAULT_CONFIG = {
    'cache': {
        'max_size': 256
    },
    'output': {
        'dir': 'results',
        'format': 'text'
    },
    'logging': {
        'level': 'INFO',
        'format': '%(asctime)s - %(levelname)s - %(message)s'
    }
}

OUTPUT_FORMATS = ('text', 'json')
LOG_LEVELS = ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL')


class AppConfig(BaseSettings):
    """Application configuration with validation."""

    model_config = SettingsConfigDict(
        env_prefix='REALTYPE_',
        env_file='.env',
        env_file_encoding='utf-8',
        extra='ignore',
    )

    # Kind cache settings
    cache_max_size: int = Field(DEFAULT_CONFIG['cache']['max_size'])

    # Output settings
    output_dir: str = Field(DEFAULT_CONFIG['output']['dir'])
    output_format: str = Field(DEFAULT_CONFIG['output']['format'])

    # Logging settings
    log_level: str = Field(DEFAULT_CONFIG['logging']['level'])
    log_format: str = Field(DEFAULT_CONFIG['logging']['format'])

    @field_validator('cache_max_size')
    @classmethod
    def validate_cache_size(cls, v):
        if v < 1:
            raise ValueError('Cache size must be at least 1')
        return v

    @field_validator('output_format')
    @classmethod
    def validate_output_format(cls, v):
        v = v.lower()
        if v not in OUTPUT_FORMATS:
            raise ValueError(f'Output format must be one of {", ".join(OUTPUT_FORMATS)}')
        return v

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v):
        v = v.upper()
        if v not in LOG_LEVELS:
            raise ValueError(f'Log level must be one of {", ".join(LOG_LEVELS)}')
        return v

    @property
    def numeric_log_level(self) -> int:
        """Get the logging module constant for the configured level."""
        return getattr(logging, self.log_level)


@lru_cache(maxsize=1)
def get_config() -> AppConfig:
    """Get the application configuration with caching."""
    return AppConfig()


def configure_logging(config: Optional[AppConfig] = None) -> None:
    """Configure the root logger from the application configuration."""
    config = config or get_config()
    logging.basicConfig(level=config.numeric_log_level, format=config.log_format, force=True)
    logging.debug(f"Logging configured at level {config.log_level}")


def validate_configuration() -> Dict[str, Any]:
    """Validate the current configuration and return validation results."""
    config = get_config()
    results = {
        'valid': True,
        'warnings': [],
        'errors': [],
        'config_summary': {
            'cache_max_size': config.cache_max_size,
            'output_dir': config.output_dir,
            'output_format': config.output_format,
            'log_level': config.log_level,
        }
    }

    output_dir = Path(config.output_dir).expanduser()
    if output_dir.exists() and not output_dir.is_dir():
        results['errors'].append(f"Output path {output_dir} exists and is not a directory")
        results['valid'] = False

    if config.log_level == 'DEBUG':
        results['warnings'].append("Debug logging prints expected/actual values for every failed check.")

    if config.cache_max_size < 16:
        results['warnings'].append(
            f"Cache size {config.cache_max_size} is small; classification of mixed inputs will miss often."
        )

    return results


def print_config_summary() -> bool:
    """Print the settings in effect plus any problems. Returns whether the configuration is usable."""
    validation = validate_configuration()

    print("realtype configuration")
    print("-" * 30)
    for key, value in validation['config_summary'].items():
        print(f"  {key}: {value}")

    for error in validation['errors']:
        print(f"  [ERROR] {error}")
    for warning in validation['warnings']:
        print(f"  [WARNING] {warning}")

    return validation['valid']
