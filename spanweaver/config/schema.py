"""
SpanWeaver v0.1.0

Configuration schema for SpanWeaver.

Defines all available configuration parameters with defaults and validation.

Author: SpanWeaver Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""

import copy
import logging
from dataclasses import asdict, dataclass
from typing import Dict, Any, Optional, List
from pathlib import Path
import yaml


# Default configuration values
DEFAULT_CONFIG = {
    # ========================================================================
    # Span Finding
    # ========================================================================
    'alignment': {
        'kmer_size': 31,  # Odd, so no k-mer is its own reverse complement
        'min_quality': 10,  # Seeding stops at the first base below this
        'max_quality_sum': 60,  # Spans above this mismatch quality sum are dropped
    },

    # ========================================================================
    # K-mer Index
    # ========================================================================
    'index': {
        'shards': 1,  # Contig shards indexed concurrently (1 = sequential)
        'min_contig_length': 0,  # Shorter contigs are not loaded
    },

    # ========================================================================
    # Execution
    # ========================================================================
    'execution': {
        'threads': None,  # Worker threads for pair alignment (None = 1)
    },

    # ========================================================================
    # Output
    # ========================================================================
    'output': {
        'format': 'text',  # 'text', 'json'

        # Logging
        'logging': {
            'level': 'INFO',  # 'DEBUG', 'INFO', 'WARNING', 'ERROR'
            'log_file': None,
        },
    },
}

VALID_FORMATS = ['text', 'json']
VALID_LOG_LEVELS = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
TEMPLATES = ['default', 'sensitive', 'strict']


class ConfigValidationError(Exception):
    """Raised when configuration validation fails."""
    pass


@dataclass
class AlignmentParameters:
    """
    Run parameters for span finding.

    Attributes:
        kmer_size: K-mer size for the index and read seeding
        min_quality: Quality floor for read trimming before seeding
        max_quality_sum: Quality-weighted mismatch ceiling for span acceptance
    """
    kmer_size: int = 31
    min_quality: int = 10
    max_quality_sum: int = 60

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> 'AlignmentParameters':
        """Build parameters from the 'alignment' section of a config dictionary."""
        section = config.get('alignment', {})
        defaults = DEFAULT_CONFIG['alignment']
        return cls(
            kmer_size=int(section.get('kmer_size', defaults['kmer_size'])),
            min_quality=int(section.get('min_quality', defaults['min_quality'])),
            max_quality_sum=int(section.get('max_quality_sum', defaults['max_quality_sum'])),
        )

    def to_dict(self) -> Dict[str, int]:
        return asdict(self)


def load_config(config_path: Optional[Path] = None) -> Dict[str, Any]:
    """
    Load configuration from file or return defaults.

    Args:
        config_path: Path to YAML config file (None = use defaults)

    Returns:
        Configuration dictionary

    Raises:
        ConfigValidationError: If the file does not hold a mapping at the top level
    """
    config = copy.deepcopy(DEFAULT_CONFIG)

    if config_path:
        config_path = Path(config_path)
        if config_path.exists():
            with open(config_path) as f:
                user_config = yaml.safe_load(f)

            if user_config is not None and not isinstance(user_config, dict):
                raise ConfigValidationError(
                    f"Config file {config_path} must contain a mapping at the top level"
                )

            # Deep merge user config into defaults
            if user_config:
                config = _deep_merge(config, user_config)

    return config


def _deep_merge(base: Dict, override: Dict) -> Dict:
    """
    Deep merge two dictionaries.

    Args:
        base: Base dictionary
        override: Override dictionary

    Returns:
        Merged dictionary
    """
    result = base.copy()

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value

    return result


def save_config_template(output_path: Path, template: str = 'default'):
    """
    Save a configuration template to file.

    Args:
        output_path: Output file path
        template: Template type ('default', 'sensitive', 'strict')
    """
    if template not in TEMPLATES:
        raise ValueError(f"Unknown template: {template} (choose from {', '.join(TEMPLATES)})")

    config = copy.deepcopy(DEFAULT_CONFIG)

    # Customize for specific templates
    if template == 'sensitive':
        # Shorter seeds and a looser ceiling find more placements in divergent regions
        config['alignment']['kmer_size'] = 21
        config['alignment']['max_quality_sum'] = 90

    elif template == 'strict':
        config['alignment']['min_quality'] = 20
        config['alignment']['max_quality_sum'] = 30

    with open(output_path, 'w') as f:
        yaml.dump(config, f, default_flow_style=False, sort_keys=False)


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _section(config: Dict[str, Any], path: str, errors: List[str]) -> Optional[Dict[str, Any]]:
    """Look up a (dotted) section, recording an error if it is not a mapping."""
    value = config
    for key in path.split('.'):
        value = value.get(key, {})
        if not isinstance(value, dict):
            errors.append(f"Invalid {path}: {value!r} (must be a mapping)")
            return None
    return value


def validate_config(config: Dict[str, Any]) -> List[str]:
    """
    Validate configuration dictionary.

    Sections that are not mappings (e.g. an empty ``alignment:`` line) are
    reported and their keys are not checked.

    Args:
        config: Configuration to validate

    Returns:
        List of validation errors (empty if valid)
    """
    if not isinstance(config, dict):
        return [f"Configuration must be a mapping, got {type(config).__name__}"]

    errors = []

    # Validate span finding parameters
    alignment = _section(config, 'alignment', errors)
    if alignment is not None:
        kmer_size = alignment.get('kmer_size')
        if not _is_int(kmer_size) or kmer_size < 1 or kmer_size % 2 == 0:
            errors.append(f"Invalid alignment.kmer_size: {kmer_size!r} (must be an odd integer >= 1)")

        for key in ('min_quality', 'max_quality_sum'):
            value = alignment.get(key)
            if not _is_int(value) or value < 0:
                errors.append(f"Invalid alignment.{key}: {value!r} (must be an integer >= 0)")

    # Validate index settings
    index = _section(config, 'index', errors)
    if index is not None:
        shards = index.get('shards', 1)
        if not _is_int(shards) or shards < 1:
            errors.append(f"Invalid index.shards: {shards!r} (must be an integer >= 1)")
        min_contig_length = index.get('min_contig_length', 0)
        if not _is_int(min_contig_length) or min_contig_length < 0:
            errors.append(f"Invalid index.min_contig_length: {min_contig_length!r} (must be an integer >= 0)")

    # Validate execution settings
    execution = _section(config, 'execution', errors)
    if execution is not None:
        threads = execution.get('threads')
        if threads is not None and (not _is_int(threads) or threads < 1):
            errors.append(f"Invalid execution.threads: {threads!r} (must be null or an integer >= 1)")

    # Validate output settings
    output = _section(config, 'output', errors)
    if output is not None:
        fmt = output.get('format', 'text')
        if fmt not in VALID_FORMATS:
            errors.append(f"Invalid output.format: {fmt!r} (choose from {', '.join(VALID_FORMATS)})")

        logging_config = _section(config, 'output.logging', errors)
        if logging_config is not None:
            level = logging_config.get('level', 'INFO')
            if not isinstance(level, str) or level.upper() not in VALID_LOG_LEVELS:
                errors.append(f"Invalid output.logging.level: {level!r}")

    return errors


def configure_logging(config: Dict[str, Any], level_override: Optional[str] = None):
    """
    Configure root logging from the 'output.logging' section.

    Args:
        config: Configuration dictionary
        level_override: Level name that takes precedence over the config (e.g. from --verbose)
    """
    logging_config = config.get('output', {}).get('logging', {})
    level_name = (level_override or logging_config.get('level') or 'INFO').upper()

    handlers: List[logging.Handler] = [logging.StreamHandler()]
    log_file = logging_config.get('log_file')
    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=handlers,
        force=True,
    )
