"""
Runtime Config Loader

Loads configuration from YAML with environment variable overrides and turns
it into typed settings for every component.
"""

import dataclasses
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from ..chunking.assembler import AssemblerConfig
from ..context.citation import CitationStyle
from ..generation.prompt import PromptOptions, Tone
from ..ingestion.pipeline import PipelineConfig
from ..retrieval.filters import RetrievalConfig

logger = logging.getLogger(__name__)


DEFAULT_CONFIG_PATH = Path(__file__).resolve().parents[2] / "config" / "rag.yaml"


class ConfigValidationError(Exception):
    """Raised when config validation fails."""
    pass


@dataclass
class StoreConfig:
    """Vector store location."""
    collection_name: str = "condo_act"
    persist_dir: Optional[str] = "data/chroma"


@dataclass
class EmbeddingConfig:
    """Embedding model settings."""
    model_name: str = "BAAI/bge-large-en-v1.5"
    device: Optional[str] = None
    batch_size: int = 32
    normalize: bool = True
    query_instruction: str = ""


@dataclass
class RagSettings:
    """Typed settings for the whole pipeline."""
    chunking: AssemblerConfig = field(default_factory=AssemblerConfig)
    ingestion: PipelineConfig = field(default_factory=PipelineConfig)
    retrieval: RetrievalConfig = field(default_factory=RetrievalConfig)
    store: StoreConfig = field(default_factory=StoreConfig)
    embedding: EmbeddingConfig = field(default_factory=EmbeddingConfig)
    generation: PromptOptions = field(default_factory=PromptOptions)
    min_document_chars: int = 20
    include_relevance: bool = True
    log_level: str = "INFO"


# Section name -> settings dataclass
SECTION_TYPES = {
    'chunking': AssemblerConfig,
    'ingestion': PipelineConfig,
    'retrieval': RetrievalConfig,
    'store': StoreConfig,
    'embedding': EmbeddingConfig,
    'generation': PromptOptions,
}

TOP_LEVEL_KEYS = {'min_document_chars', 'include_relevance', 'log_level'}


def _to_bool(value: str) -> bool:
    return value.lower() in ('true', '1', 'yes', 'on')


def _to_optional_float(value: str) -> Optional[float]:
    return None if value.lower() in ('', 'none', 'null') else float(value)


class ConfigLoader:
    """Load and validate configuration with environment overrides.

    Priority (highest to lowest):
    1. Environment variables
    2. YAML file
    3. Dataclass defaults
    """

    # Environment variable mappings: (section, key, converter)
    ENV_MAPPINGS = {
        'CONDO_RAG_COLLECTION': ('store', 'collection_name', str),
        'CONDO_RAG_PERSIST_DIR': ('store', 'persist_dir', str),
        'CONDO_RAG_EMBEDDING_MODEL': ('embedding', 'model_name', str),
        'CONDO_RAG_EMBEDDING_DEVICE': ('embedding', 'device', str),
        'CONDO_RAG_BATCH_SIZE': ('ingestion', 'batch_size', int),
        'CONDO_RAG_CONCURRENCY': ('ingestion', 'max_concurrency', int),
        'CONDO_RAG_BATCH_TIMEOUT': ('ingestion', 'batch_timeout_seconds', _to_optional_float),
        'CONDO_RAG_TOP_K': ('retrieval', 'top_k', int),
        'CONDO_RAG_FINAL_COUNT': ('retrieval', 'final_count', int),
        'CONDO_RAG_MIN_SCORE': ('retrieval', 'min_score', float),
        'CONDO_RAG_EXPAND_CONTEXT': ('chunking', 'expand_context', _to_bool),
    }

    @staticmethod
    def load_yaml(config_path: str) -> Dict[str, Any]:
        """Load configuration from YAML file.

        Args:
            config_path: Path to YAML config file

        Returns:
            Configuration dictionary (empty for an empty file)

        Raises:
            FileNotFoundError: If config file doesn't exist
            yaml.YAMLError: If YAML parsing fails
        """
        config_file = Path(config_path)

        if not config_file.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")

        try:
            with open(config_file, 'r') as f:
                config = yaml.safe_load(f) or {}

            logger.info(f"Loaded config from: {config_path}")
            return config

        except yaml.YAMLError as e:
            logger.error(f"Failed to parse YAML config: {e}")
            raise

    @staticmethod
    def apply_env_overrides(config: Dict[str, Any]) -> Dict[str, Any]:
        """Apply environment variable overrides to config.

        Raises:
            ConfigValidationError: If an override cannot be converted
        """
        overrides_applied = []

        for env_var, (section, key, convert) in ConfigLoader.ENV_MAPPINGS.items():
            env_value = os.environ.get(env_var)
            if env_value is None:
                continue

            try:
                value = convert(env_value)
            except ValueError as e:
                raise ConfigValidationError(f"Invalid value for {env_var}: {env_value!r}") from e

            config.setdefault(section, {})
            if config[section] is None:
                config[section] = {}
            config[section][key] = value
            overrides_applied.append(f"{env_var} -> {section}.{key}")

        if overrides_applied:
            logger.info(f"Applied {len(overrides_applied)} environment overrides")
            for override in overrides_applied:
                logger.debug(f"  {override}")

        return config

    @staticmethod
    def validate_config(config: Dict[str, Any]) -> List[str]:
        """Validate section names and keys.

        Returns:
            List of validation errors (empty if valid)
        """
        errors = []

        if not isinstance(config, dict):
            return ["Config root must be a mapping"]

        for key, value in config.items():
            if key in TOP_LEVEL_KEYS:
                continue
            if key not in SECTION_TYPES:
                errors.append(f"Unknown top-level key: {key}")
                continue
            if value is None:
                continue
            if not isinstance(value, dict):
                errors.append(f"Section '{key}' must be a dictionary")
                continue

            known = {f.name for f in dataclasses.fields(SECTION_TYPES[key])}
            for nested in value:
                if nested not in known:
                    errors.append(f"Unknown key: {key}.{nested}")

        return errors

    @staticmethod
    def load_config(
        config_path: str,
        apply_env: bool = True,
        validate: bool = True
    ) -> Dict[str, Any]:
        """Load, override, and validate configuration.

        Raises:
            FileNotFoundError: If config file doesn't exist
            ConfigValidationError: If validation fails
        """
        config = ConfigLoader.load_yaml(config_path)

        if apply_env:
            config = ConfigLoader.apply_env_overrides(config)

        if validate:
            errors = ConfigLoader.validate_config(config)
            if errors:
                error_msg = "Config validation failed:\n  " + "\n  ".join(errors)
                logger.error(error_msg)
                raise ConfigValidationError(error_msg)

            logger.info("Config validation passed")

        return config

    @staticmethod
    def to_settings(config: Dict[str, Any]) -> RagSettings:
        """Build typed settings from a validated config dictionary.

        Raises:
            ConfigValidationError: If a section's values are rejected
        """
        kwargs: Dict[str, Any] = {}

        for section, section_type in SECTION_TYPES.items():
            values = dict(config.get(section) or {})
            try:
                if section == 'generation':
                    if 'tone' in values:
                        values['tone'] = Tone(values['tone'])
                    if 'citation_style' in values:
                        values['citation_style'] = CitationStyle(values['citation_style'])
                kwargs[section] = section_type(**values)
            except (TypeError, ValueError) as e:
                raise ConfigValidationError(f"Invalid '{section}' section: {e}") from e

        for key in TOP_LEVEL_KEYS:
            if key in config:
                kwargs[key] = config[key]

        return RagSettings(**kwargs)


def load_settings(
    config_path: Optional[str] = None,
    apply_env: bool = True
) -> RagSettings:
    """Load typed settings.

    Args:
        config_path: YAML path (default: config/rag.yaml; defaults only if absent)
        apply_env: Apply environment variable overrides

    Returns:
        RagSettings
    """
    if config_path is None and not DEFAULT_CONFIG_PATH.exists():
        config: Dict[str, Any] = {}
        if apply_env:
            config = ConfigLoader.apply_env_overrides(config)
        return ConfigLoader.to_settings(config)

    config = ConfigLoader.load_config(str(config_path or DEFAULT_CONFIG_PATH), apply_env)
    return ConfigLoader.to_settings(config)
