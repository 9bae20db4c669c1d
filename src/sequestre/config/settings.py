"""
Sequestre configuration with hybrid YAML + ENV support.

Priority: Environment variables > YAML config > Pydantic defaults
"""

import os
from pathlib import Path
from typing import Optional

import yaml
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

COMMITMENT_LEVELS = ["processed", "confirmed", "finalized"]


class TimeoutConfig(BaseSettings):
    """Timeout configuration (seconds)."""

    rpc_call: float = Field(default=10.0, ge=1.0, le=60.0)
    confirmation: float = Field(default=60.0, ge=5.0, le=600.0)
    poll_interval: float = Field(default=1.0, ge=0.05, le=10.0)


class SequestreConfig(BaseSettings):
    """
    Sequestre configuration schema.

    Program and mint ids are optional here so that a partial config can
    still be loaded; ``EscrowProgram.from_settings`` rejects it before any
    flow starts.
    """

    model_config = SettingsConfigDict(
        env_prefix="SEQUESTRE_",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="allow",
    )

    # Blockchain configuration
    solana_rpc_url: str = Field(default="https://api.devnet.solana.com")
    solana_network: str = Field(default="devnet")
    program_id: Optional[str] = Field(default=None)
    usdc_mint: Optional[str] = Field(default=None)
    usdc_decimals: int = Field(default=6, ge=0, le=18)

    # Confirmation behavior
    commitment: str = Field(default="confirmed")
    blockhash_commitment: str = Field(default="processed")
    timeouts: TimeoutConfig = Field(default_factory=TimeoutConfig)

    # Server-assisted deployment
    escrow_api_url: Optional[str] = Field(default=None)

    # Logging
    log_level: str = Field(default="info")
    log_dir: Optional[str] = Field(default=None)
    verbose: int = Field(default=1, ge=0, le=3)

    # Metrics
    metrics_enabled: bool = Field(default=True)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls,
        init_settings,
        env_settings,
        dotenv_settings,
        file_secret_settings,
    ):
        """Let environment variables override values loaded from YAML."""
        return env_settings, init_settings, dotenv_settings, file_secret_settings

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        allowed = ["debug", "info", "warning", "error", "critical"]
        v_lower = v.lower()
        if v_lower not in allowed:
            raise ValueError(f"Invalid log_level. Must be one of: {allowed}")
        return v_lower

    @field_validator("solana_network")
    @classmethod
    def validate_network(cls, v: str) -> str:
        """Validate Solana network."""
        allowed = ["devnet", "testnet", "mainnet-beta", "localnet"]
        v_lower = v.lower()
        if v_lower not in allowed:
            raise ValueError(f"Invalid network. Must be one of: {allowed}")
        return v_lower

    @field_validator("commitment", "blockhash_commitment")
    @classmethod
    def validate_commitment(cls, v: str) -> str:
        """Validate commitment level."""
        v_lower = v.lower()
        if v_lower not in COMMITMENT_LEVELS:
            raise ValueError(
                f"Invalid commitment. Must be one of: {COMMITMENT_LEVELS}"
            )
        return v_lower


def load_config(config_file: Optional[str] = None) -> SequestreConfig:
    """
    Load configuration from YAML files.

    Priority: Environment variables > environment-specific YAML > default YAML

    Args:
        config_file: Optional YAML filename override

    Returns:
        SequestreConfig instance
    """
    env = os.getenv("ENV", "production")

    config_map = {
        "production": "production.yaml",
        "development": "development.yaml",
        "test": "test.yaml",
    }

    current_file = Path(__file__).resolve()
    project_root = current_file.parent.parent.parent.parent
    config_dir = Path(os.getenv("SEQUESTRE_CONFIG_DIR", project_root / "config"))

    default_config_path = config_dir / "default.yaml"
    merged_config = {}

    if default_config_path.exists():
        with open(default_config_path, "r") as f:
            loaded = yaml.safe_load(f)
            if loaded:
                merged_config = loaded

    if config_file is None:
        config_file = os.getenv("SEQUESTRE_CONFIG")
        if not config_file:
            config_file = config_map.get(env, "production.yaml")

    env_config_path = config_dir / config_file

    if env_config_path.exists():
        with open(env_config_path, "r") as f:
            loaded = yaml.safe_load(f)
            if loaded:
                merged_config.update(loaded)

    return SequestreConfig(**merged_config)


_settings: Optional[SequestreConfig] = None


def get_settings() -> SequestreConfig:
    """
    Get cached settings instance.

    Used by the CLI entry point only; library code takes its configuration
    as constructor arguments.
    """
    global _settings
    if _settings is None:
        _settings = load_config()
    return _settings


def reset_settings() -> None:
    """Drop cached settings (tests, config reload)."""
    global _settings
    _settings = None
