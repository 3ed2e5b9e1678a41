# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
ForgeFlow Configuration

Settings come from configs/forgeflow.yaml. Environment variables carry
provider secrets plus the PORT, LOG_LEVEL and LEDGER_URL deployment overrides.
"""

import os
import yaml
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Dict


# =============================================================================
# CONFIGURATION DATACLASS
# =============================================================================

@dataclass(frozen=True)
class Config:
    """
    Immutable application configuration.
    All values from YAML. No hidden state.
    """

    # -- Server --
    service_host: str = "0.0.0.0"
    service_port: int = 3001

    # -- Paths --
    data_path: str = "/app/data"
    workflows_path: str = "/app/data/workflows"
    saved_data_path: str = "/app/data/store"
    executions_path: str = "/app/data/executions"

    # -- HTTP --
    http_timeout: float = 30.0

    # -- Execution --
    node_timeout: float = 300.0
    max_retries: int = 0
    retry_backoff: float = 1.0
    retry_backoff_max: float = 30.0
    require_trigger: bool = True

    # -- AI --
    default_provider: str = "huggingface"
    simulated_preview_chars: int = 50

    # -- Ledger --
    ledger_url: Optional[str] = None
    record_runs_on_ledger: bool = False

    # -- Logging --
    log_level: str = "INFO"
    log_format: str = "json"


# =============================================================================
# SECRETS - The ONLY thing from environment variables
# =============================================================================

PROVIDER_KEY_ENV: Dict[str, str] = {
    "huggingface": "HF_TOKEN",
    "openrouter": "OPENROUTER_API_KEY",
    "groq": "GROQ_API_KEY",
    "openai": "OPENAI_API_KEY",
    "anthropic": "ANTHROPIC_API_KEY",
}


def get_provider_api_key(provider: str) -> Optional[str]:
    """Provider credential from its environment variable, None when unset"""
    env_var = PROVIDER_KEY_ENV.get(provider)
    if not env_var:
        return None
    return os.getenv(env_var) or None


# =============================================================================
# LOADER
# =============================================================================

def load_config(path: str = "/app/configs/forgeflow.yaml") -> Config:
    """
    Load configuration from YAML.
    Returns defaults if file doesn't exist.
    """
    if not Path(path).exists():
        return Config()

    with open(path) as f:
        y = yaml.safe_load(f) or {}

    # Helper to safely navigate nested dicts
    def get(d: dict, *keys, default=None):
        for k in keys:
            if not isinstance(d, dict):
                return default
            d = d.get(k, {})
        return d if d != {} else default

    data_path = get(y, "paths", "data") or "/app/data"

    return Config(
        # Server
        service_host=get(y, "server", "host") or "0.0.0.0",
        service_port=int(os.getenv("PORT", get(y, "server", "port") or 3001)),

        # Paths
        data_path=data_path,
        workflows_path=get(y, "paths", "workflows") or f"{data_path}/workflows",
        saved_data_path=get(y, "paths", "store") or f"{data_path}/store",
        executions_path=get(y, "paths", "executions") or f"{data_path}/executions",

        # HTTP
        http_timeout=get(y, "http", "timeout", default=30.0),

        # Execution
        node_timeout=get(y, "execution", "node_timeout", default=300.0),
        max_retries=get(y, "execution", "max_retries", default=0),
        retry_backoff=get(y, "execution", "retry_backoff", default=1.0),
        retry_backoff_max=get(y, "execution", "retry_backoff_max", default=30.0),
        require_trigger=get(y, "validation", "require_trigger", default=True),

        # AI
        default_provider=get(y, "ai", "default_provider") or "huggingface",
        simulated_preview_chars=get(y, "ai", "simulated_preview_chars", default=50),

        # Ledger
        ledger_url=os.getenv("LEDGER_URL") or get(y, "ledger", "url"),
        record_runs_on_ledger=get(y, "ledger", "record_runs", default=False),

        # Logging
        log_level=os.getenv("LOG_LEVEL", get(y, "logging", "level") or "INFO"),
        log_format=get(y, "logging", "format") or "json",
    )


# =============================================================================
# GLOBAL INSTANCE
# =============================================================================

_config: Optional[Config] = None


def get_config() -> Config:
    """Get or create global config instance."""
    global _config
    if _config is None:
        config_path = os.getenv("FORGEFLOW_CONFIG_PATH", "/app/configs/forgeflow.yaml")
        _config = load_config(config_path)
    return _config
