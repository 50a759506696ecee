"""
WellCam Configuration
=====================

This module handles configuration loading for the camera analysis service.

Configuration Sources (in order of precedence):
    1. Environment variables (highest priority)
    2. config.yaml file
    3. Default values (lowest priority)

Environment Variable Mapping:
    WELLCAM_CAMERA_BACKEND        -> camera.backend
    WELLCAM_CAMERA_INDEX          -> camera.device_index
    WELLCAM_ENGINE_BACKEND        -> engine.backend
    WELLCAM_ENGINE_MODEL          -> engine.model
    WELLCAM_ENGINE_TIMEOUT        -> engine.timeout_seconds
    GEMINI_API_KEY                -> engine.api_key
    WELLCAM_STRESS_SCORE_POLICY   -> contracts.stress_score_policy
    WELLCAM_POSTURE_SCORE_POLICY  -> contracts.posture_score_policy
    WELLCAM_LOG_LEVEL             -> logging.level
    PORT / WELLCAM_PORT           -> server.port

Example:
    from wellcam.config import settings

    print(settings.engine.backend)
    print(settings.contracts.posture_score_policy)
"""

import os
import logging
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field

from wellcam.contracts.registry import ScorePolicy


logger = logging.getLogger(__name__)


# =============================================================================
# Configuration Models
# =============================================================================

class AppConfig(BaseModel):
    """Service identification configuration."""

    name: str = Field(default="wellcam", description="Service name")
    version: str = Field(default="v0.1.0", description="Service version")


class CameraConfig(BaseModel):
    """Capture device configuration."""

    backend: str = Field(
        default="mock",
        description="Camera backend: 'mock' or 'opencv'",
    )
    device_index: int = Field(default=0, ge=0, description="OpenCV camera index")
    width: int = Field(default=640, ge=0, description="Requested frame width (0 = default)")
    height: int = Field(default=480, ge=0, description="Requested frame height (0 = default)")
    jpeg_quality: int = Field(
        default=90,
        ge=1,
        le=100,
        description="JPEG quality for captured snapshots",
    )


class EngineConfig(BaseModel):
    """Inference engine configuration."""

    backend: str = Field(
        default="mock",
        description="Inference backend: 'mock' or 'gemini'",
    )
    model: str = Field(default="gemini-2.0-flash", description="Gemini model name")
    api_key: Optional[str] = Field(default=None, description="Gemini API key")
    temperature: float = Field(default=0.2, ge=0.0, le=2.0, description="Sampling temperature")
    timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        description="Seconds before an inference call is abandoned",
    )


class ContractsConfig(BaseModel):
    """Per-kind contract policies."""

    stress_score_policy: ScorePolicy = Field(
        default=ScorePolicy.CLAMP,
        description="Out-of-range stress score: 'clamp' or 'reject'",
    )
    posture_score_policy: ScorePolicy = Field(
        default=ScorePolicy.REJECT,
        description="Out-of-range posture score: 'clamp' or 'reject'",
    )


class ServerConfig(BaseModel):
    """Server configuration."""

    host: str = Field(default="0.0.0.0", description="Bind host")
    port: int = Field(default=8002, ge=1, le=65535, description="Bind port")


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field(default="INFO", description="Log level")
    format: str = Field(default="text", description="Log format: json or text")


class Settings(BaseModel):
    """
    Main settings class for WellCam.

    Loads configuration from YAML file and environment variables.
    Environment variables take precedence over file values.
    """

    app: AppConfig = Field(default_factory=AppConfig)
    camera: CameraConfig = Field(default_factory=CameraConfig)
    engine: EngineConfig = Field(default_factory=EngineConfig)
    contracts: ContractsConfig = Field(default_factory=ContractsConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


# =============================================================================
# Configuration Loading
# =============================================================================

def load_config(config_path: Optional[str] = None) -> Settings:
    """
    Load configuration from YAML file and environment variables.

    Priority (highest to lowest):
        1. Environment variables
        2. YAML config file
        3. Default values

    Args:
        config_path: Path to config.yaml. If None, searches common locations.

    Returns:
        Settings: Loaded configuration
    """
    if config_path is None:
        search_paths = [
            Path("config.yaml"),
            Path("config.yml"),
            Path(__file__).parent.parent.parent / "config.yaml",
        ]
        for path in search_paths:
            if path.exists():
                config_path = str(path)
                break

    config_data = {}
    if config_path and Path(config_path).exists():
        logger.info(f"Loading config from: {config_path}")
        with open(config_path, "r") as f:
            config_data = yaml.safe_load(f) or {}
    else:
        logger.debug("No config file found, using defaults and environment variables")

    _apply_env_overrides(config_data)

    return Settings.model_validate(config_data)


def _apply_env_overrides(config_data: dict) -> None:
    """Apply environment variable overrides to config data."""

    # Camera settings
    if env_backend := os.environ.get("WELLCAM_CAMERA_BACKEND"):
        config_data.setdefault("camera", {})["backend"] = env_backend
    if env_index := os.environ.get("WELLCAM_CAMERA_INDEX"):
        config_data.setdefault("camera", {})["device_index"] = int(env_index)

    # Engine settings
    if env_engine := os.environ.get("WELLCAM_ENGINE_BACKEND"):
        config_data.setdefault("engine", {})["backend"] = env_engine
    if env_model := os.environ.get("WELLCAM_ENGINE_MODEL"):
        config_data.setdefault("engine", {})["model"] = env_model
    if env_timeout := os.environ.get("WELLCAM_ENGINE_TIMEOUT"):
        config_data.setdefault("engine", {})["timeout_seconds"] = float(env_timeout)
    if env_key := os.environ.get("GEMINI_API_KEY"):
        config_data.setdefault("engine", {})["api_key"] = env_key

    # Contract policies
    if env_stress := os.environ.get("WELLCAM_STRESS_SCORE_POLICY"):
        config_data.setdefault("contracts", {})["stress_score_policy"] = env_stress.lower()
    if env_posture := os.environ.get("WELLCAM_POSTURE_SCORE_POLICY"):
        config_data.setdefault("contracts", {})["posture_score_policy"] = env_posture.lower()

    # Server settings (Cloud Run uses PORT env var)
    if env_port := os.environ.get("PORT"):
        config_data.setdefault("server", {})["port"] = int(env_port)
    elif env_port := os.environ.get("WELLCAM_PORT"):
        config_data.setdefault("server", {})["port"] = int(env_port)

    # Logging settings
    if env_log := os.environ.get("WELLCAM_LOG_LEVEL"):
        config_data.setdefault("logging", {})["level"] = env_log


def setup_logging(settings: Settings) -> None:
    """Configure logging based on settings."""
    log_level = getattr(logging, settings.logging.level.upper(), logging.INFO)

    if settings.logging.format == "json":
        log_format = '{"time": "%(asctime)s", "level": "%(levelname)s", "module": "%(name)s", "message": "%(message)s"}'
    else:
        log_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    logging.basicConfig(
        level=log_level,
        format=log_format,
        datefmt="%Y-%m-%dT%H:%M:%S",
    )


# =============================================================================
# Global Settings Instance
# =============================================================================

# Global settings instance - loaded on import
settings = load_config()
setup_logging(settings)
