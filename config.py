"""Configuration management for Spendwise.

Reads configuration from ~/.config/spendwise.toml and creates default config if needed.
"""

from pathlib import Path
from dataclasses import dataclass
from typing import Optional
import tomllib
import tomli_w


@dataclass
class Config:
    """Application configuration."""

    base_dir: Path
    db_data_dir: Path
    db_filename: str
    log_level: str
    log_dir: Path
    llm_enabled: bool = False
    llm_provider: Optional[str] = "openai"
    llm_openai_api_key: str = ""
    llm_openai_model: Optional[str] = None
    llm_base_url: Optional[str] = None
    llm_timeout: float = 20.0
    default_user: str = "default"

    @property
    def db_path(self) -> Path:
        """Get the full database path (data_dir/filename)."""
        return self.db_data_dir / self.db_filename

    @classmethod
    def default(cls) -> "Config":
        """Create a Config with default values."""
        home = Path.home()
        base_dir = home / "data" / "spendwise"
        return cls(
            base_dir=base_dir,
            db_data_dir=base_dir / "db",
            db_filename="spendwise.db",
            log_level="INFO",
            log_dir=base_dir / "logs",
        )


def get_config_path() -> Path:
    """Get the path to the config file."""
    return Path.home() / ".config" / "spendwise.toml"


def get_migrations_dir() -> Path:
    """Get the path to the migrations directory.

    This is always relative to the code location, not configurable.
    """
    return Path(__file__).parent / "db" / "migrations"


def get_seed_dir() -> Path:
    """Get the path to the seed data directory."""
    return Path(__file__).parent / "db" / "seed"


def load_config() -> Config:
    """Load configuration from file, creating default if it doesn't exist.

    Returns:
        Config object with loaded or default values.
    """
    config_path = get_config_path()

    # If config doesn't exist, create it with defaults
    if not config_path.exists():
        config = Config.default()
        _write_config(config)
        return config

    with open(config_path, "rb") as f:
        data = tomllib.load(f)

    return _parse_config(data)


def _parse_config(data: dict) -> Config:
    """Build a Config from parsed TOML, filling in defaults for missing values."""
    defaults = Config.default()
    base_dir = Path(data.get("base_dir", defaults.base_dir))

    db_config = data.get("database", {})
    db_data_dir = Path(db_config.get("data_dir", base_dir / "db"))
    db_filename = db_config.get("filename", defaults.db_filename)

    log_config = data.get("logging", {})
    log_level = log_config.get("level", defaults.log_level)
    log_dir = Path(log_config.get("log_dir", base_dir / "logs"))

    llm_config = data.get("llm", {})
    categorization_config = data.get("categorization", {})

    return Config(
        base_dir=base_dir,
        db_data_dir=db_data_dir,
        db_filename=db_filename,
        log_level=log_level,
        log_dir=log_dir,
        llm_enabled=llm_config.get("enabled", defaults.llm_enabled),
        llm_provider=llm_config.get("provider", defaults.llm_provider) or None,
        llm_openai_api_key=llm_config.get("api_key", defaults.llm_openai_api_key),
        # Empty strings in TOML mean "use the prompt default"
        llm_openai_model=llm_config.get("model") or None,
        llm_base_url=llm_config.get("base_url") or None,
        llm_timeout=float(llm_config.get("timeout", defaults.llm_timeout)),
        default_user=categorization_config.get("default_user", defaults.default_user),
    )


def _write_config(config: Config) -> None:
    """Write config to the config file.

    Args:
        config: Config object to write.
    """
    config_path = get_config_path()

    # Ensure config directory exists
    config_path.parent.mkdir(parents=True, exist_ok=True)

    # TOML has no null, so optional values are written as empty strings
    data = {
        "base_dir": str(config.base_dir),
        "database": {
            "data_dir": str(config.db_data_dir),
            "filename": config.db_filename,
        },
        "logging": {
            "level": config.log_level,
            "log_dir": str(config.log_dir),
        },
        "llm": {
            "enabled": config.llm_enabled,
            "provider": config.llm_provider or "",
            "api_key": config.llm_openai_api_key,
            "model": config.llm_openai_model or "",
            "base_url": config.llm_base_url or "",
            "timeout": config.llm_timeout,
        },
        "categorization": {
            "default_user": config.default_user,
        },
    }

    with open(config_path, "wb") as f:
        tomli_w.dump(data, f)
