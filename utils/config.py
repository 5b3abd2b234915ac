"""Configuration management for TypeTester."""

import json
import logging
import sqlite3
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

log = logging.getLogger("typetester.config")

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class AppSettings(BaseModel):
    """Application settings with validation."""

    # Phrase settings
    word_count: int = Field(default=10, gt=0, description="Words per reference phrase")
    word_bank_path: str = Field(
        default="wordbank.txt", description="Path to the word list (one word per line)"
    )

    # Display settings
    refresh_interval_ms: int = Field(
        default=100,
        ge=10,
        le=1000,
        description="How often the elapsed time is redrawn (ms)",
    )

    # Key bindings (prompt_toolkit key names)
    toggle_key: str = Field(default="c-s", description="Start/stop the clock")
    reset_key: str = Field(default="enter", description="Begin a new phrase")
    quit_key: str = Field(default="c-c", description="Leave the program")

    log_level: str = Field(default="INFO", description="Log file verbosity")

    model_config = ConfigDict(extra="ignore", validate_default=True)

    @field_validator("toggle_key", "reset_key", "quit_key")
    @classmethod
    def validate_key(cls, v):
        """Key names must be non-empty."""
        if not v.strip():
            raise ValueError("key binding must not be empty")
        return v.strip()

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v):
        """Log level must be a standard logging level name."""
        level = v.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}, got {v}")
        return level

    @field_validator("quit_key")
    @classmethod
    def validate_distinct_keys(cls, v, info):
        """The three control keys must not collide."""
        toggle_key = info.data.get("toggle_key")
        reset_key = info.data.get("reset_key")
        if toggle_key is not None and toggle_key == reset_key:
            raise ValueError("toggle_key and reset_key must differ")
        if v in (toggle_key, reset_key):
            raise ValueError(f"quit_key ({v}) is already bound to another action")
        return v


class Config:
    """Configuration manager using SQLite for persistence with Pydantic validation."""

    def __init__(self, db_path: Path):
        """Initialize config with database connection.

        Args:
            db_path: Path to SQLite database
        """
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_settings_table()
        self._ensure_defaults()

    def _get_connection(self) -> sqlite3.Connection:
        """Create database connection."""
        return sqlite3.connect(self.db_path)

    def _init_settings_table(self) -> None:
        """Create settings table if not exists."""
        with self._get_connection() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS settings (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL
                )
            """)
            conn.commit()

    def _ensure_defaults(self) -> None:
        """Ensure all default settings exist in database."""
        defaults = AppSettings().model_dump()

        with self._get_connection() as conn:
            cursor = conn.cursor()
            for key, value in defaults.items():
                cursor.execute(
                    """
                    INSERT OR IGNORE INTO settings (key, value)
                    VALUES (?, ?)
                """,
                    (key, self._serialize_value(value)),
                )
            conn.commit()

    def _serialize_value(self, value: Any) -> str:
        """Convert value to string for storage."""
        if isinstance(value, bool):
            return "True" if value else "False"
        if isinstance(value, (list, dict)):
            return json.dumps(value)
        return str(value)

    def _simple_parse(self, value: str) -> Any:
        """Parse a stored string back into int, bool, JSON or str."""
        if value.startswith("[") or value.startswith("{"):
            try:
                return json.loads(value)
            except json.JSONDecodeError:
                pass

        try:
            return int(value)
        except ValueError:
            pass

        if value in ("True", "False"):
            return value == "True"

        return value

    def _parse_stored(self, key: str, value: str) -> Any:
        """Parse a stored string; string-typed settings are returned verbatim."""
        field = AppSettings.model_fields.get(key)
        if field is not None and field.annotation is str:
            return value
        return self._simple_parse(value)

    def get(self, key: str, default: Optional[Any] = None) -> Any:
        """Get configuration value.

        Args:
            key: Setting key
            default: Default value if not found

        Returns:
            Setting value
        """
        with self._get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT value FROM settings WHERE key = ?", (key,))
            result = cursor.fetchone()
        if result:
            return self._parse_stored(key, result[0])
        if default is not None:
            return default
        if key in AppSettings.model_fields:
            return getattr(AppSettings(), key)
        return None

    def get_int(self, key: str, default: Optional[int] = None) -> int:
        """Get integer configuration value."""
        value = self.get(key, default)
        if isinstance(value, int) and not isinstance(value, bool):
            return value
        try:
            return int(value)
        except (ValueError, TypeError):
            if key in AppSettings.model_fields:
                return getattr(AppSettings(), key)
            return default if default is not None else 0

    def set(self, key: str, value: Any) -> None:
        """Set configuration value with pydantic validation.

        Args:
            key: Setting key
            value: Setting value

        Raises:
            ValueError: If value fails validation
        """
        if key in AppSettings.model_fields:
            try:
                merged = {**self.get_all(), key: value}
                validated = AppSettings(**merged)
                value = getattr(validated, key)
            except ValidationError as e:
                raise ValueError(f"Invalid value for {key}: {e}")

        with self._get_connection() as conn:
            conn.execute(
                """
                INSERT OR REPLACE INTO settings (key, value)
                VALUES (?, ?)
            """,
                (key, self._serialize_value(value)),
            )
            conn.commit()
        log.info(f"Setting {key} updated")

    def get_all(self) -> dict[str, Any]:
        """Get all settings as dictionary."""
        with self._get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT key, value FROM settings")
            return {row[0]: self._parse_stored(row[0], row[1]) for row in cursor.fetchall()}

    def settings(self, **overrides: Any) -> AppSettings:
        """Build validated settings from stored values.

        Args:
            **overrides: Values that replace stored ones for this run only
                         (None values are ignored)

        Returns:
            AppSettings instance

        Raises:
            ValueError: If stored values or overrides fail validation
        """
        values = self.get_all()
        values.update({k: v for k, v in overrides.items() if v is not None})
        try:
            return AppSettings(**values)
        except ValidationError as e:
            raise ValueError(f"Invalid settings: {e}")
