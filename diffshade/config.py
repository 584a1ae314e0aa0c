# diffshade/config.py
"""Configuration for diffshade.

Settings come from four layers, each overriding the one before:

1. built-in defaults (the DiffConfig field defaults),
2. a config file (YAML or JSON): the path given explicitly, else
   $DIFFSHADE_CONFIG, else the first of ~/.config/diffshade/config.yaml,
   config.yml and config.json that exists,
3. DIFFSHADE_* environment variables,
4. command line flags.

Keys may be written with dashes or underscores ("side-by-side" and
"side_by_side" are the same key). Unknown keys are logged and ignored;
values of the wrong type raise ConfigError.
"""

import json
import logging
import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from .errors import ConfigError
from .line_numbers import DEFAULT_LEFT_FORMAT, DEFAULT_RIGHT_FORMAT
from .syntax_highlight import DEFAULT_LIGHT_THEME, DEFAULT_THEME, is_known_theme
from .word_diff import DEFAULT_MIN_SIMILARITY

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "DIFFSHADE_CONFIG"
DEFAULT_CONFIG_DIR = Path("~/.config/diffshade")
DEFAULT_CONFIG_NAMES = ("config.yaml", "config.yml", "config.json")

COLOR_CHOICES = ("auto", "always", "never")

# Environment variable -> config key
ENV_VARS = {
    "DIFFSHADE_THEME": "theme",
    "DIFFSHADE_LIGHT": "light",
    "DIFFSHADE_SIDE_BY_SIDE": "side_by_side",
    "DIFFSHADE_WIDTH": "width",
    "DIFFSHADE_TAB_WIDTH": "tab_width",
    "DIFFSHADE_LINE_NUMBERS": "line_numbers",
    "DIFFSHADE_MIN_SIMILARITY": "min_similarity",
    "DIFFSHADE_AMBIGUOUS_WIDTH": "ambiguous_width",
    "DIFFSHADE_COLOR": "color",
}

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off", ""}


@dataclass
class DiffConfig:
    """Display options for a diffshade run.

    Attributes:
        theme: Syntax theme name; None picks a default for light/dark mode.
        light: Use colours meant for a light terminal background.
        side_by_side: Show old and new versions in two panels.
        width: Output width in columns; None means 80 (the CLI detects it).
        tab_width: Tab stop distance used when expanding tabs.
        line_numbers: Show the line-number gutter.
        line_numbers_left_format: Format of the left gutter field.
        line_numbers_right_format: Format of the right gutter field.
        min_similarity: Pairs less similar than this are shown as whole
            line deletion/addition rather than word edits.
        keep_markers: Keep the +/- / space marker column in the output.
        wrap: Wrap long lines; False truncates them with an ellipsis.
        color: "auto", "always" or "never".
        syntax: Apply syntax highlighting.
        ambiguous_width: Width of East Asian Ambiguous characters (1 or 2).
        styles: Style overrides by ColorScheme field name, e.g.
            {"minus_emph": "bold on #901011"}.
    """
    theme: Optional[str] = None
    light: bool = False
    side_by_side: bool = False
    width: Optional[int] = None
    tab_width: int = 4
    line_numbers: bool = False
    line_numbers_left_format: str = DEFAULT_LEFT_FORMAT
    line_numbers_right_format: str = DEFAULT_RIGHT_FORMAT
    min_similarity: float = DEFAULT_MIN_SIMILARITY
    keep_markers: bool = False
    wrap: bool = True
    color: str = "auto"
    syntax: bool = True
    ambiguous_width: int = 1
    styles: Dict[str, str] = field(default_factory=dict)

    @property
    def effective_theme(self) -> str:
        """The syntax theme to use, resolving the light/dark default."""
        if self.theme:
            return self.theme
        return DEFAULT_LIGHT_THEME if self.light else DEFAULT_THEME

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], source: str = "config") -> "DiffConfig":
        """Build a config from a mapping, converting and checking values.

        Args:
            data: Settings by key. Dashes in keys are read as underscores.
            source: Where the settings came from, for messages.

        Raises:
            ConfigError: If a value cannot be converted or is out of range.
        """
        names = {f.name for f in fields(cls)}
        values: Dict[str, Any] = {}
        for raw_key, value in data.items():
            key = str(raw_key).replace("-", "_")
            if key not in names:
                logger.warning("%s: ignoring unknown setting %r", source, raw_key)
                continue
            values[key] = _convert(key, value, source)

        config = cls(**values)
        config.validate()
        return config

    def validate(self) -> None:
        """Check value ranges.

        Raises:
            ConfigError: On the first invalid value.
        """
        if self.width is not None and self.width < 1:
            raise ConfigError(f"width must be positive, got {self.width}")
        if self.tab_width < 1:
            raise ConfigError(f"tab_width must be at least 1, got {self.tab_width}")
        if not 0.0 <= self.min_similarity <= 1.0:
            raise ConfigError(
                f"min_similarity must be between 0 and 1, got {self.min_similarity}")
        if self.color not in COLOR_CHOICES:
            raise ConfigError(
                f"color must be one of {', '.join(COLOR_CHOICES)}, got {self.color!r}")
        if self.ambiguous_width not in (1, 2):
            raise ConfigError(f"ambiguous_width must be 1 or 2, got {self.ambiguous_width}")
        if self.theme and not is_known_theme(self.theme):
            logger.warning("unknown syntax theme %r; using the default style", self.theme)


_BOOL_KEYS = {"light", "side_by_side", "line_numbers", "keep_markers", "wrap", "syntax"}
_INT_KEYS = {"width", "tab_width", "ambiguous_width"}
_FLOAT_KEYS = {"min_similarity"}
_STR_KEYS = {"theme", "line_numbers_left_format", "line_numbers_right_format", "color"}


def _convert(key: str, value: Any, source: str) -> Any:
    """Convert a raw setting (from YAML, JSON or the environment) to its type."""
    try:
        if key in _BOOL_KEYS:
            return _parse_bool(value)
        if key in _INT_KEYS:
            if value is None and key == "width":
                return None
            if isinstance(value, bool):
                raise ValueError(value)
            return int(value)
        if key in _FLOAT_KEYS:
            if isinstance(value, bool):
                raise ValueError(value)
            return float(value)
        if key in _STR_KEYS:
            if value is None and key == "theme":
                return None
            if not isinstance(value, str):
                raise ValueError(value)
            return value
        if key == "styles":
            if not isinstance(value, Mapping):
                raise ValueError(value)
            return {str(k).replace("-", "_"): str(v) for k, v in value.items()}
    except (TypeError, ValueError):
        raise ConfigError(f"{source}: invalid value for {key}: {value!r}") from None
    return value


def _parse_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return bool(value)
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in _TRUE:
            return True
        if lowered in _FALSE:
            return False
    raise ValueError(value)


def _read_config_file(path: Path) -> Dict[str, Any]:
    """Parse a YAML or JSON config file into a dict.

    Raises:
        ConfigError: If the file cannot be read or parsed, or is not a mapping.
    """
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"cannot read config file {path}: {e}") from e

    try:
        if path.suffix == ".json":
            data = json.loads(content)
        else:
            data = yaml.safe_load(content)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise ConfigError(f"invalid config file {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"config file must contain a mapping: {path}")
    logger.debug("loaded config file %s", path)
    return data


def find_config_file(env: Mapping[str, str]) -> Optional[Path]:
    """Locate the config file from $DIFFSHADE_CONFIG or the default directory."""
    env_path = env.get(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path).expanduser()

    config_dir = DEFAULT_CONFIG_DIR.expanduser()
    for name in DEFAULT_CONFIG_NAMES:
        candidate = config_dir / name
        if candidate.is_file():
            return candidate
    return None


def settings_from_env(env: Mapping[str, str]) -> Dict[str, str]:
    """Collect settings from DIFFSHADE_* environment variables."""
    return {key: env[var] for var, key in ENV_VARS.items() if var in env}


def load_config(
    config_path: Optional[str] = None,
    overrides: Optional[Mapping[str, Any]] = None,
    env: Optional[Mapping[str, str]] = None,
) -> DiffConfig:
    """Load configuration from file, environment and explicit overrides.

    Args:
        config_path: Config file to read. When None the file is looked up
            from the environment and the default location; a missing
            default file is not an error.
        overrides: Highest-priority settings (e.g., from command line
            flags). None values are skipped.
        env: Environment to read; defaults to os.environ.

    Returns:
        The merged, validated configuration.

    Raises:
        ConfigError: If the file is unreadable or a value is invalid.
    """
    if env is None:
        env = os.environ

    settings: Dict[str, Any] = {}

    if config_path is not None:
        path: Optional[Path] = Path(config_path).expanduser()
        if not path.is_file():
            raise ConfigError(f"config file not found: {config_path}")
    else:
        path = find_config_file(env)
    if path is not None:
        file_settings = _read_config_file(path)
        # Normalize here so later layers override regardless of spelling
        settings.update({str(k).replace("-", "_"): v for k, v in file_settings.items()})

    settings.update(settings_from_env(env))

    if overrides:
        settings.update({k: v for k, v in overrides.items() if v is not None})

    return DiffConfig.from_dict(settings, source=str(path) if path else "settings")
