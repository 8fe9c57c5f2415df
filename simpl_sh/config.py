#!/usr/bin/env python3
import configparser
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from .errors import InvalidFormat

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_DIR = Path.home() / ".config" / "simpl_sh"
DEFAULT_HISTORY_FILE = Path.home() / ".simpl_sh_history"
DEFAULT_PROMPT_FORMAT = "%u@%h:%w%g$ "

DEFAULT_ALIASES = {
    "ll": "ls -la",
    "la": "ls -A",
    "l": "ls -CF",
}

TRUE_VALUES = {"1", "true", "yes", "on"}

# Settings reachable through `set KEY=value` and `SIMPL_SH_KEY=value` rc lines.
SETTINGS = {
    "DEBUG": ("debug", bool),
    "SHOW_WELCOME": ("show_welcome", bool),
    "PROMPT_FORMAT": ("prompt_format", str),
    "SHOW_GIT_INFO": ("show_git_info", bool),
    "SHOW_TIMESTAMP": ("show_timestamp", bool),
    "PROMPT_COLOR": ("prompt_color", str),
    "PROMPT_LEXER": ("prompt_lexer", str),
    "HISTORY_SIZE": ("history_size", int),
    "HISTORY_FILE": ("history_file", str),
    "SAVE_HISTORY": ("save_history", bool),
    "HISTORY_DUPLICATES": ("history_duplicates", bool),
    "COMPLETION_ENABLED": ("completion_enabled", bool),
    "COMPLETION_CASE_INSENSITIVE": ("completion_case_insensitive", bool),
    "COMPLETION_SHOW_HIDDEN": ("completion_show_hidden", bool),
    "GIT_ENABLED": ("git_enabled", bool),
    "GIT_SHOW_STATUS": ("git_show_status", bool),
    "GIT_SHOW_BRANCH": ("git_show_branch", bool),
    "GIT_SHOW_AHEAD": ("git_show_ahead", bool),
}

# config.ini layout: section -> option names (option name == attribute name)
INI_SECTIONS = {
    "general": ["debug", "show_welcome"],
    "prompt": [
        "prompt_format",
        "show_git_info",
        "show_timestamp",
        "prompt_color",
        "prompt_lexer",
    ],
    "history": ["history_size", "history_file", "save_history", "history_duplicates"],
    "completion": [
        "completion_enabled",
        "completion_case_insensitive",
        "completion_show_hidden",
    ],
    "git": ["git_enabled", "git_show_status", "git_show_branch", "git_show_ahead"],
}


def parse_bool(value: str) -> bool:
    return value.strip().lower() in TRUE_VALUES


def strip_quotes(value: str) -> str:
    value = value.strip()
    if len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'":
        return value[1:-1]
    return value


def split_assignment(text: str, usage: str) -> Tuple[str, str]:
    """Split ``name=value`` on the first ``=``, trimming one layer of quotes."""
    if "=" not in text:
        raise InvalidFormat(usage)
    name, value = text.split("=", 1)
    name = name.strip()
    if not name:
        raise InvalidFormat(usage)
    return name, strip_quotes(value)


def split_path(value: Optional[str]) -> List[str]:
    if not value:
        return []
    return value.split(os.pathsep)


def _ini_value(value) -> str:
    text = str(value)
    # configparser strips surrounding whitespace, so keep it inside quotes.
    if text != text.strip():
        return f'"{text}"'
    return text


@dataclass
class ShellConfig:
    config_dir: Path = DEFAULT_CONFIG_DIR
    debug: bool = False
    show_welcome: bool = True

    prompt_format: str = DEFAULT_PROMPT_FORMAT
    show_git_info: bool = True
    show_timestamp: bool = False
    prompt_color: str = "auto"
    # "auto" disables highlighting, otherwise a pygments lexer name.
    prompt_lexer: str = "auto"

    history_size: int = 10000
    history_file: str = str(DEFAULT_HISTORY_FILE)
    save_history: bool = True
    history_duplicates: bool = False

    completion_enabled: bool = True
    completion_case_insensitive: bool = True
    completion_show_hidden: bool = False

    git_enabled: bool = True
    git_show_status: bool = True
    git_show_branch: bool = True
    git_show_ahead: bool = True

    environment: Dict[str, str] = field(default_factory=dict)
    aliases: Dict[str, str] = field(default_factory=lambda: dict(DEFAULT_ALIASES))
    path_dirs: List[str] = field(
        default_factory=lambda: split_path(os.environ.get("PATH"))
    )

    # Runtime state owned by the shell loop.
    previous_directory: Optional[str] = None

    @property
    def config_file(self) -> Path:
        return self.config_dir / "config.ini"

    @property
    def rc_files(self) -> List[Path]:
        return [self.config_dir / "shellrc", Path.home() / ".simpl_shrc"]

    @property
    def log_file(self) -> Path:
        return self.config_dir / "shell.log"

    @classmethod
    def load(cls, config_dir: Optional[os.PathLike] = None) -> "ShellConfig":
        config = cls()
        if config_dir is not None:
            config.config_dir = Path(config_dir).expanduser()

        config.ensure_directories()
        config.load_ini(config.config_file)
        for rc_file in config.rc_files:
            if rc_file.is_file():
                config.load_rc_file(rc_file)
        config.apply_environment_overrides()
        return config

    def ensure_directories(self) -> None:
        self.config_dir.mkdir(parents=True, exist_ok=True)
        if not self.config_file.exists():
            self.write_default_config()

    def set_value(self, key: str, value: str) -> None:
        setting = SETTINGS.get(key.strip().upper())
        if setting is None:
            raise InvalidFormat(f"unknown configuration key: {key}")

        attribute, kind = setting
        if kind is bool:
            setattr(self, attribute, parse_bool(value))
        elif kind is int:
            try:
                setattr(self, attribute, int(value))
            except ValueError as error:
                raise InvalidFormat(f"invalid number for {key}: {value}") from error
        else:
            setattr(self, attribute, value)

    def refresh_path_dirs(self, path_value: Optional[str] = None) -> None:
        if path_value is None:
            path_value = os.environ.get("PATH")
        self.path_dirs = split_path(path_value)

    # ------------------------------------------------------------------
    # config.ini support
    # ------------------------------------------------------------------

    def write_default_config(self) -> None:
        parser = self._new_parser()
        for section, options in INI_SECTIONS.items():
            parser[section] = {option: _ini_value(getattr(self, option)) for option in options}
        parser["aliases"] = dict(self.aliases)
        parser["environment"] = dict(self.environment)

        with self.config_file.open("w", encoding="utf-8") as config_handle:
            parser.write(config_handle)

    def load_ini(self, path: Path) -> None:
        if not path.exists():
            return

        parser = self._new_parser()
        try:
            parser.read(path, encoding="utf-8")
            self._apply_ini(parser)
        except (configparser.Error, ValueError) as error:
            # ValueError covers bad booleans/numbers and UnicodeDecodeError.
            raise InvalidFormat(f"{path}: {error}") from error
        logger.debug("Loaded configuration from %s", path)

    def _apply_ini(self, parser: configparser.ConfigParser) -> None:
        for section, options in INI_SECTIONS.items():
            for option in options:
                if not parser.has_option(section, option):
                    continue
                current = getattr(self, option)
                if isinstance(current, bool):
                    value = parser.getboolean(section, option, fallback=current)
                elif isinstance(current, int):
                    value = parser.getint(section, option, fallback=current)
                else:
                    value = strip_quotes(parser.get(section, option, fallback=current))
                setattr(self, option, value)

        if parser.has_section("aliases"):
            for name, value in parser.items("aliases"):
                self.aliases[name] = strip_quotes(value)

        if parser.has_section("environment"):
            for name, value in parser.items("environment"):
                self.environment[name] = strip_quotes(value)

    @staticmethod
    def _new_parser() -> configparser.ConfigParser:
        # Prompt formats use '%' escapes, so interpolation must stay off.
        parser = configparser.ConfigParser(interpolation=None)
        parser.optionxform = str
        return parser

    # ------------------------------------------------------------------
    # rc file support (shellrc / ~/.simpl_shrc)
    # ------------------------------------------------------------------

    def load_rc_file(self, path: Path) -> None:
        try:
            with path.open("r", encoding="utf-8") as rc_handle:
                for line_number, line in enumerate(rc_handle, start=1):
                    try:
                        self.parse_rc_line(line)
                    except InvalidFormat as error:
                        raise InvalidFormat(f"{path}:{line_number}: {error}") from error
        except UnicodeDecodeError as error:
            raise InvalidFormat(f"{path}: not valid UTF-8 ({error.reason})") from error
        logger.debug("Loaded rc file %s", path)

    def parse_rc_line(self, line: str) -> None:
        line = line.strip()
        if not line or line.startswith("#"):
            return

        if line.startswith("export "):
            name, value = split_assignment(line[7:], f"invalid export statement: {line}")
            self.environment[name] = value
            return

        if line.startswith("alias "):
            name, value = split_assignment(line[6:], f"invalid alias statement: {line}")
            self.aliases[name] = value
            return

        if line.startswith("set "):
            name, value = split_assignment(line[4:], f"invalid set statement: {line}")
            self.set_value(name, value)
            return

        if "=" in line:
            name, value = split_assignment(line, f"invalid assignment: {line}")
            if name.startswith("SIMPL_SH_"):
                self.set_value(name[len("SIMPL_SH_"):], value)
            else:
                self.environment[name] = value

    # ------------------------------------------------------------------
    # Environment overrides
    # ------------------------------------------------------------------

    def apply_environment_overrides(self) -> None:
        debug = os.getenv("SIMPL_SH_DEBUG")
        if debug is not None:
            self.debug = parse_bool(debug)

        completion = os.getenv("SIMPL_SH_COMPLETION")
        if completion is not None:
            self.completion_enabled = parse_bool(completion)

        lexer = os.getenv("SIMPL_SH_PROMPT_LEXER")
        if lexer:
            self.prompt_lexer = lexer.strip()
