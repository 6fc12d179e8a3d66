# naive_linkguard/config.py
"""
Centralized configuration management.

Handles loading defaults, merging in settings from pyproject.toml,
and freezing the result into an EngineConfig for the scorer/classifier.
"""
from __future__ import annotations

import copy
import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Literal, Mapping, MutableMapping, Sequence

try:
    import tomli
except ImportError:
    tomli = None  # type: ignore

from naive_linkguard import signatures

log = logging.getLogger(__name__)

DomainMode = Literal["compound", "psl"]
DOMAIN_MODES = ("compound", "psl")

# This is the baseline configuration dictionary.
DEFAULT_CONFIG: dict[str, Any] = {
    "suspicion_threshold": signatures.DEFAULT_SUSPICION_THRESHOLD,
    # "compound" = fixed compound-TLD list, "psl" = tldextract's bundled
    # Public Suffix List snapshot (never fetched).
    "domain_mode": "compound",
    # --- Signature tables (replace) ---
    "redirect_subdomains": list(signatures.REDIRECT_SUBDOMAINS),
    "redirect_services": list(signatures.REDIRECT_SERVICES),
    "redirect_path_patterns": list(signatures.REDIRECT_PATH_PATTERNS),
    "legitimate_path_patterns": list(signatures.LEGITIMATE_PATH_PATTERNS),
    "compound_tlds": list(signatures.COMPOUND_TLDS),
    # --- Signature tables (extend) ---
    "extra_redirect_subdomains": [],
    "extra_redirect_services": [],
    "extra_redirect_path_patterns": [],
    "extra_legitimate_path_patterns": [],
    "extra_compound_tlds": [],
    "weights": dict(signatures.DEFAULT_WEIGHTS),
    # --- Scanner settings ---
    "max_input_length": 8192,  # 0 disables truncation
    "annotate": False,
}


class ConfigError(ValueError):
    """A configuration value is missing, of the wrong type or out of range."""


def _deep_merge_dict(
    base: MutableMapping[str, Any], overrides: Mapping[str, Any]
) -> MutableMapping[str, Any]:
    """Recursively merge dicts."""
    for key, value in overrides.items():
        if isinstance(value, Mapping) and isinstance(base.get(key), MutableMapping):
            base[key] = _deep_merge_dict(base[key], value)
        else:
            base[key] = value
    return base


def load_config(pyproject_path: Path | None = None) -> dict[str, Any]:
    """
    Loads configuration from defaults and merges settings from pyproject.toml.

    1. Starts with DEFAULT_CONFIG.
    2. If `tomli` is installed, it looks for `pyproject.toml`.
    3. If `pyproject.toml` is found, it merges settings from
       `[tool.naive_linkguard]` over the defaults.
    """
    config = copy.deepcopy(DEFAULT_CONFIG)

    if tomli is None:
        log.debug("tomli not installed. Skipping pyproject.toml configuration.")
        return config

    if pyproject_path is None:
        pyproject_path = Path.cwd() / "pyproject.toml"

    if not pyproject_path.exists():
        log.debug(
            "No pyproject.toml found at %s. Using default config.", pyproject_path
        )
        return config

    try:
        with pyproject_path.open("rb") as f:
            toml_data = tomli.load(f)

        project_config = toml_data.get("tool", {}).get("naive_linkguard", {})
        if project_config:
            log.info("Loading config from %s", pyproject_path)
            config = _deep_merge_dict(config, project_config)  # type: ignore
        else:
            log.debug("No [tool.naive_linkguard] section in %s.", pyproject_path)

    except (OSError, tomli.TOMLDecodeError) as e:
        log.warning(
            "Failed to load or parse %s: %s. Using default config.",
            pyproject_path,
            e,
            exc_info=True,
        )

    return config


# ---------- Frozen engine configuration ----------


def _str_tuple(config: Mapping[str, Any], key: str) -> tuple[str, ...]:
    """
    Table `key` (built-in default when absent) followed by `extra_<key>`,
    stripped and de-duplicated.
    """
    base = config.get(key, DEFAULT_CONFIG[key])
    extra = config.get(f"extra_{key}", [])
    for name, value in ((key, base), (f"extra_{key}", extra)):
        if isinstance(value, str) or not isinstance(value, Sequence):
            raise ConfigError(f"{name} must be a list of strings, got {value!r}")
        if not all(isinstance(v, str) for v in value):
            raise ConfigError(f"{name} must only contain strings")
    # dict.fromkeys keeps order while dropping duplicates
    return tuple(dict.fromkeys(v.strip() for v in [*base, *extra] if v.strip()))


def _compile(patterns: Sequence[str], key: str) -> tuple[re.Pattern[str], ...]:
    compiled = []
    for pat in patterns:
        try:
            compiled.append(re.compile(pat, re.IGNORECASE))
        except re.error as e:
            raise ConfigError(f"Invalid regular expression in {key}: {pat!r} ({e})") from e
    return tuple(compiled)


def _int(config: Mapping[str, Any], key: str, default: int) -> int:
    value = config.get(key, default)
    # bool is an int subclass; reject it explicitly
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigError(f"{key} must be an integer, got {value!r}")
    return value


@dataclass(frozen=True)
class EngineConfig:
    """
    Immutable settings injected into HeuristicScorer and LinkClassifier.

    `EngineConfig()` is the built-in default and touches no files. Use
    `EngineConfig.from_mapping(load_config())` to honour pyproject.toml.
    """

    suspicion_threshold: int = signatures.DEFAULT_SUSPICION_THRESHOLD
    domain_mode: DomainMode = "compound"
    redirect_subdomains: tuple[str, ...] = signatures.REDIRECT_SUBDOMAINS
    redirect_services: tuple[str, ...] = signatures.REDIRECT_SERVICES
    redirect_path_patterns: tuple[re.Pattern[str], ...] = field(
        default_factory=lambda: _compile(
            signatures.REDIRECT_PATH_PATTERNS, "redirect_path_patterns"
        )
    )
    legitimate_path_patterns: tuple[re.Pattern[str], ...] = field(
        default_factory=lambda: _compile(
            signatures.LEGITIMATE_PATH_PATTERNS, "legitimate_path_patterns"
        )
    )
    compound_tlds: tuple[str, ...] = signatures.COMPOUND_TLDS
    weights: Mapping[str, int] = field(
        default_factory=lambda: MappingProxyType(dict(signatures.DEFAULT_WEIGHTS))
    )
    max_input_length: int = 8192
    annotate: bool = False

    def __post_init__(self) -> None:
        if not isinstance(self.weights, MappingProxyType):
            object.__setattr__(self, "weights", MappingProxyType(dict(self.weights)))

    def weight(self, signal: str) -> int:
        return self.weights.get(signal, signatures.DEFAULT_WEIGHTS[signal])

    @classmethod
    def from_mapping(cls, config: Mapping[str, Any]) -> "EngineConfig":
        """Validate a config dict (as returned by load_config) and freeze it."""
        domain_mode = config.get("domain_mode", "compound")
        if domain_mode not in DOMAIN_MODES:
            raise ConfigError(
                f"domain_mode must be one of {DOMAIN_MODES}, got {domain_mode!r}"
            )

        weights = dict(signatures.DEFAULT_WEIGHTS)
        raw_weights = config.get("weights", {})
        if not isinstance(raw_weights, Mapping):
            raise ConfigError(f"weights must be a table, got {raw_weights!r}")
        for name, value in raw_weights.items():
            if name not in weights:
                raise ConfigError(
                    f"Unknown weight {name!r}; expected one of {sorted(weights)}"
                )
            weights[name] = _int(raw_weights, name, weights[name])

        max_input_length = _int(config, "max_input_length", 8192)
        if max_input_length < 0:
            raise ConfigError("max_input_length must be >= 0")

        return cls(
            suspicion_threshold=_int(
                config, "suspicion_threshold", signatures.DEFAULT_SUSPICION_THRESHOLD
            ),
            domain_mode=domain_mode,
            redirect_subdomains=tuple(
                s.lower() for s in _str_tuple(config, "redirect_subdomains")
            ),
            redirect_services=tuple(
                s.lower() for s in _str_tuple(config, "redirect_services")
            ),
            redirect_path_patterns=_compile(
                _str_tuple(config, "redirect_path_patterns"), "redirect_path_patterns"
            ),
            legitimate_path_patterns=_compile(
                _str_tuple(config, "legitimate_path_patterns"),
                "legitimate_path_patterns",
            ),
            compound_tlds=tuple(s.lower() for s in _str_tuple(config, "compound_tlds")),
            weights=MappingProxyType(weights),
            max_input_length=max_input_length,
            annotate=bool(config.get("annotate", False)),
        )
