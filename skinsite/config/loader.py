"""Load ``skinsite.yaml`` into a :class:`BuildConfig` and build validators."""

from __future__ import annotations

import typing as typ
from pathlib import Path

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from skinsite.errors import ConfigError
from skinsite.validators import (
    AcceptAllValidator,
    ReachableLinkValidator,
    SitemapLinkValidator,
    UrlSyntaxValidator,
)

from .models import (
    DEFAULT_OUTPUT_DIR,
    DEFAULT_SITEMAP,
    DEFAULT_VALIDATORS,
    BuildConfig,
    ExternalCheckConfig,
)

if typ.TYPE_CHECKING:
    from skinsite.model import Sitemap
    from skinsite.validators import LinkValidator

VALIDATOR_NAMES = ("sitemap", "url-syntax", "reachable", "accept-all")


def load_build_config(path: Path) -> BuildConfig:
    """Load the YAML build configuration at ``path``.

    Parameters
    ----------
    path : Path
        Filesystem path to ``skinsite.yaml``. Relative paths inside the file
        resolve against its directory.

    Returns
    -------
    BuildConfig
        Parsed configuration with defaults applied.

    Raises
    ------
    FileNotFoundError
        If the configuration file does not exist at ``path``.
    ConfigError
        If the YAML cannot be parsed, is not a mapping, or names an unknown
        validator or an invalid value.

    Examples
    --------
    >>> from pathlib import Path
    >>> from skinsite.config import load_build_config
    >>> config = load_build_config(Path("skinsite.yaml"))  # doctest: +SKIP
    >>> config.validators  # doctest: +SKIP
    ['sitemap']
    """
    if not path.exists():
        msg = f"Configuration file '{path}' not found."
        raise FileNotFoundError(msg)

    loader = YAML(typ="safe")
    loader.version = (1, 2)
    try:
        with path.open("r", encoding="utf-8") as handle:
            loaded = loader.load(handle) or {}
    except YAMLError as exc:
        msg = f"Cannot parse '{path}': {exc}"
        raise ConfigError(msg) from exc
    if not isinstance(loaded, dict):
        msg = "Top-level YAML structure must be a mapping."
        raise ConfigError(msg)
    raw: dict[str, typ.Any] = dict(loaded)
    base_dir = path.parent

    resources_raw = raw.get("resources") or []
    if not isinstance(resources_raw, list):
        msg = "'resources' must be a list of directories."
        raise ConfigError(msg)

    validators_raw = raw.get("validators", list(DEFAULT_VALIDATORS))
    validators = check_validator_names(validators_raw or [])

    config = BuildConfig(
        sitemap=_resolve(base_dir, raw.get("sitemap"), DEFAULT_SITEMAP),
        resources=[_resolve(base_dir, item, None) for item in resources_raw],
        output_dir=_resolve(base_dir, raw.get("output_dir"), DEFAULT_OUTPUT_DIR),
        validators=validators,
        site_name=raw.get("site_name"),
        pygments_style=str(raw.get("pygments_style", "monokai")),
        external=_build_external_config(raw.get("external")),
    )
    if raw.get("skin"):
        config.skin = _resolve(base_dir, raw["skin"], None)
    return config


def check_validator_names(names: typ.Iterable[object]) -> list[str]:
    """Return ``names`` as strings, rejecting unknown validators."""
    if isinstance(names, str):
        names = [names]
    result: list[str] = []
    for name in names:
        text = str(name).strip().lower()
        if text not in VALIDATOR_NAMES:
            known = ", ".join(VALIDATOR_NAMES)
            msg = f"Unknown validator '{name}'. Known validators: {known}"
            raise ConfigError(msg)
        if text not in result:
            result.append(text)
    return result


def validator_factory(
    config: BuildConfig,
) -> typ.Callable[[Sitemap], list[LinkValidator]]:
    """Return a callable building the configured validators for a sitemap."""
    names = check_validator_names(config.validators)
    external = config.external

    def _factory(sitemap: Sitemap) -> list[LinkValidator]:
        validators: list[LinkValidator] = []
        for name in names:
            match name:
                case "sitemap":
                    validators.append(SitemapLinkValidator(sitemap))
                case "url-syntax":
                    validators.append(UrlSyntaxValidator())
                case "reachable":
                    validators.append(
                        ReachableLinkValidator(
                            timeout=external.timeout, user_agent=external.user_agent
                        )
                    )
                case "accept-all":
                    validators.append(AcceptAllValidator())
        return validators

    return _factory


def _resolve(base_dir: Path, value: object, default: Path | None) -> Path:
    """Resolve ``value`` against ``base_dir``, falling back to ``default``."""
    if value is None or value == "":
        if default is None:
            msg = "Empty path in configuration."
            raise ConfigError(msg)
        path = default
    else:
        path = Path(str(value)).expanduser()
    return path if path.is_absolute() else base_dir / path


def _build_external_config(payload: object) -> ExternalCheckConfig:
    """Build the external link settings from an optional mapping."""
    base = ExternalCheckConfig()
    if payload is None:
        return base
    if not isinstance(payload, dict):
        msg = "'external' must be a mapping."
        raise ConfigError(msg)
    try:
        timeout = float(payload.get("timeout", base.timeout))
    except (TypeError, ValueError) as exc:
        msg = f"Invalid external timeout {payload.get('timeout')!r}."
        raise ConfigError(msg) from exc
    if timeout <= 0:
        msg = "External timeout must be positive."
        raise ConfigError(msg)
    return ExternalCheckConfig(
        timeout=timeout,
        user_agent=str(payload.get("user_agent", base.user_agent)),
    )


__all__ = ["VALIDATOR_NAMES", "check_validator_names", "load_build_config", "validator_factory"]
