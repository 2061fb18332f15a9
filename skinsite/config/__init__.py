"""Load and validate the ``skinsite.yaml`` build configuration.

This subpackage parses the project's build file, resolves relative paths
against the file's directory, applies defaults, and produces a
:class:`BuildConfig` that the CLI turns into a
:class:`~skinsite.pipeline.SiteBuilder`. The primary entry point is
:func:`load_build_config`; :func:`validator_factory` maps the configured
validator names onto validator instances once the sitemap is loaded.

Examples
--------
>>> from pathlib import Path
>>> from skinsite.config import load_build_config, validator_factory
>>> config = load_build_config(Path("skinsite.yaml"))  # doctest: +SKIP
>>> factory = validator_factory(config)  # doctest: +SKIP
"""

from .loader import (
    VALIDATOR_NAMES,
    check_validator_names,
    load_build_config,
    validator_factory,
)
from .models import BuildConfig, ExternalCheckConfig

__all__ = [
    "VALIDATOR_NAMES",
    "BuildConfig",
    "ExternalCheckConfig",
    "check_validator_names",
    "load_build_config",
    "validator_factory",
]
