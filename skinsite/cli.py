"""Cyclopts CLI entrypoint for building skinned static sites.

The ``skinsite`` console script defined here loads ``skinsite.yaml`` (when
present), applies command-line overrides, runs the build pipeline, and turns
the resulting :class:`~skinsite.pipeline.BuildResult` into a process exit
status:

- ``0``: the site was built and every link passed validation.
- ``1``: a build stage failed (sitemap, resources, skin, or rendering).
- ``2``: the site was built but some links are invalid.
- ``3``: the configuration is invalid.

Every flag can also be supplied through a ``SKINSITE_``-prefixed environment
variable, which suits CI pipelines.

Examples
--------
Build using ``skinsite.yaml`` in the current directory:

>>> from skinsite.cli import main
>>> main()  # doctest: +SKIP

Build with explicit inputs and external link probing:

>>> from skinsite.cli import app
>>> app(
...     ["build", "--sitemap", "content/sitemap.yaml", "--resource", "assets",
...      "--validator", "sitemap", "--validator", "reachable"]
... )  # doctest: +SKIP
"""

from __future__ import annotations

import enum
import sys
import typing as typ
from pathlib import Path

import cyclopts
from cyclopts import App, Parameter

from .config import BuildConfig, check_validator_names, load_build_config, validator_factory
from .errors import ConfigError
from .logging_config import setup_logging
from .pipeline import BuildResult, BuildStatus, SiteBuilder
from .skin import JinjaSkin

DEFAULT_CONFIG = Path("skinsite.yaml")

app = App(name="skinsite", config=cyclopts.config.Env("SKINSITE_", command=False))  # type: ignore[unknown-argument]


class ExitCode(enum.IntEnum):
    """Process exit statuses reported by the CLI."""

    OK = 0
    BUILD_FAILED = 1
    INVALID_LINKS = 2
    CONFIG_ERROR = 3


def exit_code_for(result: BuildResult) -> ExitCode:
    """Map a build outcome onto the CLI exit status."""
    match result.status:
        case BuildStatus.SUCCESS:
            return ExitCode.OK
        case BuildStatus.INVALID_LINKS:
            return ExitCode.INVALID_LINKS
        case _:
            return ExitCode.BUILD_FAILED


def _format_path(path: Path) -> str:
    """Return a cwd-relative path when possible, otherwise the absolute path."""
    if path.is_absolute():
        try:
            return str(path.relative_to(Path.cwd()))
        except ValueError:  # pragma: no cover - fallback for different roots
            return str(path)
    return str(path)


def resolve_config(
    config: Path | None,
    *,
    sitemap: Path | None = None,
    skin: Path | None = None,
    resources: typ.Sequence[Path] | None = None,
    output_dir: Path | None = None,
    validators: typ.Sequence[str] | None = None,
    no_validators: bool = False,
) -> BuildConfig:
    """Load the build file (if any) and apply command-line overrides.

    Raises
    ------
    FileNotFoundError
        If ``config`` was given explicitly but does not exist.
    ConfigError
        If the file or an override is invalid.
    """
    if config is not None:
        build_config = load_build_config(config)
    elif DEFAULT_CONFIG.exists():
        build_config = load_build_config(DEFAULT_CONFIG)
    else:
        build_config = BuildConfig()

    if sitemap is not None:
        build_config.sitemap = sitemap
    if skin is not None:
        build_config.skin = skin
    if resources:
        build_config.resources = list(resources)
    if output_dir is not None:
        build_config.output_dir = output_dir
    if no_validators:
        build_config.validators = []
    elif validators:
        build_config.validators = check_validator_names(validators)
    return build_config


def run_build(build_config: BuildConfig) -> BuildResult:
    """Run the pipeline described by ``build_config`` with default collaborators."""
    builder = SiteBuilder(
        skin=JinjaSkin(
            site_name=build_config.site_name,
            pygments_style=build_config.pygments_style,
        ),
        validators=validator_factory(build_config),
    )
    return builder.build(
        build_config.sitemap,
        build_config.skin,
        build_config.resources,
        build_config.output_dir,
    )


def _report(result: BuildResult) -> None:
    """Print written pages, failures, and bad links for the operator."""
    for path in result.written:
        print(f"wrote {_format_path(path)}")
    if result.error is not None:
        print(f"error: {result.error}", file=sys.stderr)
    for bad in result.bad_links:
        print(f"Invalid link on page {bad}", file=sys.stderr)
    if result.bad_links:
        count = len(result.bad_links)
        noun = "link" if count == 1 else "links"
        print(f"{count} invalid {noun} found", file=sys.stderr)


@app.command(help="Build the static site and validate its links.")
def build(
    *,
    config: typ.Annotated[
        Path | None, Parameter(help="Path to skinsite.yaml", env_var="SKINSITE_CONFIG")
    ] = None,
    sitemap: typ.Annotated[
        Path | None, Parameter(help="Override the sitemap description")
    ] = None,
    skin: typ.Annotated[
        Path | None, Parameter(help="Override the skin template")
    ] = None,
    resource: typ.Annotated[
        list[Path] | None,
        Parameter(help="Resource directory to copy (repeatable)"),
    ] = None,
    output_dir: typ.Annotated[
        Path | None, Parameter(help="Override the output folder")
    ] = None,
    validator: typ.Annotated[
        list[str] | None,
        Parameter(help="Link validator to run (repeatable)"),
    ] = None,
    no_validators: typ.Annotated[
        bool, Parameter(help="Disable link validation")
    ] = False,
    log_level: typ.Annotated[str, Parameter(help="Logging level")] = "INFO",
    log_json: typ.Annotated[bool, Parameter(help="Emit JSON log records")] = False,
) -> None:
    """Build the site and exit with a status describing the outcome.

    Parameters
    ----------
    config : Path or None, optional
        Build file; defaults to ``skinsite.yaml`` when it exists.
    sitemap, skin, output_dir : Path or None, optional
        Overrides for the corresponding build file settings.
    resource : list[Path] or None, optional
        Resource directories replacing the configured list.
    validator : list[str] or None, optional
        Validator names replacing the configured list.
    no_validators : bool, optional
        Run no validators at all.
    log_level : str, optional
        Root logging level.
    log_json : bool, optional
        Emit structured JSON logs.

    Raises
    ------
    SystemExit
        With a non-zero :class:`ExitCode` when the configuration is invalid,
        a stage fails, or links are invalid.
    """
    setup_logging(log_level, json_output=log_json)
    try:
        build_config = resolve_config(
            config,
            sitemap=sitemap,
            skin=skin,
            resources=resource,
            output_dir=output_dir,
            validators=validator,
            no_validators=no_validators,
        )
    except (ConfigError, FileNotFoundError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        raise SystemExit(ExitCode.CONFIG_ERROR) from exc

    result = run_build(build_config)
    _report(result)
    code = exit_code_for(result)
    if code is not ExitCode.OK:
        raise SystemExit(code)


def main() -> None:
    """Invoke the Cyclopts application that powers the ``skinsite`` command."""
    app()


if __name__ == "__main__":  # pragma: no cover - manual invocation helper
    main()
