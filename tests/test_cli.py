"""Tests for the ``skinsite build`` command and exit status mapping.

The command function is called directly with keyword arguments, the same way
Cyclopts invokes it after parsing, and logging setup is stubbed so tests keep
pytest's handlers.
"""

from __future__ import annotations

import typing as typ
from textwrap import dedent

import pytest

from skinsite import cli
from skinsite.errors import SkinLoadError
from skinsite.link_checker import BadLink
from skinsite.model import Page
from skinsite.pipeline import BuildResult, BuildStatus

if typ.TYPE_CHECKING:
    from pathlib import Path


@pytest.fixture(autouse=True)
def _quiet_logging(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the CLI from replacing pytest's logging handlers."""
    monkeypatch.setattr(cli, "setup_logging", lambda *args, **kwargs: None)


@pytest.fixture
def project(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Create a small project with a build file and change into it."""
    content = tmp_path / "content"
    content.mkdir()
    (content / "index.md").write_text(
        "# Home\n\n[About](about.md) and [Contact](contact.html)\n", encoding="utf-8"
    )
    (content / "about.md").write_text("# About\n", encoding="utf-8")
    (content / "sitemap.yaml").write_text(
        "root:\n  source: index.md\n  children: [about.md]\n", encoding="utf-8"
    )
    (tmp_path / "skinsite.yaml").write_text(
        dedent(
            """
            sitemap: content/sitemap.yaml
            output_dir: public
            validators: [sitemap]
            """
        ),
        encoding="utf-8",
    )
    monkeypatch.chdir(tmp_path)
    return tmp_path


def test_exit_codes_distinguish_outcomes() -> None:
    """Success, fatal failures, and link failures map to distinct statuses."""
    page = Page("index.html", "Home")
    assert cli.exit_code_for(BuildResult(BuildStatus.SUCCESS)) is cli.ExitCode.OK
    failed = BuildResult(BuildStatus.FAILED, error=SkinLoadError("missing"))
    assert cli.exit_code_for(failed) is cli.ExitCode.BUILD_FAILED
    invalid = BuildResult(BuildStatus.INVALID_LINKS, bad_links=(BadLink(page, "x.html"),))
    assert cli.exit_code_for(invalid) is cli.ExitCode.INVALID_LINKS


def test_build_reports_invalid_links(
    project: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    """Bad links produce exit status 2 after the pages are written."""
    with pytest.raises(SystemExit) as excinfo:
        cli.build()
    assert excinfo.value.code == cli.ExitCode.INVALID_LINKS
    captured = capsys.readouterr()
    assert "wrote public/index.html" in captured.out
    assert "wrote public/about.html" in captured.out
    assert "Invalid link on page index.html : contact.html" in captured.err
    assert "1 invalid link found" in captured.err
    assert (project / "public" / "about.html").exists()


def test_build_succeeds_without_validators(
    project: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    """Disabling validators makes the same site build cleanly."""
    cli.build(no_validators=True)
    assert "wrote public/index.html" in capsys.readouterr().out


def test_flags_override_the_build_file(project: Path) -> None:
    """Command-line values replace the configured ones."""
    assets = project / "assets"
    assets.mkdir()
    (assets / "site.css").write_text("body{}", encoding="utf-8")
    cli.build(
        output_dir=project / "dist",
        resource=[assets],
        validator=["accept-all"],
    )
    assert (project / "dist" / "index.html").exists()
    assert (project / "dist" / "site.css").exists()


def test_missing_skin_is_a_build_failure(
    project: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    """Fatal stage errors exit with status 1 and a stage-tagged message."""
    with pytest.raises(SystemExit) as excinfo:
        cli.build(skin=project / "missing.jinja")
    assert excinfo.value.code == cli.ExitCode.BUILD_FAILED
    assert "error: [load-skin]" in capsys.readouterr().err
    assert not (project / "public").exists()


def test_invalid_configuration_exits_with_config_error(
    project: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    """Unknown validators are rejected before the build starts."""
    with pytest.raises(SystemExit) as excinfo:
        cli.build(validator=["spellcheck"])
    assert excinfo.value.code == cli.ExitCode.CONFIG_ERROR
    assert "Unknown validator" in capsys.readouterr().err


def test_resolve_config_without_build_file(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    """Defaults apply when no skinsite.yaml exists."""
    monkeypatch.chdir(tmp_path)
    config = cli.resolve_config(None, validators=["url-syntax"])
    assert config.validators == ["url-syntax"]
    assert config.output_dir.name == "public"


def test_output_path_that_is_a_file_exits_with_build_failure(
    project: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    """An unusable output folder is reported, not raised as a traceback."""
    blocker = project / "public"
    blocker.write_text("occupied", encoding="utf-8")
    with pytest.raises(SystemExit) as excinfo:
        cli.build()
    assert excinfo.value.code == cli.ExitCode.BUILD_FAILED
    assert "error: [skin-pages] Cannot create output directory" in capsys.readouterr().err
