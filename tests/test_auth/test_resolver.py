"""Tests for CredentialResolver ordering and the default reader chain."""

from __future__ import annotations

from pathlib import Path
from typing import Optional
from unittest.mock import patch

import pytest

from github_mcp_wrapper.auth import gh_cli
from github_mcp_wrapper.auth.base import CredentialReader
from github_mcp_wrapper.auth.gh_cli import GhCliReader
from github_mcp_wrapper.auth.readers import EnvironmentReader, HostsFileReader, TokenFileReader
from github_mcp_wrapper.auth.resolver import (
    NOT_FOUND_HINTS,
    CredentialResolver,
    create_default_resolver,
)
from github_mcp_wrapper.exceptions import CredentialNotFoundError
from github_mcp_wrapper.models import (
    Credential,
    CredentialSource,
    CredentialSourceKind,
    WrapperSettings,
)


@pytest.fixture(autouse=True)
def _quiet(quiet_output):
    yield


class CountingReader(CredentialReader):
    """Reader returning a fixed value and counting how often it is consulted."""

    def __init__(self, name: str, value: Optional[str]) -> None:
        self.name = name
        self.value = value
        self.calls = 0

    @property
    def label(self) -> str:
        return self.name

    def read(self) -> Optional[Credential]:
        self.calls += 1
        if self.value is None:
            return None
        return Credential(
            value=self.value,
            source=CredentialSource(
                kind=CredentialSourceKind.ENVIRONMENT_VARIABLE, name=self.name
            ),
        )


def _chain(values: list[Optional[str]]) -> list[CountingReader]:
    names = ["cli", "env", "hosts", "token_file"]
    return [CountingReader(name, value) for name, value in zip(names, values)]


class TestResolutionOrder:
    @pytest.mark.parametrize("winner", [0, 1, 2, 3])
    def test_single_source_wins_and_stops(self, winner: int) -> None:
        values: list[Optional[str]] = [None, None, None, None]
        values[winner] = f"token-from-{winner}"
        readers = _chain(values)

        credential = CredentialResolver(readers).resolve()

        assert credential.secret() == f"token-from-{winner}"
        for index, reader in enumerate(readers):
            expected = 1 if index <= winner else 0
            assert reader.calls == expected, reader.name

    def test_higher_priority_beats_lower(self) -> None:
        readers = _chain(["cli-token", "env-token", "hosts-token", "file-token"])
        credential = CredentialResolver(readers).resolve()
        assert credential.secret() == "cli-token"
        assert [r.calls for r in readers] == [1, 0, 0, 0]

    def test_explicit_short_circuits(self) -> None:
        readers = _chain(["cli-token", "env-token", "hosts-token", "file-token"])
        credential = CredentialResolver(readers).resolve("explicit-token")
        assert credential.secret() == "explicit-token"
        assert credential.source.kind == CredentialSourceKind.EXPLICIT
        assert all(r.calls == 0 for r in readers)

    @pytest.mark.parametrize("explicit", [None, "", "null"])
    def test_absent_explicit_falls_through(self, explicit: Optional[str]) -> None:
        readers = _chain([None, "env-token", None, None])
        credential = CredentialResolver(readers).resolve(explicit)
        assert credential.secret() == "env-token"

    def test_null_literal_from_reader_is_absence(self) -> None:
        readers = _chain(["null", "env-token", None, None])
        credential = CredentialResolver(readers).resolve()
        assert credential.secret() == "env-token"
        assert readers[1].calls == 1


class TestNotFound:
    def test_raises_with_remediation_hints(self) -> None:
        readers = _chain([None, None, None, None])
        with pytest.raises(CredentialNotFoundError) as excinfo:
            CredentialResolver(readers).resolve()
        assert excinfo.value.exit_code == 1
        assert excinfo.value.hints == NOT_FOUND_HINTS
        assert all(r.calls == 1 for r in readers)

    def test_hints_cover_every_option(self) -> None:
        text = "\n".join(NOT_FOUND_HINTS)
        assert "gh auth login" in text
        for name in ("GITHUB_TOKEN", "GITHUB_PERSONAL_ACCESS_TOKEN", "GH_TOKEN"):
            assert name in text
        assert "--token" in text
        numbered = [line for line in NOT_FOUND_HINTS if line[:2] in {"1.", "2.", "3.", "4."}]
        assert len(numbered) == 4

    def test_empty_chain(self) -> None:
        with pytest.raises(CredentialNotFoundError):
            CredentialResolver([]).resolve()


class TestDefaultResolver:
    def test_reader_order(self, tmp_path: Path) -> None:
        resolver = create_default_resolver(WrapperSettings(), home=tmp_path)
        kinds = [type(r) for r in resolver.readers]
        assert kinds == [
            GhCliReader,
            EnvironmentReader,
            HostsFileReader,
            TokenFileReader,
            TokenFileReader,
        ]
        assert resolver.readers[2].label == str(tmp_path / ".config" / "gh" / "hosts.yml")
        assert resolver.readers[3].label == str(tmp_path / ".github_token")
        assert resolver.readers[4].label == str(tmp_path / ".config" / "github" / "token")

    def test_hosts_file_then_plain_files(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        for name in ("GITHUB_TOKEN", "GITHUB_PERSONAL_ACCESS_TOKEN", "GH_TOKEN"):
            monkeypatch.delenv(name, raising=False)
        hosts = tmp_path / ".config" / "gh" / "hosts.yml"
        hosts.parent.mkdir(parents=True)
        hosts.write_text(
            'github.example.com:\n    oauth_token: "other"\n'
            'github.com:\n    oauth_token: "abc123"\n',
            encoding="utf-8",
        )
        (tmp_path / ".github_token").write_text("plain-token", encoding="utf-8")

        with patch.object(gh_cli, "_run_gh", return_value=None):
            credential = create_default_resolver(WrapperSettings(), home=tmp_path).resolve()

        assert credential.secret() == "abc123"
        assert credential.source.path == hosts

    def test_empty_hosts_file_falls_through_to_token_file(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        for name in ("GITHUB_TOKEN", "GITHUB_PERSONAL_ACCESS_TOKEN", "GH_TOKEN"):
            monkeypatch.delenv(name, raising=False)
        hosts = tmp_path / ".config" / "gh" / "hosts.yml"
        hosts.parent.mkdir(parents=True)
        hosts.write_text("", encoding="utf-8")
        token_file = tmp_path / ".config" / "github" / "token"
        token_file.parent.mkdir(parents=True)
        token_file.write_text("second-file-token\n", encoding="utf-8")

        with patch.object(gh_cli, "_run_gh", return_value=None):
            credential = create_default_resolver(WrapperSettings(), home=tmp_path).resolve()

        assert credential.secret() == "second-file-token"

    def test_environment_beats_files(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.delenv("GITHUB_TOKEN", raising=False)
        monkeypatch.setenv("GITHUB_PERSONAL_ACCESS_TOKEN", "env-token")
        (tmp_path / ".github_token").write_text("plain-token", encoding="utf-8")

        with patch.object(gh_cli, "_run_gh", return_value=None):
            credential = create_default_resolver(WrapperSettings(), home=tmp_path).resolve()

        assert credential.secret() == "env-token"

    def test_unreachable_hosts_file_falls_through(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        for name in ("GITHUB_TOKEN", "GITHUB_PERSONAL_ACCESS_TOKEN", "GH_TOKEN"):
            monkeypatch.delenv(name, raising=False)
        gh_dir = tmp_path / ".config" / "gh"
        gh_dir.mkdir(parents=True)
        (gh_dir / "hosts.yml").write_text("github.com:\n    oauth_token: hidden\n", encoding="utf-8")
        (tmp_path / ".github_token").write_text("fallback-token", encoding="utf-8")

        original = Path.is_file

        def _is_file(self: Path) -> bool:
            if self.parent == gh_dir:
                raise PermissionError(13, "Permission denied", str(self))
            return original(self)

        monkeypatch.setattr(Path, "is_file", _is_file)
        with patch.object(gh_cli, "_run_gh", return_value=None):
            credential = create_default_resolver(WrapperSettings(), home=tmp_path).resolve()

        assert credential.secret() == "fallback-token"
