import os

from vidgrab.core.fetcher import ToolFetcher
from vidgrab.core.installer import ToolInstaller
from vidgrab.core.probe import ToolProbe
from vidgrab.core.search_path import SearchPathContext
from vidgrab.models.installation import InstallStatus
from vidgrab.models.tool import (
    ArchiveArtifact,
    ExecutableArtifact,
    SilentInstallerArtifact,
    ToolSpec,
)

from .helpers import FakeOpener, make_zip, posix_only, shell_script


DOWNLOADER_URL = "https://example.com/downloader"
TRANSCODER_URL = "https://example.com/transcoder.zip"


def downloader_spec():
    return ToolSpec(
        name="downloader",
        binary_name="downloader",
        url=DOWNLOADER_URL,
        artifact=ExecutableArtifact(),
        subfolder="downloader",
    )


def transcoder_spec():
    return ToolSpec(
        name="transcoder",
        binary_name="transcoder.exe",
        url=TRANSCODER_URL,
        artifact=ArchiveArtifact(binary_path="bin/transcoder.exe", flatten=True),
        subfolder="transcoder",
    )


def make_installer(tmp_path, opener, context=None):
    seed_dir = tmp_path / "program"
    seed_dir.mkdir(exist_ok=True)
    return ToolInstaller(
        tools_root=tmp_path / "appdata",
        context=context or SearchPathContext({"PATH": ""}),
        fetcher=ToolFetcher(opener=opener),
        seed_dir=seed_dir,
    )


def test_existing_target_short_circuits(tmp_path):
    opener = FakeOpener({DOWNLOADER_URL: b"new"})
    installer = make_installer(tmp_path, opener)
    spec = downloader_spec()
    target = spec.executable_path(installer.tools_root)
    target.parent.mkdir(parents=True)
    target.write_bytes(b"old")

    outcome = installer.install(spec)

    assert outcome.status == InstallStatus.ALREADY_AVAILABLE
    assert outcome.location == target
    assert opener.calls == []
    assert target.read_bytes() == b"old"
    assert installer.context.entries[0] == str(target.parent)


def test_preseeded_copy_is_used_instead_of_network(tmp_path):
    opener = FakeOpener({DOWNLOADER_URL: b"remote"})
    installer = make_installer(tmp_path, opener)
    seed = installer.seed_dir / "downloader"
    seed.write_bytes(b"seeded executable bytes")

    outcome = installer.install(downloader_spec())

    assert outcome.status == InstallStatus.INSTALLED
    assert opener.calls == []
    assert outcome.location.read_bytes() == seed.read_bytes()


@posix_only
def test_downloader_scenario_single_get_and_probe_succeeds(tmp_path):
    body = shell_script(0, padding=900 * 1024 - 20)
    opener = FakeOpener({DOWNLOADER_URL: body})
    context = SearchPathContext({"PATH": ""})
    installer = make_installer(tmp_path, opener, context)
    spec = downloader_spec()
    probe = ToolProbe(context)

    assert not probe.probe(spec).available

    outcome = installer.install(spec)

    assert outcome.status == InstallStatus.INSTALLED
    assert opener.calls == [DOWNLOADER_URL]
    target = spec.executable_path(installer.tools_root)
    assert target.stat().st_size == len(body)
    assert os.access(target, os.X_OK)
    assert context.entries[0] == str(target.parent)
    assert probe.probe(spec).available


def test_transcoder_archive_scenario_registers_bin_directory(tmp_path):
    archive = make_zip({
        "transcoder-build/bin/transcoder.exe": (b"MZ transcoder", 0o755),
        "transcoder-build/doc/readme.txt": (b"docs", 0o644),
    })
    opener = FakeOpener({TRANSCODER_URL: archive})
    installer = make_installer(tmp_path, opener)
    spec = transcoder_spec()

    outcome = installer.install(spec)

    root = spec.target_dir(installer.tools_root)
    assert outcome.status == InstallStatus.INSTALLED
    assert (root / "bin" / "transcoder.exe").read_bytes() == b"MZ transcoder"
    assert installer.context.entries[0] == str(root / "bin")
    assert str(root) not in installer.context.entries
    # No temporary archive or staging directory left behind
    assert list(installer.tools_root.iterdir()) == [root]


def test_archive_with_top_level_bin_directory_installs(tmp_path):
    archive = make_zip({"bin/transcoder.exe": (b"MZ transcoder", 0o755)})
    installer = make_installer(tmp_path, FakeOpener({TRANSCODER_URL: archive}))
    spec = ToolSpec(
        name="transcoder",
        binary_name="transcoder.exe",
        url=TRANSCODER_URL,
        artifact=ArchiveArtifact(binary_path="bin/transcoder.exe"),
        subfolder="transcoder",
    )

    outcome = installer.install(spec)

    root = spec.target_dir(installer.tools_root)
    assert outcome.status == InstallStatus.INSTALLED
    assert outcome.location == root / "bin" / "transcoder.exe"
    assert installer.context.entries[0] == str(root / "bin")


def test_archive_install_is_idempotent_across_runs(tmp_path):
    archive = make_zip({"build/bin/transcoder.exe": (b"MZ", 0o755)})
    first = FakeOpener({TRANSCODER_URL: archive})
    make_installer(tmp_path, first).install(transcoder_spec())

    second = FakeOpener({TRANSCODER_URL: archive})
    outcome = make_installer(tmp_path, second).install(transcoder_spec())

    assert first.calls == [TRANSCODER_URL]
    assert second.calls == []
    assert outcome.status == InstallStatus.ALREADY_AVAILABLE


def test_archive_without_expected_binary_fails(tmp_path):
    archive = make_zip({"build/other.exe": (b"MZ", 0o755)})
    installer = make_installer(tmp_path, FakeOpener({TRANSCODER_URL: archive}))

    outcome = installer.install(transcoder_spec())

    assert outcome.status == InstallStatus.FAILED
    assert outcome.error_type == "ArchiveFormatError"
    assert not transcoder_spec().target_dir(installer.tools_root).exists()
    assert list(installer.tools_root.iterdir()) == []


def test_network_failure_yields_failed_outcome_without_target(tmp_path):
    installer = make_installer(tmp_path, FakeOpener())
    spec = downloader_spec()

    outcome = installer.install(spec)

    assert outcome.status == InstallStatus.FAILED
    assert outcome.error_type == "NetworkError"
    assert not outcome.success
    target = spec.executable_path(installer.tools_root)
    assert not target.exists()
    assert list(target.parent.iterdir()) == []
    assert installer.context.entries == []


def test_failed_install_is_retried_on_next_run(tmp_path):
    spec = downloader_spec()
    make_installer(tmp_path, FakeOpener()).install(spec)

    opener = FakeOpener({DOWNLOADER_URL: b"bytes"})
    outcome = make_installer(tmp_path, opener).install(spec)

    assert outcome.status == InstallStatus.INSTALLED
    assert opener.calls == [DOWNLOADER_URL]


@posix_only
def test_silent_installer_runs_and_checks_result(tmp_path):
    url = "https://example.com/player-setup.exe"
    spec = ToolSpec(
        name="player",
        binary_name="player.exe",
        url=url,
        artifact=SilentInstallerArtifact(binary_path="player.exe", flags=["/S"], install_dir_flag="/D="),
        subfolder="player",
    )
    # The fake installer "installs" by creating the executable named in /D=
    script = b'#!/bin/sh\nfor a in "$@"; do case "$a" in /D=*) d="${a#/D=}";; esac; done\nmkdir -p "$d" && touch "$d/player.exe"\n'
    installer = make_installer(tmp_path, FakeOpener({url: script}))
    installer.fetcher.temp_dir = tmp_path / "tmp"

    outcome = installer.install(spec)

    assert outcome.status == InstallStatus.INSTALLED
    assert outcome.location == spec.executable_path(installer.tools_root)
    assert list((tmp_path / "tmp").iterdir()) == []


@posix_only
def test_silent_installer_exit_failure(tmp_path):
    url = "https://example.com/player-setup.exe"
    spec = ToolSpec(
        name="player",
        binary_name="player.exe",
        url=url,
        artifact=SilentInstallerArtifact(binary_path="player.exe"),
        subfolder="player",
    )
    installer = make_installer(tmp_path, FakeOpener({url: shell_script(1)}))

    outcome = installer.install(spec)

    assert outcome.status == InstallStatus.FAILED
    assert outcome.error_type == "InstallerExitFailure"
