import pytest

from vidgrab.core.errors import ProbeUnavailable
from vidgrab.core.probe import ToolProbe
from vidgrab.core.search_path import SearchPathContext
from vidgrab.models.tool import ToolSpec

from .helpers import posix_only, write_tool


def make_spec(**overrides):
    data = dict(
        name="downloader",
        binary_name="fake-downloader",
        url="https://example.com/fake-downloader",
        subfolder="fake-downloader",
    )
    data.update(overrides)
    return ToolSpec(**data)


@posix_only
def test_tool_on_search_path_is_available(tmp_path):
    tool = write_tool(tmp_path / "bin", "fake-downloader")
    context = SearchPathContext({"PATH": str(tmp_path / "bin")})

    result = ToolProbe(context).probe(make_spec())

    assert result.available
    assert result.location == tool
    assert not result.via_fallback


@posix_only
def test_nonzero_exit_still_counts_as_available(tmp_path):
    write_tool(tmp_path / "bin", "fake-downloader", exit_code=2)
    context = SearchPathContext({"PATH": str(tmp_path / "bin")})

    assert ToolProbe(context).probe(make_spec()).available


@posix_only
def test_unlaunchable_file_is_unavailable(tmp_path):
    bin_dir = tmp_path / "bin"
    bin_dir.mkdir()
    broken = bin_dir / "fake-downloader"
    broken.write_bytes(b"\x00\x01not an executable")
    broken.chmod(0o755)
    context = SearchPathContext({"PATH": str(bin_dir)})

    assert not ToolProbe(context).probe(make_spec()).available


def test_fallback_paths_checked_in_order(tmp_path, empty_context):
    missing = tmp_path / "missing" / "fake-downloader"
    first = tmp_path / "first" / "fake-downloader"
    second = tmp_path / "second" / "fake-downloader"
    for path in (first, second):
        path.parent.mkdir()
        path.write_text("")

    spec = make_spec(fallback_paths=[missing, first, second])
    result = ToolProbe(empty_context).probe(spec)

    assert result.available
    assert result.via_fallback
    assert result.location == first


def test_missing_everywhere_is_unavailable(tmp_path, empty_context):
    spec = make_spec(fallback_paths=[tmp_path / "nope"])

    result = ToolProbe(empty_context).probe(spec)

    assert not result.available
    assert result.location is None


def test_require_raises_when_missing(empty_context):
    with pytest.raises(ProbeUnavailable):
        ToolProbe(empty_context).require(make_spec())
