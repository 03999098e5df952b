"""Tests for the getwebsite command line.

``respx`` patches ``httpx`` at the transport layer so no real network calls
are made.
"""

from __future__ import annotations

from pathlib import Path

import httpx
import pytest
import respx

from getwebsite.cli import build_parser, fill_bare_depth, main

_INDEX = '<html><img src="/img/logo.png"><a href="/about.html">About</a></html>'


@pytest.fixture
def mock_site():
    with respx.mock(assert_all_called=False) as router:
        router.get(host="example.com", path="/").mock(return_value=httpx.Response(200, html=_INDEX))
        router.get(host="example.com", path="/img/logo.png").mock(
            return_value=httpx.Response(200, content=b"png", headers={"Content-Type": "image/png"})
        )
        router.get(host="example.com", path="/about.html").mock(
            return_value=httpx.Response(200, html='<a href="/">Home</a>')
        )
        yield router


class TestUsage:
    def test_missing_url_exits_1(self, capsys) -> None:
        with pytest.raises(SystemExit) as exc:
            main([])
        assert exc.value.code == 1
        err = capsys.readouterr().err
        assert "URL is missing!" in err
        assert "usage: getwebsite" in err

    def test_man_prints_manual(self, capsys) -> None:
        with pytest.raises(SystemExit) as exc:
            main(["--man"])
        assert exc.value.code == 0
        assert "a website spider" in capsys.readouterr().out

    def test_negative_depth_rejected(self) -> None:
        with pytest.raises(SystemExit) as exc:
            main(["example.com", "-d", "-1"])
        assert exc.value.code == 2

    def test_bare_depth_before_url_means_zero(self) -> None:
        args = build_parser().parse_args(["-d", "example.com"])
        assert args.depth == 0
        assert args.url == "example.com"

    def test_depth_value_still_parsed(self) -> None:
        args = build_parser().parse_args(["example.com", "out", "--depth", "2"])
        assert (args.url, args.target, args.depth) == ("example.com", "out", 2)

    def test_fill_bare_depth(self) -> None:
        assert fill_bare_depth(["-d", "x.org", "out"]) == ["-d", "0", "x.org", "out"]
        assert fill_bare_depth(["-d", "-1"]) == ["-d", "-1"]
        assert fill_bare_depth(["x.org", "-d"]) == ["x.org", "-d"]
        assert fill_bare_depth(["--", "-d", "x"]) == ["--", "-d", "x"]


class TestRun:
    def test_mirrors_seed_and_media(self, mock_site, tmp_path: Path) -> None:
        main(["example.com", str(tmp_path), "-q"])

        assert (tmp_path / "example.com" / "index.html").read_text() == _INDEX
        assert (tmp_path / "example.com" / "img" / "logo.png").read_bytes() == b"png"
        assert not (tmp_path / "example.com" / "about.html").exists()

    def test_depth_and_convert_links(self, mock_site, tmp_path: Path) -> None:
        main(["example.com", str(tmp_path), "-q", "-d", "1", "-c"])

        index = (tmp_path / "example.com" / "index.html").read_text()
        assert index == '<html><img src="img/logo.png"><a href="about.html">About</a></html>'
        assert (tmp_path / "example.com" / "about.html").exists()

    def test_info_lines(self, mock_site, tmp_path: Path, capsys) -> None:
        main(["example.com", str(tmp_path), "--no-progress"])

        out = capsys.readouterr().out
        assert 'Downloading "http://example.com".' in out
        assert 'Downloading "http://example.com/img/logo.png".' in out

    def test_quiet_silences_info(self, mock_site, tmp_path: Path, capsys) -> None:
        main(["example.com", str(tmp_path), "-q"])
        assert capsys.readouterr().out == ""

    def test_debug_lines(self, mock_site, tmp_path: Path, capsys) -> None:
        main(["example.com", str(tmp_path), "-q", "--debug"])
        assert 'DEBUG: Analyze URL: "/img/logo.png".' in capsys.readouterr().err

    def test_soup_parser(self, mock_site, tmp_path: Path) -> None:
        main(["example.com", str(tmp_path), "-q", "--parser", "soup"])
        assert (tmp_path / "example.com" / "img" / "logo.png").exists()


def test_transport_failure_exits_1(tmp_path: Path, capsys) -> None:
    with respx.mock:
        respx.get(host="example.com").mock(side_effect=httpx.ConnectError("refused"))
        with pytest.raises(SystemExit) as exc:
            main(["example.com", str(tmp_path), "-q"])
    assert exc.value.code == 1
    assert "Could not download URL 'http://example.com'." in capsys.readouterr().err
