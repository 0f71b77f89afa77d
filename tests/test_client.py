import httpx
import pytest
import respx

from pulith.client import ClientSetting, ClientSettingError, DownloadError, FileDownload, fetch
from pulith.tracker import ProgressTrackerBuilder

URL = "https://downloads.example.com/tool.tar.gz"


def test_fetch_yields_response():
    with respx.mock:
        respx.get(URL).mock(return_value=httpx.Response(200, content=b"payload"))
        with fetch(URL) as response:
            assert response.status_code == 200
            assert response.read() == b"payload"


def test_fetch_connection_error_is_download_error():
    with respx.mock:
        respx.get(URL).mock(side_effect=httpx.ConnectError("refused"))
        with pytest.raises(DownloadError):
            with fetch(URL):
                pass


def test_fetch_with_bad_proxy_is_download_error():
    with pytest.raises(DownloadError, match="Failed to build client"):
        with fetch(URL, ClientSetting(proxies=["ftp://proxy.example.com"])):
            pass


def test_invalid_proxy_scheme():
    with pytest.raises(ClientSettingError, match="ftp://proxy.example.com"):
        ClientSetting(proxies=["ftp://proxy.example.com"]).build()


def test_file_download_writes_body(tmp_path):
    target = tmp_path / "tool.tar.gz"
    with respx.mock:
        respx.get(URL).mock(return_value=httpx.Response(200, content=b"archive-bytes"))
        FileDownload(URL, target).fetch_raw()
    assert target.read_bytes() == b"archive-bytes"


def test_file_download_with_tracker(tmp_path):
    target = tmp_path / "tool.bin"
    body = b"x" * 4096
    with respx.mock:
        respx.get(URL).mock(return_value=httpx.Response(200, content=body))
        FileDownload(URL, target).fetch_raw(ProgressTrackerBuilder().with_prefix("tool"))
    assert target.read_bytes() == body


def test_file_download_error(tmp_path):
    target = tmp_path / "tool.bin"
    with respx.mock:
        respx.get(URL).mock(side_effect=httpx.ConnectError("refused"))
        with pytest.raises(DownloadError):
            FileDownload(URL, target).fetch_raw()