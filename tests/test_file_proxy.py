import pytest
import requests

import file_proxy
from errors import UpstreamError, ValidationError


@pytest.mark.happy_path
def test_open_stream_requests_download(upstream, monkeypatch):
    monkeypatch.setenv("FILE_HOST_URL", "https://files.example/uc")
    monkeypatch.setenv("FILE_HOST_TIMEOUT", "5")
    response = file_proxy.open_stream("abc123")

    assert response is upstream["response"]
    url, kwargs = upstream["calls"][0]
    assert url == "https://files.example/uc"
    assert kwargs["params"] == {"export": "download", "id": "abc123"}
    assert kwargs["stream"] is True
    assert kwargs["timeout"] == 5.0


@pytest.mark.edge_case
@pytest.mark.parametrize("movie_id", [None, ""])
def test_open_stream_requires_id(upstream, movie_id):
    with pytest.raises(ValidationError):
        file_proxy.open_stream(movie_id)
    assert upstream["calls"] == []


@pytest.mark.edge_case
def test_open_stream_network_error(upstream):
    upstream["response"] = requests.exceptions.ConnectionError("down")
    with pytest.raises(UpstreamError):
        file_proxy.open_stream("abc123")


@pytest.mark.edge_case
def test_open_stream_error_status_closes_response(upstream):
    failed = upstream["fake"](status_code=404)
    upstream["response"] = failed
    with pytest.raises(UpstreamError):
        file_proxy.open_stream("abc123")
    assert failed.closed


@pytest.mark.happy_path
def test_attachment_headers():
    assert file_proxy.attachment_headers("abc") == {
        "Content-Disposition": 'attachment; filename="abc.mp4"'
    }


@pytest.mark.edge_case
def test_attachment_headers_non_latin1_id():
    header = file_proxy.attachment_headers("中")["Content-Disposition"]
    header.encode("latin-1")
    assert header == "attachment; filename=\"movie.mp4\"; filename*=UTF-8''%E4%B8%AD.mp4"


@pytest.mark.edge_case
@pytest.mark.parametrize("movie_id", [None, ""])
def test_attachment_headers_requires_id(movie_id):
    with pytest.raises(ValidationError):
        file_proxy.attachment_headers(movie_id)
