"""Building and sending requests to the Neocities API."""

from __future__ import annotations

import os
import secrets
import stat
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Iterator, Optional, Protocol
from urllib.parse import urlencode

import requests

from .response import KeyResponse, ListResponse, Response

API_URL = "https://neocities.org/api/"
USER_AGENT = "neocities (Python package using requests)"


class _Authenticator(Protocol):
    def authenticate(self, request) -> None: ...


class UnexpectedStatusCode(Exception):
    """The API answered with a status other than 200."""

    def __init__(self, response: Response, status_code: int) -> None:
        super().__init__(f"unexpected status code: {status_code}")
        self.response = response
        self.status_code = status_code


@dataclass
class UploadData:
    """A file name and the bytes to upload under it."""

    file_name: str
    content: bytes


def _new_request(
    method: str,
    url: str,
    auth: Optional[_Authenticator],
    data=None,
    headers: Optional[dict] = None,
) -> requests.Request:
    request = requests.Request(method, url, data=data, headers=dict(headers or {}))
    if auth is not None:
        auth.authenticate(request)
    return request


def send_request(request: requests.Request) -> requests.Response:
    """Send ``request`` with the client's User-Agent and return the raw response."""
    request.headers["User-Agent"] = USER_AGENT
    with requests.Session() as session:
        return session.send(request.prepare())


def perform_request(request: requests.Request) -> Response:
    """Send ``request`` and decode the answer.

    Raises ValueError for a body that is not JSON and
    UnexpectedStatusCode for a status other than 200.
    """
    raw = send_request(request)
    response = Response.from_body(raw.content)
    if raw.status_code != 200:
        raise UnexpectedStatusCode(response, raw.status_code)
    return response


def build_delete_request(auth: Optional[_Authenticator], filenames: Iterable[str]) -> requests.Request:
    body = urlencode([("filenames[]", name) for name in filenames])
    return _new_request(
        "POST",
        API_URL + "delete",
        auth,
        data=body,
        headers={"Content-Type": "application/x-www-form-urlencoded"},
    )


def delete_files(auth: Optional[_Authenticator], filenames: Iterable[str]) -> Response:
    """Delete the given remote files."""
    return perform_request(build_delete_request(auth, filenames))


def build_info_request(auth: Optional[_Authenticator], site: str) -> requests.Request:
    endpoint = "info"
    if site:
        endpoint += "?sitename=" + site
    return _new_request("GET", API_URL + endpoint, auth)


def site_info(auth: Optional[_Authenticator], site: str) -> Response:
    """Fetch information about ``site``, or about the authenticated user's site."""
    return perform_request(build_info_request(auth, site))


def build_key_request(auth: Optional[_Authenticator]) -> requests.Request:
    return _new_request("GET", API_URL + "key", auth)


def key(auth: Optional[_Authenticator]) -> KeyResponse:
    """Retrieve the API key of the authenticated user."""
    return KeyResponse.from_json(send_request(build_key_request(auth)).json())


def build_list_request(auth: Optional[_Authenticator]) -> requests.Request:
    return _new_request("GET", API_URL + "list", auth)


def list_files(auth: Optional[_Authenticator]) -> ListResponse:
    """List the files of the authenticated user's site."""
    return ListResponse.from_json(send_request(build_list_request(auth)).json())


def _escape_quotes(text: str) -> str:
    return text.replace("\\", "\\\\").replace('"', '\\"')


def _encode_multipart(parts: Iterable[tuple[str, str, bytes]]) -> tuple[bytes, str]:
    """Encode (field, filename, content) triples as multipart form data."""
    boundary = secrets.token_hex(30)
    chunks: list[bytes] = []
    for field_name, filename, content in parts:
        header = (
            f"--{boundary}\r\n"
            f'Content-Disposition: form-data; name="{_escape_quotes(field_name)}"; '
            f'filename="{_escape_quotes(filename)}"\r\n'
            "Content-Type: application/octet-stream\r\n\r\n"
        )
        chunks.extend((header.encode("utf-8"), bytes(content), b"\r\n"))
    chunks.append(f"--{boundary}--\r\n".encode("ascii"))
    return b"".join(chunks), f"multipart/form-data; boundary={boundary}"


def _multipart_request(auth: Optional[_Authenticator], parts: Iterable[tuple[str, str, bytes]]) -> requests.Request:
    body, content_type = _encode_multipart(parts)
    return _new_request(
        "POST", API_URL + "upload", auth, data=body, headers={"Content-Type": content_type}
    )


def build_upload_data_request(auth: Optional[_Authenticator], data: Iterable[UploadData]) -> requests.Request:
    return _multipart_request(auth, ((d.file_name, d.file_name, d.content) for d in data))


def upload(auth: Optional[_Authenticator], data: Iterable[UploadData]) -> Response:
    """Upload in-memory contents under the given file names."""
    return perform_request(build_upload_data_request(auth, data))


def _walk_files(root: str) -> Iterator[str]:
    """Yield every non-directory path under ``root`` in lexical order."""
    try:
        mode = os.lstat(root).st_mode
    except OSError:
        return
    if not stat.S_ISDIR(mode):
        yield root
        return
    try:
        names = sorted(os.listdir(root))
    except OSError:
        return
    for name in names:
        yield from _walk_files(os.path.normpath(os.path.join(root, name)))


def _file_parts(paths: Iterable[str]) -> Iterator[tuple[str, str, bytes]]:
    for root in paths:
        for path in _walk_files(root):
            try:
                content = Path(path).read_bytes()
            except OSError:
                # An unreadable file ends the walk of this root.
                break
            yield path.replace("\\", "/"), path, content


def build_upload_request(auth: Optional[_Authenticator], paths: Iterable[str]) -> requests.Request:
    return _multipart_request(auth, _file_parts(paths))


def upload_files(auth: Optional[_Authenticator], paths: Iterable[str]) -> Response:
    """Upload local files, descending into directories, under their relative paths."""
    return perform_request(build_upload_request(auth, paths))