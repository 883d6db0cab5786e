"""Credentials for the Neocities API."""

from __future__ import annotations

import base64
from dataclasses import dataclass


@dataclass(frozen=True)
class Credentials:
    """A user name and password, or an API key, for Neocities."""

    user: str = ""
    password: str = ""
    key: str = ""

    def authenticate(self, request) -> None:
        """Add an Authorization header to ``request``.

        An API key takes precedence over the user name and password.
        A ``None`` request is left alone.
        """
        if request is None:
            return
        if self.key:
            request.headers["Authorization"] = f"Bearer {self.key}"
            return
        pair = f"{self.user}:{self.password}".encode("utf-8")
        request.headers["Authorization"] = "Basic " + base64.b64encode(pair).decode("ascii")