import logging
import urllib.parse
from collections.abc import Mapping, Sequence
from enum import StrEnum
from typing import Self

from .http_response import HttpResponse
from .settings import ClientSettings
from .transport import Transport

log = logging.getLogger(__name__)


class Verb(StrEnum):
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    OPTIONS = "OPTIONS"


# params go into the query string
QUERY_VERBS = (Verb.GET, Verb.DELETE)
# params go into the form body
BODY_VERBS = (Verb.POST, Verb.PUT)


class HttpClient:
    """Small stateful REST client.

    GET and DELETE accept either route style urls (``/user/1``) or a base
    route plus params (``/user`` with ``{"id": "1"}`` becomes ``/user?id=1``).
    POST and PUT send params as a url-encoded form body. The outcome of the
    most recent request stays available through the ``last_*`` methods.
    """

    def __init__(
        self, host: str | None = None, transport: Transport | None = None
    ) -> None:
        self.transport = transport or Transport()
        self._host: str | None = None
        self._headers: list[str] | None = None
        self._response: HttpResponse | None = None
        if host:
            self.set_host(host)

    @classmethod
    def at(cls, host: str) -> Self:
        return cls(host)

    @classmethod
    def from_settings(cls, settings: ClientSettings) -> Self:
        transport = Transport(
            max_redirects=settings.max_redirects, verify_tls=settings.verify_tls
        )
        client = cls(settings.host, transport=transport)
        if settings.headers:
            client.set_headers(settings.headers)
        return client

    def host(self) -> str | None:
        return self._host

    def set_host(self, host: str) -> Self:
        self._host = host
        return self

    def headers(self) -> list[str] | None:
        return self._headers

    def set_headers(self, headers: Sequence[str]) -> Self:
        self._headers = list(headers)
        return self

    def options(
        self, route: str, params: Mapping[str, str] | None = None
    ) -> str | None:
        return self.perform(Verb.OPTIONS, route, params)

    def get(
        self, route: str, params: Mapping[str, str] | None = None
    ) -> str | None:
        return self.perform(Verb.GET, route, params)

    def post(
        self, route: str, params: Mapping[str, str] | None = None
    ) -> str | None:
        return self.perform(Verb.POST, route, params)

    def put(
        self, route: str, params: Mapping[str, str] | None = None
    ) -> str | None:
        return self.perform(Verb.PUT, route, params)

    def delete(
        self, route: str, params: Mapping[str, str] | None = None
    ) -> str | None:
        return self.perform(Verb.DELETE, route, params)

    def last_response(self) -> HttpResponse | None:
        return self._response

    def last_status(self) -> int | None:
        if self._response is None:
            return None
        return self._response.status

    def last_response_body(self) -> str | None:
        if self._response is None:
            return None
        return self._response.body

    def last_error(self) -> str | None:
        """Transport failure of the last request, ``None`` if a response arrived."""
        if self._response is None:
            return None
        return self._response.error

    def url_for(
        self, verb: str, route: str, params: Mapping[str, str] | None = None
    ) -> str:
        return self._build_url(Verb(verb.upper()), route, params)

    def _build_url(
        self, verb: Verb, route: str, params: Mapping[str, str] | None
    ) -> str:
        if verb in QUERY_VERBS and params:
            route = f"{route}?{urllib.parse.urlencode(params, doseq=True)}"
        if self._host:
            route = self._host + route
        return route

    def perform(
        self, verb: str, route: str, params: Mapping[str, str] | None = None
    ) -> str | None:
        verb = Verb(verb.upper())
        url = self._build_url(verb, route, params)

        body = None
        if verb in BODY_VERBS:
            body = urllib.parse.urlencode(params or {}, doseq=True).encode("ascii")

        log.debug(f"{verb} {url}")
        self._response = self.transport.perform(url, verb, self._headers, body)
        log.debug(f"{verb} {url} -> {self._response.status}")
        return self._response.body
