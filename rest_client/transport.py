import http.client
import logging
import ssl
import urllib.error
import urllib.request
from collections.abc import Sequence
from email.message import Message

from .errors import MissingTransportError
from .http_response import HttpResponse

log = logging.getLogger(__name__)


def require_https() -> None:
    # urllib.request only defines HTTPSHandler when python was built with ssl
    if not hasattr(urllib.request, "HTTPSHandler"):
        raise MissingTransportError("ssl support in urllib.request")


class LimitedRedirectHandler(urllib.request.HTTPRedirectHandler):
    def __init__(self, max_redirects: int) -> None:
        super().__init__()
        self.max_redirections = max_redirects


def ssl_context(verify: bool) -> ssl.SSLContext:
    context = ssl.create_default_context()
    if not verify:
        context.check_hostname = False
        context.verify_mode = ssl.CERT_NONE
    return context


def parse_header_lines(lines: Sequence[str]) -> dict[str, str]:
    """Turn ``"Name: value"`` lines into a header mapping.

    Lines without a colon cannot be sent and are dropped.
    """
    headers = {}
    for line in lines:
        name, sep, value = line.partition(":")
        if not sep or not name.strip():
            log.warning(f"ignoring malformed header line {line!r}")
            continue
        headers[name.strip()] = value.strip()
    return headers


def decode_body(raw: bytes, headers: Message | None) -> str:
    charset = headers.get_content_charset() if headers is not None else None
    try:
        return raw.decode(charset or "utf-8", "replace")
    except LookupError:
        return raw.decode("utf-8", "replace")


def reason(error: Exception) -> str:
    return str(error) or type(error).__name__


class Transport:
    def __init__(self, max_redirects: int = 5, verify_tls: bool = False) -> None:
        require_https()
        self.max_redirects = max_redirects
        self.verify_tls = verify_tls
        self.opener = urllib.request.build_opener(
            LimitedRedirectHandler(max_redirects),
            urllib.request.HTTPSHandler(context=ssl_context(verify_tls)),
        )

    def _failed(self, verb: str, url: str, reason: str) -> HttpResponse:
        log.warning(f"{verb} {url} failed: {reason}")
        return HttpResponse(status=None, body=None, error=reason)

    def perform(
        self,
        url: str,
        verb: str,
        headers: Sequence[str] | None = None,
        body: bytes | None = None,
    ) -> HttpResponse:
        try:
            req = urllib.request.Request(
                url,
                data=body,
                headers=parse_header_lines(headers or []),
                method=verb,
            )
        except ValueError as e:
            return self._failed(verb, url, str(e))

        try:
            with self.opener.open(req) as resp:
                return HttpResponse(resp.status, decode_body(resp.read(), resp.headers))
        except urllib.error.HTTPError as e:
            # the server answered, only with a status urllib treats as an error
            try:
                raw = e.read()
            except (OSError, http.client.HTTPException) as read_error:
                return self._failed(verb, url, reason(read_error))
            finally:
                e.close()
            return HttpResponse(e.code, decode_body(raw, e.headers))
        except urllib.error.URLError as e:
            return self._failed(verb, url, str(e.reason))
        # ValueError covers urls and header values http.client refuses to encode
        except (OSError, http.client.HTTPException, ValueError) as e:
            return self._failed(verb, url, reason(e))
