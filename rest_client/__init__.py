import argparse
import logging
import os
import sys

from .client import HttpClient, Verb
from .custom_logger import setup_logging
from .errors import MissingTransportError
from .http_response import HttpResponse
from .settings import ClientSettings

__all__ = [
    "ClientSettings",
    "HttpClient",
    "HttpResponse",
    "MissingTransportError",
    "Verb",
    "main",
    "setup_logging",
]

log = logging.getLogger(__name__)


def parse_params(pairs: list[str]) -> dict[str, str]:
    params = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep:
            raise argparse.ArgumentTypeError(f"expected key=value, got {pair!r}")
        params[key] = value
    return params


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="rest-client", description="Send one request to a REST api"
    )
    parser.add_argument(
        "verb",
        type=str.upper,
        choices=[v.value for v in Verb],
        help="http verb to use",
    )
    parser.add_argument(
        "route", type=str, help="route, or full url when --host is not set"
    )
    parser.add_argument(
        "params",
        nargs="*",
        default=[],
        help="key=value pairs, sent as query string (GET, DELETE) or form body (POST, PUT)",
    )
    parser.add_argument(
        "--host", type=str, default=None, help="base url prepended to the route"
    )
    parser.add_argument(
        "-H",
        "--header",
        dest="headers",
        action="append",
        default=[],
        help='header line such as "Accept: application/json", may be repeated',
    )
    parser.add_argument(
        "--max-redirects",
        type=int,
        default=5,
        help="Maximum number of redirects to follow. Default is 5.",
    )
    parser.add_argument(
        "--verify-tls", action="store_true", help="verify tls certificates"
    )
    parser.add_argument("--debug", action="store_true", help="enable debug logging")
    args = parser.parse_args(argv)
    try:
        args.params = parse_params(args.params)
    except argparse.ArgumentTypeError as e:
        parser.error(str(e))
    return args


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    loglevel = "DEBUG" if args.debug else os.environ.get("LOGLEVEL", "WARNING").upper()
    setup_logging(loglevel)

    settings = ClientSettings(
        host=args.host,
        headers=args.headers,
        max_redirects=args.max_redirects,
        verify_tls=args.verify_tls,
    )
    try:
        client = HttpClient.from_settings(settings)
    except MissingTransportError as e:
        log.critical(str(e))
        return e.exit_code

    body = client.perform(args.verb, args.route, args.params)
    if client.last_error() is not None:
        return 1
    log.info(f"{args.verb} {args.route}: {client.last_status()}")
    if body is not None:
        sys.stdout.write(body)
    return 0
