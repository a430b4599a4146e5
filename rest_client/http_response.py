from dataclasses import dataclass


@dataclass(frozen=True)
class HttpResponse:
    status: int | None
    body: str | None
    # set when no response was obtained at all
    error: str | None = None
