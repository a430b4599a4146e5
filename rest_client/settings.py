from dataclasses import dataclass, field


@dataclass
class ClientSettings:
    host: str | None = None
    headers: list[str] = field(default_factory=list)  # "Name: value" lines
    max_redirects: int = 5
    verify_tls: bool = False
