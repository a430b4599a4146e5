class MissingTransportError(Exception):
    """The runtime cannot speak HTTPS, so no request can be sent."""

    exit_code: int = 187

    def __init__(self, missing: str) -> None:
        super().__init__(
            f"Your environment does not satisfy this library's requirements. Missing dependency: {missing}"
        )
        self.missing = missing
