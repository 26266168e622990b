"""Error types raised by the normalization and projection layers."""

from __future__ import annotations


class UnparseableGeometry(ValueError):
    """
    Raised inside the geometry normalizer when a branch cannot read a value.

    Never escapes ``normalize``: it is caught there and turned into
    "no location".
    """

    def __init__(self, raw: object, reason: str) -> None:
        self.raw = raw
        self.reason = reason
        super().__init__(f"Unparseable geometry ({reason}): {raw!r}")


class InvalidEvent(ValueError):
    """
    An event is missing a field every projection needs (title or timestamp).

    The route layer is expected to translate this into a 400 response.
    """

    def __init__(
        self,
        message: str,
        event_id: str | None = None,
        missing: tuple[str, ...] = (),
    ) -> None:
        self.event_id = event_id
        self.missing = missing
        super().__init__(message)
