from __future__ import annotations


class InvalidKeyLength(ValueError):
    """Raised when a SipHash key is not exactly 16 bytes long."""

    def __init__(self, length: int, expected: int = 16):
        self.length = length
        self.expected = expected
        super().__init__(
            f"SipHash24 key must be exactly {expected} bytes, got {length}"
        )


__all__ = ["InvalidKeyLength"]
