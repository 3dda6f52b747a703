#!/usr/bin/env python3
from __future__ import annotations

import io
from dataclasses import dataclass
from typing import Any

import segno

from ..core.models import RecoveryLevel


class QrEncodeError(ValueError):
    """Raised when content cannot be encoded at the requested recovery level."""

    def __init__(self, content: str, error: str, reason: str) -> None:
        preview = content if len(content) <= 40 else f"{content[:37]}..."
        super().__init__(f"cannot encode {preview!r} at error level {error}: {reason}")
        self.content = content
        self.error = error


@dataclass(frozen=True)
class QrConfig:
    error: str = "M"
    scale: int = 10
    border: int = 0
    boost_error: bool = False

    @classmethod
    def for_recovery_level(cls, level: RecoveryLevel, **overrides: Any) -> QrConfig:
        return cls(error=level.segno_error, **overrides)


def make_qr(
    data: str,
    *,
    error: str = "M",
    boost_error: bool = False,
) -> Any:
    try:
        return segno.make_qr(data, error=error, boost_error=boost_error)
    except ValueError as exc:
        # segno.DataOverflowError is a ValueError subclass
        raise QrEncodeError(data, error, str(exc)) from exc


def qr_bytes(
    data: str,
    *,
    error: str = "M",
    scale: int = 10,
    border: int = 0,
    boost_error: bool = False,
) -> bytes:
    if not data:
        raise QrEncodeError(data, error, "content is empty")
    if scale <= 0:
        raise ValueError(f"scale must be positive (got {scale})")
    if border < 0:
        raise ValueError(f"border cannot be negative (got {border})")
    qr = make_qr(data, error=error, boost_error=boost_error)
    buf = io.BytesIO()
    qr.save(buf, kind="png", scale=scale, border=border)
    return buf.getvalue()


def qr_kwargs(config: QrConfig) -> dict[str, Any]:
    return vars(config)
