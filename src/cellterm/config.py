"""Tunable limits and timeouts of the input decoder."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, fields, replace
from typing import Mapping

logger = logging.getLogger(__name__)

ENV_PREFIX = "CELLTERM_"


@dataclass(frozen=True, slots=True)
class DecoderConfig:
    """
    Decoder settings.

    escape_timeout: seconds to wait after ESC before reporting a lone
        Escape key. Terminals send escape sequences as one burst, so a
        few tens of milliseconds is enough and not noticeable as lag.
    max_sequence_bytes: bytes read for one escape sequence before giving up.
    max_paste_bytes: bracketed paste payload limit; the excess is dropped.
    paste_timeout: seconds without input after which an unterminated
        paste is delivered as is.
    ctrl_c_quits: report byte 0x03 as a Quit event instead of Ctrl+C.
    """
    escape_timeout: float = 0.02
    max_sequence_bytes: int = 20
    max_paste_bytes: int = 1 << 20
    paste_timeout: float = 0.5
    ctrl_c_quits: bool = True

    def with_escape_timeout(self, seconds: float) -> DecoderConfig:
        return replace(self, escape_timeout=max(0.0, seconds))

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> DecoderConfig:
        """
        Read overrides from the environment.

        CELLTERM_ESCAPE_TIMEOUT_MS, CELLTERM_PASTE_TIMEOUT_MS,
        CELLTERM_MAX_SEQUENCE_BYTES, CELLTERM_MAX_PASTE_BYTES and
        CELLTERM_CTRL_C_QUITS. Malformed values are ignored.
        """
        env = os.environ if environ is None else environ
        config = cls()
        changes: dict[str, object] = {}

        for name, key, scale in (
            ("escape_timeout", "ESCAPE_TIMEOUT_MS", 1000.0),
            ("paste_timeout", "PASTE_TIMEOUT_MS", 1000.0),
        ):
            raw = env.get(ENV_PREFIX + key)
            if raw is None:
                continue
            try:
                value = float(raw) / scale
            except ValueError:
                logger.warning("ignoring %s%s=%r", ENV_PREFIX, key, raw)
                continue
            if value >= 0:
                changes[name] = value

        for name, key in (
            ("max_sequence_bytes", "MAX_SEQUENCE_BYTES"),
            ("max_paste_bytes", "MAX_PASTE_BYTES"),
        ):
            raw = env.get(ENV_PREFIX + key)
            if raw is None:
                continue
            try:
                count = int(raw)
            except ValueError:
                logger.warning("ignoring %s%s=%r", ENV_PREFIX, key, raw)
                continue
            if count > 0:
                changes[name] = count

        raw = env.get(ENV_PREFIX + "CTRL_C_QUITS")
        if raw is not None:
            changes["ctrl_c_quits"] = raw.strip().lower() not in ("0", "false", "no", "off")

        return replace(config, **changes)

    def as_dict(self) -> dict[str, object]:
        return {f.name: getattr(self, f.name) for f in fields(self)}
