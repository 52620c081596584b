"""Tests for DecoderConfig."""

import logging

import pytest

from cellterm.config import DecoderConfig


class TestDecoderConfig:

    def test_defaults(self) -> None:
        config = DecoderConfig()
        assert config.escape_timeout == 0.02
        assert config.max_sequence_bytes == 20
        assert config.max_paste_bytes == 1 << 20
        assert config.ctrl_c_quits

    def test_from_env(self) -> None:
        config = DecoderConfig.from_env({
            "CELLTERM_ESCAPE_TIMEOUT_MS": "50",
            "CELLTERM_PASTE_TIMEOUT_MS": "250",
            "CELLTERM_MAX_SEQUENCE_BYTES": "32",
            "CELLTERM_MAX_PASTE_BYTES": "4096",
            "CELLTERM_CTRL_C_QUITS": "off",
        })
        assert config.escape_timeout == pytest.approx(0.05)
        assert config.paste_timeout == pytest.approx(0.25)
        assert config.max_sequence_bytes == 32
        assert config.max_paste_bytes == 4096
        assert not config.ctrl_c_quits

    def test_empty_env(self) -> None:
        assert DecoderConfig.from_env({}) == DecoderConfig()

    def test_malformed_values_ignored(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING, logger="cellterm.config"):
            config = DecoderConfig.from_env({
                "CELLTERM_ESCAPE_TIMEOUT_MS": "soon",
                "CELLTERM_MAX_PASTE_BYTES": "lots",
            })
        assert config == DecoderConfig()
        assert "CELLTERM_ESCAPE_TIMEOUT_MS" in caplog.text

    def test_out_of_range_values_ignored(self) -> None:
        config = DecoderConfig.from_env({
            "CELLTERM_ESCAPE_TIMEOUT_MS": "-5",
            "CELLTERM_MAX_SEQUENCE_BYTES": "0",
        })
        assert config == DecoderConfig()

    def test_ctrl_c_truthy(self) -> None:
        assert DecoderConfig.from_env({"CELLTERM_CTRL_C_QUITS": "yes"}).ctrl_c_quits
        assert not DecoderConfig.from_env({"CELLTERM_CTRL_C_QUITS": " False "}).ctrl_c_quits

    def test_with_escape_timeout(self) -> None:
        assert DecoderConfig().with_escape_timeout(0.1).escape_timeout == 0.1
        assert DecoderConfig().with_escape_timeout(-1).escape_timeout == 0.0

    def test_as_dict(self) -> None:
        data = DecoderConfig().as_dict()
        assert data["max_sequence_bytes"] == 20
        assert set(data) == {
            "escape_timeout", "max_sequence_bytes", "max_paste_bytes", "paste_timeout", "ctrl_c_quits",
        }
