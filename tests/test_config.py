"""Tests for schemarpc.config — ClientConfig and ServerConfig."""

import dataclasses
import logging

import pytest

from schemarpc.config import ClientConfig, ServerConfig
from schemarpc.fetch import HttpxFetch, RequestInit
from schemarpc.transformers import JSON


class TestClientConfig:
    def test_defaults(self) -> None:
        cfg = ClientConfig()
        assert cfg.entrypoint_url == ""
        assert cfg.transformer is JSON
        assert cfg.fetch_defaults == RequestInit()
        assert isinstance(cfg.fetch, HttpxFetch)
        assert cfg.interceptor is None
        assert cfg.logger is None

    def test_trailing_slash_stripped(self) -> None:
        assert ClientConfig(entrypoint_url="http://api.test/rpc/").entrypoint_url == "http://api.test/rpc"

    def test_replace_keeps_normalization(self) -> None:
        cfg = dataclasses.replace(ClientConfig(), entrypoint_url="http://x/")
        assert cfg.entrypoint_url == "http://x"

    def test_frozen(self) -> None:
        with pytest.raises(dataclasses.FrozenInstanceError):
            ClientConfig().entrypoint_url = "x"  # type: ignore[misc]


class TestServerConfig:
    def test_defaults(self) -> None:
        cfg = ServerConfig()
        assert cfg.transformer is JSON
        assert cfg.metadata_resolver is None
        assert cfg.strict is True
        assert cfg.debug is False

    def test_override(self) -> None:
        log = logging.getLogger("app.rpc")
        cfg = ServerConfig(strict=False, debug=True, logger=log)
        assert cfg.strict is False
        assert cfg.logger is log


class TestRequestInit:
    def test_merge_headers_and_fields(self) -> None:
        base = RequestInit(headers={"A": "1", "B": "2"}, body="base", timeout=5.0)
        merged = base.merged(RequestInit(headers={"b": "3"}, ctx="c"))
        assert dict(merged.headers) == {"a": "1", "b": "3"}
        assert merged.body == "base"
        assert merged.timeout == 5.0
        assert merged.ctx == "c"

    def test_merge_none(self) -> None:
        base = RequestInit()
        assert base.merged(None) is base

    def test_merge_keeps_default_flags(self) -> None:
        base = RequestInit(skip_interceptor=True, ctx="default")
        merged = base.merged(RequestInit(headers={"x": "1"}))
        assert merged.skip_interceptor is True
        assert merged.ctx == "default"
