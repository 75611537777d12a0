"""Tests for PublishConfig validation and representation."""

from __future__ import annotations

import pytest

from vaultpub.config import DEFAULT_NOTICE_TIMEOUT_MS, PublishConfig
from vaultpub.errors import ErrorCode, VaultpubConfigError


class TestDefaults:
    def test_defaults(self):
        config = PublishConfig()
        assert config.attachment_location == "assets"
        assert config.image_alt_text is True
        assert config.delete_attachments is False
        assert config.replace_original_doc is False
        assert config.ignore_properties is False
        assert config.notice_timeout_ms == DEFAULT_NOTICE_TIMEOUT_MS == 10_000


class TestValidation:
    @pytest.mark.parametrize("url", [
        "https://img.example.com/upload",
        "http://localhost:36677/upload",
        "http://127.0.0.1/upload",
    ])
    def test_accepted_upload_urls(self, url):
        assert PublishConfig(upload_url=url).upload_url == url

    def test_insecure_remote_http_rejected(self):
        with pytest.raises(VaultpubConfigError, match="insecure HTTP") as exc_info:
            PublishConfig(upload_url="http://img.example.com/upload")
        assert exc_info.value.code == ErrorCode.CONFIG_ERROR
        assert exc_info.value.context["field"] == "upload_url"

    def test_non_http_scheme_rejected(self):
        with pytest.raises(VaultpubConfigError):
            PublishConfig(upload_url="ftp://img.example.com/upload")

    @pytest.mark.parametrize("kwargs", [
        {"upload_field": ""},
        {"response_url_key": ""},
        {"timeout_seconds": 0},
        {"timeout_seconds": -1.5},
        {"notice_timeout_ms": -1},
    ])
    def test_invalid_values(self, kwargs):
        with pytest.raises(VaultpubConfigError):
            PublishConfig(**kwargs)

    def test_no_timeout_allowed(self):
        assert PublishConfig(timeout_seconds=None).timeout_seconds is None


class TestRepr:
    def test_token_masked(self):
        text = repr(PublishConfig(upload_token="supersecret1234"))
        assert "supersecret" not in text
        assert "upload_token='...1234'" in text

    def test_short_token_fully_masked(self):
        assert "upload_token='****'" in repr(PublishConfig(upload_token="abc"))
