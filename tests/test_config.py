"""Tests for AutoTypingsOptions and environment loading."""

from __future__ import annotations

import os
from unittest.mock import patch

import pydantic
import pytest

from autotypings.core.config import DEFAULT_REGISTRY, AutoTypingsOptions


class TestDefaults:
    def test_defaults(self):
        options = AutoTypingsOptions()
        assert options.registry == DEFAULT_REGISTRY
        assert options.max_concurrency == 5
        assert options.request_timeout == 30.0
        assert options.verbose is False
        assert options.enabled_builtins == {"typescript", "node"}

    def test_builtins_default_not_shared(self):
        first = AutoTypingsOptions()
        first.builtins["deno"] = True
        assert AutoTypingsOptions().builtins["deno"] is False


class TestValidation:
    @pytest.mark.parametrize(
        "value, expected",
        [
            ("https://registry.npmmirror.com/", "https://registry.npmmirror.com"),
            ("  http://localhost:4873  ", "http://localhost:4873"),
        ],
    )
    def test_registry_normalized(self, value, expected):
        assert AutoTypingsOptions(registry=value).registry == expected

    @pytest.mark.parametrize("value", ["", "registry.npmjs.org", "ftp://mirror.test", "https://"])
    def test_registry_rejected(self, value):
        with pytest.raises(pydantic.ValidationError):
            AutoTypingsOptions(registry=value)

    @pytest.mark.parametrize("value", [1, 20])
    def test_concurrency_bounds_accepted(self, value):
        assert AutoTypingsOptions(max_concurrency=value).max_concurrency == value

    @pytest.mark.parametrize("value", [0, 21, -3])
    def test_concurrency_out_of_range(self, value):
        with pytest.raises(pydantic.ValidationError):
            AutoTypingsOptions(max_concurrency=value)

    def test_timeout_must_be_positive(self):
        with pytest.raises(pydantic.ValidationError):
            AutoTypingsOptions(request_timeout=0)


class TestFromEnv:
    def test_empty_environment(self):
        with patch.dict(os.environ, {}, clear=True):
            assert AutoTypingsOptions.from_env() == AutoTypingsOptions()

    def test_reads_variables(self):
        env = {
            "AUTOTYPINGS_REGISTRY": "https://mirror.test/npm/",
            "AUTOTYPINGS_MAX_CONCURRENCY": "8",
            "AUTOTYPINGS_REQUEST_TIMEOUT": "2.5",
            "AUTOTYPINGS_VERBOSE": "yes",
        }
        with patch.dict(os.environ, env, clear=True):
            options = AutoTypingsOptions.from_env()
        assert options.registry == "https://mirror.test/npm"
        assert options.max_concurrency == 8
        assert options.request_timeout == 2.5
        assert options.verbose is True

    def test_builtins_list(self):
        with patch.dict(os.environ, {"AUTOTYPINGS_BUILTINS": "deno, bun"}, clear=True):
            options = AutoTypingsOptions.from_env()
        assert options.enabled_builtins == {"deno", "bun"}
        assert options.builtins["node"] is False

    def test_empty_builtins_disables_all(self):
        with patch.dict(os.environ, {"AUTOTYPINGS_BUILTINS": ""}, clear=True):
            assert AutoTypingsOptions.from_env().enabled_builtins == set()

    def test_overrides_win(self):
        with patch.dict(os.environ, {"AUTOTYPINGS_MAX_CONCURRENCY": "8"}, clear=True):
            options = AutoTypingsOptions.from_env(max_concurrency=2, registry=None)
        assert options.max_concurrency == 2
        assert options.registry == DEFAULT_REGISTRY

    def test_invalid_value_raises(self):
        with patch.dict(os.environ, {"AUTOTYPINGS_MAX_CONCURRENCY": "50"}, clear=True):
            with pytest.raises(pydantic.ValidationError):
                AutoTypingsOptions.from_env()
