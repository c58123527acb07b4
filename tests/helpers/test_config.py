"""Tests for configuration and environment variable helpers."""

import os

import pytest

from typing import TYPE_CHECKING

from src.helpers.config import (
    get_int_env,
    get_node_rpc_url,
    get_optional_env,
    get_server_address,
)


if TYPE_CHECKING:
    from collections.abc import Generator


ENV_KEYS = (
    "TEST_KEY",
    "CKB_RPC_HOST",
    "CKB_RPC_PORT",
    "DASHBOARD_HOST",
    "DASHBOARD_PORT",
)


@pytest.fixture
def clean_env() -> "Generator[None]":
    """Clean environment variables before and after test."""
    saved_env = {key: os.environ.get(key) for key in ENV_KEYS}

    for key in saved_env:
        if key in os.environ:
            del os.environ[key]

    yield

    for key, value in saved_env.items():
        if value is not None:
            os.environ[key] = value
        elif key in os.environ:
            del os.environ[key]


@pytest.mark.usefixtures("clean_env")
class TestEnvHelpers:
    """Tests for generic environment helpers."""

    def test_optional_default(self) -> None:
        """Test that get_optional_env falls back to the default."""
        assert get_optional_env("TEST_KEY", "fallback") == "fallback"
        assert get_optional_env("TEST_KEY") is None

    def test_int_env_parses(self) -> None:
        """Test integer parsing."""
        os.environ["TEST_KEY"] = "8200"
        assert get_int_env("TEST_KEY", 1) == 8200

    def test_int_env_default_when_unset(self) -> None:
        """Test integer default."""
        assert get_int_env("TEST_KEY", 42) == 42

    def test_int_env_invalid_raises(self) -> None:
        """Test that a non-integer value raises ValueError."""
        os.environ["TEST_KEY"] = "eighty"
        with pytest.raises(ValueError, match="TEST_KEY must be an integer"):
            get_int_env("TEST_KEY", 1)


@pytest.mark.usefixtures("clean_env")
class TestNodeRpcUrl:
    """Tests for get_node_rpc_url."""

    def test_defaults(self) -> None:
        """Test the default local node URL."""
        assert get_node_rpc_url() == "http://127.0.0.1:8114/"

    def test_from_environment(self) -> None:
        """Test host and port from environment."""
        os.environ["CKB_RPC_HOST"] = "192.168.68.87"
        os.environ["CKB_RPC_PORT"] = "8115"
        assert get_node_rpc_url() == "http://192.168.68.87:8115/"

    def test_explicit_url_wins(self) -> None:
        """Test that an explicit URL overrides the environment."""
        os.environ["CKB_RPC_HOST"] = "10.0.0.1"
        assert get_node_rpc_url("http://node:9000/") == "http://node:9000/"

    def test_invalid_port_raises(self) -> None:
        """Test that a non-integer port is rejected."""
        os.environ["CKB_RPC_PORT"] = "ckb"
        with pytest.raises(ValueError, match="CKB_RPC_PORT"):
            get_node_rpc_url()


@pytest.mark.usefixtures("clean_env")
class TestServerAddress:
    """Tests for get_server_address."""

    def test_defaults(self) -> None:
        """Test the default bind address."""
        assert get_server_address() == ("0.0.0.0", 8080)

    def test_from_environment(self) -> None:
        """Test bind address from environment."""
        os.environ["DASHBOARD_HOST"] = "127.0.0.1"
        os.environ["DASHBOARD_PORT"] = "9090"
        assert get_server_address() == ("127.0.0.1", 9090)
