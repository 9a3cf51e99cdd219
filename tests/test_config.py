"""
UAS Bot - Configuration Tests
=============================

Environment parsing, validation and permission helpers.
"""

import pytest

from src.core.config import (
    ConfigValidationError,
    _parse_int,
    _parse_int_optional,
    _parse_int_set,
    _parse_int_with_default,
    _validate_url,
    check_admin_permission,
    check_developer_permission,
    check_staff_permission,
    get_staff_role,
    is_admin,
    is_developer,
    is_staff,
    load_config,
)
from tests.conftest import DEVELOPER_ID, make_interaction, make_member, sent_embed


# =============================================================================
# Parsers
# =============================================================================

class TestParsers:
    """Tests for environment value parsers."""

    def test_parse_int(self):
        assert _parse_int("42", "X") == 42

    def test_parse_int_missing(self):
        with pytest.raises(ConfigValidationError, match="Missing required: X"):
            _parse_int("", "X")

    def test_parse_int_invalid(self):
        with pytest.raises(ConfigValidationError, match="Invalid integer"):
            _parse_int("abc", "X")

    def test_parse_int_optional(self):
        assert _parse_int_optional("7") == 7
        assert _parse_int_optional("nope") is None
        assert _parse_int_optional(None) is None

    def test_parse_int_set_skips_invalid(self):
        assert _parse_int_set("1, 2,x,,3") == {1, 2, 3}
        assert _parse_int_set(None) == set()

    def test_parse_int_with_default_clamps(self):
        assert _parse_int_with_default(None, 5, "X") == 5
        assert _parse_int_with_default("0", 5, "X", min_val=1) == 1
        assert _parse_int_with_default("99", 5, "X", max_val=10) == 10
        assert _parse_int_with_default("bad", 5, "X") == 5

    def test_validate_url(self):
        assert _validate_url("https://casino.example/", "X") == "https://casino.example"
        assert _validate_url("ftp://casino.example", "X") is None
        assert _validate_url(None, "X") is None


# =============================================================================
# Loading
# =============================================================================

class TestLoadConfig:
    """Tests for load_config()."""

    def test_missing_required(self, monkeypatch):
        monkeypatch.delenv("DISCORD_TOKEN", raising=False)
        monkeypatch.delenv("DEVELOPER_ID", raising=False)
        with pytest.raises(ConfigValidationError) as exc:
            load_config()
        assert "DISCORD_TOKEN" in str(exc.value)
        assert "DEVELOPER_ID" in str(exc.value)

    def test_defaults(self, monkeypatch):
        monkeypatch.setenv("DISCORD_TOKEN", "token")
        monkeypatch.setenv("DEVELOPER_ID", "1")
        for var in ("ATIVE_CASINO_BASE_URL", "ADMIN_PAY_RATE", "MOD_PAY_RATE", "DEVELOPER_IDS"):
            monkeypatch.delenv(var, raising=False)

        config = load_config()

        assert config.casino_base_url == "http://localhost:25565"
        assert config.admin_pay_rate == 8000
        assert config.mod_pay_rate == 4200
        assert config.all_developer_ids == {1}

    def test_overrides(self, monkeypatch):
        monkeypatch.setenv("DISCORD_TOKEN", "token")
        monkeypatch.setenv("DEVELOPER_ID", "1")
        monkeypatch.setenv("DEVELOPER_IDS", "2,3")
        monkeypatch.setenv("ATIVE_CASINO_BASE_URL", "http://casino:9000/")
        monkeypatch.setenv("ATIVE_CASINO_TIMEOUT", "500")

        config = load_config()

        assert config.all_developer_ids == {1, 2, 3}
        assert config.casino_base_url == "http://casino:9000"
        assert config.casino_timeout == 60


# =============================================================================
# Permissions
# =============================================================================

class TestPermissions:
    """Tests for permission helpers."""

    def test_developer_is_admin(self, mock_developer):
        assert is_developer(DEVELOPER_ID)
        assert is_admin(mock_developer)

    def test_administrator_permission(self, mock_admin, mock_discord_member):
        assert is_admin(mock_admin)
        assert not is_admin(mock_discord_member)
        assert not is_admin(None)

    def test_staff_role(self, mock_admin, mock_discord_member):
        assert get_staff_role(mock_admin) == "admin"
        assert get_staff_role(mock_discord_member) is None
        assert not is_staff(mock_discord_member)

    @pytest.mark.asyncio
    async def test_admin_check_denies_with_embed(self, mock_interaction):
        assert await check_admin_permission(mock_interaction) is False

        embed = sent_embed(mock_interaction)
        assert embed.title == "❌ Access Denied"
        assert mock_interaction.response.send_message.await_args.kwargs["ephemeral"] is True

    @pytest.mark.asyncio
    async def test_admin_check_allows(self, mock_admin, mock_discord_guild):
        interaction = make_interaction(mock_admin, mock_discord_guild)
        assert await check_admin_permission(interaction) is True
        interaction.response.send_message.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_staff_check_custom_description(self, mock_interaction):
        assert await check_staff_permission(mock_interaction, "Staff only.") is False
        assert sent_embed(mock_interaction).description == "Staff only."

    @pytest.mark.asyncio
    async def test_developer_check(self, mock_admin, mock_developer):
        assert await check_developer_permission(make_interaction(mock_admin)) is False
        assert await check_developer_permission(make_interaction(mock_developer)) is True
