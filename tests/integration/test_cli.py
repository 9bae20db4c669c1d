"""
Integration tests for the sequestre CLI (offline commands).

Usage:
    pytest tests/integration/test_cli.py
"""

import pytest
from click.testing import CliRunner
from solders.keypair import Keypair
from solders.pubkey import Pubkey

from sequestre.cli.main import cli, parse_release_at
from sequestre.config.settings import reset_settings
from sequestre.infrastructure.blockchain.address_derivation import (
    derive_escrow_address,
)
from sequestre.utils.timestamps import local_datetime_to_unix_seconds

PROGRAM_ID = "TokenkegQfeZyiNwAJbNbGKPFXCWuBvf9Ss623VQ5DA"
MINT = "4zMMC9srt5Ri5X14GAgXhaHii3GnPAEERYPJgZJDncDU"
INITIALIZER = str(Keypair().pubkey())
BENEFICIARY = str(Keypair().pubkey())


@pytest.fixture(autouse=True)
def cli_env(tmp_path, monkeypatch):
    """Run the CLI against an empty config directory plus env overrides."""
    monkeypatch.setenv("SEQUESTRE_CONFIG_DIR", str(tmp_path))
    monkeypatch.setenv("SEQUESTRE_PROGRAM_ID", PROGRAM_ID)
    monkeypatch.setenv("SEQUESTRE_USDC_MINT", MINT)
    monkeypatch.setenv("SEQUESTRE_VERBOSE", "0")
    monkeypatch.setenv("SEQUESTRE_METRICS_ENABLED", "false")
    reset_settings()
    yield
    reset_settings()


class TestParseReleaseAt:
    def test_unix_seconds(self):
        assert parse_release_at("1782864000") == 1_782_864_000

    def test_local_datetime(self):
        assert parse_release_at("2026-07-01T11:00") == local_datetime_to_unix_seconds(
            "2026-07-01T11:00"
        )


class TestCli:
    def test_to_base(self):
        result = CliRunner().invoke(cli, ["to-base", "120.5", "--decimals", "2"])

        assert result.exit_code == 0
        assert result.output.strip() == "12050 (120.5)"

    def test_to_base_uses_configured_decimals(self):
        result = CliRunner().invoke(cli, ["to-base", "1.9999999"])

        assert result.exit_code == 0
        assert result.output.startswith("1999999 ")

    def test_derive(self):
        result = CliRunner().invoke(
            cli,
            [
                "derive",
                "--initializer", INITIALIZER,
                "--beneficiary", BENEFICIARY,
                "--release-at", "1782864000",
            ],
        )

        expected, bump = derive_escrow_address(
            Pubkey.from_string(INITIALIZER),
            Pubkey.from_string(BENEFICIARY),
            Pubkey.from_string(MINT),
            1_782_864_000,
            Pubkey.from_string(PROGRAM_ID),
        )
        assert result.exit_code == 0
        assert f"{expected} (bump {bump})" in result.output

    def test_derive_invalid_address(self):
        result = CliRunner().invoke(
            cli,
            [
                "derive",
                "--initializer", "nope",
                "--beneficiary", BENEFICIARY,
                "--release-at", "1782864000",
            ],
        )

        assert result.exit_code == 1

    def test_bad_release_at(self):
        result = CliRunner().invoke(
            cli,
            [
                "derive",
                "--initializer", INITIALIZER,
                "--beneficiary", BENEFICIARY,
                "--release-at", "someday",
            ],
        )

        assert result.exit_code == 2

    def test_derive_off_curve_beneficiary(self):
        """Test a program-owned beneficiary still derives escrow and vault."""
        pda, _ = Pubkey.find_program_address([b"treasury"], Pubkey.from_string(PROGRAM_ID))

        result = CliRunner().invoke(
            cli,
            [
                "derive",
                "--initializer", INITIALIZER,
                "--beneficiary", str(pda),
                "--release-at", "1782864000",
            ],
        )

        assert result.exit_code == 0
        assert "none (off-curve owner)" in result.output

    def test_to_base_rejects_digit_separators(self):
        result = CliRunner().invoke(cli, ["to-base", "1_000"])

        assert result.exit_code == 2
