"""Tests for the govindex command line interface."""

from pathlib import Path

import orjson
import pytest
from click.testing import CliRunner

from govindex.cli.main import cli

BLOCK = {"number": 3, "timestamp": 1_000, "transaction_hash": "0x" + "ab" * 32}
ALICE = "0x" + "a1" * 20


@pytest.fixture
def events_file(tmp_path: Path) -> Path:
    records = [
        {
            "name": "Transfer",
            "params": {"from": "0x" + "00" * 20, "to": ALICE, "value": 250},
            "block": BLOCK,
        },
        {
            "name": "ProposalCreated",
            "params": {
                "proposalId": 77,
                "proposer": ALICE,
                "targets": [],
                "values": [],
                "signatures": [],
                "calldatas": [],
                "voteStart": 5,
                "voteEnd": 20,
                "description": "# Hello governance",
            },
            "block": BLOCK,
        },
    ]
    path = tmp_path / "events.jsonl"
    path.write_bytes(b"\n".join(orjson.dumps(record) for record in records))
    return path


class TestReplayCommand:
    def test_replay_into_memory(self, events_file: Path):
        result = CliRunner().invoke(
            cli, ["--log-level", "ERROR", "replay", str(events_file)]
        )
        assert result.exit_code == 0, result.output
        assert "Replay Summary" in result.output
        assert "250" in result.output

    def test_replay_then_show(self, events_file: Path, tmp_path: Path):
        db = tmp_path / "index.sqlite"
        runner = CliRunner()
        replayed = runner.invoke(
            cli, ["--log-level", "ERROR", "replay", str(events_file), "--db", str(db)]
        )
        assert replayed.exit_code == 0, replayed.output

        shown = runner.invoke(
            cli,
            [
                "--log-level",
                "ERROR",
                "show",
                "proposal",
                "77",
                "--db",
                str(db),
                "--output",
                "json",
            ],
        )
        assert shown.exit_code == 0, shown.output
        document = orjson.loads(shown.output)
        assert document["title"] == "Hello governance"
        assert document["state"] == "Pending"
        assert document["clock_mode"] == "blocknumber"

        governance = runner.invoke(
            cli,
            ["--log-level", "ERROR", "show", "governance", "--db", str(db), "-o", "json"],
        )
        assert governance.exit_code == 0, governance.output
        data = orjson.loads(governance.output)
        assert data["proposal_count"] == 1
        assert data["total_supply"] == 250

    def test_missing_proposal(self, events_file: Path, tmp_path: Path):
        db = tmp_path / "index.sqlite"
        runner = CliRunner()
        runner.invoke(
            cli, ["--log-level", "ERROR", "replay", str(events_file), "--db", str(db)]
        )
        result = runner.invoke(
            cli, ["--log-level", "ERROR", "show", "proposal", "1", "--db", str(db)]
        )
        assert result.exit_code == 1
        assert "not found" in result.output

    def test_invalid_event_file_fails(self, tmp_path: Path):
        path = tmp_path / "bad.jsonl"
        path.write_text('{"name": "Nope", "params": {}, "block": {}}\n')
        result = CliRunner().invoke(
            cli, ["--log-level", "CRITICAL", "replay", str(path)]
        )
        assert result.exit_code == 1
        assert "Replay halted" in result.output

    def test_negative_proposal_id_is_rejected(self, events_file: Path, tmp_path: Path):
        db = tmp_path / "index.sqlite"
        runner = CliRunner()
        runner.invoke(
            cli, ["--log-level", "ERROR", "replay", str(events_file), "--db", str(db)]
        )
        result = runner.invoke(
            cli,
            ["--log-level", "ERROR", "show", "proposal", "--db", str(db), "--", "-1"],
        )
        assert result.exit_code == 2
        assert "-1" in result.output
