"""Tests for the asset-lineage CLI commands."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner

from asset_lineage.cli.main import cli
from asset_lineage.cli.replay import read_notifications
from asset_lineage.cli.utils import ExitCode
from asset_lineage.errors import ConfigurationError
from asset_lineage.listener.types import InstanceEventType

CONFIG_YAML = """\
server_name: lineage-server
server_user_id: lineage-user
lineage_types: [Process, RelationalTable]
max_workers: 2
transport:
  type: memory
logging:
  level: CRITICAL
"""

CONTEXTS_YAML = """\
process_contexts:
  p1:
    ProcessInput:
      - from_vertex: {guid: p1, type_name: Process}
        to_vertex: {guid: t1, type_name: RelationalTable}
        relationship_guid: r1
"""


def _notification(event_type: str, guid: str, type_name: str, origin: str = "repoA") -> str:
    return json.dumps(
        {
            "event_type": event_type,
            "originator": {"metadata_collection_id": origin},
            "entity": {"guid": guid, "type_name": type_name, "status": "Active"},
        }
    )


def _payloads(output: str) -> list[dict[str, Any]]:
    payloads = []
    for line in output.splitlines():
        if line.startswith("{") and "assetLineageEventType" in line:
            payloads.append(json.loads(line))
    return payloads


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    path = tmp_path / "asset-lineage.yaml"
    path.write_text(CONFIG_YAML)
    return path


@pytest.fixture
def contexts_file(tmp_path: Path) -> Path:
    path = tmp_path / "contexts.yaml"
    path.write_text(CONTEXTS_YAML)
    return path


class TestCliGroup:
    """Root group help and version."""

    def test_help_lists_commands(self) -> None:
        result = CliRunner().invoke(cli, ["--help"])

        assert result.exit_code == 0
        assert "validate-config" in result.output
        assert "replay" in result.output

    def test_version(self) -> None:
        result = CliRunner().invoke(cli, ["--version"])

        assert result.exit_code == 0
        assert "asset-lineage" in result.output


class TestValidateConfig:
    """validate-config command."""

    def test_valid(self, config_file: Path) -> None:
        result = CliRunner().invoke(cli, ["validate-config", "--config", str(config_file)])

        assert result.exit_code == 0
        assert f"Configuration valid: {config_file}" in result.output
        assert "transport: memory" in result.output
        assert "lineage types: 2" in result.output

    def test_missing_file(self, tmp_path: Path) -> None:
        result = CliRunner().invoke(
            cli, ["validate-config", "--config", str(tmp_path / "missing.yaml")]
        )

        assert result.exit_code == ExitCode.FILE_NOT_FOUND
        assert "File not found" in result.output

    def test_invalid(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.yaml"
        path.write_text("server_name: s\ntransport:\n  type: http\n")

        result = CliRunner().invoke(cli, ["validate-config", "--config", str(path)])

        assert result.exit_code == ExitCode.VALIDATION_ERROR
        assert "server_user_id" in result.output

    def test_unsupported_http_url(self, tmp_path: Path) -> None:
        path = tmp_path / "ftp.yaml"
        path.write_text(
            "server_name: s\nserver_user_id: u\ntransport:\n  type: http\n  url: ftp://x\n"
        )

        result = CliRunner().invoke(cli, ["validate-config", "--config", str(path)])

        assert result.exit_code == ExitCode.VALIDATION_ERROR
        assert "URL scheme must be one of" in result.output

    def test_requires_config_option(self) -> None:
        result = CliRunner().invoke(cli, ["validate-config"])

        assert result.exit_code == ExitCode.USAGE_ERROR


class TestReadNotifications:
    """JSON Lines parsing."""

    def test_skips_blank_lines(self, tmp_path: Path) -> None:
        path = tmp_path / "events.jsonl"
        path.write_text(
            _notification("NEW_ENTITY_EVENT", "p1", "Process")
            + "\n\n"
            + _notification("DELETED_ENTITY_EVENT", "t1", "RelationalTable")
            + "\n"
        )

        notifications = read_notifications(path)

        assert [n.event_type for n in notifications] == [
            InstanceEventType.NEW_ENTITY_EVENT,
            InstanceEventType.DELETED_ENTITY_EVENT,
        ]

    def test_unknown_upstream_fields_are_ignored(self, tmp_path: Path) -> None:
        record = json.loads(_notification("NEW_ENTITY_EVENT", "p1", "Process"))
        record["sequence"] = 42
        record["originator"]["event_origin"] = "cohort"
        record["entity"]["instance_provenance"] = "LOCAL_COHORT"
        path = tmp_path / "events.jsonl"
        path.write_text(json.dumps(record) + "\n")

        (notification,) = read_notifications(path)

        assert notification.entity is not None
        assert notification.entity.guid == "p1"
        assert notification.originator is not None
        assert notification.originator.metadata_collection_id == "repoA"

    def test_invalid_line_reports_line_number(self, tmp_path: Path) -> None:
        path = tmp_path / "events.jsonl"
        path.write_text(
            _notification("NEW_ENTITY_EVENT", "p1", "Process") + '\n{"event_type": "BOGUS"}\n'
        )

        with pytest.raises(ConfigurationError, match="line 2"):
            read_notifications(path)


class TestReplay:
    """replay command."""

    def test_replay_prints_events(
        self, tmp_path: Path, config_file: Path, contexts_file: Path
    ) -> None:
        events = tmp_path / "events.jsonl"
        events.write_text(
            "\n".join(
                [
                    _notification("NEW_ENTITY_EVENT", "p1", "Process"),
                    _notification("UPDATED_ENTITY_EVENT", "t1", "RelationalTable", "repoB"),
                    _notification("NEW_ENTITY_EVENT", "x1", "Unrelated"),
                ]
            )
        )

        result = CliRunner().invoke(
            cli,
            [
                "replay",
                "--config",
                str(config_file),
                "--events",
                str(events),
                "--contexts",
                str(contexts_file),
                "--print-events",
            ],
        )

        assert result.exit_code == 0, result.output
        payloads = _payloads(result.output)
        kinds = sorted(p["assetLineageEventType"] for p in payloads)
        assert kinds == ["PROCESS_CONTEXT_EVENT", "UPDATE_ENTITY_EVENT"]
        process_event = next(
            p for p in payloads if p["assetLineageEventType"] == "PROCESS_CONTEXT_EVENT"
        )
        (edge,) = process_event["assetContext"]["ProcessInput"]
        assert edge["relationshipGuid"] == "r1"
        assert edge["toVertex"]["guid"] == "t1"
        assert "Replayed 3 notification(s): 3 succeeded, 0 failed" in result.output

    def test_replay_without_contexts_warns(self, tmp_path: Path, config_file: Path) -> None:
        events = tmp_path / "events.jsonl"
        events.write_text(_notification("DELETED_ENTITY_EVENT", "t1", "RelationalTable"))

        result = CliRunner().invoke(
            cli,
            ["replay", "--config", str(config_file), "--events", str(events), "--print-events"],
        )

        assert result.exit_code == 0, result.output
        assert "Warning: No context store given" in result.output
        (payload,) = _payloads(result.output)
        assert payload["lineageEntity"]["guid"] == "t1"

    def test_replay_reports_dispatch_failures(self, tmp_path: Path, config_file: Path) -> None:
        events = tmp_path / "events.jsonl"
        events.write_text(
            _notification("NEW_ENTITY_EVENT", " ", "Process")
            + "\n"
            + _notification("DELETED_ENTITY_EVENT", "t1", "RelationalTable")
        )

        result = CliRunner().invoke(
            cli,
            ["replay", "--config", str(config_file), "--events", str(events), "--print-events"],
        )

        assert result.exit_code == ExitCode.DISPATCH_ERROR
        assert "notification=1" in result.output
        assert "Replayed 2 notification(s): 1 succeeded, 1 failed" in result.output
        assert len(_payloads(result.output)) == 1

    def test_replay_missing_events_file(self, tmp_path: Path, config_file: Path) -> None:
        result = CliRunner().invoke(
            cli,
            ["replay", "--config", str(config_file), "--events", str(tmp_path / "nope.jsonl")],
        )

        assert result.exit_code == ExitCode.FILE_NOT_FOUND

    def test_replay_invalid_events(self, tmp_path: Path, config_file: Path) -> None:
        events = tmp_path / "events.jsonl"
        events.write_text("not json\n")

        result = CliRunner().invoke(
            cli, ["replay", "--config", str(config_file), "--events", str(events)]
        )

        assert result.exit_code == ExitCode.VALIDATION_ERROR
        assert "line 1" in result.output
