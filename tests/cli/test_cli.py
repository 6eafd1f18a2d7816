"""Test the CLI commands end-to-end."""

import json

import pytest
from click.testing import CliRunner

from dbdialects.cli import main


def test_drivers_lists_builtins() -> None:
    runner = CliRunner()
    result = runner.invoke(main, ["drivers", "--format", "json"])
    assert result.exit_code == 0
    assert {"duckdb", "hana", "sql"} <= set(json.loads(result.output)["drivers"])


def test_bucket_hana_quarter() -> None:
    runner = CliRunner()
    result = runner.invoke(main, ["bucket", "hana", "quarter", "created_at"])
    assert result.exit_code == 0
    assert result.output.strip() == (
        "TO_DATE(YEAR(created_at) || '-' || (TO_INTEGER(RIGHT(QUARTER(created_at), 1)) * 3 - 2)"
        " || '-01', 'YYYY-MM-DD')"
    )


def test_bucket_json_output() -> None:
    runner = CliRunner()
    result = runner.invoke(main, ["bucket", "sql", "month", "ts", "--format", "json"])
    assert result.exit_code == 0
    data = json.loads(result.output)
    assert data == {"driver": "sql", "unit": "month", "sql": "DATE_TRUNC('month', ts)"}


def test_bucket_unknown_driver() -> None:
    runner = CliRunner()
    result = runner.invoke(main, ["bucket", "oracle", "day", "ts"])
    assert result.exit_code == 2
    assert "No driver registered for 'oracle'" in result.output


def test_interval_truncates_amount() -> None:
    runner = CliRunner()
    result = runner.invoke(main, ["interval", "hana", "day", "3.7"])
    assert result.exit_code == 0
    assert result.output.strip() == "CURRENT_TIMESTAMP + INTERVAL 3 DAY"


def test_interval_accepts_negative_amount() -> None:
    runner = CliRunner()
    result = runner.invoke(main, ["interval", "hana", "day", "-3"])
    assert result.exit_code == 0
    assert result.output.strip() == "CURRENT_TIMESTAMP + INTERVAL -3 DAY"

    result = runner.invoke(main, ["interval", "duckdb", "week", "-2.9", "--format", "json"])
    assert result.exit_code == 0
    assert json.loads(result.output)["sql"] == "CURRENT_TIMESTAMP + INTERVAL '-2' WEEK"


def test_interval_out_of_range() -> None:
    runner = CliRunner()
    result = runner.invoke(main, ["interval", "hana", "day", "1e9"])
    assert result.exit_code == 2
    assert "out of range" in result.output


def test_epoch_millis() -> None:
    runner = CliRunner()
    result = runner.invoke(main, ["epoch", "hana", "created_ms", "--millis"])
    assert result.exit_code == 0
    assert result.output.strip() == (
        "ADD_SECONDS(TO_TIMESTAMP('1970-01-01', 'YYYY-MM-DD'), created_ms / 1000)"
    )


def test_timezone() -> None:
    runner = CliRunner()
    result = runner.invoke(main, ["timezone", "hana", "Europe/Berlin"])
    assert result.exit_code == 0
    assert result.output.strip() == "SET @@session.time_zone = 'Europe/Berlin';"


def test_timezone_unsupported() -> None:
    runner = CliRunner()
    result = runner.invoke(main, ["timezone", "sql", "UTC"])
    assert result.exit_code == 1


def test_types_json() -> None:
    runner = CliRunner()
    result = runner.invoke(
        main, ["types", "hana", "NVARCHAR", "DECIMAL(10,2)", "ST_POINT", "--format", "json"]
    )
    assert result.exit_code == 0
    assert json.loads(result.output)["types"] == {
        "NVARCHAR": "text",
        "DECIMAL(10,2)": "decimal",
        "ST_POINT": "unknown",
    }


def test_classify_json() -> None:
    runner = CliRunner()
    result = runner.invoke(main, ["classify", "hana", "Unknown database foo", "--format", "json"])
    assert result.exit_code == 0
    data = json.loads(result.output)
    assert data["category"] == "database_name_incorrect"
    assert data["message"] == "Unknown database foo"


def test_fields_json() -> None:
    runner = CliRunner()
    result = runner.invoke(main, ["fields", "hana", "--format", "json"])
    assert result.exit_code == 0
    names = [f["name"] for f in json.loads(result.output)["fields"]]
    assert names[:2] == ["host", "port"]
    assert "tunnel-host" in names


def test_spec_masks_password() -> None:
    runner = CliRunner()
    result = runner.invoke(
        main, ["spec", "--db", "hana:host=h,user=u,password=secret", "--format", "json"]
    )
    assert result.exit_code == 0
    assert "secret" not in result.output
    data = json.loads(result.output)
    assert data["url"] == "jdbc:sap://h:30015"
    assert data["properties"]["password"] == "****"


def test_spec_from_env() -> None:
    runner = CliRunner()
    result = runner.invoke(main, ["spec"], env={"DBDIALECTS_DB": "hana:host=envhost"})
    assert result.exit_code == 0
    assert "url: jdbc:sap://envhost:30015" in result.output


def test_spec_unknown_connection() -> None:
    runner = CliRunner()
    result = runner.invoke(main, ["spec", "--db", "nowhere"])
    assert result.exit_code == 2
    assert "not found" in result.output


def test_probe_duckdb_memory() -> None:
    pytest.importorskip("duckdb")
    runner = CliRunner()
    result = runner.invoke(main, ["probe", "--db", "duckdb:"])
    assert result.exit_code == 0
    assert "connected to duckdb" in result.output


def test_probe_failure_json(tmp_path) -> None:
    pytest.importorskip("duckdb")
    runner = CliRunner()
    missing = tmp_path / "missing" / "db.duckdb"
    result = runner.invoke(main, ["probe", "--db", f"duckdb:db={missing}", "--format", "json"])
    assert result.exit_code == 1
    assert json.loads(result.output)["connected"] is False


def test_connect_add_list_remove() -> None:
    runner = CliRunner()
    result = runner.invoke(
        main, ["connect", "add", "prod", "hana", "host=hana.internal", "password=pw"]
    )
    assert result.exit_code == 0

    result = runner.invoke(main, ["connect", "list"])
    assert "prod (hana): host=hana.internal, password=****" in result.output

    result = runner.invoke(main, ["spec", "--db", "prod", "--format", "json"])
    assert json.loads(result.output)["subname"] == "//hana.internal:30015"

    result = runner.invoke(main, ["connect", "remove", "prod"])
    assert result.exit_code == 0
    result = runner.invoke(main, ["connect", "remove", "prod"])
    assert result.exit_code == 1
