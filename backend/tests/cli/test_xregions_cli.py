"""
Tests for the xregions operator CLI.
"""

import sqlite3

import pytest
import yaml
from click.testing import CliRunner

from xregions.cli import main
from xregions.models import XRegionBanRow, XRegionRow


@pytest.fixture
def database(tmp_path):
    """SQLite file with two stored policies, written with plain sqlite3."""
    path = tmp_path / "xregions.db"
    conn = sqlite3.connect(path)
    conn.execute(f"CREATE TABLE {XRegionRow.__tablename__} (name TEXT PRIMARY KEY, actions TEXT, temp_group TEXT)")
    conn.execute(
        f"CREATE TABLE {XRegionBanRow.__tablename__} "
        "(name TEXT PRIMARY KEY, item_bans TEXT, projectile_bans TEXT)"
    )
    conn.execute("INSERT INTO xregions VALUES ('Spawn', 'ForcePvp,Heal', '')")
    conn.execute("INSERT INTO xregions VALUES ('Arena', 'TempGroup', 'vip')")
    conn.execute("INSERT INTO xregion_bans VALUES ('Arena', '3,1', '')")
    conn.commit()
    conn.close()
    return f"sqlite+aiosqlite:///{path}"


@pytest.fixture
def runner():
    return CliRunner()


@pytest.mark.cli
def test_initdb(runner, tmp_path):
    url = f"sqlite+aiosqlite:///{tmp_path / 'fresh.db'}"

    result = runner.invoke(main, ["--database-url", url, "initdb"])

    assert result.exit_code == 0, result.output
    assert "XRegions tables are ready." in result.output
    assert (tmp_path / "fresh.db").exists()


@pytest.mark.cli
def test_list(runner, database):
    result = runner.invoke(main, ["--database-url", database, "list"])

    assert result.exit_code == 0, result.output
    assert result.output.splitlines() == ["Arena: TempGroup", "Spawn: ForcePvp, Heal"]


@pytest.mark.cli
def test_show(runner, database):
    result = runner.invoke(main, ["--database-url", database, "show", "Arena"])

    assert result.exit_code == 0, result.output
    assert "Temporary group:    vip" in result.output
    assert "Banned items:       1, 3" in result.output


@pytest.mark.cli
def test_show_missing(runner, database):
    result = runner.invoke(main, ["--database-url", database, "show", "Nowhere"])

    assert result.exit_code == 1


@pytest.mark.cli
def test_export_yaml(runner, database):
    result = runner.invoke(main, ["--database-url", database, "export"])

    assert result.exit_code == 0, result.output
    data = yaml.safe_load(result.output)
    assert data["xregions"]["Arena"] == {
        "flags": ["TempGroup"],
        "temp_group": "vip",
        "banned_items": [1, 3],
        "banned_projectiles": [],
    }
    assert data["xregions"]["Spawn"]["flags"] == ["ForcePvp", "Heal"]


@pytest.mark.cli
def test_unreachable_database(runner, tmp_path):
    url = f"sqlite+aiosqlite:///{tmp_path / 'missing' / 'x.db'}"

    result = runner.invoke(main, ["--database-url", url, "list"])

    assert result.exit_code == 1
