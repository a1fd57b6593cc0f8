from pathlib import Path

import orjson
import pytest
from typer.testing import CliRunner

from pointgen.cli import app

runner = CliRunner()
TABLE = "Status Word\n100 Integer Bits 0: Ready; Bits 1-2: Mode\n200 Word Speed 0: Slow 1: Fast\n"


@pytest.fixture(autouse=True)
def _no_env_key(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)


def _table(tmp_path: Path) -> Path:
    path = tmp_path / "table.txt"
    path.write_text(TABLE)
    return path


def test_generate_writes_point_file(tmp_path: Path) -> None:
    out = tmp_path / "points.pnt"
    result = runner.invoke(app, ["generate", str(_table(tmp_path)), "--output", str(out)])
    assert result.exit_code == 0
    lines = out.read_text().splitlines()
    assert lines[0] == ':SAFRAN_X:PNT: DI:100:READY_1:"Ready [Bits 0]":grp "Status Word":'
    assert len(lines) == 3


def test_generate_prints_to_stdout(tmp_path: Path) -> None:
    result = runner.invoke(app, ["generate", str(_table(tmp_path))])
    assert result.exit_code == 0
    assert ':SAFRAN_X:PNT: Word:200:SPEED:"Speed":grp "Status Word"' in result.output


def test_generate_merges_saved_response(tmp_path: Path) -> None:
    response = tmp_path / "response.txt"
    response.write_text('{"parameters": [{"offset": 200, "name": "Fan speed"}]}')
    out = tmp_path / "points.pnt"
    result = runner.invoke(
        app, ["generate", str(_table(tmp_path)), "-r", str(response), "-o", str(out)]
    )
    assert result.exit_code == 0
    assert '"Fan speed"' in out.read_text()


def test_generate_missing_input(tmp_path: Path) -> None:
    result = runner.invoke(app, ["generate", str(tmp_path / "missing.txt")])
    assert result.exit_code != 0


def test_parse_json_records(tmp_path: Path) -> None:
    out = tmp_path / "records.json"
    result = runner.invoke(app, ["parse", str(_table(tmp_path)), "-o", str(out)])
    assert result.exit_code == 0
    rows = orjson.loads(out.read_bytes())
    assert [row["tag"] for row in rows] == ["READY_1", "MODE_2", "SPEED"]
    assert rows[2]["evt"] == '"Slow"==0,0:"Fast"==1,0'


def test_parse_csv_records(tmp_path: Path) -> None:
    out = tmp_path / "records.csv"
    result = runner.invoke(app, ["parse", str(_table(tmp_path)), "-f", "csv", "-o", str(out)])
    assert result.exit_code == 0
    content = out.read_text().splitlines()
    assert content[0] == "offset,type,id,tag,label,group,bits,bnd,evt"
    assert len(content) == 4


def test_parse_rejects_unknown_format(tmp_path: Path) -> None:
    result = runner.invoke(app, ["parse", str(_table(tmp_path)), "-f", "xml"])
    assert result.exit_code != 0


def test_inspect_reports_reason(tmp_path: Path) -> None:
    response = tmp_path / "response.txt"
    response.write_text("no json here")
    result = runner.invoke(app, ["inspect", str(response)])
    assert result.exit_code == 0
    assert "no_json_object" in result.output
