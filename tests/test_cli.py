import io
import json
import zipfile

import pytest

from csvninja.cli import main
from csvninja.settings import get_settings

from .conftest import SAMPLE_CSV


@pytest.fixture(autouse=True)
def cli_settings(monkeypatch, tmp_path):
    monkeypatch.setenv("LOCALE", "en")
    monkeypatch.setenv("LOG_LEVEL", "WARNING")
    monkeypatch.chdir(tmp_path)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def source(tmp_path):
    path = tmp_path / "clients.csv"
    path.write_bytes(SAMPLE_CSV)
    return path


def test_writes_parts_to_directory(source, tmp_path, capsys):
    out = tmp_path / "parts"

    assert main([str(source), "--max-rows", "2", "--out", str(out)]) == 0

    assert sorted(p.name for p in out.iterdir()) == ["clients_part1.csv", "clients_part2.csv"]
    assert (out / "clients_part2.csv").read_text(encoding="utf-8") == "a,b\n5,6\n"
    assert "✅ File split successfully into 2 part(s)" in capsys.readouterr().out


def test_default_output_directory(source, tmp_path):
    assert main([str(source), "--max-rows", "3"]) == 0

    assert [p.name for p in (tmp_path / "clients_parts").iterdir()] == ["clients_part1.csv"]


def test_zip_output(source, tmp_path):
    archive_path = tmp_path / "out" / "clients_split.zip"

    assert main([str(source), "--max-rows", "1", "--zip", str(archive_path)]) == 0

    with zipfile.ZipFile(io.BytesIO(archive_path.read_bytes())) as archive:
        assert archive.namelist() == ["clients_part1.csv", "clients_part2.csv", "clients_part3.csv"]


def test_streaming_json_output(source, tmp_path, capsys):
    out = tmp_path / "parts"

    assert main([str(source), "--max-rows", "2", "--out", str(out), "--streaming", "--json"]) == 0

    payload = json.loads(capsys.readouterr().out)
    assert payload["totalRows"] == 3
    assert [f["filename"] for f in payload["files"]] == ["clients_part1.csv", "clients_part2.csv"]
    assert payload["files"][0]["path"] == str(out / "clients_part1.csv")


def test_no_header(tmp_path):
    path = tmp_path / "raw.csv"
    path.write_bytes(b"1\n2\n3\n")

    assert main([str(path), "--max-rows", "2", "--no-header", "--out", str(tmp_path / "o")]) == 0

    assert (tmp_path / "o" / "raw_part1.csv").read_text(encoding="utf-8") == "1\n2\n"


@pytest.mark.parametrize("streaming", [[], ["--streaming"]])
def test_ragged_input_without_header_is_padded_to_widest_row(tmp_path, streaming):
    path = tmp_path / "ragged.csv"
    path.write_bytes(b"\xef\xbb\xbf1\n2,3\n4,5,6\n")
    out = tmp_path / "o"

    assert main([str(path), "--max-rows", "2", "--no-header", "--out", str(out)] + streaming) == 0

    assert (out / "ragged_part1.csv").read_text(encoding="utf-8") == "1,,\n2,3,\n"
    assert (out / "ragged_part2.csv").read_text(encoding="utf-8") == "4,5,6\n"


def test_invalid_row_limit_writes_nothing(source, tmp_path, capsys):
    out = tmp_path / "parts"

    assert main([str(source), "--max-rows", "0", "--out", str(out)]) == 1

    assert not out.exists()
    assert "❌ The number of rows per file must be greater than 0" in capsys.readouterr().err


def test_malformed_input_leaves_no_output(tmp_path):
    path = tmp_path / "bad.csv"
    path.write_bytes(b'a,b\n1,2\n"open,3\n')
    out = tmp_path / "parts"

    assert main([str(path), "--max-rows", "1", "--out", str(out), "--streaming"]) == 1

    assert not out.exists()


def test_missing_input(tmp_path, capsys):
    assert main([str(tmp_path / "nope.csv"), "--max-rows", "2"]) == 1

    assert "Input file not found" in capsys.readouterr().err
