import pytest

from csvninja.splitter.models import OutputArtifact
from csvninja.splitter.sinks import DirectorySink, MemorySink


def _artifact(index: int) -> OutputArtifact:
    return OutputArtifact(filename=f"data_part{index}.csv", content=f"a\n{index}\n", rows=1)


def test_memory_sink_keeps_content():
    with MemorySink() as sink:
        sink.write(_artifact(1))

    assert sink.committed
    assert sink.summaries[0].content == "a\n1\n"
    assert sink.summaries[0].path is None


def test_memory_sink_aborts_on_error():
    sink = MemorySink()

    with pytest.raises(ValueError):
        with sink:
            sink.write(_artifact(1))
            raise ValueError("boom")

    assert sink.aborted
    assert not sink.committed
    assert sink.summaries == []


def test_closed_sink_rejects_writes():
    sink = MemorySink()
    sink.commit()

    with pytest.raises(RuntimeError):
        sink.write(_artifact(1))


def test_abort_after_commit_is_a_no_op():
    sink = MemorySink()
    sink.write(_artifact(1))
    sink.commit()
    sink.abort()

    assert not sink.aborted
    assert len(sink.summaries) == 1


def test_directory_sink_writes_files(tmp_path):
    with DirectorySink(tmp_path / "out") as sink:
        sink.write(_artifact(1))
        sink.write(_artifact(2))

    assert sorted(p.name for p in (tmp_path / "out").iterdir()) == ["data_part1.csv", "data_part2.csv"]
    assert (tmp_path / "out" / "data_part2.csv").read_text(encoding="utf-8") == "a\n2\n"
    assert sink.summaries[0].path == tmp_path / "out" / "data_part1.csv"
    assert sink.summaries[0].content is None


def test_directory_sink_abort_removes_created_directory(tmp_path):
    out = tmp_path / "out"
    with pytest.raises(RuntimeError):
        with DirectorySink(out) as sink:
            sink.write(_artifact(1))
            raise RuntimeError("boom")

    assert not out.exists()


def test_directory_sink_abort_keeps_existing_files(tmp_path):
    (tmp_path / "keep.txt").write_text("mine", encoding="utf-8")
    sink = DirectorySink(tmp_path)
    sink.write(_artifact(1))

    sink.abort()

    assert [p.name for p in tmp_path.iterdir()] == ["keep.txt"]
