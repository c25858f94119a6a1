from trace_execution import trace


def test_trace_finishes(tmp_path, capsys):
    src = tmp_path / "loop.bf"
    src.write_text("+[-]", encoding="utf-8")
    assert trace(str(src)) == 5
    out = capsys.readouterr().out
    assert "Loaded 4 ops" in out
    assert "Finished at step 5" in out
    assert "Final PC: 4" in out


def test_trace_step_limit(tmp_path, capsys):
    src = tmp_path / "forever.bf"
    src.write_text("+[]", encoding="utf-8")
    assert trace(str(src), steps=10) == 10
    assert "Step limit reached" in capsys.readouterr().out


def test_trace_reports_error(tmp_path, capsys):
    src = tmp_path / "bad.bf"
    src.write_text("<+", encoding="utf-8")
    assert trace(str(src)) == 1
    assert "Error/Halt at step 1" in capsys.readouterr().out


def test_trace_collects_output(tmp_path, capsys):
    src = tmp_path / "echo.bf"
    src.write_text(",.,.", encoding="utf-8")
    trace(str(src), input_text="hi")
    out = capsys.readouterr().out
    assert "Output: 2 chars" in out
    assert "hi" not in out


def test_trace_undecodable_bytes(tmp_path, capsys):
    src = tmp_path / "latin1.bf"
    src.write_bytes(b"\xff+")
    assert trace(str(src)) == 2
    assert "Loaded 2 ops" in capsys.readouterr().out
