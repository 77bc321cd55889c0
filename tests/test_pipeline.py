import pytest

import huffman as huff
import pipeline


def test_run_pipeline_ok():
    result = pipeline.run_pipeline("huffman coding is simple")
    assert result.status == pipeline.STATUS_OK
    assert result.ok
    assert result.decoded == "huffman coding is simple"
    assert set(result.codes) == set("huffman coding is simple")
    assert result.tree.weight == len("huffman coding is simple")
    assert result.error is None


def test_run_pipeline_empty():
    result = pipeline.run_pipeline("")
    assert result.status == pipeline.STATUS_EMPTY
    assert result.ok
    assert result.frequencies == {}
    assert result.tree is None
    assert result.codes is None
    assert result.encoded is None


def test_run_pipeline_single_symbol():
    result = pipeline.run_pipeline("aaaa")
    assert result.codes == {"a": "0"}
    assert result.encoded == "0000"
    assert result.decoded == "aaaa"


def test_run_pipeline_bytes():
    data = b"\x00\x01\x01\xfe"
    result = pipeline.run_pipeline(data)
    assert result.status == pipeline.STATUS_OK
    assert result.decoded == data
    assert isinstance(result.decoded, bytes)


def test_runs_do_not_share_state():
    first = pipeline.run_pipeline("aab")
    second = pipeline.run_pipeline("xyz")
    assert set(first.codes) == {"a", "b"}
    assert set(second.codes) == {"x", "y", "z"}
    assert first.frequencies is not second.frequencies


def test_decode_failure_is_reported(monkeypatch):
    def broken_decode(bits, root):
        raise huff.TruncatedStream(len(bits))

    monkeypatch.setattr(pipeline.huff, "huffman_decode", broken_decode)
    result = pipeline.run_pipeline("abc")
    assert result.status == pipeline.STATUS_FAILED
    assert not result.ok
    assert result.error.startswith("TruncatedStream")
    assert "Failure!" in pipeline.format_report(result)


def test_mismatch_is_reported(monkeypatch):
    monkeypatch.setattr(pipeline.huff, "huffman_decode", lambda bits, root: ["x"])
    result = pipeline.run_pipeline("abc")
    assert result.status == pipeline.STATUS_MISMATCH
    assert pipeline.verdict(result) == "Failure! decoded text does not match the original"


def test_format_report():
    report = pipeline.format_report(pipeline.run_pipeline("aab"))
    assert 'Original Text: "aab"' in report
    assert "'a' : 1" in report
    assert "'b' : 0" in report
    assert "110" in report
    assert report.endswith("Success! Original and decoded text match.")


def test_format_report_empty():
    assert pipeline.format_report(pipeline.run_pipeline("")) == "Input is empty. Nothing to do."


def test_main_default_text(capsys):
    assert pipeline.main([]) == 0
    out = capsys.readouterr().out
    assert pipeline.DEFAULT_TEXT in out
    assert "Success!" in out


def test_main_quiet(capsys):
    assert pipeline.main(["--quiet", "mississippi"]) == 0
    assert capsys.readouterr().out.strip() == "Success! Original and decoded text match."


def test_main_empty(capsys):
    assert pipeline.main([""]) == 0
    assert "Nothing to do" in capsys.readouterr().out


def test_main_file(tmp_path, capsys):
    path = tmp_path / "input.bin"
    path.write_bytes(b"hello\x00world")
    assert pipeline.main(["--file", str(path)]) == 0
    assert "b'hello\\x00world'" in capsys.readouterr().out


def test_main_reports_failure(monkeypatch, capsys):
    monkeypatch.setattr(pipeline.huff, "huffman_decode", lambda bits, root: [])
    assert pipeline.main(["abc"]) == 1
    assert "Failure!" in capsys.readouterr().out


def test_pipeline_verifies_tree(monkeypatch):
    seen = []
    real_check = huff.check_tree

    def recording_check(root):
        seen.append(root)
        real_check(root)

    monkeypatch.setattr(pipeline.huff, "check_tree", recording_check)
    result = pipeline.run_pipeline("abc")
    assert seen == [result.tree]


def test_malformed_tree_is_fatal(monkeypatch):
    def bad_build(freqs):
        node = huff.Internal(huff.Leaf("a", 1), huff.Leaf("b", 1))
        object.__setattr__(node, "weight", 9)
        return huff.Internal(node, huff.Leaf("c", 1))

    monkeypatch.setattr(pipeline.huff, "build_huffman_tree", bad_build)
    with pytest.raises(AssertionError):
        pipeline.run_pipeline("abc")


def test_incomplete_tree_is_fatal(monkeypatch):
    monkeypatch.setattr(pipeline.huff, "build_huffman_tree", lambda freqs: huff.Leaf("a", 3))
    with pytest.raises(AssertionError, match="disagree"):
        pipeline.run_pipeline("aab")


def test_run_pipeline_bytearray():
    data = bytearray(b"abracadabra")
    result = pipeline.run_pipeline(data)
    assert result.status == pipeline.STATUS_OK
    assert result.decoded == data
    assert isinstance(result.decoded, bytearray)
    assert "bytearray" not in pipeline.format_report(result)


def test_format_report_byte_symbols():
    report = pipeline.format_report(pipeline.run_pipeline(b"aab"))
    assert "Original Text: b'aab'" in report
    assert "b'a' : 1" in report
    assert "b'b' : 0" in report
