import pytest

from pii_masking.file_scanner import (
    LineRecord,
    mask_file,
    mask_records,
    mask_text,
    scan_bytes,
    scan_paths,
)


def test_mask_file_with_dummy_pii(tmp_path):
    file_path = tmp_path / "dummy_pii.txt"
    file_contents = "\n".join(
        [
            "This is a test file.",
            "Contact email: dummy.user@example.com",
            "Server: 10.1.2.3",
        ]
    )
    file_path.write_text(file_contents, encoding="utf-8")

    result = mask_file(str(file_path))

    assert isinstance(result, str)
    assert "dummy.user@example.com" not in result
    assert "10.1.2.3" not in result
    assert result.splitlines() == [
        "This is a test file.",
        "Contact email: du*****@example.com",
        "Server: ********",
    ]
    assert file_path.read_text(encoding="utf-8") == file_contents


def test_mask_file_with_empty_file(tmp_path):
    file_path = tmp_path / "empty.txt"
    file_path.write_text("", encoding="utf-8")

    assert mask_file(file_path) == ""


def test_mask_file_missing_file_raises_file_not_found(tmp_path):
    missing_path = tmp_path / "does_not_exist.txt"

    with pytest.raises(FileNotFoundError):
        mask_file(str(missing_path))


def test_mask_text_keeps_line_endings():
    text = "pwd=abc\r\nok\nbearer xyz"
    assert mask_text(text) == "pwd=**********\r\nok\nbearer **********"


def test_scan_bytes_numbers_lines():
    records = list(scan_bytes(b"a\nb\r\nc", filename="upload.txt", start_line=5))
    assert records == [
        LineRecord("upload.txt", 5, "a"),
        LineRecord("upload.txt", 6, "b"),
        LineRecord("upload.txt", 7, "c"),
    ]


def test_start_line_must_be_positive():
    with pytest.raises(ValueError):
        list(scan_bytes(b"x", start_line=0))


def test_scan_paths_skip_missing(tmp_path):
    present = tmp_path / "a.log"
    present.write_text("one\n", encoding="utf-8")

    records = list(scan_paths([tmp_path / "missing.log", present], skip_missing=True))

    assert [r.line for r in records] == ["one"]


def test_mask_records_keeps_location():
    masked = list(mask_records([LineRecord("f.log", 3, "ip 8.8.8.8")], mask_char="x"))
    assert masked == [LineRecord("f.log", 3, "ip xxxxxxx")]
