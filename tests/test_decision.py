import os

from kti.decision import (
    Candidate,
    DecisionEngine,
    Match,
    Mismatch,
    UnknownSignature,
    Unreadable,
    evaluate,
)
from kti.signatures import FileType

PNG = b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR" + b"\x00" * 32
JPEG = b"\xFF\xD8\xFF\xE0\x00\x10JFIF\x00"
PDF = b"%PDF-1.4\n%\xe2\xe3\xcf\xd3\n"
ZIP = b"PK\x03\x04\x14\x00\x06\x00"


def _candidate(path, data):
    path.write_bytes(data)
    return Candidate.from_path(path)


def test_candidate_from_path_is_absolute_with_lowercase_extension(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "Photo.JPG").write_bytes(JPEG)
    c = Candidate.from_path("Photo.JPG")
    assert c.path == os.path.join(os.getcwd(), "Photo.JPG")
    assert c.extension == "jpg"
    assert c.name == "Photo.JPG"
    assert c.outcome is None


def test_png_named_txt_is_mismatch_to_png(tmp_path):
    c = _candidate(tmp_path / "image.txt", PNG)
    outcome = evaluate(c)
    assert outcome == Mismatch(str(tmp_path / "image.png"))
    assert c.detected is FileType.PNG
    assert c.outcome == outcome


def test_matching_extension_is_match(tmp_path):
    assert evaluate(_candidate(tmp_path / "image.png", PNG)) == Match()


def test_alias_and_case_are_accepted(tmp_path):
    assert evaluate(_candidate(tmp_path / "photo.JPEG", JPEG)) == Match()
    assert evaluate(_candidate(tmp_path / "photo2.Jpg", JPEG)) == Match()
    assert evaluate(_candidate(tmp_path / "report.docx", ZIP)) == Match()


def test_file_without_extension_gets_canonical_extension(tmp_path):
    c = _candidate(tmp_path / "README", PDF)
    assert evaluate(c) == Mismatch(str(tmp_path / "README.pdf"))


def test_only_last_extension_is_replaced(tmp_path):
    c = _candidate(tmp_path / "backup.tar.jpg", PNG)
    assert evaluate(c) == Mismatch(str(tmp_path / "backup.tar.png"))


def test_zero_byte_file_is_unknown_signature(tmp_path):
    c = _candidate(tmp_path / "empty.jpg", b"")
    assert evaluate(c) == UnknownSignature()
    assert c.detected is FileType.UNKNOWN


def test_plain_text_is_unknown_signature(tmp_path):
    c = _candidate(tmp_path / "notes.png", b"just some text\n")
    assert evaluate(c) == UnknownSignature()


def test_missing_file_is_unreadable(tmp_path):
    c = Candidate.from_path(tmp_path / "vanished.png")
    outcome = evaluate(c)
    assert isinstance(outcome, Unreadable)
    assert outcome.reason


def test_directory_is_unreadable_not_an_exception(tmp_path):
    d = tmp_path / "folder.png"
    d.mkdir()
    assert isinstance(evaluate(Candidate.from_path(d)), Unreadable)


def test_engine_with_custom_matcher(tmp_path):
    from kti.matcher import SignatureMatcher
    from kti.signatures import build_table

    engine = DecisionEngine(SignatureMatcher(build_table([(b"BM", 0, FileType.BMP)])))
    c = _candidate(tmp_path / "pic.dat", b"BM\x00\x00")
    assert engine.evaluate(c) == Mismatch(str(tmp_path / "pic.bmp"))
    # PNG is not in this table
    assert engine.evaluate(_candidate(tmp_path / "x.txt", PNG)) == UnknownSignature()
