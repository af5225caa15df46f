import config
from models.draft import CutoutImage
from wizard.cutout import accept_cutout_file, check_cutout_file, mark_uploaded


def test_accepts_png_and_jpeg_aliases():
    assert check_cutout_file(2048, "image/png") == {}
    assert check_cutout_file(2048, "IMAGE/PJPEG") == {}


def test_rejects_other_types():
    assert check_cutout_file(2048, "application/pdf") == {
        "cutout_file": "Please select a valid image file (JPG, PNG)"
    }
    assert check_cutout_file(2048, None)


def test_rejects_files_over_limit(monkeypatch):
    monkeypatch.setattr(config, "CUTOUT_MAX_BYTES", 10 * 1024 * 1024)

    assert check_cutout_file(10 * 1024 * 1024, "image/png") == {}
    assert check_cutout_file(10 * 1024 * 1024 + 1, "image/png") == {
        "cutout_file": "File size must be less than 10MB"
    }


def test_rejected_file_keeps_current_cutout():
    current = CutoutImage(file_name="old.png", file_size=10, file_type="image/png")
    cutout, errors = accept_cutout_file(current, "new.gif", 10, "image/gif")

    assert cutout is current
    assert errors


def test_new_file_resets_upload_flag_but_keeps_url():
    current = mark_uploaded(None, "https://cdn.example.com/old.png")
    cutout, errors = accept_cutout_file(current, "new.jpg", 500, "image/jpeg")

    assert errors == {}
    assert cutout.file_name == "new.jpg"
    assert cutout.is_uploaded is False
    assert cutout.uploaded_url == "https://cdn.example.com/old.png"
    assert mark_uploaded(cutout, "https://cdn.example.com/new.jpg").is_uploaded is True
