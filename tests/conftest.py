import pytest


@pytest.fixture
def audio_file(tmp_path):
    path = tmp_path / "note.mp3"
    path.write_bytes(b"ID3 fake audio")
    return path
