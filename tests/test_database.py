from pathlib import Path

import pytest

from shotdiff.database import (
    DatabaseError,
    ScreenshotDatabase,
    ScreenshotRecord,
    default_db_dir,
)


@pytest.fixture
def db(tmp_path):
    with ScreenshotDatabase(tmp_path / "DB" / "scrDB") as database:
        yield database


def test_default_db_dir_linux():
    assert default_db_dir("/home/user", "ubuntu") == Path("/home/user") / "DB"


@pytest.mark.parametrize("os_name", ["macos", "osx"])
def test_default_db_dir_macos(os_name):
    assert default_db_dir("/Users/user", os_name) == Path("/Users/user") / "Documents" / "DB"


def test_connect_creates_directory_and_file(tmp_path):
    path = tmp_path / "nested" / "scrDB"
    database = ScreenshotDatabase(path)
    database.connect()
    database.close()
    assert path.exists()


def test_empty_database(db):
    assert db.latest_two() == (None, None)
    assert db.records() == []


def test_insert_and_latest_two(db):
    db.insert(b"first", b"h1", 1.5)
    db.insert(b"second", b"h2", 2.5)
    db.insert(b"third", b"h3", 3.5)
    assert db.latest_two() == (b"third", b"second")


def test_latest_two_with_single_row(db):
    db.insert(b"only", b"h", 0.0)
    assert db.latest_two() == (b"only", None)


def test_records_in_table_order(db):
    first_id = db.insert(b"a", b"ha", 10.0)
    second_id = db.insert(b"b", b"hb", 20.0)
    assert second_id > first_id
    assert db.records() == [
        ScreenshotRecord(img=b"a", hash=b"ha", similarity=10.0, id=first_id),
        ScreenshotRecord(img=b"b", hash=b"hb", similarity=20.0, id=second_id),
    ]


def test_image_at(db):
    db.insert(b"a", b"ha", 0.0)
    db.insert(b"b", b"hb", 0.0)
    assert db.image_at(0) == b"a"
    assert db.image_at(1) == b"b"


@pytest.mark.parametrize("index", [2, -1])
def test_image_at_out_of_range(db, index):
    db.insert(b"a", b"ha", 0.0)
    db.insert(b"b", b"hb", 0.0)
    with pytest.raises(IndexError):
        db.image_at(index)


def test_data_survives_reopen(tmp_path):
    path = tmp_path / "scrDB"
    with ScreenshotDatabase(path) as database:
        database.insert(b"kept", b"digest", 42.0)
    with ScreenshotDatabase(path) as database:
        assert database.latest_two() == (b"kept", None)


def test_use_before_connect_raises(tmp_path):
    database = ScreenshotDatabase(tmp_path / "scrDB")
    with pytest.raises(DatabaseError):
        database.insert(b"x", b"y", 0.0)


def test_use_after_close_raises(tmp_path):
    with ScreenshotDatabase(tmp_path / "scrDB") as database:
        pass
    with pytest.raises(DatabaseError):
        database.records()


def test_connect_failure_raises(tmp_path):
    blocker = tmp_path / "file"
    blocker.write_bytes(b"")
    database = ScreenshotDatabase(blocker / "scrDB")
    with pytest.raises(DatabaseError):
        database.connect()