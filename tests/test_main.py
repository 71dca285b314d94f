# tests/test_main.py

import json
import os

import pytest

from edurecords.core.exceptions import ConfigurationError
from edurecords.main import DEFAULT_CONFIG, EduRecordsPlatform, load_config
from edurecords.persistence import MemoryStore


def test_load_config_defaults():
    config = load_config()

    assert config == DEFAULT_CONFIG
    assert config["database_config"] is not DEFAULT_CONFIG["database_config"]


def test_load_config_merges_file(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"rest_port": 9000, "database_config": {"database_path": "x.db"}}))

    config = load_config(str(path))

    assert config["rest_port"] == 9000
    assert config["database_config"] == {"database_path": "x.db"}
    assert config["store_type"] == "sqlite"
    assert DEFAULT_CONFIG["database_config"]["database_path"] == "edurecords.db"


def test_load_config_rejects_bad_files(tmp_path):
    broken = tmp_path / "broken.json"
    broken.write_text("{not json")
    listing = tmp_path / "list.json"
    listing.write_text("[1, 2]")

    with pytest.raises(ConfigurationError):
        load_config(str(broken))
    with pytest.raises(ConfigurationError):
        load_config(str(listing))
    with pytest.raises(ConfigurationError):
        load_config(str(tmp_path / "missing.json"))


def test_platform_with_memory_store(clock, id_factory):
    platform = EduRecordsPlatform({"store_type": "memory"}, clock=clock, id_factory=id_factory)

    assert isinstance(platform.repositories.students._store, MemoryStore)
    assert platform.rest_api.app.title == "EduRecords API"


def test_platform_with_sqlite_store(tmp_path):
    db_path = str(tmp_path / "data" / "records.db")

    platform = EduRecordsPlatform({"store_type": "sqlite", "database_config": {"database_path": db_path}})
    platform.repositories.subjects.create("Math")

    assert os.path.exists(db_path)
    assert platform.repositories.subjects.count() == 1


def test_platform_rejects_unknown_store():
    with pytest.raises(ConfigurationError):
        EduRecordsPlatform({"store_type": "btree"})


def test_create_sample_data(clock, id_factory):
    platform = EduRecordsPlatform({"store_type": "memory"}, clock=clock, id_factory=id_factory)

    sample = platform.create_sample_data()

    assert [s.name for s in sample["students"][0].subjects] == ["Mathematics", "Physics"]
    assert sample["class"].teacher == sample["teacher"]
    assert sample["submission"].issubmitted
    assert platform.repositories.submissions.count() == 1


def test_run_demo_shows_frozen_snapshot(capsys):
    platform = EduRecordsPlatform({"store_type": "memory"})

    platform.run_demo()

    output = capsys.readouterr().out
    assert "Subject now: Advanced Mathematics" in output
    assert "Assignment still embeds: Mathematics" in output
    assert "Lookup after delete: No student found" in output


def test_platform_store_type_is_case_insensitive(tmp_path):
    db_path = str(tmp_path / "records.db")

    platform = EduRecordsPlatform({"store_type": "SQLite", "database_config": {"database_path": db_path}})
    platform.repositories.students.create("Ada", "pw1")

    assert os.path.exists(db_path)
    assert platform.repositories.students.count() == 1
