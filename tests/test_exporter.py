"""Tests for devteam.utils.exporter: build_archive, write_archive, write_project."""

import io
import zipfile

import pytest

from devteam.state import ProjectFile
from devteam.utils.exporter import build_archive, write_archive, write_project


def _files():
    return {
        "index.html": ProjectFile(path="index.html", content="<h1>Todo</h1>", language="html"),
        "src/app.js": ProjectFile(path="src/app.js", content="let todos = [];", language="javascript"),
    }


class TestBuildArchive:
    def test_one_entry_per_file(self):
        with zipfile.ZipFile(io.BytesIO(build_archive(_files()))) as archive:
            assert archive.namelist() == ["index.html", "src/app.js"]
            assert archive.read("src/app.js").decode() == "let todos = [];"

    def test_entry_names_normalized(self):
        files = {"./x.txt": ProjectFile(path="./x.txt", content="x")}
        with zipfile.ZipFile(io.BytesIO(build_archive(files))) as archive:
            assert archive.namelist() == ["x.txt"]

    def test_empty_file_set(self):
        with zipfile.ZipFile(io.BytesIO(build_archive({}))) as archive:
            assert archive.namelist() == []


class TestWriteArchive:
    def test_writes_zip_to_path(self, tmp_path):
        target = write_archive(_files(), tmp_path / "out" / "project.zip")
        assert target.exists()
        assert zipfile.is_zipfile(target)

    def test_default_name_from_config(self, tmp_path, monkeypatch, mock_config):
        monkeypatch.chdir(tmp_path)
        target = write_archive(_files())
        assert target.name == "project-files.zip"
        assert (tmp_path / "project-files.zip").exists()


class TestWriteProject:
    def test_writes_tree(self, tmp_path):
        root = write_project(_files(), tmp_path / "project")
        assert (root / "index.html").read_text(encoding="utf-8") == "<h1>Todo</h1>"
        assert (root / "src" / "app.js").read_text(encoding="utf-8") == "let todos = [];"

    def test_rejects_escaping_path(self, tmp_path):
        files = {"../evil.sh": ProjectFile(path="../evil.sh", content="rm -rf /")}
        with pytest.raises(ValueError, match="outside"):
            write_project(files, tmp_path / "project")
        assert not (tmp_path / "evil.sh").exists()
