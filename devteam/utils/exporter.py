"""Exporter: writes the virtual file set to a zip archive or a directory."""

import io
import zipfile
from collections.abc import Mapping
from pathlib import Path

from devteam.config import get_config
from devteam.state import ProjectFile
from devteam.utils.extractor import normalize_path


def build_archive(files: Mapping[str, ProjectFile]) -> bytes:
    """Return zip bytes with one entry per file, named by its normalized path."""
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_DEFLATED) as archive:
        for project_file in files.values():
            archive.writestr(normalize_path(project_file.path), project_file.content)
    return buffer.getvalue()


def write_archive(files: Mapping[str, ProjectFile], output_path: str | Path | None = None) -> Path:
    """Write the zip archive to *output_path* (config `archive_name` by default)."""
    path = Path(output_path or get_config().get("archive_name", "project-files.zip"))
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(build_archive(files))
    return path


def write_project(files: Mapping[str, ProjectFile], directory: str | Path | None = None) -> Path:
    """Write every file under *directory* (config `output_dir` by default).

    Raises ValueError for a path that would land outside the directory.
    """
    root = Path(directory or get_config().get("output_dir", "./output/project")).resolve()
    for project_file in files.values():
        target = (root / normalize_path(project_file.path)).resolve()
        if not target.is_relative_to(root):
            raise ValueError(f"Refusing to write '{project_file.path}' outside {root}.")
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(project_file.content, encoding="utf-8")
    return root
