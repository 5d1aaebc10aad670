"""File Merger: path-keyed upsert of extracted files into the virtual file set."""

from collections.abc import Iterable, Mapping

from devteam.state import ProjectFile


def merge_files(existing: Mapping[str, ProjectFile], new_files: Iterable[ProjectFile]) -> dict[str, ProjectFile]:
    """Return a new file set with *new_files* folded into *existing*.

    An existing path keeps its position and takes the new content and
    language; an unseen path is appended. Later files in the batch win
    over earlier ones with the same path. Nothing is ever removed.
    The input mapping is left untouched so earlier snapshots stay valid.
    """
    merged = dict(existing)
    for new_file in new_files:
        merged[new_file.path] = new_file
    return merged
