"""File Extractor: turns agent text into ProjectFile records.

Agents emit files using a delimiter sub-language:

    |||FILE:relative/path.ext|||
    <full file content>
    |||ENDFILE|||

Prose between blocks is ignored. Unterminated blocks are dropped, never
emitted as partial files. There is no escaping: content must not contain
the closing marker itself.
"""

import re
from pathlib import PurePosixPath

from devteam.state import ProjectFile

FILE_MARKER = "|||FILE:"
END_MARKER = "|||ENDFILE|||"

# Non-greedy body: a block never runs past its own closing marker.
_FILE_BLOCK_RE = re.compile(r"\|\|\|FILE:([^\n]*?)\|\|\|\n(.*?)\|\|\|ENDFILE\|\|\|", re.DOTALL)
_LEADING_PREFIX_RE = re.compile(r"^(?:\./|/)+")

_LANGUAGE_BY_SUFFIX = {
    ".ts": "typescript",
    ".tsx": "typescript",
    ".js": "javascript",
    ".jsx": "javascript",
    ".mjs": "javascript",
    ".py": "python",
    ".html": "html",
    ".htm": "html",
    ".css": "css",
    ".scss": "scss",
    ".json": "json",
    ".md": "markdown",
    ".yaml": "yaml",
    ".yml": "yaml",
    ".toml": "toml",
    ".sh": "bash",
    ".sql": "sql",
    ".go": "go",
    ".rs": "rust",
    ".java": "java",
    ".vue": "vue",
}


def normalize_path(path: str) -> str:
    """Strip surrounding whitespace and any run of leading './' or '/' segments."""
    return _LEADING_PREFIX_RE.sub("", path.strip())


def language_for(path: str) -> str:
    """Best-guess language hint from the file extension."""
    return _LANGUAGE_BY_SUFFIX.get(PurePosixPath(path).suffix.lower(), "text")


def extract_files(text: str) -> list[ProjectFile]:
    """Return every well-formed file block in *text*, in order of appearance."""
    files = []
    for match in _FILE_BLOCK_RE.finditer(text):
        path = normalize_path(match.group(1))
        if not path:
            continue
        files.append(ProjectFile(path=path, content=match.group(2).strip(), language=language_for(path)))
    return files


def render_files(files: list[tuple[str, str]]) -> str:
    """Write (path, content) pairs in the delimiter grammar agents use."""
    blocks = []
    for path, content in files:
        if END_MARKER in content:
            raise ValueError(f"Content of {path!r} contains the closing marker {END_MARKER!r}.")
        blocks.append(f"{FILE_MARKER}{path}|||\n{content}\n{END_MARKER}")
    return "\n\n".join(blocks)
