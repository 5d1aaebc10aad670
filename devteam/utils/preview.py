"""Preview renderer: inlines local CSS/JS into index.html for a single-document preview.

Best-effort textual substitution only. Tags that reference files not in the
file set are left as they are.
"""

import re
from collections.abc import Mapping

from devteam.state import ProjectFile

_STYLESHEET_RE = re.compile(r'<link[^>]+href="([^"]+\.css)"[^>]*>')
_SCRIPT_RE = re.compile(r'<script[^>]+src="([^"]+\.js)"[^>]*></script>')


def _find_by_suffix(files: Mapping[str, ProjectFile], reference: str) -> ProjectFile | None:
    suffix = re.sub(r"^\./", "", reference)
    for project_file in files.values():
        if project_file.path.endswith(suffix):
            return project_file
    return None


def render_preview(files: Mapping[str, ProjectFile]) -> str | None:
    """Return the index.html document with referenced stylesheets and scripts inlined.

    Returns None when the file set has no index.html.
    """
    index = next((f for f in files.values() if f.path.endswith("index.html")), None)
    if index is None:
        return None

    def inline_css(match: re.Match) -> str:
        found = _find_by_suffix(files, match.group(1))
        return f"<style>\n{found.content}\n</style>" if found else match.group(0)

    def inline_js(match: re.Match) -> str:
        found = _find_by_suffix(files, match.group(1))
        return f"<script>\n{found.content}\n</script>" if found else match.group(0)

    html = _STYLESHEET_RE.sub(inline_css, index.content)
    return _SCRIPT_RE.sub(inline_js, html)
