"""Team settings for devteam, loaded from config.yaml when the package is first imported.

config.yaml sets the provider and model for each role, the sampling
temperature, the transcript window, the retry policy, the project types
and the export locations. Provider API keys (GOOGLE_API_KEY,
ANTHROPIC_API_KEY) come from the environment or a `.env` file at the
repository root.
"""

from pathlib import Path

import yaml
from dotenv import load_dotenv

_REPO_ROOT = Path(__file__).resolve().parent.parent
load_dotenv(_REPO_ROOT / ".env")

CONFIG_PATH = Path(__file__).resolve().parent / "config.yaml"

_config = yaml.safe_load(CONFIG_PATH.read_text())


def get_config() -> dict:
    """Return the team settings; tests patch `_config` to swap them."""
    return _config
