import re
from pathlib import Path

import yaml
from pydantic import ValidationError

from src.rules.models import Rules

# First fenced yaml block of a markdown document.
FENCED_YAML = re.compile(r"^\s*```ya?ml\s*$\n(.*?)^\s*```", re.MULTILINE | re.DOTALL)


def load_rules(path: str | Path) -> Rules:
    """
    Read rules.yaml (or a markdown file embedding it) from disk.
    Raises FileNotFoundError when missing, ValueError when malformed.
    """
    path = Path(path)
    if not path.is_file():
        raise FileNotFoundError(f"Rules file not found at: {path}")
    return parse_rules(path.read_text(encoding="utf-8"))


def extract_yaml(content: str) -> str:
    match = FENCED_YAML.search(content)
    return match.group(1) if match else content


def parse_rules(content: str) -> Rules:
    try:
        data = yaml.safe_load(extract_yaml(content))
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML syntax in rules file: {e}") from e

    if not isinstance(data, dict):
        raise ValueError("Rules file must contain a mapping at the top level")

    try:
        return Rules.model_validate(data)
    except ValidationError as e:
        raise ValueError(f"Rules validation failed:\n{e}") from e
