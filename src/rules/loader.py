"""
Blog rules loading.

rules.yaml holds the tunables for related posts scoring, listings, category
colors, export format and inline rich text. A rules doc may also be a markdown
file with the YAML inside a ```yaml fence.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from src.rules.models import Rules

logger = logging.getLogger(__name__)


def extract_yaml_block(content: str) -> str:
    """Return the first ```yaml fenced block, or the content unchanged."""
    lines = content.splitlines()
    for start, line in enumerate(lines):
        if line.strip().startswith("```yaml"):
            block = []
            for inner in lines[start + 1 :]:
                if inner.strip().startswith("```"):
                    break
                block.append(inner)
            return "\n".join(block)
    return content


def parse_rules(data: Any) -> Rules:
    """
    Validate an already-parsed rules mapping.

    Raises ValueError if the mapping does not match the schema.
    """
    if not isinstance(data, dict):
        raise ValueError("Rules file must contain a mapping at the top level")
    try:
        return Rules.model_validate(data)
    except ValidationError as e:
        raise ValueError(f"Rules validation failed:\n{e}") from e


def load_rules(path: Path) -> Rules:
    """
    Load and validate the rules file.
    Raises FileNotFoundError if file missing.
    Raises ValueError if YAML or schema invalid.
    """
    if not path.exists():
        raise FileNotFoundError(f"Rules file not found at: {path}")

    content = extract_yaml_block(path.read_text(encoding="utf-8"))

    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML syntax in rules file: {e}") from e

    rules = parse_rules(data)
    logger.debug("Loaded rules %s (version %s)", path, rules.project.rules_version)
    return rules
