"""Generator configuration and its YAML loader."""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any

import yaml

DEFAULT_DIVISION_NUMBER = 20


@dataclass(frozen=True)
class GeneratorConfig:
    """Settings shared by every generation call.

    The config is immutable; a generation call reads one snapshot from
    start to finish. Use ``with_division_number`` or
    ``dataclasses.replace`` to derive a changed copy.

    Attributes:
        division_number: Tessellation resolution around curved surfaces
        normal_generation: Whether to generate normals after sampling
        bounding_box_update: Whether to recompute mesh bounds
    """

    division_number: int = DEFAULT_DIVISION_NUMBER
    normal_generation: bool = True
    bounding_box_update: bool = True

    def with_division_number(self, n: int) -> GeneratorConfig:
        """Return a copy with a new division number.

        Negative values fall back to ``DEFAULT_DIVISION_NUMBER``.
        """
        return replace(self, division_number=DEFAULT_DIVISION_NUMBER if n < 0 else int(n))


def parse_config(data: dict[str, Any] | None) -> GeneratorConfig:
    """Build a config from a parsed YAML mapping.

    YAML format:
    ```yaml
    division_number: 24
    normal_generation: true
    bounding_box_update: false
    ```

    Raises:
        ValueError: If the mapping has keys the config does not know
    """
    data = data or {}
    known = {f.name for f in fields(GeneratorConfig)}
    unknown = set(data) - known
    if unknown:
        raise ValueError(f"Unknown config keys: {sorted(unknown)}")

    config = GeneratorConfig(
        normal_generation=bool(data.get("normal_generation", True)),
        bounding_box_update=bool(data.get("bounding_box_update", True)),
    )
    return config.with_division_number(
        int(data.get("division_number", DEFAULT_DIVISION_NUMBER))
    )


def load_config(path: str | Path) -> GeneratorConfig:
    """Load a generator config from a YAML file.

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the YAML format is invalid
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")
    with open(path) as f:
        data = yaml.safe_load(f)
    if data is not None and not isinstance(data, dict):
        raise ValueError(f"Config file {path} must contain a mapping")
    return parse_config(data)


DEFAULT_CONFIG = GeneratorConfig()
