"""
Manifest loading.

A manifest is a TOML or YAML file with a ``test_assets`` table mapping an
arbitrary key to a record with ``filename``, ``hash`` and ``url``:

    [test_assets.logo]
    filename = "images/logo.png"
    hash = "2cf24dba..."
    url = "https://example.com/logo.png"
"""

import tomllib
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml
from pydantic import ValidationError

from fixture_fetch.errors import ConfigurationError, ManifestError
from fixture_fetch.models import AssetDescriptor, AssetSet

TOML_SUFFIXES = (".toml",)
YAML_SUFFIXES = (".yaml", ".yml")


def load_manifest(path: Union[str, Path]) -> AssetSet:
    """
    Read and validate a manifest file.

    Raises:
        ManifestError: Unreadable file, unknown extension, syntax error or
            invalid asset record
    """
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ManifestError(
            f"Cannot read manifest {path}", cause=e, context={"path": str(path)}
        ) from e

    data = parse_manifest_text(text, path.suffix.lower(), source=str(path))
    return validate_manifest(data, source=str(path))


def parse_manifest_text(text: str, suffix: str, source: str = "<string>") -> Dict[str, Any]:
    """Parse manifest text according to its file extension."""
    try:
        if suffix in TOML_SUFFIXES:
            data = tomllib.loads(text)
        elif suffix in YAML_SUFFIXES:
            data = yaml.safe_load(text)
        else:
            raise ManifestError(
                f"Unsupported manifest format '{suffix}' for {source}",
                context={"path": source},
            )
    except (tomllib.TOMLDecodeError, yaml.YAMLError) as e:
        raise ManifestError(
            f"Cannot parse manifest {source}", cause=e, context={"path": source}
        ) from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ManifestError(
            f"Manifest {source} must contain a mapping at the top level",
            context={"path": source},
        )
    return data


def validate_manifest(data: Dict[str, Any], source: str = "<string>") -> AssetSet:
    """
    Validate parsed manifest data into an AssetSet (insertion-ordered).

    Each record is validated on its own so that errors name the record key,
    whether pydantic rejects its shape or a field validator rejects a value.
    """
    records = data.get("test_assets", {})
    if not isinstance(records, dict):
        raise ManifestError(
            f"Invalid manifest {source}: test_assets must be a table of records",
            context={"path": source},
        )

    assets: AssetSet = {}
    for key, record in records.items():
        location = f"test_assets.{key}"
        try:
            assets[key] = AssetDescriptor.model_validate(record)
        except ValidationError as e:
            details = "; ".join(
                f"{'.'.join([location, *(str(p) for p in err['loc'])])}: {err['msg']}"
                for err in e.errors()
            )
            raise ManifestError(
                f"Invalid manifest {source}: {details}",
                cause=e,
                context={"path": source, "asset_key": key},
            ) from e
        except ConfigurationError as e:
            raise ManifestError(
                f"Invalid manifest {source}: {location}: {e.message}",
                cause=e,
                context={"path": source, "asset_key": key},
            ) from e
    return assets


def filter_assets(assets: AssetSet, pattern: Optional[str]) -> AssetSet:
    """Keep only the entries whose key contains ``pattern``."""
    if not pattern:
        return dict(assets)
    return {key: asset for key, asset in assets.items() if pattern in key}


__all__ = [
    "load_manifest",
    "parse_manifest_text",
    "validate_manifest",
    "filter_assets",
]
