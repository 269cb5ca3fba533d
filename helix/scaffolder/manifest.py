"""Fullstack ``package.json`` merge.

The destination manifest comes from the UIKit and AppKit generators and owns
the project identity and any dependency versions it already pins.  The Helix
template manifest owns the fullstack script set:

* dependencies and devDependencies are merged additively, never overwritten,
* scripts from the template always replace upstream single-stack scripts.
"""

from __future__ import annotations

import copy
import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from helix.config import GenerationContext
from helix.scaffolder.errors import ManifestError
from helix.utils import load_json, print_debug, save_json

MODULE_TYPE = "module"
LEGACY_MODULE_TYPE = "commonjs"
FULLSTACK_DESCRIPTION = "Full-stack FBCA application with UIKit frontend and AppKit backend"
HELIX_KEYWORD = "helix"


@dataclass
class MergeReport:
    """What a merge changed, for diagnostics."""

    added_dependencies: list[str] = field(default_factory=list)
    added_dev_dependencies: list[str] = field(default_factory=list)
    added_scripts: list[str] = field(default_factory=list)
    overridden_scripts: list[str] = field(default_factory=list)
    converted_to_module: bool = False


def normalize_module_type(manifest: dict[str, Any]) -> bool:
    """Switch a missing or ``commonjs`` module type to ``module``.

    Returns ``True`` when the manifest was changed.
    """
    if not manifest.get("type") or manifest["type"] == LEGACY_MODULE_TYPE:
        manifest["type"] = MODULE_TYPE
        return True
    return False


def _section(manifest: dict[str, Any], key: str, default: Any) -> Any:
    value = manifest.get(key)
    if value is None:
        manifest[key] = default
        return default
    if not isinstance(value, type(default)):
        expected = "object" if isinstance(default, dict) else "array"
        raise ManifestError(f'"{key}" must be a JSON {expected}')
    return value


def _merge_missing(target: dict[str, str], source: dict[str, str]) -> list[str]:
    added: list[str] = []
    for name, version in source.items():
        if name not in target:
            target[name] = version
            added.append(name)
    return added


def merge_manifests(
    destination: dict[str, Any],
    template: dict[str, Any],
) -> tuple[dict[str, Any], MergeReport]:
    """Merge the Helix *template* manifest into *destination*.

    Neither input is mutated.

    Returns:
        The merged manifest and a ``MergeReport``.

    Raises:
        ManifestError: If a container field has the wrong JSON type.
    """
    merged = copy.deepcopy(destination)
    report = MergeReport()

    report.converted_to_module = normalize_module_type(merged)

    dependencies = _section(merged, "dependencies", {})
    dev_dependencies = _section(merged, "devDependencies", {})
    report.added_dependencies = _merge_missing(dependencies, template.get("dependencies") or {})
    report.added_dev_dependencies = _merge_missing(
        dev_dependencies, template.get("devDependencies") or {}
    )

    scripts = _section(merged, "scripts", {})
    for name, command in (template.get("scripts") or {}).items():
        if name in scripts:
            report.overridden_scripts.append(name)
        else:
            report.added_scripts.append(name)
        scripts[name] = command

    merged["description"] = FULLSTACK_DESCRIPTION

    keywords = _section(merged, "keywords", [])
    if HELIX_KEYWORD not in keywords:
        keywords.append(HELIX_KEYWORD)

    return merged, report


def load_manifest(path: str | Path) -> dict[str, Any]:
    """Read a ``package.json``.

    Raises:
        ManifestError: If the file is missing, malformed or not an object.
    """
    manifest_path = Path(path)
    try:
        return load_json(manifest_path)
    except FileNotFoundError as exc:
        raise ManifestError(f"Manifest not found: {manifest_path}") from exc
    except json.JSONDecodeError as exc:
        raise ManifestError(f"Malformed JSON in {manifest_path}: {exc}") from exc
    except (OSError, ValueError) as exc:
        raise ManifestError(f"Cannot read {manifest_path}: {exc}") from exc


async def write_manifest(manifest: dict[str, Any], path: str | Path) -> None:
    """Persist *manifest* as two-space indented JSON."""
    try:
        await save_json(manifest, path)
    except OSError as exc:
        raise ManifestError(f"Cannot write {path}: {exc}") from exc


async def merge_manifest_files(
    destination_path: str | Path,
    template_path: str | Path,
    context: GenerationContext | None = None,
) -> MergeReport:
    """Load, merge and write back the destination ``package.json``."""
    print_debug(context, f"Reading existing package.json: {destination_path}")
    existing = load_manifest(destination_path)
    print_debug(context, f"Existing package name: {existing.get('name')}")
    print_debug(context, f"Existing scripts: {list((existing.get('scripts') or {}).keys())}")

    print_debug(context, f"Reading Helix template from: {template_path}")
    template = load_manifest(template_path)

    merged, report = merge_manifests(existing, template)
    if report.converted_to_module:
        print_debug(context, 'Converted package type to "module"')
    for name in report.added_dependencies:
        print_debug(context, f"Added dependency: {name}@{merged['dependencies'][name]}")
    for name in report.added_dev_dependencies:
        print_debug(context, f"Added devDependency: {name}@{merged['devDependencies'][name]}")
    for name in report.overridden_scripts:
        print_debug(context, f"Overrode script: {name}")
    for name in report.added_scripts:
        print_debug(context, f"Added script: {name}")

    await write_manifest(merged, destination_path)
    print_debug(context, "package.json merge completed")
    return report
