"""Template tree walking and placeholder substitution.

Template directories live under ``helix/scaffolder/templates/<name>/``.  Every
entry is classified once, at walk time, into one of three variants:

* ``DirectoryEntry`` -- created idempotently at the destination,
* ``PlainFileEntry`` -- copied byte-for-byte,
* ``PlaceholderFileEntry`` -- a file ending in ``.template`` whose text gets
  literal token replacement before being written without the suffix.

Substitution is plain string replacement; there is no template language, so
markers such as ``{{projectName}}`` never collide with JSX ``{{ ... }}``
object literals unless they match exactly.
"""

from __future__ import annotations

import asyncio
import shutil
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Union

from helix.config import GenerationContext, HelixConfig
from helix.scaffolder.errors import TemplateError
from helix.utils import print_debug

PLACEHOLDER_SUFFIX = ".template"

# Manifests produced upstream are merged, never overwritten by a copy.
EXCLUDED_FILENAMES: frozenset[str] = frozenset({"package.json", "package.json.template"})

PROJECT_NAME_TOKEN = "{{projectName}}"
DEFAULT_THEME_TOKEN = "{{defaultTheme}}"
DEFAULT_MODE_TOKEN = "{{defaultMode}}"


# ---------------------------------------------------------------------------
# Template entries
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class DirectoryEntry:
    """A directory inside the template tree."""

    source: Path
    relative: Path

    @property
    def destination(self) -> Path:
        return self.relative


@dataclass(frozen=True)
class PlainFileEntry:
    """A file copied verbatim."""

    source: Path
    relative: Path

    @property
    def destination(self) -> Path:
        return self.relative


@dataclass(frozen=True)
class PlaceholderFileEntry:
    """A file whose content needs token substitution."""

    source: Path
    relative: Path
    marker_suffix: str = PLACEHOLDER_SUFFIX

    @property
    def destination(self) -> Path:
        """Relative destination path with the marker suffix stripped."""
        return self.relative.with_name(self.relative.name[: -len(self.marker_suffix)])


TemplateEntry = Union[DirectoryEntry, PlainFileEntry, PlaceholderFileEntry]


def classify(path: Path, root: Path) -> TemplateEntry:
    """Resolve the variant of *path* (which must live under *root*)."""
    relative = path.relative_to(root)
    if path.is_dir():
        return DirectoryEntry(source=path, relative=relative)
    if path.name.endswith(PLACEHOLDER_SUFFIX) and len(path.name) > len(PLACEHOLDER_SUFFIX):
        return PlaceholderFileEntry(source=path, relative=relative)
    return PlainFileEntry(source=path, relative=relative)


def walk_template(root: str | Path) -> Iterator[TemplateEntry]:
    """Yield every entry under *root*, directories before their contents.

    Siblings are visited in name order so that the walk is stable across
    platforms.  The root itself is not yielded.
    """
    root_path = Path(root)

    def _walk(directory: Path) -> Iterator[TemplateEntry]:
        for child in sorted(directory.iterdir(), key=lambda p: p.name):
            entry = classify(child, root_path)
            yield entry
            if isinstance(entry, DirectoryEntry):
                yield from _walk(child)

    yield from _walk(root_path)


# ---------------------------------------------------------------------------
# Placeholder substitution
# ---------------------------------------------------------------------------


def resolve_tokens(context: GenerationContext, config: HelixConfig) -> dict[str, str]:
    """Build the token map for one generation run."""
    return {
        PROJECT_NAME_TOKEN: context.effective_name,
        DEFAULT_THEME_TOKEN: config.default_theme,
        DEFAULT_MODE_TOKEN: config.default_mode,
    }


def substitute_placeholders(text: str, tokens: Mapping[str, str]) -> str:
    """Replace every occurrence of every token in *text*."""
    for token, value in tokens.items():
        if token:
            text = text.replace(token, value)
    return text


def render_placeholder_file(
    entry: PlaceholderFileEntry,
    destination_root: Path,
    tokens: Mapping[str, str],
) -> Path:
    """Substitute *entry* and write it below *destination_root*.

    Raises:
        TemplateError: If the source cannot be read or the output written.
    """
    target = destination_root / entry.destination
    try:
        content = entry.source.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise TemplateError(f"Cannot read template file {entry.source}: {exc}") from exc
    try:
        target.write_text(substitute_placeholders(content, tokens), encoding="utf-8")
    except OSError as exc:
        raise TemplateError(f"Cannot write {target}: {exc}") from exc
    return target


# ---------------------------------------------------------------------------
# Tree copy
# ---------------------------------------------------------------------------


@dataclass
class CopyReport:
    """Summary of a template overlay."""

    directories_created: int = 0
    files_copied: int = 0
    placeholders_rendered: int = 0
    skipped: list[Path] = field(default_factory=list)

    @property
    def total(self) -> int:
        """Number of entries processed (skipped entries excluded)."""
        return self.directories_created + self.files_copied + self.placeholders_rendered


def _copy_tree(
    source_root: Path,
    destination_root: Path,
    tokens: Mapping[str, str],
    context: GenerationContext | None,
) -> CopyReport:
    report = CopyReport()
    for entry in walk_template(source_root):
        if entry.relative.name in EXCLUDED_FILENAMES and not isinstance(entry, DirectoryEntry):
            report.skipped.append(entry.relative)
            print_debug(context, f"Skipped {entry.relative} to preserve merged package.json")
            continue

        target = destination_root / entry.destination
        if isinstance(entry, DirectoryEntry):
            existed = target.is_dir()
            try:
                target.mkdir(parents=True, exist_ok=True)
            except OSError as exc:
                raise TemplateError(f"Cannot create directory {target}: {exc}") from exc
            if not existed:
                report.directories_created += 1
                print_debug(context, f"Created directory: {target}")
        elif isinstance(entry, PlaceholderFileEntry):
            render_placeholder_file(entry, destination_root, tokens)
            report.placeholders_rendered += 1
            print_debug(context, f"Rendered template file: {entry.relative} -> {entry.destination}")
        else:
            try:
                shutil.copyfile(entry.source, target)
            except OSError as exc:
                raise TemplateError(f"Cannot copy {entry.source} to {target}: {exc}") from exc
            report.files_copied += 1
            print_debug(context, f"Copied file: {entry.relative}")
    return report


async def copy_template_tree(
    source_root: str | Path,
    destination_root: str | Path,
    tokens: Mapping[str, str],
    context: GenerationContext | None = None,
) -> CopyReport:
    """Overlay the template at *source_root* onto *destination_root*.

    Directories are created idempotently, identity manifests are skipped,
    plain files copied and placeholder files rendered.  The work runs in a
    worker thread.

    Raises:
        TemplateError: If the template is missing or any file operation fails.
            Files already written are left in place.
    """
    source = Path(source_root)
    destination = Path(destination_root)
    if not source.is_dir():
        raise TemplateError(f"Template directory not found: {source}")
    destination.mkdir(parents=True, exist_ok=True)

    print_debug(context, f"Template path: {source}")
    report = await asyncio.to_thread(_copy_tree, source, destination, tokens, context)
    print_debug(context, f"Total entries processed: {report.total}")
    return report


def list_templates(templates_dir: str | Path) -> list[str]:
    """Return the names of the template directories packaged under *templates_dir*."""
    root = Path(templates_dir)
    if not root.is_dir():
        return []
    return sorted(p.name for p in root.iterdir() if p.is_dir())
