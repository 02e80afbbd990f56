"""
Spec discovery, loading and bundling.

Specs are JSON or YAML documents. Bundling inlines references to external
files so the resolution core only ever sees one self-contained document;
internal references of the root document are left untouched.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import yaml

from ..errors import SpecLoadError

logger = logging.getLogger(__name__)

SPEC_EXTENSIONS = (".yaml", ".yml", ".json")


def find_specs(specs_dir: str | Path) -> list[Path]:
    """All spec files directly under specs_dir, sorted by name."""
    directory = Path(specs_dir)
    if not directory.is_dir():
        logger.warning("Specs directory not found: %s", directory)
        return []
    return sorted(p for p in directory.iterdir() if p.is_file() and p.suffix.lower() in SPEC_EXTENSIONS)


def extract_resource_name(spec_path: str | Path) -> str:
    """Resource name of a spec file ("users.openapi.yaml" -> "users")."""
    name = Path(spec_path).name
    for extension in SPEC_EXTENSIONS:
        if name.lower().endswith(extension):
            name = name[: -len(extension)]
            break
    if name.lower().endswith(".openapi"):
        name = name[: -len(".openapi")]
    return name


def load_document(path: str | Path) -> dict[str, Any]:
    """
    Read a JSON or YAML document.

    Args:
        path: File to read; ".json" files are parsed as JSON, anything else as YAML

    Returns:
        The parsed mapping

    Raises:
        SpecLoadError: If the file is missing, malformed, or not a mapping
    """
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise SpecLoadError(f"Cannot read {path}: {e}") from e

    try:
        if path.suffix.lower() == ".json":
            document = json.loads(text)
        else:
            document = yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise SpecLoadError(f"Cannot parse {path}: {e}") from e

    if not isinstance(document, dict):
        raise SpecLoadError(f"{path} does not contain a mapping")
    return document


def resolve_pointer(document: Any, pointer: str) -> Any | None:
    """
    Follow a JSON pointer ("#/components/schemas/Order") inside a document.

    Returns:
        The target value, or None when any segment is missing
    """
    fragment = pointer[1:] if pointer.startswith("#") else pointer
    node = document
    for raw_segment in fragment.split("/"):
        if not raw_segment:
            continue
        segment = raw_segment.replace("~1", "/").replace("~0", "~")
        if isinstance(node, dict) and segment in node:
            node = node[segment]
        elif isinstance(node, list) and segment.isdigit() and int(segment) < len(node):
            node = node[int(segment)]
        else:
            return None
    return node


class SpecBundler:
    """Inlines external $refs of a root document, caching every loaded file."""

    def __init__(self, root_path: str | Path):
        self.root_path = Path(root_path).resolve()
        self._documents: dict[Path, dict[str, Any]] = {}

    def bundle(self) -> dict[str, Any]:
        """
        Load the root document and inline its external references.

        Raises:
            SpecLoadError: If the root or a referenced file cannot be loaded,
                or a reference points at a missing location
        """
        root = self._load(self.root_path)
        return self._inline(root, self.root_path, ())

    def _load(self, path: Path) -> dict[str, Any]:
        if path not in self._documents:
            self._documents[path] = load_document(path)
        return self._documents[path]

    def _inline(self, node: Any, base: Path, stack: tuple[tuple[Path, str], ...]) -> Any:
        if isinstance(node, list):
            return [self._inline(item, base, stack) for item in node]
        if not isinstance(node, dict):
            return node

        ref = node.get("$ref")
        # Internal refs of the root stay as they are; internal refs of an
        # external file point into that file
        if isinstance(ref, str) and (not ref.startswith("#") or base != self.root_path):
            file_part, _, fragment = ref.partition("#")
            target_path = (base.parent / file_part).resolve() if file_part else base
            key = (target_path, fragment)
            if key in stack:
                logger.debug("Leaving cyclic external reference %s unresolved", ref)
                return dict(node)

            target = resolve_pointer(self._load(target_path), fragment)
            if target is None:
                raise SpecLoadError(f"Unresolvable reference {ref} in {base}")

            inlined = self._inline(target, target_path, stack + (key,))
            if isinstance(inlined, dict):
                siblings = {k: self._inline(v, base, stack) for k, v in node.items() if k != "$ref"}
                return {**inlined, **siblings}
            return inlined

        return {key: self._inline(value, base, stack) for key, value in node.items()}


def bundle(spec_path: str | Path) -> dict[str, Any]:
    """Load a spec and inline all of its external references."""
    return SpecBundler(spec_path).bundle()
