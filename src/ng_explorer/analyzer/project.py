"""
Project-wide source cache and symbol resolution.

SourceProject owns the parsed SourceUnits of one analysis session. It is
created by the caller and passed to the analyzers that need it, so several
runs can share parses. It is not thread-safe.
"""

import logging
import os
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Set, Tuple

from ng_explorer.analyzer.base_analyzer import SourceAnalyzer, compute_hash
from ng_explorer.analyzer.models import ClassDefinition, SourceUnit

logger = logging.getLogger(__name__)

DEFAULT_EXCLUDE_DIRS = ("node_modules", "dist", ".git")

MODULE_SUFFIXES = (".ts", ".tsx", ".d.ts")
INDEX_FILES = ("index.ts", "index.tsx")


def normalize_path(path: str | Path) -> str:
    return os.path.abspath(str(path))


def strip_type_arguments(type_name: str) -> str:
    """Drop generic arguments: ``Store<State>`` -> ``Store``."""
    return type_name.split("<", 1)[0].strip()


class SourceProject:
    """Get-or-load cache of SourceUnits keyed by absolute path."""

    def __init__(self, analyzer: Optional[SourceAnalyzer] = None):
        """Initialize an empty project.

        Args:
            analyzer: Analyzer used to parse files (default: a new SourceAnalyzer)
        """
        self.analyzer = analyzer or SourceAnalyzer()
        self._units: Dict[str, SourceUnit] = {}

    def __contains__(self, path: str | Path) -> bool:
        return normalize_path(path) in self._units

    def __len__(self) -> int:
        return len(self._units)

    def get(self, path: str | Path) -> Optional[SourceUnit]:
        """Return the cached unit for a path without touching the disk."""
        return self._units.get(normalize_path(path))

    def units(self) -> List[SourceUnit]:
        """All loaded units in load order."""
        return list(self._units.values())

    def load(self, path: str | Path, refresh: bool = False) -> Optional[SourceUnit]:
        """Get a unit from the cache, parsing the file on first access.

        With ``refresh`` the file is re-read and re-parsed only when its
        content hash changed.

        Args:
            path: File path
            refresh: Re-read the file even if it is cached

        Returns:
            The SourceUnit, or None if the file cannot be read
        """
        key = normalize_path(path)
        cached = self._units.get(key)
        if cached is not None and not refresh:
            return cached

        try:
            with open(key, "r", encoding="utf-8") as f:
                content = f.read()
        except (OSError, UnicodeDecodeError) as e:
            logger.debug(f"Cannot read {key}: {e}")
            self._units.pop(key, None)
            return None

        if cached is not None and cached.content_hash == compute_hash(content):
            return cached

        unit = self.analyzer.analyze_source(content, key)
        for error in unit.errors:
            logger.warning(f"{key}: {error}")
        self._units[key] = unit
        return unit

    def add_directory(
        self,
        directory: str | Path,
        recursive: bool = False,
        exclude_dirs: Iterable[str] = DEFAULT_EXCLUDE_DIRS,
        include_specs: bool = True,
    ) -> List[SourceUnit]:
        """Load the ``.ts`` files of a directory.

        Args:
            directory: Directory to scan
            recursive: Descend into subdirectories
            exclude_dirs: Directory names skipped when recursing
            include_specs: Also load ``*.spec.ts`` test files

        Returns:
            The loaded units, in sorted path order
        """
        root = Path(directory)
        if not root.is_dir():
            return []

        excluded = set(exclude_dirs)
        pattern = root.rglob("*.ts") if recursive else root.glob("*.ts")
        units = []
        for file_path in sorted(pattern):
            if not file_path.is_file():
                continue
            if excluded.intersection(file_path.relative_to(root).parts[:-1]):
                continue
            if not include_specs and file_path.name.endswith(".spec.ts"):
                continue
            unit = self.load(file_path)
            if unit is not None:
                units.append(unit)
        return units

    def read_text(self, path: str | Path) -> Optional[str]:
        """Read a non-source file such as an external template."""
        try:
            return Path(path).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.warning(f"Cannot read {path}: {e}")
            return None

    def resolve_module(self, from_file: str, specifier: str) -> Optional[str]:
        """Resolve a relative module specifier to a file path.

        Bare specifiers (packages, path aliases) are not resolved.

        Args:
            from_file: Path of the importing file
            specifier: Module specifier as written in the import

        Returns:
            Absolute file path or None
        """
        if not specifier.startswith("."):
            return None

        base = os.path.normpath(os.path.join(os.path.dirname(normalize_path(from_file)), specifier))
        candidates = [base + suffix for suffix in MODULE_SUFFIXES]
        candidates.extend(os.path.join(base, index) for index in INDEX_FILES)
        if base.endswith((".ts", ".tsx")):
            candidates.append(base)

        for candidate in candidates:
            if candidate in self._units or os.path.isfile(candidate):
                return candidate
        return None

    def resolve_class(
        self,
        unit: SourceUnit,
        type_name: str,
        _seen: Optional[Set[Tuple[str, str]]] = None,
    ) -> Optional[ClassDefinition]:
        """Resolve a type reference written in a unit to its class declaration.

        Looks in the unit itself, then follows named, default and namespace
        imports of relative modules, including re-export chains.

        Args:
            unit: Unit in which the type reference appears
            type_name: Type text such as ``UserService`` or ``Api.Client<T>``

        Returns:
            ClassDefinition or None if the type is not an in-project class
        """
        seen = _seen if _seen is not None else set()
        name = strip_type_arguments(type_name)
        if not name:
            return None

        if "." in name:
            namespace, member = name.split(".", 1)
            binding = unit.find_binding(namespace)
            if binding is None or binding.kind != "namespace":
                return None
            target = self._load_module(unit.file_path, binding.module)
            return self.resolve_export(target, member, seen) if target else None

        cls = unit.get_class(name)
        if cls is not None:
            return cls

        binding = unit.find_binding(name)
        if binding is None or binding.kind == "namespace":
            return None
        target = self._load_module(unit.file_path, binding.module)
        if target is None:
            return None
        exported = "default" if binding.kind == "default" else binding.imported_name or name
        return self.resolve_export(target, exported, seen)

    def resolve_export(
        self,
        unit: SourceUnit,
        exported_name: str,
        seen: Optional[Set[Tuple[str, str]]] = None,
    ) -> Optional[ClassDefinition]:
        """Find the class a module exports under a name.

        Args:
            unit: Exporting module
            exported_name: Exported name, ``default``, or ``Ns.Name`` for
                namespace re-exports
            seen: (file, name) pairs already visited on this chain

        Returns:
            ClassDefinition or None
        """
        seen = seen if seen is not None else set()
        key = (unit.file_path, exported_name)
        if key in seen:
            return None
        seen.add(key)

        if "." in exported_name:
            namespace, member = exported_name.split(".", 1)
            for re_export in unit.re_exports:
                if re_export.namespace == namespace and re_export.module:
                    target = self._load_module(unit.file_path, re_export.module)
                    if target is not None:
                        return self.resolve_export(target, member, seen)
            return None

        if exported_name == "default":
            cls = unit.default_export_class()
            if cls is not None:
                return cls
        else:
            cls = unit.get_class(exported_name)
            if cls is not None and cls.is_exported:
                return cls

        for re_export in unit.re_exports:
            if re_export.module is None and exported_name in re_export.names:
                # export { Local as Exported }, Local possibly imported
                return self.resolve_class(unit, re_export.names[exported_name], seen)

        for re_export in unit.re_exports:
            if re_export.module is None:
                continue
            if exported_name in re_export.names:
                target = self._load_module(unit.file_path, re_export.module)
                if target is not None:
                    found = self.resolve_export(target, re_export.names[exported_name], seen)
                    if found is not None:
                        return found
            elif re_export.is_wildcard and exported_name != "default":
                target = self._load_module(unit.file_path, re_export.module)
                if target is not None:
                    found = self.resolve_export(target, exported_name, seen)
                    if found is not None:
                        return found

        return None

    def _load_module(self, from_file: str, specifier: str) -> Optional[SourceUnit]:
        path = self.resolve_module(from_file, specifier)
        if path is None:
            return None
        return self.load(path)
