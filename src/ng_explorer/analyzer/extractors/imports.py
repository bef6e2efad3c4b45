"""
Import and re-export extraction from Tree-sitter.

Handles the ES module forms found in TypeScript sources:
- import { A, B as C } from 'mod'
- import D from 'mod'
- import * as Ns from 'mod'
- import type { T } from 'mod'
- export { A, B as C } from 'mod' / export * from 'mod'
- export { A as B } / export default A
"""

import logging
from typing import Any, Dict

from ng_explorer.analyzer.extractors.base import BaseExtractor
from ng_explorer.analyzer.models import (
    ImportBinding,
    ImportDeclaration,
    ReExport,
    SourceUnit,
)
from ng_explorer.analyzer.tree_sitter_adapter import (
    first_child_of_type,
    has_token,
    node_line,
    node_text,
    string_literal_value,
)

logger = logging.getLogger(__name__)


class ImportExtractor(BaseExtractor):
    """Extracts import declarations and re-exports from Tree-sitter."""

    def extract(self, tree: Any, result: SourceUnit) -> None:
        """Extract top-level imports and exports.

        Args:
            tree: Tree-sitter root node
            result: SourceUnit to populate
        """
        for node in tree.children:
            if node.type == "import_statement":
                try:
                    declaration = self._extract_import(node)
                except Exception as e:
                    logger.warning(f"Could not extract import at line {node_line(node)}: {e}")
                    continue
                if declaration is not None:
                    result.imports.append(declaration)
            elif node.type == "export_statement":
                re_export = self._extract_re_export(node)
                if re_export is not None:
                    result.re_exports.append(re_export)

    def _extract_import(self, node: Any) -> ImportDeclaration | None:
        """Build an ImportDeclaration from an import_statement node.

        Tree-sitter structure:
        - import_statement: ['type'] import_clause 'from' source:string
        - import_clause: identifier | named_imports | namespace_import
        - import_specifier: name [alias]

        Args:
            node: import_statement node

        Returns:
            ImportDeclaration, or None when the source is not a string literal
        """
        module = string_literal_value(node.child_by_field_name("source"))
        if module is None:
            return None

        declaration = ImportDeclaration(
            module=module,
            line_number=node_line(node),
            is_type_only=has_token(node, "type"),
        )

        clause = first_child_of_type(node, "import_clause")
        if clause is None:
            # Side-effect import: import './polyfills'
            return declaration

        for child in clause.named_children:
            if child.type == "identifier":
                name = node_text(child)
                declaration.bindings.append(
                    ImportBinding(local_name=name, module=module, kind="default", imported_name="default")
                )
            elif child.type == "namespace_import":
                identifier = first_child_of_type(child, "identifier")
                if identifier is not None:
                    declaration.bindings.append(
                        ImportBinding(local_name=node_text(identifier), module=module, kind="namespace")
                    )
            elif child.type == "named_imports":
                for specifier in child.named_children:
                    if specifier.type != "import_specifier":
                        continue
                    imported = node_text(specifier.child_by_field_name("name"))
                    alias = specifier.child_by_field_name("alias")
                    local = node_text(alias) if alias is not None else imported
                    declaration.bindings.append(
                        ImportBinding(local_name=local, module=module, kind="named", imported_name=imported)
                    )

        return declaration

    def _extract_re_export(self, node: Any) -> ReExport | None:
        """Build a ReExport from an export_statement that forwards names.

        Export statements carrying a declaration (export class ...) are left
        to the class extractor.

        Args:
            node: export_statement node

        Returns:
            ReExport or None
        """
        if node.child_by_field_name("declaration") is not None:
            return None

        module = string_literal_value(node.child_by_field_name("source"))
        line = node_line(node)

        clause = first_child_of_type(node, "export_clause")
        if clause is not None:
            return ReExport(module=module, line_number=line, names=self._export_names(clause))

        if module is not None:
            namespace_export = first_child_of_type(node, "namespace_export")
            if namespace_export is not None:
                identifier = first_child_of_type(namespace_export, "identifier", "string")
                return ReExport(
                    module=module,
                    line_number=line,
                    namespace=node_text(identifier) if identifier is not None else None,
                )
            if has_token(node, "*"):
                return ReExport(module=module, line_number=line, is_wildcard=True)
            return None

        # export default SomeClass;
        value = node.child_by_field_name("value")
        if has_token(node, "default") and value is not None and value.type == "identifier":
            return ReExport(module=None, line_number=line, names={"default": node_text(value)})

        return None

    def _export_names(self, clause: Any) -> Dict[str, str]:
        names: Dict[str, str] = {}
        for specifier in clause.named_children:
            if specifier.type != "export_specifier":
                continue
            original = node_text(specifier.child_by_field_name("name"))
            alias = specifier.child_by_field_name("alias")
            exported = node_text(alias) if alias is not None else original
            names[exported] = original
        return names
