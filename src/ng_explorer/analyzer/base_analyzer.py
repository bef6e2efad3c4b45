"""
SourceAnalyzer orchestrator.

Parses one TypeScript file and runs the extractors over its tree.
"""

import hashlib
import logging
from pathlib import Path
from typing import Any

from ng_explorer.analyzer.extractors.calls import CallExtractor
from ng_explorer.analyzer.extractors.classes import ClassExtractor
from ng_explorer.analyzer.extractors.decorators import DecoratorExtractor
from ng_explorer.analyzer.extractors.imports import ImportExtractor
from ng_explorer.analyzer.extractors.members import MemberExtractor
from ng_explorer.analyzer.models import SourceUnit
from ng_explorer.analyzer.parser import ParseError, parse_typescript_source

logger = logging.getLogger(__name__)


def compute_hash(content: str) -> str:
    """Compute SHA-256 hash of file contents.

    Args:
        content: File text

    Returns:
        Hexadecimal hash string
    """
    return hashlib.sha256(content.encode("utf-8")).hexdigest()


class SourceAnalyzer:
    """Analyzes TypeScript files into SourceUnits.

    Delegates extraction to specialized extractor classes. Extractor
    failures are logged and recorded on the unit, never raised.
    """

    def __init__(self):
        """Initialize analyzer with all extractors."""
        self.import_extractor = ImportExtractor()
        self.class_extractor = ClassExtractor()
        self.decorator_extractor = DecoratorExtractor()
        self.member_extractor = MemberExtractor()
        self.call_extractor = CallExtractor()

    def _run_extractions(self, tree: Any, result: SourceUnit) -> None:
        """Run extraction methods sequentially using extractor instances.

        Args:
            tree: Tree-sitter root node
            result: SourceUnit to populate
        """
        try:
            self.import_extractor.extract(tree, result)
        except Exception as e:
            logger.error(f"Import extraction failed for {result.file_path}: {e}")
            result.errors.append(f"Import extraction failed: {e}")

        try:
            self.class_extractor.extract(tree, result)
        except Exception as e:
            logger.error(f"Class extraction failed for {result.file_path}: {e}")
            result.errors.append(f"Class extraction failed: {e}")
            return

        # Decorators, members and calls attach to the classes found above
        try:
            self.decorator_extractor.extract(tree, result)
        except Exception as e:
            logger.error(f"Decorator extraction failed for {result.file_path}: {e}")
            result.errors.append(f"Decorator extraction failed: {e}")

        try:
            self.member_extractor.extract(tree, result)
        except Exception as e:
            logger.error(f"Member extraction failed for {result.file_path}: {e}")
            result.errors.append(f"Member extraction failed: {e}")

        try:
            self.call_extractor.extract(tree, result)
        except Exception as e:
            logger.error(f"Call extraction failed for {result.file_path}: {e}")
            result.errors.append(f"Call extraction failed: {e}")

    def analyze_source(self, content: str, file_path: str) -> SourceUnit:
        """Analyze already-read TypeScript source.

        Args:
            content: Source text
            file_path: Path recorded on the unit and used for grammar selection

        Returns:
            SourceUnit containing all extracted information
        """
        result = SourceUnit(
            file_path=file_path,
            content_hash=compute_hash(content),
            source=content,
        )

        try:
            tree = parse_typescript_source(content, filename=file_path)
        except ParseError as e:
            result.errors.append(f"Parse error: {e}")
            return result

        if tree.has_error:
            logger.debug(f"Syntax errors in {file_path}; extracting what parsed")

        self._run_extractions(tree, result)
        return result

    def analyze_file(self, file_path: Path) -> SourceUnit:
        """Analyze a single TypeScript file.

        Args:
            file_path: Path to the file

        Returns:
            SourceUnit containing all extracted information

        Raises:
            OSError: If the file cannot be read
        """
        with open(file_path, "r", encoding="utf-8") as f:
            content = f.read()
        return self.analyze_source(content, str(file_path))
