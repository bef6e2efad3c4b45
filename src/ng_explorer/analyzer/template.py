"""
Template metadata and coarse markup scanning.

Templates are not parsed. Element names are taken from start tags with a
regular expression, and common HTML elements are filtered out.
"""

import logging
import os
import re
from dataclasses import dataclass
from typing import List, Optional

from ng_explorer.analyzer.models import COMPONENT_DECORATOR, ClassDefinition

logger = logging.getLogger(__name__)

START_TAG_PATTERN = re.compile(r"<([a-zA-Z][\w-]*)\b")

HTML_TAGS = frozenset(
    [
        "div", "span", "h1", "h2", "h3", "h4", "h5", "h6", "p", "ul", "li",
        "ol", "header", "footer", "section", "article", "main", "nav", "a",
        "img", "button", "input", "select", "option", "textarea", "form",
        "label", "table", "thead", "tbody", "tr", "td", "th", "pre", "code",
    ]
)


@dataclass
class TemplateInfo:
    """Template metadata of a component.

    Normally at most one field is set. A component declaring both
    ``template`` and ``templateUrl`` gets both, as found.
    """

    template_file_path: Optional[str] = None
    inline_template: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return self.template_file_path is None and self.inline_template is None


def extract_template_info(cls: ClassDefinition, source_file_path: str) -> TemplateInfo:
    """
    Read template metadata from a class's component decorator.

    Args:
        cls: Component class
        source_file_path: Path of the declaring file, used to resolve templateUrl

    Returns:
        TemplateInfo with an absolute template path and/or the inline text
    """
    info = TemplateInfo()
    decorator = cls.get_decorator(COMPONENT_DECORATOR)
    if decorator is None:
        return info

    template_url = decorator.properties.get("templateUrl")
    if template_url is not None:
        info.template_file_path = os.path.abspath(
            os.path.join(os.path.dirname(os.path.abspath(source_file_path)), template_url)
        )

    inline = decorator.properties.get("template")
    if inline is not None:
        info.inline_template = inline

    return info


def is_html_tag(tag: str) -> bool:
    return tag.lower() in HTML_TAGS


def extract_element_selectors(template: str) -> List[str]:
    """
    Collect candidate custom element names from template text.

    Args:
        template: Template markup

    Returns:
        Distinct tag names in order of first appearance, HTML elements excluded

    Examples:
        >>> extract_element_selectors('<div><app-item></app-item></div>')
        ['app-item']
    """
    tags: List[str] = []
    for match in START_TAG_PATTERN.finditer(template):
        tag = match.group(1)
        if is_html_tag(tag) or tag in tags:
            continue
        tags.append(tag)
    return tags
