import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional, Tuple, Union

from .errors import MalformedXml


@dataclass(frozen=True)
class XmlNode:
    """Element name (lower-cased), attributes and ordered children."""
    name: str
    attributes: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    children: Tuple["XmlNode", ...] = ()

    def get(self, attr: str) -> Optional[str]:
        # Empty attributes count as absent.
        value = self.attributes.get(attr)
        return value if value else None

    def child(self, name: str) -> Optional["XmlNode"]:
        for node in self.children:
            if node.name == name:
                return node
        return None

    def children_named(self, name: str) -> Tuple["XmlNode", ...]:
        return tuple(node for node in self.children if node.name == name)


def _local_name(tag: str) -> str:
    if tag.startswith('{'):
        tag = tag.split('}', 1)[1]
    return tag.lower()


def _node(element: ET.Element, children) -> XmlNode:
    return XmlNode(
        name=_local_name(element.tag),
        attributes=MappingProxyType(dict(element.attrib)),
        children=tuple(children),
    )


def _elements(element: ET.Element):
    return [sub for sub in element if isinstance(sub.tag, str)]


def _build(root: ET.Element) -> XmlNode:
    # Iterative post-order walk; nesting depth is not tied to the recursion limit.
    built = {}
    stack = [(root, False)]
    while stack:
        element, expanded = stack.pop()
        subs = _elements(element)
        if not expanded:
            stack.append((element, True))
            stack.extend((sub, False) for sub in reversed(subs))
        else:
            built[id(element)] = _node(element, (built.pop(id(sub)) for sub in subs))
    return built[id(root)]


def parse_xml(text: Union[str, bytes]) -> XmlNode:
    """Parse XML into an XmlNode tree rooted at the document element.

    Pass bytes to let the parser honour the document's encoding declaration.
    """
    try:
        root = ET.fromstring(text)
    except (ET.ParseError, ValueError) as e:
        raise MalformedXml(e) from e
    return _build(root)
