import logging
from dataclasses import dataclass
from typing import Optional, Tuple, Union

from .errors import (
    UNRESOLVED_HEADER_TRAILER_FIELD,
    Diagnostic,
    DictionaryError,
    EmptyInput,
    MissingFieldAttribute,
    MissingMessageAttribute,
    MissingMessageFieldAttribute,
    MissingRoot,
    MissingVersion,
    UnresolvedMessageField,
)
from .models import (
    FieldCatalog,
    FieldDefinition,
    FixDictionary,
    HeaderTrailerEntry,
    MessageDefinition,
    MessageFieldRef,
)
from .xml_tree import XmlNode, parse_xml

logger = logging.getLogger(__name__)

ROOT_TAG = 'fix'
DEFAULT_CATEGORY = 'app'
REQUIRED_MARKER = 'Y'


@dataclass(frozen=True)
class ConversionResult:
    """Either data or error is set, never both."""
    data: Optional[FixDictionary] = None
    error: Optional[str] = None
    diagnostics: Tuple[Diagnostic, ...] = ()

    @property
    def ok(self) -> bool:
        return self.error is None


def _missing(node: XmlNode, *attrs):
    return [a for a in attrs if node.get(a) is None]


def extract_version(root: XmlNode) -> str:
    if root.name != ROOT_TAG:
        raise MissingRoot(root.name)
    missing = _missing(root, 'major', 'minor')
    if missing:
        raise MissingVersion(missing)
    return f"FIX.{root.get('major')}.{root.get('minor')}"


def build_field_catalog(root: XmlNode) -> Tuple[Tuple[FieldDefinition, ...], FieldCatalog]:
    section = root.child('fields')
    if section is None:
        return (), FieldCatalog()

    definitions = []
    for position, node in enumerate(section.children_named('field'), start=1):
        missing = _missing(node, 'number', 'name', 'type')
        if missing:
            raise MissingFieldAttribute(position, missing, node.get('name'))
        definitions.append(FieldDefinition(node.get('number'), node.get('name'), node.get('type')))

    catalog = FieldCatalog(definitions)
    if len(catalog) != len(definitions):
        logger.debug(f"{len(definitions) - len(catalog)} duplicate field name(s) in <fields>; last declaration wins")
    return tuple(definitions), catalog


def resolve_section(root: XmlNode, section_name: str, catalog: FieldCatalog):
    """Resolve <header>/<trailer> names to tags. Unknown names are dropped, not fatal."""
    section = root.child(section_name)
    if section is None:
        return (), ()

    entries, diagnostics = [], []
    for node in section.children_named('field'):
        name = node.get('name')
        tag = catalog.tag_for(name) if name else None
        if tag is None:
            label = f'"{name}"' if name else '(unnamed)'
            msg = (f'Field {label} found in <{section_name}> but not in <fields> section. '
                   f'Entry omitted.')
            logger.warning(msg)
            diagnostics.append(Diagnostic(UNRESOLVED_HEADER_TRAILER_FIELD, msg))
            continue
        entries.append(HeaderTrailerEntry(name, tag))
    return tuple(entries), tuple(diagnostics)


def resolve_message_field(node: XmlNode, position: int, message_name: str,
                          catalog: FieldCatalog) -> MessageFieldRef:
    missing = _missing(node, 'name', 'required')
    if missing:
        raise MissingMessageFieldAttribute(message_name, position, missing, node.get('name'))
    name = node.get('name')
    entry = catalog.get(name)
    if entry is None:
        raise UnresolvedMessageField(name, message_name)
    return MessageFieldRef(entry.tag, name, node.get('required') == REQUIRED_MARKER)


def build_messages(root: XmlNode, catalog: FieldCatalog) -> Tuple[MessageDefinition, ...]:
    section = root.child('messages')
    if section is None:
        return ()

    messages = []
    for position, msg_node in enumerate(section.children_named('message'), start=1):
        missing = _missing(msg_node, 'name', 'msgtype')
        if missing:
            raise MissingMessageAttribute(position, missing, msg_node.get('name'))
        name = msg_node.get('name')
        fields = tuple(
            resolve_message_field(f, i, name, catalog)
            for i, f in enumerate(msg_node.children_named('field'), start=1)
        )
        messages.append(MessageDefinition(
            name=name,
            msg_type=msg_node.get('msgtype'),
            category=msg_node.get('msgcat') or DEFAULT_CATEGORY,
            fields=fields,
        ))
    return tuple(messages)


def load_dictionary(xml_content: Union[str, bytes]) -> Tuple[FixDictionary, Tuple[Diagnostic, ...]]:
    """Convert dictionary XML, raising a DictionaryError on the first fatal problem."""
    if not xml_content or not xml_content.strip():
        raise EmptyInput()

    root = parse_xml(xml_content)
    version = extract_version(root)
    fields, catalog = build_field_catalog(root)
    header, header_diags = resolve_section(root, 'header', catalog)
    trailer, trailer_diags = resolve_section(root, 'trailer', catalog)
    messages = build_messages(root, catalog)

    dictionary = FixDictionary(
        version=version,
        header=header,
        trailer=trailer,
        fields=fields,
        messages=messages,
    )
    logger.info(f"Converted {version}: {len(fields)} fields, {len(messages)} messages, "
                f"{len(header)} header / {len(trailer)} trailer fields")
    return dictionary, header_diags + trailer_diags


def convert_fix_xml(xml_content: Union[str, bytes]) -> ConversionResult:
    """Convert dictionary XML into a ConversionResult. Never raises on bad input."""
    try:
        dictionary, diagnostics = load_dictionary(xml_content)
    except DictionaryError as e:
        logger.error(f"Dictionary conversion failed ({e.kind}): {e}")
        return ConversionResult(error=str(e))
    return ConversionResult(data=dictionary, diagnostics=diagnostics)
