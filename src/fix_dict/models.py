"""Immutable records produced by the dictionary converter.

Every record knows how to turn itself into plain JSON-ready dicts, and
FixDictionary can be rebuilt from that shape. Key order in the dicts is the
order written to JSON, and list order always follows declaration order in
the source XML.
"""
import json
from dataclasses import dataclass
from types import MappingProxyType
from collections.abc import Mapping
from typing import Iterator, Optional, Tuple


@dataclass(frozen=True)
class FieldDefinition:
    tag: str
    name: str
    type: str

    def to_dict(self):
        return {'tag': self.tag, 'name': self.name, 'type': self.type}


@dataclass(frozen=True)
class CatalogEntry:
    tag: str
    type: str


class FieldCatalog(Mapping):
    """Read-only name -> CatalogEntry lookup, built once from <fields>."""

    def __init__(self, definitions=()):
        entries = {}
        for definition in definitions:
            # Later declarations overwrite earlier ones.
            entries[definition.name] = CatalogEntry(definition.tag, definition.type)
        self._entries = MappingProxyType(entries)

    def __getitem__(self, name: str) -> CatalogEntry:
        return self._entries[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def tag_for(self, name: str) -> Optional[str]:
        entry = self._entries.get(name)
        return entry.tag if entry else None

    def __repr__(self):
        return f"<FieldCatalog {len(self)} fields>"


@dataclass(frozen=True)
class HeaderTrailerEntry:
    name: str
    tag: str

    def to_dict(self):
        return {'name': self.name, 'tag': self.tag}


@dataclass(frozen=True)
class MessageFieldRef:
    tag: str
    name: str
    required: bool

    def to_dict(self):
        return {'tag': self.tag, 'name': self.name, 'required': self.required}


def _required_flag(value) -> bool:
    # Accept the JSON boolean or the raw dictionary marker; nothing else is truthy.
    return value is True or value == 'Y'


@dataclass(frozen=True)
class MessageDefinition:
    name: str
    msg_type: str
    category: str = 'app'
    fields: Tuple[MessageFieldRef, ...] = ()

    @property
    def required_fields(self) -> Tuple[MessageFieldRef, ...]:
        return tuple(f for f in self.fields if f.required)

    def to_dict(self):
        return {
            'name': self.name,
            'msgType': self.msg_type,
            'category': self.category,
            'fields': [f.to_dict() for f in self.fields],
        }


@dataclass(frozen=True)
class FixDictionary:
    version: str
    header: Tuple[HeaderTrailerEntry, ...] = ()
    trailer: Tuple[HeaderTrailerEntry, ...] = ()
    fields: Tuple[FieldDefinition, ...] = ()
    messages: Tuple[MessageDefinition, ...] = ()

    def to_dict(self):
        return {
            'version': self.version,
            'header': [e.to_dict() for e in self.header],
            'trailer': [e.to_dict() for e in self.trailer],
            'fields': [f.to_dict() for f in self.fields],
            'messages': [m.to_dict() for m in self.messages],
        }

    def to_json(self, indent: Optional[int] = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False)

    @classmethod
    def from_dict(cls, data: dict) -> 'FixDictionary':
        return cls(
            version=data['version'],
            header=tuple(HeaderTrailerEntry(e['name'], e['tag']) for e in data.get('header', [])),
            trailer=tuple(HeaderTrailerEntry(e['name'], e['tag']) for e in data.get('trailer', [])),
            fields=tuple(FieldDefinition(f['tag'], f['name'], f['type']) for f in data.get('fields', [])),
            messages=tuple(
                MessageDefinition(
                    name=m['name'],
                    msg_type=m['msgType'],
                    category=m.get('category', 'app'),
                    fields=tuple(
                        MessageFieldRef(f['tag'], f['name'], _required_flag(f['required']))
                        for f in m.get('fields', [])
                    ),
                )
                for m in data.get('messages', [])
            ),
        )

    @classmethod
    def from_json(cls, text: str) -> 'FixDictionary':
        return cls.from_dict(json.loads(text))

    def catalog(self) -> FieldCatalog:
        return FieldCatalog(self.fields)

    def message(self, msg_type: str) -> Optional[MessageDefinition]:
        for msg in self.messages:
            if msg.msg_type == msg_type:
                return msg
        return None
