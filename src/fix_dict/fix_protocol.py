import logging

import simplefix

from .converter import load_dictionary
from .errors import DictionaryError
from .models import FixDictionary

logger = logging.getLogger(__name__)

SOH = '\x01'


def parse_message(raw):
    """Parse a '|' or SOH delimited FIX string into a simplefix.FixMessage."""
    if isinstance(raw, str):
        raw = raw.replace('|', SOH).encode()
    parser = simplefix.FixParser()
    parser.append_buffer(raw)
    return parser.get_message()


class FixProtocol:
    """Validates wire messages against a converted dictionary."""

    def __init__(self, dictionary: FixDictionary, source=None):
        self.dictionary = dictionary
        self.source = source
        self.fields_by_number = {int(f.tag): f for f in dictionary.fields if f.tag.isdigit()}
        self.messages = {m.msg_type: m for m in dictionary.messages}

    @property
    def version(self):
        return self.dictionary.version

    @classmethod
    def from_file(cls, dictionary_path):
        try:
            with open(dictionary_path, 'rb') as f:
                xml_content = f.read()
        except FileNotFoundError:
            logger.critical(f"FIX dictionary file not found at: {dictionary_path}")
            raise
        try:
            dictionary, _ = load_dictionary(xml_content)
        except DictionaryError as e:
            logger.critical(f"Error converting FIX dictionary {dictionary_path}: {e}")
            raise
        return cls(dictionary, source=dictionary_path)

    def validate_message(self, fix_message: simplefix.FixMessage):
        if fix_message.get(35) is None:
            return False, "Message is missing MsgType(35)"

        msg_type = fix_message.get(35).decode()
        message = self.messages.get(msg_type)
        if message is None:
            return False, f"Unknown MsgType(35)='{msg_type}' in this protocol"

        for ref in message.required_fields:
            if fix_message.get(ref.tag) is None:
                return False, f"Required field {ref.name}({ref.tag}) missing from {message.name}"

        return True, "Message valid"

    def __str__(self):
        origin = f"loaded from '{self.source}'" if self.source else "in memory"
        return f"<FixProtocol {self.version} {origin}>"
