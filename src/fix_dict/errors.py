"""Error taxonomy for dictionary conversion."""
from dataclasses import dataclass


class DictionaryError(ValueError):
    """Base class for every fatal conversion failure."""
    kind = "DictionaryError"


class EmptyInput(DictionaryError):
    kind = "EmptyInput"

    def __init__(self):
        super().__init__("XML content is empty.")


class MalformedXml(DictionaryError):
    kind = "MalformedXml"

    def __init__(self, detail):
        super().__init__(f"Could not parse XML: {detail}")


class MissingRoot(DictionaryError):
    kind = "MissingRoot"

    def __init__(self, found=None):
        msg = "Invalid FIX XML structure: <fix> root tag not found."
        if found:
            msg += f" Found <{found}> instead."
        super().__init__(msg)


class MissingVersion(DictionaryError):
    kind = "MissingVersion"

    def __init__(self, missing):
        self.missing = tuple(missing)
        super().__init__(
            "Could not determine FIX version from <fix> tag attributes (major, minor): "
            f"missing {', '.join(self.missing)}."
        )


class MissingFieldAttribute(DictionaryError):
    kind = "MissingFieldAttribute"

    def __init__(self, position, missing, name=None):
        self.position = position
        self.missing = tuple(missing)
        self.field_name = name
        label = f'"{name}"' if name else "(unnamed)"
        super().__init__(
            f"Field #{position} {label} in <fields> is missing required attribute(s): "
            f"{', '.join(self.missing)} (number, name, type are required)."
        )


class MissingMessageAttribute(DictionaryError):
    kind = "MissingMessageAttribute"

    def __init__(self, position, missing, name=None):
        self.position = position
        self.missing = tuple(missing)
        self.message_name = name
        label = f'"{name}"' if name else "(unnamed)"
        super().__init__(
            f"Message #{position} {label} in <messages> is missing required attribute(s): "
            f"{', '.join(self.missing)} (name, msgtype are required)."
        )


class MissingMessageFieldAttribute(DictionaryError):
    kind = "MissingMessageFieldAttribute"

    def __init__(self, message_name, position, missing, name=None):
        self.message_name = message_name
        self.position = position
        self.missing = tuple(missing)
        self.field_name = name
        label = f'"{name}"' if name else "(unnamed)"
        super().__init__(
            f'Field #{position} {label} in message "{message_name}" is missing required '
            f"attribute(s): {', '.join(self.missing)} (name, required are required)."
        )


class UnresolvedMessageField(DictionaryError):
    kind = "UnresolvedMessageField"

    def __init__(self, field_name, message_name):
        self.field_name = field_name
        self.message_name = message_name
        super().__init__(
            f'Field "{field_name}" in message "{message_name}" not found in global <fields> list.'
        )


UNRESOLVED_HEADER_TRAILER_FIELD = "UnresolvedHeaderTrailerField"


@dataclass(frozen=True)
class Diagnostic:
    """A non-fatal problem noticed during conversion."""
    kind: str
    message: str

    def to_dict(self):
        return {"kind": self.kind, "message": self.message}
