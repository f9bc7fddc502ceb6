"""Recipient and sender contact entities."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

from ...config.exceptions import ConfigValidationError


@dataclass
class Contact:
    """A structured recipient.

    ``id`` is the calling application's own user identifier; the service maps
    it to its internal identifiers. Channel identifiers (``email``, ``phone``,
    ``slack_id``) are passed through unvalidated.
    """

    id: Optional[str] = None
    name: Optional[str] = None
    avatar: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    slack_id: Optional[str] = None
    meta: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the wire format, dropping unset fields."""
        data = {
            "id": self.id,
            "name": self.name,
            "avatar": self.avatar,
            "email": self.email,
            "phone": self.phone,
            "slack_id": self.slack_id,
        }
        result = {key: value for key, value in data.items() if value is not None}
        if self.meta:
            result["meta"] = dict(self.meta)
        return result


RecipientLike = Union[str, Contact, Mapping[str, Any]]
Recipients = Union[RecipientLike, Sequence[RecipientLike]]


def serialize_contact(value: RecipientLike) -> Union[str, Dict[str, Any]]:
    """Serialize a single recipient or sender."""
    if isinstance(value, str):
        return value
    if isinstance(value, Contact):
        return value.to_dict()
    if isinstance(value, Mapping):
        return dict(value)
    raise ConfigValidationError(
        f"Recipient must be a string, Contact or mapping, got {type(value).__name__}"
    )


def serialize_recipients(value: Recipients) -> Union[str, Dict[str, Any], List[Any]]:
    """Serialize one recipient or an ordered list of recipients.

    Raises:
        ConfigValidationError: If a list is empty or holds unsupported values
    """
    if isinstance(value, (str, Contact, Mapping)):
        return serialize_contact(value)

    if isinstance(value, Sequence):
        if len(value) == 0:
            raise ConfigValidationError("Recipient list must not be empty")
        return [serialize_contact(item) for item in value]

    raise ConfigValidationError(
        f"Unsupported recipient type: {type(value).__name__}"
    )
