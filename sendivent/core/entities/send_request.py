"""
Send request data structures.

``SendRequestBuilder`` accumulates the parameters of a notification through
chained setters and turns them into a ``SendRequest``: the relative path,
JSON body and extra headers of one ``POST send/...`` call.
"""

import copy
import json
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Union
from urllib.parse import quote

from ...config.exceptions import ConfigValidationError
from .contact import RecipientLike, Recipients, serialize_contact, serialize_recipients

IDEMPOTENCY_HEADER = "X-Idempotency-Key"


@dataclass(frozen=True)
class SendRequest:
    """A built, transport-independent send request."""

    path: str
    body: Dict[str, Any]
    headers: Dict[str, str] = field(default_factory=dict)

    def to_json(self) -> str:
        """Serialize the body as compact JSON."""
        return json.dumps(self.body, separators=(",", ":"), ensure_ascii=False)

    def encode_body(self) -> bytes:
        return self.to_json().encode("utf-8")


class SendRequestBuilder:
    """
    Builder for ``SendRequest`` instances.

    Every setter returns the builder so calls can be chained. State is kept
    between builds: a builder configured once can send the same notification
    several times, and ``overrides()`` merges into what earlier calls set.
    Call ``reset()`` to start from scratch.
    """

    def __init__(self):
        self.reset()

    def reset(self) -> "SendRequestBuilder":
        """Clear every accumulated parameter."""
        self._event: Optional[str] = None
        self._to: Optional[Union[str, Dict[str, Any], list]] = None
        self._from: Optional[Union[str, Dict[str, Any]]] = None
        self._payload: Dict[str, Any] = {}
        self._channel: Optional[str] = None
        self._language: Optional[str] = None
        self._overrides: Dict[str, Any] = {}
        self._idempotency_key: Optional[str] = None
        return self

    def event(self, name: str) -> "SendRequestBuilder":
        """Set the event name. Must be a non-empty string."""
        if not isinstance(name, str) or not name:
            raise ConfigValidationError("Event name must be a non-empty string")
        self._event = name
        return self

    def to(self, recipient: Recipients) -> "SendRequestBuilder":
        """
        Set the recipient(s).

        Args:
            recipient: A direct identifier (email, phone, Slack ID, ...), a
                Contact or mapping with channel identifiers, or a list mixing
                both forms. Leave unset to broadcast to the event's listeners.
        """
        self._to = serialize_recipients(recipient)
        return self

    def sender(self, contact: RecipientLike) -> "SendRequestBuilder":
        """Set the sender, sent as the ``from`` field."""
        self._from = serialize_contact(contact)
        return self

    def payload(self, data: Mapping[str, Any]) -> "SendRequestBuilder":
        """Replace the template payload."""
        self._payload = dict(data)
        return self

    def channel(self, channel: str) -> "SendRequestBuilder":
        """Force a delivery channel (email, sms, slack, push, ...)."""
        self._channel = channel
        return self

    def language(self, language: str) -> "SendRequestBuilder":
        self._language = language
        return self

    def overrides(self, overrides: Mapping[str, Any]) -> "SendRequestBuilder":
        """Merge template overrides (subject, from_email, reply_to, ...).

        Keys from this call replace same-named keys from earlier calls; other
        earlier keys are kept.
        """
        self._overrides.update(overrides)
        return self

    def idempotency_key(self, key: str) -> "SendRequestBuilder":
        """Set the ``X-Idempotency-Key`` header.

        Any non-empty text is accepted except CR, LF and NUL, which would end
        the header line.
        """
        if not isinstance(key, str) or not key:
            raise ConfigValidationError("Idempotency key must be a non-empty string")
        if any(c in key for c in "\r\n\0"):
            raise ConfigValidationError("Idempotency key must not contain CR, LF or NUL")
        self._idempotency_key = key
        return self

    @property
    def current_event(self) -> Optional[str]:
        return self._event

    @property
    def current_overrides(self) -> Dict[str, Any]:
        return dict(self._overrides)

    def build(self) -> SendRequest:
        """
        Build the request for the current state.

        Returns:
            SendRequest with path, body and headers

        Raises:
            ConfigValidationError: If no event name has been set
        """
        if self._event is None:
            raise ConfigValidationError("Event name must be set using event() method")

        path = f"send/{quote(self._event, safe='')}"
        if self._channel:
            path += f"/{quote(self._channel, safe='')}"

        body: Dict[str, Any] = {"payload": copy.deepcopy(self._payload)}

        if self._to:
            body["to"] = copy.deepcopy(self._to)

        if self._from:
            body["from"] = copy.deepcopy(self._from)

        if self._language:
            body["language"] = self._language

        if self._overrides:
            body["overrides"] = copy.deepcopy(self._overrides)

        headers = {}
        if self._idempotency_key is not None:
            headers[IDEMPOTENCY_HEADER] = self._idempotency_key

        return SendRequest(path=path, body=body, headers=headers)
