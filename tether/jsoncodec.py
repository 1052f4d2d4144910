"""JSON bodies for ``dict`` and ``list`` payloads."""

from __future__ import annotations

import json
from typing import Any

from . import body as bodies
from .charset import CONTENT_TYPE, UTF_8
from .codec import Decoder, DispatchingDecoder, DispatchingEncoder, Encoder
from .errors import DecodeError, EncodeError
from .request import RequestBuilder
from .response import Response

JSON_CONTENT_TYPE = "application/json"


class JsonEncoder(DispatchingEncoder):
    """
    Serializes ``dict`` and ``list`` values as UTF-8 JSON.

    Sets ``Content-Type: application/json`` unless the request already has
    one. Other types go to the delegate.
    """

    def __init__(self, delegate: Encoder | None = None, **dumps_kwargs: Any) -> None:
        super().__init__(delegate)
        self._dumps_kwargs = dumps_kwargs
        self.register(dict, self._encode)
        self.register(list, self._encode)

    def _encode(self, obj: Any, builder: RequestBuilder) -> None:
        try:
            text = json.dumps(obj, **self._dumps_kwargs)
        except (TypeError, ValueError) as e:
            raise EncodeError(f"Unable to encode value as JSON: {e}") from e
        builder.body = bodies.from_text(text, UTF_8)
        builder.set_default_header(CONTENT_TYPE, JSON_CONTENT_TYPE)


class JsonDecoder(DispatchingDecoder):
    """Parses the body as JSON when ``dict`` or ``list`` is requested."""

    def __init__(self, delegate: Decoder | None = None) -> None:
        super().__init__(delegate)
        self.register(dict, self._decode)
        self.register(list, self._decode)

    def _decode(self, response: Response, return_type: Any) -> Any:
        text = bodies.read_text(response.body)
        if not text.strip():
            return None
        try:
            return json.loads(text)
        except json.JSONDecodeError as e:
            raise DecodeError(
                response.status, f"Response body is not valid JSON: {e}", response.request
            ) from e
