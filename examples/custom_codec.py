"""
Example: Chain a custom encoder and decoder in front of the defaults

A `DispatchingEncoder` / `DispatchingDecoder` handles the types registered on
it and hands everything else to its delegate. The transport here is an
in-memory echo server so the example runs offline.
"""

import io
from dataclasses import asdict, dataclass

from tether import (
    DefaultDecoder,
    DefaultEncoder,
    DispatchingDecoder,
    DispatchingEncoder,
    JsonDecoder,
    JsonEncoder,
    Options,
    RequestBuilder,
    Response,
    invoke,
    read_body,
)
from tether.logging_config import setup_logging


@dataclass
class Repo:
    owner: str
    name: str
    stars: int = 0


class EchoTransport:
    """Returns the request body as the response body."""

    def execute(self, request, options):
        payload = read_body(request.body)
        return (
            Response.builder()
            .status(200)
            .reason("OK")
            .headers({"Content-Type": "application/json"})
            .body_stream(io.BytesIO(payload), len(payload))
            .request(request)
            .build()
        )


def main():
    setup_logging("DEBUG")

    json_encoder = JsonEncoder(DefaultEncoder())
    encoder = DispatchingEncoder(json_encoder).register(
        Repo, lambda repo, builder: json_encoder.encode(asdict(repo), dict, builder)
    )
    json_decoder = JsonDecoder(DefaultDecoder())
    decoder = DispatchingDecoder(json_decoder).register(
        Repo, lambda response, _: Repo(**json_decoder.decode(response, dict))
    )

    repo = invoke(
        EchoTransport(),
        RequestBuilder("POST", "https://api.example.com/repos"),
        Options(read_timeout=5),
        value=Repo("octo", "tether", 42),
        encoder=encoder,
        decoder=decoder,
        return_type=Repo,
    )
    print(f"Decoded: {repo}")

    # Plain strings still go through the default codecs
    text = invoke(
        EchoTransport(),
        RequestBuilder("POST", "https://api.example.com/echo"),
        value="hello",
        encoder=encoder,
        decoder=decoder,
    )
    print(f"Echoed text: {text}")


if __name__ == "__main__":
    main()
