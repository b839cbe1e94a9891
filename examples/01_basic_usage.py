"""
Basic HTTP Callback Usage Examples

Demonstrates text, JSON and typed decoding with both callback shapes.
"""

from typing import Dict

from pydantic import BaseModel

from http_callback import (
    ClientConfig,
    Failure,
    Handler,
    HTTPCallbackClient,
    ModelDeserializer,
    Success,
    ThreadPoolCallbackExecutor,
)


class HeadersModel(BaseModel):
    headers: Dict[str, str] = {}


def print_result(request, response, result):
    """Unified callback: one function, Result says which case."""
    match result:
        case Success(value):
            print(f"{request} -> {response.status_code}: {value!r:.80}")
        case Failure(error):
            print(f"{request} -> failed: {error}")


class HeadersHandler(Handler[HeadersModel]):
    """Split callback: exactly one method fires."""

    def on_success(self, request, response, value):
        print(f"Headers sent: {value.headers}")

    def on_failure(self, request, response, error):
        print(f"Could not read headers: {error}")


def main():
    callbacks = ThreadPoolCallbackExecutor()
    config = ClientConfig.create(
        base_path="https://httpbin.org",
        base_headers={"foo": "bar"},
        base_params=[("key", "value")],
        callback_executor=callbacks,
    )

    with HTTPCallbackClient(config) as client:
        print("\n=== Text ===")
        client.get("/user-agent").response_string(print_result)

        print("\n=== JSON document ===")
        client.get("/get").response_json(print_result)

        print("\n=== Typed object ===")
        client.get("/headers").response_object(ModelDeserializer(HeadersModel), HeadersHandler())

        print("\n=== 404 ===")
        client.get("/status/404").response_string(print_result)

        print("\n=== cURL ===")
        print(client.post("/post").json({"title": "My Post"}).build().curl())

        client.wait()

    callbacks.shutdown()


if __name__ == "__main__":
    main()
