"""Tests for the Ollama gateway and the active-model holder."""

import json
import threading

import httpx
import pytest

from services.errors import (
    GatewayEmptyResponseError,
    GatewayError,
    GatewayNotFoundError,
    GatewayTimeoutError,
    ModelSwapConflictError,
)
from services.ollama_client import ActiveModel


TAGS_BODY = {
    "models": [
        {
            "name": "llama3.2:latest",
            "size": 2019393189,
            "modified_at": "2024-10-01T12:00:00Z",
            "details": {"family": "llama", "families": ["llama"]},
        },
        {"name": "mistral:7b", "size": 4113301824, "details": {"family": "mistral"}},
        {"name": "custom"},
    ]
}


class TestActiveModel:
    def test_set_returns_previous(self):
        active = ActiveModel("llama3.2")
        assert active.set("mistral") == "llama3.2"
        assert active.get() == "mistral"

    def test_compare_and_swap(self):
        active = ActiveModel("llama3.2")
        assert active.compare_and_swap("llama3.2", "mistral")
        assert not active.compare_and_swap("llama3.2", "phi3")
        assert active.get() == "mistral"

    def test_concurrent_reads_see_whole_names(self):
        names = {"llama3.2", "mistral:7b-instruct"}
        active = ActiveModel("llama3.2")
        seen = set()
        stop = threading.Event()

        def reader():
            while not stop.is_set():
                seen.add(active.get())

        threads = [threading.Thread(target=reader) for _ in range(4)]
        for t in threads:
            t.start()
        for i in range(2000):
            active.set("mistral:7b-instruct" if i % 2 else "llama3.2")
        stop.set()
        for t in threads:
            t.join()

        assert seen <= names


class TestChat:
    @pytest.mark.asyncio
    async def test_returns_content(self, make_gateway, chat_reply):
        requests = []

        def handler(request):
            requests.append(request)
            return chat_reply('{"a": 1}')

        content = await make_gateway(handler).chat("hello")

        assert content == '{"a": 1}'
        assert requests[0].url.path == "/api/chat"
        body = json.loads(requests[0].content)
        assert body["messages"] == [{"role": "user", "content": "hello"}]

    @pytest.mark.asyncio
    async def test_unknown_model(self, make_gateway):
        gateway = make_gateway(lambda request: httpx.Response(404, json={"error": "model not found"}))
        with pytest.raises(GatewayNotFoundError) as exc:
            await gateway.chat("hello")
        assert exc.value.model == "llama3.2"

    @pytest.mark.asyncio
    async def test_http_error(self, make_gateway):
        gateway = make_gateway(lambda request: httpx.Response(503))
        with pytest.raises(GatewayError):
            await gateway.chat("hello")

    @pytest.mark.asyncio
    async def test_connection_refused(self, make_gateway):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        with pytest.raises(GatewayError) as exc:
            await make_gateway(handler).chat("hello")
        assert not isinstance(exc.value, GatewayTimeoutError)

    @pytest.mark.asyncio
    async def test_timeout(self, make_gateway):
        def handler(request):
            raise httpx.ReadTimeout("slow", request=request)

        with pytest.raises(GatewayTimeoutError):
            await make_gateway(handler).chat("hello")

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "body",
        [
            {"model": "llama3.2"},
            {"model": "llama3.2", "message": {"role": "assistant", "content": ""}},
        ],
    )
    async def test_empty_response(self, make_gateway, body):
        gateway = make_gateway(lambda request: httpx.Response(200, json=body))
        with pytest.raises(GatewayEmptyResponseError):
            await gateway.chat("hello")

    @pytest.mark.asyncio
    async def test_unreadable_body(self, make_gateway):
        gateway = make_gateway(lambda request: httpx.Response(200, text="<html>"))
        with pytest.raises(GatewayEmptyResponseError):
            await gateway.chat("hello")


class TestModelAdministration:
    @pytest.mark.asyncio
    async def test_list_models(self, make_gateway):
        gateway = make_gateway(lambda request: httpx.Response(200, json=TAGS_BODY))
        models = await gateway.list_models()

        assert [m.name for m in models] == ["llama3.2:latest", "mistral:7b", "custom"]
        assert models[0].family == "llama"
        assert models[0].size_bytes == 2019393189
        assert models[1].family == "mistral"
        assert models[2].family is None

    @pytest.mark.asyncio
    async def test_list_models_unreachable(self, make_gateway):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        with pytest.raises(GatewayError):
            await make_gateway(handler).list_models()

    @pytest.mark.asyncio
    async def test_is_model_available(self, make_gateway):
        def handler(request):
            name = json.loads(request.content)["model"]
            return httpx.Response(200 if name == "mistral" else 404, json={})

        gateway = make_gateway(handler)
        assert await gateway.is_model_available("mistral")
        assert not await gateway.is_model_available("ghost")

    @pytest.mark.asyncio
    async def test_switch_model(self, make_gateway):
        gateway = make_gateway(lambda request: httpx.Response(200, json={}))
        assert await gateway.switch_model("mistral") == "llama3.2"
        assert gateway.active_model.get() == "mistral"

    @pytest.mark.asyncio
    async def test_switch_to_missing_model(self, make_gateway):
        gateway = make_gateway(lambda request: httpx.Response(404, json={}))
        with pytest.raises(GatewayNotFoundError):
            await gateway.switch_model("ghost")
        assert gateway.active_model.get() == "llama3.2"

    @pytest.mark.asyncio
    async def test_switch_with_expected_model(self, make_gateway):
        gateway = make_gateway(lambda request: httpx.Response(200, json={}))
        assert await gateway.switch_model("mistral", expected="llama3.2") == "llama3.2"

        with pytest.raises(ModelSwapConflictError) as exc:
            await gateway.switch_model("phi3", expected="llama3.2")
        assert exc.value.actual == "mistral"
        assert gateway.active_model.get() == "mistral"
