from unittest.mock import AsyncMock, MagicMock

import aiohttp

from chat_analyzer.presentation.analyzer_client import ChatAnalyzerClient


def make_response(status, json_body=None, text_body=""):
    response = MagicMock()
    response.status = status
    response.json = AsyncMock(return_value=json_body)
    response.text = AsyncMock(return_value=text_body)
    context = MagicMock()
    context.__aenter__ = AsyncMock(return_value=response)
    context.__aexit__ = AsyncMock(return_value=False)
    return context


def make_client(**session_methods):
    client = ChatAnalyzerClient("http://analyzer.local/")
    session = MagicMock()
    session.closed = False
    session.close = AsyncMock()
    for name, value in session_methods.items():
        setattr(session, name, value)
    client.session = session
    return client, session


async def test_upload_returns_report_json():
    report = {"message": "Analysis complete", "powerUsers": []}
    client, session = make_client(post=MagicMock(return_value=make_response(200, report)))

    assert await client.upload_chat("5/1/24, 9:00 AM - Alice: hi") == report
    assert session.post.call_args.args[0] == "http://analyzer.local/api/chat/upload"
    assert isinstance(session.post.call_args.kwargs["data"], aiohttp.FormData)


async def test_upload_error_status_returns_none():
    client, _ = make_client(post=MagicMock(return_value=make_response(400, text_body='{"error": "No file"}')))

    assert await client.upload_chat(b"") is None


async def test_upload_connection_error_returns_none():
    client, _ = make_client(post=MagicMock(side_effect=aiohttp.ClientConnectionError("refused")))

    assert await client.upload_chat("text") is None


async def test_health():
    client, _ = make_client(get=MagicMock(return_value=make_response(200)))
    assert await client.health() is True

    client, _ = make_client(get=MagicMock(side_effect=aiohttp.ClientConnectionError("refused")))
    assert await client.health() is False


async def test_close_closes_open_session():
    client, session = make_client()

    await client.close()

    session.close.assert_awaited_once()


async def test_api_key_is_sent_as_header():
    client = ChatAnalyzerClient("http://analyzer.local", api_key="secret")

    session = await client._get_session()
    try:
        assert session.headers["X-API-Key"] == "secret"
    finally:
        await client.close()
