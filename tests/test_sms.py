# tests/test_sms.py
from urllib.parse import parse_qs

import httpx

from pharmacare.services.sms import SmsGateway


def gateway(handler, **overrides):
    values = dict(
        api_url="https://sms.test/send/",
        username="clinic@example.org",
        api_hash="secret-hash",
        sender="PHRMCR",
        test_mode=True,
        transport=httpx.MockTransport(handler),
    )
    values.update(overrides)
    return SmsGateway(**values)


async def test_posts_form_and_reports_success():
    seen = {}

    def handler(request: httpx.Request):
        seen["form"] = parse_qs(request.content.decode())
        return httpx.Response(200, json={"status": "success"})

    assert await gateway(handler).send("hello", "9876543210")
    form = seen["form"]
    assert form["numbers"] == ["9876543210"]
    assert form["message"] == ["hello"]
    assert form["sender"] == ["PHRMCR"]
    assert form["test"] == ["true"]


async def test_explicit_test_flag_overrides_default():
    seen = {}

    def handler(request):
        seen["form"] = parse_qs(request.content.decode())
        return httpx.Response(200, json={"status": "success"})

    await gateway(handler).send("hello", "9876543210", test=False)
    assert seen["form"]["test"] == ["false"]


async def test_gateway_failure_status_is_false():
    def handler(request):
        return httpx.Response(200, json={"status": "failure", "errors": [{"code": 4}]})

    assert not await gateway(handler).send("hello", "9876543210")


async def test_http_error_is_false():
    def handler(request):
        return httpx.Response(503)

    assert not await gateway(handler).send("hello", "9876543210")


async def test_transport_error_is_false():
    def handler(request):
        raise httpx.ConnectError("boom", request=request)

    assert not await gateway(handler).send("hello", "9876543210")


async def test_non_json_body_is_false():
    def handler(request):
        return httpx.Response(200, text="<html>")

    assert not await gateway(handler).send("hello", "9876543210")
