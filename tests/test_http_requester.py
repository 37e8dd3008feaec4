import json
from unittest import IsolatedAsyncioTestCase

import httpx
import respx

from fake_wiki import FakeWiki
from models.article_ref import ArticleRef
from models.fetch_error import FetchError, FetchErrorCause
from models.http_requester import HTTPRequester, HttpxRequester
from models.revision_fetcher import RevisionFetcher

API_URL = "https://en.wikipedia.org/w/api.php"


class TestHttpxRequester(IsolatedAsyncioTestCase):
    async def test_is_a_requester(self):
        async with httpx.AsyncClient() as client:
            self.assertIsInstance(HttpxRequester(client), HTTPRequester)

    async def test_returns_decoded_json(self):
        with respx.mock:
            route = respx.get(API_URL).mock(
                return_value=httpx.Response(200, json={"batchcomplete": True})
            )
            async with httpx.AsyncClient() as client:
                body = await HttpxRequester(client).request(API_URL, {"action": "query"})
        self.assertEqual(body, {"batchcomplete": True})
        self.assertEqual(route.calls.last.request.url.params["action"], "query")
        self.assertIn("revision-window-backend", route.calls.last.request.headers["User-Agent"])

    async def test_status_error(self):
        with respx.mock:
            respx.get(API_URL).mock(return_value=httpx.Response(500))
            async with httpx.AsyncClient() as client:
                with self.assertRaises(httpx.HTTPStatusError):
                    await HttpxRequester(client).request(API_URL, {})

    async def test_invalid_json(self):
        with respx.mock:
            respx.get(API_URL).mock(return_value=httpx.Response(200, text="<html></html>"))
            async with httpx.AsyncClient() as client:
                with self.assertRaises(ValueError):
                    await HttpxRequester(client).request(API_URL, {})


class TestFetcherOverHttpx(IsolatedAsyncioTestCase):
    async def fetch(self, **mock_kwargs):
        with respx.mock:
            respx.get(API_URL).mock(**mock_kwargs)
            async with httpx.AsyncClient() as client:
                fetcher = RevisionFetcher(requester=HttpxRequester(client))
                return await fetcher.fetch_revision_window(ArticleRef(title="Dog"), 2)

    async def test_success(self):
        body = {
            "batchcomplete": True,
            "query": {
                "pages": [
                    {
                        "pageid": 1,
                        "ns": 0,
                        "title": "Dog",
                        "revisions": [FakeWiki.revision(10), FakeWiki.revision(9)],
                    }
                ]
            },
        }
        window = await self.fetch(return_value=httpx.Response(200, text=json.dumps(body)))
        self.assertEqual(window.ids, [10, 9])

    async def test_connection_error(self):
        with self.assertRaises(FetchError) as cm:
            await self.fetch(side_effect=httpx.ConnectError("connection refused"))
        self.assertEqual(cm.exception.cause, FetchErrorCause.NETWORK)

    async def test_http_status(self):
        with self.assertRaises(FetchError) as cm:
            await self.fetch(return_value=httpx.Response(429))
        self.assertEqual(cm.exception.cause, FetchErrorCause.HTTP_STATUS)
        self.assertEqual(cm.exception.status_code, 429)

    async def test_html_body(self):
        with self.assertRaises(FetchError) as cm:
            await self.fetch(return_value=httpx.Response(200, text="<html></html>"))
        self.assertEqual(cm.exception.cause, FetchErrorCause.DECODE)
