import importlib
import json
import os
import unittest
from unittest import mock

import httpx
from fastapi.testclient import TestClient
from lxml import etree  # type: ignore

from catalog_feeds import application
from catalog_feeds.config import CustomSettings
from catalog_feeds.application import create_app
from catalog_feeds.exceptions import RenderError


UPSTREAM_URL = "http://upstream.test/api/vod/get_live_streams"
NEWS_24 = b'[{"_id":"1","title":"News 24","HLSBlockedStream":{"streamingUrl":"http://x/y.m3u8"}}]'


def make_client(body: bytes = NEWS_24, status_code: int = 200, **settings) -> tuple[TestClient, list]:
    """Build a client whose upstream returns a fixed body"""
    calls: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(status_code, content=body)

    settings.setdefault("media_url", UPSTREAM_URL)
    app = create_app(
        CustomSettings(_env_file=None, **settings),
        transport=httpx.MockTransport(handler),
    )
    return TestClient(app), calls


def failing_client(**settings) -> TestClient:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    settings.setdefault("media_url", UPSTREAM_URL)
    app = create_app(
        CustomSettings(_env_file=None, **settings),
        transport=httpx.MockTransport(handler),
    )
    return TestClient(app)


class TestPlaylistEndpoint(unittest.TestCase):
    def test_news_24(self):
        client, calls = make_client()

        response = client.get("/api/m3u")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(
            response.text,
            '#EXTINF:-1 tvg-chno="0" tvg-id="1" tvg-name="News 24" tvg-logo="" '
            'group-title="TVJ", News 24 \nhttp://x/y.m3u8\n'
        )
        self.assertTrue(response.headers["content-type"].startswith("text/plain"))
        self.assertEqual(len(calls), 1)
        self.assertEqual(str(calls[0].url), UPSTREAM_URL)

    def test_entry_count_matches_catalog(self):
        records = [{"_id": str(i), "title": f"Ch {i}"} for i in range(5)]
        client, _ = make_client(json.dumps(records).encode())

        body = client.get("/api/m3u").text

        self.assertEqual(body.count("#EXTINF"), 5)
        for i in range(5):
            self.assertIn(f'tvg-chno="{i}" tvg-id="{i}"', body)

    def test_group_and_header_are_configurable(self):
        client, _ = make_client(
            playlist_group="Caribbean",
            playlist_emit_header=True,
            playlist_media_type="audio/x-mpegurl",
        )

        response = client.get("/api/m3u")

        self.assertTrue(response.text.startswith("#EXTM3U\n#EXTINF:-1 "))
        self.assertIn('group-title="Caribbean"', response.text)
        self.assertTrue(response.headers["content-type"].startswith("audio/x-mpegurl"))

    def test_decode_failure_answers_error(self):
        client, _ = make_client(b'{"_id":"1"}')

        response = client.get("/api/m3u")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.text, "Error")

    def test_fetch_failure_answers_error(self):
        response = failing_client().get("/api/m3u")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.text, "Error")

    def test_missing_media_url_surfaces_as_fetch_failure(self):
        client, calls = make_client(media_url=None)

        response = client.get("/api/m3u")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.text, "Error")
        self.assertEqual(calls, [])

    def test_missing_media_url_with_required_url(self):
        client, calls = make_client(media_url=None, playlist_require_media_url=True)

        response = client.get("/api/m3u")

        self.assertEqual(response.text, "Error")
        self.assertEqual(calls, [])

    def test_upstream_status_is_ignored_by_default(self):
        client, _ = make_client(status_code=500)
        self.assertIn("#EXTINF", client.get("/api/m3u").text)

    def test_redirected_upstream(self):
        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path == "/moved":
                return httpx.Response(200, content=NEWS_24)
            return httpx.Response(302, headers={"Location": "http://upstream.test/moved"})

        app = create_app(
            CustomSettings(_env_file=None, media_url=UPSTREAM_URL),
            transport=httpx.MockTransport(handler),
        )

        response = TestClient(app).get("/api/m3u")

        self.assertIn('tvg-id="1" tvg-name="News 24"', response.text)

    def test_upstream_status_check(self):
        client, _ = make_client(status_code=500, check_upstream_status=True)
        self.assertEqual(client.get("/api/m3u").text, "Error")


class TestGuideEndpoint(unittest.TestCase):
    def test_guide(self):
        client, _ = make_client()

        response = client.get("/api/xmltv")

        self.assertEqual(response.status_code, 200)
        self.assertTrue(response.headers["content-type"].startswith("application/xml"))
        self.assertTrue(response.content.startswith(b'<?xml version="1.0" encoding="UTF-8"?>\n<!DOCTYPE tv SYSTEM "xmltv.dtd">\n'))

        root = etree.fromstring(response.content)
        self.assertEqual(root.find("channel").get("id"), "1")
        self.assertEqual(root.find("channel/display-name").text, "News 24")
        titles = [p.findtext("title") for p in root.findall("programme")]
        self.assertEqual(titles, [f"Dummy Show {k} on News 24" for k in (1, 2, 3)])

    def test_missing_media_url(self):
        client, calls = make_client(media_url=None)

        response = client.get("/api/xmltv")

        self.assertEqual(response.status_code, 500)
        self.assertIn("MEDIA_URL environment variable is not set", response.text)
        self.assertEqual(calls, [])

    def test_fetch_failure(self):
        response = failing_client().get("/api/xmltv")

        self.assertEqual(response.status_code, 500)
        self.assertIn("Error fetching media data from MEDIA_URL", response.text)

    def test_decode_failure(self):
        client, _ = make_client(b"<html>maintenance</html>")

        response = client.get("/api/xmltv")

        self.assertEqual(response.status_code, 500)
        self.assertIn("Error parsing channels JSON", response.text)

    def test_control_character_in_title_is_replaced(self):
        client, _ = make_client(b'[{"_id":"1","title":"bad\\u0001title"}]')

        response = client.get("/api/xmltv")

        self.assertEqual(response.status_code, 200)
        root = etree.fromstring(response.content)
        self.assertEqual(root.find("channel/display-name").text, "bad\ufffdtitle")
        self.assertEqual(root.find("programme/title").text, "Dummy Show 1 on bad\ufffdtitle")

    def test_render_failure(self):
        client, _ = make_client()

        with mock.patch("catalog_feeds.routers.render_guide", side_effect=RenderError("boom")):
            response = client.get("/api/xmltv")

        self.assertEqual(response.status_code, 500)
        self.assertIn("Error generating XMLTV data", response.text)

    def test_custom_generator_labels(self):
        client, _ = make_client(generator_info_name="gen", source_info_name="src")

        root = etree.fromstring(client.get("/api/xmltv").content)

        self.assertEqual(root.get("generator-info-name"), "gen")
        self.assertEqual(root.get("source-info-name"), "src")


class TestStreamListEndpoint(unittest.TestCase):
    def test_stream_list(self):
        body = json.dumps([
            None,
            {
                "title": "News 24",
                "ChannelLogoTablets": {"streamingUrl": "http://img/1.png"},
                "HLSBlockedStream": {"streamingUrl": "http://x/y.m3u8"},
            },
        ]).encode()
        client, _ = make_client(body)

        response = client.get("/api/streams")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), [{
            "title": "News 24",
            "channel_img_url": "http://img/1.png",
            "hls_stream_url": "http://x/y.m3u8",
            "keywords": [],
        }])

    def test_missing_media_url(self):
        client, _ = make_client(media_url=None)

        response = client.get("/api/streams")

        self.assertEqual(response.status_code, 500)
        self.assertIn("MEDIA_URL environment variable is not set", response.text)


class TestServiceEndpoints(unittest.TestCase):
    def test_root(self):
        client, _ = make_client()

        payload = client.get("/").json()

        self.assertEqual(payload["service"], "Catalog Feeds")
        self.assertIn("m3u", payload["endpoints"])

    def test_health(self):
        client, _ = make_client(media_url=None)
        self.assertEqual(client.get("/health").json(), {"status": "ok", "media_url_configured": False})


class TestApplicationModule(unittest.TestCase):
    def test_import_does_not_read_environment(self):
        with mock.patch.dict(os.environ, {"MEDIA_URL": "ftp://not-http", "LOG_LEVEL": "LOUD"}):
            module = importlib.reload(application)

        self.assertFalse(hasattr(module, "app"))
        self.assertTrue(callable(module.create_app))


if __name__ == "__main__":
    unittest.main()
