"""Offline tests for the indexer client request shaping and failure handling."""

import asyncio
import unittest
from unittest import mock

from packages.marmalade.indexer import IndexerClient, IndexerRequestError


def _response(status: int, payload=None, text: str = ""):
    response = mock.Mock()
    response.status_code = status
    response.ok = 200 <= status < 300
    response.json.return_value = payload
    response.text = text
    return response


class IndexerClientTests(unittest.TestCase):
    def setUp(self):
        self.client = IndexerClient(host="indexer.example", timeout=5.0)

    def test_events_url(self):
        self.assertEqual(self.client.events_url(), "https://indexer.example/txs/events")

    def test_fetch_page_sends_name_limit_offset(self):
        with mock.patch.object(
            self.client.client.session, "get", return_value=_response(200, [{"name": "x"}])
        ) as get:
            page = self.client.fetch_events_page("user.policy1", 50, 150)

        self.assertEqual(page, [{"name": "x"}])
        get.assert_called_once_with(
            "https://indexer.example/txs/events",
            params={"name": "user.policy1", "limit": 50, "offset": 150},
            headers=None,
            timeout=5.0,
        )

    def test_non_success_keeps_raw_body(self):
        with mock.patch.object(
            self.client.client.session, "get", return_value=_response(500, text="upstream down")
        ):
            with self.assertRaises(IndexerRequestError) as ctx:
                self.client.fetch_events_page("user.policy1", 50, 0)

        self.assertEqual(ctx.exception.status, 500)
        self.assertEqual(ctx.exception.body, "upstream down")
        self.assertIn("upstream down", str(ctx.exception))

    def test_non_json_success_body_keeps_raw_text(self):
        response = _response(200, text="<html>maintenance</html>")
        response.json.side_effect = ValueError("Expecting value")
        with mock.patch.object(self.client.client.session, "get", return_value=response):
            with self.assertRaises(IndexerRequestError) as ctx:
                self.client.fetch_events_page("user.policy1", 50, 0)

        self.assertEqual(ctx.exception.status, 200)
        self.assertEqual(ctx.exception.body, "<html>maintenance</html>")

    def test_non_list_body_is_an_error(self):
        with mock.patch.object(
            self.client.client.session, "get", return_value=_response(200, {"error": "nope"})
        ):
            with self.assertRaises(IndexerRequestError):
                self.client.fetch_events_page("user.policy1", 50, 0)

    def test_no_retries_by_default(self):
        with mock.patch.object(
            self.client.client.session, "get", return_value=_response(503, text="busy")
        ) as get:
            with self.assertRaises(IndexerRequestError):
                self.client.fetch_events_page("user.policy1", 50, 0)
        self.assertEqual(get.call_count, 1)

    def test_retries_when_enabled(self):
        client = IndexerClient(host="indexer.example", max_retries=2)
        responses = [_response(503, text="busy"), _response(200, [])]
        with mock.patch.object(client.client.session, "get", side_effect=responses) as get, \
                mock.patch("packages.marmalade.http_client.time.sleep") as sleep:
            page = client.fetch_events_page("user.policy1", 50, 0)
        self.assertEqual(page, [])
        self.assertEqual(get.call_count, 2)
        sleep.assert_called_once()

    def test_async_fetch_runs_the_same_request(self):
        with mock.patch.object(
            self.client.client.session, "get", return_value=_response(200, [])
        ) as get:
            page = asyncio.run(self.client.afetch_events_page("user.policy1", 10, 20))
        self.assertEqual(page, [])
        self.assertEqual(get.call_args.kwargs["params"]["offset"], 20)


if __name__ == "__main__":
    unittest.main()
