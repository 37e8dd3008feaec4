import asyncio
import json
from unittest import IsolatedAsyncioTestCase

import httpx
import respx

import config
from models.edit_funnel import EditFunnel
from models.event_sink import EventDispatcher, EventGateSink


class TestEventGateSink(IsolatedAsyncioTestCase):
    async def test_is_a_dispatcher(self):
        async with httpx.AsyncClient() as client:
            self.assertIsInstance(EventGateSink(client), EventDispatcher)

    async def test_delivers_in_call_order(self):
        with respx.mock:
            route = respx.post(config.EVENT_INTAKE_URL).mock(return_value=httpx.Response(201))
            async with httpx.AsyncClient() as client:
                async with EventGateSink(client) as sink:
                    funnel = EditFunnel(sink=sink)
                    funnel.log_start()
                    funnel.log_save_attempt()
                    funnel.log_saved_revision(12345)

        bodies = [json.loads(call.request.content) for call in route.calls]
        self.assertEqual(
            [body[0]["event"]["action"] for body in bodies],
            ["start", "saveAttempt", "saved"],
        )
        tokens = {body[0]["event"]["session_token"] for body in bodies}
        self.assertEqual(tokens, {funnel.session_token})
        self.assertEqual(bodies[2][0]["event"]["revID"], 12345)

    async def test_log_does_not_wait_for_delivery(self):
        with respx.mock:
            route = respx.post(config.EVENT_INTAKE_URL).mock(return_value=httpx.Response(201))
            async with httpx.AsyncClient() as client:
                sink = EventGateSink(client)
                sink.start()
                EditFunnel(sink=sink).log_preview()
                self.assertEqual(route.call_count, 0)
                await sink.aclose()
        self.assertEqual(route.call_count, 1)

    async def test_delivery_failure_is_dropped(self):
        with respx.mock:
            route = respx.post(config.EVENT_INTAKE_URL).mock(
                side_effect=[httpx.Response(500), httpx.Response(201)]
            )
            async with httpx.AsyncClient() as client:
                async with EventGateSink(client) as sink:
                    funnel = EditFunnel(sink=sink)
                    with self.assertLogs("models.event_sink", level="WARNING"):
                        funnel.log_captcha_shown()
                        await sink.queue.join()
                    funnel.log_captcha_failure()
        self.assertEqual(route.call_count, 2)

    async def test_close_without_start(self):
        async with httpx.AsyncClient() as client:
            await EventGateSink(client).aclose()

    async def test_unexpected_error_does_not_stop_worker(self):
        with respx.mock:
            route = respx.post(config.EVENT_INTAKE_URL).mock(
                side_effect=[RuntimeError("client closed"), httpx.Response(201)]
            )
            async with httpx.AsyncClient() as client:
                sink = EventGateSink(client)
                sink.start()
                funnel = EditFunnel(sink=sink)
                with self.assertLogs("models.event_sink", level="WARNING"):
                    funnel.log_start()
                    funnel.log_save_attempt()
                    await asyncio.wait_for(sink.aclose(), 2)
        self.assertEqual(route.call_count, 2)
        body = json.loads(route.calls.last.request.content)
        self.assertEqual(body[0]["event"]["action"], "saveAttempt")

    async def test_log_from_other_threads(self):
        with respx.mock:
            route = respx.post(config.EVENT_INTAKE_URL).mock(return_value=httpx.Response(201))
            async with httpx.AsyncClient() as client:
                sink = EventGateSink(client)
                sink.start()
                funnel = EditFunnel(sink=sink)

                def log_many(thread):
                    for i in range(10):
                        funnel.log_saved_revision(thread * 100 + i)

                await asyncio.gather(
                    *(asyncio.to_thread(log_many, thread) for thread in range(4))
                )
                await asyncio.wait_for(sink.aclose(), 5)

        self.assertEqual(route.call_count, 40)
        rev_ids = [json.loads(call.request.content)[0]["event"]["revID"] for call in route.calls]
        for thread in range(4):
            own = [rev_id for rev_id in rev_ids if rev_id // 100 == thread]
            self.assertEqual(own, [thread * 100 + i for i in range(10)])

    async def test_log_before_start_waits_for_worker(self):
        with respx.mock:
            route = respx.post(config.EVENT_INTAKE_URL).mock(return_value=httpx.Response(201))
            async with httpx.AsyncClient() as client:
                sink = EventGateSink(client)
                with self.assertLogs("models.event_sink", level="DEBUG") as logs:
                    EditFunnel(sink=sink).log_start()
                self.assertIn("Sink not started", logs.output[0])
                self.assertEqual(sink.queue.qsize(), 1)
                sink.start()
                await asyncio.wait_for(sink.aclose(), 2)
        self.assertEqual(route.call_count, 1)
