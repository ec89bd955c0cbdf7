import asyncio
import json

from evalhub.shared import sse

def test_publish_reaches_subscriber():
    async def scenario():
        q = sse.subscribe("u1")
        assert sse.subscriber_count("u1") == 1
        assert sse.publish_task_status("u1", "t1", "evaluating") == 1
        event, data = await asyncio.wait_for(q.get(), timeout=1)
        sse.unsubscribe("u1", q)
        return event, data

    event, data = asyncio.run(scenario())
    assert event == "task_status"
    assert data == {"task_id": "t1", "status": "evaluating"}
    assert sse.subscriber_count("u1") == 0

def test_publish_without_listeners_is_a_noop():
    assert sse.publish_task_status("nobody", "t1", "completed") == 0

def test_stream_yields_formatted_events():
    async def scenario():
        gen = sse.sse_stream("u2", keepalive=5)
        first = await gen.__anext__()
        sse.publish("u2", "task_status", {"task_id": "t9", "status": "completed"})
        second = await asyncio.wait_for(gen.__anext__(), timeout=1)
        await gen.aclose()
        return first, second

    first, second = asyncio.run(scenario())
    assert first == b": connected\n\n"
    head, data_line, _, _ = second.decode().split("\n")
    assert head == "event: task_status"
    assert json.loads(data_line[len("data: "):]) == {"task_id": "t9", "status": "completed"}
    assert sse.subscriber_count("u2") == 0

def test_stream_sends_keepalive():
    async def scenario():
        gen = sse.sse_stream("u3", keepalive=0.01)
        await gen.__anext__()
        ping = await asyncio.wait_for(gen.__anext__(), timeout=1)
        await gen.aclose()
        return ping

    assert asyncio.run(scenario()) == b": ping\n\n"
