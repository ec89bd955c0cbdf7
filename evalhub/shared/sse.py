import asyncio, json
from typing import AsyncIterator, Dict, Set, Tuple

# user_id -> (loop, queue) of every connected dashboard.
# Route handlers run in the threadpool, so puts are marshalled onto the owning loop.
_CHANNELS: Dict[str, Set[Tuple[asyncio.AbstractEventLoop, asyncio.Queue]]] = {}

def _channel(user_id: str) -> Set[Tuple[asyncio.AbstractEventLoop, asyncio.Queue]]:
    return _CHANNELS.setdefault(user_id, set())

def subscriber_count(user_id: str) -> int:
    return len(_CHANNELS.get(user_id, ()))

def _offer(q: asyncio.Queue, msg: tuple):
    try:
        q.put_nowait(msg)
    except asyncio.QueueFull:
        # slow consumer: drop rather than block
        pass

def publish(user_id: str, event: str, data: dict) -> int:
    """Fan out to every open stream of this user. Returns how many streams were offered it."""
    sent = 0
    for loop, q in list(_CHANNELS.get(user_id, ())):
        if loop.is_closed():
            continue
        loop.call_soon_threadsafe(_offer, q, (event, data))
        sent += 1
    return sent

def publish_task_status(user_id: str, task_id: str, status: str, **extra) -> int:
    return publish(user_id, "task_status", {"task_id": task_id, "status": status, **extra})

def subscribe(user_id: str) -> asyncio.Queue:
    q: asyncio.Queue = asyncio.Queue(maxsize=100)
    _channel(user_id).add((asyncio.get_running_loop(), q))
    return q

def unsubscribe(user_id: str, q: asyncio.Queue):
    room = _CHANNELS.get(user_id)
    if room is None:
        return
    for entry in [e for e in room if e[1] is q]:
        room.discard(entry)
    if not room:
        _CHANNELS.pop(user_id, None)

def format_event(event: str, data: dict) -> bytes:
    return (f"event: {event}\n" + f"data: {json.dumps(data, ensure_ascii=False)}\n\n").encode("utf-8")

async def sse_stream(user_id: str, keepalive: float = 15.0) -> AsyncIterator[bytes]:
    """
    Yields Server-Sent Events for one user's tasks.
    A comment line goes out every `keepalive` seconds so proxies keep the socket open.
    """
    q = subscribe(user_id)
    try:
        yield b": connected\n\n"
        while True:
            try:
                event, data = await asyncio.wait_for(q.get(), timeout=keepalive)
            except asyncio.TimeoutError:
                yield b": ping\n\n"
                continue
            yield format_event(event, data)
    finally:
        unsubscribe(user_id, q)
