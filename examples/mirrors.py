from __future__ import annotations

import asyncio
import logging
import random

from gratify import Deferred, JoinConfig, Trace, all_successes, join_first_success, join_successes

logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")


async def fetch(mirror: str) -> str:
    await asyncio.sleep(random.uniform(0.01, 0.1))
    if mirror.endswith("down"):
        raise ConnectionError(f"{mirror} unreachable")
    return f"payload from {mirror}"


def fetch_all(mirrors: list[str]) -> list[Deferred[str]]:
    return [Deferred.from_future(fetch(m)) for m in mirrors]


async def main() -> None:
    mirrors = ["eu-1", "us-down", "ap-1"]
    trace = Trace()

    fastest = await join_first_success(*fetch_all(mirrors), config=JoinConfig(name="fastest"), trace=trace)
    print("fastest:", fastest)

    reachable = await join_successes(*fetch_all(mirrors), config=JoinConfig(name="reachable"), trace=trace)
    print("reachable:", reachable)

    try:
        await all_successes(*fetch_all(mirrors), config=JoinConfig(name="strict"), trace=trace)
    except ConnectionError as exc:
        print("strict:", exc)

    for ev in trace.get_events():
        print(ev.id, ev.parent_id, ev.action, ev.info)


if __name__ == "__main__":
    asyncio.run(main())
