# Sanity checks for the harness primitives themselves; needs no page content.

import math


async def test_assertions():
    ok(True, "ok passes on a truthy value")
    is_(1 + 1, 2, "is_ compares values")
    is_(math.nan, math.nan, "NaN is the same value as NaN")
    isnot(0.0, -0.0, "signed zeros are different values")
    info("assertions done")


async def test_wait_for_condition():
    polls = []

    def ready():
        polls.append(1)
        return len(polls) > 3

    await wait_for_condition(ready, "condition turns true", 10, 10)
    is_(len(polls), 4, "polled until the condition held")


add_task(test_assertions)
add_task(test_wait_for_condition)
