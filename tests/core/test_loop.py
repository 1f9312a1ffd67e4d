import threading

import pytest

from pihal.core.loop import Loop


class Counter:
    def __init__(self):
        self.ticks = 0

    def tick(self):
        self.ticks += 1


def test_tick_notifies_subscribers():
    loop = Loop()
    counter = Counter()
    loop.subscribe(counter)

    loop.tick(3)

    assert counter.ticks == 3
    assert loop.tick_count == 3


def test_subscribe_is_idempotent():
    loop = Loop()
    counter = Counter()
    loop.subscribe(counter)
    loop.subscribe(counter)

    loop.tick()

    assert counter.ticks == 1


def test_unsubscribe_stops_notifications():
    loop = Loop()
    counter = Counter()
    loop.subscribe(counter)
    loop.unsubscribe(counter)
    loop.unsubscribe(counter)

    loop.tick()

    assert counter.ticks == 0
    assert not loop.is_subscribed(counter)


def test_subscriber_may_unsubscribe_itself_during_tick():
    loop = Loop()

    class OneShot(Counter):
        def tick(self):
            super().tick()
            loop.unsubscribe(self)

    one_shot = OneShot()
    other = Counter()
    loop.subscribe(one_shot)
    loop.subscribe(other)

    loop.tick(2)

    assert one_shot.ticks == 1
    assert other.ticks == 2


def test_reset_clears_tick_count():
    loop = Loop()
    loop.tick(5)
    loop.reset()
    assert loop.tick_count == 0


def test_negative_arguments_rejected():
    with pytest.raises(ValueError):
        Loop(interval=-1)
    with pytest.raises(ValueError):
        Loop().tick(-1)


def test_run_honours_max_ticks():
    loop = Loop()
    counter = Counter()
    loop.subscribe(counter)

    loop.run(interval=0, max_ticks=4)

    assert counter.ticks == 4
    assert not loop.running


def test_stop_from_subscriber_ends_run():
    loop = Loop()

    class Stopper(Counter):
        def tick(self):
            super().tick()
            if self.ticks == 2:
                loop.stop()

    stopper = Stopper()
    loop.subscribe(stopper)
    loop.run(interval=0)

    assert stopper.ticks == 2


@pytest.mark.slow
def test_stop_from_other_thread():
    loop = Loop(interval=0.001)
    seen = threading.Event()

    class Signal:
        def tick(self):
            seen.set()

    loop.subscribe(Signal())
    worker = threading.Thread(target=loop.run)
    worker.start()
    assert seen.wait(2)
    loop.stop()
    worker.join(2)

    assert not worker.is_alive()
    assert not loop.running
