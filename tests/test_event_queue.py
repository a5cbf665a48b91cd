import unittest

from events.event import EventType, HitTarget, PointerEvent
from events.event_queue import EventQueue


class TestPointerEvent(unittest.TestCase):
    def test_factories(self):
        down = PointerEvent.down(120, "a", HitTarget.RESIZE_HANDLE)
        self.assertEqual(down.event_type, EventType.POINTER_DOWN)
        self.assertEqual(down.target, HitTarget.RESIZE_HANDLE)
        self.assertEqual(down.shift_id, "a")

        click = PointerEvent.click(847)
        self.assertEqual(click.target, HitTarget.EMPTY_GRID)
        self.assertEqual(PointerEvent.delete("a").shift_id, "a")

    def test_to_dict(self):
        data = PointerEvent.move(300).to_dict()
        self.assertEqual(data["event_type"], "pointer_move")
        self.assertEqual(data["y"], 300)


class TestEventQueue(unittest.TestCase):
    def setUp(self):
        self.queue = EventQueue(verbose=False)
        self.received = []
        self.queue.register("grid", self.received.append)

    def test_delivery_in_arrival_order(self):
        for y in (10, 20, 30):
            self.queue.post(PointerEvent.move(y))
        self.assertEqual(len(self.queue), 3)
        self.assertEqual(self.queue.dispatch(), 3)
        self.assertEqual([e.y for e in self.received], [10, 20, 30])
        self.assertEqual(len(self.queue), 0)

    def test_sequence_numbers(self):
        first = self.queue.publish(PointerEvent.move(1))
        second = self.queue.publish(PointerEvent.move(2))
        self.assertEqual((first.sequence, second.sequence), (1, 2))

    def test_events_posted_during_dispatch_are_not_reentrant(self):
        order = []

        def handler(event):
            order.append(("start", event.y))
            if event.y == 1:
                self.queue.publish(PointerEvent.move(2))
            order.append(("end", event.y))

        queue = self.queue
        queue.unregister("grid")
        queue.register("grid", handler)
        queue.publish(PointerEvent.move(1))
        self.assertEqual(order, [("start", 1), ("end", 1), ("start", 2), ("end", 2)])

    def test_receiver_targeting(self):
        other = []
        self.queue.register("other", other.append)
        self.queue.publish(PointerEvent.move(5, receiver="other"))
        self.queue.publish(PointerEvent.move(6))
        self.assertEqual([e.y for e in other], [5, 6])
        self.assertEqual([e.y for e in self.received], [6])

    def test_unknown_receiver_is_dropped(self):
        self.queue.publish(PointerEvent.move(5, receiver="nobody"))
        self.assertEqual(self.received, [])
        self.assertEqual(len(self.queue.event_history), 1)

    def test_handler_error_does_not_wedge_queue(self):
        def broken(event):
            raise KeyError("boom")

        self.queue.register("broken", broken)
        with self.assertRaises(KeyError):
            self.queue.publish(PointerEvent.move(1, receiver="broken"))
        self.assertEqual(self.queue.dispatch(), 0)
        self.queue.publish(PointerEvent.move(2, receiver="grid"))
        self.assertEqual([e.y for e in self.received], [2])

    def test_history_filters(self):
        self.queue.publish(PointerEvent.down(0, "a"))
        self.queue.publish(PointerEvent.move(10))
        self.queue.publish(PointerEvent.delete("b"))
        self.assertEqual(len(self.queue.get_history()), 3)
        self.assertEqual(len(self.queue.get_history(event_type=EventType.POINTER_MOVE)), 1)
        self.assertEqual([e.event_type for e in self.queue.get_history(shift_id="b")],
                         [EventType.DELETE])
        self.assertEqual(len(self.queue.export_log()), 3)
        self.queue.clear_history()
        self.assertEqual(self.queue.get_history(), [])

    def test_duplicate_registration_rejected(self):
        with self.assertRaises(ValueError):
            self.queue.register("grid", lambda event: None)
        self.queue.publish(PointerEvent.move(1))
        self.assertEqual([e.y for e in self.received], [1])

    def test_name_reusable_after_unregister(self):
        self.queue.unregister("grid")
        replacement = []
        self.queue.register("grid", replacement.append)
        self.queue.publish(PointerEvent.move(1))
        self.assertEqual(len(replacement), 1)
        self.assertEqual(self.received, [])

    def test_history_is_bounded(self):
        queue = EventQueue(verbose=False, history_limit=5)
        for y in range(20):
            queue.publish(PointerEvent.move(y))
        history = queue.get_history()
        self.assertIsInstance(history, list)
        self.assertEqual(len(history), 5)
        self.assertEqual([e.sequence for e in history], [16, 17, 18, 19, 20])


if __name__ == "__main__":
    unittest.main(verbosity=2)
