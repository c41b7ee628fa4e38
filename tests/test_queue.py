"""Tests for the double-ended handler queue."""

from eventree.queue import HandlerQueue, handler_key


def f1():
    pass


def f2():
    pass


class TestPush:
    def test_push_back_keeps_order(self):
        q = HandlerQueue()
        q.push_back(f1)
        q.push_back(f2)
        assert list(q) == [f1, f2]

    def test_push_front_reverses_order(self):
        q = HandlerQueue()
        q.push_front(f1)
        q.push_front(f2)
        assert list(q) == [f2, f1]

    def test_duplicates_allowed(self):
        q = HandlerQueue([f1, f1])
        assert len(q) == 2


class TestRemove:
    def test_removes_all_occurrences(self):
        q = HandlerQueue([f1, f2, f1])
        assert q.remove(f1) == 2
        assert list(q) == [f2]

    def test_remove_absent_is_noop(self):
        q = HandlerQueue([f1])
        assert q.remove(f2) == 0
        assert list(q) == [f1]

    def test_remove_bound_method_by_equality(self):
        class Widget:
            def on_click(self, *args):
                pass

        w = Widget()
        q = HandlerQueue()
        q.push_back(w.on_click)
        q.remove(w.on_click)
        assert not q

    def test_remove_does_not_match_other_instances(self):
        class Widget:
            def on_click(self, *args):
                pass

        a, b = Widget(), Widget()
        q = HandlerQueue([a.on_click])
        q.remove(b.on_click)
        assert len(q) == 1


class TestIteration:
    def test_mutation_during_iteration_is_safe(self):
        q = HandlerQueue([f1, f2])
        seen = []
        for item in q:
            seen.append(item)
            q.remove(f2)
            q.push_back(f1)
        assert seen == [f1, f2]
        assert list(q) == [f1, f1, f1]

    def test_get_iterator_is_fresh_each_call(self):
        q = HandlerQueue([f1, f2])
        assert list(q.get_iterator()) == [f1, f2]
        assert list(q.get_iterator()) == [f1, f2]

    def test_contains_and_clear(self):
        q = HandlerQueue([f1])
        assert f1 in q
        assert f2 not in q
        q.clear()
        assert len(q) == 0


class AlwaysEqual:
    """Callable that compares equal to every other instance."""

    def __init__(self, tag):
        self.tag = tag

    def __call__(self, *args):
        return self.tag

    def __eq__(self, other):
        return True

    def __hash__(self):
        return 0


class TestIdentity:
    def test_equal_but_distinct_items_kept_apart(self):
        a, b = AlwaysEqual("a"), AlwaysEqual("b")
        q = HandlerQueue([a, b, a])
        assert q.remove(a) == 2
        assert [item.tag for item in q] == ["b"]

    def test_unhashable_callable(self):
        class Unhashable:
            __hash__ = None

            def __call__(self, *args):
                pass

        item = Unhashable()
        q = HandlerQueue([item])
        assert item in q
        assert q.remove(item) == 1
        assert not q

    def test_handler_key_for_bound_methods(self):
        class Widget:
            def on_click(self, *args):
                pass

        w = Widget()
        assert handler_key(w.on_click) == handler_key(w.on_click)
        assert handler_key(w.on_click) != handler_key(Widget().on_click)
        assert handler_key(f1) != handler_key(f2)


class TestMixedEnds:
    def test_front_then_back_order(self):
        q = HandlerQueue()
        q.push_back(f1)
        q.push_front(f2)
        q.push_back(f2)
        q.push_front(f1)
        assert list(q) == [f1, f2, f1, f2]

    def test_remove_across_both_ends(self):
        q = HandlerQueue()
        q.push_back(f1)
        q.push_front(f1)
        q.push_back(f2)
        assert q.remove(f1) == 2
        assert list(q) == [f2]
        assert len(q) == 1
