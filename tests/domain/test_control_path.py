import unittest

from tensorengine.domain.utils import create_path_builder
from tensorengine.domain._tensor import TensorKind


class TestCreatePathBuilder(unittest.TestCase):
    def test_state_must_be_hashable(self) -> None:
        class C:
            _state = "A"

            def foo(self, x: int) -> int: ...

        path = create_path_builder()
        with self.assertRaises(TypeError) as ctx:
            path(C, C.foo, ["not", "hashable"])

        self.assertIn("must be hashable", str(ctx.exception))

    def test_dispatch_selects_registered_control_path(self) -> None:
        class C:
            def __init__(self, state: str) -> None:
                self._state = state

            def foo(self, x: int) -> int: ...

        path = create_path_builder()

        @path(C, C.foo, "A")
        def foo_a(self, x: int) -> int:
            return x + 10

        @path(C, C.foo, "B")
        def foo_b(self, x: int) -> int:
            return x + 20

        self.assertEqual(C("A").foo(1), 11)
        self.assertEqual(C("B").foo(1), 21)

    def test_custom_state_attribute_and_tuple_states(self) -> None:
        class Call:
            def __init__(self, kinds) -> None:
                self.kinds = kinds

            def route(self) -> str: ...

        path = create_path_builder("kinds")

        @path(Call, Call.route, (TensorKind.DENSE, TensorKind.SPARSE))
        def _dense_sparse(self) -> str:
            return "dense-sparse"

        self.assertEqual(
            Call((TensorKind.DENSE, TensorKind.SPARSE)).route(), "dense-sparse"
        )
        with self.assertRaises(NotImplementedError) as ctx:
            Call((TensorKind.SPARSE, TensorKind.SPARSE)).route()
        self.assertIn("kinds=", str(ctx.exception))

    def test_missing_state_attribute_raises_not_implemented(self) -> None:
        class C:
            def foo(self) -> int: ...

        path = create_path_builder()

        @path(C, C.foo, "A")
        def foo_a(self) -> int:
            return 1

        with self.assertRaises(NotImplementedError) as ctx:
            C().foo()

        self.assertIn("missing attribute", str(ctx.exception))
        self.assertIn("'_state'", str(ctx.exception))

    def test_missing_control_path_without_trap_raises_not_implemented(self) -> None:
        class C:
            _state = "B"

            def foo(self) -> int: ...

        path = create_path_builder()

        @path(C, C.foo, "A")
        def foo_a(self) -> int:
            return 1

        with self.assertRaises(NotImplementedError) as ctx:
            C().foo()

        self.assertIn("Missing control path", str(ctx.exception))
        self.assertIn("_state='B'", str(ctx.exception))

    def test_unhashable_runtime_state_never_matches(self) -> None:
        class C:
            _state = ["A"]

            def foo(self) -> int: ...

        path = create_path_builder()

        @path(C, C.foo, "A")
        def foo_a(self) -> int:
            return 1

        with self.assertRaises(NotImplementedError):
            C().foo()

    def test_trap_exception_class_is_raised(self) -> None:
        class MissingPathError(Exception):
            pass

        class C:
            _state = "B"

            def foo(self) -> int: ...

        path = create_path_builder()

        @path(C, C.foo, "A", MissingPathError)
        def foo_a(self) -> int:
            return 1

        with self.assertRaises(MissingPathError):
            C().foo()

    def test_trap_factory_receives_method_and_state(self) -> None:
        calls = {}

        class MyRaisedError(Exception):
            pass

        def trap(method, state):
            calls["method_name"] = method.__name__
            calls["state"] = state
            return MyRaisedError("boom")

        class C:
            _state = "B"

            def foo(self) -> int: ...

        path = create_path_builder()

        @path(C, C.foo, "A", trap)
        def foo_a(self) -> int:
            return 1

        with self.assertRaises(MyRaisedError) as ctx:
            C().foo()

        self.assertEqual(calls["method_name"], "foo")
        self.assertEqual(calls["state"], "B")
        self.assertIn("boom", str(ctx.exception))

    def test_wrapper_preserves_original_method_metadata(self) -> None:
        class C:
            _state = "A"

            def foo(self) -> int:
                """Original foo docstring."""
                ...

        path = create_path_builder()

        @path(C, C.foo, "A")
        def foo_a(self) -> int:
            return 1

        self.assertEqual(C.foo.__name__, "foo")
        self.assertEqual(C.foo.__doc__, "Original foo docstring.")

    def test_two_builders_do_not_share_control_paths(self) -> None:
        class C:
            _state = "A"

            def foo(self) -> int: ...

            def bar(self) -> int: ...

        path_1 = create_path_builder()
        path_2 = create_path_builder()

        @path_1(C, C.foo, "A")
        def foo_a(self) -> int:
            return 1

        @path_2(C, C.bar, "B")
        def bar_b(self) -> int:
            return 2

        self.assertEqual(C().foo(), 1)
        with self.assertRaises(NotImplementedError):
            C().bar()


if __name__ == "__main__":
    unittest.main()
