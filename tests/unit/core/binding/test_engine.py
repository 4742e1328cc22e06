"""Tests for the binding engine entry point."""

import gc
import weakref
from typing import Annotated, Any

import pytest

from step_binder.core.binding.coercion import Int
from step_binder.core.binding.engine import BindingEngine, build_binding
from step_binder.core.binding.markers import Assigned, Group, Projection
from step_binder.core.binding.step_definitions import given, then, when
from step_binder.exceptions import BindingDefinitionError, PatternCompilationError
from step_binder.schemas.binding_config import BindingConfig


def projected_items(n: Annotated[int, Projection("n")]) -> None:
    pass


def assigned_items(count: Annotated[Int, Assigned("count")]) -> None:
    pass


def grouped(whole: Annotated[str, Group(0)], second: Annotated[str, Group(2)]) -> None:
    pass


def anything(value: Annotated[Any, Group(1)]) -> None:
    pass


def unbound(value: str, other: int) -> None:
    pass


def ambiguous(value: Annotated[str, Group(0), Projection("v")]) -> None:
    pass


@given("I have <count> items")
def decorated_items(count: Annotated[int, Assigned("count")]) -> None:
    pass


class CartSteps:
    @when("I remove <count> items")
    def remove_items(self, count: Annotated[int, Assigned("count")]) -> None:
        pass

    @then(r"the cart holds (\d+) items")
    def cart_holds(self, total: Annotated[int, Group(1)]) -> None:
        pass


class TestBuild:
    """Test BindingEngine.build."""

    def test_projection_binding(self) -> None:
        """A projected placeholder reads its example value."""
        engine = BindingEngine()

        result = engine.build(
            "Given", "I have <n> items", projected_items, {"n": "3"}, "I have <n> items"
        )

        assert result.arguments == (3,)
        assert result.projections == ("n",)
        assert result.has_projections

    def test_assigned_binding(self) -> None:
        """An assigned name reads its positional capture."""
        engine = BindingEngine()

        result = engine.build(
            "Given", "I have 5 items", assigned_items, None, "I have <count> items"
        )

        assert result.arguments == (5,)
        assert result.projections == ()
        assert not result.has_projections

    def test_group_binding(self) -> None:
        """Group indices read the verbatim pattern's captures."""
        engine = BindingEngine()

        result = engine.build("When", "foobar", grouped, None, "(foo)(bar)")

        assert result.arguments == ("foobar", "bar")

    def test_label_combines_kind_and_text(self) -> None:
        """The result's step label is 'kind text'."""
        result = BindingEngine().build("Then", "foobar", grouped, None, "(foo)(bar)")

        assert result.step == "Then foobar"
        assert result.method is grouped

    def test_broad_type_receives_text(self) -> None:
        """A parameter typed Any keeps the raw string."""
        result = BindingEngine().build("Given", "value 42", anything, None, r"value (\d+)")

        assert result.arguments == ("42",)

    def test_nothing_to_bind(self) -> None:
        """With no values available every argument is None."""
        result = BindingEngine().build(
            "Given", "something else", grouped, {}, "(foo)(bar)"
        )

        assert result.arguments == (None, None)

    def test_unmarked_parameters(self) -> None:
        """Parameters without markers stay None even when values exist."""
        result = BindingEngine().build("Given", "foobar", unbound, None, "(foo)(bar)")

        assert result.arguments == (None, None)

    def test_missing_step_text(self) -> None:
        """A step without text binds nothing."""
        result = BindingEngine().build("Given", None, grouped, None, "(foo)(bar)")

        assert result.arguments == (None, None)
        assert result.projections == ()

    def test_missing_pattern(self) -> None:
        """Without a pattern only projections can bind."""
        result = BindingEngine().build(
            "Given", "I have <n> items", projected_items, {"n": "8"}, None
        )

        assert result.arguments == (8,)

    def test_malformed_pattern_raises(self) -> None:
        """A broken pattern is a configuration error."""
        with pytest.raises(PatternCompilationError):
            BindingEngine().build("Given", "foo", grouped, None, "(foo")

    def test_precedence_by_default(self) -> None:
        """Projection wins over Group when both are present."""
        result = BindingEngine().build(
            "Given", "use <v>", ambiguous, {"v": "projected"}, "use (.*)"
        )

        assert result.arguments == ("projected",)

    def test_strict_markers(self) -> None:
        """Strict configuration rejects several markers on a parameter."""
        engine = BindingEngine(BindingConfig(strict_markers=True))

        with pytest.raises(BindingDefinitionError):
            engine.build("Given", "use x", ambiguous, None, "use (.*)")

    def test_exact_coercion_mode(self) -> None:
        """Exact mode leaves Any-typed parameters unbound."""
        engine = BindingEngine(BindingConfig(coercion_mode="exact"))

        result = engine.build("Given", "value 42", anything, None, r"value (\d+)")

        assert result.arguments == (None,)


class TestBindStep:
    """Test binding through step-definition decorators."""

    def test_uses_declared_pattern_and_kind(self) -> None:
        """The decorator supplies pattern and kind."""
        result = BindingEngine().bind_step("I have 4 items", decorated_items)

        assert result.step == "Given I have 4 items"
        assert result.arguments == (4,)

    def test_kind_override(self) -> None:
        """An explicit kind replaces the decorator's, e.g. for And steps."""
        result = BindingEngine().bind_step("I have 4 items", decorated_items, kind="And")

        assert result.step == "And I have 4 items"

    def test_bound_methods(self) -> None:
        """Methods on a step library bind without their receiver."""
        steps = CartSteps()
        engine = BindingEngine()

        removed = engine.bind_step("I remove 2 items", steps.remove_items)
        holds = engine.bind_step("the cart holds 9 items", steps.cart_holds)

        assert removed.step == "When I remove 2 items"
        assert removed.arguments == (2,)
        assert holds.arguments == (9,)

    def test_projection_values_forwarded(self) -> None:
        """Outline steps bind their projections through bind_step."""
        result = BindingEngine().bind_step(
            "I have <count> items", decorated_items, {"count": "6"}
        )

        # The placeholder itself is captured, which does not parse as int.
        assert result.arguments == (None,)
        assert result.projections == ("count",)

    def test_undecorated_method(self) -> None:
        """Binding a plain function through bind_step is a definition error."""
        with pytest.raises(BindingDefinitionError, match="not a step definition"):
            BindingEngine().bind_step("foobar", grouped)


class TestCaching:
    """Test engine caches."""

    def test_parameters_cached_per_callable(self) -> None:
        """Introspection runs once per callable."""
        engine = BindingEngine()

        assert engine.parameters_of(grouped) is engine.parameters_of(grouped)

    def test_bound_methods_share_an_entry(self) -> None:
        """Bound methods of different instances reuse one description."""
        engine = BindingEngine()

        first = engine.parameters_of(CartSteps().remove_items)

        assert engine.parameters_of(CartSteps().remove_items) is first
        assert engine.parameters_of(CartSteps.remove_items) == first

    def test_instances_not_retained(self) -> None:
        """Binding a step-library method does not keep its instance alive."""
        engine = BindingEngine()
        steps = CartSteps()
        instance = weakref.ref(steps)

        engine.bind_step("I remove 2 items", steps.remove_items)
        del steps
        gc.collect()

        assert instance() is None

    def test_functions_not_retained(self) -> None:
        """Cached descriptions disappear with their function."""
        engine = BindingEngine()

        def transient(value: Annotated[str, Group(0)]) -> None:
            pass

        engine.parameters_of(transient)
        function = weakref.ref(transient)
        del transient
        gc.collect()

        assert function() is None

    def test_unhashable_callable(self) -> None:
        """Callables that cannot be cached are still described."""

        class Step:
            __hash__ = None  # type: ignore[assignment]

            def __init__(self) -> None:
                self.__annotations__ = {"value": Annotated[str, Group(0)]}

            def __call__(self, value: str) -> None:
                pass

        engine = BindingEngine()

        result = engine.build("Given", "foo", Step(), None, "foo")

        assert result.arguments == ("foo",)

    def test_clear_cache(self) -> None:
        """clear_cache forces fresh introspection."""
        engine = BindingEngine()
        first = engine.parameters_of(grouped)

        engine.clear_cache()

        assert engine.parameters_of(grouped) is not first
        assert engine.parameters_of(grouped) == first

    def test_results_independent_of_cache(self) -> None:
        """Repeated builds produce equal results."""
        engine = BindingEngine()

        first = engine.build("When", "foobar", grouped, None, "(foo)(bar)")
        second = engine.build("When", "foobar", grouped, None, "(foo)(bar)")

        assert first == second


class TestBuildBinding:
    """Test the module-level convenience."""

    def test_build_binding(self) -> None:
        """build_binding behaves like BindingEngine().build."""
        result = build_binding(
            "Given", "I have 5 items", assigned_items, None, "I have <count> items"
        )

        assert result.arguments == (5,)
