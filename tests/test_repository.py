"""Repository (front object) tests.

These tests verify:
- Operations resolve once and are bound on the instance
- Shortcut and full entry points
- NotConfiguredError for repositories without a strategy
- UnsupportedOperationError for undeclared operations
- Capability queries that do not force resolution
"""

from __future__ import annotations

import pytest

from mediator_core import (
    MediatorError,
    NotConfiguredError,
    RegistrationError,
    RegistrationStore,
    Repository,
    UnsupportedOperationError,
)
from mediator_core.dispatch import cache as cache_module
from mediator_core.dispatch.cache import ResolutionCache
from tests.fixtures.sample_repositories import (
    W1,
    W2,
    W3,
    Echo,
    Exclaim,
    FindAudit,
    GreeterRepository,
    OrderedRepository,
    StaticUsers,
    Unrelated,
    Upper,
    UnwiredRepository,
    UserRepository,
)


@pytest.fixture
def greeter(registration_store: RegistrationStore) -> GreeterRepository:
    registration_store.register(
        GreeterRepository, strategy=Echo, wrappers=[Upper, Exclaim], operations=["op"]
    )
    return GreeterRepository()


@pytest.fixture
def users(registration_store: RegistrationStore) -> UserRepository:
    registration_store.register(
        UserRepository,
        strategy=StaticUsers,
        wrappers=[FindAudit],
        operations=["find", "search", "count"],
    )
    return UserRepository()


@pytest.fixture
def count_builds(monkeypatch):
    """Count build_plan() calls made by the resolution cache."""
    calls: list[str] = []
    original = cache_module.build_plan

    def counting_build_plan(registration, operation, repository=None):
        calls.append(operation)
        return original(registration, operation, repository)

    monkeypatch.setattr(cache_module, "build_plan", counting_build_plan)
    return calls


class TestScenario:
    """End-to-end example from the design."""

    def test_upper_then_exclaim(self, greeter, call_log):
        """Test op('hi') yields 'HI!'."""
        assert greeter.op("hi") == "HI!"
        assert call_log == ["Upper.before_op", "Echo.op", "Exclaim.after_op"]

    def test_class_level_declaration(self, call_log):
        """Test mediates/strategy/wrappers class attributes register the repository."""

        class Greeter(Repository):
            mediates = ("op",)
            strategy = Echo
            wrappers = (Upper, Exclaim)

        assert RegistrationStore.instance().is_registered(Greeter)
        assert Greeter().op("hey") == "HEY!"


class TestSingleResolution:
    """Tests for one-time resolution and binding."""

    def test_plan_built_once(self, greeter, count_builds):
        """Test build_plan runs once for many calls."""
        for _ in range(5):
            assert greeter.op("hi") == "HI!"

        assert count_builds == ["op"]

    def test_entry_point_bound_on_instance(self, greeter):
        """Test the resolved entry point lands in the instance dict."""
        assert "op" not in vars(greeter)

        greeter.op("hi")

        assert "op" in vars(greeter)
        assert greeter.op is vars(greeter)["op"]

    def test_bound_entry_point_bypasses_cache(self, greeter, monkeypatch):
        """Test later calls never consult the resolution cache."""
        greeter.op("hi")

        def fail(self, operation):
            raise AssertionError("resolution path re-entered")

        monkeypatch.setattr(ResolutionCache, "entry_point", fail)

        assert greeter.op("again") == "AGAIN!"

    def test_store_changes_do_not_affect_resolved_operations(self, greeter, registration_store):
        """Test a resolved plan is never recomputed."""
        greeter.op("hi")

        registration_store.register(GreeterRepository, strategy=Echo, operations=["op"])

        assert greeter.op("hi") == "HI!"
        assert GreeterRepository().op("hi") == "hi"

    def test_instances_resolve_independently(self, greeter, count_builds):
        """Test each instance has its own cache."""
        other = GreeterRepository()

        greeter.op("a")
        other.op("b")

        assert count_builds == ["op", "op"]

    def test_dispatch_plan_exposed(self, greeter):
        """Test the resolved plan can be inspected."""
        assert greeter.dispatch_plan("op") is None

        greeter.op("hi")

        plan = greeter.dispatch_plan("op")
        assert plan is not None
        assert plan.before_interceptors == (Upper,)
        assert plan.after_chain == (Exclaim,)


class TestShortcutPath:
    """Tests for operations no wrapper hooks."""

    def test_returns_raw_backend_value(self, users, call_log):
        """Test the shortcut returns the strategy's value unmodified."""
        assert users.count() == 2
        assert call_log == []
        assert users.dispatch_plan("count").is_shortcut is True

    def test_forwards_positional_and_keyword_arguments(self, users):
        """Test the shortcut keeps the strategy's call shape."""
        assert users.search("ad", exact=False) == [{"id": 1, "name": "Ada"}]

    def test_wrappers_for_other_operations_do_not_participate(
        self, registration_store, call_log
    ):
        """Test registered wrappers without matching hooks take the shortcut."""
        registration_store.register(
            GreeterRepository, strategy=Echo, wrappers=[Unrelated], operations=["op"]
        )
        greeter = GreeterRepository()

        assert greeter.op("hi") == "hi"
        assert greeter.dispatch_plan("op").is_shortcut is True
        assert call_log == ["Echo.op"]

    def test_fresh_backend_per_call(self, registration_store, call_log):
        """Test a new strategy instance is created for every call."""
        registration_store.register(GreeterRepository, strategy=Echo, operations=["op"])
        greeter = GreeterRepository()

        greeter.op(1)
        greeter.op(2)

        assert Echo.instances == 2


class TestFullPath:
    """Tests for operations with participating wrappers."""

    def test_before_order(self, registration_store, call_log):
        """Test before hooks run W1 -> W2 -> W3."""
        registration_store.register(
            OrderedRepository, strategy=Echo, wrappers=[W1, W2, W3], operations=["op"]
        )

        OrderedRepository().op([])

        assert call_log[:3] == ["W1.before_op", "W2.before_op", "W3.before_op"]

    def test_after_order_reversed(self, registration_store, call_log):
        """Test after hooks run W3 -> W2 -> W1."""
        registration_store.register(
            OrderedRepository, strategy=Echo, wrappers=[W1, W2, W3], operations=["op"]
        )

        result = OrderedRepository().op([])

        assert call_log[4:] == ["W3.after_op", "W2.after_op", "W1.after_op"]
        assert result == ["W1", "W2", "W3", "W3", "W2", "W1"]

    def test_plain_class_wrapper(self, users, call_log):
        """Test wrappers not derived from Wrapper participate."""
        assert users.find(1) == {"id": 1, "name": "Ada"}
        assert call_log == ["FindAudit.before_find", "FindAudit.after_find"]

    def test_full_entry_point_takes_one_argument(self, greeter):
        """Test the full form threads a single argument payload."""
        with pytest.raises(TypeError, match="single positional argument payload"):
            greeter.op("a", "b")

    def test_full_entry_point_rejects_keywords(self, greeter, call_log):
        """Test keyword calls are reported against the repository, not the backend."""
        with pytest.raises(TypeError) as exc_info:
            greeter.op(value="hi")

        message = str(exc_info.value)
        assert message.startswith("GreeterRepository.op()")
        assert "Echo" not in message
        assert call_log == []

    def test_entry_points_named_after_repository(self, greeter, users):
        """Test bound entry points carry the repository's qualified name."""
        assert greeter.op.__qualname__ == "GreeterRepository.op"
        assert users.count.__qualname__ == "UserRepository.count"


class TestNotConfigured:
    """Tests for repositories without a strategy."""

    def test_raises_on_first_call(self, registration_store):
        """Test wrappers without a strategy raise NotConfiguredError."""
        registration_store.register(UnwiredRepository, wrappers=[Upper], operations=["op"])
        repo = UnwiredRepository()

        with pytest.raises(NotConfiguredError) as exc_info:
            repo.op("hi")

        assert exc_info.value.repository is UnwiredRepository

    def test_raises_on_every_call(self, registration_store, count_builds):
        """Test the failure is permanent and nothing is bound."""
        registration_store.register(UnwiredRepository, wrappers=[Upper], operations=["op"])
        repo = UnwiredRepository()

        for _ in range(3):
            with pytest.raises(NotConfiguredError):
                repo.op("hi")

        assert "op" not in vars(repo)
        assert repo.resolved_operations() == []

    def test_is_mediator_error(self):
        """Test NotConfiguredError is catchable as MediatorError."""
        assert issubclass(NotConfiguredError, MediatorError)


class TestUnsupportedOperation:
    """Tests for undeclared operation names."""

    def test_raises_unsupported(self, users):
        """Test an undeclared name raises UnsupportedOperationError."""
        with pytest.raises(UnsupportedOperationError) as exc_info:
            users.delete(1)

        assert exc_info.value.operation == "delete"
        assert exc_info.value.repository is UserRepository

    def test_never_reaches_resolution_cache(self, users, monkeypatch):
        """Test unsupported names fail before the cache is consulted."""

        def fail(self, operation):
            raise AssertionError("resolution cache consulted")

        monkeypatch.setattr(ResolutionCache, "entry_point", fail)

        with pytest.raises(UnsupportedOperationError):
            users.delete

    def test_behaves_like_attribute_error(self, users):
        """Test hasattr/getattr defaults keep working."""
        assert hasattr(users, "delete") is False
        assert getattr(users, "delete", None) is None

    def test_unregistered_repository(self):
        """Test an unregistered repository supports nothing."""
        repo = UnwiredRepository()

        assert repo.supports("op") is False
        with pytest.raises(UnsupportedOperationError):
            repo.op("hi")

    def test_private_names_are_never_mediated(self, users):
        """Test underscore names raise without consulting the registration."""
        with pytest.raises(AttributeError):
            users._secret


class TestCapabilityQueries:
    """Tests for supports()/supported_operations()/invoke()/warm_up()."""

    def test_supports_does_not_resolve(self, users, count_builds):
        """Test supports() answers from the registration only."""
        assert users.supports("find") is True
        assert users.supports("delete") is False
        assert count_builds == []
        assert users.resolved_operations() == []

    def test_supported_operations(self, users):
        """Test declared operations are listed sorted."""
        assert users.supported_operations() == ["count", "find", "search"]

    def test_dir_lists_operations(self, users):
        """Test dir() includes declared operations."""
        assert {"find", "search", "count"} <= set(dir(users))

    def test_invoke_by_name(self, users):
        """Test the explicit dispatcher."""
        assert users.invoke("count") == 2
        assert users.invoke("find", 2) == {"id": 2, "name": "Grace"}

    def test_invoke_unsupported(self, users):
        """Test invoke() rejects undeclared operations."""
        with pytest.raises(UnsupportedOperationError):
            users.invoke("delete", 1)

    def test_warm_up_binds_everything(self, users, count_builds):
        """Test warm_up() resolves every declared operation once."""
        assert users.warm_up() == ["count", "find", "search"]
        assert sorted(users.resolved_operations()) == ["count", "find", "search"]

        users.find(1)
        users.count()

        assert sorted(count_builds) == ["count", "find", "search"]

    def test_explicit_store(self):
        """Test a repository can resolve from a non-singleton store."""
        store = RegistrationStore()
        store.register(GreeterRepository, strategy=Echo, wrappers=[Upper], operations=["op"])

        repo = GreeterRepository(store=store)

        assert repo.registration_store() is store
        assert repo.op("hi") == "HI"
        assert GreeterRepository().supports("op") is False

    def test_reset_bindings(self, greeter, count_builds):
        """Test reset_bindings() forces the next call to resolve again."""
        greeter.op("hi")
        greeter.reset_bindings()

        assert "op" not in vars(greeter)
        assert greeter.op("hi") == "HI!"
        assert count_builds == ["op", "op"]

    def test_repr(self, greeter):
        """Test repr lists resolved operations."""
        greeter.op("hi")
        assert repr(greeter) == "GreeterRepository(resolved=[op])"


class TestClassDeclarations:
    """Tests for mediates/strategy/wrappers declared on the class."""

    def test_declarations_apply_to_explicit_store(self):
        """Test a store that never saw the class still gets its declarations."""

        class Declared(Repository):
            mediates = ("op",)
            strategy = Echo

        store = RegistrationStore()
        repo = Declared(store=store)

        assert repo.op("x") == "x"
        assert store.lookup(Declared).strategy is Echo

    def test_declarations_survive_store_reset(self):
        """Test declarations are re-registered after the singleton is reset."""

        class Declared(Repository):
            mediates = ("op",)
            strategy = Echo
            wrappers = (Upper,)

        RegistrationStore.reset_instance()

        assert Declared().supports("op") is True
        assert Declared().op("x") == "X"

    def test_declarations_survive_clear(self):
        """Test declarations are re-registered after the store is cleared."""

        class Declared(Repository):
            mediates = ("op",)
            strategy = Echo

        RegistrationStore.instance().clear()

        assert Declared().supported_operations() == ["op"]

    def test_store_entry_takes_precedence(self, registration_store):
        """Test an existing registration wins over the class declarations."""

        class Declared(Repository):
            mediates = ("op",)
            strategy = Echo

        registration_store.register(Declared, strategy=Echo, wrappers=[Upper], operations=["op"])

        assert Declared().op("x") == "X"

    def test_undeclared_class_is_not_registered(self):
        """Test classes without declarations stay out of the store."""
        store = RegistrationStore()

        assert GreeterRepository(store=store).supports("op") is False
        assert store.is_registered(GreeterRepository) is False

    def test_colliding_declaration_rejected_at_class_creation(self):
        """Test declaring an operation named after a Repository method fails."""
        with pytest.raises(RegistrationError, match="collides with attribute"):

            class Colliding(Repository):
                mediates = ("supports", "op")
                strategy = Echo

    def test_framework_methods_stay_intact(self, registration_store):
        """Test supports() keeps answering after every operation is bound."""
        with pytest.raises(RegistrationError):
            registration_store.register(
                GreeterRepository, strategy=Echo, operations=["supports", "op"]
            )

        registration_store.register(GreeterRepository, strategy=Echo, operations=["op"])
        repo = GreeterRepository()
        repo.warm_up()

        assert repo.supports("nope") is False
        assert repo.supports("op") is True
