import pytest

from javy.javy_tokens import SourceLocation
from javy.javy_datatypes import (
    Environment, Method, Scope, Variable,
    JavyError, ScriptSyntaxError, UndefinedNameError, DuplicateNameError,
    ConditionTypeError, InvalidOperationError, StructuralError, IterationLimitError,
)

# --- Scope Tests ---

def test_scope_init():
    parent = Scope()
    child = Scope(parent)
    assert child.parent is parent
    assert not child.variables
    assert not child.methods
    assert Scope().parent is None
    assert child.ordinal != parent.ordinal


def test_declare_and_resolve_through_parent_chain():
    parent = Scope()
    parent.declare_variable("a", 100.0)
    parent.declare_variable("b", 200.0)

    child = Scope(parent)
    child.declare_variable("b", 20.0)  # shadow parent

    assert child.resolve_variable("a").value == 100.0
    assert child.resolve_variable("b").value == 20.0
    assert parent.resolve_variable("b").value == 200.0
    assert child.resolve_variable("c") is None
    assert child.find_owner("a") is parent
    assert child.find_owner("b") is child
    assert "a" in child
    assert "c" not in child


def test_redeclaration_in_same_scope_fails():
    scope = Scope()
    scope.declare_variable("x")
    with pytest.raises(DuplicateNameError) as exc:
        scope.declare_variable("x", 1.0, SourceLocation(2, 5, 12))
    assert str(exc.value) == "[2:5] Variable x already exists in its scope"
    assert isinstance(exc.value, NameError)


def test_methods_and_variables_share_a_namespace():
    scope = Scope()
    scope.declare_method(Method("f", (), (), Scope(scope)))
    with pytest.raises(DuplicateNameError):
        scope.declare_variable("f")
    with pytest.raises(DuplicateNameError, match="Method f already exists"):
        scope.declare_method(Method("f", (), (), Scope(scope)))


def test_method_resolution_walks_parents():
    root = Scope()
    method = root.declare_method(Method("f", ("a", "b"), (), Scope(root)))
    child = Scope(Scope(root))
    assert child.resolve_method("f") is method
    assert child.resolve_method("g") is None
    assert method.parameters == ("a", "b")


def test_copy_has_independent_cells():
    parent = Scope()
    template = Scope(parent)
    template.declare_variable("a", 1.0)

    copy = template.copy()
    assert copy.parent is parent
    assert copy.ordinal == template.ordinal
    copy.resolve_variable("a").set(5.0)
    copy.declare_variable("b", 2.0)
    copy.declare_method(Method("m", (), (), Scope(copy)))

    assert template.resolve_variable("a").value == 1.0
    assert "b" not in template
    assert "m" not in template.methods


def test_snapshot_keeps_declaration_order():
    scope = Scope()
    scope.declare_variable("zeta", 1.0)
    scope.declare_variable("alpha", 2.0)
    assert list(scope.snapshot().items()) == [("zeta", 1.0), ("alpha", 2.0)]


def test_variables_order_by_creation():
    first = Variable("b")
    second = Variable("a")
    assert sorted([second, first]) == [first, second]
    assert first.copy().ordinal == first.ordinal


# --- Environment Tests ---

def test_environment_begin_and_end_scope():
    env = Environment()
    assert env.current is env.root
    inner = env.begin_scope()
    assert env.current is inner
    assert inner.parent is env.root
    assert env.end_scope() is inner
    assert env.current is env.root


def test_end_scope_at_root_is_structural_error():
    env = Environment()
    with pytest.raises(StructuralError) as exc:
        env.end_scope(SourceLocation(4, 2, 30))
    assert str(exc.value) == "[4:2] Cannot end scope when current scope is global"
    assert isinstance(exc.value, RuntimeError)


def test_activate_restores_previous_scope_on_error():
    env = Environment()
    other = Scope(env.root)
    with pytest.raises(ValueError):
        with env.activate(other) as active:
            assert env.current is active is other
            raise ValueError("boom")
    assert env.current is env.root


# --- Error Tests ---

def test_error_rendering_with_and_without_location():
    assert str(JavyError("boom", SourceLocation(2, 5, 9))) == "[2:5] boom"
    assert str(JavyError("boom")) == "boom"
    err = UndefinedNameError("missing", SourceLocation())
    assert err.message == "missing"
    assert err.location == SourceLocation()


@pytest.mark.parametrize("cls, builtin", [
    (ScriptSyntaxError, SyntaxError),
    (UndefinedNameError, NameError),
    (DuplicateNameError, NameError),
    (ConditionTypeError, TypeError),
    (InvalidOperationError, TypeError),
    (StructuralError, RuntimeError),
    (IterationLimitError, RuntimeError),
])
def test_error_taxonomy(cls, builtin):
    err = cls("message")
    assert isinstance(err, JavyError)
    assert isinstance(err, builtin)
