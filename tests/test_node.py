import pytest

from arkfront.node import (
    Keyword,
    Node,
    NodeType,
    false_node,
    format_node_list,
    list_node,
    nil_node,
    true_node,
)


def num(v):
    return Node(NodeType.NUMBER, v)


def sym(name):
    return Node(NodeType.SYMBOL, name)


def test_number_stored_as_float():
    assert num(3).value == 3.0
    assert isinstance(num(3).value, float)


def test_str_number_drops_trailing_zero():
    assert str(num(3)) == "3"


def test_str_string_is_quoted():
    assert str(Node(NodeType.STRING, "hi")) == '"hi"'


@pytest.mark.parametrize(
    "node_type,prefix",
    [
        (NodeType.SYMBOL, "(Symbol) "),
        (NodeType.CAPTURE, "(Capture) "),
        (NodeType.GET_FIELD, "(GetField) "),
        (NodeType.SPREAD, "(Spread) "),
    ],
)
def test_str_prefixed_kinds(node_type, prefix):
    assert str(Node(node_type, "abc")) == prefix + "abc"


def test_str_keyword():
    assert str(Node(NodeType.KEYWORD, Keyword.LET)) == "Let"


def test_str_list_and_macro():
    lst = Node(NodeType.LIST, children=[num(1), sym("a")])
    assert str(lst) == "( 1 (Symbol) a )"
    macro = Node(NodeType.MACRO, children=[sym("a")])
    assert str(macro) == "( Macro (Symbol) a )"


def test_str_unused_and_closure():
    assert str(Node(NodeType.UNUSED)) == "(Unused)"
    assert str(Node(NodeType.CLOSURE)) == "Closure"


def test_format_node_list_matches_list_node():
    items = [num(1), sym("b")]
    assert format_node_list(items) == str(Node(NodeType.LIST, children=items))


def test_equality_ignores_position():
    a = sym("x")
    b = sym("x")
    b.set_pos(4, 2)
    assert a == b
    assert (b.line, b.col) == (4, 2)


def test_equality_distinguishes_type_and_value():
    assert sym("x") != Node(NodeType.STRING, "x")
    assert sym("x") != sym("y")


def test_list_equality_compares_children():
    a = Node(NodeType.LIST, children=[num(1)])
    b = Node(NodeType.LIST, children=[num(1)])
    c = Node(NodeType.LIST, children=[num(2)])
    assert a == b
    assert a != c


def test_copy_is_deep():
    original = Node(NodeType.LIST, children=[sym("a")])
    clone = original.copy()
    clone.children[0].value = "b"
    clone.append(num(1))
    assert original == Node(NodeType.LIST, children=[sym("a")])
    assert len(original.children) == 1


def test_less_than_numbers():
    assert num(1) < num(2)
    assert not num(2) < num(1)


def test_less_than_different_types_is_strict_order():
    a, b = sym("z"), num(0)
    assert (a < b) != (b < a)


def test_less_than_lists():
    a = Node(NodeType.LIST, children=[num(1)])
    b = Node(NodeType.LIST, children=[num(2)])
    assert a < b


def test_constant_factories():
    assert true_node() == sym("true")
    assert false_node() == sym("false")
    assert nil_node() == sym("nil")
    assert list_node() == sym("list")
    assert true_node() is not true_node()


def test_nodes_are_unhashable():
    with pytest.raises(TypeError):
        hash(sym("a"))