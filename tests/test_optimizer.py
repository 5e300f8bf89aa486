from arkfront.node import Keyword, Node, NodeType
from arkfront.optimizer import FEATURE_REMOVE_UNUSED_VARS, Optimizer


def sym(name):
    return Node(NodeType.SYMBOL, name)


def num(value):
    return Node(NodeType.NUMBER, float(value))


def lst(*children):
    return Node(NodeType.LIST, children=list(children))


def kw(keyword):
    return Node(NodeType.KEYWORD, keyword)


def let(name, value):
    return lst(kw(Keyword.LET), sym(name), value)


def optimize(ast, options=FEATURE_REMOVE_UNUSED_VARS):
    opt = Optimizer(options)
    opt.feed(ast)
    return opt.ast()


def test_removes_unused_variable():
    ast = lst(kw(Keyword.BEGIN), let("a", num(1)), let("b", num(2)), lst(sym("print"), sym("b")))
    result = optimize(ast)
    assert result == lst(kw(Keyword.BEGIN), let("b", num(2)), lst(sym("print"), sym("b")))


def test_keeps_unused_function():
    fn = lst(kw(Keyword.FUN), lst(sym("x")), sym("x"))
    ast = lst(kw(Keyword.BEGIN), let("f", fn))
    assert optimize(ast) == ast


def test_without_option_nothing_removed():
    ast = lst(kw(Keyword.BEGIN), let("a", num(1)))
    assert optimize(ast, options=0) == ast


def test_removes_unused_mut():
    ast = lst(kw(Keyword.BEGIN), lst(kw(Keyword.MUT), sym("m"), num(3)))
    assert optimize(ast) == lst(kw(Keyword.BEGIN))


def test_set_is_not_a_declaration():
    ast = lst(kw(Keyword.BEGIN), lst(kw(Keyword.SET), sym("s"), num(3)))
    assert optimize(ast) == ast


def test_nested_begin_is_searched():
    inner = lst(kw(Keyword.BEGIN), let("a", num(1)), let("b", num(2)))
    ast = lst(kw(Keyword.BEGIN), inner, lst(sym("print"), sym("a")))
    result = optimize(ast)
    assert result == lst(
        kw(Keyword.BEGIN),
        lst(kw(Keyword.BEGIN), let("a", num(1))),
        lst(sym("print"), sym("a")),
    )


def test_capture_counts_as_use():
    ast = lst(kw(Keyword.BEGIN), let("a", num(1)), lst(sym("f"), Node(NodeType.CAPTURE, "a")))
    assert optimize(ast) == ast


def test_feed_does_not_modify_input():
    ast = lst(kw(Keyword.BEGIN), let("a", num(1)))
    snapshot = ast.copy()
    optimize(ast)
    assert ast == snapshot


def test_non_list_ast_is_unchanged():
    ast = num(5)
    assert optimize(ast) == num(5)


def test_all_removed_declarations_were_used_once():
    ast = lst(
        kw(Keyword.BEGIN),
        let("a", num(1)),
        let("b", num(2)),
        let("c", num(3)),
        lst(sym("+"), sym("a"), sym("c")),
    )
    result = optimize(ast)
    names = [child.children[1].value for child in result.children[1:] if child.children[0].node_type is NodeType.KEYWORD]
    assert names == ["a", "c"]