# arkfront

This package is the front half of a compiler for a small Lisp-like scripting
language. It splits source text into tokens. It expands the macros in a syntax
tree built from `Node`s. It can also remove global variables that are never
used. It uses only the standard library.

## Modules

- `arkfront.lexer` turns source text into tokens.
  - `Lexer(debug).feed(code)` adds `Token`s to the list that
    `Lexer.tokens()` returns. Each token has a `type` (a `TokenType`), its
    text, a `line` and a `col`.
  - Strings keep their quotes. The escape codes `\" \n \a \b \t \r \f \\ \0`,
    `\uXXXX` and `\UXXXXXXXX` are decoded. `\x` sequences are dropped.
  - Comments start with `#` and run to the end of the line. They are not kept.
  - `&name` becomes a capture token and `.name` becomes a field-access token.
    Each is stored without its leading character. `...name` becomes a spread
    token.
  - `'` is emitted as a shorthand. So is `!` when it starts a token and is not
    followed by `=`.
  - `guess_type(text)` classifies a single raw token. It returns a number,
    operator, keyword, identifier, capture, spread, field access, comment or
    mismatch type.
- `arkfront.node` holds the syntax tree types.
  - `Node` carries a `node_type` (a `NodeType`), a `value`, its `children`, a
    position and a filename. It supports `copy()`, `append()`, `set_pos()`,
    equality, ordering and `str()`.
  - `true_node()`, `false_node()`, `nil_node()` and `list_node()` build the
    standard symbols.
  - `format_node_list(nodes)` renders a sequence of nodes in the same way a
    list node is printed.
- `arkfront.macros` holds `MacroProcessor(debug, options)`. `feed(ast)`
  expands the macros of a copy of the tree, and `ast()` returns the result.
  It handles:
  - value macros, `!{name value}`;
  - function-like macros, `!{name (args...) body}`, where the last argument
    may be a spread;
  - conditional macros, `!{if cond then else}`, where the `else` part is
    optional;
  - `!{undef name}`;
  - the predefined macros `symcat` and `argcount`.

  Inside macros, these operations are evaluated at compile time where
  possible:
  - comparisons `= != < > <= >=`;
  - arithmetic `+ - * /` on numbers;
  - `not`, `and` and `or`;
  - `len`, `@`, `head` and `tail` on literal lists.
- `arkfront.executors` holds the executors that the macro processor runs in
  turn. They are `SymbolExecutor`, `ConditionalExecutor` and `ListExecutor`,
  run through a `MacroExecutorPipeline`.
- `arkfront.optimizer` holds `Optimizer(options)`. It works only when
  `options` includes `FEATURE_REMOVE_UNUSED_VARS`. In that case `feed(ast)`
  drops each global `let`/`mut` whose name appears only once and whose value
  is not a list. This also covers declarations nested in `begin` blocks.
  `ast()` returns the result.
- `arkfront.errors` holds the exceptions and the helpers that build their
  messages.
  - `TokenizingError` and `MacroProcessingError` are the two exceptions.
  - `make_context`, `make_token_based_error_ctx` and
    `make_node_based_error_ctx` build error text that shows the surrounding
    source lines.
- `arkfront.utils` has `dec_places(d)` and `dig_places(d)`, which count the
  decimal and integer digits of a number.

## Examples

Tokenizing:

```python
from arkfront.lexer import Lexer

lexer = Lexer(0)
lexer.feed('(let a "hello\\n") # comment')
for token in lexer.tokens():
    print(token.type, repr(token.token), token.line, token.col)
```

Errors are raised as exceptions:

```python
from arkfront.errors import TokenizingError
from arkfront.lexer import Lexer

try:
    Lexer(0).feed('"bad \\q escape"')
except TokenizingError as exc:
    print(exc)
```

Expanding a value macro:

```python
from arkfront.macros import MacroProcessor
from arkfront.node import Node, NodeType

ast = Node(NodeType.LIST, children=[
    Node(NodeType.MACRO, children=[Node(NodeType.SYMBOL, "a"), Node(NodeType.NUMBER, 1)]),
    Node(NodeType.LIST, children=[Node(NodeType.SYMBOL, "print"), Node(NodeType.SYMBOL, "a")]),
])
processor = MacroProcessor(0, 0)
processor.feed(ast)
print(processor.ast())  # ( ( (Symbol) print 1 ) )
```

## What it does not do

The package does not parse tokens into a `Node` tree, so trees must be built
by the caller. It does not compile to bytecode, it has no virtual machine or
builtins for running programs, and it provides no command-line tool or
interactive prompt.

## Running the tests

```
pip install -e .[test]
pytest
```