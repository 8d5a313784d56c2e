from typing import Dict, List, Optional, Set

from plotscript.config.config import BINARY_PRECEDENCE, BRACKET_PAIRS, FRIENDLY_TOKEN_NAMES, MAX_NESTING_DEPTH, UNARY_OPERATORS
from plotscript.exceptions import ErrorCode, LexError, ParseError
from plotscript.lexer import Token, TokenKind, tokenize

from .classes import *

OPENING_BRACKETS = set(BRACKET_PAIRS.keys())
CLOSING_BRACKETS = set(BRACKET_PAIRS.values())
STATEMENT_TERMINATORS = {";", "}"}


def _token_span(token: Token) -> Span:
    return Span(s_line=token.line, s_col=token.column, e_line=token.end_line, e_col=token.end_column)


def check_brackets(tokens: List[Token], script_name: Optional[str] = None):
    """
    Rejects unbalanced or mismatched (), [] and {} before parsing starts, so the
    error points at the bracket itself rather than wherever the parser gives up.
    Strings and comments are already gone at this stage.
    """
    bracket_stack: List[Token] = []
    for token in tokens:
        if token.kind is not TokenKind.PUNCTUATION:
            continue
        if token.text in OPENING_BRACKETS:
            bracket_stack.append(token)
        elif token.text in CLOSING_BRACKETS:
            if not bracket_stack:
                raise ParseError(ErrorCode.SYNTAX_UNMATCHED_BRACKET, span=_token_span(token), script_name=script_name, char=token.text)
            opening = bracket_stack.pop()
            if BRACKET_PAIRS[opening.text] != token.text:
                raise ParseError(ErrorCode.SYNTAX_UNMATCHED_BRACKET, span=_token_span(token), script_name=script_name, char=token.text)

    if bracket_stack:
        opening = bracket_stack[-1]
        raise ParseError(ErrorCode.SYNTAX_UNMATCHED_BRACKET, span=_token_span(opening), script_name=script_name, char=opening.text)


class PlotScriptParser:
    """
    Recursive-descent parser turning a token list into a `Program`.

    Precedence, lowest first: assignment (right-associative), `?:`, then the
    binary levels listed in `BINARY_PRECEDENCE`, then unary `-`/`!`, then
    postfix indexing and calls. Structural rules that do not need runtime
    information (loop-only `break`/`continue`, top-level-only `func`,
    duplicate parameters and functions, nesting depth) are enforced here.
    Newlines are not statement separators; see `_check_line_continuation`.
    """

    def __init__(self, tokens: List[Token], script_name: str = "<inline>"):
        self.tokens = tokens
        self.script_name = script_name
        self.pos = 0
        self.loop_depth = 0
        self.nesting_depth = 0
        self.bracket_depth = 0

    # --- Token cursor helpers ---
    @property
    def current(self) -> Token:
        return self.tokens[self.pos]

    @property
    def previous(self) -> Token:
        return self.tokens[self.pos - 1]

    def _advance(self) -> Token:
        token = self.tokens[self.pos]
        if token.kind is not TokenKind.EOF:
            self.pos += 1
        return token

    def _check(self, kind: TokenKind, text: Optional[str] = None) -> bool:
        return self.current.is_a(kind, text)

    def _check_punct(self, text: str) -> bool:
        return self._check(TokenKind.PUNCTUATION, text)

    def _check_operator(self, text: str) -> bool:
        return self._check(TokenKind.OPERATOR, text)

    def _check_keyword(self, text: str) -> bool:
        return self._check(TokenKind.KEYWORD, text)

    def _match(self, kind: TokenKind, text: str) -> bool:
        if self._check(kind, text):
            self._advance()
            return True
        return False

    def _expect(self, kind: TokenKind, text: Optional[str] = None) -> Token:
        if self._check(kind, text):
            return self._advance()
        expected = FRIENDLY_TOKEN_NAMES.get(text or kind.value, f"'{text}'" if text else kind.value.lower())
        raise self._error(expected)

    def _error(self, expected: str, token: Optional[Token] = None) -> ParseError:
        token = token or self.current
        return ParseError(
            ErrorCode.SYNTAX_UNEXPECTED_TOKEN,
            span=_token_span(token),
            script_name=self.script_name,
            expected=expected,
            found=token.describe(),
        )

    def _span_from(self, start: Token) -> Span:
        end = self.previous if self.pos > 0 else start
        return Span(s_line=start.line, s_col=start.column, e_line=end.end_line, e_col=end.end_column)

    def _nesting_error(self) -> ParseError:
        return ParseError(ErrorCode.SYNTAX_NESTING_TOO_DEEP, span=_token_span(self.current), script_name=self.script_name, limit=MAX_NESTING_DEPTH)

    def _descend(self, parse):
        """Runs one nested parse, rejecting input nested deeper than `MAX_NESTING_DEPTH`."""
        if self.nesting_depth >= MAX_NESTING_DEPTH:
            raise self._nesting_error()
        self.nesting_depth += 1
        node = parse()
        self.nesting_depth -= 1
        return node

    def _in_brackets(self, parse):
        self.bracket_depth += 1
        node = parse()
        self.bracket_depth -= 1
        return node

    def _check_line_continuation(self):
        """
        Outside brackets, a '-', '(' or '[' that opens a new line could either
        continue the expression above or start a new statement, so it is
        rejected.
        """
        token = self.current
        if self.bracket_depth == 0 and self.pos > 0 and token.line > self.previous.end_line:
            raise ParseError(ErrorCode.SYNTAX_AMBIGUOUS_LINE_BREAK, span=_token_span(token), script_name=self.script_name, token=token.text)

    # --- Top level ---
    def parse_program(self) -> Program:
        start = self.current
        functions: List[FunctionDefinition] = []
        seen: Dict[str, FunctionDefinition] = {}
        statements = []

        while not self._check(TokenKind.EOF):
            if self._check_keyword("func"):
                func_def = self.parse_function_definition()
                if func_def.name in seen:
                    raise ParseError(ErrorCode.DUPLICATE_FUNCTION, span=func_def.span, script_name=self.script_name, name=func_def.name)
                seen[func_def.name] = func_def
                functions.append(func_def)
            else:
                statements.append(self.parse_statement())

        body = Block(statements=statements, span=self._span_from(start))
        return Program(script_name=self.script_name, functions=functions, body=body, span=body.span)

    def parse_function_definition(self) -> FunctionDefinition:
        start = self._expect(TokenKind.KEYWORD, "func")
        name_token = self._expect(TokenKind.IDENTIFIER)
        self._expect(TokenKind.PUNCTUATION, "(")

        params: List[Parameter] = []
        names: Set[str] = set()
        if not self._check_punct(")"):
            while True:
                param_token = self._expect(TokenKind.IDENTIFIER)
                if param_token.text in names:
                    raise ParseError(
                        ErrorCode.DUPLICATE_PARAMETER,
                        span=_token_span(param_token),
                        script_name=self.script_name,
                        name=param_token.text,
                        func_name=name_token.text,
                    )
                names.add(param_token.text)
                params.append(Parameter(name=param_token.text, span=_token_span(param_token)))
                if not self._match(TokenKind.PUNCTUATION, ","):
                    break
        self._expect(TokenKind.PUNCTUATION, ")")

        outer_loop_depth = self.loop_depth
        self.loop_depth = 0
        body = self.parse_block()
        self.loop_depth = outer_loop_depth

        return FunctionDefinition(name=name_token.text, params=params, body=body, span=self._span_from(start))

    # --- Statements ---
    def parse_statement(self):
        token = self.current
        if token.kind is TokenKind.KEYWORD:
            if token.text == "func":
                self._advance()
                name = self.current.text if self._check(TokenKind.IDENTIFIER) else "<anonymous>"
                raise ParseError(ErrorCode.SYNTAX_NESTED_FUNCTION, span=_token_span(token), script_name=self.script_name, name=name)
            if token.text == "if":
                statement = self.parse_if()
            elif token.text == "while":
                statement = self.parse_while()
            elif token.text in ("break", "continue"):
                statement = self.parse_loop_control()
            elif token.text == "return":
                statement = self.parse_return()
            elif token.text == "global":
                statement = self.parse_global()
            else:
                statement = self.parse_expression_statement()
        elif self._check_punct("{"):
            statement = self.parse_block()
        else:
            statement = self.parse_expression_statement()

        self._match(TokenKind.PUNCTUATION, ";")
        return statement

    def parse_block(self) -> Block:
        return self._descend(self._parse_block_body)

    def _parse_block_body(self) -> Block:
        start = self._expect(TokenKind.PUNCTUATION, "{")
        statements = []
        while not self._check_punct("}"):
            if self._check(TokenKind.EOF):
                raise self._error(FRIENDLY_TOKEN_NAMES["}"])
            statements.append(self.parse_statement())
        self._expect(TokenKind.PUNCTUATION, "}")
        return Block(statements=statements, span=self._span_from(start))

    def parse_if(self) -> IfStatement:
        start = self._expect(TokenKind.KEYWORD, "if")
        condition = self.parse_expression()
        then_branch = self.parse_block()
        else_branch = None
        if self._match(TokenKind.KEYWORD, "else"):
            if self._check_keyword("if"):
                else_branch = self.parse_if()
            else:
                else_branch = self.parse_block()
        return IfStatement(condition=condition, then_branch=then_branch, else_branch=else_branch, span=self._span_from(start))

    def parse_while(self) -> WhileStatement:
        start = self._expect(TokenKind.KEYWORD, "while")
        condition = self.parse_expression()
        self.loop_depth += 1
        body = self.parse_block()
        self.loop_depth -= 1
        return WhileStatement(condition=condition, body=body, span=self._span_from(start))

    def parse_loop_control(self):
        token = self._advance()
        if self.loop_depth == 0:
            raise ParseError(ErrorCode.SYNTAX_BREAK_OUTSIDE_LOOP, span=_token_span(token), script_name=self.script_name, keyword=token.text)
        if token.text == "break":
            return BreakStatement(span=_token_span(token))
        return ContinueStatement(span=_token_span(token))

    def parse_return(self) -> ReturnStatement:
        start = self._expect(TokenKind.KEYWORD, "return")
        value = None
        if not (self._check(TokenKind.EOF) or (self.current.kind is TokenKind.PUNCTUATION and self.current.text in STATEMENT_TERMINATORS)):
            value = self.parse_expression()
        return ReturnStatement(value=value, span=self._span_from(start))

    def parse_global(self) -> ExpressionStatement:
        start = self._expect(TokenKind.KEYWORD, "global")
        if not self._check(TokenKind.IDENTIFIER):
            raise self._error(FRIENDLY_TOKEN_NAMES["IDENTIFIER"])
        expression = self.parse_expression()
        if not isinstance(expression, Assignment):
            raise self._error("an assignment after 'global'")
        expression = expression.model_copy(update={"is_global": True, "span": self._span_from(start)})
        return ExpressionStatement(expression=expression, span=expression.span)

    def parse_expression_statement(self) -> ExpressionStatement:
        start = self.current
        expression = self.parse_expression()
        return ExpressionStatement(expression=expression, span=self._span_from(start))

    # --- Expressions ---
    def parse_expression(self):
        return self._descend(self.parse_assignment)

    def parse_assignment(self):
        start = self.current
        target = self.parse_conditional()
        if not self._check_operator("="):
            return target

        equals = self._advance()
        value = self.parse_expression()

        indices = []
        node = target
        while isinstance(node, ElementAccess):
            indices.insert(0, node.index)
            node = node.target
        if not isinstance(node, VariableRef):
            raise ParseError(ErrorCode.SYNTAX_INVALID_ASSIGNMENT_TARGET, span=_token_span(equals), script_name=self.script_name)

        return Assignment(target=node.name, indices=indices, value=value, span=self._span_from(start))

    def parse_conditional(self):
        start = self.current
        condition = self.parse_binary(0)
        if not self._match(TokenKind.OPERATOR, "?"):
            return condition
        then_expr = self.parse_expression()
        self._expect(TokenKind.OPERATOR, ":")
        else_expr = self._descend(self.parse_conditional)
        return ConditionalExpression(condition=condition, then_expr=then_expr, else_expr=else_expr, span=self._span_from(start))

    def parse_binary(self, level: int):
        if level == len(BINARY_PRECEDENCE):
            return self.parse_unary()

        start = self.current
        left = self.parse_binary(level + 1)
        operators = BINARY_PRECEDENCE[level]
        while self.current.kind is TokenKind.OPERATOR and self.current.text in operators:
            if self.current.text in UNARY_OPERATORS:
                self._check_line_continuation()
            op = self._advance().text
            right = self.parse_binary(level + 1)
            left = BinaryOp(op=op, left=left, right=right, span=self._span_from(start))
        return left

    def parse_unary(self):
        if self.current.kind is TokenKind.OPERATOR and self.current.text in UNARY_OPERATORS:
            start = self._advance()
            operand = self._descend(self.parse_unary)
            return UnaryOp(op=start.text, operand=operand, span=self._span_from(start))
        return self.parse_postfix()

    def parse_postfix(self):
        start = self.current
        expression = self.parse_primary()
        while self._check_punct("["):
            self._check_line_continuation()
            self._advance()
            index = self._in_brackets(self.parse_expression)
            self._expect(TokenKind.PUNCTUATION, "]")
            expression = ElementAccess(target=expression, index=index, span=self._span_from(start))
        return expression

    def parse_primary(self):
        token = self.current

        if token.kind is TokenKind.NUMBER:
            self._advance()
            return NumberLiteral(value=token.value, span=_token_span(token))

        if token.kind is TokenKind.STRING:
            self._advance()
            return StringLiteral(value=token.value, span=_token_span(token))

        if token.is_a(TokenKind.KEYWORD, "true") or token.is_a(TokenKind.KEYWORD, "false"):
            self._advance()
            return BooleanLiteral(value=token.text == "true", span=_token_span(token))

        if token.kind is TokenKind.IDENTIFIER:
            self._advance()
            if self._check_punct("("):
                self._check_line_continuation()
                self._advance()
                args = self._in_brackets(lambda: self._parse_comma_separated(")"))
                return FunctionCall(function=token.text, args=args, span=self._span_from(token))
            return VariableRef(name=token.text, span=_token_span(token))

        if self._match(TokenKind.PUNCTUATION, "("):
            expression = self._in_brackets(self.parse_expression)
            self._expect(TokenKind.PUNCTUATION, ")")
            return expression

        if self._match(TokenKind.PUNCTUATION, "["):
            items = self._in_brackets(lambda: self._parse_comma_separated("]"))
            return ArrayLiteral(items=items, span=self._span_from(token))

        raise self._error(FRIENDLY_TOKEN_NAMES["expression"])

    def _parse_comma_separated(self, closing: str) -> list:
        """Parses `a, b, c` up to and including the closing bracket."""
        items = []
        if not self._check_punct(closing):
            while True:
                items.append(self.parse_expression())
                if not self._match(TokenKind.PUNCTUATION, ","):
                    break
        self._expect(TokenKind.PUNCTUATION, closing)
        return items


def parse_tokens(tokens: List[Token], script_name: str = "<inline>") -> Program:
    """Parses a token list into a `Program`. Raises `ParseError` on the first structural error."""
    check_brackets(tokens, script_name)
    parser = PlotScriptParser(tokens, script_name)
    try:
        return parser.parse_program()
    except RecursionError:
        # The caller's own stack can be deep enough to hit the limit before MAX_NESTING_DEPTH.
        raise parser._nesting_error()


def parse_plotscript(script_content: str, script_name: str = "<inline>") -> Program:
    """Parses the script content and transforms it into an AST."""
    try:
        tokens = tokenize(script_content)
    except LexError as e:
        e.locate(None, script_name)
        raise
    return parse_tokens(tokens, script_name)
