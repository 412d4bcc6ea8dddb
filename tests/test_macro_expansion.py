import logging

import pytest

from lispdm.errors import LispDMSyntaxError, LispDMUnboundSymbol
from lispdm.types.symbol import Symbol
from lispdm.types.values import Void


def test_define_macro_returns_void(interp):
    assert interp.eval("(define-macro (ignore . xs) #t)") is Void


def test_macro_operands_are_unevaluated(run):
    program = """
    (define-macro (my-if c a b) `(cond (,c ,a) (else ,b)))
    (list (my-if #t 1 2) (my-if #f (car '()) 2))
    """
    assert run(program) == "(1 2)"


def test_macro_receives_raw_forms(run):
    assert run("(define-macro (q x) (list 'quote x)) (q (a b))") == "(a b)"


def test_macro_with_gensym(run):
    program = """
    (define-macro (swap! a b)
      (let ((tmp (gensym)))
        `(let ((,tmp ,a)) (set! ,a ,b) (set! ,b ,tmp))))
    (define x 1)
    (define y 2)
    (swap! x y)
    (list x y)
    """
    assert run(program) == "(2 1)"


def test_variadic_macro(run):
    assert run("(define-macro (my-list . xs) `(list ,@xs)) (my-list 1 (+ 1 1))") == "(1 2)"


def test_macro_shadows_value_binding_at_call_position(run):
    program = """
    (define (m) 'value)
    (define-macro (m) ''macro)
    (list (m) (procedure? m))
    """
    assert run(program) == "(macro #t)"


def test_macro_scoped_to_defining_environment(interp):
    interp.eval("(define (f) (define-macro (inner) 1) (inner))")
    assert interp.eval("(f)") == 1
    with pytest.raises(LispDMUnboundSymbol):
        interp.eval("(inner)")


def test_macro_reexpanded_on_every_call(run):
    program = """
    (define-macro (inc! v) `(set! ,v (+ ,v 1)))
    (define n 0)
    (let loop ((i 0))
      (if (< i 5) (begin (inc! n) (loop (+ i 1)))))
    n
    """
    assert run(program) == "5"


def test_macro_expanding_to_macro(run):
    program = """
    (define-macro (twice x) `(begin ,x ,x))
    (define-macro (bump v) `(set! ,v (* ,v 2)))
    (define n 1)
    (twice (bump n))
    n
    """
    assert run(program) == "4"


@pytest.mark.parametrize("program", ["(define-macro m 1)", "(define-macro (1 x) x)", "(define-macro () 1)"])
def test_malformed_define_macro(interp, program):
    with pytest.raises(LispDMSyntaxError):
        interp.eval(program)


def test_gensym(interp):
    assert interp.eval("(eq? (gensym) (gensym))") is False
    assert interp.eval("(symbol? (gensym))") is True
    assert interp.eval("(gensym 'tmp)").id.startswith("tmp-")
    assert interp.eval('(gensym "s")').id.startswith("s-")


@pytest.mark.parametrize(
    "program, expected",
    [
        ("(when #t 1 2)", 2),
        ("(when #f 1)", Void),
        ("(unless #f 'x)", Symbol("x")),
        ("(unless #t 'x)", Void),
    ],
)
def test_prelude_when_unless(lisp, program, expected):
    result = lisp.eval(program)
    assert result is expected or result == expected


def test_expansion_is_logged(interp, caplog):
    caplog.set_level(logging.DEBUG, logger="lispdm.evaluation.evaluator")
    interp.eval("(define-macro (one) 1) (one)")
    assert "expanded macro one into 1" in caplog.text
