import io

import pytest

from lispdm.errors import (
    LispDMArityError,
    LispDMEmptyListError,
    LispDMEvalError,
    LispDMTypeError,
)
from lispdm.interpreter import Interpreter
from lispdm.printer import to_write
from lispdm.types.lisp_list import List
from lispdm.types.symbol import Symbol
from lispdm.types.values import MString


@pytest.mark.parametrize(
    "program, expected",
    [
        ("(+)", "0"),
        ("(+ 1 2 3)", "6"),
        ("(+ 1 2.5)", "3.5"),
        ("(- 5)", "-5"),
        ("(- 10 1 2)", "7"),
        ("(*)", "1"),
        ("(* 2 3 4)", "24"),
        ("(/ 7 2)", "3"),
        ("(/ -7 2)", "-3"),
        ("(/ 1.0 4)", "0.25"),
        ("(/ 2)", "0"),
        ("(/ 100 5 2)", "10"),
        ("(quotient -7 2)", "-3"),
        ("(remainder -7 2)", "-1"),
        ("(modulo -7 2)", "1"),
        ("(abs -3)", "3"),
        ("(min 3 1 2)", "1"),
        ("(max 1 2.5)", "2.5"),
        ("(= 1 1 1)", "#t"),
        ("(= 1 1.0)", "#t"),
        ("(< 1 2 3)", "#t"),
        ("(< 1 3 2)", "#f"),
        ("(<= 1 1 2)", "#t"),
        ("(> 3 2 1)", "#t"),
        ("(>= 3 3 1)", "#t"),
    ],
)
def test_arithmetic(run, program, expected):
    assert run(program) == expected


@pytest.mark.parametrize(
    "program, error",
    [
        ("(+ 1 'a)", LispDMTypeError),
        ("(+ 1 #t)", LispDMTypeError),
        ("(/ 1 0)", LispDMEvalError),
        ("(/ 1.5 0)", LispDMEvalError),
        ("(quotient 1 0)", LispDMEvalError),
        ("(modulo 1.5 1)", LispDMTypeError),
        ("(< 1)", LispDMArityError),
        ("(-)", LispDMArityError),
    ],
)
def test_arithmetic_errors(interp, program, error):
    with pytest.raises(error):
        interp.eval(program)


@pytest.mark.parametrize(
    "program, expected",
    [
        ("(cons 1 '(2 3))", "(1 2 3)"),
        ("(cons 1 2)", "(1 . 2)"),
        ("(cons 1 '(2 . 3))", "(1 2 . 3)"),
        ("(cons 1 '())", "(1)"),
        ("(car '(1 2))", "1"),
        ("(cdr '(1 2))", "(2)"),
        ("(cdr '(1))", "()"),
        ("(cdr '(1 . 2))", "2"),
        ("(cdr '(1 2 . 3))", "(2 . 3)"),
        ("(list)", "()"),
        ("(list 1 (list 2))", "(1 (2))"),
        ("(length '(1 2 3))", "3"),
        ("(append '(1) '(2 3) '())", "(1 2 3)"),
        ("(append '(1) 2)", "(1 . 2)"),
        ("(append)", "()"),
        ("(append '() '())", "()"),
        ("(reverse '(1 2 3))", "(3 2 1)"),
        ("(list-tail '(1 2 3) 1)", "(2 3)"),
        ("(list-tail '(1 . 2) 1)", "2"),
        ("(list-ref '(1 2 3) 2)", "3"),
        ("(null? '())", "#t"),
        ("(null? '(1))", "#f"),
        ("(pair? '(1 . 2))", "#t"),
        ("(pair? '())", "#f"),
        ("(list? '(1 2))", "#t"),
        ("(list? '(1 . 2))", "#f"),
    ],
)
def test_list_procedures(run, program, expected):
    assert run(program) == expected


def test_car_errors(interp):
    with pytest.raises(LispDMEmptyListError) as e:
        interp.eval("(car '())")
    assert e.value.message == "expected non-empty list for car"
    with pytest.raises(LispDMTypeError) as e:
        interp.eval("(car 1)")
    assert e.value.message == "expected list for car, got integer"
    assert e.value.value == 1


@pytest.mark.parametrize("program", ["(length '(1 . 2))", "(list-ref '(1) 1)", "(list-tail '(1) 2)"])
def test_list_errors(interp, program):
    with pytest.raises(LispDMEvalError):
        interp.eval(program)


@pytest.mark.parametrize(
    "program, expected",
    [
        ("(equal? (list 1 2) (list 1 2))", "#t"),
        ("(eq? (list 1 2) (list 1 2))", "#f"),
        ("(define l (list 1)) (eq? l l)", "#t"),
        ('(eqv? "abc" "abc")', "#f"),
        ('(equal? "abc" "abc")', "#t"),
        ('(define s "a") (eq? s s)', "#t"),
        ("(eqv? 1 1)", "#t"),
        ("(eqv? 1 1.0)", "#f"),
        ("(eq? 'a 'a)", "#t"),
        ("(eq? '() '())", "#t"),
        ("(equal? 1 #t)", "#f"),
        ("(eqv? #\\a #\\a)", "#t"),
        ("(eq? car car)", "#t"),
        ("(equal? '(1 (2 \"x\")) (list 1 (list 2 \"x\")))", "#t"),
        ("(equal? '(1 2) '(1 . 2))", "#f"),
    ],
)
def test_equivalence(run, program, expected):
    assert run(program) == expected


@pytest.mark.parametrize(
    "program, expected",
    [
        ("(not #f)", "#t"),
        ("(not '())", "#f"),
        ("(boolean? #f)", "#t"),
        ("(boolean? 0)", "#f"),
        ("(number? 1.5)", "#t"),
        ("(number? #t)", "#f"),
        ("(integer? 2)", "#t"),
        ("(integer? 2.0)", "#f"),
        ("(float? 2.0)", "#t"),
        ("(symbol? 'a)", "#t"),
        ('(symbol? "a")', "#f"),
        ('(string? "a")', "#t"),
        ("(char? #\\a)", "#t"),
        ("(procedure? car)", "#t"),
        ("(procedure? (lambda () 1))", "#t"),
        ("(procedure? 'car)", "#f"),
        ("(port? (open-output-string))", "#t"),
    ],
)
def test_predicates(run, program, expected):
    assert run(program) == expected


def test_strings_are_shared_by_reference(run):
    program = """
    (define s (string-copy "abc"))
    (define t s)
    (string-set! t 0 #\\z)
    s
    """
    assert run(program) == '"zbc"'
    assert run('(define u (string-copy s)) (string-set! u 0 #\\q) (list s u)') == '("zbc" "qbc")'


def test_string_mutation_through_procedure_argument(run):
    program = """
    (define (blank! str) (string-fill! str #\\-))
    (define s (make-string 3 #\\a))
    (blank! s)
    s
    """
    assert run(program) == '"---"'


@pytest.mark.parametrize(
    "program, expected",
    [
        ('(string-length "hello")', "5"),
        ('(string-ref "hello" 1)', "#\\e"),
        ('(substring "hello" 1 3)', '"el"'),
        ('(substring "hello" 2)', '"llo"'),
        ('(string-copy "hello" 1 2)', '"e"'),
        ('(string-append "a" "b" "c")', '"abc"'),
        ("(string-append)", '""'),
        ("(make-string 2)", '"  "'),
        ("(string #\\a #\\b)", '"ab"'),
        ('(string-upcase "abc")', '"ABC"'),
        ('(string-downcase "ABC")', '"abc"'),
        ('(string=? "a" "a")', "#t"),
        ('(string<? "a" "b")', "#t"),
        ('(string>? "a" "b")', "#f"),
        ('(string<=? "a" "a")', "#t"),
        ('(string>=? "a" "b")', "#f"),
        ('(string-foldcase "ABC")', '"abc"'),
        ('(define s (make-string 5 #\\-)) (string-copy! s 1 "abc") s', '"-abc-"'),
        ('(define s (make-string 3 #\\-)) (string-copy! s 0 "abcd" 2) s', '"cd-"'),
        ('(define s (make-string 3 #\\-)) (string-copy! s 1 "abcd" 1 2) s', '"-b-"'),
        ("(define s (string #\\a #\\b #\\c #\\d)) (string-copy! s 1 s 0 3) s", '"aabc"'),
        ("(char-upcase #\\a)", "#\\A"),
        ("(char-downcase #\\A)", "#\\a"),
        ("(char-foldcase #\\A)", "#\\a"),
        ("(char-upper-case? #\\A)", "#t"),
        ("(char-lower-case? #\\A)", "#f"),
        ("(digit-value #\\7)", "7"),
        ("(digit-value #\\a)", "#f"),
        ("(char-alphabetic? #\\a)", "#t"),
        ("(char-numeric? #\\7)", "#t"),
        ("(char-whitespace? #\\space)", "#t"),
        ('(string->symbol "foo")', "foo"),
        ("(symbol->string 'foo)", '"foo"'),
        ("(number->string 42)", '"42"'),
        ("(number->string 2.5)", '"2.5"'),
        ("(number->string 255 16)", '"ff"'),
        ("(number->string -5 2)", '"-101"'),
        ('(string->number "42")', "42"),
        ('(string->number "1.5")', "1.5"),
        ('(string->number "abc")', "#f"),
        ('(string->number "ff" 16)', "255"),
        ('(string->list "ab")', "(#\\a #\\b)"),
        ("(list->string (list #\\a #\\b))", '"ab"'),
        ("(char->integer #\\A)", "65"),
        ("(integer->char 97)", "#\\a"),
    ],
)
def test_string_procedures(run, program, expected):
    assert run(program) == expected


@pytest.mark.parametrize(
    "program, error",
    [
        ('(string-ref "abc" 3)', LispDMEvalError),
        ('(substring "abc" 2 1)', LispDMEvalError),
        ('(string-length (quote a))', LispDMTypeError),
        ('(number->string 10 7)', LispDMEvalError),
        ("(integer->char -1)", LispDMEvalError),
        ('(list->string (list "a"))', LispDMTypeError),
        ('(string-copy! (make-string 2) 1 "abc")', LispDMEvalError),
        ('(string-copy! (make-string 2) 3 "a")', LispDMEvalError),
        ('(string-copy! (make-string 2) 0 "abc" 2 1)', LispDMEvalError),
        ("(digit-value 7)", LispDMTypeError),
    ],
)
def test_string_errors(interp, program, error):
    with pytest.raises(error):
        interp.eval(program)


@pytest.mark.parametrize(
    "program, expected",
    [
        ("(eval '(+ 1 2))", "3"),
        ("(eval (list 'define 'z 5)) z", "5"),
        ("(apply + 1 2 '(3 4))", "10"),
        ("(apply + '())", "0"),
        ("(apply (lambda (a . r) r) '(1 2 3))", "(2 3)"),
        ("(apply list 1 '(2))", "(1 2)"),
    ],
)
def test_eval_and_apply(run, program, expected):
    assert run(program) == expected


def test_eval_uses_callers_scope(run):
    assert run("(define (f x) (eval 'x)) (f 9)") == "9"


@pytest.mark.parametrize("program", ["(apply 1 '())", "(apply + 1)", "(apply + '(1 . 2))"])
def test_apply_errors(interp, program):
    with pytest.raises(LispDMTypeError):
        interp.eval(program)


def test_display_and_write(interp, capsys):
    interp.eval('(display "hi") (newline) (write "hi") (display #\\a) (write #\\a) (display \'(1 "s"))')
    assert capsys.readouterr().out == 'hi\n"hi"a#\\a(1 s)'


def test_output_to_current_port(interp, capsys):
    interp.eval('(display "x" (current-output-port))')
    assert capsys.readouterr().out == "x"


def test_string_output_port(interp):
    program = """
    (define p (open-output-string))
    (write 'x p)
    (display " " p)
    (write "s" p)
    (newline p)
    (get-output-string p)
    """
    assert interp.eval(program) == MString('x "s"\n')


def test_string_input_port(run):
    program = """
    (define p (open-input-string "one\\ntwo"))
    (list (read-line p) (read-line p) (read-line p))
    """
    assert run(program) == '("one" "two" #f)'


def test_read_datum(run):
    assert run('(read (open-input-string "(1 2) 3"))') == "(1 2)"
    assert run("(read (open-input-string \"'a\"))") == "'a"


def test_read_line_from_stdin(interp, monkeypatch):
    monkeypatch.setattr("sys.stdin", io.StringIO("hello\n"))
    assert interp.eval("(read-line)") == MString("hello")
    assert interp.eval("(read-line)") is False


def test_port_direction_is_checked(interp):
    with pytest.raises(LispDMTypeError):
        interp.eval('(display 1 (open-input-string "x"))')
    with pytest.raises(LispDMTypeError):
        interp.eval("(read-line (open-output-string))")
    assert interp.eval("(list (input-port? (current-input-port)) (output-port? (current-input-port)))") == \
        List.proper([True, False])


@pytest.mark.parametrize("program, code", [("(exit)", 0), ("(exit 3)", 3), ("(exit #t)", 0), ("(exit #f)", 1)])
def test_exit(interp, program, code):
    with pytest.raises(SystemExit) as e:
        interp.eval(program)
    assert e.value.code == code


@pytest.fixture
def files(tmp_path):
    """Interpreter whose working directory is a fresh temporary directory."""
    return Interpreter(prelude=None, cwd=tmp_path)


def test_file_ports_round_trip(files, tmp_path):
    files.eval("""
    (define out (open-output-file "data.txt"))
    (write-string "hello" out)
    (write-char #\\! out)
    (newline out)
    (write '(1 "two") out)
    (close-output-port out)
    """)
    assert (tmp_path / "data.txt").read_text(encoding="utf-8") == 'hello!\n(1 "two")'
    program = """
    (define in (open-input-file "data.txt"))
    (define c (read-char in))
    (define line (read-line in))
    (define rest (read-string in))
    (define at-end (read-char in))
    (close-input-port in)
    (list c line rest at-end)
    """
    assert to_write(files.eval(program)) == '(#\\h "ello!" "(1 \\"two\\")" #f)'


def test_closed_port_refuses_io(files):
    files.eval('(define out (open-output-file "x.txt")) (close-output-port out) (close-output-port out)')
    with pytest.raises(LispDMEvalError, match="closed"):
        files.eval('(display "late" out)')


def test_open_missing_file(files):
    with pytest.raises(LispDMEvalError, match="could not open file"):
        files.eval('(open-input-file "missing.txt")')


def test_close_checks_port_direction(interp):
    with pytest.raises(LispDMTypeError):
        interp.eval("(close-input-port (open-output-string))")
    with pytest.raises(LispDMTypeError):
        interp.eval('(close-output-port (open-input-string "x"))')


def test_call_with_output_file_closes_port(files, tmp_path):
    files.eval("""
    (define saved #f)
    (call-with-output-file "out.txt" (lambda (p) (set! saved p) (display "hi" p)))
    """)
    assert (tmp_path / "out.txt").read_text(encoding="utf-8") == "hi"
    with pytest.raises(LispDMEvalError, match="closed"):
        files.eval('(display "more" saved)')


def test_call_with_input_file_returns_procedure_value(files, tmp_path):
    (tmp_path / "in.txt").write_text("abc\ndef\n", encoding="utf-8")
    assert files.eval('(call-with-input-file "in.txt" read-line)') == MString("abc")


def test_call_with_input_file_closes_port_on_error(files, tmp_path):
    (tmp_path / "in.txt").write_text("abc", encoding="utf-8")
    files.eval("(define saved #f)")
    with pytest.raises(LispDMEmptyListError):
        files.eval("(call-with-input-file \"in.txt\" (lambda (p) (set! saved p) (car '())))")
    with pytest.raises(LispDMEvalError, match="closed"):
        files.eval("(read-char saved)")


def test_with_output_to_file(files, tmp_path, capsys):
    result = files.eval("(with-output-to-file \"w.txt\" (lambda () (display \"x\") (write-string \"yz\") 'done))")
    assert result == Symbol("done")
    assert (tmp_path / "w.txt").read_text(encoding="utf-8") == "xyz"
    files.eval('(display "after")')
    assert capsys.readouterr().out == "after"


def test_with_input_from_file(files, tmp_path):
    (tmp_path / "r.txt").write_text("line one\nline two\n", encoding="utf-8")
    program = '(with-input-from-file "r.txt" (lambda () (list (read-line) (read-char))))'
    assert to_write(files.eval(program)) == '("line one" #\\l)'


@pytest.mark.parametrize(
    "program, expected",
    [
        ('(read-string 3 (open-input-string "abcdef"))', '"abc"'),
        ('(let ((p (open-input-string "ab"))) (list (read-string 5 p) (read-string 5 p)))', '("ab" #f)'),
        ('(read-string (open-input-string "all of it"))', '"all of it"'),
        ('(let ((p (open-input-string "xy"))) (list (read-char p) (read-char p) (read-char p)))', "(#\\x #\\y #f)"),
        ('(let ((p (open-output-string))) (write-string "hello" p 1 3) (get-output-string p))', '"el"'),
        ('(let ((p (open-output-string))) (write-string "hello" p 2) (get-output-string p))', '"llo"'),
        ("(let ((p (open-output-string))) (write-char #\\z p) (get-output-string p))", '"z"'),
    ],
)
def test_char_and_string_port_io(run, program, expected):
    assert run(program) == expected


@pytest.mark.parametrize(
    "program, error",
    [
        ('(write-string "abc" (open-output-string) 2 1)', LispDMEvalError),
        ('(write-char "a")', LispDMTypeError),
        ('(read-string -1 (open-input-string "a"))', LispDMTypeError),
        ("(read-char (open-output-string))", LispDMTypeError),
    ],
)
def test_char_and_string_port_io_errors(interp, program, error):
    with pytest.raises(error):
        interp.eval(program)
