import pytest
from hypothesis import given, strategies as st

from lispdm.errors import LispDMEmptyListError, LispDMTypeError
from lispdm.types.lisp_list import List, ListKind, make_list
from lispdm.types.symbol import Symbol

atoms = st.one_of(
    st.integers(),
    st.booleans(),
    st.text(alphabet="abcxyz-?!", min_size=1, max_size=5).map(Symbol),
)
values = st.recursive(atoms, lambda children: st.lists(children, max_size=4).map(List.proper), max_leaves=12)


@given(st.lists(values))
def test_proper_list_kind_and_length(items):
    lst = List.proper(items)
    assert lst.kind is ListKind.PROPER
    assert len(lst) == len(items)
    assert sum(1 for _ in lst) == len(items)


@given(st.lists(values, min_size=1), atoms)
def test_dotted_list_counts_its_tail(items, tail):
    lst = List(items, tail)
    assert lst.kind is ListKind.DOTTED
    assert len(lst) == len(items) + 1
    assert lst.last() is tail


@given(st.lists(values, min_size=1))
def test_cons_of_car_and_cdr_rebuilds_proper_list(items):
    lst = List.proper(items)
    assert List.cons(lst.car(), lst.cdr()) == lst


@given(st.lists(values, min_size=1), atoms)
def test_cons_of_car_and_cdr_rebuilds_dotted_list(items, tail):
    lst = List(items, tail)
    assert List.cons(lst.car(), lst.cdr()) == lst


@given(st.lists(atoms), st.lists(atoms))
def test_list_tail_is_flattened(front, back):
    lst = List(front, List.proper(back))
    assert lst == List.proper(front + back)
    assert lst.is_proper()


def test_nested_dotted_tail_is_flattened():
    lst = List([1], List([2], 3))
    assert lst == List.dotted([1, 2, 3])
    assert lst.kind is ListKind.DOTTED
    assert lst.elements() == (1, 2)
    assert lst.tail == 3


def test_empty_list_tail_gives_proper_list():
    assert List([1, 2], List.empty()).kind is ListKind.PROPER


def test_tail_without_elements_is_rejected():
    with pytest.raises(ValueError):
        List([], 5)


def test_make_list_collapses_bare_tail():
    assert make_list([], 5) == 5
    assert make_list([], List.proper([1])) == List.proper([1])
    assert make_list([1], 2) == List.dotted([1, 2])
    assert List.new([], 5) == 5
    assert List.new([1], List.dotted([2, 3])) == List.dotted([1, 2, 3])


@pytest.mark.parametrize(
    "items, expected",
    [
        ([], "()"),
        ([1, 2], "(1 . 2)"),
        ([1, 2, 3], "(1 2 . 3)"),
        ([List.proper([1, 2])], "(1 2)"),
        ([1, List.proper([2, 3])], "(1 2 3)"),
    ],
)
def test_dotted_constructor(items, expected):
    assert str(List.dotted(items)) == expected


def test_dotted_constructor_rejects_single_atom():
    with pytest.raises(ValueError):
        List.dotted([5])


def test_cdr_of_pair_is_bare_tail():
    assert List.dotted([1, 2]).cdr() == 2
    assert List.dotted([1, 2, 3]).cdr() == List.dotted([2, 3])
    assert List.proper([1]).cdr() == List.empty()


@pytest.mark.parametrize("method", ["car", "cdr", "split_first", "pop_front", "last"])
def test_empty_list_access_errors(method):
    with pytest.raises(LispDMEmptyListError):
        getattr(List.empty(), method)()


def test_pop_front_only_moves_this_view():
    shared = List.proper([1, 2, 3])
    view = shared.cdr()
    assert shared.pop_front() == 1
    assert shared.pop_front() == 2
    assert shared == List.proper([3])
    assert view == List.proper([2, 3])


def test_pop_front_refuses_to_leave_bare_tail():
    pair = List.dotted([1, 2])
    with pytest.raises(LispDMTypeError, match="dotted pair"):
        pair.pop_front()
    assert pair == List.dotted([1, 2])
    longer = List.dotted([1, 2, 3])
    assert longer.pop_front() == 1
    assert longer == List.dotted([2, 3])


def test_equality_is_strict_about_types():
    assert List.proper([1]) != List.proper([True])
    assert List.proper([1]) != List.proper([1.0])
    assert List.proper([1, 2]) != List.dotted([1, 2])
    assert List.proper([Symbol("a")]) == List.proper([Symbol("a")])


def test_lists_are_unhashable_and_always_truthy():
    with pytest.raises(TypeError):
        hash(List.empty())
    assert List.empty()
    assert List.empty().is_empty()


def test_positional_access():
    lst = List.dotted([1, 2, 3])
    assert [lst.nth(i) for i in range(3)] == [1, 2, 3]
    assert list(lst.but_last()) == [1, 2]
    assert list(List.empty().but_last()) == []
    with pytest.raises(IndexError):
        lst.nth(3)
