import random

import pytest

from runkit.context import Context, Pool, background, with_cancel


def fresh():
    return with_cancel(background())


def cancelled():
    ctx = fresh()
    ctx.cancel()
    return ctx


def test_pool_without_contexts_is_done():
    assert Pool().wait(1.0) is True


@pytest.mark.parametrize("add_after", [False, True])
def test_pool_with_cancelled_context_is_done(add_after):
    pool = Pool(cancelled())
    if add_after:
        pool.add(background())
    assert pool.wait(1.0) is True
    assert pool.size() == 0


def test_pool_done_only_after_all_contexts_cancelled():
    contexts = [fresh() for _ in range(50)]
    pool = Pool(contexts[0])
    for ctx in contexts[1:]:
        pool.add(ctx)
    assert pool.size() == 50

    random.shuffle(contexts)
    for ctx in contexts:
        assert pool.done() is False
        ctx.cancel()

    assert pool.wait(1.0) is True


def test_pool_size_does_not_grow_after_contexts_cancelled():
    members = [fresh(), fresh()]
    pool = Pool(*members)
    assert pool.size() == 2

    for ctx in members:
        ctx.cancel()
    assert pool.wait(1.0) is True
    pool.add(background())
    assert pool.size() == 2


def test_pool_size_does_not_grow_after_pool_cancelled():
    pool = Pool(background(), background())
    assert pool.size() == 2
    pool.cancel()
    pool.add(background())
    assert pool.size() == 0
    assert pool.wait(1.0) is True


def test_pool_not_done_while_member_alive():
    member = fresh()
    pool = Pool(member)
    assert pool.wait(0.01) is False
    member.cancel()
    assert pool.wait(1.0) is True


@pytest.mark.parametrize(
    "cancel_parent, child_done, parent_done",
    [(True, True, True), (False, True, False)],
)
def test_cancellation_propagates_downwards_only(cancel_parent, child_done, parent_done):
    parent = fresh()
    child = with_cancel(parent)
    (parent if cancel_parent else child).cancel()
    assert child.done() is child_done
    assert parent.done() is parent_done


def test_background_is_never_done():
    root = background()
    root.cancel()
    assert root.done() is False
    assert root.wait(0.01) is False


def test_context_manager_cancels_on_exit():
    with Context() as ctx:
        assert ctx.done() is False
    assert ctx.done() is True


def test_child_of_cancelled_parent_is_done_immediately():
    assert with_cancel(cancelled()).done() is True