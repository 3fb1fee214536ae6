import pytest

from crawler.frontier import Frontier, UrlStatus


def test_enqueue_keeps_fifo_order_and_duplicates():
    f = Frontier()
    for u in ("a", "b", "a"):
        f.enqueue(u)
    assert f.pending() == ["a", "b", "a"]
    assert len(f) == 3


def test_accept_next_returns_unvisited_url():
    f = Frontier()
    f.enqueue("a")
    assert f.accept_next() == "a"
    # aceptar no es visitar: eso lo hace el scheduler al despachar
    assert not f.is_visited("a")


def test_stale_duplicate_is_skipped_without_looking_further():
    f = Frontier()
    f.enqueue("a")
    f.enqueue("a")
    f.enqueue("b")
    f.mark_visited(f.accept_next())

    assert f.accept_next() is None
    assert f.pending() == ["b"]


def test_accept_next_on_empty_queue_raises():
    with pytest.raises(IndexError):
        Frontier().accept_next()


def test_mark_visited_only_once():
    f = Frontier()
    f.mark_visited("a")
    with pytest.raises(ValueError):
        f.mark_visited("a")
    assert f.visited == frozenset({"a"})


def test_retry_entry_bypasses_the_visited_gate_once():
    f = Frontier()
    f.mark_visited("a")
    f.enqueue("a")  # descubierto de nuevo en otra pagina
    f.requeue_for_retry("a")

    # la primera entrada que aparezca consume el permiso de reintento
    assert f.accept_next() == "a"
    f.resume_retry("a")
    assert f.status("a") is UrlStatus.IN_FLIGHT
    assert f.accept_next() is None
    assert not f


def test_requeue_requires_a_dispatched_url():
    with pytest.raises(ValueError):
        Frontier().requeue_for_retry("nunca")


def test_resume_retry_requires_pending_retry():
    f = Frontier()
    f.mark_visited("a")
    with pytest.raises(ValueError):
        f.resume_retry("a")


def test_done_urls_are_not_dispatched_again():
    f = Frontier()
    f.mark_visited("a")
    f.mark_done("a")
    f.enqueue("a")
    assert f.accept_next() is None
    assert f.status("a") is UrlStatus.DONE
