from concurrent.futures import ThreadPoolExecutor
from threading import Barrier

import pytest

from pastebin.clock import ManualClock
from pastebin.database import InMemoryStore
from pastebin.errors import NotFound, StorageError, ValidationError
from pastebin.policy import MAX_EXPIRES_AT_MS
from pastebin.store import PasteStore, generate_paste_id


def test_hello_last_view_scenario(store: PasteStore) -> None:
    paste_id = store.create("hello", max_views=1)

    fetched = store.fetch(paste_id)
    assert fetched.content == "hello"
    assert fetched.remaining_views == 0
    assert fetched.expires_at is None

    with pytest.raises(NotFound):
        store.fetch(paste_id)


def test_ttl_scenario(store: PasteStore, clock: ManualClock) -> None:
    clock.set(1_000)
    paste_id = store.create("bye", ttl_seconds=10)

    clock.set(5_000)
    fetched = store.fetch(paste_id)
    assert fetched.content == "bye"
    assert fetched.expires_at == 11_000
    assert fetched.remaining_views is None

    clock.set(10_999)
    store.fetch(paste_id)

    clock.set(11_000)
    with pytest.raises(NotFound):
        store.fetch(paste_id)


def test_unlimited_paste_counts_every_view(store: PasteStore, storage: InMemoryStore, clock: ManualClock) -> None:
    paste_id = store.create("forever")

    for expected_views in range(1, 51):
        clock.advance(seconds=86_400)
        assert store.fetch(paste_id).content == "forever"
        assert storage.get(paste_id).views == expected_views


def test_view_limit_counts_down_then_denies(store: PasteStore, storage: InMemoryStore) -> None:
    paste_id = store.create("three", max_views=3)

    assert [store.fetch(paste_id).remaining_views for _ in range(3)] == [2, 1, 0]

    for _ in range(3):
        with pytest.raises(NotFound):
            store.fetch(paste_id)

    # denied fetches do not count as views
    assert storage.get(paste_id).views == 3


def test_expired_and_unknown_ids_look_the_same(store: PasteStore, clock: ManualClock) -> None:
    expired_id = store.create("gone", ttl_seconds=1)
    exhausted_id = store.create("used", max_views=1)
    store.fetch(exhausted_id)
    clock.advance(seconds=1)

    messages = []
    for paste_id in (expired_id, exhausted_id, "never-existed"):
        with pytest.raises(NotFound) as exc_info:
            store.fetch(paste_id)
        messages.append(str(exc_info.value))

    assert len(set(messages)) == 1


def test_content_stored_verbatim(store: PasteStore) -> None:
    content = "  <b>tabs\tand & newlines</b>\n\n  ünïcödé  "
    paste_id = store.create(content)
    assert store.fetch(paste_id).content == content


def test_created_at_comes_from_clock(store: PasteStore, storage: InMemoryStore, clock: ManualClock) -> None:
    clock.set(42_000)
    paste_id = store.create("x", ttl_seconds=5)

    row = storage.get(paste_id)
    assert row.created_at == 42_000
    assert row.views == 0
    assert row.ttl_seconds == 5
    assert row.max_views is None


@pytest.mark.parametrize("content", ["", "   ", "\n\t ", None, 123])
def test_create_rejects_bad_content(store: PasteStore, content) -> None:
    with pytest.raises(ValidationError):
        store.create(content)


@pytest.mark.parametrize("value", [0, -1, 1.5, "10", True])
def test_create_rejects_bad_ttl(store: PasteStore, value) -> None:
    with pytest.raises(ValidationError, match="ttl_seconds"):
        store.create("x", ttl_seconds=value)


@pytest.mark.parametrize("value", [0, -3, 2.5, "3", False])
def test_create_rejects_bad_max_views(store: PasteStore, value) -> None:
    with pytest.raises(ValidationError, match="max_views"):
        store.create("x", max_views=value)


def test_failed_validation_persists_nothing(store: PasteStore, storage: InMemoryStore) -> None:
    with pytest.raises(ValidationError):
        store.create("x", ttl_seconds=0)
    assert storage.store == {}


def test_id_collision_is_storage_error(storage: InMemoryStore, clock: ManualClock) -> None:
    store = PasteStore(storage, clock=clock, id_generator=lambda: "same-id")
    store.create("first")

    with pytest.raises(StorageError):
        store.create("second")

    assert store.fetch("same-id").content == "first"


def test_exhausted_id_generator_is_storage_error(storage: InMemoryStore) -> None:
    ids = iter(["only-one"])
    store = PasteStore(storage, id_generator=lambda: next(ids))
    store.create("first")

    with pytest.raises(StorageError):
        store.create("second")


def test_generated_ids_are_url_safe_and_unique() -> None:
    ids = {generate_paste_id() for _ in range(1_000)}
    assert len(ids) == 1_000
    for paste_id in ids:
        assert len(paste_id) == 8
        assert all(c.isalnum() or c in "-_" for c in paste_id)


def test_concurrent_fetches_never_exceed_max_views(store: PasteStore, storage: InMemoryStore) -> None:
    paste_id = store.create("race", max_views=5)
    workers = 32
    barrier = Barrier(workers)

    def attempt() -> bool:
        barrier.wait()
        try:
            store.fetch(paste_id)
            return True
        except NotFound:
            return False

    with ThreadPoolExecutor(max_workers=workers) as pool:
        results = list(pool.map(lambda _: attempt(), range(workers)))

    assert sum(results) == 5
    assert storage.get(paste_id).views == 5


def test_fetches_on_different_pastes_are_independent(store: PasteStore) -> None:
    first = store.create("a", max_views=1)
    second = store.create("b", max_views=1)

    store.fetch(first)
    assert store.fetch(second).content == "b"


def test_is_healthy_reports_storage_failure(store: PasteStore, storage: InMemoryStore, monkeypatch: pytest.MonkeyPatch) -> None:
    assert store.is_healthy() is True

    def broken_ping() -> bool:
        raise StorageError("down")

    monkeypatch.setattr(storage, "ping", broken_ping)
    assert store.is_healthy() is False


def test_ttl_reaching_last_representable_instant_is_accepted(store: PasteStore, storage: InMemoryStore, clock: ManualClock) -> None:
    largest_ttl = (MAX_EXPIRES_AT_MS - clock.now_ms()) // 1000
    paste_id = store.create("far future", ttl_seconds=largest_ttl, max_views=2)

    fetched = store.fetch(paste_id)
    assert fetched.expires_at == clock.now_ms() + largest_ttl * 1000
    assert fetched.expires_at <= MAX_EXPIRES_AT_MS
    assert storage.get(paste_id).views == 1


def test_ttl_past_last_representable_instant_is_rejected(store: PasteStore, storage: InMemoryStore, clock: ManualClock) -> None:
    too_long = (MAX_EXPIRES_AT_MS - clock.now_ms()) // 1000 + 1

    with pytest.raises(ValidationError, match="ttl_seconds"):
        store.create("x", ttl_seconds=too_long)
    with pytest.raises(ValidationError, match="ttl_seconds"):
        store.create("x", ttl_seconds=10**12)

    assert storage.store == {}
