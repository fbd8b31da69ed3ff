import threading
from decimal import Decimal

import pytest

from ..core.errors import AccountNotFoundError, LockTimeoutError
from ..models import Account, DepositIntent
from ..services import AccountStore, TransferEngine


@pytest.fixture
def store() -> AccountStore:
    return AccountStore()


def test_put_get_remove(store: AccountStore) -> None:
    account = Account("ACC001", "John Doe", Decimal("10"))

    assert store.put(account) is account
    assert store.get("ACC001") == account
    assert store.count() == 1
    assert not store.is_empty()

    store.remove("ACC001")
    store.remove("ACC001")
    assert store.get("ACC001") is None
    assert store.is_empty()


def test_put_replaces_existing_value(store: AccountStore) -> None:
    store.put(Account("ACC001", "John Doe", Decimal("10")))
    store.put(Account("ACC001", "John Doe", Decimal("25")))

    assert store.get("ACC001").balance == Decimal("25")
    assert store.count() == 1


def test_list_returns_snapshot(store: AccountStore) -> None:
    store.put(Account("ACC001", "John Doe", Decimal("10")))

    snapshot = store.list()
    snapshot["ACC999"] = Account("ACC999", "Mallory", Decimal("1000000"))
    del snapshot["ACC001"]

    assert set(store.list()) == {"ACC001"}

    before = store.list()
    store.put(Account("ACC002", "Jane Smith", Decimal("5")))
    store.put(Account("ACC001", "John Doe", Decimal("99")))

    assert set(before) == {"ACC001"}
    assert before["ACC001"].balance == Decimal("10")


def test_clear(store: AccountStore) -> None:
    store.put(Account("ACC001", "John Doe", Decimal("10")))
    store.clear()
    assert store.count() == 0


def test_next_id_is_zero_padded_and_sequential(store: AccountStore) -> None:
    assert [store.next_id() for _ in range(3)] == ["ACC001", "ACC002", "ACC003"]


def test_next_id_never_reuses_after_deletion(store: AccountStore) -> None:
    issued = []
    for _ in range(3):
        account_id = store.next_id()
        issued.append(account_id)
        store.put(Account.zero(account_id, "Holder"))

    store.remove("ACC002")
    store.remove("ACC003")
    new_id = store.next_id()

    assert new_id == "ACC004"
    assert new_id not in issued


def test_next_id_honours_prefix_and_width() -> None:
    store = AccountStore(id_prefix="BNK", id_width=5)
    assert store.next_id() == "BNK00001"


def test_next_id_is_unique_across_threads(store: AccountStore) -> None:
    issued = []
    lock = threading.Lock()

    def issue() -> None:
        for _ in range(50):
            account_id = store.next_id()
            with lock:
                issued.append(account_id)

    threads = [threading.Thread(target=issue) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len(issued) == 400
    assert len(set(issued)) == 400


def test_locked_is_reentrant_for_the_holder(store: AccountStore) -> None:
    account = Account("ACC001", "John Doe", Decimal("10"))
    with store.locked("ACC001", "ACC002"):
        store.put(account)
        with store.locked("ACC001"):
            store.remove("ACC001")
    assert store.get("ACC001") is None


def test_locked_times_out_when_another_thread_holds_the_lock() -> None:
    store = AccountStore(lock_timeout=0.05)
    acquired = threading.Event()
    release = threading.Event()

    def hold() -> None:
        with store.locked("ACC001"):
            acquired.set()
            release.wait(5)

    holder = threading.Thread(target=hold)
    holder.start()
    acquired.wait(5)
    try:
        with pytest.raises(LockTimeoutError) as excinfo:
            with store.locked("ACC001"):
                pass
        assert excinfo.value.account_id == "ACC001"
    finally:
        release.set()
        holder.join()

    with store.locked("ACC001"):
        pass


def test_account_locks_are_released_after_use() -> None:
    store = AccountStore(lock_timeout=0.05)
    engine = TransferEngine(store)

    for index in range(20):
        with pytest.raises(AccountNotFoundError):
            engine.execute(DepositIntent(destination_id=f"GHOST{index}", amount=Decimal("1")))
    assert store._account_locks == {}

    store.put(Account("ACC001", "John Doe", Decimal("10")))
    store.put(Account("ACC002", "Jane Smith", Decimal("10")))
    with store.locked("ACC001", "ACC002"):
        with store.locked("ACC001"):
            assert set(store._account_locks) == {"ACC001", "ACC002"}
        assert store._account_locks["ACC001"].users == 1
    assert store._account_locks == {}

    store.remove("ACC001")
    store.clear()
    assert store._account_locks == {}


def test_timed_out_waiters_release_their_lock_entry() -> None:
    store = AccountStore(lock_timeout=0.05)
    acquired = threading.Event()
    release = threading.Event()

    def hold() -> None:
        with store.locked("ACC001"):
            acquired.set()
            release.wait(5)

    holder = threading.Thread(target=hold)
    holder.start()
    acquired.wait(5)
    try:
        with pytest.raises(LockTimeoutError):
            with store.locked("ACC001"):
                pass
        assert store._account_locks["ACC001"].users == 1
    finally:
        release.set()
        holder.join()

    assert store._account_locks == {}


def test_clear_waits_for_in_flight_writes() -> None:
    store = AccountStore()
    store.put(Account("ACC001", "John Doe", Decimal("10")))
    inside = threading.Event()
    proceed = threading.Event()

    def write_under_lock() -> None:
        with store.locked("ACC001"):
            inside.set()
            proceed.wait(5)
            store.put(Account("ACC001", "John Doe", Decimal("20")))

    writer = threading.Thread(target=write_under_lock)
    writer.start()
    inside.wait(5)

    clearer = threading.Thread(target=store.clear)
    clearer.start()
    clearer.join(0.1)
    assert clearer.is_alive()

    proceed.set()
    writer.join(5)
    clearer.join(5)

    assert not clearer.is_alive()
    assert store.is_empty()
