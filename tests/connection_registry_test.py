import threading

from fakes import RecordingConnection
from realtime.connection_registry import ConnectionRegistry


def test_lookup_of_unknown_user_is_absent(registry):
    assert registry.lookup("nobody") is None


def test_register_and_lookup(registry):
    conn = RecordingConnection()
    registry.register("u1", conn)

    assert registry.lookup("u1") is conn
    assert len(registry) == 1


def test_latest_join_wins(registry):
    old, new = RecordingConnection(), RecordingConnection()
    registry.register("u1", old)
    registry.register("u1", new)

    assert registry.lookup("u1") is new
    assert len(registry) == 1


def test_stale_connection_does_not_evict_replacement(registry):
    old, new = RecordingConnection(), RecordingConnection()
    registry.register("u1", old)
    registry.register("u1", new)

    assert registry.unregister("u1", old) is False
    assert registry.lookup("u1") is new
    assert registry.unregister("u1", new) is True
    assert registry.lookup("u1") is None


def test_unregister_without_handle(registry):
    registry.register("u1", RecordingConnection())

    assert registry.unregister("u1") is True
    assert registry.unregister("u1") is False


def test_concurrent_access_keeps_map_consistent():
    registry = ConnectionRegistry()
    errors = []

    def worker(index: int) -> None:
        try:
            user_id = f"user-{index}"
            for _ in range(300):
                conn = RecordingConnection()
                registry.register(user_id, conn)
                assert registry.lookup(user_id) is conn
                registry.unregister(user_id, conn)
            registry.register(user_id, RecordingConnection())
        except Exception as e:  # collected and asserted below
            errors.append(e)

    threads = [threading.Thread(target=worker, args=(i,)) for i in range(16)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert errors == []
    assert len(registry) == 16
    assert all(registry.lookup(f"user-{i}") is not None for i in range(16))


def test_closing_an_old_session_keeps_the_new_one(registry):
    import asyncio

    from models.auth_model import AuthenticatedIdentity
    from realtime.delivery_gateway import LiveDeliveryGateway
    from realtime.live_session import LiveSession

    gateway = LiveDeliveryGateway(registry)
    identity = AuthenticatedIdentity(user_id="u1")
    old = LiveSession(identity, RecordingConnection(), registry, gateway)
    new = LiveSession(identity, RecordingConnection(), registry, gateway)

    asyncio.run(old.handle_event("user:join", "u1"))
    asyncio.run(new.handle_event("user:join", {"userId": "u1"}))
    old.close()

    assert registry.lookup("u1") is new.connection
