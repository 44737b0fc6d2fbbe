import pytest
from fastapi import HTTPException

from teamup.api import connections as connections_api
from teamup.crud import connection as connection_crud
from teamup.schemas.connection import ConnectionRequest


def test_mutuality_requires_both_directions(db_session, make_user, connect):
    a = make_user("A")
    b = make_user("B")

    connect(a, b)
    assert connection_crud.is_requested(db_session, a.id, b.id) is True
    assert connection_crud.is_requested(db_session, b.id, a.id) is False
    assert connection_crud.is_mutual(db_session, a.id, b.id) is False
    assert connection_crud.connection_status(db_session, a.id, b.id) == "SENT"
    assert connection_crud.connection_status(db_session, b.id, a.id) == "RECEIVED"

    connect(b, a)
    assert connection_crud.is_mutual(db_session, a.id, b.id) is True
    assert connection_crud.connection_status(db_session, a.id, b.id) == "CONNECTED"


def test_connection_pairs_cover_both_directions(db_session, make_user, connect):
    me = make_user("Me")
    out = make_user("Out")
    inc = make_user("In")
    both = make_user("Both")
    make_user("Nobody")

    connect(me, out)
    connect(inc, me)
    connect(me, both)
    connect(both, me)

    assert connection_crud.get_connection_pairs(db_session, me.id) == sorted([out.id, inc.id, both.id])
    assert connection_crud.get_mutual_ids(db_session, me.id) == [both.id]
    assert connection_crud.get_pending_request_ids(db_session, me.id) == [inc.id]


def test_mutual_counts(db_session, make_user, connect):
    a, b, c = make_user("A"), make_user("B"), make_user("C")
    for x, y in [(a, b), (b, a), (a, c), (c, a), (b, c)]:
        connect(x, y)

    counts = connection_crud.get_mutual_counts(db_session, [a.id, b.id, c.id])

    assert counts == {a.id: 2, b.id: 1, c.id: 1}


def test_create_and_accept_flow(db_session, make_user):
    alice = make_user("Alice")
    bob = make_user("Bob")

    sent = connections_api.create_connection(
        ConnectionRequest(target_user_id=bob.id), current_user=alice, db=db_session
    )
    assert sent == {"message": "Connection request sent", "is_mutual": False}

    again = connections_api.create_connection(
        ConnectionRequest(target_user_id=bob.id), current_user=alice, db=db_session
    )
    assert again["message"] == "Request already sent"

    pending = connections_api.get_pending_requests(current_user=bob, db=db_session)
    assert [p["user_id"] for p in pending] == [alice.id]

    accepted = connections_api.accept_connection(
        ConnectionRequest(target_user_id=alice.id), current_user=bob, db=db_session
    )
    assert accepted["is_mutual"] is True

    mine = connections_api.get_my_connections(current_user=alice, db=db_session)
    assert [p["user_id"] for p in mine] == [bob.id]
    assert mine[0]["connection_count"] == 1
    assert connections_api.get_connection_count(bob.id, db=db_session) == {"count": 1}


def test_reject_removes_incoming_row_only(db_session, make_user, connect):
    alice = make_user("Alice")
    bob = make_user("Bob")
    connect(alice, bob)

    connections_api.reject_connection(
        ConnectionRequest(target_user_id=alice.id), current_user=bob, db=db_session
    )

    assert connection_crud.get_connection_pairs(db_session, bob.id) == []


def test_remove_deletes_both_directions(db_session, make_user, connect):
    alice = make_user("Alice")
    bob = make_user("Bob")
    connect(alice, bob)
    connect(bob, alice)

    connections_api.remove_connection(bob.id, current_user=alice, db=db_session)

    assert connection_crud.get_connection_pairs(db_session, alice.id) == []


def test_cannot_connect_to_self_or_missing_user(db_session, make_user):
    alice = make_user("Alice")

    with pytest.raises(HTTPException) as self_exc:
        connections_api.create_connection(
            ConnectionRequest(target_user_id=alice.id), current_user=alice, db=db_session
        )
    assert self_exc.value.status_code == 400

    with pytest.raises(HTTPException) as missing_exc:
        connections_api.create_connection(
            ConnectionRequest(target_user_id=9999), current_user=alice, db=db_session
        )
    assert missing_exc.value.status_code == 404
