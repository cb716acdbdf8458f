from datetime import datetime, timedelta, timezone

import pytest

from yardtrack.core.errors import (
    DuplicateSlotError,
    EventNotFoundError,
    FutureTimestampError,
    InvalidSlotIdError,
    SlotOccupiedError,
    TrailerNotInYardError,
    UnknownSlotError,
)
from yardtrack.models.yard_event import YardEvent
from yardtrack.schemas.yard import YardEventCreate
from yardtrack.services.occupancy import TrailerState
from yardtrack.services.yard_store import YardStore

T0 = datetime(2024, 7, 28, 8, 0, tzinfo=timezone.utc)


def _store(db) -> YardStore:
    store = YardStore(db, clerk_name="Jane Clerk")
    for door in ("D1", "D2", "D3"):
        store.add_slot("door", door)
    for lane in ("L1", "L2"):
        store.add_slot("lane", lane)
    return store


def _check_in(trailer_id, assignment_type="door_assignment", value=None, transaction_type="inbound", **extra):
    return YardEventCreate(
        transaction_type=transaction_type,
        trailer_id=trailer_id,
        carrier=extra.pop("carrier", "Knight-Swift"),
        scac=extra.pop("scac", "KNX"),
        driver_name="John Doe",
        load_number=extra.pop("load_number", "LD123"),
        assignment_type=assignment_type,
        assignment_value=value,
        **extra,
    )


def _slots(store, kind=None):
    return {slot: event.trailer_id for slot, event in store.get_occupancy(kind).items()}


def test_add_slot_normalizes_and_rejects_duplicates(db):
    store = _store(db)
    slot = store.add_slot("door", "  d11 ")
    assert slot.slot_id == "D11"
    with pytest.raises(DuplicateSlotError):
        store.add_slot("door", "D11")
    assert store.slot_ids("door") == ["D1", "D2", "D3", "D11"]


def test_slot_id_cannot_be_shared_by_door_and_lane(db):
    store = _store(db)
    with pytest.raises(DuplicateSlotError) as excinfo:
        store.add_slot("lane", "d1")
    assert excinfo.value.kind == "door"
    with pytest.raises(DuplicateSlotError):
        store.add_slot("door", "L2")
    assert store.slot_ids("lane") == ["L1", "L2"]
    assert store.slot_ids("door") == ["D1", "D2", "D3"]


def test_lane_check_in_never_displaces_door_occupant(db):
    store = _store(db)
    store.add_slot("door", "X1")
    with pytest.raises(DuplicateSlotError):
        store.add_slot("lane", "X1")
    store.record_event(_check_in("TR100", value="X1"), timestamp=T0)
    with pytest.raises(UnknownSlotError):
        store.record_event(_check_in("TR200", assignment_type="lane_assignment", value="X1"))
    assert store.trailer_status("TR100") == (TrailerState.IN_YARD, "X1")
    assert store.lost_and_found() == []


def test_move_destination_kind_follows_the_slot_list(db):
    store = _store(db)
    store.add_slot("lane", "X2")
    source = store.record_event(_check_in("TR300", assignment_type="bobtail"))
    event, _ = store.move_trailer(source.id, "x2")
    assert event.assignment_type == "lane_assignment"
    assert _slots(store, "lane") == {"X2": "TR300"}


def test_future_check_in_rejected(db):
    store = _store(db)
    source = store.record_event(_check_in("TR400", value="D1"))
    future = datetime.now(timezone.utc) + timedelta(hours=2)
    with pytest.raises(FutureTimestampError):
        store.record_event(_check_in("TR400", value="D2"), timestamp=future)
    assert db.query(YardEvent).count() == 1
    # Moves stamped "now" always become the trailer's latest event.
    store.move_trailer(source.id, "D3")
    assert _slots(store) == {"D3": "TR400"}


def test_add_slot_rejects_empty_id(db):
    store = _store(db)
    with pytest.raises(InvalidSlotIdError):
        store.add_slot("lane", "   ")


def test_check_in_requires_known_slot(db):
    store = _store(db)
    with pytest.raises(UnknownSlotError):
        store.record_event(_check_in("TR1001", value="D9"))
    assert db.query(YardEvent).count() == 0


def test_check_in_occupies_slot_and_uses_clerk(db):
    store = _store(db)
    event = store.record_event(_check_in("TR1001", value="d2"))
    assert event.assignment_value == "D2"
    assert event.clerk_name == "Jane Clerk"
    assert _slots(store) == {"D2": "TR1001"}
    assert store.available_slots("door") == ["D1", "D3"]


def test_check_in_to_occupied_door_displaces_occupant(db):
    store = _store(db)
    store.record_event(_check_in("TR1001", value="D1"), timestamp=T0)
    store.record_event(_check_in("TR2002", value="D1"), timestamp=T0 + timedelta(minutes=5))
    assert _slots(store) == {"D1": "TR2002"}
    lost = store.lost_and_found()
    assert [e.trailer_id for e in lost] == ["TR1001"]
    assert lost[0].requested_slot == "D1"
    assert lost[0].transaction_type == "move"
    assert store.trailer_status("TR1001") == (TrailerState.LOST_AND_FOUND, None)


def test_move_to_free_slot_vacates_previous(db):
    store = _store(db)
    source = store.record_event(_check_in("TR1001", value="D1"), timestamp=T0)
    event, parked = store.move_trailer(source.id, "l2")
    assert parked is False
    assert event.transaction_type == "inbound"
    assert event.assignment_type == "lane_assignment"
    assert event.assignment_value == "L2"
    assert event.load_number == source.load_number
    assert _slots(store) == {"L2": "TR1001"}
    # The source event is untouched.
    assert db.get(YardEvent, source.id).assignment_value == "D1"


def test_move_into_occupied_slot_without_fallback_raises(db):
    store = _store(db)
    t1 = store.record_event(_check_in("T100", value="D1"), timestamp=T0)
    store.record_event(_check_in("T200", value="D2"), timestamp=T0)
    before = db.query(YardEvent).count()
    with pytest.raises(SlotOccupiedError) as excinfo:
        store.move_trailer(t1.id, "D2")
    assert excinfo.value.trailer_id == "T200"
    assert db.query(YardEvent).count() == before
    assert _slots(store) == {"D1": "T100", "D2": "T200"}


def test_move_into_occupied_slot_with_fallback_parks_in_lost_and_found(db):
    store = _store(db)
    t1 = store.record_event(_check_in("T100", value="D1"), timestamp=T0)
    store.record_event(_check_in("T200", value="D2"), timestamp=T0)
    event, parked = store.move_trailer(t1.id, "D2", allow_lost_and_found=True)
    assert parked is True
    assert event.assignment_type == "lost_and_found"
    assert event.assignment_value is None
    assert event.requested_slot == "D2"
    assert _slots(store) == {"D2": "T200"}
    assert [e.trailer_id for e in store.lost_and_found()] == ["T100"]


def test_lost_and_found_trailer_can_be_moved_back(db):
    store = _store(db)
    t1 = store.record_event(_check_in("T100", value="D1"), timestamp=T0)
    store.record_event(_check_in("T200", value="D2"), timestamp=T0)
    lost, _ = store.move_trailer(t1.id, "D2", allow_lost_and_found=True)
    event, parked = store.move_trailer(lost.id, "L1")
    assert parked is False
    assert _slots(store, "lane") == {"L1": "T100"}
    assert store.lost_and_found() == []


def test_move_to_current_slot_is_noop(db):
    store = _store(db)
    source = store.record_event(_check_in("T100", value="D1"), timestamp=T0)
    count = db.query(YardEvent).count()
    event, parked = store.move_trailer(source.id, "D1")
    assert event.id == source.id
    assert parked is False
    assert db.query(YardEvent).count() == count


def test_move_rejects_unknown_event_slot_and_checked_out_trailer(db):
    store = _store(db)
    with pytest.raises(EventNotFoundError):
        store.move_trailer(999, "D1")
    source = store.record_event(_check_in("T100", value="D1"), timestamp=T0)
    with pytest.raises(UnknownSlotError):
        store.move_trailer(source.id, "D42")
    store.record_event(_check_in("T100", assignment_type="empty", transaction_type="outbound"), timestamp=T0 + timedelta(hours=1))
    with pytest.raises(TrailerNotInYardError):
        store.move_trailer(source.id, "D2")


def test_bobtail_trailer_can_be_assigned_by_move(db):
    store = _store(db)
    source = store.record_event(_check_in("T300", assignment_type="bobtail"))
    assert store.trailer_status("T300") == (TrailerState.IN_YARD, None)
    store.move_trailer(source.id, "D3")
    assert store.trailer_status("T300") == (TrailerState.IN_YARD, "D3")


def test_search_slots_matches_trailer_carrier_and_load(db):
    store = _store(db)
    store.record_event(_check_in("TR53123", value="D1", carrier="Werner", load_number="LD900"))
    store.record_event(_check_in("TR48991", value="D2", carrier="Schneider", load_number="LD901"))
    assert [slot.slot_id for slot, _ in store.search_slots("door", "werner")] == ["D1"]
    assert [slot.slot_id for slot, _ in store.search_slots("door", "ld901")] == ["D2"]
    assert [slot.slot_id for slot, _ in store.search_slots("door", "tr5")] == ["D1"]
    assert len(store.search_slots("door", "")) == 2


def test_list_events_filters_and_orders_newest_first(db):
    store = _store(db)
    store.record_event(_check_in("TR1", value="D1"), timestamp=T0)
    store.record_event(_check_in("TR2", value="L1", assignment_type="lane_assignment"), timestamp=T0 + timedelta(minutes=1))
    store.record_event(_check_in("TR1", assignment_type="empty", transaction_type="outbound"), timestamp=T0 + timedelta(minutes=2))
    assert [e.trailer_id for e in store.list_events()] == ["TR1", "TR2", "TR1"]
    assert [e.transaction_type for e in store.trailer_history("TR1")] == ["outbound", "inbound"]
    assert len(store.list_events(transaction_type="outbound")) == 1
    assert len(store.list_events(q="tr2")) == 1
