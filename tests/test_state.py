import pytest

from flatbot.state import Filters, Flow, Listing, Room, Session, SessionStore, Step


def test_fresh_filters_payload_has_every_field():
    payload = Filters.fresh().to_payload()
    assert payload == {
        "city": "Kraków",
        "districts": [],
        "price_min": None,
        "price_max": None,
        "rooms": [],
        "pets": None,
        "parking": [],
        "elevator": None,
    }


def test_payload_reflects_filters():
    f = Filters(districts=["Podgórze"], price_max=3500, rooms=[Room.TWO], pets="Tak",
                parking=["w garażu"], elevator=True)
    payload = f.to_payload()
    assert payload["rooms"] == ["two"]
    assert payload["elevator"] is True
    assert payload["price_min"] is None

    f.elevator = False
    assert f.to_payload()["elevator"] is None


def test_payload_copies_lists():
    f = Filters()
    payload = f.to_payload()
    payload["districts"].append("X")
    assert f.districts == []


def test_full_flow_order():
    flow = Flow.full()
    assert flow.first() == Step.DISTRICTS
    assert flow.after(Step.DISTRICTS) == Step.PRICE
    assert flow.after(Step.ROOMS) == Step.PETS
    assert flow.after(Step.ELEVATOR) == Step.CONFIRM
    assert flow.after(Step.CONFIRM) is None


def test_simple_flow_goes_price_rooms_search():
    flow = Flow.simple()
    assert flow.steps == (Step.PRICE, Step.ROOMS)
    assert flow.first() == Step.PRICE
    assert flow.after(Step.PRICE) == Step.ROOMS
    assert flow.after(Step.ROOMS) is None


def test_custom_flow():
    flow = Flow({Step.PARKING, Step.CONFIRM})
    assert flow.steps == (Step.PRICE, Step.ROOMS, Step.PARKING, Step.CONFIRM)
    assert not flow.includes(Step.PETS)


def test_mandatory_steps_cannot_be_configured():
    with pytest.raises(ValueError):
        Flow({Step.SHOWING})


def test_listing_from_dict():
    l = Listing.from_dict({"id": 17, "title": "Flat", "url": "https://x"})
    assert l.id == "17"
    assert l.location is None
    assert l.price_value is None


@pytest.mark.parametrize("item", [{}, {"id": None}, {"id": ""}, "oops", None])
def test_listing_without_id_is_rejected(item):
    with pytest.raises(ValueError):
        Listing.from_dict(item)


def test_session_store_creates_lazily():
    store = SessionStore(city="Warszawa")
    assert 1 not in store
    sess = store.get(1)
    assert isinstance(sess, Session)
    assert sess.step == Step.IDLE
    assert sess.filters.city == "Warszawa"
    assert store.get(1) is sess
    assert len(store) == 1


def test_session_store_reset_clears_everything():
    store = SessionStore()
    sess = store.get(1)
    sess.filters.districts.append("Krowodrza")
    sess.filters.price_max = 4000
    sess.queue.append(Listing("a", None, None, None, None))
    sess.current = "b"
    sess.step = Step.SHOWING

    store.reset(1, Step.PRICE)
    assert sess.step == Step.PRICE
    assert sess.filters == Filters.fresh()
    assert sess.queue == []
    assert sess.current is None
