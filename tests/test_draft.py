import pytest

from listings.draft import (
    EMPTY_DRAFT,
    HISTORY_LIMIT,
    Draft,
    DraftStore,
    ImageBlob,
    completion_percentage,
)
from listings.exceptions import InvalidField


def test_new_store_starts_empty():
    store = DraftStore()
    assert store.snapshot() == EMPTY_DRAFT
    assert store.snapshot().images == (None, None, None)
    assert not store.can_undo


def test_set_field_notifies_subscribers():
    store = DraftStore()
    seen = []
    store.subscribe(lambda name, value: seen.append((name, value)))

    store.set_field('title', 'Cozy Cabin Retreat')

    assert store.snapshot().title == 'Cozy Cabin Retreat'
    assert seen == [('title', 'Cozy Cabin Retreat')]


def test_writes_are_not_validated():
    store = DraftStore()
    store.set_field('rent', 'a lot')
    assert store.snapshot().rent == 'a lot'


def test_snapshots_do_not_change_after_later_writes():
    store = DraftStore()
    store.set_field('city', 'Goa')
    before = store.snapshot()

    store.set_field('city', 'Pune')

    assert before.city == 'Goa'
    assert store.snapshot().city == 'Pune'


def test_unknown_field_raises_and_leaves_draft_alone():
    store = DraftStore()
    seen = []
    store.subscribe(lambda name, value: seen.append(name))

    with pytest.raises(InvalidField):
        store.set_field('pool_depth', '2m')

    assert store.snapshot() == EMPTY_DRAFT
    assert seen == []


def test_images_are_padded_to_three_slots():
    store = DraftStore()
    store.set_field('images', ['https://img.example.com/a.jpg'])
    assert store.snapshot().images == ('https://img.example.com/a.jpg', None, None)

    with pytest.raises(ValueError):
        store.set_field('images', ['a', 'b', 'c', 'd'])


def test_set_image_fills_one_slot():
    store = DraftStore()
    blob = ImageBlob('room.png', 'image/png', 1024)

    store.set_image(2, blob)

    assert store.snapshot().images == (None, None, blob)
    with pytest.raises(IndexError):
        store.set_image(3, blob)


def test_reset_returns_to_empty_draft():
    store = DraftStore()
    seen = []
    store.subscribe(lambda name, value: seen.append((name, value)))
    store.set_field('title', 'Cozy Cabin Retreat')

    store.reset()

    assert store.snapshot() == EMPTY_DRAFT
    assert not store.can_undo
    assert seen[-1] == (None, None)


def test_undo_restores_previous_value():
    store = DraftStore()
    store.set_field('title', 'First title')
    store.set_field('title', 'Second title')

    assert store.undo() is True
    assert store.snapshot().title == 'First title'
    assert store.undo() is True
    assert store.snapshot().title == ''
    assert store.undo() is False


def test_undo_history_is_bounded():
    store = DraftStore()
    for count in range(HISTORY_LIMIT + 5):
        store.set_field('max_guests', count + 1)

    undone = 0
    while store.undo():
        undone += 1

    assert undone == HISTORY_LIMIT
    assert store.snapshot().max_guests == 5


def test_state_survives_a_save_and_load():
    store = DraftStore()
    blob = ImageBlob('room.png', 'image/png', 1024)
    store.set_field('title', 'Cozy Cabin Retreat')
    store.set_image(0, blob)
    store.set_field('amenities', ['WiFi', 'Garden'])

    restored = DraftStore.from_state(store.to_state())

    assert restored.snapshot() == store.snapshot()
    assert restored.snapshot().images[0] == blob
    assert restored.undo() is True
    assert restored.snapshot().amenities == ()
    assert restored.snapshot().images[0] == blob


def test_loading_state_with_unknown_field_raises():
    with pytest.raises(InvalidField):
        Draft.from_state({'title': 'x', 'helipad': True})


def test_completion_percentage(valid_draft):
    assert completion_percentage(EMPTY_DRAFT) < 50
    assert completion_percentage(valid_draft) < 100

    full = Draft.from_state({
        **valid_draft.to_state(),
        'latitude': 15.49,
        'longitude': 73.82,
        'amenities': ['WiFi'],
    })
    assert completion_percentage(full) == 100


def test_set_fields_is_one_undo_step():
    store = DraftStore()
    seen = []
    store.subscribe(lambda name, value: seen.append(name))
    store.set_field('city', 'Goa')

    store.set_fields({'title': 'Cozy Cabin Retreat', 'images': ['https://img.example.com/a.jpg'], 'city': 'Pune'})

    assert store.snapshot().images == ('https://img.example.com/a.jpg', None, None)
    assert seen == ['city', 'title', 'images', 'city']
    assert store.undo() is True
    assert store.snapshot().city == 'Goa'
    assert store.snapshot().title == ''


def test_set_fields_with_unknown_name_changes_nothing():
    store = DraftStore()
    with pytest.raises(InvalidField):
        store.set_fields({'title': 'Cozy Cabin Retreat', 'helipad': True})
    assert store.snapshot() == EMPTY_DRAFT
    assert not store.can_undo
