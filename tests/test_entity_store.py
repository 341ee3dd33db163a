from __future__ import annotations

import pytest

from scene_prompter.core.catalog import (
    ArtisticStyle,
    CameraMotion,
    CharacterKind,
    DialogueType,
    Expression,
    StudioBrandStyle,
    VisualTechnique,
)
from scene_prompter.core.errors import NotFoundError, StoreValidationError
from scene_prompter.services.entity_store import EntityStore

QUESTION = DialogueType.QUESTION.value
ANSWER = DialogueType.ANSWER.value
AUDIENCE = DialogueType.ADDRESS_AUDIENCE.value


def test_upsert_assigns_id_and_keeps_insertion_order(store, aria, bruno):
    state = store.snapshot()
    assert aria.id and bruno.id and aria.id != bruno.id
    assert [c.name for c in state.characters] == ["Aria", "Bruno"]
    assert bruno.kind == CharacterKind.BIPED_ANIMAL


def test_upsert_existing_id_replaces_in_place(store, aria, bruno):
    updated = store.upsert_character("Aria Putri", {"kind": "human", "gender": "Female"}, char_id=aria.id)
    state = store.snapshot()
    assert updated.id == aria.id
    assert [c.name for c in state.characters] == ["Aria Putri", "Bruno"]
    assert state.characters[0].attributes.age is None


def test_kind_cannot_change_once_saved(store, aria):
    before = store.snapshot()
    with pytest.raises(StoreValidationError):
        store.upsert_character("Aria", {"kind": "fantasy", "description": "naga"}, char_id=aria.id)
    assert store.snapshot() == before


@pytest.mark.parametrize("name", ["", "   "])
def test_name_is_required(store, name):
    with pytest.raises(StoreValidationError):
        store.upsert_character(name, {"kind": "human"})
    assert store.snapshot().characters == []


def test_biped_requires_animal_type(store):
    with pytest.raises(StoreValidationError):
        store.upsert_character("Bruno", {"kind": "animal2", "animal_type": ""})


def test_blank_dropdowns_are_treated_as_unset(store):
    character = store.upsert_character("Aria", {"kind": "human", "gender": "", "skin_color": " "})
    assert character.attributes.gender is None
    assert character.attributes.skin_color is None


def test_unknown_option_value_is_rejected(store):
    with pytest.raises(StoreValidationError):
        store.upsert_character("Aria", {"kind": "human", "gender": "Robot"})


def test_snapshot_is_detached(store, aria):
    snap = store.snapshot()
    snap.characters[0].name = "Changed"
    assert store.get_character(aria.id).name == "Aria"


def test_set_character_action_creates_entry_lazily(store, aria):
    assert aria.id not in store.snapshot().actions
    action = store.set_character_action(aria.id, "action", "berlari")
    assert action.action == "berlari"
    assert store.snapshot().actions[aria.id].is_main is False

    store.set_character_action(aria.id, "action", None)
    assert store.snapshot().actions[aria.id].action == ""


def test_set_character_action_rejects_unknown_field_and_character(store, aria):
    with pytest.raises(StoreValidationError):
        store.set_character_action(aria.id, "mood", "x")
    with pytest.raises(NotFoundError):
        store.set_character_action("missing", "action", "x")


def test_toggle_main_character(store, aria):
    assert store.toggle_main_character(aria.id) is True
    assert store.toggle_main_character(aria.id) is False


def test_dialogue_line_crud(store, aria, bruno):
    index = store.add_dialogue_line(aria.id, {"type": QUESTION, "sentence": "Halo?", "target_char_id": bruno.id})
    assert index == 0
    line = store.update_dialogue_line(aria.id, 0, sentence="Apa kabar?")
    assert line.sentence == "Apa kabar?"
    assert line.target_char_id == bruno.id

    store.remove_dialogue_line(aria.id, 0)
    assert store.snapshot().actions[aria.id].dialogue_lines == []
    with pytest.raises(NotFoundError):
        store.update_dialogue_line(aria.id, 0, sentence="x")


def test_dialogue_line_rejects_unknown_field(store, aria):
    with pytest.raises(StoreValidationError):
        store.add_dialogue_line(aria.id, {"type": QUESTION, "tone": "loud"})


def test_target_must_differ_from_speaker(store, aria):
    with pytest.raises(StoreValidationError):
        store.add_dialogue_line(aria.id, {"type": QUESTION, "target_char_id": aria.id})
    with pytest.raises(StoreValidationError):
        store.add_spoken_dialogue({"char_id": aria.id, "type": ANSWER, "target_char_id": aria.id})
    assert store.snapshot().spoken_dialogue == []


def test_target_must_reference_saved_character(store, aria):
    with pytest.raises(StoreValidationError):
        store.add_spoken_dialogue({"char_id": aria.id, "type": QUESTION, "target_char_id": "ghost"})


def test_speaker_must_reference_saved_character(store):
    with pytest.raises(StoreValidationError):
        store.add_spoken_dialogue({"char_id": "ghost", "type": AUDIENCE})


def test_audience_dialogue_drops_target(store, aria, bruno):
    index = store.add_spoken_dialogue({"char_id": aria.id, "type": AUDIENCE, "target_char_id": bruno.id})
    assert store.snapshot().spoken_dialogue[index].target_char_id is None


def test_spoken_dialogue_may_be_incomplete_while_editing(store, aria):
    index = store.add_spoken_dialogue()
    entry = store.update_spoken_dialogue(index, char_id=aria.id)
    assert entry.type is None
    assert entry.sentence == ""


def test_remove_spoken_dialogue(store, aria):
    store.add_spoken_dialogue({"char_id": aria.id, "type": AUDIENCE, "sentence": "Satu"})
    store.add_spoken_dialogue({"char_id": aria.id, "type": AUDIENCE, "sentence": "Dua"})
    store.remove_spoken_dialogue(0)
    assert [e.sentence for e in store.snapshot().spoken_dialogue] == ["Dua"]
    with pytest.raises(NotFoundError):
        store.remove_spoken_dialogue(5)
    with pytest.raises(NotFoundError):
        store.get_character("ghost")


def test_failed_update_leaves_entry_untouched(store, aria, bruno):
    index = store.add_spoken_dialogue({"char_id": aria.id, "type": QUESTION, "target_char_id": bruno.id, "sentence": "Hai"})
    before = store.snapshot()
    with pytest.raises(StoreValidationError):
        store.update_spoken_dialogue(index, target_char_id=aria.id)
    assert store.snapshot() == before


def test_remove_character_cascades(store, aria, bruno):
    store.set_character_action(aria.id, "action", "menari")
    store.set_expression(aria.id, "Happy")
    store.add_dialogue_line(bruno.id, {"type": ANSWER, "sentence": "Baik", "target_char_id": aria.id})
    store.add_spoken_dialogue({"char_id": aria.id, "type": QUESTION, "target_char_id": bruno.id, "sentence": "Hai"})
    store.add_spoken_dialogue({"char_id": bruno.id, "type": ANSWER, "target_char_id": aria.id, "sentence": "Halo"})

    store.remove_character(aria.id)
    state = store.snapshot()

    assert [c.name for c in state.characters] == ["Bruno"]
    assert aria.id not in state.actions
    assert aria.id not in state.expressions
    assert state.actions[bruno.id].dialogue_lines[0].target_char_id is None
    # Entries stay in place so indices do not shift
    assert len(state.spoken_dialogue) == 2
    assert state.spoken_dialogue[0].char_id is None
    assert state.spoken_dialogue[0].target_char_id == bruno.id
    assert state.spoken_dialogue[1].target_char_id is None


def test_remove_unknown_character(store):
    with pytest.raises(NotFoundError):
        store.remove_character("ghost")


def test_set_expression(store, aria):
    assert store.set_expression(aria.id, "Sad") == Expression.SAD
    assert store.set_expression(aria.id, "") is None
    assert aria.id not in store.snapshot().expressions
    with pytest.raises(StoreValidationError):
        store.set_expression(aria.id, "Bored")


def test_set_scene_attribute(store):
    scene = store.set_scene_attribute("camera_motion", "Pan Left")
    assert scene.camera_motion == CameraMotion.PAN_LEFT
    store.set_scene_attribute("location", None)
    assert store.snapshot().scene.location == ""

    with pytest.raises(StoreValidationError):
        store.set_scene_attribute("weather", "rain")
    with pytest.raises(StoreValidationError):
        store.set_scene_attribute("time_of_day", "Noon")


def test_toggle_visual_style_keeps_selection_order(store):
    assert store.toggle_visual_style("3D") is True
    assert store.toggle_visual_style("Pixar Style") is True
    assert store.toggle_visual_style("Anime") is True
    assert store.toggle_visual_style("3D") is False
    assert store.snapshot().scene.visual_styles == [StudioBrandStyle.PIXAR, ArtisticStyle.ANIME]

    with pytest.raises(StoreValidationError):
        store.toggle_visual_style("Watercolor")


def test_reset(store, aria):
    store.set_composed_prompt("x")
    store.reset()
    state = store.snapshot()
    assert state.characters == []
    assert state.composed_prompt == ""


def test_draft_round_trip(store, aria, bruno):
    store.set_character_action(aria.id, "action", "berlari")
    store.toggle_main_character(aria.id)
    store.set_expression(bruno.id, "Confused")
    store.add_spoken_dialogue({"char_id": aria.id, "type": QUESTION, "target_char_id": bruno.id, "sentence": "Hai"})
    store.toggle_visual_style("2D")
    store.set_scene_attribute("camera_motion", "Zoom In")
    store.set_composed_prompt("komposisi")
    store.set_refined_prompt("refined")

    restored = EntityStore()
    restored.load_draft(store.to_draft())
    assert restored.snapshot() == store.snapshot()
    assert restored.snapshot().scene.visual_styles == [VisualTechnique.TWO_D]


def test_draft_sections_fall_back_independently(store, aria):
    payload = store.to_draft()
    payload["scene"] = "not a scene"
    payload["spoken_dialogue"] = None
    del payload["refined_prompt"]

    restored = EntityStore()
    restored.load_draft(payload)
    state = restored.snapshot()
    assert [c.name for c in state.characters] == ["Aria"]
    assert state.scene.location == ""
    assert state.spoken_dialogue == []
    assert state.refined_prompt == ""


def test_empty_draft_loads_empty_store(store, aria):
    store.load_draft({})
    assert store.snapshot().characters == []


def test_blank_values_resolve_through_kind_union(store):
    human = store.upsert_character("Aria", {"kind": "human", "gender": "", "age": ""})
    cat = store.upsert_character("Milo", {"kind": "animal4", "animal_type": "", "clothing_accessories": " "})
    fox = store.upsert_character("Rubi", {"kind": "animal2", "animal_type": "Rubah", "age": "", "fur_colors": ""})

    assert human.kind == CharacterKind.HUMAN
    assert human.attributes.gender is None and human.attributes.age is None
    assert cat.kind == CharacterKind.QUADRUPED_ANIMAL
    assert cat.attributes.animal_type is None and cat.attributes.clothing_accessories is None
    assert fox.kind == CharacterKind.BIPED_ANIMAL
    assert fox.attributes.age is None and fox.attributes.fur_colors is None


def test_draft_actions_are_keyed_by_their_character(store, aria, bruno):
    store.set_character_action(aria.id, "action", "duduk")
    store.toggle_main_character(aria.id)
    payload = store.to_draft()
    payload["actions"] = {"stale-key": payload["actions"][aria.id]}

    restored = EntityStore()
    restored.load_draft(payload)
    actions = restored.snapshot().actions
    assert list(actions) == [aria.id]
    assert actions[aria.id].action == "duduk"
