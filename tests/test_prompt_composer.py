from __future__ import annotations

from scene_prompter.core.catalog import DialogueType, camera_motion_label
from scene_prompter.schemas.entities import StoreState
from scene_prompter.services.prompt_composer import compose, describe_character

QUESTION = DialogueType.QUESTION.value
ANSWER = DialogueType.ANSWER.value
AUDIENCE = DialogueType.ADDRESS_AUDIENCE.value


def test_empty_store_composes_to_empty_string(store):
    assert compose(store.snapshot()) == ""


def test_single_human_introduction(store, aria):
    assert compose(store.snapshot()) == "Aria adalah seorang manusia female berusia 25 tahun."


def test_biped_introduction_carries_age_descriptor(store, bruno):
    text = compose(store.snapshot())
    assert text.startswith("Bruno adalah seekor hewan beruang berjalan dengan dua kaki")
    assert "(toddler-style, playful and chubby, short legs)" in text


def test_main_character_callout_comes_first(store, aria, bruno):
    store.toggle_main_character(bruno.id)
    text = compose(store.snapshot())
    first_sentence = text.split(". ")[0]
    assert first_sentence == "Karakter utama adalah Bruno"
    assert "Aria" not in first_sentence


def test_several_main_characters_are_joined(store, aria, bruno):
    store.toggle_main_character(aria.id)
    store.toggle_main_character(bruno.id)
    assert compose(store.snapshot()).startswith("Karakter utama adalah Aria dan Bruno.")


def test_empty_dialogue_sentence_contributes_nothing(store, aria, bruno):
    store.add_dialogue_line(aria.id, {"type": QUESTION, "sentence": "", "target_char_id": bruno.id})
    store.add_spoken_dialogue({"char_id": aria.id, "type": QUESTION, "target_char_id": bruno.id, "sentence": ""})
    text = compose(store.snapshot())
    assert '"' not in text


def test_spoken_question_names_speaker_and_target(store, aria, bruno):
    store.add_spoken_dialogue({
        "char_id": aria.id,
        "type": QUESTION,
        "target_char_id": bruno.id,
        "sentence": "Mau ke mana?",
    })
    text = compose(store.snapshot())
    assert text.count('Aria bertanya kepada Bruno: "Mau ke mana?"') == 1
    assert text.count("bertanya") == 1


def test_spoken_dialogue_variants(store, aria, bruno):
    store.add_spoken_dialogue({"char_id": bruno.id, "type": ANSWER, "sentence": "Ke pasar."})
    store.add_spoken_dialogue({"char_id": aria.id, "type": AUDIENCE, "sentence": "Halo semua!"})
    store.add_spoken_dialogue({"char_id": aria.id, "sentence": "Tanpa jenis"})
    text = compose(store.snapshot())
    assert 'Bruno menjawab: "Ke pasar."' in text
    assert 'Aria berbicara kepada audiens: "Halo semua!"' in text
    assert "Tanpa jenis" not in text


def test_embedded_audience_line_renders_as_answer(store, aria):
    store.add_dialogue_line(aria.id, {"type": AUDIENCE, "sentence": "Halo semua"})
    store.add_dialogue_line(aria.id, {"type": QUESTION, "sentence": "Siap?"})
    text = compose(store.snapshot())
    assert 'Aria menjawab: "Halo semua"' in text
    assert 'Aria bertanya: "Siap?"' in text


def test_action_with_expression(store, aria):
    store.set_character_action(aria.id, "action", "Berlari di Taman")
    store.set_expression(aria.id, "Happy")
    assert "Aria sedang berlari di taman dengan ekspresi happy." in compose(store.snapshot())


def test_empty_action_skips_action_sentence_but_keeps_lines(store, aria):
    store.set_expression(aria.id, "Sad")
    store.add_dialogue_line(aria.id, {"type": ANSWER, "sentence": "Tidak tahu."})
    text = compose(store.snapshot())
    assert "sedang" not in text
    assert 'Aria menjawab: "Tidak tahu."' in text


def test_scene_sentences(store):
    store.set_scene_attribute("location", "Taman Kota")
    store.set_scene_attribute("time_of_day", "Golden Hour")
    store.set_scene_attribute("camera_motion", "Pan Left")
    store.set_scene_attribute("lighting", "Soft lighting")
    store.toggle_visual_style("3D")
    store.toggle_visual_style("Pixar Style")
    store.set_scene_attribute("mood", "Cheerful")
    store.set_scene_attribute("sound_music", "Musik Ceria")
    store.set_scene_attribute("additional_details", "Gunakan warna Cerah")

    assert compose(store.snapshot()) == " ".join([
        "Adegan berlangsung di taman kota.",
        "Waktu kejadian adalah golden hour.",
        f"Gerakan kamera: {camera_motion_label('Pan Left')}.",
        "Pencahayaan: soft lighting.",
        "Gaya visual video adalah 3d, pixar style.",
        "Suasana video: cheerful.",
        "Latar belakang musik/suara: musik ceria.",
        "Detail tambahan: Gunakan warna Cerah.",
    ])


def test_camera_label_is_indonesian():
    assert camera_motion_label("Pan Left") == "Geser Kiri"
    assert camera_motion_label("Moonwalk") is None


def test_composition_order(store, aria, bruno):
    store.toggle_main_character(aria.id)
    store.set_character_action(aria.id, "action", "menari")
    store.set_scene_attribute("location", "pantai")
    store.add_spoken_dialogue({"char_id": bruno.id, "type": QUESTION, "target_char_id": aria.id, "sentence": "Boleh ikut?"})
    store.set_scene_attribute("additional_details", "Akhiri dengan tawa.")

    text = compose(store.snapshot())
    markers = [
        "Karakter utama adalah Aria.",
        "Aria adalah seorang",
        "Bruno adalah seekor",
        "Aria sedang menari.",
        "Adegan berlangsung di pantai.",
        'Bruno bertanya kepada Aria: "Boleh ikut?"',
        "Detail tambahan: Akhiri dengan tawa.",
    ]
    positions = [text.index(m) for m in markers]
    assert positions == sorted(positions)


def test_compose_is_deterministic(store, aria, bruno):
    store.set_character_action(bruno.id, "action", "tidur")
    store.add_spoken_dialogue({"char_id": aria.id, "type": AUDIENCE, "sentence": "Sst!"})
    snapshot = store.snapshot()
    assert compose(snapshot) == compose(snapshot) == compose(store.snapshot())


def test_dangling_references_are_skipped():
    state = StoreState.model_validate({
        "characters": [{"id": "a", "name": "Aria", "attributes": {"kind": "human"}}],
        "actions": {
            "ghost": {"char_id": "ghost", "action": "menghilang", "is_main": True},
            "a": {"char_id": "a", "action": "duduk"},
        },
        "spoken_dialogue": [
            {"char_id": "ghost", "type": QUESTION, "sentence": "Siapa?"},
            {"char_id": "a", "type": QUESTION, "target_char_id": "ghost", "sentence": "Ada orang?"},
        ],
    })
    text = compose(state)
    assert "menghilang" not in text
    assert "Karakter utama" not in text
    assert "Siapa?" not in text
    assert 'Aria bertanya: "Ada orang?"' in text


def test_fantasy_and_quadruped_descriptions(store):
    dragon = store.upsert_character("Naga", {"kind": "fantasy", "description": "Bersisik EMAS dan bisa terbang"})
    cat = store.upsert_character("Milo", {"kind": "animal4", "animal_type": "Kucing", "clothing_accessories": "Kalung Merah"})
    assert describe_character(dragon) == "Naga adalah seekor makhluk fantasi. bersisik emas dan bisa terbang."
    assert describe_character(cat) == "Milo adalah seekor hewan kucing mengenakan kalung merah."


def test_callout_and_actions_resolve_the_same_character():
    state = StoreState.model_validate({
        "characters": [
            {"id": "a", "name": "Aria", "attributes": {"kind": "human"}},
            {"id": "b", "name": "Bruno", "attributes": {"kind": "fantasy"}},
        ],
        "actions": {"a": {"char_id": "b", "action": "duduk", "is_main": True}},
    })
    text = compose(state)
    assert text.startswith("Karakter utama adalah Aria.")
    assert "Aria sedang duduk." in text
    assert "Bruno sedang" not in text
