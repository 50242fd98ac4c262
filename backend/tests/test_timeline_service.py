from tlshare.models import (
    MAX_SUMMONS,
    CharacterOption,
    EquipmentUpdate,
    MutationError,
    OptionCatalog,
    Position,
    StepUpdate,
    Summon,
    WeaponOption,
)
from tlshare.services.identifiers import is_summon_id
from tlshare.services.timeline import TimelineService


def test_default_timeline_shape(timeline):
    assert timeline.version == 1
    assert timeline.title == "新規TL"
    assert (timeline.grid.cols, timeline.grid.rows) == (19, 19)
    assert [c.id for c in timeline.characters] == ["c1", "c2", "c3", "c4", "c5"]
    assert len({c.color for c in timeline.characters}) == 5
    assert all(c.name == "" and c.equipment.limit_break == 0 for c in timeline.characters)
    assert timeline.summons == []
    assert [t.index for t in timeline.phases()] == list(range(8))
    assert all(not t.placements and not t.steps for t in timeline.phases())


def test_set_character_name_resolves_alias_category_and_weapon(service, timeline):
    result = service.set_character_name(timeline, "c1", "Alpha")

    assert result.applied
    c1 = result.timeline.character("c1")
    assert (c1.name, c1.alias, c1.ctype) == ("Alpha", "A", "AR")
    assert c1.equipment.weapon == "W-AR1"
    assert timeline.character("c1").name == ""


def test_set_character_name_without_catalog_alias_uses_name(service, timeline):
    c3 = service.set_character_name(timeline, "c3", "Charlie").timeline.character("c3")
    assert c3.alias == "Charlie"


def test_set_character_name_rejections_return_prior_snapshot(service, timeline):
    unknown_char = service.set_character_name(timeline, "c9", "Alpha")
    assert not unknown_char.applied
    assert unknown_char.error == MutationError.UNKNOWN_CHARACTER
    assert unknown_char.timeline is timeline

    unknown_name = service.set_character_name(timeline, "c1", "Zulu")
    assert unknown_name.error == MutationError.UNKNOWN_OPTION
    assert unknown_name.timeline is timeline


def test_weapon_kept_within_category_and_reset_across(service, timeline):
    tl = service.set_character_name(timeline, "c1", "Alpha").timeline
    tl = service.set_character_equipment(tl, "c1", EquipmentUpdate(weapon="W-AR2")).timeline

    same_category = service.set_character_name(tl, "c1", "Charlie").timeline
    assert same_category.character("c1").equipment.weapon == "W-AR2"

    other_category = service.set_character_name(tl, "c1", "Bravo").timeline
    assert other_category.character("c1").equipment.weapon == "W-SMG1"


def test_rename_clears_only_disallowed_unique_keys(service, timeline):
    tl = service.set_character_name(timeline, "c1", "Alpha").timeline
    tl = service.set_character_equipment(
        tl, "c1", EquipmentUpdate(unique_key_set=("ka1", "ka2", "ka3"), common_key_set=("ck1", None, "ck3")),
    ).timeline

    renamed = service.set_character_name(tl, "c1", "Charlie").timeline
    equipment = renamed.character("c1").equipment

    allowed = set(service.catalog.unique_key_options_for_name("Charlie"))
    assert equipment.unique_key_set == ("ka1", None, None)
    assert all(k is None or k in allowed for k in equipment.unique_key_set)
    assert equipment.common_key_set == ("ck1", None, "ck3")


def test_unselecting_character_clears_weapon_and_keys(service, timeline):
    tl = service.set_character_name(timeline, "c1", "Alpha").timeline
    tl = service.set_character_equipment(tl, "c1", EquipmentUpdate(unique_key_set=("ka1", None, None))).timeline

    cleared = service.set_character_name(tl, "c1", "").timeline.character("c1")
    assert (cleared.name, cleared.alias, cleared.ctype) == ("", "", None)
    assert cleared.equipment.weapon == ""
    assert cleared.equipment.unique_key_set == (None, None, None)


def test_set_character_equipment_merges_fields(service, timeline):
    tl = service.set_character_equipment(timeline, "c2", EquipmentUpdate(limit_break=4)).timeline
    tl = service.set_character_equipment(tl, "c2", EquipmentUpdate(common_key_set=("ck2", None, None))).timeline

    equipment = tl.character("c2").equipment
    assert equipment.limit_break == 4
    assert equipment.common_key_set == ("ck2", None, None)

    missing = service.set_character_equipment(tl, "nope", EquipmentUpdate(limit_break=1))
    assert missing.error == MutationError.UNKNOWN_CHARACTER


def test_add_summon_uses_first_catalog_entry(service, timeline):
    result = service.add_summon(timeline)

    assert result.applied
    assert [(s.id, s.name, s.alias) for s in result.timeline.summons] == [("s1", "Turret (X)", "Turret")]
    assert timeline.summons == []


def test_add_summon_capacity(service, timeline):
    tl = timeline
    for _ in range(MAX_SUMMONS):
        tl = service.add_summon(tl).timeline
    assert [s.id for s in tl.summons] == [f"s{i}" for i in range(1, MAX_SUMMONS + 1)]

    result = service.add_summon(tl, "c2")
    assert not result.applied
    assert result.error == MutationError.CAPACITY_EXCEEDED
    assert result.timeline is tl
    assert result.active_actor_id == "c2"


def test_add_place_remove_summon_leaves_no_summon_placements(service, timeline):
    tl = service.add_summon(timeline).timeline
    tl = service.place_actor(tl, 0, "s1", 0, 0).timeline
    assert "s1" in tl.prep.placements

    tl = service.remove_summon(tl, "s1").timeline
    assert tl.summons == []
    assert not any(is_summon_id(k) for k in tl.prep.placements)


def test_remove_summon_renumbers_placements_and_selection(service, timeline):
    tl = timeline
    for _ in range(3):
        tl = service.add_summon(tl).timeline
    tl = service.set_summon_name(tl, "s3", "Drone").timeline
    tl = service.place_actor(tl, 3, "s2", 1, 1).timeline
    tl = service.place_actor(tl, 3, "s3", 2, 2).timeline
    tl = service.place_actor(tl, 5, "s3", 4, 4).timeline

    result = service.remove_summon(tl, "s1", "s3")

    assert [s.id for s in result.timeline.summons] == ["s1", "s2"]
    assert result.timeline.summon("s2").name == "Drone"
    assert result.timeline.phase(3).placements == {"s1": Position(x=1, y=1), "s2": Position(x=2, y=2)}
    assert result.timeline.phase(5).placements == {"s2": Position(x=4, y=4)}
    assert result.active_actor_id == "s2"


def test_remove_selected_summon_falls_back_to_first_character(service, timeline):
    tl = service.add_summon(timeline).timeline
    result = service.remove_summon(tl, "s1", "s1")
    assert result.active_actor_id == "c1"


def test_remove_summon_hands_its_steps_to_first_character(service, timeline):
    tl = service.add_summon(timeline).timeline
    tl = service.add_summon(tl).timeline
    tl = service.set_step(tl, 1, 1, StepUpdate(actor_id="s1", skill="S-first")).timeline
    tl = service.set_step(tl, 1, 2, StepUpdate(actor_id="s2", skill="S-second")).timeline

    result = service.remove_summon(tl, "s1")

    steps = result.timeline.phase(1).steps
    assert [(s.order, s.actor_id, s.skill) for s in steps] == [
        (1, "c1", "S-first"),
        (2, "s1", "S-second"),
    ]
    assert [s.id for s in result.timeline.summons] == ["s1"]


def test_remove_unknown_summon(service, timeline):
    result = service.remove_summon(timeline, "s4", "c1")
    assert result.error == MutationError.UNKNOWN_SUMMON
    assert result.active_actor_id == "c1"


def test_set_summon_name_requires_catalog_entry(service, timeline):
    tl = service.add_summon(timeline).timeline
    assert service.set_summon_name(tl, "s1", "Ghost").error == MutationError.UNKNOWN_OPTION
    renamed = service.set_summon_name(tl, "s1", "Drone").timeline.summon("s1")
    assert (renamed.name, renamed.alias) == ("Drone", "Drone")


def test_renumber_swapped_roster(service, timeline):
    tl = timeline.model_copy(deep=True)
    tl.summons = [Summon(id="s2", name="Drone"), Summon(id="s1", name="Turret (X)")]
    tl.prep.placements = {"s1": Position(x=0, y=0), "s2": Position(x=1, y=0)}

    result = service.renumber_summons(tl, "s2")

    assert [(s.id, s.name) for s in result.timeline.summons] == [("s1", "Drone"), ("s2", "Turret (X)")]
    assert result.timeline.prep.placements == {"s2": Position(x=0, y=0), "s1": Position(x=1, y=0)}
    assert result.active_actor_id == "s1"


def test_place_actor_is_a_move(service, timeline):
    tl = service.place_actor(timeline, 2, "c1", 0, 0).timeline
    tl = service.place_actor(tl, 2, "c1", 5, 6).timeline

    assert tl.phase(2).placements == {"c1": Position(x=5, y=6)}
    assert service.occupancy(tl, 2) == {"5,6": ["c1"]}


def test_place_actor_rejects_occupied_cell(service, timeline):
    tl = service.place_actor(timeline, 1, "c1", 3, 3).timeline
    result = service.place_actor(tl, 1, "c2", 3, 3)

    assert result.error == MutationError.CELL_OCCUPIED
    assert result.timeline is tl
    assert service.place_actor(tl, 1, "c1", 3, 3).applied


def test_place_actor_rejects_every_boss_cell(service, timeline):
    for x in range(8, 11):
        for y in range(8, 11):
            result = service.place_actor(timeline, 0, "c1", x, y)
            assert result.error == MutationError.BOSS_AREA
    assert service.place_actor(timeline, 0, "c1", 7, 8).applied
    assert service.place_actor(timeline, 0, "c1", 11, 10).applied


def test_place_actor_other_rejections(service, timeline):
    assert service.place_actor(timeline, 0, None, 0, 0).error == MutationError.NO_ACTOR
    assert service.place_actor(timeline, 0, "", 0, 0).error == MutationError.NO_ACTOR
    assert service.place_actor(timeline, 0, "s1", 0, 0).error == MutationError.UNKNOWN_ACTOR
    assert service.place_actor(timeline, 0, "c1", 19, 0).error == MutationError.OUT_OF_BOUNDS
    assert service.place_actor(timeline, 0, "c1", -1, 0).error == MutationError.OUT_OF_BOUNDS
    assert service.place_actor(timeline, 8, "c1", 0, 0).error == MutationError.INVALID_PHASE


def test_occupancy_ignores_boss_area_orphans_and_reports_overlaps(service, timeline):
    tl = timeline.model_copy(deep=True)
    tl.prep.placements = {
        "c1": Position(x=9, y=9),
        "ghost": Position(x=0, y=0),
        "c2": Position(x=1, y=1),
        "c3": Position(x=1, y=1),
        "c4": Position(x=30, y=2),
    }

    assert service.occupancy(tl, 0) == {"1,1": ["c2", "c3"]}
    assert service.occupancy(tl, 9) == {}
    # boss-area data is ignored, not deleted
    assert "c1" in tl.prep.placements


def test_ignored_placements_do_not_block_a_cell(service, timeline):
    tl = timeline.model_copy(deep=True)
    tl.prep.placements = {"ghost": Position(x=0, y=0)}
    assert service.occupancy(tl, 0) == {}

    result = service.place_actor(tl, 0, "c1", 0, 0)

    assert result.applied
    assert service.occupancy(result.timeline, 0) == {"0,0": ["c1"]}


def test_copy_from_previous(service, timeline):
    tl = service.place_actor(timeline, 0, "c1", 1, 2).timeline
    tl = service.set_step(tl, 0, 1, StepUpdate(skill="S1")).timeline
    tl = service.place_actor(tl, 1, "c2", 6, 6).timeline

    copied = service.copy_from_previous(tl, 1).timeline
    assert copied.phase(1).placements == {"c1": Position(x=1, y=2)}
    assert copied.phase(1).steps == copied.phase(0).steps
    assert copied.phase(1).placements["c1"] is not copied.phase(0).placements["c1"]
    assert copied.phase(1).steps[0] is not copied.phase(0).steps[0]

    later = service.copy_from_previous(copied, 2).timeline
    assert later.phase(2).placements == copied.phase(1).placements

    first = service.copy_from_previous(tl, 0)
    assert first.error == MutationError.NOTHING_TO_COPY
    assert first.timeline is tl


def test_copy_phase_between_arbitrary_phases(service, timeline):
    tl = service.place_actor(timeline, 4, "c5", 0, 18).timeline
    copied = service.copy_phase(tl, 4, 7).timeline
    assert copied.phase(7).placements == {"c5": Position(x=0, y=18)}
    assert service.copy_phase(tl, 4, 8).error == MutationError.INVALID_PHASE


def test_set_step_upserts_and_keeps_order(service, timeline):
    tl = service.set_step(timeline, 3, 4, StepUpdate(skill="S4")).timeline
    tl = service.set_step(tl, 3, 2, StepUpdate(actor_id="c3", note="left box")).timeline
    tl = service.set_step(tl, 3, 4, StepUpdate(skill="S4>S2")).timeline

    steps = tl.phase(3).steps
    assert [s.order for s in steps] == [2, 4]
    assert (steps[0].actor_id, steps[0].skill, steps[0].note) == ("c3", "", "left box")
    assert (steps[1].actor_id, steps[1].skill) == ("c1", "S4>S2")


def test_set_step_rejections(service, timeline):
    assert service.set_step(timeline, 0, 6, StepUpdate()).error == MutationError.INVALID_ORDER
    assert service.set_step(timeline, 0, 0, StepUpdate()).error == MutationError.INVALID_ORDER
    assert service.set_step(timeline, -1, 1, StepUpdate()).error == MutationError.INVALID_PHASE
    assert service.set_step(timeline, 0, 1, StepUpdate(actor_id="x9")).error == MutationError.UNKNOWN_ACTOR


def test_clear_step_removes_slot(service, timeline):
    tl = service.set_step(timeline, 1, 1, StepUpdate(skill="S1")).timeline
    tl = service.set_step(tl, 1, 2, StepUpdate(skill="S2")).timeline

    cleared = service.clear_step(tl, 1, 1).timeline
    assert [s.order for s in cleared.phase(1).steps] == [2]
    assert service.clear_step(cleared, 1, 5).applied


def test_prune_orphans_is_idempotent(service, timeline):
    tl = timeline.model_copy(deep=True)
    tl.prep.placements = {"c1": Position(x=0, y=0), "s3": Position(x=1, y=1)}
    tl.turns[6].placements = {"zz": Position(x=2, y=2), "c2": Position(x=3, y=3)}

    once = service.prune_orphans(tl).timeline
    twice = service.prune_orphans(once).timeline

    assert once == twice
    assert once.prep.placements == {"c1": Position(x=0, y=0)}
    assert once.turns[6].placements == {"c2": Position(x=3, y=3)}
    assert "s3" in tl.prep.placements


def test_sanitize_all_equipment_heals_stale_keys(service, timeline):
    tl = service.set_character_name(timeline, "c1", "Bravo").timeline
    tl = tl.model_copy(deep=True)
    tl.characters[0].equipment.unique_key_set = ("kb1", "old", "kb2")
    tl.characters[0].equipment.common_key_set = ("retired", "ck2", None)

    healed = service.sanitize_all_equipment(tl).timeline.character("c1").equipment
    assert healed.unique_key_set == ("kb1", None, "kb2")
    assert healed.common_key_set == (None, "ck2", None)


def test_heal_prunes_and_renumbers(service, timeline):
    tl = timeline.model_copy(deep=True)
    tl.summons = [Summon(id="s4", name="Drone")]
    tl.prep.placements = {"s4": Position(x=0, y=0), "s1": Position(x=5, y=5)}

    result = service.heal(tl, "s4")

    assert [s.id for s in result.timeline.summons] == ["s1"]
    assert result.timeline.prep.placements == {"s1": Position(x=0, y=0)}
    assert result.active_actor_id == "s1"


def test_fallback_weapon_follows_reading_order():
    catalog = OptionCatalog(
        characters=[CharacterOption(name="Delta", type="HG")],
        weapons=[
            WeaponOption(name="Zeta gun", yomi="zeta", type="HG"),
            WeaponOption(name="Gun 10", type="HG"),
            WeaponOption(name="Gun 9", type="HG"),
            WeaponOption(name="Alpha gun", yomi="ALPHA", type="HG"),
            WeaponOption(name="Rifle", type="AR"),
        ],
    )
    assert catalog.weapon_names_for_type("HG") == ["Alpha gun", "Gun 9", "Gun 10", "Zeta gun"]

    service = TimelineService(catalog=catalog, default_title="t")
    tl = service.set_character_name(service.default_timeline(), "c1", "Delta").timeline
    assert tl.character("c1").equipment.weapon == "Alpha gun"


def test_set_title(service, timeline):
    result = service.set_title(timeline, "Boss rush")
    assert result.timeline.title == "Boss rush"
    assert timeline.title == "新規TL"
