import pytest

from cbxdrive.config import KEY_SMART_FOLDERS
from cbxdrive.domain.models import AssetMeta, Rule, SmartFolderDefinition
from cbxdrive.errors import FolderNameError, SmartFolderNotFoundError
from cbxdrive.library.smart_folders import SmartFolderEngine, evaluate_rule, matches
from cbxdrive.settings import PersistedState

from conftest import make_asset


class _Meta:
    def __init__(self, tags):
        self._tags = tags
        self.calls = 0

    def metadata_for(self, asset_id):
        self.calls += 1
        tags = self._tags.get(asset_id)
        return AssetMeta(tags=tuple(tags)) if tags else None


def _ids_factory():
    counter = iter(range(1, 100))
    return lambda: f"smart:gen{next(counter)}"


def test_wide_example_matches_first_and_last():
    assets = [make_asset(i, ratio=r) for i, r in enumerate(["16/9", "3/4", "16/9"])]
    wide = SmartFolderDefinition("smart:w", "Wide", (Rule("ratio", "is", "16/9"),))

    assert [i for i, a in enumerate(assets) if matches(a, wide)] == [0, 2]


def test_is_is_exact_and_contains_is_case_insensitive():
    asset = make_asset(1, title="Summer Campaign")

    assert evaluate_rule(asset, Rule("name", "contains", "CAMPAIGN"))
    assert not evaluate_rule(asset, Rule("name", "is", "summer campaign"))
    assert evaluate_rule(asset, Rule("name", "is", "Summer Campaign"))


def test_unknown_field_or_operator_never_matches():
    asset = make_asset(1)

    assert not evaluate_rule(asset, Rule("color", "is", "neutral"))
    assert not evaluate_rule(asset, Rule("ratio", "startswith", "4"))


def test_adding_a_rule_only_shrinks_matches():
    assets = [
        make_asset(1, title="Hero wide", ratio="16/9"),
        make_asset(2, title="Banner", ratio="16/9"),
        make_asset(3, title="Hero tall", ratio="3/4"),
    ]
    one = SmartFolderDefinition("smart:a", "A", (Rule("ratio", "is", "16/9"),))
    two = SmartFolderDefinition("smart:b", "B", one.rules + (Rule("name", "contains", "hero"),))

    first = {a.id for a in assets if matches(a, one)}
    second = {a.id for a in assets if matches(a, two)}
    assert second <= first
    assert second == {1}


def test_empty_rules_match_everything():
    assert matches(make_asset(1), SmartFolderDefinition("smart:all", "All", ()))


def test_keywords_use_metadata_and_degrade_without_it(state):
    meta = _Meta({1: ["Cats", "outdoor"]})
    engine = SmartFolderEngine(state, meta)
    definition = engine.create("Cats", [Rule("keywords", "contains", "cat")])

    assert [a.id for a in engine.filter_assets([make_asset(1), make_asset(2)], definition)] == [1]
    assert not SmartFolderEngine(state).matches(make_asset(1), definition)


def test_metadata_is_only_fetched_for_keyword_rules(state):
    meta = _Meta({})
    engine = SmartFolderEngine(state, meta)
    ratio_only = engine.get("smart:wides")

    engine.filter_assets([make_asset(1), make_asset(2)], ratio_only)
    assert meta.calls == 0


def test_defaults_load_when_store_is_empty(state):
    engine = SmartFolderEngine(state)

    assert [d.id for d in engine.definitions] == ["smart:portraits", "smart:wides", "smart:squares"]


def test_create_trims_rules_and_inserts_first(state, store):
    engine = SmartFolderEngine(state, id_factory=_ids_factory())

    created = engine.create("  Heroes ", [Rule("name", "contains", " hero "), Rule("ratio", "is", "  ")])

    assert created == SmartFolderDefinition("smart:gen1", "Heroes", (Rule("name", "contains", "hero"),))
    assert engine.definitions[0] == created
    assert PersistedState(store).smart_folders()[0]["id"] == "smart:gen1"


def test_duplicate_rename_delete(state):
    engine = SmartFolderEngine(state, id_factory=_ids_factory())

    copy = engine.duplicate("smart:wides")
    assert copy.name == "Wide (16:9) (copy)"
    assert copy.rules == engine.get("smart:wides").rules
    assert engine.definitions[0] is copy

    assert engine.rename(copy.id, "Banners").name == "Banners"
    engine.delete(copy.id)
    assert engine.get(copy.id) is None
    assert len(SmartFolderEngine(state).definitions) == 3


def test_management_errors(state):
    engine = SmartFolderEngine(state)

    with pytest.raises(SmartFolderNotFoundError):
        engine.rename("smart:missing", "x")
    with pytest.raises(SmartFolderNotFoundError):
        engine.delete("smart:missing")
    with pytest.raises(FolderNameError):
        engine.create("  ", [])


def test_generated_ids_skip_existing(store):
    store.set_item(KEY_SMART_FOLDERS, '[{"id": "smart:gen1", "name": "Taken", "rules": []}]')
    engine = SmartFolderEngine(PersistedState(store), id_factory=_ids_factory())

    assert engine.create("New", []).id == "smart:gen2"
