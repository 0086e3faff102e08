import json

import pytest

from conftest import make_document
from indexer.build_index import build_usage_index, extract_keywords, find_undocumented, similar_components
from indexer.doc_store import DocumentStore, DATA_DIR_ENV
from pipelines.errors import CorruptDocumentError, InvalidNameError, PersistenceError
from pipelines.models import Category, Prop, ReferenceEntry, Section


class TestPersistence:
    """Saving, loading and finding documents."""

    def test_save_writes_pretty_json(self, store):
        doc = make_document("button", title="Schaltfläche")
        path = store.save(Category.COMPONENT, "button", doc)

        assert path == store.data_path / "components" / "button.json"
        raw = path.read_text(encoding="utf-8")
        assert raw.endswith("\n")
        assert '    "name": "button"' in raw
        assert "https://fluxui.dev/components/button" in raw
        assert "Schaltfläche" in raw
        assert json.loads(raw)["category"] == "component"

    def test_save_replaces_previous_version(self, store):
        store.save(Category.COMPONENT, "button", make_document("button", title="Old"))
        store.save(Category.COMPONENT, "button", make_document("button", title="New"))
        assert store.load(Category.COMPONENT, "button").title == "New"

    def test_load_round_trips_document(self, store, sample_corpus):
        assert store.load(Category.COMPONENT, "modal") == sample_corpus["modal"]

    def test_find_without_category_prefers_components(self, store):
        store.save(Category.GUIDE, "theming", make_document("theming", Category.GUIDE, title="Guide"))
        store.save(Category.COMPONENT, "theming", make_document("theming", title="Component"))
        assert store.find("theming").title == "Component"
        assert store.find("theming", Category.GUIDE).title == "Guide"

    def test_find_missing(self, store, sample_corpus):
        assert store.find("nonexistent") is None
        assert store.find("button", Category.LAYOUT) is None

    def test_find_treats_corrupt_file_as_absent(self, store):
        path = store.data_path / "components" / "broken.json"
        path.parent.mkdir(parents=True)
        path.write_text("{not json", encoding="utf-8")
        assert store.find("broken") is None
        with pytest.raises(CorruptDocumentError):
            store.load(Category.COMPONENT, "broken")

    def test_save_failure_raises_persistence_error(self, temp_dir):
        blocked = temp_dir / "blocked"
        blocked.write_text("not a directory", encoding="utf-8")
        store = DocumentStore(blocked)
        with pytest.raises(PersistenceError):
            store.save(Category.COMPONENT, "button", make_document("button"))

    @pytest.mark.parametrize("name", ["", "../secrets", "nested/button", "..", "a\\b"])
    def test_path_like_names_rejected(self, store, sample_corpus, name):
        with pytest.raises(InvalidNameError):
            store.save(Category.COMPONENT, name, make_document("button"))
        with pytest.raises(InvalidNameError):
            store.find(name)
        assert not (store.data_path / "secrets.json").exists()

    def test_dotted_sub_component_names_allowed(self, store):
        store.save(Category.COMPONENT, "modal.trigger", make_document("modal.trigger"))
        assert store.find("modal.trigger").name == "modal.trigger"

    def test_default_data_path_from_environment(self, monkeypatch, temp_dir):
        monkeypatch.setenv(DATA_DIR_ENV, str(temp_dir / "corpus"))
        assert DocumentStore().data_path == temp_dir / "corpus"


class TestListing:
    """Listing and suggestions."""

    def test_list_by_category(self, store, sample_corpus):
        assert store.list() == {
            Category.COMPONENT: ["button", "modal"],
            Category.LAYOUT: ["header"],
            Category.GUIDE: [],
        }
        assert store.list("layouts") == {Category.LAYOUT: ["header"]}
        assert store.category_of("header") is Category.LAYOUT
        assert store.category_of("nope") is None

    def test_suggest_closest_first(self, store):
        for name in ("button", "badge", "modal", "brand", "input", "icon", "callout"):
            store.save(Category.COMPONENT, name, make_document(name))

        suggestions = store.suggest("buton")
        assert suggestions[0] == "button"
        assert len(suggestions) == 5
        assert "buton" not in suggestions

    def test_suggest_ties_keep_corpus_order(self, store):
        for name in ("cat", "bat"):
            store.save(Category.COMPONENT, name, make_document(name))
        assert store.suggest("hat", limit=2) == ["bat", "cat"]

    def test_suggest_empty_corpus(self, store):
        assert store.suggest("button") == []


class TestIndexes:
    """Search and usage index rebuilds."""

    def test_rebuild_index_keywords(self, store, sample_corpus):
        index = store.rebuild_index()

        assert index.version == "1.0"
        assert [entry.name for entry in index.items] == ["button", "modal", "header"]
        modal = next(entry for entry in index.items if entry.name == "modal")
        doc = sample_corpus["modal"]
        assert set(doc.related) <= set(modal.keywords)
        assert set(doc.components_used) <= set(modal.keywords)
        assert {"modal", "usage", "closing", "name"} <= set(modal.keywords)
        assert len(modal.keywords) == len(set(modal.keywords))

        assert store.load_index() == index
        assert (store.data_path / "index.json").exists()

    def test_missing_title_falls_back_to_name(self, store):
        path = store.data_path / "components" / "navbar.json"
        path.parent.mkdir(parents=True)
        path.write_text('{"name": "navbar", "category": "component"}', encoding="utf-8")
        assert store.rebuild_index().items[0].title == "Navbar"

    def test_empty_title_kept(self, store):
        store.save(Category.COMPONENT, "navbar", make_document("navbar", title=""))
        assert store.rebuild_index().items[0].title == ""

    def test_rebuild_skips_corrupt_documents(self, store, sample_corpus):
        bad = store.data_path / "components" / "zzz.json"
        bad.write_text('{"title": "no name or category"}', encoding="utf-8")
        (store.data_path / "components" / "aaa.json").write_text("[", encoding="utf-8")

        names = [entry.name for entry in store.rebuild_index().items]
        assert names == ["button", "modal", "header"]

    def test_usage_index(self, store, sample_corpus):
        usages = store.rebuild_usage_index()

        assert list(usages.usages) == ["button", "header", "modal.close", "modal.trigger", "subheading"]
        button = usages.get("button")
        assert len(button) == 1
        assert button[0].page == "modal"
        assert button[0].category is Category.COMPONENT
        assert button[0].sections == ("Usage", "Closing")
        assert usages.get("subheading")[0].category is Category.LAYOUT
        assert usages.get("nothing") == ()

    def test_usage_index_is_idempotent(self, store, sample_corpus):
        first = store.rebuild_usage_index()
        second = store.rebuild_usage_index()
        assert first.usages == second.usages
        assert store.load_usages().usages == second.usages

    def test_load_missing_indexes(self, store):
        assert store.load_index() is None
        assert store.load_usages() is None

    def test_find_undocumented_components(self, store, sample_corpus):
        store.rebuild_usage_index()
        found = store.find_undocumented_components()

        assert sorted(found) == ["header", "modal.close", "modal.trigger", "subheading"]
        assert found["modal.close"].kind == "sub_component"
        assert found["modal.close"].parent == "modal"
        assert found["subheading"].kind == "undocumented"
        assert found["subheading"].to_dict() == {
            "type": "undocumented",
            "usages": [{"page": "header", "category": "layout", "sections": ["Basic"]}],
        }

    def test_find_undocumented_without_usages(self, store):
        assert store.find_undocumented_components() == {}


class TestIndexBuilders:
    """Pure index derivations."""

    def test_extract_keywords_order_and_dedup(self):
        doc = make_document(
            "select",
            title="Select Menu",
            related=("menu", "listbox"),
            sections=(Section(title="Searchable"), Section(title="Menu")),
            reference={"flux:select": ReferenceEntry(props=(Prop(name="Variant"), Prop(name="Searchable")))},
            components_used=("select.option", "menu"),
            sub_components=("select.option",),
        )
        assert extract_keywords(doc) == ["select", "menu", "listbox", "searchable", "variant", "select.option"]

    def test_find_undocumented_skips_documented_bases(self):
        docs = [make_document(
            "dropdown",
            sections=(Section(title="Usage", examples=("<flux:dropdown><flux:menu.item /></flux:dropdown>",)),),
            components_used=("dropdown", "menu.item"),
        )]
        usages = build_usage_index(docs)
        found = find_undocumented(usages, ["dropdown", "menu"])
        assert list(found) == ["menu.item"]
        assert found["menu.item"].parent == "menu"

    def test_similar_components(self):
        docs = [make_document(
            "card",
            sections=(Section(title="Usage", examples=("<flux:heading /><flux:subheading />",)),),
            components_used=("heading", "subheading"),
        )]
        usages = build_usage_index(docs)
        assert similar_components(usages, "headng") == ["heading"]
        assert similar_components(usages, "xyz") == []
