import os
import shutil
import sys
import tempfile
from pathlib import Path

import pytest

# Add the project root to the path so tests run without installation
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from indexer.doc_store import DocumentStore
from pipelines.models import Category, Document, Prop, ReferenceEntry, Section


@pytest.fixture
def temp_dir():
    """Create temporary directory for testing."""
    temp_dir = tempfile.mkdtemp()
    yield Path(temp_dir)
    shutil.rmtree(temp_dir)


@pytest.fixture
def store(temp_dir):
    return DocumentStore(temp_dir / "data")


def make_document(name, category=Category.COMPONENT, **overrides):
    """Build a Document with sensible defaults for tests."""
    fields = {
        "title": name.capitalize(),
        "description": f"The {name} documentation page.",
        "url": f"https://fluxui.dev{Category.parse(category).url_prefix}{name}",
    }
    fields.update(overrides)
    return Document(name=name, category=Category.parse(category), **fields)


@pytest.fixture
def sample_corpus(store):
    """A small corpus: a modal page using buttons and a layout using a subheading."""
    modal = make_document(
        "modal",
        title="Modal",
        related=("button", "heading"),
        sections=(
            Section(
                title="Usage",
                content="Open a modal with a trigger.",
                examples=(
                    '<flux:modal.trigger name="edit">\n    <flux:button>Edit</flux:button>\n</flux:modal.trigger>',
                ),
            ),
            Section(
                title="Closing",
                content="Close it from inside.",
                examples=("<flux:modal.close><flux:button>Cancel</flux:button></flux:modal.close>",),
            ),
        ),
        reference={"flux:modal": ReferenceEntry(props=(Prop(name="Name", type="string"),))},
        components_used=("button", "modal.close", "modal.trigger"),
        sub_components=("modal.close", "modal.trigger"),
    )
    button = make_document("button", title="Button", related=("modal",))
    header = make_document(
        "header",
        category=Category.LAYOUT,
        title="Header",
        sections=(Section(title="Basic", examples=("<flux:header><flux:subheading>Hi</flux:subheading></flux:header>",)),),
        components_used=("header", "subheading"),
    )
    for doc in (modal, button, header):
        store.save(doc.category, doc.name, doc)
    return {"modal": modal, "button": button, "header": header}
