"""Tests for note rewriting."""

from __future__ import annotations

import pytest

from vaultpub.config import PublishConfig
from vaultpub.errors import VaultpubUploadError
from vaultpub.matcher import extract_references
from vaultpub.models import ResolvedReference, UploadOutcome
from vaultpub.rewriter import (
    DocumentRewriter,
    alt_text_for,
    canonical_markup,
    strip_properties,
    substitute,
)


def _outcomes(text: str, urls: dict[str, str | None]) -> list[UploadOutcome]:
    """Build outcomes for every reference in *text*; ``None`` means failed."""
    outcomes = []
    for ref in extract_references(text, "assets"):
        resolved = ResolvedReference(
            reference=ref,
            resolved_path=ref.candidate_path,
            full_path=f"/vault/{ref.candidate_path}",
        )
        url = urls[ref.display_name]
        if url is None:
            outcomes.append(UploadOutcome(
                reference=resolved, error=VaultpubUploadError(message="failed"),
            ))
        else:
            outcomes.append(UploadOutcome(reference=resolved, url=url))
    return outcomes


# =========================================================================
# Pure helpers
# =========================================================================


class TestAltText:
    @pytest.mark.parametrize("name, expected", [
        ("cat.png", "cat"),
        ("my-cat_photo.png", "my cat photo"),
        ("images/sub/a-b.jpeg", "a b"),
        ("sketch.excalidraw", "sketch"),
        ("v1.2.png", "v1.2"),
    ])
    def test_derived_from_base_name(self, name, expected):
        assert alt_text_for(name) == expected

    def test_canonical_markup(self):
        assert canonical_markup("cat", "https://x/c.png") == "![cat](https://x/c.png)"


class TestSubstitute:
    def test_wiki_embed_replaced(self):
        text = "Look: ![[cat.png]]"
        out = substitute(text, _outcomes(text, {"cat.png": "https://cdn/x/cat.png"}))
        assert out == "Look: ![cat](https://cdn/x/cat.png)"

    def test_alt_text_disabled(self):
        text = "![[cat.png]]"
        out = substitute(
            text, _outcomes(text, {"cat.png": "https://cdn/cat.png"}), alt_text=False,
        )
        assert out == "![](https://cdn/cat.png)"

    def test_size_suffix_replaced_with_span(self):
        text = "![[cat.png|300]]"
        out = substitute(text, _outcomes(text, {"cat.png": "https://cdn/cat.png"}))
        assert out == "![cat](https://cdn/cat.png)"

    def test_every_occurrence_replaced(self):
        text = "![[cat.png]]\n\n![[cat.png]]"
        out = substitute(text, _outcomes(text, {"cat.png": "https://u"}))
        assert out == "![cat](https://u)\n\n![cat](https://u)"

    def test_failed_outcome_leaves_span(self):
        text = "![[a.png]] ![[b.png]]"
        out = substitute(text, _outcomes(text, {"a.png": None, "b.png": "https://b"}))
        assert out == "![[a.png]] ![b](https://b)"

    def test_inline_replaced(self):
        text = "![old alt](pics/my_dog.png)"
        out = substitute(text, _outcomes(text, {"pics/my_dog.png": "https://d"}))
        assert out == "![my dog](https://d)"

    def test_no_outcomes_is_identity(self):
        assert substitute("plain ![[x.png]]", []) == "plain ![[x.png]]"

    def test_second_pass_is_noop(self):
        text = "![[cat.png]] ![d](dog.gif)"
        outcomes = _outcomes(text, {"cat.png": "https://c", "dog.gif": "https://d"})
        once = substitute(text, outcomes)
        assert substitute(once, outcomes) == once


class TestStripProperties:
    def test_leading_block_removed(self):
        assert strip_properties("---\ntitle: x\n---\nbody") == "body"

    def test_only_first_block_removed(self):
        text = "---\na: 1\n---\nbody\n---\nb: 2\n---\nrest"
        assert strip_properties(text) == "body\n---\nb: 2\n---\nrest"

    def test_block_not_at_start_kept(self):
        text = "intro\n---\na: 1\n---\nbody"
        assert strip_properties(text) == text

    def test_no_block(self):
        assert strip_properties("just text") == "just text"


# =========================================================================
# DocumentRewriter
# =========================================================================


class TestDocumentRewriter:
    @pytest.mark.asyncio
    async def test_document_and_output_diverge_on_properties(self, make_store):
        text = "---\ntitle: x\n---\n![[cat.png]]"
        config = PublishConfig(ignore_properties=True)
        rewriter = DocumentRewriter(make_store(), config)

        result = await rewriter.rewrite(text, _outcomes(text, {"cat.png": "https://c"}))

        assert result.document_text == "---\ntitle: x\n---\n![cat](https://c)"
        assert result.output_text == "![cat](https://c)"
        assert result.substituted == 1

    @pytest.mark.asyncio
    async def test_deletes_only_successful_attachments(self, make_store):
        store = make_store({"assets/a.png": b"A", "assets/b.png": b"B"})
        text = "![[a.png]] ![[b.png]]"
        rewriter = DocumentRewriter(store, PublishConfig(delete_attachments=True))

        result = await rewriter.rewrite(text, _outcomes(text, {"a.png": "https://a", "b.png": None}))

        assert result.deleted == ["assets/a.png"]
        assert store.deleted == ["assets/a.png"]
        assert "assets/b.png" in store.files

    @pytest.mark.asyncio
    async def test_duplicate_attachment_deleted_once(self, make_store):
        store = make_store({"assets/a.png": b"A"})
        text = "![[a.png]] ![[a.png]]"
        rewriter = DocumentRewriter(store, PublishConfig(delete_attachments=True))

        await rewriter.rewrite(text, _outcomes(text, {"a.png": "https://a"}))

        assert store.deleted == ["assets/a.png"]

    @pytest.mark.asyncio
    async def test_no_deletion_when_disabled(self, make_store):
        store = make_store({"assets/a.png": b"A"})
        text = "![[a.png]]"
        rewriter = DocumentRewriter(store, PublishConfig())

        result = await rewriter.rewrite(text, _outcomes(text, {"a.png": "https://a"}))

        assert result.deleted == []
        assert store.deleted == []

    @pytest.mark.asyncio
    async def test_delete_error_does_not_abort(self, make_store):
        store = make_store({"assets/a.png": b"A"})

        async def failing_delete(path: str) -> bool:
            raise PermissionError(path)

        store.delete = failing_delete
        text = "![[a.png]]"
        rewriter = DocumentRewriter(store, PublishConfig(delete_attachments=True))

        result = await rewriter.rewrite(text, _outcomes(text, {"a.png": "https://a"}))

        assert result.document_text == "![a](https://a)"
        assert result.deleted == []
