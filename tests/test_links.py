"""Tests for markdown image link rewriting."""

from __future__ import annotations

import pytest

from strapi_cache.links import rewrite_fields, rewrite_item, rewrite_links


BASE = "https://cdn.example.com"


class TestRewriteLinks:
    def test_relative_path(self) -> None:
        assert rewrite_links("see ![alt](/img/a.png)", BASE) == (
            "see ![alt](https://cdn.example.com/img/a.png)"
        )

    def test_path_without_leading_slash(self) -> None:
        assert rewrite_links("![a](uploads/b.png)", BASE) == (
            "![a](https://cdn.example.com/uploads/b.png)"
        )

    def test_base_with_trailing_slash(self) -> None:
        assert rewrite_links("![a](/b.png)", BASE + "/") == "![a](https://cdn.example.com/b.png)"

    def test_multiple_images_on_one_line(self) -> None:
        text = "![one](/1.png) and ![two](/2.png)"
        assert rewrite_links(text, BASE) == (
            "![one](https://cdn.example.com/1.png) and ![two](https://cdn.example.com/2.png)"
        )

    def test_empty_alt_text(self) -> None:
        assert rewrite_links("![](/x.png)", BASE) == "![](https://cdn.example.com/x.png)"

    @pytest.mark.parametrize(
        "text",
        [
            "![a](https://other.example.com/b.png)",
            "![a](//cdn.other.com/b.png)",
            "![a](data:image/png;base64,AAAA)",
            "![a]()",
        ],
    )
    def test_absolute_and_empty_paths_untouched(self, text: str) -> None:
        assert rewrite_links(text, BASE) == text

    def test_plain_links_untouched(self) -> None:
        text = "a [link](/about) and no image"
        assert rewrite_links(text, BASE) == text


class TestRewriteFields:
    def test_only_top_level_strings(self) -> None:
        fields = {
            "id": 1,
            "body": "![a](/a.png)",
            "nested": {"body": "![b](/b.png)"},
            "list": ["![c](/c.png)"],
        }

        result = rewrite_fields(fields, BASE)

        assert result["body"] == "![a](https://cdn.example.com/a.png)"
        assert result["nested"] == {"body": "![b](/b.png)"}
        assert result["list"] == ["![c](/c.png)"]
        assert result["id"] == 1

    def test_input_not_mutated(self) -> None:
        fields = {"body": "![a](/a.png)"}
        rewrite_fields(fields, BASE)
        assert fields == {"body": "![a](/a.png)"}


class TestRewriteItem:
    def test_attributes_are_rewritten(self) -> None:
        item = {"id": 1, "attributes": {"body": "![a](/a.png)"}}

        result = rewrite_item(item, BASE)

        assert result["attributes"]["body"] == "![a](https://cdn.example.com/a.png)"
        assert item["attributes"]["body"] == "![a](/a.png)"

    def test_flat_item(self) -> None:
        assert rewrite_item({"id": 1, "body": "![a](/a.png)"}, BASE) == {
            "id": 1,
            "body": "![a](https://cdn.example.com/a.png)",
        }

    def test_non_mapping_untouched(self) -> None:
        assert rewrite_item("![a](/a.png)", BASE) == "![a](/a.png)"
        assert rewrite_item(None, BASE) is None
