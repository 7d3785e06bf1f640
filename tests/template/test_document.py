"""Тесты документа: резолвинг блоков, повторы и финализация."""

import logging

import pytest

from btpl.errors import BlockResolutionError, TemplateStructureError
from btpl.template.context import get_default_context
from btpl.template.document import Document
from btpl.template.tokens import ROOT_SENTINEL

R = ROOT_SENTINEL


class TestParse:
    """Резолвинг блоков в родителя."""

    def test_seed_scenario(self, ctx):
        """Две строки одного блока, затем внешний блок."""
        doc = Document(
            "<!-- block: rows --><!-- block: row -->{v}<!-- /block: row --><!-- /block: rows -->",
            context=ctx,
        )
        doc.assign("v", "a")
        doc.parse("rows.row")
        doc.assign("v", "b")
        doc.parse("rows.row")
        doc.parse("rows")

        assert doc.out() == "ab"

    def test_repeated_parse_accumulates_before_placeholder(self, ctx):
        doc = Document("<!-- block: row -->[{v}]<!-- /block: row -->", context=ctx)
        doc.assign("v", "1")
        doc.parse("row")
        doc.assign("v", "2")
        doc.parse("row")

        assert doc.get_block("") == f"[1][2]{R}.row"

    def test_each_copy_keeps_its_own_assignment(self, ctx):
        doc = Document("<!-- block: row -->{v}={v};<!-- /block: row -->", context=ctx)
        doc.assign("v", "x")
        doc.parse("row")
        doc.assign("v", "y")
        doc.parse("row")

        # локальная переменная заменяет только первое вхождение
        assert doc.out() == "x={v};y={v};"

    def test_parse_without_reassign_leaves_token(self, ctx):
        doc = Document("<!-- block: row -->{v};<!-- /block: row -->", context=ctx)
        doc.assign("v", "first")
        doc.parse("row")
        doc.parse("row")

        assert doc.out() == "first;{v};"

    def test_siblings_land_at_their_own_placeholders(self, ctx):
        doc = Document(
            "<!-- block: a -->A<!-- /block: a -->-<!-- block: b -->B<!-- /block: b -->",
            context=ctx,
        )
        doc.parse("b")
        doc.parse("a")

        assert doc.out() == "A-B"

    def test_similar_sibling_names(self, ctx):
        doc = Document(
            "<!-- block: item_extra -->E<!-- /block: item_extra -->|"
            "<!-- block: item -->I<!-- /block: item -->",
            context=ctx,
        )
        doc.parse("item")

        assert doc.get_block("") == f"{R}.item_extra|I{R}.item"

    def test_unparsed_block_is_dropped(self, ctx):
        doc = Document("start <!-- block: hidden -->secret<!-- /block: hidden --> end", context=ctx)

        assert doc.out() == "start  end"

    def test_global_in_block(self, ctx):
        ctx.assign_global("g", "G")
        doc = Document("<!-- block: b -->{g}|{g}<!-- /block: b -->{g}", context=ctx)
        doc.parse("b")

        assert doc.out() == "G|GG"

    def test_text_right_after_placeholder_survives(self, ctx):
        doc = Document("<!-- block: b -->B<!-- /block: b -->tail", context=ctx)
        assert doc.out() == "tail"

        doc = Document("<!-- block: b -->B<!-- /block: b -->tail", context=ctx)
        doc.parse("b")
        assert doc.out() == "Btail"

    def test_assign_global_goes_to_context(self, ctx):
        doc = Document("{g}", context=ctx)
        doc.assign_global("g", "G")

        assert ctx.globals == {"g": "G"}
        assert doc.out() == "G"

    def test_locals_consumed_by_parse(self, ctx):
        doc = Document("<!-- block: b -->x<!-- /block: b -->", context=ctx)
        doc.assign("unused", "1")
        doc.parse("b")

        assert dict(doc.local_assignments) == {}

    def test_assigned_value_cannot_inject_syntax(self, ctx):
        ctx.add_handler("h", lambda: "HANDLER")
        ctx.assign_global("g", "GLOBAL")
        doc = Document("<!-- block: b -->{v}<!-- /block: b -->", context=ctx)
        doc.assign("v", f"<!-- handler: h -->{{g}}{R}.x")
        doc.parse("b")

        assert doc.out() == f"<!-- handler: h -->{{g}}{R}.x"

    def test_handler_in_block(self, ctx):
        ctx.add_handler("now", lambda: "12:00")
        doc = Document("<!-- block: b -->[<!-- handler: now -->]<!-- /block: b -->", context=ctx)
        doc.parse("b")

        assert doc.out() == "[12:00]"


class TestTextAfterPlaceholder:
    """Текст шаблона сразу за закрывающим маркером блока."""

    @pytest.mark.parametrize("tail", ["USD", "-x", ".Next", "_1", "9"])
    def test_block_followed_by_name_chars(self, ctx, tail):
        doc = Document(f"<!-- block: price -->{{p}}<!-- /block: price -->{tail}", context=ctx, strict=True)
        doc.assign("p", "10")
        doc.parse("price")

        assert doc.out() == f"10{tail}"

    def test_repeated_rows_followed_by_letters(self, ctx):
        doc = Document("<!-- block: row -->{v};<!-- /block: row -->px", context=ctx)
        for v in ("1", "2"):
            doc.assign("v", v)
            doc.parse("row")

        assert doc.out() == "1;2;px"

    @pytest.mark.parametrize("order", [("item", "item_extra"), ("item_extra", "item")])
    def test_similar_siblings_with_tail(self, ctx, order):
        doc = Document(
            "<!-- block: item_extra -->E<!-- /block: item_extra -->|"
            "<!-- block: item -->I<!-- /block: item -->s",
            context=ctx,
            strict=True,
        )
        for name in order:
            doc.parse(name)

        assert doc.out() == "E|Is"

    @pytest.mark.parametrize("order", [("item", "item_extra"), ("item_extra", "item")])
    def test_similar_siblings_reversed_layout(self, ctx, order):
        doc = Document(
            "<!-- block: item -->I<!-- /block: item -->|"
            "<!-- block: item_extra -->E<!-- /block: item_extra -->",
            context=ctx,
            strict=True,
        )
        for name in order:
            doc.parse(name)

        assert doc.out() == "I|E"

    def test_parent_followed_by_dotted_text(self, ctx):
        doc = Document(
            "<!-- block: a -->A<!-- block: b -->B<!-- /block: b --><!-- /block: a -->.c",
            context=ctx,
            strict=True,
        )
        doc.parse("a.b")
        doc.parse("a")

        assert doc.out() == "AB.c"


class TestNestedRepetition:
    """Повторы на нескольких уровнях вложенности."""

    TEMPLATE = (
        "<!-- block: table -->"
        "<!-- block: row --><tr><!-- block: cell --><td>{c}</td><!-- /block: cell --></tr><!-- /block: row -->"
        "<!-- /block: table -->"
    )

    def test_rows_of_cells_with_reset(self, ctx):
        doc = Document(self.TEMPLATE, context=ctx)

        for row in (["1", "2"], ["3"]):
            doc.reset("table.row")
            for value in row:
                doc.assign("c", value)
                doc.parse("table.row.cell")
            doc.parse("table.row")
        doc.parse("table")

        assert doc.out() == "<tr><td>1</td><td>2</td></tr><tr><td>3</td></tr>"

    def test_without_reset_rows_accumulate(self, ctx):
        doc = Document(self.TEMPLATE, context=ctx)

        doc.assign("c", "1")
        doc.parse("table.row.cell")
        doc.parse("table.row")
        doc.assign("c", "2")
        doc.parse("table.row.cell")
        doc.parse("table.row")
        doc.parse("table")

        assert doc.out() == "<tr><td>1</td></tr><tr><td>1</td><td>2</td></tr>"

    def test_reset_restores_subtree(self, ctx):
        doc = Document(self.TEMPLATE, context=ctx)
        doc.assign("c", "1")
        doc.parse("table.row.cell")
        doc.parse("table.row")

        doc.reset("table")

        assert doc.get_block("table") == f"{R}.table.row"
        assert doc.get_block("table.row") == f"<tr>{R}.table.row.cell</tr>"


class TestResolutionMisses:
    """Промахи резолвинга: по умолчанию пропуск, в строгом режиме ошибка."""

    def test_missing_block_is_noop(self, ctx, caplog):
        doc = Document("<!-- block: a -->x<!-- /block: a -->", context=ctx)
        doc.assign("v", "kept")
        before = doc.get_block("")

        with caplog.at_level(logging.WARNING, logger="btpl"):
            doc.parse("nope")

        assert doc.get_block("") == before
        assert dict(doc.local_assignments) == {"v": "kept"}
        assert "nope" in caplog.text

    def test_missing_nested_path_is_noop(self, ctx):
        doc = Document("<!-- block: a -->x<!-- /block: a -->", context=ctx)
        doc.parse("ghost.child")
        doc.parse("a.")

        assert doc.out() == ""

    def test_root_path_is_noop(self, ctx):
        doc = Document("text", context=ctx)
        doc.parse("")

        assert doc.out() == "text"

    def test_strict_missing_block(self, ctx):
        doc = Document("<!-- block: a -->x<!-- /block: a -->", context=ctx, strict=True)

        with pytest.raises(BlockResolutionError) as exc_info:
            doc.parse("a.b")

        assert exc_info.value.path == f"{R}.a.b"

    def test_strict_reset_missing_block(self, ctx):
        doc = Document("x", context=ctx, strict=True)

        with pytest.raises(BlockResolutionError):
            doc.reset("nope")


class TestOut:
    """Финализация документа."""

    def test_blank_lines_collapsed(self, ctx):
        doc = Document(
            "<ul>\n<!-- block: item -->\n<li>{name}</li>\n<!-- /block: item -->\n</ul>\n",
            context=ctx,
        )
        for name in ("x", "y"):
            doc.assign("name", name)
            doc.parse("item")

        assert doc.out() == "<ul>\n<li>x</li>\n<li>y</li>\n</ul>\n"

    def test_whitespace_only_lines_removed(self, ctx):
        doc = Document("a\n   \n\t\nb", context=ctx)
        assert doc.out() == "a\nb"

    def test_trailing_blank_lines_removed(self, ctx):
        doc = Document("a\n\n  \n", context=ctx)
        assert doc.out() == "a"

    def test_variables_at_root(self, ctx):
        doc = Document("<title>{title}</title>", context=ctx)
        doc.assign("title", "Home")
        assert doc.out() == "<title>Home</title>"

    def test_no_placeholders_remain(self, ctx):
        doc = Document(
            "<!-- block: a --><!-- block: b -->B<!-- /block: b --><!-- /block: a -->"
            "<!-- block: c -->C<!-- /block: c -->",
            context=ctx,
        )
        doc.parse("a.b")
        doc.parse("a")
        doc.parse("c")

        out = doc.out()
        assert R not in out
        assert out == "BC"


class TestDocumentSetup:
    """Создание документа."""

    def test_uses_default_context(self):
        doc = Document("{g}")
        assert doc.context is get_default_context()

    def test_structure_error_aborts_construction(self, ctx):
        with pytest.raises(TemplateStructureError):
            Document("<!-- block: a -->never closed", context=ctx)

    def test_block_paths(self, ctx):
        doc = Document("<!-- block: a --><!-- block: b --><!-- /block: b --><!-- /block: a -->", context=ctx)
        assert doc.block_paths() == [R, f"{R}.a", f"{R}.a.b"]
        assert doc.get_block("a.b") == ""
        assert doc.get_block("missing") is None
