"""Unit tests for local search scoring and ranking."""

from legal_chatbot.assistant.ranking import (
    DEFAULT_TITLE,
    LOCAL_CATEGORY,
    MAX_RESULTS,
    build_law_link,
    build_search_base,
    law_to_source,
    rank_laws,
    score_law,
    tokenize,
)
from legal_chatbot.core.database.entities.laws import Law


def _law(**kwargs) -> Law:
    return Law(**kwargs)


class TestSearchBase:
    def test_query_only(self):
        assert build_search_base("luật đất đai") == "luật đất đai"

    def test_includes_previous_user_turns(self):
        history = [
            {"role": "user", "content": "hợp đồng"},
            {"role": "assistant", "content": "trả lời"},
            {"role": "user", "content": "lao động"},
        ]

        assert build_search_base("thời hạn", history) == "hợp đồng lao động thời hạn"

    def test_keeps_last_ten_user_turns(self):
        history = [{"role": "user", "content": f"u{i}"} for i in range(12)]

        base = build_search_base("q", history)

        assert base.startswith("u2 ")
        assert "u1 " not in base


def test_tokenize_drops_short_words():
    assert tokenize("Luật Đất đai là gì") == ["luật", "đất", "đai"]


class TestScoring:
    def test_score_components(self):
        law = _law(title="Luật Lao động", so_hieu="45/2019/QH14", noi_dung="Bộ luật lao động quy định")

        # "lao động" in title (+10), both terms in title (+10), phrase in body (+2), both terms in body (+2)
        assert score_law(law, "lao động", ["lao", "động"]) == 24

    def test_document_number_bonus(self):
        law = _law(title="Bộ luật", so_hieu="45/2019/QH14", noi_dung="")

        assert score_law(law, "45/2019/qh14", ["45/2019/qh14"]) == 8

    def test_missing_fields(self):
        assert score_law(_law(), "luật", ["luật"]) == 0

    def test_rank_filters_and_orders(self):
        weak = _law(id=1, title="Khác", noi_dung="thuế")
        strong = _law(id=2, title="Luật thuế", noi_dung="luật thuế")
        medium = _law(id=3, title="Nghị định thuế", noi_dung="")

        ranked = rank_laws([weak, strong, medium], "luật thuế", ["luật", "thuế"])

        assert [item.law.id for item in ranked] == [2, 3]
        assert ranked[0].score > ranked[1].score

    def test_rank_limits_results(self):
        laws = [_law(id=i, title="Luật thuế") for i in range(8)]

        assert len(rank_laws(laws, "thuế", ["thuế"])) == MAX_RESULTS


class TestLinks:
    def test_direct_link_preferred(self):
        assert build_law_link(_law(link="https://a", source="https://b")) == "https://a"

    def test_fallback_to_search_by_document_number(self):
        link = build_law_link(_law(so_hieu="25/2017/QĐ-UBND"))

        assert link is not None
        assert link.startswith("https://thuvienphapluat.vn/van-ban/tim-kiem?keyword=")
        assert "25%2F2017%2F" in link

    def test_no_link(self):
        assert build_law_link(_law(title="x")) is None

    def test_law_to_source_defaults(self):
        source = law_to_source(_law(id=7))

        assert source.id == 7
        assert source.title == DEFAULT_TITLE
        assert source.category == LOCAL_CATEGORY
        assert source.link is None
