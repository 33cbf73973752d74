from datetime import datetime

from src.wiki.queries import count_by_category, in_category, matches_query, sort_by_recency
from src.wiki.schemas import PostCreate, PostUpdate


def post(id, updated, title="t", content="", category=None):
    return {
        "id": id,
        "title": title,
        "content": content,
        "category": category,
        "author": "",
        "created_at": updated,
        "updated_at": updated,
    }


class TestHelpers:
    def test_sort_by_recency_is_stable_for_ties(self):
        t = datetime(2025, 1, 1)
        posts = [post("a", t), post("b", datetime(2025, 1, 2)), post("c", t)]
        assert [p["id"] for p in sort_by_recency(posts)] == ["b", "a", "c"]

    def test_in_category_is_exact(self):
        p = post("a", datetime(2025, 1, 1), category="Documentation")
        assert in_category(p, "Documentation")
        assert not in_category(p, "documentation")
        assert not in_category(post("b", datetime(2025, 1, 1), category=None), "")
        assert not in_category(post("c", datetime(2025, 1, 1), category=""), "")

    def test_matches_query_title_or_content(self):
        p = post("a", datetime(2025, 1, 1), title="Setup Guide", content="<p>Install STEPS</p>")
        assert matches_query(p, "guide")
        assert matches_query(p, "steps")
        assert not matches_query(p, "xyz")

    def test_blank_query_matches_nothing(self):
        p = post("a", datetime(2025, 1, 1), title="   spaced   ")
        assert not matches_query(p, "")
        assert not matches_query(p, "   ")
        assert not matches_query(p, None)

    def test_short_query_is_not_gated(self):
        assert matches_query(post("a", datetime(2025, 1, 1), title="Go"), "g")

    def test_count_by_category_skips_uncategorized(self):
        t = datetime(2025, 1, 1)
        posts = [post("a", t, category="News"), post("b", t, category="Docs"), post("c", t), post("d", t, category="News")]
        assert count_by_category(posts) == {"Docs": 1, "News": 2}


class TestRepositoryQueries:
    def test_list_all_sorted_by_updated_at_desc(self, any_repo, clock):
        a = any_repo.create_post(PostCreate(title="A"))
        clock.advance(1)
        b = any_repo.create_post(PostCreate(title="B"))
        clock.advance(1)
        c = any_repo.create_post(PostCreate(title="C"))
        assert [p["id"] for p in any_repo.list_all_posts()] == [c["id"], b["id"], a["id"]]

        clock.advance(1)
        any_repo.update_post(a["id"], PostUpdate(content="touched"))
        assert [p["id"] for p in any_repo.list_all_posts()] == [a["id"], c["id"], b["id"]]

    def test_older_post_sorts_last(self, any_repo, clock):
        newer = any_repo.create_post(PostCreate(title="Newer"))
        clock.advance(-3600)
        older = any_repo.create_post(PostCreate(title="Older"))
        assert [p["id"] for p in any_repo.list_all_posts()] == [newer["id"], older["id"]]

    def test_equal_timestamps_keep_a_repeatable_order(self, any_repo):
        ids = [any_repo.create_post(PostCreate(title=f"P{i}"))["id"] for i in range(5)]
        first = [p["id"] for p in any_repo.list_all_posts()]
        assert first == ids
        assert [p["id"] for p in any_repo.list_all_posts()] == first

    def test_list_by_category(self, any_repo, clock):
        doc = any_repo.create_post(PostCreate(title="Doc", category="Documentation"))
        clock.advance(1)
        any_repo.create_post(PostCreate(title="Lower", category="documentation"))
        any_repo.create_post(PostCreate(title="None"))
        clock.advance(1)
        doc2 = any_repo.create_post(PostCreate(title="Doc 2", category="Documentation"))
        result = any_repo.list_posts_by_category("Documentation")
        assert [p["id"] for p in result] == [doc2["id"], doc["id"]]
        assert any_repo.list_posts_by_category("") == []

    def test_search_is_case_insensitive_over_title_and_content(self, any_repo, clock):
        a = any_repo.create_post(PostCreate(title="Setup Guide"))
        clock.advance(1)
        b = any_repo.create_post(PostCreate(title="Notes", content="<p>see the GUIDE</p>"))
        any_repo.create_post(PostCreate(title="Other"))
        assert [p["id"] for p in any_repo.search_posts("guide")] == [b["id"], a["id"]]
        assert any_repo.search_posts("xyz") == []
        assert any_repo.search_posts("   ") == []

    def test_search_folds_non_ascii(self, any_repo):
        p = any_repo.create_post(PostCreate(title="Über Caching"))
        assert [x["id"] for x in any_repo.search_posts("über")] == [p["id"]]

    def test_category_counts(self, any_repo):
        any_repo.create_post(PostCreate(title="A", category="News"))
        any_repo.create_post(PostCreate(title="B", category="News"))
        any_repo.create_post(PostCreate(title="C"))
        assert any_repo.category_counts() == {"News": 2}

    def test_queries_do_not_mutate_store(self, repo):
        p = repo.create_post(PostCreate(title="A"))
        listed = repo.list_all_posts()
        listed[0]["title"] = "changed"
        assert repo.get_post(p["id"])["title"] == "A"
