"""Tests for load-time normalization of raw post records."""

import json

from app.modules.posts.models.post import Post, normalize_posts


class TestDocumentShape:
    def test_accepts_bare_array(self):
        (post,) = normalize_posts([{"id": "1", "title": "T"}])
        assert isinstance(post, Post)
        assert post.id == "1"

    def test_accepts_legacy_posts_object(self):
        assert [p.id for p in normalize_posts({"posts": [{"id": "1"}]})] == ["1"]

    def test_other_shapes_are_empty(self):
        assert normalize_posts({"foo": 1}) == []
        assert normalize_posts("text") == []
        assert normalize_posts(None) == []

    def test_skips_non_object_entries(self):
        assert [p.id for p in normalize_posts([1, "x", None, {"id": "ok"}])] == ["ok"]

    def test_drops_duplicate_ids_keeping_first(self):
        posts = normalize_posts([{"id": "1", "title": "first"}, {"id": "1", "title": "second"}])
        assert [p.title for p in posts] == ["first"]


class TestFieldDefaults:
    def test_missing_counters_default_to_zero(self):
        (post,) = normalize_posts([{"id": "1", "likes": 4}])
        assert post.likes == 4
        assert post.dislikes == 0

    def test_bad_counters_are_clamped(self):
        (post,) = normalize_posts([{"id": "1", "likes": -3, "dislikes": "many"}])
        assert (post.likes, post.dislikes) == (0, 0)

    def test_out_of_range_numbers_fall_back(self):
        raw = json.loads(
            '[{"id": "a", "likes": 1e400, "dislikes": -Infinity, "createdAt": 1e400, "updatedAt": NaN},'
            ' {"id": "b", "likes": 3}]'
        )
        a, b = normalize_posts(raw)
        assert (a.likes, a.dislikes) == (0, 0)
        assert 0 < a.created_at < 10 ** 15
        assert a.updated_at == a.created_at
        assert b.likes == 3

    def test_huge_integer_counter_becomes_zero(self):
        (post,) = normalize_posts([{"id": "1", "likes": 10 ** 400, "createdAt": 10 ** 400}])
        assert post.likes == 0
        assert post.created_at < 10 ** 15

    def test_comment_with_infinite_timestamp_uses_post_time(self):
        (post,) = normalize_posts([{"id": "1", "createdAt": 7, "comments": [{"content": "c", "createdAt": float("inf")}]}])
        assert post.comments[0].created_at == 7

    def test_blank_author_becomes_anonymous(self):
        (post,) = normalize_posts([{"id": "1", "author": "   "}])
        assert post.author == "Anonymous"

    def test_timestamps(self):
        (post,) = normalize_posts([{"id": "1", "createdAt": 1000}])
        assert post.created_at == 1000
        assert post.updated_at == 1000

    def test_missing_created_at_uses_load_time(self):
        (post,) = normalize_posts([{"id": "1"}])
        assert post.created_at > 0
        assert post.updated_at == post.created_at

    def test_blank_image_url_is_absent(self):
        (post,) = normalize_posts([{"id": "1", "imageUrl": ""}])
        assert post.image_url is None

    def test_numeric_id_becomes_string(self):
        (post,) = normalize_posts([{"id": 17}])
        assert post.id == "17"

    def test_comments_are_normalized(self):
        (post,) = normalize_posts([{
            "id": "1",
            "createdAt": 50,
            "comments": [{"content": "hi"}, "junk", {"author": "Bo", "content": "yo", "createdAt": 70}],
        }])
        assert [(c.author, c.content, c.created_at) for c in post.comments] == [
            ("Anonymous", "hi", 50),
            ("Bo", "yo", 70),
        ]
        assert post.comments[0].id is None

    def test_non_list_comments_become_empty(self):
        (post,) = normalize_posts([{"id": "1", "comments": "nope"}])
        assert post.comments == []


class TestLegacyIds:
    def test_missing_id_is_stable_across_reads(self):
        raw = [{"title": "no id", "createdAt": 5}]
        first = normalize_posts(raw)[0].id
        second = normalize_posts(raw)[0].id
        assert first.startswith("legacy-")
        assert first == second

    def test_identical_records_without_ids_are_kept_apart(self):
        raw = [{"title": "same", "createdAt": 5}, {"title": "same", "createdAt": 5}]
        posts = normalize_posts(raw)
        assert len(posts) == 2
        assert posts[0].id != posts[1].id
        assert [p.id for p in normalize_posts(raw)] == [p.id for p in posts]

    def test_serializes_camel_case(self):
        (post,) = normalize_posts([{"id": "1", "createdAt": 1}])
        data = post.to_json()
        assert data["createdAt"] == 1
        assert "created_at" not in data
