"""HTTP tests for the posts, reactions and comments endpoints."""

import json
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

from fastapi.testclient import TestClient


def _create(client: TestClient, **body: object) -> dict:
    body.setdefault("title", "A")
    body.setdefault("content", "B")
    resp = client.post("/api/posts", json=body)
    assert resp.status_code == 201, resp.text
    return resp.json()


class TestScenario:
    def test_full_lifecycle(self, client: TestClient):
        resp = client.post("/api/posts", json={"title": "A", "content": "B"})
        assert resp.status_code == 201

        listed = client.get("/api/posts").json()
        assert len(listed) == 1
        assert listed[0]["title"] == "A"
        assert listed[0]["likes"] == 0
        post_id = listed[0]["id"]

        resp = client.post(f"/api/posts/{post_id}/like")
        assert resp.status_code == 200
        assert resp.json() == {"id": post_id, "likes": 1}

        resp = client.delete(f"/api/posts/{post_id}/like")
        assert resp.status_code == 200
        assert resp.json() == {"id": post_id, "likes": 0}

        resp = client.delete(f"/api/posts/{post_id}")
        assert resp.status_code == 204
        assert client.get("/api/posts").json() == []


class TestPosts:
    def test_create_returns_post_with_defaults(self, client: TestClient):
        post = _create(client, title="Hello", content="World")
        assert post["author"] == "Anonymous"
        assert post["likes"] == 0 and post["dislikes"] == 0
        assert post["comments"] == []
        assert post["createdAt"] == post["updatedAt"]
        assert post["imageUrl"] is None

    def test_create_keeps_author_and_image(self, client: TestClient):
        post = _create(client, author="Ann", imageUrl="/uploads/a.png")
        assert post["author"] == "Ann"
        assert post["imageUrl"] == "/uploads/a.png"

    def test_create_requires_title(self, client: TestClient):
        for body in ({"content": "B"}, {"title": "   ", "content": "B"}):
            resp = client.post("/api/posts", json=body)
            assert resp.status_code == 400
            assert resp.json()["detail"] == "Title is required"

    def test_malformed_json_is_400(self, client: TestClient):
        resp = client.post("/api/posts", content=b"{not json", headers={"Content-Type": "application/json"})
        assert resp.status_code == 400

    def test_wrong_field_type_is_400(self, client: TestClient):
        resp = client.post("/api/posts", json={"title": ["A"]})
        assert resp.status_code == 400

    def test_list_is_newest_first(self, client: TestClient, posts_path: Path):
        posts_path.write_text(json.dumps([
            {"id": "old", "title": "old", "createdAt": 1},
            {"id": "new", "title": "new", "createdAt": 2},
        ]), encoding="utf-8")
        assert [p["id"] for p in client.get("/api/posts").json()] == ["new", "old"]

    def test_list_normalizes_legacy_records(self, client: TestClient, posts_path: Path):
        posts_path.write_text(json.dumps([{"id": "x", "title": "T", "likes": 2}]), encoding="utf-8")
        (post,) = client.get("/api/posts").json()
        assert post["dislikes"] == 0
        assert post["author"] == "Anonymous"

    def test_out_of_range_numbers_do_not_break_the_store(self, client: TestClient, posts_path: Path):
        posts_path.write_text(
            '[{"id": "a", "title": "ok", "likes": 1e400, "createdAt": 1e400}, {"id": "b", "title": "fine", "createdAt": 1}]',
            encoding="utf-8",
        )
        resp = client.get("/api/posts")
        assert resp.status_code == 200
        assert {p["id"]: p["likes"] for p in resp.json()} == {"a": 0, "b": 0}

        resp = client.post("/api/posts/a/like")
        assert resp.json() == {"id": "a", "likes": 1}
        assert "1e400" not in posts_path.read_text(encoding="utf-8")

    def test_get_by_id(self, client: TestClient):
        post = _create(client)
        assert client.get(f"/api/posts/{post['id']}").json()["id"] == post["id"]
        assert client.get("/api/posts/missing").status_code == 404

    def test_update_is_partial(self, client: TestClient):
        post = _create(client, title="T", content="C", author="Ann")
        resp = client.put(f"/api/posts/{post['id']}", json={"title": "T2"})
        assert resp.status_code == 200
        updated = resp.json()
        assert (updated["title"], updated["content"], updated["author"]) == ("T2", "C", "Ann")
        assert updated["updatedAt"] >= updated["createdAt"]

    def test_update_missing_post(self, client: TestClient):
        resp = client.put("/api/posts/missing", json={"title": "x"})
        assert resp.status_code == 404
        assert resp.json()["detail"] == "Post not found"

    def test_delete_missing_post(self, client: TestClient):
        assert client.delete("/api/posts/missing").status_code == 404

    def test_persisted_file_is_valid_array(self, client: TestClient, posts_path: Path):
        _create(client)
        data = json.loads(posts_path.read_text(encoding="utf-8"))
        assert isinstance(data, list) and data[0]["title"] == "A"


class TestReactions:
    def test_dislike_round_trip(self, client: TestClient):
        post = _create(client)
        resp = client.post(f"/api/posts/{post['id']}/dislike")
        assert resp.json() == {"id": post["id"], "dislikes": 1}
        resp = client.delete(f"/api/posts/{post['id']}/dislike")
        assert resp.json() == {"id": post["id"], "dislikes": 0}

    def test_unlike_never_goes_negative(self, client: TestClient):
        post = _create(client)
        for _ in range(3):
            assert client.delete(f"/api/posts/{post['id']}/like").json()["likes"] == 0

    def test_like_bumps_updated_at(self, client: TestClient):
        post = _create(client)
        client.post(f"/api/posts/{post['id']}/like")
        after = client.get(f"/api/posts/{post['id']}").json()
        assert after["updatedAt"] >= post["updatedAt"]

    def test_missing_post(self, client: TestClient):
        assert client.post("/api/posts/missing/like").status_code == 404
        assert client.delete("/api/posts/missing/dislike").status_code == 404

    def test_concurrent_likes_over_http(self, client: TestClient):
        post = _create(client)
        url = f"/api/posts/{post['id']}/like"
        with ThreadPoolExecutor(max_workers=8) as pool:
            statuses = list(pool.map(lambda _: client.post(url).status_code, range(20)))

        assert statuses == [200] * 20
        assert client.get(f"/api/posts/{post['id']}").json()["likes"] == 20


class TestComments:
    def test_add_comment(self, client: TestClient):
        post = _create(client)
        resp = client.post(f"/api/posts/{post['id']}/comments", json={"content": "Nice", "author": "Bo"})
        assert resp.status_code == 201
        comment = resp.json()
        assert (comment["author"], comment["content"]) == ("Bo", "Nice")
        assert comment["createdAt"] > 0

        stored = client.get(f"/api/posts/{post['id']}").json()["comments"]
        assert [c["content"] for c in stored] == ["Nice"]

    def test_empty_comment_is_400(self, client: TestClient):
        post = _create(client)
        resp = client.post(f"/api/posts/{post['id']}/comments", json={"content": "  "})
        assert resp.status_code == 400

    def test_comment_on_missing_post_is_404(self, client: TestClient):
        resp = client.post("/api/posts/missing/comments", json={"content": "hi"})
        assert resp.status_code == 404


class TestAppSurface:
    def test_unknown_api_path_is_404(self, client: TestClient):
        assert client.get("/api/nothing-here").status_code == 404

    def test_health(self, client: TestClient):
        assert client.get("/health").json() == {"status": "ok"}

    def test_oversized_body_is_413(self, make_client):
        client = make_client(MAX_BODY_SIZE=64)
        resp = client.post("/api/posts", json={"title": "A", "content": "x" * 500})
        assert resp.status_code == 413

    def test_debug_posts_file_hidden_by_default(self, client: TestClient):
        assert client.get("/api/debug/posts-file").status_code == 404

    def test_debug_posts_file(self, make_client, tmp_path: Path):
        client = make_client(DEBUG=True)
        assert client.get("/api/debug/posts-file").json() == {"file": str(tmp_path / "data" / "posts.json")}

    def test_startup_creates_posts_file(self, client: TestClient, posts_path: Path):
        assert json.loads(posts_path.read_text(encoding="utf-8")) == []
