from fastapi import status
from blogmod.models.comment import Comment, CommentReport

class TestCommentCreation:
    def test_comment_on_published_blog(self, client, published_blog, reader):
        user, headers = reader
        response = client.post(f"/api/blogs/{published_blog['id']}/comments", json={"content": "Great post!"}, headers=headers)
        assert response.status_code == status.HTTP_201_CREATED
        data = response.json()
        assert data["content"] == "Great post!"
        assert data["author_id"] == user["id"]
        assert data["depth"] == 0
        assert data["parent_comment_id"] is None

    def test_comment_on_pending_blog(self, client, author, reader, create_blog):
        blog = create_blog(author[1])
        response = client.post(f"/api/blogs/{blog['id']}/comments", json={"content": "Too early"}, headers=reader[1])
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["code"] == "invalid_state"

    def test_comment_on_missing_blog(self, client, reader):
        response = client.post("/api/blogs/missing/comments", json={"content": "Hello"}, headers=reader[1])
        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_empty_comment(self, client, published_blog, reader):
        response = client.post(f"/api/blogs/{published_blog['id']}/comments", json={"content": "   "}, headers=reader[1])
        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

    def test_comment_too_long(self, client, published_blog, reader):
        response = client.post(f"/api/blogs/{published_blog['id']}/comments", json={"content": "x" * 501}, headers=reader[1])
        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

    def test_reply_depth_limit(self, client, published_blog, reader, db_session):
        url = f"/api/blogs/{published_blog['id']}/comments"
        parent_id = None
        for expected_depth, label in enumerate("ABCD"):
            response = client.post(url, json={"content": label, "parent_comment_id": parent_id}, headers=reader[1])
            assert response.status_code == status.HTTP_201_CREATED
            assert response.json()["depth"] == expected_depth
            parent_id = response.json()["id"]

        response = client.post(url, json={"content": "E", "parent_comment_id": parent_id}, headers=reader[1])
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["code"] == "depth_exceeded"
        assert db_session.query(Comment).filter(Comment.content == "E").count() == 0

    def test_reply_to_missing_parent(self, client, published_blog, reader):
        response = client.post(
            f"/api/blogs/{published_blog['id']}/comments",
            json={"content": "Orphan", "parent_comment_id": "missing"},
            headers=reader[1]
        )
        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_reply_to_deleted_parent(self, client, published_blog, reader):
        url = f"/api/blogs/{published_blog['id']}/comments"
        parent = client.post(url, json={"content": "Soon gone"}, headers=reader[1]).json()
        client.delete(f"/api/comments/{parent['id']}", headers=reader[1])

        response = client.post(url, json={"content": "Reply", "parent_comment_id": parent["id"]}, headers=reader[1])
        assert response.status_code == status.HTTP_404_NOT_FOUND

class TestCommentListing:
    def test_threads(self, client, published_blog, reader, author):
        url = f"/api/blogs/{published_blog['id']}/comments"
        first = client.post(url, json={"content": "First"}, headers=reader[1]).json()
        client.post(url, json={"content": "Second"}, headers=reader[1])
        client.post(url, json={"content": "Reply one", "parent_comment_id": first["id"]}, headers=author[1])
        client.post(url, json={"content": "Reply two", "parent_comment_id": first["id"]}, headers=reader[1])

        response = client.get(url)
        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["pagination"]["total"] == 2
        assert [c["content"] for c in data["comments"]] == ["Second", "First"]
        assert [r["content"] for r in data["comments"][1]["replies"]] == ["Reply one", "Reply two"]

    def test_deleted_comments_hidden(self, client, published_blog, reader):
        url = f"/api/blogs/{published_blog['id']}/comments"
        comment = client.post(url, json={"content": "Delete me"}, headers=reader[1]).json()
        response = client.delete(f"/api/comments/{comment['id']}", headers=reader[1])
        assert response.status_code == status.HTTP_204_NO_CONTENT

        assert client.get(url).json()["comments"] == []
        assert client.get(f"/api/comments/{comment['id']}").status_code == status.HTTP_404_NOT_FOUND

    def test_comments_of_unpublished_blog(self, client, author, create_blog):
        blog = create_blog(author[1])
        response = client.get(f"/api/blogs/{blog['id']}/comments")
        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_my_comments(self, client, published_blog, reader, author):
        url = f"/api/blogs/{published_blog['id']}/comments"
        client.post(url, json={"content": "Mine"}, headers=reader[1])
        client.post(url, json={"content": "Not mine"}, headers=author[1])

        response = client.get("/api/users/me/comments", headers=reader[1])
        assert response.status_code == status.HTTP_200_OK
        assert [c["content"] for c in response.json()["comments"]] == ["Mine"]

class TestCommentEditing:
    def test_author_updates(self, client, published_blog, reader):
        comment = client.post(f"/api/blogs/{published_blog['id']}/comments", json={"content": "Typo"}, headers=reader[1]).json()
        response = client.put(f"/api/comments/{comment['id']}", json={"content": "Fixed"}, headers=reader[1])
        assert response.status_code == status.HTTP_200_OK
        assert response.json()["content"] == "Fixed"
        assert response.json()["depth"] == 0

    def test_other_user_cannot_update_or_delete(self, client, published_blog, reader, author):
        comment = client.post(f"/api/blogs/{published_blog['id']}/comments", json={"content": "Mine"}, headers=reader[1]).json()
        assert client.put(f"/api/comments/{comment['id']}", json={"content": "Hijack"}, headers=author[1]).status_code == status.HTTP_403_FORBIDDEN
        assert client.delete(f"/api/comments/{comment['id']}", headers=author[1]).status_code == status.HTTP_403_FORBIDDEN

    def test_admin_can_delete(self, client, published_blog, reader, admin, db_session):
        comment = client.post(f"/api/blogs/{published_blog['id']}/comments", json={"content": "Spam"}, headers=reader[1]).json()
        response = client.delete(f"/api/comments/{comment['id']}", headers=admin[1])
        assert response.status_code == status.HTTP_204_NO_CONTENT

        # soft delete keeps the row
        stored = db_session.get(Comment, comment["id"])
        assert stored is not None
        assert stored.is_active is False

class TestCommentReports:
    def test_report_once(self, client, published_blog, reader, author, admin, db_session):
        comment = client.post(f"/api/blogs/{published_blog['id']}/comments", json={"content": "Rude"}, headers=reader[1]).json()
        url = f"/api/comments/{comment['id']}:reportComment"

        response = client.post(url, json={}, headers=author[1])
        assert response.status_code == status.HTTP_200_OK
        assert response.json()["is_reported"] is True

        response = client.post(url, json={"reason": "again"}, headers=author[1])
        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.json()["code"] == "duplicate_report"

        reports = db_session.query(CommentReport).filter(CommentReport.comment_id == comment["id"]).all()
        assert len(reports) == 1
        assert reports[0].reason == "Inappropriate content"

        reported = client.get("/api/admin/comments/reported", headers=admin[1]).json()
        assert [c["id"] for c in reported["comments"]] == [comment["id"]]
        assert len(reported["comments"][0]["reported_by"]) == 1

    def test_cannot_report_own_comment(self, client, published_blog, reader):
        comment = client.post(f"/api/blogs/{published_blog['id']}/comments", json={"content": "Mine"}, headers=reader[1]).json()
        response = client.post(f"/api/comments/{comment['id']}:reportComment", json={"reason": "oops"}, headers=reader[1])
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["code"] == "self_action"

    def test_reported_list_requires_admin(self, client, reader):
        response = client.get("/api/admin/comments/reported", headers=reader[1])
        assert response.status_code == status.HTTP_403_FORBIDDEN

class TestCommentsOfHiddenBlogs:
    def test_single_comment_follows_blog_visibility(self, client, published_blog, reader, author, admin):
        comment = client.post(f"/api/blogs/{published_blog['id']}/comments", json={"content": "Before the takedown"}, headers=reader[1]).json()
        url = f"/api/comments/{comment['id']}"
        assert client.get(url).status_code == status.HTTP_200_OK

        client.post(f"/api/admin/blogs/{published_blog['id']}:hideBlog", headers=admin[1])

        assert client.get(url).status_code == status.HTTP_404_NOT_FOUND
        assert client.get(url, headers=author[1]).status_code == status.HTTP_404_NOT_FOUND
        assert client.get(url, headers=reader[1]).status_code == status.HTTP_200_OK
        assert client.get(url, headers=admin[1]).status_code == status.HTTP_200_OK

    def test_cannot_report_comment_of_hidden_blog(self, client, published_blog, reader, author, admin):
        comment = client.post(f"/api/blogs/{published_blog['id']}/comments", json={"content": "Hidden soon"}, headers=reader[1]).json()
        client.post(f"/api/admin/blogs/{published_blog['id']}:hideBlog", headers=admin[1])

        response = client.post(f"/api/comments/{comment['id']}:reportComment", json={}, headers=author[1])
        assert response.status_code == status.HTTP_404_NOT_FOUND

        # the comment author can still fix their own text
        response = client.put(f"/api/comments/{comment['id']}", json={"content": "Edited"}, headers=reader[1])
        assert response.status_code == status.HTTP_200_OK
