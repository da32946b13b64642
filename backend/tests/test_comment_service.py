"""
Blog API - Comment Service Unit Tests
=====================================

What we test:
    ✅ Create requires an existing post and author
    ✅ Only content changes on update; post and author are fixed
    ✅ Ownership for update and delete
    ✅ Listing a missing post → 404, an empty post → empty page
"""

import pytest

from blogapi.exceptions import NotFoundError, PermissionDeniedError, ValidationError
from blogapi.schemas.post import CommentRequest
from blogapi.services.comment_service import CommentService


def _service(comment_repo, post_repo, user_repo):
    return CommentService(comment_repo, post_repo, user_repo)


class TestCommentCreate:

    @pytest.mark.asyncio
    async def test_create_success(self, comment_repo, post_repo, user_repo, alice, make_comment):
        post_repo.exists.return_value = True
        user_repo.get_by_id.return_value = alice
        stored = make_comment("p" * 32, author_id=alice.id, content="First!")
        comment_repo.add.side_effect = None
        comment_repo.add.return_value = stored

        result = await _service(comment_repo, post_repo, user_repo).create(
            CommentRequest(post_id="p" * 32, author_id=alice.id, content="First!")
        )

        assert result.post_id == "p" * 32
        assert result.author_username == "alice"
        assert result.content == "First!"

    @pytest.mark.asyncio
    async def test_create_on_missing_post(self, comment_repo, post_repo, user_repo):
        post_repo.exists.return_value = False

        with pytest.raises(NotFoundError, match="Post not found"):
            await _service(comment_repo, post_repo, user_repo).create(
                CommentRequest(post_id="gone", author_id=1, content="hello")
            )

        comment_repo.add.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_create_with_missing_author(self, comment_repo, post_repo, user_repo):
        post_repo.exists.return_value = True
        user_repo.get_by_id.return_value = None

        with pytest.raises(NotFoundError, match="Author not found"):
            await _service(comment_repo, post_repo, user_repo).create(
                CommentRequest(post_id="p1", author_id=404, content="hello")
            )

        comment_repo.add.assert_not_awaited()


class TestCommentUpdate:

    @pytest.mark.asyncio
    async def test_owner_updates_content(
        self, comment_repo, post_repo, user_repo, alice, make_comment
    ):
        comment = make_comment("p1", author_id=alice.id, content="old")
        comment_repo.get_by_id.return_value = comment

        result = await _service(comment_repo, post_repo, user_repo).update(
            comment.id,
            CommentRequest(post_id="p1", author_id=alice.id, content="new"),
            actor=alice,
        )

        assert result.content == "new"
        comment_repo.save.assert_awaited_once_with(comment)

    @pytest.mark.asyncio
    async def test_post_cannot_change(
        self, comment_repo, post_repo, user_repo, alice, make_comment
    ):
        comment = make_comment("p1", author_id=alice.id, content="old")
        comment_repo.get_by_id.return_value = comment

        with pytest.raises(ValidationError, match="Post of a comment cannot be changed"):
            await _service(comment_repo, post_repo, user_repo).update(
                comment.id,
                CommentRequest(post_id="p2", author_id=alice.id, content="new"),
                actor=alice,
            )

        assert comment.content == "old"

    @pytest.mark.asyncio
    async def test_author_cannot_change(
        self, comment_repo, post_repo, user_repo, alice, bob, make_comment
    ):
        comment = make_comment("p1", author_id=alice.id)
        comment_repo.get_by_id.return_value = comment

        with pytest.raises(ValidationError, match="Author of a comment cannot be changed"):
            await _service(comment_repo, post_repo, user_repo).update(
                comment.id,
                CommentRequest(post_id="p1", author_id=bob.id, content="new"),
                actor=alice,
            )

        comment_repo.save.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_ownership_checked_before_immutable_fields(
        self, comment_repo, post_repo, user_repo, alice, bob, make_comment
    ):
        comment_repo.get_by_id.return_value = make_comment("p1", author_id=alice.id)

        with pytest.raises(PermissionDeniedError):
            await _service(comment_repo, post_repo, user_repo).update(
                "c1",
                CommentRequest(post_id="p2", author_id=bob.id, content="new"),
                actor=bob,
            )

    @pytest.mark.asyncio
    async def test_admin_may_edit(
        self, comment_repo, post_repo, user_repo, alice, admin_user, make_comment
    ):
        comment_repo.get_by_id.return_value = make_comment("p1", author_id=alice.id)

        result = await _service(comment_repo, post_repo, user_repo).update(
            "c1",
            CommentRequest(post_id="p1", author_id=alice.id, content="moderated"),
            actor=admin_user,
        )

        assert result.content == "moderated"


class TestCommentDelete:

    @pytest.mark.asyncio
    async def test_missing_comment(self, comment_repo, post_repo, user_repo, alice):
        comment_repo.get_by_id.return_value = None
        with pytest.raises(NotFoundError, match="Comment not found"):
            await _service(comment_repo, post_repo, user_repo).delete("c1", actor=alice)

    @pytest.mark.asyncio
    async def test_non_owner_forbidden(
        self, comment_repo, post_repo, user_repo, alice, bob, make_comment
    ):
        comment_repo.get_by_id.return_value = make_comment("p1", author_id=alice.id)

        with pytest.raises(PermissionDeniedError, match="not authorized to delete this comment"):
            await _service(comment_repo, post_repo, user_repo).delete("c1", actor=bob)

        comment_repo.delete.assert_not_awaited()


class TestCommentList:

    @pytest.mark.asyncio
    async def test_missing_post(self, comment_repo, post_repo, user_repo):
        post_repo.exists.return_value = False
        with pytest.raises(NotFoundError, match="Post not found"):
            await _service(comment_repo, post_repo, user_repo).list_by_post("gone")

    @pytest.mark.asyncio
    async def test_post_without_comments(self, comment_repo, post_repo, user_repo):
        post_repo.exists.return_value = True
        comment_repo.find_page_by_post.return_value = ([], 0)

        page = await _service(comment_repo, post_repo, user_repo).list_by_post("p1")

        assert page.content == []
        assert page.total_elements == 0
        assert page.last is True

    @pytest.mark.asyncio
    async def test_paging_arguments(
        self, comment_repo, post_repo, user_repo, make_comment
    ):
        post_repo.exists.return_value = True
        comments = [make_comment("p1", author_id=2) for _ in range(3)]
        comment_repo.find_page_by_post.return_value = (comments, 7)
        user_repo.find_usernames.return_value = {2: "bob"}

        page = await _service(comment_repo, post_repo, user_repo).list_by_post(
            "p1", page=2, size=3
        )

        comment_repo.find_page_by_post.assert_awaited_once_with("p1", offset=6, limit=3)
        assert page.total_pages == 3
        assert page.last is True
        assert {c.author_username for c in page.content} == {"bob"}
