import pytest
from sqlalchemy.ext.asyncio import AsyncSession
from socialhub.models.post import Post
from socialhub.schemas.post_schema import PostCreate, PostUpdate
from socialhub.services.post_service import PostService
from socialhub.services.user_service import UserService
from socialhub.utils.exceptions import ConflictError, InvalidInputError, NotFoundError

@pytest.fixture
async def ann(db_session: AsyncSession):
    return await UserService(db_session).create_user(
        email="ann@x.com",
        name="Ann",
        password="secret1"
    )

@pytest.mark.asyncio
async def test_password_is_hashed(db_session: AsyncSession, ann):
    assert ann.hashed_password != "secret1"
    assert ann.hashed_password.startswith("$2")

@pytest.mark.asyncio
async def test_duplicate_email_conflict(db_session: AsyncSession, ann):
    with pytest.raises(ConflictError):
        await UserService(db_session).create_user(email="ann@x.com", name="Other", password="secret2")

    stored = await UserService(db_session).get_user_by_email("ann@x.com")
    assert stored.id == ann.id
    assert stored.name == "Ann"

@pytest.mark.asyncio
async def test_verify_password(db_session: AsyncSession, ann):
    user_service = UserService(db_session)

    assert (await user_service.verify_password("ann@x.com", "secret1")).id == ann.id
    assert await user_service.verify_password("ann@x.com", "wrong1") is None
    assert await user_service.verify_password("nobody@x.com", "secret1") is None

@pytest.mark.asyncio
async def test_update_profile_missing_user(db_session: AsyncSession):
    with pytest.raises(NotFoundError):
        await UserService(db_session).update_profile("missing", name="X")

@pytest.mark.asyncio
async def test_update_password_bumps_token_version(db_session: AsyncSession, ann):
    before = ann.token_version

    user = await UserService(db_session).update_password(ann.id, "secret2")

    assert user.token_version == before + 1

@pytest.mark.asyncio
async def test_create_post_for_missing_author(db_session: AsyncSession):
    with pytest.raises(NotFoundError):
        await PostService(db_session).create_post(PostCreate(title="Hi"), "missing")

@pytest.mark.asyncio
async def test_toggle_like_is_its_own_inverse(db_session: AsyncSession, ann):
    post_service = PostService(db_session)
    post = await post_service.create_post(PostCreate(title="Hi"), ann.id)

    liked = await post_service.toggle_like(post.id, "U1")
    assert [like.user_id for like in liked.likes] == ["U1"]

    unliked = await post_service.toggle_like(post.id, "U1")
    assert unliked.likes == []

@pytest.mark.asyncio
async def test_toggle_like_missing_post(db_session: AsyncSession):
    with pytest.raises(NotFoundError):
        await PostService(db_session).toggle_like("missing", "U1")

@pytest.mark.asyncio
async def test_toggle_like_on_post_deleted_mid_toggle(db_session: AsyncSession, ann, monkeypatch):
    post_service = PostService(db_session)
    post = await post_service.create_post(PostCreate(title="Hi"), ann.id)
    check_exists = post_service._ensure_exists

    async def check_then_delete(post_id):
        await check_exists(post_id)
        await post_service.delete_post(post_id)

    monkeypatch.setattr(post_service, "_ensure_exists", check_then_delete)

    with pytest.raises(NotFoundError):
        await post_service.toggle_like(post.id, "U1")

@pytest.mark.asyncio
async def test_add_comment_validation(db_session: AsyncSession, ann):
    post_service = PostService(db_session)
    post = await post_service.create_post(PostCreate(title="Hi"), ann.id)

    with pytest.raises(InvalidInputError):
        await post_service.add_comment(post.id, ann.id, "Ann", "")

    with pytest.raises(NotFoundError):
        await post_service.add_comment("missing", ann.id, "Ann", "hello")

@pytest.mark.asyncio
async def test_comments_append_in_order(db_session: AsyncSession, ann):
    post_service = PostService(db_session)
    post = await post_service.create_post(PostCreate(title="Hi"), ann.id)

    for i in range(5):
        post = await post_service.add_comment(post.id, ann.id, "Ann", f"c{i}")

    assert [comment.text for comment in post.comments] == ["c0", "c1", "c2", "c3", "c4"]
    timestamps = [comment.created_at for comment in post.comments]
    assert timestamps == sorted(timestamps)

@pytest.mark.asyncio
async def test_update_post_partial(db_session: AsyncSession, ann):
    post_service = PostService(db_session)
    post = await post_service.create_post(PostCreate(title="Hi", description="desc"), ann.id)

    updated = await post_service.update_post(post.id, PostUpdate(title="Hello"))

    assert updated.title == "Hello"
    assert updated.description == "desc"
    assert updated.user_name == "Ann"

@pytest.mark.asyncio
async def test_delete_user_cascade_includes_legacy_posts(db_session: AsyncSession, ann):
    user_service = UserService(db_session)
    post_service = PostService(db_session)
    bob = await user_service.create_user(email="bob@x.com", name="Bob", password="secret1")

    await post_service.create_post(PostCreate(title="own"), ann.id)
    bob_post = await post_service.create_post(PostCreate(title="bob's"), bob.id)

    # Older record attributed by email under a previous id
    db_session.add(Post(title="legacy", user_id="old-id", user_email="ann@x.com", user_name="Ann"))
    await db_session.commit()

    await post_service.toggle_like(bob_post.id, ann.id)

    removed = await user_service.delete_user_cascade(ann.id)

    assert removed == 2
    assert await user_service.get_user_by_id(ann.id) is None
    assert [post.id for post in await post_service.list_posts()] == [bob_post.id]

@pytest.mark.asyncio
async def test_delete_user_cascade_skips_posts_of_reassigned_email(db_session: AsyncSession):
    user_service = UserService(db_session)
    post_service = PostService(db_session)
    bob = await user_service.create_user(email="bob@x.com", name="Bob", password="secret1")
    bob_post = await post_service.create_post(PostCreate(title="b1"), bob.id)
    await post_service.add_comment(bob_post.id, bob.id, "Bob", "first")

    await user_service.update_profile(bob.id, email="bob@new.com")
    ann = await user_service.create_user(email="bob@x.com", name="Ann", password="secret1")
    await post_service.toggle_like(bob_post.id, ann.id)

    removed = await user_service.delete_user_cascade(ann.id)

    assert removed == 0
    kept = await post_service.get_post(bob_post.id)
    assert kept.user_email == "bob@x.com"
    assert [comment.text for comment in kept.comments] == ["first"]
    assert [like.user_id for like in kept.likes] == [ann.id]

@pytest.mark.asyncio
async def test_delete_missing_user(db_session: AsyncSession):
    with pytest.raises(NotFoundError):
        await UserService(db_session).delete_user_cascade("missing")
