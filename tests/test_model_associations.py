"""
Tests for associations — accessors, foreign keys and deferred saves.
"""

import pytest

from modelkit.adapters import MemoryAdapter
from modelkit.faults import AssociationFault
from modelkit.models import AssociationKind, build_association_methods


class FailingAdapter(MemoryAdapter):
    """Fails when asked to save an item with a given label."""

    def __init__(self, fail_on):
        super().__init__()
        self.fail_on = fail_on
        self.saved_labels = []

    async def save(self, data, **opts):
        if data.label == self.fail_on:
            raise RuntimeError(f"cannot store {data.label}")
        self.saved_labels.append(data.label)
        return await super().save(data, **opts)


async def saved_user(User, login="mde"):
    user = User.create({"login": login})
    await user.save()
    return user


class TestAccessorTable:
    """Accessor names derived at registration."""

    def test_user_accessors(self, store):
        table = build_association_methods(store.description("User"))
        assert set(table) == {"get_accounts", "add_account", "get_profile", "set_profile"}
        assert table["add_account"].model_name == "Account"
        assert table["get_accounts"].kind is AssociationKind.HAS_MANY

    def test_belongs_to_accessors(self, store):
        table = build_association_methods(store.description("Account"))
        assert set(table) == {"get_user", "set_user"}

    def test_accessors_are_bound(self, User):
        user = User.create({"login": "mde"})
        assert callable(user.get_accounts)
        assert callable(user.add_account)


class TestCreateAssociation:
    """Wiring foreign keys and queuing dependents."""

    @pytest.mark.asyncio
    async def test_add_sets_key_and_queues(self, User, Account):
        user = await saved_user(User)
        account = Account.create({"label": "checking"})
        user.add_account(account)
        assert account.userId == user.id
        assert user._unsaved_associations == [account]

    @pytest.mark.asyncio
    async def test_set_parent_queues_on_parent(self, User, Account):
        user = await saved_user(User)
        account = Account.create({"label": "checking"})
        account.set_user(user)
        assert account.userId == user.id
        assert user._unsaved_associations == [account]
        assert account._unsaved_associations == []

    def test_set_unsaved_parent_rejected(self, User, Account):
        user = User.create({"login": "mde"})
        account = Account.create({"label": "checking"})
        with pytest.raises(AssociationFault):
            account.set_user(user)
        assert account.userId is None
        assert user._unsaved_associations == []
        assert account._unsaved_associations == []

    def test_add_to_unsaved_owner_rejected(self, User, Account):
        user = User.create({"login": "mde"})
        account = Account.create({"label": "checking"})
        with pytest.raises(AssociationFault):
            user.add_account(account)
        assert account.userId is None
        assert user._unsaved_associations == []

    @pytest.mark.asyncio
    async def test_create_association_by_name(self, User, Profile):
        user = await saved_user(User)
        profile = Profile.create({"bio": "hi"})
        user.create_association("Profile", "hasOne", profile)
        assert profile.userId == user.id
        assert user._unsaved_associations == [profile]


class TestFlush:
    """Queued items are saved by the owner's next save()."""

    @pytest.mark.asyncio
    async def test_owner_save_flushes_queue(self, User, Account):
        user = await saved_user(User)
        first = Account.create({"label": "a"})
        second = Account.create({"label": "b"})
        user.add_account(first)
        user.add_account(second)

        await user.save()

        assert first._saved and second._saved
        assert user._unsaved_associations == []
        accounts = await user.get_accounts(sort="label")
        assert [a.label for a in accounts] == ["a", "b"]

    @pytest.mark.asyncio
    async def test_flush_skips_saved_items(self, User, Account):
        user = await saved_user(User)
        account = Account.create({"label": "a"})
        user.add_account(account)
        await account.save()
        flushed = await user.associations.flush()
        assert flushed == []
        assert len(await Account.all()) == 1

    @pytest.mark.asyncio
    async def test_flush_order_and_abort(self, store, User, Account):
        failing = FailingAdapter(fail_on="b")
        store.set_adapter(failing, "Account")

        user = await saved_user(User)
        items = [Account.create({"label": label}) for label in ("a", "b", "c")]
        for item in items:
            user.add_account(item)

        with pytest.raises(RuntimeError):
            await user.save()

        assert failing.saved_labels == ["a"]
        assert [i._saved for i in items] == [True, False, False]
        assert user._unsaved_associations == [items[2]]


class TestGetAssociation:
    """Fetching associated items."""

    @pytest.mark.asyncio
    async def test_has_many(self, User, Account):
        user = await saved_user(User)
        other = await saved_user(User, "other")
        for owner, label in ((user, "a"), (user, "b"), (other, "c")):
            account = Account.create({"label": label})
            owner.add_account(account)
            await owner.save()

        accounts = await user.get_accounts()
        assert sorted(a.label for a in accounts) == ["a", "b"]
        filtered = await user.get_accounts({"label": "b"})
        assert [a.label for a in filtered] == ["b"]

    @pytest.mark.asyncio
    async def test_has_one(self, User, Profile):
        user = await saved_user(User)
        profile = Profile.create({"bio": "hello"})
        user.set_profile(profile)
        await user.save()

        loaded = await user.get_profile()
        assert loaded.bio == "hello"
        assert loaded.userId == user.id

    @pytest.mark.asyncio
    async def test_belongs_to(self, User, Account):
        user = await saved_user(User)
        account = Account.create({"label": "a"})
        account.set_user(user)
        await user.save()

        owner = await account.get_user()
        assert owner.id == user.id
        assert owner.login == "mde"

    @pytest.mark.asyncio
    async def test_get_association_by_name(self, User, Account):
        user = await saved_user(User)
        user.add_account(Account.create({"label": "a"}))
        await user.save()
        accounts = await user.get_association("Account", AssociationKind.HAS_MANY)
        assert [a.label for a in accounts] == ["a"]

    @pytest.mark.asyncio
    async def test_has_one_missing(self, User):
        user = await saved_user(User)
        assert await user.get_profile() is None
