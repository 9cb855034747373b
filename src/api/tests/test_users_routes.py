"""Unit tests for /users routes."""

import unittest
from datetime import datetime, timedelta, timezone

from fastapi.testclient import TestClient

from api.main import app
from api.dependencies import get_user_repo
from api.security import create_access_token
from adapter.fake.user_repository import FakeUserRepository
from domain.model.user import GOOGLE_PROVIDER, User, UserRole

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


class UsersRoutesTestCase(unittest.TestCase):

    def setUp(self):
        self.client = TestClient(app)
        self.repo = FakeUserRepository()
        app.dependency_overrides[get_user_repo] = lambda: self.repo

        self.root = self._seed('root', UserRole.SUPERADMIN)
        self.admin = self._seed('admin', UserRole.ADMIN)
        self.other_admin = self._seed('other-admin', UserRole.ADMIN)
        self.alice = self._seed('alice', UserRole.USER, minutes=2)
        self.bob = self._seed('bob', UserRole.USER, minutes=1, is_active=False,
                              providers=[GOOGLE_PROVIDER], last_name='Doe')
        self.guest = self._seed('guest', UserRole.GUEST)

    def tearDown(self):
        app.dependency_overrides.clear()

    def _seed(self, user_id, role, minutes=0, **overrides) -> User:
        defaults = dict(
            id=user_id,
            email=f'{user_id}@x.com',
            first_name=user_id.capitalize(),
            last_name='Tester',
            display_name=user_id.capitalize(),
            created_at=NOW,
            updated_at=NOW + timedelta(minutes=minutes),
            role=role,
        )
        defaults.update(overrides)
        return self.repo.create(User(**defaults))

    def _auth(self, user: User) -> dict:
        return {"Authorization": f"Bearer {create_access_token(user.to_session())}"}


class TestListUsers(UsersRoutesTestCase):

    def test_admin_sees_users_only(self):
        response = self.client.get("/users", headers=self._auth(self.admin))

        self.assertEqual(response.status_code, 200)
        data = response.json()
        self.assertEqual([u['id'] for u in data['users']], ['alice', 'bob'])
        self.assertEqual(data['total'], 2)
        self.assertFalse(data['has_more'])
        self.assertNotIn('password_hash', data['users'][0])

    def test_superadmin_sees_all_but_superadmins(self):
        response = self.client.get("/users", headers=self._auth(self.root))

        ids = {u['id'] for u in response.json()['users']}
        self.assertEqual(ids, {'admin', 'other-admin', 'alice', 'bob', 'guest'})

    def test_plain_user_gets_same_visibility_as_admin(self):
        response = self.client.get("/users", headers=self._auth(self.alice))
        self.assertEqual([u['id'] for u in response.json()['users']], ['bob'])

    def test_search_last_name(self):
        response = self.client.get("/users", params={"search": "doe"}, headers=self._auth(self.admin))
        self.assertEqual([u['id'] for u in response.json()['users']], ['bob'])

    def test_role_and_status_filters_compose(self):
        self.repo.update('other-admin', {'is_active': False})

        response = self.client.get(
            "/users",
            params=[("roles", "admin"), ("statuses", "inactive")],
            headers=self._auth(self.root),
        )

        self.assertEqual([u['id'] for u in response.json()['users']], ['other-admin'])

    def test_provider_filter(self):
        response = self.client.get(
            "/users", params={"providers": "google"}, headers=self._auth(self.admin),
        )
        self.assertEqual([u['id'] for u in response.json()['users']], ['bob'])

    def test_page_size(self):
        response = self.client.get("/users", params={"page_size": 1}, headers=self._auth(self.admin))
        data = response.json()
        self.assertEqual(len(data['users']), 1)
        self.assertTrue(data['has_more'])

    def test_invalid_status_is_422(self):
        response = self.client.get(
            "/users", params={"statuses": "deleted"}, headers=self._auth(self.admin),
        )
        self.assertEqual(response.status_code, 422)

    def test_unauthenticated_is_401(self):
        self.assertEqual(self.client.get("/users").status_code, 401)


class TestUserStats(UsersRoutesTestCase):

    def test_stats_for_admin(self):
        response = self.client.get("/users/stats", headers=self._auth(self.admin))

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {
            'total': 2, 'active': 1, 'inactive': 1, 'signed_in_today': 0,
        })


class TestCreateUser(UsersRoutesTestCase):

    def _payload(self, **overrides):
        payload = {
            "email": "new@x.com", "first_name": "New", "last_name": "User",
            "password": "Secret123!",
        }
        payload.update(overrides)
        return payload

    def test_admin_creates_user(self):
        response = self.client.post("/users", json=self._payload(), headers=self._auth(self.admin))

        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.json()['role'], 'user')
        self.assertIsNotNone(self.repo.get_by_email('new@x.com'))

    def test_admin_cannot_create_admin(self):
        response = self.client.post(
            "/users", json=self._payload(role="admin"), headers=self._auth(self.admin),
        )
        self.assertEqual(response.status_code, 403)
        self.assertIsNone(self.repo.get_by_email('new@x.com'))

    def test_superadmin_creates_admin(self):
        response = self.client.post(
            "/users", json=self._payload(role="admin"), headers=self._auth(self.root),
        )
        self.assertEqual(response.status_code, 201)
        self.assertEqual(self.repo.get_by_email('new@x.com').role, UserRole.ADMIN)

    def test_plain_user_cannot_create(self):
        response = self.client.post("/users", json=self._payload(), headers=self._auth(self.alice))
        self.assertEqual(response.status_code, 403)

    def test_duplicate_is_409(self):
        response = self.client.post(
            "/users", json=self._payload(email="alice@x.com"), headers=self._auth(self.admin),
        )
        self.assertEqual(response.status_code, 409)


class TestGetUser(UsersRoutesTestCase):

    def test_admin_reads_visible_user(self):
        response = self.client.get("/users/alice", headers=self._auth(self.admin))
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()['email'], 'alice@x.com')

    def test_admin_cannot_read_other_admin(self):
        response = self.client.get("/users/other-admin", headers=self._auth(self.admin))
        self.assertEqual(response.status_code, 403)

    def test_anyone_reads_self(self):
        response = self.client.get("/users/admin", headers=self._auth(self.admin))
        self.assertEqual(response.status_code, 200)

    def test_missing_is_404(self):
        response = self.client.get("/users/ghost", headers=self._auth(self.admin))
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json()['detail'], 'User not found')


class TestUpdateUser(UsersRoutesTestCase):

    def test_self_profile_edit(self):
        response = self.client.patch(
            "/users/alice", json={"display_name": "Al"}, headers=self._auth(self.alice),
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(self.repo.get_by_id('alice').display_name, 'Al')

    def test_self_role_change_is_403(self):
        response = self.client.patch(
            "/users/admin", json={"role": "superadmin"}, headers=self._auth(self.admin),
        )
        self.assertEqual(response.status_code, 403)
        self.assertEqual(self.repo.get_by_id('admin').role, UserRole.ADMIN)

    def test_admin_deactivates_user(self):
        response = self.client.patch(
            "/users/alice", json={"is_active": False}, headers=self._auth(self.admin),
        )
        self.assertEqual(response.status_code, 200)
        self.assertFalse(response.json()['is_active'])

    def test_unset_fields_untouched(self):
        self.client.patch("/users/alice", json={"first_name": "Alicia"}, headers=self._auth(self.alice))
        stored = self.repo.get_by_id('alice')
        self.assertEqual(stored.first_name, 'Alicia')
        self.assertEqual(stored.last_name, 'Tester')

    def test_explicit_null_is_422_and_record_untouched(self):
        for field in ("first_name", "last_name", "display_name", "photo_url"):
            with self.subTest(field=field):
                response = self.client.patch(
                    "/users/alice", json={field: None}, headers=self._auth(self.alice),
                )
                self.assertEqual(response.status_code, 422)

        response = self.client.patch(
            "/users/alice", json={"is_active": None}, headers=self._auth(self.admin),
        )
        self.assertEqual(response.status_code, 422)

        stored = self.repo.get_by_id('alice')
        self.assertEqual(stored.first_name, 'Alice')
        self.assertIs(stored.is_active, True)

        listing = self.client.get("/users", headers=self._auth(self.admin))
        self.assertEqual(listing.status_code, 200)


class TestRoleAndStatus(UsersRoutesTestCase):

    def test_superadmin_promotes(self):
        response = self.client.put(
            "/users/alice/role", json={"role": "admin"}, headers=self._auth(self.root),
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()['role'], 'admin')

    def test_admin_cannot_promote_to_admin(self):
        response = self.client.put(
            "/users/alice/role", json={"role": "admin"}, headers=self._auth(self.admin),
        )
        self.assertEqual(response.status_code, 403)
        self.assertEqual(self.repo.get_by_id('alice').role, UserRole.USER)

    def test_superadmin_cannot_mint_superadmin(self):
        response = self.client.put(
            "/users/admin/role", json={"role": "superadmin"}, headers=self._auth(self.root),
        )
        self.assertEqual(response.status_code, 403)

    def test_unknown_role_is_422(self):
        response = self.client.put(
            "/users/alice/role", json={"role": "owner"}, headers=self._auth(self.root),
        )
        self.assertEqual(response.status_code, 422)

    def test_set_active(self):
        response = self.client.put(
            "/users/bob/active", json={"is_active": True}, headers=self._auth(self.admin),
        )
        self.assertEqual(response.status_code, 200)
        self.assertTrue(self.repo.get_by_id('bob').is_active)

    def test_set_active_outside_scope_is_403(self):
        response = self.client.put(
            "/users/other-admin/active", json={"is_active": False}, headers=self._auth(self.admin),
        )
        self.assertEqual(response.status_code, 403)
        self.assertTrue(self.repo.get_by_id('other-admin').is_active)


class TestDeleteUser(UsersRoutesTestCase):

    def test_soft_delete(self):
        response = self.client.delete("/users/alice", headers=self._auth(self.admin))

        self.assertEqual(response.status_code, 200)
        stored = self.repo.get_by_id('alice')
        self.assertIsNotNone(stored)
        self.assertFalse(stored.is_active)

    def test_cannot_delete_self(self):
        response = self.client.delete("/users/root", headers=self._auth(self.root))
        self.assertEqual(response.status_code, 403)

    def test_missing_is_404(self):
        response = self.client.delete("/users/ghost", headers=self._auth(self.admin))
        self.assertEqual(response.status_code, 404)


if __name__ == '__main__':
    unittest.main()
