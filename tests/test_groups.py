"""Group membership lifecycle."""
from wellnest.db import db
from wellnest.models import GroupMembership, MembershipStatus


def _create_group(client, headers, **overrides) -> dict:
    payload = {"name": "Morning Runners", "category": "running"}
    payload.update(overrides)
    response = client.post("/api/groups", json=payload, headers=headers)
    assert response.status_code == 201, response.get_json()
    return response.get_json()


def test_creator_becomes_owner(client, alice, auth_headers) -> None:
    group = _create_group(client, auth_headers(alice))
    assert group["member_count"] == 1

    members = client.get(f"/api/groups/{group['id']}/members", headers=auth_headers(alice)).get_json()
    assert [member["role"] for member in members["members"]] == ["owner"]


def test_join_public_group(client, alice, bob, auth_headers) -> None:
    group = _create_group(client, auth_headers(alice))
    url = f"/api/groups/{group['id']}/join"

    joined = client.post(url, json={}, headers=auth_headers(bob))
    again = client.post(url, json={}, headers=auth_headers(bob))

    assert joined.status_code == 201
    assert joined.get_json()["status"] == "active"
    assert again.status_code == 409
    refreshed = client.get(f"/api/groups/{group['id']}", headers=auth_headers(bob)).get_json()
    assert refreshed["member_count"] == 2


def test_private_group_requires_approval(client, alice, bob, auth_headers) -> None:
    group = _create_group(client, auth_headers(alice), type="private")

    pending = client.post(f"/api/groups/{group['id']}/join", json={}, headers=auth_headers(bob))
    assert pending.get_json()["status"] == "pending"
    again = client.post(f"/api/groups/{group['id']}/join", json={}, headers=auth_headers(bob))
    assert again.status_code == 409

    forbidden = client.post(f"/api/groups/{group['id']}/members/{bob.id}/approve", headers=auth_headers(bob))
    assert forbidden.status_code == 403

    approved = client.post(f"/api/groups/{group['id']}/members/{bob.id}/approve", headers=auth_headers(alice))
    assert approved.status_code == 200
    assert approved.get_json()["status"] == "active"
    refreshed = client.get(f"/api/groups/{group['id']}", headers=auth_headers(alice)).get_json()
    assert refreshed["member_count"] == 2


def test_full_group_rejects_join(client, alice, bob, auth_headers) -> None:
    group = _create_group(client, auth_headers(alice), max_members=1)
    response = client.post(f"/api/groups/{group['id']}/join", json={}, headers=auth_headers(bob))
    assert response.status_code == 409


def test_leave_and_rejoin(client, alice, bob, auth_headers) -> None:
    group = _create_group(client, auth_headers(alice))
    base = f"/api/groups/{group['id']}"
    client.post(f"{base}/join", json={}, headers=auth_headers(bob))

    assert client.post(f"{base}/leave", headers=auth_headers(bob)).status_code == 204
    assert client.post(f"{base}/leave", headers=auth_headers(bob)).status_code == 404
    assert client.post(f"{base}/join", json={}, headers=auth_headers(bob)).status_code == 201

    assert GroupMembership.query.filter_by(user_id=bob.id).count() == 1


def test_owner_cannot_leave(client, alice, auth_headers) -> None:
    group = _create_group(client, auth_headers(alice))
    response = client.post(f"/api/groups/{group['id']}/leave", headers=auth_headers(alice))
    assert response.status_code == 403


def test_banned_user_cannot_rejoin(client, alice, bob, auth_headers) -> None:
    group = _create_group(client, auth_headers(alice))
    client.post(f"/api/groups/{group['id']}/join", json={}, headers=auth_headers(bob))
    membership = GroupMembership.query.filter_by(user_id=bob.id).one()
    membership.status = MembershipStatus.BANNED
    db.session.commit()

    response = client.post(f"/api/groups/{group['id']}/join", json={}, headers=auth_headers(bob))
    assert response.status_code == 403


def test_owner_role_cannot_be_granted(client, alice, bob, auth_headers) -> None:
    group = _create_group(client, auth_headers(alice))
    client.post(f"/api/groups/{group['id']}/join", json={}, headers=auth_headers(bob))
    url = f"/api/groups/{group['id']}/members/{bob.id}"

    promoted = client.patch(url, json={"role": "moderator"}, headers=auth_headers(alice))
    crowned = client.patch(url, json={"role": "owner"}, headers=auth_headers(alice))

    assert promoted.get_json()["role"] == "moderator"
    assert crowned.status_code == 403


def test_deleted_group_is_hidden(client, alice, bob, auth_headers) -> None:
    group = _create_group(client, auth_headers(alice))
    assert client.delete(f"/api/groups/{group['id']}", headers=auth_headers(bob)).status_code == 403
    assert client.delete(f"/api/groups/{group['id']}", headers=auth_headers(alice)).status_code == 204

    assert client.get(f"/api/groups/{group['id']}", headers=auth_headers(alice)).status_code == 404
    assert client.get("/api/groups", headers=auth_headers(alice)).get_json()["total"] == 0
