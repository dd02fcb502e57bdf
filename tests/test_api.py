from conftest import register


def _league(client, headers, season_id, name="Tribal Council"):
    r = client.post("/api/leagues", json={"name": name, "season_id": season_id}, headers=headers)
    assert r.status_code == 201, r.text
    return r.json()


def _join(client, headers, code, display_name=None):
    body = {"invite_code": code}
    if display_name:
        body["display_name"] = display_name
    return client.post("/api/leagues/join", json=body, headers=headers)


def _pick(client, headers, league_id, contestant_id, pick_type, slot_index=None):
    body = {"contestant_id": contestant_id, "pick_type": pick_type}
    if slot_index is not None:
        body["slot_index"] = slot_index
    return client.post(f"/api/leagues/{league_id}/rosters/picks", json=body, headers=headers)


def _record(client, headers, season_id, contestant_id, week, activity_type):
    r = client.post(
        f"/api/seasons/{season_id}/activity",
        json={"contestant_id": contestant_id, "week_number": week, "activity_type": activity_type},
        headers=headers,
    )
    assert r.status_code == 201, r.text
    return r.json()


def test_health(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json()["status"] == "healthy"


def test_register_login_and_me(client):
    user_id, headers = register(client, username="jeffprobst")
    r = client.post("/api/auth/login", data={"username": "jeffprobst", "password": "Password001!!"})
    assert r.status_code == 200
    assert r.json()["user_id"] == user_id

    r = client.post("/api/auth/login/json", json={"username": "jeffprobst", "password": "wrong-password"})
    assert r.status_code == 401

    r = client.get("/api/auth/me", headers=headers)
    assert r.status_code == 200
    assert r.json()["username"] == "jeffprobst"
    assert r.json()["is_admin"] is False


def test_duplicate_registration_conflicts(client):
    register(client, username="dupe_user")
    r = client.post(
        "/api/auth/register",
        json={"email": "other@example.com", "username": "dupe_user", "password": "Password001!!"},
    )
    assert r.status_code == 409


def test_bad_token_is_rejected(client):
    r = client.get("/api/auth/me", headers={"Authorization": "Bearer not-a-token"})
    assert r.status_code == 401


def test_only_admins_manage_seasons(client):
    _, headers = register(client)
    r = client.post("/api/seasons", json={"number": 9999, "name": "Nope"}, headers=headers)
    assert r.status_code == 403


def test_season_status_transitions(client, admin, season):
    _, headers = admin
    season_id, _ = season
    r = client.patch(f"/api/seasons/{season_id}/status", json={"status": "completed"}, headers=headers)
    assert r.status_code == 400
    r = client.patch(f"/api/seasons/{season_id}/status", json={"status": "active"}, headers=headers)
    assert r.status_code == 200
    assert r.json()["status"] == "active"


def test_create_and_join_league(client, season):
    season_id, _ = season
    owner_id, owner = register(client)
    league = _league(client, owner, season_id)
    assert len(league["invite_code"]) == 6

    guest_id, guest = register(client)
    r = _join(client, guest, league["invite_code"].lower(), display_name="Guest")
    assert r.status_code == 200
    assert r.json()["id"] == league["id"]

    assert _join(client, guest, league["invite_code"]).status_code == 409
    assert _join(client, guest, "ZZZZZZZZ").status_code == 404

    r = client.get(f"/api/leagues/{league['id']}/members", headers=owner)
    members = r.json()
    assert [m["user_id"] for m in members] == [owner_id, guest_id]
    assert [m["draft_order"] for m in members] == [1, 2]
    assert members[1]["display_name"] == "Guest"

    r = client.get("/api/leagues", headers=guest)
    summary = r.json()[0]
    assert summary["member_count"] == 2
    assert summary["rank"] == 2


def test_non_member_cannot_see_league(client, season):
    season_id, _ = season
    _, owner = register(client)
    league = _league(client, owner, season_id)
    _, stranger = register(client)

    assert client.get(f"/api/leagues/{league['id']}/standings", headers=stranger).status_code == 403
    assert client.get(f"/api/leagues/{league['id']}/rosters/me", headers=stranger).status_code == 403
    assert client.get("/api/leagues/999999", headers=stranger).status_code == 404


def test_draft_order_is_creator_only(client, season):
    season_id, _ = season
    owner_id, owner = register(client)
    league = _league(client, owner, season_id)
    guest_id, guest = register(client)
    _join(client, guest, league["invite_code"])

    url = f"/api/leagues/{league['id']}/draft-order"
    assert client.put(url, json={"user_ids": [guest_id, owner_id]}, headers=guest).status_code == 403
    assert client.put(url, json={"user_ids": [guest_id]}, headers=owner).status_code == 400

    r = client.put(url, json={"user_ids": [guest_id, owner_id]}, headers=owner)
    assert r.status_code == 200
    assert [m["user_id"] for m in r.json()] == [guest_id, owner_id]


def test_empty_roster(client, season):
    season_id, _ = season
    _, headers = register(client)
    league = _league(client, headers, season_id)

    r = client.get(f"/api/leagues/{league['id']}/rosters/me", headers=headers)
    assert r.status_code == 200
    roster = r.json()
    assert len(roster["slots"]) == 4
    assert all(s["contestant"] is None for s in roster["slots"])
    assert roster["total_points"] == 0
    assert roster["next_boot_week"] == 1


def test_pick_rules(client, admin, season):
    season_id, cast = season
    _, headers = register(client)
    league = _league(client, headers, season_id)
    lid = league["id"]

    assert _pick(client, headers, lid, cast["Teeny"], "final3").status_code == 201
    # already on the roster
    assert _pick(client, headers, lid, cast["Teeny"], "boot").status_code == 409
    assert _pick(client, headers, lid, cast["Genevieve"], "final3").status_code == 201
    assert _pick(client, headers, lid, cast["Rachel"], "final3").status_code == 201
    # all three final3 slots taken
    assert _pick(client, headers, lid, cast["Sam"], "final3").status_code == 400
    assert _pick(client, headers, lid, 999999, "boot").status_code == 404

    r = _pick(client, headers, lid, cast["Sam"], "final3", slot_index=0)
    assert r.status_code == 201
    names = [s["contestant"]["name"] if s["contestant"] else None for s in r.json()["slots"]]
    assert names == ["Sam", "Genevieve", "Rachel", None]

    _, admin_headers = admin
    _record(client, admin_headers, season_id, cast["Teeny"], 1, "eliminated")
    r = _pick(client, headers, lid, cast["Teeny"], "boot")
    assert r.status_code == 400


def test_points_flow_into_roster_standings_and_activity(client, admin, season):
    _, admin_headers = admin
    season_id, cast = season

    a_id, a = register(client)
    b_id, b = register(client)
    league = _league(client, a, season_id)
    lid = league["id"]
    _join(client, b, league["invite_code"], display_name="B")

    assert _pick(client, a, lid, cast["Teeny"], "final3").status_code == 201
    assert _pick(client, a, lid, cast["Genevieve"], "final3").status_code == 201
    r = _pick(client, b, lid, cast["Teeny"], "boot")
    assert r.status_code == 201
    assert r.json()["slots"][3]["week_number"] == 1

    _record(client, admin_headers, season_id, cast["Genevieve"], 1, "individual_immunity")
    _record(client, admin_headers, season_id, cast["Teeny"], 1, "eliminated")

    r = client.get(f"/api/seasons/{season_id}/contestants/{cast['Teeny']}", headers=a)
    assert r.json()["status"] == "eliminated"
    assert r.json()["eliminated_week"] == 1

    r = client.get(f"/api/leagues/{lid}/rosters/me", headers=a)
    roster = r.json()
    assert roster["total_points"] == 10
    assert roster["current_week"] == 1
    assert roster["next_boot_week"] == 2
    assert [s["points"] for s in roster["slots"]] == [0, 10, 0, 0]

    r = client.get(f"/api/leagues/{lid}/rosters/{b_id}", headers=a)
    assert r.json()["total_points"] == 15
    assert r.json()["slots"][3]["points"] == 15

    r = client.get(f"/api/leagues/{lid}/standings", headers=a)
    standings = r.json()
    assert [(s["user_id"], s["rank"], s["points"]) for s in standings["standings"]] == [
        (b_id, 1, 15),
        (a_id, 2, 10),
    ]
    assert [s["is_current_user"] for s in standings["standings"]] == [False, True]
    assert [s["weekly_points"] for s in standings["standings"]] == [15, 10]
    assert standings["stats"] == {"highest_score": 15, "average_score": 13, "total_members": 2}

    r = client.get(f"/api/leagues/{lid}/activity/latest", headers=b)
    week = r.json()
    assert week["week_number"] == 1
    assert [(u["user_id"], u["points"]) for u in week["users"]] == [(b_id, 15), (a_id, 10)]

    r = client.get(f"/api/leagues/{lid}/rosters/{a_id}/activity", headers=b)
    assert [u["user_id"] for w in r.json() for u in w["users"]] == [a_id]


def test_replaced_pick_keeps_points_already_earned(client, admin, season):
    _, admin_headers = admin
    season_id, cast = season
    _, headers = register(client)
    lid = _league(client, headers, season_id)["id"]

    _pick(client, headers, lid, cast["Rachel"], "final3")
    _record(client, admin_headers, season_id, cast["Rachel"], 1, "immunity")

    r = _pick(client, headers, lid, cast["Sam"], "final3", slot_index=0)
    assert r.status_code == 201
    assert r.json()["slots"][0]["contestant"]["name"] == "Sam"
    assert r.json()["total_points"] == 10

    # Rachel's later immunity no longer counts, Sam's does
    _record(client, admin_headers, season_id, cast["Rachel"], 2, "immunity")
    _record(client, admin_headers, season_id, cast["Sam"], 2, "tribal_immunity")
    r = client.get(f"/api/leagues/{lid}/rosters/me", headers=headers)
    assert r.json()["total_points"] == 15


def test_remove_pick(client, season):
    season_id, cast = season
    _, headers = register(client)
    lid = _league(client, headers, season_id)["id"]

    r = _pick(client, headers, lid, cast["Sam"], "boot")
    pick_id = r.json()["slots"][3]["pick_id"]

    assert client.delete(f"/api/leagues/{lid}/rosters/picks/{pick_id}", headers=headers).status_code == 204
    assert client.delete(f"/api/leagues/{lid}/rosters/picks/{pick_id}", headers=headers).status_code == 404

    r = client.get(f"/api/leagues/{lid}/rosters/me", headers=headers)
    assert r.json()["slots"][3]["contestant"] is None


def test_jury_contestant_cannot_be_picked(client, admin, season):
    _, admin_headers = admin
    season_id, cast = season
    _, headers = register(client)
    lid = _league(client, headers, season_id)["id"]

    _record(client, admin_headers, season_id, cast["Teeny"], 8, "eliminated")
    _record(client, admin_headers, season_id, cast["Teeny"], 8, "made_jury")

    r = client.get(f"/api/seasons/{season_id}/contestants/{cast['Teeny']}", headers=headers)
    assert r.json()["status"] == "jury"

    assert _pick(client, headers, lid, cast["Teeny"], "boot").status_code == 400
    assert _pick(client, headers, lid, cast["Teeny"], "final3").status_code == 400


def test_pick_into_empty_slot_keeps_other_slots_in_place(client, season):
    season_id, cast = season
    _, headers = register(client)
    lid = _league(client, headers, season_id)["id"]

    _pick(client, headers, lid, cast["Teeny"], "final3")
    _pick(client, headers, lid, cast["Genevieve"], "final3")
    r = _pick(client, headers, lid, cast["Rachel"], "final3")
    first_pick_id = r.json()["slots"][0]["pick_id"]

    r = client.delete(f"/api/leagues/{lid}/rosters/picks/{first_pick_id}", headers=headers)
    assert r.status_code == 204

    r = _pick(client, headers, lid, cast["Sam"], "final3", slot_index=2)
    assert r.status_code == 201
    names = [s["contestant"]["name"] if s["contestant"] else None for s in r.json()["slots"][:3]]
    assert names == ["Genevieve", "Rachel", "Sam"]
