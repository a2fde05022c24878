"""Donation request routes — creation, queries, confirmation, staff triage, deletion.

Invariants:
    - New requests are pending with an empty donorInfo whatever the body says
    - Confirmation moves pending|inprogress → inprogress and appends one donor
    - Staff may only close requests (done/canceled) along legal transitions
    - Generic edits never change donationStatus or donorInfo
    - Search only ever returns pending requests
"""

from uuid import uuid4

from tests.services.fakes import auth, request_payload


# --- Create / read --------------------------------------------------------------

async def test_create_starts_pending_with_empty_donor_info(client, create_request):
    request_id = await create_request(donationStatus="done", donorInfo=[{"x": 1}])

    res = await client.get(f"/donation-requests/{request_id}")
    body = res.json()
    assert res.status_code == 200
    assert body["donationStatus"] == "pending"
    assert body["donorInfo"] == []
    assert body["requesterEmail"] == "rahim@example.com"
    assert body["bloodGroup"] == "B+"


async def test_create_lower_cases_requester_email(client, create_request):
    request_id = await create_request(requesterEmail="Rahim@Example.COM")
    res = await client.get(f"/donation-requests/{request_id}")
    assert res.json()["requesterEmail"] == "rahim@example.com"


async def test_create_missing_fields_is_400(client):
    payload = request_payload()
    del payload["hospitalName"]
    res = await client.post("/donation-requests", json=payload)
    assert res.status_code == 400
    assert res.json()["message"] == "Missing or invalid fields"


async def test_blocked_requester_cannot_create(client, make_user):
    await make_user("rahim@example.com", status="blocked")
    res = await client.post("/donation-requests", json=request_payload())
    assert res.status_code == 403
    assert res.json()["error"]["code"] == "USER_BLOCKED"


async def test_get_missing_request_is_404(client):
    res = await client.get(f"/donation-requests/{uuid4()}")
    assert res.status_code == 404


async def test_recent_returns_three_newest(client, create_request):
    ids = [await create_request(recipientName=f"R{i}") for i in range(4)]
    await create_request(requesterEmail="someone-else@example.com")

    res = await client.get(
        "/donation-requests/recent", params={"email": "Rahim@Example.com"},
    )
    assert [r["id"] for r in res.json()] == list(reversed(ids))[:3]


async def test_list_pages_partition_one_sequence(client, create_request):
    for i in range(25):
        await create_request(recipientName=f"Recipient {i}")

    page_two = await client.get(
        "/donation-requests", params={"page": 2, "limit": 10},
    )
    first_twenty = await client.get(
        "/donation-requests", params={"page": 1, "limit": 20},
    )
    assert page_two.json()["total"] == 25
    assert [r["id"] for r in page_two.json()["requests"]] == [
        r["id"] for r in first_twenty.json()["requests"][10:20]
    ]


async def test_list_filters_by_requester_and_status(client, create_request, donor):
    mine = await create_request()
    await create_request(requesterEmail="other@example.com")
    await client.patch(
        f"/donation-requests/{mine}/confirm-donation", json={},
        headers=auth(donor.email),
    )

    res = await client.get(
        "/donation-requests",
        params={"email": "rahim@example.com", "status": "inprogress"},
    )
    assert res.json()["total"] == 1
    assert res.json()["requests"][0]["id"] == mine


async def test_search_returns_pending_only(
    client, create_request, volunteer,
):
    match = await create_request(bloodGroup="B-")
    closed = await create_request(bloodGroup="B-")
    await create_request(bloodGroup="A+")
    await create_request(bloodGroup="B-", recipientDistrict="Sylhet")
    await client.patch(
        f"/donation-requests/{closed}/status", json={"status": "canceled"},
        headers=auth(volunteer.email),
    )

    res = await client.get(
        "/search-donation-requests",
        params={"blood_group": "B-", "district": "Dhaka"},
    )
    assert [r["id"] for r in res.json()] == [match]
    assert all(r["donationStatus"] == "pending" for r in res.json())


async def test_search_accepts_unencoded_plus(client, create_request):
    """"B+" in a raw query string arrives as "B "."""
    request_id = await create_request(bloodGroup="B+")
    res = await client.get("/search-donation-requests?blood_group=B+")
    assert [r["id"] for r in res.json()] == [request_id]


# --- Confirmation -------------------------------------------------------------------

async def test_confirm_moves_to_inprogress_with_one_donor(
    client, create_request, donor,
):
    request_id = await create_request()

    res = await client.patch(
        f"/donation-requests/{request_id}/confirm-donation",
        json={"donorName": "Donor One", "donorEmail": "Donor@Example.com"},
        headers=auth(donor.email),
    )
    assert res.status_code == 200
    assert res.json() == {"matchedCount": 1, "modifiedCount": 1}

    body = (await client.get(f"/donation-requests/{request_id}")).json()
    assert body["donationStatus"] == "inprogress"
    assert len(body["donorInfo"]) == 1
    assert body["donorInfo"][0]["donorName"] == "Donor One"
    assert body["donorInfo"][0]["donorEmail"] == "donor@example.com"
    assert "confirmedAt" in body["donorInfo"][0]


async def test_second_confirmation_appends_in_order(
    client, create_request, donor, make_user,
):
    second = await make_user("second@example.com", name="Second")
    request_id = await create_request()

    for user in (donor, second):
        res = await client.patch(
            f"/donation-requests/{request_id}/confirm-donation", json={},
            headers=auth(user.email),
        )
        assert res.status_code == 200

    body = (await client.get(f"/donation-requests/{request_id}")).json()
    assert body["donationStatus"] == "inprogress"
    assert [d["donorEmail"] for d in body["donorInfo"]] == [
        donor.email, second.email,
    ]
    assert body["donorInfo"][1]["donorName"] == "Second"


async def test_confirm_missing_request_is_404(client, donor):
    res = await client.patch(
        f"/donation-requests/{uuid4()}/confirm-donation", json={},
        headers=auth(donor.email),
    )
    assert res.status_code == 404


async def test_confirm_closed_request_is_409(
    client, create_request, donor, admin,
):
    request_id = await create_request()
    await client.patch(
        f"/donation-requests/{request_id}/status", json={"status": "canceled"},
        headers=auth(admin.email),
    )

    res = await client.patch(
        f"/donation-requests/{request_id}/confirm-donation", json={},
        headers=auth(donor.email),
    )
    assert res.status_code == 409
    assert res.json()["error"]["code"] == "INVALID_TRANSITION"
    assert "already canceled" in res.json()["message"]

    body = (await client.get(f"/donation-requests/{request_id}")).json()
    assert body["donorInfo"] == []


async def test_confirm_requires_token(client, create_request):
    request_id = await create_request()
    res = await client.patch(
        f"/donation-requests/{request_id}/confirm-donation", json={},
    )
    assert res.status_code == 401


async def test_unregistered_identity_cannot_confirm(client, create_request):
    request_id = await create_request()
    res = await client.patch(
        f"/donation-requests/{request_id}/confirm-donation", json={},
        headers=auth("ghost@example.com"),
    )
    assert res.status_code == 403
    assert res.json()["error"]["code"] == "USER_NOT_REGISTERED"


async def test_cannot_confirm_on_behalf_of_someone_else(
    client, create_request, donor,
):
    request_id = await create_request()
    res = await client.patch(
        f"/donation-requests/{request_id}/confirm-donation",
        json={"donorEmail": "victim@example.com"},
        headers=auth(donor.email),
    )
    assert res.status_code == 403
    assert res.json()["error"]["code"] == "DONOR_MISMATCH"


async def test_blocked_donor_cannot_confirm(client, create_request, make_user):
    blocked = await make_user("blocked@example.com", status="blocked")
    request_id = await create_request()
    res = await client.patch(
        f"/donation-requests/{request_id}/confirm-donation", json={},
        headers=auth(blocked.email),
    )
    assert res.status_code == 403
    assert res.json()["error"]["code"] == "USER_BLOCKED"


# --- Staff status changes -----------------------------------------------------------

async def test_staff_completes_inprogress_request(
    client, create_request, donor, volunteer,
):
    request_id = await create_request()
    await client.patch(
        f"/donation-requests/{request_id}/confirm-donation", json={},
        headers=auth(donor.email),
    )

    res = await client.patch(
        f"/donation-requests/{request_id}/status", json={"status": "done"},
        headers=auth(volunteer.email),
    )
    assert res.status_code == 200
    body = (await client.get(f"/donation-requests/{request_id}")).json()
    assert body["donationStatus"] == "done"
    assert len(body["donorInfo"]) == 1


async def test_pending_to_done_is_409(client, create_request, admin):
    request_id = await create_request()
    res = await client.patch(
        f"/donation-requests/{request_id}/status", json={"status": "done"},
        headers=auth(admin.email),
    )
    assert res.status_code == 409
    body = (await client.get(f"/donation-requests/{request_id}")).json()
    assert body["donationStatus"] == "pending"


async def test_done_request_cannot_be_canceled(
    client, create_request, donor, admin,
):
    request_id = await create_request()
    await client.patch(
        f"/donation-requests/{request_id}/confirm-donation", json={},
        headers=auth(donor.email),
    )
    await client.patch(
        f"/donation-requests/{request_id}/status", json={"status": "done"},
        headers=auth(admin.email),
    )

    res = await client.patch(
        f"/donation-requests/{request_id}/status", json={"status": "canceled"},
        headers=auth(admin.email),
    )
    assert res.status_code == 409
    assert "already done" in res.json()["message"]


async def test_staff_cannot_set_inprogress_directly(client, create_request, admin):
    request_id = await create_request()
    res = await client.patch(
        f"/donation-requests/{request_id}/status", json={"status": "inprogress"},
        headers=auth(admin.email),
    )
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "INVALID_INPUT"


async def test_donor_cannot_change_status(client, create_request, donor):
    request_id = await create_request()
    res = await client.patch(
        f"/donation-requests/{request_id}/status", json={"status": "canceled"},
        headers=auth(donor.email),
    )
    assert res.status_code == 403
    body = (await client.get(f"/donation-requests/{request_id}")).json()
    assert body["donationStatus"] == "pending"


async def test_status_change_on_missing_request_is_404(client, admin):
    res = await client.patch(
        f"/donation-requests/{uuid4()}/status", json={"status": "canceled"},
        headers=auth(admin.email),
    )
    assert res.status_code == 404


# --- Generic edit -------------------------------------------------------------------

async def test_admin_edits_descriptive_fields(client, create_request, admin):
    request_id = await create_request()
    res = await client.patch(
        f"/donation-requests/{request_id}",
        json={"hospitalName": "Dhaka Medical College", "donationTime": "14:00"},
        headers=auth(admin.email),
    )
    assert res.json() == {"matchedCount": 1, "modifiedCount": 1}
    body = (await client.get(f"/donation-requests/{request_id}")).json()
    assert body["hospitalName"] == "Dhaka Medical College"
    assert body["donationTime"] == "14:00"


async def test_edit_rejects_status_and_donor_info(client, create_request, admin):
    request_id = await create_request()
    for payload in (
        {"donationStatus": "done"},
        {"donorInfo": []},
        {"hospitalName": "X", "donation_status": "canceled"},
    ):
        res = await client.patch(
            f"/donation-requests/{request_id}", json=payload,
            headers=auth(admin.email),
        )
        assert res.status_code == 400, payload

    body = (await client.get(f"/donation-requests/{request_id}")).json()
    assert body["donationStatus"] == "pending"
    assert body["hospitalName"] == "Enam Medical College"


async def test_edit_rejects_unknown_fields(client, create_request, admin):
    request_id = await create_request()
    res = await client.patch(
        f"/donation-requests/{request_id}", json={"priority": "high"},
        headers=auth(admin.email),
    )
    assert res.status_code == 400


async def test_volunteer_cannot_edit(client, create_request, volunteer):
    request_id = await create_request()
    res = await client.patch(
        f"/donation-requests/{request_id}", json={"hospitalName": "X"},
        headers=auth(volunteer.email),
    )
    assert res.status_code == 403


# --- Delete -----------------------------------------------------------------------

async def test_requester_deletes_own_request(client, create_request, make_user):
    owner = await make_user("rahim@example.com")
    request_id = await create_request()

    res = await client.delete(
        f"/donation-requests/{request_id}", headers=auth(owner.email),
    )
    assert res.json() == {"deletedCount": 1}
    assert (await client.get(f"/donation-requests/{request_id}")).status_code == 404


async def test_other_user_cannot_delete(client, create_request, volunteer):
    request_id = await create_request()
    res = await client.delete(
        f"/donation-requests/{request_id}", headers=auth(volunteer.email),
    )
    assert res.status_code == 403
    assert res.json()["error"]["code"] == "NOT_REQUEST_OWNER"
    assert (await client.get(f"/donation-requests/{request_id}")).status_code == 200


async def test_admin_deletes_request_with_donors(
    client, create_request, admin, donor,
):
    request_id = await create_request()
    await client.patch(
        f"/donation-requests/{request_id}/confirm-donation", json={},
        headers=auth(donor.email),
    )
    res = await client.delete(
        f"/donation-requests/{request_id}", headers=auth(admin.email),
    )
    assert res.status_code == 200
    assert (await client.get(f"/donation-requests/{request_id}")).status_code == 404


async def test_delete_missing_request_is_404(client, admin):
    res = await client.delete(
        f"/donation-requests/{uuid4()}", headers=auth(admin.email),
    )
    assert res.status_code == 404


# --- Staff listing ----------------------------------------------------------------

async def test_staff_listing_requires_staff(client, create_request, donor, volunteer):
    await create_request()
    assert (await client.get(
        "/admin/donation-requests", headers=auth(donor.email),
    )).status_code == 403

    res = await client.get("/admin/donation-requests", headers=auth(volunteer.email))
    assert res.status_code == 200
    assert res.json()["total"] == 1
