from app.db.models.message import Message


def _send(client, sender, receiver, content, job=None):
    body = {"senderId": sender.id, "receiverId": receiver.id, "content": content}
    if job is not None:
        body["jobId"] = job.id
    return client.post("/api/messages", json=body)


def test_conversation_is_chronological_in_both_directions(client, act_as, make_user, make_job):
    employer = make_user("employer")
    worker = make_user("worker")
    bystander = make_user("worker")
    job = make_job(employer)

    act_as(employer)
    resp = _send(client, employer, worker, "Can you start tomorrow?", job=job)
    assert resp.status_code == 201, resp.text
    assert resp.json()["isRead"] is False
    assert resp.json()["jobId"] == job.id

    act_as(worker)
    assert _send(client, worker, employer, "Yes, 9am works").status_code == 201
    assert _send(client, worker, bystander, "unrelated").status_code == 201

    resp = client.get(f"/api/messages/{employer.id}/{worker.id}")
    assert resp.status_code == 200
    assert [m["content"] for m in resp.json()] == ["Can you start tomorrow?", "Yes, 9am works"]

    # Argument order does not matter
    resp = client.get(f"/api/messages/{worker.id}/{employer.id}")
    assert [m["content"] for m in resp.json()] == ["Can you start tomorrow?", "Yes, 9am works"]


def test_outsider_cannot_read_conversation(client, act_as, make_user):
    employer = make_user("employer")
    worker = make_user("worker")
    act_as(make_user("worker"))

    resp = client.get(f"/api/messages/{employer.id}/{worker.id}")
    assert resp.status_code == 403


def test_admin_can_read_any_conversation(client, act_as, make_user):
    employer = make_user("employer")
    worker = make_user("worker")
    act_as(employer)
    _send(client, employer, worker, "hello")

    act_as(make_user("admin"))
    resp = client.get(f"/api/messages/{employer.id}/{worker.id}")
    assert resp.status_code == 200
    assert len(resp.json()) == 1


def test_send_rules(client, act_as, make_user):
    employer = make_user("employer")
    worker = make_user("worker")
    act_as(worker)

    # Impersonating the sender
    assert _send(client, employer, worker, "hi").status_code == 403

    resp = _send(client, worker, worker, "note to self")
    assert resp.status_code == 400
    assert resp.json()["errorCode"] == "VALIDATION_ERROR"

    resp = client.post("/api/messages", json={"senderId": worker.id, "receiverId": "missing", "content": "hi"})
    assert resp.status_code == 404

    resp = client.post("/api/messages", json={"senderId": worker.id, "receiverId": employer.id, "jobId": "missing", "content": "hi"})
    assert resp.status_code == 404

    resp = client.post("/api/messages", json={"senderId": worker.id, "receiverId": employer.id, "content": ""})
    assert resp.status_code == 400
    assert resp.json()["errors"][0]["path"] == "content"


def test_mark_read_is_receiver_only_and_idempotent(client, act_as, make_user, fetch):
    employer = make_user("employer")
    worker = make_user("worker")
    act_as(employer)
    message_id = _send(client, employer, worker, "Payment sent").json()["id"]

    # The sender cannot mark their own message read
    resp = client.patch(f"/api/messages/{message_id}/read")
    assert resp.status_code == 403
    assert fetch(Message, message_id).is_read is False

    act_as(worker)
    for _ in range(2):
        resp = client.patch(f"/api/messages/{message_id}/read")
        assert resp.status_code == 200
        assert resp.json() == {"success": True}
    assert fetch(Message, message_id).is_read is True


def test_mark_read_touches_only_that_message(client, act_as, make_user, fetch):
    employer = make_user("employer")
    worker = make_user("worker")
    act_as(employer)
    first = _send(client, employer, worker, "Site address sent").json()["id"]
    second = _send(client, employer, worker, "Bring your own tools").json()["id"]

    act_as(worker)
    resp = client.patch(f"/api/messages/{first}/read")
    assert resp.json() == {"success": True}
    assert fetch(Message, first).is_read is True
    assert fetch(Message, second).is_read is False


def test_mark_read_missing_message(client, act_as, make_user):
    act_as(make_user("worker"))
    resp = client.patch("/api/messages/missing/read")
    assert resp.status_code == 404
    assert resp.json()["message"] == "Message not found"


def test_messages_require_session(client, make_user):
    worker = make_user("worker")
    employer = make_user("employer")
    resp = client.get(f"/api/messages/{worker.id}/{employer.id}")
    assert resp.status_code == 401
