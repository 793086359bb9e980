from app.db.models.job import Job
from app.schemas.job import JobStatus

# Statuses in which a job must carry an assigned worker
ASSIGNED = {JobStatus.IN_PROGRESS, JobStatus.AWAITING_PAYMENT, JobStatus.PAID, JobStatus.COMPLETED}


def _assert_assignment_invariant(job):
    assert (job.assigned_worker_id is not None) == (JobStatus(job.status) in ASSIGNED)


def test_employer_creates_open_job(client, act_as, make_user):
    employer = make_user("employer")
    act_as(employer)

    resp = client.post("/api/jobs", json={
        "title": "Paint two rooms",
        "description": "Interior emulsion, materials provided",
        "workType": "painter",
        "location": "Koramangala, Bengaluru",
        "wageType": "daily",
        "wage": 800,
        "headcount": 2,
        "skills": ["painting"],
    })
    assert resp.status_code == 201, resp.text
    data = resp.json()
    assert data["status"] == "open"
    assert data["employerId"] == employer.id
    assert data["assignedWorkerId"] is None
    assert data["headcount"] == 2
    assert data["startedAt"] is None


def test_worker_cannot_post_job(client, act_as, make_user):
    act_as(make_user("worker"))
    resp = client.post("/api/jobs", json={
        "title": "x", "description": "y", "workType": "mason", "location": "Pune", "wage": 500,
    })
    assert resp.status_code == 403
    body = resp.json()
    assert body["status"] == "error"
    assert body["message"] == "Access denied. Required role: employer"


def test_anonymous_cannot_post_job(client):
    resp = client.post("/api/jobs", json={
        "title": "x", "description": "y", "workType": "mason", "location": "Pune", "wage": 500,
    })
    assert resp.status_code == 401
    assert resp.json()["status"] == "error"


def test_invalid_job_body_returns_field_errors(client, act_as, make_user):
    act_as(make_user("employer"))
    resp = client.post("/api/jobs", json={"title": "x", "description": "y", "workType": "mason", "location": "Pune", "wage": -5})
    assert resp.status_code == 400
    body = resp.json()
    assert body["message"] == "Validation failed"
    assert any(err["path"] == "wage" for err in body["errors"])


def test_get_missing_job_returns_404(client):
    resp = client.get("/api/jobs/does-not-exist")
    assert resp.status_code == 404
    assert resp.json()["message"] == "Job not found"


def test_complete_open_job_is_rejected(client, act_as, make_user, make_job, fetch):
    employer = make_user("employer")
    job = make_job(employer)
    act_as(employer)

    resp = client.post(f"/api/jobs/{job.id}/complete")
    assert resp.status_code == 400
    assert resp.json()["message"] == "Job must be in 'in_progress' status"
    assert fetch(Job, job.id).status == "open"


def test_full_job_lifecycle_through_assignment(client, act_as, make_user, make_job, fetch):
    employer = make_user("employer")
    worker = make_user("worker")
    job = make_job(employer)
    act_as(employer)

    resp = client.post(f"/api/jobs/{job.id}/assign", json={"workerId": worker.id})
    assert resp.status_code == 200, resp.text
    data = resp.json()
    assert data["status"] == "in_progress"
    assert data["assignedWorkerId"] == worker.id
    assert data["startedAt"] is not None
    _assert_assignment_invariant(fetch(Job, job.id))

    # Second assignment finds the job no longer open
    resp = client.post(f"/api/jobs/{job.id}/assign", json={"workerId": worker.id})
    assert resp.status_code == 400
    assert "open" in resp.json()["message"]

    resp = client.post(f"/api/jobs/{job.id}/complete")
    assert resp.status_code == 200, resp.text
    data = resp.json()
    assert data["status"] == "awaiting_payment"
    assert data["completedAt"] is not None
    _assert_assignment_invariant(fetch(Job, job.id))

    # Completing twice fails and leaves the job where it was
    resp = client.post(f"/api/jobs/{job.id}/complete")
    assert resp.status_code == 400
    assert "in_progress" in resp.json()["message"]
    assert fetch(Job, job.id).status == "awaiting_payment"


def test_assign_requires_a_worker_account(client, act_as, make_user, make_job, fetch):
    employer = make_user("employer")
    other_employer = make_user("employer")
    job = make_job(employer)
    act_as(employer)

    resp = client.post(f"/api/jobs/{job.id}/assign", json={"workerId": other_employer.id})
    assert resp.status_code == 400
    resp = client.post(f"/api/jobs/{job.id}/assign", json={"workerId": "missing"})
    assert resp.status_code == 404
    assert fetch(Job, job.id).status == "open"


def test_only_owner_can_change_job(client, act_as, make_user, make_job, fetch):
    owner = make_user("employer")
    intruder = make_user("employer")
    worker = make_user("worker")
    job = make_job(owner, status="in_progress", assigned_worker=worker)
    act_as(intruder)

    resp = client.post(f"/api/jobs/{job.id}/complete")
    assert resp.status_code == 403
    assert fetch(Job, job.id).status == "in_progress"


def test_status_patch_cancels_open_job(client, act_as, make_user, make_job):
    employer = make_user("employer")
    job = make_job(employer)
    act_as(employer)

    resp = client.patch(f"/api/jobs/{job.id}/status", json={"status": "cancelled"})
    assert resp.status_code == 200, resp.text
    assert resp.json()["status"] == "cancelled"

    # Cancelled is terminal
    resp = client.patch(f"/api/jobs/{job.id}/status", json={"status": "cancelled"})
    assert resp.status_code == 400


def test_in_progress_job_cannot_be_cancelled(client, act_as, make_user, make_job, fetch):
    employer = make_user("employer")
    worker = make_user("worker")
    job = make_job(employer, status="in_progress", assigned_worker=worker)
    act_as(employer)

    resp = client.patch(f"/api/jobs/{job.id}/status", json={"status": "cancelled"})
    assert resp.status_code == 400
    assert resp.json()["message"] == "Job must be in 'open' status"
    assert fetch(Job, job.id).status == "in_progress"


def test_status_patch_cannot_skip_to_paid(client, act_as, make_user, make_job, fetch):
    employer = make_user("employer")
    job = make_job(employer)
    act_as(employer)

    resp = client.patch(f"/api/jobs/{job.id}/status", json={"status": "paid"})
    assert resp.status_code == 400
    resp = client.patch(f"/api/jobs/{job.id}/status", json={"status": "in_progress"})
    assert resp.status_code == 400
    resp = client.patch(f"/api/jobs/{job.id}/status", json={"status": "awaiting_payment"})
    assert resp.status_code == 400
    assert fetch(Job, job.id).status == "open"


def test_status_patch_settles_job_outside_gateway(client, act_as, make_user, make_job):
    employer = make_user("employer")
    worker = make_user("worker")
    job = make_job(employer, status="awaiting_payment", assigned_worker=worker)
    act_as(employer)

    resp = client.patch(f"/api/jobs/{job.id}/status", json={"status": "completed"})
    assert resp.status_code == 200, resp.text
    assert resp.json()["status"] == "completed"
    assert resp.json()["assignedWorkerId"] == worker.id


def test_status_patch_rejects_unknown_status(client, act_as, make_user, make_job):
    employer = make_user("employer")
    job = make_job(employer)
    act_as(employer)

    resp = client.patch(f"/api/jobs/{job.id}/status", json={"status": "archived"})
    assert resp.status_code == 400
    assert resp.json()["errors"][0]["path"] == "status"


def test_list_jobs_defaults_to_open_and_filters(client, make_user, make_job):
    employer = make_user("employer")
    worker = make_user("worker")
    mason_job = make_job(employer, work_type="mason", location="Andheri East, Mumbai")
    make_job(employer, work_type="plumber", location="Powai, Mumbai")
    make_job(employer, work_type="mason", location="Andheri West, Mumbai", status="in_progress", assigned_worker=worker)

    resp = client.get("/api/jobs")
    assert resp.status_code == 200
    assert {job["status"] for job in resp.json()} == {"open"}
    assert len(resp.json()) == 2

    resp = client.get("/api/jobs", params={"workType": "mason", "location": "andheri"})
    assert [job["id"] for job in resp.json()] == [mason_job.id]

    resp = client.get("/api/jobs", params={"status": "in_progress"})
    assert len(resp.json()) == 1
    assert resp.json()[0]["assignedWorkerId"] == worker.id
