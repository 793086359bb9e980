import pytest

from app.core.security import Principal
from app.db.models.job import Job
from app.db.models.job_application import JobApplication
from app.repositories.job import JobRepository
from app.repositories.job_application import JobApplicationRepository
from app.repositories.user import UserRepository
from app.schemas.application import ApplicationStatus
from app.services.application_services import ApplicationService
from app.services.exceptions import InvalidApplicationTransitionError, JobAlreadyAssignedError


def _service(session, auto_reject=False):
    return ApplicationService(
        application_repo=JobApplicationRepository(session),
        job_repo=JobRepository(session),
        user_repo=UserRepository(session),
        auto_reject_competing=auto_reject,
    )


def _principal(user):
    return Principal(id=user.id, role=user.role, username=user.username)


def test_worker_applies_and_employer_accepts(client, act_as, make_user, make_job, fetch):
    employer = make_user("employer")
    worker = make_user("worker")
    job = make_job(employer, wage=800, wage_type="daily", headcount=1)

    act_as(worker)
    resp = client.post("/api/applications", json={"jobId": job.id, "workerId": worker.id, "message": "I have 5 years experience"})
    assert resp.status_code == 201, resp.text
    application = resp.json()
    assert application["status"] == "pending"
    assert application["workerId"] == worker.id

    act_as(employer)
    resp = client.patch(f"/api/applications/{application['id']}/status", json={"status": "accepted"})
    assert resp.status_code == 200, resp.text
    assert resp.json()["status"] == "accepted"

    resp = client.get(f"/api/jobs/{job.id}")
    data = resp.json()
    assert data["status"] == "in_progress"
    assert data["assignedWorkerId"] == worker.id
    assert data["startedAt"] is not None


def test_second_accept_on_same_job_conflicts(client, act_as, make_user, make_job, make_application, fetch):
    employer = make_user("employer")
    first_worker = make_user("worker")
    second_worker = make_user("worker")
    job = make_job(employer)
    first = make_application(job, first_worker)
    second = make_application(job, second_worker)
    act_as(employer)

    resp = client.patch(f"/api/applications/{first.id}/status", json={"status": "accepted"})
    assert resp.status_code == 200, resp.text

    resp = client.patch(f"/api/applications/{second.id}/status", json={"status": "accepted"})
    assert resp.status_code == 409
    assert "already be assigned" in resp.json()["message"]

    assert fetch(Job, job.id).assigned_worker_id == first_worker.id
    assert fetch(JobApplication, second.id).status == "pending"


def test_duplicate_application_conflicts(client, act_as, make_user, make_job):
    employer = make_user("employer")
    worker = make_user("worker")
    job = make_job(employer)
    act_as(worker)

    body = {"jobId": job.id, "workerId": worker.id}
    assert client.post("/api/applications", json=body).status_code == 201
    resp = client.post("/api/applications", json=body)
    assert resp.status_code == 409
    assert resp.json()["errorCode"] == "DUPLICATE_APPLICATION"


def test_worker_can_reapply_after_withdrawing(client, act_as, make_user, make_job, make_application):
    employer = make_user("employer")
    worker = make_user("worker")
    job = make_job(employer)
    make_application(job, worker, status="withdrawn")
    act_as(worker)

    resp = client.post("/api/applications", json={"jobId": job.id, "workerId": worker.id})
    assert resp.status_code == 201


def test_worker_cannot_apply_for_someone_else(client, act_as, make_user, make_job):
    employer = make_user("employer")
    worker = make_user("worker")
    other = make_user("worker")
    job = make_job(employer)
    act_as(worker)

    resp = client.post("/api/applications", json={"jobId": job.id, "workerId": other.id})
    assert resp.status_code == 403


def test_employer_cannot_apply(client, act_as, make_user, make_job):
    employer = make_user("employer")
    job = make_job(employer)
    act_as(employer)

    resp = client.post("/api/applications", json={"jobId": job.id, "workerId": employer.id})
    assert resp.status_code == 403


def test_cannot_apply_to_closed_job(client, act_as, make_user, make_job):
    employer = make_user("employer")
    worker = make_user("worker")
    job = make_job(employer, status="cancelled")
    act_as(worker)

    resp = client.post("/api/applications", json={"jobId": job.id, "workerId": worker.id})
    assert resp.status_code == 400
    assert resp.json()["message"] == "Job must be in 'open' status"

    resp = client.post("/api/applications", json={"jobId": "missing", "workerId": worker.id})
    assert resp.status_code == 404


def test_reject_and_withdraw_leave_job_untouched(client, act_as, make_user, make_job, make_application, fetch):
    employer = make_user("employer")
    worker_a = make_user("worker")
    worker_b = make_user("worker")
    job = make_job(employer)
    application_a = make_application(job, worker_a)
    application_b = make_application(job, worker_b)

    act_as(employer)
    resp = client.patch(f"/api/applications/{application_a.id}/status", json={"status": "rejected"})
    assert resp.status_code == 200
    assert resp.json()["status"] == "rejected"

    act_as(worker_b)
    resp = client.patch(f"/api/applications/{application_b.id}/status", json={"status": "withdrawn"})
    assert resp.status_code == 200
    assert resp.json()["status"] == "withdrawn"

    job_row = fetch(Job, job.id)
    assert job_row.status == "open"
    assert job_row.assigned_worker_id is None

    # Terminal: a rejected application cannot be accepted later
    act_as(employer)
    resp = client.patch(f"/api/applications/{application_a.id}/status", json={"status": "accepted"})
    assert resp.status_code == 400
    assert fetch(Job, job.id).status == "open"


def test_only_applicant_can_withdraw(client, act_as, make_user, make_job, make_application):
    employer = make_user("employer")
    applicant = make_user("worker")
    other = make_user("worker")
    job = make_job(employer)
    application = make_application(job, applicant)

    act_as(other)
    resp = client.patch(f"/api/applications/{application.id}/status", json={"status": "withdrawn"})
    assert resp.status_code == 403

    act_as(applicant)
    resp = client.patch(f"/api/applications/{application.id}/status", json={"status": "accepted"})
    assert resp.status_code == 403


def test_status_update_validation_and_missing_application(client, act_as, make_user):
    act_as(make_user("employer"))

    resp = client.patch("/api/applications/missing/status", json={"status": "accepted"})
    assert resp.status_code == 404
    assert resp.json()["message"] == "Application not found"

    resp = client.patch("/api/applications/missing/status", json={"status": "pending"})
    assert resp.status_code == 400
    assert resp.json()["message"] == "Validation failed"


def test_application_listings(client, act_as, make_user, make_job, make_application):
    employer = make_user("employer")
    worker = make_user("worker", location="Thane")
    job = make_job(employer)
    make_application(job, worker, message="Available from Monday")

    act_as(employer)
    resp = client.get(f"/api/jobs/{job.id}/applications")
    assert resp.status_code == 200
    [entry] = resp.json()
    assert entry["worker"]["username"] == worker.username
    assert entry["worker"]["location"] == "Thane"
    assert entry["job"]["id"] == job.id
    assert "hashedPassword" not in entry["worker"]

    act_as(worker)
    resp = client.get(f"/api/jobs/{job.id}/applications")
    assert resp.status_code == 403

    resp = client.get(f"/api/workers/{worker.id}/applications")
    assert resp.status_code == 200
    assert [a["jobId"] for a in resp.json()] == [job.id]


def test_other_employer_cannot_list_applications(client, act_as, make_user, make_job):
    owner = make_user("employer")
    job = make_job(owner)
    act_as(make_user("employer"))

    resp = client.get(f"/api/jobs/{job.id}/applications")
    assert resp.status_code == 403


def test_concurrent_accepts_have_exactly_one_winner(session_factory, make_user, make_job, make_application, fetch):
    employer = make_user("employer")
    worker_a = make_user("worker")
    worker_b = make_user("worker")
    job = make_job(employer)
    application_a = make_application(job, worker_a)
    application_b = make_application(job, worker_b)
    actor = _principal(employer)

    session_a = session_factory()
    session_b = session_factory()
    try:
        service_a = _service(session_a)
        service_b = _service(session_b)

        # Request B has already loaded the job as open before A commits
        stale_job = JobRepository(session_b).get_by_id(job.id)
        assert stale_job.status == "open"

        service_a.update_status(application_a.id, ApplicationStatus.ACCEPTED, actor, session_a)

        with pytest.raises(JobAlreadyAssignedError):
            service_b.update_status(application_b.id, ApplicationStatus.ACCEPTED, actor, session_b)
    finally:
        session_a.close()
        session_b.close()

    job_row = fetch(Job, job.id)
    assert job_row.status == "in_progress"
    assert job_row.assigned_worker_id == worker_a.id
    assert fetch(JobApplication, application_a.id).status == "accepted"
    assert fetch(JobApplication, application_b.id).status == "pending"


def test_failed_accept_rolls_back_job_assignment(session_factory, make_user, make_job, make_application, fetch):
    employer = make_user("employer")
    worker = make_user("worker")
    job = make_job(employer)
    application = make_application(job, worker, status="withdrawn")

    session = session_factory()
    try:
        with pytest.raises(InvalidApplicationTransitionError):
            _service(session).update_status(application.id, ApplicationStatus.ACCEPTED, _principal(employer), session)
    finally:
        session.close()

    job_row = fetch(Job, job.id)
    assert job_row.status == "open"
    assert job_row.assigned_worker_id is None
    assert job_row.started_at is None


@pytest.mark.parametrize("auto_reject, expected_other_status", [(True, "rejected"), (False, "pending")])
def test_competing_applications_policy(session_factory, make_user, make_job, make_application, fetch, auto_reject, expected_other_status):
    employer = make_user("employer")
    winner = make_user("worker")
    loser = make_user("worker")
    withdrawn = make_user("worker")
    job = make_job(employer)
    accepted = make_application(job, winner)
    competing = make_application(job, loser)
    already_withdrawn = make_application(job, withdrawn, status="withdrawn")

    session = session_factory()
    try:
        _service(session, auto_reject=auto_reject).update_status(
            accepted.id, ApplicationStatus.ACCEPTED, _principal(employer), session
        )
    finally:
        session.close()

    assert fetch(JobApplication, accepted.id).status == "accepted"
    assert fetch(JobApplication, competing.id).status == expected_other_status
    assert fetch(JobApplication, already_withdrawn.id).status == "withdrawn"
