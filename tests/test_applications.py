"""
Tests for the application lifecycle and the applied_jobs mirror.
"""

import pytest
from bson import ObjectId

from jobportal.db.mongodb import COLLECTIONS, get_collection
from jobportal.services.application_service import ApplicationService
from tests.conftest import post_job, signed_in, user_doc


def applications():
    return get_collection(COLLECTIONS["applications"])


def apply(client, job_id, **extra):
    return client.post("/api/applications", json=dict({"job_id": job_id}, **extra))


class TestApply:

    def test_apply_writes_both_copies(self, seeker, job):
        response = apply(seeker, job["id"], cover_letter=" Hire me ", resume="https://cv.example.com/ann.pdf")
        assert response.status_code == 201
        application = response.json()["application"]
        assert application["status"] == "Pending"
        assert application["applicant_name"] == "Ann Lee"
        assert application["cover_letter"] == "Hire me"

        record = applications().find_one({"_id": ObjectId(application["id"])})
        assert record["job_seeker_id"] == user_doc("seeker")["_id"]

        mirror = user_doc("seeker")["applied_jobs"]
        assert len(mirror) == 1
        assert mirror[0]["application_id"] == record["_id"]
        assert mirror[0]["job_title"] == "Backend Engineer"
        assert mirror[0]["status"] == "Pending"

        stored_job = get_collection(COLLECTIONS["jobs"]).find_one({"_id": ObjectId(job["id"])})
        assert stored_job["applicants"] == 1

    def test_double_apply_rejected(self, seeker, job):
        assert apply(seeker, job["id"]).status_code == 201
        response = apply(seeker, job["id"])
        assert response.status_code == 400
        assert response.json()["message"] == "You have already applied for this job."
        assert applications().count_documents({}) == 1
        assert len(user_doc("seeker")["applied_jobs"]) == 1

    def test_mirror_alone_blocks_second_apply(self, seeker, job):
        apply(seeker, job["id"])
        applications().delete_many({})
        assert apply(seeker, job["id"]).status_code == 400

    def test_closed_job(self, seeker, employer):
        closed = post_job(employer, status="Closed").json()
        response = apply(seeker, closed["id"])
        assert response.status_code == 400
        assert response.json()["message"] == "This job is no longer accepting applications."

    def test_deadline_passed_closes_job(self, seeker, employer):
        expired = post_job(employer, deadline="2000-01-01").json()
        response = apply(seeker, expired["id"])
        assert response.status_code == 400
        assert response.json()["message"] == "The application deadline for this job has passed."
        stored = get_collection(COLLECTIONS["jobs"]).find_one({"_id": ObjectId(expired["id"])})
        assert stored["status"] == "Closed"

    def test_bad_job_id(self, seeker):
        assert apply(seeker, "bogus").status_code == 400

    def test_missing_job(self, seeker):
        assert apply(seeker, str(ObjectId())).status_code == 404

    def test_name_required(self, seeker, job):
        get_collection(COLLECTIONS["job_seekers"]).update_one({"username": "seeker"}, {"$set": {"last_name": ""}})
        assert apply(seeker, job["id"]).status_code == 400

    def test_employer_cannot_apply(self, employer, job):
        assert apply(employer, job["id"]).status_code == 403

    def test_failed_mirror_write_removes_record(self, job):
        job_doc = get_collection(COLLECTIONS["jobs"]).find_one({"_id": ObjectId(job["id"])})
        ghost = {"_id": ObjectId(), "username": "ghost", "first_name": "G", "last_name": "Host"}

        with pytest.raises(RuntimeError):
            ApplicationService().create(job_doc, ghost, None, None)

        assert applications().count_documents({}) == 0
        assert get_collection(COLLECTIONS["jobs"]).find_one({"_id": job_doc["_id"]})["applicants"] == 0


class TestEmployerReview:

    def test_list_applicants(self, seeker, employer, job):
        seeker.patch("/api/job-seeker/profile", json={"title": "Engineer", "skills": ["Go"]})
        apply(seeker, job["id"])

        response = employer.get("/api/applications", params={"job_id": job["id"]})
        assert response.status_code == 200
        body = response.json()
        assert len(body) == 1
        assert body[0]["applicant_email"] == "seeker@example.com"
        assert body[0]["skills"] == ["Go"]
        assert body[0]["title"] == "Engineer"

    def test_other_employer_cannot_list(self, seeker, other_employer, job):
        apply(seeker, job["id"])
        response = other_employer.get("/api/applications", params={"job_id": job["id"]})
        assert response.status_code == 403

    def test_update_status_and_rating_updates_mirror(self, seeker, employer, job):
        application_id = apply(seeker, job["id"]).json()["application"]["id"]

        response = employer.patch(f"/api/applications/{application_id}", json={"status": "Shortlisted", "rating": 4})
        assert response.status_code == 200
        assert response.json()["application"]["status"] == "Shortlisted"

        record = applications().find_one({"_id": ObjectId(application_id)})
        assert record["status"] == "Shortlisted"
        assert record["rating"] == 4
        mirror = user_doc("seeker")["applied_jobs"][0]
        assert mirror["status"] == "Shortlisted"
        assert mirror["rating"] == 4

    def test_other_employer_cannot_patch(self, seeker, other_employer, job):
        application_id = apply(seeker, job["id"]).json()["application"]["id"]
        response = other_employer.patch(f"/api/applications/{application_id}", json={"status": "Rejected"})
        assert response.status_code == 403
        assert applications().find_one({"_id": ObjectId(application_id)})["status"] == "Pending"

    def test_invalid_status(self, seeker, employer, job):
        application_id = apply(seeker, job["id"]).json()["application"]["id"]
        response = employer.patch(f"/api/applications/{application_id}", json={"status": "Hired"})
        assert response.status_code == 400

    def test_rating_out_of_range(self, seeker, employer, job):
        application_id = apply(seeker, job["id"]).json()["application"]["id"]
        response = employer.patch(f"/api/applications/{application_id}", json={"rating": 6})
        assert response.status_code == 400

    def test_empty_patch(self, seeker, employer, job):
        application_id = apply(seeker, job["id"]).json()["application"]["id"]
        assert employer.patch(f"/api/applications/{application_id}", json={}).status_code == 400

    def test_missing_application(self, employer):
        response = employer.patch(f"/api/applications/{ObjectId()}", json={"status": "Reviewed"})
        assert response.status_code == 404


class TestMyApplications:

    def test_lists_synced_entries(self, seeker, employer, job):
        second_job = post_job(employer, title="Second").json()
        first_id = apply(seeker, job["id"]).json()["application"]["id"]
        apply(seeker, second_job["id"])

        # record changed behind the mirror's back
        applications().update_one({"_id": ObjectId(first_id)}, {"$set": {"status": "Interviewed"}})

        body = seeker.get("/api/my-applications").json()
        assert len(body) == 2
        by_id = {entry["id"]: entry for entry in body}
        assert by_id[first_id]["status"] == "Interviewed"
        assert by_id[first_id]["job_title"] == "Backend Engineer"

    def test_malformed_entries_skipped(self, seeker, job):
        apply(seeker, job["id"])
        get_collection(COLLECTIONS["job_seekers"]).update_one(
            {"username": "seeker"}, {"$push": {"applied_jobs": {"job_id": "broken"}}}
        )
        assert len(seeker.get("/api/my-applications").json()) == 1

    def test_employer_forbidden(self, employer):
        assert employer.get("/api/my-applications").status_code == 403

    def test_withdraw(self, seeker, job):
        application_id = apply(seeker, job["id"]).json()["application"]["id"]

        response = seeker.delete(f"/api/my-applications/{application_id}")
        assert response.status_code == 200
        assert applications().count_documents({}) == 0
        assert user_doc("seeker")["applied_jobs"] == []
        stored = get_collection(COLLECTIONS["jobs"]).find_one({"_id": ObjectId(job["id"])})
        assert stored["applicants"] == 0

        # can apply again afterwards
        assert apply(seeker, job["id"]).status_code == 201

    def test_cannot_withdraw_someone_elses(self, seeker, job, make_client):
        application_id = apply(seeker, job["id"]).json()["application"]["id"]
        other = signed_in(make_client, "job-seeker", "other")
        assert other.delete(f"/api/my-applications/{application_id}").status_code == 403
        assert applications().count_documents({}) == 1

    def test_withdraw_bad_id(self, seeker):
        assert seeker.delete("/api/my-applications/xyz").status_code == 400

    def test_withdraw_missing(self, seeker):
        assert seeker.delete(f"/api/my-applications/{ObjectId()}").status_code == 404


class TestMirrorSync:

    def test_zero_rating_on_record_wins_over_mirror(self, seeker, employer, job):
        application_id = apply(seeker, job["id"]).json()["application"]["id"]
        employer.patch(f"/api/applications/{application_id}", json={"rating": 4})

        # record reset behind the mirror's back
        applications().update_one({"_id": ObjectId(application_id)}, {"$set": {"rating": 0}})

        entry = seeker.get("/api/my-applications").json()[0]
        assert entry["rating"] == 0
        assert user_doc("seeker")["applied_jobs"][0]["rating"] == 4
