"""
Tests for job posting, listing, deadline auto-close and cascade delete.
"""

from bson import ObjectId

from jobportal.db.mongodb import COLLECTIONS, get_collection
from tests.conftest import post_job, signed_in, user_doc


def jobs():
    return get_collection(COLLECTIONS["jobs"])


class TestCreateJob:

    def test_create_job(self, employer):
        response = post_job(employer)
        assert response.status_code == 201
        body = response.json()
        assert body["status"] == "Active"
        assert body["requirements"] == ["Python", "MongoDB"]
        assert body["applicants"] == 0
        assert body["category"] == "Full-time"
        assert len(body["posted_date"]) == 10
        assert body["employer_id"] == str(user_doc("acme", "employer")["_id"])

    def test_company_defaults(self, employer):
        assert post_job(employer).json()["company"] == "Company Name"

        employer.patch("/api/employer/profile", json={"name": "Acme Corp", "industry": "Rockets", "size": "50-100"})
        body = post_job(employer).json()
        assert body["company"] == "Acme Corp"
        assert body["industry"] == "Rockets"
        assert body["company_size"] == "50-100"

    def test_title_and_description_required(self, employer):
        response = post_job(employer, title="  ")
        assert response.status_code == 400
        assert response.json()["message"] == "Title and description are required."

    def test_invalid_deadline(self, employer):
        response = post_job(employer, deadline="next tuesday")
        assert response.status_code == 400

    def test_job_seeker_cannot_post(self, seeker):
        assert post_job(seeker).status_code == 403

    def test_anonymous_cannot_post(self, client):
        assert post_job(client).status_code == 401


class TestListJobs:

    def test_lists_only_active(self, employer, client):
        first = post_job(employer, title="First").json()
        second = post_job(employer, title="Second").json()
        post_job(employer, title="Draft one", status="Draft")

        titles = [job["title"] for job in client.get("/api/jobs").json()]
        assert "Draft one" not in titles
        assert set(titles) == {first["title"], second["title"]}

    def test_filters(self, employer, client):
        post_job(employer, title="Python Developer", location="Berlin", remote=True)
        post_job(employer, title="Java Developer", location="Paris", type="Contract")

        def titles(**params):
            return [job["title"] for job in client.get("/api/jobs", params=params).json()]

        assert titles(search="python") == ["Python Developer"]
        assert titles(location="paris") == ["Java Developer"]
        assert titles(type="contract") == ["Java Developer"]
        assert titles(remote="true") == ["Python Developer"]

    def test_search_is_literal(self, employer, client):
        post_job(employer, title="C++ Developer")
        assert len(client.get("/api/jobs", params={"search": "c++"}).json()) == 1

    def test_employer_jobs_with_counts(self, employer, other_employer, job, make_client):
        post_job(other_employer, title="Not mine")
        seeker = signed_in(make_client, "job-seeker", "seeker")
        seeker.post("/api/applications", json={"job_id": job["id"]})

        body = employer.get("/api/jobs/employer").json()
        assert [j["title"] for j in body] == ["Backend Engineer"]
        assert body[0]["applicants"] == 1
        assert body[0]["pending_applications"] == 1


class TestDeadline:

    def test_past_deadline_closes_on_read(self, employer, client):
        created = post_job(employer, deadline="2000-01-01").json()
        assert created["status"] == "Active"

        response = client.get(f"/api/jobs/{created['id']}")
        assert response.status_code == 200
        assert response.json()["status"] == "Closed"
        assert jobs().find_one({"_id": ObjectId(created["id"])})["status"] == "Closed"

    def test_listing_closes_expired_jobs(self, employer, client):
        expired = post_job(employer, title="Old", deadline="2000-01-01T12:00:00Z").json()
        post_job(employer, title="Open", deadline="2999-12-31")

        titles = [job["title"] for job in client.get("/api/jobs").json()]
        assert titles == ["Open"]
        assert jobs().find_one({"_id": ObjectId(expired["id"])})["status"] == "Closed"

    def test_employer_listing_closes_expired_jobs(self, employer):
        post_job(employer, deadline="2000-01-01")
        assert employer.get("/api/jobs/employer").json()[0]["status"] == "Closed"

    def test_future_deadline_stays_active(self, employer, client):
        created = post_job(employer, deadline="2999-12-31").json()
        assert client.get(f"/api/jobs/{created['id']}").json()["status"] == "Active"


class TestGetJob:

    def test_bad_id(self, client):
        response = client.get("/api/jobs/not-an-id")
        assert response.status_code == 400
        assert response.json()["message"] == "Invalid job ID format."

    def test_missing_job(self, client):
        assert client.get(f"/api/jobs/{ObjectId()}").status_code == 404


class TestDeleteJob:

    def test_delete_cascades(self, employer, job, make_client):
        first = signed_in(make_client, "job-seeker", "first")
        second = signed_in(make_client, "job-seeker", "second")
        other = post_job(employer, title="Other job").json()
        assert first.post("/api/applications", json={"job_id": job["id"]}).status_code == 201
        assert second.post("/api/applications", json={"job_id": job["id"]}).status_code == 201
        assert first.post("/api/applications", json={"job_id": other["id"]}).status_code == 201

        response = employer.delete(f"/api/jobs/{job['id']}")
        assert response.status_code == 200
        assert response.json()["applications_deleted"] == 2
        assert response.json()["job_seekers_updated"] == 2

        applications = get_collection(COLLECTIONS["applications"])
        assert applications.count_documents({"job_id": ObjectId(job["id"])}) == 0
        assert applications.count_documents({}) == 1
        assert jobs().find_one({"_id": ObjectId(job["id"])}) is None

        assert [entry["job_id"] for entry in user_doc("first")["applied_jobs"]] == [ObjectId(other["id"])]
        assert user_doc("second")["applied_jobs"] == []

    def test_only_owner_can_delete(self, other_employer, job):
        response = other_employer.delete(f"/api/jobs/{job['id']}")
        assert response.status_code == 403
        assert jobs().count_documents({}) == 1

    def test_job_seeker_cannot_delete(self, seeker, job):
        assert seeker.delete(f"/api/jobs/{job['id']}").status_code == 403

    def test_delete_missing_job(self, employer):
        assert employer.delete(f"/api/jobs/{ObjectId()}").status_code == 404
