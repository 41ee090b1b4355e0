"""채용공고 API 테스트"""
from decimal import Decimal


class TestCreateJob:
    """POST /jobs 테스트"""

    def test_create_job_success(self, client, conn, admin_headers, job_row):
        conn.fetchval.return_value = "c1"
        conn.fetchrow.return_value = job_row

        response = client.post(
            "/jobs",
            json={"title": "Job1", "salary": 100, "equity": "0.1", "companyHandle": "c1"},
            headers=admin_headers,
        )

        assert response.status_code == 201
        assert response.json() == {
            "job": {"id": 1, "title": "Job1", "salary": 100, "equity": "0.1", "companyHandle": "c1"}
        }
        sql, *args = conn.fetchrow.call_args.args
        assert "INSERT INTO jobs" in sql
        assert args == ["Job1", 100, Decimal("0.1"), "c1"]

    def test_create_job_unknown_company(self, client, conn, admin_headers):
        response = client.post(
            "/jobs",
            json={"title": "Job1", "companyHandle": "nope"},
            headers=admin_headers,
        )

        assert response.status_code == 400
        assert response.json()["detail"] == "Company nope not found."
        conn.fetchrow.assert_not_called()

    def test_create_job_equity_over_one(self, client, admin_headers):
        response = client.post(
            "/jobs",
            json={"title": "Job1", "equity": 1.5, "companyHandle": "c1"},
            headers=admin_headers,
        )
        assert response.status_code == 422

    def test_create_job_not_admin(self, client, conn, user_headers):
        response = client.post(
            "/jobs",
            json={"title": "Job1", "companyHandle": "c1"},
            headers=user_headers,
        )

        assert response.status_code == 403
        conn.fetchval.assert_not_called()


class TestGetJobs:
    """GET /jobs 테스트"""

    def test_get_jobs_no_filter(self, client, conn, job_row):
        conn.fetch.return_value = [job_row]

        response = client.get("/jobs")

        assert response.status_code == 200
        assert response.json()["jobs"][0]["companyHandle"] == "c1"
        sql, *args = conn.fetch.call_args.args
        assert "WHERE" not in sql
        assert args == []

    def test_get_jobs_with_filters(self, client, conn):
        response = client.get("/jobs?title=dev&minSalary=1000&hasEquity=true")

        assert response.status_code == 200
        sql, *args = conn.fetch.call_args.args
        assert "WHERE title ILIKE $1 AND salary >= $2 AND equity > 0" in sql
        assert args == ["%dev%", 1000]

    def test_get_jobs_has_equity_false(self, client, conn):
        """hasEquity=false는 필터 없음 (지분 0인 공고도 포함)"""
        response = client.get("/jobs?hasEquity=false")

        assert response.status_code == 200
        sql, *args = conn.fetch.call_args.args
        assert "equity > 0" not in sql

    def test_get_jobs_empty_result(self, client, conn):
        response = client.get("/jobs?title=nope")

        assert response.status_code == 200
        assert response.json() == {"jobs": []}

    def test_get_jobs_invalid_query_param(self, client, conn):
        response = client.get("/jobs?companyHandle=c1")

        assert response.status_code == 400
        conn.fetch.assert_not_called()


class TestGetJob:
    """GET /jobs/{job_id} 테스트"""

    def test_get_job_with_company(self, client, conn, job_row, company_row):
        conn.fetchrow.side_effect = [job_row, company_row]

        response = client.get("/jobs/1")

        assert response.status_code == 200
        job = response.json()["job"]
        assert job["id"] == 1
        assert "companyHandle" not in job
        assert job["company"]["handle"] == "c1"
        assert job["company"]["logoUrl"] == "http://c1.img"
        assert conn.fetchrow.call_args.args[1] == "c1"

    def test_get_job_not_found(self, client, conn):
        response = client.get("/jobs/999")

        assert response.status_code == 404
        assert response.json()["detail"] == "No job: 999"

    def test_get_job_invalid_id(self, client):
        response = client.get("/jobs/abc")
        assert response.status_code == 422


class TestUpdateJob:
    """PATCH /jobs/{job_id} 테스트"""

    def test_update_job_success(self, client, conn, admin_headers, job_row):
        conn.fetchrow.return_value = {**job_row, "title": "New", "salary": 500}

        response = client.patch("/jobs/1", json={"salary": 500, "title": "New"}, headers=admin_headers)

        assert response.status_code == 200
        assert response.json()["job"]["title"] == "New"
        sql, *args = conn.fetchrow.call_args.args
        assert 'SET "title"=$1, "salary"=$2' in sql
        assert "WHERE id = $3" in sql
        assert args == ["New", 500, 1]

    def test_update_job_null_salary_and_equity(self, client, conn, admin_headers, job_row):
        conn.fetchrow.return_value = {**job_row, "salary": None, "equity": None}

        response = client.patch("/jobs/1", json={"salary": None, "equity": None}, headers=admin_headers)

        assert response.status_code == 200
        sql, *args = conn.fetchrow.call_args.args
        assert 'SET "salary"=$1, "equity"=$2' in sql
        assert args == [None, None, 1]

    def test_update_job_no_data(self, client, conn, admin_headers):
        response = client.patch("/jobs/1", json={}, headers=admin_headers)

        assert response.status_code == 400
        assert response.json()["detail"] == "No data"
        conn.fetchrow.assert_not_called()

    def test_update_job_company_handle_not_allowed(self, client, admin_headers):
        response = client.patch("/jobs/1", json={"companyHandle": "c2"}, headers=admin_headers)
        assert response.status_code == 422

    def test_update_job_id_not_allowed(self, client, admin_headers):
        response = client.patch("/jobs/1", json={"id": 2}, headers=admin_headers)
        assert response.status_code == 422

    def test_update_job_not_found(self, client, conn, admin_headers):
        response = client.patch("/jobs/999", json={"title": "New"}, headers=admin_headers)

        assert response.status_code == 404
        assert response.json()["detail"] == "No job: 999"

    def test_update_job_not_admin(self, client, conn, user_headers):
        response = client.patch("/jobs/1", json={"title": "New"}, headers=user_headers)
        assert response.status_code == 403


class TestDeleteJob:
    """DELETE /jobs/{job_id} 테스트"""

    def test_delete_job_success(self, client, conn, admin_headers):
        conn.fetchval.return_value = 1

        response = client.delete("/jobs/1", headers=admin_headers)

        assert response.status_code == 200
        assert response.json() == {"deleted": 1}

    def test_delete_job_not_found(self, client, conn, admin_headers):
        response = client.delete("/jobs/999", headers=admin_headers)
        assert response.status_code == 404

    def test_delete_job_unauthorized(self, client):
        response = client.delete("/jobs/1")
        assert response.status_code == 401
