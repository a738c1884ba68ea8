"""End-to-end tests for the HTTP feeds.

The real Flask app, assembler and Concourse clients are wired together the
way ``ccfeed.main`` does it; only ``requests.Session.request`` is replaced by
an in-memory Concourse that routes on URL. Pipelines answer with artificial
delays so parallel fetches complete out of order.
"""

import json
import threading
import time
import xml.etree.ElementTree as ET
from unittest.mock import Mock, patch

import pytest
import requests

from ccfeed.config.environment import EnvironmentConfig
from ccfeed.config.models import AppConfig
from ccfeed.main import build_assembler
from ccfeed.web import create_app
from tests.helpers import (
    build_empty_job,
    build_job_for,
    build_jobs_for,
    build_pipelines_for,
    build_resource_for,
)

API_URL = "https://ci.example.com"
TOKEN_URL = f"{API_URL}/api/v1/teams/main/auth/token"
PIPELINES_URL = f"{API_URL}/api/v1/pipelines"


def _jobs_url(pipeline, job=None):
    url = f"{API_URL}/api/v1/teams/main/pipelines/{pipeline}/jobs"
    return f"{url}/{job}" if job else url


def _response(status_code=200, payload=None):
    response = Mock(spec=requests.Response)
    response.status_code = status_code
    response.reason = "OK" if status_code < 400 else "Error"
    response.json.return_value = payload
    return response


class FakeConcourse:
    """Routes session requests to canned payloads and records every call."""

    def __init__(self, routes, delays=None, token="some-token"):
        self.routes = routes
        self.delays = delays or {}
        self.token = token
        self.calls = []
        self._lock = threading.Lock()

    def request(self, method, url, headers=None, auth=None, timeout=None, **kwargs):
        with self._lock:
            self.calls.append((method, url))

        if url == TOKEN_URL:
            if auth != ("concourse", "secret"):
                return _response(401)
            return _response(200, {"type": "Bearer", "value": self.token})

        if (headers or {}).get("Authorization") != f"Bearer {self.token}":
            return _response(401)

        time.sleep(self.delays.get(url, 0))
        if url not in self.routes:
            return _response(404)
        route = self.routes[url]
        if isinstance(route, int):
            return _response(route)
        return _response(200, route)


def _two_by_two_routes():
    return {
        PIPELINES_URL: build_pipelines_for(["pipeline1", "pipeline2"]),
        _jobs_url("pipeline1"): build_jobs_for("pipeline1", ["job1", "job2"]),
        _jobs_url("pipeline2"): build_jobs_for("pipeline2", ["job1", "job2"]),
    }


@pytest.fixture
def make_client():
    """Build a Flask test client backed by a FakeConcourse."""
    patches = []

    def _make(concourse, password="secret", max_parallel_fetches=4):
        app_config = AppConfig.model_validate(
            {
                "concourse": {"url": API_URL},
                "advanced": {"max_parallel_fetches": max_parallel_fetches},
            }
        )
        env_config = EnvironmentConfig(concourse_username="concourse", concourse_password=password)
        patcher = patch.object(
            requests.Session,
            "request",
            new=lambda session, *args, **kwargs: concourse.request(*args, **kwargs),
        )
        patcher.start()
        patches.append(patcher)
        app = create_app(build_assembler(app_config, env_config), API_URL)
        app.testing = True
        return app.test_client()

    yield _make

    for patcher in patches:
        patcher.stop()


EXPECTED_ORDER = ["pipeline1#job1", "pipeline1#job2", "pipeline2#job1", "pipeline2#job2"]


@pytest.mark.integration
class TestCCTrayEndpoint:
    def test_two_pipelines_two_jobs(self, make_client):
        concourse = FakeConcourse(
            _two_by_two_routes(), delays={_jobs_url("pipeline1"): 0.05}
        )

        response = make_client(concourse).get("/cc.xml")

        assert response.status_code == 200
        assert response.mimetype == "application/xml"
        root = ET.fromstring(response.data)
        projects = root.findall("Project")
        assert [p.get("name") for p in projects] == EXPECTED_ORDER
        assert projects[0].attrib == {
            "name": "pipeline1#job1",
            "activity": "Sleeping",
            "lastBuildStatus": "Success",
            "lastBuildLabel": "pipeline1",
            "lastBuildTime": "2017-08-11T16:58:49.000Z",
            "webUrl": f"{API_URL}/teams/main/pipelines/pipeline1/jobs/job1/builds/2",
        }

    def test_sequential_fetch_gives_same_order(self, make_client):
        concourse = FakeConcourse(_two_by_two_routes())

        response = make_client(concourse, max_parallel_fetches=1).get("/cc.xml")

        root = ET.fromstring(response.data)
        assert [p.get("name") for p in root.findall("Project")] == EXPECTED_ORDER

    def test_job_without_history_is_omitted(self, make_client):
        routes = {
            PIPELINES_URL: build_pipelines_for(["pipeline1"]),
            _jobs_url("pipeline1"): [build_job_for("pipeline1", "job1"), build_empty_job()],
        }

        response = make_client(FakeConcourse(routes)).get("/cc.xml")

        root = ET.fromstring(response.data)
        assert [p.get("name") for p in root.findall("Project")] == ["pipeline1#job1"]

    def test_every_request_hits_concourse(self, make_client):
        concourse = FakeConcourse(_two_by_two_routes())
        client = make_client(concourse)

        client.get("/cc.xml")
        client.get("/cc.xml")

        token_calls = [call for call in concourse.calls if call[1] == TOKEN_URL]
        assert len(token_calls) == 2
        assert len(concourse.calls) == 8

    def test_auth_failure_is_bad_gateway(self, make_client):
        concourse = FakeConcourse(_two_by_two_routes())

        response = make_client(concourse, password="wrong").get("/cc.xml")

        assert response.status_code == 502
        assert response.get_json()["error"] == "UpstreamAuthError"
        assert concourse.calls == [("GET", TOKEN_URL)]

    def test_failing_pipeline_gives_no_partial_feed(self, make_client):
        routes = _two_by_two_routes()
        routes[_jobs_url("pipeline2")] = 500

        response = make_client(FakeConcourse(routes)).get("/cc.xml")

        assert response.status_code == 502
        assert b"<Projects" not in response.data


@pytest.mark.integration
class TestJobStatsEndpoint:
    def test_two_pipelines_two_jobs(self, make_client):
        concourse = FakeConcourse(
            _two_by_two_routes(), delays={_jobs_url("pipeline1"): 0.05}
        )

        response = make_client(concourse).get("/job-stats")

        assert response.status_code == 200
        stats = json.loads(response.data)
        assert [s["id"] for s in stats] == [
            "pipeline1-job1-id",
            "pipeline1-job2-id",
            "pipeline2-job1-id",
            "pipeline2-job2-id",
        ]
        assert stats[0] == {
            "id": "pipeline1-job1-id",
            "name": "pipeline1#job1",
            "activity": "Sleeping",
            "lastBuildStatus": "Success",
            "lastBuildLabel": "pipeline1",
            "lastBuildTime": "2017-08-11T16:58:49.000Z",
            "webUrl": f"{API_URL}/teams/main/pipelines/pipeline1/jobs/job1/builds/2",
        }

    def test_failed_build_and_running_job(self, make_client):
        job = build_job_for("pipeline1", "job1", status="failed")
        job["next_build"] = {"id": 3, "status": "started"}
        routes = {
            PIPELINES_URL: build_pipelines_for(["pipeline1"]),
            _jobs_url("pipeline1"): [job],
        }

        (entry,) = make_client(FakeConcourse(routes)).get("/job-stats").get_json()

        assert entry["activity"] == "Building"
        assert entry["lastBuildStatus"] == "Failure"

    def test_no_pipelines(self, make_client):
        routes = {PIPELINES_URL: []}

        response = make_client(FakeConcourse(routes)).get("/job-stats")

        assert response.status_code == 200
        assert response.get_json() == []


@pytest.mark.integration
def test_job_resources_endpoint(make_client):
    job = build_job_for(
        "pipeline1",
        "job1",
        resources=[
            build_resource_for("repo", "git", {"ref": "6c1b3e0"}),
            build_resource_for("version", "semver", {"number": "0.4.2"}),
        ],
    )
    routes = {_jobs_url("pipeline1", "job1"): job}

    response = make_client(FakeConcourse(routes)).get("/pipelines/pipeline1/jobs/job1/resources")

    assert response.status_code == 200
    assert response.get_json() == [
        {"name": "repo", "type": "git", "version": {"ref": "6c1b3e0"}},
        {"name": "version", "type": "semver", "version": {"number": "0.4.2"}},
    ]


@pytest.mark.integration
def test_health_makes_no_upstream_calls(make_client):
    concourse = FakeConcourse({})

    response = make_client(concourse).get("/health")

    assert response.status_code == 200
    assert concourse.calls == []
