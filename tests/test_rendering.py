"""Tests for CCTray XML and JSON rendering."""

import xml.etree.ElementTree as ET

import pytest

from ccfeed.domain.models import Activity, BuildStatus, JobStats, Project, Resource
from ccfeed.rendering import FeedRenderer, FeedRenderError


def _project(name="pipeline1#job1", **overrides):
    fields = {
        "name": name,
        "activity": Activity.SLEEPING,
        "last_build_status": BuildStatus.SUCCESS,
        "last_build_label": "pipeline1",
        "last_build_time": "2017-08-11T16:58:49.000Z",
        "web_url": "https://ci.example.com/teams/main/pipelines/pipeline1/jobs/job1/builds/2",
    }
    fields.update(overrides)
    return Project(**fields)


@pytest.fixture
def renderer():
    return FeedRenderer()


class TestRenderCCTray:
    def test_renders_project_attributes(self, renderer):
        document = renderer.render_cctray([_project()])

        root = ET.fromstring(document.encode("utf-8"))
        assert root.tag == "Projects"
        (project,) = root.findall("Project")
        assert project.attrib == {
            "name": "pipeline1#job1",
            "activity": "Sleeping",
            "lastBuildStatus": "Success",
            "lastBuildLabel": "pipeline1",
            "lastBuildTime": "2017-08-11T16:58:49.000Z",
            "webUrl": "https://ci.example.com/teams/main/pipelines/pipeline1/jobs/job1/builds/2",
        }

    def test_has_xml_declaration(self, renderer):
        assert renderer.render_cctray([]).startswith('<?xml version="1.0" encoding="UTF-8"?>')

    def test_preserves_order(self, renderer):
        names = ["pipeline1#job1", "pipeline1#job2", "pipeline2#job1", "pipeline2#job2"]

        document = renderer.render_cctray([_project(name) for name in names])

        root = ET.fromstring(document.encode("utf-8"))
        assert [p.get("name") for p in root.findall("Project")] == names

    def test_empty_feed(self, renderer):
        root = ET.fromstring(renderer.render_cctray([]).encode("utf-8"))

        assert root.tag == "Projects"
        assert list(root) == []

    def test_escapes_attribute_values(self, renderer):
        document = renderer.render_cctray([_project(name='a&b<"c">')])

        root = ET.fromstring(document.encode("utf-8"))
        assert root.find("Project").get("name") == 'a&b<"c">'

    def test_missing_values_render_empty(self, renderer):
        document = renderer.render_cctray(
            [_project(last_build_time=None, last_build_label=None, activity=Activity.BUILDING)]
        )

        project = ET.fromstring(document.encode("utf-8")).find("Project")
        assert project.get("lastBuildTime") == ""
        assert project.get("lastBuildLabel") == ""
        assert project.get("activity") == "Building"

    def test_missing_template_raises_render_error(self):
        renderer = FeedRenderer(cctray_template="missing.xml.j2")

        with pytest.raises(FeedRenderError):
            renderer.render_cctray([])


class TestRenderJson:
    def test_render_stats(self, renderer):
        stats = JobStats(id="pipeline1-job1-id", **_project().model_dump())

        assert renderer.render_stats([stats]) == [
            {
                "id": "pipeline1-job1-id",
                "name": "pipeline1#job1",
                "activity": "Sleeping",
                "lastBuildStatus": "Success",
                "lastBuildLabel": "pipeline1",
                "lastBuildTime": "2017-08-11T16:58:49.000Z",
                "webUrl": "https://ci.example.com/teams/main/pipelines/pipeline1/jobs/job1/builds/2",
            }
        ]

    def test_render_resources(self, renderer):
        resources = [Resource(name="repo", type="git", version={"ref": "abc"})]

        assert renderer.render_resources(resources) == [
            {"name": "repo", "type": "git", "version": {"ref": "abc"}}
        ]

    def test_render_empty(self, renderer):
        assert renderer.render_stats([]) == []
