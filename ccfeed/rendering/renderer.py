"""Serialization of feed entries to CCTray XML and JSON.

The CCTray document is rendered from a Jinja2 template shipped with the
package; JSON documents are plain lists of camelCase dicts.
"""

import logging
from typing import Any, Dict, List, Sequence

from jinja2 import Environment, PackageLoader, StrictUndefined, TemplateError

from ccfeed.domain.models import JobStats, Project, Resource

logger = logging.getLogger(__name__)

CCTRAY_CONTENT_TYPE = "application/xml; charset=utf-8"


class FeedRenderError(Exception):
    """The feed template could not be rendered."""

    pass


class FeedRenderer:
    """Renders feed entries in the formats the HTTP layer serves.

    The Jinja2 environment (and its template cache) lives as long as the
    renderer, so one instance is shared by the application.
    """

    def __init__(self, template_dir: str = "templates", cctray_template: str = "cctray.xml.j2"):
        self.cctray_template_name = cctray_template
        self.env = Environment(
            loader=PackageLoader("ccfeed.rendering", template_dir),
            autoescape=True,
            undefined=StrictUndefined,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
        )

    def render_cctray(self, projects: Sequence[Project]) -> str:
        """CCTray ``<Projects>`` document, entries in the given order.

        Raises:
            FeedRenderError: If the template fails to render
        """
        try:
            template = self.env.get_template(self.cctray_template_name)
            document = template.render(projects=projects)
        except TemplateError as e:
            logger.error(f"CCTray rendering failed: {e}", exc_info=True)
            raise FeedRenderError(f"CCTray rendering failed: {e}") from e

        logger.debug("Rendered CCTray feed", extra={"project_count": len(projects)})
        return document

    @staticmethod
    def render_stats(stats: Sequence[JobStats]) -> List[Dict[str, Any]]:
        return [entry.to_feed_dict() for entry in stats]

    @staticmethod
    def render_resources(resources: Sequence[Resource]) -> List[Dict[str, Any]]:
        return [resource.to_feed_dict() for resource in resources]
