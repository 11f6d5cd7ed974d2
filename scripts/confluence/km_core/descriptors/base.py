"""Shared base service descriptor.

Every service plugin exposes the same contract to the host. Concrete
descriptors subclass :class:`ServiceDescriptor` and call ``super()`` for the
generic helpers and for whatever they do not render themselves.
"""

from __future__ import annotations

from km_core.formatting import escape
from km_core.models import Configuration, ParameterSelector, Subscription
from km_core.view import ViewContext

LABELS = {
    "service:km:confluence": "Confluence",
    "service:km:confluence:space": "Space",
    "service:km:help": "Help",
    "name": "Name",
}

ICON_CLASSES = {
    "home": "fas fa-home",
    "help": "fas fa-question-circle",
}


def label_for(key: str) -> str:
    return LABELS.get(key, key)


class ServiceDescriptor:
    node_id = "service"

    # Generic helpers

    def register_typed_select(self, configuration: Configuration, parameter: str, endpoint: str) -> None:
        configuration.selectors[parameter] = ParameterSelector(
            parameter=parameter,
            endpoint=endpoint,
            node=configuration.node.id,
        )

    def render_key(self, subscription: Subscription, parameter: str | None = None) -> str:
        if parameter is None:
            return ""
        return escape(subscription.parameters.get(parameter, ""))

    def render_service_link(
        self,
        icon: str,
        href: str,
        tooltip_key: str | None = None,
        text: str | None = None,
        attributes: str = "",
    ) -> str:
        tooltip = f' data-toggle="tooltip" title="{escape(label_for(tooltip_key))}"' if tooltip_key else ""
        icon_class = ICON_CLASSES.get(icon, f"fas fa-{icon}")
        return (
            f'<a href="{escape(href)}"{tooltip}{attributes}>'
            f'<i class="{icon_class}"></i>{escape(text) if text else ""}</a>'
        )

    def render_service_help_link(self, parameters: dict[str, str], help_key: str) -> str:
        href = parameters.get(help_key)
        if not href:
            return ""
        return self.render_service_link("help", href, help_key, attributes=' target="_blank" rel="noopener"')

    def to_icon(self, node_id: str, suffix: str = "") -> str:
        parts = node_id.split(":")
        tool = parts[-1]
        path = "/".join(parts[1:])
        size = f"-{suffix}" if suffix else ""
        return (
            f'<img src="main/plugin/{escape(path)}/img/{escape(tool)}{size}.png" '
            f'alt="{escape(label_for(node_id))}" title="{escape(label_for(node_id))}" class="tool-icon">'
        )

    def generate_carousel(self, subscription: Subscription, slides: list[tuple[str, str | None]]) -> str:
        shown = [(key, value) for key, value in slides if value]
        if not shown:
            return ""
        if len(shown) == 1:
            return shown[0][1]
        items = "".join(
            f'<div class="item{" active" if index == 0 else ""}" data-toggle="tooltip" '
            f'title="{escape(label_for(key))}">{value}</div>'
            for index, (key, value) in enumerate(shown)
        )
        return f'<div class="carousel slide" data-ride="carousel"><div class="carousel-inner">{items}</div></div>'

    # Host contract

    def configure_subscription_parameters(self, configuration: Configuration) -> None:
        return None

    def render_details_key(self, subscription: Subscription) -> str:
        return self.render_key(subscription)

    def render_features(self, subscription: Subscription) -> str:
        return ""

    def render_details_features(self, subscription: Subscription) -> str:
        return ""

    async def render_global(self, view: ViewContext, configuration: Configuration) -> None:
        return None
